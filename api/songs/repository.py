"""
Song catalog persistence (raw SQL).

Schema comes from the dbmate migration:
- songs(id bigserial, group_name, title, text, link, release_date date,
        created_at, updated_at, UNIQUE (group_name, title))

`release_date` travels as a canonical YYYY-MM-DD string above this module and
as a `datetime.date` in SQL parameters.
"""

from __future__ import annotations

from datetime import date
from typing import Any

import asyncpg

from core import db

from .errors import AlreadyExists, PersistFailed
from .schemas import Pagination, Song, SongFilters

SONG_COLUMNS = "id, group_name, title, text, link, release_date"

# Errors that mean "the store failed", as opposed to programming errors.
_DB_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


def _like_pattern(value: str) -> str:
    """
    Substring pattern for ILIKE with the LIKE wildcards in `value` escaped.
    """
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _row_to_song(row: dict[str, Any]) -> Song:
    release_date = row["release_date"]
    if isinstance(release_date, date):
        release_date = release_date.isoformat()
    return Song(
        id=int(row["id"]),
        group=str(row["group_name"]),
        title=str(row["title"]),
        text=str(row["text"] or ""),
        link=str(row["link"] or ""),
        release_date=str(release_date),
    )


def build_list_query(filters: SongFilters, pagination: Pagination) -> tuple[str, list[Any]]:
    """
    Build the filtered/paginated SELECT and its positional args.

    Only non-empty filter fields become predicates.
    """
    where: list[str] = []
    args: list[Any] = []

    if filters.group:
        args.append(_like_pattern(filters.group))
        where.append(f"group_name ILIKE ${len(args)}")
    if filters.title:
        args.append(_like_pattern(filters.title))
        where.append(f"title ILIKE ${len(args)}")
    if filters.release_date:
        args.append(date.fromisoformat(filters.release_date))
        where.append(f"release_date = ${len(args)}")

    sql = f"SELECT {SONG_COLUMNS} FROM songs"
    if where:
        sql += " WHERE " + " AND ".join(where)

    args.extend([pagination.limit, pagination.offset])
    sql += f" ORDER BY id ASC LIMIT ${len(args) - 1} OFFSET ${len(args)}"
    return sql, args


async def list_songs(filters: SongFilters, pagination: Pagination) -> list[Song]:
    sql, args = build_list_query(filters, pagination)
    try:
        rows = await db.fetch_all(sql, *args)
    except _DB_ERRORS as exc:
        raise PersistFailed(f"Failed to list songs: {exc}") from exc
    return [_row_to_song(row) for row in rows]


async def get_song_by_identity(group: str, title: str) -> Song | None:
    try:
        row = await db.fetch_one(
            f"""
            SELECT {SONG_COLUMNS}
            FROM songs
            WHERE group_name = $1
              AND title = $2
            LIMIT 1
            """,
            group,
            title,
        )
    except _DB_ERRORS as exc:
        raise PersistFailed(f"Failed to fetch song {group!r} - {title!r}: {exc}") from exc
    return _row_to_song(row) if row is not None else None


async def get_song_by_id(song_id: int) -> Song | None:
    try:
        row = await db.fetch_one(
            f"""
            SELECT {SONG_COLUMNS}
            FROM songs
            WHERE id = $1
            """,
            song_id,
        )
    except _DB_ERRORS as exc:
        raise PersistFailed(f"Failed to fetch song id={song_id}: {exc}") from exc
    return _row_to_song(row) if row is not None else None


async def insert_song(song: Song) -> int:
    """
    Insert a song and return its id.
    """
    try:
        row = await db.fetch_one(
            """
            INSERT INTO songs (group_name, title, text, link, release_date)
            VALUES ($1, $2, $3, $4, $5)
            RETURNING id
            """,
            song.group,
            song.title,
            song.text,
            song.link,
            date.fromisoformat(song.release_date),
        )
    except asyncpg.UniqueViolationError as exc:
        raise AlreadyExists(f"Song already exists: {song.group!r} - {song.title!r}") from exc
    except _DB_ERRORS as exc:
        raise PersistFailed(f"Failed to insert song: {exc}") from exc

    if row is None or "id" not in row:
        raise PersistFailed("Failed to insert song.")
    return int(row["id"])


async def update_song(song: Song) -> bool:
    """
    Full replace of every field except id.
    Returns False when no row has `song.id`.
    """
    try:
        row = await db.fetch_one(
            """
            UPDATE songs
            SET group_name = $1,
                title = $2,
                text = $3,
                link = $4,
                release_date = $5,
                updated_at = now()
            WHERE id = $6
            RETURNING id
            """,
            song.group,
            song.title,
            song.text,
            song.link,
            date.fromisoformat(song.release_date),
            song.id,
        )
    except asyncpg.UniqueViolationError as exc:
        raise AlreadyExists(f"Song already exists: {song.group!r} - {song.title!r}") from exc
    except _DB_ERRORS as exc:
        raise PersistFailed(f"Failed to update song id={song.id}: {exc}") from exc
    return row is not None


async def delete_song(song_id: int) -> bool:
    try:
        row = await db.fetch_one(
            """
            DELETE FROM songs
            WHERE id = $1
            RETURNING id
            """,
            song_id,
        )
    except _DB_ERRORS as exc:
        raise PersistFailed(f"Failed to delete song id={song_id}: {exc}") from exc
    return row is not None


async def get_lyrics(song_id: int) -> str | None:
    try:
        row = await db.fetch_one(
            """
            SELECT text
            FROM songs
            WHERE id = $1
            """,
            song_id,
        )
    except _DB_ERRORS as exc:
        raise PersistFailed(f"Failed to fetch lyrics for song id={song_id}: {exc}") from exc
    if row is None:
        return None
    return str(row["text"] or "")
