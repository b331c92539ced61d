"""
Song catalog workflow.

Add flow:
1) Look up release date / lyrics / link in the external song info service
2) Refuse duplicates of (group, title)
3) Normalize the release date to YYYY-MM-DD
4) Persist

A failed lookup aborts the add; nothing is stored without enrichment.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Protocol

from . import dates
from .errors import AlreadyExists, InvalidPage, LookupFailed, NotFound, UnparseableDate
from .schemas import Pagination, Song, SongDetail, SongFilters

VERSE_SEPARATOR = "\n\n"


class SongStore(Protocol):
    async def list_songs(self, filters: SongFilters, pagination: Pagination) -> list[Song]: ...

    async def get_song_by_identity(self, group: str, title: str) -> Song | None: ...

    async def get_song_by_id(self, song_id: int) -> Song | None: ...

    async def insert_song(self, song: Song) -> int: ...

    async def update_song(self, song: Song) -> bool: ...

    async def delete_song(self, song_id: int) -> bool: ...

    async def get_lyrics(self, song_id: int) -> str | None: ...


class SongLookup(Protocol):
    async def fetch_details(self, group: str, title: str) -> SongDetail: ...


def split_verses(text: str) -> list[str]:
    return text.split(VERSE_SEPARATOR)


class SongCatalog:
    def __init__(self, *, store: SongStore, lookup: SongLookup, logger: logging.Logger) -> None:
        self.store = store
        self.lookup = lookup
        self.logger = logger

    async def add_song(self, group: str, title: str) -> Song:
        self.logger.info("song_add_requested group=%s title=%s", group, title)

        detail = await self.lookup.fetch_details(group, title)
        self.logger.debug("song_info_fetched group=%s title=%s release_date=%s", group, title, detail.release_date)

        existing = await self.store.get_song_by_identity(group, title)
        if existing is not None:
            raise AlreadyExists(f"Song already exists: id={existing.id} group={group!r} title={title!r}")

        # A bad date from the song info service is an upstream failure, not a client error.
        try:
            release_date = dates.normalize_date(detail.release_date)
        except UnparseableDate as exc:
            raise LookupFailed(f"Song info returned an unparseable release date: {exc}") from exc

        song = Song(
            group=group,
            title=title,
            text=detail.text,
            link=detail.link,
            release_date=release_date,
        )
        song_id = await self.store.insert_song(song)
        self.logger.info("song_added id=%s group=%s title=%s", song_id, group, title)
        return song.model_copy(update={"id": song_id})

    async def list_songs(self, filters: SongFilters, pagination: Pagination) -> list[Song]:
        if filters.release_date:
            filters = replace(filters, release_date=dates.normalize_date(filters.release_date))
        self.logger.debug(
            "songs_list group=%s title=%s release_date=%s limit=%s offset=%s",
            filters.group,
            filters.title,
            filters.release_date,
            pagination.limit,
            pagination.offset,
        )
        return await self.store.list_songs(filters, pagination)

    async def get_song(self, song_id: int) -> Song:
        song = await self.store.get_song_by_id(song_id)
        if song is None:
            raise NotFound(f"Song id={song_id} not found.")
        return song

    async def get_lyrics(self, song_id: int, page: int = 0) -> str:
        """
        page 0 is the full text; page N >= 1 is the N-th verse.
        """
        text = await self.store.get_lyrics(song_id)
        if text is None:
            raise NotFound(f"Song id={song_id} not found.")

        if page == 0:
            return text

        verses = split_verses(text)
        if page < 1 or page > len(verses):
            raise InvalidPage(f"Page {page} is out of range for song id={song_id} ({len(verses)} verses).")
        return verses[page - 1]

    async def update_song(self, song: Song) -> Song:
        song = song.model_copy(update={"release_date": dates.normalize_date(song.release_date)})
        if not await self.store.update_song(song):
            raise NotFound(f"Song id={song.id} not found.")
        self.logger.info("song_updated id=%s", song.id)
        return song

    async def delete_song(self, song_id: int) -> None:
        if not await self.store.delete_song(song_id):
            raise NotFound(f"Song id={song_id} not found.")
        self.logger.info("song_deleted id=%s", song_id)
