"""
Song catalog API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Query, Response, status

from . import schemas
from .dependencies import get_catalog
from .service import SongCatalog

router = APIRouter()


def _page_number(raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        return 0


@router.post("/songs", status_code=status.HTTP_201_CREATED)
async def add_song(
    request: schemas.AddSongRequest,
    catalog: SongCatalog = Depends(get_catalog),
) -> schemas.Song:
    """
    Add a song; release date, lyrics and link come from the song info service.
    """
    return await catalog.add_song(request.group, request.song)


@router.get("/songs")
async def list_songs(
    group: str = Query(default="", max_length=500),
    title: str = Query(default="", max_length=500),
    release_date: str = Query(default="", max_length=100),
    limit: int = Query(default=0, ge=0, le=schemas.MAX_DB_INT),
    offset: int = Query(default=0, ge=0, le=schemas.MAX_DB_INT),
    catalog: SongCatalog = Depends(get_catalog),
) -> list[schemas.Song]:
    """
    List songs filtered by group/title substring and exact release date.

    `limit=0` (or omitted) means the default page size.
    """
    filters = schemas.SongFilters(group=group, title=title, release_date=release_date)
    pagination = schemas.Pagination(limit=limit or schemas.DEFAULT_PAGE_LIMIT, offset=offset)
    return await catalog.list_songs(filters, pagination)


@router.get("/songs/{song_id}")
async def get_song(
    song_id: int = Path(le=schemas.MAX_DB_INT),
    catalog: SongCatalog = Depends(get_catalog),
) -> schemas.Song:
    return await catalog.get_song(song_id)


@router.get("/songs/{song_id}/text")
async def get_song_text(
    song_id: int = Path(le=schemas.MAX_DB_INT),
    page: str = Query(default=""),
    catalog: SongCatalog = Depends(get_catalog),
) -> str:
    """
    Full lyrics for page 0, otherwise the page-th verse (1-indexed).

    A missing or non-numeric `page` means the full text.
    """
    return await catalog.get_lyrics(song_id, _page_number(page))


@router.put("/songs/{song_id}")
async def update_song(
    request: schemas.UpdateSongRequest,
    song_id: int = Path(le=schemas.MAX_DB_INT),
    catalog: SongCatalog = Depends(get_catalog),
) -> schemas.Song:
    song = schemas.Song(id=song_id, **request.model_dump())
    return await catalog.update_song(song)


@router.delete("/songs/{song_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_song(
    song_id: int = Path(le=schemas.MAX_DB_INT),
    catalog: SongCatalog = Depends(get_catalog),
) -> Response:
    await catalog.delete_song(song_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
