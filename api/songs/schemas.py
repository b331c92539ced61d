"""
Song catalog types: API schemas (pydantic) and small value objects.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field

DEFAULT_PAGE_LIMIT = 10

# ids, LIMIT and OFFSET are bigint in Postgres.
MAX_DB_INT = 2**63 - 1


class Song(BaseModel):
    id: int = 0
    group: str
    title: str
    text: str = ""
    link: str = ""
    release_date: str


class AddSongRequest(BaseModel):
    group: str = Field(..., min_length=1, max_length=500, examples=["Muse"])
    song: str = Field(..., min_length=1, max_length=500, examples=["Supermassive Black Hole"])


class UpdateSongRequest(BaseModel):
    group: str = Field(..., min_length=1, max_length=500, examples=["Muse"])
    title: str = Field(..., min_length=1, max_length=500, examples=["Supermassive Black Hole"])
    text: str = Field(..., min_length=1, examples=["Ooh baby, don't you know I suffer?\nOoh baby, can you hear me moan?"])
    link: str = Field(..., min_length=1, max_length=2000, examples=["https://www.youtube.com/watch?v=Xsp3_a-PMTw"])
    release_date: str = Field(..., min_length=1, max_length=100, examples=["16.07.2006"])


@dataclass(frozen=True)
class SongFilters:
    """
    Empty string means "no constraint" for that field.
    """

    group: str = ""
    title: str = ""
    release_date: str = ""


@dataclass(frozen=True)
class Pagination:
    limit: int = DEFAULT_PAGE_LIMIT
    offset: int = 0


@dataclass(frozen=True)
class SongDetail:
    """
    External lookup result; `release_date` is the raw, un-normalized string.
    """

    release_date: str
    text: str
    link: str
