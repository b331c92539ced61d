import logging

import pytest
from fastapi.testclient import TestClient

from songs.errors import AlreadyExists, LookupFailed
from songs.schemas import Pagination, Song, SongDetail, SongFilters
from songs.service import SongCatalog


class InMemoryStore:
    """Store double with the same contract as songs.repository, unique on (group, title)."""

    def __init__(self):
        self.rows = {}
        self.next_id = 1
        self.inserted = []

    def seed(self, **fields):
        song = Song(id=self.next_id, **fields)
        self.rows[song.id] = song
        self.next_id += 1
        return song

    async def list_songs(self, filters: SongFilters, pagination: Pagination):
        songs = sorted(self.rows.values(), key=lambda s: s.id)
        if filters.group:
            songs = [s for s in songs if filters.group.lower() in s.group.lower()]
        if filters.title:
            songs = [s for s in songs if filters.title.lower() in s.title.lower()]
        if filters.release_date:
            songs = [s for s in songs if s.release_date == filters.release_date]
        return songs[pagination.offset : pagination.offset + pagination.limit]

    async def get_song_by_identity(self, group, title):
        for song in self.rows.values():
            if song.group == group and song.title == title:
                return song
        return None

    async def get_song_by_id(self, song_id):
        return self.rows.get(song_id)

    async def insert_song(self, song):
        for existing in self.rows.values():
            if existing.group == song.group and existing.title == song.title:
                raise AlreadyExists(f"duplicate {song.group} - {song.title}")
        stored = song.model_copy(update={"id": self.next_id})
        self.rows[stored.id] = stored
        self.inserted.append(stored)
        self.next_id += 1
        return stored.id

    async def update_song(self, song):
        if song.id not in self.rows:
            return False
        self.rows[song.id] = song
        return True

    async def delete_song(self, song_id):
        return self.rows.pop(song_id, None) is not None

    async def get_lyrics(self, song_id):
        song = self.rows.get(song_id)
        return song.text if song is not None else None


class StaticLookup:
    def __init__(self, detail=None, error=None):
        self.detail = detail or SongDetail(
            release_date="16.07.2006",
            text="Ooh baby, don't you know I suffer?\nOoh baby, can you hear me moan?\n\nYou caught me under false pretenses",
            link="https://www.youtube.com/watch?v=Xsp3_a-PMTw",
        )
        self.error = error
        self.calls = []

    async def fetch_details(self, group, title):
        self.calls.append((group, title))
        if self.error is not None:
            raise self.error
        return self.detail


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def lookup():
    return StaticLookup()


@pytest.fixture
def failing_lookup():
    return StaticLookup(error=LookupFailed("Song info request failed: 503 unavailable"))


@pytest.fixture
def catalog(store, lookup):
    return SongCatalog(store=store, lookup=lookup, logger=logging.getLogger("tests.songs"))


@pytest.fixture
def client(catalog):
    from main import app
    from songs.dependencies import get_catalog

    app.dependency_overrides[get_catalog] = lambda: catalog
    try:
        # No context manager: the lifespan (DB pool) is not started.
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
