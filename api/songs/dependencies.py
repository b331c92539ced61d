"""
Song catalog wiring for FastAPI routes.
"""

from __future__ import annotations

import logging

from fastapi import Request

from . import repository
from .service import SongCatalog
from .song_info import SongInfoClient, external_api_timeout_s, external_api_url


def build_catalog() -> SongCatalog:
    """
    Build the workflow over the Postgres store and the configured song info service.
    """
    lookup = SongInfoClient(
        base_url=external_api_url(),
        timeout_s=external_api_timeout_s(),
        logger=logging.getLogger("songs.song_info"),
    )
    return SongCatalog(
        store=repository,
        lookup=lookup,
        logger=logging.getLogger("songs.service"),
    )


def get_catalog(request: Request) -> SongCatalog:
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        raise RuntimeError("Song catalog is not initialized. Call build_catalog() on startup.")
    return catalog
