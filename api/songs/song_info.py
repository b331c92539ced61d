"""
Song info (external lookup) HTTP client.

Used endpoint:
- GET /info?group=...&song=...  -> {"releaseDate": "...", "text": "...", "link": "..."}

Single attempt, no retries.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from .errors import LookupFailed
from .schemas import SongDetail

DEFAULT_TIMEOUT_S = 5.0


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def external_api_url() -> str:
    base_url = os.environ.get("EXTERNAL_API_URL", "").strip()
    if not base_url:
        raise RuntimeError("EXTERNAL_API_URL is not set.")
    return base_url


def external_api_timeout_s() -> float:
    return _env_float("EXTERNAL_API_TIMEOUT_S", DEFAULT_TIMEOUT_S)


def _parse_detail(data: Any) -> SongDetail:
    if not isinstance(data, dict):
        raise LookupFailed("Song info response is not a JSON object.")

    values: dict[str, str] = {}
    for key in ("releaseDate", "text", "link"):
        value = data.get(key)
        if not isinstance(value, str):
            raise LookupFailed(f"Song info response has no string field {key!r}.")
        values[key] = value

    return SongDetail(
        release_date=values["releaseDate"],
        text=values["text"],
        link=values["link"],
    )


class SongInfoClient:
    def __init__(
        self,
        *,
        base_url: str,
        logger: logging.Logger,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        base_url = (base_url or "").strip()
        if not base_url:
            raise RuntimeError("Song info base URL is empty.")
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.logger = logger
        self._transport = transport

    async def fetch_details(self, group: str, title: str) -> SongDetail:
        """
        Fetch release date, lyrics and link for (group, title).
        """
        params = {"group": group, "song": title}
        self.logger.info("song_info_request base_url=%s group=%s title=%s", self.base_url, group, title)

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout_s,
                transport=self._transport,
            ) as client:
                resp = await client.get("/info", params=params)
        except httpx.HTTPError as exc:
            raise LookupFailed(f"Song info request failed: {exc}") from exc

        if resp.status_code != 200:
            # Avoid dumping huge bodies; include a small snippet.
            body = resp.text[:300]
            raise LookupFailed(f"Song info request failed: {resp.status_code} {body}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise LookupFailed(f"Song info returned invalid JSON: {exc}") from exc

        return _parse_detail(data)
