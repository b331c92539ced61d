import asyncio
import logging

import httpx
import pytest

from songs.errors import LookupFailed
from songs.song_info import SongInfoClient, external_api_timeout_s, external_api_url

LOGGER = logging.getLogger("tests.song_info")


def _client(handler):
    return SongInfoClient(
        base_url="http://song-info.local/",
        logger=LOGGER,
        transport=httpx.MockTransport(handler),
    )


def test_fetch_details_sends_escaped_query_and_parses_body():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        seen["raw_query"] = request.url.query
        return httpx.Response(
            200,
            json={"releaseDate": "16.07.2006", "text": "Ooh baby\n\nverse 2", "link": "https://example.com/v"},
        )

    detail = asyncio.run(_client(handler).fetch_details("Muse & Friends", "Supermassive Black Hole"))

    assert seen["path"] == "/info"
    assert seen["params"] == {"group": "Muse & Friends", "song": "Supermassive Black Hole"}
    assert b"Muse+%26+Friends" in seen["raw_query"] or b"Muse%20%26%20Friends" in seen["raw_query"]
    assert detail.release_date == "16.07.2006"
    assert detail.text == "Ooh baby\n\nverse 2"
    assert detail.link == "https://example.com/v"


def test_non_200_status_is_lookup_failure():
    def handler(request):
        return httpx.Response(503, text="unavailable")

    with pytest.raises(LookupFailed) as excinfo:
        asyncio.run(_client(handler).fetch_details("Muse", "Uprising"))
    assert "503" in str(excinfo.value)


def test_transport_error_is_lookup_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(LookupFailed):
        asyncio.run(_client(handler).fetch_details("Muse", "Uprising"))


def test_invalid_json_is_lookup_failure():
    def handler(request):
        return httpx.Response(200, text="<html>not json</html>")

    with pytest.raises(LookupFailed):
        asyncio.run(_client(handler).fetch_details("Muse", "Uprising"))


@pytest.mark.parametrize(
    "body",
    [
        [],
        {"releaseDate": "16.07.2006", "text": "t"},
        {"releaseDate": 2006, "text": "t", "link": "l"},
    ],
)
def test_malformed_body_is_lookup_failure(body):
    def handler(request):
        return httpx.Response(200, json=body)

    with pytest.raises(LookupFailed):
        asyncio.run(_client(handler).fetch_details("Muse", "Uprising"))


def test_empty_base_url_is_rejected():
    with pytest.raises(RuntimeError):
        SongInfoClient(base_url="  ", logger=LOGGER)


def test_env_config(monkeypatch):
    monkeypatch.setenv("EXTERNAL_API_URL", " http://song-info:8080 ")
    monkeypatch.setenv("EXTERNAL_API_TIMEOUT_S", "not-a-number")
    assert external_api_url() == "http://song-info:8080"
    assert external_api_timeout_s() == 5.0

    monkeypatch.setenv("EXTERNAL_API_TIMEOUT_S", "2.5")
    assert external_api_timeout_s() == 2.5

    monkeypatch.delenv("EXTERNAL_API_URL")
    with pytest.raises(RuntimeError):
        external_api_url()
