"""
Typed catalog failures.

The workflow raises these; `main.py` maps them to HTTP responses using
`status_code` and `public_detail`. The exception message keeps the full
detail for server-side logs.
"""

from __future__ import annotations


class CatalogError(RuntimeError):
    status_code = 500
    public_detail = "Internal server error."


class AlreadyExists(CatalogError):
    status_code = 409
    public_detail = "Song already exists."


class NotFound(CatalogError):
    status_code = 404
    public_detail = "Song not found."


class InvalidPage(CatalogError):
    status_code = 400
    public_detail = "Invalid page number."


class UnparseableDate(CatalogError):
    status_code = 400

    def __init__(self, raw: str) -> None:
        super().__init__(f"Unrecognized date format: {raw!r}")
        self.raw = raw
        self.public_detail = f"Unrecognized date format: {raw}"


class LookupFailed(CatalogError):
    public_detail = "Error adding the song."


class PersistFailed(CatalogError):
    pass
