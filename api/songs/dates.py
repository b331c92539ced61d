"""
Release-date normalization.

Accepted inputs, tried in this order:
- DD.MM.YYYY          (16.07.2006)
- YYYY-MM-DD          (2006-07-16)
- Month D, YYYY       (July 16, 2006)
- RFC 3339 / ISO 8601 with an offset (2006-07-16T00:00:00Z)

Everything is returned as canonical YYYY-MM-DD.
"""

from __future__ import annotations

import re
from datetime import date, datetime

from .errors import UnparseableDate

# (shape, strptime format). The shape pins field widths; strptime alone
# accepts unpadded days and months.
DATE_FORMATS = (
    (re.compile(r"\d{2}\.\d{2}\.\d{4}", re.ASCII), "%d.%m.%Y"),
    (re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII), "%Y-%m-%d"),
    (re.compile(r"[A-Za-z]+ \d{1,2}, \d{4}", re.ASCII), "%B %d, %Y"),
)

RFC3339 = re.compile(
    r"(?P<date>\d{4}-\d{2}-\d{2})[Tt]"
    r"(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})(?:\.\d+)?"
    r"(?:[Zz]|[+-](?P<off_hour>\d{2}):(?P<off_minute>\d{2}))",
    re.ASCII,
)


def _parse_rfc3339(raw: str) -> date | None:
    match = RFC3339.fullmatch(raw)
    if match is None:
        return None
    if int(match["hour"]) > 23 or int(match["minute"]) > 59 or int(match["second"]) > 59:
        return None
    if match["off_hour"] is not None and (int(match["off_hour"]) > 23 or int(match["off_minute"]) > 59):
        return None
    try:
        # Keep the calendar date as written; no conversion to UTC.
        return datetime.strptime(match["date"], "%Y-%m-%d").date()
    except ValueError:
        return None


def parse_date(raw: str) -> date:
    for shape, fmt in DATE_FORMATS:
        if shape.fullmatch(raw) is None:
            continue
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue

    parsed = _parse_rfc3339(raw)
    if parsed is not None:
        return parsed
    raise UnparseableDate(raw)


def normalize_date(raw: str) -> str:
    """
    Return `raw` as YYYY-MM-DD, or raise UnparseableDate.
    """
    return parse_date(raw or "").isoformat()
