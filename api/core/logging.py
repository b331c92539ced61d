"""
Process-wide logging setup.

Modules log through `logging.getLogger(__name__)` (or a logger handed to them
at construction) using `event_name key=value ...` messages. This module only
attaches the root handler once, at startup.
"""

from __future__ import annotations

import logging
import os
import sys

DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def log_level() -> int:
    raw = os.environ.get("LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL
    level = logging.getLevelName(raw)
    # getLevelName returns a "Level X" string for unknown names.
    if not isinstance(level, int):
        return logging.INFO
    return level


def configure_logging() -> None:
    root = logging.getLogger()
    root.setLevel(log_level())
    if any(getattr(h, "_song_catalog", False) for h in root.handlers):
        return None

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._song_catalog = True  # type: ignore[attr-defined]
    root.addHandler(handler)
