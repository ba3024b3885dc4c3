"""
Default scan parameters and environment parsing for ripcheck.

All RIPCHECK_* environment variables are read here and exported as
module-level constants. The CLI and the scan settings import from this
module rather than reading os.environ directly. Time and volume defaults are
kept as the strings a user would type, so they go through the same parsers
as command-line values.
"""
from __future__ import annotations

import os
from typing import Optional


def _int_env(name: str, default: int, minimum: int = 1) -> int:
    """Parse an integer from environment, returning default on missing/invalid."""
    val = os.getenv(name)
    if not val:
        return default
    try:
        return max(minimum, int(val))
    except ValueError:
        return default


def _optional_int_env(name: str) -> Optional[int]:
    val = os.getenv(name)
    if not val:
        return None
    try:
        parsed = int(val)
    except ValueError:
        return None
    return parsed if parsed > 0 else None


def _str_env(name: str, default: str) -> str:
    val = os.getenv(name, "").strip()
    return val or default


# ---------------------------------------------------------------------------
# Detection window
# ---------------------------------------------------------------------------
MIN_WINDOW_SIZE: int = 7
"""Detectors look up to six samples back from the newest one."""

WINDOW_SIZE: int = _int_env("RIPCHECK_WINDOW_SIZE", MIN_WINDOW_SIZE, minimum=MIN_WINDOW_SIZE)
"""Rows of history kept per channel; extra rows only add reporting context."""

READ_BLOCK_FRAMES: int = _int_env("RIPCHECK_READ_BLOCK_FRAMES", 4096)
"""Frames read and decoded per I/O call."""


# ---------------------------------------------------------------------------
# Time bounds (parsed by ripcheck.util.units.parse_time)
# ---------------------------------------------------------------------------
MAX_TIME: Optional[str] = os.getenv("RIPCHECK_MAX_TIME") or None
"""Analyse at most this much audio per file; unset means the whole file."""

INTRO_LENGTH: str = _str_env("RIPCHECK_INTRO_LENGTH", "5s")
OUTRO_LENGTH: str = _str_env("RIPCHECK_OUTRO_LENGTH", "5s")
POP_DROP_DIST: str = _str_env("RIPCHECK_POP_DROP_DIST", "8")


# ---------------------------------------------------------------------------
# Thresholds (parsed by ripcheck.util.units.parse_volume)
# ---------------------------------------------------------------------------
POP_LIMIT: str = _str_env("RIPCHECK_POP_LIMIT", "33.333%")
DROP_LIMIT: str = _str_env("RIPCHECK_DROP_LIMIT", "66.666%")
DUPE_LIMIT: str = _str_env("RIPCHECK_DUPE_LIMIT", "0.033%")

MIN_DUPES: int = _int_env("RIPCHECK_MIN_DUPES", 400, minimum=2)
"""Shortest run of identical samples reported as dupes."""

MAX_BAD_AREAS: Optional[int] = _optional_int_env("RIPCHECK_MAX_BAD_AREAS")
"""Stop scanning a file after this many bad areas; unset means never."""


# ---------------------------------------------------------------------------
# Visualization
# ---------------------------------------------------------------------------
IMAGE_SAMPLE_WIDTH: int = _int_env("RIPCHECK_IMAGE_SAMPLE_WIDTH", 20)
IMAGE_SAMPLE_HEIGHT: int = _int_env("RIPCHECK_IMAGE_SAMPLE_HEIGHT", 50)
IMAGE_DIR: str = _str_env("RIPCHECK_IMAGE_DIR", ".")
