"""Time utilities shared across ripcheck components."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now_str() -> str:
    """Return the current UTC timestamp as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def samples_to_ms(sample: int, sample_rate: int) -> float:
    """Return the offset of ``sample`` in milliseconds (0.0 for a zero rate)."""
    if sample_rate <= 0:
        return 0.0
    return 1000.0 * sample / sample_rate
