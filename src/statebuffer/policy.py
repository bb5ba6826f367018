"""Expiry policy for buffered items.

Pure functions only: the buffer and the removal queue own all state.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from statebuffer.models import BufferedItem


def to_milliseconds(duration: float | timedelta | None) -> float | None:
    """Normalise a duration to milliseconds; ``None`` passes through."""
    if duration is None:
        return None
    if isinstance(duration, timedelta):
        return duration.total_seconds() * 1000.0
    return float(duration)


def resolve_min_duration(
    explicit: float | timedelta | None,
    default: float | timedelta | None,
) -> float:
    """Pick the per-push duration, falling back to the configured default, then ``0``."""
    for candidate in (explicit, default):
        value = to_milliseconds(candidate)
        if value is not None:
            return value
    return 0.0


def is_expired(item: BufferedItem, now: float) -> bool:
    return item.timestamp + item.min_duration <= now


def duration_left(item: BufferedItem, now: float) -> float:
    """Milliseconds until *item* may be removed, never negative."""
    return max(0.0, item.min_duration - (now - item.timestamp))
