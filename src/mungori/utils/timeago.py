# src/mungori/utils/timeago.py
"""Human relative-time strings for list entries."""

from __future__ import annotations

from datetime import datetime

from mungori.core.clock import parse_timestamp, utcnow

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400


def _plural(count: int, unit: str) -> str:
    suffix = "" if count == 1 else "s"
    return f"{count} {unit}{suffix} ago"


def format_relative_time(event_time: datetime | str, now: datetime | None = None) -> str:
    """Return a coarse "time ago" label for ``event_time``.

    Args:
        event_time: When the event happened (datetime or ISO-8601 string).
        now: Reference time; defaults to the current UTC time.

    Returns:
        ``"just now"`` under a minute, then whole minutes, hours or days
        (floored). Events in the future collapse to ``"just now"``.
    """
    event = parse_timestamp(event_time)
    reference = parse_timestamp(now) if now is not None else utcnow()
    elapsed = int((reference - event).total_seconds())

    if elapsed < SECONDS_PER_MINUTE:
        return "just now"
    if elapsed < SECONDS_PER_HOUR:
        return _plural(elapsed // SECONDS_PER_MINUTE, "minute")
    if elapsed < SECONDS_PER_DAY:
        return _plural(elapsed // SECONDS_PER_HOUR, "hour")
    return _plural(elapsed // SECONDS_PER_DAY, "day")
