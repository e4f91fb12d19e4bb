# src/mungori/core/clock.py
"""Time helpers shared by the store and the view-models."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def parse_timestamp(value: datetime | str) -> datetime:
    """Return an aware UTC datetime from a datetime or an ISO-8601 string.

    The remote store serialises timestamps with a trailing ``Z`` or an explicit
    offset; naive values are taken to be UTC already.
    """
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        value = datetime.fromisoformat(text)
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
