"""Timestamps — ISO-8601 formatting shared by the health responder and error envelopes."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(dt: datetime) -> str:
    """Format as UTC with millisecond precision and a Z suffix.

    2024-01-01T00:00:00.000Z — the same text JavaScript's toISOString() emits.
    Naive datetimes are taken to be UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    text = dt.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")
