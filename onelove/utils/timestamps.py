"""UTC timestamp helpers shared by the content-store backends."""

from datetime import datetime, timezone


def to_utc_iso(value: datetime) -> str:
    """Normalise a datetime to a sortable UTC ISO string (naive = UTC)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")
