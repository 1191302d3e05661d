from __future__ import annotations

from datetime import datetime, timezone

from ..core.exceptions import ValidationError


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp ('2026-03-01T09:00', trailing 'Z' allowed)."""
    v = (value or "").strip()
    if not v:
        raise ValidationError("Start time is required")
    if v.endswith("Z"):
        v = v[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(v)
    except ValueError:
        raise ValidationError("Start time is not a valid timestamp")


def combine_date_time(date_value: str, time_value: str) -> datetime:
    """Combine the separate date (YYYY-MM-DD) and time (HH:MM) form inputs."""
    d = (date_value or "").strip()
    t = (time_value or "").strip() or "00:00"
    try:
        return datetime.strptime(f"{d} {t}", "%Y-%m-%d %H:%M")
    except ValueError:
        raise ValidationError("Date/time is not valid (YYYY-MM-DD HH:MM)")


def now_utc() -> datetime:
    """Current time as a naive UTC datetime (how MySQL DATETIME stores it).

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
