"""
Time sources.

Scoring depends on "days since last contact", so anything that scores reads
the time through a Clock instead of calling datetime.now() directly.
"""
from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        """Current instant, timezone-aware UTC."""
        ...


class SystemClock:
    """Wall-clock time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock frozen at a given instant. Used by tests and replays."""

    def __init__(self, instant: datetime):
        self._instant = as_utc(instant)

    def now(self) -> datetime:
        return self._instant

    def advance(self, **kwargs) -> None:
        """Move the clock forward, e.g. advance(days=2)."""
        self._instant += timedelta(**kwargs)


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC; convert aware ones to UTC."""
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utcnow() -> datetime:
    """Aware UTC now, the default for timestamp columns."""
    return datetime.now(timezone.utc)


system_clock = SystemClock()
