"""
Time and date utilities for window-aware scoring.

Key concepts:
  - Injected clock: scoring functions never read ambient time. Callers pass
    ``now`` explicitly; only the CLI calls ``utcnow()``.
  - Naive datetimes are interpreted as UTC so that events arriving without an
    offset compare cleanly against an aware ``now``.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

SECONDS_PER_DAY = 86_400.0


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info.

    Prefer this over ``datetime.utcnow()`` (which returns naive datetimes).
    """
    return datetime.now(tz=timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime (naive → assumed UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def age_days(then: datetime, now: datetime) -> float:
    """Return the fractional number of days from ``then`` to ``now``.

    Negative when ``then`` lies after ``now`` (a future-dated event).
    """
    return (ensure_utc(now) - ensure_utc(then)).total_seconds() / SECONDS_PER_DAY


def hours_between(then: datetime, now: datetime) -> float:
    """Return the fractional number of hours from ``then`` to ``now``."""
    return age_days(then, now) * 24.0


def window_start(now: datetime, days: int) -> datetime:
    """Return the inclusive start of a ``days``-long window ending at ``now``."""
    return ensure_utc(now) - timedelta(days=days)


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO 8601 string (``Z`` suffix accepted) into an aware datetime.

    Raises:
        ValueError: If the string cannot be parsed.
    """
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        raise ValueError(
            f"Invalid datetime '{value}'. "
            "Expected ISO 8601, e.g. '2025-11-03T18:00:00Z'."
        )
    return ensure_utc(parsed)
