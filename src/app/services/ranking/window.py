"""Time arithmetic for the trailing ranking window.

The ranking covers views since ``now - window_days`` and lives until the
next UTC midnight, so there is at most one ranking per UTC day.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime, time, timedelta


SECONDS_PER_DAY = 86_400


def utcnow() -> datetime:
    return datetime.now(UTC)


def window_start(now: datetime, days: int) -> datetime:
    """Inclusive lower bound of the trailing window ending at ``now``."""
    return now - timedelta(days=days)


def seconds_until_next_utc_midnight(now: datetime) -> int:
    """Whole seconds from ``now`` until the next 00:00 UTC.

    Rounded up and never below 1, since a zero TTL would delete the
    ranking the moment it is written. Naive datetimes are taken as UTC.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    now = now.astimezone(UTC)

    next_midnight = datetime.combine(
        now.date() + timedelta(days=1), time.min, tzinfo=UTC
    )
    remaining = math.ceil((next_midnight - now).total_seconds())
    return max(1, min(remaining, SECONDS_PER_DAY))
