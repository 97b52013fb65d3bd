# src/leaftrack/core/clock.py

"""
Time helpers.

Nothing here reads the wall clock: every function takes `now` explicitly.
"""

from __future__ import annotations

from datetime import datetime, timedelta

# Default for pending_until / last_synced_time when nothing was recorded.
EPOCH_MIN = datetime.min

DEFAULT_MORNING_HOUR = 6


def get_next_morning_datetime(now: datetime, *, morning_hour: int = DEFAULT_MORNING_HOUR) -> datetime:
    """
    Next occurrence of `morning_hour`:00.

    Before that hour it is today's morning, otherwise tomorrow's.
    """
    morning = now.replace(hour=morning_hour, minute=0, second=0, microsecond=0)
    if now.hour >= morning_hour:
        morning += timedelta(days=1)
    return morning


def elapsed_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, truncated toward zero."""
    delta = end - start
    minutes = abs(delta) // timedelta(minutes=1)
    return minutes if delta >= timedelta(0) else -minutes


def minute_of_day(dt: datetime) -> int:
    return dt.hour * 60 + dt.minute
