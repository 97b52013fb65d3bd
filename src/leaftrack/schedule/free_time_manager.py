# src/leaftrack/schedule/free_time_manager.py

"""
Free time ledger.

One list of 24*60 flags per calendar date (1 = free, 0 = busy), created on
first touch as all free. Ranges are half-open [start, end) on minute indices
(hour*60 + minute); seconds are ignored.

In memory only. Not synchronized: callers sharing one manager serialize access.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from pathlib import Path

from ..core.clock import elapsed_minutes, minute_of_day
from ..errors import CrossDayRegistrationError
from .busy_template import parse_busy_template, read_busy_template
from .busy_time_slot import DayOfWeekBusyTimeSlots, Weekday

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60
DAYS_PER_WEEK = 7


class FreeTimeManager:
    def __init__(self) -> None:
        self._free_time_slots_map: dict[date, list[int]] = {}
        self._end_of_day_map: dict[date, time] = {}

    def _slots_for(self, day: date) -> list[int]:
        slots = self._free_time_slots_map.get(day)
        if slots is None:
            slots = [1] * MINUTES_PER_DAY
            self._free_time_slots_map[day] = slots
        return slots

    def get_free_time_slots(self, day: date) -> list[int]:
        """Copy of the flags for `day`."""
        return list(self._slots_for(day))

    def known_dates(self) -> list[date]:
        return sorted(self._free_time_slots_map)

    def get_end_of_day(self, day: date) -> datetime | None:
        """End of the working day on `day` as set by the weekly template, if any."""
        end = self._end_of_day_map.get(day)
        return None if end is None else datetime.combine(day, end)

    def get_free_minutes(self, start: datetime, end: datetime) -> int:
        """
        Free minutes in [start, end).

        Only start's date is read from the ledger. Past 23:59 of that date
        every minute counts as free.
        """
        if start.date() != end.date():
            eod = start.replace(hour=23, minute=59)
            return elapsed_minutes(eod, end) + self.get_free_minutes(start, eod)

        slots = self._slots_for(start.date())
        return sum(slots[minute_of_day(start):minute_of_day(end)])

    def get_busy_minutes(self, start: datetime, end: datetime) -> int:
        return elapsed_minutes(start, end) - self.get_free_minutes(start, end)

    def register_busy_time_slot(self, start: datetime, end: datetime) -> None:
        """Mark [start, end) busy. Both ends must be on the same date."""
        if start.date() != end.date():
            raise CrossDayRegistrationError(
                f"busy slot must start and end on the same date: {start} -> {end}"
            )

        slots = self._slots_for(start.date())
        for index in range(minute_of_day(start), minute_of_day(end)):
            slots[index] = 0

    # ---- weekly template ----

    def register_weekly_template(
        self,
        template: dict[Weekday, DayOfWeekBusyTimeSlots],
        now: datetime,
    ) -> None:
        """Project the template onto the 7 dates starting at now's date."""
        first_day = now.date()
        registered = 0
        for offset in range(DAYS_PER_WEEK):
            day = first_day + timedelta(days=offset)
            entry = template.get(Weekday(day.weekday()))
            if entry is None:
                continue
            self._end_of_day_map[day] = time(entry.end_of_day_hour, entry.end_of_day_minute)
            for slot in entry.busy_time_slots:
                start, end = slot.interval_on(day)
                self.register_busy_time_slot(start, end)
                registered += 1
        logger.info("Registered %d busy slots for the week of %s", registered, first_day)

    def load_busy_time_slots_from_str(self, text: str, now: datetime) -> None:
        """Parse a weekly template and register it. Nothing is registered if parsing fails."""
        self.register_weekly_template(parse_busy_template(text), now)

    def load_busy_time_slots_from_file(self, path: str | Path, now: datetime) -> None:
        self.register_weekly_template(read_busy_template(path), now)
