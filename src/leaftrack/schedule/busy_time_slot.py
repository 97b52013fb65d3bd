# src/leaftrack/schedule/busy_time_slot.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import IntEnum


class Weekday(IntEnum):
    """Same numbering as date.weekday()."""

    MON = 0
    TUE = 1
    WED = 2
    THU = 3
    FRI = 4
    SAT = 5
    SUN = 6

    @classmethod
    def parse(cls, raw: str) -> Weekday:
        """Accepts Mon..Sun or full English names, case-insensitive. Raises ValueError."""
        key = raw.strip().lower()
        for day, spellings in _WEEKDAY_SPELLINGS.items():
            if key in spellings:
                return day
        raise ValueError(f"unknown weekday: {raw!r}")


_WEEKDAY_SPELLINGS: dict[Weekday, frozenset[str]] = {
    Weekday.MON: frozenset({"mon", "monday"}),
    Weekday.TUE: frozenset({"tue", "tuesday"}),
    Weekday.WED: frozenset({"wed", "wednesday"}),
    Weekday.THU: frozenset({"thu", "thursday"}),
    Weekday.FRI: frozenset({"fri", "friday"}),
    Weekday.SAT: frozenset({"sat", "saturday"}),
    Weekday.SUN: frozenset({"sun", "sunday"}),
}


@dataclass(frozen=True, slots=True)
class BusyTimeSlot:
    start_time_hour: int
    start_time_minute: int
    duration_minutes: int
    name: str = ""

    def interval_on(self, day: date) -> tuple[datetime, datetime]:
        """Concrete [start, end) of this slot on `day`."""
        start = datetime.combine(day, time(self.start_time_hour, self.start_time_minute))
        return start, start + timedelta(minutes=self.duration_minutes)


@dataclass(frozen=True, slots=True)
class DayOfWeekBusyTimeSlots:
    day_of_week: Weekday
    end_of_day_hour: int
    end_of_day_minute: int
    busy_time_slots: tuple[BusyTimeSlot, ...] = field(default_factory=tuple)
