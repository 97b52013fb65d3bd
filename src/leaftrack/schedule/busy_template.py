# src/leaftrack/schedule/busy_template.py

"""
Weekly busy-time template parser.

Format (YAML):

    - day_of_week: Mon
      end_of_day_hour: 23
      end_of_day_minute: 30
      busy_time_slots:
        - start_time: "09:00"
          duration_minutes: 60
          name: standup

Parsing is strict: any malformed entry aborts the whole template.
Unquoted times such as 10:30 are read by YAML as base-60 integers
(minutes since midnight); those are accepted as well.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from ..errors import BusyTemplateError
from .busy_time_slot import BusyTimeSlot, DayOfWeekBusyTimeSlots, Weekday

logger = logging.getLogger(__name__)

_HHMM_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")

LAST_MINUTE_OF_DAY = 23 * 60 + 59


def _require(mapping: dict[str, Any], key: str, where: str) -> Any:
    if key not in mapping or mapping[key] is None:
        raise BusyTemplateError(f"{where}: missing required field {key!r}")
    return mapping[key]


def _require_int(mapping: dict[str, Any], key: str, where: str, *, lo: int, hi: int) -> int:
    value = _require(mapping, key, where)
    if not isinstance(value, int) or isinstance(value, bool):
        raise BusyTemplateError(f"{where}: {key!r} must be an integer, got {value!r}")
    if not lo <= value <= hi:
        raise BusyTemplateError(f"{where}: {key!r} must be within [{lo}, {hi}], got {value}")
    return value


def _parse_start_time(raw: Any, where: str) -> tuple[int, int]:
    if isinstance(raw, int) and not isinstance(raw, bool):
        hour, minute = divmod(raw, 60)
    elif isinstance(raw, str) and (m := _HHMM_RE.match(raw)):
        hour, minute = int(m.group(1)), int(m.group(2))
    else:
        raise BusyTemplateError(f"{where}: start_time must look like 'HH:MM', got {raw!r}")

    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise BusyTemplateError(f"{where}: start_time out of range: {raw!r}")
    return hour, minute


def _parse_slot(raw: Any, where: str) -> BusyTimeSlot:
    if not isinstance(raw, dict):
        raise BusyTemplateError(f"{where}: busy time slot must be a mapping")
    hour, minute = _parse_start_time(_require(raw, "start_time", where), where)
    # the slot must end on its own date (23:59 at the latest)
    duration = _require_int(raw, "duration_minutes", where, lo=0, hi=LAST_MINUTE_OF_DAY - (hour * 60 + minute))
    name = raw.get("name")
    if name is None:
        name = ""
    elif not isinstance(name, str):
        name = str(name)
    return BusyTimeSlot(
        start_time_hour=hour,
        start_time_minute=minute,
        duration_minutes=duration,
        name=name,
    )


def _parse_entry(raw: Any, index: int) -> DayOfWeekBusyTimeSlots:
    where = f"entry #{index}"
    if not isinstance(raw, dict):
        raise BusyTemplateError(f"{where}: must be a mapping")

    day_raw = _require(raw, "day_of_week", where)
    if not isinstance(day_raw, str):
        raise BusyTemplateError(f"{where}: day_of_week must be a string, got {day_raw!r}")
    try:
        day = Weekday.parse(day_raw)
    except ValueError as e:
        raise BusyTemplateError(f"{where}: {e}") from e

    where = f"entry #{index} ({day.name.title()})"
    end_hour = _require_int(raw, "end_of_day_hour", where, lo=0, hi=23)
    end_minute = _require_int(raw, "end_of_day_minute", where, lo=0, hi=59)

    slots_raw = raw.get("busy_time_slots")
    if slots_raw is None:
        slots_raw = []
    if not isinstance(slots_raw, list):
        raise BusyTemplateError(f"{where}: busy_time_slots must be a list")

    slots = tuple(_parse_slot(s, f"{where} slot #{i}") for i, s in enumerate(slots_raw))
    return DayOfWeekBusyTimeSlots(
        day_of_week=day,
        end_of_day_hour=end_hour,
        end_of_day_minute=end_minute,
        busy_time_slots=slots,
    )


def parse_busy_template(text: str) -> dict[Weekday, DayOfWeekBusyTimeSlots]:
    """Parse template text into one entry per configured weekday."""
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise BusyTemplateError(f"invalid YAML: {e}") from e

    if doc is None:
        return {}
    if not isinstance(doc, list):
        raise BusyTemplateError("busy-time template must be a list of weekday entries")

    out: dict[Weekday, DayOfWeekBusyTimeSlots] = {}
    for index, raw in enumerate(doc):
        entry = _parse_entry(raw, index)
        if entry.day_of_week in out:
            raise BusyTemplateError(f"entry #{index}: duplicate weekday {entry.day_of_week.name.title()}")
        out[entry.day_of_week] = entry

    logger.debug("Parsed busy template: %d weekdays", len(out))
    return out


def read_busy_template(path: str | Path) -> dict[Weekday, DayOfWeekBusyTimeSlots]:
    path = Path(path)
    try:
        text = path.read_text("utf-8")
    except OSError as e:
        raise BusyTemplateError(f"cannot read busy-time template {path}: {e}") from e
    return parse_busy_template(text)
