import logging
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

# 0=Sunday .. 6=Saturday, same numbering as the settings UI
WEEKDAY_NAMES = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)
_WEEKDAY_INDEX = {name: i for i, name in enumerate(WEEKDAY_NAMES)}

# Used when a record's working days normalize to nothing
FALLBACK_WORKING_DAYS: tuple[int, ...] = (1, 2, 3, 4, 5)

# Field name -> accepted keys on a raw record (snake_case first, then the
# camelCase names the settings UI has written over time)
_RAW_KEYS = {
    "slot_interval_minutes": ("slot_interval_minutes", "slotIntervalMinutes", "time_interval", "timeInterval"),
    "buffer_minutes": ("buffer_minutes", "bufferMinutes", "buffer_time", "bufferTime"),
    "start_time": ("start_time", "startTime", "default_start_time", "defaultStartTime"),
    "end_time": ("end_time", "endTime", "default_end_time", "defaultEndTime"),
    "working_days": ("working_days", "workingDays"),
}


class CalendarSettings(BaseModel):
    """Canonical working calendar of one practitioner (or the practice default)."""

    model_config = ConfigDict(frozen=True)

    slot_interval_minutes: int = Field(default=60, gt=0)
    buffer_minutes: int = Field(default=0, ge=0)
    start_time: str = "09:00"
    end_time: str = "17:00"
    working_days: tuple[int, ...] = FALLBACK_WORKING_DAYS

    @property
    def start_minutes(self) -> int:
        return parse_minutes_of_day(self.start_time) or 0

    @property
    def end_minutes(self) -> int:
        return parse_minutes_of_day(self.end_time) or 0

    def is_working_day(self, d: date) -> bool:
        return weekday_index(d) in self.working_days


def weekday_index(d: date) -> int:
    """Weekday of `d` with 0=Sunday .. 6=Saturday."""
    return d.isoweekday() % 7


def parse_minutes_of_day(value: Any) -> int | None:
    """Parse "HH:MM" (seconds allowed and ignored) into minutes since midnight.

    Returns None for anything that is not a valid time of day.
    """
    if not isinstance(value, str):
        return None
    parts = value.strip().split(":")
    if len(parts) not in (2, 3):
        return None
    try:
        hours, minutes = int(parts[0]), int(parts[1])
    except ValueError:
        return None
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        return None
    return hours * 60 + minutes


def format_time_of_day(minutes_of_day: int) -> str:
    return f"{minutes_of_day // 60:02d}:{minutes_of_day % 60:02d}"


def _weekday_from_entry(entry: Any) -> int | None:
    if isinstance(entry, bool):
        return None
    if isinstance(entry, int):
        return entry if 0 <= entry <= 6 else None
    if isinstance(entry, str):
        key = entry.strip().lower()
        if key.isdigit():
            n = int(key)
            return n if 0 <= n <= 6 else None
        return _WEEKDAY_INDEX.get(key)
    return None


def normalize_working_days(values: Iterable[Any] | Any) -> tuple[int, ...]:
    """Normalize weekday names and/or 0-6 indices into a sorted tuple of indices.

    A single entry (e.g. `5` or `"monday"`) is treated as a one-item list.
    Unrecognized entries are dropped; an empty result falls back to Mon-Fri.
    Feeding the output back in returns it unchanged.
    """
    if values is None or isinstance(values, bytes):
        values = []
    elif isinstance(values, str) or not isinstance(values, Iterable):
        values = [values]
    days: set[int] = set()
    for entry in values:
        idx = _weekday_from_entry(entry)
        if idx is None:
            logger.debug("Dropping unrecognized working day entry: %r", entry)
            continue
        days.add(idx)
    if not days:
        logger.debug("No usable working days, falling back to %s", FALLBACK_WORKING_DAYS)
        return FALLBACK_WORKING_DAYS
    return tuple(sorted(days))


def _raw_value(raw: Any, field: str) -> Any:
    for key in _RAW_KEYS[field]:
        if isinstance(raw, Mapping):
            if key in raw:
                return raw[key]
        elif hasattr(raw, key):
            return getattr(raw, key)
    return None


def _positive_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        n = int(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return n if n > 0 else None


def _non_negative_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        n = int(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return n if n >= 0 else None


def resolve_settings(raw: Any = None, default: CalendarSettings | None = None) -> CalendarSettings:
    """Resolve a raw settings record into canonical CalendarSettings.

    `raw` may be None, a mapping or an object exposing the fields as attributes
    (e.g. a CalendarSettingsRecord row). Malformed values never raise: each one
    falls back to the matching field of `default`. `end_time <= start_time` is
    not rejected here; that belongs to whoever writes the settings.
    """
    default = default or CalendarSettings()
    if raw is None:
        return default

    interval = _positive_int(_raw_value(raw, "slot_interval_minutes"))
    if interval is None:
        logger.debug("Slot interval missing or invalid, using default %d", default.slot_interval_minutes)
        interval = default.slot_interval_minutes

    buffer = _non_negative_int(_raw_value(raw, "buffer_minutes"))
    if buffer is None:
        buffer = default.buffer_minutes

    start = parse_minutes_of_day(_raw_value(raw, "start_time"))
    if start is None:
        logger.debug("Start time missing or invalid, using default %s", default.start_time)
        start = default.start_minutes
    end = parse_minutes_of_day(_raw_value(raw, "end_time"))
    if end is None:
        logger.debug("End time missing or invalid, using default %s", default.end_time)
        end = default.end_minutes

    raw_days = _raw_value(raw, "working_days")
    working_days = normalize_working_days(raw_days) if raw_days is not None else default.working_days

    return CalendarSettings(
        slot_interval_minutes=interval,
        buffer_minutes=buffer,
        start_time=format_time_of_day(start),
        end_time=format_time_of_day(end),
        working_days=working_days,
    )
