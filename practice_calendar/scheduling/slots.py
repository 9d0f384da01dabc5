from collections.abc import Iterator
from datetime import date, datetime, time
from typing import Any

from pydantic import BaseModel, Field

from practice_calendar.scheduling.calendar import CalendarSettings, format_time_of_day


class Slot(BaseModel):
    time_of_day: str  # HH:MM
    display_label: str
    is_available: bool = True
    blocking_appointments: list[Any] = Field(default_factory=list)


def format_clock_label(minutes_of_day: int) -> str:
    """12-hour label for a time of day, e.g. 570 -> "9:30 AM"."""
    hour, minute = divmod(minutes_of_day, 60)
    ampm = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12}:{minute:02d} {ampm}"


def iter_slot_times(settings: CalendarSettings) -> Iterator[int]:
    """Yield slot start times (minutes of day) from opening until before closing.

    Only the start has to be before closing time; a slot whose duration runs
    past closing is still produced.
    """
    current = settings.start_minutes
    end = settings.end_minutes
    step = settings.slot_interval_minutes
    while current < end:
        yield current
        current += step


def slot_start(d: date, minutes_of_day: int) -> datetime:
    """Absolute (naive) start instant of a slot on date `d`."""
    return datetime.combine(d, time(minutes_of_day // 60, minutes_of_day % 60))


def generate_slots(settings: CalendarSettings, d: date) -> list[Slot]:
    """Candidate slots for `d`, in order.

    Slots are produced for non-working days too; working-day gating happens in
    the availability assembler.
    """
    return [
        Slot(time_of_day=format_time_of_day(m), display_label=format_clock_label(m))
        for m in iter_slot_times(settings)
    ]
