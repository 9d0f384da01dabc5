from collections.abc import Iterable
from datetime import date
from typing import Any

from practice_calendar.scheduling.calendar import CalendarSettings, parse_minutes_of_day
from practice_calendar.scheduling.conflicts import AppointmentLike, find_conflicts
from practice_calendar.scheduling.slots import Slot, generate_slots, slot_start


def get_available_slots(
    settings: CalendarSettings,
    d: date,
    existing: Iterable[AppointmentLike],
    duration_minutes: int | None = None,
    practitioner_id: Any = None,
) -> list[Slot]:
    """All slots for `d`, each tagged available or not with its blocking appointments.

    `existing` may hold the practitioner's appointments for any range of dates;
    only those whose interval reaches a slot can block it. On a non-working day
    every slot is unavailable.
    """
    existing = list(existing)
    duration = duration_minutes or settings.slot_interval_minutes
    working_day = settings.is_working_day(d)
    slots: list[Slot] = []
    for slot in generate_slots(settings, d):
        conflicts = find_conflicts(
            slot_start(d, parse_minutes_of_day(slot.time_of_day)),
            duration,
            settings.buffer_minutes,
            existing,
            practitioner_id=practitioner_id,
        )
        slots.append(
            slot.model_copy(
                update={
                    "is_available": working_day and not conflicts,
                    "blocking_appointments": conflicts,
                }
            )
        )
    return slots
