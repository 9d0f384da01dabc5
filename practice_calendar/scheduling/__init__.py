"""
Scheduling engine

Pure functions over a practitioner's calendar settings and existing bookings:
- Settings resolution and weekday normalization (calendar.py)
- Slot generation (slots.py)
- Conflict detection (conflicts.py)
- Availability assembly (availability.py)
- Booking validation (validator.py)
"""

from practice_calendar.scheduling.availability import get_available_slots
from practice_calendar.scheduling.calendar import (
    CalendarSettings,
    normalize_working_days,
    resolve_settings,
    weekday_index,
)
from practice_calendar.scheduling.conflicts import find_conflicts, has_conflict, intervals_overlap
from practice_calendar.scheduling.slots import Slot, generate_slots
from practice_calendar.scheduling.validator import (
    Accepted,
    BookingRequest,
    Rejected,
    RejectionKind,
    ValidationResult,
    validate_booking,
)

__all__ = [
    "Accepted",
    "BookingRequest",
    "CalendarSettings",
    "Rejected",
    "RejectionKind",
    "Slot",
    "ValidationResult",
    "find_conflicts",
    "generate_slots",
    "get_available_slots",
    "has_conflict",
    "intervals_overlap",
    "normalize_working_days",
    "resolve_settings",
    "validate_booking",
    "weekday_index",
]
