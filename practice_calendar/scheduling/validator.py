"""Booking validation: the gate a booking request passes before it is persisted.

Checks run in a fixed order and stop at the first failure, so the caller
always hears about the most fundamental problem first:

1. not in the past
2. on a working day
3. within working hours
4. no scheduling conflict

Rejections are returned as values, never raised.
"""

import logging
from collections.abc import Iterable
from datetime import UTC, date, datetime
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, StringConstraints

from practice_calendar.scheduling.calendar import CalendarSettings, parse_minutes_of_day
from practice_calendar.scheduling.conflicts import AppointmentLike, find_conflicts, to_naive_utc
from practice_calendar.scheduling.slots import slot_start

logger = logging.getLogger(__name__)

TIME_OF_DAY_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

# Surrounding whitespace is not part of the id
PractitionerId = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class RejectionKind(str, Enum):
    IN_THE_PAST = "InThePast"
    NON_WORKING_DAY = "NonWorkingDay"
    OUTSIDE_WORKING_HOURS = "OutsideWorkingHours"
    SCHEDULING_CONFLICT = "SchedulingConflict"


REJECTION_MESSAGES = {
    RejectionKind.IN_THE_PAST: "Cannot book an appointment in the past.",
    RejectionKind.NON_WORKING_DAY: "The practitioner does not work on this day.",
    RejectionKind.OUTSIDE_WORKING_HOURS: "The requested time is outside working hours.",
    RejectionKind.SCHEDULING_CONFLICT: "This slot is no longer available, please choose another.",
}


class BookingRequest(BaseModel):
    practitioner_id: PractitionerId
    date: date
    time_of_day: str = Field(pattern=TIME_OF_DAY_PATTERN)
    duration_minutes: int | None = Field(default=None, gt=0)

    @property
    def minutes_of_day(self) -> int:
        return parse_minutes_of_day(self.time_of_day) or 0

    @property
    def start_datetime(self) -> datetime:
        return slot_start(self.date, self.minutes_of_day)


class Accepted(BaseModel):
    accepted: Literal[True] = True


class Rejected(BaseModel):
    accepted: Literal[False] = False
    kind: RejectionKind
    message: str
    blocking_appointments: list[Any] = Field(default_factory=list)

    @classmethod
    def of(cls, kind: RejectionKind, blocking_appointments: list[Any] | None = None) -> "Rejected":
        return cls(
            kind=kind,
            message=REJECTION_MESSAGES[kind],
            blocking_appointments=blocking_appointments or [],
        )


ValidationResult = Accepted | Rejected


def _utc_naive_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


def validate_booking(
    request: BookingRequest,
    settings: CalendarSettings,
    existing: Iterable[AppointmentLike],
    now: datetime | None = None,
    exclude_appointment_id: Any = None,
) -> ValidationResult:
    now = to_naive_utc(now) if now is not None else _utc_naive_now()
    start = request.start_datetime

    if start < now:
        result = Rejected.of(RejectionKind.IN_THE_PAST)
    elif not settings.is_working_day(request.date):
        result = Rejected.of(RejectionKind.NON_WORKING_DAY)
    elif not (settings.start_minutes <= request.minutes_of_day < settings.end_minutes):
        result = Rejected.of(RejectionKind.OUTSIDE_WORKING_HOURS)
    else:
        conflicts = find_conflicts(
            start,
            request.duration_minutes or settings.slot_interval_minutes,
            settings.buffer_minutes,
            existing,
            practitioner_id=request.practitioner_id,
            exclude_appointment_id=exclude_appointment_id,
        )
        if not conflicts:
            return Accepted()
        result = Rejected.of(RejectionKind.SCHEDULING_CONFLICT, conflicts)

    logger.debug(
        "Booking %s %s for practitioner %s rejected: %s",
        request.date.isoformat(),
        request.time_of_day,
        request.practitioner_id,
        result.kind.value,
    )
    return result
