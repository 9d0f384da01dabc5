"""Conflict detection between a candidate appointment and existing bookings.

`intervals_overlap` is the only overlap test used anywhere in the project:
half-open intervals [a, b) and [c, d) overlap iff a < d and c < b.

Buffer handling: the candidate interval is padded by the buffer on both ends
and tested against each existing appointment's booked interval. Two
appointments therefore conflict when they overlap or sit closer than
`buffer_minutes` apart on either side, and never conflict when separated by at
least `buffer_minutes`.
"""

from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol

DEFAULT_APPOINTMENT_DURATION_MINUTES = 60


class AppointmentLike(Protocol):
    practitioner_id: Any
    start_datetime: datetime
    duration_minutes: int | None


def to_naive_utc(dt: datetime) -> datetime:
    """Convert to naive UTC so aware and stored (naive UTC) instants compare."""
    if dt.tzinfo is not None:
        return dt.astimezone(UTC).replace(tzinfo=None)
    return dt


def intervals_overlap(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    return a_start < b_end and b_start < a_end


def appointment_duration(appointment: AppointmentLike) -> int:
    return appointment.duration_minutes or DEFAULT_APPOINTMENT_DURATION_MINUTES


def appointment_interval(appointment: AppointmentLike) -> tuple[datetime, datetime]:
    start = to_naive_utc(appointment.start_datetime)
    return start, start + timedelta(minutes=appointment_duration(appointment))


def padded_interval(start: datetime, duration_minutes: int, buffer_minutes: int) -> tuple[datetime, datetime]:
    """[start - buffer, start + duration + buffer)"""
    start = to_naive_utc(start)
    buffer = timedelta(minutes=buffer_minutes)
    return start - buffer, start + timedelta(minutes=duration_minutes) + buffer


def find_conflicts(
    candidate_start: datetime,
    candidate_duration: int,
    buffer_minutes: int,
    existing: Iterable[AppointmentLike],
    practitioner_id: Any = None,
    exclude_appointment_id: Any = None,
) -> list[AppointmentLike]:
    """Return every existing appointment that blocks the candidate, ordered by start.

    When `practitioner_id` is given, appointments of other practitioners are
    ignored. `exclude_appointment_id` skips the appointment being moved.
    """
    cand_start, cand_end = padded_interval(candidate_start, candidate_duration, buffer_minutes)
    conflicts = []
    for appt in existing:
        if practitioner_id is not None and appt.practitioner_id != practitioner_id:
            continue
        if exclude_appointment_id is not None and getattr(appt, "id", None) == exclude_appointment_id:
            continue
        appt_start, appt_end = appointment_interval(appt)
        if intervals_overlap(cand_start, cand_end, appt_start, appt_end):
            conflicts.append(appt)
    conflicts.sort(key=lambda a: to_naive_utc(a.start_datetime))
    return conflicts


def has_conflict(
    candidate_start: datetime,
    candidate_duration: int,
    buffer_minutes: int,
    existing: Iterable[AppointmentLike],
    practitioner_id: Any = None,
    exclude_appointment_id: Any = None,
) -> bool:
    return bool(
        find_conflicts(
            candidate_start,
            candidate_duration,
            buffer_minutes,
            existing,
            practitioner_id=practitioner_id,
            exclude_appointment_id=exclude_appointment_id,
        )
    )
