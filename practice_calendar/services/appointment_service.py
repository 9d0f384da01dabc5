import logging
from datetime import date, datetime, timedelta

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from practice_calendar.models.appointment import Appointment, AppointmentCreate
from practice_calendar.scheduling.validator import (
    BookingRequest,
    Rejected,
    RejectionKind,
    validate_booking,
)
from practice_calendar.services.calendar_settings_service import load_calendar_settings
from practice_calendar.services.slot_service import get_practitioner_appointments_near

logger = logging.getLogger(__name__)


async def _lock_practitioner_calendar(session: AsyncSession, practitioner_id: str) -> None:
    """Hold a per-practitioner write lock until the transaction ends.

    Covers bookings into a window with no existing rows to lock. PostgreSQL
    only; a no-op on other dialects.
    """
    if session.get_bind().dialect.name != "postgresql":
        return
    await session.execute(select(func.pg_advisory_xact_lock(func.hashtext(practitioner_id))))


async def _validate_in_transaction(
    session: AsyncSession,
    request: BookingRequest,
    now: datetime | None,
    exclude_appointment_id: int | None = None,
) -> tuple[Rejected | None, int]:
    """Re-run the booking validator against fresh, locked rows of this transaction.

    Returns (rejection or None, duration to store).
    """
    await _lock_practitioner_calendar(session, request.practitioner_id)
    calendar, _ = await load_calendar_settings(session, request.practitioner_id)
    existing = await get_practitioner_appointments_near(
        session, request.practitioner_id, request.date, for_update=True
    )
    result = validate_booking(
        request,
        calendar,
        existing,
        now=now,
        exclude_appointment_id=exclude_appointment_id,
    )
    duration = request.duration_minutes or calendar.slot_interval_minutes
    if isinstance(result, Rejected):
        logger.info(
            "Booking rejected (%s): practitioner=%s start=%s",
            result.kind.value,
            request.practitioner_id,
            request.start_datetime.isoformat(),
        )
        return result, duration
    return None, duration


async def _flush_or_conflict(session: AsyncSession, request: BookingRequest) -> Rejected | None:
    """Flush pending writes; a database overlap violation means someone else won the race."""
    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        logger.info(
            "Booking lost a concurrent write race: practitioner=%s start=%s",
            request.practitioner_id,
            request.start_datetime.isoformat(),
        )
        return Rejected.of(RejectionKind.SCHEDULING_CONFLICT)
    return None


async def create_appointment(
    session: AsyncSession,
    request: BookingRequest,
    data: AppointmentCreate | None = None,
    now: datetime | None = None,
) -> Appointment | Rejected:
    """Validate and insert a booking within the caller's transaction.

    `data` carries the opaque payload (patient, title, notes, type); the
    practitioner, start and duration always come from `request`.
    """
    rejection, duration = await _validate_in_transaction(session, request, now)
    if rejection is not None:
        return rejection
    start = request.start_datetime
    appointment = Appointment(
        practitioner_id=request.practitioner_id,
        start_datetime=start,
        duration_minutes=duration,
        end_datetime=start + timedelta(minutes=duration),
        patient_id=data.patient_id if data else None,
        title=data.title if data else None,
        notes=data.notes if data else None,
        appointment_type=data.appointment_type if data else "consultation",
    )
    session.add(appointment)
    conflict = await _flush_or_conflict(session, request)
    if conflict is not None:
        return conflict
    await session.refresh(appointment)
    logger.info(
        "Appointment %s booked: practitioner=%s start=%s duration=%d",
        appointment.id,
        appointment.practitioner_id,
        appointment.start_datetime.isoformat(),
        appointment.duration_minutes,
    )
    return appointment


async def get_appointment(session: AsyncSession, appointment_id: int) -> Appointment | None:
    result = await session.execute(select(Appointment).where(Appointment.id == appointment_id))
    return result.scalar_one_or_none()


async def reschedule_appointment(
    session: AsyncSession,
    appointment_id: int,
    new_date: date,
    time_of_day: str,
    duration_minutes: int | None = None,
    now: datetime | None = None,
) -> Appointment | Rejected | None:
    """Move an appointment; it never conflicts with its own current slot.

    Returns None if the appointment does not exist.
    """
    appointment = await get_appointment(session, appointment_id)
    if not appointment:
        return None
    request = BookingRequest(
        practitioner_id=appointment.practitioner_id,
        date=new_date,
        time_of_day=time_of_day,
        duration_minutes=duration_minutes or appointment.duration_minutes,
    )
    rejection, duration = await _validate_in_transaction(
        session, request, now, exclude_appointment_id=appointment.id
    )
    if rejection is not None:
        return rejection
    appointment.reschedule(request.start_datetime, duration)
    session.add(appointment)
    conflict = await _flush_or_conflict(session, request)
    if conflict is not None:
        return conflict
    await session.refresh(appointment)
    logger.info("Appointment %s moved to %s", appointment.id, appointment.start_datetime.isoformat())
    return appointment


async def list_appointments_for_practitioner(
    session: AsyncSession, practitioner_id: str, from_date: date | None = None
) -> list[Appointment]:
    q = (
        select(Appointment)
        .where(Appointment.practitioner_id == practitioner_id)
        .order_by(Appointment.start_datetime)
    )
    if from_date:
        start = datetime(from_date.year, from_date.month, from_date.day, 0, 0, 0)
        q = q.where(Appointment.start_datetime >= start)
    result = await session.execute(q)
    return list(result.scalars().all())


async def cancel_appointment(session: AsyncSession, appointment_id: int) -> bool:
    appointment = await get_appointment(session, appointment_id)
    if not appointment:
        return False
    await session.delete(appointment)
    await session.flush()
    logger.info("Appointment %s cancelled", appointment_id)
    return True
