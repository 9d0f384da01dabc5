from datetime import date, datetime, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from practice_calendar.models.appointment import Appointment
from practice_calendar.scheduling.availability import get_available_slots
from practice_calendar.scheduling.slots import Slot
from practice_calendar.services.calendar_settings_service import load_calendar_settings

# Appointments are fetched for the target day plus a day either side, which
# covers buffers and slots running past midnight.
_RELEVANCE_MARGIN = timedelta(days=1)


def relevance_window(d: date) -> tuple[datetime, datetime]:
    day_start = datetime(d.year, d.month, d.day, 0, 0, 0)
    return day_start - _RELEVANCE_MARGIN, day_start + timedelta(days=1) + _RELEVANCE_MARGIN


async def get_practitioner_appointments_near(
    session: AsyncSession, practitioner_id: str, d: date, for_update: bool = False
) -> list[Appointment]:
    """Appointments of the practitioner whose interval touches the window around `d`."""
    start, end = relevance_window(d)
    q = (
        select(Appointment)
        .where(
            Appointment.practitioner_id == practitioner_id,
            Appointment.start_datetime < end,
            Appointment.end_datetime > start,
        )
        .order_by(Appointment.start_datetime)
    )
    if for_update:
        q = q.with_for_update()
    result = await session.execute(q)
    return list(result.scalars().all())


async def get_available_slots_for_date(
    session: AsyncSession,
    practitioner_id: str,
    d: date,
    duration_minutes: int | None = None,
) -> list[Slot]:
    """All slots of the practitioner's calendar on `d`, tagged with availability."""
    calendar, _ = await load_calendar_settings(session, practitioner_id)
    existing = await get_practitioner_appointments_near(session, practitioner_id, d)
    return get_available_slots(
        calendar,
        d,
        existing,
        duration_minutes=duration_minutes,
        practitioner_id=practitioner_id,
    )
