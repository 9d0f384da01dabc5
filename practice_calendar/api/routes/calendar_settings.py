from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from practice_calendar.api.deps import get_session, practitioner_id_param
from practice_calendar.models.calendar_settings import CalendarSettingsPublic
from practice_calendar.services.calendar_settings_service import load_calendar_settings

router = APIRouter(prefix="/calendar-settings", tags=["calendar-settings"])


@router.get("", response_model=CalendarSettingsPublic)
async def effective_calendar_settings(
    practitioner_id: str = Depends(practitioner_id_param),
    session: AsyncSession = Depends(get_session),
) -> CalendarSettingsPublic:
    """Calendar the scheduling engine will use for this practitioner, after fallbacks."""
    calendar, source = await load_calendar_settings(session, practitioner_id)
    return CalendarSettingsPublic(
        practitioner_id=practitioner_id,
        source=source,
        slot_interval_minutes=calendar.slot_interval_minutes,
        buffer_minutes=calendar.buffer_minutes,
        start_time=calendar.start_time,
        end_time=calendar.end_time,
        working_days=list(calendar.working_days),
    )
