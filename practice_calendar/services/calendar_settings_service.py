import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from practice_calendar.core.config import settings
from practice_calendar.models.calendar_settings import CalendarSettingsRecord
from practice_calendar.scheduling.calendar import CalendarSettings, resolve_settings

logger = logging.getLogger(__name__)

SOURCE_PRACTITIONER = "practitioner"
SOURCE_GLOBAL = "global"
SOURCE_DEFAULT = "default"


def default_calendar_settings() -> CalendarSettings:
    """Fallback calendar built from configuration (DEFAULT_* env vars)."""
    return resolve_settings(
        {
            "slot_interval_minutes": settings.default_slot_interval_minutes,
            "buffer_minutes": settings.default_buffer_minutes,
            "start_time": settings.default_start_time,
            "end_time": settings.default_end_time,
            "working_days": settings.default_working_days_list,
        },
        default=CalendarSettings(),
    )


async def get_settings_record(
    session: AsyncSession, practitioner_id: str | None
) -> tuple[CalendarSettingsRecord | None, str]:
    """The practitioner's own record, else the practice-wide (global) one."""
    if practitioner_id:
        result = await session.execute(
            select(CalendarSettingsRecord).where(CalendarSettingsRecord.practitioner_id == practitioner_id)
        )
        record = result.scalar_one_or_none()
        if record:
            return record, SOURCE_PRACTITIONER
    result = await session.execute(
        select(CalendarSettingsRecord)
        .where(CalendarSettingsRecord.is_global == True)  # noqa: E712
        .order_by(CalendarSettingsRecord.id)
        .limit(1)
    )
    record = result.scalar_one_or_none()
    if record:
        return record, SOURCE_GLOBAL
    return None, SOURCE_DEFAULT


async def load_calendar_settings(
    session: AsyncSession, practitioner_id: str | None
) -> tuple[CalendarSettings, str]:
    """Resolved calendar for a practitioner and where it came from."""
    record, source = await get_settings_record(session, practitioner_id)
    if record is None:
        logger.debug("No calendar settings for practitioner %s, using default", practitioner_id)
    return resolve_settings(record, default=default_calendar_settings()), source
