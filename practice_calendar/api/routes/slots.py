from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from practice_calendar.api.deps import get_session, practitioner_id_param
from practice_calendar.api.schemas.appointment import SlotInfo
from practice_calendar.services.slot_service import get_available_slots_for_date

router = APIRouter(prefix="/appointments", tags=["slots"])


@router.get("/available-slots", response_model=list[SlotInfo])
async def available_slots(
    date_param: date = Query(..., alias="date"),
    practitioner_id: str = Depends(practitioner_id_param),
    duration_minutes: int | None = Query(None, alias="durationMinutes", gt=0, le=24 * 60),
    session: AsyncSession = Depends(get_session),
) -> list[SlotInfo]:
    """Every slot of the practitioner's calendar on `date`, each with isAvailable."""
    slots = await get_available_slots_for_date(
        session, practitioner_id, date_param, duration_minutes=duration_minutes
    )
    return [
        SlotInfo(time=s.time_of_day, label=s.display_label, is_available=s.is_available)
        for s in slots
    ]
