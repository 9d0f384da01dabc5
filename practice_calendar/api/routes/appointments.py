from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from practice_calendar.api.deps import get_session, practitioner_id_param
from practice_calendar.api.schemas.appointment import (
    BookAppointmentRequest,
    ConflictSummary,
    RejectionDetail,
    RescheduleAppointmentRequest,
)
from practice_calendar.models.appointment import Appointment, AppointmentCreate, AppointmentPublic
from practice_calendar.scheduling.conflicts import appointment_duration
from practice_calendar.scheduling.validator import BookingRequest, Rejected, RejectionKind
from practice_calendar.services.appointment_service import (
    cancel_appointment,
    create_appointment,
    list_appointments_for_practitioner,
    reschedule_appointment,
)

router = APIRouter(prefix="/appointments", tags=["appointments"])


def _to_public(a: Appointment) -> AppointmentPublic:
    """Build public response; datetimes are naive UTC as stored."""
    return AppointmentPublic(
        id=int(a.id) if a.id is not None else 0,
        practitioner_id=a.practitioner_id,
        start_datetime=a.start_datetime,
        end_datetime=a.end_datetime,
        duration_minutes=a.duration_minutes,
        patient_id=a.patient_id,
        title=a.title,
        notes=a.notes,
        appointment_type=a.appointment_type,
        created_at=a.created_at,
    )


def _summary(a: Appointment) -> ConflictSummary:
    start = a.start_datetime
    if isinstance(start, datetime) and start.tzinfo is not None:
        start = start.replace(tzinfo=None)
    return ConflictSummary(id=a.id, start_datetime=start, duration_minutes=appointment_duration(a))


def _rejection_exception(rejected: Rejected) -> HTTPException:
    """409 when the slot is taken, 400 for every other rejected rule."""
    detail = RejectionDetail(
        kind=rejected.kind,
        message=rejected.message,
        conflicts=[_summary(a) for a in rejected.blocking_appointments],
    )
    status_code = (
        status.HTTP_409_CONFLICT
        if rejected.kind == RejectionKind.SCHEDULING_CONFLICT
        else status.HTTP_400_BAD_REQUEST
    )
    return HTTPException(status_code=status_code, detail=detail.model_dump(mode="json", by_alias=True))


@router.post("", response_model=AppointmentPublic, status_code=status.HTTP_201_CREATED)
async def book_appointment(
    body: BookAppointmentRequest,
    session: AsyncSession = Depends(get_session),
) -> AppointmentPublic:
    request = BookingRequest(
        practitioner_id=body.practitioner_id,
        date=body.date,
        time_of_day=body.time,
        duration_minutes=body.duration_minutes,
    )
    data = AppointmentCreate(
        patient_id=body.patient_id,
        title=body.title,
        notes=body.notes,
        appointment_type=body.type,
    )
    result = await create_appointment(session, request, data)
    if isinstance(result, Rejected):
        raise _rejection_exception(result)
    return _to_public(result)


@router.get("", response_model=list[AppointmentPublic])
async def list_appointments(
    practitioner_id: str = Depends(practitioner_id_param),
    from_date: date | None = Query(None, alias="from_date"),
    session: AsyncSession = Depends(get_session),
) -> list[AppointmentPublic]:
    appointments = await list_appointments_for_practitioner(session, practitioner_id, from_date=from_date)
    return [_to_public(a) for a in appointments]


@router.put("/{appointment_id}", response_model=AppointmentPublic)
async def move_appointment(
    appointment_id: int,
    body: RescheduleAppointmentRequest,
    session: AsyncSession = Depends(get_session),
) -> AppointmentPublic:
    result = await reschedule_appointment(
        session,
        appointment_id,
        body.date,
        body.time,
        duration_minutes=body.duration_minutes,
    )
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Appointment not found",
        )
    if isinstance(result, Rejected):
        raise _rejection_exception(result)
    return _to_public(result)


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_appointment(
    appointment_id: int,
    session: AsyncSession = Depends(get_session),
) -> None:
    ok = await cancel_appointment(session, appointment_id)
    if not ok:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Appointment not found",
        )
