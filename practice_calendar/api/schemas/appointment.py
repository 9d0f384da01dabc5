from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from practice_calendar.scheduling.validator import TIME_OF_DAY_PATTERN, PractitionerId, RejectionKind


class SlotInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    time: str  # HH:MM
    label: str
    is_available: bool = Field(alias="isAvailable")


class BookAppointmentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    practitioner_id: PractitionerId = Field(alias="practitionerId")
    date: date
    time: str = Field(pattern=TIME_OF_DAY_PATTERN)
    duration_minutes: int | None = Field(default=None, alias="durationMinutes", gt=0, le=24 * 60)
    patient_id: str | None = Field(default=None, alias="patientId")
    title: str | None = None
    notes: str | None = None
    type: str = "consultation"


class RescheduleAppointmentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: date
    time: str = Field(pattern=TIME_OF_DAY_PATTERN)
    duration_minutes: int | None = Field(default=None, alias="durationMinutes", gt=0, le=24 * 60)


class ConflictSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int | None = None
    start_datetime: datetime = Field(alias="startDateTime")
    duration_minutes: int = Field(alias="durationMinutes")


class RejectionDetail(BaseModel):
    kind: RejectionKind
    message: str
    conflicts: list[ConflictSummary] = []
