from datetime import UTC, datetime, timedelta
from sqlmodel import Field, SQLModel


def _utc_naive_now() -> datetime:
    """Naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(UTC).replace(tzinfo=None)


class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    id: int | None = Field(default=None, primary_key=True)
    practitioner_id: str = Field(index=True)
    start_datetime: datetime = Field(index=True)  # naive UTC
    duration_minutes: int = 60
    # Stored so the database can enforce non-overlap (see migrations)
    end_datetime: datetime = Field(index=True)
    patient_id: str | None = Field(default=None, index=True)
    title: str | None = None
    notes: str | None = None
    appointment_type: str = "consultation"
    created_at: datetime = Field(default_factory=_utc_naive_now)

    def reschedule(self, start_datetime: datetime, duration_minutes: int) -> None:
        self.start_datetime = start_datetime
        self.duration_minutes = duration_minutes
        self.end_datetime = start_datetime + timedelta(minutes=duration_minutes)


class AppointmentCreate(SQLModel):
    """Payload stored with a booking; not read by the scheduling engine."""

    patient_id: str | None = None
    title: str | None = None
    notes: str | None = None
    appointment_type: str = "consultation"


class AppointmentPublic(SQLModel):
    id: int
    practitioner_id: str
    start_datetime: datetime
    end_datetime: datetime
    duration_minutes: int
    patient_id: str | None = None
    title: str | None = None
    notes: str | None = None
    appointment_type: str
    created_at: datetime
