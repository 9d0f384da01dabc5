from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


def _utc_naive_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class CalendarSettingsRecord(SQLModel, table=True):
    """Stored calendar settings, as written by the settings UI.

    `working_days` holds weekday names and/or 0-6 indices; older rows use names.
    Values are normalized when read by the scheduling engine, not here.
    """

    __tablename__ = "calendar_settings"
    id: int | None = Field(default=None, primary_key=True)
    practitioner_id: str | None = Field(default=None, unique=True, index=True)
    is_global: bool = Field(default=False, index=True)
    slot_interval_minutes: int = 60
    buffer_minutes: int = 0
    start_time: str = "09:00"
    end_time: str = "17:00"
    working_days: list[Any] = Field(
        default_factory=lambda: ["monday", "tuesday", "wednesday", "thursday", "friday"],
        sa_column=Column(JSON, nullable=False),
    )
    created_at: datetime = Field(default_factory=_utc_naive_now)
    updated_at: datetime = Field(default_factory=_utc_naive_now)


class CalendarSettingsPublic(SQLModel):
    practitioner_id: str | None = None
    source: str  # practitioner | global | default
    slot_interval_minutes: int
    buffer_minutes: int
    start_time: str
    end_time: str
    working_days: list[int]
