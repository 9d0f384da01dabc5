from practice_calendar.models.appointment import Appointment, AppointmentCreate, AppointmentPublic
from practice_calendar.models.calendar_settings import CalendarSettingsPublic, CalendarSettingsRecord

__all__ = [
    "Appointment",
    "AppointmentCreate",
    "AppointmentPublic",
    "CalendarSettingsPublic",
    "CalendarSettingsRecord",
]
