from fastapi import Query

from practice_calendar.core.db import get_session

__all__ = ["get_session", "practitioner_id_param"]


def practitioner_id_param(
    practitioner_id: str = Query(..., alias="practitionerId", min_length=1),
) -> str:
    """practitionerId query parameter shared by the read endpoints."""
    return practitioner_id.strip()
