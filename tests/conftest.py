# Point the app at a throwaway SQLite database before anything imports
# practice_calendar.core.config (Settings() is built at import time).
import os
import tempfile
from datetime import datetime, timedelta
from pathlib import Path

import pytest

_TEST_DB = Path(tempfile.gettempdir()) / f"practice_calendar_test_{os.getpid()}.db"
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_DB}"
os.environ["AUTO_CREATE_TABLES"] = "true"
os.environ.setdefault("ENV", "test")

from practice_calendar.models.appointment import Appointment  # noqa: E402


def make_appointment(
    start: datetime,
    duration_minutes: int | None = 60,
    practitioner_id: str = "dr-lee",
    id: int | None = None,
) -> Appointment:
    return Appointment(
        id=id,
        practitioner_id=practitioner_id,
        start_datetime=start,
        duration_minutes=duration_minutes,
        end_datetime=start + timedelta(minutes=duration_minutes or 60),
    )


@pytest.fixture
def test_db_path() -> Path:
    return _TEST_DB


@pytest.fixture
def client(test_db_path):
    from fastapi.testclient import TestClient

    from practice_calendar.main import app

    test_db_path.unlink(missing_ok=True)
    with TestClient(app) as c:
        yield c
    test_db_path.unlink(missing_ok=True)
