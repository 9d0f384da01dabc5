import asyncio
from types import SimpleNamespace

from sqlalchemy.dialects import postgresql

from practice_calendar.services.appointment_service import _lock_practitioner_calendar


class RecordingSession:
    def __init__(self, dialect_name: str):
        self._bind = SimpleNamespace(dialect=SimpleNamespace(name=dialect_name))
        self.statements = []

    def get_bind(self):
        return self._bind

    async def execute(self, statement):
        self.statements.append(statement)


def test_postgres_writes_take_practitioner_advisory_lock():
    session = RecordingSession("postgresql")
    asyncio.run(_lock_practitioner_calendar(session, "dr-lee"))

    assert len(session.statements) == 1
    compiled = session.statements[0].compile(dialect=postgresql.dialect())
    assert "pg_advisory_xact_lock(hashtext(" in str(compiled)
    assert list(compiled.params.values()) == ["dr-lee"]


def test_other_dialects_skip_the_lock():
    session = RecordingSession("sqlite")
    asyncio.run(_lock_practitioner_calendar(session, "dr-lee"))
    assert session.statements == []
