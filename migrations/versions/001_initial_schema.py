"""Initial schema: calendar_settings, appointments.

Revision ID: 001_initial
Revises:
Create Date: 2025-02-23

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "calendar_settings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("practitioner_id", sa.String(), nullable=True),
        sa.Column("is_global", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("slot_interval_minutes", sa.Integer(), nullable=False, server_default="60"),
        sa.Column("buffer_minutes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("start_time", sa.String(), nullable=False, server_default="09:00"),
        sa.Column("end_time", sa.String(), nullable=False, server_default="17:00"),
        sa.Column("working_days", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_calendar_settings_practitioner_id"), "calendar_settings", ["practitioner_id"], unique=True)
    op.create_index(op.f("ix_calendar_settings_is_global"), "calendar_settings", ["is_global"], unique=False)

    op.create_table(
        "appointments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("practitioner_id", sa.String(), nullable=False),
        sa.Column("start_datetime", sa.DateTime(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False, server_default="60"),
        sa.Column("end_datetime", sa.DateTime(), nullable=False),
        sa.Column("patient_id", sa.String(), nullable=True),
        sa.Column("title", sa.String(), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("appointment_type", sa.String(), nullable=False, server_default="consultation"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_appointments_practitioner_id"), "appointments", ["practitioner_id"], unique=False)
    op.create_index(op.f("ix_appointments_start_datetime"), "appointments", ["start_datetime"], unique=False)
    op.create_index(op.f("ix_appointments_end_datetime"), "appointments", ["end_datetime"], unique=False)
    op.create_index(op.f("ix_appointments_patient_id"), "appointments", ["patient_id"], unique=False)

    if op.get_bind().dialect.name == "postgresql":
        # Last line of defence against concurrent double-booking: no two
        # appointments of one practitioner may overlap (buffers are enforced by
        # the in-transaction validation, not here).
        op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
        op.execute(
            """
            ALTER TABLE appointments
            ADD CONSTRAINT appointments_no_overlap
            EXCLUDE USING gist (
                practitioner_id WITH =,
                tsrange(start_datetime, end_datetime, '[)') WITH &&
            )
            """
        )


def downgrade() -> None:
    if op.get_bind().dialect.name == "postgresql":
        op.execute("ALTER TABLE appointments DROP CONSTRAINT IF EXISTS appointments_no_overlap")
    op.drop_index(op.f("ix_appointments_patient_id"), table_name="appointments")
    op.drop_index(op.f("ix_appointments_end_datetime"), table_name="appointments")
    op.drop_index(op.f("ix_appointments_start_datetime"), table_name="appointments")
    op.drop_index(op.f("ix_appointments_practitioner_id"), table_name="appointments")
    op.drop_table("appointments")
    op.drop_index(op.f("ix_calendar_settings_is_global"), table_name="calendar_settings")
    op.drop_index(op.f("ix_calendar_settings_practitioner_id"), table_name="calendar_settings")
    op.drop_table("calendar_settings")
