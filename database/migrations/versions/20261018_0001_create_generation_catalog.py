"""create generation catalog and timetables

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    room_type = sa.Enum("lecture", "laboratory", "seminar", "auditorium", "computer_lab", name="room_type")
    program_level = sa.Enum("UG", "PG", name="program_level")
    timetable_status = sa.Enum("generated", "approved", "published", name="timetable_status")

    op.create_table(
        "classrooms",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("room_code", sa.String(length=50), nullable=False),
        sa.Column("building", sa.String(length=200), nullable=False, server_default="Main"),
        sa.Column("floor", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("room_type", room_type, nullable=False),
        sa.Column("has_smart_board", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("has_projector", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("has_computer_lab", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("has_air_conditioning", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("has_wifi", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("specialized_equipment", sa.JSON(), nullable=False),
        sa.Column("ground_floor", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("wheelchair_accessible", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("elevator_access", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_classrooms_room_code", "classrooms", ["room_code"], unique=True)
    op.create_index("ix_classrooms_is_active", "classrooms", ["is_active"])

    op.create_table(
        "faculty",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("faculty_code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("department", sa.String(length=200), nullable=False),
        sa.Column("max_hours_per_week", sa.Integer(), nullable=False, server_default="20"),
        sa.Column("availability", sa.JSON(), nullable=False),
        sa.Column("preferred_days", sa.JSON(), nullable=False),
        sa.Column("preferred_timeslot_ids", sa.JSON(), nullable=False),
        sa.Column("avoid_days", sa.JSON(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_faculty_faculty_code", "faculty", ["faculty_code"], unique=True)
    op.create_index("ix_faculty_email", "faculty", ["email"], unique=True)
    op.create_index("ix_faculty_department", "faculty", ["department"])
    op.create_index("ix_faculty_is_active", "faculty", ["is_active"])

    op.create_table(
        "subjects",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("department", sa.String(length=200), nullable=False),
        sa.Column("program", program_level, nullable=False),
        sa.Column("semester", sa.Integer(), nullable=False),
        sa.Column("credits", sa.Integer(), nullable=False, server_default="3"),
        sa.Column("classes_per_week", sa.Integer(), nullable=False, server_default="3"),
        sa.Column("duration_minutes", sa.Integer(), nullable=False, server_default="60"),
        sa.Column("enrollment", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("room_type", room_type, nullable=False),
        sa.Column("min_capacity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("required_equipment", sa.JSON(), nullable=False),
        sa.Column("accessibility_needed", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("assigned_faculty_ids", sa.JSON(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_subjects_code", "subjects", ["code"], unique=True)
    op.create_index("ix_subjects_department", "subjects", ["department"])
    op.create_index("ix_subjects_semester", "subjects", ["semester"])
    op.create_index("ix_subjects_is_active", "subjects", ["is_active"])

    op.create_table(
        "timeslots",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("slot_code", sa.String(length=50), nullable=False, unique=True),
        sa.Column("day", sa.String(length=20), nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column("shift", sa.String(length=20), nullable=False, server_default="morning"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_timeslots_day_start", "timeslots", ["day", "start_time"])
    op.create_index("ix_timeslots_is_active", "timeslots", ["is_active"])

    op.create_table(
        "timetables",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("code", sa.String(length=120), nullable=False, unique=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("academic_year", sa.String(length=20), nullable=False),
        sa.Column("semester", sa.Integer(), nullable=False),
        sa.Column("department", sa.String(length=200), nullable=False),
        sa.Column("status", timetable_status, nullable=False),
        sa.Column("entries", sa.JSON(), nullable=False),
        sa.Column("metrics", sa.JSON(), nullable=False),
        sa.Column("generation", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("fitness", sa.Float(), nullable=False, server_default="0"),
        sa.Column("random_seed", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_timetables_scope", "timetables", ["academic_year", "semester", "department"])
    op.create_index("ix_timetables_status", "timetables", ["status"])


def downgrade() -> None:
    op.drop_index("ix_timetables_status", table_name="timetables")
    op.drop_index("ix_timetables_scope", table_name="timetables")
    op.drop_table("timetables")
    op.drop_index("ix_timeslots_is_active", table_name="timeslots")
    op.drop_index("ix_timeslots_day_start", table_name="timeslots")
    op.drop_table("timeslots")
    op.drop_index("ix_subjects_is_active", table_name="subjects")
    op.drop_index("ix_subjects_semester", table_name="subjects")
    op.drop_index("ix_subjects_department", table_name="subjects")
    op.drop_index("ix_subjects_code", table_name="subjects")
    op.drop_table("subjects")
    op.drop_index("ix_faculty_is_active", table_name="faculty")
    op.drop_index("ix_faculty_department", table_name="faculty")
    op.drop_index("ix_faculty_email", table_name="faculty")
    op.drop_index("ix_faculty_faculty_code", table_name="faculty")
    op.drop_table("faculty")
    op.drop_index("ix_classrooms_is_active", table_name="classrooms")
    op.drop_index("ix_classrooms_room_code", table_name="classrooms")
    op.drop_table("classrooms")
    sa.Enum(name="timetable_status").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="program_level").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="room_type").drop(op.get_bind(), checkfirst=True)
