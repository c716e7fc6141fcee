import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, Enum as SAEnum, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base
from app.models.classroom import RoomType


class ProgramLevel(str, Enum):
    UG = "UG"
    PG = "PG"


class Subject(Base):
    __tablename__ = "subjects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    code: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    department: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    program: Mapped[ProgramLevel] = mapped_column(
        SAEnum(ProgramLevel, name="program_level"), nullable=False, default=ProgramLevel.UG
    )
    semester: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    credits: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    classes_per_week: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=60)
    enrollment: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    room_type: Mapped[RoomType] = mapped_column(
        SAEnum(RoomType, name="room_type"), nullable=False, default=RoomType.lecture
    )
    min_capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    required_equipment: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    accessibility_needed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # Ordered: the first id is the primary instructor.
    assigned_faculty_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
