import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class Faculty(Base):
    __tablename__ = "faculty"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    faculty_code: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    department: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    max_hours_per_week: Mapped[int] = mapped_column(Integer, nullable=False, default=20)
    # [{"day": "Monday", "startTime": "09:00", "endTime": "13:00", "isAvailable": true}, ...]
    availability: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    preferred_days: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    preferred_timeslot_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    avoid_days: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
