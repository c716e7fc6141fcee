from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.timetable import TimetableStatus
from app.schemas.generator import TimetableMetrics

DAY_VALUES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def parse_time_to_minutes(value: str) -> int:
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


class TimetableEntryOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    entry_id: str = Field(alias="entryId")
    subject_id: str = Field(alias="subjectId")
    subject_code: str = Field(alias="subjectCode")
    occurrence: int = Field(ge=0)
    faculty_id: str = Field(alias="facultyId")
    classroom_id: str = Field(alias="classroomId")
    timeslot_id: str = Field(alias="timeslotId")
    day: str
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    department: str
    semester: int
    program: str


class TimetableOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    code: str
    name: str
    academic_year: str = Field(alias="academicYear")
    semester: int
    department: str
    status: TimetableStatus
    generation: int
    fitness: float
    random_seed: int | None = Field(default=None, alias="randomSeed")
    metrics: TimetableMetrics
    entries: list[TimetableEntryOut] = Field(default_factory=list)
    created_at: datetime | None = Field(default=None, alias="createdAt")
