"""Idempotent demo catalog for one department and semester.

Rows are matched on their natural codes, so running the seeder twice updates
instead of duplicating.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.classroom import Classroom, RoomType
from app.models.faculty import Faculty
from app.models.subject import Subject
from app.models.timeslot import Timeslot

logger = logging.getLogger(__name__)

DEPARTMENT = "CSE"
SEMESTER = 3
WORKING_DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]
SLOT_TIMES = [("09:00", "10:00"), ("10:00", "11:00"), ("11:15", "12:15"), ("13:30", "14:30"), ("14:30", "15:30")]

FACULTY_PROFILES: list[tuple[str, str, int]] = [
    ("CSE-F01", "Dr. Radhika N.", 16),
    ("CSE-F02", "Dr. Senthil Kumar T.", 16),
    ("CSE-F03", "Dr. Swapna T. R.", 18),
    ("CSE-F04", "Malathi P.", 18),
    ("CSE-F05", "Bindu K. R.", 20),
    ("CSE-F06", "Sathiya R. R.", 20),
]


@dataclass(frozen=True)
class SubjectSeed:
    code: str
    name: str
    classes_per_week: int
    room_type: RoomType
    faculty_codes: tuple[str, ...]
    enrollment: int = 60
    duration_minutes: int = 60
    required_equipment: tuple[str, ...] = ()


SUBJECTS: list[SubjectSeed] = [
    SubjectSeed("23MAT206", "Optimization Techniques", 3, RoomType.lecture, ("CSE-F01", "CSE-F02")),
    SubjectSeed("23ECE205", "Digital Electronics", 3, RoomType.lecture, ("CSE-F03",)),
    SubjectSeed("23CSE201", "Procedural Programming using C", 3, RoomType.lecture, ("CSE-F04", "CSE-F05")),
    SubjectSeed("23CSE202", "Database Management Systems", 3, RoomType.lecture, ("CSE-F02", "CSE-F06")),
    SubjectSeed("23CSE203", "Data Structures and Algorithms", 4, RoomType.lecture, ("CSE-F05", "CSE-F01")),
    SubjectSeed(
        "23ECE285",
        "Digital Electronics Laboratory",
        1,
        RoomType.laboratory,
        ("CSE-F03",),
        duration_minutes=120,
        required_equipment=("oscilloscope",),
    ),
    SubjectSeed(
        "23CSE281",
        "Data Structures Laboratory",
        2,
        RoomType.computer_lab,
        ("CSE-F06", "CSE-F04"),
        required_equipment=("computer_lab",),
    ),
]


def upsert_timeslots(session: Session) -> None:
    for day in WORKING_DAYS:
        for index, (start, end) in enumerate(SLOT_TIMES, start=1):
            slot_code = f"{day[:3].upper()}-{index}"
            slot = session.execute(select(Timeslot).where(Timeslot.slot_code == slot_code)).scalar_one_or_none()
            if slot is None:
                slot = Timeslot(slot_code=slot_code, day=day)
                session.add(slot)
            slot.day = day
            slot.start_time = start
            slot.end_time = end
            slot.shift = "morning" if start < "12:30" else "afternoon"
            slot.is_active = True


def upsert_classrooms(session: Session) -> None:
    rooms = [(f"A{floor}0{index}", floor, 65, RoomType.lecture) for floor in (1, 2) for index in (1, 2, 3)]
    rooms += [("LAB-1", 0, 70, RoomType.laboratory), ("CLAB-1", 1, 70, RoomType.computer_lab)]
    for room_code, floor, capacity, room_type in rooms:
        room = session.execute(select(Classroom).where(Classroom.room_code == room_code)).scalar_one_or_none()
        if room is None:
            room = Classroom(room_code=room_code)
            session.add(room)
        room.building = "Academic Block"
        room.floor = floor
        room.capacity = capacity
        room.room_type = room_type
        room.has_projector = True
        room.has_computer_lab = room_type == RoomType.computer_lab
        room.specialized_equipment = ["oscilloscope"] if room_type == RoomType.laboratory else []
        room.ground_floor = floor == 0
        room.wheelchair_accessible = floor == 0
        room.elevator_access = True
        room.is_active = True


def upsert_faculty(session: Session) -> dict[str, Faculty]:
    faculty_by_code: dict[str, Faculty] = {}
    for faculty_code, name, max_hours in FACULTY_PROFILES:
        member = session.execute(select(Faculty).where(Faculty.faculty_code == faculty_code)).scalar_one_or_none()
        if member is None:
            member = Faculty(faculty_code=faculty_code, email=f"{faculty_code.lower()}@university.edu")
            session.add(member)
        member.name = name
        member.department = DEPARTMENT
        member.max_hours_per_week = max_hours
        member.availability = [
            {"day": day, "startTime": "09:00", "endTime": "12:15", "isAvailable": True} for day in WORKING_DAYS
        ]
        member.preferred_days = []
        member.preferred_timeslot_ids = []
        member.avoid_days = ["Friday"] if faculty_code.endswith("1") else []
        member.is_active = True
        faculty_by_code[faculty_code] = member
    session.flush()
    return faculty_by_code


def upsert_subjects(session: Session, faculty_by_code: dict[str, Faculty]) -> None:
    for item in SUBJECTS:
        subject = session.execute(select(Subject).where(Subject.code == item.code)).scalar_one_or_none()
        if subject is None:
            subject = Subject(code=item.code)
            session.add(subject)
        subject.name = item.name
        subject.department = DEPARTMENT
        subject.semester = SEMESTER
        subject.classes_per_week = item.classes_per_week
        subject.duration_minutes = item.duration_minutes
        subject.enrollment = item.enrollment
        subject.room_type = item.room_type
        subject.required_equipment = list(item.required_equipment)
        subject.assigned_faculty_ids = [faculty_by_code[code].id for code in item.faculty_codes]
        subject.is_active = True


def seed_demo_catalog(session: Session) -> None:
    upsert_timeslots(session)
    upsert_classrooms(session)
    faculty_by_code = upsert_faculty(session)
    upsert_subjects(session, faculty_by_code)
    session.commit()
    logger.info(
        "Seeded demo catalog for %s semester %s: %s subjects, %s faculty",
        DEPARTMENT,
        SEMESTER,
        len(SUBJECTS),
        len(FACULTY_PROFILES),
    )
