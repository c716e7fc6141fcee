"""Read-only snapshots of the scheduling catalog for one generation run.

The engine never reads ORM rows directly: ``load_catalog`` copies the active
subjects, faculty, classrooms and timeslots of a department/semester into
frozen dataclasses, so availability and capacities stay fixed for the whole
run even if the tables change underneath it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.exceptions import ValidationError
from app.models.classroom import Classroom
from app.models.faculty import Faculty
from app.models.subject import Subject
from app.models.timeslot import Timeslot
from app.schemas.timetable import DAY_VALUES, parse_time_to_minutes

logger = logging.getLogger(__name__)

# Required room type -> room types that can host it.
ROOM_TYPE_COMPATIBILITY: dict[str, frozenset[str]] = {
    "lecture": frozenset({"lecture", "seminar", "auditorium"}),
    "seminar": frozenset({"seminar", "lecture"}),
    "auditorium": frozenset({"auditorium"}),
    "laboratory": frozenset({"laboratory"}),
    "computer_lab": frozenset({"computer_lab", "laboratory"}),
}

ACCESSIBILITY_FLAGS = ("ground_floor", "wheelchair_accessible", "elevator_access")

DAY_ORDER = {day: index for index, day in enumerate(DAY_VALUES)}


@dataclass(frozen=True)
class RoomRequirements:
    room_type: str = "lecture"
    min_capacity: int = 0
    required_equipment: frozenset[str] = frozenset()
    accessibility_needed: bool = False


@dataclass(frozen=True)
class SubjectSnapshot:
    id: str
    code: str
    department: str
    semester: int
    classes_per_week: int
    assigned_faculty: tuple[str, ...]
    duration_minutes: int = 60
    enrollment: int = 0
    requirements: RoomRequirements = field(default_factory=RoomRequirements)
    program: str = "UG"
    name: str = ""

    @property
    def cohort(self) -> tuple[str, int]:
        return (self.department, self.semester)


@dataclass(frozen=True)
class FacultySnapshot:
    id: str
    name: str = ""
    department: str = ""
    max_hours_per_week: float = 20
    # Explicit (day, timeslot_id) entries only; missing pairs are available.
    availability: Mapping[tuple[str, str], bool] = field(default_factory=dict, hash=False, compare=False)
    preferred_days: frozenset[str] = frozenset()
    preferred_timeslots: frozenset[str] = frozenset()
    avoid_days: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        # Detach from the caller's mapping; worker processes receive a pickled copy.
        object.__setattr__(self, "availability", dict(self.availability))

    def is_available(self, day: str, timeslot_id: str) -> bool:
        return self.availability.get((day, timeslot_id), True)

    def prefers(self, day: str, timeslot_id: str) -> bool:
        if day in self.avoid_days:
            return False
        return (
            self.availability.get((day, timeslot_id)) is True
            or day in self.preferred_days
            or timeslot_id in self.preferred_timeslots
        )


@dataclass(frozen=True)
class ClassroomSnapshot:
    id: str
    capacity: int
    room_type: str = "lecture"
    equipment: frozenset[str] = frozenset()
    accessibility: frozenset[str] = frozenset()
    name: str = ""

    @property
    def is_accessible(self) -> bool:
        return any(flag in self.accessibility for flag in ACCESSIBILITY_FLAGS)


@dataclass(frozen=True)
class TimeslotSnapshot:
    id: str
    day: str
    start_time: str
    end_time: str

    @property
    def start_minutes(self) -> int:
        return parse_time_to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        return parse_time_to_minutes(self.end_time)

    def collides_with(self, other: "TimeslotSnapshot") -> bool:
        if self.id == other.id:
            return True
        if self.day != other.day:
            return False
        return max(self.start_minutes, other.start_minutes) < min(self.end_minutes, other.end_minutes)


@dataclass(frozen=True)
class CatalogSnapshot:
    department: str
    semester: int
    subjects: tuple[SubjectSnapshot, ...]
    faculty: tuple[FacultySnapshot, ...]
    classrooms: tuple[ClassroomSnapshot, ...]
    timeslots: tuple[TimeslotSnapshot, ...]

    @property
    def session_count(self) -> int:
        return sum(max(0, subject.classes_per_week) for subject in self.subjects)


def unmet_room_requirements(room: ClassroomSnapshot, subject: SubjectSnapshot) -> list[str]:
    """Return the violated room aspects for hosting ``subject`` in ``room``."""
    requirements = subject.requirements
    unmet: list[str] = []
    if room.capacity < max(subject.enrollment, requirements.min_capacity):
        unmet.append("room_capacity")
    compatible = ROOM_TYPE_COMPATIBILITY.get(requirements.room_type, frozenset({requirements.room_type}))
    if room.room_type not in compatible:
        unmet.append("room_type")
    if not requirements.required_equipment <= room.equipment:
        unmet.append("room_equipment")
    if requirements.accessibility_needed and not room.is_accessible:
        unmet.append("room_accessibility")
    return unmet


def resolve_availability(
    windows: list[dict], timeslots: tuple[TimeslotSnapshot, ...]
) -> dict[tuple[str, str], bool]:
    """Map availability windows onto concrete timeslots.

    An unavailable window overlapping a slot wins over everything else; an
    available window fully covering a slot marks it as explicitly available.
    Slots touched by neither are left out and therefore default to available.
    """
    resolved: dict[tuple[str, str], bool] = {}
    for slot in timeslots:
        try:
            slot_start, slot_end = slot.start_minutes, slot.end_minutes
        except ValueError:
            # Reported by validate_catalog.
            continue
        explicit: bool | None = None
        for window in windows or []:
            if window.get("day") != slot.day:
                continue
            try:
                start = parse_time_to_minutes(str(window.get("startTime", "00:00")))
                end = parse_time_to_minutes(str(window.get("endTime", "23:59")))
            except ValueError:
                logger.warning("Ignoring malformed availability window %s", window)
                continue
            if not window.get("isAvailable", True):
                if max(start, slot_start) < min(end, slot_end):
                    explicit = False
                    break
            elif start <= slot_start and slot_end <= end:
                explicit = True
        if explicit is not None:
            resolved[(slot.day, slot.id)] = explicit
    return resolved


def _classroom_equipment(room: Classroom) -> frozenset[str]:
    tags = {item.strip() for item in (room.specialized_equipment or []) if item and item.strip()}
    for tag, present in (
        ("smart_board", room.has_smart_board),
        ("projector", room.has_projector),
        ("computer_lab", room.has_computer_lab),
        ("air_conditioning", room.has_air_conditioning),
        ("wifi", room.has_wifi),
    ):
        if present:
            tags.add(tag)
    return frozenset(tags)


def _classroom_accessibility(room: Classroom) -> frozenset[str]:
    return frozenset(
        flag
        for flag, present in (
            ("ground_floor", room.ground_floor),
            ("wheelchair_accessible", room.wheelchair_accessible),
            ("elevator_access", room.elevator_access),
        )
        if present
    )


def load_catalog(db: Session, *, department: str, semester: int) -> CatalogSnapshot:
    subjects = (
        db.execute(
            select(Subject)
            .where(Subject.is_active.is_(True), Subject.department == department, Subject.semester == semester)
            .order_by(Subject.code)
        )
        .scalars()
        .all()
    )
    faculty = (
        db.execute(
            select(Faculty)
            .where(Faculty.is_active.is_(True), Faculty.department == department)
            .order_by(Faculty.faculty_code)
        )
        .scalars()
        .all()
    )
    classrooms = (
        db.execute(select(Classroom).where(Classroom.is_active.is_(True)).order_by(Classroom.room_code))
        .scalars()
        .all()
    )
    timeslots = db.execute(select(Timeslot).where(Timeslot.is_active.is_(True))).scalars().all()

    timeslot_snapshots = tuple(
        TimeslotSnapshot(id=item.id, day=item.day, start_time=item.start_time, end_time=item.end_time)
        for item in sorted(timeslots, key=lambda slot: (DAY_ORDER.get(slot.day, 99), slot.start_time, slot.id))
    )

    return CatalogSnapshot(
        department=department,
        semester=semester,
        subjects=tuple(
            SubjectSnapshot(
                id=item.id,
                code=item.code,
                name=item.name,
                department=item.department,
                semester=item.semester,
                program=item.program.value,
                classes_per_week=item.classes_per_week,
                duration_minutes=item.duration_minutes,
                enrollment=item.enrollment,
                requirements=RoomRequirements(
                    room_type=item.room_type.value,
                    min_capacity=item.min_capacity,
                    required_equipment=frozenset(item.required_equipment or []),
                    accessibility_needed=item.accessibility_needed,
                ),
                assigned_faculty=tuple(dict.fromkeys(item.assigned_faculty_ids or [])),
            )
            for item in subjects
        ),
        faculty=tuple(
            FacultySnapshot(
                id=item.id,
                name=item.name,
                department=item.department,
                max_hours_per_week=item.max_hours_per_week,
                availability=resolve_availability(item.availability, timeslot_snapshots),
                preferred_days=frozenset(item.preferred_days or []),
                preferred_timeslots=frozenset(item.preferred_timeslot_ids or []),
                avoid_days=frozenset(item.avoid_days or []),
            )
            for item in faculty
        ),
        classrooms=tuple(
            ClassroomSnapshot(
                id=item.id,
                name=item.room_code,
                capacity=item.capacity,
                room_type=item.room_type.value,
                equipment=_classroom_equipment(item),
                accessibility=_classroom_accessibility(item),
            )
            for item in classrooms
        ),
        timeslots=timeslot_snapshots,
    )


def validate_catalog(catalog: CatalogSnapshot) -> None:
    """Pre-flight feasibility check; raises ValidationError listing every gap."""
    missing: list[str] = []
    if not catalog.subjects:
        missing.append(
            f'No active subjects found for department "{catalog.department}" and semester {catalog.semester}'
        )
    if not catalog.faculty:
        missing.append(f'No active faculty found for department "{catalog.department}"')
    if not catalog.classrooms:
        missing.append("No active classrooms found in the system")
    if not catalog.timeslots:
        missing.append("No active timeslots found in the system")
    if missing:
        logger.warning("Catalog pre-flight failed: %s", "; ".join(missing))
        raise ValidationError(
            message="Insufficient data for timetable generation",
            details={"problems": missing},
        )

    faculty_ids = {item.id for item in catalog.faculty}
    problems: list[str] = []
    for slot in catalog.timeslots:
        try:
            start, end = slot.start_minutes, slot.end_minutes
        except ValueError:
            problems.append(
                f"Timeslot {slot.id} on {slot.day} has malformed times {slot.start_time}-{slot.end_time}"
            )
            continue
        if end <= start:
            problems.append(f"Timeslot {slot.id} on {slot.day} must end after it starts")
    for subject in catalog.subjects:
        if subject.classes_per_week < 1:
            problems.append(f"Subject {subject.code} requires at least one class per week")
        if not any(faculty_id in faculty_ids for faculty_id in subject.assigned_faculty):
            problems.append(f"Subject {subject.code} has no eligible active faculty assigned")
        if not any(not unmet_room_requirements(room, subject) for room in catalog.classrooms):
            problems.append(f"Subject {subject.code} has no classroom satisfying its room requirements")
    if problems:
        logger.warning("Catalog pre-flight failed: %s", "; ".join(problems))
        raise ValidationError(
            message="Catalog cannot support timetable generation",
            details={"problems": problems},
        )
