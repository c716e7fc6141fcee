from __future__ import annotations

import random
from dataclasses import dataclass

from app.core.exceptions import InternalInvariantError, ValidationError
from app.services.catalog import CatalogSnapshot, unmet_room_requirements


@dataclass(frozen=True)
class Session:
    index: int
    subject_index: int
    occurrence: int
    faculty_candidates: tuple[int, ...]
    classroom_candidates: tuple[int, ...]


@dataclass(frozen=True)
class Gene:
    faculty: int
    classroom: int
    timeslot: int


Chromosome = tuple[Gene, ...]


@dataclass(frozen=True)
class TimetableEntry:
    entry_id: str
    subject_id: str
    subject_code: str
    occurrence: int
    faculty_id: str
    classroom_id: str
    timeslot_id: str
    day: str
    start_time: str
    end_time: str
    department: str
    semester: int
    program: str

    def as_payload(self) -> dict:
        return {
            "entryId": self.entry_id,
            "subjectId": self.subject_id,
            "subjectCode": self.subject_code,
            "occurrence": self.occurrence,
            "facultyId": self.faculty_id,
            "classroomId": self.classroom_id,
            "timeslotId": self.timeslot_id,
            "day": self.day,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "department": self.department,
            "semester": self.semester,
            "program": self.program,
        }


class ChromosomeCodec:
    """Maps a catalog onto fixed-length gene arrays and back.

    Session order is subject order in the catalog, then occurrence, and never
    changes during a run. Genes hold indices into the catalog tuples so they
    stay cheap to copy, hash and ship to worker processes.
    """

    def __init__(self, catalog: CatalogSnapshot) -> None:
        self.catalog = catalog
        self.faculty_index = {item.id: index for index, item in enumerate(catalog.faculty)}
        self.sessions = self._build_sessions()

    @property
    def length(self) -> int:
        return len(self.sessions)

    def _build_sessions(self) -> tuple[Session, ...]:
        sessions: list[Session] = []
        for subject_index, subject in enumerate(self.catalog.subjects):
            faculty_candidates = tuple(
                self.faculty_index[faculty_id]
                for faculty_id in subject.assigned_faculty
                if faculty_id in self.faculty_index
            )
            classroom_candidates = tuple(
                index
                for index, room in enumerate(self.catalog.classrooms)
                if not unmet_room_requirements(room, subject)
            )
            if not faculty_candidates or not classroom_candidates or not self.catalog.timeslots:
                raise ValidationError(
                    message=f"Subject {subject.code} cannot be encoded",
                    details={
                        "subject": subject.code,
                        "eligible_faculty": len(faculty_candidates),
                        "eligible_classrooms": len(classroom_candidates),
                        "timeslots": len(self.catalog.timeslots),
                    },
                )
            for occurrence in range(subject.classes_per_week):
                sessions.append(
                    Session(
                        index=len(sessions),
                        subject_index=subject_index,
                        occurrence=occurrence,
                        faculty_candidates=faculty_candidates,
                        classroom_candidates=classroom_candidates,
                    )
                )
        return tuple(sessions)

    def random_gene(self, session_index: int, rng: random.Random) -> Gene:
        session = self.sessions[session_index]
        return Gene(
            faculty=rng.choice(session.faculty_candidates),
            classroom=rng.choice(session.classroom_candidates),
            timeslot=rng.randrange(len(self.catalog.timeslots)),
        )

    def encode(self, rng: random.Random) -> Chromosome:
        return tuple(self.random_gene(session.index, rng) for session in self.sessions)

    def decode(self, chromosome: Chromosome) -> list[TimetableEntry]:
        if len(chromosome) != len(self.sessions):
            raise InternalInvariantError(
                message="Chromosome length does not match session count",
                details={"genes": len(chromosome), "sessions": len(self.sessions)},
            )

        catalog = self.catalog
        entries: list[TimetableEntry] = []
        for session, gene in zip(self.sessions, chromosome):
            if not (
                0 <= gene.faculty < len(catalog.faculty)
                and 0 <= gene.classroom < len(catalog.classrooms)
                and 0 <= gene.timeslot < len(catalog.timeslots)
            ):
                raise InternalInvariantError(
                    message=f"Gene at index {session.index} points outside the catalog",
                    details={"session": session.index, "gene": [gene.faculty, gene.classroom, gene.timeslot]},
                )
            subject = catalog.subjects[session.subject_index]
            slot = catalog.timeslots[gene.timeslot]
            entries.append(
                TimetableEntry(
                    entry_id=f"{subject.code}-{session.occurrence + 1}",
                    subject_id=subject.id,
                    subject_code=subject.code,
                    occurrence=session.occurrence,
                    faculty_id=catalog.faculty[gene.faculty].id,
                    classroom_id=catalog.classrooms[gene.classroom].id,
                    timeslot_id=slot.id,
                    day=slot.day,
                    start_time=slot.start_time,
                    end_time=slot.end_time,
                    department=subject.department,
                    semester=subject.semester,
                    program=subject.program,
                )
            )
        return entries
