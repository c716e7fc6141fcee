"""Seed a demo department catalog for timetable generation.

Run:
  PYTHONPATH=backend python scripts/seed_demo_catalog.py
"""

from __future__ import annotations

from sqlalchemy import func, select

from app.db.bootstrap import ensure_schema
from app.db.seed import DEPARTMENT, SEMESTER, seed_demo_catalog
from app.db.session import SessionLocal
from app.models.classroom import Classroom
from app.models.faculty import Faculty
from app.models.subject import Subject
from app.models.timeslot import Timeslot


def main() -> None:
    ensure_schema()
    with SessionLocal() as session:
        seed_demo_catalog(session)
        counts = {
            "subjects": session.execute(select(func.count(Subject.id))).scalar_one(),
            "faculty": session.execute(select(func.count(Faculty.id))).scalar_one(),
            "classrooms": session.execute(select(func.count(Classroom.id))).scalar_one(),
            "timeslots": session.execute(select(func.count(Timeslot.id))).scalar_one(),
        }

    print("Demo catalog seeded successfully.")
    print(f"Department: {DEPARTMENT}, semester {SEMESTER}")
    for name, count in counts.items():
        print(f"  {name}: {count}")
    print("")
    print("Generate with:")
    print(
        '  curl -X POST localhost:8000/api/timetables/generate -H "Content-Type: application/json" '
        f'-d \'{{"academicYear": "2026-2027", "semester": {SEMESTER}, "department": "{DEPARTMENT}"}}\''
    )


if __name__ == "__main__":
    main()
