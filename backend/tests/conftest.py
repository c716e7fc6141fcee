import os

# Keep the app's own engine in memory and fitness evaluation in-process.
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite://")
os.environ.setdefault("GENERATION_WORKERS", "1")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.api.deps import get_db  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.main import app  # noqa: E402
from app.services.catalog import (  # noqa: E402
    CatalogSnapshot,
    ClassroomSnapshot,
    FacultySnapshot,
    SubjectSnapshot,
    TimeslotSnapshot,
)

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")
HOURS = (("09:00", "10:00"), ("10:00", "11:00"), ("11:00", "12:00"), ("13:00", "14:00"))


@pytest.fixture()
def test_engine():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db_session(test_engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(test_engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def _weekly_timeslots(days=WEEKDAYS, hours=HOURS) -> tuple[TimeslotSnapshot, ...]:
    return tuple(
        TimeslotSnapshot(id=f"{day[:3].lower()}-{index}", day=day, start_time=start, end_time=end)
        for day in days
        for index, (start, end) in enumerate(hours, start=1)
    )


@pytest.fixture()
def build_catalog():
    """Factory for snapshot catalogs; every argument overrides a small feasible default."""

    def _build(
        *,
        subjects=None,
        faculty=None,
        classrooms=None,
        timeslots=None,
        department: str = "CSE",
        semester: int = 3,
    ) -> CatalogSnapshot:
        if subjects is None:
            subjects = (
                SubjectSnapshot(
                    id="s1",
                    code="CS201",
                    department=department,
                    semester=semester,
                    classes_per_week=2,
                    assigned_faculty=("f1",),
                    enrollment=40,
                ),
                SubjectSnapshot(
                    id="s2",
                    code="CS202",
                    department=department,
                    semester=semester,
                    classes_per_week=2,
                    assigned_faculty=("f2",),
                    enrollment=40,
                ),
            )
        if faculty is None:
            faculty = (FacultySnapshot(id="f1", name="Ada"), FacultySnapshot(id="f2", name="Grace"))
        if classrooms is None:
            classrooms = (ClassroomSnapshot(id="r1", capacity=60), ClassroomSnapshot(id="r2", capacity=60))
        if timeslots is None:
            timeslots = _weekly_timeslots()
        return CatalogSnapshot(
            department=department,
            semester=semester,
            subjects=tuple(subjects),
            faculty=tuple(faculty),
            classrooms=tuple(classrooms),
            timeslots=tuple(timeslots),
        )

    return _build
