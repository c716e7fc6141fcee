from __future__ import annotations

import logging

from sqlalchemy import inspect

from app.db.base import Base
from app.db.session import engine

logger = logging.getLogger(__name__)

REQUIRED_TABLES: set[str] = {"subjects", "faculty", "classrooms", "timeslots", "timetables"}


def ensure_schema() -> None:
    with engine.begin() as connection:
        existing = set(inspect(connection).get_table_names())
        missing = sorted(REQUIRED_TABLES - existing)
        if not missing:
            return
        logger.info("Creating missing tables: %s", ", ".join(missing))
        Base.metadata.create_all(bind=connection)
