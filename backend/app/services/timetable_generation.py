"""Entry points that wire the catalog, codec, evaluator, engine and assembler.

``generate_timetable`` is pure computation over a catalog snapshot;
``persist_generated_timetable`` is the only place a generated result touches
the database.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Mapping

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from app.core.exceptions import ValidationError
from app.models.timetable import Timetable, TimetableStatus
from app.schemas.generator import GenerationSettings
from app.services.catalog import CatalogSnapshot, validate_catalog
from app.services.chromosome import ChromosomeCodec
from app.services.constraint_evaluator import ConstraintEvaluator
from app.services.evolution_engine import GenerationStats, GeneticEngine
from app.services.result_assembler import GeneratedTimetable, assemble_result

logger = logging.getLogger(__name__)


def resolve_settings(raw: GenerationSettings | Mapping[str, Any] | None) -> GenerationSettings:
    if isinstance(raw, GenerationSettings):
        return raw
    try:
        return GenerationSettings.model_validate(dict(raw or {}))
    except PydanticValidationError as exc:
        raise ValidationError(
            message="Invalid generation settings",
            details={"errors": exc.errors(include_url=False, include_context=False, include_input=False)},
        ) from exc


def generate_timetable(
    catalog: CatalogSnapshot,
    settings: GenerationSettings | Mapping[str, Any] | None = None,
    *,
    cancel_event: threading.Event | None = None,
    on_generation: Callable[[GenerationStats], None] | None = None,
    workers: int | None = None,
) -> GeneratedTimetable:
    resolved = resolve_settings(settings)
    validate_catalog(catalog)

    codec = ChromosomeCodec(catalog)
    evaluator = ConstraintEvaluator(catalog, codec.sessions, resolved.objective_weights)
    engine = GeneticEngine(codec, evaluator, resolved, workers=workers)

    logger.info(
        "Generating timetable for %s semester %s: subjects=%s faculty=%s classrooms=%s timeslots=%s",
        catalog.department,
        catalog.semester,
        len(catalog.subjects),
        len(catalog.faculty),
        len(catalog.classrooms),
        len(catalog.timeslots),
    )
    result = assemble_result(codec, evaluator, engine.run(cancel_event=cancel_event, on_generation=on_generation))
    if result.hard_violations:
        logger.warning(
            "Best timetable for %s semester %s still has %s hard violations: %s",
            catalog.department,
            catalog.semester,
            result.hard_violations,
            result.violation_breakdown,
        )
    else:
        logger.info(
            "Generated conflict-free timetable for %s semester %s at generation %s",
            catalog.department,
            catalog.semester,
            result.generation,
        )
    return result


def persist_generated_timetable(
    db: Session,
    *,
    academic_year: str,
    semester: int,
    department: str,
    result: GeneratedTimetable,
) -> Timetable:
    created_ms = int(time.time() * 1000)
    timetable = Timetable(
        code=f"TT-{academic_year}-{semester}-{department}-{created_ms}",
        name=f"Timetable {academic_year} Semester {semester}",
        academic_year=academic_year,
        semester=semester,
        department=department,
        status=TimetableStatus.generated,
        entries=result.entry_payloads(),
        metrics=result.metrics.model_dump(by_alias=True),
        generation=result.generation,
        fitness=result.fitness,
        random_seed=result.seed,
    )
    db.add(timetable)
    db.commit()
    db.refresh(timetable)
    logger.info("Stored generated timetable %s (%s entries)", timetable.code, len(timetable.entries))
    return timetable
