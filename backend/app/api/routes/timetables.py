import logging
from time import perf_counter

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.core.config import get_settings
from app.core.exceptions import ResourceNotFoundError
from app.models.timetable import Timetable
from app.schemas.generator import GenerateTimetableRequest, GenerateTimetableResponse, TimetableMetrics
from app.schemas.timetable import TimetableEntryOut, TimetableOut
from app.services.catalog import load_catalog
from app.services.timetable_generation import generate_timetable, persist_generated_timetable

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/generate", response_model=GenerateTimetableResponse, status_code=status.HTTP_201_CREATED)
def generate(payload: GenerateTimetableRequest, db: Session = Depends(get_db)) -> GenerateTimetableResponse:
    started = perf_counter()
    app_settings = get_settings()
    config = payload.config
    if config.timeout_seconds is None:
        config = config.model_copy(update={"timeout_seconds": app_settings.generation_timeout_seconds})

    logger.info(
        "TIMETABLE GENERATION START | department=%s | semester=%s | academic_year=%s | population=%s | generations=%s",
        payload.department,
        payload.semester,
        payload.academic_year,
        config.population_size,
        config.max_generations,
    )
    try:
        catalog = load_catalog(db, department=payload.department, semester=payload.semester)
        result = generate_timetable(catalog, config, workers=app_settings.generation_workers)
        timetable = persist_generated_timetable(
            db,
            academic_year=payload.academic_year,
            semester=payload.semester,
            department=payload.department,
            result=result,
        )
    except Exception:
        logger.exception(
            "TIMETABLE GENERATION FAILED | department=%s | semester=%s | wall_ms=%s",
            payload.department,
            payload.semester,
            int((perf_counter() - started) * 1000),
        )
        raise

    logger.info(
        "TIMETABLE GENERATION COMPLETE | timetable_id=%s | generation=%s | conflicts=%s | timed_out=%s | wall_ms=%s",
        timetable.id,
        result.generation,
        result.metrics.conflict_count,
        result.timed_out,
        int((perf_counter() - started) * 1000),
    )
    return GenerateTimetableResponse(
        timetable_id=timetable.id,
        generation=result.generation,
        fitness=result.fitness,
        metrics=result.metrics,
    )


@router.get("/{timetable_id}", response_model=TimetableOut)
def get_timetable(timetable_id: str, db: Session = Depends(get_db)) -> TimetableOut:
    timetable = db.get(Timetable, timetable_id)
    if timetable is None:
        raise ResourceNotFoundError("Timetable", timetable_id)
    return TimetableOut(
        id=timetable.id,
        code=timetable.code,
        name=timetable.name,
        academic_year=timetable.academic_year,
        semester=timetable.semester,
        department=timetable.department,
        status=timetable.status,
        generation=timetable.generation,
        fitness=timetable.fitness,
        random_seed=timetable.random_seed,
        metrics=TimetableMetrics.model_validate(timetable.metrics),
        entries=[TimetableEntryOut.model_validate(entry) for entry in timetable.entries],
        created_at=timetable.created_at,
    )
