from __future__ import annotations

from dataclasses import dataclass, field

from app.core.exceptions import InternalInvariantError
from app.schemas.generator import TimetableMetrics
from app.services.chromosome import ChromosomeCodec, TimetableEntry
from app.services.constraint_evaluator import ConstraintEvaluator
from app.services.evolution_engine import EngineResult


@dataclass
class GeneratedTimetable:
    entries: list[TimetableEntry]
    metrics: TimetableMetrics
    generation: int
    fitness: float
    hard_violations: int
    seed: int
    best_generation: int = 0
    violation_breakdown: dict[str, int] = field(default_factory=dict)
    cancelled: bool = False
    timed_out: bool = False

    def entry_payloads(self) -> list[dict]:
        return [entry.as_payload() for entry in self.entries]


def assemble_result(
    codec: ChromosomeCodec,
    evaluator: ConstraintEvaluator,
    engine_result: EngineResult,
) -> GeneratedTimetable:
    """Decode the winning chromosome and recompute its metrics from scratch."""
    entries = codec.decode(engine_result.chromosome)
    expected = codec.catalog.session_count
    if len(entries) != expected:
        raise InternalInvariantError(
            message="Decoded timetable does not cover every required session",
            details={"entries": len(entries), "sessions": expected},
        )

    evaluation = evaluator.evaluate(engine_result.chromosome)
    metrics = TimetableMetrics(
        classroom_utilization=round(evaluation.classroom_utilization, 2),
        faculty_workload_balance=round(evaluation.faculty_workload_balance, 2),
        conflict_count=evaluation.hard_violations,
        preference_satisfaction=round(evaluation.preference_satisfaction, 2),
    )
    return GeneratedTimetable(
        entries=entries,
        metrics=metrics,
        generation=engine_result.generation,
        fitness=evaluation.fitness,
        hard_violations=evaluation.hard_violations,
        seed=engine_result.seed,
        best_generation=engine_result.best_generation,
        violation_breakdown=dict(evaluation.breakdown),
        cancelled=engine_result.cancelled,
        timed_out=engine_result.timed_out,
    )
