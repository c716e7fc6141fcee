import pytest

from app.core.exceptions import InternalInvariantError
from app.schemas.generator import GenerationSettings
from app.services.chromosome import ChromosomeCodec
from app.services.constraint_evaluator import ConstraintEvaluator
from app.services.evolution_engine import GeneticEngine
from app.services.result_assembler import assemble_result


def _run(catalog):
    settings = GenerationSettings(population_size=10, max_generations=10, random_seed=3)
    codec = ChromosomeCodec(catalog)
    evaluator = ConstraintEvaluator(catalog, codec.sessions, settings.objective_weights)
    return codec, evaluator, GeneticEngine(codec, evaluator, settings, workers=1).run()


def test_assembled_result_covers_every_session(build_catalog):
    catalog = build_catalog()
    codec, evaluator, engine_result = _run(catalog)

    result = assemble_result(codec, evaluator, engine_result)

    assert len(result.entries) == catalog.session_count
    assert result.generation == engine_result.generation
    assert result.seed == 3
    assert result.metrics.conflict_count == engine_result.evaluation.hard_violations
    assert result.hard_violations == result.metrics.conflict_count
    assert result.fitness == pytest.approx(engine_result.evaluation.fitness)
    assert 0.0 <= result.metrics.classroom_utilization <= 100.0
    assert [payload["entryId"] for payload in result.entry_payloads()] == [
        "CS201-1",
        "CS201-2",
        "CS202-1",
        "CS202-2",
    ]


def test_metrics_serialize_with_camel_case_keys(build_catalog):
    codec, evaluator, engine_result = _run(build_catalog())

    metrics = assemble_result(codec, evaluator, engine_result).metrics.model_dump(by_alias=True)

    assert set(metrics) == {
        "classroomUtilization",
        "facultyWorkloadBalance",
        "conflictCount",
        "preferenceSatisfaction",
    }


def test_truncated_winner_is_an_internal_error(build_catalog):
    codec, evaluator, engine_result = _run(build_catalog())
    engine_result.chromosome = engine_result.chromosome[:-1]

    with pytest.raises(InternalInvariantError):
        assemble_result(codec, evaluator, engine_result)
