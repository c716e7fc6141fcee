import pytest

from app.schemas.generator import ObjectiveWeights
from app.services.catalog import (
    ClassroomSnapshot,
    FacultySnapshot,
    RoomRequirements,
    SubjectSnapshot,
    TimeslotSnapshot,
)
from app.services.chromosome import ChromosomeCodec, Gene
from app.services.constraint_evaluator import ConstraintEvaluator, combine_fitness


def _evaluator(catalog, weights=None):
    codec = ChromosomeCodec(catalog)
    return ConstraintEvaluator(catalog, codec.sessions, weights or ObjectiveWeights())


def _subject(subject_id, faculty=("f1",), classes=1, semester=3, **kwargs):
    return SubjectSnapshot(
        id=subject_id,
        code=subject_id.upper(),
        department="CSE",
        semester=semester,
        classes_per_week=classes,
        assigned_faculty=faculty,
        **kwargs,
    )


def test_faculty_double_booking_is_counted_and_removing_it_lowers_violations(build_catalog):
    catalog = build_catalog(
        subjects=(_subject("s1", semester=3), _subject("s2", semester=5)),
    )
    evaluator = _evaluator(catalog)

    clashing = evaluator.evaluate((Gene(0, 0, 0), Gene(0, 1, 0)))
    resolved = evaluator.evaluate((Gene(0, 0, 0), Gene(0, 1, 1)))

    assert clashing.breakdown == {"faculty_double_booking": 1}
    assert clashing.hard_violations == 1
    assert resolved.hard_violations == 0
    assert resolved.hard_violations < clashing.hard_violations
    assert resolved.fitness > clashing.fitness


def test_overlapping_timeslots_on_same_day_collide(build_catalog):
    catalog = build_catalog(
        subjects=(_subject("s1", semester=3), _subject("s2", semester=5)),
        timeslots=(
            TimeslotSnapshot(id="a", day="Monday", start_time="09:00", end_time="10:00"),
            TimeslotSnapshot(id="b", day="Monday", start_time="09:30", end_time="10:30"),
            TimeslotSnapshot(id="c", day="Tuesday", start_time="09:30", end_time="10:30"),
        ),
    )
    evaluator = _evaluator(catalog)

    assert evaluator.evaluate((Gene(0, 0, 0), Gene(0, 1, 1))).breakdown == {"faculty_double_booking": 1}
    assert evaluator.evaluate((Gene(0, 0, 0), Gene(0, 1, 2))).hard_violations == 0


def test_room_and_cohort_conflicts(build_catalog):
    catalog = build_catalog(
        subjects=(_subject("s1", faculty=("f1",)), _subject("s2", faculty=("f2",))),
    )
    evaluator = _evaluator(catalog)

    result = evaluator.evaluate((Gene(0, 0, 0), Gene(1, 0, 0)))

    assert result.breakdown == {"room_double_booking": 1, "cohort_conflict": 1}
    assert result.hard_violations == 2


def test_same_subject_sessions_in_one_slot_clash(build_catalog):
    catalog = build_catalog(subjects=(_subject("s1", classes=2),), faculty=(FacultySnapshot(id="f1"),))
    evaluator = _evaluator(catalog)

    result = evaluator.evaluate((Gene(0, 0, 3), Gene(0, 1, 3)))

    assert result.breakdown["subject_slot_clash"] == 1
    assert result.breakdown["faculty_double_booking"] == 1
    assert result.breakdown["cohort_conflict"] == 1


def test_ineligible_and_unavailable_faculty(build_catalog):
    catalog = build_catalog(
        subjects=(_subject("s1", faculty=("f1",)),),
        faculty=(
            FacultySnapshot(id="f1", availability={("Monday", "mon-1"): False}),
            FacultySnapshot(id="f2"),
        ),
    )
    evaluator = _evaluator(catalog)

    assert evaluator.evaluate((Gene(0, 0, 0),)).breakdown == {"faculty_unavailable": 1}
    assert evaluator.evaluate((Gene(1, 0, 1),)).breakdown == {"ineligible_faculty": 1}


def test_each_unmet_room_aspect_is_a_violation(build_catalog):
    catalog = build_catalog(
        subjects=(
            _subject(
                "lab",
                enrollment=50,
                requirements=RoomRequirements(
                    room_type="laboratory",
                    required_equipment=frozenset({"oscilloscope"}),
                    accessibility_needed=True,
                ),
            ),
        ),
        classrooms=(
            ClassroomSnapshot(id="small", capacity=20),
            ClassroomSnapshot(
                id="lab-1",
                capacity=60,
                room_type="laboratory",
                equipment=frozenset({"oscilloscope"}),
                accessibility=frozenset({"ground_floor"}),
            ),
        ),
    )
    evaluator = _evaluator(catalog)

    wrong_room = evaluator.evaluate((Gene(0, 0, 0),))
    right_room = evaluator.evaluate((Gene(0, 1, 0),))

    assert wrong_room.breakdown == {
        "room_capacity": 1,
        "room_type": 1,
        "room_equipment": 1,
        "room_accessibility": 1,
    }
    assert wrong_room.hard_violations == 4
    assert right_room.hard_violations == 0


def test_faculty_overload_counts_excess_hours(build_catalog):
    catalog = build_catalog(
        subjects=(_subject("s1", classes=3, duration_minutes=90),),
        faculty=(FacultySnapshot(id="f1", max_hours_per_week=2),),
    )
    evaluator = _evaluator(catalog)

    result = evaluator.evaluate((Gene(0, 0, 0), Gene(0, 0, 4), Gene(0, 0, 8)))

    # 4.5 assigned hours against a 2 hour cap.
    assert result.breakdown == {"faculty_overload": 3}


def test_soft_objectives(build_catalog):
    catalog = build_catalog(
        subjects=(_subject("s1", faculty=("f1", "f2"), classes=2),),
        faculty=(
            FacultySnapshot(id="f1", preferred_days=frozenset({"Monday"})),
            FacultySnapshot(id="f2", avoid_days=frozenset({"Monday"})),
        ),
        classrooms=(ClassroomSnapshot(id="r1", capacity=60),),
        timeslots=(
            TimeslotSnapshot(id="m1", day="Monday", start_time="09:00", end_time="10:00"),
            TimeslotSnapshot(id="m2", day="Monday", start_time="10:00", end_time="11:00"),
            TimeslotSnapshot(id="t1", day="Tuesday", start_time="09:00", end_time="10:00"),
            TimeslotSnapshot(id="t2", day="Tuesday", start_time="10:00", end_time="11:00"),
        ),
    )
    evaluator = _evaluator(catalog)

    lopsided = evaluator.evaluate((Gene(0, 0, 0), Gene(0, 0, 1)))
    balanced = evaluator.evaluate((Gene(0, 0, 0), Gene(1, 0, 2)))

    assert lopsided.classroom_utilization == pytest.approx(50.0)
    assert lopsided.faculty_workload_balance == pytest.approx(0.0)
    assert lopsided.preference_satisfaction == pytest.approx(100.0)
    assert lopsided.day_spread == pytest.approx(0.0)

    assert balanced.faculty_workload_balance == pytest.approx(100.0)
    assert balanced.preference_satisfaction == pytest.approx(50.0)
    assert balanced.day_spread == pytest.approx(100.0)
    assert balanced.soft_score > lopsided.soft_score


def test_zero_weights_give_zero_soft_score(build_catalog):
    weights = ObjectiveWeights(utilization=0, workload_balance=0, preference=0, day_spread=0)
    evaluator = _evaluator(build_catalog(), weights)

    result = evaluator.evaluate((Gene(0, 0, 0), Gene(0, 0, 4), Gene(1, 1, 1), Gene(1, 1, 5)))

    assert result.soft_score == 0.0
    assert result.fitness == 0.0


@pytest.mark.parametrize(
    "weights",
    [
        ObjectiveWeights(),
        ObjectiveWeights(utilization=1000, workload_balance=0, preference=0, day_spread=0, hard_penalty=100.01),
        ObjectiveWeights(utilization=0, workload_balance=0, preference=0, day_spread=0),
        ObjectiveWeights(preference=1, day_spread=999, hard_penalty=250),
    ],
)
def test_fewer_hard_violations_always_rank_higher(weights):
    for hard in range(0, 5):
        assert combine_fitness(hard, 0.0, weights) > combine_fitness(hard + 1, 100.0, weights)


def test_hard_priority_holds_for_evaluated_chromosomes(build_catalog):
    weights = ObjectiveWeights(utilization=1000, workload_balance=0, preference=0, day_spread=0, hard_penalty=101)
    evaluator = _evaluator(build_catalog(), weights)

    # Spreads over both rooms (better utilization) but double-books f1.
    crowded = evaluator.evaluate((Gene(0, 0, 0), Gene(0, 1, 0), Gene(1, 0, 6), Gene(1, 1, 7)))
    clean = evaluator.evaluate((Gene(0, 0, 0), Gene(0, 0, 4), Gene(1, 0, 1), Gene(1, 0, 5)))

    assert crowded.hard_violations > clean.hard_violations == 0
    assert clean.fitness > crowded.fitness
    assert clean.is_better_than(crowded)
