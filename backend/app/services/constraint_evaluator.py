from __future__ import annotations

import math
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Sequence

from app.schemas.generator import ObjectiveWeights
from app.services.catalog import CatalogSnapshot, unmet_room_requirements
from app.services.chromosome import Gene, Session

HARD_CONSTRAINTS = (
    "faculty_double_booking",
    "room_double_booking",
    "cohort_conflict",
    "ineligible_faculty",
    "faculty_unavailable",
    "room_capacity",
    "room_type",
    "room_equipment",
    "room_accessibility",
    "faculty_overload",
    "subject_slot_clash",
)

_HOURS_EPSILON = 1e-9


@dataclass(frozen=True)
class EvaluationResult:
    hard_violations: int
    soft_score: float
    fitness: float
    classroom_utilization: float
    faculty_workload_balance: float
    preference_satisfaction: float
    day_spread: float
    breakdown: dict[str, int] = field(default_factory=dict, hash=False, compare=False)

    def is_better_than(self, other: "EvaluationResult") -> bool:
        if self.hard_violations != other.hard_violations:
            return self.hard_violations < other.hard_violations
        return self.soft_score > other.soft_score


def combine_fitness(hard_violations: int, soft_score: float, weights: ObjectiveWeights) -> float:
    """Single selection scalar; ``hard_penalty`` > 100 keeps hard violations dominant."""
    return soft_score - weights.hard_penalty * hard_violations


class ConstraintEvaluator:
    """Scores chromosomes against the hard constraints and soft objectives.

    Everything that depends only on the catalog (slot collisions, room
    suitability, availability, preferences) is tabulated once in the
    constructor, so ``evaluate`` only walks the genes. Instances hold plain
    tuples and dicts and can be pickled into worker processes.
    """

    def __init__(
        self,
        catalog: CatalogSnapshot,
        sessions: Sequence[Session],
        weights: ObjectiveWeights | None = None,
    ) -> None:
        self.weights = weights or ObjectiveWeights()
        self.sessions = tuple(sessions)
        self.slot_count = len(catalog.timeslots)
        self.room_count = len(catalog.classrooms)
        self.slot_days = tuple(slot.day for slot in catalog.timeslots)

        self.slot_collisions = tuple(
            frozenset(
                other_index
                for other_index, other in enumerate(catalog.timeslots)
                if slot.collides_with(other)
            )
            for slot in catalog.timeslots
        )
        self.has_partial_overlaps = any(len(collisions) > 1 for collisions in self.slot_collisions)

        self.session_subject = tuple(session.subject_index for session in self.sessions)
        cohort_ids: dict[tuple[str, int], int] = {}
        self.subject_cohort = tuple(
            cohort_ids.setdefault(subject.cohort, len(cohort_ids)) for subject in catalog.subjects
        )
        self.session_hours = tuple(
            catalog.subjects[session.subject_index].duration_minutes / 60.0 for session in self.sessions
        )
        self.session_eligible_faculty = tuple(frozenset(session.faculty_candidates) for session in self.sessions)
        self.room_unmet = tuple(
            tuple(tuple(unmet_room_requirements(room, subject)) for room in catalog.classrooms)
            for subject in catalog.subjects
        )
        self.faculty_available = tuple(
            tuple(member.is_available(slot.day, slot.id) for slot in catalog.timeslots)
            for member in catalog.faculty
        )
        self.faculty_prefers = tuple(
            tuple(member.prefers(slot.day, slot.id) for slot in catalog.timeslots)
            for member in catalog.faculty
        )
        self.faculty_max_hours = tuple(float(member.max_hours_per_week) for member in catalog.faculty)

        faculty_ids = {member.id: index for index, member in enumerate(catalog.faculty)}
        self.balance_faculty = tuple(
            sorted(
                {
                    faculty_ids[faculty_id]
                    for subject in catalog.subjects
                    for faculty_id in subject.assigned_faculty
                    if faculty_id in faculty_ids
                }
            )
        )

    def _colliding_pairs(self, slots: list[int]) -> int:
        if len(slots) < 2:
            return 0
        if not self.has_partial_overlaps:
            return sum(count * (count - 1) // 2 for count in Counter(slots).values())
        pairs = 0
        for left_index, left in enumerate(slots):
            collisions = self.slot_collisions[left]
            for right in slots[left_index + 1 :]:
                if right in collisions:
                    pairs += 1
        return pairs

    def _workload_balance(self, hours: list[float]) -> float:
        loads = [hours[index] for index in self.balance_faculty]
        count = len(loads)
        total = sum(loads)
        if count <= 1 or total <= 0:
            return 100.0
        mean = total / count
        variance = sum((load - mean) ** 2 for load in loads) / count
        # CV of n non-negative values peaks at sqrt(n - 1).
        normalized_cv = min(1.0, math.sqrt(variance) / mean / math.sqrt(count - 1))
        return 100.0 * (1.0 - normalized_cv)

    def _day_spread(self, genes: Sequence[Gene]) -> float:
        if not genes:
            return 100.0
        day_counts: Counter[tuple[int, str]] = Counter(
            (self.session_subject[index], self.slot_days[gene.timeslot]) for index, gene in enumerate(genes)
        )
        isolated = sum(1 for count in day_counts.values() if count == 1)
        return 100.0 * isolated / len(genes)

    def evaluate(self, genes: Sequence[Gene]) -> EvaluationResult:
        breakdown: Counter[str] = Counter()
        faculty_slots: dict[int, list[int]] = defaultdict(list)
        room_slots: dict[int, list[int]] = defaultdict(list)
        cohort_slots: dict[int, list[int]] = defaultdict(list)
        subject_slots: dict[int, list[int]] = defaultdict(list)
        hours = [0.0] * len(self.faculty_max_hours)
        used_room_slots: set[tuple[int, int]] = set()
        preferred = 0

        for index, gene in enumerate(genes):
            subject_index = self.session_subject[index]
            faculty_slots[gene.faculty].append(gene.timeslot)
            room_slots[gene.classroom].append(gene.timeslot)
            cohort_slots[self.subject_cohort[subject_index]].append(gene.timeslot)
            subject_slots[subject_index].append(gene.timeslot)

            if gene.faculty not in self.session_eligible_faculty[index]:
                breakdown["ineligible_faculty"] += 1
            if not self.faculty_available[gene.faculty][gene.timeslot]:
                breakdown["faculty_unavailable"] += 1
            for aspect in self.room_unmet[subject_index][gene.classroom]:
                breakdown[aspect] += 1

            hours[gene.faculty] += self.session_hours[index]
            used_room_slots.add((gene.classroom, gene.timeslot))
            if self.faculty_prefers[gene.faculty][gene.timeslot]:
                preferred += 1

        breakdown["faculty_double_booking"] += sum(self._colliding_pairs(s) for s in faculty_slots.values())
        breakdown["room_double_booking"] += sum(self._colliding_pairs(s) for s in room_slots.values())
        breakdown["cohort_conflict"] += sum(self._colliding_pairs(s) for s in cohort_slots.values())
        breakdown["subject_slot_clash"] += sum(self._colliding_pairs(s) for s in subject_slots.values())

        for faculty_index, assigned in enumerate(hours):
            excess = assigned - self.faculty_max_hours[faculty_index]
            if excess > _HOURS_EPSILON:
                breakdown["faculty_overload"] += math.ceil(excess - _HOURS_EPSILON)

        hard_violations = sum(breakdown.values())

        capacity = self.room_count * self.slot_count
        utilization = 100.0 * len(used_room_slots) / capacity if capacity else 0.0
        balance = self._workload_balance(hours)
        preference = 100.0 * preferred / len(genes) if genes else 100.0
        spread = self._day_spread(genes)

        weights = self.weights
        soft_total = weights.soft_total
        if soft_total > 0:
            soft_score = (
                weights.utilization * utilization
                + weights.workload_balance * balance
                + weights.preference * preference
                + weights.day_spread * spread
            ) / soft_total
        else:
            soft_score = 0.0

        return EvaluationResult(
            hard_violations=hard_violations,
            soft_score=soft_score,
            fitness=combine_fitness(hard_violations, soft_score, weights),
            classroom_utilization=utilization,
            faculty_workload_balance=balance,
            preference_satisfaction=preference,
            day_spread=spread,
            breakdown={name: breakdown[name] for name in HARD_CONSTRAINTS if breakdown[name]},
        )
