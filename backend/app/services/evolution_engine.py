"""Genetic search over chromosomes produced by :class:`ChromosomeCodec`.

The loop is strictly sequential; only fitness evaluation of a generation is
fanned out to a process pool. All randomness flows from one seeded
``random.Random`` owned by the run, so a fixed seed reproduces a run exactly.
"""

from __future__ import annotations

import contextlib
import logging
import os
import random
import secrets
import threading
import time
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Iterator, Sequence

from app.core.exceptions import InternalInvariantError
from app.schemas.generator import GenerationSettings
from app.services.chromosome import Chromosome, ChromosomeCodec
from app.services.constraint_evaluator import ConstraintEvaluator, EvaluationResult

logger = logging.getLogger(__name__)

# Below this many genes per generation, pool overhead outweighs the gain.
PARALLEL_MIN_GENES = 4000

_worker_evaluator: ConstraintEvaluator | None = None


def _init_worker(evaluator: ConstraintEvaluator) -> None:
    global _worker_evaluator
    _worker_evaluator = evaluator


def _evaluate_in_worker(chromosome: Chromosome) -> EvaluationResult:
    if _worker_evaluator is None:
        raise InternalInvariantError(message="Worker process was not initialized with an evaluator")
    return _worker_evaluator.evaluate(chromosome)


@dataclass(frozen=True)
class GenerationStats:
    generation: int
    best_fitness: float
    best_hard_violations: int
    best_soft_score: float
    mean_fitness: float


@dataclass
class EngineResult:
    chromosome: Chromosome
    evaluation: EvaluationResult
    generation: int
    best_generation: int
    seed: int
    history: list[GenerationStats] = field(default_factory=list)
    cancelled: bool = False
    timed_out: bool = False
    early_stopped: bool = False


class GeneticEngine:
    def __init__(
        self,
        codec: ChromosomeCodec,
        evaluator: ConstraintEvaluator,
        settings: GenerationSettings,
        workers: int | None = None,
    ) -> None:
        self.codec = codec
        self.evaluator = evaluator
        self.settings = settings
        self.workers = self._resolve_workers(settings.evaluation_workers, workers)
        self.eval_cache: dict[Chromosome, EvaluationResult] = {}

    @staticmethod
    def _resolve_workers(requested: int | None, fallback: int | None) -> int:
        if requested:
            return requested
        if fallback:
            return fallback
        return os.cpu_count() or 1

    @contextlib.contextmanager
    def _evaluation_pool(self) -> Iterator[ProcessPoolExecutor | None]:
        genes_per_generation = self.settings.population_size * self.codec.length
        if self.workers <= 1 or genes_per_generation < PARALLEL_MIN_GENES:
            yield None
            return
        logger.debug("Evaluating fitness with %s worker processes", self.workers)
        with ProcessPoolExecutor(
            max_workers=self.workers,
            initializer=_init_worker,
            initargs=(self.evaluator,),
        ) as pool:
            yield pool

    def _evaluate_population(
        self,
        population: Sequence[Chromosome],
        pool: ProcessPoolExecutor | None,
    ) -> list[EvaluationResult]:
        pending = list(dict.fromkeys(item for item in population if item not in self.eval_cache))
        if pending:
            if pool is None:
                results = [self.evaluator.evaluate(item) for item in pending]
            else:
                chunksize = max(1, len(pending) // (self.workers * 4))
                results = list(pool.map(_evaluate_in_worker, pending, chunksize=chunksize))
            self.eval_cache.update(zip(pending, results))
        return [self.eval_cache[item] for item in population]

    def _select(
        self,
        population: Sequence[Chromosome],
        evaluations: Sequence[EvaluationResult],
        rng: random.Random,
    ) -> Chromosome:
        contenders = rng.sample(range(len(population)), self.settings.tournament_size)
        best_index = max(contenders, key=lambda idx: evaluations[idx].fitness)
        return population[best_index]

    def _crossover(self, parent_a: Chromosome, parent_b: Chromosome, rng: random.Random) -> Chromosome:
        return tuple(gene_a if rng.random() < 0.5 else gene_b for gene_a, gene_b in zip(parent_a, parent_b))

    def _mutate(self, chromosome: Chromosome, rng: random.Random) -> Chromosome:
        rate = self.settings.mutation_rate
        if rate <= 0:
            return chromosome
        mutated = list(chromosome)
        for index in range(len(mutated)):
            if rng.random() < rate:
                mutated[index] = self.codec.random_gene(index, rng)
        return tuple(mutated)

    def _next_population(
        self,
        ranked_population: Sequence[Chromosome],
        ranked_evaluations: Sequence[EvaluationResult],
        rng: random.Random,
    ) -> list[Chromosome]:
        next_population = list(ranked_population[: self.settings.elite_count])
        while len(next_population) < self.settings.population_size:
            parent_a = self._select(ranked_population, ranked_evaluations, rng)
            parent_b = self._select(ranked_population, ranked_evaluations, rng)
            if rng.random() < self.settings.crossover_rate:
                child = self._crossover(parent_a, parent_b, rng)
            else:
                child = parent_a
            next_population.append(self._mutate(child, rng))
        return next_population

    def run(
        self,
        cancel_event: threading.Event | None = None,
        on_generation: Callable[[GenerationStats], None] | None = None,
    ) -> EngineResult:
        settings = self.settings
        seed = settings.random_seed if settings.random_seed is not None else secrets.randbits(31)
        rng = random.Random(seed)
        deadline = (
            time.monotonic() + settings.timeout_seconds if settings.timeout_seconds is not None else None
        )
        logger.info(
            "Starting genetic search: sessions=%s population=%s max_generations=%s seed=%s",
            self.codec.length,
            settings.population_size,
            settings.max_generations,
            seed,
        )

        population = [self.codec.encode(rng) for _ in range(settings.population_size)]
        best_chromosome: Chromosome | None = None
        best_evaluation: EvaluationResult | None = None
        best_generation = 0
        stagnant = 0
        history: list[GenerationStats] = []
        cancelled = timed_out = early_stopped = False
        generation = 0

        with self._evaluation_pool() as pool:
            while True:
                evaluations = self._evaluate_population(population, pool)
                ranked_indices = sorted(
                    range(len(population)), key=lambda idx: evaluations[idx].fitness, reverse=True
                )
                ranked_population = [population[idx] for idx in ranked_indices]
                ranked_evaluations = [evaluations[idx] for idx in ranked_indices]

                leader = ranked_evaluations[0]
                if best_evaluation is None or leader.is_better_than(best_evaluation):
                    best_chromosome = ranked_population[0]
                    best_evaluation = leader
                    best_generation = generation
                    stagnant = 0
                else:
                    stagnant += 1

                stats = GenerationStats(
                    generation=generation,
                    best_fitness=leader.fitness,
                    best_hard_violations=leader.hard_violations,
                    best_soft_score=leader.soft_score,
                    mean_fitness=sum(item.fitness for item in evaluations) / len(evaluations),
                )
                history.append(stats)
                if generation % 10 == 0:
                    logger.debug(
                        "Generation %s: best_fitness=%.3f hard=%s soft=%.3f",
                        generation,
                        stats.best_fitness,
                        stats.best_hard_violations,
                        stats.best_soft_score,
                    )
                if on_generation is not None:
                    on_generation(stats)

                if cancel_event is not None and cancel_event.is_set():
                    cancelled = True
                    break
                if deadline is not None and time.monotonic() >= deadline:
                    timed_out = True
                    break
                if best_evaluation.hard_violations == 0 and stagnant >= settings.patience:
                    early_stopped = True
                    break
                if generation >= settings.max_generations:
                    break

                population = self._next_population(ranked_population, ranked_evaluations, rng)
                generation += 1

        if cancelled:
            reason = "cancelled"
        elif timed_out:
            reason = "timed out"
        elif early_stopped:
            reason = "converged"
        else:
            reason = "generation limit reached"
        logger.info(
            "Genetic search %s at generation %s: best_fitness=%.3f hard=%s (found at generation %s)",
            reason,
            generation,
            best_evaluation.fitness,
            best_evaluation.hard_violations,
            best_generation,
        )

        return EngineResult(
            chromosome=best_chromosome,
            evaluation=best_evaluation,
            generation=generation,
            best_generation=best_generation,
            seed=seed,
            history=history,
            cancelled=cancelled,
            timed_out=timed_out,
            early_stopped=early_stopped,
        )
