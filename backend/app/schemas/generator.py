from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ObjectiveWeights(BaseModel):
    """Relative weights of the soft objectives and the per-violation penalty.

    Every soft objective is normalized to [0, 100] before weighting, so the
    weighted soft score also lies in [0, 100]. ``hard_penalty`` must exceed
    that range: one extra hard violation then always costs more than the
    largest possible soft gain.
    """

    model_config = ConfigDict(populate_by_name=True)

    utilization: float = Field(default=30.0, ge=0.0, le=1000.0)
    workload_balance: float = Field(default=30.0, ge=0.0, le=1000.0, alias="workloadBalance")
    preference: float = Field(default=20.0, ge=0.0, le=1000.0)
    day_spread: float = Field(default=20.0, ge=0.0, le=1000.0, alias="daySpread")
    hard_penalty: float = Field(default=1000.0, gt=100.0, le=1_000_000.0, alias="hardPenalty")

    @property
    def soft_total(self) -> float:
        return self.utilization + self.workload_balance + self.preference + self.day_spread


class GenerationSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    population_size: int = Field(default=50, ge=10, le=200, alias="populationSize")
    max_generations: int = Field(default=100, ge=10, le=500, alias="maxGenerations")
    mutation_rate: float = Field(default=0.1, ge=0.0, le=1.0, alias="mutationRate")
    crossover_rate: float = Field(default=1.0, ge=0.0, le=1.0, alias="crossoverRate")
    elite_count: int = Field(default=2, ge=1, le=50, alias="eliteCount")
    tournament_size: int = Field(default=3, ge=2, le=10, alias="tournamentSize")
    patience: int = Field(default=20, ge=1, le=500)
    random_seed: int | None = Field(default=None, ge=0, le=2_147_483_647, alias="randomSeed")
    timeout_seconds: float | None = Field(default=None, gt=0.0, le=3600.0, alias="timeoutSeconds")
    evaluation_workers: int | None = Field(default=None, ge=0, le=64, alias="evaluationWorkers")
    objective_weights: ObjectiveWeights = Field(default_factory=ObjectiveWeights, alias="objectiveWeights")

    @model_validator(mode="after")
    def validate_relationships(self) -> "GenerationSettings":
        if self.elite_count >= self.population_size:
            raise ValueError("eliteCount must be less than populationSize")
        if self.tournament_size > self.population_size:
            raise ValueError("tournamentSize cannot exceed populationSize")
        return self


class GenerateTimetableRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    academic_year: str = Field(min_length=4, max_length=20, alias="academicYear")
    semester: int = Field(ge=1, le=8)
    department: str = Field(min_length=1, max_length=200)
    config: GenerationSettings = Field(default_factory=GenerationSettings)


class TimetableMetrics(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    classroom_utilization: float = Field(alias="classroomUtilization")
    faculty_workload_balance: float = Field(alias="facultyWorkloadBalance")
    conflict_count: int = Field(ge=0, alias="conflictCount")
    preference_satisfaction: float = Field(alias="preferenceSatisfaction")


class GenerateTimetableResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    timetable_id: str = Field(alias="timetableId")
    generation: int
    fitness: float
    metrics: TimetableMetrics
