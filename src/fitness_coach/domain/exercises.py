"""Exercise and workout domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ExerciseRecord:
    """Exercise from the external exercise catalog."""

    id: int | None
    name: str
    description: str
    muscles: tuple[str, ...]
    muscles_secondary: tuple[str, ...]
    equipment: tuple[str, ...]
    category: str
    equipment_ids: tuple[int, ...] = ()


@dataclass(frozen=True)
class TrainingVolume:
    """Sets, rep range and rest period for a workout."""

    sets: int
    min_reps: int
    max_reps: int
    rest_seconds: int


@dataclass(frozen=True)
class WorkoutRecommendation:
    """Exercises and volume selected for a user."""

    muscle_group: str
    fitness_level: str
    exercises: list[ExerciseRecord]
    volume: TrainingVolume


@dataclass(frozen=True)
class WorkoutDay:
    """Single day of a weekly workout plan."""

    focus: str
    exercises: list[ExerciseRecord]
