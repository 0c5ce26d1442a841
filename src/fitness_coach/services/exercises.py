"""Exercise lookups and workout assembly backed by WGER."""

import asyncio
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

import httpx

from fitness_coach.adapters.wger_client import ENGLISH_LANGUAGE_ID, WgerClient
from fitness_coach.domain.errors import ExerciseLookupError
from fitness_coach.domain.exercises import (
    ExerciseRecord,
    TrainingVolume,
    WorkoutDay,
    WorkoutRecommendation,
)
from fitness_coach.domain.profile import UserProfile

_HTML_TAG = re.compile(r"<[^>]*>?")

FULL_BODY_MUSCLE_IDS = (1, 2, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15)

MUSCLE_GROUP_IDS: dict[str, tuple[int, ...]] = {
    "full body": FULL_BODY_MUSCLE_IDS,
    "upper body": (1, 2, 4, 5, 6, 8, 9, 10, 11, 12, 13),
    "lower body": (7, 8, 10, 14, 15),
    "core": (6, 14),
    "arms": (1, 5, 13),
    "chest": (4, 9),
    "back": (3, 12),
    "shoulders": (2, 9),
    "legs": (7, 8, 10, 15),
    "glutes": (8,),
    "abs": (6,),
    "biceps": (1,),
    "triceps": (5,),
    "forearms": (13,),
    "quads": (10,),
    "hamstrings": (11,),
    "calves": (7,),
}

BODYWEIGHT_EQUIPMENT_ID = 7

EQUIPMENT_IDS: dict[str, tuple[int, ...]] = {
    "bodyweight only": (BODYWEIGHT_EQUIPMENT_ID,),
    "dumbbells": (3,),
    "barbell": (1,),
    "machines": (4, 5, 6, 10),
    "resistance bands": (9,),
    "kettlebells": (10,),
    "trx/suspension": (6,),
    "medicine ball": (2,),
    "stability ball": (8,),
}

WEEKLY_SPLITS: dict[int, tuple[tuple[str, ...], ...]] = {
    3: (("chest", "triceps", "shoulders"), ("back", "biceps"), ("legs", "abs")),
    4: (
        ("chest", "triceps"),
        ("back", "biceps"),
        ("shoulders", "abs"),
        ("legs", "calves"),
    ),
    5: (("chest",), ("back",), ("legs",), ("shoulders",), ("arms", "abs")),
    6: (("chest",), ("back",), ("legs",), ("shoulders",), ("arms",), ("abs", "calves")),
}

DEFAULT_WEEKLY_PLAN = [
    WorkoutDay(
        focus="general",
        exercises=[
            ExerciseRecord(
                id=None,
                name="Push-ups",
                description="Basic bodyweight exercise for chest and triceps",
                muscles=("chest", "triceps"),
                muscles_secondary=(),
                equipment=(),
                category="Chest",
            )
        ],
    )
]

_logger = logging.getLogger(__name__)


@dataclass
class ExerciseService:
    """Service for exercise search and workout recommendations."""

    client: WgerClient
    exercises_per_muscle: int = 5
    max_recommended: int = 8

    async def find_exercise(self, name: str) -> ExerciseRecord | None:
        """Return the best match for an exercise name, if any."""
        try:
            payload = await self.client.search_exercises(name)
            suggestions = payload.get("suggestions") or []
            if not suggestions:
                return None
            data = suggestions[0].get("data") or {}
            exercise_id = data.get("base_id") or data.get("id")
            if exercise_id is None:
                return None
            info = await self.client.get_exercise_info(int(exercise_id))
        except httpx.HTTPError as exc:
            _logger.warning("Exercise search failed for %s: %s", name, exc)
            return None
        return exercise_from_wger(info)

    async def exercises_for_muscles(
        self, muscle_ids: Sequence[int], limit: int
    ) -> list[ExerciseRecord]:
        """Fetch exercises for each muscle concurrently, skipping failed lookups."""
        results = await asyncio.gather(
            *(self._fetch_muscle(muscle_id, limit) for muscle_id in muscle_ids),
            return_exceptions=True,
        )
        exercises: list[ExerciseRecord] = []
        seen: set[object] = set()
        for muscle_id, result in zip(muscle_ids, results, strict=True):
            if isinstance(result, BaseException):
                _logger.warning(
                    "Skipping exercises for muscle %s: %s", muscle_id, result
                )
                continue
            for exercise in result:
                key = exercise.id if exercise.id is not None else exercise.name
                if key in seen:
                    continue
                seen.add(key)
                exercises.append(exercise)
        return exercises

    async def exercises_for_group(self, group: str, count: int) -> list[ExerciseRecord]:
        """Return up to count exercises for a named muscle group."""
        muscle_ids = MUSCLE_GROUP_IDS.get(group.lower())
        if muscle_ids is None:
            raise ValueError(
                f"Invalid muscle group: {group}. Valid options are: "
                f"{', '.join(MUSCLE_GROUP_IDS)}"
            )
        exercises = await self.exercises_for_muscles(muscle_ids, count)
        return exercises[:count]

    async def recommend_workout(
        self, profile: UserProfile | None, muscle_group: str | None = None
    ) -> WorkoutRecommendation:
        """Select exercises and volume for a user and optional muscle group."""
        muscle_ids = target_muscle_ids(profile, muscle_group)
        equipment_ids = available_equipment_ids(profile)
        exercises = await self.exercises_for_muscles(
            muscle_ids, self.exercises_per_muscle
        )
        usable = [
            exercise
            for exercise in exercises
            if set(exercise.equipment_ids) <= equipment_ids
        ]
        fitness_level = (profile.fitness_level if profile else None) or "Beginner"
        focus = muscle_group or (
            profile.muscle_groups[0] if profile and profile.muscle_groups else None
        )
        return WorkoutRecommendation(
            muscle_group=focus or "full body",
            fitness_level=fitness_level,
            exercises=usable[: self.max_recommended],
            volume=training_volume(
                profile.fitness_goal if profile else None, fitness_level
            ),
        )

    async def build_weekly_plan(
        self, days_per_week: int = 3, exercises_per_group: int = 3
    ) -> list[WorkoutDay]:
        """Build a split plan, keeping whatever muscle groups could be fetched."""
        split = WEEKLY_SPLITS.get(days_per_week) or WEEKLY_SPLITS[3]
        days = await asyncio.gather(
            *(self._build_day(groups, exercises_per_group) for groups in split)
        )
        if not any(day.exercises for day in days):
            _logger.warning("No exercises fetched for weekly plan, using default")
            return list(DEFAULT_WEEKLY_PLAN)
        return list(days)

    async def _build_day(
        self, groups: Sequence[str], exercises_per_group: int
    ) -> WorkoutDay:
        results = await asyncio.gather(
            *(self.exercises_for_group(group, exercises_per_group) for group in groups),
            return_exceptions=True,
        )
        exercises: list[ExerciseRecord] = []
        for group, result in zip(groups, results, strict=True):
            if isinstance(result, BaseException):
                _logger.warning("Error fetching exercises for %s: %s", group, result)
                continue
            exercises.extend(result)
        return WorkoutDay(focus=", ".join(groups), exercises=exercises)

    async def _fetch_muscle(self, muscle_id: int, limit: int) -> list[ExerciseRecord]:
        try:
            payload = await self.client.list_exercises(muscle_id, limit=limit)
        except httpx.HTTPError as exc:
            raise ExerciseLookupError(
                f"Exercise lookup failed for muscle {muscle_id}"
            ) from exc
        return [exercise_from_wger(raw) for raw in payload.get("results") or []]


def target_muscle_ids(
    profile: UserProfile | None, muscle_group: str | None
) -> tuple[int, ...]:
    """Resolve WGER muscle ids from a requested group or the user's preferences."""
    if muscle_group:
        ids = MUSCLE_GROUP_IDS.get(muscle_group.lower(), ())
    elif profile and profile.muscle_groups:
        ids = tuple(
            dict.fromkeys(
                muscle_id
                for group in profile.muscle_groups
                for muscle_id in MUSCLE_GROUP_IDS.get(group.lower(), ())
            )
        )
    else:
        ids = ()
    return ids or FULL_BODY_MUSCLE_IDS


def available_equipment_ids(profile: UserProfile | None) -> set[int]:
    """Resolve WGER equipment ids from the user's equipment list."""
    ids = {
        equipment_id
        for name in (profile.equipment if profile else ())
        for equipment_id in EQUIPMENT_IDS.get(name.lower(), ())
    }
    return ids or {BODYWEIGHT_EQUIPMENT_ID}


def training_volume(
    fitness_goal: str | None, fitness_level: str | None
) -> TrainingVolume:
    """Return sets, reps and rest for a goal adjusted by fitness level."""
    goal = (fitness_goal or "").lower()
    if goal == "weight loss":
        sets, min_reps, max_reps, rest = 3, 12, 15, 45
    elif goal == "muscle gain":
        sets, min_reps, max_reps, rest = 4, 8, 12, 90
    else:
        sets, min_reps, max_reps, rest = 3, 8, 12, 60

    level = (fitness_level or "").lower()
    if level == "beginner":
        sets = max(2, sets - 1)
        rest += 15
    elif level == "advanced":
        sets = min(5, sets + 1)
        rest -= 15
    return TrainingVolume(
        sets=sets, min_reps=min_reps, max_reps=max_reps, rest_seconds=rest
    )


def exercise_from_wger(raw: dict[str, object]) -> ExerciseRecord:
    """Convert a WGER exercise payload into an exercise record."""
    translation = _english_translation(raw)
    name = raw.get("name") or translation.get("name") or "Unknown exercise"
    description = raw.get("description") or translation.get("description") or ""
    category = raw.get("category")
    if isinstance(category, dict):
        category_name = str(category.get("name") or "Unknown")
    else:
        category_name = "Unknown"
    equipment = [item for item in raw.get("equipment") or [] if isinstance(item, dict)]
    return ExerciseRecord(
        id=raw.get("id"),
        name=str(name).strip(),
        description=_HTML_TAG.sub("", str(description)).strip(),
        muscles=_names(raw.get("muscles")),
        muscles_secondary=_names(raw.get("muscles_secondary")),
        equipment=tuple(
            str(item.get("name")) for item in equipment if item.get("name")
        ),
        category=category_name,
        equipment_ids=tuple(int(item["id"]) for item in equipment if "id" in item),
    )


def _english_translation(raw: dict[str, object]) -> dict[str, object]:
    translations = [
        item for item in raw.get("translations") or [] if isinstance(item, dict)
    ]
    for item in translations:
        if item.get("language") == ENGLISH_LANGUAGE_ID:
            return item
    return translations[0] if translations else {}


def _names(items: object) -> tuple[str, ...]:
    if not isinstance(items, list):
        return ()
    names: list[str] = []
    for item in items:
        if isinstance(item, dict):
            name = item.get("name_en") or item.get("name")
            if name:
                names.append(str(name))
    return tuple(names)
