"""User profile lookups."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol

from fitness_coach.domain.profile import DailyNutrition, MacroShare, UserProfile
from fitness_coach.services.targets import DEFAULT_DISTRIBUTION

_logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Read interface for stored user profiles."""

    def get_profile_row(self, user_id: str) -> dict[str, object] | None:
        """Return the raw profile row for a user id, if present."""


@dataclass
class ProfileService:
    """Application service for reading user profiles."""

    repository: ProfileRepository

    def get_profile(
        self, user_id: str, today: date | None = None
    ) -> UserProfile | None:
        """Return the profile snapshot for a user, or None when absent."""
        row = self.repository.get_profile_row(user_id)
        if row is None:
            _logger.info("User %s not found in profile store", user_id)
            return None
        return profile_from_row(row, today=today or date.today())


def profile_from_row(row: dict[str, object], today: date) -> UserProfile:
    """Build a profile snapshot from a stored row."""
    body = _as_dict(row.get("body_data"))
    workout = _as_dict(row.get("workout_data"))
    age = _as_int(body.get("age"))
    if age is None:
        age = compute_age(_as_str(body.get("dateOfBirth")), today)
    return UserProfile(
        id=str(row.get("id", "")),
        first_name=_as_str(row.get("first_name")),
        last_name=_as_str(row.get("last_name")),
        email=_as_str(row.get("email")),
        username=_as_str(row.get("username")),
        gender=_as_str(body.get("gender")),
        age=age,
        weight=_as_float(body.get("weight")),
        height=_as_float(body.get("height")),
        activity_level=_as_str(body.get("activityLevel")),
        goal=_as_str(body.get("goal")),
        allergies=_clean_terms(body.get("allergies")),
        food_likes=_clean_terms(body.get("foodLikes")),
        food_dislikes=_clean_terms(body.get("foodDislikes")),
        fitness_level=_as_str(workout.get("fitnessLevel")),
        fitness_goal=_as_str(workout.get("fitnessGoal")),
        equipment=_clean_terms(workout.get("equipment")),
        muscle_groups=_clean_terms(workout.get("muscleGroups")),
        workout_days_per_week=_as_int(workout.get("workoutDaysPerWeek")),
        nutrition=_nutrition_from_dict(_as_dict(row.get("nutrition_data"))),
    )


def compute_age(date_of_birth: str | None, today: date) -> int | None:
    """Compute age in whole years from a DD/MM/YYYY birth date."""
    if not date_of_birth:
        return None
    parts = date_of_birth.split("/")
    if len(parts) != 3:  # noqa: PLR2004
        return None
    try:
        day, month, year = (int(part) for part in parts)
        born = date(year, month, day)
    except ValueError:
        return None
    age = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        age -= 1
    return age


def _nutrition_from_dict(data: dict[str, object]) -> DailyNutrition | None:
    if not data or data.get("dailyCalories") is None:
        return None
    distribution: dict[str, MacroShare] = {}
    for meal_time, share in _as_dict(data.get("mealDistribution")).items():
        key = str(meal_time).lower()
        default = DEFAULT_DISTRIBUTION.get(key)
        if default is None:
            _logger.warning("Ignoring distribution for unknown meal time %s", meal_time)
            continue
        distribution[key] = _share_with_defaults(_as_dict(share), default)
    return DailyNutrition(
        daily_calories=_as_float(data.get("dailyCalories")) or 0.0,
        daily_protein=_as_float(data.get("dailyProtein")) or 0.0,
        daily_carbs=_as_float(data.get("dailyCarbs")) or 0.0,
        daily_fat=_as_float(data.get("dailyFat")) or 0.0,
        meal_distribution=distribution,
    )


def _share_with_defaults(share: dict[str, object], default: MacroShare) -> MacroShare:
    """Fill axes missing from a stored share with the default fractions."""
    values: dict[str, float] = {}
    for axis in ("calories", "protein", "carbs", "fat"):
        value = _as_float(share.get(axis))
        values[axis] = getattr(default, axis) if value is None else value
    return MacroShare(**values)


def _clean_terms(value: object) -> tuple[str, ...]:
    """Return non-blank strings, deduplicated case-insensitively in order."""
    if not isinstance(value, list | tuple):
        return ()
    seen: set[str] = set()
    terms: list[str] = []
    for item in value:
        text = str(item).strip()
        if not text or text.lower() in seen:
            continue
        seen.add(text.lower())
        terms.append(text)
    return tuple(terms)


def _as_dict(value: object) -> dict[str, object]:
    return value if isinstance(value, dict) else {}


def _as_str(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_float(value: object) -> float | None:
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def _as_int(value: object) -> int | None:
    number = _as_float(value)
    return int(number) if number is not None else None
