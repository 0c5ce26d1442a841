"""Nutrition target models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class NutritionTarget:
    """Calorie and macro targets for a single meal time."""

    meal_time: str
    calories: int
    protein: int
    carbs: int
    fat: int
