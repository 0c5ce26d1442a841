"""Per-meal nutrition target calculation."""

from decimal import ROUND_HALF_UP, Decimal

from fitness_coach.domain.nutrition import NutritionTarget
from fitness_coach.domain.profile import DailyNutrition, MacroShare

MEAL_TIMES = ("breakfast", "lunch", "dinner", "snack")

# Shares are not required to sum to 1.
DEFAULT_DISTRIBUTION: dict[str, MacroShare] = {
    "breakfast": MacroShare(calories=0.25, protein=0.25, carbs=0.3, fat=0.25),
    "lunch": MacroShare(calories=0.35, protein=0.35, carbs=0.35, fat=0.35),
    "dinner": MacroShare(calories=0.35, protein=0.35, carbs=0.3, fat=0.35),
    "snack": MacroShare(calories=0.05, protein=0.05, carbs=0.05, fat=0.05),
}


def meal_targets(nutrition: DailyNutrition, meal_time: str) -> NutritionTarget:
    """Return rounded calorie and macro targets for a meal time."""
    key = meal_time.lower()
    share = nutrition.meal_distribution.get(key) or DEFAULT_DISTRIBUTION.get(key)
    if share is None:
        raise ValueError(f"Unknown meal time: {meal_time}")
    return NutritionTarget(
        meal_time=key,
        calories=_round_half_up(nutrition.daily_calories * share.calories),
        protein=_round_half_up(nutrition.daily_protein * share.protein),
        carbs=_round_half_up(nutrition.daily_carbs * share.carbs),
        fat=_round_half_up(nutrition.daily_fat * share.fat),
    )


def _round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
