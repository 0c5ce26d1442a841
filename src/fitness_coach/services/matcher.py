"""Meal matching against per-meal nutrition targets."""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass

from fitness_coach.domain.meals import MatchedMeal, MealRecord
from fitness_coach.domain.nutrition import NutritionTarget
from fitness_coach.services.allergens import AllergenChecker

DEFAULT_TOLERANCE = 0.15


@dataclass
class MealMatcher:
    """Filters catalog meals by targets, preferences and allergens."""

    allergen_checker: AllergenChecker

    async def find_matches(  # noqa: PLR0913
        self,
        meals: Sequence[MealRecord],
        target: NutritionTarget,
        tolerance: float = DEFAULT_TOLERANCE,
        likes: Sequence[str] = (),
        dislikes: Sequence[str] = (),
        allergens: Sequence[str] = (),
    ) -> list[MatchedMeal]:
        """Return safe meals within tolerance, liked meals first."""
        candidates = [
            meal
            for meal in meals
            if within_tolerance(meal, target, tolerance)
            and not names_overlap(meal.name, dislikes)
        ]
        if allergens:
            results = await asyncio.gather(
                *(
                    self.allergen_checker.check_safety(meal.name, list(allergens))
                    for meal in candidates
                )
            )
            candidates = [
                meal
                for meal, result in zip(candidates, results, strict=True)
                if result.is_safe
            ]
        matched = [
            MatchedMeal(meal=meal, liked=names_overlap(meal.name, likes))
            for meal in candidates
        ]
        return sorted(matched, key=lambda item: not item.liked)


def within_tolerance(
    meal: MealRecord, target: NutritionTarget, tolerance: float
) -> bool:
    """Return true when every macro lies inside the tolerance window."""
    facts = meal.nutrition
    if facts is None:
        return False
    pairs = (
        (facts.calories, target.calories),
        (facts.protein, target.protein),
        (facts.carbs, target.carbs),
        (facts.fat, target.fat),
    )
    return all(
        goal * (1 - tolerance) <= value <= goal * (1 + tolerance)
        for value, goal in pairs
    )


def names_overlap(name: str, terms: Sequence[str]) -> bool:
    """Return true if the name and any non-blank term contain one another."""
    name_lower = name.lower()
    for term in terms:
        term_lower = term.strip().lower()
        if term_lower and (term_lower in name_lower or name_lower in term_lower):
            return True
    return False
