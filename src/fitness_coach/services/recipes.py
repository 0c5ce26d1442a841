"""Recipe lookups against TheMealDB."""

import logging
from dataclasses import dataclass

import httpx

from fitness_coach.adapters.mealdb_client import MealDbClient
from fitness_coach.domain.errors import RecipeLookupError
from fitness_coach.domain.meals import Ingredient, MealRecord, NutritionFacts
from fitness_coach.services.cache import RecipeCache

_MAX_INGREDIENT_SLOTS = 20

_logger = logging.getLogger(__name__)


@dataclass
class RecipeService:
    """Service for recipe and ingredient lookups with caching."""

    client: MealDbClient
    cache: RecipeCache
    hit_ttl_seconds: int = 86400
    miss_ttl_seconds: int = 600

    async def find_meal(self, name: str) -> MealRecord | None:
        """Return the first recipe matching a meal name, if any."""
        hit, cached = self.cache.lookup(name)
        if hit:
            return cached

        try:
            payload = await self.client.search_meals(name)
        except httpx.HTTPError as exc:
            raise RecipeLookupError(f"Recipe search failed for {name!r}") from exc

        meals = payload.get("meals") or []
        if not meals:
            _logger.info("No recipe found for %s", name)
            self.cache.store(name, None, ttl_seconds=self.miss_ttl_seconds)
            return None
        meal = meal_from_mealdb(meals[0])
        self.cache.store(name, meal, ttl_seconds=self.hit_ttl_seconds)
        return meal

    async def find_ingredients(self, name: str) -> list[str] | None:
        """Return lower-cased ingredient names, or None when the meal is unknown."""
        meal = await self.find_meal(name)
        if meal is None:
            return None
        ingredients = [ingredient.name.lower() for ingredient in meal.ingredients]
        _logger.info("Found ingredients in %s: %s", name, ", ".join(ingredients))
        return ingredients


def meal_from_mealdb(
    raw: dict[str, object], nutrition: NutritionFacts | None = None
) -> MealRecord:
    """Convert a MealDB-shaped meal into a meal record."""
    ingredients: list[Ingredient] = []
    for slot in range(1, _MAX_INGREDIENT_SLOTS + 1):
        name = raw.get(f"strIngredient{slot}")
        if not isinstance(name, str) or not name.strip():
            continue
        measure = raw.get(f"strMeasure{slot}")
        ingredients.append(
            Ingredient(
                name=name.strip(),
                measure=measure.strip() if isinstance(measure, str) else "",
            )
        )
    return MealRecord(
        id=_optional_str(raw.get("idMeal")),
        name=str(raw.get("strMeal") or "").strip(),
        category=_optional_str(raw.get("strCategory")),
        area=_optional_str(raw.get("strArea")),
        ingredients=tuple(ingredients),
        instructions=_optional_str(raw.get("strInstructions")),
        nutrition=nutrition,
    )


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
