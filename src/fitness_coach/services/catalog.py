"""Static meal catalog with nutrition facts."""

import json
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from fitness_coach.domain.meals import CatalogEntry, MealRecord, NutritionFacts
from fitness_coach.services.recipes import meal_from_mealdb

_logger = logging.getLogger(__name__)


@dataclass
class MealCatalog:
    """Read-only meal catalog loaded lazily from a JSON file."""

    path: Path
    _meals: list[MealRecord] | None = field(default=None, init=False, repr=False)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    def meals(self) -> list[MealRecord]:
        """Return all catalog meals, loading the file on first use."""
        with self._lock:
            if self._meals is None:
                self._meals = self._load()
            return list(self._meals)

    def reload(self) -> int:
        """Re-read the catalog file and return the number of meals loaded."""
        meals = self._load()
        with self._lock:
            self._meals = meals
        return len(meals)

    def search(self, name: str) -> list[MealRecord]:
        """Return meals whose name contains the query, in catalog order."""
        query = name.strip().lower()
        if not query:
            return []
        return [meal for meal in self.meals() if query in meal.name.lower()]

    def _load(self) -> list[MealRecord]:
        raw_entries = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(raw_entries, list):
            raise ValueError(f"Meal catalog {self.path} must contain a JSON array")
        meals: list[MealRecord] = []
        for index, raw in enumerate(raw_entries):
            try:
                entry = CatalogEntry.model_validate(raw)
            except ValidationError as exc:
                _logger.warning("Skipping invalid catalog entry %s: %s", index, exc)
                continue
            nutrition = None
            if entry.nutrition is not None:
                nutrition = NutritionFacts(
                    calories=entry.nutrition.calories,
                    protein=entry.nutrition.protein,
                    carbs=entry.nutrition.carbs,
                    fat=entry.nutrition.fat,
                )
            meals.append(meal_from_mealdb(entry.meal, nutrition=nutrition))
        _logger.info("Loaded %s meals from %s", len(meals), self.path)
        return meals
