"""Meal catalog domain models."""

from dataclasses import dataclass

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class Ingredient:
    """Single recipe ingredient with its free-text measure."""

    name: str
    measure: str


@dataclass(frozen=True)
class NutritionFacts:
    """Nutrition facts for one serving (kcal and grams)."""

    calories: float
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class MealRecord:
    """Meal with ingredients and optional nutrition facts."""

    name: str
    category: str | None
    ingredients: tuple[Ingredient, ...]
    instructions: str | None
    nutrition: NutritionFacts | None = None
    id: str | None = None
    area: str | None = None


@dataclass(frozen=True)
class MatchedMeal:
    """Catalog meal selected by the matcher."""

    meal: MealRecord
    liked: bool


class CatalogNutrition(BaseModel):
    """Nutrition block of a catalog file entry."""

    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fat: float = Field(ge=0)


class CatalogEntry(BaseModel):
    """Entry of the static meal catalog file."""

    meal: dict[str, object]
    nutrition: CatalogNutrition | None = None
