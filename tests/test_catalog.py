"""Tests for the meal catalog."""

import json
from pathlib import Path

import pytest

from fitness_coach.services.catalog import MealCatalog
from tests.conftest import mealdb_meal


def test_search_is_case_insensitive_and_ordered(catalog: MealCatalog) -> None:
    results = catalog.search("CHICKEN")

    assert [meal.name for meal in results] == [
        "Grilled Chicken Rice Bowl",
        "Peanut Chicken Curry",
    ]
    assert results[0].nutrition is not None
    assert results[0].nutrition.calories == 690


def test_blank_search_returns_nothing(catalog: MealCatalog) -> None:
    assert catalog.search("   ") == []


def test_invalid_entries_are_skipped(tmp_path: Path) -> None:
    path = tmp_path / "meals.json"
    path.write_text(
        json.dumps(
            [
                {"meal": mealdb_meal("Oatmeal", "oats", "milk")},
                {"meal": mealdb_meal("Bad Meal"), "nutrition": {"calories": -5}},
                {"nutrition": {"calories": 100, "protein": 1, "carbs": 1, "fat": 1}},
            ]
        ),
        encoding="utf-8",
    )

    meals = MealCatalog(path).meals()

    assert [meal.name for meal in meals] == ["Oatmeal"]
    assert meals[0].nutrition is None
    assert [item.name for item in meals[0].ingredients] == ["oats", "milk"]


def test_reload_rereads_file(catalog_path: Path) -> None:
    catalog = MealCatalog(catalog_path)
    assert len(catalog.meals()) == 5

    catalog_path.write_text(
        json.dumps([{"meal": mealdb_meal("Porridge", "oats")}]), encoding="utf-8"
    )

    assert len(catalog.meals()) == 5
    assert catalog.reload() == 1
    assert [meal.name for meal in catalog.meals()] == ["Porridge"]


def test_non_list_catalog_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "meals.json"
    path.write_text(json.dumps({"meals": []}), encoding="utf-8")

    with pytest.raises(ValueError, match="JSON array"):
        MealCatalog(path).meals()
