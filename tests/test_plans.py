"""Tests for fitness plan generation."""

import asyncio
from pathlib import Path

import pytest

from fitness_coach.domain.errors import ProfileNotFoundError
from fitness_coach.services.catalog import MealCatalog
from fitness_coach.services.plans import PlanService
from tests.conftest import FakeOllamaClient, InMemoryProfileRepository, profile_row


def test_plan_combines_split_and_catalog(
    plan_service: PlanService, ollama_client: FakeOllamaClient
) -> None:
    ollama_client.responses = ['{"overview": {"planType": "Muscle gain"}, "tips": []}']

    plan = asyncio.run(plan_service.fitness_recommendations("user-1"))

    assert plan == {"overview": {"planType": "Muscle gain"}, "tips": []}
    prompt = ollama_client.last_prompt
    assert "Database contains 5 meals" in prompt
    assert "Day 1 (chest, triceps, shoulders): Push-up" in prompt
    assert "Day 3 (legs, abs): Rest" in prompt
    assert "Fitness Level: Intermediate" in prompt


def test_plan_uses_requested_training_days(
    plan_service: PlanService,
    profile_repository: InMemoryProfileRepository,
    ollama_client: FakeOllamaClient,
) -> None:
    row = profile_row()
    row["workout_data"] = {"workoutDaysPerWeek": 5}
    profile_repository.rows["user-1"] = row

    asyncio.run(plan_service.fitness_recommendations("user-1"))

    assert "Day 5 (arms, abs)" in ollama_client.last_prompt


def test_missing_user_raises(plan_service: PlanService) -> None:
    with pytest.raises(ProfileNotFoundError) as excinfo:
        asyncio.run(plan_service.fitness_recommendations("ghost"))

    assert excinfo.value.user_id == "ghost"


def test_missing_catalog_still_generates_plan(
    plan_service: PlanService, ollama_client: FakeOllamaClient, tmp_path: Path
) -> None:
    plan_service.catalog = MealCatalog(tmp_path / "missing.json")

    plan = asyncio.run(plan_service.fitness_recommendations("user-1"))

    assert plan == "Happy to help!"
    assert "No nutrition data available." in ollama_client.last_prompt
