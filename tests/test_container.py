"""Tests for container wiring."""

import asyncio

from fitness_coach.containers import build_container
from fitness_coach.services.allergens import SynonymMatchPolicy


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.chat_service is not None
    assert container.plan_service.catalog is container.catalog
    asyncio.run(container.close_resources())


def test_build_container_applies_settings(settings) -> None:
    configured = settings.model_copy(
        update={"allergen_match_policy": "synonyms", "meal_suggestion_limit": 3}
    )

    container = build_container(configured)

    policy = container.chat_service.allergen_checker.policy
    assert isinstance(policy, SynonymMatchPolicy)
    assert container.chat_service.suggestion_limit == 3
    assert container.chat_service.gateway.options.num_ctx == 2048
    asyncio.run(container.close_resources())
