"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from fitness_coach.adapters.mealdb_client import HttpxMealDbClient
from fitness_coach.adapters.ollama_client import HttpxOllamaClient
from fitness_coach.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from fitness_coach.adapters.wger_client import HttpxWgerClient
from fitness_coach.config import Settings
from fitness_coach.services.allergens import AllergenChecker, build_match_policy
from fitness_coach.services.cache import InMemoryRecipeCache
from fitness_coach.services.catalog import MealCatalog
from fitness_coach.services.chat import ChatService
from fitness_coach.services.exercises import ExerciseService
from fitness_coach.services.generation import GenerationOptions, ResponseGateway
from fitness_coach.services.intents import IntentClassifier
from fitness_coach.services.matcher import MealMatcher
from fitness_coach.services.plans import PlanService
from fitness_coach.services.profiles import ProfileService
from fitness_coach.services.recipes import RecipeService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog: MealCatalog
    chat_service: ChatService
    plan_service: PlanService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    profile_service = ProfileService(SupabaseProfileRepository(supabase_client))
    catalog = MealCatalog(resolved_settings.meals_catalog_path)

    mealdb_client = HttpxMealDbClient.create(
        api_key=resolved_settings.mealdb_api_key,
        base_url=resolved_settings.mealdb_base_url,
    )
    recipe_service = RecipeService(client=mealdb_client, cache=InMemoryRecipeCache())
    allergen_checker = AllergenChecker(
        ingredients=recipe_service,
        policy=build_match_policy(resolved_settings.allergen_match_policy),
    )

    wger_client = HttpxWgerClient.create(
        base_url=resolved_settings.wger_base_url,
        api_key=resolved_settings.wger_api_key,
    )
    exercise_service = ExerciseService(wger_client)

    ollama_client = HttpxOllamaClient.create(
        resolved_settings.ollama_api_url,
        timeout_seconds=resolved_settings.ollama_timeout_seconds,
    )
    gateway = ResponseGateway(
        client=ollama_client,
        model=resolved_settings.ollama_model,
        options=GenerationOptions(
            temperature=resolved_settings.ollama_temperature,
            top_p=resolved_settings.ollama_top_p,
            top_k=resolved_settings.ollama_top_k,
            num_predict=resolved_settings.ollama_max_tokens,
            num_ctx=resolved_settings.ollama_num_ctx,
        ),
    )

    chat_service = ChatService(
        profile_service=profile_service,
        catalog=catalog,
        classifier=IntentClassifier(),
        allergen_checker=allergen_checker,
        meal_matcher=MealMatcher(allergen_checker),
        exercise_service=exercise_service,
        gateway=gateway,
        tolerance=resolved_settings.meal_match_tolerance,
        suggestion_limit=resolved_settings.meal_suggestion_limit,
    )
    plan_service = PlanService(
        profile_service=profile_service,
        catalog=catalog,
        exercise_service=exercise_service,
        gateway=gateway,
    )

    async def close_resources() -> None:
        await mealdb_client.close()
        await wger_client.close()
        await ollama_client.close()

    return AppContainer(
        settings=resolved_settings,
        catalog=catalog,
        chat_service=chat_service,
        plan_service=plan_service,
        close_resources=close_resources,
    )
