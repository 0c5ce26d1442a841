"""Chat orchestration: classify, gather data, compose and generate."""

import asyncio
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from fitness_coach.domain.allergy import AllergyCheckResult
from fitness_coach.domain.intents import ClassifiedIntent, Intent
from fitness_coach.domain.profile import UserProfile
from fitness_coach.services.allergens import AllergenChecker
from fitness_coach.services.catalog import MealCatalog
from fitness_coach.services.exercises import ExerciseService
from fitness_coach.services.generation import GenerationResult, ResponseGateway
from fitness_coach.services.intents import IntentClassifier
from fitness_coach.services.matcher import DEFAULT_TOLERANCE, MealMatcher, names_overlap
from fitness_coach.services.profiles import ProfileService
from fitness_coach.services.prompts import (
    ComposedPrompt,
    build_exercise_not_found_prompt,
    build_exercise_prompt,
    build_general_prompt,
    build_greeting_prompt,
    build_meal_safety_prompt,
    build_meal_suggestion_prompt,
    build_missing_nutrition_prompt,
    build_nutrition_lookup_prompt,
    build_simple_prompt,
    build_workout_prompt,
)
from fitness_coach.services.targets import meal_targets

_logger = logging.getLogger(__name__)


@dataclass
class ChatService:
    """Routes chat messages to intent handlers and the generation backend."""

    profile_service: ProfileService
    catalog: MealCatalog
    classifier: IntentClassifier
    allergen_checker: AllergenChecker
    meal_matcher: MealMatcher
    exercise_service: ExerciseService
    gateway: ResponseGateway
    tolerance: float = DEFAULT_TOLERANCE
    suggestion_limit: int = 5
    clock: Callable[[], datetime] = field(default=datetime.now)

    async def chat(self, message: str, user_id: str | None = None) -> GenerationResult:
        """Answer a chat message, personalised when the user is known."""
        profile = self.profile_service.get_profile(user_id) if user_id else None
        classified = self.classifier.classify(
            message,
            has_profile=profile is not None,
            has_allergies=bool(profile and profile.allergies),
        )
        _logger.info("Classified chat message as %s", classified.intent)

        prompt = await self._compose(message, classified, profile)
        if prompt is None:
            _logger.info("No specific handler answered, using general prompt")
            prompt = build_general_prompt(message, profile)

        result = await self.gateway.generate(prompt.text)
        if prompt.required_prefix:
            return enforce_prefix(result, prompt.required_prefix)
        return result

    async def simple_chat(self, message: str) -> GenerationResult:
        """Forward a message with the minimal prompt and no personalisation."""
        return await self.gateway.generate(build_simple_prompt(message).text)

    async def _compose(  # noqa: PLR0911
        self,
        message: str,
        classified: ClassifiedIntent,
        profile: UserProfile | None,
    ) -> ComposedPrompt | None:
        intent = classified.intent
        if intent is Intent.GREETING:
            return build_greeting_prompt(message, profile, self.clock())
        if intent is Intent.MEAL_SAFETY and profile and classified.meal_name:
            return await self._meal_safety(message, classified.meal_name, profile)
        if intent is Intent.MEAL_SUGGESTION and profile and classified.meal_time:
            return await self._meal_suggestion(message, classified.meal_time, profile)
        if intent is Intent.NUTRITION_LOOKUP and classified.meal_name:
            return await self._nutrition_lookup(message, classified.meal_name, profile)
        if intent is Intent.EXERCISE_QUERY and classified.exercise_name:
            exercise = await self.exercise_service.find_exercise(
                classified.exercise_name
            )
            if exercise is None:
                return build_exercise_not_found_prompt(
                    message, classified.exercise_name
                )
            return build_exercise_prompt(message, exercise)
        if intent is Intent.WORKOUT_REQUEST:
            recommendation = await self.exercise_service.recommend_workout(
                profile, classified.muscle_group
            )
            return build_workout_prompt(message, recommendation, profile)
        return None

    async def _meal_safety(
        self, message: str, meal_name: str, profile: UserProfile
    ) -> ComposedPrompt:
        result = await self.allergen_checker.check_safety(meal_name, profile.allergies)
        _logger.info("Safety check for %s: %s", meal_name, result.status)
        return build_meal_safety_prompt(
            message, meal_name, result, profile.allergies, profile
        )

    async def _meal_suggestion(
        self, message: str, meal_time: str, profile: UserProfile
    ) -> ComposedPrompt | None:
        if profile.nutrition is None:
            return build_missing_nutrition_prompt(message, meal_time, profile)
        try:
            target = meal_targets(profile.nutrition, meal_time)
            meals = self.catalog.meals()
        except (OSError, ValueError):
            _logger.exception("Failed to prepare %s suggestions", meal_time)
            return None
        matches = await self.meal_matcher.find_matches(
            meals,
            target,
            tolerance=self.tolerance,
            likes=profile.food_likes,
            dislikes=profile.food_dislikes,
            allergens=profile.allergies,
        )
        _logger.info("Found %s matching meals for %s", len(matches), meal_time)
        return build_meal_suggestion_prompt(
            message, target, matches[: self.suggestion_limit], profile
        )

    async def _nutrition_lookup(
        self, message: str, meal_name: str, profile: UserProfile | None
    ) -> ComposedPrompt | None:
        try:
            meals = self.catalog.search(meal_name)
        except (OSError, ValueError):
            _logger.exception("Failed to search meal catalog for %s", meal_name)
            return None
        if not meals:
            _logger.info("No catalog entries for %s", meal_name)
            return None
        allergy_results: list[AllergyCheckResult] = []
        liked = disliked = False
        if profile is not None:
            if profile.allergies:
                allergy_results = await asyncio.gather(
                    *(
                        self.allergen_checker.check_safety(meal.name, profile.allergies)
                        for meal in meals
                    )
                )
            liked = names_overlap(meal_name, profile.food_likes)
            disliked = names_overlap(meal_name, profile.food_dislikes)
        return build_nutrition_lookup_prompt(
            message,
            meals,
            profile,
            allergy_results=allergy_results,
            liked=liked,
            disliked=disliked,
        )


def enforce_prefix(result: GenerationResult, prefix: str) -> str:
    """Return the answer as text that starts with the required prefix."""
    text = result if isinstance(result, str) else json.dumps(result)
    stripped = text.lstrip()
    if stripped.startswith(prefix):
        return stripped
    return f"{prefix} {stripped}"
