"""Weekly fitness and nutrition plan generation."""

import logging
from dataclasses import dataclass

from fitness_coach.domain.errors import ProfileNotFoundError
from fitness_coach.domain.meals import MealRecord
from fitness_coach.services.catalog import MealCatalog
from fitness_coach.services.exercises import ExerciseService
from fitness_coach.services.generation import GenerationResult, ResponseGateway
from fitness_coach.services.profiles import ProfileService
from fitness_coach.services.prompts import build_fitness_plan_prompt

DEFAULT_WORKOUT_DAYS = 3

_logger = logging.getLogger(__name__)


@dataclass
class PlanService:
    """Builds a personalised plan prompt and generates the plan."""

    profile_service: ProfileService
    catalog: MealCatalog
    exercise_service: ExerciseService
    gateway: ResponseGateway

    async def fitness_recommendations(self, user_id: str) -> GenerationResult:
        """Generate a fitness and meal plan for a stored user."""
        profile = self.profile_service.get_profile(user_id)
        if profile is None:
            raise ProfileNotFoundError(user_id)
        days = profile.workout_days_per_week or DEFAULT_WORKOUT_DAYS
        plan = await self.exercise_service.build_weekly_plan(days)
        prompt = build_fitness_plan_prompt(profile, self._catalog_meals(), plan)
        _logger.info("Generating fitness plan for user %s (%s days)", user_id, days)
        return await self.gateway.generate(prompt.text)

    def _catalog_meals(self) -> list[MealRecord]:
        try:
            return self.catalog.meals()
        except (OSError, ValueError) as exc:
            _logger.warning("Meal catalog unavailable for plan: %s", exc)
            return []
