"""Chat intent models."""

from dataclasses import dataclass
from enum import StrEnum


class Intent(StrEnum):
    """Closed set of chat intents."""

    GREETING = "greeting"
    MEAL_SAFETY = "meal_safety"
    MEAL_SUGGESTION = "meal_suggestion"
    NUTRITION_LOOKUP = "nutrition_lookup"
    EXERCISE_QUERY = "exercise_query"
    WORKOUT_REQUEST = "workout_request"
    GENERAL_QUERY = "general_query"


@dataclass(frozen=True)
class ClassifiedIntent:
    """Intent selected for a message plus extracted entities."""

    intent: Intent
    meal_name: str | None = None
    meal_time: str | None = None
    muscle_group: str | None = None
    exercise_name: str | None = None
