"""Tests for chat intent classification."""

import asyncio

from fitness_coach.domain.allergy import SafetyStatus
from fitness_coach.domain.intents import Intent
from fitness_coach.services.allergens import AllergenChecker
from fitness_coach.services.cache import InMemoryRecipeCache
from fitness_coach.services.intents import (
    DEFAULT_RULES,
    IntentClassifier,
    extract_muscle_group,
)
from fitness_coach.services.recipes import RecipeService
from tests.conftest import FakeMealDbClient


def test_greeting_requires_whole_message() -> None:
    classifier = IntentClassifier()

    assert classifier.classify("Hello!").intent is Intent.GREETING
    assert classifier.classify("  good morning ").intent is Intent.GREETING
    assert classifier.classify("Hey!!").intent is Intent.GREETING
    assert (
        classifier.classify("hello, what's the weather like?").intent
        is Intent.GENERAL_QUERY
    )


def test_meal_safety_needs_allergies() -> None:
    classifier = IntentClassifier()

    with_allergies = classifier.classify(
        "Can I eat peanut butter toast?", has_profile=True, has_allergies=True
    )
    without_allergies = classifier.classify(
        "Can I eat peanut butter toast?", has_profile=True
    )

    assert with_allergies.intent is Intent.MEAL_SAFETY
    assert with_allergies.meal_name == "peanut butter toast"
    assert without_allergies.intent is Intent.GENERAL_QUERY


def test_meal_safety_captures_meal_after_is_it_safe() -> None:
    classifier = IntentClassifier()

    classified = classifier.classify(
        "Is it safe for me to eat shrimp pasta?", has_allergies=True
    )

    assert classified.intent is Intent.MEAL_SAFETY
    assert classified.meal_name == "shrimp pasta"


def test_meal_suggestion_needs_profile() -> None:
    classifier = IntentClassifier()

    with_profile = classifier.classify("What should I eat for Lunch?", has_profile=True)
    anonymous = classifier.classify("What should I eat for lunch?")

    assert with_profile.intent is Intent.MEAL_SUGGESTION
    assert with_profile.meal_time == "lunch"
    assert anonymous.intent is Intent.GENERAL_QUERY


def test_meal_time_question_is_not_a_safety_question() -> None:
    classifier = IntentClassifier()

    classified = classifier.classify(
        "what can i eat for breakfast", has_profile=True, has_allergies=True
    )

    assert classified.intent is Intent.MEAL_SUGGESTION
    assert classified.meal_time == "breakfast"


def test_nutrition_lookup_extracts_meal_name() -> None:
    classifier = IntentClassifier()

    classified = classifier.classify("How many calories are in chicken curry?")
    facts = classifier.classify("nutrition facts for beef stew")

    assert classified.intent is Intent.NUTRITION_LOOKUP
    assert classified.meal_name == "chicken curry"
    assert facts.meal_name == "beef stew"


def test_exercise_query_extracts_exercise_name() -> None:
    classifier = IntentClassifier()

    classified = classifier.classify("How do I do a deadlift?")

    assert classified.intent is Intent.EXERCISE_QUERY
    assert classified.exercise_name == "deadlift"


def test_workout_request_normalizes_muscle_group() -> None:
    classifier = IntentClassifier()

    targeted = classifier.classify("What are the best exercises for my legs?")
    forearms = classifier.classify("best exercises for forearms")
    general = classifier.classify("Can you make me a workout plan")

    assert targeted.intent is Intent.WORKOUT_REQUEST
    assert targeted.muscle_group == "legs"
    assert forearms.intent is Intent.WORKOUT_REQUEST
    assert forearms.muscle_group == "forearms"
    assert general.intent is Intent.WORKOUT_REQUEST
    assert general.muscle_group is None


def test_unmatched_message_is_general_query() -> None:
    classifier = IntentClassifier()

    classified = classifier.classify("Why do I feel tired after lunch?")

    assert classified.intent is Intent.GENERAL_QUERY
    assert classified.meal_name is None


def test_extract_muscle_group_falls_back_to_message() -> None:
    assert extract_muscle_group("my upper body please", "") == "upper body"
    assert extract_muscle_group(None, "train shoulders today") == "shoulders"
    assert extract_muscle_group("something", "nothing here") is None
    assert extract_muscle_group("a better score", "feedback on my form") is None


def test_rules_run_in_priority_order() -> None:
    assert [rule.intent for rule in DEFAULT_RULES] == [
        Intent.GREETING,
        Intent.MEAL_SAFETY,
        Intent.MEAL_SUGGESTION,
        Intent.NUTRITION_LOOKUP,
        Intent.EXERCISE_QUERY,
        Intent.WORKOUT_REQUEST,
    ]


def test_meal_safety_outranks_nutrition_lookup() -> None:
    classifier = IntentClassifier()
    message = "how many calories in peanut butter, is peanut butter safe for me?"

    with_allergies = classifier.classify(message, has_allergies=True)
    without_allergies = classifier.classify(message)

    assert with_allergies.intent is Intent.MEAL_SAFETY
    assert with_allergies.meal_name == "peanut butter"
    assert without_allergies.intent is Intent.NUTRITION_LOOKUP
    assert without_allergies.meal_name == "peanut butter"


def test_common_messages_route_as_expected() -> None:
    classifier = IntentClassifier()

    assert classifier.classify("hi").intent is Intent.GREETING
    assert classifier.classify("hello there").intent is Intent.GREETING

    lookup = classifier.classify("how many calories in grilled chicken")
    assert lookup.intent is Intent.NUTRITION_LOOKUP
    assert lookup.meal_name == "grilled chicken"

    omelette = classifier.classify(
        "is cheese omelette safe for me?", has_allergies=True
    )
    assert omelette.intent is Intent.MEAL_SAFETY
    assert omelette.meal_name == "cheese omelette"


def test_peanut_question_is_a_direct_allergen_hit() -> None:
    classified = IntentClassifier().classify("can I eat peanuts?", has_allergies=True)
    client = FakeMealDbClient()
    checker = AllergenChecker(
        ingredients=RecipeService(client=client, cache=InMemoryRecipeCache())
    )

    assert classified.intent is Intent.MEAL_SAFETY
    assert classified.meal_name == "peanuts"

    result = asyncio.run(checker.check_safety(classified.meal_name, ["peanut"]))

    assert result.status is SafetyStatus.UNSAFE
    assert result.allergens == ("peanut",)
    assert client.searches == []
