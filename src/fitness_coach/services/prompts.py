"""Prompt templates for the coaching model.

Every builder embeds computed figures (targets, nutrition facts, meal names)
verbatim so the model never has to do the arithmetic itself.
"""

import json
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from fitness_coach.domain.allergy import AllergyCheckResult, SafetyStatus
from fitness_coach.domain.exercises import (
    ExerciseRecord,
    WorkoutDay,
    WorkoutRecommendation,
)
from fitness_coach.domain.meals import MatchedMeal, MealRecord
from fitness_coach.domain.nutrition import NutritionTarget
from fitness_coach.domain.profile import UserProfile

COACH_NAME = "Coach X"
NOT_SPECIFIED = "Not specified"
CATALOG_SAMPLE_SIZE = 5
MORNING_END_HOUR = 12
AFTERNOON_END_HOUR = 18


@dataclass(frozen=True)
class ComposedPrompt:
    """Prompt text plus an optional prefix the answer must start with."""

    text: str
    required_prefix: str | None = None


def unsafe_meal_prefix(meal_name: str) -> str:
    """Return the literal sentence an unsafe-meal answer must begin with."""
    return f"NO, you should not eat {meal_name}."


def build_greeting_prompt(
    message: str, profile: UserProfile | None, now: datetime
) -> ComposedPrompt:
    """Build the welcome prompt with a time-of-day salutation."""
    name = profile.first_name if profile and profile.first_name else "there"
    salutation = _time_greeting(now)
    goal = profile.goal if profile and profile.goal else None
    lines = [
        f"You are {COACH_NAME}, an enthusiastic and helpful fitness and nutrition "
        "coach.",
        "",
        f'The user has just greeted you with "{message}".',
        "",
    ]
    if profile:
        lines += [
            "## USER INFO",
            f"Name: {name}",
            f"Goal: {goal or 'Not set yet'}",
            f"Fitness Level: {profile.fitness_level or 'Not set yet'}",
            "",
        ]
    lines += [
        "## INSTRUCTIONS",
        f'- Start with "{salutation}, {name}!"',
        f"- Welcome them warmly to {COACH_NAME}'s fitness assistant",
        "- Provide a brief guide to what you can help with:",
        "  * Nutritional information about foods",
        "  * Personalized meal suggestions for each meal time",
        "  * Workout plans and exercise technique guidance",
        "  * Checking if foods are safe with their allergies",
    ]
    if goal:
        lines.append(f"- Mention you're here to help with their goal ({goal})")
    lines += [
        "- Invite them to ask a specific question to get started",
        "- Keep your response friendly, enthusiastic and concise",
        "",
        "## YOUR RESPONSE",
    ]
    return ComposedPrompt(text="\n".join(lines))


def build_meal_safety_prompt(
    message: str,
    meal_name: str,
    result: AllergyCheckResult,
    allergies: Sequence[str],
    profile: UserProfile | None,
) -> ComposedPrompt:
    """Build the allergy safety prompt for a specific meal."""
    subject = "The user"
    if profile and profile.first_name:
        subject = f"The user {profile.first_name}"
    lines = [
        f"You are {COACH_NAME}, a cautious nutrition coach who prioritizes user "
        "health and safety.",
        "",
        f"{subject} has food allergies to: {', '.join(allergies)}.",
        "",
        f'They just asked: "{message}"',
        "",
        result.message,
        "",
    ]
    if result.status is SafetyStatus.UNSAFE:
        prefix = unsafe_meal_prefix(meal_name)
        reasons = ", ".join(result.allergens) or ", ".join(allergies)
        lines += [
            "## ALLERGY WARNING",
            f'The meal "{meal_name}" is NOT safe for this user ({reasons}).',
            "",
            "## IMPORTANT INSTRUCTIONS",
            f'- START your response with "{prefix}"',
            f"- Clearly explain why it's unsafe ({reasons})",
            "- Be firm but friendly in your warning",
            "- Suggest an alternative if possible",
            "",
            "## YOUR RESPONSE",
        ]
        return ComposedPrompt(text="\n".join(lines), required_prefix=prefix)

    if result.status is SafetyStatus.UNVERIFIABLE:
        lines += [
            "## ALLERGY WARNING",
            f'The ingredients of "{meal_name}" could not be verified.',
            "",
            "## IMPORTANT INSTRUCTIONS",
            "- Do NOT tell the user the meal is safe",
            "- Tell them to check the ingredients carefully before eating",
            f"- Remind them of their allergies ({', '.join(allergies)})",
            "- Suggest a meal you can confidently recommend instead",
            "",
            "## YOUR RESPONSE",
        ]
        return ComposedPrompt(text="\n".join(lines))

    lines += [
        "## INSTRUCTIONS",
        f'- Tell the user that "{meal_name}" appears safe based on its ingredients',
        "- Remind them to double-check labels when eating out or buying packaged food",
        "- Keep your response friendly and concise",
        "",
        "## YOUR RESPONSE",
    ]
    return ComposedPrompt(text="\n".join(lines))


def build_meal_suggestion_prompt(
    message: str,
    target: NutritionTarget,
    matches: Sequence[MatchedMeal],
    profile: UserProfile | None,
) -> ComposedPrompt:
    """Build the meal suggestion prompt for a meal time."""
    meal_time = target.meal_time
    lines = [f"You are {COACH_NAME}, a personalized nutrition coach.", ""]
    lines += _user_summary(profile)
    lines += _target_section(target)
    if matches:
        lines.append(f"## MEAL SUGGESTIONS FOR {meal_time.upper()}")
        for index, match in enumerate(matches, start=1):
            favorite = " - One of your favorites!" if match.liked else ""
            lines.append(f"{index}. {_meal_line(match.meal)}{favorite}")
        lines += [
            "",
            "## USER QUERY",
            message,
            "",
            "## INSTRUCTIONS",
            f"- Recommend 2-3 of these meal options for the user's {meal_time}",
            "- Use the EXACT nutrition values shown above",
            "- Explain briefly why they match their nutritional needs",
        ]
        if any(match.liked for match in matches):
            lines.append("- Emphasize the meals marked as favorites")
        lines += ["- Keep your response friendly and concise", "", "## YOUR RESPONSE"]
        return ComposedPrompt(text="\n".join(lines))

    lines += [
        "I couldn't find specific meals in our database that match these "
        "requirements exactly.",
        "",
        "## USER QUERY",
        message,
        "",
        "## INSTRUCTIONS",
        "- Explain that you don't have specific meal matches in the database",
        "- Suggest 2-3 general meal ideas that would fit these nutritional "
        "requirements",
        "- Keep your response friendly and helpful",
        "",
        "## YOUR RESPONSE",
    ]
    return ComposedPrompt(text="\n".join(lines))


def build_missing_nutrition_prompt(
    message: str, meal_time: str, profile: UserProfile | None
) -> ComposedPrompt:
    """Build the prompt used when the user has no nutrition targets yet."""
    lines = [f"You are {COACH_NAME}, a personalized nutrition coach.", ""]
    lines += _user_summary(profile)
    lines += [
        "I don't have your personalized nutrition data yet.",
        "",
        "## USER QUERY",
        message,
        "",
        "## INSTRUCTIONS",
        "- Explain that you need to calculate their nutritional needs first",
        "- Encourage them to complete their profile with height, weight, activity "
        "level, and goals",
        f"- Offer some general healthy {meal_time} suggestions based on their profile",
        "",
        "## YOUR RESPONSE",
    ]
    return ComposedPrompt(text="\n".join(lines))


def build_nutrition_lookup_prompt(  # noqa: PLR0913
    message: str,
    meals: Sequence[MealRecord],
    profile: UserProfile | None,
    allergy_results: Sequence[AllergyCheckResult] = (),
    liked: bool = False,
    disliked: bool = False,
) -> ComposedPrompt:
    """Build the nutrition facts prompt for catalog matches.

    Every listed meal that was not verified safe gets a line in the allergy
    warning block.
    """
    flagged = [result for result in allergy_results if not result.is_safe]
    warn = bool(flagged)
    lines = [f"You are {COACH_NAME}, a personal nutrition coach.", ""]
    lines += _user_summary(profile)
    lines.append("## NUTRITION DATA")
    lines += [_meal_line(meal) for meal in meals]
    lines.append("")
    if warn:
        lines.append("## ALLERGY WARNING")
        lines += [f"- {result.message}" for result in flagged]
        lines += ["Begin your response with this allergy warning.", ""]
    if liked:
        lines += [
            "## USER PREFERENCE",
            "The user has marked this food as one they like.",
            "",
        ]
    if disliked:
        lines += [
            "## USER PREFERENCE",
            "The user has marked this food as one they dislike.",
            "",
        ]
    lines += ["## INSTRUCTIONS", "- Provide the EXACT nutrition values shown above"]
    if warn:
        lines.append("- Start with a clear allergy warning")
    if liked:
        lines.append("- Mention that this is one of their favorite foods")
    if disliked:
        lines.append(
            "- Note that they usually avoid this food, but provide nutrition data "
            "anyway"
        )
    lines += [
        "- Keep your response concise and focused on the nutrition information",
        "",
        "## USER QUERY",
        message,
        "",
        "## YOUR RESPONSE",
    ]
    return ComposedPrompt(text="\n".join(lines))


def build_exercise_prompt(message: str, exercise: ExerciseRecord) -> ComposedPrompt:
    """Build the technique prompt for a known exercise."""
    lines = [
        f"You are {COACH_NAME}, a certified personal trainer and exercise specialist.",
        "",
        "## EXERCISE INFORMATION",
        f"Name: {exercise.name}",
        f"Description: {exercise.description or NOT_SPECIFIED}",
        f"Category: {exercise.category}",
        f"Primary Muscles: {', '.join(exercise.muscles) or NOT_SPECIFIED}",
        f"Secondary Muscles: {', '.join(exercise.muscles_secondary) or 'None'}",
        f"Equipment: {', '.join(exercise.equipment) or 'Bodyweight'}",
        "",
        "## USER QUERY",
        message,
        "",
        "## INSTRUCTIONS",
        f"- Provide detailed information about the {exercise.name} exercise",
        "- Explain proper form and technique in a step-by-step manner",
        "- Describe common mistakes and how to avoid them",
        "- Mention the primary muscles worked and benefits",
        "- Provide any relevant safety tips",
        "- Keep your response conversational and helpful",
        "",
        "## YOUR RESPONSE",
    ]
    return ComposedPrompt(text="\n".join(lines))


def build_exercise_not_found_prompt(message: str, exercise_name: str) -> ComposedPrompt:
    """Build the prompt used when an exercise is missing from the catalog."""
    lines = [
        f"You are {COACH_NAME}, a certified personal trainer and exercise specialist.",
        "",
        f'I don\'t have specific information about "{exercise_name}" in my exercise '
        "database.",
        "",
        "## USER QUERY",
        message,
        "",
        "## INSTRUCTIONS",
        "- Explain that you don't have detailed information about this specific "
        "exercise",
        "- Provide general guidance about this type of exercise if you can "
        "recognize it",
        "- Emphasize the importance of proper form and technique",
        "- Suggest seeking guidance from a certified trainer for unfamiliar exercises",
        "- If this seems like a common exercise with a different name, suggest what it "
        "might be",
        "",
        "## YOUR RESPONSE",
    ]
    return ComposedPrompt(text="\n".join(lines))


def build_workout_prompt(
    message: str,
    recommendation: WorkoutRecommendation,
    profile: UserProfile | None,
) -> ComposedPrompt:
    """Build the workout recommendation prompt."""
    volume = recommendation.volume
    lines = [f"You are {COACH_NAME}, a certified personal trainer.", ""]
    lines += _user_summary(profile)
    lines += [
        f"## WORKOUT FOCUS: {recommendation.muscle_group.upper()}",
        f"Fitness Level: {recommendation.fitness_level}",
        f"Sets: {volume.sets}",
        f"Reps: {volume.min_reps}-{volume.max_reps}",
        f"Rest: {volume.rest_seconds} seconds between sets",
        "",
    ]
    if recommendation.exercises:
        lines.append("## AVAILABLE EXERCISES")
        for exercise in recommendation.exercises:
            equipment = ", ".join(exercise.equipment) or "Bodyweight"
            lines.append(f"- {exercise.name} ({exercise.category}; {equipment})")
        lines.append("")
    else:
        lines += ["No exercises from the database matched the user's equipment.", ""]
    lines += [
        "## USER QUERY",
        message,
        "",
        "## INSTRUCTIONS",
        "- Build a workout from the exercises listed above when available",
        "- Use the EXACT sets, reps and rest values shown above",
        "- Add one short form cue per exercise",
        "- Keep your response motivating and concise",
        "",
        "## YOUR RESPONSE",
    ]
    return ComposedPrompt(text="\n".join(lines))


def build_general_prompt(message: str, profile: UserProfile | None) -> ComposedPrompt:
    """Build the catch-all coaching prompt with the user's profile as context."""
    lines = [f"You are {COACH_NAME}, a personal fitness and nutrition coach.", ""]
    if profile:
        lines += [
            "## USER PROFILE",
            json.dumps(profile_context(profile), indent=2),
            "",
        ]
    lines += [
        "## INSTRUCTIONS",
        "- Provide personalized advice based on the user's profile",
        "- Keep responses concise and helpful",
        "- If the user asks about foods they're allergic to, warn them",
        "- Recommend foods they like and avoid suggesting foods they dislike",
        "",
        "## USER QUERY",
        message,
        "",
        "## YOUR RESPONSE",
    ]
    return ComposedPrompt(text="\n".join(lines))


def build_fitness_plan_prompt(
    profile: UserProfile,
    meals: Sequence[MealRecord],
    plan: Sequence[WorkoutDay],
    plan_days: int = 7,
) -> ComposedPrompt:
    """Build the full fitness and nutrition plan prompt."""
    fitness_level = profile.fitness_level or "Beginner"
    lines = [
        "# FITNESS AND NUTRITION PLAN GENERATION",
        "",
        "You are a professional fitness coach and nutritionist. Create a "
        f"personalized {plan_days}-day fitness and nutrition plan for this client.",
        "",
        "## USER INFO",
        f"Age: {profile.age or NOT_SPECIFIED}",
        f"Weight: {_with_unit(profile.weight, 'kg')}",
        f"Height: {_with_unit(profile.height, 'cm')}",
        f"Gender: {profile.gender or NOT_SPECIFIED}",
        f"Fitness Level: {fitness_level}",
        f"Goals: {profile.goal or profile.fitness_goal or 'General fitness'}",
        f"Dietary Preferences: {', '.join(profile.food_likes) or 'None specified'}",
        f"Restrictions: {_restrictions(profile)}",
        "",
        "## NUTRITION DATA",
    ]
    if meals:
        lines.append(
            f"Database contains {len(meals)} meals with complete nutritional "
            "information."
        )
        lines.append("Sample meals:")
        lines += [f"- {_meal_line(meal)}" for meal in meals[:CATALOG_SAMPLE_SIZE]]
    else:
        lines.append("No nutrition data available.")
    lines += ["", "## SUGGESTED TRAINING SPLIT"]
    for index, day in enumerate(plan, start=1):
        names = ", ".join(exercise.name for exercise in day.exercises) or "Rest"
        lines.append(f"Day {index} ({day.focus}): {names}")
    lines += [
        "",
        "## INSTRUCTIONS",
        "Based on the user's profile and available nutrition data, create a "
        "comprehensive plan that includes:",
        "",
        "1. A personalized workout schedule with specific exercises, sets, reps, and "
        "rest periods",
        "2. A meal plan with specific meals for breakfast, lunch, dinner, and snacks",
        "3. Daily caloric and macronutrient targets",
        "4. Tips for adherence and progress tracking",
        "",
        "IMPORTANT GUIDELINES:",
        f"- Tailor exercises to the user's fitness level ({fitness_level})",
        "- Select meals that align with their dietary preferences and restrictions",
        "- Never include meals containing the user's allergens",
        "- For weight loss: Create a moderate calorie deficit (300-500 calories below "
        "maintenance)",
        "- For muscle gain: Create a moderate calorie surplus (300-500 calories above "
        "maintenance)",
        "- For general fitness: Match calories to estimated daily expenditure",
        "- Protein: 1.6-2.2g per kg of bodyweight for muscle building, 1.2-1.6g for "
        "maintenance",
        "",
        "## RESPONSE FORMAT",
        "Respond with a single JSON object with the keys overview (calorieTarget, "
        "proteinTarget, carbTarget, fatTarget, planType), workoutPlan (day1..dayN "
        "with focus and exercises of name, sets, reps, rest), mealPlan (day1..dayN "
        "with breakfast, lunch, dinner and snacks) and tips (list of strings).",
    ]
    return ComposedPrompt(text="\n".join(lines))


def build_simple_prompt(message: str) -> ComposedPrompt:
    """Build the minimal pass-through chat prompt."""
    return ComposedPrompt(text=f"User: {message}\n\nResponse:")


def profile_context(profile: UserProfile) -> dict[str, object]:
    """Return the profile fields shared with the model as JSON context."""
    return {
        "personalData": {
            "name": profile.full_name,
            "email": profile.email or "",
            "username": profile.username or "",
        },
        "bodyData": {
            "gender": profile.gender or "",
            "age": profile.age or "",
            "weight": profile.weight or "",
            "height": profile.height or "",
            "activityLevel": profile.activity_level or "",
            "goal": profile.goal or "",
            "allergies": list(profile.allergies),
            "foodLikes": list(profile.food_likes),
            "foodDislikes": list(profile.food_dislikes),
        },
        "workoutData": {
            "fitnessLevel": profile.fitness_level or "",
            "fitnessGoal": profile.fitness_goal or "",
            "equipment": list(profile.equipment),
            "muscleGroups": list(profile.muscle_groups),
        },
    }


def _user_summary(profile: UserProfile | None) -> list[str]:
    if profile is None:
        return []
    details = [profile.display_name]
    if profile.gender:
        details.append(profile.gender)
    if profile.age is not None:
        details.append(f"{profile.age} years old")
    return ["## USER INFO", ", ".join(details), ""]


def _target_section(target: NutritionTarget) -> list[str]:
    return [
        f"## NUTRITION REQUIREMENTS FOR {target.meal_time.upper()}",
        "The user needs approximately:",
        f"- {target.calories} calories",
        f"- {target.protein}g protein",
        f"- {target.carbs}g carbs",
        f"- {target.fat}g fat",
        "",
    ]


def _meal_line(meal: MealRecord) -> str:
    facts = meal.nutrition
    if facts is None:
        return f"{meal.name}: nutrition data unavailable"
    return (
        f"{meal.name}: {facts.calories:g} calories, {facts.protein:g}g protein, "
        f"{facts.carbs:g}g carbs, {facts.fat:g}g fat"
    )


def _with_unit(value: float | None, unit: str) -> str:
    return f"{value:g} {unit}" if value else NOT_SPECIFIED


def _restrictions(profile: UserProfile) -> str:
    parts = []
    if profile.allergies:
        parts.append(f"allergies: {', '.join(profile.allergies)}")
    if profile.food_dislikes:
        parts.append(f"dislikes: {', '.join(profile.food_dislikes)}")
    return "; ".join(parts) or "None specified"


def _time_greeting(now: datetime) -> str:
    if now.hour < MORNING_END_HOUR:
        return "Good morning"
    if now.hour < AFTERNOON_END_HOUR:
        return "Good afternoon"
    return "Good evening"
