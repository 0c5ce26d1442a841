"""Rule-based chat intent classification.

Rules are evaluated in a fixed priority order and the first matching rule
wins. Each pattern names its payload with a named group (``meal_name``,
``meal_time``, ``exercise_name`` or ``muscle_group``).
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from fitness_coach.domain.intents import ClassifiedIntent, Intent

_FLAGS = re.IGNORECASE
_MEAL_TIME = r"(?P<meal_time>breakfast|lunch|dinner|snack)"
_TRAILING_PUNCTUATION = re.compile(r"[\s?!.,]+$")

MUSCLE_GROUPS = (
    "full body",
    "upper body",
    "lower body",
    "core",
    "arms",
    "chest",
    "back",
    "shoulders",
    "legs",
    "glutes",
    "abs",
    "biceps",
    "triceps",
    "forearms",
    "quads",
    "hamstrings",
    "calves",
)
_MUSCLE_GROUP_PATTERNS = {
    muscle_group: re.compile(rf"\b{re.escape(muscle_group)}\b", _FLAGS)
    for muscle_group in MUSCLE_GROUPS
}


@dataclass(frozen=True)
class IntentRule:
    """Pattern group that fires a single intent."""

    intent: Intent
    patterns: tuple[re.Pattern[str], ...]
    requires_allergies: bool = False
    requires_profile: bool = False
    anchored: bool = False


def _compile(*patterns: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(pattern, _FLAGS) for pattern in patterns)


GREETING_RULE = IntentRule(
    intent=Intent.GREETING,
    anchored=True,
    patterns=_compile(
        r"hi",
        r"hello",
        r"hey",
        r"hi there",
        r"hello there",
        r"greetings",
        r"good (?:morning|afternoon|evening)",
        r"what'?s up",
        r"yo",
        r"howdy",
        r"hola",
        r"bonjour",
        r"sup",
        r"start",
    ),
)

MEAL_SAFETY_RULE = IntentRule(
    intent=Intent.MEAL_SAFETY,
    requires_allergies=True,
    patterns=_compile(
        r"is it safe for me to eat (?P<meal_name>[\w\s\-]+)",
        r"can i (?:eat|have|consume|try) (?!for\b)(?P<meal_name>[\w\s\-]+)",
        r"is (?P<meal_name>[\w\s\-]+) safe for me",
        r"should i avoid (?P<meal_name>[\w\s\-]+)",
        r"am i allergic to (?P<meal_name>[\w\s\-]+)",
        r"will (?P<meal_name>[\w\s\-]+) cause an? (?:allergic reaction|allergy)",
        r"is (?P<meal_name>[\w\s\-]+) ok with my allergies",
    ),
)

MEAL_SUGGESTION_RULE = IntentRule(
    intent=Intent.MEAL_SUGGESTION,
    requires_profile=True,
    patterns=_compile(
        rf"what (?:should|can|could) i (?:eat|have) for {_MEAL_TIME}",
        rf"suggest (?:a|some) {_MEAL_TIME}",
        rf"recommend (?:a|some) (?:meal|food) for {_MEAL_TIME}",
        rf"{_MEAL_TIME} (?:suggestion|recommendation|idea)",
        rf"what(?:'s| is) (?:a good|a healthy|healthy) {_MEAL_TIME}",
        rf"what {_MEAL_TIME} (?:should|can|could) i (?:eat|have)",
    ),
)

NUTRITION_LOOKUP_RULE = IntentRule(
    intent=Intent.NUTRITION_LOOKUP,
    patterns=_compile(
        r"what(?:'s| is| are) the nutrition(?: information| facts| data)? "
        r"(?:for|of) (?P<meal_name>[\w\s]+)",
        r"nutrition(?: information| facts| data)? (?:for|of) (?P<meal_name>[\w\s]+)",
        r"how many calories (?:(?:are|is|does|in) )*(?P<meal_name>[\w\s]+)",
        r"what(?:'s| is| are) the (?:calories|protein|carbs|fat) (?:for|of|in) "
        r"(?P<meal_name>[\w\s]+)",
        r"(?:calories|protein|carbs|fat) in (?P<meal_name>[\w\s]+)",
        r"tell me (?:about |the )?(?:nutrition|calories|macros) (?:for |of |in )?"
        r"(?P<meal_name>[\w\s]+)",
    ),
)

EXERCISE_QUERY_RULE = IntentRule(
    intent=Intent.EXERCISE_QUERY,
    patterns=_compile(
        r"how (?:to|do i) do (?:an? )?(?P<exercise_name>[\w\s\-]+)",
        r"correct form for (?P<exercise_name>[\w\s\-]+)",
        r"technique for (?P<exercise_name>[\w\s\-]+)",
        r"proper way to do (?P<exercise_name>[\w\s\-]+)",
        r"form check for (?P<exercise_name>[\w\s\-]+)",
        r"is my (?P<exercise_name>[\w\s\-]+) form correct",
        r"what muscles does (?P<exercise_name>[\w\s\-]+) work",
        r"what are the benefits of (?P<exercise_name>[\w\s\-]+)",
        r"is (?P<exercise_name>[\w\s\-]+) good for [\w\s\-]+",
        r"alternative to (?P<exercise_name>[\w\s\-]+)",
        r"replace (?P<exercise_name>[\w\s\-]+) with",
    ),
)

WORKOUT_REQUEST_RULE = IntentRule(
    intent=Intent.WORKOUT_REQUEST,
    patterns=_compile(
        r"workout for (?P<muscle_group>[\w\s]+)",
        r"exercises? for (?P<muscle_group>[\w\s]+)",
        r"how (?:to|do i|can i|should i) (?:train|work|exercise) (?:my )?"
        r"(?P<muscle_group>[\w\s]+)",
        r"what (?:exercises?|workout|training) (?:for|to) (?P<muscle_group>[\w\s]+)",
        r"(?:recommend|suggest) (?:a|some) (?:exercises?|workout) for "
        r"(?P<muscle_group>[\w\s]+)",
        r"help me (?:train|build|tone|strengthen) (?:my )?(?P<muscle_group>[\w\s]+)",
        r"best (?:exercises?|workout|training) for (?P<muscle_group>[\w\s]+)",
        r"how (?:to|do i|can i) "
        r"(?:gain muscle|lose weight|get stronger|build strength)",
        r"what (?:should|can) i do (?:at|in) (?:the )?(?:gym|home|outdoors)",
        r"workout plan",
        r"training (?:plan|program|routine|schedule)",
        r"fitness (?:plan|program|routine|schedule)",
        r"my (?:workout|exercise|training) (?:plan|routine)",
    ),
)

DEFAULT_RULES: tuple[IntentRule, ...] = (
    GREETING_RULE,
    MEAL_SAFETY_RULE,
    MEAL_SUGGESTION_RULE,
    NUTRITION_LOOKUP_RULE,
    EXERCISE_QUERY_RULE,
    WORKOUT_REQUEST_RULE,
)


@dataclass
class IntentClassifier:
    """Deterministic first-match-wins classifier over an ordered rule table."""

    rules: Sequence[IntentRule] = field(default_factory=lambda: DEFAULT_RULES)

    def classify(
        self, message: str, *, has_profile: bool = False, has_allergies: bool = False
    ) -> ClassifiedIntent:
        """Return the first intent whose rule matches the message."""
        text = message.strip().lower()
        bare = _TRAILING_PUNCTUATION.sub("", text)
        for rule in self.rules:
            if rule.requires_allergies and not has_allergies:
                continue
            if rule.requires_profile and not has_profile:
                continue
            for pattern in rule.patterns:
                if rule.anchored:
                    match = pattern.fullmatch(bare)
                else:
                    match = pattern.search(text)
                if match is None:
                    continue
                classified = _build(rule.intent, match, text)
                if classified is not None:
                    return classified
        return ClassifiedIntent(intent=Intent.GENERAL_QUERY)


def _build(intent: Intent, match: re.Match[str], text: str) -> ClassifiedIntent | None:
    groups = {
        key: value.strip()
        for key, value in match.groupdict().items()
        if value and value.strip()
    }
    if intent is Intent.MEAL_SAFETY or intent is Intent.NUTRITION_LOOKUP:
        if "meal_name" not in groups:
            return None
        return ClassifiedIntent(intent=intent, meal_name=groups["meal_name"])
    if intent is Intent.MEAL_SUGGESTION:
        return ClassifiedIntent(intent=intent, meal_time=groups["meal_time"])
    if intent is Intent.EXERCISE_QUERY:
        if "exercise_name" not in groups:
            return None
        return ClassifiedIntent(intent=intent, exercise_name=groups["exercise_name"])
    if intent is Intent.WORKOUT_REQUEST:
        return ClassifiedIntent(
            intent=intent,
            muscle_group=extract_muscle_group(groups.get("muscle_group"), text),
        )
    return ClassifiedIntent(intent=intent)


def extract_muscle_group(candidate: str | None, text: str) -> str | None:
    """Return a known muscle group named in the capture, else in the message.

    Groups match as whole words and the longest named group wins, so
    "forearms" is not read as "arms".
    """
    for source in (candidate, text):
        if not source:
            continue
        named = [
            muscle_group
            for muscle_group in MUSCLE_GROUPS
            if _MUSCLE_GROUP_PATTERNS[muscle_group].search(source)
        ]
        if named:
            return max(named, key=len)
    return None
