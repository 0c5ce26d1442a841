"""Allergen safety checks for meals.

Checks run in a fixed order: a direct match against the meal name, then a
match against the recipe's ingredient list. Anything that cannot be proven
safe is reported as unverifiable, and unexpected failures are reported as
unsafe.
"""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from fitness_coach.domain.allergy import AllergyCheckResult, SafetyStatus
from fitness_coach.domain.errors import ExternalServiceError

_logger = logging.getLogger(__name__)


class IngredientSource(Protocol):
    """Provides ingredient names for a meal."""

    async def find_ingredients(self, name: str) -> list[str] | None:
        """Return ingredient names, or None when the meal is unknown."""


class AllergenMatchPolicy(Protocol):
    """Decides whether an ingredient carries an allergen."""

    def matches(self, ingredient: str, allergen: str) -> bool:
        """Return true when the ingredient should be treated as the allergen."""


class SubstringMatchPolicy(AllergenMatchPolicy):
    """Bidirectional case-insensitive substring containment.

    "dairy" does not match "cheese" under this policy.
    """

    def matches(self, ingredient: str, allergen: str) -> bool:
        """Return true if either string contains the other."""
        ingredient_lower = ingredient.strip().lower()
        allergen_lower = allergen.strip().lower()
        if not ingredient_lower or not allergen_lower:
            return False
        return allergen_lower in ingredient_lower or ingredient_lower in allergen_lower


DEFAULT_ALLERGEN_SYNONYMS: dict[str, tuple[str, ...]] = {
    "dairy": ("milk", "cheese", "butter", "cream", "yogurt", "yoghurt", "ghee"),
    "lactose": ("milk", "cheese", "butter", "cream", "yogurt", "yoghurt"),
    "gluten": ("wheat", "flour", "bread", "pasta", "barley", "rye", "spaghetti"),
    "egg": ("mayonnaise", "meringue"),
    "shellfish": ("prawn", "shrimp", "crab", "lobster", "mussel", "scallop"),
    "fish": ("salmon", "tuna", "cod", "haddock", "anchov", "sardine"),
    "tree nut": ("almond", "cashew", "walnut", "pecan", "hazelnut", "pistachio"),
    "nuts": ("almond", "cashew", "walnut", "pecan", "hazelnut", "peanut"),
    "soy": ("soy sauce", "tofu", "edamame", "miso"),
}


@dataclass
class SynonymMatchPolicy(AllergenMatchPolicy):
    """Substring matching extended with an allergen synonym table."""

    synonyms: dict[str, tuple[str, ...]] = field(
        default_factory=lambda: dict(DEFAULT_ALLERGEN_SYNONYMS)
    )
    base: SubstringMatchPolicy = field(default_factory=SubstringMatchPolicy)

    def matches(self, ingredient: str, allergen: str) -> bool:
        """Return true on a substring match or a known synonym."""
        if self.base.matches(ingredient, allergen):
            return True
        ingredient_lower = ingredient.strip().lower()
        return any(
            synonym in ingredient_lower
            for synonym in self.synonyms.get(allergen.strip().lower(), ())
        )


def build_match_policy(name: str) -> AllergenMatchPolicy:
    """Return the match policy configured by name."""
    if name == "substring":
        return SubstringMatchPolicy()
    if name == "synonyms":
        return SynonymMatchPolicy()
    raise ValueError(f"Unknown allergen match policy: {name}")


@dataclass
class AllergenChecker:
    """Checks meals against a user's allergens, failing closed."""

    ingredients: IngredientSource
    policy: AllergenMatchPolicy = field(default_factory=SubstringMatchPolicy)

    async def check_safety(
        self, meal_name: str, allergens: list[str] | tuple[str, ...]
    ) -> AllergyCheckResult:
        """Return the safety verdict for a meal."""
        cleaned = [allergen.strip() for allergen in allergens if allergen.strip()]
        if not cleaned:
            return AllergyCheckResult(
                status=SafetyStatus.SAFE,
                message=f'No allergies on file, so "{meal_name}" is not restricted.',
            )
        try:
            return await self._check(meal_name, cleaned)
        except Exception:
            _logger.exception("Allergen check failed for %s", meal_name)
            return AllergyCheckResult(
                status=SafetyStatus.UNSAFE,
                allergens=tuple(cleaned),
                message=(
                    f'Due to a technical error, I couldn\'t verify if "{meal_name}" '
                    f"is safe with your allergies to {', '.join(cleaned)}. "
                    "For safety, please assume it may contain allergens."
                ),
            )

    async def _check(self, meal_name: str, allergens: list[str]) -> AllergyCheckResult:
        name_lower = meal_name.lower()
        direct = [allergen for allergen in allergens if allergen.lower() in name_lower]
        if direct:
            _logger.info("Meal %s directly names allergens %s", meal_name, direct)
            return AllergyCheckResult(
                status=SafetyStatus.UNSAFE,
                allergens=tuple(direct),
                message=(
                    f'This meal name "{meal_name}" directly contains your '
                    f"allergen(s): {', '.join(direct)}."
                ),
            )

        try:
            ingredients = await self.ingredients.find_ingredients(meal_name)
        except ExternalServiceError as exc:
            _logger.warning("Ingredient lookup failed for %s: %s", meal_name, exc)
            ingredients = None

        if not ingredients:
            return AllergyCheckResult(
                status=SafetyStatus.UNVERIFIABLE,
                message=(
                    f'I couldn\'t verify all ingredients in "{meal_name}". Since you '
                    f"have allergies to {', '.join(allergens)}, please check "
                    "ingredients carefully before eating."
                ),
            )

        matches: list[tuple[str, str]] = []
        for allergen in dict.fromkeys(allergens):
            ingredient = next(
                (item for item in ingredients if self.policy.matches(item, allergen)),
                None,
            )
            if ingredient is not None:
                matches.append((ingredient, allergen))

        if matches:
            pairs = ", ".join(
                f"{ingredient} ({allergen})" for ingredient, allergen in matches
            )
            return AllergyCheckResult(
                status=SafetyStatus.UNSAFE,
                allergens=tuple(allergen for _, allergen in matches),
                matches=tuple(matches),
                message=(
                    f'The meal "{meal_name}" contains ingredients with allergens '
                    f"you're allergic to: {pairs}."
                ),
            )
        return AllergyCheckResult(
            status=SafetyStatus.SAFE,
            message=(
                f'Based on our ingredient check, "{meal_name}" appears safe for you '
                "to eat."
            ),
        )
