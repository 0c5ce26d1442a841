"""Allergy check result models."""

from dataclasses import dataclass
from enum import StrEnum


class SafetyStatus(StrEnum):
    """Outcome of an allergen check."""

    SAFE = "safe"
    UNSAFE = "unsafe"
    UNVERIFIABLE = "unverifiable"


@dataclass(frozen=True)
class AllergyCheckResult:
    """Result of checking one meal against a user's allergens."""

    status: SafetyStatus
    message: str
    allergens: tuple[str, ...] = ()
    # (ingredient, allergen) pairs, one per allergen.
    matches: tuple[tuple[str, str], ...] = ()

    @property
    def is_safe(self) -> bool:
        """Return true only for an explicit safe verdict."""
        return self.status is SafetyStatus.SAFE

    @property
    def ingredients(self) -> tuple[str, ...]:
        """Return the matched ingredients in match order."""
        return tuple(dict.fromkeys(ingredient for ingredient, _ in self.matches))
