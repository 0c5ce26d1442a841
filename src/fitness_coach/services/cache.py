"""TTL cache for recipe lookups."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from fitness_coach.domain.meals import MealRecord


class RecipeCache(Protocol):
    """Cache interface keyed by normalized meal name."""

    def lookup(self, name: str) -> tuple[bool, MealRecord | None]:
        """Return (hit, meal); a hit with None means a cached miss."""

    def store(self, name: str, meal: MealRecord | None, ttl_seconds: int) -> None:
        """Cache a meal, or a miss when meal is None."""


@dataclass
class _CacheEntry:
    meal: MealRecord | None
    expires_at: datetime


@dataclass
class InMemoryRecipeCache(RecipeCache):
    """Process-local recipe cache with per-entry expiry."""

    entries: dict[str, _CacheEntry] = field(default_factory=dict)

    def lookup(self, name: str) -> tuple[bool, MealRecord | None]:
        """Return a cached meal or miss if the entry hasn't expired."""
        key = _normalize(name)
        entry = self.entries.get(key)
        if entry is None:
            return False, None
        if datetime.now(tz=UTC) >= entry.expires_at:
            self.entries.pop(key, None)
            return False, None
        return True, entry.meal

    def store(self, name: str, meal: MealRecord | None, ttl_seconds: int) -> None:
        """Store a meal or miss with a TTL."""
        expires_at = datetime.now(tz=UTC) + timedelta(seconds=ttl_seconds)
        self.entries[_normalize(name)] = _CacheEntry(meal=meal, expires_at=expires_at)


def _normalize(name: str) -> str:
    return " ".join(name.lower().split())
