"""TheMealDB API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class MealDbClient(Protocol):
    """Interface for TheMealDB API interactions."""

    async def search_meals(self, name: str) -> dict[str, object]:
        """Search meals by name and return raw API data."""


@dataclass
class HttpxMealDbClient(MealDbClient):
    """HTTPX-backed MealDB client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxMealDbClient":
        """Create a MealDB client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def search_meals(self, name: str) -> dict[str, object]:
        """Search meals by name."""
        url = f"{self.base_url}/{self.api_key}/search.php"
        response = await self.http_client.get(url, params={"s": name}, timeout=15)
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
