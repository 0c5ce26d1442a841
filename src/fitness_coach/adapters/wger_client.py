"""WGER exercise API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

ENGLISH_LANGUAGE_ID = 2


class WgerClient(Protocol):
    """Interface for WGER API interactions."""

    async def list_exercises(self, muscle_id: int, limit: int = 5) -> dict[str, object]:
        """List exercises targeting a muscle and return raw API data."""

    async def search_exercises(self, term: str) -> dict[str, object]:
        """Search exercises by free-text name."""

    async def get_exercise_info(self, exercise_id: int) -> dict[str, object]:
        """Fetch full exercise details by id."""


@dataclass
class HttpxWgerClient(WgerClient):
    """HTTPX-backed WGER client."""

    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, base_url: str, api_key: str | None = None) -> "HttpxWgerClient":
        """Create a WGER client with a managed httpx session."""
        headers = {"Accept": "application/json"}
        if api_key:
            headers["Authorization"] = f"Token {api_key}"
        return cls(base_url=base_url, http_client=httpx.AsyncClient(headers=headers))

    async def list_exercises(self, muscle_id: int, limit: int = 5) -> dict[str, object]:
        """List exercises for a muscle id."""
        url = f"{self.base_url}/exerciseinfo/"
        response = await self.http_client.get(
            url,
            params={
                "muscles": muscle_id,
                "language": ENGLISH_LANGUAGE_ID,
                "limit": limit,
            },
            timeout=15,
        )
        response.raise_for_status()
        return response.json()

    async def search_exercises(self, term: str) -> dict[str, object]:
        """Search exercises by name."""
        url = f"{self.base_url}/exercise/search/"
        response = await self.http_client.get(
            url, params={"term": term, "language": "en"}, timeout=15
        )
        response.raise_for_status()
        return response.json()

    async def get_exercise_info(self, exercise_id: int) -> dict[str, object]:
        """Fetch exercise details by id."""
        url = f"{self.base_url}/exerciseinfo/{exercise_id}/"
        response = await self.http_client.get(url, timeout=15)
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
