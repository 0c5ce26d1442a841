"""Ollama generate API client."""

from dataclasses import dataclass

import httpx

from fitness_coach.services.generation import OllamaClient


@dataclass
class HttpxOllamaClient(OllamaClient):
    """Ollama client implemented with httpx."""

    api_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 120

    @classmethod
    def create(cls, api_url: str, timeout_seconds: float = 120) -> "HttpxOllamaClient":
        """Create an Ollama client with a managed httpx session."""
        return cls(
            api_url=api_url,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def generate(self, payload: dict[str, object]) -> dict[str, object]:
        """Post a non-streaming generate request and return the JSON body."""
        response = await self.http_client.post(
            self.api_url, json=payload, timeout=self.timeout_seconds
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
