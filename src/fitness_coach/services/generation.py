"""Text generation through a local Ollama model."""

import json
import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from fitness_coach.domain.errors import GenerationError

_logger = logging.getLogger(__name__)

GenerationResult = str | dict[str, object]


class OllamaClient(Protocol):
    """Interface for the Ollama generate endpoint."""

    async def generate(self, payload: dict[str, object]) -> dict[str, object]:
        """Send a generate request and return the decoded JSON body."""


@dataclass(frozen=True)
class GenerationOptions:
    """Sampling parameters sent with every request."""

    temperature: float = 0.7
    top_p: float = 0.8
    top_k: int = 40
    num_predict: int = 256
    num_ctx: int = 2048

    def as_payload(self) -> dict[str, object]:
        """Return options in the backend's wire format."""
        return {
            "temperature": self.temperature,
            "top_p": self.top_p,
            "top_k": self.top_k,
            "num_predict": self.num_predict,
            "num_ctx": self.num_ctx,
        }


@dataclass
class ResponseGateway:
    """Submits prompts to the generation backend and relays the answer."""

    client: OllamaClient
    model: str
    options: GenerationOptions

    async def generate(self, prompt: str) -> GenerationResult:
        """Return the generated text, or a parsed object for JSON output."""
        payload: dict[str, object] = {
            "model": self.model,
            "prompt": prompt,
            "options": self.options.as_payload(),
            "stream": False,
        }
        _logger.info("Generating response using model: %s", self.model)
        try:
            body = await self.client.generate(payload)
        except httpx.HTTPError as exc:
            _logger.error("Generation backend request failed: %s", exc)
            raise GenerationError(f"Ollama API error: {exc}") from exc

        raw = body.get("response")
        if not isinstance(raw, str):
            raise GenerationError("Ollama returned no response text")
        return parse_generated_text(raw)


def parse_generated_text(raw: str) -> GenerationResult:
    """Parse object-shaped output as JSON, falling back to the raw text."""
    stripped = raw.strip()
    if not (stripped.startswith("{") and stripped.endswith("}")):
        return raw
    try:
        parsed = json.loads(stripped)
    except json.JSONDecodeError as exc:
        _logger.warning("Response looks like JSON but failed to parse: %s", exc)
        return raw
    if not isinstance(parsed, dict):
        return raw
    return parsed
