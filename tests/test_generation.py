"""Tests for the response gateway."""

import asyncio

import httpx
import pytest

from fitness_coach.domain.errors import GenerationError
from fitness_coach.services.generation import (
    GenerationOptions,
    ResponseGateway,
    parse_generated_text,
)
from tests.conftest import FakeOllamaClient


def test_generate_sends_fixed_options() -> None:
    client = FakeOllamaClient(responses=["Drink water."])
    gateway = ResponseGateway(
        client=client, model="llama3", options=GenerationOptions()
    )

    result = asyncio.run(gateway.generate("How much water?"))

    assert result == "Drink water."
    assert client.payloads == [
        {
            "model": "llama3",
            "prompt": "How much water?",
            "options": {
                "temperature": 0.7,
                "top_p": 0.8,
                "top_k": 40,
                "num_predict": 256,
                "num_ctx": 2048,
            },
            "stream": False,
        }
    ]


def test_object_shaped_output_is_parsed() -> None:
    client = FakeOllamaClient(responses=['  {"overview": {"planType": "strength"}}\n'])
    gateway = ResponseGateway(
        client=client, model="llama3", options=GenerationOptions()
    )

    result = asyncio.run(gateway.generate("plan"))

    assert result == {"overview": {"planType": "strength"}}


def test_malformed_json_falls_back_to_raw_text() -> None:
    raw = "{not really json}"

    assert parse_generated_text(raw) == raw
    assert parse_generated_text("[1, 2]") == "[1, 2]"
    assert parse_generated_text("Plain answer {with braces}") == (
        "Plain answer {with braces}"
    )


def test_transport_failure_raises_generation_error() -> None:
    client = FakeOllamaClient(error=httpx.ConnectError("connection refused"))
    gateway = ResponseGateway(
        client=client, model="llama3", options=GenerationOptions()
    )

    with pytest.raises(GenerationError, match="Ollama API error"):
        asyncio.run(gateway.generate("hello"))
