"""Pydantic models for inbound API payloads."""

from pydantic import BaseModel, ConfigDict, Field


class ChatRequest(BaseModel):
    """Chat message with an optional user id."""

    model_config = ConfigDict(populate_by_name=True)

    message: str | None = None
    user_id: str | None = Field(default=None, alias="userId")


class FitnessRecommendationsRequest(BaseModel):
    """Plan request for a stored user."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str | None = Field(default=None, alias="userId")


class SimpleChatRequest(BaseModel):
    """Chat message answered without personalisation."""

    message: str | None = None
