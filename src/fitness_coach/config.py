"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    ollama_api_url: str = "http://localhost:11434/api/generate"
    ollama_model: str = "llama3:8b-instruct-q4_K_M"
    ollama_temperature: float = 0.7
    ollama_top_p: float = 0.8
    ollama_top_k: int = 40
    ollama_max_tokens: int = 256
    ollama_num_ctx: int = 2048
    ollama_timeout_seconds: float = 120
    mealdb_base_url: str = "https://www.themealdb.com/api/json/v1"
    mealdb_api_key: str = "1"
    wger_base_url: str = "https://wger.de/api/v2"
    wger_api_key: str | None = None
    meals_catalog_path: Path = Path("data/meals_nutrition.json")
    meal_match_tolerance: float = 0.15
    meal_suggestion_limit: int = 5
    allergen_match_policy: str = "substring"
    api_prefix: str = ""
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
