"""
Meal Mate - Configuration and settings.

Settings are read from the environment (and a local .env file). The OpenAI
key is optional at this layer; the generation gateway validates it when it
is built.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # OpenAI
    openai_api_key: str | None = None
    mealmate_model: str = "gpt-4.1-mini"
    mealmate_temperature: float = 0.3
    mealmate_max_output_tokens: int = 2048

    # Recipe import
    fetch_timeout_seconds: float = 10.0
    page_text_budget: int = 4000  # Characters of page text sent to the model

    # Supabase (only the db layer needs these)
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    supabase_service_role_key: str | None = None

    # Application
    mealmate_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Prompt logging
    # MEALMATE_LOG_PROMPTS=1 - log to local files
    mealmate_log_prompts: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class _SettingsProxy:
    """Lazy proxy for settings to avoid loading .env at import time."""

    _instance: Settings | None = None

    def __getattr__(self, name: str):
        if self._instance is None:
            self._instance = get_settings()
        return getattr(self._instance, name)


settings = _SettingsProxy()
