from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    env: str = "development"
    cors_origins: list[str] = ["http://localhost:3000"]
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Any OpenAI-compatible chat-completion endpoint works; Groq is the default.
    ai_base_url: str = "https://api.groq.com/openai/v1"
    ai_model: str = "llama-3.1-8b-instant"
    ai_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("AI_API_KEY", "GROQ_API_KEY"),
    )
    ai_temperature: float = 0.3
    ai_request_timeout_sec: int = 60
    ai_max_attempts: int = Field(default=3, ge=1, le=3)
    ai_backoff_unit_sec: float = Field(default=1.0, ge=0)

    grammar_check_url: str = "https://api.languagetool.org/v2/check"
    grammar_check_language: str = "en-US"
    grammar_check_timeout_sec: int = 30

    model_config = SettingsConfigDict(env_file="../../.env", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
