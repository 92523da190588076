"""Centralized configuration for redis-search using Pydantic Settings."""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strictly typed configuration loaded from environment variables.

    Values are read from the process environment (or a local ``.env`` file)
    and validated once at construction time.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",  # Ignore extra env vars not defined in model
    )

    # Store connection
    redis_url: str = Field(default="redis://localhost:6379/0", description="Redis connection URL")
    redis_socket_timeout: float | None = Field(
        default=None, gt=0, description="Socket timeout in seconds passed to the Redis client"
    )

    # Indexing behaviour
    free_text_field: str = Field(default="content", description="Field name analyzed as free text")
    default_match_words: Literal["all", "any"] = Field(
        default="all", description="Free-text combination mode when a query does not specify one"
    )
    phonetic_max_length: int = Field(default=32, ge=1, description="Maximum length of a phonetic class")

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    @field_validator("free_text_field")
    @classmethod
    def _check_free_text_field(cls, value: str) -> str:
        if not value or ":" in value:
            raise ValueError("FREE_TEXT_FIELD must be a non-empty name without ':'")
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.lower()
