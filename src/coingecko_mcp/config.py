"""Runtime settings loaded from the environment or a local ``.env`` file."""

from __future__ import annotations

import logging
import sys
from typing import Literal, get_args

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from coingecko_mcp.errors import ConfigurationError

DEFAULT_BASE_URL = "https://pro-api.coingecko.com/api/v3"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LOG_LEVELS: tuple[str, ...] = get_args(LogLevel)


class Settings(BaseSettings):
    api_key: str = Field(min_length=1, description="CoinGecko Pro API key.")
    base_url: str = DEFAULT_BASE_URL
    # None disables the client-side timeout entirely.
    request_timeout: float | None = None
    log_level: LogLevel = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="COINGECKO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


def load_settings(**overrides: object) -> Settings:
    """Build Settings, turning a missing or empty API key into ConfigurationError."""
    try:
        return Settings(**overrides)
    except ValidationError as e:
        fields = ", ".join(
            ".".join(str(part) for part in error["loc"]) for error in e.errors()
        )
        if "api_key" in fields:
            raise ConfigurationError(
                "COINGECKO_API_KEY environment variable is required"
            ) from e
        raise ConfigurationError(f"Invalid configuration for: {fields}") from e


def configure_logging(level: str = "INFO") -> None:
    """Route log records to stderr; stdout carries the stdio transport."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
        force=True,
    )
