"""Application configuration management using Pydantic Settings.

This module defines the `Settings` class, which loads configuration parameters
from environment variables and a `.env` file. It centralizes the tunable
parameters of the CLI: logging level, loop display-state persistence and
output formatting.

The `get_settings` function provides a cached, singleton instance of the
configuration, ensuring consistent settings throughout the application.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict as _SettingsConfigDict

_VALID_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Defines all application configuration parameters.

    Values come from environment variables or a `.env` file. CLI flags take
    precedence over these values when given explicitly.
    """

    model_config = _SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    DEBUG: bool = Field(
        default=False,
        description="Enable verbose debug logging while parsing flow and run payloads",
    )

    # Loop display state
    LOOP_STATE_FILE: str = Field(
        default=".loop_state.json",
        description="Path to file storing the last loop display state (loop name -> index)",
    )
    PERSIST_LOOP_STATE: bool = Field(
        default=False,
        description="If true, `loops-state` writes the computed state back to LOOP_STATE_FILE",
    )
    CLAMP_LOOP_INDEXES: bool = Field(
        default=True,
        description=(
            "If true, `step-output` clamps each loop index to the iterations actually "
            "recorded (out-of-range selections show the last iteration)"
        ),
    )

    # Output
    OUTPUT_INDENT: int = Field(
        default=2, description="JSON indentation for CLI output (0 = compact)"
    )

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        """Trim and upper-case the level; reject names `logging` does not know."""
        if v is None:
            return "INFO"
        level = str(v).strip().upper() or "INFO"
        if level not in _VALID_LOG_LEVELS:
            raise ValueError(
                f"LOG_LEVEL must be one of {', '.join(_VALID_LOG_LEVELS)} (got {v!r})"
            )
        return level

    @field_validator("OUTPUT_INDENT", mode="after")
    @classmethod
    def non_negative_indent(cls, v: int) -> int:
        return max(0, v)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached, singleton instance of the application settings.

    Provides a clearer error if LOG_LEVEL is invalid.
    """
    try:
        return Settings()
    except ValidationError as e:
        bad_level = any(err.get("loc") == ("LOG_LEVEL",) for err in e.errors())
        if bad_level:
            raise RuntimeError(
                "LOG_LEVEL is invalid. Use one of: " + ", ".join(_VALID_LOG_LEVELS)
            ) from e
        raise
