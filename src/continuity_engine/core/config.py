"""Configuration management for the continuity engine.

Settings are loaded with pydantic-settings from environment variables and
an optional .env file. The engine itself is a pure function family, so
configuration only shapes the ambient behaviour around it: logging, which
continuity rules run, and the incremental snapshot arena.

Example:
    >>> from continuity_engine.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.log_level
    'INFO'

Environment Variables:
    CONTINUITY_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    CONTINUITY_JSON_LOGS: Emit JSON log lines instead of console output
    CONTINUITY_LOG_FILE: Optional path of a log file
    CONTINUITY_RULES_DISABLED_CODES: JSON list of rule codes to skip
    CONTINUITY_CACHE_ENABLED: Enable the incremental snapshot arena
    CONTINUITY_CACHE_MAX_UNITS: Maximum number of units held by one arena
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from continuity_engine.core.exceptions import ConfigurationError


class RuleSettings(BaseSettings):
    """Configuration for the continuity rule engine.

    Attributes:
        disabled_codes: Issue codes whose rules are left out of the engine.
    """

    model_config = SettingsConfigDict(
        env_prefix="CONTINUITY_RULES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    disabled_codes: list[str] = Field(
        default_factory=list,
        description="Rule codes to skip during evaluation",
    )

    @field_validator("disabled_codes", mode="after")
    @classmethod
    def normalize_codes(cls, value: list[str]) -> list[str]:
        """Upper-case and de-duplicate rule codes, keeping their order."""
        seen: list[str] = []
        for code in value:
            normalized = code.strip().upper()
            if normalized and normalized not in seen:
                seen.append(normalized)
        return seen


class CacheSettings(BaseSettings):
    """Configuration for the incremental snapshot arena.

    Attributes:
        enabled: Whether callers should route projections through an arena.
        max_units: Upper bound on the number of units a single arena holds.
    """

    model_config = SettingsConfigDict(
        env_prefix="CONTINUITY_CACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool = Field(
        default=False,
        description="Use the incremental snapshot arena",
    )
    max_units: int = Field(
        default=10_000,
        ge=1,
        description="Maximum units held by one arena",
    )


class Settings(BaseSettings):
    """Main engine settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Logging level.
        json_logs: Render logs as JSON.
        log_file: Optional log file path.
        rules: Rule engine settings.
        cache: Snapshot arena settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="CONTINUITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="Continuity Engine",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Render log events as JSON",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional log file path",
    )

    rules: RuleSettings = Field(default_factory=RuleSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.upper()
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the engine settings singleton.

    Returns:
        The cached Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load engine settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "RuleSettings",
    "CacheSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
