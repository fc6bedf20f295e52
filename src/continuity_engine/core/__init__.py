"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        ContinuityEngineError: Base exception for all engine errors.
        NodeNotFoundError: Target unit missing from a timeline.
        RuleRegistrationError: Rule registry misuse.
        ConfigurationError: Configuration-related errors.
        ValidationError: Inbound data validation errors.

    Configuration:
        Settings: Main engine settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up engine logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from continuity_engine.core.config import (
    CacheSettings,
    RuleSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from continuity_engine.core.exceptions import (
    ArenaCapacityError,
    ConfigurationError,
    ContinuityEngineError,
    NodeNotFound,
    NodeNotFoundError,
    RuleEngineError,
    RuleRegistrationError,
    TimelineError,
    ValidationError,
)
from continuity_engine.core.logging import (
    bind_context,
    clear_context,
    configure_from_settings,
    configure_logging,
    get_logger,
    summarize_world_states,
)


__all__ = [
    # Exceptions
    "ContinuityEngineError",
    "TimelineError",
    "NodeNotFoundError",
    "NodeNotFound",
    "ArenaCapacityError",
    "RuleEngineError",
    "RuleRegistrationError",
    "ConfigurationError",
    "ValidationError",
    # Configuration
    "Settings",
    "RuleSettings",
    "CacheSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
    "summarize_world_states",
]
