"""Exception hierarchy for the continuity engine.

Every exception raised by this package inherits from ContinuityEngineError,
so collaborators can catch engine failures at their boundary while still
seeing the domain-specific context attached by each subclass.

Only one error originates from the projection path itself: NodeNotFoundError,
raised when a caller asks for a unit that is not in the supplied timeline.
Wrong-typed world values and partial authoring data are never errors; they
are handled by the default rules of the delta applier and the rule engine.

Example:
    >>> from continuity_engine.core.exceptions import NodeNotFoundError
    >>> raise NodeNotFoundError("Story node not found", unit_id="scene-7")
"""

from __future__ import annotations

from typing import Any


class ContinuityEngineError(Exception):
    """Base exception for all continuity engine errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Timeline Domain Exceptions
# =============================================================================


class TimelineError(ContinuityEngineError):
    """Base exception for timeline projection errors."""


class NodeNotFoundError(TimelineError):
    """Raised when the target unit id is absent from the supplied timeline.

    This is a caller-input error: retrying with the same unit list can
    never succeed, so it is surfaced unchanged.
    """

    def __init__(
        self,
        message: str = "Story node not found",
        *,
        unit_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the error with the missing unit id.

        Args:
            message: Human-readable error description.
            unit_id: The identifier that could not be found.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if unit_id is not None:
            combined_details["unit_id"] = unit_id
        self.unit_id = unit_id
        super().__init__(message, details=combined_details)


NodeNotFound = NodeNotFoundError


class ArenaCapacityError(TimelineError):
    """Raised when a snapshot arena cannot take another unit."""

    def __init__(
        self,
        message: str,
        *,
        max_units: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if max_units is not None:
            combined_details["max_units"] = max_units
        super().__init__(message, details=combined_details)


# =============================================================================
# Rule Engine Exceptions
# =============================================================================


class RuleEngineError(ContinuityEngineError):
    """Base exception for continuity rule registry errors."""


class RuleRegistrationError(RuleEngineError):
    """Raised when a rule cannot be added to or removed from a registry."""

    def __init__(
        self,
        message: str,
        *,
        rule_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the error with the offending rule code.

        Args:
            message: Human-readable error description.
            rule_code: Code of the rule involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if rule_code:
            combined_details["rule_code"] = rule_code
        super().__init__(message, details=combined_details)


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(ContinuityEngineError):
    """Raised when engine configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(ContinuityEngineError):
    """Raised when inbound narrative data fails validation.

    Used by collaborators that convert stored documents into
    NarrativeUnit records before handing them to the engine.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


__all__ = [
    "ContinuityEngineError",
    # Timeline
    "TimelineError",
    "NodeNotFoundError",
    "NodeNotFound",
    "ArenaCapacityError",
    # Rules
    "RuleEngineError",
    "RuleRegistrationError",
    # Configuration & validation
    "ConfigurationError",
    "ValidationError",
]
