"""Tests for the exception hierarchy."""

from __future__ import annotations

from continuity_engine.core.exceptions import (
    ArenaCapacityError,
    ConfigurationError,
    ContinuityEngineError,
    NodeNotFoundError,
    RuleEngineError,
    RuleRegistrationError,
    TimelineError,
    ValidationError,
)


class TestContinuityEngineError:
    """Tests for the base exception."""

    def test_basic_message(self) -> None:
        """Test exception with basic message."""
        exc = ContinuityEngineError("Test error message")
        assert exc.message == "Test error message"
        assert exc.details == {}
        assert str(exc) == "Test error message"

    def test_with_details(self) -> None:
        """Test exception with additional details."""
        exc = ContinuityEngineError("Test error", details={"key": "value", "count": 42})
        assert "key='value'" in str(exc)
        assert "count=42" in str(exc)

    def test_repr(self) -> None:
        """Test exception repr output."""
        repr_str = repr(ContinuityEngineError("Test", details={"x": 1}))
        assert "ContinuityEngineError" in repr_str
        assert "x" in repr_str


class TestTimelineExceptions:
    """Tests for timeline exceptions."""

    def test_node_not_found(self) -> None:
        """Test NodeNotFoundError carries the unit id."""
        exc = NodeNotFoundError(unit_id="scene-9")
        assert exc.unit_id == "scene-9"
        assert str(exc) == "Story node not found [unit_id='scene-9']"
        assert isinstance(exc, TimelineError)
        assert isinstance(exc, ContinuityEngineError)

    def test_arena_capacity(self) -> None:
        """Test ArenaCapacityError details."""
        exc = ArenaCapacityError("full", max_units=3)
        assert exc.details == {"max_units": 3}
        assert isinstance(exc, TimelineError)


class TestOtherExceptions:
    """Tests for rule, configuration and validation exceptions."""

    def test_rule_registration(self) -> None:
        """Test RuleRegistrationError with rule code."""
        exc = RuleRegistrationError("dup", rule_code="X")
        assert exc.details["rule_code"] == "X"
        assert isinstance(exc, RuleEngineError)

    def test_configuration_error(self) -> None:
        """Test ConfigurationError with config key."""
        exc = ConfigurationError("bad", config_key="log_level")
        assert exc.details["config_key"] == "log_level"

    def test_validation_error(self) -> None:
        """Test ValidationError with field context."""
        exc = ValidationError("bad", field_name="order", invalid_value=-1)
        assert exc.details == {"field_name": "order", "invalid_value": -1}
