"""Continuity rules and the rule registry.

A rule is a pure function of ``(unit, pre, post)`` returning the issues it
finds. Rules never look at other units and never mutate their inputs.
The engine runs its rules in registration order and concatenates their
issue lists, so issue ordering is stable and observable.

Built-in rules:
    CHAR_LOCATION_MISMATCH: A participant is somewhere other than the scene.
    ITEM_RESURRECTED: A destroyed item is set back to another status.

Example:
    >>> from continuity_engine.engine.rules import continuity_rule
    >>> @continuity_rule(code="EMPTY_SCENE", severity=Severity.INFO,
    ...                  description="Scene has no participants")
    ... def empty_scene(unit, pre, post):
    ...     return []
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from continuity_engine.core.constants import (
    ITEM_PREFIX,
    ITEM_STATUS_DESTROYED,
    STATUS_SUFFIX,
    character_location_key,
    is_item_status_key,
)
from continuity_engine.core.exceptions import RuleRegistrationError
from continuity_engine.core.logging import get_logger
from continuity_engine.engine.paths import get_path
from continuity_engine.models.delta import DeltaOp
from continuity_engine.models.issue import ContinuityIssue, Severity
from continuity_engine.models.narrative import NarrativeUnit
from continuity_engine.models.world_state import WorldState


if TYPE_CHECKING:
    from continuity_engine.core.config import Settings


logger = get_logger(__name__)

RuleCheck = Callable[[NarrativeUnit, WorldState, WorldState], list[ContinuityIssue]]

CHAR_LOCATION_MISMATCH = "CHAR_LOCATION_MISMATCH"
ITEM_RESURRECTED = "ITEM_RESURRECTED"


# =============================================================================
# Rule Registry
# =============================================================================


@dataclass(frozen=True)
class ContinuityRule:
    """A registered continuity rule.

    Attributes:
        code: Issue code the rule emits; unique within an engine.
        severity: Severity of the issues it emits.
        description: Human-readable summary of what the rule checks.
        check: The rule function.
    """

    code: str
    severity: Severity
    description: str
    check: RuleCheck

    def __call__(
        self, unit: NarrativeUnit, pre: WorldState, post: WorldState
    ) -> list[ContinuityIssue]:
        return self.check(unit, pre, post)


class RuleEngine:
    """Ordered collection of continuity rules.

    Rules run in the order they were registered. New rules are added by
    registering them; existing rules are never edited to make room.
    """

    def __init__(self, rules: Iterable[ContinuityRule] = ()) -> None:
        self._rules: dict[str, ContinuityRule] = {}
        for rule in rules:
            self.register(rule)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, code: object) -> bool:
        return code in self._rules

    @property
    def rules(self) -> list[ContinuityRule]:
        return list(self._rules.values())

    @property
    def codes(self) -> list[str]:
        return list(self._rules)

    def register(self, rule: ContinuityRule) -> ContinuityRule:
        """Append a rule to the evaluation order.

        Raises:
            RuleRegistrationError: If a rule with the same code exists.
        """
        if rule.code in self._rules:
            raise RuleRegistrationError(
                "A rule with this code is already registered",
                rule_code=rule.code,
            )
        self._rules[rule.code] = rule
        logger.debug("Registered continuity rule", code=rule.code, position=len(self._rules))
        return rule

    def unregister(self, code: str) -> ContinuityRule:
        """Remove a rule by code.

        Raises:
            RuleRegistrationError: If no rule has this code.
        """
        try:
            return self._rules.pop(code)
        except KeyError:
            raise RuleRegistrationError("No rule registered with this code", rule_code=code) from None

    def get_rule(self, code: str) -> ContinuityRule | None:
        return self._rules.get(code)

    def without(self, codes: Iterable[str]) -> RuleEngine:
        """Return a new engine with the given rule codes left out."""
        excluded = set(codes)
        return RuleEngine(rule for rule in self._rules.values() if rule.code not in excluded)

    def evaluate(
        self, unit: NarrativeUnit, pre: WorldState, post: WorldState
    ) -> list[ContinuityIssue]:
        """Run every rule and concatenate their issues in rule order."""
        issues: list[ContinuityIssue] = []
        for rule in self._rules.values():
            issues.extend(rule.check(unit, pre, post))
        logger.debug(
            "Evaluated continuity rules",
            unit_id=unit.id,
            rules=len(self._rules),
            issues=len(issues),
        )
        return issues


# Default rules, in registration order
_default_rules: list[ContinuityRule] = []

# Built lazily from _default_rules; reset whenever a default rule is added
_default_engine: RuleEngine | None = None


def continuity_rule(
    *,
    code: str,
    severity: Severity,
    description: str,
) -> Callable[[RuleCheck], RuleCheck]:
    """Decorator registering a function as a default continuity rule.

    Args:
        code: Issue code the rule emits.
        severity: Severity of its issues.
        description: Summary of what it checks.

    Returns:
        Decorator returning the function unchanged.

    Raises:
        RuleRegistrationError: If ``code`` is already a default rule.
    """

    def decorator(func: RuleCheck) -> RuleCheck:
        global _default_engine

        if any(rule.code == code for rule in _default_rules):
            raise RuleRegistrationError(
                "A default rule with this code is already registered",
                rule_code=code,
            )
        _default_rules.append(
            ContinuityRule(code=code, severity=severity, description=description, check=func)
        )
        _default_engine = None
        return func

    return decorator


def get_default_rules() -> list[ContinuityRule]:
    """Return the default rules in evaluation order."""
    return list(_default_rules)


def get_default_engine() -> RuleEngine:
    """Return the shared engine holding every default rule.

    The engine is built on first use. Callers that need to change the
    rule set should build their own with ``build_rule_engine``.
    """
    global _default_engine

    if _default_engine is None:
        _default_engine = RuleEngine(_default_rules)
    return _default_engine


def build_rule_engine(settings: Settings | None = None) -> RuleEngine:
    """Build an engine from the default rules.

    Args:
        settings: Optional settings; rules whose codes appear in
            ``settings.rules.disabled_codes`` are left out.

    Returns:
        A new RuleEngine.
    """
    engine = RuleEngine(get_default_rules())
    if settings is not None and settings.rules.disabled_codes:
        engine = engine.without(settings.rules.disabled_codes)
        logger.info("Continuity rules disabled", codes=settings.rules.disabled_codes)
    return engine


def evaluate(
    unit: NarrativeUnit,
    pre: WorldState,
    post: WorldState,
    *,
    engine: RuleEngine | None = None,
) -> list[ContinuityIssue]:
    """Evaluate continuity rules for one unit.

    Args:
        unit: The unit under check.
        pre: World state before the unit's deltas.
        post: World state after the unit's deltas.
        engine: Engine to use; defaults to all default rules.

    Returns:
        Issues in rule order.
    """
    if engine is None:
        engine = get_default_engine()
    return engine.evaluate(unit, pre, post)


# =============================================================================
# Built-in Rules
# =============================================================================


def _string_at(state: WorldState, path: str) -> str | None:
    value: Any = get_path(state, path)
    return value if isinstance(value, str) else None


@continuity_rule(
    code=CHAR_LOCATION_MISMATCH,
    severity=Severity.WARN,
    description="Participant location differs from the scene location",
)
def character_location_mismatch(
    unit: NarrativeUnit, pre: WorldState, post: WorldState
) -> list[ContinuityIssue]:
    """Flag participants whose tracked location is not the scene location.

    The scene location is the unit's first declared location; additional
    locations are ignored. A participant's location is read from ``post``
    first and ``pre`` second; participants with no known location are
    skipped.
    """
    scene_location = unit.scene_location
    if not scene_location:
        return []

    issues: list[ContinuityIssue] = []
    for participant in unit.participants:
        key = character_location_key(participant.entity_id)
        post_location = _string_at(post, key)
        location = post_location if post_location is not None else _string_at(pre, key)
        if not location or location == scene_location:
            continue
        issues.append(
            ContinuityIssue(
                severity=Severity.WARN,
                code=CHAR_LOCATION_MISMATCH,
                message=(
                    f"Character {participant.entity_id} location ({location}) "
                    f"differs from scene location ({scene_location})."
                ),
                unit_id=unit.id,
                suggestion=(
                    f"Add a travel/move delta ({key} SET {scene_location}) "
                    "or adjust the scene location."
                ),
            )
        )
    return issues


@continuity_rule(
    code=ITEM_RESURRECTED,
    severity=Severity.ERROR,
    description="A destroyed item is set back to a non-destroyed status",
)
def item_resurrected(
    unit: NarrativeUnit, pre: WorldState, post: WorldState
) -> list[ContinuityIssue]:
    """Flag SET deltas that move an item out of the DESTROYED status."""
    issues: list[ContinuityIssue] = []
    for delta in unit.deltas:
        if not is_item_status_key(delta.key) or delta.op != DeltaOp.SET:
            continue
        if _string_at(pre, delta.key) != ITEM_STATUS_DESTROYED:
            continue
        if delta.value == ITEM_STATUS_DESTROYED:
            continue
        item_id = delta.key[len(ITEM_PREFIX) : -len(STATUS_SUFFIX)]
        issues.append(
            ContinuityIssue(
                severity=Severity.ERROR,
                code=ITEM_RESURRECTED,
                message=(
                    f"Item {item_id} status resurrected from "
                    f"{ITEM_STATUS_DESTROYED} to {delta.value}."
                ),
                unit_id=unit.id,
                suggestion="If intentional, create a new item entity or explain the recovery in-world.",
            )
        )
    return issues


__all__ = [
    "RuleCheck",
    "CHAR_LOCATION_MISMATCH",
    "ITEM_RESURRECTED",
    "ContinuityRule",
    "RuleEngine",
    "continuity_rule",
    "get_default_rules",
    "get_default_engine",
    "build_rule_engine",
    "evaluate",
    "character_location_mismatch",
    "item_resurrected",
]
