"""World-state delta models.

A delta is one declarative mutation attached to a narrative unit. Deltas
are immutable once created and are applied left to right within a unit.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DeltaOp(StrEnum):
    """Mutation kinds a delta can carry."""

    SET = "SET"
    """Write the delta value verbatim."""

    INCREMENT = "INCREMENT"
    """Add a number to the prior value."""

    DECREMENT = "DECREMENT"
    """Subtract a number from the prior value."""

    APPEND = "APPEND"
    """Append the delta value to the prior list."""

    REMOVE = "REMOVE"
    """Drop every element equal to the delta value from the prior list."""

    @classmethod
    def _missing_(cls, value: object) -> DeltaOp | None:
        if not isinstance(value, str):
            return None
        normalized = value.strip().upper()
        normalized = _OP_ALIASES.get(normalized, normalized)
        for member in cls:
            if member.value == normalized:
                return member
        return None


# Spellings used by stored story-node documents
_OP_ALIASES: dict[str, str] = {
    "INC": "INCREMENT",
    "DEC": "DECREMENT",
    "ADD": "APPEND",
}


class WorldStateDelta(BaseModel):
    """One typed mutation of the world state at a key path.

    Attributes:
        key: Dot-delimited path of the value to mutate.
        op: The mutation to perform.
        value: Operand of the mutation; meaning depends on ``op``.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    key: str = Field(min_length=1, description="Dot-delimited world-state path")
    op: DeltaOp = Field(description="Mutation kind")
    value: Any = Field(default=None, description="Mutation operand")

    @field_validator("op", mode="before")
    @classmethod
    def parse_op(cls, value: Any) -> Any:
        """Accept aliases and lower-case spellings of the op name."""
        if isinstance(value, str) and not isinstance(value, DeltaOp):
            return DeltaOp(value)
        return value

    def describe(self) -> str:
        """Short human-readable form, e.g. ``item.i1.status SET 'INTACT'``."""
        if self.value is None and self.op in (DeltaOp.INCREMENT, DeltaOp.DECREMENT):
            return f"{self.key} {self.op}"
        return f"{self.key} {self.op} {self.value!r}"


__all__ = [
    "DeltaOp",
    "WorldStateDelta",
]
