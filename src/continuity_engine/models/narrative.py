"""Narrative unit models.

A narrative unit (beat, scene, chapter) is the external record the engine
projects over. The engine reads units and never mutates them; the models
are frozen so that guarantee holds for callers as well.

Inbound documents from the story-node store use camelCase names
(``_id``, ``entityId``, ``worldStateDelta``) and keep the timeline
position under ``time.order``. Both spellings validate.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from continuity_engine.models.delta import WorldStateDelta


class ParticipantRole(StrEnum):
    """Dramatic role of a participant within a unit."""

    PROTAGONIST = "PROTAGONIST"
    ANTAGONIST = "ANTAGONIST"
    SUPPORT = "SUPPORT"


class Participant(BaseModel):
    """An entity taking part in a narrative unit."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    entity_id: str = Field(
        min_length=1,
        validation_alias=AliasChoices("entity_id", "entityId"),
        description="Identifier of the participating entity",
    )
    role: ParticipantRole | None = Field(default=None, description="Dramatic role")

    @field_validator("entity_id", mode="before")
    @classmethod
    def stringify_id(cls, value: Any) -> Any:
        if value is not None and not isinstance(value, str):
            return str(value)
        return value


class NarrativeUnit(BaseModel):
    """A beat/scene/chapter with a timeline position and its deltas.

    Attributes:
        id: Opaque unit identifier.
        order: Timeline position; units replay in ascending order.
        title: Optional display title.
        deltas: World-state mutations, applied left to right.
        participants: Entities present in the unit.
        locations: Declared location ids; the first one is the scene location.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(
        min_length=1,
        validation_alias=AliasChoices("id", "_id"),
        description="Unit identifier",
    )
    order: int = Field(default=0, ge=0, description="Timeline position")
    title: str = Field(default="", description="Display title")
    deltas: tuple[WorldStateDelta, ...] = Field(
        default=(),
        validation_alias=AliasChoices("deltas", "worldStateDelta", "world_state_delta"),
        description="Ordered world-state deltas",
    )
    participants: tuple[Participant, ...] = Field(default=(), description="Participants")
    locations: tuple[str, ...] = Field(default=(), description="Declared location ids")

    @model_validator(mode="before")
    @classmethod
    def lift_time_order(cls, data: Any) -> Any:
        """Read ``order`` from a nested ``time`` block when not given directly."""
        if isinstance(data, dict) and "order" not in data:
            time_block = data.get("time")
            if isinstance(time_block, dict) and "order" in time_block:
                data = {**data, "order": time_block["order"]}
        return data

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value: Any) -> Any:
        # Stored documents carry ObjectId-like ids
        if value is not None and not isinstance(value, str):
            return str(value)
        return value

    @field_validator("deltas", "participants", "locations", mode="before")
    @classmethod
    def none_as_empty(cls, value: Any) -> Any:
        return () if value is None else value

    @property
    def scene_location(self) -> str | None:
        """The first declared location, or None when the unit declares none."""
        return self.locations[0] if self.locations else None

    @property
    def participant_ids(self) -> list[str]:
        return [p.entity_id for p in self.participants]


__all__ = [
    "ParticipantRole",
    "Participant",
    "NarrativeUnit",
]
