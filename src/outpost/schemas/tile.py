"""Pydantic models for tile payloads published by the simulation backend.

The backend stores collections either as JSON objects keyed by id or as
plain arrays, and keys are camelCase.  These models accept both shapes; the
conversion into domain snapshots lives in :mod:`outpost.domain.snapshots`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from outpost.domain.enums import GroupStatus, Rarity


class WirePayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class UnitPayload(WirePayload):
    id: str | None = None
    type: str = Field(default="unit", description="'player' marks a player's body")
    name: str | None = None
    display_name: str | None = None


class GroupPayload(WirePayload):
    id: str | None = None
    owner: str
    status: GroupStatus = GroupStatus.IDLE
    in_battle: bool = False
    battle_id: str | None = None
    units: dict[str, UnitPayload] | list[UnitPayload] = Field(default_factory=list)
    unit_count: int | None = Field(default=None, ge=0)
    name: str = ""


class StructurePayload(WirePayload):
    id: str
    type: str
    name: str | None = None
    owner: str | None = None


class ItemPayload(WirePayload):
    id: str | None = None
    type: str = "resource"
    quantity: int = Field(default=1, ge=0)
    rarity: Rarity = Rarity.COMMON
    name: str | None = None
    description: str | None = None


class PlayerPayload(WirePayload):
    id: str | None = None
    uid: str | None = None
    alive: bool = True
    race: str | None = None
    display_name: str | None = None


class TilePayload(WirePayload):
    x: int | None = None
    y: int | None = None
    groups: dict[str, GroupPayload] | list[GroupPayload] = Field(default_factory=dict)
    structure: StructurePayload | None = None
    items: dict[str, ItemPayload] | list[ItemPayload] = Field(default_factory=list)
    players: dict[str, PlayerPayload] | list[PlayerPayload] = Field(default_factory=dict)
    biome: str | None = None

    @field_validator("biome", mode="before")
    @classmethod
    def _biome_name(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return value.get("name")
        return value

    @field_validator("groups", "items", "players", mode="before")
    @classmethod
    def _null_collection(cls, value: Any) -> Any:
        return value if value is not None else []


class WorldInfoPayload(WirePayload):
    id: str = "default"
    last_tick: int | None = None
    speed: float = Field(default=1.0, gt=0.0)
