"""Immutable snapshots of the entities found on a map tile.

Tiles arrive from the simulation backend as read-only snapshots.  The rules
layer never mutates them: every state change is requested through a command
and only becomes visible once the backend publishes a newer snapshot.

Alongside the dataclasses this module hosts the small derived predicates
(ownership, busy/idle, player presence) that the eligibility rules and the
selection flows share.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NewType

from .enums import GroupStatus, Rarity

# --- Strongly typed identifiers -------------------------------------------------

PlayerID = NewType("PlayerID", str)
GroupID = NewType("GroupID", str)
UnitID = NewType("UnitID", str)
StructureID = NewType("StructureID", str)
BattleID = NewType("BattleID", str)
WorldID = NewType("WorldID", str)

PLAYER_UNIT_TYPE = "player"

BUSY_STATUSES = frozenset(
    {
        GroupStatus.MOBILIZING,
        GroupStatus.MOVING,
        GroupStatus.DEMOBILISING,
        GroupStatus.FIGHTING,
        GroupStatus.GATHERING,
    }
)


# --- Core dataclasses -----------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Unit:
    """Single member of a group; ``type == "player"`` marks a player's body."""

    id: UnitID
    type: str
    name: str | None = None

    @property
    def is_player(self) -> bool:
        return self.type == PLAYER_UNIT_TYPE


@dataclass(frozen=True, slots=True)
class Group:
    """Player-owned collection of units sharing one status."""

    id: GroupID
    owner: PlayerID
    status: GroupStatus = GroupStatus.IDLE
    in_battle: bool = False
    battle_id: BattleID | None = None
    units: tuple[Unit, ...] = ()
    unit_count: int | None = None
    name: str = ""

    @property
    def size(self) -> int:
        """Reported unit count, falling back to the number of listed units."""

        if self.unit_count is not None:
            return self.unit_count
        return len(self.units)

    @property
    def display_name(self) -> str:
        return self.name or f"Group {self.id}"


@dataclass(frozen=True, slots=True)
class Structure:
    """Building occupying a tile."""

    id: StructureID
    type: str
    name: str | None = None
    owner: PlayerID | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.type


@dataclass(frozen=True, slots=True)
class Item:
    """Stack of items lying on a tile."""

    type: str
    quantity: int = 1
    rarity: Rarity = Rarity.COMMON
    name: str | None = None
    description: str | None = None
    id: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.type


@dataclass(frozen=True, slots=True)
class Player:
    """Player standing on a tile outside of any group."""

    uid: PlayerID
    alive: bool = True
    race: str | None = None
    display_name: str | None = None


@dataclass(frozen=True, slots=True)
class Battle:
    """Battle in progress, identified by the id its participants share.

    A battle is in progress while at least one participant is both flagged
    ``in_battle`` and reports status ``fighting``.
    """

    id: BattleID
    group_ids: tuple[GroupID, ...]


@dataclass(frozen=True, slots=True)
class WorldInfo:
    """Timing information published by the simulation for a world."""

    id: WorldID
    last_tick: int | None = None  # epoch milliseconds
    speed: float = 1.0


@dataclass(frozen=True, slots=True)
class Tile:
    """Snapshot of a single map cell; identity is its coordinate pair."""

    x: int
    y: int
    groups: tuple[Group, ...] = ()
    structure: Structure | None = None
    items: tuple[Item, ...] = ()
    players: tuple[Player, ...] = ()
    biome: str | None = None

    @property
    def key(self) -> str:
        return f"{self.x},{self.y}"

    @property
    def battles(self) -> tuple[Battle, ...]:
        return _collect_battles(self.groups)

    def group(self, group_id: GroupID | str) -> Group | None:
        for candidate in self.groups:
            if candidate.id == group_id:
                return candidate
        return None


def _collect_battles(groups: tuple[Group, ...]) -> tuple[Battle, ...]:
    participants: dict[BattleID, list[GroupID]] = {}
    active: set[BattleID] = set()
    for group in groups:
        if group.battle_id is None:
            continue
        participants.setdefault(group.battle_id, []).append(group.id)
        if group.status == GroupStatus.FIGHTING and group.in_battle:
            active.add(group.battle_id)
    return tuple(
        Battle(id=battle_id, group_ids=tuple(members))
        for battle_id, members in participants.items()
        if battle_id in active
    )


# --- Derived predicates ---------------------------------------------------------


def is_owned_by(group: Group, player_id: PlayerID | str | None) -> bool:
    return bool(player_id) and group.owner == player_id


def is_busy(group: Group) -> bool:
    """A busy group cannot be the target of a new command."""

    return group.status in BUSY_STATUSES or group.in_battle


def is_idle(group: Group) -> bool:
    return group.status == GroupStatus.IDLE and not is_busy(group)


def owned_groups(tile: Tile, player_id: PlayerID | str | None) -> list[Group]:
    return [group for group in tile.groups if is_owned_by(group, player_id)]


def has_mobilizable_units(group: Group) -> bool:
    return any(not unit.is_player for unit in group.units)


def group_containing_player(tile: Tile, player_id: PlayerID | str | None) -> Group | None:
    """Return the group carrying the player's body as a unit, if any."""

    if not player_id:
        return None
    for group in tile.groups:
        if any(unit.is_player and unit.id == player_id for unit in group.units):
            return group
    return None


def player_on_tile(tile: Tile, player_id: PlayerID | str | None) -> bool:
    """True when the player stands on the tile or travels in one of its groups."""

    if not player_id:
        return False
    if any(player.uid == player_id for player in tile.players):
        return True
    return group_containing_player(tile, player_id) is not None
