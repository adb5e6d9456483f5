"""Enumerations shared by the Outpost domain."""

from __future__ import annotations

from enum import StrEnum


class GroupStatus(StrEnum):
    """Lifecycle states a group reports in tile snapshots."""

    IDLE = "idle"
    MOBILIZING = "mobilizing"
    MOVING = "moving"
    DEMOBILISING = "demobilising"
    FIGHTING = "fighting"
    GATHERING = "gathering"


class Rarity(StrEnum):
    """Item rarity, ordered from most to least common."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"
    MYTHIC = "mythic"

    @property
    def rank(self) -> int:
        return _RARITY_ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Rarity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Rarity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Rarity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Rarity):
            return NotImplemented
        return self.rank >= other.rank


_RARITY_ORDER = tuple(Rarity)


class ActionId(StrEnum):
    """Every action a tile can offer, in presentation order."""

    INSPECT = "inspect"
    MOVE = "move"
    GATHER = "gather"
    MOBILIZE = "mobilize"
    DEMOBILIZE = "demobilize"
    ATTACK = "attack"
    JOIN_BATTLE = "joinBattle"
    EXPLORE = "explore"


class StorageDestination(StrEnum):
    """Where a demobilised group's items are stored."""

    SHARED = "shared"
    PERSONAL = "personal"


class Command(StrEnum):
    """Remote procedures accepted by the simulation backend."""

    GATHER = "gather"
    DEMOBILISE_UNITS = "demobiliseUnits"


class GatherState(StrEnum):
    """States of the gather selection flow."""

    NO_ELIGIBLE_GROUP = "no_eligible_group"
    NO_ITEMS = "no_items"
    AWAITING_SELECTION = "awaiting_selection"
    SUBMITTING = "submitting"
    FAILED = "failed"
    CLOSED = "closed"


class DemobiliseState(StrEnum):
    """States of the demobilise selection flow."""

    NO_STRUCTURE = "no_structure"
    NO_ELIGIBLE_GROUP = "no_eligible_group"
    AWAITING_SELECTION = "awaiting_selection"
    AWAITING_DESTINATION_CHOICE = "awaiting_destination_choice"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CLOSED = "closed"
