"""Which actions a tile offers to the acting player.

``compute_actions`` is the single source of truth: a pure function of the
tile snapshot and the acting player's id.  Each rule is evaluated
independently and, when it holds, appends its action in the fixed order of
:class:`~outpost.domain.enums.ActionId`.  ``explore`` is always offered last.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from outpost.domain.enums import ActionId, GroupStatus
from outpost.domain.models import (
    Group,
    PlayerID,
    Tile,
    group_containing_player,
    has_mobilizable_units,
    is_busy,
    is_idle,
    is_owned_by,
    owned_groups,
    player_on_tile,
)

MIN_GROUPS_FOR_ATTACK = 2


@dataclass(frozen=True, slots=True)
class Action:
    """Descriptor of a single menu action."""

    id: ActionId
    label: str
    description: str
    icon: str


ACTION_CATALOG: dict[ActionId, Action] = {
    ActionId.INSPECT: Action(
        ActionId.INSPECT, "Inspect", "View details about the structure on this tile", "inspect"
    ),
    ActionId.MOVE: Action(ActionId.MOVE, "Move", "Send one of your groups elsewhere", "move"),
    ActionId.GATHER: Action(
        ActionId.GATHER, "Gather", "Collect the resources lying on this tile", "gather"
    ),
    ActionId.MOBILIZE: Action(
        ActionId.MOBILIZE, "Mobilize", "Form a new group from units on this tile", "mobilize"
    ),
    ActionId.DEMOBILIZE: Action(
        ActionId.DEMOBILIZE,
        "Demobilize",
        "Disband a group into the structure on this tile",
        "demobilize",
    ),
    ActionId.ATTACK: Action(ActionId.ATTACK, "Attack", "Attack an enemy group here", "attack"),
    ActionId.JOIN_BATTLE: Action(
        ActionId.JOIN_BATTLE, "Join Battle", "Send a group into the ongoing battle", "battle"
    ),
    ActionId.EXPLORE: Action(
        ActionId.EXPLORE, "Explore", "Look around and learn about this place", "explore"
    ),
}


def compute_actions(tile: Tile, acting_player_id: PlayerID | str | None) -> tuple[Action, ...]:
    """Return the ordered actions available on ``tile`` for the acting player.

    A missing or empty player id means nobody is signed in.
    """

    if not acting_player_id:
        return (ACTION_CATALOG[ActionId.EXPLORE],)

    mine = owned_groups(tile, acting_player_id)
    offered: list[ActionId] = []

    if tile.structure is not None:
        offered.append(ActionId.INSPECT)

    if any(is_idle(group) for group in mine):
        offered.append(ActionId.MOVE)
        offered.append(ActionId.GATHER)

    if _can_mobilize(tile, acting_player_id, mine):
        offered.append(ActionId.MOBILIZE)

    if tile.structure is not None and any(not is_busy(group) for group in mine):
        offered.append(ActionId.DEMOBILIZE)

    if _can_attack(tile, acting_player_id, mine):
        offered.append(ActionId.ATTACK)

    if _can_join_battle(tile, mine):
        offered.append(ActionId.JOIN_BATTLE)

    offered.append(ActionId.EXPLORE)
    return tuple(ACTION_CATALOG[action_id] for action_id in offered)


def action_ids(actions: Iterable[Action]) -> list[ActionId]:
    return [action.id for action in actions]


def _can_mobilize(tile: Tile, player_id: PlayerID | str, mine: list[Group]) -> bool:
    if any(group.status == GroupStatus.DEMOBILISING for group in mine):
        return False

    carrier = group_containing_player(tile, player_id)
    in_demobilising_group = (
        carrier is not None
        and is_owned_by(carrier, player_id)
        and carrier.status == GroupStatus.DEMOBILISING
    )
    if player_on_tile(tile, player_id) and not in_demobilising_group:
        return True

    return any(
        not is_busy(group) and has_mobilizable_units(group) for group in mine
    )


def _can_attack(tile: Tile, player_id: PlayerID | str, mine: list[Group]) -> bool:
    if len(tile.groups) < MIN_GROUPS_FOR_ATTACK:
        return False
    if not any(_ready_for_combat(group) for group in mine):
        return False
    return any(
        not is_owned_by(group, player_id)
        and group.status != GroupStatus.FIGHTING
        and not group.in_battle
        for group in tile.groups
    )


def _can_join_battle(tile: Tile, mine: list[Group]) -> bool:
    return bool(tile.battles) and any(_ready_for_combat(group) for group in mine)


def _ready_for_combat(group: Group) -> bool:
    return not is_busy(group)


ActionsListener = Callable[[tuple[Action, ...]], None]


class EligibilityTracker:
    """Recompute the available actions whenever the tile or player changes.

    The tracker only decides *when* to recompute; the rules themselves stay
    in :func:`compute_actions`.  Listeners are called with the new tuple only
    when the computed actions actually differ from the previous ones.
    """

    def __init__(
        self,
        tile: Tile | None = None,
        player_id: PlayerID | str | None = None,
    ) -> None:
        self._tile = tile
        self._player_id = player_id
        self._listeners: list[ActionsListener] = []
        self._actions: tuple[Action, ...] = self._compute()

    @property
    def actions(self) -> tuple[Action, ...]:
        return self._actions

    @property
    def tile(self) -> Tile | None:
        return self._tile

    @property
    def player_id(self) -> PlayerID | str | None:
        return self._player_id

    def subscribe(self, listener: ActionsListener) -> Callable[[], None]:
        """Register a listener and return a callable that removes it."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_tile(self, tile: Tile | None) -> bool:
        if tile == self._tile:
            return False
        self._tile = tile
        return self._refresh()

    def set_player(self, player_id: PlayerID | str | None) -> bool:
        if player_id == self._player_id:
            return False
        self._player_id = player_id
        return self._refresh()

    def _compute(self) -> tuple[Action, ...]:
        if self._tile is None:
            return ()
        return compute_actions(self._tile, self._player_id)

    def _refresh(self) -> bool:
        actions = self._compute()
        if actions == self._actions:
            return False
        self._actions = actions
        for listener in list(self._listeners):
            listener(actions)
        return True
