"""Action menu: project the eligible actions and forward the player's pick."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from outpost.domain.eligibility import Action, compute_actions
from outpost.domain.enums import ActionId
from outpost.domain.models import PlayerID, Tile
from outpost.errors import ValidationFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ActionSelection:
    """The action a player picked and the tile it applies to."""

    action_id: ActionId
    tile: Tile


SelectionHandler = Callable[[ActionSelection], Any]


class ActionMenu:
    """Selectable entries for one tile, in the order the rules produce them."""

    def __init__(
        self,
        tile: Tile,
        player_id: PlayerID | str | None,
        handler: SelectionHandler,
        *,
        on_dismiss: Callable[[], None] | None = None,
    ) -> None:
        self._tile = tile
        self._player_id = player_id
        self._handler = handler
        self._on_dismiss = on_dismiss
        self._entries = compute_actions(tile, player_id)

    @property
    def entries(self) -> tuple[Action, ...]:
        return self._entries

    def as_rows(self) -> list[dict[str, str]]:
        return [
            {
                "id": str(action.id),
                "label": action.label,
                "description": action.description,
                "icon": action.icon,
            }
            for action in self._entries
        ]

    def choose(self, action_id: ActionId | str) -> Any:
        """Forward the pick to the handler, then dismiss the menu."""

        try:
            chosen = ActionId(action_id)
        except ValueError as exc:
            raise ValidationFailure(f"unknown action: {action_id}") from exc
        if all(action.id != chosen for action in self._entries):
            raise ValidationFailure(f"{chosen} is not available on tile {self._tile.key}")

        logger.debug("action %s chosen on tile %s", chosen, self._tile.key)
        result = self._handler(ActionSelection(action_id=chosen, tile=self._tile))
        if self._on_dismiss is not None:
            self._on_dismiss()
        return result


class ActionDispatcher:
    """Route a selection to the handler registered for its action.

    Every :class:`ActionId` must have a handler; a missing one is reported
    when the dispatcher is built rather than when a player picks it.
    """

    def __init__(self, handlers: Mapping[ActionId, SelectionHandler]) -> None:
        missing = [action_id for action_id in ActionId if action_id not in handlers]
        if missing:
            names = ", ".join(str(action_id) for action_id in missing)
            raise ValueError(f"no handler registered for: {names}")
        self._handlers = dict(handlers)

    def __call__(self, selection: ActionSelection) -> Any:
        return self._handlers[selection.action_id](selection)
