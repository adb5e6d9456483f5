"""Gather flow: pick an idle group and send it to collect a tile's items."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from outpost.domain.enums import Command, GatherState
from outpost.domain.models import (
    Group,
    GroupID,
    Item,
    PlayerID,
    Tile,
    WorldID,
    is_idle,
    is_owned_by,
)
from outpost.errors import PreconditionUnmet, ValidationFailure
from outpost.flows.base import CloseCallback, SelectionFlow
from outpost.interfaces.gateway import CommandGateway

logger = logging.getLogger(__name__)

NO_GROUP_MESSAGE = "You have no idle groups on this tile that can gather."
NO_ITEMS_MESSAGE = "There is nothing to gather on this tile."


@dataclass(frozen=True, slots=True)
class GatherOutcome:
    """Result of a successful gather submission."""

    group: Group
    tile: Tile
    result: Any

    def as_dict(self) -> dict[str, object]:
        return {
            "group": {"id": self.group.id, "name": self.group.name},
            "tile": {"x": self.tile.x, "y": self.tile.y},
            "result": self.result,
        }


class GatherFlow(SelectionFlow):
    """Collect the group choice for a ``gather`` command and submit it."""

    command = Command.GATHER

    def __init__(
        self,
        tile: Tile,
        player_id: PlayerID | str | None,
        gateway: CommandGateway,
        *,
        world_id: WorldID | str,
        group_id: GroupID | str | None = None,
        on_complete: Callable[[GatherOutcome], None] | None = None,
        on_close: CloseCallback | None = None,
    ) -> None:
        super().__init__(tile, player_id, gateway, world_id=world_id, on_close=on_close)
        self._on_complete = on_complete

        eligible = self.available_groups
        if group_id is not None:
            if any(group.id == group_id for group in eligible):
                self._selected_group_id = GroupID(group_id)
            else:
                logger.warning("preselected group %s cannot gather on tile %s", group_id, tile.key)
        if self._selected_group_id is None and len(eligible) == 1:
            self._selected_group_id = eligible[0].id

    @property
    def available_items(self) -> list[Item]:
        """Items on the tile, rarest first."""

        return sorted(self._tile.items, key=lambda item: (-item.rarity.rank, item.display_name))

    @property
    def state(self) -> GatherState:
        if self._closed:
            return GatherState.CLOSED
        if self._submitting:
            return GatherState.SUBMITTING
        if self._message is not None:
            return GatherState.FAILED
        if not self.available_groups:
            return GatherState.NO_ELIGIBLE_GROUP
        if not self._tile.items:
            return GatherState.NO_ITEMS
        return GatherState.AWAITING_SELECTION

    @property
    def message(self) -> str | None:
        if self._message is not None:
            return self._message
        state = self.state
        if state == GatherState.NO_ELIGIBLE_GROUP:
            return NO_GROUP_MESSAGE
        if state == GatherState.NO_ITEMS:
            return NO_ITEMS_MESSAGE
        return None

    @property
    def can_submit(self) -> bool:
        return (
            not self._closed
            and not self._submitting
            and self.selected_group is not None
            and bool(self._tile.items)
        )

    async def submit(self) -> GatherOutcome | None:
        """Send the gather command; return the outcome, or ``None`` on failure."""

        self._ensure_accepting_input()
        if not self.available_groups:
            raise PreconditionUnmet(NO_GROUP_MESSAGE)
        if not self._tile.items:
            raise PreconditionUnmet(NO_ITEMS_MESSAGE)
        group = self.selected_group
        if group is None:
            raise ValidationFailure("Select a group to gather with")

        payload = {
            "groupId": group.id,
            "tileX": self._tile.x,
            "tileY": self._tile.y,
            "worldId": self._world_id,
        }
        ok, result = await self._send(payload)
        if not ok:
            return None

        outcome = GatherOutcome(group=group, tile=self._tile, result=result)
        if self._closed:
            return outcome
        logger.info("group %s started gathering at %s", group.id, self._tile.key)
        if self._on_complete is not None:
            self._on_complete(outcome)
        self.close(success=True)
        return outcome

    def _is_eligible(self, group: Group) -> bool:
        return is_owned_by(group, self._player_id) and is_idle(group)
