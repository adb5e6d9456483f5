"""Demobilise flow: disband an idle group into the structure on its tile.

The backend only marks the group as demobilising; the units are disbursed
into the structure at the next world tick.  After a successful submission
the flow reports how long that will take and then closes itself.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from outpost.domain.enums import Command, DemobiliseState, StorageDestination
from outpost.domain.models import Group, PlayerID, Structure, Tile, WorldID, is_idle, is_owned_by
from outpost.errors import PreconditionUnmet, ValidationFailure
from outpost.flows.base import CloseCallback, SelectionFlow
from outpost.interfaces.gateway import CommandGateway, TimeRemainingProvider

logger = logging.getLogger(__name__)

NO_STRUCTURE_MESSAGE = "There is no structure here to demobilise into."
NO_GROUP_MESSAGE = "You have no idle groups on this tile that can demobilise."
DEFAULT_CLOSE_DELAY_SECONDS = 2.0


@dataclass(frozen=True, slots=True)
class DemobiliseOutcome:
    """Result of a successful demobilise submission."""

    group: Group
    structure: Structure
    location: tuple[int, int]
    storage_destination: StorageDestination
    result: Any
    message: str

    def as_dict(self) -> dict[str, object]:
        return {
            "group": {"id": self.group.id, "name": self.group.name},
            "structure": {
                "id": self.structure.id,
                "type": self.structure.type,
                "name": self.structure.name,
            },
            "location": {"x": self.location[0], "y": self.location[1]},
            "storageDestination": str(self.storage_destination),
            "result": self.result,
            "message": self.message,
        }


class DemobiliseFlow(SelectionFlow):
    """Collect group and storage choices for ``demobiliseUnits`` and submit them."""

    command = Command.DEMOBILISE_UNITS

    def __init__(
        self,
        tile: Tile,
        player_id: PlayerID | str | None,
        gateway: CommandGateway,
        *,
        world_id: WorldID | str,
        time_remaining: TimeRemainingProvider | None = None,
        close_delay_seconds: float = DEFAULT_CLOSE_DELAY_SECONDS,
        on_complete: Callable[[DemobiliseOutcome], None] | None = None,
        on_close: CloseCallback | None = None,
    ) -> None:
        super().__init__(tile, player_id, gateway, world_id=world_id, on_close=on_close)
        self._time_remaining = time_remaining
        self._close_delay = close_delay_seconds
        self._on_complete = on_complete
        self._storage_destination = StorageDestination.SHARED
        self._succeeded = False
        self._close_timer: asyncio.TimerHandle | None = None

    @property
    def structure(self) -> Structure | None:
        return self._tile.structure

    @property
    def storage_destination(self) -> StorageDestination:
        return self._storage_destination

    @property
    def state(self) -> DemobiliseState:
        if self._closed:
            return DemobiliseState.CLOSED
        if self._submitting:
            return DemobiliseState.SUBMITTING
        if self._succeeded:
            return DemobiliseState.SUCCEEDED
        if self._message is not None:
            return DemobiliseState.FAILED
        if self._tile.structure is None:
            return DemobiliseState.NO_STRUCTURE
        if not self.available_groups:
            return DemobiliseState.NO_ELIGIBLE_GROUP
        if self._selected_group_id is None:
            return DemobiliseState.AWAITING_SELECTION
        return DemobiliseState.AWAITING_DESTINATION_CHOICE

    @property
    def message(self) -> str | None:
        if self._message is not None:
            return self._message
        state = self.state
        if state == DemobiliseState.NO_STRUCTURE:
            return NO_STRUCTURE_MESSAGE
        if state == DemobiliseState.NO_ELIGIBLE_GROUP:
            return NO_GROUP_MESSAGE
        return None

    @property
    def can_submit(self) -> bool:
        return (
            not self._closed
            and not self._submitting
            and not self._succeeded
            and self._tile.structure is not None
            and self.selected_group is not None
        )

    def select_group(self, group_id: str) -> Group:
        self._ensure_not_succeeded()
        return super().select_group(group_id)

    def choose_destination(self, destination: StorageDestination | str) -> StorageDestination:
        """Choose where the group's items go; defaults to shared storage."""

        self._ensure_accepting_input()
        self._ensure_not_succeeded()
        try:
            chosen = StorageDestination(destination)
        except ValueError as exc:
            raise ValidationFailure(f"unknown storage destination: {destination}") from exc
        self._storage_destination = chosen
        self._message = None
        return chosen

    async def submit(self) -> DemobiliseOutcome | None:
        """Send ``demobiliseUnits``; return the outcome, or ``None`` on failure."""

        self._ensure_accepting_input()
        self._ensure_not_succeeded()
        structure = self._tile.structure
        if structure is None:
            raise PreconditionUnmet(NO_STRUCTURE_MESSAGE)
        if not self.available_groups:
            raise PreconditionUnmet(NO_GROUP_MESSAGE)
        group = self.selected_group
        if group is None:
            raise ValidationFailure("Select a group to demobilise")

        destination = self._storage_destination
        payload = {
            "groupId": group.id,
            "structureId": structure.id,
            "locationX": self._tile.x,
            "locationY": self._tile.y,
            "worldId": self._world_id,
            "storageDestination": str(destination),
        }
        ok, result = await self._send(payload)
        if not ok:
            return None

        outcome = DemobiliseOutcome(
            group=group,
            structure=structure,
            location=(self._tile.x, self._tile.y),
            storage_destination=destination,
            result=result,
            message=self._success_message(group),
        )
        if self._closed:
            return outcome

        logger.info(
            "group %s demobilising into %s at %s (%s storage)",
            group.id,
            structure.id,
            self._tile.key,
            destination,
        )
        self._succeeded = True
        self._message = outcome.message
        if self._on_complete is not None:
            self._on_complete(outcome)
        self._schedule_close()
        return outcome

    def _success_message(self, group: Group) -> str:
        message = f"{group.display_name} will disburse at the next game tick."
        if self._time_remaining is not None:
            message += f" Next tick in: {self._time_remaining()}"
        return message

    def _schedule_close(self) -> None:
        loop = asyncio.get_running_loop()
        self._close_timer = loop.call_later(self._close_delay, self.close, True)

    def _on_closed(self) -> None:
        if self._close_timer is not None:
            self._close_timer.cancel()
            self._close_timer = None

    def _ensure_not_succeeded(self) -> None:
        if self._succeeded:
            raise ValidationFailure("this group is already demobilising")

    def _is_eligible(self, group: Group) -> bool:
        return is_owned_by(group, self._player_id) and is_idle(group)
