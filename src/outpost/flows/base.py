"""Shared machinery for the command selection flows.

A selection flow filters a tile snapshot for the groups a command may
target, records the player's choice and submits the command through a
:class:`~outpost.interfaces.gateway.CommandGateway`.  Each flow instance
owns its own in-flight marker; closing a flow does not cancel a request
that is already on the wire, so completions arriving after ``close()`` are
dropped without touching the flow's state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, ClassVar

from outpost.domain.enums import Command
from outpost.domain.models import Group, GroupID, PlayerID, Tile, WorldID
from outpost.errors import RemoteFailure, ValidationFailure
from outpost.interfaces.gateway import CommandGateway

logger = logging.getLogger(__name__)

CloseCallback = Callable[[bool], None]


class SelectionFlow:
    """Group selection and submission state common to every flow."""

    command: ClassVar[Command]

    def __init__(
        self,
        tile: Tile,
        player_id: PlayerID | str | None,
        gateway: CommandGateway,
        *,
        world_id: WorldID | str,
        on_close: CloseCallback | None = None,
    ) -> None:
        self._tile = tile
        self._player_id = player_id
        self._gateway = gateway
        self._world_id = world_id
        self._on_close = on_close
        self._selected_group_id: GroupID | None = None
        self._message: str | None = None
        self._submitting = False
        self._closed = False

    # -- Read-only views ----------------------------------------------------

    @property
    def tile(self) -> Tile:
        return self._tile

    @property
    def player_id(self) -> PlayerID | str | None:
        return self._player_id

    @property
    def world_id(self) -> WorldID | str:
        return self._world_id

    @property
    def available_groups(self) -> list[Group]:
        return [group for group in self._tile.groups if self._is_eligible(group)]

    @property
    def selected_group_id(self) -> GroupID | None:
        return self._selected_group_id

    @property
    def selected_group(self) -> Group | None:
        if self._selected_group_id is None:
            return None
        return self._tile.group(self._selected_group_id)

    @property
    def submitting(self) -> bool:
        return self._submitting

    @property
    def closed(self) -> bool:
        return self._closed

    # -- Player input -------------------------------------------------------

    def select_group(self, group_id: GroupID | str) -> Group:
        """Select the group the command targets and clear any prior message."""

        self._ensure_accepting_input()
        group = next((g for g in self.available_groups if g.id == group_id), None)
        if group is None:
            raise ValidationFailure(f"group {group_id} is not available for this command")
        self._selected_group_id = group.id
        self._message = None
        return group

    def close(self, success: bool = False) -> None:
        """Dismiss the flow; ``success`` tells the caller whether it completed."""

        if self._closed:
            return
        self._closed = True
        self._on_closed()
        if self._on_close is not None:
            self._on_close(success)

    # -- Hooks for subclasses -----------------------------------------------

    def _is_eligible(self, group: Group) -> bool:
        raise NotImplementedError

    def _on_closed(self) -> None:
        """Release resources held by the flow when it closes."""

    def _ensure_accepting_input(self) -> None:
        if self._closed:
            raise ValidationFailure("this dialog has been closed")
        if self._submitting:
            raise ValidationFailure("a submission is already in progress")

    async def _send(self, payload: dict[str, Any]) -> tuple[bool, Any]:
        """Submit ``payload``; return ``(succeeded, result)``.

        On failure the backend's message is kept for display and the flow
        stays open.  Nothing is written once the flow has been closed.
        """

        self._submitting = True
        self._message = None
        try:
            result = await self._gateway.submit(self.command, payload)
        except RemoteFailure as exc:
            if self._closed:
                logger.debug("%s failed after its flow was closed: %s", self.command, exc)
                return False, None
            self._message = exc.message
            return False, None
        finally:
            # runs on cancellation too
            if not self._closed:
                self._submitting = False

        if self._closed:
            logger.debug("%s completed after its flow was closed", self.command)
        return True, result
