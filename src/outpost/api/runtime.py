"""Runtime primitives backing the Outpost HTTP API."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from outpost.config import Settings, get_settings
from outpost.domain.eligibility import Action, compute_actions
from outpost.domain.enums import StorageDestination
from outpost.domain.models import PlayerID, Tile
from outpost.domain.snapshots import parse_tile, parse_world_info
from outpost.errors import RemoteFailure
from outpost.factory import create_demobilise_flow, create_gateway, create_gather_flow
from outpost.flows.demobilise import DemobiliseOutcome
from outpost.flows.gather import GatherOutcome
from outpost.interfaces.gateway import CommandGateway

logger = logging.getLogger(__name__)


class TileCommandService:
    """Run the eligibility rules and selection flows for API requests."""

    def __init__(self, gateway: CommandGateway, settings: Settings) -> None:
        self._gateway = gateway
        self._settings = settings

    @staticmethod
    def load_tile(data: Mapping[str, Any]) -> Tile:
        """Validate a tile payload; raises ``ValueError`` subclasses when invalid."""

        return parse_tile(data)

    def actions(self, tile: Tile, player_id: PlayerID | str | None) -> tuple[Action, ...]:
        return compute_actions(tile, player_id)

    async def gather(
        self,
        tile: Tile,
        player_id: PlayerID | str | None,
        *,
        group_id: str | None = None,
    ) -> GatherOutcome:
        flow = create_gather_flow(
            tile, player_id, self._gateway, group_id=group_id, settings=self._settings
        )
        if group_id is not None and flow.selected_group_id != group_id:
            flow.select_group(group_id)
        outcome = await flow.submit()
        if outcome is None:
            raise RemoteFailure(flow.message or "Failed to start gathering")
        return outcome

    async def demobilise(
        self,
        tile: Tile,
        player_id: PlayerID | str | None,
        *,
        group_id: str,
        storage_destination: StorageDestination = StorageDestination.SHARED,
        world: Mapping[str, Any] | None = None,
    ) -> DemobiliseOutcome:
        world_info = parse_world_info(world) if world is not None else None
        flow = create_demobilise_flow(
            tile, player_id, self._gateway, world=world_info, settings=self._settings
        )
        flow.select_group(group_id)
        flow.choose_destination(storage_destination)
        outcome = await flow.submit()
        if outcome is None:
            raise RemoteFailure(flow.message or "Failed to demobilise")
        return outcome


class ApiState:
    """Aggregated services shared by the FastAPI layer."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        gateway: CommandGateway | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._owned_gateway = create_gateway(self.settings) if gateway is None else None
        self.gateway: CommandGateway = gateway or self._owned_gateway
        self.commands = TileCommandService(self.gateway, self.settings)

    async def shutdown(self) -> None:
        if self._owned_gateway is not None:
            await self._owned_gateway.aclose()


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    return ApiState()
