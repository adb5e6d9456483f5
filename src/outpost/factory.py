"""Service Factory for Outpost.

This module provides factory functions wiring the gateway, tick clock and
selection flows from :class:`~outpost.config.Settings`. Use these functions
in production code; in tests, construct the flows directly with a fake
gateway instead.

Example:
    # Production usage
    from outpost.factory import create_gateway, create_gather_flow
    gateway = create_gateway(settings)
    flow = create_gather_flow(tile, player_id, gateway, settings=settings)

    # Testing usage
    from outpost.flows import GatherFlow

    class FakeGateway:
        async def submit(self, command, payload):
            return {"success": True}

    flow = GatherFlow(tile, "p1", FakeGateway(), world_id="default")
"""

from __future__ import annotations

from outpost.config import Settings, get_settings
from outpost.domain.models import GroupID, PlayerID, Tile, WorldInfo
from outpost.domain.tick import TickClock
from outpost.flows.demobilise import DemobiliseFlow
from outpost.flows.gather import GatherFlow
from outpost.gateway import HttpCommandGateway
from outpost.interfaces.gateway import CommandGateway


def create_gateway(settings: Settings | None = None) -> HttpCommandGateway:
    """Create the HTTP command gateway described by ``settings``.

    Args:
        settings: Application settings (defaults to the cached instance)

    Returns:
        Gateway bound to the configured backend URL and credentials
    """
    settings = settings or get_settings()
    return HttpCommandGateway(
        settings.gateway_url,
        auth_token=settings.auth_token,
        timeout=settings.gateway_timeout_seconds,
    )


def create_tick_clock(world: WorldInfo | None, settings: Settings | None = None) -> TickClock:
    """Create a tick clock for ``world`` using the configured base interval."""
    settings = settings or get_settings()
    return TickClock(world, base_interval_ms=settings.base_tick_interval_ms)


def create_gather_flow(
    tile: Tile,
    player_id: PlayerID | str | None,
    gateway: CommandGateway,
    *,
    group_id: GroupID | str | None = None,
    settings: Settings | None = None,
) -> GatherFlow:
    """Create a gather flow addressed to the configured world."""
    settings = settings or get_settings()
    return GatherFlow(tile, player_id, gateway, world_id=settings.world_id, group_id=group_id)


def create_demobilise_flow(
    tile: Tile,
    player_id: PlayerID | str | None,
    gateway: CommandGateway,
    *,
    world: WorldInfo | None = None,
    settings: Settings | None = None,
) -> DemobiliseFlow:
    """Create a demobilise flow reporting the wait until ``world``'s next tick."""
    settings = settings or get_settings()
    clock = create_tick_clock(world, settings) if world is not None else None
    return DemobiliseFlow(
        tile,
        player_id,
        gateway,
        world_id=world.id if world is not None else settings.world_id,
        time_remaining=clock,
        close_delay_seconds=settings.demobilise_close_delay_seconds,
    )
