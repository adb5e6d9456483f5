from __future__ import annotations

from outpost.config import Settings
from outpost.domain.models import Tile, WorldID, WorldInfo
from outpost.domain.tick import TickClock
from outpost.factory import (
    create_demobilise_flow,
    create_gateway,
    create_gather_flow,
    create_tick_clock,
)
from outpost.gateway import HttpCommandGateway


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("OUTPOST_WORLD_ID", "w42")
    monkeypatch.setenv("OUTPOST_BASE_TICK_INTERVAL_SECONDS", "60")

    settings = Settings()

    assert settings.world_id == "w42"
    assert settings.base_tick_interval_ms == 60_000


def test_tick_clock_uses_configured_interval():
    settings = Settings(base_tick_interval_seconds=10)
    clock = create_tick_clock(WorldInfo(id=WorldID("w1"), last_tick=0), settings)

    assert isinstance(clock, TickClock)
    assert clock.next_tick() is not None
    assert clock.next_tick() % 10_000 == 0


def test_flows_are_addressed_to_the_right_world(gateway):
    settings = Settings(world_id="w1", demobilise_close_delay_seconds=5)
    tile = Tile(x=0, y=0)

    gather = create_gather_flow(tile, "p1", gateway, settings=settings)
    demobilise = create_demobilise_flow(tile, "p1", gateway, settings=settings)
    in_world = create_demobilise_flow(
        tile, "p1", gateway, world=WorldInfo(id=WorldID("w2")), settings=settings
    )

    assert gather.world_id == "w1"
    assert demobilise.world_id == "w1"
    assert in_world.world_id == "w2"


def test_http_gateway_type():
    assert isinstance(create_gateway(Settings()), HttpCommandGateway)
