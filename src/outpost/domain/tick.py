"""Estimate when the simulation will next tick.

The backend advances the world on a fixed interval scaled by the world's
speed.  Deferred commands (gathering, demobilising) only take effect at that
tick, so the selection flows show players how long they have to wait.  These
helpers only estimate; the backend remains authoritative.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from outpost.domain.models import WorldInfo

BASE_TICK_INTERVAL_MS = 300_000
UNKNOWN_TIME = "Unknown"
IMMINENT_TIME = "Any moment now"


def now_ms() -> int:
    return int(time.time() * 1000)


def tick_interval_ms(speed: float, *, base_interval_ms: int = BASE_TICK_INTERVAL_MS) -> int:
    """Return the tick interval for a world running at ``speed``."""

    if speed <= 0:
        raise ValueError("world speed must be positive")
    return round(base_interval_ms / speed)


def next_tick_at(
    world: WorldInfo | None,
    current_ms: int,
    *,
    base_interval_ms: int = BASE_TICK_INTERVAL_MS,
) -> int | None:
    """Estimate the epoch-millisecond timestamp of the next world tick.

    When the last reported tick is already more than one interval old the
    estimate rolls forward by whole intervals, mirroring what the backend
    will do once it catches up.
    """

    if world is None:
        return None
    interval = tick_interval_ms(world.speed, base_interval_ms=base_interval_ms)
    last_tick = world.last_tick if world.last_tick is not None else current_ms
    next_tick = last_tick + interval
    if current_ms >= next_tick:
        ticks_elapsed = (current_ms - last_tick) // interval
        next_tick = last_tick + (ticks_elapsed + 1) * interval
    return next_tick


def format_time_remaining(next_tick_ms: int | None, current_ms: int) -> str:
    """Render the wait until ``next_tick_ms`` as ``"4m 3s"``, ``"12s"`` and so on."""

    if next_tick_ms is None:
        return UNKNOWN_TIME
    remaining = next_tick_ms - current_ms
    if remaining <= 0:
        return IMMINENT_TIME
    minutes = remaining // 60_000
    seconds = (remaining % 60_000) // 1000
    if minutes <= 0:
        return f"{seconds}s"
    return f"{minutes}m {seconds}s"


class TickClock:
    """Callable source of "time until next tick" text for a world."""

    def __init__(
        self,
        world: WorldInfo | None,
        *,
        base_interval_ms: int = BASE_TICK_INTERVAL_MS,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._world = world
        self._base_interval_ms = base_interval_ms
        self._clock = clock

    def next_tick(self) -> int | None:
        return next_tick_at(self._world, self._clock(), base_interval_ms=self._base_interval_ms)

    def time_until_next_tick(self) -> str:
        current = self._clock()
        return format_time_remaining(
            next_tick_at(self._world, current, base_interval_ms=self._base_interval_ms),
            current,
        )

    __call__ = time_until_next_tick
