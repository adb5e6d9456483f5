"""Selection flows that collect a command's parameters and submit it.

- GatherFlow: sends an idle group to gather the items on a tile
- DemobiliseFlow: disbands an idle group into the tile's structure

Production Usage:
    from outpost.factory import create_gateway
    gateway = create_gateway(settings)
    flow = GatherFlow(tile, player_id, gateway, world_id=settings.world_id)
    outcome = await flow.submit()

Testing Usage:
    class FakeGateway:
        async def submit(self, command, payload):
            return {"success": True}

    flow = GatherFlow(tile, "p1", FakeGateway(), world_id="default")
"""

from outpost.flows.demobilise import DemobiliseFlow, DemobiliseOutcome
from outpost.flows.gather import GatherFlow, GatherOutcome

__all__ = [
    "DemobiliseFlow",
    "DemobiliseOutcome",
    "GatherFlow",
    "GatherOutcome",
]
