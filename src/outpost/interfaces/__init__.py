"""Protocol-based interfaces for Outpost collaborators.

The selection flows depend on these protocols rather than on concrete
implementations so tests can inject small fakes instead of mocks.
"""

from outpost.interfaces.gateway import CommandGateway, TimeRemainingProvider

__all__ = [
    "CommandGateway",
    "TimeRemainingProvider",
]
