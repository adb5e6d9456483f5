"""Command Gateway Protocol Interface.

This module defines the boundary between the selection flows and the remote
simulation that executes commands.
"""

from typing import Any, Protocol

from outpost.domain.enums import Command


class CommandGateway(Protocol):
    """Protocol for sending a single command to the simulation backend.

    Implementations perform exactly one request per call: no retries, no
    batching, no reordering and no deduplication of identical requests.
    """

    async def submit(self, command: Command, payload: dict[str, Any]) -> Any:
        """Send ``command`` with a JSON-serializable ``payload``.

        Args:
            command: Name of the remote procedure
            payload: Command arguments

        Returns:
            The backend's opaque result payload

        Raises:
            RemoteFailure: If the request fails or the backend rejects it
        """
        ...


class TimeRemainingProvider(Protocol):
    """Source of human-readable text for the wait until the next tick."""

    def __call__(self) -> str: ...
