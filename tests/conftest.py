"""Pytest configuration to ensure the `src` package layout is importable.

This adds the `src/` directory to `sys.path` so tests can import the
`outpost` package (e.g., `from outpost.api.app import create_app`) without
requiring an editable install in CI.
"""

import sys
from pathlib import Path

SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

import asyncio  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402

from outpost.errors import RemoteFailure  # noqa: E402


class RecordingGateway:
    """In-memory command gateway that records every submission.

    ``result`` is returned on success; setting ``error`` makes the next calls
    raise it instead.  When ``hold`` is set the call blocks until
    ``release()`` is called, which lets tests observe the in-flight state.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.result: Any = {"success": True}
        self.error: Exception | None = None
        self.hold = False
        self._released = asyncio.Event()
        self._entered = asyncio.Event()

    async def submit(self, command: str, payload: dict[str, Any]) -> Any:
        self.calls.append((str(command), dict(payload)))
        self._entered.set()
        if self.hold:
            await self._released.wait()
        if self.error is not None:
            raise self.error
        return self.result

    async def wait_entered(self) -> None:
        await self._entered.wait()

    def release(self) -> None:
        self._released.set()

    def fail_with(self, message: str, code: str | None = None) -> None:
        self.error = RemoteFailure(message, code)


@pytest.fixture
def gateway() -> RecordingGateway:
    """Gateway fake recording submitted commands."""
    return RecordingGateway()
