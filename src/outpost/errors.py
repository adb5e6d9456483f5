"""Error taxonomy for tile actions and command submission."""

from __future__ import annotations


class OutpostError(RuntimeError):
    """Base class for every error raised by the decision layer."""


class PreconditionUnmet(OutpostError):
    """The tile does not allow the requested command (no structure, no items...)."""


class ValidationFailure(OutpostError):
    """The caller's input is incomplete or out of turn; never reaches the backend."""


class RemoteFailure(OutpostError):
    """The simulation backend rejected a command or could not be reached."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
