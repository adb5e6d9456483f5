"""HTTP gateway to the simulation's callable command endpoints."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from outpost.domain.enums import Command
from outpost.errors import RemoteFailure

logger = logging.getLogger(__name__)

AUTH_ERROR_CODES = frozenset({"unauthenticated", "permission-denied"})
AUTH_HTTP_STATUSES = frozenset({401, 403})


class HttpCommandGateway:
    """Send commands as ``POST <base_url>/<command>`` with a ``{"data": ...}`` body.

    The backend answers ``{"result": ...}`` on success and
    ``{"error": {"message": ..., "status": ...}}`` on failure.  Each call is
    a single request; callers that need a timeout or retries supply them.
    """

    def __init__(
        self,
        base_url: str,
        *,
        auth_token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Authorization": f"Bearer {auth_token}"} if auth_token else None
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def submit(self, command: Command, payload: dict[str, Any]) -> Any:
        logger.info("calling command %s", command)
        try:
            response = await self._client.post(f"/{command}", json={"data": payload})
        except httpx.HTTPError as exc:
            logger.warning("command %s could not be delivered: %s", command, exc)
            raise RemoteFailure(f"Could not reach the game server: {exc}", "unavailable") from exc

        body = _decode(response)
        error = body.get("error") if isinstance(body, dict) else None
        if response.is_error or error:
            message, code = _error_details(error, response)
            if code in AUTH_ERROR_CODES or response.status_code in AUTH_HTTP_STATUSES:
                message = f"Authentication error: {message}"
            logger.warning("command %s rejected (%s): %s", command, code, message)
            raise RemoteFailure(message, code)

        if isinstance(body, dict):
            return body.get("result", body.get("data"))
        return body

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HttpCommandGateway:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError:
        return {}


def _error_details(error: Any, response: httpx.Response) -> tuple[str, str]:
    if isinstance(error, dict):
        message = str(error.get("message") or response.reason_phrase or "Command failed")
        raw_code = str(error.get("status") or error.get("code") or "internal")
    else:
        message = response.text or response.reason_phrase or "Command failed"
        raw_code = "internal"
    return message, raw_code.lower().replace("_", "-")
