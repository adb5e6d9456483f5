"""FastAPI application exposing tile actions and command submission."""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from outpost import __version__
from outpost.api import routes
from outpost.api.runtime import ApiState, build_state
from outpost.config import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(
    *,
    state_factory: Callable[[], ApiState] = build_state,
    settings: Settings | None = None,
) -> FastAPI:
    """Build the API; ``settings`` only drives the HTTP layer (CORS, metadata)."""

    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        state = state_factory()
        app.state.api_state = state
        logger.info(
            "serving world %s, forwarding commands to %s",
            state.settings.world_id,
            state.settings.gateway_url,
        )
        try:
            yield
        finally:
            await state.shutdown()

    app = FastAPI(
        title="Outpost API",
        description=(
            "Which actions a map tile offers to a player, and gather/demobilise "
            f"submission against {settings.gateway_url}"
        ),
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(routes.router)
    return app


app = create_app()
