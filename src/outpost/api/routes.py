"""HTTP routes for the Outpost API."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from outpost.api.runtime import ApiState
from outpost.domain.enums import StorageDestination
from outpost.domain.models import Tile
from outpost.errors import PreconditionUnmet, RemoteFailure, ValidationFailure

router = APIRouter()

UNPROCESSABLE = 422


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


ApiStateDep = Annotated[ApiState, Depends(get_state)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TileRequest(CamelModel):
    tile: dict[str, Any]
    player_id: str | None = None


class ActionRow(CamelModel):
    id: str
    label: str
    description: str
    icon: str


class ActionsResponse(CamelModel):
    x: int
    y: int
    actions: list[ActionRow]


class GatherRequest(TileRequest):
    group_id: str | None = None


class DemobiliseRequest(TileRequest):
    group_id: str
    storage_destination: StorageDestination = StorageDestination.SHARED
    world: dict[str, Any] | None = None


class CommandResponse(CamelModel):
    group: dict[str, Any]
    tile: dict[str, int]
    result: Any = None
    structure: dict[str, Any] | None = None
    storage_destination: str | None = None
    message: str | None = Field(default=None, description="Text to show the player")


@router.get("/health")
async def health_check(state: ApiStateDep) -> dict[str, str]:
    """Simple readiness probe."""

    return {"status": "ok", "world_id": state.settings.world_id}


@router.post("/tiles/actions", response_model=ActionsResponse, response_model_by_alias=True)
async def tile_actions(body: TileRequest, state: ApiStateDep) -> ActionsResponse:
    tile = _load_tile(state, body.tile)
    actions = state.commands.actions(tile, body.player_id)
    return ActionsResponse(
        x=tile.x,
        y=tile.y,
        actions=[
            ActionRow(
                id=str(action.id),
                label=action.label,
                description=action.description,
                icon=action.icon,
            )
            for action in actions
        ],
    )


@router.post("/tiles/gather", response_model=CommandResponse, response_model_by_alias=True)
async def gather(body: GatherRequest, state: ApiStateDep) -> CommandResponse:
    tile = _load_tile(state, body.tile)
    try:
        outcome = await state.commands.gather(tile, body.player_id, group_id=body.group_id)
    except (PreconditionUnmet, ValidationFailure, RemoteFailure) as exc:
        raise _http_error(exc) from exc
    data = outcome.as_dict()
    return CommandResponse(group=data["group"], tile=data["tile"], result=data["result"])


@router.post("/tiles/demobilise", response_model=CommandResponse, response_model_by_alias=True)
async def demobilise(body: DemobiliseRequest, state: ApiStateDep) -> CommandResponse:
    tile = _load_tile(state, body.tile)
    try:
        outcome = await state.commands.demobilise(
            tile,
            body.player_id,
            group_id=body.group_id,
            storage_destination=body.storage_destination,
            world=body.world,
        )
    except (PreconditionUnmet, ValidationFailure, RemoteFailure, ValueError) as exc:
        raise _http_error(exc) from exc
    data = outcome.as_dict()
    return CommandResponse(
        group=data["group"],
        tile=data["location"],
        result=data["result"],
        structure=data["structure"],
        storage_destination=data["storageDestination"],
        message=data["message"],
    )


def _load_tile(state: ApiState, data: dict[str, Any]) -> Tile:
    try:
        return state.commands.load_tile(data)
    except ValidationError as exc:
        raise HTTPException(
            status_code=UNPROCESSABLE,
            detail=exc.errors(include_url=False, include_context=False, include_input=False),
        ) from exc
    except ValueError as exc:
        raise HTTPException(status_code=UNPROCESSABLE, detail=str(exc)) from exc


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, PreconditionUnmet):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, RemoteFailure):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message)
    return HTTPException(status_code=UNPROCESSABLE, detail=str(exc))
