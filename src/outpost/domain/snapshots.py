"""Build tile snapshots from backend payloads.

Tile data can reach the client from several partially overlapping sources
(a chunk subscription, a targeted-tile lookup, an optimistic local layer).
Instead of shallow-merging them and letting fields silently overwrite each
other, :func:`merge_tile_data` applies an explicit precedence rule, field by
field, with layers listed from lowest to highest precedence:

``x``, ``y``
    Must agree across every layer that carries them.
``structure``, ``biome``
    Taken from the highest layer carrying the key; an explicit ``None``
    clears a lower layer's value.
``groups``, ``players``
    Merged by id; the highest layer carrying an entry wins for that entry,
    and an explicit ``None`` entry removes it.
``items``
    Replaced wholesale by the highest layer carrying the key.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from outpost.domain.models import (
    BattleID,
    Group,
    GroupID,
    Item,
    Player,
    PlayerID,
    Structure,
    StructureID,
    Tile,
    Unit,
    UnitID,
    WorldID,
    WorldInfo,
)
from outpost.schemas.tile import (
    GroupPayload,
    ItemPayload,
    PlayerPayload,
    TilePayload,
    UnitPayload,
    WorldInfoPayload,
)

_REPLACED_FIELDS = ("structure", "biome", "items")
_KEYED_FIELDS = {"groups": ("id",), "players": ("uid", "id")}


class SnapshotError(ValueError):
    """Raised when tile layers cannot be combined into one snapshot."""


def parse_tile(data: Mapping[str, Any], *, x: int | None = None, y: int | None = None) -> Tile:
    """Validate a backend tile payload and convert it into a :class:`Tile`."""

    payload = TilePayload.model_validate(data)
    tile_x = payload.x if payload.x is not None else x
    tile_y = payload.y if payload.y is not None else y
    if tile_x is None or tile_y is None:
        raise SnapshotError("tile payload carries no coordinates")

    return Tile(
        x=tile_x,
        y=tile_y,
        groups=tuple(_group(key, group) for key, group in _entries(payload.groups)),
        structure=_structure(payload),
        items=tuple(_item(item) for _, item in _entries(payload.items)),
        players=tuple(_player(key, player) for key, player in _entries(payload.players)),
        biome=payload.biome,
    )


def parse_tile_key(key: str) -> tuple[int, int]:
    """Split a ``"x,y"`` tile key into integer coordinates."""

    try:
        raw_x, raw_y = key.split(",")
        return int(raw_x), int(raw_y)
    except ValueError as exc:
        raise SnapshotError(f"invalid tile key: {key!r}") from exc


def parse_world_info(data: Mapping[str, Any]) -> WorldInfo:
    payload = WorldInfoPayload.model_validate(data)
    return WorldInfo(id=WorldID(payload.id), last_tick=payload.last_tick, speed=payload.speed)


def merge_tile_data(*layers: Mapping[str, Any] | None) -> dict[str, Any]:
    """Combine raw tile layers, lowest precedence first, into one payload."""

    merged: dict[str, Any] = {}
    keyed: dict[str, dict[str, Any]] = {name: {} for name in _KEYED_FIELDS}

    for layer in layers:
        if not layer:
            continue
        for axis in ("x", "y"):
            if layer.get(axis) is None:
                continue
            if merged.get(axis) is not None and merged[axis] != layer[axis]:
                raise SnapshotError(
                    f"conflicting {axis} coordinate: {merged[axis]} != {layer[axis]}"
                )
            merged[axis] = layer[axis]
        for name in _REPLACED_FIELDS:
            if name in layer:
                merged[name] = layer[name]
        for name, id_keys in _KEYED_FIELDS.items():
            if name not in layer:
                continue
            for entry_id, entry in _raw_entries(layer[name], id_keys):
                if entry is None:
                    keyed[name].pop(entry_id, None)
                else:
                    keyed[name][entry_id] = entry

    for name, entries in keyed.items():
        merged[name] = entries
    return merged


def merge_tiles(*layers: Mapping[str, Any] | None) -> Tile:
    """Merge raw layers and parse the result in one step."""

    return parse_tile(merge_tile_data(*layers))


# ---------------------------------------------------------------------------
# Helpers


def _entries(collection: Mapping[str, Any] | list[Any]) -> list[tuple[str | None, Any]]:
    if isinstance(collection, Mapping):
        return list(collection.items())
    return [(None, entry) for entry in collection]


def _raw_entries(collection: Any, id_keys: tuple[str, ...]) -> list[tuple[str, Any]]:
    if collection is None:
        return []
    if isinstance(collection, Mapping):
        return [(str(key), value) for key, value in collection.items()]
    entries: list[tuple[str, Any]] = []
    for entry in collection:
        entry_id = next((entry[key] for key in id_keys if entry.get(key) is not None), None)
        if entry_id is None:
            raise SnapshotError("list entries must carry an id to be merged")
        entries.append((str(entry_id), entry))
    return entries


def _group(key: str | None, payload: GroupPayload) -> Group:
    group_id = payload.id or key
    if group_id is None:
        raise SnapshotError("group without an id")
    return Group(
        id=GroupID(group_id),
        owner=PlayerID(payload.owner),
        status=payload.status,
        in_battle=payload.in_battle,
        battle_id=BattleID(payload.battle_id) if payload.battle_id else None,
        units=tuple(_unit(unit_key, unit) for unit_key, unit in _entries(payload.units)),
        unit_count=payload.unit_count,
        name=payload.name,
    )


def _unit(key: str | None, payload: UnitPayload) -> Unit:
    unit_id = payload.id or key
    if unit_id is None:
        raise SnapshotError("unit without an id")
    return Unit(id=UnitID(unit_id), type=payload.type, name=payload.name or payload.display_name)


def _structure(payload: TilePayload) -> Structure | None:
    if payload.structure is None:
        return None
    structure = payload.structure
    return Structure(
        id=StructureID(structure.id),
        type=structure.type,
        name=structure.name,
        owner=PlayerID(structure.owner) if structure.owner else None,
    )


def _item(payload: ItemPayload) -> Item:
    return Item(
        type=payload.type,
        quantity=payload.quantity,
        rarity=payload.rarity,
        name=payload.name,
        description=payload.description,
        id=payload.id,
    )


def _player(key: str | None, payload: PlayerPayload) -> Player:
    uid = payload.uid or payload.id or key
    if uid is None:
        raise SnapshotError("player without an id")
    return Player(
        uid=PlayerID(uid),
        alive=payload.alive,
        race=payload.race,
        display_name=payload.display_name,
    )
