from __future__ import annotations

import pytest
from pydantic import ValidationError

from outpost.domain.enums import GroupStatus, Rarity
from outpost.domain.snapshots import (
    SnapshotError,
    merge_tile_data,
    merge_tiles,
    parse_tile,
    parse_tile_key,
    parse_world_info,
)


def _chunk_tile() -> dict:
    return {
        "x": 4,
        "y": -2,
        "biome": {"name": "plains"},
        "structure": {"id": "s1", "type": "outpost", "name": "Northwatch"},
        "groups": {
            "g1": {
                "owner": "p1",
                "status": "idle",
                "units": {"u1": {"type": "warrior"}, "p1": {"type": "player"}},
            },
            "g2": {"owner": "p2", "status": "fighting", "inBattle": True, "battleId": "b1"},
        },
        "players": {"p3": {"race": "elf", "displayName": "Ilse"}},
        "items": [{"type": "wood", "quantity": 3, "rarity": "rare", "name": "Oak Log"}],
    }


class TestParseTile:
    def test_keyed_collections_take_ids_from_keys(self) -> None:
        tile = parse_tile(_chunk_tile())

        assert (tile.x, tile.y) == (4, -2)
        assert tile.biome == "plains"
        assert tile.structure is not None and tile.structure.display_name == "Northwatch"
        assert [group.id for group in tile.groups] == ["g1", "g2"]
        assert [unit.id for unit in tile.groups[0].units] == ["u1", "p1"]
        assert tile.groups[0].units[1].is_player
        assert tile.players[0].uid == "p3"
        assert tile.players[0].display_name == "Ilse"

    def test_camel_case_fields(self) -> None:
        tile = parse_tile(_chunk_tile())
        enemy = tile.group("g2")

        assert enemy is not None
        assert enemy.status == GroupStatus.FIGHTING
        assert enemy.in_battle
        assert enemy.battle_id == "b1"

    def test_list_collections(self) -> None:
        tile = parse_tile(
            {
                "x": 0,
                "y": 0,
                "groups": [{"id": "g1", "owner": "p1", "unitCount": 5}],
                "players": [{"id": "p1"}],
                "items": None,
            }
        )

        assert tile.groups[0].size == 5
        assert tile.players[0].uid == "p1"
        assert tile.items == ()

    def test_item_fields(self) -> None:
        (item,) = parse_tile(_chunk_tile()).items

        assert item.rarity is Rarity.RARE
        assert item.quantity == 3
        assert item.display_name == "Oak Log"

    def test_coordinates_from_key(self) -> None:
        tile = parse_tile({"groups": {}}, x=7, y=8)
        assert tile.key == "7,8"

    def test_missing_coordinates(self) -> None:
        with pytest.raises(SnapshotError):
            parse_tile({"groups": {}})

    def test_group_without_id_in_list(self) -> None:
        with pytest.raises(SnapshotError):
            parse_tile({"x": 0, "y": 0, "groups": [{"owner": "p1"}]})

    def test_unknown_status_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            parse_tile({"x": 0, "y": 0, "groups": {"g1": {"owner": "p1", "status": "asleep"}}})


class TestTileKeys:
    def test_parse_tile_key(self) -> None:
        assert parse_tile_key("-3,12") == (-3, 12)

    @pytest.mark.parametrize("key", ["", "1", "1,2,3", "a,b"])
    def test_invalid_keys(self, key: str) -> None:
        with pytest.raises(SnapshotError):
            parse_tile_key(key)


def test_parse_world_info() -> None:
    world = parse_world_info({"id": "w1", "lastTick": 1_000, "speed": 2})
    assert world.id == "w1"
    assert world.last_tick == 1_000
    assert world.speed == 2.0


class TestMergeTileData:
    def test_higher_layer_entry_wins_per_group(self) -> None:
        chunk = _chunk_tile()
        targeted = {"x": 4, "y": -2, "groups": {"g1": {"owner": "p1", "status": "moving"}}}

        tile = merge_tiles(chunk, targeted)

        assert tile.group("g1").status == GroupStatus.MOVING  # type: ignore[union-attr]
        # untouched entries survive from the lower layer
        assert tile.group("g2") is not None
        assert tile.structure is not None

    def test_none_entry_removes_group(self) -> None:
        tile = merge_tiles(_chunk_tile(), {"groups": {"g2": None}})
        assert [group.id for group in tile.groups] == ["g1"]

    def test_explicit_none_clears_structure(self) -> None:
        tile = merge_tiles(_chunk_tile(), {"structure": None})
        assert tile.structure is None

    def test_items_are_replaced_wholesale(self) -> None:
        tile = merge_tiles(_chunk_tile(), {"items": [{"type": "stone"}]})
        assert [item.type for item in tile.items] == ["stone"]

    def test_list_entries_merge_by_id(self) -> None:
        merged = merge_tile_data(
            {"x": 1, "y": 1, "players": [{"uid": "p1"}, {"uid": "p2"}]},
            {"players": [{"uid": "p2", "race": "dwarf"}]},
        )
        assert merged["players"] == {"p1": {"uid": "p1"}, "p2": {"uid": "p2", "race": "dwarf"}}

    def test_conflicting_coordinates(self) -> None:
        with pytest.raises(SnapshotError):
            merge_tile_data({"x": 1, "y": 1}, {"x": 2, "y": 1})

    def test_empty_layers_are_skipped(self) -> None:
        merged = merge_tile_data(None, {}, {"x": 0, "y": 0})
        assert merged == {"x": 0, "y": 0, "groups": {}, "players": {}}

    def test_list_entry_without_id(self) -> None:
        with pytest.raises(SnapshotError):
            merge_tile_data({"x": 0, "y": 0, "groups": [{"owner": "p1"}]})
