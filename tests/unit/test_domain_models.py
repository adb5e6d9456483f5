"""Tests for tile snapshot entities and their derived predicates."""

from __future__ import annotations

import pytest

from outpost.domain import models as dm
from outpost.domain.enums import GroupStatus, Rarity


def _group(
    group_id: str = "g1",
    owner: str = "p1",
    status: GroupStatus = GroupStatus.IDLE,
    *,
    in_battle: bool = False,
    battle_id: str | None = None,
    units: tuple[dm.Unit, ...] = (),
) -> dm.Group:
    return dm.Group(
        id=dm.GroupID(group_id),
        owner=dm.PlayerID(owner),
        status=status,
        in_battle=in_battle,
        battle_id=dm.BattleID(battle_id) if battle_id else None,
        units=units,
    )


class TestGroupPredicates:
    def test_is_owned_by(self) -> None:
        group = _group(owner="p1")
        assert dm.is_owned_by(group, "p1")
        assert not dm.is_owned_by(group, "p2")
        assert not dm.is_owned_by(group, None)

    @pytest.mark.parametrize(
        "status",
        [
            GroupStatus.MOBILIZING,
            GroupStatus.MOVING,
            GroupStatus.DEMOBILISING,
            GroupStatus.FIGHTING,
            GroupStatus.GATHERING,
        ],
    )
    def test_non_idle_statuses_are_busy(self, status: GroupStatus) -> None:
        group = _group(status=status)
        assert dm.is_busy(group)
        assert not dm.is_idle(group)

    def test_idle_group(self) -> None:
        group = _group()
        assert not dm.is_busy(group)
        assert dm.is_idle(group)

    def test_stale_in_battle_flag_makes_group_busy(self) -> None:
        group = _group(in_battle=True)
        assert dm.is_busy(group)
        assert not dm.is_idle(group)

    def test_size_falls_back_to_listed_units(self) -> None:
        units = (dm.Unit(id=dm.UnitID("u1"), type="warrior"), dm.Unit(id=dm.UnitID("u2"), type="archer"))
        assert _group(units=units).size == 2
        reported = dm.Group(id=dm.GroupID("g"), owner=dm.PlayerID("p"), unit_count=7, units=units)
        assert reported.size == 7

    def test_has_mobilizable_units_ignores_player_bodies(self) -> None:
        body = dm.Unit(id=dm.UnitID("p1"), type="player")
        warrior = dm.Unit(id=dm.UnitID("u1"), type="warrior")
        assert not dm.has_mobilizable_units(_group(units=(body,)))
        assert dm.has_mobilizable_units(_group(units=(body, warrior)))


class TestTile:
    def test_key_and_group_lookup(self) -> None:
        tile = dm.Tile(x=3, y=-4, groups=(_group("a"), _group("b")))
        assert tile.key == "3,-4"
        assert tile.group("b") is tile.groups[1]
        assert tile.group("missing") is None

    def test_battles_require_a_fighting_participant(self) -> None:
        tile = dm.Tile(
            x=0,
            y=0,
            groups=(
                _group("a", status=GroupStatus.FIGHTING, in_battle=True, battle_id="b1"),
                _group("b", owner="p2", status=GroupStatus.FIGHTING, in_battle=True, battle_id="b1"),
                _group("c", in_battle=True, battle_id="b2"),
            ),
        )
        assert tile.battles == (dm.Battle(id=dm.BattleID("b1"), group_ids=("a", "b")),)

    def test_tiles_are_immutable(self) -> None:
        tile = dm.Tile(x=0, y=0)
        with pytest.raises(AttributeError):
            tile.x = 1  # type: ignore[misc]


class TestPlayerPresence:
    def test_player_standing_on_tile(self) -> None:
        tile = dm.Tile(x=0, y=0, players=(dm.Player(uid=dm.PlayerID("p1")),))
        assert dm.player_on_tile(tile, "p1")
        assert not dm.player_on_tile(tile, "p2")
        assert not dm.player_on_tile(tile, None)

    def test_player_travelling_in_group(self) -> None:
        body = dm.Unit(id=dm.UnitID("p1"), type="player")
        group = _group(units=(body,))
        tile = dm.Tile(x=0, y=0, groups=(group,))
        assert dm.player_on_tile(tile, "p1")
        assert dm.group_containing_player(tile, "p1") is group
        assert dm.group_containing_player(tile, "p2") is None


class TestRarity:
    def test_rarity_scale_is_ordered(self) -> None:
        ordered = [
            Rarity.COMMON,
            Rarity.UNCOMMON,
            Rarity.RARE,
            Rarity.EPIC,
            Rarity.LEGENDARY,
            Rarity.MYTHIC,
        ]
        assert sorted(reversed(ordered)) == ordered
        assert Rarity.COMMON < Rarity.MYTHIC
        assert Rarity.EPIC >= Rarity.RARE
        assert Rarity.UNCOMMON.rank == 1
