"""Tests for WorldState: id lookup, spatial queries, construction and targeted_by."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from tests.helpers.colony_arena import ColonyArena
from colonybot.core.enums import Domain, Material, ReturnCode, Role, StructureKind
from colonybot.core.models import Vector2
from colonybot.tasks.base import assign_task
from colonybot.tasks.build import TaskBuild
from colonybot.tasks.withdraw import TaskWithdraw


class TestFindObject:
    def test_resolves_each_table(self):
        arena = ColonyArena()
        node = arena.add_node((10, 10))
        cs = arena.add_construction_site(StructureKind.CONTAINER, (12, 12))
        hauler = arena.add_hauler((5, 5))
        assert arena.world.find_object(node.id) is node
        assert arena.world.find_object(cs.id) is cs
        assert arena.world.find_object(arena.storage.id) is arena.storage
        assert arena.world.find_object(hauler.id) is hauler

    @pytest.mark.parametrize("ref", [None, "1", 1.0, True, False, (1,), -5, 10**9])
    def test_malformed_or_unknown_is_none(self, ref):
        arena = ColonyArena()
        assert arena.world.find_object(ref) is None

    def test_ids_unique_across_kinds(self):
        arena = ColonyArena()
        ids = [arena.add_node((10, 10)).id, arena.add_structure(StructureKind.CONTAINER, (3, 8)).id,
               arena.add_hauler((1, 1)).id]
        assert len(set(ids)) == 3


class TestSpatialQueries:
    def test_structures_in_range_filters_kind(self):
        arena = ColonyArena()
        c = arena.add_structure(StructureKind.CONTAINER, (10, 11))
        arena.add_structure(StructureKind.LAB, (10, 12))
        found = arena.world.structures_in_range(Vector2(10, 10), 2, [StructureKind.CONTAINER])
        assert found == [c]

    def test_results_sorted_by_id(self):
        arena = ColonyArena()
        a = arena.add_structure(StructureKind.CONTAINER, (11, 11))
        b = arena.add_structure(StructureKind.CONTAINER, (9, 9))
        found = arena.world.structures_in_range(Vector2(10, 10), 1)
        assert [s.id for s in found] == sorted([a.id, b.id])

    def test_removed_structure_not_found(self):
        arena = ColonyArena()
        c = arena.add_structure(StructureKind.CONTAINER, (10, 11))
        arena.world.remove_structure(c.id)
        assert arena.world.structures_in_range(Vector2(10, 10), 2) == []

    def test_sector_of(self):
        arena = ColonyArena(sector_size=10)
        assert arena.world.sector_of(Vector2(9, 9)) == (0, 0)
        assert arena.world.sector_of(Vector2(10, 25)) == (1, 2)


class TestCreateConstructionSite:
    def test_ok_on_plain(self):
        arena = ColonyArena()
        code, site = arena.world.create_construction_site(Vector2(10, 10), StructureKind.CONTAINER, "home")
        assert code == ReturnCode.OK
        assert site.progress == 0
        assert site.owner == "home"
        assert arena.world.construction_sites[site.id] is site

    def test_rejects_wall_and_out_of_bounds(self):
        arena = ColonyArena()
        arena.world.grid.set(Vector2(4, 4), Material.WALL)
        assert arena.world.create_construction_site(Vector2(4, 4), StructureKind.CONTAINER)[0] == ReturnCode.INVALID_TARGET
        assert arena.world.create_construction_site(Vector2(-1, 4), StructureKind.CONTAINER)[0] == ReturnCode.INVALID_TARGET

    def test_rejects_occupied_tile(self):
        arena = ColonyArena()
        arena.add_construction_site(StructureKind.CONTAINER, (10, 10))
        arena.add_node((12, 12))
        arena.add_structure(StructureKind.CONTAINER, (14, 14))
        world = arena.world
        assert world.create_construction_site(Vector2(10, 10), StructureKind.LINK)[0] == ReturnCode.INVALID_TARGET
        assert world.create_construction_site(Vector2(12, 12), StructureKind.CONTAINER)[0] == ReturnCode.INVALID_TARGET
        assert world.create_construction_site(Vector2(14, 14), StructureKind.CONTAINER)[0] == ReturnCode.INVALID_TARGET
        assert world.create_construction_site(Vector2(2, 2), StructureKind.CONTAINER)[0] == ReturnCode.INVALID_TARGET

    def test_road_tile_accepts_container(self):
        arena = ColonyArena()
        arena.add_structure(StructureKind.ROAD, (10, 10))
        code, _ = arena.world.create_construction_site(Vector2(10, 10), StructureKind.CONTAINER)
        assert code == ReturnCode.OK

    def test_agent_on_tile_does_not_block(self):
        arena = ColonyArena()
        arena.add_hauler((10, 10))
        code, _ = arena.world.create_construction_site(Vector2(10, 10), StructureKind.CONTAINER)
        assert code == ReturnCode.OK


class TestTargetedBy:
    def test_rebuilt_from_tasks(self):
        arena = ColonyArena()
        container = arena.add_structure(StructureKind.CONTAINER, (10, 10), store=100)
        cs = arena.add_construction_site(StructureKind.CONTAINER, (12, 12))
        hauler = arena.add_hauler((5, 5))
        miner = arena.add_agent(Role.MINER, (12, 13), carry=10)
        assign_task(hauler, TaskWithdraw(container))
        assign_task(miner, TaskBuild(cs))
        container.targeted_by.append(999)

        arena.world.refresh_targeted_by()
        assert container.targeted_by == [hauler.id]
        assert cs.targeted_by == [miner.id]

    def test_cleared_when_task_dropped(self):
        arena = ColonyArena()
        container = arena.add_structure(StructureKind.CONTAINER, (10, 10), store=100)
        hauler = arena.add_hauler((5, 5))
        assign_task(hauler, TaskWithdraw(container))
        arena.world.refresh_targeted_by()
        hauler.task = None
        arena.world.refresh_targeted_by()
        assert container.targeted_by == []


class TestEnums:
    def test_return_codes(self):
        assert {c.name for c in ReturnCode} == {
            "OK", "NOT_IN_RANGE", "NOT_ENOUGH_RESOURCES", "INVALID_TARGET", "FULL", "NO_PATH", "INVALID_ARGS",
        }

    def test_rng_domains_used_by_generator(self):
        assert [d.name for d in Domain] == ["MAP_GEN", "NODE_PLACEMENT"]

    def test_structure_exposes_store_only(self):
        arena = ColonyArena()
        c = arena.add_structure(StructureKind.CONTAINER, (10, 10), store=300)
        assert c.free_capacity == c.store_capacity - 300
        assert not hasattr(c, "energy")
        assert not hasattr(arena.add_hauler((5, 5)), "is_full")
        assert not hasattr(Vector2(0, 0), "manhattan")
