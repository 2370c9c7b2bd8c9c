"""End-to-end tests driving whole ticks through the ColonyLoop."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tests.helpers.colony_arena import ColonyArena
from colonybot.config import ColonyConfig
from colonybot.core.enums import Role, StructureKind
from colonybot.core.structures import BUILD_COST
from colonybot.engine.colony_loop import ColonyLoop
from colonybot.systems.generator import build_world
from colonybot.utils.replay import ReplayRecorder, load_task_descriptors


# ---------------------------------------------------------------------------
# Output lifecycle
# ---------------------------------------------------------------------------

class TestOutputLifecycle:
    def test_construction_site_appears(self):
        arena = ColonyArena()
        node = arena.add_node((10, 10))
        arena.add_miner(node, pos=(10, 11))
        arena.run_ticks(5)
        sites = arena.construction_sites_near(node)
        assert len(sites) == 1
        assert sites[0].kind == StructureKind.CONTAINER
        assert len(arena.events_by_category("construction")) == 1

    def test_miners_build_container(self, monkeypatch):
        monkeypatch.setitem(BUILD_COST, StructureKind.CONTAINER, 100)
        arena = ColonyArena()
        node = arena.add_node((10, 10))
        arena.add_miner(node, pos=(10, 11))
        arena.run_ticks(150)
        outputs = arena.outputs_near(node)
        assert len(outputs) == 1
        assert outputs[0].kind == StructureKind.CONTAINER
        assert arena.construction_sites_near(node) == []
        site = arena.colony.sites[0]
        assert site.output is not None
        assert site.output.id == outputs[0].id

    def test_miner_fills_container(self, monkeypatch):
        monkeypatch.setitem(BUILD_COST, StructureKind.CONTAINER, 100)
        arena = ColonyArena()
        node = arena.add_node((10, 10))
        arena.add_miner(node, pos=(10, 11))
        arena.run_ticks(250)
        assert arena.outputs_near(node)[0].store > 0

    def test_never_more_than_one_construction_site(self):
        arena = ColonyArena()
        node = arena.add_node((10, 10))
        arena.add_miner(node, pos=(10, 11))
        arena.add_miner(node, pos=(11, 11))
        arena.add_miner(node, pos=(9, 11))
        for _ in range(40):
            arena.run_ticks(1)
            assert len(arena.construction_sites_near(node)) <= 1


# ---------------------------------------------------------------------------
# Hauling and production
# ---------------------------------------------------------------------------

class TestHaulingFlow:
    def test_hauler_moves_energy_to_storage(self):
        arena = ColonyArena(spawn_pos=None)
        node = arena.add_node((10, 10))
        container = arena.add_structure(StructureKind.CONTAINER, (10, 11), store=1500)
        arena.add_hauler((3, 3), carry_capacity=100)
        arena.run_ticks(60)
        assert arena.storage.store >= 100
        assert container.store <= 1400
        assert arena.events_by_category("task")

    def test_spawn_refilled_before_storage(self):
        arena = ColonyArena(spawn_store=0)
        arena.add_node((10, 10))
        arena.add_structure(StructureKind.CONTAINER, (10, 11), store=1500)
        arena.add_hauler((3, 3), carry_capacity=100)
        arena.run_ticks(60)
        assert arena.spawn.store >= 100
        assert arena.storage.store == 0


class TestProduction:
    def test_missing_miner_is_spawned(self):
        arena = ColonyArena(spawn_store=800)
        node = arena.add_node((10, 10))
        events = arena.run_ticks(1)
        spawned = [e for e in events if e.category == "spawn"]
        assert len(spawned) == 1
        miners = arena.colony.agents_by_role(Role.MINER)
        assert len(miners) == 1
        assert miners[0].assignment == node.id

    def test_spawned_miner_walks_to_node(self):
        arena = ColonyArena(spawn_store=800)
        node = arena.add_node((10, 10))
        arena.run_ticks(20)
        miner = arena.colony.agents_by_role(Role.MINER)[0]
        assert miner.pos.range_to(node.pos) <= 1


# ---------------------------------------------------------------------------
# Driver behaviour
# ---------------------------------------------------------------------------

class TestDriver:
    def test_sites_built_once_per_node(self):
        arena = ColonyArena()
        arena.add_node((10, 10))
        arena.add_node((20, 20))
        loop = arena.build_loop()
        assert len(loop.colony.sites) == 2
        ColonyLoop(arena.config, arena.world, arena.colony)
        assert len(arena.colony.sites) == 2

    def test_stops_at_max_ticks(self):
        arena = ColonyArena(max_ticks=3)
        arena.run_ticks(10)
        assert arena.tick == 3
        assert arena.loop.tick_once() is False

    def test_failing_phase_does_not_stop_tick(self, monkeypatch):
        arena = ColonyArena()
        node = arena.add_node((10, 10))
        arena.add_miner(node, pos=(10, 11), carry=10)
        loop = arena.build_loop()
        site = loop.colony.sites[0]

        def boom(ctx):
            raise RuntimeError("init failed")

        monkeypatch.setattr(site, "init", boom)
        arena.run_ticks(1)
        assert arena.tick == 1
        assert len(arena.construction_sites_near(node)) == 1

    def test_targeted_by_rebuilt_each_tick(self):
        arena = ColonyArena(spawn_pos=None)
        arena.add_node((10, 10))
        container = arena.add_structure(StructureKind.CONTAINER, (10, 11), store=1500)
        hauler = arena.add_hauler((3, 3), carry_capacity=100)
        arena.run_ticks(2)
        assert container.targeted_by == [hauler.id]


# ---------------------------------------------------------------------------
# Generated world and replay
# ---------------------------------------------------------------------------

class TestGeneratedWorld:
    def test_build_world_layout(self):
        cfg = ColonyConfig()
        world, colony = build_world(cfg)
        assert colony.storage is not None
        assert colony.spawn is not None
        assert 2 <= len(colony.node_refs) <= cfg.num_nodes
        for ref in colony.node_refs[:2]:
            assert colony.in_home_sector(world.nodes[ref].pos)
        assert len(colony.groups) == 2
        assert len(colony.agents_by_role(Role.MINER)) == cfg.initial_miners
        assert len(colony.agents_by_role(Role.HAULER)) == cfg.initial_haulers

    def test_build_world_deterministic(self):
        cfg = ColonyConfig(world_seed=7)
        w1, c1 = build_world(cfg)
        w2, c2 = build_world(cfg)
        assert [w1.nodes[r].pos for r in c1.node_refs] == [w2.nodes[r].pos for r in c2.node_refs]
        assert w1.grid._tiles == w2.grid._tiles

    def test_runs_are_deterministic(self, tmp_path):
        cfg = ColonyConfig(max_ticks=40)
        runs = []
        for i in range(2):
            world, colony = build_world(cfg)
            recorder = ReplayRecorder(tmp_path / f"replay_{i}.json", cfg.world_seed)
            ColonyLoop(cfg, world, colony, recorder=recorder).run()
            runs.append(recorder.ticks)
        assert len(runs[0]) == 40
        assert runs[0] == runs[1]

    def test_replay_round_trip(self, tmp_path):
        cfg = ColonyConfig(max_ticks=15)
        world, colony = build_world(cfg)
        path = tmp_path / "replay.json"
        recorder = ReplayRecorder(path, cfg.world_seed)
        ColonyLoop(cfg, world, colony, recorder=recorder).run()
        assert path.exists()

        descriptors = load_task_descriptors(path)
        assert set(descriptors) == set(world.agents)
        for agent_id, desc in descriptors.items():
            live = world.agents[agent_id].task
            if live is None:
                assert desc is None
            else:
                assert desc.name == live.name
                assert desc.target_ref == live.target_ref
