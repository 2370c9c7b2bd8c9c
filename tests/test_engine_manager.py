"""Tests for the EngineManager, snapshots and API payload serialization."""

import json
import sys
import os
import time
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from colonybot.api.engine_manager import EngineManager
from colonybot.api.routes.config import get_config
from colonybot.api.routes.control import ControlAction, control, set_speed
from colonybot.api.routes.state import get_sites, get_state, get_stats, serialize_sites, serialize_state
from colonybot.api.schemas import ColonyStateResponse
from colonybot.config import ColonyConfig


def _build_manager(max_ticks: int = 30, **overrides) -> EngineManager:
    return EngineManager(ColonyConfig(max_ticks=max_ticks, **overrides))


class TestSnapshots(unittest.TestCase):
    def setUp(self):
        self.mgr = _build_manager()

    def test_initial_snapshot(self):
        snap = self.mgr.get_snapshot()
        self.assertIsNotNone(snap)
        self.assertEqual(snap.tick, 0)
        self.assertEqual(len(snap.agents), 2)
        self.assertGreaterEqual(len(snap.sites), 2)

    def test_advance_publishes(self):
        for _ in range(5):
            self.assertTrue(self.mgr.advance())
        self.assertEqual(self.mgr.get_snapshot().tick, 5)

    def test_snapshot_is_detached(self):
        before = self.mgr.get_snapshot()
        positions = [a.pos for a in before.agents]
        for _ in range(5):
            self.mgr.advance()
        self.assertEqual(before.tick, 0)
        self.assertEqual([a.pos for a in before.agents], positions)

    def test_advance_stops_at_max_ticks(self):
        mgr = _build_manager(max_ticks=3)
        results = [mgr.advance() for _ in range(4)]
        self.assertEqual(results, [True, True, True, False])

    def test_events_collected(self):
        mgr = _build_manager(initial_spawn_energy=800)
        for _ in range(10):
            mgr.advance()
        events = mgr.event_log.latest(100)
        self.assertIn("spawn", {e.category for e in events})
        self.assertTrue(all(e.tick < 10 for e in events))
        self.assertGreaterEqual(mgr.total_spawned, 1)

    def test_reset(self):
        for _ in range(5):
            self.mgr.advance()
        self.mgr.reset()
        self.assertEqual(self.mgr.get_snapshot().tick, 0)
        self.assertEqual(len(self.mgr.event_log), 0)
        self.assertEqual(self.mgr.total_spawned, 0)


class TestSerialization(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.mgr = _build_manager()
        for _ in range(10):
            cls.mgr.advance()

    def test_state_is_json(self):
        snap = self.mgr.get_snapshot()
        payload = serialize_state(snap, self.mgr.event_log.since_tick(0))
        data = json.loads(payload.model_dump_json())
        self.assertEqual(data["tick"], 10)
        self.assertEqual(data["agent_count"], len(snap.agents))
        roles = {a["role"] for a in data["agents"]}
        self.assertLessEqual(roles, {"miner", "hauler"})
        kinds = {s["kind"] for s in data["structures"]}
        self.assertIn("storage", kinds)
        self.assertIn("spawn", kinds)

    def test_tasks_serialized_as_descriptors(self):
        data = serialize_state(self.mgr.get_snapshot(), [])
        for agent in data.agents:
            if agent.task is not None:
                self.assertIn(agent.task.name, {"harvest", "build", "repair", "withdraw", "transfer"})
                self.assertIn("move_color", agent.task.task_data)

    def test_sites(self):
        sites = serialize_sites(self.mgr.get_snapshot())
        self.assertEqual(len(sites), len(self.mgr.get_snapshot().sites))
        for site in sites:
            self.assertEqual(site.required_capacity, 6)
            self.assertGreaterEqual(site.predicted_store, 0)
            self.assertFalse(site.output_ref is not None and site.construction_site_ref is not None)

    def test_since_tick_filters_events(self):
        resp = get_state(since_tick=9, manager=self.mgr)
        self.assertIsInstance(resp, ColonyStateResponse)
        self.assertTrue(all(e.tick >= 9 for e in resp.events))


class TestRoutes(unittest.TestCase):
    def setUp(self):
        self.mgr = _build_manager()

    def test_config(self):
        cfg = get_config(manager=self.mgr)
        self.assertEqual(cfg.max_ticks, 30)
        self.assertEqual(cfg.world_seed, 42)
        self.assertAlmostEqual(cfg.tick_rate, self.mgr.tick_rate)

    def test_sites_route(self):
        self.assertEqual(len(get_sites(manager=self.mgr)), len(self.mgr.get_snapshot().sites))

    def test_stats(self):
        stats = get_stats(manager=self.mgr)
        self.assertEqual(stats.tick, 0)
        self.assertFalse(stats.running)

    def test_pause_when_stopped_is_error(self):
        resp = control(ControlAction.pause, manager=self.mgr)
        self.assertEqual(resp.status, "error")

    def test_reset_route(self):
        self.mgr.advance()
        resp = control(ControlAction.reset, manager=self.mgr)
        self.assertEqual(resp.status, "ok")
        self.assertEqual(resp.tick, 0)

    def test_step_on_stopped_engine_runs_one_tick(self):
        resp = control(ControlAction.step, manager=self.mgr)
        self.assertEqual(resp.status, "ok")
        self.assertEqual(resp.tick, 1)
        time.sleep(0.2)
        self.assertEqual(self.mgr.get_snapshot().tick, 1)
        self.assertFalse(self.mgr.running)

    def test_repeated_steps_count_exactly(self):
        ticks = [control(ControlAction.step, manager=self.mgr).tick for _ in range(5)]
        self.assertEqual(ticks, [1, 2, 3, 4, 5])

    def test_step_past_max_ticks_is_noop(self):
        mgr = _build_manager(max_ticks=2)
        statuses = [control(ControlAction.step, manager=mgr).status for _ in range(3)]
        self.assertEqual(statuses, ["ok", "ok", "noop"])
        self.assertEqual(mgr.get_snapshot().tick, 2)

    def test_speed_route_sets_interval(self):
        resp = set_speed(seconds_per_tick=0.5, manager=self.mgr)
        self.assertEqual(resp.status, "ok")
        self.assertAlmostEqual(self.mgr.tick_rate, 0.5)

    def test_tick_rate_clamped(self):
        self.mgr.tick_rate = 100.0
        self.assertEqual(self.mgr.tick_rate, 2.0)
        self.mgr.tick_rate = 0.0
        self.assertEqual(self.mgr.tick_rate, 0.01)


class TestLifecycle(unittest.TestCase):
    def test_start_and_stop(self):
        mgr = _build_manager(max_ticks=5)
        mgr.start()
        self.assertRaises(RuntimeError, mgr.advance)
        mgr.stop()
        self.assertFalse(mgr.running)

    def test_step_while_paused_runs_one_tick(self):
        mgr = _build_manager(max_ticks=10_000)
        mgr.tick_rate = 0.01
        mgr.start()
        try:
            control(ControlAction.pause, manager=mgr)
            time.sleep(0.3)
            before = mgr.get_snapshot().tick

            resp = control(ControlAction.step, manager=mgr)
            self.assertEqual(resp.status, "ok")
            deadline = time.time() + 5.0
            while mgr.get_snapshot().tick == before and time.time() < deadline:
                time.sleep(0.01)
            time.sleep(0.2)
            self.assertEqual(mgr.get_snapshot().tick, before + 1)
            self.assertTrue(mgr.paused)
        finally:
            mgr.stop()
