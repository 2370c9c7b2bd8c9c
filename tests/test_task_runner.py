"""Tests for the TaskRunner execution protocol and the deactivated boost task."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tests.helpers.colony_arena import ColonyArena
from colonybot.actions import economy
from colonybot.core.enums import ReturnCode, Role, StructureKind
from colonybot.core.models import TaskDescriptor
from colonybot.engine.task_runner import TaskRunner
from colonybot.tasks import base
from colonybot.tasks.base import Task, assign_task
from colonybot.tasks.get_boosted import TaskGetBoosted
from colonybot.tasks.harvest import TaskHarvest
from colonybot.tasks.withdraw import TaskWithdraw


class _ExplodingTask(Task):
    name = "explode"

    def is_valid_task(self):
        return True

    def is_valid_target(self):
        return True

    def work(self):
        raise RuntimeError("boom")


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------

class TestRunAgent:
    def test_idle_agent_does_nothing(self):
        arena = ColonyArena()
        hauler = arena.add_hauler((5, 5))
        runner = TaskRunner()
        assert runner.run_agent(hauler, arena.ctx) is None
        assert runner.executed == 0

    def test_unknown_kind_discarded(self):
        arena = ColonyArena()
        hauler = arena.add_hauler((5, 5))
        hauler.task = TaskDescriptor(name="teleport", target_ref=arena.storage.id)
        runner = TaskRunner()
        runner.run_agent(hauler, arena.ctx)
        assert hauler.task is None
        assert runner.discarded == 1

    def test_missing_target_discarded(self):
        arena = ColonyArena()
        hauler = arena.add_hauler((5, 5))
        hauler.task = TaskDescriptor(name="withdraw", target_ref=424242)
        runner = TaskRunner()
        runner.run_agent(hauler, arena.ctx)
        assert hauler.task is None
        assert runner.discarded == 1

    def test_malformed_target_discarded(self):
        arena = ColonyArena()
        hauler = arena.add_hauler((5, 5))
        hauler.task = TaskDescriptor(name="withdraw", target_ref="storage")
        TaskRunner().run_agent(hauler, arena.ctx)
        assert hauler.task is None

    def test_failed_task_predicate_discarded(self):
        arena = ColonyArena()
        node = arena.add_node((10, 10))
        miner = arena.add_miner(node, carry=50, carry_capacity=50)
        assign_task(miner, TaskHarvest(node))
        runner = TaskRunner()
        runner.run_agent(miner, arena.ctx)
        assert miner.task is None
        assert node.energy == 3000

    def test_valid_task_runs_and_persists(self):
        arena = ColonyArena()
        container = arena.add_structure(StructureKind.CONTAINER, (10, 10), store=500)
        hauler = arena.add_hauler((10, 14), carry_capacity=100)
        assign_task(hauler, TaskWithdraw(container))
        runner = TaskRunner()
        assert runner.run_agent(hauler, arena.ctx) == ReturnCode.NOT_IN_RANGE
        assert hauler.task is not None
        assert hauler.task.name == "withdraw"
        assert runner.executed == 1


class TestRunAll:
    def test_exception_clears_only_failing_agent(self, monkeypatch):
        monkeypatch.setitem(base.TASK_REGISTRY, "explode", _ExplodingTask)
        arena = ColonyArena()
        container = arena.add_structure(StructureKind.CONTAINER, (10, 10), store=500)
        bad = arena.add_hauler((10, 11))
        bad.task = TaskDescriptor(name="explode", target_ref=container.id)
        good = arena.add_hauler((10, 9), carry_capacity=100)
        assign_task(good, TaskWithdraw(container))

        runner = TaskRunner()
        runner.run_all(arena.ctx)
        assert bad.task is None
        assert runner.failed == 1
        assert good.carry == 100
        assert runner.executed == 2

    def test_counters_reset_each_call(self):
        arena = ColonyArena()
        hauler = arena.add_hauler((5, 5))
        hauler.task = TaskDescriptor(name="teleport")
        runner = TaskRunner()
        runner.run_all(arena.ctx)
        assert runner.discarded == 1
        runner.run_all(arena.ctx)
        assert runner.discarded == 0


# ---------------------------------------------------------------------------
# Deactivated boost task
# ---------------------------------------------------------------------------

class TestGetBoostedInert:
    def _setup(self):
        arena = ColonyArena()
        lab = arena.add_structure(StructureKind.LAB, (10, 10), store=2000)
        miner = arena.add_agent(Role.MINER, (10, 11), carry=10, extraction_power=2)
        return arena, lab, miner

    def test_still_registered(self):
        assert base.TASK_REGISTRY["get_boosted"] is TaskGetBoosted

    def test_predicates_false_for_valid_lab(self):
        arena, lab, miner = self._setup()
        task = TaskGetBoosted(lab).bind(miner, arena.ctx)
        assert task.target is lab
        assert task.is_valid_target() is False
        assert task.is_valid_task() is False

    def test_work_never_called_across_ticks(self, monkeypatch):
        arena, lab, miner = self._setup()
        calls = []
        monkeypatch.setattr(economy, "boost", lambda agent, target: calls.append(agent.id) or ReturnCode.OK)
        runner = TaskRunner()
        for _ in range(25):
            assign_task(miner, TaskGetBoosted(lab))
            runner.run_all(arena.ctx)
            assert miner.task is None
        assert calls == []
        assert lab.store == 2000
        assert "boosted" not in miner.memory

    def test_inert_through_full_loop(self, monkeypatch):
        arena, lab, miner = self._setup()
        calls = []
        monkeypatch.setattr(economy, "boost", lambda agent, target: calls.append(agent.id) or ReturnCode.OK)
        arena.build_loop()
        for _ in range(10):
            assign_task(miner, TaskGetBoosted(lab))
            arena.run_ticks(1)
        assert calls == []
