"""Task runner — the per-tick execution protocol for agent tasks.

For every agent holding a task descriptor:
  1. rebuild the task from its descriptor (unknown kinds are dropped);
  2. ``is_valid_target()`` false  -> clear the task, next agent;
  3. ``is_valid_task()`` false    -> clear the task, next agent;
  4. otherwise run it (step toward the target or ``work()``).

A task never survives a tick in which either predicate failed, and an
exception from one agent's task clears that task without touching the rest.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import colonybot.tasks  # noqa: F401  (registers built-in task kinds)
from colonybot.tasks.base import Task

if TYPE_CHECKING:
    from colonybot.core.enums import ReturnCode
    from colonybot.core.models import Agent
    from colonybot.engine.context import TickContext

logger = logging.getLogger(__name__)


class TaskRunner:
    """Validates and executes tasks; keeps per-tick counters for reporting."""

    __slots__ = ("executed", "discarded", "failed")

    def __init__(self) -> None:
        self.executed = 0
        self.discarded = 0
        self.failed = 0

    def _discard(self, agent: Agent, reason: str) -> None:
        logger.debug("Agent %s dropped task %s (%s)", agent.name, agent.task and agent.task.name, reason)
        agent.task = None
        self.discarded += 1

    def run_agent(self, agent: Agent, ctx: TickContext) -> ReturnCode | None:
        """Apply the protocol to one agent. Returns the work status, or None if nothing ran."""
        if agent.task is None:
            return None
        task = Task.from_descriptor(agent.task)
        if task is None:
            self._discard(agent, "unknown task kind")
            return None
        task.bind(agent, ctx)
        if not task.is_valid_target():
            self._discard(agent, "invalid target")
            return None
        if not task.is_valid_task():
            self._discard(agent, "invalid task")
            return None
        self.executed += 1
        return task.run()

    def run_all(self, ctx: TickContext) -> None:
        self.executed = self.discarded = self.failed = 0
        for agent_id in sorted(ctx.world.agents):
            agent = ctx.world.agents.get(agent_id)
            if agent is None:
                continue
            try:
                self.run_agent(agent, ctx)
            except Exception:
                logger.exception("Task failed for agent %s at tick %d, clearing it", agent.name, ctx.tick)
                agent.task = None
                self.failed += 1
