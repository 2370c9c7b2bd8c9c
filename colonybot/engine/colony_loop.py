"""ColonyLoop — the tick driver.

Phase cycle:
  1. Reset     — clear brokers and the production queue, rebuild targeted_by
  2. Decide    — every site's init(), then every group's init()
  3. Act       — every site's run()
  4. Dispatch  — haulers take requests; idle miners get fallback tasks
  5. Execute   — task runner protocol for every agent
  6. Advance   — spawn, regenerate nodes, record, tick += 1

Extraction sites are built once, for every node the colony owns, before the
first tick, so groups and their brokers are stable before any request is
registered.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from colonybot.engine.context import TickContext
from colonybot.engine.hauling import HaulingDispatcher
from colonybot.engine.task_runner import TaskRunner
from colonybot.hive.extraction_site import ExtractionSite
from colonybot.roles.behaviour import assign_idle_tasks
from colonybot.systems.pathing import PathCache, Pathfinder

if TYPE_CHECKING:
    from colonybot.config import ColonyConfig
    from colonybot.core.world_state import WorldState
    from colonybot.hive.colony import Colony
    from colonybot.utils.event_log import SimEvent
    from colonybot.utils.replay import ReplayRecorder

logger = logging.getLogger(__name__)


class ColonyLoop:
    """Single-threaded driver: one full decide/act pass per tick."""

    __slots__ = ("_config", "_ctx", "_runner", "_dispatcher", "_recorder")

    def __init__(
        self,
        config: ColonyConfig,
        world: WorldState,
        colony: Colony,
        recorder: ReplayRecorder | None = None,
        pathfinder: Pathfinder | None = None,
    ) -> None:
        self._config = config
        pathfinder = pathfinder or Pathfinder(world.grid, config.path_max_nodes)
        self._ctx = TickContext(
            world=world,
            colony=colony,
            config=config,
            pathfinder=pathfinder,
            paths=PathCache(pathfinder),
        )
        self._runner = TaskRunner()
        self._dispatcher = HaulingDispatcher()
        self._recorder = recorder
        self._build_sites()

    def _build_sites(self) -> None:
        colony = self._ctx.colony
        for node_ref in colony.node_refs:
            if any(s.node_ref == node_ref for s in colony.sites):
                continue
            node = self._ctx.world.nodes.get(node_ref)
            if node is None:
                logger.warning("Colony %s lists unknown node %s", colony.name, node_ref)
                continue
            colony.sites.append(ExtractionSite(colony, node, self._ctx))
        logger.info("Colony %s: %d extraction sites across %d groups",
                    colony.name, len(colony.sites), len(colony.groups))

    # -- accessors --

    @property
    def world(self) -> WorldState:
        return self._ctx.world

    @property
    def colony(self) -> Colony:
        return self._ctx.colony

    @property
    def context(self) -> TickContext:
        return self._ctx

    @property
    def runner(self) -> TaskRunner:
        return self._runner

    @property
    def tick_events(self) -> list[SimEvent]:
        """Events emitted during the most recent tick."""
        return self._ctx.events

    # -- ticking --

    def _guarded(self, label: str, phase: Callable[[TickContext], None]) -> None:
        try:
            phase(self._ctx)
        except Exception:
            logger.exception("%s failed at tick %d, skipping", label, self._ctx.tick)

    def tick_once(self) -> bool:
        """Execute a single tick. Returns False once max_ticks is reached."""
        if self.world.tick >= self._config.max_ticks:
            logger.info("Tick %d: Max ticks reached.", self.world.tick)
            return False
        self._step()
        self.world.tick += 1
        return True

    def _step(self) -> None:
        ctx = self._ctx
        ctx.events = []
        world, colony = ctx.world, ctx.colony

        world.refresh_targeted_by()
        colony.reset_requests()

        for site in colony.sites:
            self._guarded(f"{site.name}.init", site.init)
        for group in colony.groups.values():
            self._guarded(f"group {group.sink_ref}.init", group.init)
        self._guarded("colony requests", colony.register_requests)

        for site in colony.sites:
            self._guarded(f"{site.name}.run", site.run)

        self._guarded("hauling dispatch", self._dispatcher.dispatch)
        self._guarded("idle tasks", assign_idle_tasks)
        self._runner.run_all(ctx)
        self._guarded("production", colony.production_queue.process)

        for node in world.nodes.values():
            node.regenerate()
        spawn = colony.spawn
        if spawn is not None:
            spawn.store = min(spawn.store + self._config.spawn_energy_regen, spawn.store_capacity)

        if self._recorder is not None:
            self._recorder.record_tick(world)

    def run(self) -> None:
        """Execute ticks until max_ticks."""
        logger.info("=== Colony %s started (seed=%d) ===", self.colony.name, self.world.seed)
        while self.tick_once():
            if self.world.tick % 100 == 0:
                stored = self.colony.storage.store if self.colony.storage else 0
                logger.info("Tick %d: %d agents, %d energy stored",
                            self.world.tick, len(self.world.agents), stored)
        logger.info("=== Colony %s finished at tick %d ===", self.colony.name, self.world.tick)
        if self._recorder is not None:
            self._recorder.flush()
