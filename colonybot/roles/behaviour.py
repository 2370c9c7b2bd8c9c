"""Fallback task choice for idle miners."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from colonybot.core.enums import Role
from colonybot.tasks.base import assign_task
from colonybot.tasks.harvest import TaskHarvest
from colonybot.tasks.withdraw import TaskTransfer

if TYPE_CHECKING:
    from colonybot.core.models import Agent
    from colonybot.engine.context import TickContext

logger = logging.getLogger(__name__)


def next_miner_task(miner: Agent, ctx: TickContext) -> None:
    """Harvest until full, then unload into the site's output if it has room.

    A full miner with nowhere to unload stays idle holding its energy; that
    is what lets its extraction site spot it and put it to building.
    """
    site = next((s for s in ctx.colony.sites if s.node_ref == miner.assignment), None)
    if site is None:
        return
    if miner.free_capacity > 0:
        node = ctx.world.nodes.get(site.node_ref)
        if node is not None and node.energy > 0:
            assign_task(miner, TaskHarvest(node))
            return
    output = site.output
    if miner.carry > 0 and output is not None and output.free_capacity > 0:
        assign_task(miner, TaskTransfer(output))


def assign_idle_tasks(ctx: TickContext) -> None:
    for miner in ctx.colony.agents_by_role(Role.MINER):
        if miner.is_idle:
            next_miner_task(miner, ctx)
