"""Movement — one step along an A* path toward a goal."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from colonybot.core.enums import ReturnCode

if TYPE_CHECKING:
    from colonybot.core.models import Agent, Vector2
    from colonybot.core.world_state import WorldState
    from colonybot.systems.pathing import Pathfinder

logger = logging.getLogger(__name__)


def move_toward(
    world: WorldState,
    pathfinder: Pathfinder,
    agent: Agent,
    goal: Vector2,
    goal_range: int = 1,
) -> ReturnCode:
    if agent.pos.range_to(goal) <= goal_range:
        return ReturnCode.OK
    step = pathfinder.next_step(agent.pos, goal, goal_range)
    if step is None:
        logger.debug("Agent %s has no path to %s", agent.name, goal)
        return ReturnCode.NO_PATH
    world.move_agent(agent.id, step)
    return ReturnCode.OK
