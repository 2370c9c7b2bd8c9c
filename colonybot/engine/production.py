"""Production queue — turns capacity requests into newly spawned agents.

The queue is rebuilt every tick: sites and groups re-request what they still
lack, and the spawn serves the most urgent request once it is idle and can
afford it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from colonybot.core.enums import Role
from colonybot.core.models import Agent

if TYPE_CHECKING:
    from colonybot.engine.context import TickContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProductionRequest:
    """A request for one agent. Lower ``priority`` is served first."""

    role: Role
    assignment: int | None
    extraction_power: int
    carry_capacity: int
    cost: int
    spawn_ticks: int
    pattern_repetition_limit: int
    priority: int = 10

    @property
    def key(self) -> tuple[Role, int | None]:
        return self.role, self.assignment


class ProductionQueue:
    """Requests for the colony's spawn, one per (role, assignment) per tick."""

    __slots__ = ("_requests", "cooldown")

    def __init__(self) -> None:
        self._requests: dict[tuple[Role, int | None], ProductionRequest] = {}
        self.cooldown: int = 0

    def enqueue(self, request: ProductionRequest) -> bool:
        """Add *request*; a repeat for the same role and assignment is ignored."""
        if request.key in self._requests:
            return False
        self._requests[request.key] = request
        logger.debug("Production request queued: %s for %s", request.role.name, request.assignment)
        return True

    @property
    def requests(self) -> list[ProductionRequest]:
        """Pending requests, most urgent first (insertion order breaks ties)."""
        return sorted(self._requests.values(), key=lambda r: r.priority)

    def reset(self) -> None:
        self._requests.clear()

    def __len__(self) -> int:
        return len(self._requests)

    def process(self, ctx: TickContext) -> Agent | None:
        """Spawn the top request if the spawn is idle and can pay for it."""
        if self.cooldown > 0:
            self.cooldown -= 1
            return None
        spawn = ctx.colony.spawn
        pending = self.requests
        if spawn is None or not pending:
            return None
        request = pending[0]
        if spawn.store < request.cost:
            return None

        world = ctx.world
        spawn.store -= request.cost
        agent_id = world.allocate_id()
        agent = Agent(
            id=agent_id,
            name=f"{request.role.name.lower()}_{agent_id}",
            role=request.role,
            pos=spawn.pos,
            colony=ctx.colony.name,
            carry_capacity=request.carry_capacity,
            extraction_power=request.extraction_power,
            assignment=request.assignment,
        )
        world.add_agent(agent)
        self.cooldown = request.spawn_ticks
        del self._requests[request.key]
        logger.info("Tick %d: spawned %s (assignment=%s)", world.tick, agent.name, request.assignment)
        ctx.emit("spawn", f"Spawned {agent.name}", (agent.id,))
        return agent
