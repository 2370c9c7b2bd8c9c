"""Extraction site — coordinator for one resource node's output and miners.

Each tick the site:
  1. re-derives its output structure (or pending construction site) by a
     spatial search around the node;
  2. ``init()`` registers withdrawal requests when the output fills up, then
     asks for another miner if assigned extraction power falls short;
  3. ``run()`` places a construction site for an output when there is none,
     or hands loaded miners a build/repair task for the existing one.

Group membership is resolved once, at construction, and never revisited.
If the colony's sinks move later, the site keeps reporting to its initial
group.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from colonybot.core.enums import ReturnCode, Role, StructureKind
from colonybot.hive.extraction_group import find_nearest_group
from colonybot.roles.setups import MinerSetup
from colonybot.tasks.base import assign_task
from colonybot.tasks.build import TaskBuild
from colonybot.tasks.repair import TaskRepair

if TYPE_CHECKING:
    from colonybot.core.models import Agent, Vector2
    from colonybot.core.structures import ConstructionSite, ResourceNode, Structure
    from colonybot.core.world_state import WorldState
    from colonybot.engine.context import TickContext
    from colonybot.hive.colony import Colony
    from colonybot.hive.extraction_group import ExtractionGroup
    from colonybot.hive.resource_requests import ResourceRequestBroker

logger = logging.getLogger(__name__)

# Accepted output kinds, most preferred first. A link beats a container
# whenever both sit within range of the node.
OUTPUT_PRIORITY: tuple[StructureKind, ...] = (StructureKind.LINK, StructureKind.CONTAINER)


def required_capacity(extraction_rate: float, harvest_power: int) -> int:
    """Work parts needed to keep up with *extraction_rate*, plus one spare."""
    return math.ceil(extraction_rate / harvest_power) + 1


def _closest(pos: Vector2, candidates: list) -> object | None:
    if not candidates:
        return None
    return min(candidates, key=lambda c: (c.pos.range_to(pos), c.id))


def discover_output(world: WorldState, pos: Vector2, radius: int, owner: str) -> Structure | None:
    """Closest output structure near *pos*, applying OUTPUT_PRIORITY across kinds."""
    nearby = [s for s in world.structures_in_range(pos, radius, OUTPUT_PRIORITY)
              if s.owner in ("", owner)]
    for kind in OUTPUT_PRIORITY:
        found = _closest(pos, [s for s in nearby if s.kind == kind])
        if found is not None:
            return found
    return None


def discover_output_site(world: WorldState, pos: Vector2, radius: int, owner: str) -> ConstructionSite | None:
    """Closest pending construction site of an accepted output kind near *pos*."""
    nearby = [cs for cs in world.construction_sites_in_range(pos, radius, OUTPUT_PRIORITY)
              if cs.owner in ("", owner)]
    for kind in OUTPUT_PRIORITY:
        found = _closest(pos, [cs for cs in nearby if cs.kind == kind])
        if found is not None:
            return found
    return None


class ExtractionSite:
    """Owns one resource node's output lifecycle and miner capacity."""

    def __init__(self, colony: Colony, node: ResourceNode, ctx: TickContext) -> None:
        self.colony = colony
        self.node_ref = node.id
        self.pos = node.pos
        self.name = f"extraction_site:{node.id}"
        self.extraction_rate: float = node.extraction_rate
        self.required_capacity: int = required_capacity(self.extraction_rate, ctx.config.harvest_power)
        self.output: Structure | None = None
        self.output_construction_site: ConstructionSite | None = None
        self.refresh(ctx)

        self.group: ExtractionGroup | None = self.find_best_group(ctx)
        if self.group is not None:
            self.group.add_site(self)
        logger.debug("%s: rate=%.2f required=%d group=%s", self.name, self.extraction_rate,
                     self.required_capacity, self.group)

    # -- discovery --

    def refresh(self, ctx: TickContext) -> None:
        """Re-derive the authoritative output (or pending build) from world state."""
        radius = ctx.config.output_search_radius
        self.output = discover_output(ctx.world, self.pos, radius, self.colony.name)
        if self.output is None:
            self.output_construction_site = discover_output_site(ctx.world, self.pos, radius, self.colony.name)
        else:
            self.output_construction_site = None

    def find_best_group(self, ctx: TickContext) -> ExtractionGroup | None:
        if not self.colony.groups:
            return None
        if self.colony.in_home_sector(self.pos) and self.colony.primary_group is not None:
            return self.colony.primary_group
        return find_nearest_group(self.pos, self.colony.groups.values(), ctx.paths.cached_path_length)

    @property
    def resource_request_broker(self) -> ResourceRequestBroker:
        """Grouped sites report to their group; ungrouped ones to the colony."""
        if self.group is not None:
            return self.group.resource_requests
        return self.colony.resource_requests

    def miners(self) -> list[Agent]:
        return self.colony.agents_assigned_to(self.node_ref, Role.MINER)

    def preferred_output_kind(self) -> StructureKind:
        for kind in OUTPUT_PRIORITY:
            if self.colony.can_build(kind):
                return kind
        return StructureKind.CONTAINER

    # -- accounting --

    def predicted_store(self, ctx: TickContext) -> int:
        """Energy left in the output once haulers already en route have loaded up.

        Never negative: a container over-subscribed by haulers predicts zero.
        """
        output = self.output
        if output is None:
            return 0
        if output.kind == StructureKind.LINK:
            return output.store
        incoming = 0
        for agent_id in output.targeted_by:
            agent = ctx.world.agents.get(agent_id)
            if agent is not None and agent.role == Role.HAULER:
                incoming += agent.free_capacity
        return max(output.store - incoming, 0)

    # -- init phase --

    def register_output_requests(self, ctx: TickContext) -> None:
        output = self.output
        if output is None:
            return
        broker = self.resource_request_broker
        if output.kind == StructureKind.CONTAINER:
            haulers = self.colony.agents_by_role(Role.HAULER)
            if not haulers:
                return
            avg_hauler_capacity = sum(h.carry_capacity for h in haulers) / len(haulers)
            if self.predicted_store(ctx) > ctx.config.withdraw_threshold_ratio * avg_hauler_capacity:
                broker.register_withdrawal_request(output)
        elif output.kind == StructureKind.LINK:
            if output.store + ctx.config.link_deposit_increment > output.store_capacity:
                broker.register_withdrawal_request(output)

    def register_creep_requests(self, ctx: TickContext) -> None:
        power_assigned = sum(m.extraction_power for m in self.miners())
        if power_assigned < self.required_capacity and self.colony.spawn is not None:
            request = MinerSetup().create(
                ctx.config,
                assignment=self.node_ref,
                pattern_repetition_limit=ctx.config.miner_pattern_repetition_limit,
            )
            self.colony.production_queue.enqueue(request)

    def init(self, ctx: TickContext) -> None:
        self.refresh(ctx)
        self.register_output_requests(ctx)
        self.register_creep_requests(ctx)

    # -- run phase --

    def run(self, ctx: TickContext) -> None:
        miners = self.miners()
        if self.output is None and self.output_construction_site is None:
            # Miners only gain energy by harvesting, so a loaded miner stands at the node
            in_position = next((m for m in miners if m.carry > 0), None)
            if in_position is not None:
                kind = self.preferred_output_kind()
                code, site = ctx.world.create_construction_site(in_position.pos, kind, self.colony.name)
                if code == ReturnCode.OK:
                    self.output_construction_site = site
                    ctx.emit("construction", f"{self.name}: {kind.name.lower()} site placed at {site.pos}",
                             (self.node_ref, site.id))
                else:
                    logger.debug("%s: could not place %s at %s (%s)", self.name, kind.name,
                                 in_position.pos, code.name)
                return

        for miner in miners:
            if miner.carry <= 0:
                continue
            if self.output is not None:
                if self.output.is_damaged:
                    assign_task(miner, TaskRepair(self.output))
            elif self.output_construction_site is not None:
                assign_task(miner, TaskBuild(self.output_construction_site))

    def __repr__(self) -> str:
        return f"ExtractionSite(node={self.node_ref}, output={self.output and self.output.id})"
