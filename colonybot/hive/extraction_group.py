"""Extraction group — extraction sites sharing one storage sink and one broker."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Callable, Iterable, TypeVar

from colonybot.core.enums import Role, StructureKind
from colonybot.hive.resource_requests import ResourceRequestBroker
from colonybot.roles.setups import HaulerSetup

if TYPE_CHECKING:
    from colonybot.core.models import Vector2
    from colonybot.core.structures import Structure
    from colonybot.engine.context import TickContext
    from colonybot.hive.colony import Colony
    from colonybot.hive.extraction_site import ExtractionSite

logger = logging.getLogger(__name__)

G = TypeVar("G")


def find_nearest_group(
    pos: Vector2,
    groups: Iterable[G],
    distance: Callable[[Vector2, Vector2], int | None],
) -> G | None:
    """Return the group whose sink is the shortest path away from *pos*.

    Ties go to the group seen first. Groups with no path are never chosen,
    so None means no group is reachable.
    """
    best: G | None = None
    best_distance = math.inf
    for group in groups:
        d = distance(pos, group.pos)
        if d is None:
            continue
        if d < best_distance:
            best, best_distance = group, d
    return best


class ExtractionGroup:
    """Sites that deliver to the same sink and share a resource request broker.

    Besides holding its members, the group plans hauler capacity: enough
    carry capacity to move every member's extraction rate over the round
    trip between site and sink.
    """

    def __init__(self, colony: Colony, sink: Structure) -> None:
        self.colony = colony
        self.sink_ref = sink.id
        self.pos = sink.pos
        self.sites: list[ExtractionSite] = []
        self.resource_requests = ResourceRequestBroker(f"{colony.name}:group:{sink.id}")

    def add_site(self, site: ExtractionSite) -> None:
        if site not in self.sites:
            self.sites.append(site)

    def sink(self, ctx: TickContext) -> Structure | None:
        return ctx.world.structures.get(self.sink_ref)

    # -- hauling capacity --

    def hauling_power_needed(self, ctx: TickContext) -> float:
        """Carry capacity needed to keep every container output drained."""
        needed = 0.0
        for site in self.sites:
            if site.output is None or site.output.kind != StructureKind.CONTAINER:
                continue
            length = ctx.paths.cached_path_length(site.pos, self.pos)
            if length is None:
                continue
            needed += site.extraction_rate * 2 * length
        return needed

    def hauling_power_supplied(self, ctx: TickContext) -> int:
        return sum(h.carry_capacity for h in self.colony.agents_assigned_to(self.sink_ref, Role.HAULER))

    def register_creep_requests(self, ctx: TickContext) -> None:
        if self.colony.spawn is None:
            return
        if self.hauling_power_supplied(ctx) < self.hauling_power_needed(ctx):
            request = HaulerSetup().create(
                ctx.config,
                assignment=self.sink_ref,
                pattern_repetition_limit=ctx.config.hauler_pattern_repetition_limit,
            )
            self.colony.production_queue.enqueue(request)

    def init(self, ctx: TickContext) -> None:
        self.register_creep_requests(ctx)

    def __repr__(self) -> str:
        return f"ExtractionGroup(sink={self.sink_ref}, sites={len(self.sites)})"
