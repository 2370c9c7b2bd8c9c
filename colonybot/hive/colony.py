"""Colony — owner of agents, sinks, extraction groups and the production queue."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from colonybot.core.enums import Role, StructureKind
from colonybot.engine.production import ProductionQueue
from colonybot.hive.extraction_group import ExtractionGroup
from colonybot.hive.resource_requests import ResourceRequestBroker

if TYPE_CHECKING:
    from colonybot.core.models import Agent
    from colonybot.core.structures import Structure
    from colonybot.core.world_state import WorldState
    from colonybot.engine.context import TickContext
    from colonybot.hive.extraction_site import ExtractionSite

logger = logging.getLogger(__name__)


class Colony:
    """A home sector and everything the bot owns from it.

    Agents are never cached here: every lookup filters the live roster so
    dead or newly spawned agents are seen on the very next call.
    """

    def __init__(
        self,
        name: str,
        world: WorldState,
        home_sector: tuple[int, int],
        storage_ref: int | None = None,
        spawn_ref: int | None = None,
        node_refs: Iterable[int] = (),
        buildable_output_kinds: Iterable[StructureKind] = (StructureKind.CONTAINER,),
    ) -> None:
        self.name = name
        self.world = world
        self.home_sector = home_sector
        self.storage_ref = storage_ref
        self.spawn_ref = spawn_ref
        self.node_refs: list[int] = list(node_refs)
        self.buildable_output_kinds = frozenset(buildable_output_kinds)
        self.groups: dict[int, ExtractionGroup] = {}
        self.sites: list[ExtractionSite] = []
        # Fallback broker for sites that belong to no extraction group
        self.resource_requests = ResourceRequestBroker(f"{name}:colony")
        self.production_queue = ProductionQueue()

    # -- structures --

    @property
    def storage(self) -> Structure | None:
        return self.world.structures.get(self.storage_ref) if self.storage_ref is not None else None

    @property
    def spawn(self) -> Structure | None:
        return self.world.structures.get(self.spawn_ref) if self.spawn_ref is not None else None

    # -- groups --

    def add_group(self, sink: Structure) -> ExtractionGroup:
        group = self.groups.get(sink.id)
        if group is None:
            group = ExtractionGroup(self, sink)
            self.groups[sink.id] = group
            logger.info("Colony %s: extraction group around sink %d at %s", self.name, sink.id, sink.pos)
        return group

    @property
    def primary_group(self) -> ExtractionGroup | None:
        if self.storage_ref is None:
            return None
        return self.groups.get(self.storage_ref)

    def in_home_sector(self, pos) -> bool:
        return self.world.sector_of(pos) == self.home_sector

    def can_build(self, kind: StructureKind) -> bool:
        return kind in self.buildable_output_kinds

    # -- agents --

    def agents_by_role(self, role: Role) -> list[Agent]:
        return [a for _, a in sorted(self.world.agents.items())
                if a.colony == self.name and a.role == role]

    def agents_assigned_to(self, ref: int, role: Role) -> list[Agent]:
        return [a for a in self.agents_by_role(role) if a.assignment == ref]

    # -- per tick --

    def reset_requests(self) -> None:
        self.resource_requests.reset()
        for group in self.groups.values():
            group.resource_requests.reset()
        self.production_queue.reset()

    def register_requests(self, ctx: TickContext) -> None:
        """Ask haulers to refill the spawn whenever it has room."""
        spawn = self.spawn
        if spawn is not None and spawn.free_capacity > 0:
            self.resource_requests.register_deposit_request(spawn)

    def __repr__(self) -> str:
        return f"Colony({self.name!r}, groups={len(self.groups)}, sites={len(self.sites)})"
