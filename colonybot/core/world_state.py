"""Mutable authoritative world state — only mutated by the ColonyLoop."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Union

from colonybot.core.enums import Material, ReturnCode, StructureKind
from colonybot.core.grid import Grid
from colonybot.core.models import Agent, Vector2
from colonybot.core.structures import (
    BUILD_COST,
    WALKABLE_KINDS,
    ConstructionSite,
    ResourceNode,
    Structure,
)

if TYPE_CHECKING:
    from colonybot.systems.spatial_hash import SpatialHash

logger = logging.getLogger(__name__)

WorldObject = Union[Agent, Structure, ConstructionSite, ResourceNode]


class WorldState:
    """The single source of truth for the simulation.

    Every object shares one id space so that a stable id is enough to find
    it again through :meth:`find_object`.
    """

    __slots__ = (
        "tick", "seed", "grid", "spatial_index", "sector_size",
        "agents", "structures", "construction_sites", "nodes", "_next_id",
    )

    def __init__(
        self,
        seed: int,
        grid: Grid,
        spatial_index: SpatialHash,
        sector_size: int = 50,
    ) -> None:
        self.tick: int = 0
        self.seed: int = seed
        self.grid: Grid = grid
        self.spatial_index: SpatialHash = spatial_index
        self.sector_size: int = sector_size
        self.agents: dict[int, Agent] = {}
        self.structures: dict[int, Structure] = {}
        self.construction_sites: dict[int, ConstructionSite] = {}
        self.nodes: dict[int, ResourceNode] = {}
        self._next_id: int = 1

    # -- ids --

    def allocate_id(self) -> int:
        oid = self._next_id
        self._next_id += 1
        return oid

    def find_object(self, ref: object) -> WorldObject | None:
        """Resolve a stable id. Unknown or malformed ids resolve to None."""
        if not isinstance(ref, int) or isinstance(ref, bool):
            return None
        for table in (self.structures, self.construction_sites, self.nodes, self.agents):
            obj = table.get(ref)
            if obj is not None:
                return obj
        return None

    # -- sectors --

    def sector_of(self, pos: Vector2) -> tuple[int, int]:
        return pos.x // self.sector_size, pos.y // self.sector_size

    # -- agents --

    def add_agent(self, agent: Agent) -> None:
        self.agents[agent.id] = agent

    def remove_agent(self, agent_id: int) -> Agent | None:
        return self.agents.pop(agent_id, None)

    def move_agent(self, agent_id: int, new_pos: Vector2) -> None:
        agent = self.agents.get(agent_id)
        if agent is not None:
            agent.pos = new_pos

    # -- static objects --

    def add_node(self, node: ResourceNode) -> None:
        self.nodes[node.id] = node
        self.spatial_index.insert(node.id, node.pos)

    def add_structure(self, structure: Structure) -> None:
        self.structures[structure.id] = structure
        self.spatial_index.insert(structure.id, structure.pos)

    def remove_structure(self, structure_id: int) -> Structure | None:
        structure = self.structures.pop(structure_id, None)
        if structure is not None:
            self.spatial_index.remove(structure_id, structure.pos)
        return structure

    def add_construction_site(self, site: ConstructionSite) -> None:
        self.construction_sites[site.id] = site
        self.spatial_index.insert(site.id, site.pos)

    def remove_construction_site(self, site_id: int) -> ConstructionSite | None:
        site = self.construction_sites.pop(site_id, None)
        if site is not None:
            self.spatial_index.remove(site_id, site.pos)
        return site

    # -- spatial queries --

    def structures_in_range(
        self,
        pos: Vector2,
        radius: int,
        kinds: Iterable[StructureKind] | None = None,
    ) -> list[Structure]:
        wanted = frozenset(kinds) if kinds is not None else None
        found: list[Structure] = []
        for oid in self.spatial_index.query_radius(pos, radius):
            s = self.structures.get(oid)
            if s is not None and (wanted is None or s.kind in wanted):
                found.append(s)
        return found

    def construction_sites_in_range(
        self,
        pos: Vector2,
        radius: int,
        kinds: Iterable[StructureKind] | None = None,
    ) -> list[ConstructionSite]:
        wanted = frozenset(kinds) if kinds is not None else None
        found: list[ConstructionSite] = []
        for oid in self.spatial_index.query_radius(pos, radius):
            cs = self.construction_sites.get(oid)
            if cs is not None and (wanted is None or cs.kind in wanted):
                found.append(cs)
        return found

    def objects_at(self, pos: Vector2) -> list[WorldObject]:
        return [obj for oid in self.spatial_index.query_radius(pos, 0)
                if (obj := self.find_object(oid)) is not None]

    # -- construction --

    def create_construction_site(
        self, pos: Vector2, kind: StructureKind, owner: str = "",
    ) -> tuple[ReturnCode, ConstructionSite | None]:
        """Place a build order at *pos*. Fails on walls and occupied tiles."""
        if not self.grid.in_bounds(pos) or self.grid.get(pos) == Material.WALL:
            return ReturnCode.INVALID_TARGET, None
        for obj in self.objects_at(pos):
            if isinstance(obj, (ConstructionSite, ResourceNode)):
                return ReturnCode.INVALID_TARGET, None
            if isinstance(obj, Structure) and (obj.kind == kind or obj.kind not in WALKABLE_KINDS):
                return ReturnCode.INVALID_TARGET, None
        site = ConstructionSite(
            id=self.allocate_id(),
            kind=kind,
            pos=pos,
            progress_total=BUILD_COST.get(kind, 5000),
            owner=owner,
        )
        self.add_construction_site(site)
        logger.debug("Construction site %d (%s) placed at %s", site.id, kind.name, pos)
        return ReturnCode.OK, site

    def complete_construction(self, site: ConstructionSite, hits_max: int, store_capacity: int) -> Structure:
        """Replace a finished construction site with its structure."""
        self.remove_construction_site(site.id)
        structure = Structure(
            id=self.allocate_id(),
            kind=site.kind,
            pos=site.pos,
            hits=hits_max,
            hits_max=hits_max,
            store_capacity=store_capacity,
            owner=site.owner,
        )
        self.add_structure(structure)
        logger.info("Tick %d: %s %d completed at %s", self.tick, site.kind.name, structure.id, site.pos)
        return structure

    # -- bookkeeping --

    def refresh_targeted_by(self) -> None:
        """Rebuild every ``targeted_by`` list from live task descriptors."""
        for s in self.structures.values():
            s.targeted_by.clear()
        for cs in self.construction_sites.values():
            cs.targeted_by.clear()
        for agent in self.agents.values():
            if agent.task is None:
                continue
            target = self.find_object(agent.task.target_ref)
            if isinstance(target, (Structure, ConstructionSite)):
                target.targeted_by.append(agent.id)
