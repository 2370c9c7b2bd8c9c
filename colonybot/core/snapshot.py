"""Immutable snapshot of the colony for readers on other threads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from colonybot.core.models import Agent
from colonybot.core.structures import ConstructionSite, ResourceNode, Structure

if TYPE_CHECKING:
    from colonybot.engine.colony_loop import ColonyLoop


@dataclass(frozen=True, slots=True)
class SiteSummary:
    """What an extraction site decided about its node this tick."""

    node_ref: int
    x: int
    y: int
    extraction_rate: float
    required_capacity: int
    assigned_power: int
    output_ref: int | None
    output_kind: str | None
    construction_site_ref: int | None
    group_sink_ref: int | None
    predicted_store: int


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Read-only copy of the world taken between ticks."""

    tick: int
    seed: int
    agents: tuple[Agent, ...]
    structures: tuple[Structure, ...]
    construction_sites: tuple[ConstructionSite, ...]
    nodes: tuple[ResourceNode, ...]
    sites: tuple[SiteSummary, ...]
    pending_production: int

    @classmethod
    def from_loop(cls, loop: ColonyLoop) -> Snapshot:
        world, colony, ctx = loop.world, loop.colony, loop.context
        sites = tuple(
            SiteSummary(
                node_ref=s.node_ref,
                x=s.pos.x,
                y=s.pos.y,
                extraction_rate=s.extraction_rate,
                required_capacity=s.required_capacity,
                assigned_power=sum(m.extraction_power for m in s.miners()),
                output_ref=s.output.id if s.output else None,
                output_kind=s.output.kind.name.lower() if s.output else None,
                construction_site_ref=s.output_construction_site.id if s.output_construction_site else None,
                group_sink_ref=s.group.sink_ref if s.group else None,
                predicted_store=s.predicted_store(ctx),
            )
            for s in colony.sites
        )
        return cls(
            tick=world.tick,
            seed=world.seed,
            agents=tuple(a.copy() for _, a in sorted(world.agents.items())),
            structures=tuple(s.copy() for _, s in sorted(world.structures.items())),
            construction_sites=tuple(c.copy() for _, c in sorted(world.construction_sites.items())),
            nodes=tuple(n.copy() for _, n in sorted(world.nodes.items())),
            sites=sites,
            pending_production=len(colony.production_queue),
        )
