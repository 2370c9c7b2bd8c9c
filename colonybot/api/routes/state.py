"""GET /api/v1/state and /api/v1/sites — live colony data (polled by clients)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from colonybot.api.dependencies import get_engine_manager
from colonybot.api.engine_manager import EngineManager
from colonybot.api.schemas import (
    AgentSchema,
    ColonyStateResponse,
    ColonyStats,
    ConstructionSiteSchema,
    EventSchema,
    ExtractionSiteSchema,
    ResourceNodeSchema,
    StructureSchema,
    TaskSchema,
)
from colonybot.core.snapshot import Snapshot
from colonybot.utils.event_log import SimEvent

router = APIRouter()


def serialize_state(snapshot: Snapshot, events: list[SimEvent]) -> ColonyStateResponse:
    agents = [
        AgentSchema(
            id=a.id,
            name=a.name,
            role=a.role.name.lower(),
            x=a.pos.x,
            y=a.pos.y,
            carry=a.carry,
            carry_capacity=a.carry_capacity,
            extraction_power=a.extraction_power,
            assignment=a.assignment,
            task=TaskSchema(**a.task.to_dict()) if a.task else None,
        )
        for a in snapshot.agents
    ]
    structures = [
        StructureSchema(
            id=s.id, kind=s.kind.name.lower(), x=s.pos.x, y=s.pos.y,
            hits=s.hits, hits_max=s.hits_max, store=s.store, store_capacity=s.store_capacity,
            owner=s.owner, targeted_by=list(s.targeted_by),
        )
        for s in snapshot.structures
    ]
    construction_sites = [
        ConstructionSiteSchema(
            id=c.id, kind=c.kind.name.lower(), x=c.pos.x, y=c.pos.y,
            progress=c.progress, progress_total=c.progress_total, owner=c.owner,
        )
        for c in snapshot.construction_sites
    ]
    nodes = [
        ResourceNodeSchema(
            id=n.id, x=n.pos.x, y=n.pos.y, energy=n.energy,
            capacity=n.capacity, ticks_to_regen=n.ticks_to_regen,
        )
        for n in snapshot.nodes
    ]
    return ColonyStateResponse(
        tick=snapshot.tick,
        agent_count=len(agents),
        agents=agents,
        structures=structures,
        construction_sites=construction_sites,
        nodes=nodes,
        events=[
            EventSchema(tick=ev.tick, category=ev.category, message=ev.message, object_ids=list(ev.object_ids))
            for ev in events
        ],
    )


def serialize_sites(snapshot: Snapshot) -> list[ExtractionSiteSchema]:
    return [
        ExtractionSiteSchema(
            node_ref=s.node_ref,
            x=s.x,
            y=s.y,
            extraction_rate=s.extraction_rate,
            required_capacity=s.required_capacity,
            assigned_power=s.assigned_power,
            output_ref=s.output_ref,
            output_kind=s.output_kind,
            construction_site_ref=s.construction_site_ref,
            group_sink_ref=s.group_sink_ref,
            predicted_store=s.predicted_store,
        )
        for s in snapshot.sites
    ]


def _require_snapshot(manager: EngineManager) -> Snapshot:
    snapshot = manager.get_snapshot()
    if snapshot is None:
        raise HTTPException(status_code=503, detail="No snapshot available yet.")
    return snapshot


@router.get("/state", response_model=ColonyStateResponse)
def get_state(
    since_tick: int = Query(0, ge=0, description="Only return events since this tick"),
    manager: EngineManager = Depends(get_engine_manager),
) -> ColonyStateResponse:
    snapshot = _require_snapshot(manager)
    return serialize_state(snapshot, manager.event_log.since_tick(since_tick))


@router.get("/sites", response_model=list[ExtractionSiteSchema])
def get_sites(
    manager: EngineManager = Depends(get_engine_manager),
) -> list[ExtractionSiteSchema]:
    return serialize_sites(_require_snapshot(manager))


@router.get("/stats", response_model=ColonyStats)
def get_stats(
    manager: EngineManager = Depends(get_engine_manager),
) -> ColonyStats:
    snapshot = _require_snapshot(manager)
    return ColonyStats(
        tick=snapshot.tick,
        agent_count=len(snapshot.agents),
        total_spawned=manager.total_spawned,
        pending_production=snapshot.pending_production,
        running=manager.running,
        paused=manager.paused,
    )
