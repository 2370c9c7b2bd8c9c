"""Pydantic response models for the REST API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


# --- Agents ---

class TaskSchema(BaseModel):
    name: str
    target_ref: int | str | None = None
    task_data: dict[str, Any] = Field(default_factory=dict)


class AgentSchema(BaseModel):
    id: int
    name: str
    role: str
    x: int
    y: int
    carry: int = 0
    carry_capacity: int = 0
    extraction_power: int = 0
    assignment: int | None = None
    task: TaskSchema | None = None


# --- World objects ---

class StructureSchema(BaseModel):
    id: int
    kind: str
    x: int
    y: int
    hits: int
    hits_max: int
    store: int = 0
    store_capacity: int = 0
    owner: str = ""
    targeted_by: list[int] = Field(default_factory=list)


class ConstructionSiteSchema(BaseModel):
    id: int
    kind: str
    x: int
    y: int
    progress: int = 0
    progress_total: int = 0
    owner: str = ""


class ResourceNodeSchema(BaseModel):
    id: int
    x: int
    y: int
    energy: int
    capacity: int
    ticks_to_regen: int = 0


class ExtractionSiteSchema(BaseModel):
    node_ref: int
    x: int
    y: int
    extraction_rate: float
    required_capacity: int
    assigned_power: int
    output_ref: int | None = None
    output_kind: str | None = None
    construction_site_ref: int | None = None
    group_sink_ref: int | None = None
    predicted_store: int = 0


class EventSchema(BaseModel):
    tick: int
    category: str
    message: str
    object_ids: list[int] = Field(default_factory=list)


class ColonyStateResponse(BaseModel):
    tick: int
    agent_count: int
    agents: list[AgentSchema]
    structures: list[StructureSchema] = Field(default_factory=list)
    construction_sites: list[ConstructionSiteSchema] = Field(default_factory=list)
    nodes: list[ResourceNodeSchema] = Field(default_factory=list)
    events: list[EventSchema] = Field(default_factory=list)


# --- Control ---

class ControlResponse(BaseModel):
    status: str
    message: str
    tick: int = 0


# --- Config ---

class ColonyConfigResponse(BaseModel):
    world_seed: int
    grid_width: int
    grid_height: int
    sector_size: int
    max_ticks: int
    num_nodes: int
    harvest_power: int
    withdraw_threshold_ratio: float
    output_search_radius: int
    tick_rate: float


# --- Stats ---

class ColonyStats(BaseModel):
    tick: int
    agent_count: int
    total_spawned: int
    pending_production: int
    running: bool
    paused: bool
