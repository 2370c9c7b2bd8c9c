"""GET /api/v1/config — expose colony configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from colonybot.api.dependencies import get_engine_manager
from colonybot.api.engine_manager import EngineManager
from colonybot.api.schemas import ColonyConfigResponse

router = APIRouter()


@router.get("/config", response_model=ColonyConfigResponse)
def get_config(
    manager: EngineManager = Depends(get_engine_manager),
) -> ColonyConfigResponse:
    cfg = manager.config
    return ColonyConfigResponse(
        world_seed=cfg.world_seed,
        grid_width=cfg.grid_width,
        grid_height=cfg.grid_height,
        sector_size=cfg.sector_size,
        max_ticks=cfg.max_ticks,
        num_nodes=cfg.num_nodes,
        harvest_power=cfg.harvest_power,
        withdraw_threshold_ratio=cfg.withdraw_threshold_ratio,
        output_search_radius=cfg.output_search_radius,
        tick_rate=manager.tick_rate,
    )
