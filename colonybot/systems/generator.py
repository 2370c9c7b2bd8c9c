"""World generator — deterministic demo colony for the CLI and API.

Lays out a grid of sectors with swamp patches and wall segments, a home
storage and spawn, a remote depot in the far sector, resource nodes spread
across sectors, and a starting crew of miners and haulers.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from colonybot.actions.economy import structure_stats
from colonybot.core.enums import Domain, Material, StructureKind
from colonybot.core.grid import Grid
from colonybot.core.models import Agent, Vector2
from colonybot.core.structures import ResourceNode, Structure
from colonybot.core.world_state import WorldState
from colonybot.hive.colony import Colony
from colonybot.roles.setups import HaulerSetup, MinerSetup
from colonybot.systems.rng import DeterministicRNG
from colonybot.systems.spatial_hash import SpatialHash

if TYPE_CHECKING:
    from colonybot.config import ColonyConfig
    from colonybot.engine.production import ProductionRequest

logger = logging.getLogger(__name__)

COLONY_NAME = "home"


def _paint_terrain(grid: Grid, rng: DeterministicRNG, keep_clear: list[Vector2]) -> None:
    def blocked(pos: Vector2) -> bool:
        return any(pos.range_to(k) <= 4 for k in keep_clear)

    for i in range(grid.width * grid.height // 400):
        center = rng.next_position(Domain.MAP_GEN, i, 0, grid.width, grid.height)
        for dx in range(-2, 3):
            for dy in range(-2, 3):
                pos = Vector2(center.x + dx, center.y + dy)
                if not blocked(pos):
                    grid.set(pos, Material.SWAMP)

    for i in range(grid.width * grid.height // 800):
        start = rng.next_position(Domain.MAP_GEN, 10_000 + i, 0, grid.width, grid.height)
        horizontal = rng.next_float(Domain.MAP_GEN, 10_000 + i, 1) < 0.5
        for step in range(6):
            pos = Vector2(start.x + step, start.y) if horizontal else Vector2(start.x, start.y + step)
            if not blocked(pos):
                grid.set(pos, Material.WALL)


def _node_position(grid: Grid, rng: DeterministicRNG, index: int, sector: tuple[int, int],
                   sector_size: int, taken: list[Vector2]) -> Vector2 | None:
    ox, oy = sector[0] * sector_size, sector[1] * sector_size
    for attempt in range(100):
        local = rng.next_position(Domain.NODE_PLACEMENT, index, attempt, sector_size, sector_size, margin=4)
        pos = Vector2(ox + local.x, oy + local.y)
        if any(pos.range_to(t) < 6 for t in taken):
            continue
        if all(grid.is_walkable(Vector2(pos.x + dx, pos.y + dy)) for dx in (-1, 0, 1) for dy in (-1, 0, 1)):
            return pos
    return None


def _add_structure(world: WorldState, kind: StructureKind, pos: Vector2, config: ColonyConfig,
                   store: int = 0) -> Structure:
    hits_max, capacity = structure_stats(kind, config)
    structure = Structure(
        id=world.allocate_id(), kind=kind, pos=pos, hits=hits_max, hits_max=hits_max,
        store=store, store_capacity=capacity, owner=COLONY_NAME,
    )
    world.add_structure(structure)
    return structure


def build_world(config: ColonyConfig) -> tuple[WorldState, Colony]:
    """Construct the demo world and its colony from *config*."""
    rng = DeterministicRNG(config.world_seed)
    grid = Grid(config.grid_width, config.grid_height)
    world = WorldState(seed=config.world_seed, grid=grid, spatial_index=SpatialHash(8),
                       sector_size=config.sector_size)

    size = config.sector_size
    home_sector = (0, 0)
    storage_pos = Vector2(size // 4, size // 4)
    spawn_pos = Vector2(storage_pos.x + 3, storage_pos.y)
    sectors_x = max(config.grid_width // size, 1)
    sectors_y = max(config.grid_height // size, 1)
    far_sector = (sectors_x - 1, sectors_y - 1)
    depot_pos = Vector2(far_sector[0] * size + size // 2, far_sector[1] * size + size // 2)

    keep_clear = [storage_pos, spawn_pos]
    if far_sector != home_sector:
        keep_clear.append(depot_pos)
    _paint_terrain(grid, rng, keep_clear)

    storage = _add_structure(world, StructureKind.STORAGE, storage_pos, config)
    spawn = _add_structure(world, StructureKind.SPAWN, spawn_pos, config, store=config.initial_spawn_energy)

    sectors = [(sx, sy) for sy in range(sectors_y) for sx in range(sectors_x)]
    taken = list(keep_clear)
    node_refs: list[int] = []
    for i in range(config.num_nodes):
        # Two nodes at home, the rest spread over the other sectors
        sector = home_sector if i < 2 or len(sectors) == 1 else sectors[1 + (i - 2) % (len(sectors) - 1)]
        pos = _node_position(grid, rng, i, sector, size, taken)
        if pos is None:
            logger.warning("Failed to place resource node #%d in sector %s", i, sector)
            continue
        taken.append(pos)
        node = ResourceNode(
            id=world.allocate_id(), pos=pos, capacity=config.node_capacity,
            regen_period=config.energy_regen_time, energy=config.node_capacity,
        )
        world.add_node(node)
        node_refs.append(node.id)

    colony = Colony(
        COLONY_NAME, world, home_sector,
        storage_ref=storage.id, spawn_ref=spawn.id, node_refs=node_refs,
    )
    colony.add_group(storage)
    if far_sector != home_sector:
        depot = _add_structure(world, StructureKind.STORAGE, depot_pos, config)
        colony.add_group(depot)

    for i in range(config.initial_miners):
        if not node_refs:
            break
        request = MinerSetup().create(config, node_refs[i % len(node_refs)], config.miner_pattern_repetition_limit)
        _spawn_now(world, colony, request, spawn_pos)
    for _ in range(config.initial_haulers):
        request = HaulerSetup().create(config, storage.id, config.hauler_pattern_repetition_limit)
        _spawn_now(world, colony, request, spawn_pos)

    logger.info("World built: %d nodes, %d structures, %d agents",
                len(world.nodes), len(world.structures), len(world.agents))
    return world, colony


def _spawn_now(world: WorldState, colony: Colony, request: ProductionRequest, pos: Vector2) -> None:
    agent_id = world.allocate_id()
    world.add_agent(Agent(
        id=agent_id,
        name=f"{request.role.name.lower()}_{agent_id}",
        role=request.role,
        pos=pos,
        colony=colony.name,
        carry_capacity=request.carry_capacity,
        extraction_power=request.extraction_power,
        assignment=request.assignment,
    ))
