"""Colony configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ColonyConfig:
    """Immutable configuration for a colony run."""

    # World
    world_seed: int = 42
    grid_width: int = 100
    grid_height: int = 100
    sector_size: int = 50           # side length of one sector ("room")

    # Timing
    max_ticks: int = 1500

    # Resource nodes
    num_nodes: int = 4
    node_capacity: int = 3000
    energy_regen_time: int = 300

    # Economy (per work part / per tick)
    harvest_power: int = 2
    build_power: int = 5
    repair_power: int = 100
    carry_per_part: int = 50

    # Output structures
    container_capacity: int = 2000
    container_hits: int = 250000
    link_capacity: int = 800
    link_hits: int = 1000
    link_deposit_increment: int = 150   # one miner's deposit into a link
    withdraw_threshold_ratio: float = 0.75
    output_search_radius: int = 2

    # Production
    miner_pattern_repetition_limit: int = 3
    hauler_pattern_repetition_limit: int = 8
    spawn_energy_cost_per_part: int = 50
    spawn_ticks_per_part: int = 3
    initial_spawn_energy: int = 300
    spawn_energy_capacity: int = 800
    spawn_energy_regen: int = 1         # passive refill per tick
    initial_miners: int = 1
    initial_haulers: int = 1

    # Pathing
    path_max_nodes: int = 4000

    # Logging
    log_level: str = "INFO"
    replay_file: str = "replay.json"
