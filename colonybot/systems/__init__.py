"""Engine systems: RNG, spatial indexing, pathing, world generation."""

from colonybot.systems.pathing import PathCache, Pathfinder
from colonybot.systems.rng import DeterministicRNG
from colonybot.systems.spatial_hash import SpatialHash

__all__ = ["DeterministicRNG", "PathCache", "Pathfinder", "SpatialHash"]
