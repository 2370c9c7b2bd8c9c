"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import IntEnum, unique


@unique
class Role(IntEnum):
    """Agent roles. Sites and dispatchers look agents up by role."""

    MINER = 0
    HAULER = 1


@unique
class StructureKind(IntEnum):
    """Kinds of owned structures (and of construction sites)."""

    SPAWN = 0
    STORAGE = 1
    CONTAINER = 2       # container-like output: bounded stock
    LINK = 3            # flow-like output: instantaneous level
    LAB = 4
    ROAD = 5


@unique
class ReturnCode(IntEnum):
    """Outcome of a single-tick action. Validity never depends on it."""

    OK = 0
    NOT_IN_RANGE = -9
    NOT_ENOUGH_RESOURCES = -6
    INVALID_TARGET = -7
    FULL = -8
    NO_PATH = -2
    INVALID_ARGS = -10


@unique
class RequestDirection(IntEnum):
    """Direction of a resource request relative to the target structure."""

    WITHDRAW = 0
    DEPOSIT = 1


@unique
class Material(IntEnum):
    """Tile materials on the grid."""

    PLAIN = 0
    SWAMP = 1
    WALL = 2


@unique
class Domain(IntEnum):
    """RNG domains for deterministic randomness isolation."""

    MAP_GEN = 0
    NODE_PLACEMENT = 1
