"""Core data models and world representation."""

from colonybot.core.enums import Material, RequestDirection, ReturnCode, Role, StructureKind
from colonybot.core.grid import Grid
from colonybot.core.models import Agent, TaskDescriptor, Vector2
from colonybot.core.structures import ConstructionSite, ResourceNode, Structure
from colonybot.core.world_state import WorldState

__all__ = [
    "Agent",
    "ConstructionSite",
    "Grid",
    "Material",
    "RequestDirection",
    "ResourceNode",
    "ReturnCode",
    "Role",
    "Structure",
    "StructureKind",
    "TaskDescriptor",
    "Vector2",
    "WorldState",
]
