"""Energy actions: harvest, build, repair, withdraw, transfer, boost.

Each function applies one tick's effect and returns a ReturnCode. Range
checks happen here so a task can call ``work()`` without pre-checking.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from colonybot.core.enums import ReturnCode, StructureKind

if TYPE_CHECKING:
    from colonybot.config import ColonyConfig
    from colonybot.core.models import Agent
    from colonybot.core.structures import ConstructionSite, ResourceNode, Structure
    from colonybot.core.world_state import WorldState

logger = logging.getLogger(__name__)

HARVEST_RANGE = 1
BUILD_RANGE = 3
REPAIR_RANGE = 3
TRANSFER_RANGE = 1

# Energy a lab spends per boosted work part
BOOST_ENERGY_COST = 20


def structure_stats(kind: StructureKind, config: ColonyConfig) -> tuple[int, int]:
    """Return ``(hits_max, store_capacity)`` for a freshly built structure."""
    if kind == StructureKind.CONTAINER:
        return config.container_hits, config.container_capacity
    if kind == StructureKind.LINK:
        return config.link_hits, config.link_capacity
    if kind == StructureKind.STORAGE:
        return 10000, 1_000_000
    if kind == StructureKind.SPAWN:
        return 5000, config.spawn_energy_capacity
    if kind == StructureKind.LAB:
        return 500, 2000
    return 5000, 0


def harvest(agent: Agent, node: ResourceNode, config: ColonyConfig) -> ReturnCode:
    if agent.pos.range_to(node.pos) > HARVEST_RANGE:
        return ReturnCode.NOT_IN_RANGE
    if agent.extraction_power <= 0:
        return ReturnCode.INVALID_ARGS
    if node.energy <= 0:
        return ReturnCode.NOT_ENOUGH_RESOURCES
    amount = min(agent.extraction_power * config.harvest_power, node.energy)
    node.energy -= amount
    # Overflow beyond the agent's capacity is lost, as if dropped on the ground
    agent.carry = min(agent.carry + amount, agent.carry_capacity)
    return ReturnCode.OK


def build(world: WorldState, agent: Agent, site: ConstructionSite, config: ColonyConfig) -> ReturnCode:
    if agent.pos.range_to(site.pos) > BUILD_RANGE:
        return ReturnCode.NOT_IN_RANGE
    if agent.carry <= 0:
        return ReturnCode.NOT_ENOUGH_RESOURCES
    power = max(agent.extraction_power, 1) * config.build_power
    spent = min(power, agent.carry, site.progress_total - site.progress)
    site.progress += spent
    agent.carry -= spent
    if site.is_complete:
        hits_max, capacity = structure_stats(site.kind, config)
        world.complete_construction(site, hits_max, capacity)
    return ReturnCode.OK


def repair(agent: Agent, structure: Structure, config: ColonyConfig) -> ReturnCode:
    if agent.pos.range_to(structure.pos) > REPAIR_RANGE:
        return ReturnCode.NOT_IN_RANGE
    if agent.carry <= 0:
        return ReturnCode.NOT_ENOUGH_RESOURCES
    # Each work part spends one energy for repair_power hits
    power = max(agent.extraction_power, 1)
    energy = min(power, agent.carry)
    healed = min(energy * config.repair_power, structure.hits_max - structure.hits)
    structure.hits += healed
    agent.carry -= energy
    return ReturnCode.OK


def withdraw(agent: Agent, structure: Structure) -> ReturnCode:
    if agent.pos.range_to(structure.pos) > TRANSFER_RANGE:
        return ReturnCode.NOT_IN_RANGE
    if agent.free_capacity <= 0:
        return ReturnCode.FULL
    if structure.store <= 0:
        return ReturnCode.NOT_ENOUGH_RESOURCES
    amount = min(agent.free_capacity, structure.store)
    structure.store -= amount
    agent.carry += amount
    return ReturnCode.OK


def transfer(agent: Agent, structure: Structure) -> ReturnCode:
    if agent.pos.range_to(structure.pos) > TRANSFER_RANGE:
        return ReturnCode.NOT_IN_RANGE
    if agent.carry <= 0:
        return ReturnCode.NOT_ENOUGH_RESOURCES
    if structure.free_capacity <= 0:
        return ReturnCode.FULL
    amount = min(agent.carry, structure.free_capacity)
    structure.store += amount
    agent.carry -= amount
    return ReturnCode.OK


def boost(agent: Agent, lab: Structure) -> ReturnCode:
    """Spend lab energy to boost every work part of *agent*."""
    if lab.kind != StructureKind.LAB:
        return ReturnCode.INVALID_TARGET
    if agent.pos.range_to(lab.pos) > TRANSFER_RANGE:
        return ReturnCode.NOT_IN_RANGE
    cost = BOOST_ENERGY_COST * max(agent.extraction_power, 1)
    if lab.store < cost:
        return ReturnCode.NOT_ENOUGH_RESOURCES
    lab.store -= cost
    agent.memory["boosted"] = True
    logger.debug("Agent %s boosted by lab %d", agent.name, lab.id)
    return ReturnCode.OK
