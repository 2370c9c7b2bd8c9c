"""Body setups for each role — turn a capacity shortfall into a production request."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from colonybot.core.enums import Role
from colonybot.engine.production import ProductionRequest

if TYPE_CHECKING:
    from colonybot.config import ColonyConfig


@dataclass(frozen=True, slots=True)
class BodyPattern:
    """Parts added per repetition of a setup's pattern."""

    work: int = 0
    carry: int = 0
    move: int = 0

    @property
    def size(self) -> int:
        return self.work + self.carry + self.move


class AgentSetup:
    """Builds production requests for one role from a repeating body pattern."""

    role: Role
    pattern: BodyPattern
    priority: int = 10

    def repetitions(self, config: ColonyConfig, limit: int) -> int:
        """Largest repetition count the spawn can ever afford, capped at *limit*."""
        per_rep = self.pattern.size * config.spawn_energy_cost_per_part
        affordable = config.spawn_energy_capacity // per_rep if per_rep else limit
        return max(1, min(limit, affordable))

    def create(self, config: ColonyConfig, assignment: int | None, pattern_repetition_limit: int) -> ProductionRequest:
        reps = self.repetitions(config, pattern_repetition_limit)
        parts = self.pattern.size * reps
        return ProductionRequest(
            role=self.role,
            assignment=assignment,
            extraction_power=self.pattern.work * reps,
            carry_capacity=self.pattern.carry * reps * config.carry_per_part,
            cost=parts * config.spawn_energy_cost_per_part,
            spawn_ticks=parts * config.spawn_ticks_per_part,
            pattern_repetition_limit=pattern_repetition_limit,
            priority=self.priority,
        )


class MinerSetup(AgentSetup):
    role = Role.MINER
    pattern = BodyPattern(work=2, carry=1, move=1)
    priority = 1


class HaulerSetup(AgentSetup):
    role = Role.HAULER
    pattern = BodyPattern(carry=2, move=1)
    priority = 2
