"""TaskHarvest — draw energy from a resource node."""

from __future__ import annotations

from colonybot.actions import economy
from colonybot.core.enums import ReturnCode
from colonybot.core.structures import ResourceNode
from colonybot.tasks.base import Task, register_task


@register_task
class TaskHarvest(Task):
    name = "harvest"
    target_range = economy.HARVEST_RANGE
    default_data = {"move_color": "yellow"}

    def is_valid_task(self) -> bool:
        return self.agent is not None and self.agent.free_capacity > 0

    def is_valid_target(self) -> bool:
        target = self.target
        return isinstance(target, ResourceNode) and target.energy > 0

    def work(self) -> ReturnCode:
        return economy.harvest(self.agent, self.target, self.ctx.config)
