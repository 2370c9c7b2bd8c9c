"""TaskRepair — restore hits on a damaged structure."""

from __future__ import annotations

from colonybot.actions import economy
from colonybot.core.enums import ReturnCode
from colonybot.core.structures import Structure
from colonybot.tasks.base import Task, register_task


@register_task
class TaskRepair(Task):
    name = "repair"
    target_range = economy.REPAIR_RANGE
    default_data = {"move_color": "green"}

    def is_valid_task(self) -> bool:
        return self.agent is not None and self.agent.carry > 0

    def is_valid_target(self) -> bool:
        target = self.target
        return isinstance(target, Structure) and target.is_damaged

    def work(self) -> ReturnCode:
        return economy.repair(self.agent, self.target, self.ctx.config)
