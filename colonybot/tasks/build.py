"""TaskBuild — spend carried energy on a construction site."""

from __future__ import annotations

from colonybot.actions import economy
from colonybot.core.enums import ReturnCode
from colonybot.core.structures import ConstructionSite
from colonybot.tasks.base import Task, register_task


@register_task
class TaskBuild(Task):
    name = "build"
    target_range = economy.BUILD_RANGE
    default_data = {"move_color": "yellow"}

    def is_valid_task(self) -> bool:
        return self.agent is not None and self.agent.carry > 0

    def is_valid_target(self) -> bool:
        target = self.target
        if not isinstance(target, ConstructionSite) or target.is_complete:
            return False
        # Only build our own orders
        return self.agent is None or target.owner in ("", self.agent.colony)

    def work(self) -> ReturnCode:
        return economy.build(self.ctx.world, self.agent, self.target, self.ctx.config)
