"""TaskGetBoosted — have a lab boost the assignee's work parts.

Deactivated. Both predicates are hard-coded to False, so the task runner
discards this task on the first tick it sees it and ``work()`` is never
reached. The task stays registered so descriptors naming it still load
and so boosting can be switched back on by restoring the predicates below.
"""

from __future__ import annotations

from colonybot.actions import economy
from colonybot.core.enums import ReturnCode
from colonybot.tasks.base import Task, register_task


@register_task
class TaskGetBoosted(Task):
    name = "get_boosted"
    target_range = economy.TRANSFER_RANGE
    default_data = {"move_color": "cyan"}

    def is_valid_task(self) -> bool:
        # Active form: not self.agent.memory.get("boosted")
        return False

    def is_valid_target(self) -> bool:
        # Active form: isinstance(target, Structure) and target.kind == StructureKind.LAB
        return False

    def work(self) -> ReturnCode:
        return economy.boost(self.agent, self.target)
