"""TaskWithdraw and TaskTransfer — move energy between agents and structures."""

from __future__ import annotations

from colonybot.actions import economy
from colonybot.core.enums import ReturnCode
from colonybot.core.structures import Structure
from colonybot.tasks.base import Task, register_task


@register_task
class TaskWithdraw(Task):
    name = "withdraw"
    target_range = economy.TRANSFER_RANGE
    default_data = {"move_color": "blue"}

    def is_valid_task(self) -> bool:
        return self.agent is not None and self.agent.free_capacity > 0

    def is_valid_target(self) -> bool:
        target = self.target
        return isinstance(target, Structure) and target.store > 0

    def work(self) -> ReturnCode:
        return economy.withdraw(self.agent, self.target)


@register_task
class TaskTransfer(Task):
    name = "transfer"
    target_range = economy.TRANSFER_RANGE
    default_data = {"move_color": "blue"}

    def is_valid_task(self) -> bool:
        return self.agent is not None and self.agent.carry > 0

    def is_valid_target(self) -> bool:
        target = self.target
        return isinstance(target, Structure) and target.free_capacity > 0

    def work(self) -> ReturnCode:
        return economy.transfer(self.agent, self.target)
