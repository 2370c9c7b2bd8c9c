"""Task plugin system.

Importing this package registers every built-in task kind in TASK_REGISTRY.
"""

from colonybot.tasks.base import TASK_REGISTRY, Task, assign_task, register_task
from colonybot.tasks.build import TaskBuild
from colonybot.tasks.get_boosted import TaskGetBoosted
from colonybot.tasks.harvest import TaskHarvest
from colonybot.tasks.repair import TaskRepair
from colonybot.tasks.withdraw import TaskTransfer, TaskWithdraw

__all__ = [
    "TASK_REGISTRY",
    "Task",
    "TaskBuild",
    "TaskGetBoosted",
    "TaskHarvest",
    "TaskRepair",
    "TaskTransfer",
    "TaskWithdraw",
    "assign_task",
    "register_task",
]
