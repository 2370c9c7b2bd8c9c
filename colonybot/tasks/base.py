"""Base classes for the task plugin system.

Task          — Abstract base class; subclass and implement the three-operation
                contract `is_valid_task()`, `is_valid_target()`, `work()`.
TASK_REGISTRY — Module-level map from task name to Task subclass, used to
                rebuild tasks from the descriptors persisted on agents.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

from colonybot.actions.move import move_toward
from colonybot.core.enums import ReturnCode
from colonybot.core.models import TaskDescriptor

if TYPE_CHECKING:
    from colonybot.core.models import Agent
    from colonybot.core.world_state import WorldObject
    from colonybot.engine.context import TickContext

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Abstract task
# ---------------------------------------------------------------------------

class Task(ABC):
    """A stateful unit of work bound to one agent and at most one target.

    The target is captured by id and looked up on every use, so a task stays
    well-formed after its target disappears; it just stops being valid.

    Subclass this and implement:
      - name:              unique task identifier string (class attribute)
      - is_valid_task():   predicate over the assignee's state
      - is_valid_target(): predicate over the target's existence/properties
      - work():            one tick's effect, returning a ReturnCode
    """

    name: ClassVar[str] = ""
    target_range: ClassVar[int] = 1
    default_data: ClassVar[dict[str, Any]] = {"move_color": "white"}

    def __init__(self, target: WorldObject | int | Any, task_data: dict[str, Any] | None = None) -> None:
        # Anything without an ``id`` is kept as-is; a malformed ref simply never resolves
        self.target_ref: Any = getattr(target, "id", target)
        self.task_data: dict[str, Any] = {**self.default_data, **(task_data or {})}
        self.agent: Agent | None = None
        self.ctx: TickContext | None = None

    # -- binding --

    def bind(self, agent: Agent, ctx: TickContext) -> Task:
        self.agent = agent
        self.ctx = ctx
        return self

    @property
    def target(self) -> WorldObject | None:
        if self.ctx is None:
            return None
        return self.ctx.world.find_object(self.target_ref)

    # -- contract --

    @abstractmethod
    def is_valid_task(self) -> bool:
        """Whether the assignee should keep doing this task."""

    @abstractmethod
    def is_valid_target(self) -> bool:
        """Whether the target still exists and still needs this task."""

    @abstractmethod
    def work(self) -> ReturnCode:
        """Perform one tick's effect on the target."""

    def is_valid(self) -> bool:
        return self.is_valid_target() and self.is_valid_task()

    def run(self) -> ReturnCode:
        """Work if the target is in range, otherwise step toward it."""
        target = self.target
        if self.agent is None or self.ctx is None or target is None:
            return ReturnCode.INVALID_TARGET
        if self.agent.pos.range_to(target.pos) <= self.target_range:
            return self.work()
        code = move_toward(self.ctx.world, self.ctx.pathfinder, self.agent, target.pos, self.target_range)
        return ReturnCode.NOT_IN_RANGE if code == ReturnCode.OK else code

    # -- persistence --

    def descriptor(self) -> TaskDescriptor:
        return TaskDescriptor(name=self.name, target_ref=self.target_ref, task_data=dict(self.task_data))

    @staticmethod
    def from_descriptor(descriptor: TaskDescriptor) -> Task | None:
        """Rebuild a task from its persisted descriptor; None if the kind is unknown."""
        cls = TASK_REGISTRY.get(descriptor.name)
        if cls is None:
            return None
        return cls(descriptor.target_ref, descriptor.task_data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(target={self.target_ref})"


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

TASK_REGISTRY: dict[str, type[Task]] = {}


def register_task(cls: type[Task]) -> type[Task]:
    """Class decorator adding a Task subclass to the registry under its name."""
    if not cls.name:
        raise ValueError(f"{cls.__name__} has no task name")
    TASK_REGISTRY[cls.name] = cls
    return cls


def assign_task(agent: Agent, task: Task) -> bool:
    """Store *task* on *agent*. Returns False if the agent already holds the same task."""
    descriptor = task.descriptor()
    current = agent.task
    if current is not None and current.name == descriptor.name and current.target_ref == descriptor.target_ref:
        return False
    agent.task = descriptor
    logger.debug("Agent %s assigned %r", agent.name, task)
    return True
