"""Core data models: Vector2, TaskDescriptor, Agent."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from colonybot.core.enums import Role


@dataclass(frozen=True, slots=True)
class Vector2:
    """Immutable 2D integer coordinate."""

    x: int = 0
    y: int = 0

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def range_to(self, other: Vector2) -> int:
        """Chebyshev distance; diagonal neighbours are at range 1."""
        return max(abs(self.x - other.x), abs(self.y - other.y))

    def in_range(self, other: Vector2, radius: int) -> bool:
        return self.range_to(other) <= radius

    def __repr__(self) -> str:
        return f"({self.x}, {self.y})"


@dataclass(slots=True)
class TaskDescriptor:
    """Persisted form of a task, stored against its owning agent.

    Only plain data lives here so the descriptor survives the target
    disappearing; the task object is rebuilt from it every tick.
    """

    name: str
    target_ref: int | None = None
    task_data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "target_ref": self.target_ref,
            "task_data": dict(self.task_data),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> TaskDescriptor:
        return cls(
            name=str(raw.get("name", "")),
            target_ref=raw.get("target_ref"),
            task_data=dict(raw.get("task_data") or {}),
        )

    def copy(self) -> TaskDescriptor:
        return TaskDescriptor(self.name, self.target_ref, dict(self.task_data))


@dataclass(slots=True)
class Agent:
    """A mobile worker owned by a colony."""

    id: int
    name: str
    role: Role
    pos: Vector2
    colony: str = ""
    carry: int = 0                  # held resource amount
    carry_capacity: int = 0
    extraction_power: int = 0       # number of work parts
    assignment: int | None = None   # resource node id for miners
    task: TaskDescriptor | None = None
    memory: dict[str, Any] = field(default_factory=dict)

    @property
    def free_capacity(self) -> int:
        return max(self.carry_capacity - self.carry, 0)

    @property
    def is_idle(self) -> bool:
        return self.task is None

    def copy(self) -> Agent:
        return Agent(
            id=self.id,
            name=self.name,
            role=self.role,
            pos=self.pos,
            colony=self.colony,
            carry=self.carry,
            carry_capacity=self.carry_capacity,
            extraction_power=self.extraction_power,
            assignment=self.assignment,
            task=self.task.copy() if self.task else None,
            memory=dict(self.memory),
        )
