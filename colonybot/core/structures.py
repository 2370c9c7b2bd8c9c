"""World objects addressable by id: resource nodes, structures, construction sites."""

from __future__ import annotations

from dataclasses import dataclass, field

from colonybot.core.enums import StructureKind
from colonybot.core.models import Vector2


@dataclass(slots=True)
class ResourceNode:
    """A renewable energy source.

    ``capacity`` and ``regen_period`` are fixed once the node is discovered;
    ``energy`` and ``ticks_to_regen`` are the live state.
    """

    id: int
    pos: Vector2
    capacity: int = 3000
    regen_period: int = 300
    energy: int = 3000
    ticks_to_regen: int = 0

    @property
    def extraction_rate(self) -> float:
        return self.capacity / self.regen_period

    def regenerate(self) -> None:
        """Count down the regen timer; refill when it expires."""
        if self.ticks_to_regen > 0:
            self.ticks_to_regen -= 1
            if self.ticks_to_regen == 0:
                self.energy = self.capacity
        elif self.energy < self.capacity:
            self.ticks_to_regen = self.regen_period

    def copy(self) -> ResourceNode:
        return ResourceNode(
            id=self.id,
            pos=self.pos,
            capacity=self.capacity,
            regen_period=self.regen_period,
            energy=self.energy,
            ticks_to_regen=self.ticks_to_regen,
        )


@dataclass(slots=True)
class Structure:
    """An owned structure.

    Every kind keeps its energy in ``store`` bounded by ``store_capacity``.
    For a LINK ``store`` is read as the instantaneous level.
    """

    id: int
    kind: StructureKind
    pos: Vector2
    hits: int = 1000
    hits_max: int = 1000
    store: int = 0
    store_capacity: int = 0
    owner: str = ""
    targeted_by: list[int] = field(default_factory=list)

    @property
    def is_damaged(self) -> bool:
        return self.hits < self.hits_max

    @property
    def free_capacity(self) -> int:
        return max(self.store_capacity - self.store, 0)

    def copy(self) -> Structure:
        return Structure(
            id=self.id,
            kind=self.kind,
            pos=self.pos,
            hits=self.hits,
            hits_max=self.hits_max,
            store=self.store,
            store_capacity=self.store_capacity,
            owner=self.owner,
            targeted_by=list(self.targeted_by),
        )


@dataclass(slots=True)
class ConstructionSite:
    """A pending build order for a structure."""

    id: int
    kind: StructureKind
    pos: Vector2
    progress: int = 0
    progress_total: int = 5000
    owner: str = ""
    targeted_by: list[int] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return self.progress >= self.progress_total

    def copy(self) -> ConstructionSite:
        return ConstructionSite(
            id=self.id,
            kind=self.kind,
            pos=self.pos,
            progress=self.progress,
            progress_total=self.progress_total,
            owner=self.owner,
            targeted_by=list(self.targeted_by),
        )


# Progress needed to finish each kind of construction site
BUILD_COST: dict[StructureKind, int] = {
    StructureKind.CONTAINER: 5000,
    StructureKind.LINK: 5000,
    StructureKind.ROAD: 300,
    StructureKind.STORAGE: 30000,
    StructureKind.SPAWN: 15000,
    StructureKind.LAB: 50000,
}

# Kinds that may sit on the same tile as other objects
WALKABLE_KINDS = frozenset({StructureKind.CONTAINER, StructureKind.ROAD})
