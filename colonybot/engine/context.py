"""Per-tick context handed to every decide/act phase."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from colonybot.utils.event_log import SimEvent

if TYPE_CHECKING:
    from colonybot.config import ColonyConfig
    from colonybot.core.world_state import WorldState
    from colonybot.hive.colony import Colony
    from colonybot.systems.pathing import PathCache, Pathfinder


@dataclass(slots=True)
class TickContext:
    """Everything a site, group or task may consult during a tick.

    Passed explicitly instead of reached through globals so the ordering
    between phases stays visible at the call sites.
    """

    world: WorldState
    colony: Colony
    config: ColonyConfig
    pathfinder: Pathfinder
    paths: PathCache
    events: list[SimEvent] = field(default_factory=list)

    @property
    def tick(self) -> int:
        return self.world.tick

    def emit(self, category: str, message: str, object_ids: tuple[int, ...] = ()) -> None:
        self.events.append(SimEvent(
            tick=self.world.tick,
            category=category,
            message=message,
            object_ids=object_ids,
        ))
