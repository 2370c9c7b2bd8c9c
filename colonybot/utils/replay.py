"""Replay serialization — records tick-by-tick agent state and task descriptors."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from colonybot.core.models import TaskDescriptor

if TYPE_CHECKING:
    from colonybot.core.world_state import WorldState

logger = logging.getLogger(__name__)


class ReplayRecorder:
    """Accumulates per-tick state and flushes it to a JSON replay file.

    Task descriptors are written in their persisted form, so a replay doubles
    as a record of what each agent would reload after a restart.
    """

    __slots__ = ("_path", "_ticks", "_seed")

    def __init__(self, path: str | Path, seed: int) -> None:
        self._path = Path(path)
        self._seed = seed
        self._ticks: list[dict[str, Any]] = []

    def record_tick(self, world: WorldState) -> None:
        agents = [
            {
                "id": a.id,
                "name": a.name,
                "role": a.role.name,
                "pos": [a.pos.x, a.pos.y],
                "carry": a.carry,
                "task": a.task.to_dict() if a.task else None,
            }
            for _, a in sorted(world.agents.items())
        ]
        structures = [
            {"id": s.id, "kind": s.kind.name, "store": s.store, "hits": s.hits}
            for _, s in sorted(world.structures.items())
        ]
        self._ticks.append({
            "tick": world.tick,
            "agents": agents,
            "structures": structures,
            "construction_sites": sorted(world.construction_sites),
        })

    @property
    def ticks(self) -> list[dict[str, Any]]:
        return self._ticks

    def flush(self) -> None:
        """Write accumulated data to disk."""
        replay = {
            "version": "1.0",
            "seed": self._seed,
            "total_ticks": len(self._ticks),
            "ticks": self._ticks,
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(replay, indent=2), encoding="utf-8")
        logger.info("Replay saved to %s (%d ticks)", self._path, len(self._ticks))


def load_task_descriptors(path: str | Path, tick: int | None = None) -> dict[int, TaskDescriptor | None]:
    """Read the task descriptors stored for each agent at *tick* (default: last tick)."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    ticks = data.get("ticks") or []
    if not ticks:
        return {}
    frame = ticks[-1] if tick is None else next((t for t in ticks if t["tick"] == tick), None)
    if frame is None:
        return {}
    return {
        a["id"]: TaskDescriptor.from_dict(a["task"]) if a.get("task") else None
        for a in frame["agents"]
    }
