"""A* pathfinding with terrain cost awareness, plus a cached distance oracle.

Provides a `Pathfinder` class that computes paths through the grid and a
`PathCache` that memoises path lengths between positions.

Usage:
    pf = Pathfinder(grid)
    path = pf.find_path(start, goal)            # list[Vector2] or None
    cache = PathCache(pf)
    cache.cached_path_length(start, goal)       # int or None
"""

from __future__ import annotations

import heapq
import logging
from typing import TYPE_CHECKING

from colonybot.core.enums import Material
from colonybot.core.models import Vector2

if TYPE_CHECKING:
    from colonybot.core.grid import Grid

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Terrain movement cost registry
# ---------------------------------------------------------------------------
# WALL is impassable and handled by Grid.is_walkable().

TERRAIN_MOVE_COST: dict[Material, float] = {
    Material.PLAIN: 1.0,
    Material.SWAMP: 5.0,
}

# Eight-way movement; diagonal steps cost the same as orthogonal ones
_DIRS = (
    Vector2(1, 0), Vector2(-1, 0), Vector2(0, 1), Vector2(0, -1),
    Vector2(1, 1), Vector2(1, -1), Vector2(-1, 1), Vector2(-1, -1),
)


def tile_cost(grid: Grid, pos: Vector2) -> float:
    """Return the movement cost for stepping onto *pos*."""
    return TERRAIN_MOVE_COST.get(grid.get(pos), 1.0)


# ---------------------------------------------------------------------------
# A* Pathfinder
# ---------------------------------------------------------------------------

class Pathfinder:
    """A* pathfinder operating on the colony Grid.

    Performance-bounded: explores at most `max_nodes` before giving up.
    """

    __slots__ = ("_grid", "_max_nodes")

    def __init__(self, grid: Grid, max_nodes: int = 4000) -> None:
        self._grid = grid
        self._max_nodes = max_nodes

    def find_path(self, start: Vector2, goal: Vector2, goal_range: int = 0) -> list[Vector2] | None:
        """Compute an A* path from *start* to any tile within *goal_range* of *goal*.

        Returns a list of Vector2 positions (excluding *start*), or None if no
        path exists within the node budget.
        """
        if start.range_to(goal) <= goal_range:
            return []

        grid = self._grid
        if goal_range == 0 and not grid.is_walkable(goal):
            return None

        counter = 0
        open_heap: list[tuple[float, int, int, int]] = []
        heapq.heappush(open_heap, (0.0, counter, start.x, start.y))

        g_score: dict[tuple[int, int], float] = {(start.x, start.y): 0.0}
        came_from: dict[tuple[int, int], tuple[int, int]] = {}
        closed: set[tuple[int, int]] = set()
        nodes_explored = 0

        gx, gy = goal.x, goal.y

        while open_heap and nodes_explored < self._max_nodes:
            _, _, cx, cy = heapq.heappop(open_heap)
            ckey = (cx, cy)

            if max(abs(cx - gx), abs(cy - gy)) <= goal_range:
                return self._reconstruct(came_from, ckey)

            if ckey in closed:
                continue
            closed.add(ckey)
            nodes_explored += 1

            current_g = g_score[ckey]

            for d in _DIRS:
                nx, ny = cx + d.x, cy + d.y
                nkey = (nx, ny)
                if nkey in closed:
                    continue

                npos = Vector2(nx, ny)
                if not grid.is_walkable(npos):
                    continue

                tentative_g = current_g + tile_cost(grid, npos)
                if tentative_g < g_score.get(nkey, float("inf")):
                    g_score[nkey] = tentative_g
                    came_from[nkey] = ckey
                    h = max(max(abs(nx - gx), abs(ny - gy)) - goal_range, 0)
                    counter += 1
                    heapq.heappush(open_heap, (tentative_g + h, counter, nx, ny))

        return None

    def next_step(self, start: Vector2, goal: Vector2, goal_range: int = 0) -> Vector2 | None:
        """Return the first step of the A* path, or None if no path exists."""
        path = self.find_path(start, goal, goal_range)
        if path:
            return path[0]
        return None

    @staticmethod
    def _reconstruct(
        came_from: dict[tuple[int, int], tuple[int, int]],
        current: tuple[int, int],
    ) -> list[Vector2]:
        path: list[Vector2] = []
        while current in came_from:
            path.append(Vector2(current[0], current[1]))
            current = came_from[current]
        path.reverse()
        return path


# ---------------------------------------------------------------------------
# Distance oracle
# ---------------------------------------------------------------------------

class PathCache:
    """Memoised path lengths between two positions.

    Lengths are symmetric on this grid, so both orderings share one entry.
    Unreachable pairs are cached as None.
    """

    __slots__ = ("_pathfinder", "_lengths", "hits", "misses")

    def __init__(self, pathfinder: Pathfinder) -> None:
        self._pathfinder = pathfinder
        self._lengths: dict[tuple[int, int, int, int], int | None] = {}
        self.hits = 0
        self.misses = 0

    @staticmethod
    def _key(a: Vector2, b: Vector2) -> tuple[int, int, int, int]:
        if (a.x, a.y) <= (b.x, b.y):
            return a.x, a.y, b.x, b.y
        return b.x, b.y, a.x, a.y

    def cached_path_length(self, a: Vector2, b: Vector2) -> int | None:
        key = self._key(a, b)
        if key in self._lengths:
            self.hits += 1
            return self._lengths[key]
        self.misses += 1
        path = self._pathfinder.find_path(a, b, goal_range=1)
        length = None if path is None else len(path) + (1 if a != b else 0)
        if length is None:
            logger.debug("No path between %s and %s", a, b)
        self._lengths[key] = length
        return length

    def invalidate(self) -> None:
        self._lengths.clear()

    def __len__(self) -> int:
        return len(self._lengths)
