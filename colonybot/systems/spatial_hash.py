"""Spatial hashing for O(1) neighbor lookups."""

from __future__ import annotations

from collections import defaultdict

from colonybot.core.models import Vector2


class SpatialHash:
    """Grid-based spatial index mapping cell keys to sets of object IDs."""

    __slots__ = ("_cell_size", "_cells", "_positions")

    def __init__(self, cell_size: int = 8) -> None:
        self._cell_size = cell_size
        self._cells: dict[tuple[int, int], set[int]] = defaultdict(set)
        self._positions: dict[int, Vector2] = {}

    def _key(self, pos: Vector2) -> tuple[int, int]:
        return pos.x // self._cell_size, pos.y // self._cell_size

    def insert(self, object_id: int, pos: Vector2) -> None:
        self._cells[self._key(pos)].add(object_id)
        self._positions[object_id] = pos

    def remove(self, object_id: int, pos: Vector2) -> None:
        key = self._key(pos)
        bucket = self._cells.get(key)
        if bucket is not None:
            bucket.discard(object_id)
            if not bucket:
                del self._cells[key]
        self._positions.pop(object_id, None)

    def move(self, object_id: int, old_pos: Vector2, new_pos: Vector2) -> None:
        if self._key(old_pos) != self._key(new_pos):
            self.remove(object_id, old_pos)
            self.insert(object_id, new_pos)
        else:
            self._positions[object_id] = new_pos

    def query_cell(self, pos: Vector2) -> set[int]:
        """Return object IDs in the same cell as *pos*."""
        return set(self._cells.get(self._key(pos), set()))

    def query_radius(self, pos: Vector2, radius: int) -> list[int]:
        """Return object IDs whose position is within Chebyshev *radius* of *pos*.

        Results are sorted by ID so callers see a stable order.
        """
        cx, cy = self._key(pos)
        r = (radius // self._cell_size) + 1
        result: list[int] = []
        for dx in range(-r, r + 1):
            for dy in range(-r, r + 1):
                bucket = self._cells.get((cx + dx, cy + dy))
                if not bucket:
                    continue
                for oid in bucket:
                    opos = self._positions.get(oid)
                    if opos is not None and opos.in_range(pos, radius):
                        result.append(oid)
        result.sort()
        return result

    def clear(self) -> None:
        self._cells.clear()
        self._positions.clear()
