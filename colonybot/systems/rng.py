"""Domain-separated deterministic RNG using xxhash.

World generation must be reproducible from the seed alone, so every draw
is a hash of (seed, domain, key, salt) rather than a stateful stream.
"""

from __future__ import annotations

import struct

import xxhash

from colonybot.core.enums import Domain
from colonybot.core.models import Vector2


class DeterministicRNG:
    """Stateless pseudo-random source keyed by domain."""

    __slots__ = ("_seed",)

    _MAX_UINT64 = (1 << 64) - 1

    def __init__(self, seed: int) -> None:
        self._seed = seed

    def _hash(self, domain: Domain, key: int, salt: int) -> int:
        payload = struct.pack("<qiqq", self._seed, domain.value, key, salt)
        return xxhash.xxh64(payload).intdigest()

    def next_float(self, domain: Domain, key: int, salt: int = 0) -> float:
        """Return a deterministic float in [0.0, 1.0)."""
        return self._hash(domain, key, salt) / (self._MAX_UINT64 + 1)

    def next_int(self, domain: Domain, key: int, salt: int, low: int, high: int) -> int:
        """Return a deterministic integer in [low, high] inclusive."""
        return low + int(self.next_float(domain, key, salt) * (high - low + 1))

    def next_position(self, domain: Domain, key: int, salt: int,
                      width: int, height: int, margin: int = 0) -> Vector2:
        x = self.next_int(domain, key, salt * 2, margin, width - 1 - margin)
        y = self.next_int(domain, key, salt * 2 + 1, margin, height - 1 - margin)
        return Vector2(x, y)
