"""Resource request broker — per-tick withdrawal/deposit requests against structures.

Producers (extraction sites, the colony) register requests; consumers (the
hauling dispatcher) read them and record themselves in the target's
``targeted_by`` list. A structure holds at most one request per direction:
registering it again merges into the existing entry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from colonybot.core.enums import RequestDirection

if TYPE_CHECKING:
    from colonybot.core.models import Vector2
    from colonybot.core.structures import Structure

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ResourceRequest:
    """One outstanding request. ``amount`` is derived from the structure at registration."""

    target_ref: int
    direction: RequestDirection
    amount: int
    pos: Vector2
    resource_type: str = "energy"


class ResourceRequestBroker:
    """Per-tick queue of resource requests, keyed by (structure, direction)."""

    __slots__ = ("name", "_requests")

    def __init__(self, name: str) -> None:
        self.name = name
        self._requests: dict[RequestDirection, dict[int, ResourceRequest]] = {
            RequestDirection.WITHDRAW: {},
            RequestDirection.DEPOSIT: {},
        }

    # -- registration --

    def register_withdrawal_request(self, structure: Structure, amount: int | None = None) -> bool:
        """Request that *structure* be emptied. Returns True if the request is new."""
        if amount is None:
            amount = structure.store
        return self._register(structure, RequestDirection.WITHDRAW, amount)

    def register_deposit_request(self, structure: Structure, amount: int | None = None) -> bool:
        """Request that *structure* be filled. Returns True if the request is new."""
        if amount is None:
            amount = structure.free_capacity
        return self._register(structure, RequestDirection.DEPOSIT, amount)

    def _register(self, structure: Structure, direction: RequestDirection, amount: int) -> bool:
        table = self._requests[direction]
        existing = table.get(structure.id)
        if existing is not None:
            existing.amount = max(existing.amount, amount)
            return False
        table[structure.id] = ResourceRequest(
            target_ref=structure.id,
            direction=direction,
            amount=amount,
            pos=structure.pos,
        )
        logger.debug("[%s] %s request for structure %d (%d)",
                     self.name, direction.name.lower(), structure.id, amount)
        return True

    # -- consumption --

    @property
    def withdrawal_requests(self) -> list[ResourceRequest]:
        return list(self._requests[RequestDirection.WITHDRAW].values())

    @property
    def deposit_requests(self) -> list[ResourceRequest]:
        return list(self._requests[RequestDirection.DEPOSIT].values())

    def get(self, structure_ref: int, direction: RequestDirection) -> ResourceRequest | None:
        return self._requests[direction].get(structure_ref)

    def has_request(self, structure_ref: int, direction: RequestDirection) -> bool:
        return structure_ref in self._requests[direction]

    def reset(self) -> None:
        """Drop every request; called once at the start of each tick."""
        for table in self._requests.values():
            table.clear()

    def __len__(self) -> int:
        return sum(len(t) for t in self._requests.values())

    def __repr__(self) -> str:
        return (f"ResourceRequestBroker({self.name!r}, "
                f"withdraw={len(self._requests[RequestDirection.WITHDRAW])}, "
                f"deposit={len(self._requests[RequestDirection.DEPOSIT])})")
