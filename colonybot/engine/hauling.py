"""Hauling dispatcher — the consumer side of the resource request brokers.

Each tick, after every site has registered its requests, idle haulers are
matched to requests:
  - empty haulers take the nearest unserved withdrawal request, preferring
    requests in their own group's broker;
  - loaded haulers fill the nearest deposit request, or else unload into
    their group's sink (the colony storage when they have no group).

Every hauler sent to a structure is appended to its ``targeted_by`` list in
the same tick, so later predictions see it as already en route.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from colonybot.core.enums import Role
from colonybot.core.structures import Structure
from colonybot.tasks.base import assign_task
from colonybot.tasks.withdraw import TaskTransfer, TaskWithdraw

if TYPE_CHECKING:
    from colonybot.core.models import Agent
    from colonybot.engine.context import TickContext
    from colonybot.hive.resource_requests import ResourceRequest, ResourceRequestBroker

logger = logging.getLogger(__name__)


class HaulingDispatcher:
    """Greedy matcher between idle haulers and outstanding requests."""

    __slots__ = ("assigned",)

    def __init__(self) -> None:
        self.assigned = 0

    def _brokers_for(self, hauler: Agent, ctx: TickContext) -> list[ResourceRequestBroker]:
        colony = ctx.colony
        own = colony.groups.get(hauler.assignment) if hauler.assignment is not None else None
        brokers = [own.resource_requests] if own is not None else []
        brokers.extend(g.resource_requests for g in colony.groups.values() if g is not own)
        brokers.append(colony.resource_requests)
        return brokers

    def _nearest_request(
        self, hauler: Agent, requests: list[ResourceRequest], ctx: TickContext, served: set[int],
    ) -> Structure | None:
        best: Structure | None = None
        best_range = None
        for request in requests:
            if request.target_ref in served:
                continue
            target = ctx.world.find_object(request.target_ref)
            if not isinstance(target, Structure):
                continue
            r = hauler.pos.range_to(target.pos)
            if best_range is None or r < best_range:
                best, best_range = target, r
        return best

    def _send(self, hauler: Agent, target: Structure, withdraw: bool, ctx: TickContext) -> None:
        task = TaskWithdraw(target) if withdraw else TaskTransfer(target)
        if assign_task(hauler, task):
            target.targeted_by.append(hauler.id)
            self.assigned += 1
            ctx.emit("task", f"{hauler.name} -> {task.name} {target.kind.name.lower()} {target.id}",
                     (hauler.id, target.id))

    def _fallback_sink(self, hauler: Agent, ctx: TickContext) -> Structure | None:
        group = ctx.colony.groups.get(hauler.assignment) if hauler.assignment is not None else None
        sink = group.sink(ctx) if group is not None else None
        return sink if sink is not None else ctx.colony.storage

    def dispatch(self, ctx: TickContext) -> None:
        self.assigned = 0
        served_withdraw: set[int] = set()
        served_deposit: set[int] = set()
        for hauler in ctx.colony.agents_by_role(Role.HAULER):
            if not hauler.is_idle:
                continue
            brokers = self._brokers_for(hauler, ctx)
            if hauler.carry == 0:
                for broker in brokers:
                    target = self._nearest_request(hauler, broker.withdrawal_requests, ctx, served_withdraw)
                    if target is not None:
                        served_withdraw.add(target.id)
                        self._send(hauler, target, withdraw=True, ctx=ctx)
                        break
                continue

            target = None
            for broker in brokers:
                target = self._nearest_request(hauler, broker.deposit_requests, ctx, served_deposit)
                if target is not None:
                    served_deposit.add(target.id)
                    break
            if target is None:
                target = self._fallback_sink(hauler, ctx)
            if target is not None and target.free_capacity > 0:
                self._send(hauler, target, withdraw=False, ctx=ctx)
            else:
                logger.debug("Hauler %s has nowhere to unload", hauler.name)
