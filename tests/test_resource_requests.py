"""Tests for the per-tick ResourceRequestBroker."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tests.helpers.colony_arena import ColonyArena
from colonybot.core.enums import RequestDirection, StructureKind
from colonybot.hive.resource_requests import ResourceRequestBroker


def _make_broker_and_containers():
    arena = ColonyArena()
    a = arena.add_structure(StructureKind.CONTAINER, (10, 10), store=400)
    b = arena.add_structure(StructureKind.CONTAINER, (15, 10), store=900)
    return ResourceRequestBroker("test"), a, b


class TestRegistration:
    def test_first_registration_is_new(self):
        broker, a, _ = _make_broker_and_containers()
        assert broker.register_withdrawal_request(a) is True
        req = broker.get(a.id, RequestDirection.WITHDRAW)
        assert req is not None
        assert req.amount == 400
        assert req.pos == a.pos
        assert req.resource_type == "energy"

    def test_deposit_amount_defaults_to_free_capacity(self):
        broker, a, _ = _make_broker_and_containers()
        broker.register_deposit_request(a)
        assert broker.get(a.id, RequestDirection.DEPOSIT).amount == a.store_capacity - 400

    def test_directions_are_independent(self):
        broker, a, _ = _make_broker_and_containers()
        broker.register_withdrawal_request(a)
        broker.register_deposit_request(a)
        assert len(broker) == 2
        assert broker.has_request(a.id, RequestDirection.WITHDRAW)
        assert broker.has_request(a.id, RequestDirection.DEPOSIT)


class TestIdempotency:
    def test_repeat_registration_does_not_duplicate(self):
        broker, a, _ = _make_broker_and_containers()
        broker.register_withdrawal_request(a)
        assert broker.register_withdrawal_request(a) is False
        assert len(broker.withdrawal_requests) == 1

    def test_repeat_merges_with_larger_amount(self):
        broker, a, _ = _make_broker_and_containers()
        broker.register_withdrawal_request(a, amount=100)
        broker.register_withdrawal_request(a, amount=300)
        broker.register_withdrawal_request(a, amount=50)
        assert broker.get(a.id, RequestDirection.WITHDRAW).amount == 300

    def test_registrations_are_additive_across_structures(self):
        broker, a, b = _make_broker_and_containers()
        broker.register_withdrawal_request(a)
        broker.register_withdrawal_request(b)
        broker.register_withdrawal_request(a)
        refs = [r.target_ref for r in broker.withdrawal_requests]
        assert refs == [a.id, b.id]


class TestReset:
    def test_reset_clears_everything(self):
        broker, a, b = _make_broker_and_containers()
        broker.register_withdrawal_request(a)
        broker.register_deposit_request(b)
        broker.reset()
        assert len(broker) == 0
        assert broker.withdrawal_requests == []
        assert broker.deposit_requests == []
        assert broker.register_withdrawal_request(a) is True
