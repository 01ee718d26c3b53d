"""
Tests for posbill.core.events: subscriber registry and dispatcher.
"""

import logging
from datetime import datetime, timezone

import pytest

from posbill.core.events import (
    DuplicateSubscriberError,
    EngineEvent,
    EventBusError,
    InvalidEventTypeFormat,
    SelfSubscriptionError,
    SubscriberRegistry,
    dispatch,
)

NOW = datetime(2026, 3, 1, 10, 0, 0, tzinfo=timezone.utc)


def _event(event_type="billing.bill.committed.v1", payload=None):
    return EngineEvent(
        event_type=event_type,
        payload=payload if payload is not None else {"bill_number": "BILL-000001"},
        occurred_at=NOW,
    )


class Recorder:
    def __init__(self):
        self.events = []

    def __call__(self, event):
        self.events.append(event)


# ══════════════════════════════════════════════════════════════
# ENGINE EVENT
# ══════════════════════════════════════════════════════════════

class TestEngineEvent:
    def test_source_engine_is_first_segment(self):
        assert _event().source_engine == "billing"

    def test_event_ids_are_unique(self):
        assert _event().event_id != _event().event_id

    def test_payload_must_be_dict(self):
        with pytest.raises(TypeError):
            EngineEvent(event_type="billing.bill.committed.v1", payload=[], occurred_at=NOW)

    def test_to_dict(self):
        data = _event().to_dict()
        assert data["event_type"] == "billing.bill.committed.v1"
        assert data["occurred_at"] == NOW.isoformat()
        assert data["payload"] == {"bill_number": "BILL-000001"}


# ══════════════════════════════════════════════════════════════
# REGISTRY
# ══════════════════════════════════════════════════════════════

class TestSubscriberRegistry:
    def test_register_and_get(self):
        registry = SubscriberRegistry()
        handler = Recorder()
        registry.register_subscriber("billing.bill.committed.v1", handler, "ui")

        assert registry.has_subscribers("billing.bill.committed.v1")
        assert registry.subscriber_count("billing.bill.committed.v1") == 1
        assert registry.get_subscribers("billing.bill.committed.v1") == [(handler, "ui")]

    def test_unknown_event_type_has_no_subscribers(self):
        registry = SubscriberRegistry()
        assert registry.get_subscribers("billing.bill.rejected.v1") == []
        assert not registry.has_subscribers("billing.bill.rejected.v1")

    @pytest.mark.parametrize("event_type", ["", "billing", "billing.bill", "billing..v1"])
    def test_bad_event_type_format(self, event_type):
        registry = SubscriberRegistry()
        with pytest.raises(InvalidEventTypeFormat):
            registry.register_subscriber(event_type, Recorder(), "ui")

    def test_handler_must_be_callable(self):
        registry = SubscriberRegistry()
        with pytest.raises(EventBusError, match="callable"):
            registry.register_subscriber("billing.bill.committed.v1", "nope", "ui")

    def test_duplicate_handler_rejected(self):
        registry = SubscriberRegistry()
        handler = Recorder()
        registry.register_subscriber("billing.bill.committed.v1", handler, "ui")
        with pytest.raises(DuplicateSubscriberError):
            registry.register_subscriber("billing.bill.committed.v1", handler, "printer")

    def test_self_subscription_blocked_by_default(self):
        registry = SubscriberRegistry()
        with pytest.raises(SelfSubscriptionError):
            registry.register_subscriber("billing.bill.committed.v1", Recorder(), "billing")

    def test_self_subscription_allowed_explicitly(self):
        registry = SubscriberRegistry()
        registry.register_subscriber(
            "billing.bill.committed.v1", Recorder(), "billing",
            allow_self_subscription=True,
        )
        assert registry.subscriber_count("billing.bill.committed.v1") == 1

    def test_unregister(self):
        registry = SubscriberRegistry()
        handler = Recorder()
        registry.register_subscriber("billing.bill.committed.v1", handler, "ui")

        assert registry.unregister_subscriber("billing.bill.committed.v1", handler) is True
        assert registry.subscriber_count("billing.bill.committed.v1") == 0
        assert registry.unregister_subscriber("billing.bill.committed.v1", handler) is False


# ══════════════════════════════════════════════════════════════
# DISPATCHER
# ══════════════════════════════════════════════════════════════

class TestDispatch:
    def test_no_subscribers(self):
        report = dispatch(_event(), SubscriberRegistry())
        assert report.notified == 0
        assert report.failed == 0
        assert report.delivered_to_all

    def test_all_subscribers_notified_in_order(self):
        registry = SubscriberRegistry()
        calls = []
        registry.register_subscriber("billing.bill.committed.v1", lambda e: calls.append("ui"), "ui")
        registry.register_subscriber("billing.bill.committed.v1", lambda e: calls.append("printer"), "printer")

        report = dispatch(_event(), registry)

        assert calls == ["ui", "printer"]
        assert report.notified == 2

    def test_failing_subscriber_does_not_stop_others(self, caplog):
        registry = SubscriberRegistry()

        def broken(event):
            raise RuntimeError("printer offline")

        survivor = Recorder()
        registry.register_subscriber("billing.bill.committed.v1", broken, "printer")
        registry.register_subscriber("billing.bill.committed.v1", survivor, "ui")

        with caplog.at_level(logging.ERROR, logger="posbill.events"):
            report = dispatch(_event(), registry)

        assert report.notified == 1
        assert report.failed == 1
        assert not report.delivered_to_all
        failure = report.failures[0]
        assert failure.error == "printer offline"
        assert failure.error_type == "RuntimeError"
        assert failure.subscriber_engine == "printer"
        assert len(survivor.events) == 1
        assert "Subscriber failed" in caplog.text
