"""
POSBILL Event Bus: Subscriber Registry
========================================
Who hears about which billing announcement.

A receipt printer, a low-stock notifier or a dashboard subscribes to
event types such as billing.bill.committed.v1 and is called back after
each commit attempt, without ever holding engine state.

Rules:
- Event types have at least three dot-separated, non-empty segments
- One handler object may subscribe to a given event type only once
- The first segment names the emitting engine; that engine may not
  subscribe to its own events unless it says so explicitly
- Handlers are called in subscription order
"""

import logging
from threading import Lock
from typing import Callable, Dict, List, NamedTuple

from posbill.core.events.errors import (
    DuplicateSubscriberError,
    EventBusError,
    InvalidEventTypeFormat,
    SelfSubscriptionError,
)

logger = logging.getLogger("posbill.events")

MIN_EVENT_TYPE_SEGMENTS = 3


class Subscription(NamedTuple):
    handler: Callable
    subscriber_engine: str


def emitting_engine(event_type: str) -> str:
    return event_type.split(".", 1)[0]


def validate_event_type(event_type: str) -> None:
    if not isinstance(event_type, str) or not event_type.strip():
        raise InvalidEventTypeFormat(str(event_type or ""))
    segments = event_type.strip().split(".")
    if len(segments) < MIN_EVENT_TYPE_SEGMENTS or "" in segments:
        raise InvalidEventTypeFormat(event_type)


def _describe(handler: Callable) -> str:
    return getattr(handler, "__qualname__", type(handler).__name__)


class SubscriberRegistry:
    """Thread-safe, in-memory map of event type to subscriptions."""

    def __init__(self):
        self._by_type: Dict[str, List[Subscription]] = {}
        self._lock = Lock()

    def register_subscriber(
        self,
        event_type: str,
        handler: Callable,
        subscriber_engine: str,
        allow_self_subscription: bool = False,
    ) -> None:
        """
        Raises InvalidEventTypeFormat, DuplicateSubscriberError or
        SelfSubscriptionError; EventBusError for a non-callable handler.
        """
        validate_event_type(event_type)
        if not callable(handler):
            raise EventBusError(
                f"Subscriber for {event_type} must be callable, "
                f"got {type(handler).__name__}."
            )
        if (
            emitting_engine(event_type) == subscriber_engine
            and not allow_self_subscription
        ):
            raise SelfSubscriptionError(subscriber_engine, event_type)

        with self._lock:
            subscriptions = self._by_type.setdefault(event_type, [])
            if any(entry.handler is handler for entry in subscriptions):
                raise DuplicateSubscriberError(event_type, _describe(handler))
            subscriptions.append(Subscription(handler, subscriber_engine))

        logger.info(f"{subscriber_engine} subscribed to {event_type} via {_describe(handler)}")

    def unregister_subscriber(self, event_type: str, handler: Callable) -> bool:
        """False when the handler was not subscribed."""
        with self._lock:
            subscriptions = self._by_type.get(event_type, [])
            kept = [entry for entry in subscriptions if entry.handler is not handler]
            if len(kept) == len(subscriptions):
                return False
            self._by_type[event_type] = kept
        logger.info(f"{_describe(handler)} unsubscribed from {event_type}")
        return True

    def get_subscribers(self, event_type: str) -> List[Subscription]:
        with self._lock:
            return list(self._by_type.get(event_type, ()))

    def has_subscribers(self, event_type: str) -> bool:
        return self.subscriber_count(event_type) > 0

    def subscriber_count(self, event_type: str) -> int:
        with self._lock:
            return len(self._by_type.get(event_type, ()))
