"""
POSBILL Event Bus
===================
Engines change state first, then announce it here.
"""

from posbill.core.events.dispatcher import (
    DispatchReport,
    SubscriberFailure,
    dispatch,
)
from posbill.core.events.errors import (
    DuplicateSubscriberError,
    EventBusError,
    InvalidEventTypeFormat,
    SelfSubscriptionError,
)
from posbill.core.events.models import EngineEvent
from posbill.core.events.registry import SubscriberRegistry, Subscription

__all__ = [
    "dispatch",
    "DispatchReport",
    "SubscriberFailure",
    "EngineEvent",
    "SubscriberRegistry",
    "Subscription",
    "EventBusError",
    "InvalidEventTypeFormat",
    "DuplicateSubscriberError",
    "SelfSubscriptionError",
]
