"""
POSBILL Event Bus: Dispatcher
===============================
Delivers an EngineEvent to its subscribers once the emitting engine has
finished its state change.

Delivery is best effort and one-way. A handler that raises is logged
and recorded in the DispatchReport, the remaining handlers still run,
and the bill (or rejection) that produced the event stands.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from posbill.core.events.models import EngineEvent
from posbill.core.events.registry import SubscriberRegistry

logger = logging.getLogger("posbill.events")


@dataclass(frozen=True)
class SubscriberFailure:
    handler: str
    subscriber_engine: str
    error_type: str
    error: str


@dataclass(frozen=True)
class DispatchReport:
    event_type: str
    event_id: str
    notified: int = 0
    failures: Tuple[SubscriberFailure, ...] = ()

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def delivered_to_all(self) -> bool:
        return not self.failures


def dispatch(event: EngineEvent, registry: SubscriberRegistry) -> DispatchReport:
    """Call every subscriber of event.event_type in order. Never raises."""
    event_id = str(event.event_id)
    subscriptions = registry.get_subscribers(event.event_type)
    if not subscriptions:
        logger.debug(f"{event.event_type} ({event_id}): no subscribers")
        return DispatchReport(event_type=event.event_type, event_id=event_id)

    notified = 0
    failures = []
    for handler, subscriber_engine in subscriptions:
        name = getattr(handler, "__qualname__", type(handler).__name__)
        try:
            handler(event)
        except Exception as exc:
            failures.append(SubscriberFailure(
                handler=name,
                subscriber_engine=subscriber_engine,
                error_type=type(exc).__name__,
                error=str(exc),
            ))
            logger.error(
                f"Subscriber failed: {name} ({subscriber_engine}) on "
                f"{event.event_type} ({event_id}): {exc}",
                exc_info=True,
            )
        else:
            notified += 1

    logger.info(
        f"{event.event_type} ({event_id}) delivered to {notified} "
        f"subscriber(s), {len(failures)} failed"
    )
    return DispatchReport(
        event_type=event.event_type,
        event_id=event_id,
        notified=notified,
        failures=tuple(failures),
    )
