"""
POSBILL Event Bus: Errors
===========================
Raised at subscription time for wiring mistakes. A bill rejection is an
Outcome, never one of these.
"""


class EventBusError(Exception):
    pass


class InvalidEventTypeFormat(EventBusError):
    """Event types read engine.subject.action[.version], e.g. billing.bill.committed.v1."""

    def __init__(self, event_type: str):
        self.event_type = event_type
        super().__init__(
            f"'{event_type}' is not a valid event type; "
            f"expected engine.subject.action[.version]."
        )


class DuplicateSubscriberError(EventBusError):
    def __init__(self, event_type: str, handler_name: str):
        self.event_type = event_type
        self.handler_name = handler_name
        super().__init__(
            f"{handler_name} is already subscribed to {event_type}."
        )


class SelfSubscriptionError(EventBusError):
    """An engine listening to its own announcements needs allow_self_subscription."""

    def __init__(self, engine: str, event_type: str):
        self.engine = engine
        self.event_type = event_type
        super().__init__(
            f"'{engine}' emits {event_type} itself; pass "
            f"allow_self_subscription=True to listen to it."
        )
