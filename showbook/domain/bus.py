"""In-process bus carrying booking lifecycle events to the audit handlers."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable

from showbook.domain.events import BookingEvent

logger = logging.getLogger(__name__)

Handler = Callable[[BookingEvent], None]


class EventBus:
    """Synchronous publish/subscribe for ``BookingEvent`` subclasses.

    Handlers for a type run in registration order on the publishing thread,
    after the service has released the artist lock. A failing handler is
    logged with the booking id and re-raised to the publisher.
    """

    def __init__(self) -> None:
        self._subscribers: dict[type[BookingEvent], list[Handler]] = defaultdict(list)

    def subscribe(self, event_type: type[BookingEvent], handler: Handler) -> None:
        if not (isinstance(event_type, type) and issubclass(event_type, BookingEvent)):
            raise TypeError(f"{event_type!r} is not a BookingEvent type")
        self._subscribers[event_type].append(handler)

    def handlers_for(self, event_type: type[BookingEvent]) -> list[Handler]:
        return list(self._subscribers.get(event_type, []))

    def publish(self, event: BookingEvent) -> None:
        handlers = self.handlers_for(type(event))
        logger.debug(
            "Publishing %s for booking %s to %d handler(s)",
            type(event).__name__,
            event.event_id,
            len(handlers),
        )
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "Handler %s failed on %s for booking %s",
                    getattr(handler, "__qualname__", handler),
                    type(event).__name__,
                    event.event_id,
                )
                raise
