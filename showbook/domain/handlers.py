"""Domain event handlers — wired up at application startup."""

from __future__ import annotations

from showbook.domain.bus import EventBus
from showbook.domain.events import (
    BookingCancelled,
    BookingConfirmed,
    BookingCreated,
    ConflictOverridden,
)
from showbook.domain.models import TimelineEntry, TimelineEntryType
from showbook.repos.memory import EventRepository, TimelineRepository


class HandlerRegistry:
    """Wires domain-event handlers to the bus; every handler writes the audit timeline."""

    def __init__(
        self,
        bus: EventBus,
        event_repo: EventRepository,
        timeline_repo: TimelineRepository,
    ) -> None:
        self.bus = bus
        self.event_repo = event_repo
        self.timeline_repo = timeline_repo
        self._register()

    def _register(self) -> None:
        self.bus.subscribe(BookingCreated, self.on_booking_created)
        self.bus.subscribe(ConflictOverridden, self.on_conflict_overridden)
        self.bus.subscribe(BookingConfirmed, self.on_booking_confirmed)
        self.bus.subscribe(BookingCancelled, self.on_booking_cancelled)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def on_booking_created(self, event: BookingCreated) -> None:
        stored = self.event_repo.get(event.event_id)
        if stored is None:
            return

        self.timeline_repo.add(
            TimelineEntry(
                event_id=event.event_id,
                type=TimelineEntryType.CREATED,
                payload={
                    "artist_id": stored.artist_id,
                    "booking_status": stored.booking_status,
                },
            )
        )

    def on_conflict_overridden(self, event: ConflictOverridden) -> None:
        if self.event_repo.get(event.event_id) is None:
            return

        self.timeline_repo.add(
            TimelineEntry(
                event_id=event.event_id,
                type=TimelineEntryType.CONFLICT_OVERRIDDEN,
                payload={
                    "conflicting_event_id": event.conflicting_event_id,
                    "reason": event.reason,
                },
            )
        )

    def on_booking_confirmed(self, event: BookingConfirmed) -> None:
        self.timeline_repo.add(
            TimelineEntry(
                event_id=event.event_id,
                type=TimelineEntryType.CONFIRMED,
                payload={"previous_status": event.previous_status},
            )
        )

    def on_booking_cancelled(self, event: BookingCancelled) -> None:
        self.timeline_repo.add(
            TimelineEntry(
                event_id=event.event_id,
                type=TimelineEntryType.CANCELLED,
                payload={"previous_status": event.previous_status},
            )
        )
