"""Service for creating bookings and moving them through their status lifecycle."""

from __future__ import annotations

import logging

from showbook.domain.bus import EventBus
from showbook.domain.errors import InvalidStatusTransition, NotFound
from showbook.domain.events import (
    BookingCancelled,
    BookingConfirmed,
    BookingCreated,
    ConflictOverridden,
)
from showbook.domain.models import BookingStatus, CreateEventRequest, Event
from showbook.repos.memory import ArtistRepository, EventRepository
from showbook.services.conflicts import check_overlap, resolve, validate_interval

logger = logging.getLogger(__name__)


class BookingService:
    def __init__(
        self,
        event_repo: EventRepository,
        artist_repo: ArtistRepository,
        bus: EventBus,
    ) -> None:
        self.event_repo = event_repo
        self.artist_repo = artist_repo
        self.bus = bus

    def create_event(self, request: CreateEventRequest) -> Event:
        """Create a booking unless it double-books the artist.

        Raises ``InvalidInterval`` for a reversed or empty range, ``NotFound``
        for an unknown artist, and ``DoubleBooking`` (or its
        ``MissingOverrideReason`` subclass) when an overlapping booking exists
        and the request carries no accepted override with a reason.
        """
        candidate = request.interval()
        validate_interval(candidate)

        artist = self.artist_repo.get(request.artist_id)
        if artist is None:
            raise NotFound(f"Artist {request.artist_id} not found")

        # Check and write under one per-artist lock so concurrent requests
        # cannot both pass the check against the same snapshot.
        with self.event_repo.subject_lock(request.artist_id):
            existing = self.event_repo.active_intervals(request.artist_id)
            decision = resolve(check_overlap(candidate, existing), request.override)
            if not decision.proceed:
                logger.warning(
                    "Blocked double booking for artist %s: %s overlaps booking %s",
                    request.artist_id,
                    candidate.start.isoformat(),
                    decision.conflicting_interval.booking_id,
                )
            decision.raise_for_block()

            conflicting_id = (
                decision.conflicting_interval.booking_id
                if decision.overridden
                else None
            )
            if request.commission_pct is not None:
                commission_pct = request.commission_pct
            else:
                commission_pct = artist.default_commission_pct
            event = Event(
                artist_id=request.artist_id,
                promoter_id=request.promoter_id,
                venue_id=request.venue_id,
                date_start=request.date_start,
                date_end=request.date_end,
                booking_status=request.booking_status,
                payment_status=request.payment_status,
                gross_revenue=request.gross_revenue,
                commission_pct=commission_pct,
                notes=request.notes,
                override_reason=decision.override_reason,
                overridden_event_id=conflicting_id,
            )
            self.event_repo.add(event)

        logger.info("Created booking %s for artist %s", event.id, event.artist_id)
        self.bus.publish(BookingCreated(event_id=event.id))
        if decision.overridden:
            logger.warning(
                "Booking %s overrides conflict with %s: %s",
                event.id,
                conflicting_id,
                decision.override_reason,
            )
            self.bus.publish(
                ConflictOverridden(
                    event_id=event.id,
                    conflicting_event_id=conflicting_id,
                    reason=decision.override_reason,
                )
            )
        return event

    def _get_or_raise(self, event_id: str) -> Event:
        event = self.event_repo.get(event_id)
        if event is None:
            raise NotFound(f"Event {event_id} not found")
        return event

    def confirm(self, event_id: str) -> Event:
        event = self._get_or_raise(event_id)
        with self.event_repo.subject_lock(event.artist_id):
            previous = event.booking_status
            if previous == BookingStatus.CONFIRMED:
                return event
            if previous != BookingStatus.PENDING:
                raise InvalidStatusTransition(previous.value, BookingStatus.CONFIRMED.value)
            event.booking_status = BookingStatus.CONFIRMED

        self.bus.publish(BookingConfirmed(event_id=event.id, previous_status=previous.value))
        return event

    def cancel(self, event_id: str) -> Event:
        """Cancel a booking; it stays stored but no longer blocks the artist."""
        event = self._get_or_raise(event_id)
        with self.event_repo.subject_lock(event.artist_id):
            previous = event.booking_status
            if previous == BookingStatus.CANCELLED:
                raise InvalidStatusTransition(previous.value, BookingStatus.CANCELLED.value)
            event.booking_status = BookingStatus.CANCELLED

        logger.info("Cancelled booking %s (was %s)", event.id, previous)
        self.bus.publish(BookingCancelled(event_id=event.id, previous_status=previous.value))
        return event
