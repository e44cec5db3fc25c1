"""Domain events emitted during the booking lifecycle."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class BookingEvent(BaseModel):
    """Base for everything published on the bus; always names the stored booking."""

    model_config = ConfigDict(frozen=True)

    event_id: str


class BookingCreated(BookingEvent):
    """Fired when a new booking Event is persisted."""


class ConflictOverridden(BookingEvent):
    """Fired when a booking was created over a known conflict."""

    conflicting_event_id: str | None
    reason: str


class BookingConfirmed(BookingEvent):
    """Fired when a pending booking becomes confirmed."""

    previous_status: str


class BookingCancelled(BookingEvent):
    """Fired when a booking is cancelled."""

    previous_status: str
