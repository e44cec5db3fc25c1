"""Errors raised by the booking services and mapped to HTTP responses in main."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from showbook.domain.models import BookingInterval


class ErrorKind(str, Enum):
    """Machine-readable kinds for the errors the conflict workflow reports."""

    INVALID_INTERVAL = "InvalidInterval"
    DOUBLE_BOOKING = "DoubleBooking"
    MISSING_OVERRIDE_REASON = "MissingOverrideReason"


class BookingError(Exception):
    """Base class for all booking-domain errors."""

    kind = "BookingError"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidInterval(BookingError):
    """A booking interval whose start is not strictly before its end."""

    kind = ErrorKind.INVALID_INTERVAL


class DoubleBooking(BookingError):
    """The subject already holds an overlapping booking and no override applies."""

    kind = ErrorKind.DOUBLE_BOOKING
    reason_required = False

    def __init__(
        self,
        conflicting_interval: BookingInterval | None,
        message: str | None = None,
    ) -> None:
        self.conflicting_interval = conflicting_interval
        super().__init__(message or "Artist has overlapping event")


class MissingOverrideReason(DoubleBooking):
    """An override was accepted without a justification."""

    kind = ErrorKind.MISSING_OVERRIDE_REASON
    reason_required = True


class NotFound(BookingError):
    kind = "NotFound"


class InvalidStatusTransition(BookingError):
    kind = "InvalidStatusTransition"

    def __init__(self, from_status: str, to_status: str) -> None:
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Illegal booking status transition: {from_status} -> {to_status}"
        )
