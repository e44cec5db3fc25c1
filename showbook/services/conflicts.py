"""Service for detecting and resolving double bookings of a subject."""

from __future__ import annotations

from collections.abc import Iterable

from showbook.domain.errors import InvalidInterval
from showbook.domain.models import (
    BookingInterval,
    BookingStatus,
    Conflict,
    ConflictResult,
    Decision,
    ErrorKind,
    NoConflict,
    OverrideDecision,
    ResolutionState,
)

DOUBLE_BOOKING_MESSAGE = "Artist has overlapping event"
MISSING_REASON_MESSAGE = (
    "Artist has overlapping event; a reason is required to override the conflict"
)


def overlaps(a: BookingInterval, b: BookingInterval) -> bool:
    """Half-open overlap test: an interval ending exactly when another starts
    does not overlap it."""
    return a.start < b.end and a.end > b.start


def validate_interval(interval: BookingInterval) -> None:
    if interval.start >= interval.end:
        raise InvalidInterval(
            f"Booking interval must end after it starts "
            f"(start={interval.start.isoformat()}, end={interval.end.isoformat()})"
        )


def find_conflicts(
    candidate: BookingInterval,
    existing: Iterable[BookingInterval],
) -> list[BookingInterval]:
    """Return every non-cancelled interval in *existing* overlapping *candidate*.

    Order follows *existing*.
    """
    return [
        interval
        for interval in existing
        if interval.status != BookingStatus.CANCELLED and overlaps(candidate, interval)
    ]


def check_overlap(
    candidate: BookingInterval,
    existing: Iterable[BookingInterval],
) -> ConflictResult:
    """Report the first interval in *existing* that *candidate* would overlap.

    Raises ``InvalidInterval`` if the candidate does not start before it ends.
    Cancelled intervals are ignored.
    """
    validate_interval(candidate)
    for interval in existing:
        if interval.status == BookingStatus.CANCELLED:
            continue
        if overlaps(candidate, interval):
            return Conflict(conflicting_interval=interval)
    return NoConflict()


def resolve(
    result: ConflictResult,
    decision: OverrideDecision | None = None,
) -> Decision:
    """Combine a conflict check with the caller's override decision.

    A conflict proceeds only when the override is accepted and carries a
    non-blank reason. An accepted override without a reason blocks exactly
    like a missing decision, but flags ``reason_required``.
    """
    if isinstance(result, NoConflict):
        return Decision(proceed=True, state=ResolutionState.CONFLICT_FREE)

    if decision is not None and decision.accepted and decision.has_reason:
        return Decision(
            proceed=True,
            state=ResolutionState.CONFLICT_OVERRIDDEN,
            conflicting_interval=result.conflicting_interval,
            override_reason=decision.reason.strip(),
        )

    reason_required = decision is not None and decision.accepted
    return Decision(
        proceed=False,
        state=ResolutionState.CONFLICT_BLOCKED,
        error_kind=ErrorKind.DOUBLE_BOOKING,
        conflicting_interval=result.conflicting_interval,
        message=MISSING_REASON_MESSAGE if reason_required else DOUBLE_BOOKING_MESSAGE,
        reason_required=reason_required,
    )
