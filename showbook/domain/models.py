"""Domain models for the booking management system."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from showbook.domain.errors import DoubleBooking, ErrorKind, MissingOverrideReason

try:
    from enum import StrEnum
except ImportError:  # pragma: no cover - fallback for older Python runtimes

    class StrEnum(str, Enum):
        pass


class BookingStatus(StrEnum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class PaymentStatus(StrEnum):
    CONTRACT_SIGNED = "CONTRACT_SIGNED"
    FIRST_INVOICE_PAID = "FIRST_INVOICE_PAID"
    ALL_PAID = "ALL_PAID"


class CompanyType(StrEnum):
    PROMOTER = "PROMOTER"
    VENUE_OPERATOR = "VENUE_OPERATOR"
    AGENCY = "AGENCY"
    OTHER = "OTHER"


class InvoiceStatus(StrEnum):
    DRAFT = "DRAFT"
    SENT = "SENT"
    PARTIAL = "PARTIAL"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


class TimelineEntryType(StrEnum):
    CREATED = "created"
    CONFLICT_OVERRIDDEN = "conflict_overridden"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class ResolutionState(StrEnum):
    CHECKING = "checking"
    CONFLICT_FREE = "conflict_free"
    CONFLICT_BLOCKED = "conflict_blocked"
    CONFLICT_OVERRIDDEN = "conflict_overridden"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so all comparisons are between aware values."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ---------------------------------------------------------------------------
# Conflict detection values
# ---------------------------------------------------------------------------


class BookingInterval(BaseModel):
    """A time range reserved for a subject (an artist).

    ``start < end`` is not enforced on construction so that the detector can
    report a malformed candidate as ``InvalidInterval`` instead of a pydantic
    validation error.
    """

    model_config = ConfigDict(frozen=True)

    subject_id: str
    start: datetime
    end: datetime
    status: BookingStatus = BookingStatus.PENDING
    booking_id: str | None = None

    @field_validator("start", "end")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class NoConflict(BaseModel):
    model_config = ConfigDict(frozen=True)

    has_conflict: Literal[False] = False


class Conflict(BaseModel):
    model_config = ConfigDict(frozen=True)

    conflicting_interval: BookingInterval
    requires_override: bool = True
    has_conflict: Literal[True] = True


ConflictResult = NoConflict | Conflict


class OverrideDecision(BaseModel):
    """Caller's explicit answer to a reported conflict."""

    accepted: bool = False
    reason: str | None = None

    @property
    def has_reason(self) -> bool:
        return bool(self.reason and self.reason.strip())


class Decision(BaseModel):
    """Outcome of resolving a conflict check against an override decision."""

    proceed: bool
    state: ResolutionState
    error_kind: ErrorKind | None = None
    conflicting_interval: BookingInterval | None = None
    message: str | None = None
    reason_required: bool = False
    override_reason: str | None = None

    @property
    def overridden(self) -> bool:
        return self.state == ResolutionState.CONFLICT_OVERRIDDEN

    def raise_for_block(self) -> None:
        """Raise the matching booking error if this decision blocks creation."""
        if self.proceed:
            return
        error_cls = MissingOverrideReason if self.reason_required else DoubleBooking
        raise error_cls(self.conflicting_interval, self.message)


# ---------------------------------------------------------------------------
# Catalogue models
# ---------------------------------------------------------------------------


class Artist(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str
    default_commission_pct: float = Field(default=10, ge=0, le=100)
    tags: list[str] = Field(default_factory=list)


class Venue(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str
    address: str | None = None
    city: str | None = None
    country: str | None = None
    lat: float | None = None
    lng: float | None = None
    capacity: int | None = Field(default=None, gt=0)


class Company(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str
    type: CompanyType = CompanyType.PROMOTER
    tags: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Bookings, invoices and audit
# ---------------------------------------------------------------------------


class Event(BaseModel):
    id: str = Field(default_factory=_new_id)
    artist_id: str
    promoter_id: str | None = None
    venue_id: str | None = None
    date_start: datetime
    date_end: datetime
    booking_status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus | None = None
    gross_revenue: float | None = Field(default=None, ge=0)
    commission_pct: float = Field(default=10, ge=0, le=100)
    notes: str | None = None
    override_reason: str | None = None
    overridden_event_id: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)

    @field_validator("date_start", "date_end")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    @model_validator(mode="after")
    def _end_after_start(self) -> Event:
        if self.date_end <= self.date_start:
            raise ValueError("date_end must be after date_start")
        return self

    def interval(self) -> BookingInterval:
        return BookingInterval(
            subject_id=self.artist_id,
            start=self.date_start,
            end=self.date_end,
            status=self.booking_status,
            booking_id=self.id,
        )


class InvoiceLineItem(BaseModel):
    id: str = Field(default_factory=_new_id)
    description: str
    quantity: float = 1
    unit_price: float
    total: float


class Payment(BaseModel):
    id: str = Field(default_factory=_new_id)
    invoice_id: str
    amount: float = Field(gt=0)
    paid_at: datetime = Field(default_factory=_utcnow)
    method: str | None = None


class Invoice(BaseModel):
    id: str = Field(default_factory=_new_id)
    event_id: str
    number: str
    issue_date: datetime = Field(default_factory=_utcnow)
    due_date: datetime
    currency: str = "RON"
    subtotal: float
    vat_pct: float = 19
    total: float
    status: InvoiceStatus = InvoiceStatus.DRAFT
    line_items: list[InvoiceLineItem] = Field(default_factory=list)
    payments: list[Payment] = Field(default_factory=list)


class TimelineEntry(BaseModel):
    id: str = Field(default_factory=_new_id)
    event_id: str
    timestamp: datetime = Field(default_factory=_utcnow)
    type: TimelineEntryType
    payload: dict = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class CreateEventRequest(BaseModel):
    """Body of ``POST /events``.

    Interval ordering is checked by the booking service so that a reversed
    range surfaces as ``InvalidInterval`` rather than a generic 422.
    """

    artist_id: str
    promoter_id: str | None = None
    venue_id: str | None = None
    date_start: datetime
    date_end: datetime
    booking_status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus | None = None
    gross_revenue: float | None = Field(default=None, ge=0)
    commission_pct: float | None = Field(default=None, ge=0, le=100)
    notes: str | None = None
    override: OverrideDecision | None = None

    @field_validator("date_start", "date_end")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    @field_validator("booking_status")
    @classmethod
    def _not_born_cancelled(cls, value: BookingStatus) -> BookingStatus:
        if value == BookingStatus.CANCELLED:
            raise ValueError("a booking cannot be created as CANCELLED")
        return value

    def interval(self) -> BookingInterval:
        return BookingInterval(
            subject_id=self.artist_id,
            start=self.date_start,
            end=self.date_end,
            status=self.booking_status,
        )


class EventDetail(BaseModel):
    event: Event
    artist: Artist | None = None
    venue: Venue | None = None
    promoter: Company | None = None
    invoices: list[Invoice] = Field(default_factory=list)
    commission: float = 0


class DashboardSummary(BaseModel):
    pending_events: int
    confirmed_events: int
    cancelled_events: int
    total_revenue: float
    total_commission: float
    overdue_invoices: int
    unsigned_contracts: int
    currency: str = "RON"
    recent_events: list[Event] = Field(default_factory=list)


class CalendarEntry(BaseModel):
    id: str
    title: str
    start: datetime
    end: datetime
    booking_status: BookingStatus
    payment_status: PaymentStatus | None = None
    artist_name: str
    venue_name: str
