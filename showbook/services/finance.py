"""Derived figures over stored bookings: commission, dashboard and calendar views."""

from __future__ import annotations

from datetime import datetime, timezone

from dateutil.relativedelta import relativedelta

from showbook import config
from showbook.domain.models import (
    BookingStatus,
    CalendarEntry,
    DashboardSummary,
    Event,
    Invoice,
    InvoiceStatus,
    PaymentStatus,
)
from showbook.repos.memory import (
    ArtistRepository,
    EventRepository,
    InvoiceRepository,
    VenueRepository,
)

RECENT_EVENTS_LIMIT = 5


def calculate_commission(
    gross_revenue: float | None,
    commission_pct: float = config.DEFAULT_COMMISSION_PCT,
) -> float:
    """Agency commission on a booking's gross revenue."""
    return (gross_revenue or 0) * commission_pct / 100


def build_dashboard(
    events: list[Event],
    overdue_invoices: list[Invoice],
) -> DashboardSummary:
    def count(status: BookingStatus) -> int:
        return sum(1 for e in events if e.booking_status == status)

    recent = sorted(events, key=lambda e: e.created_at, reverse=True)[:RECENT_EVENTS_LIMIT]
    return DashboardSummary(
        pending_events=count(BookingStatus.PENDING),
        confirmed_events=count(BookingStatus.CONFIRMED),
        cancelled_events=count(BookingStatus.CANCELLED),
        total_revenue=sum(e.gross_revenue or 0 for e in events),
        total_commission=sum(
            calculate_commission(e.gross_revenue, e.commission_pct) for e in events
        ),
        overdue_invoices=len(overdue_invoices),
        unsigned_contracts=sum(
            1
            for e in events
            if e.payment_status is None or e.payment_status == PaymentStatus.CONTRACT_SIGNED
        ),
        currency=config.DEFAULT_CURRENCY,
        recent_events=recent,
    )


def dashboard_from_repos(
    event_repo: EventRepository, invoice_repo: InvoiceRepository
) -> DashboardSummary:
    return build_dashboard(
        event_repo.list_all(), invoice_repo.list_by_status(InvoiceStatus.OVERDUE)
    )


def month_window(month: str) -> tuple[datetime, datetime]:
    """Turn ``YYYY-MM`` into a [first instant, first instant of next month) window."""
    try:
        start = datetime.strptime(month, "%Y-%m").replace(tzinfo=timezone.utc)
    except ValueError as exc:
        raise ValueError(f"month must look like YYYY-MM, got {month!r}") from exc
    return start, start + relativedelta(months=1)


def build_calendar(
    event_repo: EventRepository,
    artist_repo: ArtistRepository,
    venue_repo: VenueRepository,
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[CalendarEntry]:
    """Calendar entries for every booking touching the [start, end) window."""
    entries: list[CalendarEntry] = []
    for event in sorted(event_repo.list_all(), key=lambda e: e.date_start):
        if start is not None and event.date_end <= start:
            continue
        if end is not None and event.date_start >= end:
            continue
        artist = artist_repo.get(event.artist_id)
        venue = venue_repo.get(event.venue_id) if event.venue_id else None
        artist_name = artist.name if artist else event.artist_id
        entries.append(
            CalendarEntry(
                id=event.id,
                title=artist_name,
                start=event.date_start,
                end=event.date_end,
                booking_status=event.booking_status,
                payment_status=event.payment_status,
                artist_name=artist_name,
                venue_name=venue.name if venue else "TBD",
            )
        )
    return entries
