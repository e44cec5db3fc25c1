"""FastAPI application — entry point for the booking management service."""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from showbook import config
from showbook.domain.bus import EventBus
from showbook.domain.errors import (
    DoubleBooking,
    InvalidInterval,
    InvalidStatusTransition,
    NotFound,
)
from showbook.domain.handlers import HandlerRegistry
from showbook.domain.models import (
    Artist,
    BookingStatus,
    CalendarEntry,
    Company,
    CompanyType,
    CreateEventRequest,
    DashboardSummary,
    Event,
    EventDetail,
    TimelineEntry,
    Venue,
    as_utc,
)
from showbook.repos.memory import (
    ArtistRepository,
    CompanyRepository,
    EventRepository,
    InvoiceRepository,
    TimelineRepository,
    VenueRepository,
    seed_demo_data,
)
from showbook.services.bookings import BookingService
from showbook.services.finance import (
    build_calendar,
    calculate_commission,
    dashboard_from_repos,
    month_window,
)

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Showbook Booking Service")

# ── Singletons (created at import time for simplicity) ────────────────
event_bus = EventBus()
artist_repo = ArtistRepository()
venue_repo = VenueRepository()
company_repo = CompanyRepository()
event_repo = EventRepository()
invoice_repo = InvoiceRepository()
timeline_repo = TimelineRepository()

handler_registry = HandlerRegistry(
    bus=event_bus,
    event_repo=event_repo,
    timeline_repo=timeline_repo,
)
booking_service = BookingService(
    event_repo=event_repo,
    artist_repo=artist_repo,
    bus=event_bus,
)

if config.SEED_DEMO_DATA:
    seed_demo_data(artist_repo, venue_repo, company_repo, event_repo, invoice_repo)


# ── Error responses ───────────────────────────────────────────────────


@app.exception_handler(InvalidInterval)
async def _invalid_interval(request: Request, exc: InvalidInterval) -> JSONResponse:
    return JSONResponse(
        status_code=422, content={"kind": exc.kind.value, "message": exc.message}
    )


@app.exception_handler(DoubleBooking)
async def _double_booking(request: Request, exc: DoubleBooking) -> JSONResponse:
    interval = exc.conflicting_interval
    conflicting_event = None
    if interval is not None and interval.booking_id is not None:
        stored = event_repo.get(interval.booking_id)
        if stored is not None:
            conflicting_event = stored.model_dump(mode="json")
    return JSONResponse(
        status_code=409,
        content={
            "kind": DoubleBooking.kind.value,
            "message": exc.message,
            "reason_required": exc.reason_required,
            "conflicting_interval": (
                interval.model_dump(mode="json") if interval is not None else None
            ),
            "conflicting_event": conflicting_event,
        },
    )


@app.exception_handler(InvalidStatusTransition)
async def _invalid_transition(request: Request, exc: InvalidStatusTransition) -> JSONResponse:
    return JSONResponse(
        status_code=409, content={"kind": exc.kind, "message": exc.message}
    )


@app.exception_handler(NotFound)
async def _not_found(request: Request, exc: NotFound) -> JSONResponse:
    return JSONResponse(
        status_code=404, content={"kind": exc.kind, "message": exc.message}
    )


# ── Catalogue routes ──────────────────────────────────────────────────


@app.get("/artists", response_model=list[Artist])
def list_artists() -> list[Artist]:
    return artist_repo.list_all()


@app.get("/venues", response_model=list[Venue])
def list_venues() -> list[Venue]:
    return venue_repo.list_all()


@app.get("/companies", response_model=list[Company])
def list_companies(type: CompanyType | None = None) -> list[Company]:
    """Return companies, optionally only those of the given type."""
    return company_repo.list_all(type)


# ── Booking routes ────────────────────────────────────────────────────


@app.get("/events", response_model=list[Event])
def list_events(
    artist_id: str | None = None,
    status: BookingStatus | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> list[Event]:
    """Return stored events, most recent start first."""
    return event_repo.list_filtered(
        artist_id=artist_id,
        status=status,
        start_date=as_utc(start_date) if start_date else None,
        end_date=as_utc(end_date) if end_date else None,
    )


@app.post("/events", response_model=Event, status_code=201)
def create_event(payload: CreateEventRequest) -> Event:
    """Create a booking.

    Answers 409 with the conflicting booking when the artist is already
    booked; the client may resubmit with ``override: {accepted, reason}``.
    """
    return booking_service.create_event(payload)


@app.get("/events/{event_id}", response_model=EventDetail)
def get_event(event_id: str) -> EventDetail:
    event = event_repo.get(event_id)
    if event is None:
        raise NotFound(f"Event {event_id} not found")
    return EventDetail(
        event=event,
        artist=artist_repo.get(event.artist_id),
        venue=venue_repo.get(event.venue_id) if event.venue_id else None,
        promoter=company_repo.get(event.promoter_id) if event.promoter_id else None,
        invoices=invoice_repo.list_for_event(event.id),
        commission=calculate_commission(event.gross_revenue, event.commission_pct),
    )


@app.post("/events/{event_id}/confirm", response_model=Event)
def confirm_event(event_id: str) -> Event:
    return booking_service.confirm(event_id)


@app.post("/events/{event_id}/cancel", response_model=Event)
def cancel_event(event_id: str) -> Event:
    return booking_service.cancel(event_id)


@app.get("/events/{event_id}/timeline", response_model=list[TimelineEntry])
def get_event_timeline(event_id: str) -> list[TimelineEntry]:
    """Return the audit trail of a booking in time order."""
    if event_repo.get(event_id) is None:
        raise NotFound(f"Event {event_id} not found")
    return timeline_repo.list_for_event(event_id)


# ── Read models ───────────────────────────────────────────────────────


@app.get("/dashboard", response_model=DashboardSummary)
def dashboard() -> DashboardSummary:
    return dashboard_from_repos(event_repo, invoice_repo)


@app.get("/calendar", response_model=list[CalendarEntry])
def calendar(
    start: datetime | None = None,
    end: datetime | None = None,
    month: str | None = None,
) -> list[CalendarEntry]:
    """Return calendar entries for bookings touching the window.

    ``month=YYYY-MM`` is shorthand for that calendar month and takes
    precedence over *start*/*end*.
    """
    if month is not None:
        try:
            start, end = month_window(month)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
    else:
        start = as_utc(start) if start else None
        end = as_utc(end) if end else None
    return build_calendar(event_repo, artist_repo, venue_repo, start=start, end=end)
