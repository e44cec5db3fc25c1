"""In-memory repositories for the booking catalogue, events and invoices."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone

from showbook.domain.models import (
    Artist,
    BookingInterval,
    BookingStatus,
    Company,
    CompanyType,
    Event,
    Invoice,
    InvoiceLineItem,
    InvoiceStatus,
    PaymentStatus,
    TimelineEntry,
    Venue,
)

logger = logging.getLogger(__name__)


class ArtistRepository:
    """Dict-backed store for Artist instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Artist] = {}

    def add(self, artist: Artist) -> None:
        self._store[artist.id] = artist

    def get(self, artist_id: str) -> Artist | None:
        return self._store.get(artist_id)

    def list_all(self) -> list[Artist]:
        return sorted(self._store.values(), key=lambda a: a.name)


class VenueRepository:
    """Dict-backed store for Venue instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Venue] = {}

    def add(self, venue: Venue) -> None:
        self._store[venue.id] = venue

    def get(self, venue_id: str) -> Venue | None:
        return self._store.get(venue_id)

    def list_all(self) -> list[Venue]:
        return sorted(self._store.values(), key=lambda v: v.name)


class CompanyRepository:
    """Dict-backed store for Company instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Company] = {}

    def add(self, company: Company) -> None:
        self._store[company.id] = company

    def get(self, company_id: str) -> Company | None:
        return self._store.get(company_id)

    def list_all(self, company_type: CompanyType | None = None) -> list[Company]:
        companies = [
            c for c in self._store.values() if company_type is None or c.type == company_type
        ]
        return sorted(companies, key=lambda c: c.name)


class EventRepository:
    """Dict-backed store for Event instances, keyed by id.

    Writers that check for overlaps must hold ``subject_lock`` for the artist
    from the read of existing intervals until the new event is added.
    """

    def __init__(self) -> None:
        self._store: dict[str, Event] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @contextmanager
    def subject_lock(self, subject_id: str) -> Iterator[None]:
        with self._locks_guard:
            lock = self._locks.setdefault(subject_id, threading.Lock())
        with lock:
            yield

    def add(self, event: Event) -> None:
        self._store[event.id] = event

    def get(self, event_id: str) -> Event | None:
        return self._store.get(event_id)

    def list_all(self) -> list[Event]:
        return list(self._store.values())

    def list_filtered(
        self,
        artist_id: str | None = None,
        status: BookingStatus | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[Event]:
        """Return matching events, most recent start first."""
        events = [
            e
            for e in self._store.values()
            if (artist_id is None or e.artist_id == artist_id)
            and (status is None or e.booking_status == status)
            and (start_date is None or e.date_start >= start_date)
            and (end_date is None or e.date_end <= end_date)
        ]
        return sorted(events, key=lambda e: e.date_start, reverse=True)

    def active_intervals(self, subject_id: str) -> list[BookingInterval]:
        """Return the non-cancelled booking intervals held by *subject_id*."""
        return [
            e.interval()
            for e in self._store.values()
            if e.artist_id == subject_id and e.booking_status != BookingStatus.CANCELLED
        ]


class InvoiceRepository:
    """Dict-backed store for Invoice instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Invoice] = {}

    def add(self, invoice: Invoice) -> None:
        self._store[invoice.id] = invoice

    def get(self, invoice_id: str) -> Invoice | None:
        return self._store.get(invoice_id)

    def list_for_event(self, event_id: str) -> list[Invoice]:
        return [i for i in self._store.values() if i.event_id == event_id]

    def list_by_status(self, status: InvoiceStatus) -> list[Invoice]:
        return [i for i in self._store.values() if i.status == status]


class TimelineRepository:
    """List-backed store for TimelineEntry instances."""

    def __init__(self) -> None:
        self._entries: list[TimelineEntry] = []

    def add(self, entry: TimelineEntry) -> None:
        self._entries.append(entry)

    def list_for_event(self, event_id: str) -> list[TimelineEntry]:
        return sorted(
            [e for e in self._entries if e.event_id == event_id],
            key=lambda e: e.timestamp,
        )


# ---------------------------------------------------------------------------
# Seed data – the demo catalogue with a few near-future bookings
# ---------------------------------------------------------------------------


def _month_day(now: datetime, months_ahead: int, day: int, hour: int, minute: int = 0) -> datetime:
    year = now.year + (now.month - 1 + months_ahead) // 12
    month = (now.month - 1 + months_ahead) % 12 + 1
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


def seed_demo_data(
    artist_repo: ArtistRepository,
    venue_repo: VenueRepository,
    company_repo: CompanyRepository,
    event_repo: EventRepository,
    invoice_repo: InvoiceRepository,
    now: datetime | None = None,
) -> None:
    now = now or datetime.now(timezone.utc)

    universal = Company(name="Universal Music România", tags=["major-label", "international"])
    manele = Company(name="ManeleVTM Records", tags=["manele", "local"])
    def_jam = Company(name="Def Jam România", tags=["hip-hop", "urban"])
    external = Company(name="External Events SRL", tags=["external"])
    for company in (universal, manele, def_jam, external):
        company_repo.add(company)

    artists = [
        Artist(name="DJ Project", tags=["dance", "pop"]),
        Artist(name="Smiley", tags=["pop", "romanian"]),
        Artist(name="INNA", tags=["dance", "international"]),
        Artist(name="Carla's Dreams", tags=["alternative", "romanian"]),
        Artist(name="Delia", tags=["pop", "romanian"]),
    ]
    for artist in artists:
        artist_repo.add(artist)

    venues = [
        Venue(name="Sala Palatului", address="Strada Ion Campineanu 28", city="București",
              country="România", lat=44.4370, lng=26.0960, capacity=4000),
        Venue(name="Arenele Romane", address="Strada Ion Brezoianu 23-25", city="București",
              country="România", lat=44.4423, lng=26.0959, capacity=6000),
        Venue(name="Berăria H", address="Șoseaua Mihai Bravu 435-437", city="București",
              country="România", lat=44.4123, lng=26.1454, capacity=1500),
        Venue(name="Arena Națională", address="Strada Basarabia 37-39", city="București",
              country="România", lat=44.4372, lng=26.1527, capacity=55000),
        Venue(name="BT Arena", address="Strada Splaiul Independenței 291", city="Cluj-Napoca",
              country="România", lat=46.7689, lng=23.5895, capacity=10000),
    ]
    for venue in venues:
        venue_repo.add(venue)

    events = [
        Event(
            artist_id=artists[0].id,
            promoter_id=universal.id,
            venue_id=venues[0].id,
            date_start=_month_day(now, 1, 15, 20),
            date_end=_month_day(now, 1, 15, 23),
            booking_status=BookingStatus.CONFIRMED,
            payment_status=PaymentStatus.FIRST_INVOICE_PAID,
            gross_revenue=50000,
            notes="VIP section available",
        ),
        Event(
            artist_id=artists[1].id,
            promoter_id=manele.id,
            venue_id=venues[1].id,
            date_start=_month_day(now, 1, 20, 19),
            date_end=_month_day(now, 1, 20, 22, 30),
            booking_status=BookingStatus.CONFIRMED,
            payment_status=PaymentStatus.ALL_PAID,
            gross_revenue=75000,
        ),
        Event(
            artist_id=artists[2].id,
            promoter_id=def_jam.id,
            venue_id=venues[2].id,
            date_start=_month_day(now, 0, 25, 21),
            date_end=_month_day(now, 0, 26, 0),
            booking_status=BookingStatus.CONFIRMED,
            payment_status=PaymentStatus.CONTRACT_SIGNED,
            gross_revenue=40000,
        ),
        Event(
            artist_id=artists[3].id,
            promoter_id=universal.id,
            venue_id=venues[3].id,
            date_start=_month_day(now, 2, 5, 20),
            date_end=_month_day(now, 2, 5, 23, 30),
            booking_status=BookingStatus.PENDING,
            gross_revenue=120000,
            notes="Stadium concert - requires special permits",
        ),
        Event(
            artist_id=artists[4].id,
            promoter_id=external.id,
            venue_id=venues[4].id,
            date_start=_month_day(now, 1, 28, 19, 30),
            date_end=_month_day(now, 1, 28, 22),
            booking_status=BookingStatus.CONFIRMED,
            payment_status=PaymentStatus.FIRST_INVOICE_PAID,
            gross_revenue=60000,
        ),
    ]
    for event in events:
        event_repo.add(event)

    first = events[0]
    subtotal = first.gross_revenue * 0.1
    invoice_repo.add(
        Invoice(
            event_id=first.id,
            number="INV-202501-0001",
            issue_date=now,
            due_date=now + timedelta(days=30),
            subtotal=subtotal,
            vat_pct=19,
            total=subtotal * 1.19,
            status=InvoiceStatus.SENT,
            line_items=[
                InvoiceLineItem(
                    description="Booking Commission",
                    quantity=1,
                    unit_price=subtotal,
                    total=subtotal,
                )
            ],
        )
    )
    logger.info(
        "Seeded demo data: %d artists, %d venues, %d events",
        len(artists),
        len(venues),
        len(events),
    )
