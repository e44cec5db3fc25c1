"""End-to-end tests for booking creation and the conflict/override round trip."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from showbook.domain.models import Artist, Company, Event, Venue
from showbook.main import artist_repo, company_repo, event_repo, venue_repo

_NIGHT = datetime(2025, 3, 15, 20, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Stub data helpers
# ---------------------------------------------------------------------------


def _seed_artist(name: str = "Smiley") -> Artist:
    artist = Artist(name=name)
    artist_repo.add(artist)
    return artist


def _body(artist_id: str, start: datetime, end: datetime, **extra) -> dict:
    body = {
        "artist_id": artist_id,
        "date_start": start.isoformat(),
        "date_end": end.isoformat(),
        "booking_status": "CONFIRMED",
    }
    body.update(extra)
    return body


def _seed_existing_gig(artist: Artist) -> Event:
    """Confirmed 21:00-00:00 booking on the night of 15 March."""
    event = Event(
        artist_id=artist.id,
        date_start=_NIGHT + timedelta(hours=1),
        date_end=_NIGHT + timedelta(hours=4),
        booking_status="CONFIRMED",
    )
    event_repo.add(event)
    return event


# ---------------------------------------------------------------------------
# Tests: Creation
# ---------------------------------------------------------------------------


def test_create_event(client: TestClient):
    artist = _seed_artist()

    resp = client.post(
        "/events",
        json=_body(artist.id, _NIGHT, _NIGHT + timedelta(hours=3), gross_revenue=50000),
    )
    assert resp.status_code == 201
    event = resp.json()
    assert event["artist_id"] == artist.id
    assert event["booking_status"] == "CONFIRMED"
    assert event["override_reason"] is None

    listed = client.get("/events").json()
    assert [e["id"] for e in listed] == [event["id"]]


def test_reversed_interval_returns_invalid_interval(client: TestClient):
    artist = _seed_artist()

    resp = client.post(
        "/events", json=_body(artist.id, _NIGHT, _NIGHT - timedelta(hours=1))
    )
    assert resp.status_code == 422
    assert resp.json()["kind"] == "InvalidInterval"
    assert client.get("/events").json() == []


def test_malformed_body_is_rejected(client: TestClient):
    resp = client.post("/events", json={"artist_id": "x", "date_start": "tomorrow"})
    assert resp.status_code == 422


def test_cancelled_status_on_creation_is_rejected(client: TestClient):
    artist = _seed_artist()
    _seed_existing_gig(artist)

    resp = client.post(
        "/events",
        json=_body(
            artist.id, _NIGHT, _NIGHT + timedelta(hours=3), booking_status="CANCELLED"
        ),
    )
    assert resp.status_code == 422
    assert len(client.get("/events").json()) == 1


def test_unknown_artist_returns_404(client: TestClient):
    resp = client.post(
        "/events", json=_body("ghost", _NIGHT, _NIGHT + timedelta(hours=1))
    )
    assert resp.status_code == 404
    assert resp.json()["kind"] == "NotFound"


# ---------------------------------------------------------------------------
# Tests: Double booking and override
# ---------------------------------------------------------------------------


def test_conflict_then_resubmit_with_override(client: TestClient):
    artist = _seed_artist()
    existing = _seed_existing_gig(artist)
    body = _body(artist.id, _NIGHT, _NIGHT + timedelta(hours=3))

    resp = client.post("/events", json=body)
    assert resp.status_code == 409
    conflict = resp.json()
    assert conflict["kind"] == "DoubleBooking"
    assert conflict["reason_required"] is False
    assert conflict["conflicting_interval"]["booking_id"] == existing.id
    assert conflict["conflicting_event"]["id"] == existing.id
    assert conflict["message"]

    body["override"] = {
        "accepted": True,
        "reason": "double gig approved by management",
    }
    resp = client.post("/events", json=body)
    assert resp.status_code == 201
    created = resp.json()
    assert created["override_reason"] == "double gig approved by management"
    assert created["overridden_event_id"] == existing.id

    timeline = client.get(f"/events/{created['id']}/timeline").json()
    assert [t["type"] for t in timeline] == ["created", "conflict_overridden"]
    assert timeline[1]["payload"]["reason"] == "double gig approved by management"


def test_override_without_reason_asks_for_one(client: TestClient):
    artist = _seed_artist()
    _seed_existing_gig(artist)
    body = _body(
        artist.id,
        _NIGHT,
        _NIGHT + timedelta(hours=3),
        override={"accepted": True, "reason": "  "},
    )

    resp = client.post("/events", json=body)
    assert resp.status_code == 409
    data = resp.json()
    assert data["kind"] == "DoubleBooking"
    assert data["reason_required"] is True
    assert "reason" in data["message"]
    assert len(event_repo.list_all()) == 1


def test_touching_bookings_do_not_conflict(client: TestClient):
    artist = _seed_artist()
    existing = _seed_existing_gig(artist)

    resp = client.post(
        "/events", json=_body(artist.id, existing.date_end, existing.date_end + timedelta(hours=2))
    )
    assert resp.status_code == 201


def test_naive_datetimes_conflict_with_aware_bookings(client: TestClient):
    artist = _seed_artist()
    _seed_existing_gig(artist)

    resp = client.post(
        "/events",
        json={
            "artist_id": artist.id,
            "date_start": "2025-03-15T20:00:00",
            "date_end": "2025-03-15T23:00:00",
        },
    )
    assert resp.status_code == 409


# ---------------------------------------------------------------------------
# Tests: Status transitions
# ---------------------------------------------------------------------------


def test_confirm_and_cancel(client: TestClient):
    artist = _seed_artist()
    resp = client.post(
        "/events",
        json=_body(
            artist.id, _NIGHT, _NIGHT + timedelta(hours=3), booking_status="PENDING"
        ),
    )
    event_id = resp.json()["id"]

    resp = client.post(f"/events/{event_id}/confirm")
    assert resp.status_code == 200
    assert resp.json()["booking_status"] == "CONFIRMED"

    resp = client.post(f"/events/{event_id}/cancel")
    assert resp.status_code == 200
    assert resp.json()["booking_status"] == "CANCELLED"

    resp = client.post(f"/events/{event_id}/confirm")
    assert resp.status_code == 409
    assert resp.json()["kind"] == "InvalidStatusTransition"

    # cancelled bookings are kept but free the slot
    assert client.get(f"/events/{event_id}").status_code == 200
    resp = client.post("/events", json=_body(artist.id, _NIGHT, _NIGHT + timedelta(hours=3)))
    assert resp.status_code == 201


def test_status_change_on_missing_event_returns_404(client: TestClient):
    assert client.post("/events/bogus-id/confirm").status_code == 404
    assert client.post("/events/bogus-id/cancel").status_code == 404


# ---------------------------------------------------------------------------
# Tests: Reads
# ---------------------------------------------------------------------------


def test_get_event_detail(client: TestClient):
    artist = _seed_artist()
    venue = Venue(name="Sala Palatului", city="București", capacity=4000)
    promoter = Company(name="Universal Music România")
    venue_repo.add(venue)
    company_repo.add(promoter)

    resp = client.post(
        "/events",
        json=_body(
            artist.id,
            _NIGHT,
            _NIGHT + timedelta(hours=3),
            venue_id=venue.id,
            promoter_id=promoter.id,
            gross_revenue=50000,
        ),
    )
    event_id = resp.json()["id"]

    detail = client.get(f"/events/{event_id}").json()
    assert detail["event"]["id"] == event_id
    assert detail["artist"]["name"] == "Smiley"
    assert detail["venue"]["name"] == "Sala Palatului"
    assert detail["promoter"]["name"] == "Universal Music România"
    assert detail["invoices"] == []
    assert detail["commission"] == 5000


def test_get_missing_event_returns_404(client: TestClient):
    for path in ("/events/bogus-id", "/events/bogus-id/timeline"):
        resp = client.get(path)
        assert resp.status_code == 404
        assert resp.json() == {"kind": "NotFound", "message": "Event bogus-id not found"}


def test_list_events_filters_and_order(client: TestClient):
    smiley = _seed_artist("Smiley")
    delia = _seed_artist("Delia")
    early = Event(
        artist_id=smiley.id,
        date_start=_NIGHT,
        date_end=_NIGHT + timedelta(hours=2),
        booking_status="CONFIRMED",
    )
    late = Event(
        artist_id=smiley.id,
        date_start=_NIGHT + timedelta(days=7),
        date_end=_NIGHT + timedelta(days=7, hours=2),
        booking_status="PENDING",
    )
    other = Event(
        artist_id=delia.id,
        date_start=_NIGHT + timedelta(days=1),
        date_end=_NIGHT + timedelta(days=1, hours=2),
    )
    for event in (early, late, other):
        event_repo.add(event)

    ids = [e["id"] for e in client.get("/events").json()]
    assert ids == [late.id, other.id, early.id]

    ids = [e["id"] for e in client.get("/events", params={"artist_id": smiley.id}).json()]
    assert ids == [late.id, early.id]

    ids = [e["id"] for e in client.get("/events", params={"status": "PENDING"}).json()]
    assert ids == [late.id, other.id]

    resp = client.get(
        "/events",
        params={
            "start_date": (_NIGHT + timedelta(hours=1)).isoformat(),
            "end_date": (_NIGHT + timedelta(days=2)).isoformat(),
        },
    )
    assert [e["id"] for e in resp.json()] == [other.id]
