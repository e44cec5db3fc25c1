"""Shared fixtures for the API tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from showbook.main import (
    app,
    artist_repo,
    company_repo,
    event_repo,
    invoice_repo,
    timeline_repo,
    venue_repo,
)


def _clear() -> None:
    artist_repo._store.clear()
    venue_repo._store.clear()
    company_repo._store.clear()
    event_repo._store.clear()
    invoice_repo._store.clear()
    timeline_repo._entries.clear()


@pytest.fixture()
def clean_repos():
    """Reset the application's in-memory repos around a test."""
    _clear()
    yield
    _clear()


@pytest.fixture()
def client(clean_repos):
    return TestClient(app)
