"""Pytest fixtures for the mandir forms service."""

from __future__ import annotations

from concurrent.futures import Future
from typing import Any, Callable, Dict, List

import pytest

from mandir_forms import create_app
from mandir_forms.config import TestingConfig
from mandir_forms.extensions import app_event, db


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture(autouse=True)
def inline_bg(request, monkeypatch) -> List[Future]:
    """
    Run background jobs synchronously and keep their futures.
    Tests marked `real_executor` keep the thread pool.
    """
    futures: List[Future] = []
    if request.node.get_closest_marker("real_executor"):
        return futures

    def _run_inline(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        fut: Future = Future()
        try:
            fut.set_result(func(*args, **kwargs))
        except Exception as exc:  # surfaced through the future
            fut.set_exception(exc)
        futures.append(fut)
        return fut

    monkeypatch.setattr("mandir_forms.services.cms_sync.run_bg", _run_inline)
    return futures


@pytest.fixture
def events() -> List[Dict[str, Any]]:
    """Collect app_event signals sent during a test."""
    received: List[Dict[str, Any]] = []

    def _listener(name, **data):
        received.append({"name": name, **data})

    app_event.connect(_listener)
    yield received
    app_event.disconnect(_listener)


@pytest.fixture
def sponsorship_payload() -> Dict[str, Any]:
    return {
        "devoteeName": "Asha Patel",
        "email": "asha.patel@gmail.com",
        "phone": "813-555-0101",
        "pujaId": "satyanarayan",
        "sponsorshipDate": "2026-11-14",
        "specialInstructions": "Family gotra: Kashyap",
        "additionalNotes": "Will bring flowers",
    }


@pytest.fixture
def facility_payload() -> Dict[str, Any]:
    return {
        "contactName": "Ravi Kumar",
        "email": "ravi.kumar@gmail.com",
        "phone": "813-555-0199",
        "eventType": "Wedding reception",
        "requestedDate": "2026-12-05",
        "numberOfGuests": 150,
        "startTime": "17:00",
        "endTime": "22:00",
    }
