"""Pytest configuration and fixtures."""

from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine

from listquery.config.models import FilterDefinition
from listquery.search.debounce import ManualScheduler


@pytest.fixture
def people():
    """The three-person collection used throughout the examples."""
    return [
        {"id": 1, "name": "Ann", "role": "ADMIN"},
        {"id": 2, "name": "Bob", "role": "CLIENT"},
        {"id": 3, "name": "Cid", "role": "CLIENT"},
    ]


@pytest.fixture
def appointments():
    """Appointment-like records with dates, numbers and gaps."""
    return [
        {
            "id": "a1",
            "type": "IN_PERSON",
            "status": "SCHEDULED",
            "appointmentTime": "2024-03-01T09:00:00Z",
            "duration": 60,
            "client": {"name": "Ann"},
        },
        {
            "id": "a2",
            "type": "VIDEO_CALL",
            "status": "COMPLETED",
            "appointmentTime": "2024-03-05T14:30:00Z",
            "duration": 30,
            "client": {"name": "Bob"},
        },
        {
            "id": "a3",
            "type": "CHAT",
            "status": "CANCELLED",
            "appointmentTime": datetime(2024, 3, 10, 18, 0, tzinfo=timezone.utc),
            "duration": 45,
        },
        {
            "id": "a4",
            "type": "PHONE_CALL",
            "status": "SCHEDULED",
            "appointmentTime": None,
            "duration": "15",
        },
    ]


@pytest.fixture
def appointment_filters():
    return [
        FilterDefinition(
            key="type",
            label="Type",
            kind="select",
            options=[
                {"value": "IN_PERSON", "label": "In Person"},
                {"value": "VIDEO_CALL", "label": "Video Call"},
                {"value": "PHONE_CALL", "label": "Phone Call"},
                {"value": "CHAT", "label": "Chat"},
            ],
        ),
        FilterDefinition(key="status", label="Status", kind="select"),
        FilterDefinition(key="appointmentTime", label="Date", kind="dateRange"),
        FilterDefinition(key="duration", label="Duration", kind="number"),
    ]


@pytest.fixture
def scheduler():
    """Virtual-clock scheduler so debounce timing is deterministic."""
    return ManualScheduler()


@pytest.fixture
def sqlite_engine():
    """Create a temporary in-memory database engine for testing."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    try:
        yield engine
    finally:
        engine.dispose()
