import os

# Keep test runs off the real database and log file
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("LOG_FILE", "")

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from app.core.config import settings
from app.main import create_app
from app.services.scan_processing import ScanProcessor
from app.store.base import EVENT_LOCATIONS, REGISTRATIONS, SURVEY_RESPONSES
from app.store.memory import MemoryDocumentStore
from app.store.sql import SQLDocumentStore


class TickingClock:
    """Deterministic clock; every call is one second after the previous"""

    def __init__(self, start=None):
        self.current = start or datetime(2025, 5, 18, 1, 0, 0, tzinfo=timezone.utc)

    def __call__(self):
        self.current = self.current + timedelta(seconds=1)
        return self.current


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def store(clock):
    """Empty in-memory document store"""
    return MemoryDocumentStore(clock=clock)


@pytest.fixture
def sql_store(tmp_path):
    """SQLite-backed document store with fresh tables"""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    sql_store = SQLDocumentStore(engine)
    sql_store.create_schema()
    yield sql_store
    sql_store.close()


def registration_doc(**overrides):
    doc = {
        "id": "reg-1",
        "id_number": "950920-08-6687",
        "id_type": "NRIC",
        "full_name": "Tan Mei Ling",
        "email_address": "meiling@example.com",
        "contact_number": "0123456789",
        "customer_type": "Dealer",
        "dealer_company_name": "Aircon Jaya Sdn Bhd",
        "tshirt_size": "M",
        "app_downloaded": True,
        "location_id": "melaka",
        "created_at": "2025-05-01T09:00:00+00:00",
        "updated_at": "2025-05-01T09:00:00+00:00",
    }
    doc.update(overrides)
    return doc


@pytest.fixture
def make_registration():
    return registration_doc


@pytest.fixture
def anyio_run():
    """Run a coroutine to completion from sync setup code"""
    import anyio

    def run(coro_fn, *args):
        return anyio.run(coro_fn, *args)

    return run


@pytest.fixture
def seeded_store(store, anyio_run):
    """Store holding a small event: three registrations, locations, surveys"""

    async def seed():
        await store.add(REGISTRATIONS, registration_doc())
        await store.add(REGISTRATIONS, registration_doc(
            id="reg-2",
            id_number="880101-14-5522",
            full_name="Ahmad Zaki",
            email_address="zaki@example.com",
            contact_number="0198887777",
            customer_type="Installer",
            dealer_company_name=None,
            app_downloaded=False,
            location_id="taiping",
            created_at="2025-05-02T09:00:00+00:00",
            status="checked-in",
            check_time_stamp=datetime(2025, 5, 18, 1, 30, tzinfo=timezone.utc),
        ))
        await store.add(REGISTRATIONS, registration_doc(
            id="reg-3",
            id_number="770707-07-7007",
            full_name="Siti Aminah",
            email_address="siti@example.com",
            contact_number="0171112222",
            customer_type="Homeowner",
            dealer_company_name=None,
            location_id="melaka",
            created_at="2025-05-03T09:00:00+00:00",
            redeemed_gift=True,
            redemption_time_stamp=datetime(2025, 5, 18, 2, 0, tzinfo=timezone.utc),
        ))
        await store.add(EVENT_LOCATIONS, {
            "id": "melaka", "location": "Melaka", "date": "To Be Confirmed",
            "time": "To Be Confirmed", "venue": "To Be Confirmed", "status": "upcoming",
            "pos": 2, "created_at": "2025-04-01T00:00:00+00:00",
        })
        await store.add(EVENT_LOCATIONS, {
            "id": "taiping", "location": "Taiping", "date": "18 / 05 / 2025",
            "time": "9:00 AM", "venue": "Hotel Grand Baron", "status": "closed",
            "pos": 1, "created_at": "2025-04-02T00:00:00+00:00",
        })
        await store.add(EVENT_LOCATIONS, {
            "id": "kluang", "location": "Kluang", "date": "To Be Confirmed",
            "time": "To Be Confirmed", "venue": "To Be Confirmed", "status": "upcoming",
            "created_at": "2025-04-03T00:00:00+00:00",
        })
        await store.add(SURVEY_RESPONSES, {
            "id": "survey-1", "name": "Tan Mei Ling", "email": "meiling@example.com",
            "contact_number": "0123456789", "event_location_id": "melaka",
            "feedback": "Great installation session", "marketing": 1,
            "ratings": {"presenter-JaydenKok": 5, "session-app": 3},
            "submitted": "2025-05-18T05:00:00+00:00", "user_id": "u1",
        })
        await store.add(SURVEY_RESPONSES, {
            "id": "survey-2", "name": "Ahmad Zaki", "email": "zaki@example.com",
            "contact_number": "0198887777", "event_location_id": "taiping",
            "feedback": "Too long", "marketing": 0,
            "ratings": {"presenter-JaydenKok": 2, "session-app": 4},
            "submitted": "2025-05-18T06:00:00+00:00", "user_id": "u2",
        })

    anyio_run(seed)
    return store


@pytest.fixture
def processor(store):
    return ScanProcessor(store, prefix=("aux", "training"))


@pytest.fixture
def app(seeded_store):
    return create_app(store=seeded_store)


@pytest.fixture
def api_client(app):
    """Return an unauthenticated API client."""
    return TestClient(app)


@pytest.fixture
def auth_headers(api_client):
    """Bearer header for the configured admin account."""
    response = api_client.post(
        f"{settings.API_PREFIX}/auth/login",
        json={"email": settings.ADMIN_EMAIL, "password": settings.ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
