"""Pytest fixtures for testing"""

import json
import pytest
from datetime import date, datetime, timezone
from decimal import Decimal
from fastapi.testclient import TestClient
from debt_tracker.api.main import create_app
from debt_tracker.api.dependencies import get_advisory_client
from debt_tracker.config import Settings
from debt_tracker.domain.models import Debt, Payment
from debt_tracker.domain.state import TrackerState
from debt_tracker.infrastructure.clients.advisory import AdvisoryClient
from debt_tracker.infrastructure.database.repositories import InMemoryBlobStore
from debt_tracker.infrastructure.storage.store import DebtStore


@pytest.fixture
def test_settings() -> Settings:
    """Settings with defaults only, no .env or environment influence"""
    return Settings(_env_file=None, advisory_api_key="")


@pytest.fixture
def blob_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def store(blob_store: InMemoryBlobStore, test_settings: Settings) -> DebtStore:
    """Loaded, empty store"""
    store = DebtStore(blob_store, test_settings)
    store.load()
    return store


@pytest.fixture
def state(store: DebtStore) -> TrackerState:
    return TrackerState(store)


@pytest.fixture
def client(state: TrackerState) -> TestClient:
    """Create FastAPI test client around an in-memory tracker state"""
    app = create_app(state=state)
    app.dependency_overrides[get_advisory_client] = lambda: AdvisoryClient(api_key="")
    return TestClient(app)


@pytest.fixture
def debt() -> Debt:
    return Debt(
        id="debt-1",
        creditor_name="Ana",
        total_amount=Decimal("1000"),
        start_date=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def sample_payments(debt: Debt) -> list[Payment]:
    """Payments recorded out of date order, plus one for another debt"""
    return [
        Payment(id="p1", debt_id=debt.id, date=date(2024, 3, 1), amount=Decimal("300"), note="March"),
        Payment(id="p2", debt_id=debt.id, date=date(2024, 2, 1), amount=Decimal("200"), note="February"),
        Payment(id="other", debt_id="debt-2", date=date(2024, 2, 15), amount=Decimal("50")),
    ]


@pytest.fixture
def legacy_blobs(test_settings: Settings) -> dict[str, str]:
    """Single-debt layout as written by the previous version"""
    return {
        test_settings.legacy_settings_key: json.dumps(
            {"isSet": True, "creditorName": "Ana", "totalAmount": 500, "startDate": "2024-01-01"}
        ),
        test_settings.legacy_payments_key: json.dumps(
            [{"id": "p1", "date": "2024-02-01", "amount": 100, "note": ""}]
        ),
    }
