"""Pytest configuration and shared fixtures."""

from typing import Any, Dict, List, Mapping, Optional, Set

import pytest
from fastapi.testclient import TestClient

from intake_portal.core.exceptions import StoreUnavailableError
from intake_portal.main import app
from intake_portal.repositories.resource_store import ResourceStore
from intake_portal.services.authorization import DelegationTokenService

TEST_SECRET = "test-prefill-secret"

PRIMARY_KEYS = {
    "admin_users": "email",
    "user_profiles": "user_id",
}


class FakeResourceStore(ResourceStore):
    """In-memory ResourceStore used in place of the database.

    Relations listed in ``unavailable`` raise StoreUnavailableError on
    every lookup. ``calls`` records each lookup in order.
    """

    def __init__(self, data: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.tables: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.unavailable: Set[str] = set()
        self.calls: List[tuple] = []
        for relation, rows in (data or {}).items():
            for row in rows:
                self.add(relation, row)

    def add(self, relation: str, row: Dict[str, Any]) -> None:
        pk = PRIMARY_KEYS.get(relation, "id")
        self.tables.setdefault(relation, {})[row[pk]] = dict(row)

    def _check(self, relation: str) -> None:
        if relation in self.unavailable:
            raise StoreUnavailableError(f"{relation} unreachable")

    async def get_by_id(self, relation: str, record_id: str) -> Optional[Dict[str, Any]]:
        self.calls.append(("get_by_id", relation, record_id))
        self._check(relation)
        row = self.tables.get(relation, {}).get(record_id)
        return dict(row) if row is not None else None

    async def list_where(self, relation: str, filters: Mapping[str, Any]) -> List[Dict[str, Any]]:
        self.calls.append(("list_where", relation, dict(filters)))
        self._check(relation)

        def matches(row: Dict[str, Any]) -> bool:
            for field, value in filters.items():
                if isinstance(value, (list, tuple, set, frozenset)):
                    if row.get(field) not in value:
                        return False
                elif row.get(field) != value:
                    return False
            return True

        return [dict(row) for row in self.tables.get(relation, {}).values() if matches(row)]


@pytest.fixture
def store() -> FakeResourceStore:
    """Store seeded with one complete ownership chain and admin data.

    A1 (owned by U1) <- I1 <- S1 <- F1. A2 is owned by U2.

    Returns:
        FakeResourceStore: Seeded store
    """
    return FakeResourceStore({
        "contractor_applications": [
            {"id": "A1", "user_id": "U1"},
            {"id": "A2", "user_id": "U2"},
        ],
        "incidents": [
            {"id": "I1", "application_id": "A1"},
            {"id": "I2", "application_id": "A2"},
            {"id": "I-orphan", "application_id": "A-missing"},
            {"id": "I-detached", "application_id": None},
        ],
        "required_document_slots": [
            {"id": "S1", "incident_id": "I1"},
            {"id": "S-orphan", "incident_id": "I-orphan"},
        ],
        "uploaded_files": [
            {"id": "F1", "slot_id": "S1"},
            {"id": "F-orphan", "slot_id": "S-missing"},
        ],
        "admin_users": [
            {"email": "ops@example.com", "role": "admin"},
        ],
        "user_profiles": [
            {"user_id": "U1", "email": "u1@example.com", "role": "applicant"},
            {"user_id": "U-admin", "email": "admin@example.com", "role": "admin"},
            {"user_id": "U-super", "email": "super@example.com", "role": "super_admin"},
        ],
    })


@pytest.fixture
def clock() -> List[float]:
    """Mutable clock; tests advance time by assigning clock[0]."""
    return [1_700_000_000.0]


@pytest.fixture
def token_service(clock: List[float]) -> DelegationTokenService:
    """Delegation token service driven by the test clock."""
    return DelegationTokenService(secret=TEST_SECRET, clock=lambda: clock[0])


@pytest.fixture
def test_client() -> TestClient:
    """Create FastAPI test client.

    Returns:
        TestClient: FastAPI test client instance
    """
    return TestClient(app)


@pytest.fixture(autouse=True)
def clear_dependency_overrides():
    """Ensure FastAPI dependency overrides are reset between tests."""
    app.dependency_overrides = {}
    yield
    app.dependency_overrides = {}
