"""Tests for API endpoints."""

import time
from unittest.mock import AsyncMock

import jwt
import pytest
from fastapi.testclient import TestClient

from intake_portal.core.auth import get_current_caller
from intake_portal.core.config import settings
from intake_portal.core.exceptions import ConfigurationError
from intake_portal.core.jwt import jwt_verifier
from intake_portal.database.client import db_client
from intake_portal.dependencies import get_delegation_token_service, get_resource_store
from intake_portal.main import app
from intake_portal.schemas.auth import Caller

U1 = Caller(identifier="U1", emails=["u1@example.com"])
U2 = Caller(identifier="U2", emails=["u2@example.com"])
ADMIN = Caller(identifier="U-admin", emails=["admin@example.com"])


@pytest.fixture
def wired(store, token_service):
    """Route the app's store and token service to the test doubles."""
    app.dependency_overrides[get_resource_store] = lambda: store
    app.dependency_overrides[get_delegation_token_service] = lambda: token_service


def _as(caller: Caller) -> None:
    app.dependency_overrides[get_current_caller] = lambda: caller


@pytest.mark.usefixtures("wired")
class TestAdminEndpoints:
    """Test suite for admin endpoints."""

    def test_check_requires_authentication(self, test_client: TestClient) -> None:
        response = test_client.get("/api/v1/admin/check")

        assert response.status_code == 401

    def test_check_admin(self, test_client: TestClient) -> None:
        _as(ADMIN)

        response = test_client.get("/api/v1/admin/check")

        assert response.status_code == 200
        assert response.json() == {"is_allowed": True}

    def test_check_applicant(self, test_client: TestClient) -> None:
        _as(U1)

        response = test_client.get("/api/v1/admin/check")

        assert response.status_code == 200
        assert response.json() == {"is_allowed": False}

    def test_check_survives_allowlist_outage(self, test_client: TestClient, store) -> None:
        store.unavailable.add("admin_users")
        _as(ADMIN)

        response = test_client.get("/api/v1/admin/check")

        assert response.json() == {"is_allowed": True}

    def test_issue_token_requires_authentication(self, test_client: TestClient) -> None:
        response = test_client.post("/api/v1/admin/applications/A1/delegation-token")

        assert response.status_code == 401

    def test_issue_token_requires_admin(self, test_client: TestClient) -> None:
        _as(U1)

        response = test_client.post("/api/v1/admin/applications/A1/delegation-token")

        assert response.status_code == 403

    def test_issue_token_default_ttl(self, test_client: TestClient, token_service) -> None:
        _as(ADMIN)

        response = test_client.post("/api/v1/admin/applications/A1/delegation-token")

        assert response.status_code == 200
        data = response.json()
        assert data["application_id"] == "A1"
        assert data["expires_in_minutes"] == 20
        assert token_service.verify(data["token"]) == "A1"

    def test_issue_token_custom_ttl(self, test_client: TestClient, token_service, clock) -> None:
        _as(ADMIN)

        response = test_client.post(
            "/api/v1/admin/applications/A1/delegation-token",
            json={"ttl_minutes": 5},
        )

        assert response.status_code == 200
        assert response.json()["expires_in_minutes"] == 5
        clock[0] += 6 * 60
        assert token_service.verify(response.json()["token"]) is None

    def test_issue_token_rejects_non_positive_ttl(self, test_client: TestClient) -> None:
        _as(ADMIN)

        response = test_client.post(
            "/api/v1/admin/applications/A1/delegation-token",
            json={"ttl_minutes": 0},
        )

        assert response.status_code == 422


@pytest.mark.usefixtures("wired")
class TestAccessEndpoints:
    """Test suite for ownership checks."""

    @pytest.mark.parametrize("kind,leaf_id", [
        ("application", "A1"),
        ("incident", "I1"),
        ("slot", "S1"),
        ("file", "F1"),
    ])
    def test_owner_gets_application(self, test_client: TestClient, kind, leaf_id) -> None:
        _as(U1)

        response = test_client.get(f"/api/v1/access/{kind}/{leaf_id}")

        assert response.status_code == 200
        assert response.json() == {"application_id": "A1"}

    def test_other_user_gets_not_found(self, test_client: TestClient) -> None:
        _as(U2)

        response = test_client.get("/api/v1/access/file/F1")

        assert response.status_code == 404

    def test_missing_and_foreign_are_indistinguishable(self, test_client: TestClient) -> None:
        _as(U2)

        foreign = test_client.get("/api/v1/access/file/F1")
        missing = test_client.get("/api/v1/access/file/F-nope")

        assert foreign.status_code == missing.status_code == 404
        assert foreign.json() == missing.json()

    def test_store_outage_gets_not_found(self, test_client: TestClient, store) -> None:
        store.unavailable.add("incidents")
        _as(U1)

        response = test_client.get("/api/v1/access/file/F1")

        assert response.status_code == 404

    def test_requires_authentication(self, test_client: TestClient) -> None:
        response = test_client.get("/api/v1/access/file/F1")

        assert response.status_code == 401

    def test_unknown_kind(self, test_client: TestClient) -> None:
        _as(U1)

        response = test_client.get("/api/v1/access/invoice/F1")

        assert response.status_code == 422


@pytest.mark.usefixtures("wired")
class TestDelegationEndpoints:
    """Test suite for delegation token verification."""

    def test_verify_valid_token(self, test_client: TestClient, token_service) -> None:
        token = token_service.issue("A1")

        response = test_client.post("/api/v1/delegation/verify", json={"token": token})

        assert response.status_code == 200
        assert response.json() == {"application_id": "A1"}

    @pytest.mark.parametrize("token", ["garbage", "", "a.b.c"])
    def test_verify_invalid_token(self, test_client: TestClient, token) -> None:
        response = test_client.post("/api/v1/delegation/verify", json={"token": token})

        assert response.status_code == 401

    def test_verify_expired_token(self, test_client: TestClient, token_service, clock) -> None:
        token = token_service.issue("A1")
        clock[0] += 21 * 60

        response = test_client.post("/api/v1/delegation/verify", json={"token": token})

        assert response.status_code == 401

    def test_verify_missing_body(self, test_client: TestClient) -> None:
        response = test_client.post("/api/v1/delegation/verify", json={})

        assert response.status_code == 422


@pytest.mark.usefixtures("wired")
class TestBearerAuthentication:
    """Requests authenticated through a real bearer token."""

    def test_invalid_bearer_token(self, test_client: TestClient) -> None:
        response = test_client.get(
            "/api/v1/admin/check",
            headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert response.status_code == 401

    def test_valid_bearer_token(self, test_client: TestClient, monkeypatch) -> None:
        secret = "super-secret-jwt-token-with-at-least-32-characters"
        issuer = "https://project.supabase.co/auth/v1"
        monkeypatch.setattr(jwt_verifier, "jwt_secret", secret)
        monkeypatch.setattr(jwt_verifier, "expected_issuer", issuer)
        now = int(time.time())
        token = jwt.encode(
            {
                "sub": "U-admin",
                "email": "admin@example.com",
                "aud": "authenticated",
                "iss": issuer,
                "iat": now,
                "exp": now + 600,
            },
            secret,
            algorithm="HS256",
        )

        response = test_client.get(
            "/api/v1/admin/check",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 200
        assert response.json() == {"is_allowed": True}


class TestHealthEndpoint:
    """Test suite for the health check."""

    def test_healthy(self, test_client: TestClient, monkeypatch) -> None:
        monkeypatch.setattr(db_client, "health_check", AsyncMock(return_value={"status": "healthy"}))

        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_degraded(self, test_client: TestClient, monkeypatch) -> None:
        monkeypatch.setattr(
            db_client, "health_check", AsyncMock(return_value={"status": "unhealthy", "error": "down"})
        )

        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"


class TestStartup:
    """Tests for the application lifespan."""

    def test_missing_signing_secret_aborts_startup(self, monkeypatch) -> None:
        monkeypatch.setattr(settings.delegation, "secret", "")

        with pytest.raises(ConfigurationError):
            with TestClient(app):
                pass
