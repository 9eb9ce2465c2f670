"""Tests for /api/v1/users and acting-user resolution."""

from __future__ import annotations

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from backend.app.models.user import User

BASE = "/api/v1/users"


class TestCurrentUser:
    def test_me(self, client: TestClient, sales_user: User, as_user) -> None:
        resp = client.get(f"{BASE}/me", headers=as_user(sales_user))
        assert resp.status_code == 200
        assert resp.json()["email"] == "sales@example.com"
        assert resp.json()["role"] == "sales"

    def test_missing_header(self, client: TestClient) -> None:
        assert client.get(f"{BASE}/me").status_code == 401

    def test_malformed_header(self, client: TestClient) -> None:
        resp = client.get(f"{BASE}/me", headers={"X-User-Id": "not-a-uuid"})
        assert resp.status_code == 401

    def test_unknown_user(self, client: TestClient) -> None:
        resp = client.get(
            f"{BASE}/me", headers={"X-User-Id": "00000000-0000-0000-0000-000000000001"}
        )
        assert resp.status_code == 401

    def test_inactive_user(
        self, client: TestClient, db: Session, sales_user: User, as_user
    ) -> None:
        sales_user.is_active = False
        db.commit()
        assert client.get(f"{BASE}/me", headers=as_user(sales_user)).status_code == 403


class TestUserManagement:
    def test_non_admin_is_forbidden(
        self, client: TestClient, owner_user: User, as_user
    ) -> None:
        assert client.get(BASE, headers=as_user(owner_user)).status_code == 403

    def test_create_user_lowercases_email(
        self, client: TestClient, admin_user: User, as_user
    ) -> None:
        resp = client.post(
            BASE,
            json={"name": "Priya", "email": "Priya@Example.com", "role": "developer"},
            headers=as_user(admin_user),
        )
        assert resp.status_code == 201, resp.text
        assert resp.json()["email"] == "priya@example.com"
        assert resp.json()["is_active"] is True

    def test_duplicate_email_conflicts(
        self, client: TestClient, admin_user: User, sales_user: User, as_user
    ) -> None:
        resp = client.post(
            BASE,
            json={"name": "Other", "email": "SALES@example.com"},
            headers=as_user(admin_user),
        )
        assert resp.status_code == 409

    def test_invalid_email_is_rejected(
        self, client: TestClient, admin_user: User, as_user
    ) -> None:
        resp = client.post(
            BASE, json={"name": "Bad", "email": "nobody"}, headers=as_user(admin_user)
        )
        assert resp.status_code == 422

    def test_update_role_and_deactivate(
        self, client: TestClient, admin_user: User, sales_user: User, as_user
    ) -> None:
        resp = client.patch(
            f"{BASE}/{sales_user.id}",
            json={"role": "owner", "is_active": False},
            headers=as_user(admin_user),
        )
        assert resp.status_code == 200
        assert resp.json()["role"] == "owner"
        assert resp.json()["is_active"] is False

    def test_admin_cannot_deactivate_self(
        self, client: TestClient, admin_user: User, as_user
    ) -> None:
        resp = client.patch(
            f"{BASE}/{admin_user.id}", json={"is_active": False}, headers=as_user(admin_user)
        )
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Cannot deactivate yourself"

    def test_list_users(
        self, client: TestClient, admin_user: User, sales_user: User, as_user
    ) -> None:
        resp = client.get(BASE, headers=as_user(admin_user))
        assert {u["email"] for u in resp.json()} == {"admin@example.com", "sales@example.com"}
