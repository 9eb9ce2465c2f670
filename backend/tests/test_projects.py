"""Tests for platforms and projects."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from backend.app.models.account import Account
from backend.app.models.project import (
    HourlyWork,
    Platform,
    Project,
    ProjectPayment,
    WalletStatus,
)
from backend.app.models.user import User

PLATFORMS = "/api/v1/platforms"
PROJECTS = "/api/v1/projects"


def _project_payload(platform: Platform, **overrides) -> dict:
    body = {
        "name": "Mobile App",
        "client_name": "Initech",
        "platform_id": str(platform.id),
        "currency": "usd",
        "start_date": "2026-02-01",
        "price_type": "fixed",
        "fixed_price": "3000",
        "budget": "3000",
    }
    body.update(overrides)
    return body


class TestPlatforms:
    def test_create_and_list(self, client: TestClient, sales_user: User, as_user) -> None:
        headers = as_user(sales_user)
        resp = client.post(
            PLATFORMS, json={"name": "Fiverr", "charge_percentage": "20"}, headers=headers
        )
        assert resp.status_code == 201
        assert Decimal(resp.json()["charge_percentage"]) == Decimal("20")

        resp = client.get(PLATFORMS, headers=headers)
        assert [p["name"] for p in resp.json()] == ["Fiverr"]

    def test_names_are_unique_ignoring_case(
        self, client: TestClient, sales_user: User, platform: Platform, as_user
    ) -> None:
        resp = client.post(PLATFORMS, json={"name": "UPWORK"}, headers=as_user(sales_user))
        assert resp.status_code == 409

    def test_charge_percentage_is_bounded(
        self, client: TestClient, sales_user: User, as_user
    ) -> None:
        resp = client.post(
            PLATFORMS, json={"name": "Toptal", "charge_percentage": "120"}, headers=as_user(sales_user)
        )
        assert resp.status_code == 422

    def test_update_platform(
        self, client: TestClient, sales_user: User, platform: Platform, as_user
    ) -> None:
        resp = client.patch(
            f"{PLATFORMS}/{platform.id}",
            json={"charge_percentage": "5"},
            headers=as_user(sales_user),
        )
        assert resp.status_code == 200
        assert resp.json()["name"] == "Upwork"
        assert Decimal(resp.json()["charge_percentage"]) == Decimal("5")

    def test_platform_in_use_cannot_be_deleted(
        self, client: TestClient, sales_user: User, fixed_project: Project, as_user
    ) -> None:
        resp = client.delete(
            f"{PLATFORMS}/{fixed_project.platform_id}", headers=as_user(sales_user)
        )
        assert resp.status_code == 409


class TestCreateProject:
    def test_create_fixed_project(
        self, client: TestClient, sales_user: User, platform: Platform, as_user
    ) -> None:
        resp = client.post(PROJECTS, json=_project_payload(platform), headers=as_user(sales_user))
        assert resp.status_code == 201, resp.text
        body = resp.json()
        assert body["currency"] == "USD"
        assert body["status"] == "pending"
        assert body["hourly_rate"] is None
        assert body["platform_name"] == "Upwork"
        assert body["created_by"] == str(sales_user.id)

    def test_fixed_project_drops_hourly_rate(
        self, client: TestClient, sales_user: User, platform: Platform, as_user
    ) -> None:
        body = _project_payload(platform, hourly_rate="40")
        resp = client.post(PROJECTS, json=body, headers=as_user(sales_user))
        assert resp.status_code == 201
        assert resp.json()["hourly_rate"] is None

    def test_hourly_project_requires_rate(
        self, client: TestClient, sales_user: User, platform: Platform, as_user
    ) -> None:
        body = _project_payload(platform, price_type="hourly", fixed_price=None)
        resp = client.post(PROJECTS, json=body, headers=as_user(sales_user))
        assert resp.status_code == 422

    def test_end_date_before_start_is_rejected(
        self, client: TestClient, sales_user: User, platform: Platform, as_user
    ) -> None:
        body = _project_payload(platform, end_date="2026-01-01")
        resp = client.post(PROJECTS, json=body, headers=as_user(sales_user))
        assert resp.status_code == 422

    def test_unknown_platform_is_not_found(
        self, client: TestClient, sales_user: User, platform: Platform, as_user
    ) -> None:
        body = _project_payload(platform, platform_id="00000000-0000-0000-0000-000000000001")
        resp = client.post(PROJECTS, json=body, headers=as_user(sales_user))
        assert resp.status_code == 404


class TestProjectVisibility:
    def test_list_only_own_projects(
        self,
        client: TestClient,
        sales_user: User,
        developer_user: User,
        fixed_project: Project,
        hourly_project: Project,
        as_user,
    ) -> None:
        resp = client.get(PROJECTS, headers=as_user(sales_user))
        assert {p["id"] for p in resp.json()} == {str(fixed_project.id), str(hourly_project.id)}
        assert client.get(PROJECTS, headers=as_user(developer_user)).json() == []

    def test_other_users_project_is_not_found(
        self, client: TestClient, developer_user: User, fixed_project: Project, as_user
    ) -> None:
        resp = client.get(f"{PROJECTS}/{fixed_project.id}", headers=as_user(developer_user))
        assert resp.status_code == 404

    def test_admin_reads_any_project(
        self, client: TestClient, admin_user: User, fixed_project: Project, as_user
    ) -> None:
        resp = client.get(f"{PROJECTS}/{fixed_project.id}", headers=as_user(admin_user))
        assert resp.status_code == 200


class TestUpdateProject:
    def test_switch_to_hourly(
        self, client: TestClient, sales_user: User, fixed_project: Project, as_user
    ) -> None:
        resp = client.patch(
            f"{PROJECTS}/{fixed_project.id}",
            json={"price_type": "hourly", "hourly_rate": "30", "status": "working"},
            headers=as_user(sales_user),
        )
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["price_type"] == "hourly"
        assert body["fixed_price"] is None
        assert body["status"] == "working"

    def test_price_type_is_locked_once_paid(
        self,
        client: TestClient,
        db: Session,
        sales_user: User,
        fixed_project: Project,
        wallet: Account,
        as_user,
    ) -> None:
        db.add(
            ProjectPayment(
                project_id=fixed_project.id,
                amount=Decimal("100"),
                currency="USD",
                amount_in_inr=Decimal("8300"),
                platform_wallet_id=wallet.id,
                wallet_status=WalletStatus.PENDING,
                payment_date=date(2026, 2, 1),
            )
        )
        db.commit()

        resp = client.patch(
            f"{PROJECTS}/{fixed_project.id}",
            json={"price_type": "hourly", "hourly_rate": "30"},
            headers=as_user(sales_user),
        )
        assert resp.status_code == 409

    def test_end_date_before_start_is_rejected(
        self, client: TestClient, sales_user: User, fixed_project: Project, as_user
    ) -> None:
        resp = client.patch(
            f"{PROJECTS}/{fixed_project.id}",
            json={"end_date": "2025-12-31"},
            headers=as_user(sales_user),
        )
        assert resp.status_code == 400


class TestDeleteProject:
    def test_delete_removes_unbilled_hours(
        self,
        client: TestClient,
        db: Session,
        sales_user: User,
        hourly_project: Project,
        as_user,
    ) -> None:
        db.add(
            HourlyWork(
                project_id=hourly_project.id,
                week_start=date(2026, 2, 2),
                hours=Decimal("12"),
                user_id=sales_user.id,
            )
        )
        db.commit()
        project_id = hourly_project.id

        resp = client.delete(f"{PROJECTS}/{project_id}", headers=as_user(sales_user))
        assert resp.status_code == 204
        assert db.query(Project).filter(Project.id == project_id).first() is None
        assert db.query(HourlyWork).count() == 0

    def test_project_with_payments_cannot_be_deleted(
        self,
        client: TestClient,
        db: Session,
        sales_user: User,
        fixed_project: Project,
        wallet: Account,
        as_user,
    ) -> None:
        db.add(
            ProjectPayment(
                project_id=fixed_project.id,
                amount=Decimal("100"),
                currency="USD",
                amount_in_inr=Decimal("8300"),
                platform_wallet_id=wallet.id,
                payment_date=date(2026, 2, 1),
            )
        )
        db.commit()

        resp = client.delete(f"{PROJECTS}/{fixed_project.id}", headers=as_user(sales_user))
        assert resp.status_code == 409
