"""Tests for /api/v1/hourly-work."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from backend.app.models.project import HourlyWork, Project
from backend.app.models.user import User

BASE = "/api/v1/hourly-work"


def _log(client: TestClient, headers: dict, project: Project, week: str, hours: str):
    return client.post(
        BASE,
        json={"project_id": str(project.id), "week_start": week, "hours": hours},
        headers=headers,
    )


class TestLogHours:
    def test_log_week(
        self, client: TestClient, sales_user: User, hourly_project: Project, as_user
    ) -> None:
        resp = _log(client, as_user(sales_user), hourly_project, "2026-02-02", "32.5")
        assert resp.status_code == 201, resp.text
        body = resp.json()
        assert Decimal(body["hours"]) == Decimal("32.5")
        assert body["billed"] is False
        assert body["payment_id"] is None
        assert body["user_id"] == str(sales_user.id)

    def test_fixed_project_rejects_hours(
        self, client: TestClient, sales_user: User, fixed_project: Project, as_user
    ) -> None:
        resp = _log(client, as_user(sales_user), fixed_project, "2026-02-02", "5")
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Project is not hourly"

    def test_hours_must_be_positive(
        self, client: TestClient, sales_user: User, hourly_project: Project, as_user
    ) -> None:
        resp = _log(client, as_user(sales_user), hourly_project, "2026-02-02", "0")
        assert resp.status_code == 422

    def test_other_users_project_is_not_found(
        self, client: TestClient, developer_user: User, hourly_project: Project, as_user
    ) -> None:
        resp = _log(client, as_user(developer_user), hourly_project, "2026-02-02", "5")
        assert resp.status_code == 404


class TestListHours:
    def test_unbilled_only_filter(
        self,
        client: TestClient,
        db: Session,
        sales_user: User,
        hourly_project: Project,
        as_user,
    ) -> None:
        headers = as_user(sales_user)
        _log(client, headers, hourly_project, "2026-02-02", "10")
        _log(client, headers, hourly_project, "2026-02-09", "12")
        first = db.query(HourlyWork).filter(HourlyWork.week_start == date(2026, 2, 2)).one()
        first.billed = True
        db.commit()

        resp = client.get(f"{BASE}/project/{hourly_project.id}", headers=headers)
        assert len(resp.json()) == 2

        resp = client.get(
            f"{BASE}/project/{hourly_project.id}?unbilled_only=true", headers=headers
        )
        assert [e["week_start"] for e in resp.json()] == ["2026-02-09"]


class TestChangeHours:
    def test_update_unbilled_entry(
        self, client: TestClient, sales_user: User, hourly_project: Project, as_user
    ) -> None:
        headers = as_user(sales_user)
        entry = _log(client, headers, hourly_project, "2026-02-02", "10").json()

        resp = client.patch(f"{BASE}/{entry['id']}", json={"hours": "14"}, headers=headers)
        assert resp.status_code == 200
        assert Decimal(resp.json()["hours"]) == Decimal("14")

    def test_billed_entry_is_locked(
        self,
        client: TestClient,
        db: Session,
        sales_user: User,
        hourly_project: Project,
        as_user,
    ) -> None:
        headers = as_user(sales_user)
        entry = _log(client, headers, hourly_project, "2026-02-02", "10").json()
        db.query(HourlyWork).one().billed = True
        db.commit()

        resp = client.patch(f"{BASE}/{entry['id']}", json={"hours": "14"}, headers=headers)
        assert resp.status_code == 400
        assert client.delete(f"{BASE}/{entry['id']}", headers=headers).status_code == 400

    def test_delete_entry(
        self,
        client: TestClient,
        db: Session,
        sales_user: User,
        hourly_project: Project,
        as_user,
    ) -> None:
        headers = as_user(sales_user)
        entry = _log(client, headers, hourly_project, "2026-02-02", "10").json()

        resp = client.delete(f"{BASE}/{entry['id']}", headers=headers)
        assert resp.status_code == 204
        assert db.query(HourlyWork).count() == 0

    def test_only_the_logger_may_change_an_entry(
        self,
        client: TestClient,
        sales_user: User,
        admin_user: User,
        hourly_project: Project,
        as_user,
    ) -> None:
        entry = _log(client, as_user(sales_user), hourly_project, "2026-02-02", "10").json()

        resp = client.patch(
            f"{BASE}/{entry['id']}", json={"hours": "1"}, headers=as_user(admin_user)
        )
        assert resp.status_code == 404
