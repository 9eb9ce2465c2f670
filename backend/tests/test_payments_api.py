"""Tests for /api/v1/project-payments."""

from __future__ import annotations

from decimal import Decimal

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from backend.app.models.account import Account
from backend.app.models.notification import Notification
from backend.app.models.project import Project
from backend.app.models.user import User

BASE = "/api/v1/project-payments"


def _payload(project: Project, wallet: Account, **overrides) -> dict:
    body = {
        "project_id": str(project.id),
        "amount": "500",
        "currency": "usd",
        "amount_in_inr": "41500",
        "platform_wallet_id": str(wallet.id),
        "payment_date": "2026-03-05",
    }
    body.update(overrides)
    return body


class TestPaymentEndpoints:
    def test_create_on_hold_payment(
        self,
        client: TestClient,
        db: Session,
        sales_user: User,
        fixed_project: Project,
        wallet: Account,
        as_user,
    ) -> None:
        resp = client.post(
            BASE,
            json=_payload(fixed_project, wallet, wallet_status="on_hold"),
            headers=as_user(sales_user),
        )
        assert resp.status_code == 201, resp.text
        body = resp.json()
        assert body["currency"] == "USD"
        assert body["wallet_status"] == "on_hold"
        assert body["platform_wallet"]["name"] == "Upwork Wallet"
        assert body["hourly_work_entry_ids"] == []

        db.refresh(wallet)
        assert wallet.balance == Decimal("41500")

    def test_full_lifecycle(
        self,
        client: TestClient,
        db: Session,
        sales_user: User,
        fixed_project: Project,
        wallet: Account,
        bank: Account,
        as_user,
    ) -> None:
        headers = as_user(sales_user)
        payment = client.post(BASE, json=_payload(fixed_project, wallet), headers=headers).json()

        resp = client.patch(
            f"{BASE}/{payment['id']}",
            json={"wallet_status": "released", "wallet_received_date": "2026-03-06"},
            headers=headers,
        )
        assert resp.status_code == 200, resp.text
        db.refresh(wallet)
        assert wallet.balance == Decimal("41500")

        resp = client.patch(
            f"{BASE}/{payment['id']}",
            json={"bank_account_id": str(bank.id), "bank_status": "released"},
            headers=headers,
        )
        assert resp.status_code == 200
        assert resp.json()["bank_account"]["name"] == "HDFC Current"
        db.refresh(wallet)
        db.refresh(bank)
        assert wallet.balance == Decimal("0")
        assert bank.balance == Decimal("41500")
        assert db.query(Notification).count() == 1

        resp = client.delete(f"{BASE}/{payment['id']}", headers=headers)
        assert resp.status_code == 204
        db.refresh(bank)
        assert bank.balance == Decimal("0")

    def test_invalid_bank_release_rolls_back(
        self,
        client: TestClient,
        db: Session,
        sales_user: User,
        fixed_project: Project,
        wallet: Account,
        as_user,
    ) -> None:
        headers = as_user(sales_user)
        payment = client.post(
            BASE, json=_payload(fixed_project, wallet, wallet_status="on_hold"), headers=headers
        ).json()

        resp = client.patch(
            f"{BASE}/{payment['id']}", json={"bank_status": "released"}, headers=headers
        )
        assert resp.status_code == 400

        resp = client.get(f"{BASE}/{payment['id']}", headers=headers)
        assert resp.json()["bank_status"] == "pending"
        db.refresh(wallet)
        assert wallet.balance == Decimal("41500")

    def test_list_for_project_latest_first(
        self,
        client: TestClient,
        sales_user: User,
        fixed_project: Project,
        wallet: Account,
        as_user,
    ) -> None:
        headers = as_user(sales_user)
        for day in ("2026-03-01", "2026-03-20", "2026-03-10"):
            client.post(
                BASE, json=_payload(fixed_project, wallet, payment_date=day), headers=headers
            )

        resp = client.get(f"{BASE}/project/{fixed_project.id}", headers=headers)
        assert [p["payment_date"] for p in resp.json()] == [
            "2026-03-20",
            "2026-03-10",
            "2026-03-01",
        ]

    def test_other_users_payment_is_hidden(
        self,
        client: TestClient,
        sales_user: User,
        developer_user: User,
        fixed_project: Project,
        wallet: Account,
        as_user,
    ) -> None:
        payment = client.post(
            BASE, json=_payload(fixed_project, wallet), headers=as_user(sales_user)
        ).json()

        resp = client.get(f"{BASE}/{payment['id']}", headers=as_user(developer_user))
        assert resp.status_code == 404

    def test_hourly_payment_bills_entries(
        self,
        client: TestClient,
        sales_user: User,
        hourly_project: Project,
        wallet: Account,
        as_user,
    ) -> None:
        headers = as_user(sales_user)
        entry = client.post(
            "/api/v1/hourly-work",
            json={"project_id": str(hourly_project.id), "week_start": "2026-02-02", "hours": "20"},
            headers=headers,
        ).json()

        resp = client.post(
            BASE,
            json=_payload(hourly_project, wallet, hourly_work_entry_ids=[entry["id"]]),
            headers=headers,
        )
        assert resp.status_code == 201, resp.text
        assert resp.json()["hourly_work_entry_ids"] == [entry["id"]]
        assert Decimal(resp.json()["hours_billed"]) == Decimal("20")

        resp = client.get(
            f"/api/v1/hourly-work/project/{hourly_project.id}?unbilled_only=true",
            headers=headers,
        )
        assert resp.json() == []
