"""Tests for /api/v1/summary."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from backend.app.models.account import Account, AccountType
from backend.app.models.expense import Expense, ExpenseType
from backend.app.models.project import BankStatus, Project, ProjectPayment, WalletStatus
from backend.app.models.user import User


def _payment(db: Session, project: Project, wallet: Account, inr: str, **status) -> None:
    db.add(
        ProjectPayment(
            project_id=project.id,
            amount=Decimal("10"),
            currency="USD",
            amount_in_inr=Decimal(inr),
            platform_wallet_id=wallet.id,
            payment_date=date(2026, 3, 1),
            **status,
        )
    )
    db.commit()


def _seed(
    db: Session,
    sales_user: User,
    developer_user: User,
    fixed_project: Project,
    wallet: Account,
    bank: Account,
) -> None:
    _payment(db, fixed_project, wallet, "1000")
    _payment(db, fixed_project, wallet, "2000", wallet_status=WalletStatus.ON_HOLD)
    _payment(
        db,
        fixed_project,
        wallet,
        "4000",
        wallet_status=WalletStatus.RELEASED,
        bank_account_id=bank.id,
        bank_status=BankStatus.RELEASED,
    )
    dev_bank = Account(
        user_id=developer_user.id,
        account_type=AccountType.BANK,
        name="Dev Bank",
        balance=Decimal("0"),
    )
    db.add(dev_bank)
    db.commit()
    for user, account, amount in (
        (sales_user, bank, "300"),
        (developer_user, dev_bank, "50"),
    ):
        db.add(
            Expense(
                expense_type=ExpenseType.GENERAL,
                name="Tools",
                amount=Decimal(amount),
                expense_date=date(2026, 3, 2),
                withdraw_account_id=account.id,
                created_by=user.id,
            )
        )
    db.commit()


class TestSummary:
    def test_team_summary(
        self,
        client: TestClient,
        db: Session,
        sales_user: User,
        developer_user: User,
        fixed_project: Project,
        wallet: Account,
        bank: Account,
        as_user,
    ) -> None:
        _seed(db, sales_user, developer_user, fixed_project, wallet, bank)

        resp = client.get("/api/v1/summary/team", headers=as_user(developer_user))
        assert resp.status_code == 200
        body = resp.json()
        assert Decimal(body["total_bank_received"]) == Decimal("4000")
        assert Decimal(body["total_wallet_pending"]) == Decimal("2000")
        assert Decimal(body["total_expenses"]) == Decimal("350")
        assert body["projects"] == 1
        assert len(body["accounts"]) == 3

    def test_user_summary(
        self,
        client: TestClient,
        db: Session,
        sales_user: User,
        developer_user: User,
        fixed_project: Project,
        wallet: Account,
        bank: Account,
        as_user,
    ) -> None:
        _seed(db, sales_user, developer_user, fixed_project, wallet, bank)

        body = client.get("/api/v1/summary/user", headers=as_user(sales_user)).json()
        assert Decimal(body["total_bank_received"]) == Decimal("4000")
        assert Decimal(body["total_expenses"]) == Decimal("300")
        assert body["projects"] == 1
        assert {a["name"] for a in body["accounts"]} == {"Upwork Wallet", "HDFC Current"}
        assert "total_wallet_pending" not in body

        body = client.get("/api/v1/summary/user", headers=as_user(developer_user)).json()
        assert Decimal(body["total_bank_received"]) == Decimal("0")
        assert Decimal(body["total_expenses"]) == Decimal("50")
        assert body["projects"] == 0

    def test_empty_database(self, client: TestClient, admin_user: User, as_user) -> None:
        body = client.get("/api/v1/summary/team", headers=as_user(admin_user)).json()
        assert Decimal(body["total_bank_received"]) == Decimal("0")
        assert body["accounts"] == []
