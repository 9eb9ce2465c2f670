"""Team-wide and per-user money totals."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from backend.app.models.account import Account
from backend.app.models.expense import Expense
from backend.app.models.project import (
    BankStatus,
    Project,
    ProjectPayment,
    WalletStatus,
)
from backend.app.models.user import User
from backend.app.services.ledger import money


def _total(db: Session, column, *criteria) -> Decimal:
    value = db.query(func.coalesce(func.sum(column), 0)).filter(*criteria).scalar()
    return money(value)


def team_summary(db: Session) -> dict[str, Any]:
    total_bank_received = _total(
        db,
        ProjectPayment.amount_in_inr,
        ProjectPayment.bank_status == BankStatus.RELEASED,
    )
    total_wallet_pending = _total(
        db,
        ProjectPayment.amount_in_inr,
        ProjectPayment.wallet_status.in_([WalletStatus.ON_HOLD, WalletStatus.RELEASED]),
        ProjectPayment.bank_status != BankStatus.RELEASED,
    )
    total_expenses = _total(db, Expense.amount)
    accounts = db.query(Account).order_by(Account.created_at.asc()).all()
    projects = db.query(func.count(Project.id)).scalar() or 0
    return {
        "total_bank_received": total_bank_received,
        "total_wallet_pending": total_wallet_pending,
        "total_expenses": total_expenses,
        "accounts": accounts,
        "projects": projects,
    }


def user_summary(db: Session, user: User) -> dict[str, Any]:
    total_bank_received = money(
        db.query(func.coalesce(func.sum(ProjectPayment.amount_in_inr), 0))
        .join(Account, ProjectPayment.bank_account_id == Account.id)
        .filter(
            ProjectPayment.bank_status == BankStatus.RELEASED,
            Account.user_id == user.id,
        )
        .scalar()
    )
    total_expenses = _total(db, Expense.amount, Expense.created_by == user.id)
    accounts = (
        db.query(Account)
        .filter(Account.user_id == user.id)
        .order_by(Account.created_at.asc())
        .all()
    )
    projects = (
        db.query(func.count(Project.id)).filter(Project.created_by == user.id).scalar() or 0
    )
    return {
        "total_bank_received": total_bank_received,
        "total_expenses": total_expenses,
        "accounts": accounts,
        "projects": projects,
    }
