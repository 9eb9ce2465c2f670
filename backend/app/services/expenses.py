"""Expenses and their ledger postings.

    create   DEBIT  withdraw account   amount             (expense)
    edit     DEBIT / CREDIT the difference on the same account
             or CREDIT old account (reversal) + DEBIT new account (expense)
    delete   CREDIT withdraw account   amount             (reversal)

This module does NOT call db.commit(); the endpoint commits.
"""

from __future__ import annotations

from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from backend.app.core.exceptions import NotFoundError
from backend.app.models.account import Account, TxnRefType
from backend.app.models.expense import Expense, ExpenseCategory, ExpenseType
from backend.app.models.history import HistoryAction
from backend.app.models.user import User
from backend.app.schemas.expenses import ExpenseCreate, ExpenseUpdate
from backend.app.services.history import log_history, snapshot
from backend.app.services.ledger import ZERO, credit, debit, money

_NULLABLE_FIELDS = {"category_id", "to_user_id", "reminder", "reminder_date", "notes"}


def _label(expense: Expense) -> str:
    return f"Expense #{str(expense.id)[:8]} {expense.name}"


def _check_references(db: Session, expense: Expense) -> None:
    if db.query(Account).filter(Account.id == expense.withdraw_account_id).first() is None:
        raise NotFoundError("Withdraw account not found")
    if expense.category_id is not None and (
        db.query(ExpenseCategory).filter(ExpenseCategory.id == expense.category_id).first()
        is None
    ):
        raise NotFoundError("Expense category not found")
    if expense.to_user_id is not None:
        if expense.expense_type != ExpenseType.PERSONAL:
            raise ValueError("Only personal expenses can name a withdrawing user")
        if db.query(User).filter(User.id == expense.to_user_id).first() is None:
            raise NotFoundError("User not found")


def create_expense(db: Session, *, user: User, data: ExpenseCreate) -> Expense:
    expense = Expense(
        expense_type=data.expense_type,
        name=data.name,
        amount=money(data.amount),
        expense_date=data.expense_date,
        category_id=data.category_id,
        withdraw_account_id=data.withdraw_account_id,
        created_by=user.id,
        to_user_id=data.to_user_id,
        reminder=data.reminder,
        reminder_date=data.reminder_date,
        notes=data.notes,
    )
    _check_references(db, expense)
    db.add(expense)
    db.flush()

    debit(
        db,
        user_id=user.id,
        account_id=expense.withdraw_account_id,
        amount=expense.amount,
        ref_type=TxnRefType.EXPENSE,
        ref_id=expense.id,
        remark=_label(expense),
    )
    log_history(
        db,
        user_id=user.id,
        action=HistoryAction.CREATE,
        entity_type="Expense",
        entity_id=expense.id,
        new_value=snapshot(expense),
    )
    return expense


def list_expenses(
    db: Session,
    *,
    expense_type: ExpenseType | None = None,
    category_id: UUID | None = None,
    account_id: UUID | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[Expense]:
    """Return expenses, most recent expense_date first."""
    query = db.query(Expense)
    if expense_type is not None:
        query = query.filter(Expense.expense_type == expense_type)
    if category_id is not None:
        query = query.filter(Expense.category_id == category_id)
    if account_id is not None:
        query = query.filter(Expense.withdraw_account_id == account_id)
    if start_date is not None:
        query = query.filter(Expense.expense_date >= start_date)
    if end_date is not None:
        query = query.filter(Expense.expense_date <= end_date)
    return query.order_by(Expense.expense_date.desc(), Expense.created_at.desc()).all()


def get_expense(db: Session, expense_id: UUID) -> Expense:
    expense = db.query(Expense).filter(Expense.id == expense_id).first()
    if expense is None:
        raise NotFoundError("Expense not found")
    return expense


def _get_own_expense(db: Session, expense_id: UUID, user: User) -> Expense:
    expense = (
        db.query(Expense)
        .filter(Expense.id == expense_id, Expense.created_by == user.id)
        .first()
    )
    if expense is None:
        raise NotFoundError("Expense not found")
    return expense


def update_expense(
    db: Session, *, user: User, expense_id: UUID, data: ExpenseUpdate
) -> Expense:
    expense = _get_own_expense(db, expense_id, user)
    old_value = snapshot(expense)
    old_account_id = expense.withdraw_account_id
    old_amount = money(expense.amount)
    old_reminder_date = expense.reminder_date

    fields: dict[str, Any] = data.model_dump(exclude_unset=True)
    for key, value in fields.items():
        if value is None and key not in _NULLABLE_FIELDS:
            continue
        if key == "amount":
            value = money(value)
        setattr(expense, key, value)
    if expense.expense_type != ExpenseType.PERSONAL:
        expense.to_user_id = None
    if expense.reminder_date != old_reminder_date:
        expense.reminded = False
    _check_references(db, expense)
    db.flush()

    new_amount = money(expense.amount)
    if expense.withdraw_account_id == old_account_id:
        diff = new_amount - old_amount
        if diff > ZERO:
            debit(
                db,
                user_id=user.id,
                account_id=expense.withdraw_account_id,
                amount=diff,
                ref_type=TxnRefType.EXPENSE,
                ref_id=expense.id,
                remark=f"{_label(expense)} amount increased",
            )
        elif diff < ZERO:
            credit(
                db,
                user_id=user.id,
                account_id=expense.withdraw_account_id,
                amount=-diff,
                ref_type=TxnRefType.REVERSAL,
                ref_id=expense.id,
                remark=f"{_label(expense)} amount reduced",
            )
    else:
        credit(
            db,
            user_id=user.id,
            account_id=old_account_id,
            amount=old_amount,
            ref_type=TxnRefType.REVERSAL,
            ref_id=expense.id,
            remark=f"{_label(expense)} moved to another account",
        )
        debit(
            db,
            user_id=user.id,
            account_id=expense.withdraw_account_id,
            amount=new_amount,
            ref_type=TxnRefType.EXPENSE,
            ref_id=expense.id,
            remark=_label(expense),
        )

    log_history(
        db,
        user_id=user.id,
        action=HistoryAction.UPDATE,
        entity_type="Expense",
        entity_id=expense.id,
        old_value=old_value,
        new_value=snapshot(expense),
    )
    return expense


def delete_expense(db: Session, *, user: User, expense_id: UUID) -> None:
    expense = _get_own_expense(db, expense_id, user)
    credit(
        db,
        user_id=user.id,
        account_id=expense.withdraw_account_id,
        amount=expense.amount,
        ref_type=TxnRefType.REVERSAL,
        ref_id=expense.id,
        remark=f"{_label(expense)} deleted",
    )
    log_history(
        db,
        user_id=user.id,
        action=HistoryAction.DELETE,
        entity_type="Expense",
        entity_id=expense.id,
        old_value=snapshot(expense),
    )
    db.delete(expense)
    db.flush()
