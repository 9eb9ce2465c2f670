"""Bank / wallet account management on top of the ledger.

This module does NOT call db.commit(); the endpoint commits.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session

from backend.app.core.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from backend.app.models.account import Account, AccountTxn, AccountType, TxnRefType, TxnType
from backend.app.models.expense import Expense
from backend.app.models.history import HistoryAction
from backend.app.models.project import ProjectPayment
from backend.app.models.user import RoleEnum, User
from backend.app.services.history import log_history, snapshot
from backend.app.services.ledger import credit, debit, post_account_txn

# Roles that may read any team member's accounts
_TEAM_VIEWERS = {RoleEnum.ADMIN, RoleEnum.OWNER}


def create_account(
    db: Session,
    *,
    user: User,
    account_type: AccountType,
    name: str,
    details: dict[str, Any] | None = None,
) -> Account:
    account = Account(
        user_id=user.id,
        account_type=account_type,
        name=name,
        details=details,
        balance=Decimal("0"),
    )
    db.add(account)
    db.flush()

    log_history(
        db,
        user_id=user.id,
        action=HistoryAction.CREATE,
        entity_type="Account",
        entity_id=account.id,
        new_value=snapshot(account),
    )
    return account


def list_accounts(db: Session, user: User) -> list[Account]:
    """Return the user's own accounts, oldest first."""
    return (
        db.query(Account)
        .filter(Account.user_id == user.id)
        .order_by(Account.created_at.asc(), Account.name.asc())
        .all()
    )


def get_account(db: Session, account_id: UUID, user: User) -> Account:
    """Return an account the user may see (own, or any for admin / owner)."""
    account = db.query(Account).filter(Account.id == account_id).first()
    if account is None:
        raise NotFoundError("Account not found")
    if account.user_id != user.id and user.role not in _TEAM_VIEWERS:
        raise NotFoundError("Account not found")
    return account


def _get_own_account(db: Session, account_id: UUID, user: User) -> Account:
    """Return an account the user may change: only the owner may post to it."""
    account = get_account(db, account_id, user)
    if account.user_id != user.id:
        raise PermissionDeniedError("Only the account owner can change this account")
    return account


def update_account(
    db: Session,
    *,
    user: User,
    account_id: UUID,
    name: str | None = None,
    details: dict[str, Any] | None = None,
) -> Account:
    """Rename an account or replace its details. The balance is not writable."""
    account = _get_own_account(db, account_id, user)
    old = snapshot(account)
    if name is not None:
        account.name = name
    if details is not None:
        account.details = details
    db.flush()

    log_history(
        db,
        user_id=user.id,
        action=HistoryAction.UPDATE,
        entity_type="Account",
        entity_id=account.id,
        old_value=old,
        new_value=snapshot(account),
    )
    return account


def delete_account(db: Session, *, user: User, account_id: UUID) -> None:
    """Delete an account that nothing references.

    Accounts with ledger history, payments or expenses are kept so the
    immutable transaction log stays intact.
    """
    account = _get_own_account(db, account_id, user)

    txn_count = db.query(AccountTxn).filter(AccountTxn.account_id == account.id).count()
    if txn_count:
        raise ConflictError(
            f"Cannot delete account with {txn_count} ledger transaction(s)"
        )
    payment_count = (
        db.query(ProjectPayment)
        .filter(
            or_(
                ProjectPayment.platform_wallet_id == account.id,
                ProjectPayment.bank_account_id == account.id,
            )
        )
        .count()
    )
    expense_count = (
        db.query(Expense).filter(Expense.withdraw_account_id == account.id).count()
    )
    if payment_count or expense_count:
        raise ConflictError(
            "Cannot delete account referenced by "
            f"{payment_count} payment(s) and {expense_count} expense(s)"
        )

    log_history(
        db,
        user_id=user.id,
        action=HistoryAction.DELETE,
        entity_type="Account",
        entity_id=account.id,
        old_value=snapshot(account),
    )
    db.delete(account)
    db.flush()


# ─── Manual postings ─────────────────────────────────────────────────────────


def adjust_balance(
    db: Session,
    *,
    user: User,
    account_id: UUID,
    txn_type: TxnType,
    amount: Decimal,
    remark: str | None = None,
) -> AccountTxn:
    """Post a manual credit / debit (opening balance, bank charges, ...)."""
    account = _get_own_account(db, account_id, user)
    return post_account_txn(
        db,
        user_id=user.id,
        account_id=account.id,
        txn_type=txn_type,
        amount=amount,
        ref_type=TxnRefType.MANUAL,
        remark=remark or f"Manual {txn_type.value}",
    )


def transfer_funds(
    db: Session,
    *,
    user: User,
    from_account_id: UUID,
    to_account_id: UUID,
    amount: Decimal,
    remark: str | None = None,
) -> tuple[AccountTxn, AccountTxn]:
    """Move money between two of the user's accounts.

    DEBIT  source       (transfer)
    CREDIT destination  (transfer)
    """
    if from_account_id == to_account_id:
        raise ValueError("Cannot transfer to the same account")
    source = _get_own_account(db, from_account_id, user)
    destination = _get_own_account(db, to_account_id, user)

    out_txn = debit(
        db,
        user_id=user.id,
        account_id=source.id,
        amount=amount,
        ref_type=TxnRefType.TRANSFER,
        ref_id=destination.id,
        remark=remark or f"Transfer to {destination.name}",
    )
    in_txn = credit(
        db,
        user_id=user.id,
        account_id=destination.id,
        amount=amount,
        ref_type=TxnRefType.TRANSFER,
        ref_id=source.id,
        remark=remark or f"Transfer from {source.name}",
    )
    return out_txn, in_txn


# ─── Statement ───────────────────────────────────────────────────────────────


def get_account_statement(
    db: Session,
    *,
    user: User,
    account_id: UUID,
    txn_type: TxnType | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    search: str | None = None,
    limit: int = 100,
    skip: int = 0,
) -> dict:
    """Return the account and its ledger rows, newest first.

    ``end_date`` is inclusive; ``search`` matches the remark
    case-insensitively. ``total`` is the number of rows before paging.
    """
    account = get_account(db, account_id, user)

    query = db.query(AccountTxn).filter(AccountTxn.account_id == account.id)
    if txn_type is not None:
        query = query.filter(AccountTxn.txn_type == txn_type)
    if start_date is not None:
        query = query.filter(
            AccountTxn.created_at >= datetime.combine(start_date, time.min, tzinfo=timezone.utc)
        )
    if end_date is not None:
        query = query.filter(
            AccountTxn.created_at
            < datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=timezone.utc)
        )
    if search:
        query = query.filter(AccountTxn.remark.ilike(f"%{search.strip()}%"))

    total = query.count()
    txns = (
        query.order_by(AccountTxn.sequence.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return {
        "account": account,
        "txns": txns,
        "total": total,
        "limit": limit,
        "skip": skip,
    }
