"""Account ledger: signed postings against bank / wallet accounts.

Every balance change goes through ``post_account_txn``, which locks the
account row, applies the delta and appends an immutable ``AccountTxn`` with
the closing balance. Nothing here commits; callers post all the rows of one
business operation and commit once, so a settlement is all-or-nothing.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from backend.app.core.exceptions import LedgerError
from backend.app.models.account import Account, AccountTxn, TxnRefType, TxnType

logger = logging.getLogger(__name__)

Q = Decimal("0.0001")
ZERO = Decimal("0")


def money(value: Decimal | int | float | str) -> Decimal:
    """Quantize *value* to 4 decimal places (ROUND_HALF_UP)."""
    return Decimal(str(value)).quantize(Q, rounding=ROUND_HALF_UP)


def post_account_txn(
    db: Session,
    *,
    user_id: UUID,
    account_id: UUID,
    txn_type: TxnType,
    amount: Decimal,
    ref_type: TxnRefType,
    ref_id: UUID | None = None,
    remark: str | None = None,
) -> AccountTxn:
    """Apply a credit / debit to an account and append the ledger row.

    CREDIT  balance += |amount|
    DEBIT   balance -= |amount|
    """
    positive = abs(money(amount))
    if positive == ZERO:
        raise LedgerError("Ledger amount must be greater than 0")

    account = (
        db.query(Account)
        .filter(Account.id == account_id)
        .with_for_update()
        .populate_existing()
        .first()
    )
    if account is None:
        raise LedgerError("Account not found for ledger post")

    delta = positive if txn_type == TxnType.CREDIT else -positive
    last_sequence = (
        db.query(func.max(AccountTxn.sequence))
        .filter(AccountTxn.account_id == account.id)
        .scalar()
    ) or 0

    account.balance = money(account.balance + delta)
    txn = AccountTxn(
        user_id=user_id,
        account_id=account.id,
        sequence=last_sequence + 1,
        txn_type=txn_type,
        amount=positive,
        delta=delta,
        balance_after=account.balance,
        ref_type=ref_type,
        ref_id=ref_id,
        remark=remark,
    )
    db.add(txn)
    db.flush()

    logger.info(
        "Ledger %s %s on account %s (%s) -> balance %s",
        txn_type.value,
        positive,
        account.id,
        ref_type.value,
        account.balance,
    )
    return txn


def credit(db: Session, **kwargs) -> AccountTxn:  # noqa: ANN003
    return post_account_txn(db, txn_type=TxnType.CREDIT, **kwargs)


def debit(db: Session, **kwargs) -> AccountTxn:  # noqa: ANN003
    return post_account_txn(db, txn_type=TxnType.DEBIT, **kwargs)


def verify_account(db: Session, account: Account) -> dict:
    """Check the stored balance against the ledger.

    Recomputes the balance from the deltas and walks the rows in sequence,
    checking each ``balance_after`` chains from its predecessor.
    """
    txns = (
        db.query(AccountTxn)
        .filter(AccountTxn.account_id == account.id)
        .order_by(AccountTxn.sequence.asc())
        .all()
    )
    running = ZERO
    broken: list[int] = []
    for expected_sequence, txn in enumerate(txns, start=1):
        running = money(running + txn.delta)
        if txn.sequence != expected_sequence or money(txn.balance_after) != running:
            broken.append(txn.sequence)

    stored = money(account.balance)
    return {
        "account_id": str(account.id),
        "stored_balance": stored,
        "ledger_balance": running,
        "txn_count": len(txns),
        "broken_sequences": broken,
        "consistent": stored == running and not broken,
    }
