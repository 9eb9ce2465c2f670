"""Project payments and their ledger settlement.

A payment moves money in up to two steps: the client pays into a platform
wallet (on hold, then released by the platform), and the team withdraws it
to a bank account. Where the money currently sits is the payment's *stage*:

    NONE    wallet_status == pending                      nothing posted
    WALLET  wallet on_hold / released, bank not released  wallet holds it
    BANK    bank_status == released                       bank holds it

Every create / update / delete compares the ledger position before and after
the change and posts only what is needed to get from one to the other:

    forward   NONE -> WALLET   CREDIT wallet                      (payment)
              WALLET -> BANK   DEBIT wallet, CREDIT bank          (transfer)
    backward  BANK -> WALLET   DEBIT bank, CREDIT wallet          (reversal)
              WALLET -> NONE   DEBIT wallet                       (reversal)
    amount    same stage       CREDIT / DEBIT the difference      (payment / reversal)
    anything else              unwind the old position, replay the new one

The ledger amount is always ``amount_in_inr``. This module does NOT call
db.commit(); the endpoint commits, so all postings of one change land
together.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from backend.app.core.config import settings
from backend.app.core.exceptions import NotFoundError
from backend.app.models.account import Account, AccountTxn, AccountType, TxnRefType
from backend.app.models.history import HistoryAction
from backend.app.models.notification import NotificationType
from backend.app.models.project import (
    BankStatus,
    HourlyWork,
    PriceType,
    Project,
    ProjectPayment,
    WalletStatus,
)
from backend.app.models.user import User
from backend.app.schemas.payments import PaymentCreate, PaymentUpdate
from backend.app.services.history import log_history, snapshot
from backend.app.services.ledger import ZERO, credit, debit, money
from backend.app.services.notifications import create_notification
from backend.app.services.projects import get_project_for_user

logger = logging.getLogger(__name__)


class Stage(enum.IntEnum):
    NONE = 0
    WALLET = 1
    BANK = 2


def payment_stage(wallet_status: WalletStatus, bank_status: BankStatus) -> Stage:
    if bank_status == BankStatus.RELEASED:
        return Stage.BANK
    if wallet_status in (WalletStatus.ON_HOLD, WalletStatus.RELEASED):
        return Stage.WALLET
    return Stage.NONE


@dataclass(frozen=True)
class Position:
    """The ledger-relevant part of a payment."""

    stage: Stage
    amount: Decimal
    wallet_id: UUID
    bank_id: UUID | None

    @classmethod
    def of(cls, payment: ProjectPayment) -> Position:
        return cls(
            stage=payment_stage(payment.wallet_status, payment.bank_status),
            amount=money(payment.amount_in_inr),
            wallet_id=payment.platform_wallet_id,
            bank_id=payment.bank_account_id,
        )

    @property
    def holder_id(self) -> UUID | None:
        if self.stage == Stage.BANK:
            return self.bank_id
        if self.stage == Stage.WALLET:
            return self.wallet_id
        return None


class _Poster:
    """Posts the ledger rows of one payment with consistent refs and remarks."""

    def __init__(self, db: Session, user_id: UUID, payment_id: UUID) -> None:
        self.db = db
        self.user_id = user_id
        self.payment_id = payment_id
        self.label = f"Payment #{str(payment_id)[:8]}"
        self.txns: list[AccountTxn] = []

    def credit(self, account_id: UUID, amount: Decimal, ref_type: TxnRefType, remark: str) -> None:
        self.txns.append(credit(
            self.db,
            user_id=self.user_id,
            account_id=account_id,
            amount=amount,
            ref_type=ref_type,
            ref_id=self.payment_id,
            remark=f"{self.label} {remark}",
        ))

    def debit(self, account_id: UUID, amount: Decimal, ref_type: TxnRefType, remark: str) -> None:
        self.txns.append(debit(
            self.db,
            user_id=self.user_id,
            account_id=account_id,
            amount=amount,
            ref_type=ref_type,
            ref_id=self.payment_id,
            remark=f"{self.label} {remark}",
        ))

    def advance(self, position: Position, start: Stage, end: Stage) -> None:
        if start < Stage.WALLET <= end:
            self.credit(position.wallet_id, position.amount, TxnRefType.PAYMENT, "received in wallet")
        if start < Stage.BANK <= end:
            self.debit(position.wallet_id, position.amount, TxnRefType.TRANSFER, "released to bank")
            self.credit(position.bank_id, position.amount, TxnRefType.TRANSFER, "received from wallet")

    def retreat(self, position: Position, start: Stage, end: Stage) -> None:
        if end < Stage.BANK <= start:
            self.debit(position.bank_id, position.amount, TxnRefType.REVERSAL, "bank release reversed")
            self.credit(position.wallet_id, position.amount, TxnRefType.REVERSAL, "returned to wallet")
        if end < Stage.WALLET <= start:
            self.debit(position.wallet_id, position.amount, TxnRefType.REVERSAL, "wallet receipt reversed")


def settle_transition(
    db: Session,
    *,
    user_id: UUID,
    payment_id: UUID,
    old: Position,
    new: Position,
) -> list[AccountTxn]:
    """Post the ledger rows that move a payment from *old* to *new*."""
    poster = _Poster(db, user_id, payment_id)
    if old == new or (old.stage == Stage.NONE and new.stage == Stage.NONE):
        return poster.txns

    # A bank is part of the route only while it holds the money on both sides
    bank_held = old.stage == Stage.BANK and new.stage == Stage.BANK
    same_accounts = old.wallet_id == new.wallet_id and (
        old.bank_id == new.bank_id or not bank_held
    )

    if same_accounts and old.amount == new.amount:
        if new.stage > old.stage:
            poster.advance(new, old.stage, new.stage)
        elif new.stage < old.stage:
            poster.retreat(old, old.stage, new.stage)
    elif same_accounts and old.stage == new.stage:
        # Partial reversal / top-up on whichever account holds the money
        diff = new.amount - old.amount
        if diff > ZERO:
            poster.credit(new.holder_id, diff, TxnRefType.PAYMENT, "amount increased")
        else:
            poster.debit(new.holder_id, -diff, TxnRefType.REVERSAL, "amount reduced")
    else:
        poster.retreat(old, old.stage, Stage.NONE)
        poster.advance(new, Stage.NONE, new.stage)

    logger.info(
        "Settled payment %s: %s/%s -> %s/%s (%d ledger rows)",
        payment_id,
        old.stage.name,
        old.amount,
        new.stage.name,
        new.amount,
        len(poster.txns),
    )
    return poster.txns


# ─── Validation helpers ──────────────────────────────────────────────────────


def _require_account(db: Session, account_id: UUID, account_type: AccountType) -> Account:
    account = db.query(Account).filter(Account.id == account_id).first()
    if account is None:
        raise NotFoundError(f"{account_type.value.capitalize()} account not found")
    if account.account_type != account_type:
        raise ValueError(f"Account '{account.name}' is not a {account_type.value} account")
    return account


def _validate_payment(db: Session, payment: ProjectPayment) -> None:
    _require_account(db, payment.platform_wallet_id, AccountType.WALLET)
    if payment.bank_account_id is not None:
        _require_account(db, payment.bank_account_id, AccountType.BANK)

    if payment.bank_status == BankStatus.RELEASED:
        if payment.bank_account_id is None:
            raise ValueError("A bank account is required to release a payment to bank")
        if payment.wallet_status != WalletStatus.RELEASED:
            raise ValueError(
                "Wallet funds must be released before they can be transferred to bank"
            )


def _bill_hourly_entries(
    db: Session,
    payment: ProjectPayment,
    project: Project,
    entry_ids: list[UUID],
    hours_billed: Decimal | None,
) -> None:
    """Tie hourly work entries to the payment.

    Entries dropped from the list are released (unbilled); new ones must be
    unbilled entries of the same project. ``hours_billed`` defaults to the
    entries' total hours.
    """
    if project.price_type != PriceType.HOURLY:
        if entry_ids:
            raise ValueError("Only hourly projects can bill hourly work entries")
        return
    if not entry_ids:
        raise ValueError("Hourly payments must include hourly work entries")

    unique_ids = list(dict.fromkeys(entry_ids))
    entries = db.query(HourlyWork).filter(HourlyWork.id.in_(unique_ids)).all()
    if len(entries) != len(unique_ids):
        raise NotFoundError("Hourly work entry not found")
    for entry in entries:
        if entry.project_id != project.id:
            raise ValueError("Hourly work entry belongs to another project")
        if entry.billed and entry.payment_id != payment.id:
            raise ValueError("Hourly work entry is already billed")

    keep = {entry.id for entry in entries}
    for entry in list(payment.hourly_work_entries):
        if entry.id not in keep:
            entry.billed = False
    for entry in entries:
        entry.billed = True
    payment.hourly_work_entries = sorted(entries, key=lambda e: e.week_start)
    payment.hours_billed = hours_billed or sum(
        (Decimal(str(entry.hours)) for entry in entries), Decimal("0")
    )


def _payment_snapshot(payment: ProjectPayment) -> dict[str, Any]:
    value = snapshot(payment)
    value["hourly_work_entry_ids"] = [str(entry_id) for entry_id in payment.hourly_work_entry_ids]
    return value


def _notify_bank_release(db: Session, payment: ProjectPayment) -> None:
    bank = db.query(Account).filter(Account.id == payment.bank_account_id).first()
    if bank is None:
        return
    create_notification(
        db,
        user_id=bank.user_id,
        notification_type=NotificationType.PAYMENT_RECEIVED,
        message=(
            f"Payment of {money(payment.amount_in_inr)} {settings.BASE_CURRENCY} "
            f"released to {bank.name}"
        ),
        data={"payment_id": str(payment.id), "project_id": str(payment.project_id)},
    )


# ─── CRUD ────────────────────────────────────────────────────────────────────


def get_payment(db: Session, payment_id: UUID, user: User) -> ProjectPayment:
    """Return a payment of one of the user's projects."""
    payment = db.query(ProjectPayment).filter(ProjectPayment.id == payment_id).first()
    if payment is None:
        raise NotFoundError("Payment not found")
    get_project_for_user(db, payment.project_id, user)
    return payment


def list_payments_for_project(
    db: Session, project_id: UUID, user: User
) -> list[ProjectPayment]:
    """Return the project's payments, latest payment_date first."""
    get_project_for_user(db, project_id, user)
    return (
        db.query(ProjectPayment)
        .filter(ProjectPayment.project_id == project_id)
        .order_by(ProjectPayment.payment_date.desc(), ProjectPayment.created_at.desc())
        .all()
    )


def create_payment(db: Session, *, user: User, data: PaymentCreate) -> ProjectPayment:
    """Record a client payment and post whatever its statuses imply."""
    project = get_project_for_user(db, data.project_id, user)

    payment = ProjectPayment(
        project_id=project.id,
        amount=money(data.amount),
        currency=data.currency,
        amount_in_inr=money(data.amount_in_inr),
        platform_wallet_id=data.platform_wallet_id,
        wallet_status=data.wallet_status,
        wallet_received_date=data.wallet_received_date,
        bank_account_id=data.bank_account_id,
        bank_status=data.bank_status,
        bank_transfer_date=data.bank_transfer_date,
        hours_billed=data.hours_billed,
        payment_date=data.payment_date,
        notes=data.notes,
    )
    _validate_payment(db, payment)
    db.add(payment)
    db.flush()

    _bill_hourly_entries(db, payment, project, data.hourly_work_entry_ids, data.hours_billed)
    db.flush()

    empty = Position(Stage.NONE, ZERO, payment.platform_wallet_id, payment.bank_account_id)
    new = Position.of(payment)
    settle_transition(db, user_id=user.id, payment_id=payment.id, old=empty, new=new)
    if new.stage == Stage.BANK:
        _notify_bank_release(db, payment)

    log_history(
        db,
        user_id=user.id,
        action=HistoryAction.CREATE,
        entity_type="Payment",
        entity_id=payment.id,
        new_value=_payment_snapshot(payment),
        description=f"Created payment of {payment.amount} {payment.currency} for {project.name}",
    )
    return payment


def update_payment(
    db: Session, *, user: User, payment_id: UUID, data: PaymentUpdate
) -> ProjectPayment:
    """Apply a partial update and settle the ledger difference.

    On an hourly payment updated without ``hourly_work_entry_ids``, a null
    ``hours_billed`` is recomputed from the entries already billed.
    """
    payment = get_payment(db, payment_id, user)
    project = payment.project
    old_value = _payment_snapshot(payment)
    old = Position.of(payment)

    fields: dict[str, Any] = data.model_dump(exclude_unset=True)
    entry_ids = fields.pop("hourly_work_entry_ids", None)
    hours_billed = fields.get("hours_billed")
    for key, value in fields.items():
        if value is None and key not in (
            "bank_account_id",
            "wallet_received_date",
            "bank_transfer_date",
            "hours_billed",
            "notes",
        ):
            continue
        if key in ("amount", "amount_in_inr"):
            value = money(value)
        setattr(payment, key, value)

    _validate_payment(db, payment)
    if entry_ids is not None:
        _bill_hourly_entries(db, payment, project, entry_ids, hours_billed)
    elif project.price_type == PriceType.HOURLY and payment.hours_billed is None:
        payment.hours_billed = sum(
            (Decimal(str(entry.hours)) for entry in payment.hourly_work_entries),
            Decimal("0"),
        ) or None
    db.flush()

    new = Position.of(payment)
    settle_transition(db, user_id=user.id, payment_id=payment.id, old=old, new=new)
    if new.stage == Stage.BANK and (old.stage != Stage.BANK or old.bank_id != new.bank_id):
        _notify_bank_release(db, payment)

    log_history(
        db,
        user_id=user.id,
        action=HistoryAction.UPDATE,
        entity_type="Payment",
        entity_id=payment.id,
        old_value=old_value,
        new_value=_payment_snapshot(payment),
        description=f"Updated payment for {project.name}",
    )
    return payment


def delete_payment(db: Session, *, user: User, payment_id: UUID) -> None:
    """Reverse every ledger effect of the payment, unbill its hours, delete it."""
    payment = get_payment(db, payment_id, user)
    old_value = _payment_snapshot(payment)
    old = Position.of(payment)

    poster = _Poster(db, user.id, payment.id)
    poster.retreat(old, old.stage, Stage.NONE)

    for entry in list(payment.hourly_work_entries):
        entry.billed = False
    payment.hourly_work_entries = []
    db.flush()

    log_history(
        db,
        user_id=user.id,
        action=HistoryAction.DELETE,
        entity_type="Payment",
        entity_id=payment.id,
        old_value=old_value,
        description=f"Deleted payment of {payment.amount} {payment.currency}",
    )
    db.delete(payment)
    db.flush()
    logger.info("Deleted payment %s (%d reversal rows)", payment_id, len(poster.txns))
