from __future__ import annotations

import enum
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.core.database import Base

JSONType = JSON().with_variant(JSONB(), "postgresql")


class AccountType(str, enum.Enum):
    BANK = "bank"
    WALLET = "wallet"


class TxnType(str, enum.Enum):
    CREDIT = "credit"  # money into the account
    DEBIT = "debit"  # money out of the account


class TxnRefType(str, enum.Enum):
    PAYMENT = "payment"
    EXPENSE = "expense"
    MANUAL = "manual"
    TRANSFER = "transfer"
    REVERSAL = "reversal"


class Account(Base):
    """A bank or platform-wallet account.

    ``balance`` is derived: it always equals the sum of the ``delta`` column of
    the account's ledger rows and is only ever changed by
    ``services.ledger.post_account_txn``.
    """

    __tablename__ = "accounts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    account_type: Mapped[AccountType] = mapped_column(Enum(AccountType), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    details: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    balance: Mapped[Decimal] = mapped_column(
        Numeric(precision=20, scale=4), nullable=False, default=Decimal("0")
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    owner: Mapped["User"] = relationship()  # noqa: F821
    txns: Mapped[list[AccountTxn]] = relationship(
        back_populates="account", order_by="AccountTxn.sequence"
    )

    __table_args__ = (
        Index("ix_accounts_user", "user_id"),
        Index("ix_accounts_type", "account_type"),
    )


class AccountTxn(Base):
    """Immutable ledger row.

    ``sequence`` numbers the rows of one account without gaps, so
    ``balance_after`` of row *n* equals ``balance_after`` of row *n-1* plus
    ``delta`` of row *n*.
    """

    __tablename__ = "account_txns"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    account_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("accounts.id"), nullable=False
    )
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    txn_type: Mapped[TxnType] = mapped_column(Enum(TxnType), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=4), nullable=False)
    delta: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=4), nullable=False)
    balance_after: Mapped[Decimal] = mapped_column(
        Numeric(precision=20, scale=4), nullable=False
    )
    ref_type: Mapped[TxnRefType] = mapped_column(Enum(TxnRefType), nullable=False)
    ref_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    remark: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    account: Mapped[Account] = relationship(back_populates="txns")

    __table_args__ = (
        UniqueConstraint("account_id", "sequence", name="uq_account_txn_sequence"),
        CheckConstraint("amount > 0", name="ck_account_txn_amount_positive"),
        Index("ix_account_txns_account", "account_id"),
        Index("ix_account_txns_ref", "ref_type", "ref_id"),
    )
