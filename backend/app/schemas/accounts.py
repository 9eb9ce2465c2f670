from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from backend.app.models.account import AccountType, TxnRefType, TxnType


class AccountCreate(BaseModel):
    account_type: AccountType
    name: str
    details: dict[str, Any] | None = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name must not be empty")
        return v.strip()


class AccountUpdate(BaseModel):
    name: str | None = None
    details: dict[str, Any] | None = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("Name must not be empty")
        return v.strip() if v else v


class AccountOut(BaseModel):
    id: UUID
    user_id: UUID
    account_type: AccountType
    name: str
    details: dict[str, Any] | None
    balance: Decimal
    created_at: datetime | None

    class Config:
        from_attributes = True


# ─── Ledger ──────────────────────────────────────────────────────────────────


class AccountTxnOut(BaseModel):
    id: UUID
    account_id: UUID
    sequence: int
    txn_type: TxnType
    amount: Decimal
    delta: Decimal
    balance_after: Decimal
    ref_type: TxnRefType
    ref_id: UUID | None
    remark: str | None
    created_at: datetime

    class Config:
        from_attributes = True


class BalanceAdjustment(BaseModel):
    txn_type: TxnType
    amount: Decimal = Field(..., gt=0)
    remark: str | None = None


class TransferCreate(BaseModel):
    from_account_id: UUID
    to_account_id: UUID
    amount: Decimal = Field(..., gt=0)
    remark: str | None = None

    @model_validator(mode="after")
    def accounts_differ(self) -> TransferCreate:
        if self.from_account_id == self.to_account_id:
            raise ValueError("Cannot transfer to the same account")
        return self


class TransferOut(BaseModel):
    debit: AccountTxnOut
    credit: AccountTxnOut


class AccountStatementOut(BaseModel):
    account: AccountOut
    txns: list[AccountTxnOut]
    total: int
    limit: int
    skip: int


class AccountVerificationOut(BaseModel):
    account_id: str
    stored_balance: Decimal
    ledger_balance: Decimal
    txn_count: int
    broken_sequences: list[int]
    consistent: bool
