from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from backend.app.models.account import AccountType
from backend.app.models.project import BankStatus, WalletStatus


class PaymentCreate(BaseModel):
    project_id: UUID
    amount: Decimal = Field(..., gt=0)
    currency: str = Field(..., min_length=3, max_length=3)
    amount_in_inr: Decimal = Field(..., gt=0)

    platform_wallet_id: UUID
    wallet_status: WalletStatus = WalletStatus.PENDING
    wallet_received_date: date | None = None

    bank_account_id: UUID | None = None
    bank_status: BankStatus = BankStatus.PENDING
    bank_transfer_date: date | None = None

    hours_billed: Decimal | None = Field(None, gt=0)
    hourly_work_entry_ids: list[UUID] = []

    payment_date: date
    notes: str | None = None

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()


class PaymentUpdate(BaseModel):
    """Partial update. Omitted fields keep their current value."""

    amount: Decimal | None = Field(None, gt=0)
    currency: str | None = Field(None, min_length=3, max_length=3)
    amount_in_inr: Decimal | None = Field(None, gt=0)

    platform_wallet_id: UUID | None = None
    wallet_status: WalletStatus | None = None
    wallet_received_date: date | None = None

    bank_account_id: UUID | None = None
    bank_status: BankStatus | None = None
    bank_transfer_date: date | None = None

    hours_billed: Decimal | None = Field(None, gt=0)
    hourly_work_entry_ids: list[UUID] | None = None

    payment_date: date | None = None
    notes: str | None = None

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, v: str | None) -> str | None:
        return v.upper() if v else v


class AccountRef(BaseModel):
    id: UUID
    name: str
    account_type: AccountType

    class Config:
        from_attributes = True


class PaymentOut(BaseModel):
    id: UUID
    project_id: UUID
    amount: Decimal
    currency: str
    amount_in_inr: Decimal
    platform_wallet_id: UUID
    platform_wallet: AccountRef | None = None
    wallet_status: WalletStatus
    wallet_received_date: date | None
    bank_account_id: UUID | None
    bank_account: AccountRef | None = None
    bank_status: BankStatus
    bank_transfer_date: date | None
    hours_billed: Decimal | None
    hourly_work_entry_ids: list[UUID] = []
    payment_date: date
    notes: str | None
    created_at: datetime | None

    class Config:
        from_attributes = True
