from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel

from backend.app.models.account import AccountType


class AccountBalance(BaseModel):
    id: UUID
    user_id: UUID
    name: str
    account_type: AccountType
    balance: Decimal

    class Config:
        from_attributes = True


class UserSummaryOut(BaseModel):
    total_bank_received: Decimal
    total_expenses: Decimal
    accounts: list[AccountBalance]
    projects: int


class TeamSummaryOut(UserSummaryOut):
    total_wallet_pending: Decimal
