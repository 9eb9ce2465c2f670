from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from backend.app.models.expense import ExpenseType


class ExpenseCreate(BaseModel):
    expense_type: ExpenseType
    name: str
    amount: Decimal = Field(..., gt=0)
    expense_date: date
    category_id: UUID | None = None
    withdraw_account_id: UUID
    to_user_id: UUID | None = None
    reminder: str | None = None
    reminder_date: date | None = None
    notes: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name must not be empty")
        return v.strip()


class ExpenseUpdate(BaseModel):
    expense_type: ExpenseType | None = None
    name: str | None = None
    amount: Decimal | None = Field(None, gt=0)
    expense_date: date | None = None
    category_id: UUID | None = None
    withdraw_account_id: UUID | None = None
    to_user_id: UUID | None = None
    reminder: str | None = None
    reminder_date: date | None = None
    notes: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("Name must not be empty")
        return v.strip() if v else v


class ExpenseOut(BaseModel):
    id: UUID
    expense_type: ExpenseType
    name: str
    amount: Decimal
    expense_date: date
    category_id: UUID | None
    withdraw_account_id: UUID
    created_by: UUID
    to_user_id: UUID | None
    reminder: str | None
    reminder_date: date | None
    reminded: bool
    notes: str | None
    created_at: datetime | None

    class Config:
        from_attributes = True


# ─── Categories ──────────────────────────────────────────────────────────────


class ExpenseCategoryIn(BaseModel):
    name: str
    description: str | None = None

    @field_validator("name")
    @classmethod
    def name_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Category name is required")
        return v.strip()


class ExpenseCategoryOut(BaseModel):
    id: UUID
    name: str
    description: str
    created_by: UUID
    created_at: datetime | None
    updated_at: datetime | None

    class Config:
        from_attributes = True
