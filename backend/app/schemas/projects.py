from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from backend.app.models.project import PriceType, ProjectStatus


# ─── Platforms ───────────────────────────────────────────────────────────────


class PlatformCreate(BaseModel):
    name: str
    charge_percentage: Decimal = Field(Decimal("0"), ge=0, le=100)

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Platform name is required")
        return v.strip()


class PlatformUpdate(BaseModel):
    name: str | None = None
    charge_percentage: Decimal | None = Field(None, ge=0, le=100)

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("Platform name is required")
        return v.strip() if v else v


class PlatformOut(BaseModel):
    id: UUID
    name: str
    charge_percentage: Decimal
    created_at: datetime | None

    class Config:
        from_attributes = True


# ─── Projects ────────────────────────────────────────────────────────────────


class ProjectCreate(BaseModel):
    name: str
    client_name: str
    platform_id: UUID
    currency: str = Field(..., min_length=3, max_length=3)
    status: ProjectStatus = ProjectStatus.PENDING
    start_date: date
    end_date: date | None = None
    price_type: PriceType
    hourly_rate: Decimal | None = Field(None, gt=0)
    fixed_price: Decimal | None = Field(None, gt=0)
    budget: Decimal = Field(..., ge=0)

    @field_validator("name", "client_name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Must not be empty")
        return v.strip()

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()

    @model_validator(mode="after")
    def rate_matches_price_type(self) -> ProjectCreate:
        if self.price_type == PriceType.HOURLY and not self.hourly_rate:
            raise ValueError("Hourly projects must have hourly_rate")
        if self.price_type == PriceType.FIXED and not self.fixed_price:
            raise ValueError("Fixed projects must have fixed_price")
        if self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class ProjectUpdate(BaseModel):
    name: str | None = None
    client_name: str | None = None
    platform_id: UUID | None = None
    currency: str | None = Field(None, min_length=3, max_length=3)
    status: ProjectStatus | None = None
    start_date: date | None = None
    end_date: date | None = None
    price_type: PriceType | None = None
    hourly_rate: Decimal | None = Field(None, gt=0)
    fixed_price: Decimal | None = Field(None, gt=0)
    budget: Decimal | None = Field(None, ge=0)

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, v: str | None) -> str | None:
        return v.upper() if v else v


class ProjectOut(BaseModel):
    id: UUID
    name: str
    client_name: str
    platform_id: UUID
    platform_name: str | None = None
    currency: str
    status: ProjectStatus
    start_date: date
    end_date: date | None
    price_type: PriceType
    hourly_rate: Decimal | None
    fixed_price: Decimal | None
    budget: Decimal
    created_by: UUID
    created_at: datetime | None

    class Config:
        from_attributes = True


# ─── Hourly work ─────────────────────────────────────────────────────────────


class HourlyWorkCreate(BaseModel):
    project_id: UUID
    week_start: date
    hours: Decimal = Field(..., gt=0, le=168)


class HourlyWorkUpdate(BaseModel):
    hours: Decimal = Field(..., gt=0, le=168)


class HourlyWorkOut(BaseModel):
    id: UUID
    project_id: UUID
    week_start: date
    hours: Decimal
    user_id: UUID
    billed: bool
    payment_id: UUID | None
    created_at: datetime | None

    class Config:
        from_attributes = True
