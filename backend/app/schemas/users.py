from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from backend.app.models.user import RoleEnum


def _check_email(v: str) -> str:
    v = v.strip()
    local, _, domain = v.partition("@")
    if not local or "." not in domain:
        raise ValueError("Invalid email address")
    return v


class UserOut(BaseModel):
    id: UUID
    name: str
    email: str
    role: RoleEnum
    is_active: bool
    created_at: datetime | None

    class Config:
        from_attributes = True


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    email: str = Field(..., max_length=320)
    role: RoleEnum = RoleEnum.SALES

    @field_validator("email")
    @classmethod
    def valid_email(cls, v: str) -> str:
        return _check_email(v)


class UserUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=150)
    email: str | None = Field(None, max_length=320)
    role: RoleEnum | None = None
    is_active: bool | None = None

    @field_validator("email")
    @classmethod
    def valid_email(cls, v: str | None) -> str | None:
        return _check_email(v) if v is not None else v
