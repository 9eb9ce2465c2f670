from __future__ import annotations

import enum
import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.core.database import Base


class ProjectStatus(str, enum.Enum):
    PENDING = "pending"
    WORKING = "working"
    COMPLETED = "completed"
    EXTENDED = "extended"
    PAUSED = "paused"


class PriceType(str, enum.Enum):
    FIXED = "fixed"
    HOURLY = "hourly"


class Platform(Base):
    """Freelance marketplace a project is sourced from (Upwork, Fiverr, ...)."""

    __tablename__ = "platforms"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(150), unique=True, nullable=False)
    charge_percentage: Mapped[Decimal] = mapped_column(
        Numeric(precision=5, scale=2), nullable=False, default=Decimal("0")
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint(
            "charge_percentage >= 0 AND charge_percentage <= 100",
            name="ck_platform_charge_range",
        ),
    )


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    client_name: Mapped[str] = mapped_column(String(255), nullable=False)
    platform_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("platforms.id"), nullable=False
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    status: Mapped[ProjectStatus] = mapped_column(
        Enum(ProjectStatus), nullable=False, default=ProjectStatus.PENDING
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    price_type: Mapped[PriceType] = mapped_column(Enum(PriceType), nullable=False)
    hourly_rate: Mapped[Decimal | None] = mapped_column(
        Numeric(precision=20, scale=4), nullable=True
    )
    fixed_price: Mapped[Decimal | None] = mapped_column(
        Numeric(precision=20, scale=4), nullable=True
    )
    budget: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=4), nullable=False)
    created_by: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    platform: Mapped[Platform] = relationship()

    @property
    def platform_name(self) -> str | None:
        return self.platform.name if self.platform else None

    __table_args__ = (
        Index("ix_projects_created_by", "created_by"),
        Index("ix_projects_platform", "platform_id"),
    )


class HourlyWork(Base):
    """One week of logged hours on an hourly project.

    Once a payment bills the entry (``billed`` / ``payment_id``) it is locked.
    """

    __tablename__ = "hourly_work"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    week_start: Mapped[date] = mapped_column(Date, nullable=False)
    hours: Mapped[Decimal] = mapped_column(Numeric(precision=10, scale=2), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    billed: Mapped[bool] = mapped_column(default=False)
    payment_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("project_payments.id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    payment: Mapped["ProjectPayment | None"] = relationship(
        back_populates="hourly_work_entries"
    )

    __table_args__ = (
        CheckConstraint("hours > 0", name="ck_hourly_work_hours_positive"),
        Index("ix_hourly_work_project", "project_id"),
        Index("ix_hourly_work_payment", "payment_id"),
    )


class WalletStatus(str, enum.Enum):
    PENDING = "pending"
    ON_HOLD = "on_hold"
    RELEASED = "released"


class BankStatus(str, enum.Enum):
    PENDING = "pending"
    RELEASED = "released"


class ProjectPayment(Base):
    """A client payment travelling platform wallet → bank account."""

    __tablename__ = "project_payments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("projects.id"), nullable=False
    )

    amount: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=4), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    amount_in_inr: Mapped[Decimal] = mapped_column(
        Numeric(precision=20, scale=4), nullable=False
    )

    # Wallet step
    platform_wallet_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("accounts.id"), nullable=False
    )
    wallet_status: Mapped[WalletStatus] = mapped_column(
        Enum(WalletStatus), nullable=False, default=WalletStatus.PENDING
    )
    wallet_received_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Bank step
    bank_account_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("accounts.id"), nullable=True
    )
    bank_status: Mapped[BankStatus] = mapped_column(
        Enum(BankStatus), nullable=False, default=BankStatus.PENDING
    )
    bank_transfer_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    hours_billed: Mapped[Decimal | None] = mapped_column(
        Numeric(precision=10, scale=2), nullable=True
    )

    payment_date: Mapped[date] = mapped_column(Date, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    project: Mapped[Project] = relationship()
    platform_wallet: Mapped["Account"] = relationship(  # noqa: F821
        foreign_keys=[platform_wallet_id]
    )
    bank_account: Mapped["Account | None"] = relationship(  # noqa: F821
        foreign_keys=[bank_account_id]
    )
    hourly_work_entries: Mapped[list[HourlyWork]] = relationship(
        back_populates="payment", order_by="HourlyWork.week_start"
    )

    @property
    def hourly_work_entry_ids(self) -> list[uuid.UUID]:
        return [entry.id for entry in self.hourly_work_entries]

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_payment_amount_positive"),
        CheckConstraint("amount_in_inr > 0", name="ck_payment_inr_positive"),
        Index("ix_payments_project", "project_id"),
        Index("ix_payments_wallet", "platform_wallet_id"),
        Index("ix_payments_bank", "bank_account_id"),
    )
