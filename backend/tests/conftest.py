"""Shared test fixtures.

Each test gets its own in-memory SQLite database, created from the models
and thrown away afterwards, so tests never pollute each other. Fixtures
commit their rows because endpoints roll back the session on errors.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from decimal import Decimal
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from backend.app.core.database import Base, build_engine, get_db
from backend.app.main import app
from backend.app.models.finance import (
    Account,
    AccountType,
    Platform,
    PriceType,
    Project,
    RoleEnum,
    TxnRefType,
    User,
)
from backend.app.services.ledger import credit


# ─── Isolated database per test ──────────────────────────────────────────────


@pytest.fixture()
def db() -> Generator[Session, None, None]:
    """Yield a session bound to a fresh in-memory database."""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(engine)
    session = Session(bind=engine, autoflush=False)

    yield session

    session.close()
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def client(db: Session) -> Generator[TestClient, None, None]:
    """FastAPI TestClient wired to the test session."""

    def _override_get_db() -> Generator[Session, None, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ─── Users ───────────────────────────────────────────────────────────────────


def _make_user(db: Session, name: str, role: RoleEnum) -> User:
    user = User(name=name, email=f"{name.lower()}@example.com", role=role)
    db.add(user)
    db.commit()
    return user


@pytest.fixture()
def admin_user(db: Session) -> User:
    return _make_user(db, "Admin", RoleEnum.ADMIN)


@pytest.fixture()
def owner_user(db: Session) -> User:
    return _make_user(db, "Owner", RoleEnum.OWNER)


@pytest.fixture()
def sales_user(db: Session) -> User:
    return _make_user(db, "Sales", RoleEnum.SALES)


@pytest.fixture()
def developer_user(db: Session) -> User:
    return _make_user(db, "Developer", RoleEnum.DEVELOPER)


@pytest.fixture()
def as_user() -> Callable[[User], dict[str, str]]:
    """Return a helper building the acting-user header for a user."""

    def _headers(user: User) -> dict[str, str]:
        return {"X-User-Id": str(user.id)}

    return _headers


# ─── Accounts ────────────────────────────────────────────────────────────────


@pytest.fixture()
def wallet(db: Session, sales_user: User) -> Account:
    account = Account(
        user_id=sales_user.id,
        account_type=AccountType.WALLET,
        name="Upwork Wallet",
        balance=Decimal("0"),
    )
    db.add(account)
    db.commit()
    return account


@pytest.fixture()
def bank(db: Session, sales_user: User) -> Account:
    account = Account(
        user_id=sales_user.id,
        account_type=AccountType.BANK,
        name="HDFC Current",
        balance=Decimal("0"),
    )
    db.add(account)
    db.commit()
    return account


@pytest.fixture()
def second_bank(db: Session, sales_user: User) -> Account:
    account = Account(
        user_id=sales_user.id,
        account_type=AccountType.BANK,
        name="ICICI Savings",
        balance=Decimal("0"),
    )
    db.add(account)
    db.commit()
    return account


@pytest.fixture()
def funded_bank(db: Session, bank: Account, sales_user: User) -> Account:
    """The ``bank`` account with an opening balance of 10,000."""
    credit(
        db,
        user_id=sales_user.id,
        account_id=bank.id,
        amount=Decimal("10000"),
        ref_type=TxnRefType.MANUAL,
        remark="Opening balance",
    )
    db.commit()
    return bank


# ─── Projects ────────────────────────────────────────────────────────────────


@pytest.fixture()
def platform(db: Session) -> Platform:
    p = Platform(name="Upwork", charge_percentage=Decimal("10"))
    db.add(p)
    db.commit()
    return p


@pytest.fixture()
def fixed_project(db: Session, platform: Platform, sales_user: User) -> Project:
    project = Project(
        name="Landing Page",
        client_name="Acme",
        platform_id=platform.id,
        currency="USD",
        start_date=date(2026, 1, 5),
        price_type=PriceType.FIXED,
        fixed_price=Decimal("1200"),
        budget=Decimal("1200"),
        created_by=sales_user.id,
    )
    db.add(project)
    db.commit()
    return project


@pytest.fixture()
def hourly_project(db: Session, platform: Platform, sales_user: User) -> Project:
    project = Project(
        name="Support Retainer",
        client_name="Globex",
        platform_id=platform.id,
        currency="USD",
        start_date=date(2026, 1, 5),
        price_type=PriceType.HOURLY,
        hourly_rate=Decimal("25"),
        budget=Decimal("5000"),
        created_by=sales_user.id,
    )
    db.add(project)
    db.commit()
    return project
