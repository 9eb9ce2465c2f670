"""Seed the database with an admin user, the usual platforms and expense categories.

Usage:
    python -m backend.scripts.seed
    ADMIN_EMAIL=me@example.com python -m backend.scripts.seed
"""

from __future__ import annotations

import os
from decimal import Decimal

from backend.app.core.database import SessionLocal
from backend.app.models.finance import ExpenseCategory, Platform, RoleEnum, User

PLATFORMS: list[tuple[str, Decimal]] = [
    ("Upwork", Decimal("10")),
    ("Fiverr", Decimal("20")),
    ("Freelancer", Decimal("10")),
    ("Direct", Decimal("0")),
]

EXPENSE_CATEGORIES: list[tuple[str, str]] = [
    ("Software", "Subscriptions and licences"),
    ("Hardware", "Laptops, monitors and peripherals"),
    ("Salaries", "Team payouts"),
    ("Platform Fees", "Withdrawal and connect fees"),
    ("Office", "Rent, internet and utilities"),
]


def seed() -> None:
    db = SessionLocal()
    try:
        # ── Admin user ─────────────────────────────────────────────────
        email = os.environ.get("ADMIN_EMAIL", "admin@example.com").lower()
        admin = db.query(User).filter_by(email=email).first()
        if admin:
            if admin.role != RoleEnum.ADMIN or not admin.is_active:
                admin.role = RoleEnum.ADMIN
                admin.is_active = True
                print("Restored admin role on existing user.")
        else:
            admin = User(name="Admin", email=email, role=RoleEnum.ADMIN)
            db.add(admin)
            db.flush()
            print(f"Created admin user {email} (id {admin.id}).")

        # ── Platforms ──────────────────────────────────────────────────
        for name, charge in PLATFORMS:
            if not db.query(Platform).filter_by(name=name).first():
                db.add(Platform(name=name, charge_percentage=charge))
                print(f"Created platform: {name}")

        # ── Expense categories ─────────────────────────────────────────
        for name, description in EXPENSE_CATEGORIES:
            if not db.query(ExpenseCategory).filter_by(name=name).first():
                db.add(
                    ExpenseCategory(name=name, description=description, created_by=admin.id)
                )
                print(f"Created expense category: {name}")

        db.commit()
        print("Seed complete.")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
