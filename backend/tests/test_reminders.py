"""Tests for the expense reminder sweep and the notifications API."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from backend.app.models.account import Account
from backend.app.models.expense import Expense, ExpenseType
from backend.app.models.notification import Notification, NotificationType
from backend.app.models.user import User
from backend.app.services.notifications import create_notification, send_expense_reminders
from backend.app.workers.tasks import reminders


def _expense(db: Session, user: User, account: Account, name: str, reminder_date) -> Expense:
    expense = Expense(
        expense_type=ExpenseType.GENERAL,
        name=name,
        amount=Decimal("100"),
        expense_date=date(2026, 3, 1),
        withdraw_account_id=account.id,
        created_by=user.id,
        reminder=f"Pay {name}" if reminder_date else None,
        reminder_date=reminder_date,
    )
    db.add(expense)
    db.commit()
    return expense


class TestReminderSweep:
    def test_due_reminders_notify_creator_once(
        self, db: Session, owner_user: User, bank: Account
    ) -> None:
        due = _expense(db, owner_user, bank, "Hosting", date(2026, 3, 5))
        _expense(db, owner_user, bank, "Domain", date(2026, 4, 1))
        _expense(db, owner_user, bank, "Coffee", None)

        assert send_expense_reminders(db, today=date(2026, 3, 10)) == 1
        db.commit()

        notes = db.query(Notification).all()
        assert len(notes) == 1
        assert notes[0].user_id == owner_user.id
        assert notes[0].notification_type == NotificationType.EXPENSE_REMINDER
        assert notes[0].message == "Pay Hosting"
        assert notes[0].data["expense_id"] == str(due.id)

        db.refresh(due)
        assert due.reminded is True
        assert send_expense_reminders(db, today=date(2026, 3, 11)) == 0

    def test_reminder_due_today_is_sent(
        self, db: Session, owner_user: User, bank: Account
    ) -> None:
        _expense(db, owner_user, bank, "Rent", date(2026, 3, 10))
        assert send_expense_reminders(db, today=date(2026, 3, 10)) == 1


class TestReminderTask:
    def test_task_commits_and_reports(
        self,
        db: Session,
        owner_user: User,
        bank: Account,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        _expense(db, owner_user, bank, "Hosting", date(2026, 3, 5))
        monkeypatch.setattr(
            "backend.app.core.database.SessionLocal",
            sessionmaker(bind=db.get_bind(), autoflush=False),
        )

        result = reminders.send_expense_reminders("2026-03-10")

        assert result == {"sent": 1, "date": "2026-03-10"}
        assert db.query(Notification).count() == 1


class TestNotificationsApi:
    def test_only_managers_read_notifications(
        self, client: TestClient, sales_user: User, as_user
    ) -> None:
        resp = client.get("/api/v1/notifications", headers=as_user(sales_user))
        assert resp.status_code == 403

    def test_list_and_mark_read(
        self, client: TestClient, db: Session, owner_user: User, admin_user: User, as_user
    ) -> None:
        mine = create_notification(
            db,
            user_id=owner_user.id,
            notification_type=NotificationType.EXPENSE_REMINDER,
            message="Pay Hosting",
        )
        create_notification(
            db,
            user_id=admin_user.id,
            notification_type=NotificationType.EXPENSE_REMINDER,
            message="Not yours",
        )
        db.commit()
        headers = as_user(owner_user)

        resp = client.get("/api/v1/notifications", headers=headers)
        assert [n["message"] for n in resp.json()] == ["Pay Hosting"]

        resp = client.put(f"/api/v1/notifications/{mine.id}/read", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["read"] is True

        resp = client.get("/api/v1/notifications?unread_only=true", headers=headers)
        assert resp.json() == []

    def test_cannot_mark_someone_elses_notification(
        self, client: TestClient, db: Session, owner_user: User, admin_user: User, as_user
    ) -> None:
        other = create_notification(
            db,
            user_id=admin_user.id,
            notification_type=NotificationType.PAYMENT_RECEIVED,
            message="Payment released",
        )
        db.commit()

        resp = client.put(
            f"/api/v1/notifications/{other.id}/read", headers=as_user(owner_user)
        )
        assert resp.status_code == 404
