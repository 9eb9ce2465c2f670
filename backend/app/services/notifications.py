"""In-app notifications and the expense-reminder sweep.

Nothing here commits except through the caller (endpoint or worker task).
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from backend.app.core.exceptions import NotFoundError
from backend.app.models.expense import Expense
from backend.app.models.notification import Notification, NotificationType
from backend.app.models.user import User

logger = logging.getLogger(__name__)


def create_notification(
    db: Session,
    *,
    user_id: UUID,
    notification_type: NotificationType,
    message: str,
    data: dict[str, Any] | None = None,
) -> Notification:
    notification = Notification(
        user_id=user_id,
        notification_type=notification_type,
        message=message,
        data=data,
    )
    db.add(notification)
    return notification


def list_notifications(
    db: Session, user: User, *, unread_only: bool = False
) -> list[Notification]:
    query = db.query(Notification).filter(Notification.user_id == user.id)
    if unread_only:
        query = query.filter(Notification.read.is_(False))
    return query.order_by(Notification.created_at.desc()).all()


def mark_as_read(db: Session, *, user: User, notification_id: UUID) -> Notification:
    notification = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.user_id == user.id)
        .first()
    )
    if notification is None:
        raise NotFoundError("Notification not found")
    notification.read = True
    db.flush()
    return notification


def send_expense_reminders(db: Session, today: date | None = None) -> int:
    """Raise an ``expense_reminder`` for every due, not yet reminded expense.

    Returns the number of notifications created.
    """
    today = today or date.today()
    due = (
        db.query(Expense)
        .filter(
            Expense.reminder_date.is_not(None),
            Expense.reminder_date <= today,
            Expense.reminded.is_(False),
        )
        .order_by(Expense.reminder_date.asc())
        .all()
    )
    for expense in due:
        create_notification(
            db,
            user_id=expense.created_by,
            notification_type=NotificationType.EXPENSE_REMINDER,
            message=expense.reminder or f"Reminder: {expense.name}",
            data={
                "expense_id": str(expense.id),
                "reminder_date": expense.reminder_date.isoformat(),
            },
        )
        expense.reminded = True
    db.flush()

    if due:
        logger.info("Raised %d expense reminder(s) for %s", len(due), today.isoformat())
    return len(due)
