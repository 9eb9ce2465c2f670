"""Expense reminder sweep: notifies creators of expenses whose reminder is due."""

from __future__ import annotations

import logging
from datetime import date

from backend.app.workers.celery_app import celery

logger = logging.getLogger(__name__)


@celery.task(name="backend.app.workers.tasks.reminders.send_expense_reminders")
def send_expense_reminders(today: str | None = None) -> dict:
    """Raise due expense reminders. *today* is an ISO date, defaulting to today."""
    from backend.app.core.database import SessionLocal
    from backend.app.services.notifications import send_expense_reminders as sweep

    db = SessionLocal()
    try:
        run_date = date.fromisoformat(today) if today else date.today()
        sent = sweep(db, today=run_date)
        db.commit()
        return {"sent": sent, "date": run_date.isoformat()}
    except Exception:
        db.rollback()
        logger.exception("Expense reminder sweep failed")
        raise
    finally:
        db.close()
