"""Celery application instance.

Start the worker::

    celery -A backend.app.workers.celery_app worker --loglevel=info
    celery -A backend.app.workers.celery_app beat --loglevel=info
"""

from __future__ import annotations

from celery import Celery
from celery.schedules import crontab

from backend.app.core.config import settings

celery = Celery(
    "team_finance",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
)

celery.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone=settings.CELERY_TIMEZONE,
    enable_utc=True,
    task_track_started=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
)

# Auto-discover tasks in workers/tasks/*.py
celery.autodiscover_tasks(["backend.app.workers.tasks"], related_name="reminders")

# Beat schedule: periodic tasks
celery.conf.beat_schedule = {
    "send-expense-reminders-daily": {
        "task": "backend.app.workers.tasks.reminders.send_expense_reminders",
        "schedule": crontab(hour=settings.REMINDER_HOUR, minute=0),
    },
}
