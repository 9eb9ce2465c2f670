from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from backend.app.core.exceptions import NotFoundError
from backend.app.models.history import HistoryAction
from backend.app.models.project import HourlyWork, PriceType
from backend.app.models.user import User
from backend.app.services.history import log_history, snapshot
from backend.app.services.projects import get_project_for_user


def add_hourly_work(
    db: Session,
    *,
    user: User,
    project_id: UUID,
    week_start: date,
    hours: Decimal,
) -> HourlyWork:
    """Log a week of hours on one of the user's hourly projects."""
    project = get_project_for_user(db, project_id, user)
    if project.price_type != PriceType.HOURLY:
        raise ValueError("Project is not hourly")

    entry = HourlyWork(
        project_id=project.id,
        week_start=week_start,
        hours=hours,
        user_id=user.id,
    )
    db.add(entry)
    db.flush()

    log_history(
        db,
        user_id=user.id,
        action=HistoryAction.CREATE,
        entity_type="HourlyWork",
        entity_id=entry.id,
        new_value=snapshot(entry),
        description=f"Logged {hours} hours for week of {week_start.isoformat()}",
    )
    return entry


def list_hourly_work(
    db: Session, *, user: User, project_id: UUID, unbilled_only: bool = False
) -> list[HourlyWork]:
    get_project_for_user(db, project_id, user)
    query = db.query(HourlyWork).filter(HourlyWork.project_id == project_id)
    if unbilled_only:
        query = query.filter(HourlyWork.billed.is_(False))
    return query.order_by(HourlyWork.week_start.asc()).all()


def _get_own_unbilled(db: Session, entry_id: UUID, user: User) -> HourlyWork:
    entry = (
        db.query(HourlyWork)
        .filter(HourlyWork.id == entry_id, HourlyWork.user_id == user.id)
        .first()
    )
    if entry is None:
        raise NotFoundError("Log not found")
    if entry.billed:
        raise ValueError("Hourly work entry is already billed and cannot be changed")
    return entry


def update_hourly_work(
    db: Session, *, user: User, entry_id: UUID, hours: Decimal
) -> HourlyWork:
    entry = _get_own_unbilled(db, entry_id, user)
    old = snapshot(entry)
    entry.hours = hours
    db.flush()

    log_history(
        db,
        user_id=user.id,
        action=HistoryAction.UPDATE,
        entity_type="HourlyWork",
        entity_id=entry.id,
        old_value=old,
        new_value=snapshot(entry),
    )
    return entry


def delete_hourly_work(db: Session, *, user: User, entry_id: UUID) -> None:
    entry = _get_own_unbilled(db, entry_id, user)
    log_history(
        db,
        user_id=user.id,
        action=HistoryAction.DELETE,
        entity_type="HourlyWork",
        entity_id=entry.id,
        old_value=snapshot(entry),
    )
    db.delete(entry)
    db.flush()
