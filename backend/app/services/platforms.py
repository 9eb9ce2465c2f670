from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from backend.app.core.exceptions import ConflictError, NotFoundError
from backend.app.models.history import HistoryAction
from backend.app.models.project import Platform, Project
from backend.app.models.user import User
from backend.app.services.history import log_history, snapshot


def _name_taken(db: Session, name: str, exclude_id: UUID | None = None) -> bool:
    query = db.query(Platform).filter(func.lower(Platform.name) == name.lower())
    if exclude_id is not None:
        query = query.filter(Platform.id != exclude_id)
    return query.first() is not None


def list_platforms(db: Session) -> list[Platform]:
    return db.query(Platform).order_by(Platform.name.asc()).all()


def get_platform(db: Session, platform_id: UUID) -> Platform:
    platform = db.query(Platform).filter(Platform.id == platform_id).first()
    if platform is None:
        raise NotFoundError("Platform not found")
    return platform


def create_platform(
    db: Session,
    *,
    user: User,
    name: str,
    charge_percentage: Decimal = Decimal("0"),
) -> Platform:
    """Create a platform. Names are unique case-insensitively."""
    if _name_taken(db, name):
        raise ConflictError("Platform already exists")
    platform = Platform(name=name, charge_percentage=charge_percentage)
    db.add(platform)
    db.flush()

    log_history(
        db,
        user_id=user.id,
        action=HistoryAction.CREATE,
        entity_type="Platform",
        entity_id=platform.id,
        new_value=snapshot(platform),
    )
    return platform


def update_platform(
    db: Session,
    *,
    user: User,
    platform_id: UUID,
    name: str | None = None,
    charge_percentage: Decimal | None = None,
) -> Platform:
    platform = get_platform(db, platform_id)
    old = snapshot(platform)
    if name is not None and name != platform.name:
        if _name_taken(db, name, exclude_id=platform.id):
            raise ConflictError("Platform already exists")
        platform.name = name
    if charge_percentage is not None:
        platform.charge_percentage = charge_percentage
    db.flush()

    log_history(
        db,
        user_id=user.id,
        action=HistoryAction.UPDATE,
        entity_type="Platform",
        entity_id=platform.id,
        old_value=old,
        new_value=snapshot(platform),
    )
    return platform


def delete_platform(db: Session, *, user: User, platform_id: UUID) -> None:
    platform = get_platform(db, platform_id)
    in_use = db.query(Project).filter(Project.platform_id == platform.id).count()
    if in_use:
        raise ConflictError(
            f"Cannot delete platform. It is used by {in_use} project(s)."
        )
    log_history(
        db,
        user_id=user.id,
        action=HistoryAction.DELETE,
        entity_type="Platform",
        entity_id=platform.id,
        old_value=snapshot(platform),
    )
    db.delete(platform)
    db.flush()
