"""User management service: CRUD operations for team members.

All mutations are history-logged. This module does NOT call db.commit();
the caller (endpoint) is responsible for committing.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from backend.app.core.exceptions import ConflictError, NotFoundError
from backend.app.models.history import HistoryAction
from backend.app.models.user import RoleEnum, User
from backend.app.services.history import log_history, snapshot


def list_users(db: Session) -> list[User]:
    """Return all users ordered by creation date descending."""
    return db.query(User).order_by(User.created_at.desc()).all()


def get_user(db: Session, user_id: UUID) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def _email_taken(db: Session, email: str, exclude_id: UUID | None = None) -> bool:
    query = db.query(User).filter(func.lower(User.email) == email.lower())
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


def create_user(
    db: Session,
    *,
    name: str,
    email: str,
    role: RoleEnum,
    admin_id: UUID | None,
) -> User:
    """Create a team member. Raises ConflictError if the email is taken."""
    if _email_taken(db, email):
        raise ConflictError("Email already exists")

    user = User(name=name, email=email.lower(), role=role)
    db.add(user)
    db.flush()

    log_history(
        db,
        user_id=admin_id,
        action=HistoryAction.CREATE,
        entity_type="User",
        entity_id=user.id,
        new_value=snapshot(user),
    )
    return user


def update_user(
    db: Session,
    *,
    user_id: UUID,
    admin_id: UUID,
    name: str | None = None,
    email: str | None = None,
    role: RoleEnum | None = None,
    is_active: bool | None = None,
) -> User:
    """Update a user's profile, role or active flag.

    Admins cannot deactivate themselves.
    """
    user = get_user(db, user_id)
    old = snapshot(user)

    if email is not None and email.lower() != user.email:
        if _email_taken(db, email, exclude_id=user.id):
            raise ConflictError("Email already exists")
        user.email = email.lower()
    if name is not None:
        user.name = name
    if role is not None:
        user.role = role
    if is_active is not None:
        if user.id == admin_id and not is_active:
            raise ValueError("Cannot deactivate yourself")
        user.is_active = is_active
    db.flush()

    log_history(
        db,
        user_id=admin_id,
        action=HistoryAction.UPDATE,
        entity_type="User",
        entity_id=user.id,
        old_value=old,
        new_value=snapshot(user),
    )
    return user
