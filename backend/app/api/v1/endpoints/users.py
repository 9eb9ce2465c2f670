from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.api.deps import get_current_user, raise_http, require_role
from backend.app.core.database import get_db
from backend.app.models.user import RoleEnum, User
from backend.app.schemas.users import UserCreate, UserOut, UserUpdate
from backend.app.services.user_management import create_user, list_users, update_user

router = APIRouter()

_admin = require_role(RoleEnum.ADMIN)


@router.get("/me", response_model=UserOut)
def read_current_user(current_user: User = Depends(get_current_user)) -> User:
    return current_user


@router.get("", response_model=list[UserOut])
def list_all_users(
    db: Session = Depends(get_db),
    _current_user: User = Depends(_admin),
) -> list[User]:
    """List all users. Admin only."""
    return list_users(db)


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_new_user(
    body: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(_admin),
) -> User:
    """Create a team member. Admin only."""
    try:
        user = create_user(
            db,
            name=body.name,
            email=body.email,
            role=body.role,
            admin_id=current_user.id,
        )
        db.commit()
        return user
    except ValueError as e:
        raise_http(db, e)


@router.patch("/{user_id}", response_model=UserOut)
def update_existing_user(
    user_id: UUID,
    body: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(_admin),
) -> User:
    """Update a user's profile, role or active flag. Admin only."""
    try:
        user = update_user(
            db,
            user_id=user_id,
            admin_id=current_user.id,
            name=body.name,
            email=body.email,
            role=body.role,
            is_active=body.is_active,
        )
        db.commit()
        return user
    except ValueError as e:
        raise_http(db, e)
