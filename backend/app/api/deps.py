from __future__ import annotations

from typing import NoReturn
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.database import get_db
from backend.app.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
)
from backend.app.models.user import RoleEnum, User


def get_current_user(
    db: Session = Depends(get_db),
    x_user_id: str | None = Header(default=None),
) -> User:
    """Resolve the acting user from the ``X-User-Id`` header."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not identify user",
    )
    if not x_user_id:
        raise credentials_exception
    try:
        user_id = UUID(x_user_id)
    except ValueError:
        raise credentials_exception

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise credentials_exception
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Inactive user"
        )
    return user


def require_role(*roles: RoleEnum):
    """FastAPI dependency factory. The acting user must hold one of *roles*.

    Returns the ``User`` so the endpoint can use it::

        current_user = Depends(require_role(RoleEnum.ADMIN, RoleEnum.OWNER))
    """

    def _checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied: insufficient role",
            )
        return current_user

    return _checker


def raise_http(db: Session, e: ValueError) -> NoReturn:
    """Roll back the unit of work and translate a service error to HTTP."""
    db.rollback()
    if isinstance(e, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(e, ConflictError):
        code = status.HTTP_409_CONFLICT
    elif isinstance(e, PermissionDeniedError):
        code = status.HTTP_403_FORBIDDEN
    else:
        code = status.HTTP_400_BAD_REQUEST
    raise HTTPException(status_code=code, detail=str(e))
