from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.app.api.deps import raise_http, require_role
from backend.app.core.database import get_db
from backend.app.models.notification import Notification
from backend.app.models.user import RoleEnum, User
from backend.app.schemas.notifications import NotificationOut
from backend.app.services.notifications import list_notifications, mark_as_read

router = APIRouter()

_managers = require_role(RoleEnum.ADMIN, RoleEnum.OWNER)


@router.get("", response_model=list[NotificationOut])
def get_notifications(
    unread_only: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(_managers),
) -> list[Notification]:
    return list_notifications(db, current_user, unread_only=unread_only)


@router.put("/{notification_id}/read", response_model=NotificationOut)
def read_notification(
    notification_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(_managers),
) -> Notification:
    try:
        notification = mark_as_read(db, user=current_user, notification_id=notification_id)
        db.commit()
        return notification
    except ValueError as e:
        raise_http(db, e)
