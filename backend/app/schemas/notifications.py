from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel

from backend.app.models.notification import NotificationType


class NotificationOut(BaseModel):
    id: UUID
    user_id: UUID
    notification_type: NotificationType
    message: str
    read: bool
    data: dict[str, Any] | None
    created_at: datetime

    class Config:
        from_attributes = True
