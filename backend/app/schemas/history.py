from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from backend.app.models.history import HistoryAction


class HistoryOut(BaseModel):
    id: UUID
    user_id: UUID
    user_name: str | None = None
    action: HistoryAction
    entity_type: str
    entity_id: UUID | None
    description: str
    changes: dict[str, Any] | None
    metadata: dict[str, Any] | None = Field(None, validation_alias="meta")
    timestamp: datetime

    class Config:
        from_attributes = True
