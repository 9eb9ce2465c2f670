from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from backend.app.api.deps import get_current_user
from backend.app.core.database import get_db
from backend.app.models.history import History, HistoryAction
from backend.app.models.user import User
from backend.app.schemas.history import HistoryOut
from backend.app.services.history import list_history

router = APIRouter()


@router.get("", response_model=list[HistoryOut])
def get_history(
    user_id: UUID | None = None,
    entity_type: str | None = None,
    entity_id: UUID | None = None,
    action: HistoryAction | None = None,
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
) -> list[History]:
    """Team-wide activity log, readable by every active member."""
    return list_history(
        db,
        user_id=user_id,
        entity_type=entity_type,
        entity_id=entity_id,
        action=action,
        limit=limit,
        offset=offset,
    )
