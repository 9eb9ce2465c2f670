from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.app.api.deps import get_current_user
from backend.app.core.database import get_db
from backend.app.models.user import User
from backend.app.schemas.summary import TeamSummaryOut, UserSummaryOut
from backend.app.services.summary import team_summary, user_summary

router = APIRouter()


@router.get("/team", response_model=TeamSummaryOut)
def get_team_summary(
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
) -> dict:
    return team_summary(db)


@router.get("/user", response_model=UserSummaryOut)
def get_user_summary(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    return user_summary(db, current_user)
