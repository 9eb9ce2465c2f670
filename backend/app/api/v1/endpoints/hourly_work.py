from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.api.deps import get_current_user, raise_http
from backend.app.core.database import get_db
from backend.app.models.project import HourlyWork
from backend.app.models.user import User
from backend.app.schemas.projects import HourlyWorkCreate, HourlyWorkOut, HourlyWorkUpdate
from backend.app.services.hourly_work import (
    add_hourly_work,
    delete_hourly_work,
    list_hourly_work,
    update_hourly_work,
)

router = APIRouter()


@router.post("", response_model=HourlyWorkOut, status_code=status.HTTP_201_CREATED)
def post_hourly_work(
    payload: HourlyWorkCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> HourlyWork:
    try:
        entry = add_hourly_work(
            db,
            user=current_user,
            project_id=payload.project_id,
            week_start=payload.week_start,
            hours=payload.hours,
        )
        db.commit()
        return entry
    except ValueError as e:
        raise_http(db, e)


@router.get("/project/{project_id}", response_model=list[HourlyWorkOut])
def get_hourly_work_for_project(
    project_id: UUID,
    unbilled_only: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[HourlyWork]:
    try:
        return list_hourly_work(
            db, user=current_user, project_id=project_id, unbilled_only=unbilled_only
        )
    except ValueError as e:
        raise_http(db, e)


@router.patch("/{entry_id}", response_model=HourlyWorkOut)
def patch_hourly_work(
    entry_id: UUID,
    payload: HourlyWorkUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> HourlyWork:
    try:
        entry = update_hourly_work(db, user=current_user, entry_id=entry_id, hours=payload.hours)
        db.commit()
        return entry
    except ValueError as e:
        raise_http(db, e)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_hourly_work(
    entry_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> None:
    try:
        delete_hourly_work(db, user=current_user, entry_id=entry_id)
        db.commit()
    except ValueError as e:
        raise_http(db, e)
