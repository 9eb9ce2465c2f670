from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.api.deps import get_current_user, raise_http
from backend.app.core.database import get_db
from backend.app.models.project import Platform
from backend.app.models.user import User
from backend.app.schemas.projects import PlatformCreate, PlatformOut, PlatformUpdate
from backend.app.services.platforms import (
    create_platform,
    delete_platform,
    list_platforms,
    update_platform,
)

router = APIRouter()


@router.get("", response_model=list[PlatformOut])
def get_platforms(
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
) -> list[Platform]:
    return list_platforms(db)


@router.post("", response_model=PlatformOut, status_code=status.HTTP_201_CREATED)
def post_platform(
    payload: PlatformCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Platform:
    try:
        platform = create_platform(
            db,
            user=current_user,
            name=payload.name,
            charge_percentage=payload.charge_percentage,
        )
        db.commit()
        return platform
    except ValueError as e:
        raise_http(db, e)


@router.patch("/{platform_id}", response_model=PlatformOut)
def patch_platform(
    platform_id: UUID,
    payload: PlatformUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Platform:
    try:
        platform = update_platform(
            db,
            user=current_user,
            platform_id=platform_id,
            name=payload.name,
            charge_percentage=payload.charge_percentage,
        )
        db.commit()
        return platform
    except ValueError as e:
        raise_http(db, e)


@router.delete("/{platform_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_platform(
    platform_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> None:
    try:
        delete_platform(db, user=current_user, platform_id=platform_id)
        db.commit()
    except ValueError as e:
        raise_http(db, e)
