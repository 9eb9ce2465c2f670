from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.api.deps import get_current_user, raise_http
from backend.app.core.database import get_db
from backend.app.models.project import Project
from backend.app.models.user import User
from backend.app.schemas.projects import ProjectCreate, ProjectOut, ProjectUpdate
from backend.app.services.projects import (
    create_project,
    delete_project,
    get_project_for_user,
    list_projects,
    update_project,
)

router = APIRouter()


@router.get("", response_model=list[ProjectOut])
def get_projects(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[Project]:
    return list_projects(db, current_user)


@router.post("", response_model=ProjectOut, status_code=status.HTTP_201_CREATED)
def post_project(
    payload: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Project:
    try:
        project = create_project(db, user=current_user, data=payload)
        db.commit()
        return project
    except ValueError as e:
        raise_http(db, e)


@router.get("/{project_id}", response_model=ProjectOut)
def read_project(
    project_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Project:
    try:
        return get_project_for_user(db, project_id, current_user)
    except ValueError as e:
        raise_http(db, e)


@router.patch("/{project_id}", response_model=ProjectOut)
def patch_project(
    project_id: UUID,
    payload: ProjectUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Project:
    try:
        project = update_project(db, user=current_user, project_id=project_id, data=payload)
        db.commit()
        return project
    except ValueError as e:
        raise_http(db, e)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_project(
    project_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> None:
    try:
        delete_project(db, user=current_user, project_id=project_id)
        db.commit()
    except ValueError as e:
        raise_http(db, e)
