"""Project CRUD. Projects are scoped to the user who created them.

This module does NOT call db.commit(); the endpoint commits.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from backend.app.core.exceptions import ConflictError, NotFoundError
from backend.app.models.history import HistoryAction
from backend.app.models.project import HourlyWork, PriceType, Project, ProjectPayment
from backend.app.models.user import RoleEnum, User
from backend.app.schemas.projects import ProjectCreate, ProjectUpdate
from backend.app.services.history import log_history, snapshot
from backend.app.services.ledger import money
from backend.app.services.platforms import get_platform


def get_project_for_user(db: Session, project_id: UUID, user: User) -> Project:
    """Return the project if *user* created it (admins see every project)."""
    query = db.query(Project).filter(Project.id == project_id)
    if user.role != RoleEnum.ADMIN:
        query = query.filter(Project.created_by == user.id)
    project = query.first()
    if project is None:
        raise NotFoundError("Project not found or not yours")
    return project


def _normalise_rates(project: Project) -> None:
    """Keep only the rate that matches the price type."""
    if project.price_type == PriceType.HOURLY:
        if not project.hourly_rate:
            raise ValueError("Hourly projects must have hourly_rate")
        project.fixed_price = None
    else:
        if not project.fixed_price:
            raise ValueError("Fixed projects must have fixed_price")
        project.hourly_rate = None


def create_project(db: Session, *, user: User, data: ProjectCreate) -> Project:
    get_platform(db, data.platform_id)

    project = Project(
        name=data.name,
        client_name=data.client_name,
        platform_id=data.platform_id,
        currency=data.currency,
        status=data.status,
        start_date=data.start_date,
        end_date=data.end_date,
        price_type=data.price_type,
        hourly_rate=money(data.hourly_rate) if data.hourly_rate else None,
        fixed_price=money(data.fixed_price) if data.fixed_price else None,
        budget=money(data.budget),
        created_by=user.id,
    )
    _normalise_rates(project)
    db.add(project)
    db.flush()

    log_history(
        db,
        user_id=user.id,
        action=HistoryAction.CREATE,
        entity_type="Project",
        entity_id=project.id,
        new_value=snapshot(project),
    )
    return project


def list_projects(db: Session, user: User) -> list[Project]:
    """Return the user's projects, newest first."""
    return (
        db.query(Project)
        .filter(Project.created_by == user.id)
        .order_by(Project.created_at.desc(), Project.name.asc())
        .all()
    )


def update_project(
    db: Session, *, user: User, project_id: UUID, data: ProjectUpdate
) -> Project:
    project = get_project_for_user(db, project_id, user)
    old = snapshot(project)

    fields: dict[str, Any] = data.model_dump(exclude_unset=True)
    if "platform_id" in fields and fields["platform_id"] is not None:
        get_platform(db, fields["platform_id"])
    if (
        "price_type" in fields
        and fields["price_type"] != project.price_type
        and db.query(ProjectPayment).filter(ProjectPayment.project_id == project.id).count()
    ):
        raise ConflictError("Cannot change the price type of a project with payments")

    for key, value in fields.items():
        if value is None and key not in ("end_date", "hourly_rate", "fixed_price"):
            continue
        if key in ("hourly_rate", "fixed_price", "budget") and value is not None:
            value = money(value)
        setattr(project, key, value)

    if project.end_date and project.end_date < project.start_date:
        raise ValueError("end_date must not be before start_date")
    _normalise_rates(project)
    db.flush()

    log_history(
        db,
        user_id=user.id,
        action=HistoryAction.UPDATE,
        entity_type="Project",
        entity_id=project.id,
        old_value=old,
        new_value=snapshot(project),
    )
    return project


def delete_project(db: Session, *, user: User, project_id: UUID) -> None:
    """Delete a project without payments, along with its unbilled hours."""
    project = get_project_for_user(db, project_id, user)
    payment_count = (
        db.query(ProjectPayment).filter(ProjectPayment.project_id == project.id).count()
    )
    if payment_count:
        raise ConflictError(
            f"Cannot delete project with {payment_count} payment(s). Delete the payments first."
        )

    db.query(HourlyWork).filter(HourlyWork.project_id == project.id).delete(
        synchronize_session=False
    )
    log_history(
        db,
        user_id=user.id,
        action=HistoryAction.DELETE,
        entity_type="Project",
        entity_id=project.id,
        old_value=snapshot(project),
    )
    db.delete(project)
    db.flush()
