from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.api.deps import raise_http, require_role
from backend.app.core.database import get_db
from backend.app.models.expense import ExpenseCategory
from backend.app.models.user import RoleEnum, User
from backend.app.schemas.expenses import ExpenseCategoryIn, ExpenseCategoryOut
from backend.app.services.expense_categories import (
    create_category,
    delete_category,
    get_category,
    list_categories,
    update_category,
)

router = APIRouter()

_managers = require_role(RoleEnum.ADMIN, RoleEnum.OWNER)


@router.get("", response_model=list[ExpenseCategoryOut])
def get_categories(
    db: Session = Depends(get_db),
    _current_user: User = Depends(_managers),
) -> list[ExpenseCategory]:
    return list_categories(db)


@router.get("/{category_id}", response_model=ExpenseCategoryOut)
def read_category(
    category_id: UUID,
    db: Session = Depends(get_db),
    _current_user: User = Depends(_managers),
) -> ExpenseCategory:
    try:
        return get_category(db, category_id)
    except ValueError as e:
        raise_http(db, e)


@router.post("", response_model=ExpenseCategoryOut, status_code=status.HTTP_201_CREATED)
def post_category(
    payload: ExpenseCategoryIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(_managers),
) -> ExpenseCategory:
    try:
        category = create_category(
            db, user=current_user, name=payload.name, description=payload.description
        )
        db.commit()
        return category
    except ValueError as e:
        raise_http(db, e)


@router.put("/{category_id}", response_model=ExpenseCategoryOut)
def put_category(
    category_id: UUID,
    payload: ExpenseCategoryIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(_managers),
) -> ExpenseCategory:
    try:
        category = update_category(
            db,
            user=current_user,
            category_id=category_id,
            name=payload.name,
            description=payload.description,
        )
        db.commit()
        return category
    except ValueError as e:
        raise_http(db, e)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_category(
    category_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(_managers),
) -> None:
    try:
        delete_category(db, user=current_user, category_id=category_id)
        db.commit()
    except ValueError as e:
        raise_http(db, e)
