from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from backend.app.api.deps import get_current_user, raise_http
from backend.app.core.database import get_db
from backend.app.models.expense import Expense, ExpenseType
from backend.app.models.user import User
from backend.app.schemas.expenses import ExpenseCreate, ExpenseOut, ExpenseUpdate
from backend.app.services.expenses import (
    create_expense,
    delete_expense,
    get_expense,
    list_expenses,
    update_expense,
)

router = APIRouter()


@router.post("", response_model=ExpenseOut, status_code=status.HTTP_201_CREATED)
def post_expense(
    payload: ExpenseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Expense:
    try:
        expense = create_expense(db, user=current_user, data=payload)
        db.commit()
        return expense
    except ValueError as e:
        raise_http(db, e)


@router.get("", response_model=list[ExpenseOut])
def get_expenses(
    expense_type: ExpenseType | None = Query(None, alias="type"),
    category_id: UUID | None = None,
    account_id: UUID | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
) -> list[Expense]:
    return list_expenses(
        db,
        expense_type=expense_type,
        category_id=category_id,
        account_id=account_id,
        start_date=start_date,
        end_date=end_date,
    )


@router.get("/{expense_id}", response_model=ExpenseOut)
def read_expense(
    expense_id: UUID,
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
) -> Expense:
    try:
        return get_expense(db, expense_id)
    except ValueError as e:
        raise_http(db, e)


@router.patch("/{expense_id}", response_model=ExpenseOut)
def patch_expense(
    expense_id: UUID,
    payload: ExpenseUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Expense:
    try:
        expense = update_expense(db, user=current_user, expense_id=expense_id, data=payload)
        db.commit()
        return expense
    except ValueError as e:
        raise_http(db, e)


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_expense(
    expense_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> None:
    try:
        delete_expense(db, user=current_user, expense_id=expense_id)
        db.commit()
    except ValueError as e:
        raise_http(db, e)
