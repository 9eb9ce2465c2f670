from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session

from backend.app.core.exceptions import ConflictError, NotFoundError
from backend.app.models.expense import Expense, ExpenseCategory
from backend.app.models.history import HistoryAction
from backend.app.models.user import User
from backend.app.services.history import log_history, snapshot


def list_categories(db: Session) -> list[ExpenseCategory]:
    return db.query(ExpenseCategory).order_by(ExpenseCategory.name.asc()).all()


def get_category(db: Session, category_id: UUID) -> ExpenseCategory:
    category = db.query(ExpenseCategory).filter(ExpenseCategory.id == category_id).first()
    if category is None:
        raise NotFoundError("Category not found")
    return category


def _name_taken(db: Session, name: str, exclude_id: UUID | None = None) -> bool:
    query = db.query(ExpenseCategory).filter(ExpenseCategory.name == name)
    if exclude_id is not None:
        query = query.filter(ExpenseCategory.id != exclude_id)
    return query.first() is not None


def create_category(
    db: Session, *, user: User, name: str, description: str | None = None
) -> ExpenseCategory:
    if _name_taken(db, name):
        raise ConflictError("Category with this name already exists")
    category = ExpenseCategory(
        name=name,
        description=(description or "").strip(),
        created_by=user.id,
    )
    db.add(category)
    db.flush()

    log_history(
        db,
        user_id=user.id,
        action=HistoryAction.CREATE,
        entity_type="Category",
        entity_id=category.id,
        new_value=snapshot(category),
        description=f"Created expense category: {category.name}",
    )
    return category


def update_category(
    db: Session,
    *,
    user: User,
    category_id: UUID,
    name: str,
    description: str | None = None,
) -> ExpenseCategory:
    category = get_category(db, category_id)
    if _name_taken(db, name, exclude_id=category.id):
        raise ConflictError("Category with this name already exists")
    old = snapshot(category)
    category.name = name
    category.description = (description or "").strip()
    db.flush()

    log_history(
        db,
        user_id=user.id,
        action=HistoryAction.UPDATE,
        entity_type="Category",
        entity_id=category.id,
        old_value=old,
        new_value=snapshot(category),
        description=f"Updated expense category: {category.name}",
    )
    return category


def delete_category(db: Session, *, user: User, category_id: UUID) -> None:
    category = get_category(db, category_id)
    in_use = db.query(Expense).filter(Expense.category_id == category.id).count()
    if in_use:
        raise ConflictError(
            f"Cannot delete category. It is being used by {in_use} expense(s). "
            "Please remove the category from those expenses first."
        )
    log_history(
        db,
        user_id=user.id,
        action=HistoryAction.DELETE,
        entity_type="Category",
        entity_id=category.id,
        old_value=snapshot(category),
        description=f"Deleted expense category: {category.name}",
    )
    db.delete(category)
    db.flush()
