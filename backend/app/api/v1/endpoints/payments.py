from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.api.deps import get_current_user, raise_http
from backend.app.core.database import get_db
from backend.app.models.project import ProjectPayment
from backend.app.models.user import User
from backend.app.schemas.payments import PaymentCreate, PaymentOut, PaymentUpdate
from backend.app.services.settlement import (
    create_payment,
    delete_payment,
    get_payment,
    list_payments_for_project,
    update_payment,
)

router = APIRouter()


@router.post("", response_model=PaymentOut, status_code=status.HTTP_201_CREATED)
def post_payment(
    payload: PaymentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ProjectPayment:
    """Record a payment and post its wallet / bank ledger entries."""
    try:
        payment = create_payment(db, user=current_user, data=payload)
        db.commit()
        return payment
    except ValueError as e:
        raise_http(db, e)


@router.get("/project/{project_id}", response_model=list[PaymentOut])
def get_payments_for_project(
    project_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[ProjectPayment]:
    try:
        return list_payments_for_project(db, project_id, current_user)
    except ValueError as e:
        raise_http(db, e)


@router.get("/{payment_id}", response_model=PaymentOut)
def read_payment(
    payment_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ProjectPayment:
    try:
        return get_payment(db, payment_id, current_user)
    except ValueError as e:
        raise_http(db, e)


@router.patch("/{payment_id}", response_model=PaymentOut)
def patch_payment(
    payment_id: UUID,
    payload: PaymentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ProjectPayment:
    """Update a payment; status moves settle the ledger difference."""
    try:
        payment = update_payment(db, user=current_user, payment_id=payment_id, data=payload)
        db.commit()
        return payment
    except ValueError as e:
        raise_http(db, e)


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_payment(
    payment_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> None:
    try:
        delete_payment(db, user=current_user, payment_id=payment_id)
        db.commit()
    except ValueError as e:
        raise_http(db, e)
