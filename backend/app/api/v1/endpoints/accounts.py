from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from backend.app.api.deps import get_current_user, raise_http
from backend.app.core.database import get_db
from backend.app.models.account import Account, AccountTxn, TxnType
from backend.app.models.user import User
from backend.app.schemas.accounts import (
    AccountCreate,
    AccountOut,
    AccountStatementOut,
    AccountTxnOut,
    AccountUpdate,
    AccountVerificationOut,
    BalanceAdjustment,
    TransferCreate,
    TransferOut,
)
from backend.app.services.accounts import (
    adjust_balance,
    create_account,
    delete_account,
    get_account,
    get_account_statement,
    list_accounts,
    transfer_funds,
    update_account,
)
from backend.app.services.ledger import verify_account

router = APIRouter()


@router.get("", response_model=list[AccountOut])
def get_accounts(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[Account]:
    return list_accounts(db, current_user)


@router.post("", response_model=AccountOut, status_code=status.HTTP_201_CREATED)
def post_account(
    payload: AccountCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Account:
    try:
        account = create_account(
            db,
            user=current_user,
            account_type=payload.account_type,
            name=payload.name,
            details=payload.details,
        )
        db.commit()
        return account
    except ValueError as e:
        raise_http(db, e)


@router.post("/transfers", response_model=TransferOut, status_code=status.HTTP_201_CREATED)
def post_transfer(
    payload: TransferCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict[str, AccountTxn]:
    try:
        out_txn, in_txn = transfer_funds(
            db,
            user=current_user,
            from_account_id=payload.from_account_id,
            to_account_id=payload.to_account_id,
            amount=payload.amount,
            remark=payload.remark,
        )
        db.commit()
        return {"debit": out_txn, "credit": in_txn}
    except ValueError as e:
        raise_http(db, e)


@router.get("/{account_id}", response_model=AccountOut)
def read_account(
    account_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Account:
    try:
        return get_account(db, account_id, current_user)
    except ValueError as e:
        raise_http(db, e)


@router.patch("/{account_id}", response_model=AccountOut)
def patch_account(
    account_id: UUID,
    payload: AccountUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Account:
    try:
        account = update_account(
            db,
            user=current_user,
            account_id=account_id,
            name=payload.name,
            details=payload.details,
        )
        db.commit()
        return account
    except ValueError as e:
        raise_http(db, e)


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_account(
    account_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> None:
    try:
        delete_account(db, user=current_user, account_id=account_id)
        db.commit()
    except ValueError as e:
        raise_http(db, e)


@router.post(
    "/{account_id}/adjustments",
    response_model=AccountTxnOut,
    status_code=status.HTTP_201_CREATED,
)
def post_adjustment(
    account_id: UUID,
    payload: BalanceAdjustment,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> AccountTxn:
    try:
        txn = adjust_balance(
            db,
            user=current_user,
            account_id=account_id,
            txn_type=payload.txn_type,
            amount=payload.amount,
            remark=payload.remark,
        )
        db.commit()
        return txn
    except ValueError as e:
        raise_http(db, e)


@router.get("/{account_id}/statement", response_model=AccountStatementOut)
def read_statement(
    account_id: UUID,
    txn_type: TxnType | None = Query(None, alias="type"),
    start_date: date | None = Query(None, alias="startDate"),
    end_date: date | None = Query(None, alias="endDate"),
    search: str | None = None,
    limit: int = Query(100, ge=1, le=500),
    skip: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    try:
        return get_account_statement(
            db,
            user=current_user,
            account_id=account_id,
            txn_type=txn_type,
            start_date=start_date,
            end_date=end_date,
            search=search,
            limit=limit,
            skip=skip,
        )
    except ValueError as e:
        raise_http(db, e)


@router.get("/{account_id}/verify", response_model=AccountVerificationOut)
def verify(
    account_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    try:
        account = get_account(db, account_id, current_user)
    except ValueError as e:
        raise_http(db, e)
    return verify_account(db, account)
