"""
Account holder API endpoints.
"""

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from bank_ledger.api.errors import commit, http_error
from bank_ledger.errors import LedgerError
from bank_ledger.config import get_settings
from bank_ledger.models.base import get_db
from bank_ledger.models.enums import LedgerOrder
from bank_ledger.services.account_service import AccountService
from bank_ledger.services.ledger_service import LedgerService
from bank_ledger.schemas.user import UserCreate, UserResponse, UserUpdate
from bank_ledger.schemas.transaction import (
    LedgerCheckResponse,
    TransactionPageResponse,
    TransactionResponse,
)

settings = get_settings()

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UserResponse, status_code=201)
def create_user(
    request: UserCreate,
    db: Session = Depends(get_db),
):
    """Create a new account holder with an opening balance."""
    service = AccountService(db)
    try:
        user = service.create_user(request)
        commit(db)
        return user
    except (ValueError, LedgerError) as e:
        db.rollback()
        raise http_error(e)


@router.get("", response_model=list[UserResponse])
def list_users(db: Session = Depends(get_db)):
    """List all account holders."""
    return AccountService(db).list_users()


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
):
    """Get account holder details, including the current balance."""
    service = AccountService(db)
    try:
        return service.get_user(user_id)
    except LedgerError as e:
        raise http_error(e)


@router.get("/{user_id}/transactions", response_model=TransactionPageResponse)
def get_user_transactions(
    user_id: int,
    order: LedgerOrder = Query(default=LedgerOrder.DESC),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    """Get one page of a user's transactions ordered by date."""
    service = LedgerService(db)
    try:
        result = service.list_by_account(user_id, order, page, limit)
    except LedgerError as e:
        raise http_error(e)

    return TransactionPageResponse(
        results=len(result.items),
        total=result.total,
        total_pages=result.total_pages,
        current_page=result.page,
        items=[TransactionResponse.model_validate(t) for t in result.items],
    )


@router.get("/{user_id}/ledger/verify", response_model=LedgerCheckResponse)
def verify_user_ledger(
    user_id: int,
    db: Session = Depends(get_db),
):
    """Replay a user's ledger and report any inconsistent snapshots."""
    service = LedgerService(db)
    try:
        check = service.verify_ledger(user_id)
    except LedgerError as e:
        raise http_error(e)

    return LedgerCheckResponse(
        user_id=check.user_id,
        balance=check.balance,
        replayed_balance=check.replayed_balance,
        is_consistent=check.is_consistent,
        mismatched_transaction_ids=check.mismatched_transaction_ids,
    )


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    request: UserUpdate,
    db: Session = Depends(get_db),
):
    """Update profile fields. Balances only change through transactions."""
    service = AccountService(db)
    try:
        user = service.update_user(user_id, request)
        commit(db)
        return user
    except (ValueError, LedgerError) as e:
        db.rollback()
        raise http_error(e)


@router.delete("/{user_id}", status_code=204)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
):
    """Delete an account holder and all of their transactions."""
    service = AccountService(db)
    try:
        service.delete_user(user_id)
        commit(db)
    except (ValueError, LedgerError) as e:
        db.rollback()
        raise http_error(e)
    return Response(status_code=204)
