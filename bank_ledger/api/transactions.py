"""
Transaction API endpoints.

The API layer is thin: it maps errors to status codes and
commits the unit of work. All balance rules live in the
LedgerService.
"""

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from bank_ledger.api.errors import commit, http_error
from bank_ledger.errors import LedgerError
from bank_ledger.config import get_settings
from bank_ledger.models.base import get_db
from bank_ledger.services.ledger_service import LedgerService
from bank_ledger.schemas.transaction import (
    BalanceResponse,
    TransactionCreate,
    TransactionCreateResponse,
    TransactionPageResponse,
    TransactionResponse,
    TransactionUpdate,
)

settings = get_settings()

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.get("", response_model=TransactionPageResponse)
def list_transactions(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    """List all transactions, newest first."""
    result = LedgerService(db).list_transactions(page, limit)
    return TransactionPageResponse(
        results=len(result.items),
        total=result.total,
        total_pages=result.total_pages,
        current_page=result.page,
        items=[TransactionResponse.model_validate(t) for t in result.items],
    )


@router.post("", response_model=TransactionCreateResponse, status_code=201)
def create_transaction(
    request: TransactionCreate,
    db: Session = Depends(get_db),
):
    """Post a transaction and return it with the owner's new balance."""
    service = LedgerService(db)
    try:
        txn, balance = service.create_transaction(request)
        commit(db)
    except LedgerError as e:
        raise http_error(e)

    return TransactionCreateResponse(
        transaction=TransactionResponse.model_validate(txn),
        updated_balance=balance,
    )


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
):
    """Get transaction details."""
    service = LedgerService(db)
    try:
        return service.get_transaction(transaction_id)
    except LedgerError as e:
        raise http_error(e)


@router.patch("/{transaction_id}", response_model=BalanceResponse)
def update_transaction(
    transaction_id: int,
    request: TransactionUpdate,
    db: Session = Depends(get_db),
):
    """
    Update a transaction.

    Every snapshot in the owner's ledger is recomputed, not
    just the edited row.
    """
    service = LedgerService(db)
    try:
        balance = service.update_transaction(transaction_id, request)
        user_id = service.get_transaction(transaction_id).user_id
        commit(db)
    except LedgerError as e:
        raise http_error(e)

    return BalanceResponse(user_id=user_id, updated_balance=balance)


@router.delete("/{transaction_id}", status_code=204)
def delete_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
):
    """Delete a transaction and reverse its effect on the balance."""
    service = LedgerService(db)
    try:
        service.delete_transaction(transaction_id)
        commit(db)
    except LedgerError as e:
        raise http_error(e)
    return Response(status_code=204)
