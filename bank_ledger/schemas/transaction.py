"""
Pydantic schemas for transaction operations.

Amounts and types arrive loosely typed on purpose: the ledger
parses them itself so that a bad amount or an unknown type is
reported as InvalidAmount / InvalidTransactionType rather than
as a generic request validation failure.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from bank_ledger.models.enums import TransactionType


class TransactionCreate(BaseModel):
    """
    Request to post a transaction.

    The owner is identified by user_id or by email; one of
    the two is required.
    """
    user_id: int | None = None
    email: str | None = Field(default=None, max_length=255)
    description: str = Field(default="", max_length=255)
    amount: int | float | str
    type: str = Field(max_length=40)
    date: datetime | None = None
    is_pending: bool = False

    @model_validator(mode="after")
    def owner_required(self):
        if self.user_id is None and not self.email:
            raise ValueError("either user_id or email is required")
        return self


class TransactionUpdate(BaseModel):
    """Partial update. Omitted or null fields keep their values."""
    description: str | None = Field(default=None, max_length=255)
    amount: int | float | str | None = None
    type: str | None = Field(default=None, max_length=40)
    date: datetime | None = None
    is_pending: bool | None = None


class TransactionResponse(BaseModel):
    id: int
    external_id: uuid.UUID
    user_id: int
    description: str
    amount: Decimal
    type: TransactionType
    date: datetime
    updated_balance: Decimal
    is_pending: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TransactionCreateResponse(BaseModel):
    transaction: TransactionResponse
    updated_balance: Decimal


class BalanceResponse(BaseModel):
    """Balance of the owning account after a ledger mutation."""
    user_id: int
    updated_balance: Decimal


class TransactionPageResponse(BaseModel):
    results: int
    total: int
    total_pages: int
    current_page: int
    items: list[TransactionResponse]


class LedgerCheckResponse(BaseModel):
    user_id: int
    balance: Decimal
    replayed_balance: Decimal
    is_consistent: bool
    mismatched_transaction_ids: list[int]
