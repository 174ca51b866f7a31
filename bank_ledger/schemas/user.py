"""
Pydantic schemas for account holders.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=5, max_length=255, pattern=r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
    phone: str | None = Field(default=None, max_length=40)
    address: str | None = Field(default=None, max_length=255)
    account_name: str = Field(min_length=1, max_length=100)
    account_type: str = Field(min_length=1, max_length=50)
    account_number: str = Field(min_length=1, max_length=34)
    is_admin: bool = False
    balance: Decimal = Field(default=Decimal("0.00"), decimal_places=2)
    available_credit: Decimal = Field(default=Decimal("0.00"), ge=0, decimal_places=2)


class UserResponse(BaseModel):
    id: int
    external_id: uuid.UUID
    name: str
    email: str
    phone: str | None
    address: str | None
    account_name: str
    account_type: str
    account_number: str
    is_admin: bool
    balance: Decimal
    opening_balance: Decimal
    available_credit: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class UserUpdate(BaseModel):
    """
    Partial profile update.

    balance and opening_balance are absent and
    unknown fields are refused, so a balance can never be
    overwritten outside the ledger.
    """
    name: str | None = Field(default=None, min_length=1, max_length=100)
    email: str | None = Field(default=None, min_length=5, max_length=255, pattern=r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
    phone: str | None = Field(default=None, max_length=40)
    address: str | None = Field(default=None, max_length=255)
    account_name: str | None = Field(default=None, min_length=1, max_length=100)
    account_type: str | None = Field(default=None, min_length=1, max_length=50)
    account_number: str | None = Field(default=None, min_length=1, max_length=34)
    is_admin: bool | None = None
    available_credit: Decimal | None = Field(default=None, ge=0, decimal_places=2)

    model_config = {"extra": "forbid"}
