"""
Database models package.

All models must be imported here so that Base.metadata knows
about every table before create_all() runs.
"""

from bank_ledger.models.base import Base
from bank_ledger.models.enums import Bucket, TransactionType, LedgerOrder
from bank_ledger.models.user import User
from bank_ledger.models.transaction import Transaction

__all__ = [
    "Base",
    "Bucket",
    "TransactionType",
    "LedgerOrder",
    "User",
    "Transaction",
]
