"""Business logic services."""

from bank_ledger.services.ledger_service import LedgerService
from bank_ledger.services.account_service import AccountService

__all__ = ["LedgerService", "AccountService"]
