"""
Typed errors raised by the ledger.

The ledger never maps errors to HTTP responses itself. The
API layer decides status codes; these classes only say what
went wrong. Lookup failures are also LookupErrors and
validation failures are also ValueErrors, so callers that
only care about the broad category can catch those.
"""


class LedgerError(Exception):
    """Base class for every error the ledger raises."""


class AccountNotFound(LedgerError, LookupError):
    def __init__(self, account_ref):
        self.account_ref = account_ref
        super().__init__(f"Account {account_ref} not found")


class TransactionNotFound(LedgerError, LookupError):
    def __init__(self, transaction_id):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction {transaction_id} not found")


class InvalidAmount(LedgerError, ValueError):
    pass


class InvalidTransactionType(LedgerError, ValueError):
    pass


class StoreUnavailable(LedgerError):
    """
    The unit of work could not be committed.

    Raised only after the session has been rolled back, so no
    part of the failed operation is visible in the store.
    """
