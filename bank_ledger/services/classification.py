"""
Transaction type classification and balance arithmetic.

TYPE_BUCKETS is the one table that decides which way each
transaction type moves a balance. Create, update, delete and
the recompute pass all go through classify()/effect(), so the
rules cannot drift between operations.

All arithmetic is Decimal. Amounts are rounded to cents only
when they are written to the store (to_cents).
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from bank_ledger.errors import InvalidAmount, InvalidTransactionType
from bank_ledger.models.enums import Bucket, TransactionType

CENTS = Decimal("0.01")

# Largest magnitude a Numeric(19, 2) column holds is just under 10**17
MAX_MAGNITUDE = Decimal(10) ** 17

TYPE_BUCKETS: dict[TransactionType, Bucket] = {
    TransactionType.CREDIT: Bucket.CREDIT,
    TransactionType.ACH: Bucket.CREDIT,
    TransactionType.WIRE: Bucket.CREDIT,
    TransactionType.DEPOSIT: Bucket.CREDIT,
    TransactionType.DIRECT_DEPOSIT: Bucket.CREDIT,
    TransactionType.CASH_DEPOSIT: Bucket.CREDIT,
    TransactionType.CHECK_DEPOSIT: Bucket.CREDIT,
    TransactionType.MOBILE_DEPOSIT: Bucket.CREDIT,
    TransactionType.INCOMING_WIRE: Bucket.CREDIT,
    TransactionType.ACH_CREDIT: Bucket.CREDIT,
    TransactionType.REFUND: Bucket.CREDIT,
    TransactionType.INTEREST: Bucket.CREDIT,

    TransactionType.DEBIT: Bucket.DEBIT,
    TransactionType.FEE: Bucket.DEBIT,
    TransactionType.CARD_PURCHASE: Bucket.DEBIT,
    TransactionType.BILL_PAYMENT: Bucket.DEBIT,
    TransactionType.ACH_DEBIT: Bucket.DEBIT,
    TransactionType.OUTGOING_WIRE: Bucket.DEBIT,
    TransactionType.ATM_WITHDRAWAL: Bucket.DEBIT,
    TransactionType.CHECK_PAYMENT: Bucket.DEBIT,
    TransactionType.LOAN_PAYMENT: Bucket.DEBIT,
    TransactionType.TAX_PAYMENT: Bucket.DEBIT,
    TransactionType.SERVICE_FEE: Bucket.DEBIT,
    TransactionType.OVERDRAFT_FEE: Bucket.DEBIT,

    TransactionType.OTHER: Bucket.OTHER,
    TransactionType.ACCOUNT_TRANSFER: Bucket.OTHER,
    TransactionType.ADJUSTMENT: Bucket.OTHER,
    TransactionType.REVERSAL: Bucket.OTHER,
    TransactionType.RETURNED_DEPOSIT_ITEM: Bucket.OTHER,
    TransactionType.CHARGEBACK: Bucket.OTHER,
}


def parse_type(value) -> TransactionType:
    """
    Resolve a TransactionType from an enum member or its value.

    String input is matched case-insensitively. There is no
    fallback type: anything outside the table is rejected.
    """
    if isinstance(value, TransactionType):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidTransactionType("Transaction type is required")
    try:
        return TransactionType(value.strip().lower())
    except ValueError:
        raise InvalidTransactionType(
            f"Invalid transaction type '{value}'"
        ) from None


def classify(value) -> Bucket:
    """Return the bucket a transaction type belongs to."""
    return TYPE_BUCKETS[parse_type(value)]


def parse_amount(value) -> Decimal:
    """
    Parse a request amount into a finite Decimal.

    Floats go through str() so 0.1 stays 0.1 instead of its
    binary expansion.
    """
    if value is None or isinstance(value, bool):
        raise InvalidAmount("Amount is required and must be a number")
    if isinstance(value, float):
        value = str(value)
    if isinstance(value, str):
        value = value.strip()
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmount(f"Invalid amount '{value}'") from None
    if not amount.is_finite():
        raise InvalidAmount(f"Amount must be finite, got '{value}'")
    return amount


def validate_amount(amount: Decimal, transaction_type: TransactionType) -> None:
    """Credit and debit amounts are magnitudes; only OTHER may be signed."""
    if amount < 0 and TYPE_BUCKETS[transaction_type] is not Bucket.OTHER:
        raise InvalidAmount(
            f"Amount for '{transaction_type.value}' must not be negative"
        )


def effect(amount: Decimal, transaction_type) -> Decimal:
    """Signed balance delta of a transaction."""
    if classify(transaction_type) is Bucket.DEBIT:
        return -amount
    return amount


def to_cents(value: Decimal) -> Decimal:
    """
    Round to cents for storage.

    Money columns are Numeric(19, 2), so anything of 10**17 or
    more cannot be stored and is rejected here, before the
    store sees it.
    """
    value = Decimal(value)
    if not value.is_finite() or abs(value) >= MAX_MAGNITUDE:
        raise InvalidAmount(f"Amount {value} is out of range")
    cents = value.quantize(CENTS, rounding=ROUND_HALF_UP)
    if abs(cents) >= MAX_MAGNITUDE:
        raise InvalidAmount(f"Amount {value} is out of range")
    return cents
