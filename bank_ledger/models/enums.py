"""
Shared enumerations for database models.

TransactionType is the closed set of transaction types the
ledger accepts. Which way each type moves a balance is not
decided here; see services/classification.py.
"""

import enum


class Bucket(str, enum.Enum):
    """Direction class a transaction type belongs to."""
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"
    OTHER = "OTHER"


class TransactionType(str, enum.Enum):
    # Money in
    CREDIT = "credit"
    ACH = "ach"
    WIRE = "wire"
    DEPOSIT = "deposit"
    DIRECT_DEPOSIT = "direct_deposit"
    CASH_DEPOSIT = "cash_deposit"
    CHECK_DEPOSIT = "check_deposit"
    MOBILE_DEPOSIT = "mobile_deposit"
    INCOMING_WIRE = "incoming_wire"
    ACH_CREDIT = "ach_credit"
    REFUND = "refund"
    INTEREST = "interest"

    # Money out
    DEBIT = "debit"
    FEE = "fee"
    CARD_PURCHASE = "card_purchase"
    BILL_PAYMENT = "bill_payment"
    ACH_DEBIT = "ach_debit"
    OUTGOING_WIRE = "outgoing_wire"
    ATM_WITHDRAWAL = "atm_withdrawal"
    CHECK_PAYMENT = "check_payment"
    LOAN_PAYMENT = "loan_payment"
    TAX_PAYMENT = "tax_payment"
    SERVICE_FEE = "service_fee"
    OVERDRAFT_FEE = "overdraft_fee"

    # Either direction, sign carried by the amount
    OTHER = "other"
    ACCOUNT_TRANSFER = "account_transfer"
    ADJUSTMENT = "adjustment"
    REVERSAL = "reversal"
    RETURNED_DEPOSIT_ITEM = "returned_deposit_item"
    CHARGEBACK = "chargeback"


class LedgerOrder(str, enum.Enum):
    """Date ordering for transaction listings."""
    ASC = "asc"
    DESC = "desc"
