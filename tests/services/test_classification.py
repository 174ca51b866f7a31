"""
Tests for transaction classification and amount parsing.
"""

from decimal import Decimal

import pytest

from bank_ledger.errors import InvalidAmount, InvalidTransactionType
from bank_ledger.models.enums import Bucket, TransactionType
from bank_ledger.services.classification import (
    TYPE_BUCKETS,
    classify,
    effect,
    parse_amount,
    to_cents,
    validate_amount,
)


class TestClassify:

    def test_every_type_has_a_bucket(self):
        assert set(TYPE_BUCKETS) == set(TransactionType)

    @pytest.mark.parametrize("value,bucket", [
        ("credit", Bucket.CREDIT),
        ("ach", Bucket.CREDIT),
        ("wire", Bucket.CREDIT),
        ("debit", Bucket.DEBIT),
        ("fee", Bucket.DEBIT),
        ("other", Bucket.OTHER),
        ("incoming_wire", Bucket.CREDIT),
        ("tax_payment", Bucket.DEBIT),
        ("returned_deposit_item", Bucket.OTHER),
    ])
    def test_known_types(self, value, bucket):
        assert classify(value) is bucket

    def test_accepts_enum_member(self):
        assert classify(TransactionType.REFUND) is Bucket.CREDIT

    def test_case_and_whitespace_ignored(self):
        assert classify("  ACH_Debit ") is Bucket.DEBIT

    @pytest.mark.parametrize("value", ["bogus", "", "   ", None, 3])
    def test_unknown_or_missing_type_rejected(self, value):
        with pytest.raises(InvalidTransactionType):
            classify(value)


class TestEffect:

    def test_credit_adds(self):
        assert effect(Decimal("500.00"), "deposit") == Decimal("500.00")

    def test_debit_subtracts(self):
        assert effect(Decimal("200.00"), "card_purchase") == Decimal("-200.00")

    def test_other_keeps_sign(self):
        assert effect(Decimal("-15.00"), "adjustment") == Decimal("-15.00")
        assert effect(Decimal("15.00"), "adjustment") == Decimal("15.00")


class TestParseAmount:

    @pytest.mark.parametrize("value,expected", [
        ("500.00", Decimal("500.00")),
        (" 12.5 ", Decimal("12.5")),
        (42, Decimal("42")),
        (0.1, Decimal("0.1")),
        (Decimal("-3.25"), Decimal("-3.25")),
    ])
    def test_valid_amounts(self, value, expected):
        assert parse_amount(value) == expected

    @pytest.mark.parametrize("value", [
        "not-a-number", "", None, True, "NaN", "Infinity", float("inf"), [1],
    ])
    def test_invalid_amounts(self, value):
        with pytest.raises(InvalidAmount):
            parse_amount(value)

    def test_negative_magnitude_rejected_for_debit(self):
        with pytest.raises(InvalidAmount):
            validate_amount(Decimal("-1"), TransactionType.FEE)

    def test_negative_allowed_for_other(self):
        validate_amount(Decimal("-1"), TransactionType.OTHER)

    def test_to_cents_rounds_half_up(self):
        assert to_cents(Decimal("2.675")) == Decimal("2.68")
        assert to_cents(Decimal("-2.675")) == Decimal("-2.68")

    def test_to_cents_keeps_largest_storable_amount(self):
        assert to_cents(Decimal("99999999999999999.99")) == Decimal("99999999999999999.99")

    @pytest.mark.parametrize("value", [
        Decimal("1e30"),
        Decimal("100000000000000000.00"),
        Decimal("-100000000000000000.00"),
        Decimal("99999999999999999.995"),
    ])
    def test_to_cents_rejects_amounts_too_large_to_store(self, value):
        with pytest.raises(InvalidAmount, match="out of range"):
            to_cents(value)
