"""
Tests for the AccountService.
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError
from sqlalchemy import select

from bank_ledger.errors import AccountNotFound, InvalidAmount
from bank_ledger.models.transaction import Transaction
from bank_ledger.schemas.transaction import TransactionCreate
from bank_ledger.schemas.user import UserCreate, UserUpdate
from bank_ledger.services.account_service import AccountService
from bank_ledger.services.ledger_service import LedgerService


def user_request(email="jane@test.com", balance="2500.50"):
    return UserCreate(
        name="Jane Doe",
        email=email,
        account_name="Doe Holdings Inc.",
        account_type="SMALL BUSINESS CHK",
        account_number="...4321",
        balance=Decimal(balance),
    )


class TestCreateUser:

    def test_create_user_succeeds(self, db_session):
        service = AccountService(db_session)
        user = service.create_user(user_request())
        db_session.commit()

        assert user.id is not None
        assert user.external_id is not None
        assert user.is_admin is False

    def test_opening_balance_recorded(self, db_session):
        service = AccountService(db_session)
        user = service.create_user(user_request(balance="2500.50"))
        db_session.commit()

        assert user.balance == Decimal("2500.50")
        assert user.opening_balance == Decimal("2500.50")

    def test_duplicate_email_rejected(self, db_session):
        service = AccountService(db_session)
        service.create_user(user_request())
        db_session.commit()

        with pytest.raises(ValueError, match="already in use"):
            service.create_user(user_request())

    def test_duplicate_email_caught_by_unique_index(self, db_session, monkeypatch):
        service = AccountService(db_session)
        service.create_user(user_request())
        db_session.commit()

        # Another request registered the email after the lookup ran
        monkeypatch.setattr(service, "find_by_email", lambda email: None)
        with pytest.raises(ValueError, match="already in use"):
            service.create_user(user_request())
        monkeypatch.undo()

        assert len(service.list_users()) == 1

    def test_opening_balance_too_large_rejected(self, db_session):
        with pytest.raises(InvalidAmount):
            AccountService(db_session).create_user(
                user_request(balance="100000000000000000.00")
            )


class TestLookup:

    def test_get_user(self, db_session):
        service = AccountService(db_session)
        created = service.create_user(user_request())
        db_session.commit()

        assert service.get_user(created.id).email == "jane@test.com"

    def test_get_unknown_user(self, db_session):
        with pytest.raises(AccountNotFound):
            AccountService(db_session).get_user(999)

    def test_find_by_email(self, db_session):
        service = AccountService(db_session)
        service.create_user(user_request())
        db_session.commit()

        assert service.find_by_email("jane@test.com") is not None
        assert service.find_by_email("nobody@test.com") is None

    def test_list_users(self, db_session):
        service = AccountService(db_session)
        service.create_user(user_request("a@test.com"))
        service.create_user(user_request("b@test.com"))
        db_session.commit()

        assert [u.email for u in service.list_users()] == ["a@test.com", "b@test.com"]


class TestUpdateUser:

    def test_profile_fields_updated(self, db_session):
        service = AccountService(db_session)
        user = service.create_user(user_request())
        db_session.commit()

        updated = service.update_user(user.id, UserUpdate(
            name="Jane Smith", phone="555-0100", available_credit=Decimal("250.00"),
        ))
        db_session.commit()

        assert updated.name == "Jane Smith"
        assert updated.phone == "555-0100"
        assert updated.available_credit == Decimal("250.00")
        assert updated.email == "jane@test.com"

    def test_balance_untouched_by_profile_update(self, db_session):
        service = AccountService(db_session)
        user = service.create_user(user_request(balance="2500.50"))
        db_session.commit()

        service.update_user(user.id, UserUpdate(account_name="Renamed LLC"))
        db_session.commit()

        assert service.get_user(user.id).balance == Decimal("2500.50")

    def test_balance_not_accepted(self):
        with pytest.raises(ValidationError):
            UserUpdate(balance=Decimal("1.00"))

    def test_email_taken_by_another_user_rejected(self, db_session):
        service = AccountService(db_session)
        service.create_user(user_request("a@test.com"))
        second = service.create_user(user_request("b@test.com"))
        db_session.commit()

        with pytest.raises(ValueError, match="already in use"):
            service.update_user(second.id, UserUpdate(email="a@test.com"))

    def test_keeping_own_email_allowed(self, db_session):
        service = AccountService(db_session)
        user = service.create_user(user_request())
        db_session.commit()

        updated = service.update_user(user.id, UserUpdate(email="jane@test.com"))

        assert updated.email == "jane@test.com"

    def test_unknown_user(self, db_session):
        with pytest.raises(AccountNotFound):
            AccountService(db_session).update_user(999, UserUpdate(name="Nobody"))


class TestDeleteUser:

    def test_delete_removes_user_and_transactions(self, db_session):
        service = AccountService(db_session)
        user = service.create_user(user_request())
        other = service.create_user(user_request("other@test.com"))
        db_session.commit()
        ledger = LedgerService(db_session)
        for owner in (user, other):
            ledger.create_transaction(TransactionCreate(
                user_id=owner.id, amount="10.00", type="deposit",
            ))
        db_session.commit()

        service.delete_user(user.id)
        db_session.commit()

        with pytest.raises(AccountNotFound):
            service.get_user(user.id)
        remaining = db_session.execute(
            select(Transaction.user_id)
        ).scalars().all()
        assert remaining == [other.id]

    def test_delete_unknown_user(self, db_session):
        with pytest.raises(AccountNotFound):
            AccountService(db_session).delete_user(999)
