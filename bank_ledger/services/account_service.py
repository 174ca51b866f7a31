"""
Account service: manages account holders.

Opening an account records the holder's opening balance.
After that the balance is only ever changed by the
LedgerService; this service never writes it.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bank_ledger.errors import AccountNotFound
from bank_ledger.models.user import User
from bank_ledger.schemas.user import UserCreate, UserUpdate
from bank_ledger.services.classification import to_cents

logger = logging.getLogger(__name__)


class AccountService:

    def __init__(self, db: Session):
        self.db = db

    def _flush_unique_email(self, email: str) -> None:
        # A concurrent request can register the same email between
        # the lookup and the insert; the unique index catches it
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            raise ValueError(f"Email '{email}' already in use") from None

    def create_user(self, request: UserCreate) -> User:
        """
        Create a new account holder.

        Raises ValueError if the email is already registered.
        """
        existing = self.find_by_email(request.email)
        if existing:
            raise ValueError(f"Email '{request.email}' already in use")

        opening_balance = to_cents(request.balance)
        user = User(
            name=request.name,
            email=request.email,
            phone=request.phone,
            address=request.address,
            account_name=request.account_name,
            account_type=request.account_type,
            account_number=request.account_number,
            is_admin=request.is_admin,
            balance=opening_balance,
            opening_balance=opening_balance,
            available_credit=to_cents(request.available_credit),
        )
        self.db.add(user)
        self._flush_unique_email(request.email)
        logger.info("Created user %s (%s)", user.id, user.email)
        return user

    def update_user(self, user_id: int, request: UserUpdate) -> User:
        """
        Patch profile fields of an account holder.

        Balances are not part of UserUpdate: they only move
        through ledger transactions.
        """
        user = self.get_user(user_id)
        changes = {
            name: value
            for name, value in request.model_dump(exclude_unset=True).items()
            if value is not None
        }

        if "email" in changes and changes["email"] != user.email:
            if self.find_by_email(changes["email"]):
                raise ValueError(f"Email '{changes['email']}' already in use")
        if "available_credit" in changes:
            changes["available_credit"] = to_cents(changes["available_credit"])

        for name, value in changes.items():
            setattr(user, name, value)

        self._flush_unique_email(user.email)
        logger.info(
            "Updated user %s (%s)", user.id, ", ".join(sorted(changes)) or "no changes"
        )
        return user

    def delete_user(self, user_id: int) -> None:
        """
        Delete an account holder together with their transactions.

        The row is locked first so no ledger mutation for this
        holder can run while it is being removed.
        """
        user = self.db.execute(
            select(User).where(User.id == user_id).with_for_update()
        ).scalar_one_or_none()
        if not user:
            raise AccountNotFound(user_id)

        # Transactions go with the user through the delete-orphan cascade
        self.db.delete(user)
        self.db.flush()
        logger.info("Deleted user %s", user_id)

    def get_user(self, user_id: int) -> User:
        """Get a user by ID."""
        user = self.db.get(User, user_id)
        if not user:
            raise AccountNotFound(user_id)
        return user

    def find_by_email(self, email: str) -> User | None:
        return self.db.execute(
            select(User).where(User.email == email)
        ).scalar_one_or_none()

    def list_users(self) -> list[User]:
        users = self.db.execute(
            select(User).order_by(User.id)
        ).scalars().all()
        return list(users)
