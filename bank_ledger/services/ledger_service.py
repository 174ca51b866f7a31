"""
Ledger service: the core of the banking system.

This service enforces the balance rules:
1. A user's balance equals their opening balance plus the
   effect of every transaction they own
2. Every transaction's updated_balance is the running balance
   right after it, in (date, id) order
3. Create, update and delete keep both rules true by
   replaying the owner's whole ledger, never by patching a
   single row

No other service writes transactions or balances.
"""

import logging
import math
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bank_ledger.errors import (
    AccountNotFound,
    StoreUnavailable,
    TransactionNotFound,
)
from bank_ledger.models.enums import LedgerOrder
from bank_ledger.models.transaction import Transaction
from bank_ledger.models.user import User
from bank_ledger.schemas.transaction import TransactionCreate, TransactionUpdate
from bank_ledger.services.classification import (
    effect,
    parse_amount,
    parse_type,
    to_cents,
    validate_amount,
)

logger = logging.getLogger(__name__)


@dataclass
class Page:
    items: list[Transaction]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


@dataclass
class LedgerCheck:
    """Result of replaying one user's ledger from the opening balance."""
    user_id: int
    balance: Decimal
    replayed_balance: Decimal
    mismatched_transaction_ids: list[int] = field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        return (
            self.balance == self.replayed_balance
            and not self.mismatched_transaction_ids
        )


def _chronological(rows: list[Transaction]) -> list[Transaction]:
    return sorted(rows, key=lambda t: (t.date, t.id))


def _as_naive_utc(value: datetime) -> datetime:
    # Stored dates are naive UTC; mixing aware values breaks ordering
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _total_effect(rows: list[Transaction]) -> Decimal:
    return sum((effect(t.amount, t.type) for t in rows), Decimal("0"))


class LedgerService:
    """
    All transaction writes pass through this service.

    The service takes a database session as a constructor
    argument. Each mutating method is one unit of work: it
    flushes, and the caller commits. If the unit fails the
    session is rolled back before the error propagates.
    """

    def __init__(self, db: Session):
        self.db = db

    # --- Unit of work ---

    @contextmanager
    def _unit_of_work(self, operation: str):
        try:
            yield
            self.db.flush()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning("%s rolled back: %s", operation, e)
            raise StoreUnavailable(
                f"{operation} could not be applied: {e}"
            ) from e
        except Exception:
            self.db.rollback()
            raise

    # --- Store access ---

    def _resolve_user_id(self, user_ref: int | str) -> int:
        """Accept a user id or an email address."""
        if isinstance(user_ref, str):
            user_id = self.db.execute(
                select(User.id).where(User.email == user_ref)
            ).scalar_one_or_none()
            if user_id is None:
                raise AccountNotFound(user_ref)
            return user_id
        return user_ref

    def _lock_user(self, user_id: int) -> User:
        """
        Load a user row with FOR UPDATE.

        The lock is held until the caller commits or rolls
        back, so two mutations on the same ledger never
        interleave their recompute passes.
        """
        user = self.db.execute(
            select(User)
            .where(User.id == user_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if not user:
            raise AccountNotFound(user_id)
        return user

    def _ledger_rows(self, user_id: int) -> list[Transaction]:
        rows = self.db.execute(
            select(Transaction)
            .where(Transaction.user_id == user_id)
            .order_by(Transaction.date.asc(), Transaction.id.asc())
            .execution_options(populate_existing=True)
        ).scalars().all()
        return list(rows)

    def _locked_ledger(self, transaction_id: int):
        """Return (owner, all owner rows, target row) under the owner lock."""
        txn = self.db.get(Transaction, transaction_id)
        if not txn:
            raise TransactionNotFound(transaction_id)

        user = self._lock_user(txn.user_id)
        rows = self._ledger_rows(user.id)

        # Re-read under the lock; the row may have gone meanwhile
        target = next((t for t in rows if t.id == transaction_id), None)
        if target is None:
            raise TransactionNotFound(transaction_id)
        return user, rows, target

    @staticmethod
    def _recompute(baseline: Decimal, rows: list[Transaction]) -> Decimal:
        """Replay rows in (date, id) order, rewriting every snapshot."""
        running = baseline
        for txn in _chronological(rows):
            running += effect(txn.amount, txn.type)
            txn.updated_balance = to_cents(running)
        return to_cents(running)

    # --- Mutations ---

    def create_transaction(
        self, request: TransactionCreate
    ) -> tuple[Transaction, Decimal]:
        """
        Post a new transaction and return it with the new balance.

        The row is inserted at its logical date, which may be
        earlier than existing rows. Rows after it get their
        snapshots refreshed in the same pass.
        """
        txn_type = parse_type(request.type)
        amount = to_cents(parse_amount(request.amount))
        validate_amount(amount, txn_type)
        date = _as_naive_utc(request.date) if request.date else datetime.utcnow()
        user_ref = request.user_id if request.user_id is not None else request.email

        with self._unit_of_work("create_transaction"):
            user = self._lock_user(self._resolve_user_id(user_ref))
            rows = self._ledger_rows(user.id)
            baseline = user.balance - _total_effect(rows)

            txn = Transaction(
                user_id=user.id,
                description=request.description,
                amount=amount,
                type=txn_type,
                date=date,
                updated_balance=to_cents(user.balance + effect(amount, txn_type)),
                is_pending=request.is_pending,
            )
            self.db.add(txn)
            # The new id is the tie-break for rows sharing its date
            self.db.flush()

            user.balance = self._recompute(baseline, rows + [txn])

        logger.info(
            "Created transaction %s (%s %s) for user %s, balance=%s",
            txn.id, txn_type.value, amount, user.id, user.balance,
        )
        return txn, user.balance

    def update_transaction(
        self, transaction_id: int, patch: TransactionUpdate
    ) -> Decimal:
        """
        Apply a partial update and replay the owner's ledger.

        Any change to amount, type or date can move every later
        snapshot, so the whole ledger is recomputed. Returns
        the owner's new balance.
        """
        changes = {
            name: value
            for name, value in patch.model_dump(exclude_unset=True).items()
            if value is not None
        }
        if "type" in changes:
            changes["type"] = parse_type(changes["type"])
        if "amount" in changes:
            changes["amount"] = to_cents(parse_amount(changes["amount"]))
        if "date" in changes:
            changes["date"] = _as_naive_utc(changes["date"])

        with self._unit_of_work("update_transaction"):
            user, rows, target = self._locked_ledger(transaction_id)
            validate_amount(
                changes.get("amount", target.amount),
                changes.get("type", target.type),
            )

            # Baseline from stored values, before the patch lands
            baseline = user.balance - _total_effect(rows)

            for name, value in changes.items():
                setattr(target, name, value)

            user.balance = self._recompute(baseline, rows)

        logger.info(
            "Updated transaction %s (%s) for user %s, balance=%s",
            transaction_id, ", ".join(sorted(changes)) or "no changes",
            user.id, user.balance,
        )
        return user.balance

    def delete_transaction(self, transaction_id: int) -> Decimal:
        """
        Delete a transaction, reversing its effect.

        The remaining rows are replayed so their snapshots no
        longer include the deleted amount. Returns the owner's
        new balance.
        """
        with self._unit_of_work("delete_transaction"):
            user, rows, target = self._locked_ledger(transaction_id)
            baseline = user.balance - _total_effect(rows)

            remaining = [t for t in rows if t.id != target.id]
            self.db.delete(target)

            user.balance = self._recompute(baseline, remaining)

        logger.info(
            "Deleted transaction %s for user %s, balance=%s",
            transaction_id, user.id, user.balance,
        )
        return user.balance

    # --- Queries ---

    def get_transaction(self, transaction_id: int) -> Transaction:
        """Get a transaction by ID."""
        txn = self.db.get(Transaction, transaction_id)
        if not txn:
            raise TransactionNotFound(transaction_id)
        return txn

    def list_by_account(
        self,
        user_id: int,
        order: LedgerOrder | str = LedgerOrder.DESC,
        page: int = 1,
        limit: int = 10,
    ) -> Page:
        """Return one page of a user's transactions ordered by date."""
        order = LedgerOrder(order)
        if page < 1 or limit < 1:
            raise ValueError("page and limit must be positive")
        if not self.db.get(User, user_id):
            raise AccountNotFound(user_id)

        if order is LedgerOrder.ASC:
            ordering = (Transaction.date.asc(), Transaction.id.asc())
        else:
            ordering = (Transaction.date.desc(), Transaction.id.desc())

        items = self.db.execute(
            select(Transaction)
            .where(Transaction.user_id == user_id)
            .order_by(*ordering)
            .offset((page - 1) * limit)
            .limit(limit)
        ).scalars().all()

        total = self.db.execute(
            select(func.count(Transaction.id))
            .where(Transaction.user_id == user_id)
        ).scalar()

        return Page(items=list(items), total=total, page=page, limit=limit)

    def list_transactions(self, page: int = 1, limit: int = 10) -> Page:
        """Return one page of all transactions, newest first."""
        if page < 1 or limit < 1:
            raise ValueError("page and limit must be positive")

        items = self.db.execute(
            select(Transaction)
            .order_by(Transaction.date.desc(), Transaction.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        ).scalars().all()
        total = self.db.execute(select(func.count(Transaction.id))).scalar()

        return Page(items=list(items), total=total, page=page, limit=limit)

    def verify_ledger(self, user_id: int) -> LedgerCheck:
        """
        Replay a user's ledger from the opening balance.

        Read-only. Reports the rows whose stored snapshot
        disagrees with the replay, and whether the stored
        balance matches the replayed end balance.
        """
        user = self.db.get(User, user_id)
        if not user:
            raise AccountNotFound(user_id)

        running = user.opening_balance
        mismatched = []
        for txn in self._ledger_rows(user_id):
            running += effect(txn.amount, txn.type)
            if to_cents(running) != txn.updated_balance:
                mismatched.append(txn.id)

        return LedgerCheck(
            user_id=user.id,
            balance=user.balance,
            replayed_balance=to_cents(running),
            mismatched_transaction_ids=mismatched,
        )
