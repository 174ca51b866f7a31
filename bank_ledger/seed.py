"""
Development data seeder.

Creates account holders with random opening balances and
posts a dated series of transactions for each of them. All
transactions go through the LedgerService, so the seeded data
satisfies the same balance rules as live data.

Run with:
    python -m bank_ledger.seed
"""

import logging
import random
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from bank_ledger.config import get_settings
from bank_ledger.logging_config import setup_logging
from bank_ledger.models.enums import Bucket, TransactionType
from bank_ledger.models.user import User
from bank_ledger.schemas.transaction import TransactionCreate
from bank_ledger.schemas.user import UserCreate
from bank_ledger.services.account_service import AccountService
from bank_ledger.services.classification import TYPE_BUCKETS
from bank_ledger.services.ledger_service import LedgerService

logger = logging.getLogger(__name__)

FIRST_NAMES = [
    "James", "John", "Robert", "Michael", "William",
    "Mary", "Patricia", "Jennifer", "Linda", "Elizabeth",
]
LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Jones", "Brown",
    "Davis", "Miller", "Wilson", "Moore", "Taylor",
]
COMPANY_PREFIXES = ["Alpha", "Delta", "Global", "Nova", "Summit", "Vertex"]
COMPANY_KINDS = ["Tech", "Solutions", "Holdings", "Logistics", "Partners"]
ACCOUNT_TYPES = [
    "BUS COMPLETE CHK",
    "PREMIUM BUSINESS CHK",
    "SMALL BUSINESS CHK",
    "PLATINUM BUSINESS",
]

# (low, high) amount range per bucket; OTHER may go either way
AMOUNT_RANGES = {
    Bucket.CREDIT: (100, 10000),
    Bucket.DEBIT: (10, 2000),
    Bucket.OTHER: (-1000, 1000),
}

DEFAULT_START_DATE = datetime(2024, 1, 1)


def _money(rng: random.Random, low: float, high: float) -> Decimal:
    return Decimal(str(round(rng.uniform(low, high), 2)))


def _user_request(rng: random.Random, index: int) -> UserCreate:
    first = rng.choice(FIRST_NAMES)
    last = rng.choice(LAST_NAMES)
    return UserCreate(
        name=f"{first} {last}",
        email=f"{first.lower()}.{last.lower()}{index}@example.com",
        phone=f"({rng.randint(100, 999)}) {rng.randint(100, 999)}-{rng.randint(1000, 9999)}",
        account_name=f"{rng.choice(COMPANY_PREFIXES)} {rng.choice(COMPANY_KINDS)} LLC",
        account_type=rng.choice(ACCOUNT_TYPES),
        account_number=f"...{rng.randint(1000, 9999)}",
        balance=_money(rng, 5000, 100000),
        available_credit=_money(rng, 10000, 50000),
    )


def seed_database(
    db: Session,
    num_users: int = 10,
    min_transactions: int = 10,
    max_transactions: int = 30,
    start_date: datetime = DEFAULT_START_DATE,
    rng: random.Random | None = None,
) -> list[User]:
    """Create users and their transactions, then commit."""
    rng = rng or random.Random()
    accounts = AccountService(db)
    ledger = LedgerService(db)
    types = list(TransactionType)

    users = []
    for index in range(num_users):
        user = accounts.create_user(_user_request(rng, index))
        users.append(user)

        date = start_date
        for _ in range(rng.randint(min_transactions, max_transactions)):
            date += timedelta(days=rng.randint(1, 15))
            txn_type = rng.choice(types)
            low, high = AMOUNT_RANGES[TYPE_BUCKETS[txn_type]]
            ledger.create_transaction(TransactionCreate(
                user_id=user.id,
                description=txn_type.value.replace("_", " ").title(),
                amount=str(_money(rng, low, high)),
                type=txn_type.value,
                date=date,
            ))

        logger.info("Seeded user %s/%s: %s", index + 1, num_users, user.email)

    db.commit()
    return users


if __name__ == "__main__":
    from bank_ledger.models.base import SessionLocal, init_db

    setup_logging(get_settings().LOG_LEVEL)
    init_db()
    session = SessionLocal()
    try:
        seed_database(session)
    finally:
        session.close()
