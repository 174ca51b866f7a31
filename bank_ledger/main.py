"""
Bank Ledger API: FastAPI Application.

Assembles the application.
All routers are registered here.

Run with:
    python -m bank_ledger
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from bank_ledger.config import get_settings
from bank_ledger.logging_config import setup_logging
from bank_ledger.models import Base  # noqa: F401  (registers all tables)
from bank_ledger.models.base import init_db
from bank_ledger.api.health import router as health_router
from bank_ledger.api.users import router as users_router
from bank_ledger.api.transactions import router as transactions_router

settings = get_settings()

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(
        "%s %s started (%s)",
        settings.APP_NAME, settings.APP_VERSION, settings.ENVIRONMENT,
    )
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Account holders and a transaction ledger with running balances",
    lifespan=lifespan,
)

# Register routers
app.include_router(health_router)
app.include_router(users_router)
app.include_router(transactions_router)
