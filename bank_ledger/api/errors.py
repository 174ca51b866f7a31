"""
HTTP mapping for ledger errors.

The services raise typed errors; this module is the one place
that turns them into status codes.
"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bank_ledger.errors import StoreUnavailable

logger = logging.getLogger(__name__)


def http_error(error: Exception) -> HTTPException:
    if isinstance(error, StoreUnavailable):
        return HTTPException(status_code=503, detail=str(error))
    if isinstance(error, LookupError):
        return HTTPException(status_code=404, detail=str(error))
    return HTTPException(status_code=400, detail=str(error))


def commit(db: Session) -> None:
    """
    Commit the request's unit of work.

    A failed commit is rolled back and reported as
    StoreUnavailable, so the caller never sees half of a
    ledger mutation.
    """
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Commit failed, rolled back: %s", e)
        raise StoreUnavailable(f"Commit failed: {e}") from e
