"""
Run the ledger API.

Usage:
    python -m bank_ledger
"""

import uvicorn

from bank_ledger.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "bank_ledger.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
