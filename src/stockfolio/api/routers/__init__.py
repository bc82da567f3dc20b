"""API routers."""

from stockfolio.api.routers.accounts import router as accounts_router
from stockfolio.api.routers.transactions import router as transactions_router
from stockfolio.api.routers.portfolio import router as portfolio_router
from stockfolio.api.routers.market import router as market_router
from stockfolio.api.routers.backup import router as backup_router
from stockfolio.api.routers.assistant import router as assistant_router

__all__ = [
    "accounts_router",
    "transactions_router",
    "portfolio_router",
    "market_router",
    "backup_router",
    "assistant_router",
]
