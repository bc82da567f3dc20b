"""Service layer - business logic orchestration."""

from stockfolio.services.market_data_service import MarketDataGateway
from stockfolio.services.account_registry import (
    AccountRegistry,
    TransactionCreate,
    TransactionUpdate,
)
from stockfolio.services.dashboard_service import DashboardService
from stockfolio.services.import_service import ImportService
from stockfolio.services.assistant_service import AssistantService
from stockfolio.services.refresh_scheduler import RefreshScheduler

__all__ = [
    "MarketDataGateway",
    "AccountRegistry",
    "TransactionCreate",
    "TransactionUpdate",
    "DashboardService",
    "ImportService",
    "AssistantService",
    "RefreshScheduler",
]
