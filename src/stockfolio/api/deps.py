"""Dependency injection for FastAPI."""

from fastapi import Depends

from stockfolio.app_context import AppContext, get_app_context
from stockfolio.backup import BackupExporter
from stockfolio.services import (
    AccountRegistry,
    AssistantService,
    DashboardService,
    ImportService,
    MarketDataGateway,
)


def get_context() -> AppContext:
    """Provide the application context."""
    return get_app_context()


def get_registry(ctx: AppContext = Depends(get_context)) -> AccountRegistry:
    """Provide AccountRegistry instance."""
    return ctx.registry


def get_dashboard(ctx: AppContext = Depends(get_context)) -> DashboardService:
    """Provide DashboardService instance."""
    return ctx.dashboard


def get_market_data(ctx: AppContext = Depends(get_context)) -> MarketDataGateway:
    """Provide MarketDataGateway instance."""
    return ctx.market_data


def get_import_service(ctx: AppContext = Depends(get_context)) -> ImportService:
    return ctx.imports


def get_exporter(ctx: AppContext = Depends(get_context)) -> BackupExporter:
    return ctx.exporter


def get_assistant(ctx: AppContext = Depends(get_context)) -> AssistantService:
    return ctx.assistant
