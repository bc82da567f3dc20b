"""Application context for in-process service management.

Holds one instance of each service for the life of the process, so the
market data latch, the merged quote map and any staged import are shared
by every request and by the background refresh loop.
"""

from typing import Any, Optional

from sqlalchemy import Engine
from sqlalchemy.orm import sessionmaker

from stockfolio.backup import BackupExporter, BackupImporter
from stockfolio.config.settings import Settings, get_settings
from stockfolio.providers import MockMarketDataProvider, YFinanceMarketDataProvider
from stockfolio.providers.market_data_provider import MarketDataProvider
from stockfolio.repositories.sqlalchemy import (
    SqlAlchemyStateRepository,
    create_session_factory,
    create_state_engine,
    init_db,
)
from stockfolio.services import (
    AccountRegistry,
    AssistantService,
    DashboardService,
    ImportService,
    MarketDataGateway,
    RefreshScheduler,
)


class AppContext:
    """
    Application context providing access to all services.

    Every collaborator can be injected; anything not given is built lazily
    from settings on first use.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session_factory: Optional[sessionmaker] = None,
        live_provider: Optional[MarketDataProvider] = None,
        mock_provider: Optional[MarketDataProvider] = None,
        assistant_client: Any = None,
    ):
        self._settings = settings
        self._session_factory = session_factory
        self._engine: Optional[Engine] = None
        self._live_provider = live_provider
        self._mock_provider = mock_provider
        self._assistant_client = assistant_client

        # Service instances (lazy initialized)
        self._market_data: Optional[MarketDataGateway] = None
        self._registry: Optional[AccountRegistry] = None
        self._dashboard: Optional[DashboardService] = None
        self._imports: Optional[ImportService] = None
        self._assistant: Optional[AssistantService] = None
        self._scheduler: Optional[RefreshScheduler] = None
        self._exporter: Optional[BackupExporter] = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    def _get_session_factory(self) -> sessionmaker:
        if self._session_factory is None:
            self._engine = create_state_engine(self.settings.get_database_url())
            init_db(self._engine)
            self._session_factory = create_session_factory(self._engine)
        return self._session_factory

    @property
    def market_data(self) -> MarketDataGateway:
        """Get the MarketDataGateway instance."""
        if self._market_data is None:
            settings = self.settings
            live = self._live_provider
            if live is None and not settings.force_mock_market_data:
                live = YFinanceMarketDataProvider()
            self._market_data = MarketDataGateway(
                live_provider=live,
                mock_provider=self._mock_provider or MockMarketDataProvider(seed=settings.mock_seed),
                force_mock=settings.force_mock_market_data,
                fetch_timeout_seconds=settings.quote_fetch_timeout_seconds,
                max_workers=settings.quote_fetch_workers,
            )
        return self._market_data

    @property
    def registry(self) -> AccountRegistry:
        """Get the AccountRegistry instance."""
        if self._registry is None:
            settings = self.settings
            self._registry = AccountRegistry(
                state_repo=SqlAlchemyStateRepository(self._get_session_factory()),
                market_data=self.market_data,
                default_account_name=settings.default_account_name,
                default_account_cash=settings.default_account_cash,
                allow_oversell=settings.allow_oversell,
            )
        return self._registry

    @property
    def dashboard(self) -> DashboardService:
        """Get the DashboardService instance."""
        if self._dashboard is None:
            self._dashboard = DashboardService(
                registry=self.registry,
                market_data=self.market_data,
                history_days=self.settings.history_days,
            )
        return self._dashboard

    @property
    def imports(self) -> ImportService:
        if self._imports is None:
            self._imports = ImportService(registry=self.registry, importer=BackupImporter())
        return self._imports

    @property
    def exporter(self) -> BackupExporter:
        if self._exporter is None:
            self._exporter = BackupExporter()
        return self._exporter

    @property
    def assistant(self) -> AssistantService:
        if self._assistant is None:
            self._assistant = AssistantService(
                dashboard=self.dashboard,
                api_key=self.settings.openai_api_key,
                model=self.settings.openai_model,
                client=self._assistant_client,
            )
        return self._assistant

    @property
    def scheduler(self) -> RefreshScheduler:
        if self._scheduler is None:
            self._scheduler = RefreshScheduler(
                dashboard=self.dashboard,
                interval_seconds=self.settings.refresh_interval_seconds,
            )
        return self._scheduler

    def close(self) -> None:
        """Clean up resources."""
        if self._market_data is not None:
            self._market_data.close()
        if self._engine is not None:
            self._engine.dispose()


# Global application context
_app_context: Optional[AppContext] = None


def get_app_context() -> AppContext:
    """Get or create the global application context."""
    global _app_context
    if _app_context is None:
        _app_context = AppContext()
    return _app_context


def set_app_context(context: Optional[AppContext]) -> None:
    """Set (or clear) the global application context."""
    global _app_context
    _app_context = context
