"""
Pytest configuration and fixtures for portfolio tracker tests.

This module provides:
- In-memory SQLite database fixtures
- Deterministic and failing market data providers
- Factory helpers for transactions and portfolio state
- Service fixtures wired to the in-memory store
- FastAPI test client with an injected application context
"""

import json
from datetime import date, timedelta
from typing import Optional, Union
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from stockfolio.main import app
from stockfolio.api.deps import get_context
from stockfolio.app_context import AppContext, set_app_context
from stockfolio.backup.formats import portfolio_to_dict
from stockfolio.config.settings import Settings, reset_settings
from stockfolio.core.exceptions import MarketDataUnavailableError, TickerNotFoundError
from stockfolio.core.timezone import date_str, today_eastern
from stockfolio.domain.models import Account, PortfolioData, Transaction, TransactionType
from stockfolio.domain.views import HistoricalSeries, PricePoint, Quote
from stockfolio.providers import MockMarketDataProvider
from stockfolio.repositories.sqlalchemy.database import Base
# Import ORM models to register them with Base before creating tables
from stockfolio.repositories.sqlalchemy import orm_models  # noqa: F401
from stockfolio.repositories.sqlalchemy import SqlAlchemyStateRepository
from stockfolio.services import (
    AccountRegistry,
    DashboardService,
    ImportService,
    MarketDataGateway,
)
from stockfolio.services.account_registry import STATE_KEY


# =============================================================================
# FACTORY HELPERS
# =============================================================================

_txn_counter = 0


def make_txn(
    ticker: str,
    txn_type: Union[TransactionType, str],
    shares: float,
    price: float,
    day: Union[date, str] = "2024-01-02",
    company_name: Optional[str] = None,
    txn_id: Optional[str] = None,
    notes: Optional[str] = None,
) -> Transaction:
    """Build a Transaction with sensible defaults."""
    global _txn_counter
    _txn_counter += 1
    return Transaction(
        id=txn_id or f"txn-{_txn_counter}",
        ticker=ticker,
        company_name=company_name or f"{ticker.upper()} Inc.",
        type=txn_type,
        shares=shares,
        price=price,
        date=day,
        notes=notes,
    )


def buy(ticker: str, shares: float, price: float, day: Union[date, str] = "2024-01-02", **kwargs) -> Transaction:
    return make_txn(ticker, TransactionType.BUY, shares, price, day, **kwargs)


def sell(ticker: str, shares: float, price: float, day: Union[date, str] = "2024-01-03", **kwargs) -> Transaction:
    return make_txn(ticker, TransactionType.SELL, shares, price, day, **kwargs)


def make_portfolio(
    *accounts: tuple[Account, list[Transaction]],
    active_account_id: Optional[str] = None,
) -> PortfolioData:
    """Build a PortfolioData from (account, ledger) pairs."""
    return PortfolioData(
        accounts=[a for a, _ in accounts],
        transactions={a.id: list(txns) for a, txns in accounts},
        active_account_id=active_account_id or accounts[0][0].id,
    )


def save_portfolio(state_repo: SqlAlchemyStateRepository, data: PortfolioData) -> None:
    """Persist state directly, bypassing the registry."""
    state_repo.save(STATE_KEY, json.dumps(portfolio_to_dict(data)))


def flat_series(ticker: str, price: float, days: int, end: Optional[date] = None) -> HistoricalSeries:
    """Constant close for every calendar day of a window ending at ``end``."""
    end = end or today_eastern()
    return HistoricalSeries(
        ticker=ticker,
        data=[
            PricePoint(date=date_str(end - timedelta(days=offset)), price=price)
            for offset in range(days - 1, -1, -1)
        ],
    )


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    # Reset settings for clean state
    reset_settings()

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def session_factory(test_engine) -> sessionmaker:
    """Create test session factory."""
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def state_repo(session_factory) -> SqlAlchemyStateRepository:
    """Provide test StateRepository."""
    return SqlAlchemyStateRepository(session_factory)


# =============================================================================
# MARKET DATA FIXTURES
# =============================================================================


class DeterministicMarketProvider:
    """
    Deterministic market data provider for testing.

    Provides fixed quotes and flat daily closes with no randomness.
    Unknown tickers raise TickerNotFoundError.
    """

    FIXED_QUOTES = {
        "AAPL": (185.50, "Apple Inc."),
        "GOOGL": (142.75, "Alphabet Inc."),
        "MSFT": (378.25, "Microsoft Corporation"),
        "TSLA": (248.75, "Tesla, Inc."),
        "NVDA": (485.25, "NVIDIA Corporation"),
    }

    def __init__(self):
        self.quote_calls: list[str] = []
        self.history_calls: list[str] = []

    def get_quote(self, ticker: str) -> Quote:
        self.quote_calls.append(ticker)
        if ticker not in self.FIXED_QUOTES:
            raise TickerNotFoundError(ticker)
        price, name = self.FIXED_QUOTES[ticker]
        return Quote(
            ticker=ticker,
            company_name=name,
            price=price,
            volume=1_000_000,
            day_high=price + 1,
            day_low=price - 1,
            previous_close=price - 0.5,
        )

    def get_history(self, ticker: str, days: int) -> HistoricalSeries:
        self.history_calls.append(ticker)
        if ticker not in self.FIXED_QUOTES:
            raise TickerNotFoundError(ticker)
        return flat_series(ticker, self.FIXED_QUOTES[ticker][0], days)


class FailingMarketProvider:
    """Market provider that always raises a transport error."""

    def __init__(self):
        self.calls = 0

    def get_quote(self, ticker: str) -> Quote:
        self.calls += 1
        raise MarketDataUnavailableError("Network unavailable")

    def get_history(self, ticker: str, days: int) -> HistoricalSeries:
        self.calls += 1
        raise ConnectionError("Network unavailable")


@pytest.fixture
def deterministic_provider() -> DeterministicMarketProvider:
    """Provide deterministic market data provider."""
    return DeterministicMarketProvider()


@pytest.fixture
def failing_provider() -> FailingMarketProvider:
    """Provide a market provider that always fails."""
    return FailingMarketProvider()


@pytest.fixture
def mock_provider() -> MockMarketDataProvider:
    """Provide mock-mode provider with fixed seed."""
    return MockMarketDataProvider(seed=42)


@pytest.fixture
def gateway(deterministic_provider, mock_provider):
    """Gateway over the deterministic provider."""
    gw = MarketDataGateway(
        live_provider=deterministic_provider,
        mock_provider=mock_provider,
        fetch_timeout_seconds=5,
        max_workers=4,
    )
    yield gw
    gw.close()


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def brokerage() -> Account:
    """An account with $10,000 cash and no transactions."""
    return Account(id="acc-brokerage", name="Brokerage", cash=10000.0)


@pytest.fixture
def registry(state_repo, gateway, brokerage) -> AccountRegistry:
    """Registry whose stored state holds one empty 'Brokerage' account."""
    save_portfolio(state_repo, make_portfolio((brokerage, [])))
    return AccountRegistry(state_repo=state_repo, market_data=gateway)


@pytest.fixture
def dashboard(registry, gateway) -> DashboardService:
    """Provide test DashboardService."""
    return DashboardService(registry=registry, market_data=gateway, history_days=30)


@pytest.fixture
def import_service(registry) -> ImportService:
    """Provide test ImportService."""
    return ImportService(registry=registry)


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def assistant_client() -> MagicMock:
    """Stand-in for the OpenAI client."""
    client = MagicMock()
    client.responses.create.return_value = MagicMock(output_text="You hold 10 shares of AAPL.")
    return client


@pytest.fixture
def app_context(session_factory, state_repo, deterministic_provider, mock_provider, assistant_client, brokerage):
    """Application context wired to the in-memory database and test providers."""
    save_portfolio(state_repo, make_portfolio((brokerage, [])))
    ctx = AppContext(
        settings=Settings(auto_refresh=False, history_days=30),
        session_factory=session_factory,
        live_provider=deterministic_provider,
        mock_provider=mock_provider,
        assistant_client=assistant_client,
    )
    yield ctx
    ctx.close()


@pytest.fixture
def client(app_context) -> TestClient:
    """Provide FastAPI test client with test database."""
    set_app_context(app_context)
    app.dependency_overrides[get_context] = lambda: app_context
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    set_app_context(None)


# =============================================================================
# HELPER FUNCTIONS (exported for use in tests)
# =============================================================================


def assert_close(actual: float, expected: float, tolerance: float = 1e-9) -> None:
    """Assert two floats are equal within tolerance."""
    diff = abs(actual - expected)
    assert diff <= tolerance, f"Expected {expected}, got {actual} (diff={diff})"
