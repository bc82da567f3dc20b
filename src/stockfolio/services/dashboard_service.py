"""Dashboard service: market data refresh and valuation of the active account."""

import logging
import threading
from datetime import date, datetime
from typing import Optional

from stockfolio.core.timezone import now_eastern, today_eastern
from stockfolio.domain.views import (
    AllocationItem,
    HistoricalDataPoint,
    HistoricalSeries,
    PortfolioSnapshot,
    PortfolioSummary,
    Position,
)
from stockfolio.services.account_registry import AccountRegistry
from stockfolio.services.market_data_service import MarketDataGateway
import stockfolio.services.valuation_engine as engine

logger = logging.getLogger(__name__)


class DashboardService:
    """
    Feeds the valuation engine with the active ledger and market data.

    Every read recomputes from scratch against the current ledger. Market
    data is refreshed by :meth:`refresh`; only one refresh runs at a time and
    a refresh requested while another is in flight is skipped.
    """

    def __init__(
        self,
        registry: AccountRegistry,
        market_data: MarketDataGateway,
        history_days: int = 30,
    ):
        self._registry = registry
        self._market_data = market_data
        self._history_days = history_days
        self._refresh_lock = threading.Lock()
        self._history_lock = threading.Lock()
        self._history: dict[str, HistoricalSeries] = {}
        self._history_date: Optional[date] = None
        # Tickers already tried on read since the last daily history reload
        self._attempted: set[str] = set()
        self._last_refreshed_at: Optional[datetime] = None

    @property
    def last_refreshed_at(self) -> Optional[datetime]:
        return self._last_refreshed_at

    @property
    def is_mock(self) -> bool:
        return self._market_data.is_mock

    # =========================================================================
    # Market data
    # =========================================================================

    def refresh(self) -> bool:
        """
        Re-fetch quotes (and, once per day, history) for the active ledger.

        Returns False if another refresh was already running.
        """
        if not self._refresh_lock.acquire(blocking=False):
            logger.info("Refresh already in progress, skipping")
            return False
        try:
            tickers = engine.collect_tickers(self._registry.active_transactions())
            if not tickers:
                return True
            self._market_data.fetch_quotes(tickers)
            self._load_history(tickers, force=self._history_date != today_eastern())
            self._last_refreshed_at = now_eastern()
            logger.debug("Refreshed market data for %d tickers", len(tickers))
            return True
        finally:
            self._refresh_lock.release()

    def _load_history(self, tickers: list[str], force: bool = False) -> None:
        with self._history_lock:
            if force:
                self._attempted.clear()
            missing = tickers if force else [t for t in tickers if t not in self._history]
        if not missing:
            return
        fetched = self._market_data.fetch_histories(missing, self._history_days)
        with self._history_lock:
            self._history.update(fetched)
            self._history_date = today_eastern()

    def _ensure_market_data(self, tickers: list[str]) -> None:
        """
        Fetch quotes and history for tickers seen for the first time.

        Each ticker is tried once per day; one that yielded nothing (an
        unknown symbol, say) is not fetched again until the next forced reload.
        """
        with self._history_lock:
            new_tickers = [t for t in tickers if t not in self._attempted]
            self._attempted.update(new_tickers)
        if not new_tickers:
            return
        known = self._market_data.latest_quotes()
        unquoted = [t for t in new_tickers if t not in known]
        if unquoted:
            self._market_data.fetch_quotes(unquoted)
        self._load_history(new_tickers)

    # =========================================================================
    # Valuation
    # =========================================================================

    def get_positions(self) -> list[Position]:
        transactions = self._registry.active_transactions()
        self._ensure_market_data(engine.collect_tickers(transactions))
        return engine.build_positions(transactions, self._market_data.latest_quotes())

    def get_summary(self) -> PortfolioSummary:
        cash = self._registry.get_active_account().cash
        return engine.compute_summary(self.get_positions(), trading_cash=cash)

    def get_allocation(self) -> list[AllocationItem]:
        return engine.compute_allocation(self.get_positions())

    def get_history(self) -> list[HistoricalDataPoint]:
        """Trailing daily value series; empty means no data, not zero value."""
        transactions = self._registry.active_transactions()
        tickers = engine.collect_tickers(transactions)
        self._ensure_market_data(tickers)
        with self._history_lock:
            prices = {t: self._history[t] for t in tickers if t in self._history}
        return engine.build_historical_series(
            transactions,
            prices,
            today=today_eastern(),
            days=self._history_days,
        )

    def get_snapshot(self) -> PortfolioSnapshot:
        """Everything needed to render the active account in one pass."""
        account = self._registry.get_active_account()
        transactions = self._registry.active_transactions()
        tickers = engine.collect_tickers(transactions)
        self._ensure_market_data(tickers)

        positions = engine.build_positions(transactions, self._market_data.latest_quotes())
        with self._history_lock:
            prices = {t: self._history[t] for t in tickers if t in self._history}

        return PortfolioSnapshot(
            account=account,
            positions=positions,
            summary=engine.compute_summary(positions, trading_cash=account.cash),
            allocation=engine.compute_allocation(positions),
            history=engine.build_historical_series(
                transactions, prices, today=today_eastern(), days=self._history_days
            ),
            is_mock=self._market_data.is_mock,
            as_of=self._last_refreshed_at,
        )
