"""Market data gateway with a session-latched mock fallback."""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError as FuturesTimeoutError
from typing import Callable, Optional, TypeVar

from stockfolio.core.exceptions import TickerNotFoundError
from stockfolio.domain.views import HistoricalSeries, Quote
from stockfolio.providers.market_data_provider import MarketDataProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_FETCH_TIMEOUT_SECONDS = 10.0


class MarketDataGateway:
    """
    Single entry point for quotes and daily closes.

    Calls go to the live provider until any of them fails for a reason other
    than an unknown ticker. From then on the gateway is latched into mock
    mode for the rest of its lifetime and never retries the live source.
    Callers only ever see quotes (possibly mock) or ``TickerNotFoundError``.
    """

    def __init__(
        self,
        live_provider: Optional[MarketDataProvider],
        mock_provider: MarketDataProvider,
        force_mock: bool = False,
        fetch_timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
        max_workers: int = 8,
    ):
        self._live = live_provider
        self._mock = mock_provider
        self._timeout = fetch_timeout_seconds
        self._lock = threading.Lock()
        self._mock_mode = force_mock or live_provider is None
        # Last quote seen per ticker; later responses overwrite earlier ones
        self._latest: dict[str, Quote] = {}
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, max_workers),
            thread_name_prefix="market-data",
        )

    @property
    def is_mock(self) -> bool:
        """True once the gateway serves synthetic data."""
        return self._mock_mode

    def _latch_mock(self, reason: object) -> None:
        with self._lock:
            if self._mock_mode:
                return
            self._mock_mode = True
        logger.warning("Live market data unavailable, switching to mock data: %s", reason)

    def _await_live(self, future: "Future[T]") -> T:
        """Wait for a live call; unknown tickers propagate, anything else latches."""
        try:
            return future.result(timeout=self._timeout)
        except TickerNotFoundError:
            raise
        except FuturesTimeoutError:
            future.cancel()
            self._latch_mock("request timed out")
            raise
        except Exception as exc:
            self._latch_mock(exc)
            raise

    def _fetch_one(self, call: Callable[[MarketDataProvider], T]) -> T:
        if not self._mock_mode:
            future = self._executor.submit(call, self._live)
            try:
                return self._await_live(future)
            except TickerNotFoundError:
                raise
            except Exception:
                logger.debug("Serving mock data after live failure")
        return call(self._mock)

    def fetch_quote(self, ticker: str) -> Quote:
        """
        Fetch one quote.

        Raises:
            TickerNotFoundError: If the symbol does not exist.
        """
        symbol = ticker.strip().upper()
        quote = self._fetch_one(lambda provider: provider.get_quote(symbol))
        self._remember([quote])
        return quote

    def fetch_history(self, ticker: str, days: int) -> HistoricalSeries:
        """
        Fetch daily closes for the trailing window, oldest first.

        Raises:
            TickerNotFoundError: If the symbol does not exist.
        """
        symbol = ticker.strip().upper()
        return self._fetch_one(lambda provider: provider.get_history(symbol, days))

    def _fetch_many(
        self,
        tickers: list[str],
        call: Callable[[MarketDataProvider, str], T],
    ) -> dict[str, T]:
        symbols = list(dict.fromkeys(t.strip().upper() for t in tickers if t and t.strip()))
        result: dict[str, T] = {}
        if not symbols:
            return result

        pending: dict[str, Future] = {}
        if not self._mock_mode:
            pending = {s: self._executor.submit(call, self._live, s) for s in symbols}

        for symbol in symbols:
            future = pending.get(symbol)
            if future is not None and not self._mock_mode:
                try:
                    result[symbol] = self._await_live(future)
                    continue
                except TickerNotFoundError:
                    logger.info("Skipping unknown ticker %s", symbol)
                    continue
                except Exception:
                    logger.debug("Serving mock data for %s after live failure", symbol)
            elif future is not None:
                future.cancel()

            try:
                result[symbol] = call(self._mock, symbol)
            except TickerNotFoundError:
                logger.info("Skipping unknown ticker %s", symbol)

        return result

    def fetch_quotes(self, tickers: list[str]) -> dict[str, Quote]:
        """
        Fetch quotes for many tickers as one batch.

        Lookups run concurrently and the call returns once all of them have
        resolved. Unknown tickers are omitted from the result.
        """
        quotes = self._fetch_many(tickers, lambda provider, symbol: provider.get_quote(symbol))
        self._remember(quotes.values())
        return quotes

    def fetch_histories(self, tickers: list[str], days: int) -> dict[str, HistoricalSeries]:
        """Fetch daily closes for many tickers; unknown tickers are omitted."""
        return self._fetch_many(tickers, lambda provider, symbol: provider.get_history(symbol, days))

    def _remember(self, quotes) -> None:
        with self._lock:
            for quote in quotes:
                self._latest[quote.ticker] = quote

    def latest_quotes(self) -> dict[str, Quote]:
        """Return a copy of the merged per-ticker quote map."""
        with self._lock:
            return dict(self._latest)

    def close(self) -> None:
        """Stop the worker pool without waiting for in-flight requests."""
        self._executor.shutdown(wait=False, cancel_futures=True)
