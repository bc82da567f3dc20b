"""Synthetic market data used when the live source is unreachable."""

import random
import re
import threading
from datetime import timedelta
from typing import Optional

from stockfolio.core.exceptions import TickerNotFoundError
from stockfolio.core.timezone import date_str, today_eastern
from stockfolio.domain.views import HistoricalSeries, PricePoint, Quote


# Base prices and names for well-known tickers
_BASE_PRICES: dict[str, tuple[float, str]] = {
    "AAPL": (172.50, "Apple Inc."),
    "GOOGL": (135.80, "Alphabet Inc."),
    "TSLA": (225.40, "Tesla, Inc."),
    "NVDA": (488.30, "NVIDIA Corporation"),
    "AMZN": (130.00, "Amazon.com, Inc."),
    "MSFT": (330.00, "Microsoft Corporation"),
}

# Symbol that always fails lookup
FAILING_TICKER = "FAIL"

_TICKER_PATTERN = re.compile(r"^[A-Z][A-Z0-9.\-]{0,9}$")


class MockMarketDataProvider:
    """
    Mock provider generating plausible quotes and random-walk history.

    Unknown tickers get a random base price between 50 and 500 and a
    placeholder company name, remembered for the rest of the session.
    """

    def __init__(self, seed: Optional[int] = None):
        """Initialize with optional random seed for reproducibility."""
        self._rng = random.Random(seed)
        self._base: dict[str, tuple[float, str]] = dict(_BASE_PRICES)
        self._lock = threading.Lock()

    def _entry(self, ticker: str) -> tuple[str, float, str]:
        symbol = (ticker or "").strip().upper()
        if symbol == FAILING_TICKER or not _TICKER_PATTERN.match(symbol):
            raise TickerNotFoundError(symbol or ticker)
        with self._lock:
            if symbol not in self._base:
                self._base[symbol] = (50 + self._rng.random() * 450, f"{symbol} Company Inc.")
            base_price, name = self._base[symbol]
        return symbol, base_price, name

    def get_quote(self, ticker: str) -> Quote:
        symbol, base_price, name = self._entry(ticker)
        rng = self._rng

        # -2.5% to +2.5% around the base price
        price = base_price * (1 + (rng.random() - 0.5) * 0.05)
        previous_close = base_price / (1 + (rng.random() - 0.5) * 0.1)
        day_high = max(price, previous_close) * (1 + rng.random() * 0.02)
        day_low = min(price, previous_close) * (1 - rng.random() * 0.02)

        return Quote(
            ticker=symbol,
            company_name=name,
            price=price,
            volume=1_000_000 + rng.random() * 10_000_000,
            day_high=day_high,
            day_low=day_low,
            previous_close=previous_close,
            is_mock=True,
        )

    def get_history(self, ticker: str, days: int) -> HistoricalSeries:
        symbol, base_price, _ = self._entry(ticker)
        today = today_eastern()

        # Walk backwards from the base price so the last close sits near it
        prices: list[float] = []
        price = base_price
        for _ in range(max(days, 0)):
            prices.append(price)
            price = max(price * (1 + (self._rng.random() - 0.5) * 0.04), 0.01)
        prices.reverse()

        points = [
            PricePoint(date=date_str(today - timedelta(days=days - 1 - i)), price=p)
            for i, p in enumerate(prices)
        ]
        return HistoricalSeries(ticker=symbol, data=points, is_mock=True)
