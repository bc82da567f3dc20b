"""Market data provider protocol."""

from typing import Protocol

from stockfolio.domain.views import HistoricalSeries, Quote


class MarketDataProvider(Protocol):
    """
    Protocol for market data providers.

    Implementations raise ``TickerNotFoundError`` when the source says a
    symbol does not exist and ``MarketDataUnavailableError`` when the source
    itself cannot be reached. Degradation is the gateway's job, not theirs.
    """

    def get_quote(self, ticker: str) -> Quote:
        """Fetch the latest quote for one ticker."""
        ...

    def get_history(self, ticker: str, days: int) -> HistoricalSeries:
        """
        Fetch daily closes covering the trailing ``days`` calendar days.

        Points are ordered oldest first with ``YYYY-MM-DD`` dates.
        """
        ...
