"""Market data providers module."""

from stockfolio.providers.market_data_provider import MarketDataProvider
from stockfolio.providers.mock_provider import MockMarketDataProvider
from stockfolio.providers.yfinance_provider import YFinanceMarketDataProvider

__all__ = [
    "MarketDataProvider",
    "MockMarketDataProvider",
    "YFinanceMarketDataProvider",
]
