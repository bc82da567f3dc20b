"""Live market data from Yahoo Finance via yfinance."""

import logging
from datetime import timedelta

from stockfolio.core.exceptions import MarketDataUnavailableError, TickerNotFoundError
from stockfolio.core.timezone import date_str, today_eastern
from stockfolio.domain.views import HistoricalSeries, PricePoint, Quote

logger = logging.getLogger(__name__)


# Lazy import so tests can patch before import
def _get_yf():
    import yfinance as yf
    return yf


def _as_float(value) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if result != result else result


class YFinanceMarketDataProvider:
    """Fetches quotes and daily closes from Yahoo Finance."""

    def get_quote(self, ticker: str) -> Quote:
        symbol = ticker.strip().upper()
        yf = _get_yf()
        try:
            info = yf.Ticker(symbol).info
        except Exception as exc:
            raise MarketDataUnavailableError(f"Quote request for {symbol} failed: {exc}") from exc

        if not isinstance(info, dict) or not info:
            raise TickerNotFoundError(symbol)

        # currentPrice preferred, then regularMarketPrice
        price = info.get("currentPrice")
        if price is None:
            price = info.get("regularMarketPrice")
        if price is None:
            raise TickerNotFoundError(symbol)

        name = (info.get("longName") or info.get("shortName") or "").strip() or symbol
        previous_close = info.get("previousClose") or info.get("regularMarketPreviousClose")

        return Quote(
            ticker=symbol,
            company_name=name,
            price=_as_float(price),
            volume=_as_float(info.get("volume") or info.get("regularMarketVolume")),
            day_high=_as_float(info.get("dayHigh") or info.get("regularMarketDayHigh")),
            day_low=_as_float(info.get("dayLow") or info.get("regularMarketDayLow")),
            previous_close=_as_float(previous_close),
        )

    def get_history(self, ticker: str, days: int) -> HistoricalSeries:
        symbol = ticker.strip().upper()
        end = today_eastern()
        start = end - timedelta(days=max(days - 1, 0))
        yf = _get_yf()
        try:
            hist = yf.Ticker(symbol).history(
                start=start,
                end=end + timedelta(days=1),
                auto_adjust=False,
            )
        except Exception as exc:
            raise MarketDataUnavailableError(f"History request for {symbol} failed: {exc}") from exc

        if hist is None or hist.empty or "Close" not in hist.columns:
            raise TickerNotFoundError(symbol)

        points: list[PricePoint] = []
        for idx, close in hist["Close"].items():
            dt = idx.date() if hasattr(idx, "date") else idx
            if close is None or close != close:
                continue
            points.append(PricePoint(date=date_str(dt), price=float(close)))

        points.sort(key=lambda p: p.date)
        logger.debug("Fetched %d closes for %s", len(points), symbol)
        return HistoricalSeries(ticker=symbol, data=points)
