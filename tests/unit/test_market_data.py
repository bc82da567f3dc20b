"""
Unit tests for market data providers and the gateway.

Tests cover:
- Mock provider quotes, unknown tickers and history shape
- Gateway pass-through, batch fetches and the quote map
- One-way latch into mock mode on live failure
- Yahoo Finance provider parsing with a patched yfinance module
"""

import time
from datetime import timedelta
from unittest.mock import MagicMock, patch

import pandas as pd
import pytest

from stockfolio.core.exceptions import MarketDataUnavailableError, TickerNotFoundError
from stockfolio.core.timezone import date_str, today_eastern
from stockfolio.providers import MockMarketDataProvider, YFinanceMarketDataProvider
from stockfolio.services import MarketDataGateway

from tests.conftest import DeterministicMarketProvider, FailingMarketProvider


# =============================================================================
# MOCK PROVIDER TESTS
# =============================================================================


class TestMockProvider:
    """Tests for MockMarketDataProvider."""

    def test_known_ticker_within_band(self, mock_provider: MockMarketDataProvider):
        """
        GIVEN AAPL has base price $172.50
        WHEN a quote is generated
        THEN the price is within ±2.5% and the quote is flagged mock
        """
        q = mock_provider.get_quote("aapl")

        assert q.ticker == "AAPL"
        assert q.company_name == "Apple Inc."
        assert 172.50 * 0.975 <= q.price <= 172.50 * 1.025
        assert q.day_low <= q.price <= q.day_high
        assert q.is_mock is True

    def test_new_ticker_gets_placeholder_name_and_stable_base(self, mock_provider):
        first = mock_provider.get_quote("ABCD")
        second = mock_provider.get_quote("ABCD")

        assert first.company_name == "ABCD Company Inc."
        assert 50 * 0.975 <= first.price <= 500 * 1.025
        assert abs(first.price - second.price) <= first.price * 0.06

    @pytest.mark.parametrize("ticker", ["FAIL", "fail", "", "12AB", "TOO-LONG-SYMBOL", "A B"])
    def test_rejected_tickers(self, mock_provider, ticker):
        with pytest.raises(TickerNotFoundError):
            mock_provider.get_quote(ticker)

    def test_history_shape(self, mock_provider):
        """
        GIVEN a 30-day request
        WHEN history is generated
        THEN 30 ascending daily points end today
        """
        hist = mock_provider.get_history("MSFT", 30)

        dates = [p.date for p in hist.data]
        assert len(dates) == 30
        assert dates == sorted(dates)
        assert dates[-1] == date_str(today_eastern())
        assert dates[0] == date_str(today_eastern() - timedelta(days=29))
        assert all(p.price > 0 for p in hist.data)
        assert hist.is_mock is True

    def test_seed_makes_output_reproducible(self):
        a = MockMarketDataProvider(seed=7).get_quote("NVDA")
        b = MockMarketDataProvider(seed=7).get_quote("NVDA")

        assert a == b


# =============================================================================
# GATEWAY TESTS
# =============================================================================


class TestMarketDataGateway:
    """Tests for MarketDataGateway."""

    def test_live_quote_passes_through(self, gateway: MarketDataGateway):
        q = gateway.fetch_quote(" aapl ")

        assert q.price == 185.50
        assert q.is_mock is False
        assert gateway.is_mock is False

    def test_unknown_ticker_raises_without_latching(self, gateway: MarketDataGateway):
        with pytest.raises(TickerNotFoundError):
            gateway.fetch_quote("ZZZZ")

        assert gateway.is_mock is False

    def test_batch_omits_unknown_and_deduplicates(self, gateway, deterministic_provider):
        """
        GIVEN a batch with a duplicate and an unknown ticker
        WHEN quotes are fetched
        THEN known tickers are returned once each and the unknown one is omitted
        """
        quotes = gateway.fetch_quotes(["AAPL", "aapl", "MSFT", "ZZZZ"])

        assert set(quotes) == {"AAPL", "MSFT"}
        assert sorted(deterministic_provider.quote_calls) == ["AAPL", "MSFT", "ZZZZ"]

    def test_quote_map_merges_by_ticker(self, gateway):
        gateway.fetch_quotes(["AAPL"])
        gateway.fetch_quote("MSFT")

        assert set(gateway.latest_quotes()) == {"AAPL", "MSFT"}

    def test_failure_latches_mock_mode(self, failing_provider: FailingMarketProvider, mock_provider):
        """
        GIVEN a live provider that cannot be reached
        WHEN the first quote is requested
        THEN a mock quote is returned and the gateway stays in mock mode
        AND the live provider is never called again
        """
        gw = MarketDataGateway(live_provider=failing_provider, mock_provider=mock_provider)
        try:
            first = gw.fetch_quote("AAPL")
            calls_after_first = failing_provider.calls
            second = gw.fetch_quotes(["AAPL", "MSFT"])
            history = gw.fetch_history("AAPL", 5)
        finally:
            gw.close()

        assert first.is_mock is True
        assert gw.is_mock is True
        assert all(q.is_mock for q in second.values())
        assert history.is_mock is True
        assert failing_provider.calls == calls_after_first == 1

    def test_history_failure_latches_mock_mode(self, failing_provider, mock_provider):
        gw = MarketDataGateway(live_provider=failing_provider, mock_provider=mock_provider)
        try:
            histories = gw.fetch_histories(["AAPL"], 10)
        finally:
            gw.close()

        assert gw.is_mock is True
        assert len(histories["AAPL"].data) == 10

    def test_unknown_ticker_in_mock_mode_still_rejected(self, mock_provider):
        gw = MarketDataGateway(live_provider=None, mock_provider=mock_provider)
        try:
            with pytest.raises(TickerNotFoundError):
                gw.fetch_quote("FAIL")
            assert gw.fetch_quotes(["FAIL", "AAPL"]).keys() == {"AAPL"}
        finally:
            gw.close()

    def test_force_mock_never_calls_live(self, deterministic_provider, mock_provider):
        gw = MarketDataGateway(
            live_provider=deterministic_provider,
            mock_provider=mock_provider,
            force_mock=True,
        )
        try:
            q = gw.fetch_quote("AAPL")
        finally:
            gw.close()

        assert q.is_mock is True
        assert deterministic_provider.quote_calls == []

    def test_timeout_latches_mock_mode(self, mock_provider):
        slow = MagicMock()
        slow.get_quote.side_effect = lambda ticker: time.sleep(0.5)
        gw = MarketDataGateway(live_provider=slow, mock_provider=mock_provider, fetch_timeout_seconds=0.05)
        try:
            q = gw.fetch_quote("AAPL")
        finally:
            gw.close()

        assert q.is_mock is True
        assert gw.is_mock is True


# =============================================================================
# YFINANCE PROVIDER TESTS
# =============================================================================


class TestYFinanceProvider:
    """Tests for YFinanceMarketDataProvider with yfinance patched out."""

    def _patched(self, ticker_obj):
        yf = MagicMock()
        yf.Ticker.return_value = ticker_obj
        return patch("stockfolio.providers.yfinance_provider._get_yf", return_value=yf)

    def test_quote_parsed_from_info(self):
        ticker = MagicMock()
        ticker.info = {
            "currentPrice": 190.5,
            "longName": "Apple Inc.",
            "previousClose": 189.0,
            "volume": 1000,
            "dayHigh": 191.0,
            "dayLow": 188.0,
        }
        with self._patched(ticker):
            q = YFinanceMarketDataProvider().get_quote("aapl")

        assert q.ticker == "AAPL"
        assert q.company_name == "Apple Inc."
        assert q.price == 190.5
        assert q.previous_close == 189.0
        assert q.is_mock is False

    def test_quote_without_price_is_unknown_ticker(self):
        ticker = MagicMock()
        ticker.info = {"trailingPegRatio": None}
        with self._patched(ticker):
            with pytest.raises(TickerNotFoundError):
                YFinanceMarketDataProvider().get_quote("NOPE")

    def test_transport_error_is_unavailable(self):
        yf = MagicMock()
        yf.Ticker.side_effect = ConnectionError("offline")
        with patch("stockfolio.providers.yfinance_provider._get_yf", return_value=yf):
            with pytest.raises(MarketDataUnavailableError):
                YFinanceMarketDataProvider().get_quote("AAPL")

    def test_history_parsed_from_dataframe(self):
        today = today_eastern()
        index = pd.to_datetime([today - timedelta(days=2), today - timedelta(days=1)])
        frame = pd.DataFrame({"Close": [100.0, float("nan")]}, index=index)
        ticker = MagicMock()
        ticker.history.return_value = frame
        with self._patched(ticker):
            hist = YFinanceMarketDataProvider().get_history("AAPL", 5)

        assert [p.date for p in hist.data] == [date_str(today - timedelta(days=2))]
        assert hist.data[0].price == 100.0

    def test_empty_history_is_unknown_ticker(self):
        ticker = MagicMock()
        ticker.history.return_value = pd.DataFrame()
        with self._patched(ticker):
            with pytest.raises(TickerNotFoundError):
                YFinanceMarketDataProvider().get_history("NOPE", 5)


def test_deterministic_provider_is_protocol_compatible():
    provider = DeterministicMarketProvider()

    assert provider.get_quote("AAPL").price == 185.50
    assert len(provider.get_history("AAPL", 3).data) == 3
