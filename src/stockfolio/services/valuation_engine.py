"""
Pure valuation functions for a single account's ledger.

Nothing here performs I/O or keeps state; every function recomputes its
result from the arguments, so the same ledger and quote snapshot always
produce the same output.
"""

from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable, Mapping, Optional

from stockfolio.core.timezone import date_str
from stockfolio.domain.models import Transaction, TransactionType
from stockfolio.domain.views import (
    AllocationItem,
    HistoricalDataPoint,
    HistoricalSeries,
    Holding,
    PortfolioSummary,
    Position,
    Quote,
)

# Net share counts at or below this are liquidation residue, not holdings.
POSITION_EPSILON = 1e-5


def aggregate_holdings(transactions: Iterable[Transaction]) -> dict[str, Holding]:
    """
    Fold a ledger into moving-average cost pools, one per ticker.

    Transactions are applied in the order given. A SELL reduces the pool's
    total cost by the shares sold times the average cost at that moment, so
    realized gain is never tracked. Selling more than is held is not guarded
    and can leave the pool with negative shares. The result is not filtered;
    see :func:`build_positions` for the visible set.
    """
    holdings: dict[str, Holding] = {}

    for txn in transactions:
        holding = holdings.get(txn.ticker)
        if holding is None:
            holding = Holding(ticker=txn.ticker, company_name=txn.company_name)
            holdings[txn.ticker] = holding

        if txn.type == TransactionType.BUY:
            holding.shares += txn.shares
            holding.total_cost += txn.shares * txn.price
        else:
            avg_cost = holding.total_cost / holding.shares if holding.shares > 0 else 0.0
            holding.total_cost -= txn.shares * avg_cost
            holding.shares -= txn.shares

        holding.company_name = txn.company_name

    return holdings


def net_shares(transactions: Iterable[Transaction], ticker: str) -> float:
    """Return the current net share count for one ticker."""
    holding = aggregate_holdings(t for t in transactions if t.ticker == ticker).get(ticker)
    return holding.shares if holding else 0.0


def build_positions(
    transactions: Iterable[Transaction],
    quotes: Optional[Mapping[str, Quote]] = None,
) -> list[Position]:
    """
    Build the visible position set for a ledger.

    Tickers whose net shares are at or below ``POSITION_EPSILON`` are
    dropped. A ticker without a quote is marked at 0. Positions keep the
    order in which their ticker first appears in the ledger.
    """
    quotes = quotes or {}
    positions: list[Position] = []

    for ticker, holding in aggregate_holdings(transactions).items():
        if not holding.shares > POSITION_EPSILON:
            continue

        quote = quotes.get(ticker)
        position = Position(
            ticker=ticker,
            company_name=holding.company_name,
            shares=holding.shares,
            average_cost=holding.average_cost,
            current_price=quote.price if quote else 0.0,
        )
        if quote:
            position.volume = quote.volume
            position.day_high = quote.day_high
            position.day_low = quote.day_low
            position.previous_close = quote.previous_close
        positions.append(position)

    return positions


def compute_summary(positions: Iterable[Position], trading_cash: float = 0.0) -> PortfolioSummary:
    """Aggregate market value, cost basis and gain/loss over a position set."""
    total_market_value = 0.0
    total_cost_basis = 0.0
    for position in positions:
        total_market_value += position.shares * position.current_price
        total_cost_basis += position.shares * position.average_cost

    total_gain_loss = total_market_value - total_cost_basis
    percent = 0.0 if total_cost_basis == 0 else total_gain_loss / total_cost_basis * 100

    return PortfolioSummary(
        total_market_value=total_market_value,
        total_cost_basis=total_cost_basis,
        total_gain_loss=total_gain_loss,
        total_gain_loss_percent=percent,
        trading_cash=trading_cash,
    )


def compute_allocation(positions: Iterable[Position]) -> list[AllocationItem]:
    """Market value share of each position, largest first."""
    positions = list(positions)
    total = sum(p.market_value for p in positions)

    items = [
        AllocationItem(
            ticker=p.ticker,
            market_value=p.market_value,
            percentage=(p.market_value / total * 100) if total > 0 else 0.0,
        )
        for p in positions
    ]
    items.sort(key=lambda item: item.market_value, reverse=True)
    return items


def collect_tickers(transactions: Iterable[Transaction]) -> list[str]:
    """Distinct tickers in ledger order."""
    return list(dict.fromkeys(t.ticker for t in transactions))


def build_historical_series(
    transactions: list[Transaction],
    price_history: Mapping[str, HistoricalSeries],
    today: date,
    days: int = 30,
) -> list[HistoricalDataPoint]:
    """
    Reconstruct the daily value of held positions over a trailing window.

    For each calendar day from ``today - (days - 1)`` to ``today`` the ledger
    is replayed up to and including that day as a plain signed share count
    per ticker. Tickers with a positive count contribute ``shares * close``
    when a close exists for exactly that date; otherwise they contribute
    nothing, so weekends and holidays read low.

    Returns an empty list when there are no transactions or no prices at all.
    """
    if not transactions or days <= 0:
        return []

    closes: dict[str, dict[str, float]] = {}
    for ticker, series in price_history.items():
        if series.data:
            closes[ticker] = {point.date: point.price for point in series.data}
    if not closes:
        return []

    result: list[HistoricalDataPoint] = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        key = date_str(day)

        shares: dict[str, float] = defaultdict(float)
        for txn in transactions:
            if txn.date <= day:
                shares[txn.ticker] += txn.shares if txn.is_buy else -txn.shares

        total = 0.0
        for ticker, count in shares.items():
            if count > 0:
                price = closes.get(ticker, {}).get(key)
                if price is not None:
                    total += count * price

        result.append(HistoricalDataPoint(date=key, value=total))

    return result
