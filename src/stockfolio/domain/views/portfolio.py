"""View models for market data and valuation outputs."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from stockfolio.domain.models import Account


@dataclass
class Quote:
    """Point-in-time market quote for a ticker."""

    ticker: str
    company_name: str
    price: float
    volume: float = 0.0
    day_high: float = 0.0
    day_low: float = 0.0
    previous_close: float = 0.0
    is_mock: bool = False


@dataclass
class PricePoint:
    """Daily close for one calendar date (``YYYY-MM-DD``)."""

    date: str
    price: float


@dataclass
class HistoricalSeries:
    """Daily closes for a ticker, oldest first."""

    ticker: str
    data: list[PricePoint] = field(default_factory=list)
    is_mock: bool = False


@dataclass
class Holding:
    """Moving-average cost pool for one ticker, before visibility filtering."""

    ticker: str
    company_name: str
    shares: float = 0.0
    total_cost: float = 0.0

    @property
    def average_cost(self) -> float:
        return self.total_cost / self.shares if self.shares > 0 else 0.0


@dataclass
class Position:
    """View model for a single visible holding, marked to the latest quote."""

    ticker: str
    company_name: str
    shares: float
    average_cost: float
    current_price: float = 0.0
    volume: Optional[float] = None
    day_high: Optional[float] = None
    day_low: Optional[float] = None
    previous_close: Optional[float] = None

    @property
    def market_value(self) -> float:
        return self.shares * self.current_price

    @property
    def cost_basis(self) -> float:
        return self.shares * self.average_cost

    @property
    def gain_loss(self) -> float:
        return self.market_value - self.cost_basis

    @property
    def gain_loss_percent(self) -> float:
        cost_basis = self.cost_basis
        return 0.0 if cost_basis == 0 else self.gain_loss / cost_basis * 100


@dataclass
class PortfolioSummary:
    """Aggregate metrics over a position set. Values are unrounded."""

    total_market_value: float = 0.0
    total_cost_basis: float = 0.0
    total_gain_loss: float = 0.0
    total_gain_loss_percent: float = 0.0
    trading_cash: float = 0.0


@dataclass
class AllocationItem:
    """Single item in allocation breakdown."""

    ticker: str
    market_value: float
    percentage: float


@dataclass
class HistoricalDataPoint:
    """Total marked-to-market value of held positions on one date."""

    date: str
    value: float


@dataclass
class PortfolioSnapshot:
    """Everything the presentation layer renders for the active account."""

    account: Account
    positions: list[Position] = field(default_factory=list)
    summary: PortfolioSummary = field(default_factory=PortfolioSummary)
    allocation: list[AllocationItem] = field(default_factory=list)
    history: list[HistoricalDataPoint] = field(default_factory=list)
    is_mock: bool = False
    as_of: Optional[datetime] = None


@dataclass
class ImportPreview:
    """Description of a staged import shown to the user before confirmation."""

    kind: str
    description: str
    transaction_count: int = 0
    account_count: int = 0
