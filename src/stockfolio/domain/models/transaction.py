"""Transaction domain model."""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from stockfolio.core.timezone import parse_trade_date
from stockfolio.domain.models.enums import TransactionType


@dataclass(frozen=True)
class Transaction:
    """
    Ledger transaction entry (source of truth).

    Immutable once created; an edit replaces the whole record under the same id.
    - ticker is stored uppercase
    - company_name is captured at creation and never re-fetched
    - shares/price are plain floats (USD only)
    """

    id: str
    ticker: str
    company_name: str
    type: TransactionType
    shares: float
    price: float
    date: date
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "ticker", (self.ticker or "").strip().upper())
        if isinstance(self.type, str):
            object.__setattr__(self, "type", TransactionType(self.type.upper()))
        object.__setattr__(self, "date", parse_trade_date(self.date))

    @property
    def is_buy(self) -> bool:
        """Return True for BUY transactions."""
        return self.type == TransactionType.BUY

    @property
    def gross_amount(self) -> float:
        """Execution value: shares × price."""
        return self.shares * self.price

    @property
    def cash_impact(self) -> float:
        """
        Cash effect of recording this transaction.

        Negative for BUY (cash spent), positive for SELL (proceeds received).
        """
        if self.is_buy:
            return -self.gross_amount
        return self.gross_amount
