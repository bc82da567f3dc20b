"""Core utilities and shared functionality."""

from stockfolio.core.timezone import (
    now_eastern,
    today_eastern,
    parse_trade_date,
    date_str,
    EASTERN_TZ,
)
from stockfolio.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
    LastAccountError,
    InsufficientSharesError,
    TickerLookupError,
    ImportFormatError,
    NoPendingImportError,
    MarketDataUnavailableError,
    TickerNotFoundError,
)

__all__ = [
    "now_eastern",
    "today_eastern",
    "parse_trade_date",
    "date_str",
    "EASTERN_TZ",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "LastAccountError",
    "InsufficientSharesError",
    "TickerLookupError",
    "ImportFormatError",
    "NoPendingImportError",
    "MarketDataUnavailableError",
    "TickerNotFoundError",
]
