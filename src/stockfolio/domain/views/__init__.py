"""View models for service outputs."""

from stockfolio.domain.views.portfolio import (
    Quote,
    PricePoint,
    HistoricalSeries,
    Holding,
    Position,
    PortfolioSummary,
    AllocationItem,
    HistoricalDataPoint,
    PortfolioSnapshot,
    ImportPreview,
)

__all__ = [
    "Quote",
    "PricePoint",
    "HistoricalSeries",
    "Holding",
    "Position",
    "PortfolioSummary",
    "AllocationItem",
    "HistoricalDataPoint",
    "PortfolioSnapshot",
    "ImportPreview",
]
