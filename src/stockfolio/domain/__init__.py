"""Domain layer - pure business models with no external dependencies."""

from stockfolio.domain.models import (
    Account,
    Transaction,
    TransactionType,
    PortfolioData,
)

__all__ = [
    "Account",
    "Transaction",
    "TransactionType",
    "PortfolioData",
]
