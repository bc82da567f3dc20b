"""Domain models package."""

from stockfolio.domain.models.enums import TransactionType
from stockfolio.domain.models.account import Account
from stockfolio.domain.models.transaction import Transaction
from stockfolio.domain.models.portfolio import PortfolioData

__all__ = [
    "TransactionType",
    "Account",
    "Transaction",
    "PortfolioData",
]
