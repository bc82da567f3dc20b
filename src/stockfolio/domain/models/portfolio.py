"""Portfolio aggregate: accounts, per-account ledgers and the active pointer."""

import copy
from dataclasses import dataclass, field
from typing import Optional

from stockfolio.domain.models.account import Account
from stockfolio.domain.models.transaction import Transaction


@dataclass
class PortfolioData:
    """
    Full persisted aggregate.

    ``transactions`` maps account id -> ordered ledger. Every account in
    ``accounts`` has an entry, possibly empty.
    """

    accounts: list[Account] = field(default_factory=list)
    transactions: dict[str, list[Transaction]] = field(default_factory=dict)
    active_account_id: Optional[str] = None

    def find_account(self, account_id: Optional[str]) -> Optional[Account]:
        """Return the account with the given id, or None."""
        for account in self.accounts:
            if account.id == account_id:
                return account
        return None

    def ledger(self, account_id: str) -> list[Transaction]:
        """Return the ledger partition of an account (created empty on first access)."""
        return self.transactions.setdefault(account_id, [])

    def clone(self) -> "PortfolioData":
        """Deep copy, so callers can stage or inspect without sharing mutable state."""
        return copy.deepcopy(self)
