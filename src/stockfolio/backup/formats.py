"""
Serialized shapes of portfolio state.

All persisted and exported JSON uses camelCase keys:

- transaction: ``{id, ticker, companyName, type, shares, price, date, notes?}``
- account: ``{id, name, cash}``
- full portfolio: ``{accounts, transactions: {accountId: [...]}, activeAccountId}``
- single account: ``{account: {name, cash}, transactions: [...]}``

Import payloads are resolved once into one of three tagged types
(:class:`FullBackup`, :class:`AccountBackup`, :class:`TransactionList`) so
callers dispatch on the type instead of probing keys.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from stockfolio.core.exceptions import ImportFormatError
from stockfolio.domain.models import Account, PortfolioData, Transaction

logger = logging.getLogger(__name__)


def new_id() -> str:
    """Generate a new opaque identifier."""
    return str(uuid.uuid4())


# =============================================================================
# Tagged import payloads
# =============================================================================


@dataclass
class FullBackup:
    """Every account, every ledger and the active pointer."""

    data: PortfolioData
    kind: str = field(default="full", init=False)


@dataclass
class AccountBackup:
    """One account's name, cash and ledger."""

    name: str
    cash: float
    transactions: list[Transaction] = field(default_factory=list)
    kind: str = field(default="account", init=False)


@dataclass
class TransactionList:
    """A bare ledger with no account information (JSON array or CSV)."""

    transactions: list[Transaction] = field(default_factory=list)
    kind: str = field(default="transactions", init=False)


ImportPayload = Union[FullBackup, AccountBackup, TransactionList]


# =============================================================================
# Transactions and accounts
# =============================================================================


def transaction_to_dict(txn: Transaction) -> dict[str, Any]:
    """Serialize a transaction with camelCase keys."""
    result: dict[str, Any] = {
        "id": txn.id,
        "ticker": txn.ticker,
        "companyName": txn.company_name,
        "type": txn.type.value,
        "shares": txn.shares,
        "price": txn.price,
        "date": txn.date.isoformat(),
    }
    if txn.notes:
        result["notes"] = txn.notes
    return result


def transaction_from_dict(raw: Any) -> Transaction:
    """
    Build a transaction from a camelCase mapping.

    Raises:
        ValueError: If a field is missing or invalid.
    """
    if not isinstance(raw, dict):
        raise ValueError("Transaction entry must be an object")

    txn_id = str(raw.get("id") or "").strip()
    ticker = str(raw.get("ticker") or "").strip()
    if not txn_id or not ticker:
        raise ValueError("Transaction entry requires 'id' and 'ticker'")

    shares = float(raw.get("shares"))
    price = float(raw.get("price"))
    if not shares > 0:
        raise ValueError(f"Shares must be positive for transaction {txn_id}")
    if price < 0:
        raise ValueError(f"Price cannot be negative for transaction {txn_id}")

    notes = raw.get("notes")
    return Transaction(
        id=txn_id,
        ticker=ticker,
        company_name=str(raw.get("companyName") or ticker.upper()),
        type=str(raw.get("type") or "").strip().upper(),
        shares=shares,
        price=price,
        date=raw.get("date") or "",
        notes=str(notes) if notes else None,
    )


def transactions_from_list(raw: Any, skip_invalid: bool = False) -> list[Transaction]:
    """
    Build a ledger from a list of camelCase mappings.

    With ``skip_invalid`` an entry that fails validation is logged and
    dropped instead of failing the whole list.
    """
    if not isinstance(raw, list):
        raise ValueError("Expected a list of transactions")
    result = []
    for index, item in enumerate(raw, start=1):
        try:
            result.append(transaction_from_dict(item))
        except (TypeError, ValueError) as exc:
            if not skip_invalid:
                raise ValueError(f"Transaction {index}: {exc}") from exc
            logger.warning("Skipping invalid transaction %d: %s", index, exc)
    return result


def account_to_dict(account: Account) -> dict[str, Any]:
    return {"id": account.id, "name": account.name, "cash": account.cash}


def account_from_dict(raw: Any) -> Account:
    if not isinstance(raw, dict):
        raise ValueError("Account entry must be an object")
    account_id = str(raw.get("id") or "").strip()
    name = str(raw.get("name") or "").strip()
    if not account_id or not name:
        raise ValueError("Account entry requires 'id' and 'name'")
    return Account(id=account_id, name=name, cash=float(raw.get("cash") or 0.0))


# =============================================================================
# Whole-portfolio shapes
# =============================================================================


def portfolio_to_dict(data: PortfolioData) -> dict[str, Any]:
    """Serialize the full aggregate."""
    return {
        "accounts": [account_to_dict(a) for a in data.accounts],
        "transactions": {
            account.id: [transaction_to_dict(t) for t in data.transactions.get(account.id, [])]
            for account in data.accounts
        },
        "activeAccountId": data.active_account_id,
    }


def portfolio_from_dict(raw: dict[str, Any]) -> PortfolioData:
    """
    Build the full aggregate from its serialized form.

    Every account gets a ledger entry. An active pointer that does not name
    an existing account falls back to the first account.

    Raises:
        ValueError: If the shape is invalid or there are no accounts.
    """
    raw_accounts = raw.get("accounts")
    if not isinstance(raw_accounts, list) or not raw_accounts:
        raise ValueError("Backup must contain at least one account")

    accounts = [account_from_dict(a) for a in raw_accounts]
    raw_ledgers = raw.get("transactions") or {}
    if not isinstance(raw_ledgers, dict):
        raise ValueError("'transactions' must map account ids to lists")

    transactions = {
        account.id: transactions_from_list(raw_ledgers.get(account.id) or [])
        for account in accounts
    }

    active_id = raw.get("activeAccountId")
    if not any(a.id == active_id for a in accounts):
        active_id = accounts[0].id

    return PortfolioData(accounts=accounts, transactions=transactions, active_account_id=active_id)


def single_account_to_dict(account: Account, transactions: list[Transaction]) -> dict[str, Any]:
    return {
        "account": {"name": account.name, "cash": account.cash},
        "transactions": [transaction_to_dict(t) for t in transactions],
    }


def migrate_legacy(
    transactions: list[Transaction],
    account_name: str,
    cash: float = 0.0,
) -> PortfolioData:
    """Wrap a pre-multi-account ledger in one synthesized default account."""
    account = Account(id=new_id(), name=account_name, cash=cash)
    return PortfolioData(
        accounts=[account],
        transactions={account.id: list(transactions)},
        active_account_id=account.id,
    )


def parse_stored_state(raw: Any, default_account_name: str) -> tuple[PortfolioData, bool]:
    """
    Decode a persisted state object.

    Returns ``(data, migrated)``; ``migrated`` is True when the input was a
    legacy single-ledger blob (a bare list or ``{transactions: [...]}``).
    Invalid entries in a legacy ledger are skipped so the rest survives.

    Raises:
        ValueError: If the object matches no known shape.
    """
    if isinstance(raw, dict) and "accounts" in raw:
        return portfolio_from_dict(raw), False
    if isinstance(raw, dict) and isinstance(raw.get("transactions"), list):
        return migrate_legacy(
            transactions_from_list(raw["transactions"], skip_invalid=True),
            default_account_name,
        ), True
    if isinstance(raw, list):
        return migrate_legacy(transactions_from_list(raw, skip_invalid=True), default_account_name), True
    raise ValueError("Unrecognized state layout")


def resolve_payload(raw: Any) -> ImportPayload:
    """
    Resolve parsed JSON into one of the three import shapes.

    Raises:
        ImportFormatError: If the JSON matches no shape or holds invalid entries.
    """
    try:
        if isinstance(raw, dict) and "accounts" in raw:
            return FullBackup(data=portfolio_from_dict(raw))
        if isinstance(raw, dict) and "account" in raw:
            account = raw.get("account")
            if not isinstance(account, dict):
                raise ValueError("'account' must be an object")
            return AccountBackup(
                name=str(account.get("name") or "").strip() or "Imported Account",
                cash=float(account.get("cash") or 0.0),
                transactions=transactions_from_list(raw.get("transactions") or []),
            )
        if isinstance(raw, list):
            return TransactionList(transactions=transactions_from_list(raw))
    except (TypeError, ValueError) as exc:
        raise ImportFormatError(f"Invalid backup file: {exc}") from exc

    raise ImportFormatError(
        "Invalid JSON format. Expected a portfolio backup, an account backup "
        "or an array of transactions."
    )
