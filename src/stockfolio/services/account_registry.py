"""Account registry: accounts, per-account ledgers and cash bookkeeping."""

import dataclasses
import json
import logging
import threading
from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from stockfolio.backup.formats import (
    migrate_legacy,
    new_id,
    parse_stored_state,
    portfolio_to_dict,
)
from stockfolio.core.exceptions import (
    InsufficientSharesError,
    LastAccountError,
    NotFoundError,
    TickerLookupError,
    TickerNotFoundError,
    ValidationError,
)
from stockfolio.core.timezone import parse_trade_date
from stockfolio.domain.models import Account, PortfolioData, Transaction, TransactionType
from stockfolio.repositories.protocols import StateRepository
from stockfolio.services.market_data_service import MarketDataGateway
from stockfolio.services.sample_data import sample_transactions
from stockfolio.services.valuation_engine import POSITION_EPSILON, net_shares

logger = logging.getLogger(__name__)

# Storage keys for the current and the pre-multi-account state blobs
STATE_KEY = "portfolioData"
LEGACY_STATE_KEY = "stockPortfolioTransactions"


@dataclass
class TransactionCreate:
    """Input data for recording a transaction in the active account."""

    ticker: str
    type: TransactionType
    shares: float
    price: float
    date: Union[date, str]
    notes: Optional[str] = None


@dataclass
class TransactionUpdate:
    """Partial update for an existing transaction. None leaves a field as is."""

    ticker: Optional[str] = None
    type: Optional[TransactionType] = None
    shares: Optional[float] = None
    price: Optional[float] = None
    date: Optional[Union[date, str]] = None
    notes: Optional[str] = None


class AccountRegistry:
    """
    Owns the portfolio aggregate and every mutation of it.

    State is loaded lazily from the state repository and written back as one
    blob after each change. Adding a BUY debits the account's cash by
    ``shares * price`` and adding a SELL credits it; deleting reverses the
    original adjustment. Editing never touches cash.
    """

    def __init__(
        self,
        state_repo: StateRepository,
        market_data: MarketDataGateway,
        default_account_name: str = "Main Account",
        default_account_cash: float = 10000.0,
        allow_oversell: bool = True,
    ):
        self._repo = state_repo
        self._market_data = market_data
        self._default_name = default_account_name
        self._default_cash = default_account_cash
        self._allow_oversell = allow_oversell
        self._lock = threading.RLock()
        self._data: Optional[PortfolioData] = None

    # =========================================================================
    # Loading and persistence
    # =========================================================================

    def _default_portfolio(self) -> PortfolioData:
        return migrate_legacy(sample_transactions(), self._default_name, cash=self._default_cash)

    def _load(self) -> PortfolioData:
        raw = self._repo.load(STATE_KEY)
        if raw is not None:
            try:
                data, migrated = parse_stored_state(json.loads(raw), self._default_name)
            except (TypeError, ValueError) as exc:
                logger.warning("Stored portfolio state is unreadable, starting fresh: %s", exc)
                data, migrated = self._default_portfolio(), False
            self._save(data)
            if migrated:
                logger.info("Migrated single-ledger state to multi-account layout")
            return data

        legacy = self._repo.load(LEGACY_STATE_KEY)
        if legacy is not None:
            try:
                data, _ = parse_stored_state(json.loads(legacy), self._default_name)
            except (TypeError, ValueError) as exc:
                # Legacy key is only deleted after a successful parse
                logger.warning("Legacy portfolio state is unreadable, keeping it and starting fresh: %s", exc)
                data = self._default_portfolio()
                self._save(data)
                return data
            self._save(data)
            self._repo.delete(LEGACY_STATE_KEY)
            logger.info("Migrated legacy transaction list into account '%s'", self._default_name)
            return data

        logger.info("No stored portfolio found, creating '%s' with sample data", self._default_name)
        data = self._default_portfolio()
        self._save(data)
        return data

    def _save(self, data: PortfolioData) -> None:
        self._repo.save(STATE_KEY, json.dumps(portfolio_to_dict(data)))

    @property
    def _state(self) -> PortfolioData:
        if self._data is None:
            self._data = self._load()
        return self._data

    def _commit(self) -> None:
        self._save(self._state)

    def snapshot(self) -> PortfolioData:
        """Return a deep copy of the whole aggregate."""
        with self._lock:
            return self._state.clone()

    # =========================================================================
    # Accounts
    # =========================================================================

    def list_accounts(self) -> list[Account]:
        with self._lock:
            return [dataclasses.replace(a) for a in self._state.accounts]

    def get_account(self, account_id: str) -> Account:
        """Get account by ID."""
        with self._lock:
            account = self._state.find_account(account_id)
            if account is None:
                raise NotFoundError("Account", account_id)
            return dataclasses.replace(account)

    def _active(self) -> Account:
        data = self._state
        account = data.find_account(data.active_account_id)
        if account is None:
            # Only reachable if the pointer went stale; fall back to the first account
            account = data.accounts[0]
            data.active_account_id = account.id
        return account

    def get_active_account(self) -> Account:
        with self._lock:
            return dataclasses.replace(self._active())

    def active_transactions(self) -> list[Transaction]:
        """Ledger of the active account, in stored order."""
        with self._lock:
            return list(self._state.ledger(self._active().id))

    def create_account(self, name: str, cash: float = 0.0) -> Account:
        """Create a new account with an empty ledger. The active account is unchanged."""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Account name cannot be empty")

        with self._lock:
            account = Account(id=new_id(), name=name, cash=float(cash))
            self._state.accounts.append(account)
            self._state.ledger(account.id)
            self._commit()
            logger.info("Created account '%s' (%s)", name, account.id)
            return dataclasses.replace(account)

    def update_account(
        self,
        account_id: str,
        name: Optional[str] = None,
        cash: Optional[float] = None,
    ) -> Account:
        """Rename an account and/or overwrite its cash balance."""
        if name is not None and not name.strip():
            raise ValidationError("Account name cannot be empty")

        with self._lock:
            account = self._state.find_account(account_id)
            if account is None:
                raise NotFoundError("Account", account_id)
            if name is not None:
                account.name = name.strip()
            if cash is not None:
                account.cash = float(cash)
            self._commit()
            return dataclasses.replace(account)

    def delete_account(self, account_id: str) -> None:
        """
        Delete an account together with its ledger.

        If it was active, the first remaining account becomes active.

        Raises:
            LastAccountError: If it is the only account.
        """
        with self._lock:
            data = self._state
            account = data.find_account(account_id)
            if account is None:
                raise NotFoundError("Account", account_id)
            if len(data.accounts) <= 1:
                raise LastAccountError(account.name)

            data.accounts = [a for a in data.accounts if a.id != account_id]
            data.transactions.pop(account_id, None)
            if data.active_account_id == account_id:
                data.active_account_id = data.accounts[0].id
            self._commit()
            logger.info("Deleted account '%s' (%s)", account.name, account_id)

    def switch_account(self, account_id: str) -> Account:
        """Make another account active."""
        with self._lock:
            account = self._state.find_account(account_id)
            if account is None:
                raise NotFoundError("Account", account_id)
            self._state.active_account_id = account.id
            self._commit()
            return dataclasses.replace(account)

    # =========================================================================
    # Transactions (active account)
    # =========================================================================

    def lookup_company_name(self, ticker: str) -> str:
        """
        Resolve a ticker through the market data gateway.

        Raises:
            TickerLookupError: If the ticker is unknown.
        """
        try:
            return self._market_data.fetch_quote(ticker).company_name
        except TickerNotFoundError as exc:
            raise TickerLookupError(ticker.strip().upper()) from exc

    @staticmethod
    def _validate_amounts(shares: float, price: float) -> None:
        if not shares > 0:
            raise ValidationError("Shares must be greater than zero")
        if price < 0:
            raise ValidationError("Price cannot be negative")

    def _check_oversell(
        self,
        current: list[Transaction],
        candidate: list[Transaction],
        *tickers: str,
    ) -> None:
        """
        Reject a candidate ledger that leaves any of ``tickers`` net short.

        A ticker that was already short only fails if the change shorts it further.
        """
        if self._allow_oversell:
            return
        for ticker in dict.fromkeys(tickers):
            after = net_shares(candidate, ticker)
            if after < -POSITION_EPSILON and after < net_shares(current, ticker) - POSITION_EPSILON:
                entries = [t for t in candidate if t.ticker == ticker]
                bought = sum(t.shares for t in entries if t.is_buy)
                sold = sum(t.shares for t in entries if not t.is_buy)
                raise InsufficientSharesError(ticker, sold, bought)

    def add_transaction(self, data: TransactionCreate) -> Transaction:
        """
        Record a transaction in the active account and adjust its cash.

        The ticker is validated and its company name captured through a
        quote lookup; nothing is recorded if the lookup fails. The ledger is
        kept sorted newest date first.
        """
        ticker = (data.ticker or "").strip().upper()
        if not ticker:
            raise ValidationError("Ticker is required")
        self._validate_amounts(data.shares, data.price)
        try:
            txn_type = TransactionType(data.type)
        except ValueError as exc:
            raise ValidationError(f"Invalid transaction type: {data.type}") from exc
        try:
            txn_date = parse_trade_date(data.date)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

        company_name = self.lookup_company_name(ticker)

        txn = Transaction(
            id=new_id(),
            ticker=ticker,
            company_name=company_name,
            type=txn_type,
            shares=float(data.shares),
            price=float(data.price),
            date=txn_date,
            notes=(data.notes or "").strip() or None,
        )

        with self._lock:
            account = self._active()
            ledger = self._state.ledger(account.id)
            self._check_oversell(ledger, ledger + [txn], txn.ticker)

            ledger.append(txn)
            ledger.sort(key=lambda t: t.date, reverse=True)
            account.cash += txn.cash_impact
            self._commit()

        logger.info("Recorded %s %g %s @ %g", txn.type.value, txn.shares, txn.ticker, txn.price)
        return txn

    def _find(self, ledger: list[Transaction], transaction_id: str) -> int:
        for index, txn in enumerate(ledger):
            if txn.id == transaction_id:
                return index
        raise NotFoundError("Transaction", transaction_id)

    def update_transaction(self, transaction_id: str, patch: TransactionUpdate) -> Transaction:
        """
        Replace a transaction in the active ledger, keeping its id and position.

        Cash is not adjusted. Changing the ticker re-validates it and captures
        the new company name.
        """
        with self._lock:
            ledger = self._state.ledger(self._active().id)
            index = self._find(ledger, transaction_id)
            existing = ledger[index]

        changes = {}
        if patch.ticker is not None and patch.ticker.strip().upper() != existing.ticker:
            changes["ticker"] = patch.ticker.strip().upper()
            changes["company_name"] = self.lookup_company_name(changes["ticker"])
        if patch.type is not None:
            try:
                changes["type"] = TransactionType(patch.type)
            except ValueError as exc:
                raise ValidationError(f"Invalid transaction type: {patch.type}") from exc
        if patch.shares is not None:
            changes["shares"] = float(patch.shares)
        if patch.price is not None:
            changes["price"] = float(patch.price)
        if patch.date is not None:
            try:
                changes["date"] = parse_trade_date(patch.date)
            except ValueError as exc:
                raise ValidationError(str(exc)) from exc
        if patch.notes is not None:
            changes["notes"] = patch.notes.strip() or None

        updated = dataclasses.replace(existing, **changes)
        self._validate_amounts(updated.shares, updated.price)

        with self._lock:
            ledger = self._state.ledger(self._active().id)
            index = self._find(ledger, transaction_id)
            candidate = ledger[:index] + [updated] + ledger[index + 1:]
            self._check_oversell(ledger, candidate, existing.ticker, updated.ticker)
            ledger[index] = updated
            self._commit()

        return updated

    def delete_transaction(self, transaction_id: str) -> None:
        """
        Remove a transaction from the active ledger and reverse its cash adjustment.

        Raises:
            InsufficientSharesError: If oversells are disallowed and removing a
                BUY would leave the ticker net short.
        """
        with self._lock:
            account = self._active()
            ledger = self._state.ledger(account.id)
            index = self._find(ledger, transaction_id)
            txn = ledger[index]
            self._check_oversell(ledger, ledger[:index] + ledger[index + 1:], txn.ticker)
            del ledger[index]
            account.cash -= txn.cash_impact
            self._commit()
        logger.info("Deleted transaction %s (%s %s)", transaction_id, txn.type.value, txn.ticker)

    # =========================================================================
    # Wholesale replacement (imports)
    # =========================================================================

    def replace_all(self, data: PortfolioData) -> None:
        """Replace the whole aggregate."""
        with self._lock:
            self._data = data.clone()
            self._commit()

    def replace_active_account(self, name: str, cash: float, transactions: list[Transaction]) -> None:
        """Replace the active account's name, cash and ledger."""
        with self._lock:
            account = self._active()
            account.name = name
            account.cash = float(cash)
            self._state.transactions[account.id] = list(transactions)
            self._commit()

    def replace_active_ledger(self, transactions: list[Transaction]) -> None:
        """Replace only the active account's ledger; cash is untouched."""
        with self._lock:
            self._state.transactions[self._active().id] = list(transactions)
            self._commit()
