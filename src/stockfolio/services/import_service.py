"""Staged import of backup files."""

import logging
import threading
from typing import Optional, Union

from stockfolio.backup.formats import AccountBackup, FullBackup, ImportPayload, TransactionList
from stockfolio.backup.importer import BackupImporter
from stockfolio.core.exceptions import NoPendingImportError
from stockfolio.domain.views import ImportPreview
from stockfolio.services.account_registry import AccountRegistry

logger = logging.getLogger(__name__)


class ImportService:
    """
    Two-step import: stage a parsed file, then confirm or cancel.

    Staging never touches portfolio state. Only :meth:`confirm` applies the
    payload, and only the payload staged last. Imports replace data wholesale
    and never run cash bookkeeping.
    """

    def __init__(self, registry: AccountRegistry, importer: Optional[BackupImporter] = None):
        self._registry = registry
        self._importer = importer or BackupImporter()
        self._lock = threading.Lock()
        self._pending: Optional[ImportPayload] = None

    @property
    def pending(self) -> Optional[ImportPayload]:
        return self._pending

    def stage(
        self,
        content: Union[str, bytes],
        filename: Optional[str] = None,
        fmt: Optional[str] = None,
    ) -> ImportPreview:
        """
        Parse a file and hold it for confirmation.

        A parse failure raises ``ImportFormatError`` and leaves any previously
        staged import in place.
        """
        payload = self._importer.parse(content, filename=filename, fmt=fmt)
        preview = self.describe(payload)
        with self._lock:
            self._pending = payload
        logger.info("Staged import: %s", preview.description)
        return preview

    def describe(self, payload: ImportPayload) -> ImportPreview:
        """Explain what confirming the payload would replace."""
        active = self._registry.get_active_account()

        if isinstance(payload, FullBackup):
            accounts = payload.data.accounts
            count = sum(len(v) for v in payload.data.transactions.values())
            return ImportPreview(
                kind=payload.kind,
                description=(
                    f"Replace ALL accounts and transactions with {len(accounts)} account(s) "
                    f"and {count} transaction(s) from the backup."
                ),
                transaction_count=count,
                account_count=len(accounts),
            )

        if isinstance(payload, AccountBackup):
            return ImportPreview(
                kind=payload.kind,
                description=(
                    f"Replace account '{active.name}' with '{payload.name}' "
                    f"(cash {payload.cash:,.2f}) and {len(payload.transactions)} transaction(s)."
                ),
                transaction_count=len(payload.transactions),
                account_count=1,
            )

        return ImportPreview(
            kind=payload.kind,
            description=(
                f"Replace the transactions of account '{active.name}' with "
                f"{len(payload.transactions)} transaction(s). Cash is unchanged."
            ),
            transaction_count=len(payload.transactions),
            account_count=0,
        )

    def confirm(self) -> ImportPreview:
        """
        Apply the staged payload.

        Raises:
            NoPendingImportError: If nothing is staged.
        """
        with self._lock:
            payload = self._pending
            self._pending = None
        if payload is None:
            raise NoPendingImportError()

        preview = self.describe(payload)
        if isinstance(payload, FullBackup):
            self._registry.replace_all(payload.data)
        elif isinstance(payload, AccountBackup):
            self._registry.replace_active_account(payload.name, payload.cash, payload.transactions)
        elif isinstance(payload, TransactionList):
            self._registry.replace_active_ledger(payload.transactions)

        logger.info("Applied import: %s", preview.description)
        return preview

    def cancel(self) -> bool:
        """Drop the staged payload. Returns False if nothing was staged."""
        with self._lock:
            had_pending = self._pending is not None
            self._pending = None
        if had_pending:
            logger.info("Cancelled staged import")
        return had_pending
