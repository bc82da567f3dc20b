"""Backup file parsing (JSON and CSV)."""

import csv
import io
import json
import logging
from typing import Optional, Union

from stockfolio.backup.formats import ImportPayload, TransactionList, resolve_payload, transactions_from_list
from stockfolio.core.exceptions import ImportFormatError

logger = logging.getLogger(__name__)

# Columns every transaction CSV must carry
CSV_COLUMNS = ["id", "ticker", "companyName", "type", "shares", "price", "date", "notes"]

# Extra leading columns of the all-accounts CSV export
ACCOUNT_CSV_COLUMNS = ["accountId", "accountName", "accountCash"]


class BackupImporter:
    """
    Parses uploaded backup files into an import payload.

    Nothing here touches portfolio state; a parse failure raises
    ``ImportFormatError`` before anything can be applied.
    """

    def parse(
        self,
        content: Union[str, bytes],
        filename: Optional[str] = None,
        fmt: Optional[str] = None,
    ) -> ImportPayload:
        """
        Parse file content into a payload.

        The format comes from ``fmt`` ("json"/"csv") or the filename suffix.
        """
        if isinstance(content, bytes):
            try:
                content = content.decode("utf-8-sig")
            except UnicodeDecodeError as exc:
                raise ImportFormatError("File is not valid UTF-8 text") from exc

        kind = (fmt or "").lower() or _format_from_filename(filename)
        if kind == "json":
            return self.parse_json(content)
        if kind == "csv":
            return self.parse_csv(content)
        raise ImportFormatError("Unsupported file type. Please upload a .json or .csv file.")

    def parse_json(self, content: str) -> ImportPayload:
        try:
            raw = json.loads(content)
        except json.JSONDecodeError as exc:
            raise ImportFormatError(
                "Failed to read or parse the file. Please ensure it is correctly formatted."
            ) from exc
        payload = resolve_payload(raw)
        logger.info("Parsed JSON backup as '%s'", payload.kind)
        return payload

    def parse_csv(self, content: str) -> TransactionList:
        """
        Parse a transaction CSV into a bare ledger.

        Account columns from an all-accounts export are ignored; cash is
        never recovered from CSV.
        """
        reader = csv.DictReader(io.StringIO(content.strip()))
        if not reader.fieldnames:
            return TransactionList()

        fieldnames = [name.strip() for name in reader.fieldnames]
        reader.fieldnames = fieldnames
        missing = [c for c in CSV_COLUMNS if c != "notes" and c not in fieldnames]
        if missing:
            raise ImportFormatError(f"Missing required columns: {', '.join(missing)}")

        rows = []
        for row in reader:
            if not any((value or "").strip() for value in row.values() if isinstance(value, str)):
                continue
            rows.append({column: (row.get(column) or "").strip() for column in CSV_COLUMNS})

        try:
            transactions = transactions_from_list(rows)
        except ValueError as exc:
            raise ImportFormatError(f"Invalid CSV file: {exc}") from exc

        logger.info("Parsed CSV backup with %d transactions", len(transactions))
        return TransactionList(transactions=transactions)


def _format_from_filename(filename: Optional[str]) -> str:
    name = (filename or "").lower()
    if name.endswith(".json"):
        return "json"
    if name.endswith(".csv"):
        return "csv"
    return ""
