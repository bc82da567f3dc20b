"""Backup export (JSON and CSV)."""

import csv
import io
import json

from stockfolio.backup.formats import portfolio_to_dict, single_account_to_dict
from stockfolio.backup.importer import ACCOUNT_CSV_COLUMNS, CSV_COLUMNS
from stockfolio.domain.models import Account, PortfolioData, Transaction


def _number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else repr(float(value))


def _transaction_row(txn: Transaction) -> dict[str, str]:
    return {
        "id": txn.id,
        "ticker": txn.ticker,
        "companyName": txn.company_name,
        "type": txn.type.value,
        "shares": _number(txn.shares),
        "price": _number(txn.price),
        "date": txn.date.isoformat(),
        "notes": txn.notes or "",
    }


class BackupExporter:
    """
    Serializes portfolio state for download.

    JSON keeps full fidelity including cash; CSV is one row per transaction.
    """

    def export_account_json(self, account: Account, transactions: list[Transaction]) -> str:
        """Single-account backup: ``{account: {name, cash}, transactions}``."""
        return json.dumps(single_account_to_dict(account, transactions), indent=2)

    def export_all_json(self, data: PortfolioData) -> str:
        """Full backup of every account."""
        return json.dumps(portfolio_to_dict(data), indent=2)

    def export_account_csv(self, transactions: list[Transaction]) -> str:
        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=CSV_COLUMNS, lineterminator="\n")
        writer.writeheader()
        for txn in transactions:
            writer.writerow(_transaction_row(txn))
        return buffer.getvalue()

    def export_all_csv(self, data: PortfolioData) -> str:
        """Every account's ledger, each row prefixed with its account's id, name and cash."""
        buffer = io.StringIO()
        writer = csv.DictWriter(
            buffer,
            fieldnames=ACCOUNT_CSV_COLUMNS + CSV_COLUMNS,
            lineterminator="\n",
        )
        writer.writeheader()
        for account in data.accounts:
            for txn in data.transactions.get(account.id, []):
                row = {
                    "accountId": account.id,
                    "accountName": account.name,
                    "accountCash": _number(account.cash),
                }
                row.update(_transaction_row(txn))
                writer.writerow(row)
        return buffer.getvalue()
