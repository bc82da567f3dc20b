"""Sample ledger shown on first run."""

from stockfolio.backup.formats import new_id
from stockfolio.domain.models import Transaction, TransactionType

_SAMPLE_ROWS = [
    ("AAPL", "Apple Inc.", TransactionType.BUY, 10, 150.75, "2023-05-10", "Initial purchase"),
    ("GOOGL", "Alphabet Inc.", TransactionType.BUY, 5, 120.20, "2023-07-22", "Buy the dip"),
    ("TSLA", "Tesla, Inc.", TransactionType.BUY, 15, 250.00, "2023-01-15", "Long term hold"),
    ("NVDA", "NVIDIA Corporation", TransactionType.BUY, 15, 450.50, "2023-09-01", "AI boom"),
    ("TSLA", "Tesla, Inc.", TransactionType.SELL, 7, 280.00, "2023-10-05", "Take some profit"),
]


def sample_transactions() -> list[Transaction]:
    """Return a fresh copy of the sample ledger with new ids."""
    return [
        Transaction(
            id=new_id(),
            ticker=ticker,
            company_name=name,
            type=txn_type,
            shares=float(shares),
            price=price,
            date=day,
            notes=notes,
        )
        for ticker, name, txn_type, shares, price, day, notes in _SAMPLE_ROWS
    ]
