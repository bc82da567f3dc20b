"""Account domain model."""

from dataclasses import dataclass


@dataclass
class Account:
    """
    Portfolio account container.

    Each account owns one ledger partition. ``cash`` is a free-standing balance:
    BUY/SELL entries adjust it when added or deleted, and the user may also
    overwrite it directly.
    """

    id: str
    name: str
    cash: float = 0.0
