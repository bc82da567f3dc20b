"""Repository protocol definitions (interfaces)."""

from stockfolio.repositories.protocols.state_repo import StateRepository

__all__ = [
    "StateRepository",
]
