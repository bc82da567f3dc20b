"""Repository layer - data access abstractions and implementations."""

from stockfolio.repositories.protocols import StateRepository

__all__ = [
    "StateRepository",
]
