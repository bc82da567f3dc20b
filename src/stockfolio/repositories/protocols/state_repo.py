"""State repository protocol."""

from typing import Protocol, Optional


class StateRepository(Protocol):
    """
    Interface for the key-value store holding serialized portfolio state.

    Values are opaque text (JSON); the store never interprets them. A save
    replaces the stored value for a key atomically.
    """

    def load(self, key: str) -> Optional[str]:
        """Return the stored value for key, or None."""
        ...

    def save(self, key: str, value: str) -> None:
        """Insert or replace the value for key."""
        ...

    def delete(self, key: str) -> None:
        """Remove key if present."""
        ...
