"""Cart storage port (abstract interface).

A durable key/value store holding serialized cart snapshots. Swapping
adapters (in-memory for tests, files on disk for a device) never touches the
cart code.
"""

from abc import ABC, abstractmethod


class StorageError(Exception):
    """Raised by adapters when a read, write or delete fails."""


class CartStorage(ABC):
    """Abstract asynchronous key/value storage."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""
        ...

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove ``key``. Deleting an absent key is not an error."""
        ...
