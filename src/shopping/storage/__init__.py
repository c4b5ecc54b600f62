"""Cart storage factory.

Provides get_storage() / set_storage() / reset_storage() to swap
implementations:
- MemoryStorage for development and testing (default)
- FileStorage for a device with a writable directory

The adapter is chosen by the CART_STORAGE environment variable.
"""

import os

from shopping.storage.port import CartStorage, StorageError

DEFAULT_CART_KEY = "cart"

_current_storage: CartStorage | None = None


def get_storage() -> CartStorage:
    """Return the current cart storage (singleton)."""
    global _current_storage
    if _current_storage is None:
        adapter = os.environ.get("CART_STORAGE", "memory")
        if adapter == "memory":
            from shopping.storage.memory_adapter import MemoryStorage

            _current_storage = MemoryStorage()
        elif adapter == "file":
            from shopping.storage.file_adapter import FileStorage

            _current_storage = FileStorage(os.environ.get("CART_STORAGE_DIR", ".cart"))
        else:
            raise ValueError(f"Unknown cart storage adapter: {adapter}")
    return _current_storage


def set_storage(storage: CartStorage) -> None:
    """Override the active storage (useful for tests)."""
    global _current_storage
    _current_storage = storage


def reset_storage() -> None:
    """Reset to the configured default storage."""
    global _current_storage
    _current_storage = None


def cart_key() -> str:
    return os.environ.get("CART_STORAGE_KEY", DEFAULT_CART_KEY)


__all__ = [
    "CartStorage",
    "StorageError",
    "cart_key",
    "get_storage",
    "reset_storage",
    "set_storage",
]
