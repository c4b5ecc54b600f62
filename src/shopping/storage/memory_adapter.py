"""In-memory cart storage for development and testing.

Can be configured at runtime to fail, so callers' handling of storage
failures can be exercised without a broken disk.
"""

from shopping.storage.port import CartStorage, StorageError


class MemoryStorage(CartStorage):
    """Dict-backed storage that records every call."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})
        self.should_fail: bool = False
        self.failure_reason: str = "Storage unavailable"
        self.calls: list[tuple[str, str]] = []

    def configure(self, should_fail: bool, failure_reason: str = "Storage unavailable") -> None:
        """Configure storage behavior at runtime."""
        self.should_fail = should_fail
        self.failure_reason = failure_reason

    def _check(self) -> None:
        if self.should_fail:
            raise StorageError(self.failure_reason)

    async def get(self, key: str) -> str | None:
        self.calls.append(("get", key))
        self._check()
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.calls.append(("set", key))
        self._check()
        self.data[key] = value

    async def delete(self, key: str) -> None:
        self.calls.append(("delete", key))
        self._check()
        self.data.pop(key, None)
