"""
Abstract key-value medium.

The store treats its medium as an opaque string get/set API with a byte
budget, the way a browser treats local storage.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..exceptions import StorageQuotaError


def entry_size(key: str, value: str) -> int:
    """Bytes an entry occupies: UTF-8 key plus UTF-8 value."""
    return len(key.encode("utf-8")) + len(value.encode("utf-8"))


class KeyValueMedium(ABC):
    """
    Synchronous string key-value storage with an optional byte budget.

    Attributes:
        quota_bytes: Maximum total entry size, or None for unbounded.
    """

    quota_bytes: Optional[int] = None

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove key. Returns True if it existed."""

    @abstractmethod
    def keys(self) -> List[str]:
        """All stored keys."""

    @abstractmethod
    def size_bytes(self) -> int:
        """Total size of all entries."""

    def check_quota(self, key: str, value: str, current_total: int, existing_size: int) -> None:
        """Raise StorageQuotaError if writing key=value would exceed the budget."""
        if self.quota_bytes is None:
            return
        needed = current_total - existing_size + entry_size(key, value)
        if needed > self.quota_bytes:
            raise StorageQuotaError(key, needed, self.quota_bytes)

    def close(self) -> None:
        """Release any held resources."""
        pass
