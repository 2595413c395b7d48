"""
In-memory medium.

Used by tests and by callers that only need a throwaway store.
"""

from typing import Dict, List, Optional

from .base import KeyValueMedium, entry_size


class MemoryMedium(KeyValueMedium):
    """Dict-backed medium preserving insertion order."""

    def __init__(self, initial: Optional[Dict[str, str]] = None, quota_bytes: Optional[int] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self.quota_bytes = quota_bytes

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        existing = self._data.get(key)
        existing_size = entry_size(key, existing) if existing is not None else 0
        self.check_quota(key, value, self.size_bytes(), existing_size)
        self._data[key] = value

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> List[str]:
        return list(self._data)

    def size_bytes(self) -> int:
        return sum(entry_size(k, v) for k, v in self._data.items())

    def snapshot(self) -> Dict[str, str]:
        """Copy of the raw contents."""
        return dict(self._data)
