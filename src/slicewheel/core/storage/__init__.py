"""
Key-value media for slicewheel.

Provides pluggable persistence backends:
- SQLiteMedium: Local persistence in a single SQLite file
- MemoryMedium: Fast ephemeral storage for testing
"""

from .base import KeyValueMedium
from .memory import MemoryMedium
from .sqlite import SQLiteMedium

__all__ = ["KeyValueMedium", "SQLiteMedium", "MemoryMedium"]
