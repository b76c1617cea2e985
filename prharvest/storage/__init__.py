from .memory import MemoryKeyValueStore
from .sqlite import SQLiteKeyValueStore

__all__ = ["MemoryKeyValueStore", "SQLiteKeyValueStore"]
