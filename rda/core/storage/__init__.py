"""
Persistent Storage Module.

Provides SQLite-backed persistence for:
- Auction records
- Event log
- House metadata
"""

from rda.core.storage.sqlite_adapter import SQLiteAdapter
from rda.core.storage.storage_manager import StorageManager

__all__ = ["SQLiteAdapter", "StorageManager"]
