"""
Storage layer: the backing-store boundary of the document store.

Components:
    - BackingStore: Protocol every adapter implements
    - SQLiteBackingStore: one table per root segment, atomic upserts
    - RootLockRegistry: per-root locks for the optional write serialization

Database Schema (one table per collection, named <prefix><root segment>):
    key TEXT PRIMARY KEY, value BLOB NOT NULL

The database is stored at .dotstore/store.db relative to the project root
unless configured otherwise.
"""

from dotstore.core.storage.base import BackingStore
from dotstore.core.storage.locks import RootLockRegistry
from dotstore.core.storage.sqlite import SQLiteBackingStore, get_default_db_path

__all__ = [
    "BackingStore",
    "RootLockRegistry",
    "SQLiteBackingStore",
    "get_default_db_path",
]
