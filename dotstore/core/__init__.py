"""
Core module: data models, exceptions, the merge engine and storage.

This module provides the document store and its building blocks:

Models (models.py):
    - Document: null, bool, number, string, array or string-keyed map
    - DocumentKind/kind_of: explicit tags for document nodes
    - ABSENT: "nothing stored here", distinct from a stored null
    - KeyPath/DecodePolicy

Paths (paths.py) and codec (codec.py):
    - parse/split: dot-delimited key to root segment plus sub-path
    - encode/decode: canonical JSON bytes, map or struct decoding

Overlay (overlay.py):
    - get_at/set_at/append_at/remove_at: pure edits at a sub-path

Exceptions (exceptions.py):
    - DotStoreError: Base exception for all dotstore errors
    - InvalidPathError, NotAnArrayError, CorruptDataError, StorageError,
      InvalidDocumentError

Storage (storage/):
    - SQLiteBackingStore: one table per root segment in .dotstore/store.db

Facade (store.py):
    - DocumentStore: get/put/add/delete by dot-delimited key
"""

from dotstore.core.exceptions import (
    CorruptDataError,
    DotStoreError,
    InvalidDocumentError,
    InvalidPathError,
    NotAnArrayError,
    StorageError,
)
from dotstore.core.models import ABSENT, Absent, DecodePolicy, Document, DocumentKind, KeyPath
from dotstore.core.storage import (
    BackingStore,
    RootLockRegistry,
    SQLiteBackingStore,
    get_default_db_path,
)
from dotstore.core.store import DocumentStore

__all__ = [
    # Models
    "ABSENT",
    "Absent",
    "DecodePolicy",
    "Document",
    "DocumentKind",
    "KeyPath",
    # Exceptions
    "DotStoreError",
    "InvalidPathError",
    "NotAnArrayError",
    "CorruptDataError",
    "StorageError",
    "InvalidDocumentError",
    # Storage
    "BackingStore",
    "RootLockRegistry",
    "SQLiteBackingStore",
    "get_default_db_path",
    # Facade
    "DocumentStore",
]
