"""Protocol for backing stores."""

from __future__ import annotations

from typing import Protocol

from dotstore.core.models import Absent


class BackingStore(Protocol):
    """Flat, partitioned key/value store holding one record per root segment.

    Implementations raise StorageError for any failure of the underlying
    store and never retry on behalf of the caller.
    """

    def ensure_collection(self, name: str) -> None:
        """Create the named partition if needed. Safe under concurrent first use."""
        ...

    def read(self, collection: str, key: str) -> bytes | Absent:
        """Return the stored bytes, or ABSENT if the record was never written."""
        ...

    def upsert(self, collection: str, key: str, value: bytes) -> None:
        """Atomically insert or replace the whole record."""
        ...

    def delete_record(self, collection: str, key: str) -> None:
        """Remove the record. Succeeds if it is already gone."""
        ...
