"""Store facade: dot-path get/put/add/delete over a backing store."""

from __future__ import annotations

from contextlib import nullcontext
from typing import Any, ContextManager

from dotstore.core import codec, overlay
from dotstore.core.config import Settings, get_logger, get_settings
from dotstore.core.models import ABSENT, Absent, DecodePolicy, Document
from dotstore.core.paths import parse, split
from dotstore.core.storage.base import BackingStore
from dotstore.core.storage.locks import RootLockRegistry
from dotstore.core.storage.sqlite import SQLiteBackingStore

LOGGER = get_logger("store")


class DocumentStore:
    """Nested document store addressed by dot-delimited keys.

    The first key segment selects a record (and its partition); the rest
    addresses a node inside that record. Every write re-reads, merges and
    rewrites the whole record. That cycle is not atomic across processes;
    with ``lock_roots=True`` it is serialized per root segment within this
    process.
    """

    def __init__(
        self,
        backend: BackingStore,
        *,
        policy: DecodePolicy = DecodePolicy.AS_MAP,
        lock_roots: bool = False,
    ) -> None:
        self._backend = backend
        self._policy = policy
        self._locks = RootLockRegistry() if lock_roots else None

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> DocumentStore:
        """Build a store on SQLite from environment settings."""
        settings = settings or get_settings()
        backend = SQLiteBackingStore(
            settings.db_path,
            table_prefix=settings.table_prefix,
            timeout=settings.busy_timeout,
        )
        return cls(backend, policy=settings.decode_policy, lock_roots=settings.lock_roots)

    @property
    def backend(self) -> BackingStore:
        return self._backend

    @property
    def policy(self) -> DecodePolicy:
        return self._policy

    def set_decode_policy(self, policy: DecodePolicy) -> None:
        """Set the policy used by get() when no per-call policy is given."""
        self._policy = policy

    def close(self) -> None:
        """Close the backend if it holds resources."""
        close = getattr(self._backend, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> DocumentStore:
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        self.close()

    def _guard(self, root: str) -> ContextManager[Any]:
        if self._locks is None:
            return nullcontext()
        return self._locks.hold(root)

    def _load(self, root: str) -> Document | Absent:
        raw = self._backend.read(root, root)
        if raw is ABSENT:
            return ABSENT
        return codec.decode(raw)

    def _save(self, root: str, document: Document) -> None:
        self._backend.upsert(root, root, codec.encode(document))

    def get(
        self,
        key: str,
        default: Any = ABSENT,
        *,
        policy: DecodePolicy | None = None,
        shape: Any = None,
    ) -> Any:
        """Value at key, or ``default`` (ABSENT unless given) if nothing is there.

        ``policy`` overrides the store's decode policy for this call.
        AS_STRUCT needs ``shape``; passing ``shape`` alone implies AS_STRUCT.
        """
        if policy is None:
            policy = DecodePolicy.AS_STRUCT if shape is not None else self._policy
        if policy is DecodePolicy.AS_STRUCT and shape is None:
            raise ValueError("AS_STRUCT decoding requires a shape")

        root, sub_path = split(parse(key))
        LOGGER.debug("get root=%s sub_path=%s", root, sub_path)

        document = self._load(root)
        value = overlay.get_at(document, sub_path)
        if value is ABSENT:
            return default
        if policy is DecodePolicy.AS_STRUCT:
            return codec.to_struct(value, shape)
        return value

    def has(self, key: str) -> bool:
        """Whether anything (including a stored null) lives at key."""
        return self.get(key, policy=DecodePolicy.AS_MAP) is not ABSENT

    def put(self, key: str, value: Document) -> None:
        """Insert or replace the value at key, creating parents as needed."""
        root, sub_path = split(parse(key))
        codec.validate_document(value)
        LOGGER.debug("put root=%s sub_path=%s", root, sub_path)

        with self._guard(root):
            if not sub_path:
                self._save(root, value)
                return
            document = self._load(root)
            if document is ABSENT:
                document = {}
            self._save(root, overlay.set_at(document, sub_path, value))

    def add(self, key: str, value: Document) -> None:
        """Append value to the array at key, creating the array if missing.

        Raises NotAnArrayError, without writing, if something other than an
        array is stored at key.
        """
        root, sub_path = split(parse(key))
        codec.validate_document(value)
        LOGGER.debug("add root=%s sub_path=%s", root, sub_path)

        with self._guard(root):
            document = self._load(root)
            if document is ABSENT and sub_path:
                document = {}
            self._save(root, overlay.append_at(document, sub_path, value))

    def delete(self, key: str) -> None:
        """Remove the value at key. Deleting something absent succeeds.

        A single-segment key deletes the whole record. Deeper keys remove
        one node and keep the record, even if it ends up empty.
        """
        root, sub_path = split(parse(key))
        LOGGER.debug("delete root=%s sub_path=%s", root, sub_path)

        with self._guard(root):
            if not sub_path:
                self._backend.delete_record(root, root)
                return
            document = self._load(root)
            if document is ABSENT:
                return
            updated = overlay.remove_at(document, sub_path)
            if updated is document:
                return
            self._save(root, updated)
