"""Per-root-segment locks for serializing read-merge-write cycles."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class RootLockRegistry:
    """Hands out one lock per root segment.

    An entry lives only while some thread holds or waits for it, so a
    long-lived store touching many roots does not accumulate locks.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        # root -> (lock, threads holding or waiting)
        self._entries: dict[str, tuple[threading.Lock, int]] = {}

    @contextmanager
    def hold(self, root: str) -> Iterator[None]:
        """Hold the root's lock for the duration of the block."""
        with self._guard:
            lock, users = self._entries.get(root, (None, 0))
            if lock is None:
                lock = threading.Lock()
            self._entries[root] = (lock, users + 1)
        try:
            with lock:
                yield
        finally:
            with self._guard:
                lock, users = self._entries[root]
                if users == 1:
                    del self._entries[root]
                else:
                    self._entries[root] = (lock, users - 1)

    def active_roots(self) -> list[str]:
        """Roots currently held or waited on, sorted."""
        with self._guard:
            return sorted(self._entries)
