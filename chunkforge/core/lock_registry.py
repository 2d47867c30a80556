"""Per-identity completion locks.

Completions of the same identity run one at a time; completions of
different identities run in parallel.  Entries are created on first use
and dropped when the last holder or waiter leaves, so the table only
holds identities that are currently being completed.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


class IdentityLockRegistry:
    """A keyed mutex: one ``threading.Lock`` per identity in use."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: dict[str, _Entry] = {}

    @contextmanager
    def hold(self, identity: str) -> Iterator[None]:
        """Block until *identity* is free, then hold it for the ``with`` body."""
        with self._guard:
            entry = self._entries.get(identity)
            if entry is None:
                entry = self._entries[identity] = _Entry()
            entry.users += 1

        entry.lock.acquire()
        try:
            yield
        finally:
            entry.lock.release()
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._entries[identity]

    def is_held(self, identity: str) -> bool:
        with self._guard:
            entry = self._entries.get(identity)
            return entry is not None and entry.lock.locked()

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)
