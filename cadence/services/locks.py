"""
In-process mutual exclusion per (owner, date).

Recap ingestion is a read-modify-write over a Day and, for cross-midnight
sleep, over the previous Day too. Both keys are held for the whole request
and always acquired in sorted order so two requests touching overlapping
dates cannot deadlock. Entries are reference counted and dropped when idle.

Scope is one process. With several gunicorn workers the same key can still
race across processes; the database unique constraint on (user_id, date)
then rejects duplicate inserts.
"""
from __future__ import annotations

import threading
from contextlib import contextmanager
from datetime import date
from typing import Hashable, Iterator

LockKey = tuple[str, date]


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.users = 0


class KeyedLocks:
    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: dict[Hashable, _Entry] = {}

    def _checkout(self, key: Hashable) -> _Entry:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _Entry()
            entry.users += 1
            return entry

    def _release(self, key: Hashable, entry: _Entry) -> None:
        with self._guard:
            entry.users -= 1
            if entry.users == 0:
                self._entries.pop(key, None)

    @contextmanager
    def hold(self, *keys: Hashable) -> Iterator[None]:
        ordered = sorted(set(keys))
        held: list[tuple[Hashable, _Entry]] = []
        try:
            for key in ordered:
                entry = self._checkout(key)
                entry.lock.acquire()
                held.append((key, entry))
            yield
        finally:
            for key, entry in reversed(held):
                entry.lock.release()
                self._release(key, entry)

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)


day_locks = KeyedLocks()
