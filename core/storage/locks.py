"""
Per-File Lock Registry

Serializes the load -> mutate -> save sequence of a file's tree record.

- write(file_id): exclusive; wraps uploads and deletes
- read(file_id): shared; wraps proof requests, which never write

Readers of one file run concurrently with each other but never overlap a
writer of the same file. Different files never block each other. Waiting
writers take priority over newly arriving readers.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class ReadWriteLock:
    """Readers-writer lock with writer preference."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @property
    def is_write_locked(self) -> bool:
        with self._cond:
            return self._writer

    @property
    def reader_count(self) -> int:
        with self._cond:
            return self._readers


class FileLockRegistry:
    """
    One ReadWriteLock per logical file identifier.

    An entry lives only while some caller holds or waits on it; the last
    holder to leave removes it, so ids of missing or deleted files do not
    accumulate.

    Example:
        >>> locks = FileLockRegistry()
        >>> with locks.write("report.pdf"):
        ...     pass  # load tree, add leaf, save tree
        >>> len(locks)
        0
    """

    def __init__(self) -> None:
        self._locks: dict[str, ReadWriteLock] = {}
        self._holders: dict[str, int] = {}
        self._guard = threading.Lock()

    def _checkout(self, file_id: str) -> ReadWriteLock:
        with self._guard:
            lock = self._locks.get(file_id)
            if lock is None:
                lock = ReadWriteLock()
                self._locks[file_id] = lock
                self._holders[file_id] = 0
            self._holders[file_id] += 1
            return lock

    def _checkin(self, file_id: str) -> None:
        with self._guard:
            self._holders[file_id] -= 1
            if self._holders[file_id] == 0:
                del self._holders[file_id]
                del self._locks[file_id]

    @contextmanager
    def read(self, file_id: str) -> Iterator[None]:
        lock = self._checkout(file_id)
        try:
            lock.acquire_read()
            try:
                yield
            finally:
                lock.release_read()
        finally:
            self._checkin(file_id)

    @contextmanager
    def write(self, file_id: str) -> Iterator[None]:
        lock = self._checkout(file_id)
        try:
            lock.acquire_write()
            try:
                yield
            finally:
                lock.release_write()
        finally:
            self._checkin(file_id)

    def holders(self, file_id: str) -> int:
        """Number of callers holding or waiting on file_id's lock."""
        with self._guard:
            return self._holders.get(file_id, 0)

    def __contains__(self, file_id: str) -> bool:
        with self._guard:
            return file_id in self._locks

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


__all__ = [
    "ReadWriteLock",
    "FileLockRegistry",
]
