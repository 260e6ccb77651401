"""Readers-writer lock guarding the configuration store."""

import threading
from contextlib import contextmanager
from typing import Iterator, Optional


class RWLock:
    """Readers-writer lock with writer preference.

    Any number of threads may hold the read lock at once; the write lock is
    exclusive. Once a writer is waiting, new readers queue behind it. The
    thread holding the write lock may also take the read lock, and a thread
    already reading may read again. Upgrading a read lock to a write lock
    deadlocks.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0  # (number of read acquisitions outstanding)
        self._writers_waiting = 0
        self._writer: Optional[int] = None  # (ident of the thread holding the write lock)
        self._local = threading.local()  # (per-thread read depth)

    def _read_depth(self) -> int:
        return getattr(self._local, "depth", 0)

    def acquire_read(self) -> None:
        """Acquire the shared (read) lock."""
        me = threading.get_ident()
        with self._cond:
            if self._writer != me and self._read_depth() == 0:
                while self._writer is not None or self._writers_waiting:
                    self._cond.wait()
            self._readers += 1
        self._local.depth = self._read_depth() + 1

    def release_read(self) -> None:
        """Release the shared (read) lock."""
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()
        self._local.depth = self._read_depth() - 1

    def acquire_write(self) -> None:
        """Acquire the exclusive (write) lock."""
        me = threading.get_ident()
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer is not None or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = me

    def release_write(self) -> None:
        """Release the exclusive (write) lock."""
        with self._cond:
            self._writer = None
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        """Hold the read lock for the duration of the block."""
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        """Hold the write lock for the duration of the block."""
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()
