from __future__ import annotations

import contextlib
import threading
import typing


@contextlib.contextmanager
def hold(lock: threading.Lock, timeout: float | None = None) -> typing.Generator[None, None, None]:
    """Acquire lock, raise TimeoutError when it is not free within timeout seconds."""
    if not lock.acquire(timeout=-1 if timeout is None else timeout):
        raise TimeoutError("Timed out waiting for a lock.")
    try:
        yield
    finally:
        lock.release()


class RWLock:
    """A reader/writer lock.

    Any number of readers may hold the lock at once, a writer holds it alone.
    Waiting writers block new readers so that a steady read load cannot starve them.
    Both modes accept a timeout and raise TimeoutError when it expires."""

    def __init__(self) -> None:
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writers_waiting = 0
        self._writing = False

    @contextlib.contextmanager
    def read(self, timeout: float | None = None) -> typing.Generator[None, None, None]:
        with self._condition:
            if not self._condition.wait_for(lambda: not (self._writing or self._writers_waiting), timeout):
                raise TimeoutError("Timed out waiting for a read lock.")
            self._readers += 1
        try:
            yield
        finally:
            with self._condition:
                self._readers -= 1
                if not self._readers:
                    self._condition.notify_all()

    @contextlib.contextmanager
    def write(self, timeout: float | None = None) -> typing.Generator[None, None, None]:
        with self._condition:
            self._writers_waiting += 1
            try:
                if not self._condition.wait_for(lambda: not (self._writing or self._readers), timeout):
                    raise TimeoutError("Timed out waiting for a write lock.")
            finally:
                self._writers_waiting -= 1
                # readers held back by this writer may proceed if it gave up
                self._condition.notify_all()
            self._writing = True
        try:
            yield
        finally:
            with self._condition:
                self._writing = False
                self._condition.notify_all()
