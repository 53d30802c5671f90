"""Single-writer, multi-reader lock for guarding the in-memory index."""

from __future__ import annotations

from contextlib import contextmanager
import threading
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Generator


class ReadWriteLock:
    """Readers share the lock; a writer holds it alone.

    Waiting writers block new readers so a steady stream of searches cannot
    starve an index update. The lock is not reentrant.
    """

    def __init__(self) -> None:
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    @contextmanager
    def read(self) -> Generator[None, None, None]:
        with self._condition:
            while self._writer or self._waiting_writers:
                self._condition.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._condition:
                self._readers -= 1
                if not self._readers:
                    self._condition.notify_all()

    @contextmanager
    def write(self) -> Generator[None, None, None]:
        with self._condition:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._condition.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._condition:
                self._writer = False
                self._condition.notify_all()
