"""Dedicated background worker threads for the storage engine.

The executor exists to keep track of long-running background work, not to
speed anything up: each kind of work gets its own lane, a single thread that
runs submitted tasks one after another in submission order.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from types import TracebackType

logger = logging.getLogger(__name__)

_STOP = object()


class _Lane:
    """A single worker thread fed by a FIFO queue of callables."""

    def __init__(self, name: str) -> None:
        self._queue: queue.SimpleQueue = queue.SimpleQueue()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._thread.start()

    def submit(self, task: Callable[[], object]) -> None:
        self._queue.put(task)

    def stop(self) -> None:
        self._queue.put(_STOP)

    def _run(self) -> None:
        while (task := self._queue.get()) is not _STOP:
            try:
                task()
            except Exception:
                logger.exception("background task on %s failed", self._thread.name)


class BackgroundExecutor:
    """Owns the write-ahead-log and compactor background threads.

    Tasks given to one lane run sequentially in the order they were
    submitted; the two lanes run independently of each other.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._closed = False
        self._wal = _Lane("anvilkv-wal")
        self._compactor = _Lane("anvilkv-compactor")

    def _submit(self, lane: _Lane, task: Callable[[], object]) -> None:
        if not callable(task):
            raise TypeError("background task must be callable")
        with self._lock:
            if self._closed:
                raise RuntimeError("background executor is closed")
            lane.submit(task)

    def spawn_compactor_bg(self, task: Callable[[], object]) -> None:
        """Queue ``task`` to run on the compactor thread."""
        self._submit(self._compactor, task)

    def spawn_wal_bg(self, task: Callable[[], object]) -> None:
        """Queue ``task`` to run on the write-ahead-log thread."""
        self._submit(self._wal, task)

    def close(self) -> None:
        """Stop accepting tasks; each lane exits after finishing queued work."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._wal.stop()
            self._compactor.stop()

    def __enter__(self) -> "BackgroundExecutor":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()