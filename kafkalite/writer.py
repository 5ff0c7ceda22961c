"""Background appender that writes queued messages to a partition log."""

from __future__ import annotations

import logging
import os
import queue
import threading
import time
from typing import IO

logger = logging.getLogger(__name__)

_WRITE_ATTEMPTS = 3
_RETRY_DELAY = 1.0
_POLL_INTERVAL = 0.05

_total_written = 0
_total_lock = threading.Lock()


def total_written() -> int:
    """Number of messages the writers have stored since the last reset."""
    with _total_lock:
        return _total_written


def reset_total_written() -> None:
    """Set the written-message counter back to zero."""
    global _total_written
    with _total_lock:
        _total_written = 0


def _count_written() -> None:
    global _total_written
    with _total_lock:
        _total_written += 1


class WriterClosedError(RuntimeError):
    """Raised when sending to a writer that has been closed."""


class QueueFullError(RuntimeError):
    """Raised when a writer's queue has no room for another message."""


def write_with_retry(
    file: IO[str], message: str, attempts: int = _WRITE_ATTEMPTS, delay: float = _RETRY_DELAY
) -> None:
    """Append ``message`` and a newline to ``file`` and sync it, retrying on failure."""
    line = message + "\n"
    last_error: OSError | None = None
    for attempt in range(1, attempts + 1):
        try:
            file.write(line)
            file.flush()
            os.fsync(file.fileno())
            return
        except OSError as exc:
            last_error = exc
            logger.error("write attempt %d failed: %s", attempt, exc)
            if attempt < attempts:
                time.sleep(delay)
    raise OSError(f"failed to write message after {attempts} attempts") from last_error


class PartitionWriter:
    """Appends messages to one partition file from a background thread."""

    def __init__(self, path: str | os.PathLike[str], capacity: int = 1000) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        logger.info("creating partition writer for %s", path)
        self.path = os.fspath(path)
        self._file = open(self.path, "a", encoding="utf-8")
        self._queue: queue.Queue[str] = queue.Queue(maxsize=capacity)
        self._quit = threading.Event()
        self._lock = threading.Lock()
        self._closed = False
        self._thread = threading.Thread(target=self._run, name=f"writer:{self.path}")
        self._thread.start()

    @property
    def closed(self) -> bool:
        """Whether the writer has stopped accepting messages."""
        with self._lock:
            return self._closed

    def _run(self) -> None:
        while not self._quit.is_set():
            try:
                message = self._queue.get(timeout=_POLL_INTERVAL)
            except queue.Empty:
                continue
            try:
                write_with_retry(self._file, message, _WRITE_ATTEMPTS, _RETRY_DELAY)
            except OSError as exc:
                logger.error("failed to write message to partition: %s", exc)
                continue
            _count_written()
            logger.debug("message written to partition: %s", message)
        self._drain()

    def _drain(self) -> None:
        try:
            while True:
                try:
                    message = self._queue.get_nowait()
                except queue.Empty:
                    break
                try:
                    write_with_retry(self._file, message, _WRITE_ATTEMPTS, _RETRY_DELAY)
                except OSError as exc:
                    logger.error("failed to write message while draining: %s", exc)
            try:
                self._file.flush()
                os.fsync(self._file.fileno())
            except OSError as exc:
                logger.error("failed to sync %s: %s", self.path, exc)
        finally:
            self._file.close()

    def send(self, message: str) -> None:
        """Queue ``message`` for writing without blocking."""
        with self._lock:
            if self._closed:
                raise WriterClosedError("writer is closed")
            try:
                self._queue.put_nowait(message)
            except queue.Full:
                raise QueueFullError(f"channel full, dropping message: {message}") from None

    def close(self) -> None:
        """Stop accepting messages, write what is queued and close the file."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._quit.set()
        self._thread.join()

    def __enter__(self) -> PartitionWriter:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()