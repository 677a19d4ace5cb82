"""Batch buffer — ordered, thread-safe queue of pending log entries."""

import threading

from logmonitor.models import LogEntry


class BatchBuffer:
    """Holds entries waiting for delivery in insertion order.

    Flush decisions live in the forwarder; the buffer only guarantees that
    every operation is atomic with respect to concurrent producers.
    """

    def __init__(self):
        self._buffer: list[LogEntry] = []
        self._lock = threading.Lock()

    def append(self, entry: LogEntry) -> int:
        """Add an entry at the end and return the new buffer length."""
        with self._lock:
            self._buffer.append(entry)
            return len(self._buffer)

    def drain_all(self) -> list[LogEntry]:
        """Empty the buffer and return everything it held, in order."""
        with self._lock:
            batch = self._buffer
            self._buffer = []
            return batch

    def prepend_all(self, entries: list[LogEntry]):
        """Reinsert a failed batch ahead of anything appended since its drain."""
        if not entries:
            return
        with self._lock:
            self._buffer[:0] = entries

    def is_empty(self) -> bool:
        with self._lock:
            return not self._buffer

    def clear(self):
        with self._lock:
            self._buffer.clear()

    def snapshot(self) -> list[LogEntry]:
        """Copy of the current contents, for inspection."""
        with self._lock:
            return list(self._buffer)

    @property
    def pending_count(self) -> int:
        """Number of entries currently waiting in the buffer."""
        with self._lock:
            return len(self._buffer)
