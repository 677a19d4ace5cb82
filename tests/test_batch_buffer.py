"""Tests for the BatchBuffer module."""

import threading

from logmonitor.batch_buffer import BatchBuffer
from logmonitor.models import LogEntry


def _entry(i: int) -> LogEntry:
    return LogEntry(message=f"log-{i}", client_timestamp=i)


def _messages(entries) -> list[str]:
    return [e.message for e in entries]


class TestAppendAndDrain:
    def test_append_returns_length(self):
        buf = BatchBuffer()
        assert buf.append(_entry(0)) == 1
        assert buf.append(_entry(1)) == 2
        assert buf.pending_count == 2

    def test_drain_returns_all_in_order_and_empties(self):
        buf = BatchBuffer()
        for i in range(5):
            buf.append(_entry(i))

        drained = buf.drain_all()

        assert _messages(drained) == [f"log-{i}" for i in range(5)]
        assert buf.is_empty()
        assert buf.drain_all() == []

    def test_append_after_drain_not_in_drained_batch(self):
        buf = BatchBuffer()
        buf.append(_entry(0))
        drained = buf.drain_all()
        buf.append(_entry(1))

        assert _messages(drained) == ["log-0"]
        assert _messages(buf.snapshot()) == ["log-1"]


class TestPrepend:
    def test_prepend_goes_ahead_of_newer_entries(self):
        buf = BatchBuffer()
        for i in range(3):
            buf.append(_entry(i))
        failed = buf.drain_all()
        buf.append(_entry(3))
        buf.append(_entry(4))

        buf.prepend_all(failed)

        assert _messages(buf.snapshot()) == [f"log-{i}" for i in range(5)]

    def test_prepend_empty_is_noop(self):
        buf = BatchBuffer()
        buf.append(_entry(0))
        buf.prepend_all([])
        assert buf.pending_count == 1


class TestClearAndSnapshot:
    def test_clear(self):
        buf = BatchBuffer()
        buf.append(_entry(0))
        buf.clear()
        assert buf.is_empty()

    def test_snapshot_is_a_copy(self):
        buf = BatchBuffer()
        buf.append(_entry(0))
        snap = buf.snapshot()
        snap.append(_entry(1))
        assert buf.pending_count == 1


def test_concurrent_appends_are_not_lost():
    buf = BatchBuffer()

    def producer(offset):
        for i in range(500):
            buf.append(_entry(offset + i))

    threads = [threading.Thread(target=producer, args=(n * 1000,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert buf.pending_count == 4000
    # Per-producer insertion order survives interleaving.
    stamps = [e.client_timestamp for e in buf.drain_all()]
    for n in range(8):
        own = [s for s in stamps if n * 1000 <= s < n * 1000 + 500]
        assert own == sorted(own)
