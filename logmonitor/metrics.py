"""Delivery metrics — thread-safe counters and latency histogram."""

import threading
import time
from collections import deque

# Latency samples kept for the average and p95; older ones are discarded.
LATENCY_WINDOW = 1000


class DeliveryMetrics:
    """Collects and reports metrics about batch delivery attempts."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._attempts: int = 0
        self._failures: int = 0
        self._entries_delivered: int = 0
        self._entries_requeued: int = 0
        self._send_times: deque[float] = deque(maxlen=LATENCY_WINDOW)
        self._flush_triggers: dict = {"size": 0, "timer": 0, "manual": 0, "dispose": 0}
        self._start_time = time.monotonic()

    def record_delivery(
        self,
        batch_size: int,
        send_time_ms: float,
        success: bool,
        trigger: str = "size",
    ) -> None:
        """Record one delivery attempt.

        Latency statistics cover the most recent LATENCY_WINDOW attempts only.

        Args:
            batch_size: Number of log entries in the batch.
            send_time_ms: Time taken by the transport, in milliseconds.
            success: Whether the endpoint accepted the batch.
            trigger: What caused the flush — "size", "timer", "manual" or "dispose".
        """
        with self._lock:
            self._attempts += 1
            self._send_times.append(send_time_ms)
            self._flush_triggers[trigger] = self._flush_triggers.get(trigger, 0) + 1
            if success:
                self._entries_delivered += batch_size
            else:
                self._failures += 1
                self._entries_requeued += batch_size

    def snapshot(self) -> dict:
        """Return a point-in-time snapshot of all collected metrics."""
        with self._lock:
            send_times = list(self._send_times)
            avg_send = sum(send_times) / len(send_times) if send_times else 0.0

            return {
                "attempts": self._attempts,
                "failures": self._failures,
                "entries_delivered": self._entries_delivered,
                "entries_requeued": self._entries_requeued,
                "avg_send_time_ms": avg_send,
                "p95_send_time_ms": self._percentile(send_times, 95),
                "flush_triggers": dict(self._flush_triggers),
                "uptime_seconds": time.monotonic() - self._start_time,
            }

    @staticmethod
    def _percentile(data: list, pct: float) -> float:
        """Compute an interpolated percentile from a list of numeric values.

        Args:
            data: List of numeric values (will be sorted internally).
            pct: Desired percentile (0-100).

        Returns:
            Interpolated value at the given percentile, or 0.0 if data is empty.
        """
        if not data:
            return 0.0

        sorted_data = sorted(data)
        n = len(sorted_data)

        if n == 1:
            return float(sorted_data[0])

        idx = (pct / 100) * (n - 1)
        lower = int(idx)
        upper = lower + 1
        fraction = idx - lower

        if upper >= n:
            return float(sorted_data[-1])

        return float(sorted_data[lower] + fraction * (sorted_data[upper] - sorted_data[lower]))
