"""Flush scheduler — fixed-period background timer."""

import logging
import threading
import time

logger = logging.getLogger(__name__)


class FlushScheduler:
    """Calls *on_tick* every *interval* seconds on a daemon thread.

    Ticks are aligned to monotonic deadlines so a slow callback does not
    stretch the period. A failing callback is logged and the timer keeps
    running.
    """

    def __init__(self, interval: float, on_tick, name: str = "logmonitor-flush"):
        self._interval = interval
        self._on_tick = on_tick
        self._name = name
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        """Start the timer thread. Starting a running scheduler is a no-op."""
        if self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = 5.0):
        """Signal the timer to stop and wait for the thread to exit."""
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)
        self._thread = None

    def _run(self):
        next_tick = time.monotonic() + self._interval
        while not self._stop.wait(timeout=max(0.0, next_tick - time.monotonic())):
            try:
                self._on_tick()
            except Exception:
                logger.exception("Flush tick failed")

            next_tick += self._interval
            now = time.monotonic()
            if next_tick <= now:
                # Missed one or more periods; realign instead of firing a burst.
                next_tick = now + self._interval
