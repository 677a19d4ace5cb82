"""Log forwarder — owns the session, buffer and scheduler, and ships batches."""

import logging
import threading
import time

from logmonitor.batch_buffer import BatchBuffer
from logmonitor.config import Config
from logmonitor.console import ConsoleEcho
from logmonitor.environment import EnvironmentProbe
from logmonitor.metrics import DeliveryMetrics
from logmonitor.models import LogEntry, create_log_entry
from logmonitor.scheduler import FlushScheduler
from logmonitor.source import RootLoggerSource
from logmonitor.transport import HttpTransport

logger = logging.getLogger(__name__)


class Logmonitor:
    """Captures log records and forwards them to the collection endpoint.

    In debug mode records are echoed to the console and never buffered. In
    release mode they are buffered and delivered when the buffer reaches
    ``batch_size`` entries or when the flush timer fires, whichever is first.

    At most one delivery runs at a time (``_send_lock``), and the buffer is
    only drained while that lock is held, so a failed batch can always be put
    back in front of newer entries without reordering them.
    """

    def __init__(
        self,
        config: Config | None = None,
        transport=None,
        source=None,
        environment=None,
        console=None,
    ):
        self._config = config or Config()
        # A transport built here is closed on dispose and rebuilt on initialize.
        self._owns_transport = transport is None
        self._transport_closed = False
        self._transport = transport or self._build_transport()
        self._source = source or RootLoggerSource()
        self._environment = environment or EnvironmentProbe(self._config)
        self._console = console or ConsoleEcho()

        self._buffer = BatchBuffer()
        self._metrics = DeliveryMetrics()
        self._state_lock = threading.Lock()
        self._send_lock = threading.Lock()
        # Marks threads currently inside transport.send, whose own records
        # (e.g. urllib3 connection logs) must not feed back into the buffer.
        self._sending = threading.local()

        # Session state; api_key doubles as the initialization guard.
        self._api_key: str | None = None
        self._bundle_id: str | None = None
        self._user_id: str | None = None
        self._debug = False
        self._subscription = None
        self._scheduler: FlushScheduler | None = None
        # Bumped by initialize and dispose; an initialize that finds it moved
        # was overtaken by a dispose and must undo its own setup.
        self._generation = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def initialize(self, api_key: str):
        """Start capturing logs. A second call while initialized is ignored."""
        with self._state_lock:
            if self._api_key is not None:
                logger.warning("Logmonitor is already initialized.")
                return
            self._api_key = api_key
            self._metrics = DeliveryMetrics()
            self._generation += 1
            generation = self._generation
            if self._transport_closed:
                self._transport = self._build_transport()
                self._transport_closed = False

        try:
            bundle_id = self._environment.resolve_bundle_id()
        except Exception as exc:
            logger.warning("Could not resolve bundle id: %s", exc)
            bundle_id = None

        try:
            debug = bool(self._environment.is_debug)
        except Exception as exc:
            logger.warning("Could not determine build mode, assuming release: %s", exc)
            debug = False

        with self._state_lock:
            if self._generation != generation:
                logger.warning("Logmonitor was disposed during initialization.")
                return
            self._bundle_id = bundle_id
            self._debug = debug

        self._source.capture_all()
        subscription = self._source.subscribe(self._on_record)

        scheduler = None
        if not debug:
            scheduler = FlushScheduler(self._config.flush_interval, self._on_tick)
            scheduler.start()

        with self._state_lock:
            current = self._generation == generation
            if current:
                self._subscription = subscription
                self._scheduler = scheduler

        if not current:
            logger.warning("Logmonitor was disposed during initialization.")
            subscription.cancel()
            if scheduler is not None:
                scheduler.stop()
            return

        logger.info(
            "Logmonitor initialized (mode=%s, bundle_id=%s)",
            "debug" if debug else "release",
            bundle_id,
        )

    def set_user(self, user_id: str):
        """Associate subsequent logs with *user_id*."""
        with self._state_lock:
            self._user_id = user_id

    def clear_user(self):
        """Stop associating subsequent logs with a user."""
        with self._state_lock:
            self._user_id = None

    def flush(self) -> bool:
        """Deliver everything buffered now, waiting for any in-flight delivery.

        Returns False if the delivery failed and the entries were requeued.
        """
        with self._send_lock:
            return self._flush_locked("manual")

    def dispose(self):
        """Stop capturing, send what is left, and reset to uninitialized.

        Blocks until the final delivery attempt completes. Entries still
        buffered when the process is killed before this returns are lost.
        """
        with self._state_lock:
            if self._api_key is None:
                return
            self._generation += 1
            subscription, self._subscription = self._subscription, None
            scheduler, self._scheduler = self._scheduler, None

        logger.info("Disposing Logmonitor...")

        if subscription is not None:
            subscription.cancel()
        if scheduler is not None:
            scheduler.stop()

        with self._send_lock:
            self._flush_locked("dispose")
            with self._state_lock:
                if self._owns_transport:
                    self._transport.close()
                    self._transport_closed = True
                self._api_key = None
                self._bundle_id = None
                self._user_id = None
                self._debug = False
            self._buffer.clear()

        logger.info(
            "Logmonitor disposed and shut down. Delivery metrics: %s",
            self._metrics.snapshot(),
        )

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def is_initialized(self) -> bool:
        with self._state_lock:
            return self._api_key is not None

    @property
    def is_debug(self) -> bool:
        with self._state_lock:
            return self._debug

    @property
    def bundle_id(self) -> str | None:
        with self._state_lock:
            return self._bundle_id

    @property
    def user_id(self) -> str | None:
        with self._state_lock:
            return self._user_id

    @property
    def pending_count(self) -> int:
        return self._buffer.pending_count

    def pending_entries(self) -> list[LogEntry]:
        return self._buffer.snapshot()

    @property
    def metrics(self) -> DeliveryMetrics:
        return self._metrics

    # ------------------------------------------------------------------
    # Capture
    # ------------------------------------------------------------------

    def _on_record(self, record: logging.LogRecord):
        if getattr(self._sending, "active", False):
            return

        with self._state_lock:
            if self._api_key is None:
                return
            debug = self._debug
            user_id = self._user_id

        if debug:
            self._console.write(record)
            return

        count = self._buffer.append(create_log_entry(record, user_id))
        if count >= self._config.batch_size:
            self._start_size_flush()

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    def _start_size_flush(self):
        """Drain now and deliver on a background thread.

        Skipped when a delivery is already in flight; the entries then wait
        for the next trigger.
        """
        if not self._send_lock.acquire(blocking=False):
            return

        api_key, bundle_id = self._credentials()
        batch = self._buffer.drain_all() if api_key is not None else []
        if not batch:
            self._send_lock.release()
            return

        worker = threading.Thread(
            target=self._deliver_and_release,
            args=(batch, api_key, bundle_id, "size"),
            name="logmonitor-send",
            daemon=True,
        )
        try:
            worker.start()
        except RuntimeError as exc:
            # Interpreter shutting down; leave the batch for dispose.
            logger.warning("Could not start delivery thread: %s", exc)
            self._buffer.prepend_all(batch)
            self._send_lock.release()

    def _deliver_and_release(self, batch, api_key, bundle_id, trigger):
        try:
            self._deliver(batch, api_key, bundle_id, trigger)
        finally:
            self._send_lock.release()

    def _on_tick(self):
        if self._buffer.is_empty():
            return
        if not self._send_lock.acquire(blocking=False):
            logger.debug("Delivery in flight, skipping timer flush")
            return
        try:
            self._flush_locked("timer")
        finally:
            self._send_lock.release()

    def _flush_locked(self, trigger: str) -> bool:
        """Drain and deliver. Caller must hold ``_send_lock``."""
        api_key, bundle_id = self._credentials()
        if api_key is None:
            return True
        batch = self._buffer.drain_all()
        if not batch:
            return True
        return self._deliver(batch, api_key, bundle_id, trigger)

    def _deliver(self, batch: list[LogEntry], api_key: str, bundle_id, trigger: str) -> bool:
        """Send one batch; on failure put it back at the front of the buffer."""
        start = time.monotonic()
        self._sending.active = True
        try:
            success = bool(self._transport.send(batch, api_key, bundle_id))
        except Exception:
            logger.exception(
                "Transport raised while sending %d logs. Retrying next cycle.",
                len(batch),
            )
            success = False
        finally:
            self._sending.active = False
        elapsed_ms = (time.monotonic() - start) * 1000

        self._metrics.record_delivery(
            batch_size=len(batch),
            send_time_ms=elapsed_ms,
            success=success,
            trigger=trigger,
        )

        if success:
            logger.debug("Sent batch of %d logs (%s trigger)", len(batch), trigger)
        else:
            self._buffer.prepend_all(batch)
        return success

    def _build_transport(self) -> HttpTransport:
        return HttpTransport(self._config.endpoint, self._config.request_timeout)

    def _credentials(self):
        with self._state_lock:
            return self._api_key, self._bundle_id
