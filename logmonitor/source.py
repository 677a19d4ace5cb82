"""Log source adapter — subscribes a callback to a ``logging`` logger."""

import logging
import threading

# Records from this namespace are the agent's own diagnostics.
OWN_LOGGER_PREFIX = "logmonitor"

# Lowest enabled threshold. NOTSET would defer to the parent on non-root loggers.
CAPTURE_ALL_LEVEL = 1


def _is_own_record(record: logging.LogRecord) -> bool:
    name = record.name
    return name == OWN_LOGGER_PREFIX or name.startswith(OWN_LOGGER_PREFIX + ".")


class _CallbackHandler(logging.Handler):
    """Handler that hands every foreign record to a callback."""

    def __init__(self, callback):
        super().__init__(level=logging.NOTSET)
        self._callback = callback

    def emit(self, record: logging.LogRecord) -> None:
        if _is_own_record(record):
            return
        try:
            self._callback(record)
        except Exception:
            self.handleError(record)


class Subscription:
    """Cancellation handle returned by ``RootLoggerSource.subscribe``."""

    def __init__(self, source: "RootLoggerSource", handler: logging.Handler):
        self._source = source
        self._handler = handler
        self._cancelled = False
        self._lock = threading.Lock()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self):
        """Detach the handler. Safe to call more than once."""
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
        self._source._detach(self._handler)


class RootLoggerSource:
    """Exposes a logger (the root logger by default) as a record stream."""

    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger()
        self._previous_level: int | None = None

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def capture_all(self):
        """Lower the logger threshold so every severity reaches subscribers."""
        if self._previous_level is None:
            self._previous_level = self._logger.level
        self._logger.setLevel(CAPTURE_ALL_LEVEL)

    def subscribe(self, callback) -> Subscription:
        handler = _CallbackHandler(callback)
        self._logger.addHandler(handler)
        return Subscription(self, handler)

    def _detach(self, handler: logging.Handler):
        self._logger.removeHandler(handler)
        if self._previous_level is not None:
            self._logger.setLevel(self._previous_level)
            self._previous_level = None
