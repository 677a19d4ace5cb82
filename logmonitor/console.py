"""Console echo — development-mode local output of captured records."""

import datetime
import logging
import sys
import threading


def format_record(record: logging.LogRecord) -> str:
    """Render a record as ``[LEVEL] time: logger: message``."""
    when = datetime.datetime.fromtimestamp(record.created).isoformat(sep=" ")
    try:
        message = record.getMessage()
    except Exception:
        message = str(record.msg)
    return f"[{record.levelname}] {when}: {record.name}: {message}"


class ConsoleEcho:
    def __init__(self, stream=None):
        self._stream = stream
        self._lock = threading.Lock()

    def write(self, record: logging.LogRecord):
        # Resolve sys.stderr lazily so redirected streams are honoured.
        stream = self._stream or sys.stderr
        line = format_record(record)
        with self._lock:
            stream.write(line + "\n")
            stream.flush()
