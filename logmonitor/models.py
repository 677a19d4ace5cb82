"""Log entry model and translation from ``logging.LogRecord``."""

import json
import logging
import traceback
from dataclasses import dataclass
from typing import Any, Optional

from logmonitor.levels import map_log_level

# Record attribute carrying the structured payload, set via extra={"data": ...}
DATA_ATTRIBUTE = "data"


@dataclass(frozen=True)
class Payload:
    data: Any = None
    error: Optional[str] = None
    stack_trace: Optional[str] = None

    def is_empty(self) -> bool:
        return self.data is None and self.error is None and self.stack_trace is None


@dataclass(frozen=True)
class LogEntry:
    level: str = "log"
    message: str = ""
    client_timestamp: int = 0
    user_id: str = ""
    payload: Optional[Payload] = None


def _snapshot_data(value: Any) -> Any:
    """Return a JSON-safe copy of *value* so later mutation by the caller
    cannot leak into a queued entry. NaN and infinities are not JSON and
    fall back to repr()."""
    try:
        return json.loads(json.dumps(value, default=str, allow_nan=False))
    except (TypeError, ValueError):
        return repr(value)


def _payload_from_record(record: logging.LogRecord) -> Optional[Payload]:
    data = getattr(record, DATA_ATTRIBUTE, None)
    if data is not None:
        data = _snapshot_data(data)

    error = None
    stack_trace = None
    if record.exc_info and record.exc_info[1] is not None:
        error = str(record.exc_info[1])
        stack_trace = "".join(traceback.format_exception(*record.exc_info))
    elif record.stack_info:
        stack_trace = record.stack_info

    payload = Payload(data=data, error=error, stack_trace=stack_trace)
    return None if payload.is_empty() else payload


def create_log_entry(record: logging.LogRecord, user_id: Optional[str] = None) -> LogEntry:
    """Factory function that translates a LogRecord into a LogEntry."""
    try:
        message = record.getMessage()
    except Exception:
        # Bad %-args in the call site; keep the raw template.
        message = str(record.msg)

    return LogEntry(
        level=map_log_level(record.levelno),
        message=message,
        client_timestamp=int(record.created * 1000),
        user_id=user_id or "",
        payload=_payload_from_record(record),
    )


def entry_to_dict(entry: LogEntry) -> dict:
    """Convert a LogEntry to the wire dictionary shape."""
    payload = None
    if entry.payload is not None:
        payload = {}
        if entry.payload.data is not None:
            payload["data"] = entry.payload.data
        if entry.payload.error is not None:
            payload["error"] = entry.payload.error
        if entry.payload.stack_trace is not None:
            payload["stackTrace"] = entry.payload.stack_trace

    return {
        "level": entry.level,
        "message": entry.message,
        "clientTimestamp": entry.client_timestamp,
        "logUserId": entry.user_id,
        "payload": payload,
    }
