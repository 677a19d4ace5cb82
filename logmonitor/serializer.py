"""Batch serializer — JSON array encoding of log entries."""

import json

from logmonitor.models import LogEntry, entry_to_dict


def serialize_batch(entries: list[LogEntry]) -> bytes:
    """Serialize a batch to the UTF-8 JSON array sent as the request body.

    Raises ValueError for NaN or infinite floats, which strict JSON rejects.
    """
    return json.dumps([entry_to_dict(e) for e in entries], allow_nan=False).encode("utf-8")


def deserialize_batch(data: bytes) -> list[dict]:
    """Decode a request body produced by *serialize_batch* back to dicts."""
    return json.loads(data)
