"""HTTP transport — delivers one batch per POST, no internal retry."""

import logging
from typing import Optional

import requests

from logmonitor.models import LogEntry
from logmonitor.serializer import serialize_batch

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-Logmonitor-Api-Key"
BUNDLE_ID_HEADER = "X-Logmonitor-Bundle-Id"
ACCEPTED = 202


class HttpTransport:
    """Posts serialized batches to the collection endpoint.

    Retry policy belongs to the caller: a failed send only reports False.
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self._endpoint = endpoint
        self._timeout = timeout
        self._session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def send(
        self,
        entries: list[LogEntry],
        api_key: str,
        bundle_id: Optional[str] = None,
    ) -> bool:
        """POST *entries* as a JSON array. Returns True only on HTTP 202."""
        headers = {
            "Content-Type": "application/json",
            API_KEY_HEADER: api_key,
        }
        if bundle_id is not None:
            headers[BUNDLE_ID_HEADER] = bundle_id

        try:
            response = self._session.post(
                self._endpoint,
                data=serialize_batch(entries),
                headers=headers,
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            logger.warning(
                "Error sending %d logs: %s. Retrying next cycle.", len(entries), exc
            )
            return False

        if response.status_code != ACCEPTED:
            logger.warning(
                "Failed to send %d logs (status %d). Retrying next cycle.",
                len(entries),
                response.status_code,
            )
            return False

        return True

    def close(self):
        """Close the underlying HTTP session."""
        self._session.close()
