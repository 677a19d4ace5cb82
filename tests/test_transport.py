"""Tests for the HTTP transport against a real loopback collector."""

import json

from logmonitor.models import LogEntry, Payload
from logmonitor.transport import API_KEY_HEADER, BUNDLE_ID_HEADER, HttpTransport


def _entries(n: int) -> list[LogEntry]:
    return [LogEntry(level="info", message=f"msg-{i}", client_timestamp=i) for i in range(n)]


class TestSend:
    def test_success_on_202(self, collector):
        transport = HttpTransport(collector.url, timeout=2.0)
        try:
            assert transport.send(_entries(2), "key-1", "com.example.app") is True
        finally:
            transport.close()

        request = collector.received.get(timeout=2)
        assert request["path"] == "/api/v1/logs"
        assert request["headers"]["Content-Type"] == "application/json"
        assert request["headers"][API_KEY_HEADER] == "key-1"
        assert request["headers"][BUNDLE_ID_HEADER] == "com.example.app"

    def test_body_is_json_array_of_entries(self, collector):
        transport = HttpTransport(collector.url, timeout=2.0)
        entries = _entries(2) + [
            LogEntry(level="error", message="boom", client_timestamp=9, user_id="u1",
                     payload=Payload(error="bad", stack_trace="trace"))
        ]
        try:
            transport.send(entries, "key-1")
        finally:
            transport.close()

        body = json.loads(collector.received.get(timeout=2)["body"])
        assert [item["message"] for item in body] == ["msg-0", "msg-1", "boom"]
        assert body[2] == {
            "level": "error",
            "message": "boom",
            "clientTimestamp": 9,
            "logUserId": "u1",
            "payload": {"error": "bad", "stackTrace": "trace"},
        }

    def test_bundle_header_omitted_when_absent(self, collector):
        transport = HttpTransport(collector.url, timeout=2.0)
        try:
            transport.send(_entries(1), "key-1", None)
        finally:
            transport.close()

        headers = collector.received.get(timeout=2)["headers"]
        assert headers.get(BUNDLE_ID_HEADER) is None
        assert headers[API_KEY_HEADER] == "key-1"


class TestFailures:
    def test_200_is_not_success(self, collector):
        collector.status = 200
        transport = HttpTransport(collector.url, timeout=2.0)
        try:
            assert transport.send(_entries(1), "key-1") is False
        finally:
            transport.close()

    def test_server_error_is_failure(self, collector):
        collector.status = 500
        transport = HttpTransport(collector.url, timeout=2.0)
        try:
            assert transport.send(_entries(1), "key-1") is False
        finally:
            transport.close()

    def test_connection_refused_is_failure(self, dead_endpoint):
        transport = HttpTransport(dead_endpoint, timeout=1.0)
        try:
            assert transport.send(_entries(1), "key-1") is False
        finally:
            transport.close()

    def test_single_attempt_only(self, collector):
        collector.status = 503
        transport = HttpTransport(collector.url, timeout=2.0)
        try:
            transport.send(_entries(1), "key-1")
        finally:
            transport.close()

        collector.received.get(timeout=2)
        assert collector.received.empty()
