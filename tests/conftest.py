import queue
import socket
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest


class _CollectorHandler(BaseHTTPRequestHandler):
    def do_POST(self):
        length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(length)
        self.server.received.put(
            {"path": self.path, "headers": self.headers, "body": body}
        )
        self.send_response(self.server.status)
        self.send_header("Content-Length", "0")
        self.end_headers()

    def log_message(self, format, *args):
        pass


@pytest.fixture
def collector():
    """Start a real HTTP collector on an ephemeral port.

    Set ``collector.status`` to change the response code; received requests
    land on ``collector.received`` (a queue of dicts).
    """
    server = ThreadingHTTPServer(("127.0.0.1", 0), _CollectorHandler)
    server.status = 202
    server.received = queue.Queue()
    host, port = server.server_address
    server.url = f"http://{host}:{port}/api/v1/logs"

    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    server.server_close()


@pytest.fixture
def dead_endpoint():
    """URL of a local port with nothing listening on it."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    _, port = sock.getsockname()
    sock.close()
    return f"http://127.0.0.1:{port}/api/v1/logs"
