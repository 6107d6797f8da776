"""Shared fixtures: a loopback HTTP sink standing in for the TSDB endpoint."""

import gzip
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest


class TSDBSink:
    """Records every POST body; answers with queued statuses, then 200."""

    def __init__(self):
        self.payloads: list[bytes] = []
        self.content_types: list[str] = []
        self.statuses: list[int] = []
        self._lock = threading.Lock()
        self.url = None

    def next_status(self) -> int:
        with self._lock:
            return self.statuses.pop(0) if self.statuses else 200

    def record(self, body: bytes, content_type: str):
        with self._lock:
            self.payloads.append(body)
            self.content_types.append(content_type)

    def received(self) -> list[bytes]:
        with self._lock:
            return list(self.payloads)


def _make_handler(sink: TSDBSink):
    class Handler(BaseHTTPRequestHandler):
        def do_POST(self):
            length = int(self.headers.get("Content-Length", 0))
            body = self.rfile.read(length)
            sink.record(body, self.headers.get("Content-Type", ""))
            status = sink.next_status()
            self.send_response(status)
            self.send_header("Content-Length", "0")
            self.end_headers()

        def log_message(self, format, *args):
            pass

    return Handler


@pytest.fixture
def tsdb_sink():
    """Start an HTTP server on an ephemeral port and yield its TSDBSink."""
    sink = TSDBSink()
    server = ThreadingHTTPServer(("127.0.0.1", 0), _make_handler(sink))
    host, port = server.server_address[:2]
    sink.url = f"http://{host}:{port}/api/put?details"
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield sink
    server.shutdown()
    server.server_close()
    thread.join(timeout=5)


def write_gz(path, lines, newline=b"\n"):
    """Write *lines* (bytes) as a gzip file, one per line."""
    with gzip.open(path, "wb") as f:
        for line in lines:
            f.write(line + newline)
    return str(path)


@pytest.fixture
def make_gz(tmp_path):
    """Factory fixture: make_gz(name, lines) -> path of a new gzip file."""

    def _make(name, lines, newline=b"\n"):
        return write_gz(tmp_path / name, lines, newline)

    return _make
