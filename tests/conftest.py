import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qs, urlparse

import pytest


class FakeBackend:
    """Records every request and answers from a table of scripted replies."""

    def __init__(self):
        self.calls = []
        self.replies = {}

    def reply(self, method, path, payload=None, status=200, content_type="application/json"):
        if isinstance(payload, (bytes, str)):
            body = payload.encode("utf-8") if isinstance(payload, str) else payload
        elif payload is None:
            body = b""
        else:
            body = json.dumps(payload).encode("utf-8")
        self.replies[(method, path)] = (status, body, content_type)

    def last(self):
        return self.calls[-1]


def _handler_for(backend):
    class Handler(BaseHTTPRequestHandler):
        def log_message(self, format, *args):
            return

        def _dispatch(self):
            parsed = urlparse(self.path)
            length = int(self.headers.get("Content-Length") or 0)
            raw = self.rfile.read(length) if length else b""
            backend.calls.append({
                "method": self.command,
                "path": parsed.path,
                "query": {k: v[0] for k, v in parse_qs(parsed.query).items()},
                "raw_query": parsed.query,
                "json": json.loads(raw) if raw else None,
                "headers": dict(self.headers),
            })
            status, body, content_type = backend.replies.get(
                (self.command, parsed.path), (200, b"{}", "application/json")
            )
            self.send_response(status)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            if body:
                self.wfile.write(body)

        do_GET = do_POST = do_PUT = do_DELETE = do_PATCH = _dispatch

    return Handler


@pytest.fixture(autouse=True)
def direct_connections(monkeypatch):
    # keep test traffic to 127.0.0.1 away from any configured proxy
    monkeypatch.setenv("no_proxy", "127.0.0.1,localhost")
    monkeypatch.setenv("NO_PROXY", "127.0.0.1,localhost")


@pytest.fixture
def backend():
    fake = FakeBackend()
    server = ThreadingHTTPServer(("127.0.0.1", 0), _handler_for(fake))
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    fake.base_url = f"http://127.0.0.1:{server.server_address[1]}/api"
    try:
        yield fake
    finally:
        server.shutdown()
        server.server_close()
