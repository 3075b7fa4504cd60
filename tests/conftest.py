from __future__ import annotations

import json
import socket
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict, List, Tuple

import pytest

from matprops_core.models import ComputationRequest


@pytest.fixture(autouse=True)
def no_http_proxy(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep requests to the local stub server off any proxy configured in the environment."""
    for name in ("http_proxy", "HTTP_PROXY", "https_proxy", "HTTPS_PROXY", "all_proxy", "ALL_PROXY"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("no_proxy", "*")
    monkeypatch.setenv("NO_PROXY", "*")


@pytest.fixture
def honeycomb_request() -> ComputationRequest:
    """Default honeycomb inputs used across unit tests."""
    return ComputationRequest(
        model_number=1,
        parameters={
            "l_cell_side_size": 9.24,
            "h_cell_side_size": 8.4619,
            "wall_thickness": 0.4,
            "angle": 0.5235987755982988,
            "alpha_for_honeycomb": 0.2,
            "e_for_honeycomb": 7.07,
            "nu_for_honeycomb": 0.2,
        },
    )


class StubServer:
    """Local HTTP endpoint answering POSTs with canned (status, body) pairs per path."""

    def __init__(self) -> None:
        self.routes: Dict[str, Tuple[int, str]] = {}
        self.received: List[Tuple[str, Any]] = []
        outer = self

        class Handler(BaseHTTPRequestHandler):
            def do_POST(self) -> None:
                length = int(self.headers.get("Content-Length", 0))
                payload = json.loads(self.rfile.read(length) or b"null")
                outer.received.append((self.path, payload))
                status, body = outer.routes.get(self.path, (404, '{"error": "not found"}'))
                data = body.encode("utf-8")
                self.send_response(status)
                self.send_header("Content-Type", "application/json")
                self.send_header("Content-Length", str(len(data)))
                self.end_headers()
                self.wfile.write(data)

            def log_message(self, format: str, *args: Any) -> None:  # pragma: no cover - silence
                pass

        self._httpd = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
        self._thread = threading.Thread(target=self._httpd.serve_forever, daemon=True)

    @property
    def base_url(self) -> str:
        host, port = self._httpd.server_address[:2]
        return f"http://{host}:{port}"

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._httpd.shutdown()
        self._httpd.server_close()


@pytest.fixture
def stub_server():
    server = StubServer()
    server.start()
    yield server
    server.stop()


class RawReplyServer:
    """TCP endpoint that reads one HTTP request and answers with fixed bytes, HTTP or not."""

    def __init__(self, reply: bytes) -> None:
        self.reply = reply
        self._sock = socket.socket()
        self._sock.bind(("127.0.0.1", 0))
        self._sock.listen(1)
        self._thread = threading.Thread(target=self._serve_once, daemon=True)

    @property
    def base_url(self) -> str:
        host, port = self._sock.getsockname()[:2]
        return f"http://{host}:{port}"

    def _serve_once(self) -> None:
        conn, _ = self._sock.accept()
        with conn:
            data = b""
            while b"\r\n\r\n" not in data:
                chunk = conn.recv(4096)
                if not chunk:
                    break
                data += chunk
            head, _, body = data.partition(b"\r\n\r\n")
            length = 0
            for line in head.split(b"\r\n"):
                name, _, value = line.partition(b":")
                if name.strip().lower() == b"content-length":
                    length = int(value.strip())
            while len(body) < length:
                chunk = conn.recv(4096)
                if not chunk:
                    break
                body += chunk
            conn.sendall(self.reply)

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._thread.join(timeout=5)
        self._sock.close()


@pytest.fixture
def raw_reply_server():
    servers: List[RawReplyServer] = []

    def start(reply: bytes) -> RawReplyServer:
        server = RawReplyServer(reply)
        server.start()
        servers.append(server)
        return server

    yield start
    for server in servers:
        server.stop()
