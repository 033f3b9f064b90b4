"""HTTP front end of the gate service."""

from __future__ import annotations

import argparse
import logging
import re
import signal
import sys
import threading
from collections.abc import Callable
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

from chatgate.config import load_config
from chatgate.constants import ErrorCode
from chatgate.gateway import LogicSystem, Request, Response, build_logic
from chatgate.redis_store import store_from_config
from chatgate.urlcodec import split_target

__all__ = ["GateRequestHandler", "make_server", "main"]

_log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0
SERVER_NAME = "GateServer"


def _plain_response(status: int, text: str) -> Response:
    response = Response(status=status, headers={"Content-Type": "text/plain"})
    response.write(text)
    return response


class _GateHTTPServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, address: tuple[str, int], logic: LogicSystem) -> None:
        self.logic = logic
        super().__init__(address, GateRequestHandler)


class GateRequestHandler(BaseHTTPRequestHandler):
    """Serves one short-lived connection: one request, one response, then close."""

    protocol_version = "HTTP/1.1"
    timeout = DEFAULT_TIMEOUT

    def do_GET(self) -> None:
        try:
            path, params = split_target(self.path)
        except ValueError as exc:
            _log.warning("bad request target %r: %s", self.path, exc)
            self._send(_plain_response(400, "bad request\r\n"))
            return
        request = Request(method="GET", path=path, params=params)
        self._dispatch(self.server.logic.handle_get, request)

    def do_POST(self) -> None:
        request = Request(method="POST", path=self.path, body=self._read_body())
        self._dispatch(self.server.logic.handle_post, request)

    def _read_body(self) -> bytes:
        try:
            length = int(self.headers.get("Content-Length", "0"))
        except ValueError:
            length = 0
        return self.rfile.read(length) if length > 0 else b""

    def _dispatch(
        self, handle: Callable[[str, Request, Response], bool], request: Request
    ) -> None:
        response = Response()
        try:
            found = handle(request.path, request, response)
        except Exception:
            _log.exception("handler for %s failed", request.path)
            response = _plain_response(500, "internal error\r\n")
        else:
            if found:
                response.status = 200
                response.headers["Server"] = SERVER_NAME
            else:
                response = _plain_response(404, "url not found\r\n")
        self._send(response)

    def _send(self, response: Response) -> None:
        if self.request_version in ("HTTP/1.0", "HTTP/1.1"):
            self.protocol_version = self.request_version
        payload = response.content
        self.close_connection = True
        self.send_response_only(response.status)
        self.send_header("Date", self.date_time_string())
        for name, value in response.headers.items():
            self.send_header(name, value)
        self.send_header("Content-Length", str(len(payload)))
        self.send_header("Connection", "close")
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, format: str, *args: object) -> None:
        _log.info("%s - %s", self.address_string(), format % args)


def make_server(host: str, port: int, logic: LogicSystem) -> ThreadingHTTPServer:
    """Bind a threading HTTP server that routes requests through ``logic``."""
    return _GateHTTPServer((host, port), logic)


def _atoi(text: str) -> int:
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else 0


def _unavailable_verifier(email: str) -> int:
    _log.warning("no verification service available for %s", email)
    return int(ErrorCode.RPC_FAILED)


def _raise_interrupt(signum: int, frame: object) -> None:
    raise KeyboardInterrupt


def main(argv: list[str] | None = None) -> int:
    """Run the gate server on the port from ``[GateServer] Port``."""
    parser = argparse.ArgumentParser(prog="chatgate", description="Gate HTTP server")
    parser.add_argument("--config", default=None, help="path of the INI file")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    store = None
    try:
        config = load_config(args.config)
        store = store_from_config(config)
        port = _atoi(config["GateServer"]["Port"])
        logic = build_logic(_unavailable_verifier)
        with make_server("0.0.0.0", port, logic) as server:
            in_main = threading.current_thread() is threading.main_thread()
            previous = signal.signal(signal.SIGTERM, _raise_interrupt) if in_main else None
            print(f"Gate Server listen on port: {port}")
            try:
                server.serve_forever()
            except KeyboardInterrupt:
                pass
            finally:
                if in_main:
                    signal.signal(signal.SIGTERM, previous)
    except Exception as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        if store is not None:
            store.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())