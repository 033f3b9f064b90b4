"""Routing of gate requests to registered handlers and the built-in routes."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any

from chatgate.constants import ErrorCode
from chatgate.urlcodec import split_target

__all__ = ["Request", "Response", "LogicSystem", "build_logic", "Handler", "Verifier"]

_log = logging.getLogger(__name__)


@dataclass
class Request:
    """An incoming request: method, routed path, query parameters and body."""

    method: str
    path: str
    params: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @classmethod
    def from_target(cls, method: str, target: str, body: bytes = b"") -> Request:
        """Build a request whose path and parameters come from ``target``."""
        path, params = split_target(target)
        return cls(method=method, path=path, params=params, body=body)

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


@dataclass
class Response:
    """An outgoing response whose body is built up with :meth:`write`."""

    status: int = HTTPStatus.OK
    headers: dict[str, str] = field(default_factory=dict)
    body: list[str] = field(default_factory=list)

    def write(self, text: str) -> None:
        self.body.append(text)

    @property
    def text(self) -> str:
        return "".join(self.body)

    @property
    def content(self) -> bytes:
        return self.text.encode("utf-8")


Handler = Callable[[Request, Response], None]
# Asks the verification service to send a code to an e-mail; returns its error code.
Verifier = Callable[[str], int]


class LogicSystem:
    """Maps URLs to GET and POST handlers; the first registration of a URL wins."""

    def __init__(self) -> None:
        self._get_handlers: dict[str, Handler] = {}
        self._post_handlers: dict[str, Handler] = {}

    def reg_get(self, url: str, handler: Handler) -> None:
        self._get_handlers.setdefault(url, handler)

    def reg_post(self, url: str, handler: Handler) -> None:
        self._post_handlers.setdefault(url, handler)

    def handle_get(self, path: str, request: Request, response: Response) -> bool:
        """Run the GET handler for ``path``; false if none is registered."""
        return self._dispatch(self._get_handlers, path, request, response)

    def handle_post(self, path: str, request: Request, response: Response) -> bool:
        """Run the POST handler for ``path``; false if none is registered."""
        return self._dispatch(self._post_handlers, path, request, response)

    @staticmethod
    def _dispatch(
        handlers: dict[str, Handler], path: str, request: Request, response: Response
    ) -> bool:
        handler = handlers.get(path)
        if handler is None:
            return False
        handler(request, response)
        return True


def _styled_json(root: dict[str, Any]) -> str:
    return (
        json.dumps(
            root,
            indent=3,
            sort_keys=True,
            ensure_ascii=False,
            separators=(",", " : "),
        )
        + "\n"
    )


def _write_json(response: Response, root: dict[str, Any]) -> None:
    response.write(_styled_json(root))


def _parse_object(body: bytes) -> dict[str, Any] | None:
    try:
        value = json.loads(body.decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        return None
    return value if isinstance(value, dict) else None


def _as_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    raise TypeError(f"value is not convertible to string: {value!r}")


def _get_test(request: Request, response: Response) -> None:
    response.write("receive get_test req \n")
    for index, (key, value) in enumerate(sorted(request.params.items()), start=1):
        response.write(f"param{index} key is {key},  value is {value}\n")


def build_logic(verifier: Verifier) -> LogicSystem:
    """Create a logic system with ``/get_test`` and ``/get_varifycode`` routes."""
    logic = LogicSystem()

    def get_varify_code(request: Request, response: Response) -> None:
        _log.debug("receive body is %s", request.text)
        response.headers["Content-Type"] = "text/json"
        src = _parse_object(request.body)
        if src is None or "email" not in src:
            _log.warning("failed to parse JSON data")
            _write_json(response, {"error": int(ErrorCode.ERROR_JSON)})
            return
        email = _as_string(src["email"])
        try:
            error = int(verifier(email))
        except OSError as exc:
            _log.warning("verification request failed: %s", exc)
            error = int(ErrorCode.RPC_FAILED)
        _log.info("email is %s", email)
        _write_json(response, {"error": error, "email": src["email"]})

    logic.reg_get("/get_test", _get_test)
    logic.reg_post("/get_varifycode", get_varify_code)
    return logic