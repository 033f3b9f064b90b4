"""Chat-server selection and login-token bookkeeping for the status service."""

from __future__ import annotations

import re
import threading
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Protocol

from chatgate.config import ConfigMgr
from chatgate.constants import LOGIN_COUNT, USER_TOKEN_PREFIX, ErrorCode

__all__ = [
    "ChatServerInfo",
    "ChatServerReply",
    "LoginReply",
    "StatusService",
    "parse_chat_servers",
    "generate_token",
    "MAX_CON_COUNT",
]

# Load assumed for a server whose login count is not recorded.
MAX_CON_COUNT = 2**31 - 1

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class _Store(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> bool: ...

    def hget(self, key: str, field: str) -> str | None: ...


@dataclass
class ChatServerInfo:
    """Address and current load of one chat server."""

    host: str = ""
    port: str = ""
    name: str = ""
    con_count: int = 0


@dataclass(frozen=True)
class ChatServerReply:
    """Answer to a request for a chat server."""

    error: ErrorCode
    host: str = ""
    port: str = ""
    token: str = ""


@dataclass(frozen=True)
class LoginReply:
    """Answer to a login check."""

    error: ErrorCode
    uid: int = 0
    token: str = ""


def _parse_count(text: str) -> int:
    match = _LEADING_INT.match(text)
    if match is None:
        raise ValueError(f"invalid login count: {text!r}")
    return int(match.group(1))


def parse_chat_servers(config: ConfigMgr) -> dict[str, ChatServerInfo]:
    """Read the servers listed in ``[chatservers] Name``, keyed by their ``Name``.

    Listed sections that have no ``Name`` are skipped.
    """
    servers: dict[str, ChatServerInfo] = {}
    listing = config["chatservers"]["Name"]
    if not listing:
        return servers
    for section_name in listing.split(","):
        section = config[section_name]
        if not section["Name"]:
            continue
        server = ChatServerInfo(
            host=section["Host"], port=section["Port"], name=section["Name"]
        )
        servers[server.name] = server
    return servers


def generate_token() -> str:
    """Return a fresh random UUID in its canonical text form."""
    return str(uuid.uuid4())


class StatusService:
    """Hands out the least loaded chat server and records login tokens."""

    def __init__(self, servers: Mapping[str, ChatServerInfo], store: _Store) -> None:
        self._servers = {name: replace(info) for name, info in servers.items()}
        self._store = store
        self._lock = threading.Lock()

    def _load_of(self, server: ChatServerInfo) -> int:
        count = self._store.hget(LOGIN_COUNT, server.name)
        return MAX_CON_COUNT if not count else _parse_count(count)

    def select_server(self) -> ChatServerInfo:
        """Return the server with the fewest logins; the first one wins ties.

        Raises LookupError when no server is configured.
        """
        with self._lock:
            if not self._servers:
                raise LookupError("no chat servers configured")
            servers = iter(self._servers.values())
            first = next(servers)
            first.con_count = self._load_of(first)
            best = first
            for server in servers:
                if server.name == first.name:
                    continue
                server.con_count = self._load_of(server)
                if server.con_count < best.con_count:
                    best = server
            return replace(best)

    def get_chat_server(self, uid: int) -> ChatServerReply:
        """Pick a server for ``uid`` and store a new login token for it."""
        server = self.select_server()
        token = generate_token()
        self._store.set(f"{USER_TOKEN_PREFIX}{uid}", token)
        return ChatServerReply(
            error=ErrorCode.SUCCESS, host=server.host, port=server.port, token=token
        )

    def login(self, uid: int, token: str) -> LoginReply:
        """Check ``token`` against the one stored for ``uid``.

        A stored entry for the uid is reported as ``UID_INVALID``; otherwise
        the token must equal the (empty) stored value.
        """
        stored = self._store.get(f"{USER_TOKEN_PREFIX}{uid}")
        if stored is not None:
            return LoginReply(error=ErrorCode.UID_INVALID)
        if (stored or "") != token:
            return LoginReply(error=ErrorCode.TOKEN_INVALID)
        return LoginReply(error=ErrorCode.SUCCESS, uid=uid, token=token)