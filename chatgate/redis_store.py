"""A pooled Redis key/value store with keep-alive pings."""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Callable
from typing import Any, TypeVar

import redis

from chatgate.config import ConfigMgr
from chatgate.pool import ConnectionPool

__all__ = ["RedisStore", "store_from_config"]

_log = logging.getLogger(__name__)

R = TypeVar("R")

DEFAULT_POOL_SIZE = 5
DEFAULT_KEEPALIVE_INTERVAL = 60.0


def _text(value: bytes | str) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else value


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_ok(reply: Any) -> bool:
    if reply is True:
        return True
    return isinstance(reply, (bytes, str)) and _text(reply) in ("OK", "ok")


def _close_quietly(client: Any) -> None:
    close = getattr(client, "close", None)
    if close is None:
        return
    try:
        close()
    except redis.RedisError:
        _log.debug("error while closing redis client", exc_info=True)


def _atoi(text: str) -> int:
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else 0


class RedisStore:
    """Redis commands run on connections borrowed from a fixed-size pool.

    Connections that fail to connect or authenticate are left out of the pool.
    Redis errors are logged and reported as a failed result (``False`` or
    ``None``); using the store after :meth:`close` raises
    :class:`chatgate.pool.PoolClosedError`.
    """

    def __init__(
        self,
        client_factory: Callable[[], Any],
        pool_size: int = DEFAULT_POOL_SIZE,
        password: str | None = None,
        keepalive_interval: float | None = DEFAULT_KEEPALIVE_INTERVAL,
    ) -> None:
        self._factory = client_factory
        self._password = password
        clients = (self._connect() for _ in range(pool_size))
        self._pool: ConnectionPool[Any] = ConnectionPool(
            client for client in clients if client is not None
        )
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        if keepalive_interval:
            self._thread = threading.Thread(
                target=self._keepalive,
                args=(keepalive_interval,),
                name="redis-keepalive",
                daemon=True,
            )
            self._thread.start()

    def _connect(self) -> Any | None:
        try:
            client = self._factory()
        except redis.RedisError as exc:
            _log.warning("redis connect failed: %s", exc)
            return None
        if self._password is not None:
            try:
                client.execute_command("AUTH", self._password)
            except redis.RedisError as exc:
                _log.warning("redis authentication failed: %s", exc)
                _close_quietly(client)
                return None
            _log.info("redis authentication succeeded")
        return client

    def _run(self, description: str, op: Callable[[Any], R], default: R) -> R:
        with self._pool.connection() as client:
            try:
                result = op(client)
            except redis.RedisError as exc:
                _log.warning("command [ %s ] failed: %s", description, exc)
                return default
        _log.debug("command [ %s ] done", description)
        return result

    def get(self, key: str) -> str | None:
        """Return the string stored at ``key``, or ``None``."""
        reply = self._run(f"GET {key}", lambda c: c.get(key), None)
        if isinstance(reply, (bytes, str)):
            return _text(reply)
        return None

    def set(self, key: str, value: str) -> bool:
        reply = self._run(f"SET {key} {value}", lambda c: c.set(key, value), None)
        return _is_ok(reply)

    def lpush(self, key: str, value: str) -> bool:
        reply = self._run(f"LPUSH {key} {value}", lambda c: c.lpush(key, value), None)
        return _is_int(reply) and reply > 0

    def lpop(self, key: str) -> str | None:
        reply = self._run(f"LPOP {key}", lambda c: c.lpop(key), None)
        return _text(reply) if isinstance(reply, (bytes, str)) else None

    def rpush(self, key: str, value: str) -> bool:
        reply = self._run(f"RPUSH {key} {value}", lambda c: c.rpush(key, value), None)
        return _is_int(reply) and reply > 0

    def rpop(self, key: str) -> str | None:
        reply = self._run(f"RPOP {key}", lambda c: c.rpop(key), None)
        return _text(reply) if isinstance(reply, (bytes, str)) else None

    def hset(self, key: str, field: str, value: str | bytes) -> bool:
        """Set a hash field; true whenever Redis answers with an integer."""
        reply = self._run(
            f"HSET {key} {field}", lambda c: c.hset(key, field, value), None
        )
        return _is_int(reply)

    def hget(self, key: str, field: str) -> str | None:
        reply = self._run(f"HGET {key} {field}", lambda c: c.hget(key, field), None)
        return _text(reply) if isinstance(reply, (bytes, str)) else None

    def hdel(self, key: str, field: str) -> bool:
        """Delete a hash field; true only if a field was removed."""
        reply = self._run(f"HDEL {key} {field}", lambda c: c.hdel(key, field), None)
        return _is_int(reply) and reply > 0

    def delete(self, key: str) -> bool:
        """Delete ``key``; true whenever the command ran, even if nothing was removed."""
        reply = self._run(f"DEL {key}", lambda c: c.delete(key), None)
        return _is_int(reply)

    def exists(self, key: str) -> bool:
        reply = self._run(f"EXISTS {key}", lambda c: c.exists(key), None)
        return _is_int(reply) and reply > 0

    def ping_all(self) -> None:
        """Ping every idle connection, reconnecting those that fail."""
        for client in self._pool.drain():
            if self._stop.is_set():
                self._pool.release(client)
                continue
            try:
                client.ping()
            except redis.RedisError as exc:
                _log.warning("error keeping connection alive: %s", exc)
                _close_quietly(client)
                client = self._connect()
                if client is None:
                    continue
            self._pool.release(client)

    def _keepalive(self, interval: float) -> None:
        while not self._stop.wait(interval):
            self.ping_all()

    def close(self) -> None:
        """Close the pool, stop the keep-alive thread and close idle clients."""
        self._pool.close()
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()
        for client in self._pool.drain():
            _close_quietly(client)

    def __len__(self) -> int:
        return len(self._pool)

    def __enter__(self) -> RedisStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def store_from_config(config: ConfigMgr) -> RedisStore:
    """Build a store from the ``[Redis]`` section (``Host``, ``Port``, ``Passwd``).

    An empty ``Passwd`` means no authentication is attempted.
    """
    section = config["Redis"]
    host = section["Host"]
    port = _atoi(section["Port"])
    password = section["Passwd"] or None
    return RedisStore(
        lambda: redis.Redis(host=host, port=port),
        pool_size=DEFAULT_POOL_SIZE,
        password=password,
        keepalive_interval=DEFAULT_KEEPALIVE_INTERVAL,
    )