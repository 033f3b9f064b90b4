# chatgate

`chatgate` holds the front-door pieces of a chat backend:

- `chatgate.http_server` – a threaded HTTP gateway (`chatgate` command);
- `chatgate.gateway` – the routing table (`LogicSystem`) behind it and the
  built-in routes;
- `chatgate.status_service` – `StatusService`, which picks the least loaded
  chat server for a user and records login tokens;
- `chatgate.redis_store` – `RedisStore`, a pooled Redis client with
  keep-alive pings;
- `chatgate.pool` – `ConnectionPool`, a blocking thread-safe FIFO pool;
- `chatgate.config` – INI loading with forgiving lookups;
- `chatgate.urlcodec` – query-string encoding and decoding;
- `chatgate.constants` – `ErrorCode` and Redis key prefixes.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Configuration

Settings come from an INI file, by default `config.ini` in the current
working directory. Keys are case-sensitive. A typical file:

```ini
[GateServer]
Port = 8080

[Redis]
Host = 127.0.0.1
Port = 6379
Passwd = password

[chatservers]
Name = chatserver1,chatserver2

[chatserver1]
Name = chatserver1
Host = 127.0.0.1
Port = 8090

[chatserver2]
Name = chatserver2
Host = 127.0.0.1
Port = 8091
```

A missing section or key reads as an empty string rather than raising:

```python
from chatgate.config import load_config

config = load_config("config.ini")
config["Redis"]["Host"]            # "127.0.0.1"
config.get_value("Redis", "Port")  # "6379"
config["Nowhere"]["Anything"]      # ""
config.section_names()             # sorted list of section names
```

## Running the gateway

From the directory that holds `config.ini`:

```
chatgate
```

or with another file:

```
chatgate --config path/to/config.ini
```

The server listens on all interfaces on the port from `[GateServer] Port`,
opens a Redis store from the `[Redis]` section, and stops on Ctrl-C or
SIGTERM. Each connection carries one request and one response and is then
closed. Unknown URLs get `404` with the body `url not found`; a handler that
raises gives `500`; a GET query with a broken `%` escape gives `400`.

Routes served:

- `GET /get_test` – echoes the query parameters, one line per parameter,
  in key order:

  ```
  receive get_test req 
  param1 key is key1,  value is value1
  param2 key is key2,  value is value2
  ```

- `POST /get_varifycode` – takes a JSON object with an `email` member and
  answers with `{"email": ..., "error": ...}` (content type `text/json`).
  A body that is not a JSON object or has no `email` gets
  `{"error": 1001}`.

## Using the pieces from Python

### Routing

```python
from chatgate.gateway import LogicSystem, Request, Response, build_logic
from chatgate.http_server import make_server

def verifier(email: str) -> int:
    # ask some service to send a code to `email`, return an error code
    return 0

logic = build_logic(verifier)

def hello(request: Request, response: Response) -> None:
    response.write("hello\n")

logic.reg_get("/hello", hello)   # the first handler registered for a URL wins

server = make_server("127.0.0.1", 8080, logic)
server.serve_forever()
```

A verifier that raises `OSError` is reported to the client as error `1002`.

### Chat-server selection

```python
from chatgate.config import load_config
from chatgate.redis_store import store_from_config
from chatgate.status_service import StatusService, parse_chat_servers

config = load_config("config.ini")
with store_from_config(config) as store:
    status = StatusService(parse_chat_servers(config), store)
    reply = status.get_chat_server(uid=42)
    print(reply.host, reply.port, reply.token)
```

`select_server()` reads each server's count from the `logincount` Redis
hash; a server without a recorded count is treated as fully loaded, and the
first configured server wins ties. It raises `LookupError` when no server is
configured. `get_chat_server()` stores a fresh UUID token under
`utoken_<uid>`.

`login(uid, token)` answers `UID_INVALID` whenever a token is stored for
the uid; otherwise it succeeds only for an empty token and answers
`TOKEN_INVALID` for any other.

### Redis store

`RedisStore(client_factory, pool_size=5, password=None, keepalive_interval=60.0)`
opens `pool_size` clients (leaving out those that fail to connect or
authenticate) and pings idle ones every `keepalive_interval` seconds,
reconnecting any that fail. Its methods – `get`, `set`, `lpush`, `lpop`,
`rpush`, `rpop`, `hset`, `hget`, `hdel`, `delete`, `exists` – return
`False` or `None` on a Redis error instead of raising. After `close()`,
calls raise `chatgate.pool.PoolClosedError`.

### URL codec

```python
from chatgate.urlcodec import url_encode, url_decode, split_target

url_encode("a b&c")      # "a+b%26c"
url_decode("a+b%26c")    # "a b&c"
split_target("/get_test?key1=value1&key2=value2")
# ("/get_test", {"key1": "value1", "key2": "value2"})
```

`url_decode` raises `ValueError` on a truncated or non-hexadecimal escape.

## Error codes

Every JSON reply has an `error` field whose values are the members of
`chatgate.constants.ErrorCode`: `SUCCESS` (0), `ERROR_JSON` (1001),
`RPC_FAILED` (1002), `VARIFY_EXPIRED` (1003), `VARIFY_CODE_ERR` (1004),
`USER_EXIST` (1005), `PASSWD_ERR` (1006), `EMAIL_NOT_MATCH` (1007),
`PASSWD_UP_FAILED` (1008), `PASSWD_INVALID` (1009), `TOKEN_INVALID` (1010)
and `UID_INVALID` (1011).

## What the package does not do

- It has no user database: there are no registration, login or
  password-reset routes in the gateway.
- It does not talk to a verification-code service. The `chatgate` command
  wires in a verifier that always answers `1002` (`RPC_FAILED`); supply
  your own verifier to `build_logic` to send real codes.
- `StatusService` is a plain Python class; the package does not expose it
  over the network.