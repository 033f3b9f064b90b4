"""Error codes and key prefixes shared by the gate and status services."""

from __future__ import annotations

import enum

__all__ = [
    "ErrorCode",
    "CODE_PREFIX",
    "USER_IP_PREFIX",
    "USER_TOKEN_PREFIX",
    "IP_COUNT_PREFIX",
    "USER_BASE_INFO",
    "LOGIN_COUNT",
]


class ErrorCode(enum.IntEnum):
    """Error codes returned to clients in the ``error`` field of replies."""

    SUCCESS = 0
    ERROR_JSON = 1001
    RPC_FAILED = 1002
    VARIFY_EXPIRED = 1003
    VARIFY_CODE_ERR = 1004
    USER_EXIST = 1005
    PASSWD_ERR = 1006
    EMAIL_NOT_MATCH = 1007
    PASSWD_UP_FAILED = 1008
    PASSWD_INVALID = 1009
    TOKEN_INVALID = 1010
    UID_INVALID = 1011


# Redis key prefix under which verification codes are stored, keyed by e-mail.
CODE_PREFIX = "code_"

USER_IP_PREFIX = "uip_"
USER_TOKEN_PREFIX = "utoken_"
IP_COUNT_PREFIX = "ipcount_"
USER_BASE_INFO = "ubaseinfo_"
# Hash that maps chat-server names to their current login counts.
LOGIN_COUNT = "logincount"