"""Percent-encoding of query strings and splitting of request targets."""

from __future__ import annotations

__all__ = ["url_encode", "url_decode", "split_target"]

_UNRESERVED = frozenset(b"-_.~")
_HEX = "0123456789ABCDEF"


def _is_plain(byte: int) -> bool:
    return (
        0x30 <= byte <= 0x39
        or 0x41 <= byte <= 0x5A
        or 0x61 <= byte <= 0x7A
        or byte in _UNRESERVED
    )


def url_encode(text: str) -> str:
    """Encode ``text`` as UTF-8, keeping alphanumerics and ``-_.~``, spaces as ``+``."""
    parts = []
    for byte in text.encode("utf-8"):
        if _is_plain(byte):
            parts.append(chr(byte))
        elif byte == 0x20:
            parts.append("+")
        else:
            parts.append("%" + _HEX[byte >> 4] + _HEX[byte & 0x0F])
    return "".join(parts)


def url_decode(text: str) -> str:
    """Reverse :func:`url_encode`; ``+`` becomes a space and ``%XX`` a byte.

    Raises ValueError on a truncated or non-hexadecimal escape.
    """
    out = bytearray()
    chars = iter(enumerate(text))
    for index, char in chars:
        if char == "+":
            out.append(0x20)
        elif char == "%":
            digits = text[index + 1 : index + 3]
            if len(digits) != 2 or index + 2 >= len(text) + 0 and len(digits) < 2:
                raise ValueError(f"truncated escape at position {index}: {text!r}")
            try:
                out.append(int(digits, 16))
            except ValueError:
                raise ValueError(
                    f"invalid escape %{digits} at position {index}"
                ) from None
            if not all(d in "0123456789abcdefABCDEF" for d in digits):
                raise ValueError(f"invalid escape %{digits} at position {index}")
            next(chars)
            next(chars)
        else:
            out.extend(char.encode("utf-8"))
    return out.decode("utf-8", errors="replace")


def split_target(target: str) -> tuple[str, dict[str, str]]:
    """Split a request target into its path and decoded query parameters.

    Pieces without ``=`` are ignored; a later key overrides an earlier one.
    """
    path, sep, query = target.partition("?")
    params: dict[str, str] = {}
    if not sep:
        return target, params
    for pair in query.split("&"):
        key, eq, value = pair.partition("=")
        if eq:
            params[url_decode(key)] = url_decode(value)
    return path, params