#!filepath: src/canonlink/escaping.py
from __future__ import annotations

import re
from dataclasses import replace
from typing import Callable

from canonlink.components import URIComponents
from canonlink.errors import InvalidEncodingError
from canonlink.parser import URILike, parse

# https://tools.ietf.org/html/rfc3986#section-2.2, plus '%' itself
RESERVED_CHARS: frozenset[str] = frozenset(":/?#[]@!$&'()*+,;=%")
ENCODED_RESERVED_CHARS: frozenset[str] = frozenset(
    f"%{ord(c):02X}" for c in RESERVED_CHARS
)

_ESCAPE_RE = re.compile(r"[^a-zA-Z0-9_.-]+")
_UNESCAPE_RE = re.compile(rb"%[0-9a-fA-F]{2}")


def escape(text: str) -> str:
    """Percent-encode every character outside ``[A-Za-z0-9_.-]``."""
    return _ESCAPE_RE.sub(
        lambda m: "".join(f"%{b:02X}" for b in m.group(0).encode("utf_8")), text
    )


def unescape(uri: URILike) -> str:
    """Decode every percent escape of ``uri``.

    Raises:
        MalformedURIError: When ``uri`` cannot be parsed.
        InvalidEncodingError: When the decoded bytes are not UTF-8.
    """
    return _decode(uri, lambda code: True)


def unescape_unreserved(uri: URILike) -> str:
    """Decode the percent escapes of ``uri`` that do not stand for delimiters.

    ``%2F`` in a path segment stays encoded so that decoding never changes how
    the URI splits into components; ``%41`` becomes ``A``.

    Raises:
        MalformedURIError: When ``uri`` cannot be parsed.
        InvalidEncodingError: When the decoded bytes are not UTF-8.
    """
    return _decode(uri, lambda code: code.upper() not in ENCODED_RESERVED_CHARS)


def _decode(uri: URILike, should_decode: Callable[[str], bool]) -> str:
    u = _plus_to_space(parse(uri))
    serialized = u.to_string()

    def _sub(m: re.Match[bytes]) -> bytes:
        code = m.group(0).decode("ascii")
        return bytes.fromhex(code[1:]) if should_decode(code) else m.group(0)

    decoded = _UNESCAPE_RE.sub(_sub, serialized.encode("utf_8"))
    try:
        return decoded.decode("utf_8")
    except UnicodeDecodeError as e:
        raise InvalidEncodingError(
            f"URI contains invalid characters: {serialized!r}", uri=serialized
        ) from e


def _plus_to_space(u: URIComponents) -> URIComponents:
    if u.query is None:
        return u
    return replace(
        u,
        query=tuple(
            (k.replace("+", " "), None if v is None else v.replace("+", " "))
            for k, v in u.query
        ),
    )
