#!filepath: src/canonlink/components.py
from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass, replace
from typing import Optional, Tuple
from urllib.parse import quote, unquote, urlsplit

from canonlink.errors import MalformedURIError

QueryPair = Tuple[str, Optional[str]]

SUB_DELIMS = "!$&'()*+,;="
PCHAR_SAFE = SUB_DELIMS + ":@"
USERINFO_SAFE = SUB_DELIMS + ":"
# '&' is removed so that every key=value pair is normalized on its own.
QUERY_PAIR_SAFE = PCHAR_SAFE.replace("&", "") + "/?"
# Escaped delimiters that would change how a query splits once decoded.
QUERY_LEAVE_ENCODED = "+&=#"
FRAGMENT_SAFE = PCHAR_SAFE + "/?"

DEFAULT_PORTS = {"http": 80, "https": 443, "ftp": 21}
HTTP_SCHEMES = frozenset({"http", "https"})

_INVALID_HOST_CHARS = re.compile(r"[\s<>\"{}|\\^`%]")


@dataclass(frozen=True, slots=True)
class URIComponents:
    """Structured URI.

    Query pairs are kept in their normalized, percent-encoded form so that
    serialization is lossless; ``query_values`` gives the decoded view.

    Attributes:
        scheme: Lower-cased scheme, if any.
        userinfo: Userinfo part of the authority, if any.
        host: Lower-cased ASCII host, if any.
        port: Non-default port, if any.
        path: Path, "/" for http(s) URIs with an authority.
        query: Ordered key/value pairs, None when the URI has no query.
        fragment: Fragment, if any.
    """

    scheme: Optional[str] = None
    userinfo: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None
    path: str = ""
    query: Optional[Tuple[QueryPair, ...]] = None
    fragment: Optional[str] = None

    @property
    def absolute(self) -> bool:
        return self.scheme is not None

    @property
    def authority(self) -> Optional[str]:
        if self.host is None:
            return None
        host = f"[{self.host}]" if ":" in self.host else self.host
        out = host if self.port is None else f"{host}:{self.port}"
        return out if self.userinfo is None else f"{self.userinfo}@{out}"

    @property
    def query_string(self) -> Optional[str]:
        if self.query is None:
            return None
        return "&".join(k if v is None else f"{k}={v}" for k, v in self.query)

    def query_values(self) -> list[tuple[str, Optional[str]]]:
        """Return the query pairs decoded, '+' read as a space."""
        return [
            (decode_query_component(k), None if v is None else decode_query_component(v))
            for k, v in (self.query or ())
        ]

    def query_value(self, key: str) -> Optional[str]:
        """Return the decoded value of the last pair named ``key``."""
        found: Optional[str] = None
        for k, v in self.query_values():
            if k == key:
                found = v
        return found

    def to_string(self) -> str:
        out = ""
        if self.scheme is not None:
            out += f"{self.scheme}:"
        authority = self.authority
        if authority is not None:
            out += f"//{authority}"
        out += self.path
        query = self.query_string
        if query is not None:
            out += f"?{query}"
        if self.fragment is not None:
            out += f"#{self.fragment}"
        return out

    def __str__(self) -> str:
        return self.to_string()


def decode_query_component(value: str) -> str:
    return unquote(value.replace("+", " "), errors="surrogateescape")


def normalize_component(component: str, safe: str, leave_encoded: str = "") -> str:
    """Canonicalize the percent-encoding of one URI component.

    Every escape is decoded, the text is NFC-normalized, then every character
    outside the unreserved set and ``safe`` is encoded with upper-case hex.
    Escapes of characters in ``leave_encoded`` are kept as escapes. Bytes
    that are not UTF-8 survive the round trip unchanged.
    """
    if leave_encoded:
        protected = "|".join(f"%{ord(c):02X}" for c in leave_encoded)
        pieces = re.split(f"({protected})", component, flags=re.IGNORECASE)
        return "".join(
            p.upper() if i % 2 else normalize_component(p, safe)
            for i, p in enumerate(pieces)
        )
    decoded = unquote(component, errors="surrogateescape")
    decoded = unicodedata.normalize("NFC", decoded)
    return quote(decoded, safe=safe, errors="surrogateescape")


def remove_dot_segments(path: str) -> str:
    """Resolve '.' and '..' segments."""
    if "." not in path:
        return path
    segments = path.split("/")
    out: list[str] = []
    for i, seg in enumerate(segments):
        last = i == len(segments) - 1
        if seg == ".":
            if last:
                out.append("")
            continue
        if seg == "..":
            if len(out) > 1 or (out and out[0] != ""):
                out.pop()
            if last:
                out.append("")
            continue
        out.append(seg)
    result = "/".join(out)
    if path.startswith("/") and not result.startswith("/"):
        result = "/" + result
    return result


def normalize_path(path: str, *, scheme: Optional[str], host: Optional[str]) -> str:
    if not path:
        return "/" if host is not None and scheme in HTTP_SCHEMES else ""
    segments = [normalize_component(s, PCHAR_SAFE) for s in path.strip().split("/")]
    return remove_dot_segments("/".join(segments))


def normalize_query(query: Optional[str]) -> Optional[Tuple[QueryPair, ...]]:
    if query is None or not query.strip():
        return None
    pairs: list[QueryPair] = []
    for raw in query.strip().split("&"):
        if not raw:
            continue
        pair = normalize_component(raw, QUERY_PAIR_SAFE, QUERY_LEAVE_ENCODED)
        key, sep, value = pair.partition("=")
        pairs.append((key, value if sep else None))
    return tuple(pairs) if pairs else None


def normalize_host(host: str, *, uri: str = "") -> str:
    h = unquote(host.strip()).lower()
    if len(h) > 1 and h.endswith("."):
        h = h[:-1]
    if _INVALID_HOST_CHARS.search(h):
        raise MalformedURIError(f"Invalid character in host: {host!r}", uri=uri)
    if h.isascii():
        return h
    try:
        return h.encode("idna").decode("ascii")
    except UnicodeError as e:
        raise MalformedURIError(f"Invalid internationalized host: {host!r}", uri=uri) from e


@dataclass(frozen=True, slots=True)
class RawURI:
    """Unnormalized split of a URI string, as the repair heuristics see it."""

    scheme: Optional[str]
    userinfo: Optional[str]
    host: Optional[str]
    port: Optional[int]
    path: str
    query: Optional[str]
    fragment: Optional[str]
    source: str = ""

    def with_host(
        self, host: str, path: Optional[str] = None, port: Optional[int] = None
    ) -> RawURI:
        return replace(
            self,
            host=host,
            path=self.path if path is None else path,
            port=self.port if port is None else port,
        )


def split_uri(uri: str) -> RawURI:
    """Split ``uri`` into raw components.

    Raises:
        MalformedURIError: When the string cannot be segmented.
    """
    try:
        parts = urlsplit(uri)
        port = parts.port
    except ValueError as e:
        raise MalformedURIError(f"Cannot parse URI: {e}", uri=uri) from e

    userinfo: Optional[str] = None
    if "@" in parts.netloc:
        userinfo = parts.netloc.rpartition("@")[0]

    return RawURI(
        scheme=parts.scheme or None,
        userinfo=userinfo,
        host=parts.hostname or None,
        port=port,
        path=parts.path,
        query=parts.query or None,
        fragment=parts.fragment if "#" in uri else None,
        source=uri,
    )


def normalize_raw(raw: RawURI) -> URIComponents:
    """Build normalized components from a repaired raw split.

    Raises:
        MalformedURIError: When a host is combined with a relative path or
            the host itself is not valid.
    """
    scheme = raw.scheme.lower() if raw.scheme else None
    host = normalize_host(raw.host, uri=raw.source) if raw.host is not None else None

    if host is not None and raw.path and not raw.path.startswith("/"):
        raise MalformedURIError(
            "Cannot have a relative path with an authority set", uri=raw.source
        )

    port = raw.port
    if port is not None and scheme is not None and DEFAULT_PORTS.get(scheme) == port:
        port = None

    userinfo = (
        normalize_component(raw.userinfo, USERINFO_SAFE)
        if raw.userinfo is not None
        else None
    )

    return URIComponents(
        scheme=scheme,
        userinfo=userinfo,
        host=host,
        port=port if host is not None else None,
        path=normalize_path(raw.path, scheme=scheme, host=host),
        query=normalize_query(raw.query),
        fragment=(
            normalize_component(raw.fragment, FRAGMENT_SAFE)
            if raw.fragment is not None
            else None
        ),
    )
