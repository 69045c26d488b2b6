#!filepath: src/canonlink/parser.py
from __future__ import annotations

import re
from dataclasses import replace
from typing import Optional, Union

from canonlink.components import RawURI, URIComponents, normalize_raw, split_uri
from canonlink.errors import MalformedURIError
from canonlink.grammar import DOMAIN_RE

URILike = Union[str, URIComponents]

# Schemes that legitimately have no authority.
NON_NETWORK_SCHEMES = frozenset({"javascript", "mailto", "xmpp"})

_PATH_SPLIT = re.compile(r"[/:]")
_HOST_PORT = re.compile(r"^(.*):(\d+)$")


def parse(uri: URILike, *, host: Optional[str] = None) -> URIComponents:
    """Parse ``uri`` into normalized components, repairing common damage.

    Inputs such as ``example.com/path`` are misread by a general URI parser
    as a path or as a scheme; those are re-parsed with a leading ``http://``
    or have their first path segment promoted to the host.

    Args:
        uri: String or already parsed components.
        host: Host adopted by relative inputs.

    Returns:
        URIComponents: Normalized components.

    Raises:
        MalformedURIError: When the string cannot be segmented.
    """
    if isinstance(uri, URIComponents):
        return uri

    text = str(uri)
    raw = split_uri(text)

    if raw.host is None and (raw.scheme or "").lower() not in NON_NETWORK_SCHEMES:
        if raw.scheme and not text.lower().startswith("http://"):
            return parse(f"http://{text}", host=host)
        if raw.scheme is None:
            raw = _repair_hostless(raw, host)

    if raw.host is not None and raw.scheme is None:
        raw = replace(raw, scheme="http")

    return normalize_raw(raw)


def _repair_hostless(raw: RawURI, host: Optional[str]) -> RawURI:
    if host:
        name, port = _split_host_port(host)
        return raw.with_host(name, port=port)

    parts = _PATH_SPLIT.split(raw.path)
    if parts and DOMAIN_RE.search(parts[0]):
        return raw.with_host(parts[0], path="/" + "/".join(parts[1:]))
    return raw


def _split_host_port(host: str) -> tuple[str, Optional[int]]:
    """Split ``host[:port]`` as given by a caller; IPv6 literals need brackets."""
    name = host.strip()
    port: Optional[int] = None
    m = _HOST_PORT.match(name)
    if m and (not m.group(1).startswith("[") or m.group(1).endswith("]")):
        name, port = m.group(1), int(m.group(2))
    if name.startswith("[") and name.endswith("]"):
        return name[1:-1], port
    if ":" in name:
        raise MalformedURIError(f"Invalid fallback host: {host!r}", uri=host)
    return name, port
