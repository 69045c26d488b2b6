#!filepath: src/canonlink/engine.py
from __future__ import annotations

import hashlib
import re
from dataclasses import replace
from typing import Optional, Union

from canonlink import extractor
from canonlink.components import URIComponents, normalize_path
from canonlink.embedded import find_embedded
from canonlink.errors import CanonlinkError
from canonlink.escaping import unescape_unreserved
from canonlink.extractor import ExtractedUrls
from canonlink.parser import URILike, parse
from canonlink.rules.models import RuleSet
from canonlink.suffixes import PublicSuffixChecker, to_unicode_host
from canonlink.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_EMBEDDED_DEPTH = 5

_TWITTER_HOST = re.compile(r"^(mobile\.)?twitter\.com$")
_HASHBANG = re.compile(r"^!(.*)$", re.DOTALL)
_TUMBLR_POST = re.compile(r"^(.*?/post/\d+/).+$")
_SLASH_RUN = re.compile(r"/{2,}")


def normalize(
    uri: URILike,
    *,
    host: Optional[str] = None,
    remove_trailing_slash: bool = True,
) -> URIComponents:
    """Apply structural canonicalization.

    Collapses repeated slashes, drops one trailing slash (never the root
    path), drops an empty query and always drops the fragment.
    """
    u = parse(uri, host=host)
    path = _SLASH_RUN.sub("/", u.path)
    if len(path) != 1 and remove_trailing_slash and path.endswith("/"):
        path = path[:-1]
    return replace(u, path=path, query=u.query or None, fragment=None)


class Canonicalizer:
    """Rule-driven URL canonicalization.

    Holds the immutable rule set and the public suffix collaborator; every
    method is a pure function of its arguments, so one instance can be shared
    across threads.

    Args:
        rules: Canonicalization rules.
        suffixes: Public suffix collaborator.
        max_embedded_depth: How many nested wrapper URLs are unwrapped.
    """

    def __init__(
        self,
        rules: RuleSet,
        *,
        suffixes: Optional[PublicSuffixChecker] = None,
        max_embedded_depth: int = DEFAULT_MAX_EMBEDDED_DEPTH,
    ) -> None:
        self.rules = rules
        self.suffixes = suffixes or PublicSuffixChecker()
        self.max_embedded_depth = int(max_embedded_depth)

    def clean(
        self,
        uri: URILike,
        *,
        raw: bool = False,
        host: Optional[str] = None,
        remove_trailing_slash: bool = True,
        _depth: int = 0,
    ) -> Union[str, URIComponents]:
        """Canonicalize ``uri``.

        Args:
            uri: URI string or components.
            raw: Return components instead of a string.
            host: Host adopted by relative inputs.
            remove_trailing_slash: Strip one trailing slash from the path.

        Returns:
            The canonical string, or components when ``raw`` is set.

        Raises:
            MalformedURIError: When the input cannot be parsed.
            InvalidEncodingError: When percent-decoding yields invalid UTF-8.
        """
        u = normalize(
            self.c14n(unescape_unreserved(uri), host=host, _depth=_depth),
            remove_trailing_slash=remove_trailing_slash,
        )
        return u if raw else u.to_string()

    def c14n(
        self, uri: URILike, *, host: Optional[str] = None, _depth: int = 0
    ) -> URIComponents:
        """Apply the rule set: raw strips, embedded URLs, query keys, site rewrites."""
        text = uri.to_string() if isinstance(uri, URIComponents) else str(uri)
        u = parse(self.rules.strip_raw(text), host=host)
        u = self.embedded(u, _depth=_depth)

        if u.query is not None:
            drop = self.rules.keys_for_host(u.host)
            kept = tuple(
                (k, v) for (k, v), (name, _) in zip(u.query, u.query_values())
                if name not in drop
            )
            u = replace(u, query=kept or None)

        if u.host is not None and _TWITTER_HOST.match(u.host) and u.fragment:
            m = _HASHBANG.match(u.fragment)
            if m:
                path = m.group(1) if m.group(1).startswith("/") else "/" + m.group(1)
                u = replace(
                    u,
                    path=normalize_path(path, scheme=u.scheme, host=u.host),
                    fragment=None,
                )

        if u.host is not None and u.host.endswith("tumblr.com"):
            m = _TUMBLR_POST.match(u.path)
            if m:
                u = replace(u, path=m.group(1))

        return u

    def embedded(self, uri: URIComponents, *, _depth: int = 0) -> URIComponents:
        """Replace a wrapper URL by the cleaned URL it carries, if any."""
        target = find_embedded(uri)
        if not target:
            return uri
        if _depth >= self.max_embedded_depth:
            logger.debug(f"Embedded URL depth limit reached, keeping {uri}")
            return uri
        return self.clean(target, raw=True, _depth=_depth + 1)

    def extract(self, text: Optional[str]) -> ExtractedUrls:
        return extractor.extract(self, text)

    def extract_href(
        self, html: Optional[str], host: Optional[str] = None
    ) -> list[tuple[str, str]]:
        return extractor.extract_href(self, html, host)

    def valid(self, uri: Optional[URILike]) -> bool:
        """Return True when ``uri`` cleans to a host with a public suffix."""
        if uri is None:
            return False
        try:
            cleaned = self.clean(uri, raw=True)
        except CanonlinkError:
            return False
        if not cleaned.host:
            return False
        return self.suffixes.is_valid(to_unicode_host(cleaned.host))

    def domain(self, uri: URILike) -> Optional[str]:
        """Return the registrable domain of the host of ``uri``, if it has one.

        Raises:
            MalformedURIError: When ``uri`` cannot be parsed.
        """
        u = parse(uri)
        if not u.host:
            return None
        return self.suffixes.domain(u.host)

    def hash(self, uri: URILike, *, clean: bool = False) -> str:
        """Return the MD5 hex digest of ``uri``, cleaned first if asked."""
        text = self.clean(uri) if clean else str(uri)
        return hashlib.md5(str(text).encode("utf_8")).hexdigest()
