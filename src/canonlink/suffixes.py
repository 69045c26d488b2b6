#!filepath: src/canonlink/suffixes.py
from __future__ import annotations

from functools import lru_cache
from typing import Optional

import tldextract


class PublicSuffixChecker:
    """Decides whether a host carries a registrable, publicly listed domain.

    Uses the Public Suffix List snapshot bundled with tldextract, so checks
    never touch the network or the disk.
    """

    def __init__(self, extractor: Optional[tldextract.TLDExtract] = None) -> None:
        self._extract = extractor or tldextract.TLDExtract(
            cache_dir=None,
            suffix_list_urls=(),
            fallback_to_snapshot=True,
            include_psl_private_domains=True,
        )

    def is_valid(self, host: Optional[str]) -> bool:
        return self.domain(host) is not None

    def domain(self, host: Optional[str]) -> Optional[str]:
        """Return the registrable domain of ``host``, e.g. ``bbc.co.uk`` for
        ``www.news.bbc.co.uk``, or None when it has no public suffix.
        """
        h = _bare_host(host)
        if not h or h.startswith("."):
            return None
        ext = self._extract(h)
        if not ext.suffix or not ext.domain:
            return None
        return f"{ext.domain}.{ext.suffix}"


def to_unicode_host(host: str) -> str:
    """Decode punycode labels; hosts that do not decode are returned as-is."""
    try:
        return host.encode("ascii").decode("idna")
    except UnicodeError:
        return host


def _bare_host(host: Optional[str]) -> str:
    h = str(host or "").strip().lower()
    if h.startswith("["):
        return ""
    head, sep, tail = h.rpartition(":")
    if sep and tail.isdigit():
        h = head
    return h


@lru_cache(maxsize=1)
def default_checker() -> PublicSuffixChecker:
    return PublicSuffixChecker()
