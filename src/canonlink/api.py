#!filepath: src/canonlink/api.py
"""Module-level entry points bound to the process-wide canonicalizer."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional, Union

from canonlink.components import URIComponents
from canonlink.engine import Canonicalizer
from canonlink.extractor import ExtractedUrls
from canonlink.parser import URILike, parse
from canonlink.rules.config import get_rules
from canonlink.settings import get_settings
from canonlink.suffixes import default_checker


@lru_cache(maxsize=1)
def get_canonicalizer() -> Canonicalizer:
    """Return the shared canonicalizer, built from the configured rules.

    Raises:
        RulesConfigError: When the rule file is unusable.
    """
    return Canonicalizer(
        get_rules(),
        suffixes=default_checker(),
        max_embedded_depth=get_settings().max_embedded_depth,
    )


def clean(
    uri: URILike,
    *,
    raw: bool = False,
    host: Optional[str] = None,
    remove_trailing_slash: bool = True,
) -> Union[str, URIComponents]:
    return get_canonicalizer().clean(
        uri, raw=raw, host=host, remove_trailing_slash=remove_trailing_slash
    )


def c14n(uri: URILike, *, host: Optional[str] = None) -> URIComponents:
    return get_canonicalizer().c14n(uri, host=host)


def embedded(uri: URILike) -> URIComponents:
    return get_canonicalizer().embedded(parse(uri))


def extract(text: Optional[str]) -> ExtractedUrls:
    return get_canonicalizer().extract(text)


def extract_href(html: Optional[str], host: Optional[str] = None) -> list[tuple[str, str]]:
    return get_canonicalizer().extract_href(html, host)


def valid(uri: Optional[URILike]) -> bool:
    return get_canonicalizer().valid(uri)


def domain(uri: URILike) -> Optional[str]:
    return get_canonicalizer().domain(uri)


def hash(uri: URILike, *, clean: bool = False) -> str:
    return get_canonicalizer().hash(uri, clean=clean)
