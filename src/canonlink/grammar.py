#!filepath: src/canonlink/grammar.py
"""URL recognition grammar.

The pieces below compose into ``VALID_URL``, a single pattern whose named
groups expose the preceding character, the full URL, and its protocol,
domain, path and query spans. Path tokens are single characters wherever
possible so that backtracking over long paths stays linear.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Optional

PROTOCOL = r"https?://"

# Start of string, ':' or any character that cannot continue a word, path or
# e-mail address.
VALID_PRECEDING_CHARS = r"""(?:[^-/"':!=a-z0-9_@＠]|^|:)"""

VALID_DOMAIN = r"\b(?:[a-z0-9-]{1,63}\.)+[a-z]{2,63}(?::[0-9]+)?"

VALID_GENERAL_URL_PATH_CHARS = r"[a-z0-9!*';:=+,$/%#\[\]\-_~]"
_GENERAL_NO_SLASH = r"[a-z0-9!*';:=+,$%#\[\]\-_~]"

# Balanced parens, as in /wiki/Primer_(film) or IIS sessions like /S(dfd346)/
WIKIPEDIA_DISAMBIGUATION = rf"(?:\({VALID_GENERAL_URL_PATH_CHARS}+\))"

# '@' only in the middle of a path (http://example.com/@user/), '.' only when
# followed by more path. ',' is a general path char already.
VALID_URL_PATH_CHARS = (
    rf"(?:{WIKIPEDIA_DISAMBIGUATION}"
    rf"|@{VALID_GENERAL_URL_PATH_CHARS}{_GENERAL_NO_SLASH}*/"
    rf"|\.{VALID_GENERAL_URL_PATH_CHARS}"
    rf"|{VALID_GENERAL_URL_PATH_CHARS})"
)

# So that /foo. does not swallow the period. '=' '#' and '/' cover empty
# parameters and other URL-join artifacts.
VALID_URL_PATH_ENDING_CHARS = rf"(?:[a-z0-9=_#/+\-]|{WIKIPEDIA_DISAMBIGUATION})"

VALID_URL_QUERY_CHARS = r"[a-z0-9!*'();:&=+$/%#\[\]\-_.,~]"
VALID_URL_QUERY_ENDING_CHARS = r"[a-z0-9_&=#/]"

VALID_URL_PATH = (
    r"/(?:"
    rf"{VALID_URL_PATH_CHARS}+{VALID_URL_PATH_ENDING_CHARS}"
    rf"|{VALID_URL_PATH_CHARS}+{VALID_URL_PATH_ENDING_CHARS}?"
    rf"|{VALID_URL_PATH_ENDING_CHARS}"
    r")?"
)

VALID_URL_QUERY = rf"\?{VALID_URL_QUERY_CHARS}*{VALID_URL_QUERY_ENDING_CHARS}"

VALID_URL = re.compile(
    rf"(?P<before>{VALID_PRECEDING_CHARS})"
    r"(?P<url>"
    rf"(?P<protocol>{PROTOCOL})?"
    rf"(?P<domain>{VALID_DOMAIN})"
    rf"(?P<path>{VALID_URL_PATH})?"
    rf"(?P<query>{VALID_URL_QUERY})?"
    r")",
    re.IGNORECASE,
)

DOMAIN_RE = re.compile(VALID_DOMAIN, re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class UrlMatch:
    """One URL-shaped span found in free text."""

    before: str
    url: str
    protocol: Optional[str]
    domain: str
    path: Optional[str]
    query: Optional[str]
    start: int
    end: int


def scan(text: str) -> Iterator[UrlMatch]:
    """Yield every URL-shaped span of ``text`` in order of appearance."""
    for m in VALID_URL.finditer(text):
        yield UrlMatch(
            before=m.group("before"),
            url=m.group("url"),
            protocol=m.group("protocol"),
            domain=m.group("domain"),
            path=m.group("path"),
            query=m.group("query"),
            start=m.start("url"),
            end=m.end("url"),
        )
