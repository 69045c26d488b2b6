#!filepath: src/canonlink/extractor.py
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Optional

from bs4 import BeautifulSoup

from canonlink.components import URIComponents
from canonlink.errors import CanonlinkError
from canonlink.grammar import UrlMatch, scan
from canonlink.utils.logger import get_logger

if TYPE_CHECKING:
    from canonlink.engine import Canonicalizer

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ExtractedUrls:
    """Cleaned URLs found in a text, produced lazily on each iteration.

    Iterating twice rescans the text, so the sequence can be restarted.
    Duplicates are kept and appear in order of appearance.
    """

    text: str
    engine: Canonicalizer

    def __iter__(self) -> Iterator[str]:
        for m in scan(self.text):
            cleaned = self._clean_match(m)
            if cleaned is not None:
                yield cleaned

    def _clean_match(self, m: UrlMatch) -> Optional[str]:
        if not self.engine.suffixes.is_valid(m.domain):
            return None
        try:
            return str(self.engine.clean(m.url))
        except CanonlinkError as e:
            logger.debug(f"Skipping match {m.url!r}: {e}")
            return None


def extract(engine: Canonicalizer, text: Optional[str]) -> ExtractedUrls:
    """Return the cleaned URLs appearing in ``text``."""
    return ExtractedUrls(text="" if text is None else str(text), engine=engine)


def extract_href(
    engine: Canonicalizer, html: Optional[str], host: Optional[str] = None
) -> list[tuple[str, str]]:
    """Return (cleaned URL, anchor text) for every absolute link of ``html``.

    Relative links are resolved against ``host`` when given. Anchors whose
    href is missing, cannot be cleaned or stays relative are left out.
    """
    if not html:
        return []
    soup = BeautifulSoup(str(html), "html.parser")
    links: list[tuple[str, str]] = []
    for a in soup.find_all("a"):
        href = a.get("href")
        if not isinstance(href, str) or not href.strip():
            continue
        url = _clean_href(engine, href, host)
        if url is None or not url.absolute:
            continue
        links.append((url.to_string(), a.get_text()))
    return links


def _clean_href(
    engine: Canonicalizer, href: str, host: Optional[str]
) -> Optional[URIComponents]:
    try:
        return engine.clean(href, raw=True, host=host)
    except CanonlinkError as e:
        logger.debug(f"Skipping anchor {href!r}: {e}")
        return None
