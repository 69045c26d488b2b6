#!filepath: src/canonlink/embedded.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Pattern

from canonlink.components import URIComponents


@dataclass(frozen=True, slots=True)
class EmbeddedRule:
    """A wrapper service that carries its target URL in a query parameter.

    Attributes:
        host: Pattern searched in the wrapper host.
        path: Pattern searched in the wrapper path, None for any path.
        key: Query key holding the target URL.
    """

    host: Pattern[str]
    path: Optional[Pattern[str]]
    key: str

    def matches(self, uri: URIComponents) -> bool:
        if uri.host is None or not self.host.search(uri.host):
            return False
        return self.path is None or bool(self.path.search(uri.path))

    def target(self, uri: URIComponents) -> Optional[str]:
        """Return the embedded URL, or None when the rule does not apply."""
        if not self.matches(uri):
            return None
        return uri.query_value(self.key) or None


EMBEDDED_RULES: tuple[EmbeddedRule, ...] = (
    EmbeddedRule(re.compile(r"^news\.google\.com$"), re.compile(r"^/news/url$"), "url"),
    EmbeddedRule(re.compile(r"^xfruits\.com$"), None, "url"),
    EmbeddedRule(re.compile(r"myspace\.com"), re.compile(r"PostTo"), "u"),
)


def find_embedded(uri: URIComponents) -> Optional[str]:
    """Return the first embedded target URL carried by ``uri``."""
    for rule in EMBEDDED_RULES:
        if rule.matches(uri):
            return rule.target(uri)
    return None
