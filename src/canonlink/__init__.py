"""canonlink: URL extraction and canonicalization for deduplication."""

from canonlink.api import (
    c14n,
    clean,
    domain,
    embedded,
    extract,
    extract_href,
    get_canonicalizer,
    hash,
    valid,
)
from canonlink.components import URIComponents
from canonlink.engine import Canonicalizer, normalize
from canonlink.errors import (
    CanonlinkError,
    InvalidEncodingError,
    MalformedURIError,
    RulesConfigError,
)
from canonlink.escaping import escape, unescape, unescape_unreserved
from canonlink.parser import parse

__all__ = [
    "Canonicalizer",
    "CanonlinkError",
    "InvalidEncodingError",
    "MalformedURIError",
    "RulesConfigError",
    "URIComponents",
    "c14n",
    "clean",
    "domain",
    "embedded",
    "escape",
    "extract",
    "extract_href",
    "get_canonicalizer",
    "hash",
    "normalize",
    "parse",
    "unescape",
    "unescape_unreserved",
    "valid",
]
