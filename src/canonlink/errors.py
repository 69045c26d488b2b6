#!filepath: src/canonlink/errors.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    MALFORMED_URI = "malformed_uri"
    INVALID_ENCODING = "invalid_encoding"
    INVALID_RULES = "invalid_rules"


@dataclass(frozen=True, slots=True)
class ErrorDetails:
    kind: ErrorKind
    uri: Optional[str] = None
    message: str = ""

    @property
    def reason(self) -> str:
        return str(self.kind.value)


class CanonlinkError(Exception):
    kind: ErrorKind = ErrorKind.MALFORMED_URI

    def __init__(self, message: str = "", *, uri: Optional[str] = None) -> None:
        super().__init__(str(message or self.kind.value))
        self._details = ErrorDetails(kind=self.kind, uri=uri, message=str(message))

    @property
    def details(self) -> ErrorDetails:
        return self._details

    @property
    def uri(self) -> Optional[str]:
        return self._details.uri

    @property
    def reason(self) -> str:
        return self._details.reason


class MalformedURIError(CanonlinkError, ValueError):
    """The input cannot be segmented into URI components."""

    kind = ErrorKind.MALFORMED_URI


class InvalidEncodingError(CanonlinkError, ValueError):
    """Percent-decoding produced bytes that are not valid UTF-8."""

    kind = ErrorKind.INVALID_ENCODING


class RulesConfigError(CanonlinkError, RuntimeError):
    """Rule data could not be loaded or validated."""

    kind = ErrorKind.INVALID_RULES


__all__ = [
    "ErrorKind",
    "ErrorDetails",
    "CanonlinkError",
    "MalformedURIError",
    "InvalidEncodingError",
    "RulesConfigError",
]
