#!filepath: src/canonlink/rules/models.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Pattern

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RulesDocument(BaseModel):
    """Canonicalization rule file, as written on disk.

    Attributes:
        all: Query keys removed from every URI.
        all_regex: Patterns removed from the raw URI string before parsing.
        hosts: Query keys removed when the host ends with the mapping key.
    """

    model_config = ConfigDict(extra="forbid")

    all: list[str] = Field(default_factory=list)
    all_regex: list[str] = Field(default_factory=list)
    hosts: dict[str, list[str]] = Field(default_factory=dict)

    @field_validator("all_regex")
    @classmethod
    def _patterns_compile(cls, v: list[str]) -> list[str]:
        for raw in v:
            try:
                re.compile(raw)
            except re.error as e:
                raise ValueError(f"invalid pattern {raw!r}: {e}") from e
        return v

    @field_validator("hosts")
    @classmethod
    def _hosts_not_blank(cls, v: dict[str, list[str]]) -> dict[str, list[str]]:
        for host in v:
            if not str(host).strip():
                raise ValueError("host suffix cannot be blank")
        return v

    def to_rule_set(self) -> RuleSet:
        return RuleSet(
            global_strip=tuple(re.compile(p) for p in self.all_regex),
            global_query_keys=frozenset(self.all),
            host_query_keys=tuple(
                (host.strip().lower(), frozenset(keys))
                for host, keys in self.hosts.items()
            ),
        )


@dataclass(frozen=True, slots=True)
class RuleSet:
    """Immutable canonicalization rules.

    Attributes:
        global_strip: Patterns removed, in order, from the raw URI string.
        global_query_keys: Query keys removed from every URI.
        host_query_keys: (host suffix, keys) pairs; a suffix matches any host
            ending with it.
    """

    global_strip: tuple[Pattern[str], ...] = ()
    global_query_keys: frozenset[str] = frozenset()
    host_query_keys: tuple[tuple[str, frozenset[str]], ...] = ()

    def strip_raw(self, uri: str) -> str:
        for pattern in self.global_strip:
            uri = pattern.sub("", uri)
        return uri

    def keys_for_host(self, host: Optional[str]) -> frozenset[str]:
        """Return every query key to drop for ``host``, global keys included."""
        if not host:
            return self.global_query_keys
        scoped = [keys for suffix, keys in self.host_query_keys if host.endswith(suffix)]
        return self.global_query_keys.union(*scoped)
