#!filepath: tests/test_import_contract.py
from __future__ import annotations

import importlib
from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True, slots=True)
class ImportContract:
    """A list of import targets that must remain stable.

    Args:
        targets: Import strings to validate.
    """

    targets: tuple[str, ...]


def _contract() -> ImportContract:
    return ImportContract(
        targets=(
            "canonlink",
            "canonlink.api",
            "canonlink.cli",
            "canonlink.components",
            "canonlink.embedded",
            "canonlink.engine",
            "canonlink.errors",
            "canonlink.escaping",
            "canonlink.extractor",
            "canonlink.grammar",
            "canonlink.parser",
            "canonlink.rules",
            "canonlink.rules.config",
            "canonlink.rules.models",
            "canonlink.settings",
            "canonlink.suffixes",
            "canonlink.utils.logger",
        )
    )


def _import_all(targets: Iterable[str]) -> None:
    """Import all targets.

    Raises:
        ImportError: If any import fails.
    """
    for t in targets:
        importlib.import_module(t)


def test_import_contract() -> None:
    """Validate that stable import targets remain importable."""
    _import_all(_contract().targets)


def test_public_surface() -> None:
    import canonlink

    for name in (
        "extract",
        "extract_href",
        "escape",
        "unescape",
        "unescape_unreserved",
        "clean",
        "domain",
        "normalize",
        "hash",
        "valid",
    ):
        assert callable(getattr(canonlink, name))
