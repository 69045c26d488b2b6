#!filepath: tests/conftest.py
from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    """Ensure src layout is importable during tests."""
    root = Path(__file__).resolve().parents[1]
    src = (root / "src").resolve()
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))


@pytest.fixture()
def bare_engine():
    """Canonicalizer without any rules, for pipeline behavior alone."""
    from canonlink.engine import Canonicalizer
    from canonlink.rules.models import RuleSet
    from canonlink.suffixes import default_checker

    return Canonicalizer(RuleSet(), suffixes=default_checker())
