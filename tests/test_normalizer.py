#!filepath: tests/test_normalizer.py
from __future__ import annotations

from canonlink.engine import normalize


def test_collapses_duplicate_slashes_and_trailing_slash() -> None:
    assert str(normalize("http://example.com//a///b/")) == "http://example.com/a/b"


def test_root_path_is_kept() -> None:
    assert str(normalize("http://example.com/")) == "http://example.com/"
    assert str(normalize("http://example.com")) == "http://example.com/"
    assert str(normalize("http://example.com//")) == "http://example.com/"


def test_trailing_slash_can_be_kept() -> None:
    u = normalize("http://example.com/foo/", remove_trailing_slash=False)
    assert str(u) == "http://example.com/foo/"


def test_empty_query_and_fragment_are_dropped() -> None:
    u = normalize("http://example.com/a?#frag")
    assert u.query is None
    assert u.fragment is None
    assert str(u) == "http://example.com/a"


def test_query_is_kept() -> None:
    assert str(normalize("http://example.com/a/?b=1#x")) == "http://example.com/a?b=1"
