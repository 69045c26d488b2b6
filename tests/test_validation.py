#!filepath: tests/test_validation.py
from __future__ import annotations

import hashlib

import pytest

import canonlink
from canonlink.suffixes import PublicSuffixChecker, to_unicode_host


@pytest.mark.parametrize(
    "uri",
    [
        "http://example.com",
        "https://www.example.co.uk/a?b=1",
        "example.com/path",
        "http://xn--mnchen-3ya.de/",
        "http://example.com:8080/",
    ],
)
def test_valid_uris(uri: str) -> None:
    assert canonlink.valid(uri) is True


@pytest.mark.parametrize(
    "uri",
    [
        None,
        "",
        "not a url",
        "http://localhost/",
        "http://foo.zzzz/",
        "http://co.uk/",
        "http://[bad",
        "mailto:x@example.com",
    ],
)
def test_invalid_uris(uri) -> None:
    assert canonlink.valid(uri) is False


def test_suffix_checker_host_forms() -> None:
    checker = PublicSuffixChecker()
    assert checker.is_valid("example.com:443")
    assert checker.is_valid("münchen.de")
    assert not checker.is_valid(".example.com")
    assert not checker.is_valid("[::1]")
    assert not checker.is_valid(None)


def test_to_unicode_host() -> None:
    assert to_unicode_host("xn--mnchen-3ya.de") == "münchen.de"
    assert to_unicode_host("example.com") == "example.com"


def test_hash_is_md5_of_the_input() -> None:
    uri = "http://example.com/"
    assert canonlink.hash(uri) == hashlib.md5(uri.encode("utf_8")).hexdigest()


def test_hash_of_cleaned_variants_matches() -> None:
    a = canonlink.hash("http://Example.com/a/?utm_source=x", clean=True)
    b = canonlink.hash("example.com/a#top", clean=True)
    assert a == b == canonlink.hash("http://example.com/a")


@pytest.mark.parametrize(
    ("uri", "expected"),
    [
        ("http://www.news.bbc.co.uk/x", "bbc.co.uk"),
        ("https://Example.com:8080/", "example.com"),
        ("http://foo.blogspot.com/", "foo.blogspot.com"),
        ("http://foo.zzzz/", None),
        ("http://localhost/", None),
        ("mailto:x@example.com", None),
    ],
)
def test_registrable_domain(uri: str, expected) -> None:
    assert canonlink.domain(uri) == expected


def test_suffix_checker_domain() -> None:
    checker = PublicSuffixChecker()
    assert checker.domain("www.news.bbc.co.uk") == "bbc.co.uk"
    assert checker.domain("foo.zzzz") is None
    assert checker.domain(None) is None
