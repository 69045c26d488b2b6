#!filepath: tests/test_rules_config.py
from __future__ import annotations

import json
from pathlib import Path

import pytest

from canonlink.errors import ErrorKind, RulesConfigError
from canonlink.rules.config import (
    DEFAULT_RULES_PATH,
    RulesLoader,
    load_rules_document,
    load_rules_from_path,
)
from canonlink.settings import CanonlinkSettings


def _write(p: Path, payload: dict) -> None:
    p.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def test_packaged_rules_load() -> None:
    rules = load_rules_from_path(DEFAULT_RULES_PATH)
    assert "utm_source" in rules.global_query_keys
    assert rules.global_strip
    assert "emc" in rules.keys_for_host("www.nytimes.com")
    assert "emc" not in rules.keys_for_host("example.com")


def test_host_keys_include_global_keys() -> None:
    rules = load_rules_from_path(DEFAULT_RULES_PATH)
    keys = rules.keys_for_host("www.nytimes.com")
    assert rules.global_query_keys <= keys
    assert rules.keys_for_host(None) == rules.global_query_keys


def test_json_rules_with_private_keys(tmp_path: Path) -> None:
    p = tmp_path / "rules.json"
    _write(
        p,
        {
            "__comment": "local overrides",
            "all": ["sid"],
            "all_regex": [r";sess=[^?]*"],
            "hosts": {"example.org": ["lang"]},
        },
    )
    rules = load_rules_from_path(p)
    assert rules.global_query_keys == frozenset({"sid"})
    assert rules.strip_raw("http://example.org/a;sess=1?x=1") == "http://example.org/a?x=1"
    assert rules.keys_for_host("blog.example.org") == frozenset({"sid", "lang"})


def test_yaml_sections_are_optional(tmp_path: Path) -> None:
    p = tmp_path / "rules.yml"
    p.write_text("all:\n  - ref\n", encoding="utf-8")
    doc = load_rules_document(p)
    assert doc.all == ["ref"]
    assert doc.all_regex == []
    assert doc.hosts == {}


def test_unknown_key_rejected(tmp_path: Path) -> None:
    p = tmp_path / "rules.json"
    _write(p, {"all": [], "unexpected": 1})
    with pytest.raises(RulesConfigError) as ei:
        load_rules_from_path(p)
    assert ei.value.kind is ErrorKind.INVALID_RULES


def test_bad_pattern_rejected(tmp_path: Path) -> None:
    p = tmp_path / "rules.yaml"
    p.write_text("all_regex:\n  - '('\n", encoding="utf-8")
    with pytest.raises(RulesConfigError):
        load_rules_from_path(p)


def test_blank_host_rejected(tmp_path: Path) -> None:
    p = tmp_path / "rules.json"
    _write(p, {"hosts": {" ": ["a"]}})
    with pytest.raises(RulesConfigError):
        load_rules_from_path(p)


def test_missing_and_unsupported_files(tmp_path: Path) -> None:
    with pytest.raises(RulesConfigError):
        load_rules_from_path(tmp_path / "nope.yaml")

    p = tmp_path / "rules.txt"
    p.write_text("all: []\n", encoding="utf-8")
    with pytest.raises(RulesConfigError):
        load_rules_from_path(p)


def test_top_level_must_be_a_mapping(tmp_path: Path) -> None:
    p = tmp_path / "rules.yaml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(RulesConfigError):
        load_rules_from_path(p)


def test_rules_path_from_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    p = tmp_path / "rules.json"
    _write(p, {"all": ["only_this"]})
    monkeypatch.setenv("CANONLINK_RULES_PATH", str(p))

    loader = RulesLoader(CanonlinkSettings())
    assert loader.path == p
    assert loader.load().global_query_keys == frozenset({"only_this"})


def test_default_rules_path_without_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CANONLINK_RULES_PATH", raising=False)
    assert RulesLoader(CanonlinkSettings()).path == DEFAULT_RULES_PATH
