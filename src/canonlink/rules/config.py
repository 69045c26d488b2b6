#!filepath: src/canonlink/rules/config.py
from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from canonlink.errors import RulesConfigError
from canonlink.rules.models import RuleSet, RulesDocument
from canonlink.settings import CanonlinkSettings, get_settings
from canonlink.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_RULES_PATH = (Path(__file__).resolve().parent.parent / "data" / "c14n.yaml")


def _strip_private_keys(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {
            k: _strip_private_keys(v)
            for k, v in obj.items()
            if not str(k).startswith("__")
        }
    if isinstance(obj, list):
        return [_strip_private_keys(x) for x in obj]
    return obj


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf_8")
    except OSError as e:
        raise RulesConfigError(f"Failed to read rules at {path}: {e}") from e


def _parse_json(text: str) -> dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise RulesConfigError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise RulesConfigError("Invalid rules JSON, expected an object at top level")
    return data


def _parse_yaml(text: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise RulesConfigError(f"Invalid YAML: {e}") from e
    if not isinstance(data, dict):
        raise RulesConfigError("Invalid rules YAML, expected a mapping at top level")
    return data


def load_rules_document(path: Path) -> RulesDocument:
    """Load and validate a rule file.

    Args:
        path: Path to a json, yaml or yml file.

    Returns:
        RulesDocument: Validated document.

    Raises:
        RulesConfigError: On any failure.
    """
    p = path.expanduser().resolve()
    if not p.exists():
        raise RulesConfigError(f"Rules file not found: {p}")

    text = _read_text(p)
    suffix = p.suffix.lower()

    if suffix == ".json":
        data = _parse_json(text)
    elif suffix in {".yaml", ".yml"}:
        data = _parse_yaml(text)
    else:
        raise RulesConfigError("Unsupported format, use json, yaml or yml")

    data = _strip_private_keys(data)

    try:
        return RulesDocument.model_validate(data)
    except ValidationError as e:
        raise RulesConfigError(f"Invalid rules in {p}: {e}") from e


def load_rules_from_path(path: Path) -> RuleSet:
    """Load a rule file into an immutable rule set.

    Raises:
        RulesConfigError: On any failure.
    """
    rules = load_rules_document(path).to_rule_set()
    logger.info(
        f"Loaded rules from {path}, global_keys={len(rules.global_query_keys)}, "
        f"patterns={len(rules.global_strip)}, hosts={len(rules.host_query_keys)}"
    )
    return rules


@dataclass(frozen=True, slots=True)
class RulesLoader:
    settings: CanonlinkSettings

    @property
    def path(self) -> Path:
        return self.settings.resolved_rules_path() or DEFAULT_RULES_PATH

    def load(self) -> RuleSet:
        return load_rules_from_path(self.path)


@lru_cache(maxsize=1)
def get_rules() -> RuleSet:
    """Return the process-wide rule set, loading it on first use.

    Raises:
        RulesConfigError: When the configured rule file is unusable.
    """
    return RulesLoader(get_settings()).load()


def describe(rules: RuleSet, path: Optional[Path] = None) -> dict[str, Any]:
    """Summarize a rule set for display."""
    return {
        "path": str(path) if path else None,
        "global_query_keys": len(rules.global_query_keys),
        "global_strip": [p.pattern for p in rules.global_strip],
        "hosts": len(rules.host_query_keys),
    }
