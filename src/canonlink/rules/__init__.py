from canonlink.rules.config import get_rules, load_rules_document, load_rules_from_path
from canonlink.rules.models import RuleSet, RulesDocument

__all__ = [
    "RuleSet",
    "RulesDocument",
    "get_rules",
    "load_rules_document",
    "load_rules_from_path",
]
