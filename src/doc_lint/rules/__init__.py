"""
Lint rules for documentation corpora.

Rule modules register their classes on import; use
:func:`get_rules` to obtain enabled instances for a configuration.
"""

from doc_lint.rules.base import DocumentRule, Finding, Rule, Severity
from doc_lint.rules.registry import get_rule_class, get_rules, list_rules, register_rule

__all__ = [
    "Rule",
    "DocumentRule",
    "Finding",
    "Severity",
    "register_rule",
    "get_rule_class",
    "get_rules",
    "list_rules",
]
