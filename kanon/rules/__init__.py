"""Style rules and the registry that holds them.

Components:
- Rule / Finding / Violation: rule declaration and results
- rule(): decorator turning a check function into a Rule
- RuleRegistry: append-only, sealable rule collection
- BUILTIN_RULES / build_default_registry(): the shipped rule set

Usage:
    from kanon.rules import Finding, build_default_registry, rule
    from kanon.types import RuleCategory

    @rule("naming.no-temp", RuleCategory.NAMING)
    def no_temp(document):
        \"\"\"Identifiers are not called 'temp'.\"\"\"
        for token in document.tokens:
            if token.text == "temp":
                yield Finding.at(token, "Pick a descriptive name")

    registry = build_default_registry()
    registry.register(no_temp)
"""

from .base import CheckFunction, Finding, Rule, Violation, rule
from .builtin import BUILTIN_RULES, build_default_registry
from .registry import RuleRegistry

__all__ = [
    "BUILTIN_RULES",
    "CheckFunction",
    "Finding",
    "Rule",
    "RuleRegistry",
    "Violation",
    "build_default_registry",
    "rule",
]
