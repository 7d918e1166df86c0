"""
Kanon - Rule-based source style linter.

Parses source text into a scope tree and checks it against a registry of
independent style rules, providing:
- A single-pass tokenizer that tracks brackets, comments and strings
- Spacing, naming, braces, blank-line, line-length, documentation and
  whitespace rules
- Fault-isolated rule evaluation with deterministic output
- Text, JSON and TOON reports for CI

The name comes from the Greek "kanon", a measuring rod: the rule that
source text is held up against.

Usage:
    from kanon import lint

    for violation in lint("func f(x:Int)->Int{return x}"):
        print(violation.location, violation.rule_id, violation.message)
"""

__version__ = "0.1.0"

from kanon.config import LanguageConfig, LintConfig, load_config
from kanon.engine import Linter, lint
from kanon.rules import Rule, RuleRegistry, Violation, build_default_registry, rule
from kanon.types import MalformedInputError, RuleCategory, Severity

__all__ = [
    "LanguageConfig",
    "LintConfig",
    "Linter",
    "MalformedInputError",
    "Rule",
    "RuleCategory",
    "RuleRegistry",
    "Severity",
    "Violation",
    "__version__",
    "build_default_registry",
    "lint",
    "load_config",
    "rule",
]
