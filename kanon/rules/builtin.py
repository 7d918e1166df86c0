"""The builtin rule set.

Rules are grouped by category module. Order here is registration order,
which is the order rules appear in listings.
"""

from __future__ import annotations

from kanon.rules import blank_lines, braces, documentation, line_length, naming, spacing, whitespace
from kanon.rules.base import Rule
from kanon.rules.registry import RuleRegistry

BUILTIN_RULES: tuple[Rule, ...] = (
    *spacing.RULES,
    *naming.RULES,
    *braces.RULES,
    *blank_lines.RULES,
    *line_length.RULES,
    *documentation.RULES,
    *whitespace.RULES,
)


def build_default_registry() -> RuleRegistry:
    """A fresh, unsealed registry holding every builtin rule."""
    return RuleRegistry(BUILTIN_RULES)
