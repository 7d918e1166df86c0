"""Rule and violation types.

A Rule is a tagged, stateless check: an identifier, a category, a default
severity and a pure function from a ParsedDocument to Findings. The
evaluator stamps each Finding with the rule's identity to produce a
Violation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

from kanon.parsing import ParsedDocument, Token
from kanon.types import RuleCategory, Severity

CheckFunction = Callable[[ParsedDocument], Iterable["Finding"]]


@dataclass(frozen=True)
class Finding:
    """One place where a rule's check failed, before it is tied to the rule."""

    line: int
    column: int
    message: str
    end_line: int | None = None
    end_column: int | None = None

    @classmethod
    def at(cls, token: Token, message: str) -> Finding:
        """A finding spanning ``token``."""
        return cls(token.line, token.column, message, token.end_line, token.end_column)


@dataclass(frozen=True)
class Violation:
    """A single recorded failure of one rule at one location.

    ``to_dict()`` produces the stable record shape consumed by CI tooling:
    ``{ruleId, severity, line, column, message}``.
    """

    rule_id: str
    severity: Severity
    line: int
    column: int
    message: str
    end_line: int | None = None
    end_column: int | None = None
    is_rule_failure: bool = False

    @property
    def sort_key(self) -> tuple[int, int, str, str]:
        return (self.line, self.column, self.rule_id, self.message)

    @property
    def location(self) -> str:
        return f"{self.line}:{self.column}"

    def to_dict(self) -> dict:
        """Convert to the serializable record shape."""
        return {
            "ruleId": self.rule_id,
            "severity": self.severity.value,
            "line": self.line,
            "column": self.column,
            "message": self.message,
        }


@dataclass(frozen=True)
class Rule:
    """A named, independent style check."""

    id: str
    category: RuleCategory
    check: CheckFunction
    severity: Severity = Severity.WARNING
    description: str = ""

    def violation(self, finding: Finding, severity: Severity | None = None) -> Violation:
        """Stamp ``finding`` with this rule's identity."""
        return Violation(
            rule_id=self.id,
            severity=severity or self.severity,
            line=finding.line,
            column=finding.column,
            message=finding.message,
            end_line=finding.end_line,
            end_column=finding.end_column,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "category": self.category.value,
            "severity": self.severity.value,
            "description": self.description,
        }


def rule(
    rule_id: str,
    category: RuleCategory,
    severity: Severity = Severity.WARNING,
    description: str | None = None,
) -> Callable[[CheckFunction], Rule]:
    """Declare a check function as a Rule.

    The function's docstring becomes the description unless one is given.

    Usage:
        @rule("whitespace.trailing", RuleCategory.WHITESPACE)
        def trailing_whitespace(document):
            \"\"\"Lines must not end in whitespace.\"\"\"
            ...
    """

    def decorator(check: CheckFunction) -> Rule:
        doc = (check.__doc__ or "").strip().splitlines()
        return Rule(
            id=rule_id,
            category=category,
            check=check,
            severity=severity,
            description=description or (doc[0] if doc else ""),
        )

    return decorator
