"""
Core types shared by the parser, the rules and the reporters.

These are the small value objects every layer agrees on: severities
and rule categories.
"""

from enum import Enum


class Severity(str, Enum):
    """How seriously a violation should be treated."""

    ERROR = "error"
    WARNING = "warning"


class RuleCategory(str, Enum):
    """Families of style rules. Categories are enabled and disabled as a unit."""

    SPACING = "spacing"
    NAMING = "naming"
    BRACES = "braces"
    BLANK_LINES = "blank-lines"
    LINE_LENGTH = "line-length"
    DOCUMENTATION = "documentation"
    WHITESPACE = "whitespace"

