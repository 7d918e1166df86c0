"""Whitespace rules: trailing whitespace and indentation characters."""

from __future__ import annotations

from typing import Iterator

from kanon.parsing import ParsedDocument
from kanon.rules.base import Finding, rule
from kanon.types import RuleCategory


@rule("whitespace.trailing", RuleCategory.WHITESPACE)
def trailing_whitespace(document: ParsedDocument) -> Iterator[Finding]:
    """Lines do not end in whitespace."""
    for line in document.lines:
        stripped = line.text.rstrip()
        if stripped == line.text or document.line_ends_in_string(line.number):
            continue
        yield Finding(
            line.number,
            len(stripped) + 1,
            "Trailing whitespace",
            line.number,
            line.length + 1,
        )


@rule("whitespace.tab-indent", RuleCategory.WHITESPACE)
def indentation_characters(document: ParsedDocument) -> Iterator[Finding]:
    """Indentation uses the configured character (spaces by default)."""
    use_tabs = document.config.indent_with_tabs
    unwanted, wanted = (" ", "tabs") if use_tabs else ("\t", "spaces")
    for line in document.lines:
        if line.is_blank or document.is_literal_interior(line.number):
            continue
        if unwanted in line.indentation:
            yield Finding(line.number, 1, f"Indentation should use {wanted} only")


RULES = (
    trailing_whitespace,
    indentation_characters,
)
