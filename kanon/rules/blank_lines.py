"""Blank line rules.

Lines inside multi-line strings and block comments are content, not
blank lines, and are never counted. A run of excess blank lines is
reported once, spanning the whole excess.
"""

from __future__ import annotations

from typing import Iterator

from kanon.parsing import ParsedDocument, ScopeKind
from kanon.rules.base import Finding, rule
from kanon.types import RuleCategory


def is_blank(document: ParsedDocument, number: int) -> bool:
    return document.line(number).is_blank and not document.is_literal_interior(number)


@rule("blank-lines.after-open", RuleCategory.BLANK_LINES)
def blank_after_open(document: ParsedDocument) -> Iterator[Finding]:
    """No blank line directly after an opening brace."""
    for scope in document.iter_scopes(ScopeKind.BLOCK, ScopeKind.CLOSURE):
        if not scope.spans_lines:
            continue
        assert scope.open_token is not None and scope.close_token is not None
        first = scope.open_token.end_line + 1
        last = first
        while last < scope.close_token.line and is_blank(document, last):
            last += 1
        if last > first:
            yield Finding(first, 1, "Blank line after opening brace", last - 1, 1)


@rule("blank-lines.before-close", RuleCategory.BLANK_LINES)
def blank_before_close(document: ParsedDocument) -> Iterator[Finding]:
    """No blank line directly before a closing brace."""
    for scope in document.iter_scopes(ScopeKind.BLOCK, ScopeKind.CLOSURE):
        if not scope.spans_lines:
            continue
        assert scope.open_token is not None and scope.close_token is not None
        last = scope.close_token.line - 1
        first = last
        while first > scope.open_token.end_line and is_blank(document, first):
            first -= 1
        if first < last:
            yield Finding(first + 1, 1, "Blank line before closing brace", last, 1)


@rule("blank-lines.consecutive", RuleCategory.BLANK_LINES)
def consecutive_blank_lines(document: ParsedDocument) -> Iterator[Finding]:
    """No more than the configured number of consecutive blank lines."""
    limit = document.config.max_blank_lines
    run_start: int | None = None

    def excess(end: int) -> Finding | None:
        assert run_start is not None
        length = end - run_start + 1
        if length <= limit:
            return None
        noun = "line" if limit == 1 else "lines"
        return Finding(
            run_start + limit,
            1,
            f"{length} consecutive blank lines (at most {limit} blank {noun} allowed)",
            end,
            1,
        )

    for line in document.lines:
        if is_blank(document, line.number):
            if run_start is None:
                run_start = line.number
            continue
        if run_start is not None:
            finding = excess(line.number - 1)
            if finding is not None:
                yield finding
            run_start = None

    if run_start is not None:
        finding = excess(document.line_count)
        if finding is not None:
            yield finding


RULES = (
    blank_after_open,
    blank_before_close,
    consecutive_blank_lines,
)
