"""Brace placement rules for statement and declaration blocks.

Only BLOCK scopes are checked. Closures in expression position may sit on
a single line, and same-line empty bodies (``{}``) are always allowed.
"""

from __future__ import annotations

from typing import Iterator

from kanon.parsing import ParsedDocument, ScopeKind, ScopeNode, Token, TokenKind
from kanon.rules.base import Finding, rule
from kanon.types import RuleCategory


def is_empty_inline(scope: ScopeNode) -> bool:
    """True for ``{}`` / ``{ }`` / ``{ /* nothing */ }`` closed on the opening line."""
    if scope.open_token is None or scope.close_token is None:
        return False
    if scope.close_token.line != scope.open_token.line:
        return False
    return all(
        isinstance(child, Token) and child.kind is TokenKind.COMMENT
        for child in scope.children
    )


def next_code_on_line(document: ParsedDocument, token: Token) -> Token | None:
    """The next non-comment token on ``token``'s line."""
    current = document.next_on_line(token)
    while current is not None:
        if current.kind is not TokenKind.COMMENT:
            return current
        current = document.next_on_line(current)
    return None


@rule("braces.open-trailing", RuleCategory.BRACES)
def open_brace_trailing(document: ParsedDocument) -> Iterator[Finding]:
    """A block's opening brace is the last token on its line."""
    for scope in document.iter_scopes(ScopeKind.BLOCK):
        if is_empty_inline(scope):
            continue
        brace = scope.open_token
        assert brace is not None
        if next_code_on_line(document, brace) is not None:
            yield Finding.at(brace, "Opening brace should be the last token on its line")


@rule("braces.open-same-line", RuleCategory.BRACES)
def open_brace_same_line(document: ParsedDocument) -> Iterator[Finding]:
    """A block's opening brace stays on the line of the code it belongs to."""
    for scope in document.iter_scopes(ScopeKind.BLOCK):
        brace = scope.open_token
        assert brace is not None
        if brace.starts_line and brace.index > 0:
            yield Finding.at(
                brace, "Opening brace should be on the same line as its declaration"
            )


@rule("braces.close-leading", RuleCategory.BRACES)
def close_brace_leading(document: ParsedDocument) -> Iterator[Finding]:
    """A block's closing brace starts its own line."""
    for scope in document.iter_scopes(ScopeKind.BLOCK):
        if is_empty_inline(scope):
            continue
        brace = scope.close_token
        assert brace is not None
        if not brace.starts_line:
            yield Finding.at(brace, "Closing brace should start its own line")


RULES = (
    open_brace_trailing,
    open_brace_same_line,
    close_brace_leading,
)
