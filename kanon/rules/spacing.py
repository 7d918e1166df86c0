"""Spacing rules: operators, punctuation and brackets.

Operator roles follow the usual brace-language convention: an operator
with whitespace on both sides, or on neither side, is binary; whitespace
on one side only makes it prefix or postfix. Operators used as values
(``reduce(0, +)``), unary forms and generic angle brackets are never
checked as binary.
"""

from __future__ import annotations

from typing import Iterator

from kanon.parsing import ParsedDocument, ScopeKind, Token, TokenKind
from kanon.rules.base import Finding, rule
from kanon.types import RuleCategory

_PUNCTUATION_KINDS = (TokenKind.COMMA, TokenKind.COLON, TokenKind.SEMICOLON)
_UNCHECKED_OPERATORS = frozenset({"!", "...", "..<"})
_GENERIC_OPERATOR_CHARS = frozenset("<>?!")
_GENERIC_PARTS = frozenset({
    TokenKind.IDENTIFIER,
    TokenKind.COMMA,
    TokenKind.DOT,
    TokenKind.COLON,
})


def _is_separator(token: Token | None) -> bool:
    return token is not None and token.kind in _PUNCTUATION_KINDS


def generic_operator_indices(document: ParsedDocument) -> set[int]:
    """Indices of ``<``/``>`` tokens that delimit generic parameter lists.

    A ``<`` glued to an identifier opens a generic clause when the tokens
    after it, on the same line, are type-like and balance back to depth
    zero: ``Array<Int>``, ``Dictionary<String, [Int]>``, ``Result<T, E>?``.
    """
    tokens = document.tokens
    marked: set[int] = set()
    for token in tokens:
        if token.kind is not TokenKind.OPERATOR or token.text != "<" or token.space_before != 0:
            continue
        prev = document.previous_on_line(token)
        if prev is None or prev.kind is not TokenKind.IDENTIFIER:
            continue

        depth = 1
        members = [token.index]
        i = token.index + 1
        while i < len(tokens) and depth > 0:
            current = tokens[i]
            if current.line != token.line:
                break
            if current.kind is TokenKind.OPERATOR:
                if current.text == "->" or current.text == "&":
                    pass
                elif set(current.text) <= _GENERIC_OPERATOR_CHARS:
                    depth += current.text.count("<") - current.text.count(">")
                else:
                    break
                members.append(i)
            elif current.kind in _GENERIC_PARTS:
                pass
            elif current.kind in (TokenKind.OPEN, TokenKind.CLOSE) and current.text in "()[]":
                pass
            else:
                break
            i += 1
        if depth <= 0:
            marked.update(members)
    return marked


def is_binary_operator(
    document: ParsedDocument, token: Token, generics: set[int]
) -> bool:
    """Decide whether an operator token is used in binary position."""
    if token.kind is not TokenKind.OPERATOR or token.index in generics:
        return False
    if token.text in _UNCHECKED_OPERATORS:
        return False

    prev = document.previous_on_line(token)
    nxt = document.next_on_line(token)

    # Operator references and unary forms next to brackets or separators
    if nxt is not None and (nxt.is_close() or _is_separator(nxt)):
        return False
    if prev is not None and (prev.is_open() or _is_separator(prev)):
        return False

    left_bound = prev is not None and token.space_before == 0
    right_bound = nxt is not None and nxt.space_before == 0

    if token.text == "?":
        # Optional chaining binds left; only the ternary `?` is binary
        return not left_bound
    if left_bound and nxt is not None and nxt.kind is TokenKind.DOT and right_bound:
        return False
    return left_bound == right_bound


@rule("spacing.binary-operator", RuleCategory.SPACING)
def binary_operator_spacing(document: ParsedDocument) -> Iterator[Finding]:
    """Binary operators and '->' have exactly one space on each side."""
    generics = generic_operator_indices(document)
    for token in document.tokens:
        if not is_binary_operator(document, token, generics):
            continue
        prev = document.previous_on_line(token)
        nxt = document.next_on_line(token)
        left_ok = prev is None or token.space_before == 1
        right_ok = nxt is None or nxt.space_before == 1
        if not (left_ok and right_ok):
            yield Finding.at(token, f"Expected exactly one space on each side of '{token.text}'")


def ternary_colon_indices(document: ParsedDocument) -> set[int]:
    """Indices of ':' tokens that belong to a ternary '? :' in the same scope."""
    pending: dict[int, int] = {}
    found: set[int] = set()
    for token in document.tokens:
        if token.kind is TokenKind.OPERATOR and token.text == "?" and token.space_before:
            key = id(document.scope_of(token))
            pending[key] = pending.get(key, 0) + 1
        elif token.kind is TokenKind.COLON:
            key = id(document.scope_of(token))
            if pending.get(key):
                pending[key] -= 1
                found.add(token.index)
    return found


@rule("spacing.punctuation", RuleCategory.SPACING)
def punctuation_spacing(document: ParsedDocument) -> Iterator[Finding]:
    """No space before ',', ':' or ';' and exactly one space after."""
    ternary = ternary_colon_indices(document)
    for token in document.tokens:
        if token.kind not in _PUNCTUATION_KINDS:
            continue
        prev = document.previous_on_line(token)
        if prev is not None and token.space_before and token.index not in ternary:
            yield Finding.at(token, f"Unexpected space before '{token.text}'")

        nxt = document.next_on_line(token)
        if nxt is None or nxt.is_close() or _is_separator(nxt):
            continue
        if nxt.space_before != 1:
            yield Finding.at(token, f"Expected one space after '{token.text}'")


@rule("spacing.inside-brackets", RuleCategory.SPACING)
def inside_bracket_spacing(document: ParsedDocument) -> Iterator[Finding]:
    """No space just inside parentheses or square brackets."""
    for scope in document.iter_scopes(ScopeKind.PARAMETERS, ScopeKind.COLLECTION):
        opener, closer = scope.open_token, scope.close_token
        assert opener is not None and closer is not None

        first = document.next_on_line(opener)
        if first is not None and first.kind is not TokenKind.COMMENT and first.space_before:
            yield Finding.at(opener, f"Unexpected space after '{opener.text}'")

        last = document.previous_on_line(closer)
        if last is not None and last is not opener and closer.space_before:
            yield Finding.at(closer, f"Unexpected space before '{closer.text}'")


@rule("spacing.before-brace", RuleCategory.SPACING)
def space_before_brace(document: ParsedDocument) -> Iterator[Finding]:
    """An opening brace that follows code on its line has one space before it."""
    for scope in document.iter_scopes(ScopeKind.BLOCK, ScopeKind.CLOSURE):
        brace = scope.open_token
        assert brace is not None
        prev = document.previous_on_line(brace)
        if prev is None or prev.is_open():
            continue
        if brace.space_before != 1:
            yield Finding.at(brace, "Expected one space before '{'")


RULES = (
    binary_operator_spacing,
    inside_bracket_spacing,
    punctuation_spacing,
    space_before_brace,
)
