"""Naming rules: casing of declared names and identifier character sets."""

from __future__ import annotations

from typing import Iterator

from kanon.parsing import ParsedDocument, ScopeNode, Token, TokenKind
from kanon.rules.base import Finding, rule
from kanon.types import RuleCategory, Severity


def bare_name(text: str) -> str:
    """Strip backtick quoting from an identifier."""
    return text[1:-1] if len(text) > 1 and text[0] == "`" and text[-1] == "`" else text


def _ignored(name: str) -> bool:
    # wildcard, closure shorthand ($0), attributes and directives
    return name == "_" or name.startswith(("$", "@", "#"))


def declared_name(document: ParsedDocument, keyword: Token) -> Token | None:
    """The identifier introduced right after a declaration keyword, if any."""
    name = document.next_on_line(keyword)
    if name is None or name.kind is not TokenKind.IDENTIFIER:
        return None
    if name.text in document.config.keywords:
        return None
    return name


def parameter_scope(document: ParsedDocument, start: Token) -> ScopeNode | None:
    """The parameter list following ``start`` on the same line.

    Skips a generic clause (``func map<T>(...)``) or a failable marker
    (``init?(...)``) between the name and the opening parenthesis.
    """
    owner = document.scope_of(start)
    token = document.next_on_line(start)
    while token is not None and token.line == start.line:
        if token.is_open("("):
            scope = document.scope_of(token)
            return scope if scope.parent is owner else None
        if token.is_open() or token.kind in (TokenKind.STRING, TokenKind.COMMENT):
            return None
        token = document.next_on_line(token)
    return None


def parameter_names(document: ParsedDocument, scope: ScopeNode) -> Iterator[Token]:
    """Argument labels and parameter names: identifiers directly before ':'."""
    for token in scope.tokens():
        if token.kind is not TokenKind.COLON:
            continue
        label = document.previous_token(token)
        count = 0
        while (
            label is not None
            and count < 2
            and label.kind is TokenKind.IDENTIFIER
            and document.scope_of(label) is scope
            and label.text not in document.config.keywords
        ):
            yield label
            count += 1
            label = document.previous_token(label)


def value_declarations(document: ParsedDocument) -> Iterator[Token]:
    """Identifier tokens that declare values, functions or parameters."""
    config = document.config
    for token in document.tokens:
        if token.kind is not TokenKind.IDENTIFIER:
            continue

        if token.text in config.value_keywords:
            name = declared_name(document, token)
            while name is not None:
                yield name
                # `case red, green, blue`
                comma = document.next_on_line(name)
                if comma is None or comma.kind is not TokenKind.COMMA:
                    break
                name = declared_name(document, comma)

        elif token.text in config.function_keywords:
            name = declared_name(document, token)
            if name is None:
                continue
            yield name
            params = parameter_scope(document, name)
            if params is not None:
                yield from parameter_names(document, params)

        elif token.text in config.initializer_keywords:
            params = parameter_scope(document, token)
            if params is not None:
                yield from parameter_names(document, params)


@rule("naming.type-name", RuleCategory.NAMING)
def type_names(document: ParsedDocument) -> Iterator[Finding]:
    """Type names are UpperCamelCase."""
    config = document.config
    for token in document.tokens:
        if token.kind is not TokenKind.IDENTIFIER or token.text not in config.type_keywords:
            continue
        name = declared_name(document, token)
        if name is None:
            continue
        text = bare_name(name.text)
        if _ignored(text) or config.type_name_re.match(text):
            continue
        yield Finding.at(
            name,
            f"Type name '{text}' should be UpperCamelCase "
            f"(pattern {config.type_name_pattern})",
        )


@rule("naming.value-name", RuleCategory.NAMING)
def value_names(document: ParsedDocument) -> Iterator[Finding]:
    """Variables, constants, functions and parameters are lowerCamelCase."""
    config = document.config
    seen: set[int] = set()
    for name in value_declarations(document):
        if name.index in seen:
            continue
        seen.add(name.index)
        text = bare_name(name.text)
        if _ignored(text) or config.value_name_re.match(text):
            continue
        yield Finding.at(
            name,
            f"Name '{text}' should be lowerCamelCase (pattern {config.value_name_pattern})",
        )


@rule("naming.ascii-identifier", RuleCategory.NAMING, severity=Severity.ERROR)
def ascii_identifiers(document: ParsedDocument) -> Iterator[Finding]:
    """Identifiers use only ASCII letters, digits and underscores."""
    charset = document.config.identifier_charset_re
    for token in document.tokens:
        if token.kind is not TokenKind.IDENTIFIER:
            continue
        text = bare_name(token.text).lstrip("@#$")
        if text and not charset.match(text):
            yield Finding.at(token, f"Identifier '{token.text}' contains non-ASCII characters")


RULES = (
    type_names,
    value_names,
    ascii_identifiers,
)
