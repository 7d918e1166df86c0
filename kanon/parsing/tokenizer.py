"""Single-pass tokenizer and scope builder.

The scanner walks the source left to right exactly once. Every character
is consumed by the handler for the current state:

- NORMAL: whitespace, punctuation, identifiers, numbers and operators.
  Brackets push and pop the scope stack only in this state.
- LINE_COMMENT: everything up to the line break.
- BLOCK_COMMENT: everything up to the matching close marker, counting
  nested openers when the language allows them.
- STRING: everything up to the closing delimiter, honouring escapes and
  string interpolation.

Parsing fails with MalformedInputError when brackets are unbalanced or a
literal is left open. No partial document is ever returned.
"""

from __future__ import annotations

import re
from enum import Enum

from kanon.config import LanguageConfig, StringDelimiter
from kanon.parsing.document import ParsedDocument
from kanon.parsing.scope import ScopeKind, ScopeNode
from kanon.parsing.tokens import (
    BRACKET_PAIRS,
    CLOSING_BRACKETS,
    SourceLine,
    Token,
    TokenKind,
)
from kanon.types import ErrorCode, MalformedInputError
from kanon.utils.logger import logger

_IDENTIFIER_RE = re.compile(r"`[^`\n]+`|[@#]?(?:[^\W\d]|\$)[\w$]*")
_NUMBER_RE = re.compile(
    r"0[xX][0-9a-fA-F_]+|0[bB][01_]+|0[oO][0-7_]+"
    r"|\d[\d_]*(?:\.\d[\d_]*)?(?:[eE][+-]?\d+)?"
)
_OPERATOR_RE = re.compile(r"[=\-+*/%<>!&|^~?]+")
_RANGE_OPERATORS = ("...", "..<")
_INLINE_WHITESPACE = " \t\f\v"
_STATEMENT_KEYWORDS = frozenset({
    "catch", "defer", "do", "else", "for", "guard", "if", "repeat", "switch", "while",
})

_PUNCTUATION: dict[str, TokenKind] = {
    ",": TokenKind.COMMA,
    ":": TokenKind.COLON,
    ";": TokenKind.SEMICOLON,
}

_BRACKET_SCOPES: dict[str, ScopeKind] = {
    "(": ScopeKind.PARAMETERS,
    "[": ScopeKind.COLLECTION,
}


class _ScanState(Enum):
    NORMAL = "normal"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    STRING = "string"


class _Scanner:
    """Mutable scan state for one parse. Never reused."""

    def __init__(self, text: str, config: LanguageConfig) -> None:
        self.text = text
        self.config = config
        self.length = len(text)
        self.pos = 0
        self.line = 1
        self.column = 1
        self.state = _ScanState.NORMAL

        self.tokens: list[Token] = []
        self.root = ScopeNode(ScopeKind.ROOT)
        self.stack: list[ScopeNode] = [self.root]

        # Whitespace seen since the last token on the current line
        self._spaces = 0
        self._line_has_token = False

        # Start of the token or literal being scanned: (pos, line, column)
        self._start = (0, 1, 1)
        self._delimiter: StringDelimiter | None = None
        self._comment_depth = 0

        self._string_openers = sorted(
            config.string_delimiters, key=lambda d: len(d.open), reverse=True
        )
        self._handlers = {
            _ScanState.NORMAL: self._scan_normal,
            _ScanState.LINE_COMMENT: self._scan_line_comment,
            _ScanState.BLOCK_COMMENT: self._scan_block_comment,
            _ScanState.STRING: self._scan_string,
        }

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def run(self) -> None:
        while self.pos < self.length:
            self._handlers[self.state]()
        self._finish()

    def _finish(self) -> None:
        start_line, start_column = self._start[1], self._start[2]
        if self.state is _ScanState.LINE_COMMENT:
            # Bare comment marker at end of input
            self._emit_child(TokenKind.COMMENT)
            self.state = _ScanState.NORMAL
        if self.state is _ScanState.STRING:
            raise MalformedInputError(
                "Unterminated string literal",
                start_line,
                start_column,
                code=ErrorCode.UNTERMINATED_LITERAL,
            )
        if self.state is _ScanState.BLOCK_COMMENT:
            raise MalformedInputError(
                "Unterminated block comment",
                start_line,
                start_column,
                code=ErrorCode.UNTERMINATED_LITERAL,
            )
        if len(self.stack) > 1:
            innermost = self.stack[-1]
            opener = innermost.open_token
            assert opener is not None
            still_open = len(self.stack) - 1
            message = f"Unclosed '{opener.text}'"
            if still_open > 1:
                message += f" ({still_open} scopes left open)"
            raise MalformedInputError(
                message, opener.line, opener.column, code=ErrorCode.UNBALANCED_SCOPE
            )
        self.root.freeze()

    # ------------------------------------------------------------------
    # Position bookkeeping
    # ------------------------------------------------------------------

    def _mark(self) -> None:
        self._start = (self.pos, self.line, self.column)

    def _advance(self, count: int) -> None:
        """Consume ``count`` characters that contain no line break."""
        self.pos += count
        self.column += count

    def _newline(self) -> None:
        """Consume a line break between tokens."""
        self.pos += 1
        self.line += 1
        self.column = 1
        self._spaces = 0
        self._line_has_token = False

    def _newline_in_literal(self) -> None:
        """Consume a line break inside a comment or string."""
        self.pos += 1
        self.line += 1
        self.column = 1

    def _emit(self, kind: TokenKind) -> Token:
        start_pos, line, column = self._start
        token = Token(
            kind=kind,
            text=self.text[start_pos : self.pos],
            line=line,
            column=column,
            end_line=self.line,
            end_column=self.column,
            space_before=self._spaces if self._line_has_token else None,
            index=len(self.tokens),
        )
        self.tokens.append(token)
        self._spaces = 0
        self._line_has_token = True
        return token

    def _emit_child(self, kind: TokenKind) -> Token:
        token = self._emit(kind)
        self.stack[-1].add(token)
        return token

    # ------------------------------------------------------------------
    # State handlers
    # ------------------------------------------------------------------

    def _scan_normal(self) -> None:
        text, pos = self.text, self.pos
        ch = text[pos]

        if ch == "\n":
            self._newline()
            return
        if ch in _INLINE_WHITESPACE:
            end = pos
            while end < self.length and text[end] in _INLINE_WHITESPACE:
                end += 1
            self._spaces += end - pos
            self._advance(end - pos)
            return

        self._mark()
        config = self.config

        if config.line_comment and text.startswith(config.line_comment, pos):
            self._advance(len(config.line_comment))
            self.state = _ScanState.LINE_COMMENT
            return
        if config.block_comment and text.startswith(config.block_comment[0], pos):
            self._advance(len(config.block_comment[0]))
            self._comment_depth = 1
            self.state = _ScanState.BLOCK_COMMENT
            return
        for delimiter in self._string_openers:
            if text.startswith(delimiter.open, pos):
                self._advance(len(delimiter.open))
                self._delimiter = delimiter
                self.state = _ScanState.STRING
                return

        if ch in BRACKET_PAIRS:
            self._open_scope(ch)
            return
        if ch in CLOSING_BRACKETS:
            self._close_scope(ch)
            return
        if ch in _PUNCTUATION:
            self._advance(1)
            self._emit_child(_PUNCTUATION[ch])
            return
        if ch == ".":
            if text.startswith(_RANGE_OPERATORS, pos):
                self._advance(3)
                self._emit_child(TokenKind.OPERATOR)
            else:
                self._advance(1)
                self._emit_child(TokenKind.DOT)
            return

        match = _IDENTIFIER_RE.match(text, pos)
        if match:
            self._advance(match.end() - pos)
            self._emit_child(TokenKind.IDENTIFIER)
            return
        match = _NUMBER_RE.match(text, pos)
        if match:
            self._advance(match.end() - pos)
            self._emit_child(TokenKind.NUMBER)
            return
        match = _OPERATOR_RE.match(text, pos)
        if match:
            self._advance(len(self._trim_operator(match.group())))
            self._emit_child(TokenKind.OPERATOR)
            return

        self._advance(1)
        self._emit_child(TokenKind.UNKNOWN)

    def _scan_line_comment(self) -> None:
        end = self.text.find("\n", self.pos)
        if end == -1:
            end = self.length
        self._advance(end - self.pos)
        self._emit_child(TokenKind.COMMENT)
        self.state = _ScanState.NORMAL

    def _scan_block_comment(self) -> None:
        assert self.config.block_comment is not None
        opener, closer = self.config.block_comment
        nested = self.config.nested_block_comments
        text = self.text

        while self.pos < self.length:
            if text.startswith(closer, self.pos):
                self._advance(len(closer))
                self._comment_depth -= 1
                if self._comment_depth == 0:
                    self._emit_child(TokenKind.COMMENT)
                    self.state = _ScanState.NORMAL
                    return
            elif nested and text.startswith(opener, self.pos):
                self._advance(len(opener))
                self._comment_depth += 1
            elif text[self.pos] == "\n":
                self._newline_in_literal()
            else:
                self._advance(1)

    def _scan_string(self) -> None:
        delimiter = self._delimiter
        assert delimiter is not None
        escape = self.config.escape_char
        interpolation = self.config.interpolation_open
        text = self.text

        while self.pos < self.length:
            if text.startswith(delimiter.close, self.pos):
                self._advance(len(delimiter.close))
                self._emit_child(TokenKind.STRING)
                self._delimiter = None
                self.state = _ScanState.NORMAL
                return

            ch = text[self.pos]
            if ch == escape:
                if interpolation and text.startswith(interpolation, self.pos):
                    self._advance(len(interpolation))
                    self._skip_interpolation(delimiter)
                    continue
                self._advance(1)
                if self.pos < self.length:
                    if text[self.pos] == "\n":
                        if not delimiter.multiline:
                            self._raise_unterminated_string()
                        self._newline_in_literal()
                    else:
                        self._advance(1)
            elif ch == "\n":
                if not delimiter.multiline:
                    self._raise_unterminated_string()
                self._newline_in_literal()
            else:
                self._advance(1)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _raise_unterminated_string(self) -> None:
        _, line, column = self._start
        raise MalformedInputError(
            "Unterminated string literal",
            line,
            column,
            code=ErrorCode.UNTERMINATED_LITERAL,
        )

    def _skip_interpolation(self, delimiter: StringDelimiter) -> None:
        """Consume an interpolated expression up to its closing parenthesis.

        Quotes inside the expression start nested string literals rather
        than ending the enclosing one.
        """
        text = self.text
        escape = self.config.escape_char
        depth = 1
        while self.pos < self.length:
            ch = text[self.pos]
            if ch == "(":
                depth += 1
                self._advance(1)
            elif ch == ")":
                depth -= 1
                self._advance(1)
                if depth == 0:
                    return
            elif ch == '"':
                self._advance(1)
                while self.pos < self.length and text[self.pos] not in '"\n':
                    escaped = (
                        text[self.pos] == escape
                        and self.pos + 1 < self.length
                        and text[self.pos + 1] != "\n"
                    )
                    self._advance(2 if escaped else 1)
                if self.pos < self.length and text[self.pos] == '"':
                    self._advance(1)
            elif ch == "\n":
                if not delimiter.multiline:
                    return
                self._newline_in_literal()
            else:
                self._advance(1)

    def _trim_operator(self, operator: str) -> str:
        """Stop an operator run where a comment marker begins."""
        markers = [self.config.line_comment]
        if self.config.block_comment:
            markers.append(self.config.block_comment[0])
        cut = len(operator)
        for marker in markers:
            if not marker:
                continue
            index = operator.find(marker, 1)
            if index != -1:
                cut = min(cut, index)
        return operator[:cut]

    def _open_scope(self, bracket: str) -> None:
        kind = _BRACKET_SCOPES.get(bracket) or self._brace_kind()
        self._advance(1)
        token = self._emit(TokenKind.OPEN)
        scope = ScopeNode(kind, token, parent=self.stack[-1])
        self.stack[-1].add(scope)
        self.stack.append(scope)

    def _close_scope(self, bracket: str) -> None:
        if len(self.stack) == 1:
            raise MalformedInputError(
                f"Unbalanced closing '{bracket}' with no matching opener",
                self.line,
                self.column,
                code=ErrorCode.UNBALANCED_SCOPE,
            )
        innermost = self.stack[-1]
        opener = innermost.open_token
        assert opener is not None
        expected = BRACKET_PAIRS[opener.text]
        if bracket != expected:
            raise MalformedInputError(
                f"Mismatched closing '{bracket}': expected '{expected}' to close "
                f"'{opener.text}' opened at line {opener.line}, column {opener.column}",
                self.line,
                self.column,
                code=ErrorCode.UNBALANCED_SCOPE,
            )
        self._advance(1)
        innermost.close(self._emit(TokenKind.CLOSE))
        self.stack.pop()

    def _brace_kind(self) -> ScopeKind:
        """Tell a statement block from a closure by the token before the brace."""
        previous = None
        for token in reversed(self.tokens):
            if token.kind is not TokenKind.COMMENT:
                previous = token
                break
        if previous is None:
            return ScopeKind.BLOCK
        if previous.kind in (TokenKind.OPEN, TokenKind.COMMA, TokenKind.COLON):
            return ScopeKind.CLOSURE
        # `Foo<T> {`, `Int? {` and `Int! {` still open declaration bodies
        if previous.kind is TokenKind.OPERATOR and previous.text[-1] not in ">?!":
            return ScopeKind.CLOSURE
        if previous.kind is TokenKind.IDENTIFIER and previous.text == "return":
            return ScopeKind.CLOSURE
        # `items.map {` is a trailing closure unless the line is a statement
        if previous.kind is TokenKind.IDENTIFIER and previous.index > 0:
            before = self.tokens[previous.index - 1]
            if before.kind is TokenKind.DOT and not self._line_is_statement():
                return ScopeKind.CLOSURE
        return ScopeKind.BLOCK

    def _line_is_statement(self) -> bool:
        """True when the current line starts with a control-flow keyword."""
        head = None
        for token in reversed(self.tokens):
            if token.line != self.line:
                break
            if token.kind is not TokenKind.CLOSE:
                head = token
        return head is not None and head.text in _STATEMENT_KEYWORDS


def _normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _split_lines(text: str) -> tuple[SourceLine, ...]:
    if not text:
        return ()
    parts = text.split("\n")
    if text.endswith("\n"):
        parts.pop()
    return tuple(
        SourceLine(number=i, text=part, indent=len(part) - len(part.lstrip(" \t")))
        for i, part in enumerate(parts, 1)
    )


class Tokenizer:
    """Turns source text into a ParsedDocument.

    A Tokenizer holds only its configuration; each parse() call uses a
    fresh scanner, so one instance can be shared across threads and
    re-parsing identical text always yields an equal document.

    Usage:
        tokenizer = Tokenizer(LanguageConfig.swift())
        document = tokenizer.parse(source)
        for token in document.tokens_on_line(1):
            print(token.kind, token.text)
    """

    def __init__(self, config: LanguageConfig | None = None) -> None:
        self.config = config or LanguageConfig()

    def parse(self, text: str) -> ParsedDocument:
        """Parse ``text``; raises MalformedInputError on unbalanced input."""
        text = _normalize_newlines(text)
        scanner = _Scanner(text, self.config)
        scanner.run()
        document = ParsedDocument(
            lines=_split_lines(text),
            tokens=tuple(scanner.tokens),
            root=scanner.root,
            config=self.config,
        )
        logger.debug(
            f"Parsed {document.line_count} lines into {len(document.tokens)} tokens"
        )
        return document


def parse(text: str, config: LanguageConfig | None = None) -> ParsedDocument:
    """Parse ``text`` with ``config`` (Swift defaults when omitted)."""
    return Tokenizer(config).parse(text)
