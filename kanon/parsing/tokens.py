"""Lexical units produced by the tokenizer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenKind(str, Enum):
    """Kinds of lexical units the tokenizer emits."""

    IDENTIFIER = "identifier"
    NUMBER = "number"
    OPERATOR = "operator"
    OPEN = "open"  # ( [ {
    CLOSE = "close"  # ) ] }
    COMMA = "comma"
    COLON = "colon"
    SEMICOLON = "semicolon"
    DOT = "dot"
    STRING = "string"
    COMMENT = "comment"
    UNKNOWN = "unknown"


LITERAL_KINDS = frozenset({TokenKind.STRING, TokenKind.COMMENT})

BRACKET_PAIRS: dict[str, str] = {"(": ")", "[": "]", "{": "}"}
CLOSING_BRACKETS: dict[str, str] = {v: k for k, v in BRACKET_PAIRS.items()}


@dataclass(frozen=True, slots=True)
class SourceLine:
    """One physical line of input, without its line terminator."""

    number: int
    text: str
    indent: int

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()

    @property
    def length(self) -> int:
        return len(self.text)

    @property
    def indentation(self) -> str:
        """The leading whitespace run itself."""
        return self.text[: self.indent]


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexical unit.

    Lines and columns are 1-based. ``end_column`` is exclusive, so the gap
    between two tokens on one line is ``next.column - prev.end_column``.
    ``space_before`` is the whitespace run preceding the token on its line,
    or None when the token is the first thing on its line.
    """

    kind: TokenKind
    text: str
    line: int
    column: int
    end_line: int
    end_column: int
    space_before: int | None
    index: int

    @property
    def is_literal(self) -> bool:
        return self.kind in LITERAL_KINDS

    @property
    def starts_line(self) -> bool:
        return self.space_before is None

    @property
    def is_multiline(self) -> bool:
        return self.end_line > self.line

    def is_open(self, bracket: str | None = None) -> bool:
        return self.kind is TokenKind.OPEN and (bracket is None or self.text == bracket)

    def is_close(self, bracket: str | None = None) -> bool:
        return self.kind is TokenKind.CLOSE and (bracket is None or self.text == bracket)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "text": self.text,
            "line": self.line,
            "column": self.column,
            "end_line": self.end_line,
            "end_column": self.end_column,
            "space_before": self.space_before,
        }
