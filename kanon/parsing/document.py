"""The parsed, immutable view of one source text that rules run against."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

from kanon.parsing.scope import ScopeKind, ScopeNode
from kanon.parsing.tokens import SourceLine, Token, TokenKind

if TYPE_CHECKING:
    from kanon.config import LanguageConfig


class ParsedDocument:
    """Lines, tokens and scope tree of a single input.

    Built once by the tokenizer and never mutated afterwards. Lookup
    indices (tokens per line, enclosing scope per token, lines covered by
    multi-line literals) are computed at construction so rules can query
    them cheaply.
    """

    __slots__ = (
        "lines",
        "tokens",
        "root",
        "config",
        "_tokens_by_line",
        "_scope_by_token",
        "_literal_interior",
        "_string_continued",
        "_code_end",
    )

    def __init__(
        self,
        lines: tuple[SourceLine, ...],
        tokens: tuple[Token, ...],
        root: ScopeNode,
        config: LanguageConfig,
    ) -> None:
        self.lines = lines
        self.tokens = tokens
        self.root = root
        self.config = config

        self._tokens_by_line: dict[int, tuple[Token, ...]] = {}
        self._literal_interior: set[int] = set()
        self._string_continued: set[int] = set()
        self._code_end: dict[int, int] = {}
        by_line: dict[int, list[Token]] = {}
        for token in tokens:
            by_line.setdefault(token.line, []).append(token)
            if token.is_multiline:
                self._literal_interior.update(range(token.line + 1, token.end_line + 1))
                if token.kind is TokenKind.STRING:
                    self._string_continued.update(range(token.line, token.end_line))
            if not token.is_literal:
                end = token.end_column - 1
                if end > self._code_end.get(token.line, 0):
                    self._code_end[token.line] = end
        self._tokens_by_line = {line: tuple(toks) for line, toks in by_line.items()}

        self._scope_by_token: dict[int, ScopeNode] = {}
        for scope in root.walk():
            for token in scope.tokens():
                self._scope_by_token[token.index] = scope
            for child in scope.scopes():
                # Brackets belong to the scope they delimit
                if child.open_token is not None:
                    self._scope_by_token[child.open_token.index] = child
                if child.close_token is not None:
                    self._scope_by_token[child.close_token.index] = child

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def line(self, number: int) -> SourceLine:
        """Return the 1-based line ``number``."""
        if number < 1 or number > len(self.lines):
            raise IndexError(f"line {number} out of range 1..{len(self.lines)}")
        return self.lines[number - 1]

    def tokens_on_line(self, number: int) -> tuple[Token, ...]:
        """Tokens that start on line ``number``, in order."""
        return self._tokens_by_line.get(number, ())

    def previous_token(self, token: Token) -> Token | None:
        return self.tokens[token.index - 1] if token.index > 0 else None

    def next_token(self, token: Token) -> Token | None:
        nxt = token.index + 1
        return self.tokens[nxt] if nxt < len(self.tokens) else None

    def previous_on_line(self, token: Token) -> Token | None:
        """The token ending on the same line just before ``token``."""
        prev = self.previous_token(token)
        if prev is None or prev.end_line != token.line:
            return None
        return prev

    def next_on_line(self, token: Token) -> Token | None:
        """The token starting on the same line just after ``token``."""
        nxt = self.next_token(token)
        if nxt is None or nxt.line != token.end_line:
            return None
        return nxt

    def scope_of(self, token: Token) -> ScopeNode:
        """Innermost scope containing ``token``.

        Opening and closing brackets map to the scope they delimit.
        """
        return self._scope_by_token.get(token.index, self.root)

    def iter_scopes(self, *kinds: ScopeKind) -> Iterator[ScopeNode]:
        """All scopes below the root in source order, optionally filtered by kind."""
        for scope in self.root.walk():
            if scope.is_root:
                continue
            if kinds and scope.kind not in kinds:
                continue
            yield scope

    def is_literal_interior(self, number: int) -> bool:
        """True when line ``number`` continues a multi-line string or comment."""
        return number in self._literal_interior

    def code_end_column(self, number: int) -> int:
        """Last column on the line occupied by a non-literal token (0 if none)."""
        return self._code_end.get(number, 0)

    def line_ends_in_string(self, number: int) -> bool:
        """True when the end of line ``number`` falls inside a string literal."""
        return number in self._string_continued

    # ------------------------------------------------------------------
    # Structural equality
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParsedDocument):
            return NotImplemented
        return (
            self.lines == other.lines
            and self.tokens == other.tokens
            and self.root.to_dict() == other.root.to_dict()
            and self.config == other.config
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"ParsedDocument(lines={len(self.lines)}, tokens={len(self.tokens)}, "
            f"language={self.config.name!r})"
        )
