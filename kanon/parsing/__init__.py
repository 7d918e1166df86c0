"""Tokenizer and structural model of source text.

Components:
- Token / TokenKind / SourceLine: lexical units and physical lines
- ScopeNode / ScopeKind: bracket-delimited regions forming a tree
- ParsedDocument: immutable result of one parse, with lookup helpers
- Tokenizer / parse(): the single-pass scanner

Usage:
    from kanon.parsing import parse

    document = parse("func f(x: Int) -> Int {\\n    return x\\n}\\n")
    for scope in document.iter_scopes():
        print(scope.kind, scope.open_token.line, scope.close_token.line)
"""

from .document import ParsedDocument
from .scope import ScopeKind, ScopeNode
from .tokenizer import Tokenizer, parse
from .tokens import SourceLine, Token, TokenKind

__all__ = [
    "ParsedDocument",
    "ScopeKind",
    "ScopeNode",
    "SourceLine",
    "Token",
    "TokenKind",
    "Tokenizer",
    "parse",
]
