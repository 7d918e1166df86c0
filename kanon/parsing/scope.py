"""Scope tree built from matching brackets.

Ownership flows strictly from parent to child through ``children``. The
``parent`` link is a weak back-reference used only for navigation.
"""

from __future__ import annotations

import weakref
from enum import Enum
from typing import Iterator, Union

from kanon.parsing.tokens import Token


class ScopeKind(str, Enum):
    """What a bracketed region delimits."""

    ROOT = "root"
    BLOCK = "block"  # { } following a declaration or statement
    CLOSURE = "closure"  # { } in expression position
    PARAMETERS = "parameters"  # ( )
    COLLECTION = "collection"  # [ ] array/dictionary literal or subscript


BRACE_KINDS = frozenset({ScopeKind.BLOCK, ScopeKind.CLOSURE})

ScopeChild = Union[Token, "ScopeNode"]


class ScopeNode:
    """A bracketed region of source and everything nested inside it."""

    __slots__ = ("kind", "open_token", "close_token", "_parent", "_children", "__weakref__")

    def __init__(
        self,
        kind: ScopeKind,
        open_token: Token | None = None,
        parent: ScopeNode | None = None,
    ) -> None:
        self.kind = kind
        self.open_token = open_token
        self.close_token: Token | None = None
        self._parent = weakref.ref(parent) if parent is not None else None
        self._children: list[ScopeChild] | tuple[ScopeChild, ...] = []

    @property
    def parent(self) -> ScopeNode | None:
        return self._parent() if self._parent is not None else None

    @property
    def children(self) -> tuple[ScopeChild, ...]:
        return tuple(self._children)

    @property
    def is_root(self) -> bool:
        return self.kind is ScopeKind.ROOT

    @property
    def is_brace(self) -> bool:
        return self.kind in BRACE_KINDS

    @property
    def depth(self) -> int:
        depth = 0
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    @property
    def spans_lines(self) -> bool:
        """True when the closing bracket sits on a later line than the opening one."""
        return (
            self.open_token is not None
            and self.close_token is not None
            and self.close_token.line > self.open_token.line
        )

    def add(self, child: ScopeChild) -> None:
        self._children.append(child)  # type: ignore[union-attr]

    def close(self, token: Token) -> None:
        self.close_token = token

    def freeze(self) -> None:
        """Make this subtree's child sequences immutable."""
        for scope in list(self.walk()):
            scope._children = tuple(scope._children)

    def tokens(self) -> Iterator[Token]:
        """Direct child tokens, skipping nested scopes."""
        for child in self._children:
            if isinstance(child, Token):
                yield child

    def scopes(self) -> Iterator[ScopeNode]:
        """Direct child scopes."""
        for child in self._children:
            if isinstance(child, ScopeNode):
                yield child

    def walk(self) -> Iterator[ScopeNode]:
        """This scope and every nested scope, in source order (pre-order)."""
        stack: list[ScopeNode] = [self]
        while stack:
            scope = stack.pop()
            yield scope
            stack.extend(reversed(list(scope.scopes())))

    def to_dict(self) -> dict:
        """Structural description used for equality and debugging.

        The subtree is flattened into ``scopes`` in source order. A nested
        scope appears among its parent's children as ``{"scope": n}``, its
        position in that list; a token appears as its index.
        """

        def position(token: Token | None) -> list[int] | None:
            return [token.line, token.column] if token is not None else None

        ordered = list(self.walk())
        numbering = {id(scope): n for n, scope in enumerate(ordered)}
        return {
            "scopes": [
                {
                    "kind": scope.kind.value,
                    "open": position(scope.open_token),
                    "close": position(scope.close_token),
                    "children": [
                        {"scope": numbering[id(child)]} if isinstance(child, ScopeNode) else child.index
                        for child in scope._children
                    ],
                }
                for scope in ordered
            ]
        }

    def __repr__(self) -> str:
        opened = f"{self.open_token.line}:{self.open_token.column}" if self.open_token else "-"
        closed = f"{self.close_token.line}:{self.close_token.column}" if self.close_token else "-"
        return f"ScopeNode({self.kind.value}, {opened}..{closed}, children={len(self._children)})"
