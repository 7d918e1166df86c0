"""Documentation comment rules."""

from __future__ import annotations

from typing import Iterator

from kanon.parsing import ParsedDocument, TokenKind
from kanon.rules.base import Finding, rule
from kanon.types import RuleCategory


@rule("documentation.doc-comment-style", RuleCategory.DOCUMENTATION)
def doc_comment_style(document: ParsedDocument) -> Iterator[Finding]:
    """Documentation uses line doc comments rather than block doc comments."""
    config = document.config
    if not config.doc_block_comment or not config.doc_line_comment or not config.block_comment:
        return
    empty_block = config.doc_block_comment[:-1] + config.block_comment[1]  # "/**/"
    for token in document.tokens:
        if token.kind is not TokenKind.COMMENT:
            continue
        if token.text.startswith(config.doc_block_comment) and not token.text.startswith(
            empty_block
        ):
            yield Finding.at(
                token,
                f"Use '{config.doc_line_comment}' comments for documentation "
                f"instead of '{config.doc_block_comment} ... {config.block_comment[1]}'",
            )


@rule("documentation.comment-spacing", RuleCategory.DOCUMENTATION)
def comment_spacing(document: ParsedDocument) -> Iterator[Finding]:
    """Line comment markers are followed by a space."""
    marker = document.config.line_comment
    if not marker:
        return
    for token in document.tokens:
        if token.kind is not TokenKind.COMMENT or not token.text.startswith(marker):
            continue
        body = token.text[len(marker):].lstrip(marker[-1])
        if body and not body[0].isspace():
            prefix = token.text[: len(token.text) - len(body)]
            yield Finding.at(token, f"Expected a space after '{prefix}'")


RULES = (
    doc_comment_style,
    comment_spacing,
)
