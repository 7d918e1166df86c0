"""Line length rule.

Only code counts against the limit: a line whose overflow lies entirely
within a string literal or comment (a long URL, a message) passes.
"""

from __future__ import annotations

from typing import Iterator

from kanon.parsing import ParsedDocument
from kanon.rules.base import Finding, rule
from kanon.types import RuleCategory


@rule("line-length.max", RuleCategory.LINE_LENGTH)
def max_line_length(document: ParsedDocument) -> Iterator[Finding]:
    """No code extends past the configured maximum line length."""
    limit = document.config.max_line_length
    for line in document.lines:
        if document.code_end_column(line.number) > limit:
            yield Finding(
                line.number,
                limit + 1,
                f"Line is {line.length} characters long (maximum {limit})",
                line.number,
                line.length + 1,
            )


RULES = (max_line_length,)
