"""Utility modules for Kanon."""

from .logger import (
    LintContext,
    configure_logging,
    generate_run_id,
    get_lint_context,
    is_debug_enabled,
    logger,
    with_lint_context,
)
from .serialization import serialize_to_primitives

__all__ = [
    "LintContext",
    "configure_logging",
    "generate_run_id",
    "get_lint_context",
    "is_debug_enabled",
    "logger",
    "serialize_to_primitives",
    "with_lint_context",
]
