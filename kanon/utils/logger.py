"""
Logging utility for Kanon.

Logs always go to STDERR so that machine-readable reports on STDOUT stay
clean for CI consumers.

Run Context Support:
- Uses contextvars to carry the current lint run id and file path
- Batch linting wraps each file in with_lint_context() so log lines emitted
  from worker threads can be traced back to the file that produced them
"""

import os
import secrets
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Generator

from loguru import logger as loguru_logger

# ============================================================================
# Run Context
# ============================================================================


@dataclass
class LintContext:
    """Context for a single file being linted."""

    run_id: str
    path: str | None = None
    start_time: float | None = None


_lint_context: ContextVar[LintContext | None] = ContextVar(
    "lint_context", default=None
)


def generate_run_id() -> str:
    """
    Generate a unique run ID.

    Format: run_<timestamp_base36>_<random_hex>
    """
    timestamp = int(time.time() * 1000)
    random_part = secrets.token_hex(4)
    return f"run_{base36_encode(timestamp)}_{random_part}"


def base36_encode(number: int) -> str:
    """Encode an integer to base36 string."""
    if number == 0:
        return "0"

    chars = "0123456789abcdefghijklmnopqrstuvwxyz"
    result = []
    while number:
        result.append(chars[number % 36])
        number //= 36
    return "".join(reversed(result))


def get_lint_context() -> LintContext | None:
    """Get the current lint context (if any)."""
    return _lint_context.get()


@contextmanager
def with_lint_context(
    path: str | None = None,
    run_id: str | None = None,
) -> Generator[LintContext, None, None]:
    """
    Context manager for linting one file under a run id.

    Log messages emitted inside the block carry the run id and path as
    loguru ``extra`` fields.

    Args:
        path: File being linted
        run_id: Run id to reuse; a fresh one is generated when omitted

    Yields:
        The LintContext object
    """
    context = LintContext(
        run_id=run_id or generate_run_id(),
        path=path,
        start_time=time.time(),
    )
    token = _lint_context.set(context)
    try:
        with loguru_logger.contextualize(run_id=context.run_id, path=path):
            yield context
    finally:
        _lint_context.reset(token)


# ============================================================================
# Logger Configuration
# ============================================================================


def is_debug_enabled() -> bool:
    """Check if debug mode is enabled."""
    return os.environ.get("KANON_DEBUG", "").lower() == "true"


def configure_logging(verbose: bool = False) -> None:
    """Send logs to stderr, at DEBUG when verbose or KANON_DEBUG is set."""
    level = "DEBUG" if verbose or is_debug_enabled() else "WARNING"
    loguru_logger.remove()
    loguru_logger.add(sys.stderr, level=level)


# Export loguru logger for direct use
logger = loguru_logger
