"""Shared constants and helpers for Kanon.

Centralizes default file patterns, ignore directories, rule defaults,
and timezone-aware datetime helpers.
"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


# Default source file glob patterns used by batch linting and the CLI
DEFAULT_SOURCE_PATTERNS: list[str] = [
    "**/*.swift",
]

# Configuration file location relative to a project root.
CONFIG_DIR_NAME: str = ".kanon"
CONFIG_FILE_NAME: str = "config.json"

DEFAULT_MAX_LINE_LENGTH: int = 100
DEFAULT_MAX_BLANK_LINES: int = 1

# Worker threads used when linting many files at once.
DEFAULT_MAX_WORKERS: int = 4

# Files larger than this are reported as unreadable instead of parsed (1 MB).
MAX_FILE_SIZE: int = 1_000_000

# Directories to skip during file traversal.
DEFAULT_IGNORE_DIRS: set[str] = {
    ".build",
    ".git",
    ".svn",
    ".swiftpm",
    "Carthage",
    "DerivedData",
    "Pods",
    "build",
    "node_modules",
}
