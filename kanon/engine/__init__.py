"""Lint pipeline: evaluation, single-text linting and batch linting."""

from .batch import FileResult, collect_source_files, lint_file, lint_paths, read_source
from .evaluator import Evaluator
from .linter import Linter, lint

__all__ = [
    "Evaluator",
    "FileResult",
    "Linter",
    "collect_source_files",
    "lint",
    "lint_file",
    "lint_paths",
    "read_source",
]
