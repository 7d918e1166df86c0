"""Batch linting of many files.

This is the boundary layer: it discovers files, reads them from disk and
fans them out across worker threads. Each file is an independent
pipeline run, and a malformed or unreadable file is recorded on its own
FileResult without affecting the others.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from kanon.constants import DEFAULT_IGNORE_DIRS, DEFAULT_MAX_WORKERS, DEFAULT_SOURCE_PATTERNS, MAX_FILE_SIZE
from kanon.engine.linter import Linter
from kanon.rules import Violation
from kanon.types import ErrorCode, ErrorContext, KanonError, KanonSystemError, MalformedInputError, ResourceError
from kanon.utils.logger import generate_run_id, logger, with_lint_context


@dataclass
class FileResult:
    """Outcome of linting one file: violations, or the error that stopped it."""

    path: str
    violations: list[Violation] = field(default_factory=list)
    error: KanonError | None = None

    @property
    def clean(self) -> bool:
        return self.error is None and not self.violations

    @property
    def malformed(self) -> bool:
        return isinstance(self.error, MalformedInputError)


def _should_skip_path(path: Path, ignore_dirs: set[str]) -> bool:
    return any(part in ignore_dirs for part in path.parts)


def collect_source_files(
    root: str | Path,
    patterns: Iterable[str] | None = None,
    ignore_dirs: set[str] | None = None,
) -> list[Path]:
    """Find source files under ``root``, sorted for stable output.

    A file path is returned as-is.
    """
    root = Path(root)
    if root.is_file():
        return [root]

    skip = DEFAULT_IGNORE_DIRS if ignore_dirs is None else ignore_dirs
    found: set[Path] = set()
    for pattern in patterns or DEFAULT_SOURCE_PATTERNS:
        for path in root.glob(pattern):
            if path.is_file() and not _should_skip_path(path.relative_to(root), skip):
                found.add(path)
    return sorted(found)


def read_source(path: str | Path) -> str:
    """Read a source file as UTF-8.

    Raises:
        ResourceError: the file is missing, unreadable, too large or not text.
    """
    path = Path(path)
    context = ErrorContext(operation="read_source", file_path=str(path))
    try:
        size = path.stat().st_size
        if size > MAX_FILE_SIZE:
            raise ResourceError(
                f"{path} is {size} bytes, larger than the {MAX_FILE_SIZE} byte limit",
                user_message="File too large to lint.",
                context=context,
            )
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ResourceError(
            f"Source file not found: {path}",
            user_message="Source file not found.",
            code=ErrorCode.FILE_NOT_FOUND,
            context=context,
            original_error=e,
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ResourceError(
            f"Cannot read {path}: {e}",
            user_message="Could not read source file.",
            context=context,
            original_error=e,
        ) from e


def lint_file(linter: Linter, path: str | Path, run_id: str | None = None) -> FileResult:
    """Read and lint a single file, capturing any failure on the result.

    Malformed and unreadable input are expected outcomes. Anything else is
    logged with its traceback and recorded as a KanonSystemError.
    """
    name = str(path)
    with with_lint_context(name, run_id=run_id):
        try:
            source = read_source(path)
            violations = linter.lint(source, path=name)
        except (MalformedInputError, ResourceError) as e:
            logger.info(f"Skipping {name}: {e}")
            return FileResult(path=name, error=e)
        except Exception as e:
            logger.opt(exception=e).error(f"Linting {name} failed unexpectedly")
            error = KanonSystemError(
                f"Linting {name} failed: {type(e).__name__}: {e}",
                user_message="Internal error while linting file.",
                context=ErrorContext(operation="lint_file", file_path=name),
                original_error=e,
            )
            return FileResult(path=name, error=error)
        logger.debug(f"{name}: {len(violations)} violations")
        return FileResult(path=name, violations=violations)


def lint_paths(
    paths: Iterable[str | Path],
    linter: Linter,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> list[FileResult]:
    """Lint files in parallel. Results come back in input order."""
    files = list(paths)
    if not files:
        return []

    run_id = generate_run_id()
    logger.debug(f"Linting {len(files)} files with {max_workers} workers ({run_id})")
    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
        return list(executor.map(lambda p: lint_file(linter, p, run_id), files))
