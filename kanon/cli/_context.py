"""CLI lint context: builds the Linter a command runs with.

Every command that lints resolves its configuration through
resolve_config() so the precedence is the same everywhere:
explicit ``--config`` file, then the project's ``.kanon/config.json``,
then defaults, with command-line flags applied last.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Iterable, Sequence

from kanon.config import LintConfig, find_config, load_config
from kanon.utils.logger import logger


def discover_config(paths: Sequence[str]) -> Path | None:
    """Find a project configuration next to the linted paths or in the cwd."""
    candidates: list[Path] = []
    for raw in paths:
        path = Path(raw).resolve()
        candidates.append(path if path.is_dir() else path.parent)
    candidates.append(Path.cwd())

    for root in candidates:
        found = find_config(root)
        if found is not None:
            return found
    return None


def resolve_config(
    paths: Sequence[str],
    config_path: str | None = None,
    categories: Iterable[str] = (),
    disabled: Iterable[str] = (),
    max_line_length: int | None = None,
) -> LintConfig:
    """Load the effective configuration for a CLI invocation.

    Raises:
        ConfigurationError: the configuration file is missing or invalid.
    """
    source = Path(config_path) if config_path else discover_config(paths)
    if source is not None:
        logger.debug(f"Using configuration {source}")
        config = load_config(source)
    else:
        config = LintConfig()

    categories = list(categories)
    if categories:
        config = config.with_categories(categories)

    disabled = frozenset(disabled)
    if disabled:
        config = replace(config, disabled_rules=config.disabled_rules | disabled)

    if max_line_length is not None:
        config = replace(
            config, language=replace(config.language, max_line_length=max_line_length)
        )
    return config
