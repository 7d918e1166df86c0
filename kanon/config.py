"""Configuration for the linter.

Two layers of configuration are passed explicitly into every lint call:

- LanguageConfig describes the target language's lexical syntax (comment
  and string delimiters, keyword groups) together with the layout limits
  rules check against (naming patterns, line length, blank-line runs).
  A ParsedDocument remembers the LanguageConfig it was parsed with, so
  rules only ever need the document.
- LintConfig selects which rules run and at what severity.

Configuration files are JSON, stored at ``<project>/.kanon/config.json``.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field, replace
from functools import lru_cache
from pathlib import Path
from typing import Any

from kanon.constants import (
    CONFIG_DIR_NAME,
    CONFIG_FILE_NAME,
    DEFAULT_MAX_BLANK_LINES,
    DEFAULT_MAX_LINE_LENGTH,
)
from kanon.types import ConfigurationError, ErrorCode, ErrorContext, RecoveryAction, RuleCategory, Severity
from kanon.utils.logger import logger
from kanon.utils.serialization import serialize_to_primitives

SWIFT_KEYWORDS: frozenset[str] = frozenset({
    # Declarations
    "associatedtype", "class", "deinit", "enum", "extension", "fileprivate",
    "func", "import", "init", "inout", "internal", "let", "open", "operator",
    "private", "precedencegroup", "protocol", "public", "rethrows", "static",
    "struct", "subscript", "typealias", "var", "actor",
    # Statements
    "break", "case", "catch", "continue", "default", "defer", "do", "else",
    "fallthrough", "for", "guard", "if", "in", "repeat", "return", "throw",
    "switch", "where", "while",
    # Expressions and types
    "Any", "as", "await", "false", "is", "nil", "self", "Self", "super",
    "throws", "true", "try", "some", "any",
    # Contextual
    "async", "convenience", "didSet", "dynamic", "final", "get", "indirect",
    "lazy", "mutating", "nonmutating", "optional", "override", "required",
    "set", "unowned", "weak", "willSet",
})


@lru_cache(maxsize=64)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile and cache a configured regular expression."""
    return re.compile(pattern)


@dataclass(frozen=True)
class StringDelimiter:
    """Opening/closing marker pair for a string literal."""

    open: str
    close: str
    multiline: bool = False


@dataclass(frozen=True)
class LanguageConfig:
    """Lexical syntax and layout limits of the language being linted."""

    name: str = "swift"

    # Comments
    line_comment: str | None = "//"
    block_comment: tuple[str, str] | None = ("/*", "*/")
    nested_block_comments: bool = True
    doc_line_comment: str | None = "///"
    doc_block_comment: str | None = "/**"

    # Strings, longest delimiters first
    string_delimiters: tuple[StringDelimiter, ...] = (
        StringDelimiter('"""', '"""', multiline=True),
        StringDelimiter('"', '"'),
    )
    escape_char: str = "\\"
    interpolation_open: str | None = "\\("

    # Keyword groups used to find declarations
    keywords: frozenset[str] = SWIFT_KEYWORDS
    type_keywords: frozenset[str] = frozenset({
        "actor", "associatedtype", "class", "enum", "extension",
        "protocol", "struct", "typealias",
    })
    value_keywords: frozenset[str] = frozenset({"case", "let", "var"})
    function_keywords: frozenset[str] = frozenset({"func"})
    initializer_keywords: frozenset[str] = frozenset({"init", "subscript"})

    # Naming
    type_name_pattern: str = r"^[A-Z][A-Za-z0-9]*$"
    value_name_pattern: str = r"^[a-z][A-Za-z0-9]*$"
    identifier_charset_pattern: str = r"^[A-Za-z0-9_]+$"

    # Layout
    max_line_length: int = DEFAULT_MAX_LINE_LENGTH
    max_blank_lines: int = DEFAULT_MAX_BLANK_LINES
    indent_with_tabs: bool = False

    def __post_init__(self) -> None:
        for attr in ("type_name_pattern", "value_name_pattern", "identifier_charset_pattern"):
            pattern = getattr(self, attr)
            try:
                compile_pattern(pattern)
            except re.error as e:
                raise ConfigurationError(
                    f"Invalid regular expression for {attr}: {pattern!r} ({e})",
                    user_message=f"'{attr}' is not a valid regular expression.",
                    context=ErrorContext(operation="configure", additional_info={attr: pattern}),
                    original_error=e,
                ) from e
        if self.max_line_length <= 0:
            raise ConfigurationError(
                f"max_line_length must be positive, got {self.max_line_length}"
            )
        if self.max_blank_lines < 0:
            raise ConfigurationError(
                f"max_blank_lines must be non-negative, got {self.max_blank_lines}"
            )
        if not self.escape_char or len(self.escape_char) != 1:
            raise ConfigurationError("escape_char must be a single character")
        for delimiter in self.string_delimiters:
            if not delimiter.open or not delimiter.close:
                raise ConfigurationError("String delimiters must not be empty")
        if self.block_comment is not None and (
            len(self.block_comment) != 2 or not all(self.block_comment)
        ):
            raise ConfigurationError("block_comment must be an (open, close) pair")

    @classmethod
    def swift(cls) -> LanguageConfig:
        """Default configuration: Swift-style source."""
        return cls()

    @property
    def type_name_re(self) -> re.Pattern[str]:
        return compile_pattern(self.type_name_pattern)

    @property
    def value_name_re(self) -> re.Pattern[str]:
        return compile_pattern(self.value_name_pattern)

    @property
    def identifier_charset_re(self) -> re.Pattern[str]:
        return compile_pattern(self.identifier_charset_pattern)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LanguageConfig:
        """Build a LanguageConfig from parsed JSON, validating every key."""
        known = set(cls.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(
                f"Unknown language settings: {', '.join(sorted(unknown))}",
                recovery_actions=[RecoveryAction("Remove or rename the unknown keys.")],
            )

        values: dict[str, Any] = dict(data)
        if "block_comment" in values and values["block_comment"] is not None:
            values["block_comment"] = tuple(values["block_comment"])
        if "string_delimiters" in values:
            values["string_delimiters"] = tuple(
                _parse_delimiter(item) for item in values["string_delimiters"]
            )
        for key in (
            "keywords",
            "type_keywords",
            "value_keywords",
            "function_keywords",
            "initializer_keywords",
        ):
            if key in values:
                values[key] = frozenset(values[key])

        try:
            return cls(**values)
        except TypeError as e:
            raise ConfigurationError(
                f"Invalid language settings: {e}", original_error=e
            ) from e


def _parse_delimiter(item: Any) -> StringDelimiter:
    """Accept either "\"" shorthand or an {open, close, multiline} mapping."""
    if isinstance(item, str):
        return StringDelimiter(item, item)
    if isinstance(item, dict) and "open" in item:
        return StringDelimiter(
            open=item["open"],
            close=item.get("close", item["open"]),
            multiline=bool(item.get("multiline", False)),
        )
    raise ConfigurationError(f"Invalid string delimiter: {item!r}")


@dataclass(frozen=True)
class LintConfig:
    """Which rules run, and how loudly."""

    language: LanguageConfig = field(default_factory=LanguageConfig)
    enabled_categories: frozenset[RuleCategory] = frozenset(RuleCategory)
    disabled_rules: frozenset[str] = frozenset()
    severity_overrides: dict[str, Severity] = field(default_factory=dict)

    def with_categories(self, categories: list[str] | list[RuleCategory]) -> LintConfig:
        """Return a copy restricted to the given categories."""
        return replace(self, enabled_categories=_parse_categories(categories))

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON shape load_config() reads."""
        return serialize_to_primitives(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LintConfig:
        """Build a LintConfig from parsed JSON."""
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration root must be a JSON object")

        language = LanguageConfig.from_dict(data.get("language") or {})

        categories = (
            _parse_categories(data["enabled_categories"])
            if "enabled_categories" in data
            else frozenset(RuleCategory)
        )

        overrides: dict[str, Severity] = {}
        for rule_id, value in (data.get("severity_overrides") or {}).items():
            try:
                overrides[rule_id] = Severity(value)
            except ValueError as e:
                raise ConfigurationError(
                    f"Unknown severity {value!r} for rule '{rule_id}'",
                    context=ErrorContext(operation="configure", rule_id=rule_id),
                    recovery_actions=[RecoveryAction("Use 'error' or 'warning'.")],
                    original_error=e,
                ) from e

        return cls(
            language=language,
            enabled_categories=categories,
            disabled_rules=frozenset(data.get("disabled_rules") or ()),
            severity_overrides=overrides,
        )


def _parse_categories(values: Any) -> frozenset[RuleCategory]:
    categories = set()
    for value in values:
        try:
            categories.add(RuleCategory(value))
        except ValueError as e:
            valid = ", ".join(c.value for c in RuleCategory)
            raise ConfigurationError(
                f"Unknown rule category {value!r}",
                recovery_actions=[RecoveryAction(f"Choose from: {valid}")],
                original_error=e,
            ) from e
    return frozenset(categories)


def default_config_path(root: str | Path) -> Path:
    """Location of the configuration file for a project root."""
    return Path(root) / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def find_config(root: str | Path) -> Path | None:
    """Return the project's configuration file if one exists."""
    path = default_config_path(root)
    return path if path.is_file() else None


def load_config(path: str | Path) -> LintConfig:
    """Read and validate a JSON configuration file."""
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigurationError(
            f"Configuration file not found: {path}",
            user_message="Configuration file not found.",
            code=ErrorCode.MISSING_CONFIG,
            context=ErrorContext(operation="load_config", file_path=str(path)),
            recovery_actions=[RecoveryAction("Create one", command="kanon init")],
            original_error=e,
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read configuration file {path}: {e}",
            context=ErrorContext(operation="load_config", file_path=str(path)),
            original_error=e,
        ) from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Configuration file {path} is not valid JSON: {e}",
            user_message="Configuration file is not valid JSON.",
            context=ErrorContext(operation="load_config", file_path=str(path)),
            original_error=e,
        ) from e

    logger.debug(f"Loaded configuration from {path}")
    return LintConfig.from_dict(data)


def write_default_config(root: str | Path) -> Path:
    """Write the default configuration under ``root`` and return its path."""
    path = default_config_path(root)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(LintConfig().to_dict(), indent=2) + "\n", encoding="utf-8")
    return path
