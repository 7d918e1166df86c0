"""Lint entry point: parse, evaluate, return violations."""

from __future__ import annotations

from kanon.config import LintConfig
from kanon.engine.evaluator import Evaluator
from kanon.parsing import ParsedDocument, Tokenizer
from kanon.rules import RuleRegistry, Violation, build_default_registry
from kanon.rules.base import Rule
from kanon.types import MalformedInputError
from kanon.utils.logger import logger


class Linter:
    """Parser plus evaluator bound to one configuration.

    Construction seals the registry and snapshots the selected rules, so a
    Linter can be shared by threads linting different files. Each lint()
    call builds and discards its own ParsedDocument.

    Usage:
        linter = Linter(LintConfig().with_categories(["spacing", "braces"]))
        for violation in linter.lint(source):
            print(violation.location, violation.rule_id, violation.message)
    """

    def __init__(
        self,
        config: LintConfig | None = None,
        registry: RuleRegistry | None = None,
    ) -> None:
        self.config = config or LintConfig()
        self.registry = registry if registry is not None else build_default_registry()
        self.registry.seal()

        unknown = sorted(r for r in self.config.disabled_rules if r not in self.registry)
        if unknown:
            logger.warning(f"Ignoring unknown disabled rules: {', '.join(unknown)}")

        self._tokenizer = Tokenizer(self.config.language)
        self._evaluator = Evaluator(
            self.registry.select(self.config.enabled_categories, self.config.disabled_rules)
        )

    @property
    def rules(self) -> tuple[Rule, ...]:
        """Rules this linter applies, in registration order."""
        return self._evaluator.rules

    def parse(self, source_text: str) -> ParsedDocument:
        return self._tokenizer.parse(source_text)

    def lint(self, source_text: str, path: str | None = None) -> list[Violation]:
        """Lint one source text.

        Raises:
            MalformedInputError: the text cannot be parsed.
        """
        try:
            document = self._tokenizer.parse(source_text)
        except MalformedInputError as e:
            if path is not None:
                raise e.with_path(path) from e
            raise
        return self._evaluator.evaluate(document, self.config.severity_overrides)


def lint(
    source_text: str,
    config: LintConfig | None = None,
    registry: RuleRegistry | None = None,
) -> list[Violation]:
    """Lint ``source_text`` and return its violations, ordered by position.

    Raises:
        MalformedInputError: the text cannot be parsed.
    """
    return Linter(config, registry).lint(source_text)
