"""Rule evaluator.

Applies every selected rule exactly once to a ParsedDocument and merges
the results into one deterministically ordered violation list.

Partial-failure isolation: a rule that raises is reported as a single
RuleFailureError violation tagged with its id, and the remaining rules
still run. Findings the faulting rule produced before raising are
discarded, so a rule's output is all-or-nothing.
"""

from __future__ import annotations

from typing import Mapping, Sequence

from kanon.parsing import ParsedDocument
from kanon.rules.base import Rule, Violation
from kanon.types import RuleFailureError, Severity
from kanon.utils.logger import logger


class Evaluator:
    """Runs a fixed sequence of rules over documents.

    The rule sequence is captured at construction and never changes, so an
    Evaluator can be shared by worker threads linting different files.

    Usage:
        evaluator = Evaluator(registry.all_rules())
        violations = evaluator.evaluate(document)
    """

    def __init__(self, rules: Sequence[Rule]) -> None:
        self._rules = tuple(rules)

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    def evaluate(
        self,
        document: ParsedDocument,
        severity_overrides: Mapping[str, Severity] | None = None,
    ) -> list[Violation]:
        """Apply every rule to ``document``.

        Returns:
            Violations sorted by (line, column, rule id, message).
        """
        overrides = severity_overrides or {}
        violations: list[Violation] = []

        for rule in self._rules:
            severity = overrides.get(rule.id)
            try:
                findings = list(rule.check(document))
            except Exception as e:
                failure = RuleFailureError(rule.id, e)
                logger.opt(exception=e).warning(str(failure))
                violations.append(
                    Violation(
                        rule_id=rule.id,
                        severity=Severity.ERROR,
                        line=1,
                        column=1,
                        message=f"RuleFailureError: {failure}",
                        is_rule_failure=True,
                    )
                )
                continue

            logger.debug(f"Rule {rule.id} produced {len(findings)} findings")
            violations.extend(rule.violation(finding, severity) for finding in findings)

        violations.sort(key=lambda v: v.sort_key)
        return violations
