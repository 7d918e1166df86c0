"""
Tests for the evaluator and the lint entry point.

Covers:
- Fault isolation: a raising rule becomes one failure violation
- Deterministic ordering and severity overrides
- The end-to-end examples: spacing/braces on a one-line function,
  a long blank-line run, empty input and unterminated strings
"""

import pytest

from kanon import LintConfig, Linter, lint
from kanon.engine import Evaluator
from kanon.parsing import parse
from kanon.rules import Finding, RuleRegistry, build_default_registry, rule
from kanon.rules.whitespace import trailing_whitespace
from kanon.types import MalformedInputError, RuleCategory, Severity


@rule("spacing.explodes", RuleCategory.SPACING)
def exploding_rule(document):
    """Yields one finding, then fails."""
    yield Finding(1, 1, "partial result")
    raise RuntimeError("boom")


class TestEvaluator:
    """Tests for Evaluator."""

    def test_faulting_rule_is_isolated(self):
        evaluator = Evaluator([exploding_rule, trailing_whitespace])
        violations = evaluator.evaluate(parse("let x = 1 "))

        failures = [v for v in violations if v.is_rule_failure]
        assert len(failures) == 1
        failure = failures[0]
        assert failure.rule_id == "spacing.explodes"
        assert failure.severity is Severity.ERROR
        assert (failure.line, failure.column) == (1, 1)
        assert failure.message.startswith("RuleFailureError: ")
        assert "RuntimeError: boom" in failure.message

        assert [v.rule_id for v in violations if not v.is_rule_failure] == ["whitespace.trailing"]
        assert all(v.message != "partial result" for v in violations)

    def test_each_rule_runs_once(self):
        calls = []

        @rule("spacing.counter", RuleCategory.SPACING)
        def counter(document):
            calls.append(document)
            return []

        document = parse("a")
        Evaluator([counter]).evaluate(document)
        assert calls == [document]

    def test_output_is_sorted(self):
        @rule("spacing.reverse", RuleCategory.SPACING)
        def reverse(document):
            return [Finding(3, 1, "c"), Finding(1, 5, "b"), Finding(1, 2, "a")]

        violations = Evaluator([reverse]).evaluate(parse("a\nb\nc"))
        assert [(v.line, v.column) for v in violations] == [(1, 2), (1, 5), (3, 1)]

    def test_ties_break_on_rule_id(self):
        @rule("spacing.b", RuleCategory.SPACING)
        def b(document):
            return [Finding(1, 1, "x")]

        @rule("spacing.a", RuleCategory.SPACING)
        def a(document):
            return [Finding(1, 1, "x")]

        violations = Evaluator([b, a]).evaluate(parse("a"))
        assert [v.rule_id for v in violations] == ["spacing.a", "spacing.b"]

    def test_severity_override(self):
        violations = Evaluator([trailing_whitespace]).evaluate(
            parse("x "), {"whitespace.trailing": Severity.ERROR}
        )
        assert violations[0].severity is Severity.ERROR

    def test_no_rules(self):
        assert Evaluator([]).evaluate(parse("a + b")) == []


class TestLint:
    """End-to-end tests for lint()."""

    def test_one_line_function(self, only):
        violations = lint("func f(x:Int)->Int{return x}", only("spacing", "braces"))
        found = {(v.rule_id, v.line, v.column) for v in violations}
        assert ("spacing.punctuation", 1, 9) in found
        assert ("spacing.binary-operator", 1, 14) in found
        assert ("braces.open-trailing", 1, 19) in found
        assert {v.rule_id.split(".")[0] for v in violations} == {"spacing", "braces"}

    def test_long_blank_run_reported_once(self, only):
        source = "let a = 1\n" + "\n" * 200 + "let b = 2\n"
        violations = lint(source, only("line-length", "blank-lines"))
        assert len(violations) == 1
        assert violations[0].rule_id == "blank-lines.consecutive"

    def test_empty_input(self):
        assert lint("") == []

    def test_unterminated_string(self):
        with pytest.raises(MalformedInputError) as exc:
            lint('let a = 1\nlet s = "never closed\n')
        assert exc.value.line == 2

    def test_clean_source(self, clean_source):
        assert lint(clean_source) == []

    def test_deterministic(self, clean_source):
        source = clean_source.replace(": ", ":").replace(" -> ", "->")
        first = lint(source)
        assert first
        assert lint(source) == first
        assert first == sorted(first, key=lambda v: v.sort_key)

    def test_record_shape(self):
        (violation,) = lint("let x = 1 ")
        assert violation.to_dict() == {
            "ruleId": "whitespace.trailing",
            "severity": "warning",
            "line": 1,
            "column": 10,
            "message": "Trailing whitespace",
        }

    def test_custom_registry(self):
        registry = RuleRegistry([exploding_rule])
        violations = lint("a", registry=registry)
        assert len(violations) == 1
        assert violations[0].is_rule_failure


class TestLinter:
    """Tests for Linter configuration handling."""

    def test_disabled_rules(self):
        linter = Linter(LintConfig(disabled_rules=frozenset({"whitespace.trailing"})))
        assert "whitespace.trailing" not in {r.id for r in linter.rules}
        assert linter.lint("let x = 1 ") == []

    def test_category_selection(self, only):
        linter = Linter(only("naming"))
        assert {r.category for r in linter.rules} == {RuleCategory.NAMING}

    def test_unknown_disabled_rule_is_ignored(self):
        linter = Linter(LintConfig(disabled_rules=frozenset({"no.such-rule"})))
        assert len(linter.rules) == len(build_default_registry())

    def test_severity_overrides(self):
        config = LintConfig(severity_overrides={"whitespace.trailing": Severity.ERROR})
        (violation,) = Linter(config).lint("x ")
        assert violation.severity is Severity.ERROR

    def test_path_attached_to_parse_errors(self):
        with pytest.raises(MalformedInputError) as exc:
            Linter().lint("(", path="Sources/App.swift")
        assert exc.value.context.file_path == "Sources/App.swift"

    def test_reuse_across_inputs(self):
        linter = Linter()
        assert linter.lint("let x = 1") == []
        assert len(linter.lint("let x = 1 ")) == 1
        assert linter.lint("let x = 1") == []
