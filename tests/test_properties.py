"""Hypothesis property-based tests for the lint pipeline.

Properties tested:
- Balanced input always parses, and every scope closes after it opens
- Parsing is idempotent and linting is deterministic
- Builtin rules never fault on well-formed input
- Arbitrary input either parses or raises MalformedInputError, nothing else
- Reports never filter: one record per violation
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from kanon import lint
from kanon.parsing import parse
from kanon.reporting import Reporter
from kanon.types import MalformedInputError

# =============================================================================
# Strategy Definitions
# =============================================================================

# Fragments that never open a string or comment
atoms = st.sampled_from([
    "a", "b1", "Foo", "let", "func", "x", "0", "42",
    " ", "  ", "\n", "\t",
    "+", "-", "=", "->", "?", "!", "<", ">",
    ",", ":", ";", ".",
])

BRACKETS = ["()", "[]", "{}"]

balanced = st.recursive(
    atoms,
    lambda children: st.tuples(st.sampled_from(BRACKETS), st.lists(children, max_size=6)).map(
        lambda pair: pair[0][0] + "".join(pair[1]) + pair[0][1]
    ),
    max_leaves=30,
)

balanced_source = st.lists(balanced, max_size=12).map("".join)

arbitrary_source = st.text(alphabet="abX01 \n\t(){}[],:;.+-=<>?!", max_size=80)


# =============================================================================
# Properties
# =============================================================================


class TestParseProperties:
    """Properties of the tokenizer."""

    @given(balanced_source)
    @settings(max_examples=100, deadline=None)
    def test_balanced_input_parses(self, source):
        document = parse(source)
        opened = sum(source.count(ch) for ch in "([{")
        assert len(list(document.iter_scopes())) == opened
        for scope in document.iter_scopes():
            assert scope.parent is not None
            assert (scope.close_token.line, scope.close_token.column) > (
                scope.open_token.line,
                scope.open_token.column,
            )

    @given(balanced_source)
    @settings(max_examples=50, deadline=None)
    def test_parse_is_idempotent(self, source):
        assert parse(source) == parse(source)

    @given(arbitrary_source)
    @settings(max_examples=200, deadline=None)
    def test_arbitrary_input(self, source):
        try:
            document = parse(source)
        except MalformedInputError as e:
            assert e.line >= 1
            assert e.column >= 1
        else:
            assert document.line_count == len(source.splitlines())


class TestLintProperties:
    """Properties of the full pipeline."""

    @given(balanced_source)
    @settings(max_examples=100, deadline=None)
    def test_rules_never_fault(self, source):
        violations = lint(source)
        assert not [v for v in violations if v.is_rule_failure]

    @given(balanced_source)
    @settings(max_examples=50, deadline=None)
    def test_deterministic_and_sorted(self, source):
        first = lint(source)
        assert lint(source) == first
        assert first == sorted(first, key=lambda v: v.sort_key)

    @given(balanced_source)
    @settings(max_examples=50, deadline=None)
    def test_reporter_keeps_every_violation(self, source):
        violations = lint(source)
        report = Reporter("json").report(violations)
        assert len(report.records) == len(violations)
        assert report.clean == (not violations)
