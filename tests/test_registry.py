"""
Tests for rule declaration and the rule registry.

Covers:
- The @rule decorator
- Registration order, duplicates and sealing
- Category selection
- The builtin rule set
"""

import threading

import pytest

from kanon.engine import Linter
from kanon.rules import BUILTIN_RULES, Finding, Rule, RuleRegistry, build_default_registry, rule
from kanon.types import DuplicateRuleError, RegistrySealedError, RuleCategory, Severity


def make_rule(rule_id, category=RuleCategory.SPACING):
    return Rule(id=rule_id, category=category, check=lambda document: [])


class TestRuleDecorator:
    """Tests for @rule."""

    def test_description_from_docstring(self):
        @rule("naming.no-temp", RuleCategory.NAMING)
        def no_temp(document):
            """Identifiers are not called 'temp'.

            Longer explanation that is not part of the description.
            """
            return []

        assert isinstance(no_temp, Rule)
        assert no_temp.id == "naming.no-temp"
        assert no_temp.severity is Severity.WARNING
        assert no_temp.description == "Identifiers are not called 'temp'."

    def test_explicit_description_and_severity(self):
        @rule("x.y", RuleCategory.SPACING, severity=Severity.ERROR, description="Custom")
        def check(document):
            return []

        assert check.description == "Custom"
        assert check.severity is Severity.ERROR

    def test_violation_stamping(self):
        r = make_rule("spacing.x")
        violation = r.violation(Finding(2, 3, "msg", 2, 5))
        assert violation.rule_id == "spacing.x"
        assert violation.severity is Severity.WARNING
        assert violation.location == "2:3"
        assert r.violation(Finding(1, 1, "m"), Severity.ERROR).severity is Severity.ERROR


class TestRuleRegistry:
    """Tests for RuleRegistry."""

    def test_registration_order(self):
        registry = RuleRegistry()
        for rule_id in ["c.one", "a.two", "b.three"]:
            registry.register(make_rule(rule_id))
        assert [r.id for r in registry.all_rules()] == ["c.one", "a.two", "b.three"]
        assert len(registry) == 3
        assert "a.two" in registry
        assert registry.get("a.two").id == "a.two"
        assert registry.get("missing") is None

    def test_duplicate(self):
        registry = RuleRegistry([make_rule("spacing.x")])
        with pytest.raises(DuplicateRuleError) as exc:
            registry.register(make_rule("spacing.x"))
        assert exc.value.rule_id == "spacing.x"
        assert len(registry) == 1

    def test_sealed(self):
        registry = RuleRegistry([make_rule("spacing.x")])
        registry.seal()
        assert registry.sealed
        with pytest.raises(RegistrySealedError):
            registry.register(make_rule("spacing.y"))
        assert [r.id for r in registry] == ["spacing.x"]

    def test_select(self):
        registry = RuleRegistry([
            make_rule("spacing.a"),
            make_rule("naming.b", RuleCategory.NAMING),
            make_rule("spacing.c"),
        ])
        assert [r.id for r in registry.select()] == ["spacing.a", "naming.b", "spacing.c"]
        assert [r.id for r in registry.select([RuleCategory.SPACING])] == [
            "spacing.a",
            "spacing.c",
        ]
        assert [r.id for r in registry.select(disabled=["naming.b"])] == [
            "spacing.a",
            "spacing.c",
        ]
        assert registry.categories() == [RuleCategory.SPACING, RuleCategory.NAMING]

    def test_concurrent_registration(self):
        registry = RuleRegistry()

        def register_batch(offset):
            for i in range(50):
                registry.register(make_rule(f"spacing.r{offset + i}"))

        threads = [threading.Thread(target=register_batch, args=(n * 50,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(registry) == 200
        assert len({r.id for r in registry.all_rules()}) == 200

    def test_linter_seals_registry(self):
        registry = build_default_registry()
        Linter(registry=registry)
        assert registry.sealed


class TestBuiltinRules:
    """Tests for the shipped rule set."""

    def test_fresh_registry_each_call(self):
        first = build_default_registry()
        second = build_default_registry()
        assert first is not second
        first.seal()
        assert not second.sealed

    def test_ids_are_unique_and_namespaced(self):
        ids = [r.id for r in BUILTIN_RULES]
        assert len(ids) == len(set(ids)) == 18
        for r in BUILTIN_RULES:
            assert r.id.split(".")[0] == r.category.value
            assert r.description

    def test_every_category_has_rules(self):
        assert set(build_default_registry().categories()) == set(RuleCategory)
