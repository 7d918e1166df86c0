"""Rule registry.

Rules are registered during a single-threaded setup phase and then the
registry is sealed. A sealed registry never changes, so any number of
worker threads can iterate its snapshot without locking.

Thread safety: registration and sealing take a threading.Lock so that
setup code registering from several sources cannot lose or duplicate
rules.
"""

from __future__ import annotations

import threading
from typing import Iterable, Iterator

from kanon.rules.base import Rule
from kanon.types import DuplicateRuleError, RegistrySealedError, RuleCategory
from kanon.utils.logger import logger


class RuleRegistry:
    """Append-only collection of rules, iterated in registration order.

    Usage:
        registry = RuleRegistry()
        registry.register(my_rule)
        registry.seal()
        for rule in registry.all_rules():
            ...
    """

    def __init__(self, rules: Iterable[Rule] | None = None) -> None:
        self._rules: dict[str, Rule] = {}
        self._snapshot: tuple[Rule, ...] = ()
        self._sealed = False
        self._lock = threading.Lock()
        for rule in rules or ():
            self.register(rule)

    def register(self, rule: Rule) -> None:
        """Add a rule.

        Raises:
            DuplicateRuleError: a rule with the same id already exists.
            RegistrySealedError: the registry has been sealed.
        """
        with self._lock:
            if self._sealed:
                raise RegistrySealedError(rule.id)
            if rule.id in self._rules:
                raise DuplicateRuleError(rule.id)
            self._rules[rule.id] = rule
            self._snapshot = tuple(self._rules.values())
        logger.debug(f"Registered rule {rule.id} ({rule.category.value})")

    def register_all(self, rules: Iterable[Rule]) -> None:
        for rule in rules:
            self.register(rule)

    def seal(self) -> None:
        """Freeze the registry; later register() calls fail."""
        with self._lock:
            self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def all_rules(self) -> tuple[Rule, ...]:
        """Every rule, in registration order."""
        return self._snapshot

    def get(self, rule_id: str) -> Rule | None:
        return self._rules.get(rule_id)

    def select(
        self,
        categories: Iterable[RuleCategory] | None = None,
        disabled: Iterable[str] = (),
    ) -> tuple[Rule, ...]:
        """Rules in the given categories (all when None), minus disabled ids.

        Registration order is preserved.
        """
        wanted = set(categories) if categories is not None else None
        skip = set(disabled)
        return tuple(
            rule
            for rule in self._snapshot
            if (wanted is None or rule.category in wanted) and rule.id not in skip
        )

    def categories(self) -> list[RuleCategory]:
        """Categories that have at least one rule, in first-registration order."""
        seen: dict[RuleCategory, None] = {}
        for rule in self._snapshot:
            seen.setdefault(rule.category, None)
        return list(seen)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules

    def __len__(self) -> int:
        return len(self._snapshot)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._snapshot)
