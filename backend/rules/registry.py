"""Check registry for managing active candidate checks."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Set

from .models import RuleCandidate

CheckCallable = Callable[[RuleCandidate, Set[str]], str | None]


class CheckRegistry:
    """Ordered set of candidate checks; registration order is reason order."""

    def __init__(self) -> None:
        self._checks: list[CheckCallable] = []

    def register(self, check: CheckCallable) -> None:
        if check not in self._checks:
            self._checks.append(check)

    def extend(self, checks: Iterable[CheckCallable]) -> None:
        for check in checks:
            self.register(check)

    def active_checks(self) -> tuple[CheckCallable, ...]:
        return tuple(self._checks)


default_registry = CheckRegistry()
