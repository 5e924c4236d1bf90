"""Planner strategy interface and the variant registry."""
from __future__ import annotations

import fnmatch
from typing import Dict, Iterable, Iterator, List, Protocol, Sequence

from plantest.core.session import PlanningSession


class PlannerInstance(Protocol):
    """Stateful planner bound to exactly one planning session."""

    name: str

    def setup(self) -> None:
        ...

    def solve(self, time_budget: float) -> bool:
        ...

    def clear(self) -> None:
        ...


class PlannerVariant:
    """Factory for one planning algorithm.

    Variants hold no mutable state; everything a planner learns lives in the
    :class:`PlannerInstance` returned by :meth:`new_planner`.
    """

    name: str = ""
    backend: str = ""
    description: str = ""

    def new_planner(self, session: PlanningSession) -> PlannerInstance:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, backend={self.backend!r})"


class PlannerRegistry:
    """Stores planner variants and exposes lookup utilities."""

    def __init__(self) -> None:
        self._variants: Dict[str, PlannerVariant] = {}

    def register(self, variant: PlannerVariant) -> PlannerVariant:
        if not variant.name:
            raise ValueError(f"Planner variant {type(variant).__name__} declares no name")
        if variant.name in self._variants:
            raise ValueError(f"Planner '{variant.name}' already registered")
        self._variants[variant.name] = variant
        return variant

    def update_or_register(self, variant: PlannerVariant) -> PlannerVariant:
        self._variants[variant.name] = variant
        return variant

    def get(self, name: str) -> PlannerVariant:
        try:
            return self._variants[name]
        except KeyError as exc:
            known = ", ".join(sorted(self._variants)) or "none"
            raise KeyError(f"Planner '{name}' is not registered (known: {known})") from exc

    def select(self, patterns: Sequence[str]) -> List[PlannerVariant]:
        """Return variants whose names match any glob, in registration order."""

        if not patterns:
            return list(self._variants.values())
        selected = [
            variant
            for name, variant in self._variants.items()
            if any(fnmatch.fnmatchcase(name, pattern) for pattern in patterns)
        ]
        unmatched = [
            pattern
            for pattern in patterns
            if not any(fnmatch.fnmatchcase(name, pattern) for name in self._variants)
        ]
        if unmatched:
            known = ", ".join(sorted(self._variants)) or "none"
            raise KeyError(f"No planner matches {', '.join(unmatched)} (known: {known})")
        return selected

    def unregister(self, name: str) -> None:
        self._variants.pop(name, None)

    def __contains__(self, name: str) -> bool:
        return name in self._variants

    def __iter__(self) -> Iterator[PlannerVariant]:
        return iter(self._variants.values())

    def names(self) -> Iterable[str]:
        return tuple(self._variants.keys())


planner_registry = PlannerRegistry()


def register_variant(variant: PlannerVariant) -> PlannerVariant:
    return planner_registry.register(variant)
