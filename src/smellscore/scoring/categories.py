"""Static classification of rule ids into weighted, thresholded categories.

A category's thresholds are issue densities (findings per 1000 lines) that
mark the boundaries between the excellent / good / average / poor bands of
its sub-score. Weights across all categories sum to 1.0.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Thresholds:
    excellent: float
    good: float
    average: float
    poor: float

    def __post_init__(self) -> None:
        if not (0 <= self.excellent <= self.good <= self.average <= self.poor):
            raise ValueError(f"thresholds must be non-negative and ascending: {self}")


@dataclass(frozen=True)
class Category:
    name: str
    weight: float
    thresholds: Thresholds
    rule_ids: FrozenSet[str] = frozenset()


DEFAULT_CATEGORIES: Tuple[Category, ...] = (
    Category(
        "naming", 0.25, Thresholds(0.0, 3.0, 8.0, 15.0),
        frozenset({"terrible-naming", "single-letter-variable"}),
    ),
    Category(
        "complexity", 0.20, Thresholds(0.0, 1.0, 3.0, 6.0),
        frozenset({"deep-nesting", "long-function", "cyclomatic-complexity"}),
    ),
    Category(
        "duplication", 0.15, Thresholds(0.0, 0.5, 2.0, 4.0),
        frozenset({"code-duplication"}),
    ),
    Category(
        "language-basics", 0.15, Thresholds(0.0, 1.0, 3.0, 6.0),
        frozenset({"broad-except", "mutable-default-argument"}),
    ),
    Category(
        "advanced-features", 0.10, Thresholds(0.0, 0.5, 2.0, 4.0),
        frozenset({"complex-lambda", "class-complexity", "generic-abuse"}),
    ),
    Category(
        "special-features", 0.10, Thresholds(0.0, 0.5, 1.5, 3.0),
        frozenset({"async-abuse", "dynamic-execution", "ffi-abuse", "metaprogramming-abuse"}),
    ),
    Category(
        "structure", 0.05, Thresholds(0.0, 1.0, 3.0, 6.0),
        frozenset({"module-complexity", "pattern-matching-abuse", "slice-abuse"}),
    ),
)


class CategoryMap:
    """Immutable rule-id -> category lookup, shared freely across threads.

    *extra* adds ``rule_id -> category name`` pairs on top of the
    categories' own rule ids (custom rules, config overrides). Every rule id
    ends up in exactly one category; a conflicting mapping is an error.
    """

    def __init__(
        self,
        categories: Iterable[Category] = DEFAULT_CATEGORIES,
        extra: Optional[Mapping[str, str]] = None,
    ) -> None:
        cats = tuple(categories)
        by_name: Dict[str, Category] = {}
        for cat in cats:
            if cat.name in by_name:
                raise ValueError(f"duplicate category: {cat.name}")
            if cat.weight < 0:
                raise ValueError(f"category {cat.name} has a negative weight")
            by_name[cat.name] = cat

        total_weight = sum(c.weight for c in cats)
        if cats and not math.isclose(total_weight, 1.0, abs_tol=1e-9):
            raise ValueError(f"category weights must sum to 1.0, got {total_weight}")

        rule_to_category: Dict[str, str] = {}
        for cat in cats:
            for rule_id in cat.rule_ids:
                if rule_id in rule_to_category:
                    raise ValueError(
                        f"rule {rule_id} is mapped to both "
                        f"{rule_to_category[rule_id]} and {cat.name}"
                    )
                rule_to_category[rule_id] = cat.name

        for rule_id, cat_name in (extra or {}).items():
            if cat_name not in by_name:
                raise ValueError(f"rule {rule_id} mapped to unknown category {cat_name}")
            existing = rule_to_category.get(rule_id)
            if existing is not None and existing != cat_name:
                raise ValueError(
                    f"rule {rule_id} is mapped to both {existing} and {cat_name}"
                )
            rule_to_category[rule_id] = cat_name

        self._categories = cats
        self._by_name = MappingProxyType(by_name)
        self._rule_to_category = MappingProxyType(rule_to_category)

    @property
    def categories(self) -> Tuple[Category, ...]:
        return self._categories

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(c.name for c in self._categories)

    @property
    def rule_categories(self) -> Mapping[str, str]:
        return self._rule_to_category

    def get(self, name: str) -> Optional[Category]:
        return self._by_name.get(name)

    def category_for(self, rule_id: str) -> Optional[Category]:
        """Return the category *rule_id* is scored under, or None if unmapped."""
        name = self._rule_to_category.get(rule_id)
        return self._by_name[name] if name is not None else None

    def with_extra(self, extra: Mapping[str, str]) -> "CategoryMap":
        """Return a new map with additional rule mappings; this one is unchanged."""
        merged = dict(self._rule_to_category)
        for rule_id, cat_name in extra.items():
            existing = merged.get(rule_id)
            if existing is not None and existing != cat_name:
                raise ValueError(f"rule {rule_id} is mapped to both {existing} and {cat_name}")
            merged[rule_id] = cat_name
        base = tuple(
            Category(c.name, c.weight, c.thresholds, frozenset()) for c in self._categories
        )
        return CategoryMap(base, merged)


DEFAULT_CATEGORY_MAP = CategoryMap()
