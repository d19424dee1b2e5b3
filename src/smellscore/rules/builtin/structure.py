"""Structure rules — definition nesting, pattern matching, slicing."""

from __future__ import annotations

import ast
from typing import List, Optional

from smellscore.findings.models import Finding
from smellscore.rules.models import Rule, in_source_order
from smellscore.source.models import SourceUnit

DEFINITION_NODES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)


class _DefinitionNestingVisitor(ast.NodeVisitor):
    """Record the outermost def/class sitting deeper than *limit*."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self.depth = 0
        self.hits: List[ast.AST] = []
        self._inside_hit: Optional[ast.AST] = None

    def generic_visit(self, node: ast.AST) -> None:
        if not isinstance(node, DEFINITION_NODES):
            super().generic_visit(node)
            return
        self.depth += 1
        opened = False
        if self.depth > self.limit and self._inside_hit is None:
            self._inside_hit = node
            self.hits.append(node)
            opened = True
        super().generic_visit(node)
        self.depth -= 1
        if opened:
            self._inside_hit = None


class ModuleComplexityRule(Rule):
    id = "module-complexity"
    name = "Module Complexity"
    description = "Functions and classes nested inside each other too deeply."
    max_depth = 5

    def collect(self, unit: SourceUnit, findings: List[Finding]) -> None:
        visitor = _DefinitionNestingVisitor(self.max_depth)
        visitor.visit(unit.tree)
        for node in visitor.hits:
            findings.append(
                self.finding(
                    unit,
                    f"'{getattr(node, 'name', '?')}' is defined more than "
                    f"{self.max_depth} definitions deep",
                    "spicy",
                    node=node,
                )
            )


STRUCTURAL_PATTERNS = (ast.MatchClass, ast.MatchMapping, ast.MatchSequence)


class PatternMatchingAbuseRule(Rule):
    id = "pattern-matching-abuse"
    name = "Pattern Matching Abuse"
    description = "Oversized match statements and piles of structural patterns."
    max_cases = 10
    max_patterns = 15

    def collect(self, unit: SourceUnit, findings: List[Finding]) -> None:
        patterns: List[ast.AST] = []
        for node in ast.walk(unit.tree):
            if isinstance(node, ast.Match) and len(node.cases) > self.max_cases:
                findings.append(
                    self.finding(
                        unit,
                        f"match statement with {len(node.cases)} cases",
                        "spicy",
                        node=node,
                    )
                )
            elif isinstance(node, STRUCTURAL_PATTERNS):
                patterns.append(node)

        if len(patterns) > self.max_patterns:
            findings.append(
                self.finding(
                    unit,
                    f"{len(patterns)} structural patterns in one module",
                    "spicy",
                    node=in_source_order(patterns)[self.max_patterns],
                )
            )


class SliceAbuseRule(Rule):
    id = "slice-abuse"
    name = "Slice Abuse"
    description = "Modules that slice and dice sequences everywhere."
    max_slices = 15

    def collect(self, unit: SourceUnit, findings: List[Finding]) -> None:
        slices = [node for node in ast.walk(unit.tree) if isinstance(node, ast.Slice)]
        if len(slices) > self.max_slices:
            findings.append(
                self.finding(
                    unit,
                    f"{len(slices)} slice expressions in one module",
                    "mild",
                    node=in_source_order(slices)[self.max_slices],
                )
            )


ALL_STRUCTURE_RULES = [ModuleComplexityRule, PatternMatchingAbuseRule, SliceAbuseRule]
