"""Complexity rules — nesting depth, function length, cyclomatic complexity."""

from __future__ import annotations

import ast
from typing import List, Optional, Set, Tuple, Union

from smellscore.config.schema import Severity
from smellscore.findings.models import Finding
from smellscore.rules.models import Rule
from smellscore.source.models import SourceUnit

FunctionNode = Union[ast.FunctionDef, ast.AsyncFunctionDef]

CONTROL_NODES = (
    ast.If,
    ast.For,
    ast.AsyncFor,
    ast.While,
    ast.With,
    ast.AsyncWith,
    ast.Try,
    ast.TryStar,
    ast.Match,
)


def _tiered(value: int, mild_above: int, spicy_above: int, nuclear_above: int) -> Optional[Severity]:
    if value > nuclear_above:
        return "nuclear"
    if value > spicy_above:
        return "spicy"
    if value > mild_above:
        return "mild"
    return None


class _NestingVisitor(ast.NodeVisitor):
    """Track control-flow depth; record each outermost block that goes too deep.

    An ``elif`` continues its parent ``if`` rather than nesting inside it.
    """

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self.depth = 0
        self.hits: List[Tuple[ast.AST, int]] = []
        self._elifs: Set[int] = set()
        self._current: Optional[List] = None  # [node, deepest level seen]

    def generic_visit(self, node: ast.AST) -> None:
        if isinstance(node, ast.If) and len(node.orelse) == 1 and isinstance(node.orelse[0], ast.If):
            self._elifs.add(id(node.orelse[0]))

        if not isinstance(node, CONTROL_NODES) or id(node) in self._elifs:
            super().generic_visit(node)
            return

        self.depth += 1
        opened = False
        if self._current is None:
            if self.depth > self.limit:
                self._current = [node, self.depth]
                opened = True
        else:
            self._current[1] = max(self._current[1], self.depth)

        super().generic_visit(node)

        self.depth -= 1
        if opened:
            self.hits.append((self._current[0], self._current[1]))
            self._current = None


class DeepNestingRule(Rule):
    id = "deep-nesting"
    name = "Deep Nesting"
    description = "Control flow nested so deep it is hard to follow."
    max_depth = 5

    def collect(self, unit: SourceUnit, findings: List[Finding]) -> None:
        visitor = _NestingVisitor(self.max_depth)
        visitor.visit(unit.tree)
        for node, depth in visitor.hits:
            severity = _tiered(depth, self.max_depth, 6, 8) or "mild"
            findings.append(
                self.finding(
                    unit,
                    f"Control flow nested {depth} levels deep (limit {self.max_depth})",
                    severity,
                    node=node,
                )
            )


def function_length(node: FunctionNode) -> int:
    end = getattr(node, "end_lineno", None) or node.lineno
    return end - node.lineno + 1


class LongFunctionRule(Rule):
    id = "long-function"
    name = "Long Function"
    description = "Functions that have grown past what fits on a screen."

    def collect(self, unit: SourceUnit, findings: List[Finding]) -> None:
        for node in ast.walk(unit.tree):
            if not isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
                continue
            length = function_length(node)
            severity = _tiered(length, 50, 75, 100)
            if severity is not None:
                findings.append(
                    self.finding(
                        unit,
                        f"Function '{node.name}' is {length} lines long",
                        severity,
                        node=node,
                    )
                )


_DECISION_NODES = (
    ast.If,
    ast.IfExp,
    ast.For,
    ast.AsyncFor,
    ast.While,
    ast.ExceptHandler,
    ast.Assert,
    ast.match_case,
)
_SCOPE_NODES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef, ast.Lambda)


def cyclomatic_complexity(func: FunctionNode) -> int:
    """McCabe complexity of *func*, not counting nested functions or classes."""
    complexity = 1
    stack: List[ast.AST] = list(func.body)
    while stack:
        node = stack.pop()
        if isinstance(node, _SCOPE_NODES):
            continue
        if isinstance(node, _DECISION_NODES):
            complexity += 1
        elif isinstance(node, ast.BoolOp):
            complexity += len(node.values) - 1
        elif isinstance(node, ast.comprehension):
            complexity += 1 + len(node.ifs)
        stack.extend(ast.iter_child_nodes(node))
    return complexity


class CyclomaticComplexityRule(Rule):
    id = "cyclomatic-complexity"
    name = "Cyclomatic Complexity"
    description = "Functions with too many independent paths through them."

    def collect(self, unit: SourceUnit, findings: List[Finding]) -> None:
        for node in ast.walk(unit.tree):
            if not isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
                continue
            score = cyclomatic_complexity(node)
            if score > 10:
                findings.append(
                    self.finding(
                        unit,
                        f"Function '{node.name}' has cyclomatic complexity {score}",
                        "nuclear" if score > 20 else "spicy",
                        node=node,
                    )
                )


ALL_COMPLEXITY_RULES = [DeepNestingRule, LongFunctionRule, CyclomaticComplexityRule]
