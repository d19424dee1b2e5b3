"""Language-basics rules — broad exception handlers and mutable defaults."""

from __future__ import annotations

import ast
from typing import List

from smellscore.config.schema import Severity
from smellscore.findings.models import Finding
from smellscore.rules.models import Rule
from smellscore.source.models import SourceUnit

BROAD_EXCEPTIONS = frozenset({"Exception", "BaseException"})
MUTABLE_FACTORIES = frozenset(
    {"list", "dict", "set", "bytearray", "defaultdict", "OrderedDict", "deque", "Counter"}
)


def _name_of(node: ast.AST) -> str:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    return ""


def is_broad_handler(handler: ast.ExceptHandler) -> bool:
    if handler.type is None:
        return True
    if isinstance(handler.type, ast.Tuple):
        return any(_name_of(elt) in BROAD_EXCEPTIONS for elt in handler.type.elts)
    return _name_of(handler.type) in BROAD_EXCEPTIONS


class _BroadExceptVisitor(ast.NodeVisitor):
    def __init__(self, rule: "BroadExceptRule", unit: SourceUnit, findings: List[Finding]) -> None:
        self.rule = rule
        self.unit = unit
        self.findings = findings
        self.count = 0

    def visit_ExceptHandler(self, node: ast.ExceptHandler) -> None:
        if is_broad_handler(node):
            self.count += 1
            severity: Severity = "mild"
            if self.count > 5:
                severity = "nuclear"
            elif self.count > 2:
                severity = "spicy"
            caught = "everything" if node.type is None else ast.unparse(node.type)
            self.findings.append(
                self.rule.finding(
                    self.unit,
                    f"Handler catches {caught} (broad handler #{self.count} in this file)",
                    severity,
                    node=node,
                )
            )
        self.generic_visit(node)


class BroadExceptRule(Rule):
    id = "broad-except"
    name = "Broad Except"
    description = "Bare except clauses and handlers for Exception/BaseException."

    def collect(self, unit: SourceUnit, findings: List[Finding]) -> None:
        _BroadExceptVisitor(self, unit, findings).visit(unit.tree)


def is_mutable_default(node: ast.AST) -> bool:
    if isinstance(node, (ast.List, ast.Dict, ast.Set, ast.ListComp, ast.DictComp, ast.SetComp)):
        return True
    return isinstance(node, ast.Call) and _name_of(node.func) in MUTABLE_FACTORIES


class MutableDefaultArgumentRule(Rule):
    id = "mutable-default-argument"
    name = "Mutable Default Argument"
    description = "Default values that are shared between calls and can be mutated."

    def collect(self, unit: SourceUnit, findings: List[Finding]) -> None:
        for node in ast.walk(unit.tree):
            if not isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef, ast.Lambda)):
                continue
            label = getattr(node, "name", "<lambda>")
            defaults = [d for d in node.args.defaults + node.args.kw_defaults if d is not None]
            for default in defaults:
                if is_mutable_default(default):
                    findings.append(
                        self.finding(
                            unit,
                            f"Mutable default argument in '{label}'; use None and build it inside",
                            "spicy",
                            node=default,
                        )
                    )


ALL_BASICS_RULES = [BroadExceptRule, MutableDefaultArgumentRule]
