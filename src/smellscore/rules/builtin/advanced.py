"""Advanced-feature rules — lambdas, class shape, generics."""

from __future__ import annotations

import ast
from typing import List

from smellscore.findings.models import Finding
from smellscore.rules.models import Rule, in_source_order
from smellscore.source.models import SourceUnit


def lambda_depth(node: ast.Lambda) -> int:
    """Depth of lambda nesting rooted at *node* (a lone lambda is 1)."""
    inner = [lambda_depth(n) for n in ast.walk(node.body) if isinstance(n, ast.Lambda)]
    return 1 + max(inner, default=0)


def count_params(args: ast.arguments) -> int:
    total = len(args.posonlyargs) + len(args.args) + len(args.kwonlyargs)
    return total + (args.vararg is not None) + (args.kwarg is not None)


class _LambdaVisitor(ast.NodeVisitor):
    def __init__(self, rule: "ComplexLambdaRule", unit: SourceUnit, findings: List[Finding]) -> None:
        self.rule = rule
        self.unit = unit
        self.findings = findings
        self.depth = 0

    def visit_Lambda(self, node: ast.Lambda) -> None:
        problems = []
        if self.depth == 0:
            nesting = lambda_depth(node)
            if nesting > self.rule.max_nesting:
                problems.append(f"lambdas nested {nesting} deep")
        params = count_params(node.args)
        if params > self.rule.max_params:
            problems.append(f"{params} parameters")
        if problems:
            self.findings.append(
                self.rule.finding(
                    self.unit,
                    "Lambda is too complex (" + ", ".join(problems) + "); use a def",
                    "spicy",
                    node=node,
                )
            )
        self.depth += 1
        self.generic_visit(node)
        self.depth -= 1


class ComplexLambdaRule(Rule):
    id = "complex-lambda"
    name = "Complex Lambda"
    description = "Lambdas nested inside lambdas or taking too many parameters."
    max_nesting = 2
    max_params = 5

    def collect(self, unit: SourceUnit, findings: List[Finding]) -> None:
        _LambdaVisitor(self, unit, findings).visit(unit.tree)


class ClassComplexityRule(Rule):
    id = "class-complexity"
    name = "Class Complexity"
    description = "Classes with too many methods or too many base classes."
    max_methods = 10
    max_bases = 3

    def collect(self, unit: SourceUnit, findings: List[Finding]) -> None:
        for node in ast.walk(unit.tree):
            if not isinstance(node, ast.ClassDef):
                continue
            methods = sum(
                1 for stmt in node.body
                if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef))
            )
            problems = []
            if methods > self.max_methods:
                problems.append(f"{methods} methods")
            if len(node.bases) > self.max_bases:
                problems.append(f"{len(node.bases)} base classes")
            if problems:
                findings.append(
                    self.finding(
                        unit,
                        f"Class '{node.name}' does too much (" + ", ".join(problems) + ")",
                        "spicy",
                        node=node,
                    )
                )


_GENERIC_BASES = frozenset({"Generic", "Protocol"})


def _subscript_arity(node: ast.Subscript) -> int:
    return len(node.slice.elts) if isinstance(node.slice, ast.Tuple) else 1


def _is_typevar_call(node: ast.AST) -> bool:
    if not isinstance(node, ast.Call):
        return False
    func = node.func
    name = func.id if isinstance(func, ast.Name) else getattr(func, "attr", "")
    return name in ("TypeVar", "ParamSpec", "TypeVarTuple")


class GenericAbuseRule(Rule):
    id = "generic-abuse"
    name = "Generic Abuse"
    description = "Type parameter lists and TypeVar collections grown out of hand."
    max_params = 5
    max_typevars = 5

    def collect(self, unit: SourceUnit, findings: List[Finding]) -> None:
        typevars: List[ast.Call] = []
        for node in ast.walk(unit.tree):
            if isinstance(node, ast.ClassDef):
                for base in node.bases:
                    if not isinstance(base, ast.Subscript):
                        continue
                    base_name = getattr(base.value, "id", getattr(base.value, "attr", ""))
                    arity = _subscript_arity(base)
                    if base_name in _GENERIC_BASES and arity > self.max_params:
                        findings.append(
                            self.finding(
                                unit,
                                f"Class '{node.name}' takes {arity} type parameters",
                                "spicy",
                                node=node,
                            )
                        )
            type_params = getattr(node, "type_params", None) or []
            if len(type_params) > self.max_params:
                findings.append(
                    self.finding(
                        unit,
                        f"{len(type_params)} type parameters on one declaration",
                        "spicy",
                        node=node,
                    )
                )
            if _is_typevar_call(node):
                typevars.append(node)

        if len(typevars) > self.max_typevars:
            findings.append(
                self.finding(
                    unit,
                    f"{len(typevars)} type variables declared in one module",
                    "spicy",
                    node=in_source_order(typevars)[self.max_typevars],
                )
            )


ALL_ADVANCED_RULES = [ComplexLambdaRule, ClassComplexityRule, GenericAbuseRule]
