"""Special-feature rules — async sprawl, eval/exec, FFI, metaprogramming.

These features are fine in moderation; the rules count uses per module and
fire when a file leans on them too heavily.
"""

from __future__ import annotations

import ast
from typing import List

from smellscore.config.schema import Severity
from smellscore.findings.models import Finding
from smellscore.rules.models import Rule, in_source_order
from smellscore.source.models import SourceUnit


def call_name(node: ast.Call) -> str:
    func = node.func
    if isinstance(func, ast.Name):
        return func.id
    if isinstance(func, ast.Attribute):
        return func.attr
    return ""


class AsyncAbuseRule(Rule):
    id = "async-abuse"
    name = "Async Abuse"
    description = "Modules that make nearly everything async."
    max_async_defs = 10
    max_awaits = 20

    def collect(self, unit: SourceUnit, findings: List[Finding]) -> None:
        defs: List[ast.AST] = []
        awaits: List[ast.AST] = []
        for node in ast.walk(unit.tree):
            if isinstance(node, ast.AsyncFunctionDef):
                defs.append(node)
            elif isinstance(node, ast.Await):
                awaits.append(node)

        if len(defs) > self.max_async_defs:
            findings.append(
                self.finding(
                    unit,
                    f"{len(defs)} async functions in one module",
                    "spicy",
                    node=in_source_order(defs)[self.max_async_defs],
                )
            )
        if len(awaits) > self.max_awaits:
            findings.append(
                self.finding(
                    unit,
                    f"{len(awaits)} await expressions in one module",
                    "spicy",
                    node=in_source_order(awaits)[self.max_awaits],
                )
            )


DYNAMIC_CALLS = frozenset({"eval", "exec", "compile", "__import__"})


class _DynamicExecutionVisitor(ast.NodeVisitor):
    def __init__(self, rule: "DynamicExecutionRule", unit: SourceUnit, findings: List[Finding]) -> None:
        self.rule = rule
        self.unit = unit
        self.findings = findings
        self.count = 0

    def visit_Call(self, node: ast.Call) -> None:
        if isinstance(node.func, ast.Name) and node.func.id in DYNAMIC_CALLS:
            self.count += 1
            severity: Severity = "nuclear" if self.count > 3 else "spicy"
            self.findings.append(
                self.rule.finding(
                    self.unit,
                    f"Dynamic code execution via {node.func.id}()",
                    severity,
                    node=node,
                )
            )
        self.generic_visit(node)


class DynamicExecutionRule(Rule):
    id = "dynamic-execution"
    name = "Dynamic Execution"
    description = "Runtime code evaluation with eval, exec, compile or __import__."

    def collect(self, unit: SourceUnit, findings: List[Finding]) -> None:
        _DynamicExecutionVisitor(self, unit, findings).visit(unit.tree)


FFI_MODULES = frozenset({"ctypes", "cffi"})
LIBRARY_LOADERS = frozenset({"CDLL", "WinDLL", "OleDLL", "PyDLL", "dlopen", "LoadLibrary"})


def _imports_ffi(tree: ast.AST) -> bool:
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            if any(alias.name.split(".")[0] in FFI_MODULES for alias in node.names):
                return True
        elif isinstance(node, ast.ImportFrom) and node.module:
            if node.module.split(".")[0] in FFI_MODULES:
                return True
    return False


class FfiAbuseRule(Rule):
    id = "ffi-abuse"
    name = "FFI Abuse"
    description = "Native libraries loaded through ctypes or cffi."
    max_loads = 2

    def collect(self, unit: SourceUnit, findings: List[Finding]) -> None:
        if not _imports_ffi(unit.tree):
            return
        loads = [
            node for node in ast.walk(unit.tree)
            if isinstance(node, ast.Call) and call_name(node) in LIBRARY_LOADERS
        ]
        for count, node in enumerate(in_source_order(loads), 1):
            severity: Severity = "nuclear" if count > self.max_loads else "spicy"
            findings.append(
                self.finding(
                    unit,
                    f"Native library loaded via {call_name(node)}()",
                    severity,
                    node=node,
                )
            )


REFLECTION_CALLS = frozenset({"setattr", "getattr", "delattr"})
ATTRIBUTE_HOOKS = frozenset({"__getattr__", "__getattribute__", "__setattr__", "__delattr__"})


def is_metaprogramming(node: ast.AST) -> bool:
    if isinstance(node, ast.ClassDef):
        return any(kw.arg == "metaclass" for kw in node.keywords)
    if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
        return node.name in ATTRIBUTE_HOOKS
    if isinstance(node, ast.Call) and isinstance(node.func, ast.Name):
        if node.func.id in REFLECTION_CALLS:
            return True
        return node.func.id == "type" and len(node.args) == 3
    return False


class MetaprogrammingAbuseRule(Rule):
    id = "metaprogramming-abuse"
    name = "Metaprogramming Abuse"
    description = "Heavy use of metaclasses, reflection and attribute hooks."
    max_uses = 10

    def collect(self, unit: SourceUnit, findings: List[Finding]) -> None:
        uses = [node for node in ast.walk(unit.tree) if is_metaprogramming(node)]
        if len(uses) > self.max_uses:
            findings.append(
                self.finding(
                    unit,
                    f"{len(uses)} metaprogramming constructs in one module",
                    "spicy",
                    node=in_source_order(uses)[self.max_uses],
                )
            )


ALL_SPECIAL_RULES = [AsyncAbuseRule, DynamicExecutionRule, FfiAbuseRule, MetaprogrammingAbuseRule]
