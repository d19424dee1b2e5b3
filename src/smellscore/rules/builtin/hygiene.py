"""Hygiene rules — leftovers that are reported but not scored.

File length, import order, debug prints, TODO markers, magic numbers, and
commented-out code. None of these ids belong to a scoring category by
default; ``[scoring] rule_categories`` can opt them in.
"""

from __future__ import annotations

import ast
import io
import re
import tokenize
from typing import Iterator, List, Optional, Set, Tuple

from smellscore.config.schema import Severity
from smellscore.findings.models import Finding
from smellscore.rules.models import Rule
from smellscore.source.models import SourceUnit


def iter_comments(text: str) -> Iterator[Tuple[int, str, bool]]:
    """Yield ``(line, comment, standalone)`` for each ``#`` comment in *text*.

    Stops quietly at the first tokenizer error; the caller keeps what it got.
    """
    try:
        for tok in tokenize.generate_tokens(io.StringIO(text).readline):
            if tok.type == tokenize.COMMENT:
                standalone = tok.line.strip().startswith("#")
                yield tok.start[0], tok.string, standalone
    except (tokenize.TokenError, SyntaxError):
        return


class FileTooLongRule(Rule):
    id = "file-too-long"
    name = "File Too Long"
    description = "Modules long enough that they should be split."

    def collect(self, unit: SourceUnit, findings: List[Finding]) -> None:
        length = unit.line_count
        severity: Optional[Severity] = None
        if length > 2000:
            severity = "nuclear"
        elif length > 1500:
            severity = "spicy"
        elif length > 1000:
            severity = "mild"
        if severity is not None:
            findings.append(
                self.finding(unit, f"File is {length} lines long; split it up", severity, line=1)
            )


def _is_import_block(stmt: ast.stmt) -> bool:
    """Imports, or an if/try wrapping nothing but imports (TYPE_CHECKING, fallbacks)."""
    if isinstance(stmt, (ast.Import, ast.ImportFrom)):
        return True
    if isinstance(stmt, (ast.If, ast.Try)):
        bodies = [stmt.body, stmt.orelse]
        if isinstance(stmt, ast.Try):
            bodies.extend(h.body for h in stmt.handlers)
        return all(
            _is_import_block(s) or isinstance(s, ast.Pass)
            for body in bodies
            for s in body
        )
    return False


def _is_docstring(stmt: ast.stmt) -> bool:
    return (
        isinstance(stmt, ast.Expr)
        and isinstance(stmt.value, ast.Constant)
        and isinstance(stmt.value.value, str)
    )


def _imported_names(node: ast.stmt) -> Iterator[Tuple[str, ast.AST]]:
    for sub in ast.walk(node):
        if isinstance(sub, ast.Import):
            for alias in sub.names:
                yield f"{alias.name} as {alias.asname or alias.name}", sub
        elif isinstance(sub, ast.ImportFrom):
            module = "." * sub.level + (sub.module or "")
            for alias in sub.names:
                yield f"{module}:{alias.name} as {alias.asname or alias.name}", sub


class ImportChaosRule(Rule):
    id = "import-chaos"
    name = "Import Chaos"
    description = "Duplicate imports, and imports scattered below module code."

    def collect(self, unit: SourceUnit, findings: List[Finding]) -> None:
        seen: Set[str] = set()
        code_started = False
        for stmt in unit.tree.body:
            if _is_import_block(stmt):
                if code_started:
                    findings.append(
                        self.finding(unit, "Import placed after module code", "mild", node=stmt)
                    )
                for key, node in _imported_names(stmt):
                    if key in seen:
                        findings.append(
                            self.finding(
                                unit,
                                f"Duplicate import of {key.split(' as ')[0].replace(':', '.')}",
                                "mild",
                                node=node,
                            )
                        )
                    seen.add(key)
            elif not (_is_docstring(stmt) and not code_started):
                code_started = True


class _PrintVisitor(ast.NodeVisitor):
    def __init__(self, rule: "PrintDebuggingRule", unit: SourceUnit, findings: List[Finding]) -> None:
        self.rule = rule
        self.unit = unit
        self.findings = findings
        self.count = 0

    def visit_Call(self, node: ast.Call) -> None:
        if isinstance(node.func, ast.Name) and node.func.id == "print":
            self.count += 1
            severity: Severity = "spicy" if self.count > 5 else "mild"
            self.findings.append(
                self.rule.finding(
                    self.unit, "print() call; use logging instead", severity, node=node
                )
            )
        self.generic_visit(node)


class PrintDebuggingRule(Rule):
    id = "print-debugging"
    name = "Print Debugging"
    description = "print() calls left behind in library code."

    def collect(self, unit: SourceUnit, findings: List[Finding]) -> None:
        _PrintVisitor(self, unit, findings).visit(unit.tree)


TODO_RE = re.compile(r"\b(TODO|FIXME|XXX|HACK)\b")


class TodoCommentRule(Rule):
    id = "todo-comment"
    name = "TODO Comment"
    description = "TODO, FIXME, XXX and HACK markers."

    def collect(self, unit: SourceUnit, findings: List[Finding]) -> None:
        for line, comment, _ in iter_comments(unit.text):
            m = TODO_RE.search(comment)
            if m:
                findings.append(
                    self.finding(unit, f"{m.group(1)} comment left in code", "mild", line=line)
                )


ALLOWED_NUMBERS = frozenset({-1, 0, 1, 2, 10, 100, 1000})


def _is_constant_assignment(stmt: ast.stmt) -> bool:
    """``UPPER_CASE = ...`` at module or class level."""
    if isinstance(stmt, ast.Assign):
        targets = stmt.targets
    elif isinstance(stmt, ast.AnnAssign):
        targets = [stmt.target]
    else:
        return False
    return all(isinstance(t, ast.Name) and t.id.isupper() for t in targets)


class _MagicNumberVisitor(ast.NodeVisitor):
    def __init__(self, rule: "MagicNumberRule", unit: SourceUnit, findings: List[Finding]) -> None:
        self.rule = rule
        self.unit = unit
        self.findings = findings
        self.function_depth = 0

    def _report(self, node: ast.AST, value: int) -> None:
        if value in ALLOWED_NUMBERS:
            return
        severity: Severity = "spicy" if value < -100 or value > 1000 else "mild"
        self.findings.append(
            self.rule.finding(
                self.unit, f"Magic number {value}; give it a name", severity, node=node
            )
        )

    def _visit_body(self, body: List[ast.stmt]) -> None:
        for stmt in body:
            if self.function_depth == 0 and _is_constant_assignment(stmt):
                continue
            self.visit(stmt)

    def visit_Module(self, node: ast.Module) -> None:
        self._visit_body(node.body)

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        for expr in node.bases + node.keywords + node.decorator_list:
            self.visit(expr)
        self._visit_body(node.body)

    def _visit_function(self, node: ast.FunctionDef | ast.AsyncFunctionDef) -> None:
        # defaults are named by their parameter
        for expr in node.decorator_list:
            self.visit(expr)
        self.function_depth += 1
        for stmt in node.body:
            self.visit(stmt)
        self.function_depth -= 1

    visit_FunctionDef = _visit_function
    visit_AsyncFunctionDef = _visit_function

    def visit_Lambda(self, node: ast.Lambda) -> None:
        self.visit(node.body)

    def visit_UnaryOp(self, node: ast.UnaryOp) -> None:
        operand = node.operand
        if (
            isinstance(node.op, ast.USub)
            and isinstance(operand, ast.Constant)
            and type(operand.value) is int
        ):
            self._report(node, -operand.value)
            return
        self.generic_visit(node)

    def visit_Constant(self, node: ast.Constant) -> None:
        if type(node.value) is int:
            self._report(node, node.value)


class MagicNumberRule(Rule):
    id = "magic-number"
    name = "Magic Number"
    description = "Unexplained integer literals in logic."

    def collect(self, unit: SourceUnit, findings: List[Finding]) -> None:
        _MagicNumberVisitor(self, unit, findings).visit(unit.tree)


_CODE_HINT_RE = re.compile(r"[=()\[\]:]|^(?:import|from|return|raise|del|pass|break|continue)\b")


def looks_like_code(comment: str) -> bool:
    """True when the comment body parses as a Python statement worth flagging."""
    body = comment.lstrip("#").strip()
    if not body or not _CODE_HINT_RE.search(body):
        return False
    candidate = body + " pass" if body.endswith(":") else body
    try:
        parsed = ast.parse(candidate)
    except (SyntaxError, ValueError):
        return False
    if len(parsed.body) != 1:
        return False
    stmt = parsed.body[0]
    # prose like "Note: see below" or "(optional)" parses too
    if isinstance(stmt, ast.AnnAssign) and stmt.value is None:
        return False
    return not (isinstance(stmt, ast.Expr) and isinstance(stmt.value, (ast.Name, ast.Constant)))


class CommentedCodeRule(Rule):
    id = "commented-code"
    name = "Commented-Out Code"
    description = "Blocks of code that were commented out instead of deleted."
    min_run = 3

    def collect(self, unit: SourceUnit, findings: List[Finding]) -> None:
        runs: List[Tuple[int, int]] = []  # (first line, length)
        start = last = None
        for line, comment, standalone in iter_comments(unit.text):
            if standalone and looks_like_code(comment):
                if last is not None and line == last + 1:
                    last = line
                    continue
                if start is not None:
                    runs.append((start, last - start + 1))
                start = last = line
            elif start is not None:
                runs.append((start, last - start + 1))
                start = last = None
        if start is not None:
            runs.append((start, last - start + 1))

        for first, length in runs:
            if length < self.min_run:
                continue
            findings.append(
                self.finding(
                    unit,
                    f"{length} lines of commented-out code",
                    "spicy" if length > 10 else "mild",
                    line=first,
                )
            )


ALL_HYGIENE_RULES = [
    FileTooLongRule,
    ImportChaosRule,
    PrintDebuggingRule,
    TodoCommentRule,
    MagicNumberRule,
    CommentedCodeRule,
]
