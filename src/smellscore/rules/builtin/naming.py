"""Naming rules — generic, single-letter, placeholder, hungarian, abbreviated names.

All five rules look at the same set of *defined* names: functions, classes,
arguments, and assignment / loop / ``with`` targets. Each distinct name is
reported once per file, at its first definition.
"""

from __future__ import annotations

import ast
import re
from typing import Dict, Iterator, List, Optional, Set, Tuple

from smellscore.config.schema import Severity
from smellscore.findings.models import Finding
from smellscore.rules.models import Rule
from smellscore.source.models import SourceUnit

GENERIC_NAME_RE = re.compile(
    r"^(?:data|info|temp|tmp|val|value|item|thing|stuff|obj|object|manager|"
    r"handler|helper|util|utils|test|func|function)\d*$"
)
ALLOWED_SINGLE_LETTERS = frozenset("ijkxyz_")
PLACEHOLDER_NAMES: Dict[str, Severity] = {
    "foo": "spicy",
    "bar": "spicy",
    "baz": "spicy",
    "qux": "mild",
    "quux": "mild",
    "quuz": "mild",
    "example": "mild",
    "sample": "mild",
    "processor": "mild",
    "controller": "mild",
}
HUNGARIAN_RE = re.compile(
    r"^(?:(?:str|int|bool|float|lst|arr|dict|set|sz)(?:_[a-z0-9]|[A-Z])|[gmsp]_[a-z])"
)
ABBREVIATIONS = frozenset(
    {"mgr", "ctrl", "hdlr", "usr", "pwd", "cfg", "btn", "lbl", "txt", "tbl", "cnt", "calc"}
)


def iter_defined_names(tree: ast.AST) -> Iterator[Tuple[str, ast.AST, str]]:
    """Yield ``(name, node, kind)`` for every name a file defines.

    *kind* is one of ``function``, ``class``, ``argument``, ``variable``.
    """
    for node in ast.walk(tree):
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            yield node.name, node, "function"
        elif isinstance(node, ast.ClassDef):
            yield node.name, node, "class"
        elif isinstance(node, ast.arg):
            if node.arg not in ("self", "cls"):
                yield node.arg, node, "argument"
        elif isinstance(node, ast.Name) and isinstance(node.ctx, ast.Store):
            yield node.id, node, "variable"


def _position(node: ast.AST) -> Tuple[int, int]:
    return getattr(node, "lineno", 1), getattr(node, "col_offset", 0)


class _NameRule(Rule):
    """Shared walk for the naming rules: judge each distinct name once."""

    def collect(self, unit: SourceUnit, findings: List[Finding]) -> None:
        seen: Set[str] = set()
        # ast.walk is breadth-first; report in source order instead
        for name, node, kind in sorted(
            iter_defined_names(unit.tree), key=lambda item: _position(item[1])
        ):
            if name in seen:
                continue
            seen.add(name)
            verdict = self.judge(name, kind)
            if verdict is not None:
                message, severity = verdict
                findings.append(self.finding(unit, message, severity, node=node))

    def judge(self, name: str, kind: str) -> Optional[Tuple[str, Severity]]:
        raise NotImplementedError


class TerribleNamingRule(_NameRule):
    id = "terrible-naming"
    name = "Terrible Naming"
    description = "Names so generic they say nothing about what they hold."

    def judge(self, name: str, kind: str) -> Optional[Tuple[str, Severity]]:
        if kind == "class":
            return None
        if GENERIC_NAME_RE.match(name.strip("_").lower()):
            return f"{kind.capitalize()} name '{name}' is too generic to mean anything", "spicy"
        return None


class SingleLetterVariableRule(_NameRule):
    id = "single-letter-variable"
    name = "Single-Letter Variable"
    description = "Single-letter names outside the usual loop and coordinate idioms."

    def judge(self, name: str, kind: str) -> Optional[Tuple[str, Severity]]:
        if kind not in ("variable", "argument"):
            return None
        if len(name) == 1 and name not in ALLOWED_SINGLE_LETTERS:
            return f"Single-letter {kind} '{name}'", "mild"
        return None


class MeaninglessNamingRule(_NameRule):
    id = "meaningless-naming"
    name = "Meaningless Naming"
    description = "Placeholder names such as foo, bar or baz left in real code."

    def judge(self, name: str, kind: str) -> Optional[Tuple[str, Severity]]:
        severity = PLACEHOLDER_NAMES.get(name.strip("_").lower())
        if severity is None:
            return None
        return f"Placeholder name '{name}'", severity


class HungarianNotationRule(_NameRule):
    id = "hungarian-notation"
    name = "Hungarian Notation"
    description = "Type or scope prefixes baked into variable names."

    def judge(self, name: str, kind: str) -> Optional[Tuple[str, Severity]]:
        if kind not in ("variable", "argument"):
            return None
        if HUNGARIAN_RE.match(name):
            return f"'{name}' encodes its type or scope in the name", "mild"
        return None


class AbbreviationAbuseRule(_NameRule):
    id = "abbreviation-abuse"
    name = "Abbreviation Abuse"
    description = "Cryptic abbreviations like mgr, cfg or btn in names."

    def judge(self, name: str, kind: str) -> Optional[Tuple[str, Severity]]:
        lowered = name.lower()
        head = lowered.split("_", 1)[0]
        if lowered in ABBREVIATIONS or ("_" in lowered and head in ABBREVIATIONS):
            return f"'{name}' relies on a cryptic abbreviation", "mild"
        return None


ALL_NAMING_RULES = [
    TerribleNamingRule,
    SingleLetterVariableRule,
    MeaninglessNamingRule,
    HungarianNotationRule,
    AbbreviationAbuseRule,
]
