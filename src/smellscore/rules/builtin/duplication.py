"""Duplicate code detection inside a single file.

Two independent passes:

* **Lines** — every non-trivial line is canonicalized (trimmed, noise
  keywords neutralized, whitespace removed, lower-cased) and grouped; a
  group of 3+ identical lines is one finding at the first occurrence.
* **Blocks** — every statement block below module level is serialized with
  ``ast.dump`` (no positions), and blocks sharing the first 100
  non-whitespace characters of that dump are reported once, at line 1.

Grouping is by exact equality through a dict, so there is no pairwise
comparison and no fuzzy matching.
"""

from __future__ import annotations

import ast
import re
from typing import Dict, Iterable, Iterator, List, Sequence

from smellscore.config.schema import DuplicationConfig, Severity
from smellscore.findings.models import Finding
from smellscore.rules.models import Rule
from smellscore.source.models import SourceUnit

_TRIVIAL_LINES = frozenset({"{", "}", "(", ")", "[", "]", ";", ":", ","})
_COMMENT_PREFIXES = ("#",)
_BLOCK_FIELDS = ("body", "orelse", "finalbody", "handlers")
_WHITESPACE_RE = re.compile(r"\s+")


def line_severity(count: int) -> Severity:
    if count >= 5:
        return "nuclear"
    if count >= 4:
        return "spicy"
    return "mild"


class LineNormalizer:
    """Canonical form for line comparison; the neutralized keywords are pluggable."""

    def __init__(self, neutralized_keywords: Iterable[str] = ()) -> None:
        words = sorted({w for w in neutralized_keywords if w}, key=len, reverse=True)
        self._keyword_re = (
            re.compile(r"\b(?:" + "|".join(re.escape(w) for w in words) + r")\b")
            if words
            else None
        )

    def __call__(self, line: str) -> str:
        canonical = line.strip()
        if self._keyword_re is not None:
            canonical = self._keyword_re.sub("", canonical)
        return _WHITESPACE_RE.sub("", canonical).lower()


def is_ignorable_line(stripped: str, min_length: int) -> bool:
    return (
        not stripped
        or stripped.startswith(_COMMENT_PREFIXES)
        or len(stripped) < min_length
        or stripped in _TRIVIAL_LINES
    )


def group_duplicate_lines(
    lines: Sequence[str],
    normalizer: LineNormalizer,
    min_length: int = 10,
    min_occurrences: int = 3,
) -> List[List[int]]:
    """Return 1-based line-number groups of size >= *min_occurrences*."""
    groups: Dict[str, List[int]] = {}
    for line_no, line in enumerate(lines, 1):
        stripped = line.strip()
        if is_ignorable_line(stripped, min_length):
            continue
        groups.setdefault(normalizer(stripped), []).append(line_no)
    return [nums for nums in groups.values() if len(nums) >= min_occurrences]


def iter_blocks(tree: ast.AST) -> Iterator[List[ast.stmt]]:
    """Yield every non-empty statement list nested below the module body."""
    for node in ast.walk(tree):
        if isinstance(node, ast.Module):
            continue
        for name in _BLOCK_FIELDS:
            value = getattr(node, name, None)
            if isinstance(value, list) and value and all(isinstance(s, ast.AST) for s in value):
                yield value


def serialize_block(block: Sequence[ast.AST]) -> str:
    return "[" + ", ".join(ast.dump(stmt, annotate_fields=False) for stmt in block) + "]"


def block_signature(serialized: str, length: int = 100) -> str:
    return "".join(ch for ch in serialized if not ch.isspace())[:length].lower()


def group_duplicate_blocks(
    tree: ast.AST,
    min_block_size: int = 50,
    signature_length: int = 100,
) -> List[int]:
    """Return the size of every signature group shared by two or more blocks."""
    signatures: Dict[str, int] = {}
    for block in iter_blocks(tree):
        serialized = serialize_block(block)
        if len(serialized) <= min_block_size:
            continue
        sig = block_signature(serialized, signature_length)
        signatures[sig] = signatures.get(sig, 0) + 1
    return [count for count in signatures.values() if count >= 2]


class CodeDuplicationRule(Rule):
    id = "code-duplication"
    name = "Code Duplication"
    description = "Detects repeated lines and structurally identical blocks within a file."

    def __init__(self, config: DuplicationConfig | None = None) -> None:
        super().__init__()
        self.config = config or DuplicationConfig()
        self.normalizer = LineNormalizer(self.config.neutralized_keywords)

    def collect(self, unit: SourceUnit, findings: List[Finding]) -> None:
        cfg = self.config
        line_groups = group_duplicate_lines(
            unit.lines, self.normalizer, cfg.min_line_length, cfg.min_occurrences
        )
        for nums in sorted(line_groups):
            findings.append(
                self.finding(
                    unit,
                    f"Line repeated {len(nums)} times (first at line {nums[0]}); "
                    "extract it into a function",
                    line_severity(len(nums)),
                    line=nums[0],
                )
            )

        for count in group_duplicate_blocks(
            unit.tree, cfg.min_block_size, cfg.block_signature_length
        ):
            findings.append(
                self.finding(
                    unit,
                    f"{count} structurally similar code blocks; consider a shared helper",
                    "spicy",
                    line=1,
                )
            )
