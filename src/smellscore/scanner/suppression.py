"""Inline suppression and .smellscoreignore support.

Suppression conventions (same shape as pylint/flake8):
  - ``# smellscore: ignore`` on line N suppresses ALL rules on line N.
  - ``# smellscore: ignore`` as a standalone comment on line N also
    suppresses line N+1.
  - ``# smellscore: ignore[rule-a, rule-b]`` suppresses only those rules.
  - ``# noqa: smellscore`` is an alias for ``# smellscore: ignore``.

.smellscoreignore file format:
  - One path glob per line, relative to the analysis root.
  - Lines starting with ``#`` are comments.
  - ``rule:RULE_ID path/glob`` scopes an ignore to a specific rule.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from fnmatch import fnmatch
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

IGNORE_FILENAME = ".smellscoreignore"

_SUPPRESS_RE = re.compile(
    r"#\s*(?:smellscore:\s*ignore\b(?:\[([A-Za-z0-9_,\-\s]+)\])?|noqa:\s*smellscore\b)"
)

_Entry = Tuple[bool, Optional[FrozenSet[str]]]


@dataclass(frozen=True)
class Suppression:
    """Audit record of a suppressed finding."""

    rule_id: str
    file: str
    line: int
    source: str  # e.g. '# smellscore: ignore[magic-number]' or '.smellscoreignore:3'


def parse_inline_suppression(line_content: str) -> _Entry:
    """Parse a line for ``# smellscore: ignore`` / ``# noqa: smellscore``.

    Returns:
        (is_suppressed, rule_ids) where *rule_ids* is None to suppress all
        rules, or a frozenset of specific ids.
    """
    m = _SUPPRESS_RE.search(line_content)
    if m is None:
        return False, None
    scope = m.group(1)
    if scope:
        ids = frozenset(r.strip() for r in scope.split(",") if r.strip())
        return True, ids
    return True, None


def is_pure_comment(line_content: str) -> bool:
    """Return True if the line holds nothing but a comment."""
    return line_content.strip().startswith("#")


class SuppressionChecker:
    """Decide whether a finding is silenced by an inline comment.

    Lines are registered per file up front so a standalone suppression
    comment can cover the line after it.
    """

    def __init__(self) -> None:
        # file -> line -> (suppressed, specific_rules)
        self._line_suppressions: Dict[str, Dict[int, _Entry]] = {}

    def register_lines(self, file: str, lines: Sequence[str]) -> None:
        """Pre-scan the full text of *file* (in order) for suppression markers."""
        mapping: Dict[int, _Entry] = {}
        pending: Optional[_Entry] = None

        for line_no, content in enumerate(lines, 1):
            is_suppressed, rule_ids = parse_inline_suppression(content)

            if is_suppressed:
                mapping[line_no] = _merge(mapping.get(line_no), (True, rule_ids))
                pending = (True, rule_ids) if is_pure_comment(content) else None
                continue

            if pending is not None:
                mapping[line_no] = _merge(mapping.get(line_no), pending)
            pending = None

        if mapping:
            self._line_suppressions[file] = mapping

    def is_suppressed(self, file: str, line: int, rule_id: str) -> Optional[Suppression]:
        """Return a Suppression record if the finding should be suppressed, else None."""
        entry = self._line_suppressions.get(file, {}).get(line)
        if entry is None:
            return None
        _, specific_ids = entry
        if specific_ids is None:
            return Suppression(rule_id, file, line, "# smellscore: ignore")
        if rule_id in specific_ids:
            return Suppression(rule_id, file, line, f"# smellscore: ignore[{rule_id}]")
        return None


def _merge(existing: Optional[_Entry], new: _Entry) -> _Entry:
    if existing is None:
        return new
    if existing[1] is None or new[1] is None:
        return True, None
    return True, existing[1] | new[1]


class SmellScoreIgnore:
    """Parse and evaluate a .smellscoreignore file."""

    def __init__(self) -> None:
        self._global_patterns: List[Tuple[str, int]] = []
        self._rule_patterns: Dict[str, List[Tuple[str, int]]] = {}  # rule_id -> [(glob, line)]

    @classmethod
    def from_file(cls, path: Path) -> "SmellScoreIgnore":
        instance = cls()
        if not path.is_file():
            return instance
        with open(path, encoding="utf-8") as f:
            for line_no, raw in enumerate(f, 1):
                line = raw.strip()
                if not line or line.startswith("#"):
                    continue
                # rule-scoped: "rule:RULE_ID path/glob"
                if line.startswith("rule:"):
                    parts = line.split(None, 1)
                    if len(parts) == 2:
                        rule_id = parts[0].removeprefix("rule:")
                        instance._rule_patterns.setdefault(rule_id, []).append((parts[1], line_no))
                    continue
                instance._global_patterns.append((line, line_no))
        return instance

    @property
    def patterns(self) -> List[str]:
        return [pat for pat, _ in self._global_patterns]

    def is_ignored(self, filepath: str) -> bool:
        """Return True if *filepath* is ignored for every rule."""
        return any(fnmatch(filepath, pat) for pat, _ in self._global_patterns)

    def rule_suppression(self, filepath: str, line: int, rule_id: str) -> Optional[Suppression]:
        """Return a Suppression if *rule_id* is ignored for *filepath*."""
        for pat, source_line in self._rule_patterns.get(rule_id, []):
            if fnmatch(filepath, pat):
                return Suppression(rule_id, filepath, line, f"{IGNORE_FILENAME}:{source_line}")
        return None
