"""Rule contract — one ``check`` per rule, plus the text-pattern rule used for custom rules."""

from __future__ import annotations

import ast
import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from smellscore.config.schema import Severity
from smellscore.findings.models import Finding, Location
from smellscore.source.models import SourceUnit

logger = logging.getLogger(__name__)

# Errors a visitor may hit on an AST shape it was not written for.
RECOVERABLE_ERRORS = (AttributeError, TypeError, ValueError, RecursionError)


def in_source_order(nodes: Iterable[ast.AST]) -> List[ast.AST]:
    """Sort nodes by position; ``ast.walk`` yields them breadth-first."""
    return sorted(nodes, key=lambda n: (getattr(n, "lineno", 0), getattr(n, "col_offset", 0)))


class Rule:
    """Base class for detectors.

    Subclasses set ``id``/``name``/``description`` and implement
    :meth:`collect`, appending to the list they are given. Anything a rule
    needs while walking a file must live inside that call: the same rule
    instance is shared across files and threads.
    """

    id: str = ""
    name: str = ""
    description: str = ""

    def __init__(self) -> None:
        self.enabled = True

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, enabled={self.enabled})"

    def check(self, unit: SourceUnit) -> List[Finding]:
        """Return this rule's findings for *unit*; an unparsed unit has none."""
        if unit.tree is None:
            return []
        findings: List[Finding] = []
        try:
            self.collect(unit, findings)
        except RECOVERABLE_ERRORS as exc:
            logger.debug("%s stopped early on %s: %s", self.id, unit.path, exc)
        return findings

    def collect(self, unit: SourceUnit, findings: List[Finding]) -> None:
        raise NotImplementedError

    def finding(
        self,
        unit: SourceUnit,
        message: str,
        severity: Severity,
        node: Optional[ast.AST] = None,
        line: Optional[int] = None,
    ) -> Finding:
        """Build a Finding, taking the position from *node* when given."""
        column = 1
        if node is not None:
            line = getattr(node, "lineno", line)
            column = getattr(node, "col_offset", 0) + 1
        return Finding(
            location=Location(file=unit.path, line=max(line or 1, 1), column=max(column, 1)),
            rule_id=self.id,
            message=message,
            severity=severity,
        )


@dataclass(eq=False)
class PatternRule(Rule):
    """A line-regex rule, typically loaded from ``.smellscore-rules/*.yaml``.

    ``pattern`` is stored as a raw string so the rule remains serialisable.
    The compiled regex is built lazily on first access via ``compiled_pattern``.
    """

    id: str = ""
    name: str = ""
    description: str = ""
    pattern: str = ""
    severity: Severity = "mild"
    category: Optional[str] = None
    enabled: bool = True

    _compiled_pattern: Optional[re.Pattern[str]] = field(
        default=None, init=False, repr=False, compare=False
    )

    @property
    def compiled_pattern(self) -> re.Pattern[str]:
        if self._compiled_pattern is None:
            self._compiled_pattern = re.compile(self.pattern)
        return self._compiled_pattern

    def collect(self, unit: SourceUnit, findings: List[Finding]) -> None:
        for line_no, content in enumerate(unit.lines, 1):
            m = self.compiled_pattern.search(content)
            if m is None:
                continue
            findings.append(
                Finding(
                    location=Location(unit.path, line_no, m.start() + 1),
                    rule_id=self.id,
                    message=self.description or f"Matched {self.name or self.id}",
                    severity=self.severity,
                )
            )
