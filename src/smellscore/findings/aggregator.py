"""Finding ordering, grouping, and severity filtering for reporters."""

from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from smellscore.config.schema import SEVERITY_ORDER, severity_at_or_above
from smellscore.findings.models import Finding


def _sort_key(f: Finding) -> Tuple[str, int, int, str, int]:
    return (f.file, f.line, f.column, f.rule_id, SEVERITY_ORDER.get(f.severity, 0))


def sort_findings(findings: Iterable[Finding]) -> List[Finding]:
    """Return findings in a stable display order, independent of rule order."""
    return sorted(findings, key=_sort_key)


def group_by_file(findings: Iterable[Finding]) -> Dict[str, List[Finding]]:
    """Group findings per file; each group is in display order."""
    grouped: Dict[str, List[Finding]] = {}
    for f in sort_findings(findings):
        grouped.setdefault(f.file, []).append(f)
    return grouped


def filter_by_severity(findings: Iterable[Finding], minimum: str) -> List[Finding]:
    """Keep only findings at or above *minimum* severity."""
    return [f for f in findings if severity_at_or_above(f.severity, minimum)]


def worst_files(findings: Iterable[Finding], top: int) -> List[Tuple[str, List[Finding]]]:
    """Return the *top* files ranked by nuclear, then spicy, then total count.

    Ties are broken by path so the ranking is reproducible.
    """
    grouped = group_by_file(findings)

    def rank(item: Tuple[str, List[Finding]]):
        path, items = item
        nuclear = sum(1 for f in items if f.severity == "nuclear")
        spicy = sum(1 for f in items if f.severity == "spicy")
        return (-nuclear, -spicy, -len(items), path)

    ranked = sorted(grouped.items(), key=rank)
    return ranked[: max(top, 0)]
