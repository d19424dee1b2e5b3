"""Finding data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

from smellscore.config.schema import Severity

if TYPE_CHECKING:
    from smellscore.scanner.suppression import Suppression
    from smellscore.scoring.scorer import Score


@dataclass(frozen=True, slots=True)
class Location:
    """1-based position of a finding. Column defaults to 1 when unknown."""

    file: str
    line: int = 1
    column: int = 1


@dataclass(frozen=True)
class Finding:
    """A single issue reported by a rule. Immutable once created."""

    location: Location
    rule_id: str
    message: str
    severity: Severity

    @property
    def file(self) -> str:
        return self.location.file

    @property
    def line(self) -> int:
        return self.location.line

    @property
    def column(self) -> int:
        return self.location.column


@dataclass
class AnalysisResult:
    """Complete result of an analysis run."""

    findings: List[Finding] = field(default_factory=list)
    suppressed: List["Suppression"] = field(default_factory=list)
    skipped_files: List[str] = field(default_factory=list)
    unparsed_files: List[str] = field(default_factory=list)
    file_count: int = 0
    total_lines: int = 0
    duration_ms: float = 0.0
    score: Optional["Score"] = None

    @property
    def total_findings(self) -> int:
        return len(self.findings)
