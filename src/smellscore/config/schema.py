"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional

Severity = Literal["mild", "spicy", "nuclear"]

SEVERITY_ORDER: dict[str, int] = {
    "mild": 0,
    "spicy": 1,
    "nuclear": 2,
}

OUTPUT_FORMATS = ("terminal", "json", "sarif")


def severity_at_or_above(finding_sev: str, threshold: str) -> bool:
    """Return True if *finding_sev* is at or above *threshold*."""
    return SEVERITY_ORDER.get(finding_sev, 0) >= SEVERITY_ORDER.get(threshold, 0)


@dataclass
class AnalysisConfig:
    exclude: List[str] = field(default_factory=list)  # globs, relative to the analysis root
    extensions: List[str] = field(default_factory=lambda: [".py"])
    max_file_size_kb: int = 1024
    workers: int = 0  # 0 = let the thread pool decide


@dataclass
class OutputConfig:
    format: Literal["terminal", "json", "sarif"] = "terminal"
    show_summary: bool = True
    top_files: int = 5
    issues_per_file: int = 5
    min_severity: Severity = "mild"


@dataclass
class RulesConfig:
    enable: List[str] = field(default_factory=list)  # empty = all enabled
    disable: List[str] = field(default_factory=list)


@dataclass
class DuplicationConfig:
    min_line_length: int = 10
    min_occurrences: int = 3
    neutralized_keywords: List[str] = field(
        default_factory=lambda: ["async", "await", "global", "nonlocal"]
    )
    min_block_size: int = 50
    block_signature_length: int = 100


@dataclass
class IgnoreConfig:
    files: List[str] = field(default_factory=list)
    rules: List[str] = field(default_factory=list)


@dataclass
class ScoringConfig:
    fail_above: Optional[float] = None  # exit 1 when total_score exceeds this
    rule_categories: Dict[str, str] = field(default_factory=dict)  # rule_id -> category


@dataclass
class SmellScoreConfig:
    version: str = "1.0"
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    rules: RulesConfig = field(default_factory=RulesConfig)
    duplication: DuplicationConfig = field(default_factory=DuplicationConfig)
    ignore: IgnoreConfig = field(default_factory=IgnoreConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
