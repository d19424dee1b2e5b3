"""Finding models and aggregation."""

from smellscore.findings.aggregator import (
    filter_by_severity,
    group_by_file,
    sort_findings,
    worst_files,
)
from smellscore.findings.models import AnalysisResult, Finding, Location

__all__ = [
    "AnalysisResult",
    "Finding",
    "Location",
    "filter_by_severity",
    "group_by_file",
    "sort_findings",
    "worst_files",
]
