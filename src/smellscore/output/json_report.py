"""JSON reporter for CI pipelines."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from smellscore import __version__
from smellscore.findings.aggregator import sort_findings
from smellscore.findings.models import AnalysisResult
from smellscore.scoring.scorer import Score


def score_to_dict(score: Optional[Score]) -> Optional[Dict[str, Any]]:
    if score is None:
        return None
    dist = score.severity_distribution
    return {
        "total": round(score.total_score, 2),
        "quality_level": score.quality_level.value,
        "issue_density": round(score.issue_density, 3),
        "categories": {name: round(v, 2) for name, v in score.category_scores.items()},
        "severity_distribution": {
            "mild": dist.mild,
            "spicy": dist.spicy,
            "nuclear": dist.nuclear,
        },
        "scored_findings": score.scored_findings,
        "unscored_findings": score.unscored_findings,
    }


def to_dict(result: AnalysisResult) -> Dict[str, Any]:
    """Convert AnalysisResult to a JSON-serialisable dict."""
    findings_list: List[Dict[str, Any]] = []
    for f in sort_findings(result.findings):
        findings_list.append({
            "rule": f.rule_id,
            "severity": f.severity,
            "file": f.file,
            "line": f.line,
            "column": f.column,
            "message": f.message,
        })

    suppressed_list: List[Dict[str, Any]] = []
    for s in result.suppressed:
        suppressed_list.append({
            "rule": s.rule_id,
            "file": s.file,
            "line": s.line,
            "source": s.source,
        })

    return {
        "version": __version__,
        "file_count": result.file_count,
        "total_lines": result.total_lines,
        "score": score_to_dict(result.score),
        "total_findings": result.total_findings,
        "findings": findings_list,
        "suppressed": len(result.suppressed),
        "suppressed_details": suppressed_list,
        "skipped_files": result.skipped_files,
        "unparsed_files": result.unparsed_files,
        "duration_ms": result.duration_ms,
    }


def render(result: AnalysisResult) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(result), indent=2)
