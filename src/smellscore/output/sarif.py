"""SARIF v2.1.0 reporter — GitHub Code Scanning and other SARIF viewers."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from smellscore import __version__
from smellscore.findings.aggregator import sort_findings
from smellscore.findings.models import AnalysisResult
from smellscore.rules.registry import RuleRegistry

SARIF_SCHEMA = "https://json.schemastore.org/sarif-2.1.0.json"

_SEVERITY_MAP = {
    "nuclear": "error",
    "spicy": "warning",
    "mild": "note",
}


def to_dict(result: AnalysisResult, registry: Optional[RuleRegistry] = None) -> Dict[str, Any]:
    """Convert AnalysisResult to a SARIF v2.1.0 dict.

    *registry*, when given, supplies rule names and descriptions for the
    driver's rule table; otherwise the rule id stands in for both.
    """
    rules: List[Dict[str, Any]] = []
    seen_rules: set[str] = set()
    results: List[Dict[str, Any]] = []

    for f in sort_findings(result.findings):
        # Rule definition (only once per rule_id)
        if f.rule_id not in seen_rules:
            seen_rules.add(f.rule_id)
            rule = registry.get(f.rule_id) if registry is not None else None
            rules.append({
                "id": f.rule_id,
                "name": (rule.name if rule else "") or f.rule_id,
                "shortDescription": {"text": (rule.name if rule else "") or f.rule_id},
                "fullDescription": {"text": (rule.description if rule else "") or f.rule_id},
                "defaultConfiguration": {
                    "level": _SEVERITY_MAP.get(f.severity, "warning"),
                },
            })

        results.append({
            "ruleId": f.rule_id,
            "level": _SEVERITY_MAP.get(f.severity, "warning"),
            "message": {"text": f.message},
            "locations": [
                {
                    "physicalLocation": {
                        "artifactLocation": {"uri": f.file},
                        "region": {
                            "startLine": max(f.line, 1),
                            "startColumn": max(f.column, 1),
                        },
                    }
                }
            ],
        })

    run: Dict[str, Any] = {
        "tool": {
            "driver": {
                "name": "smellscore",
                "version": __version__,
                "rules": rules,
            }
        },
        "results": results,
    }
    if result.score is not None:
        run["properties"] = {
            "totalScore": round(result.score.total_score, 2),
            "qualityLevel": result.score.quality_level.value,
        }

    return {
        "$schema": SARIF_SCHEMA,
        "version": "2.1.0",
        "runs": [run],
    }


def render(result: AnalysisResult, registry: Optional[RuleRegistry] = None) -> str:
    """Return SARIF JSON string."""
    return json.dumps(to_dict(result, registry), indent=2)
