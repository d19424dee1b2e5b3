"""Quality scoring — turns a finding list into a 0-100 score (higher is worse).

Each category's findings are converted to an issue density (per 1000
lines) and mapped through the category's thresholds onto a sub-score in
[0, 90]. The total is the weighted mean of the sub-scores.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Mapping, Optional

from smellscore.findings.models import Finding
from smellscore.scoring.categories import DEFAULT_CATEGORY_MAP, CategoryMap, Thresholds

MAX_CATEGORY_SCORE = 90.0
MAX_TOTAL_SCORE = 100.0


class QualityLevel(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    POOR = "poor"
    TERRIBLE = "terrible"

    @classmethod
    def from_score(cls, score: float) -> "QualityLevel":
        """Bucket a total score: 0-20, 21-40, 41-60, 61-80, 81-100."""
        whole = int(score)
        if whole <= 20:
            return cls.EXCELLENT
        if whole <= 40:
            return cls.GOOD
        if whole <= 60:
            return cls.AVERAGE
        if whole <= 80:
            return cls.POOR
        return cls.TERRIBLE

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def emoji(self) -> str:
        return _LEVEL_EMOJI[self]


_LEVEL_EMOJI = {
    QualityLevel.EXCELLENT: "🌱",
    QualityLevel.GOOD: "🌿",
    QualityLevel.AVERAGE: "🍂",
    QualityLevel.POOR: "🔥",
    QualityLevel.TERRIBLE: "☢️",
}


@dataclass(frozen=True)
class SeverityDistribution:
    mild: int = 0
    spicy: int = 0
    nuclear: int = 0

    @classmethod
    def of(cls, findings: Iterable[Finding]) -> "SeverityDistribution":
        counts = {"mild": 0, "spicy": 0, "nuclear": 0}
        for f in findings:
            if f.severity in counts:
                counts[f.severity] += 1
        return cls(**counts)

    @property
    def total(self) -> int:
        return self.mild + self.spicy + self.nuclear


@dataclass(frozen=True)
class Score:
    total_score: float
    category_scores: Mapping[str, float]
    quality_level: QualityLevel
    issue_density: float
    file_count: int
    total_lines: int
    severity_distribution: SeverityDistribution = field(default_factory=SeverityDistribution)
    scored_findings: int = 0
    unscored_findings: int = 0


def density(count: int, total_lines: int) -> float:
    """Findings per 1000 lines; 0 when there are no lines."""
    if total_lines <= 0:
        return 0.0
    return count / total_lines * 1000


def _interpolate(value: float, low: float, high: float, score_low: float, score_high: float) -> float:
    if high <= low:
        return score_high
    return score_low + (value - low) / (high - low) * (score_high - score_low)


def category_score(value: float, thresholds: Thresholds) -> float:
    """Map an issue density onto [0, 90] through the category's threshold bands."""
    t = thresholds
    if value <= t.excellent:
        return 0.0
    if value <= t.good:
        return _interpolate(value, t.excellent, t.good, 0.0, 20.0)
    if value <= t.average:
        return _interpolate(value, t.good, t.average, 20.0, 40.0)
    if value <= t.poor:
        return _interpolate(value, t.average, t.poor, 40.0, 60.0)
    return min(60.0 + 2.0 * (value - t.poor), MAX_CATEGORY_SCORE)


class QualityScorer:
    """Stateless scorer bound to one category map."""

    def __init__(self, category_map: CategoryMap = DEFAULT_CATEGORY_MAP) -> None:
        self.category_map = category_map

    def calculate_score(
        self,
        findings: Iterable[Finding],
        file_count: int,
        total_lines: int,
    ) -> Score:
        items = list(findings)
        cmap = self.category_map

        counts: Dict[str, int] = {name: 0 for name in cmap.names}
        scored = 0
        for f in items:
            cat = cmap.category_for(f.rule_id)
            if cat is None:
                continue
            counts[cat.name] += 1
            scored += 1

        category_scores: Dict[str, float] = {}
        weighted = 0.0
        weight_sum = 0.0
        for cat in cmap.categories:
            sub = category_score(density(counts[cat.name], total_lines), cat.thresholds)
            category_scores[cat.name] = sub
            weighted += sub * cat.weight
            weight_sum += cat.weight

        total = weighted / weight_sum if weight_sum > 0 and scored else 0.0
        total = min(max(total, 0.0), MAX_TOTAL_SCORE)

        return Score(
            total_score=total,
            category_scores=category_scores,
            quality_level=QualityLevel.from_score(total),
            issue_density=density(len(items), total_lines),
            file_count=file_count,
            total_lines=total_lines,
            severity_distribution=SeverityDistribution.of(items),
            scored_findings=scored,
            unscored_findings=len(items) - scored,
        )


def calculate_score(
    findings: Iterable[Finding],
    file_count: int,
    total_lines: int,
    category_map: Optional[CategoryMap] = None,
) -> Score:
    """Score *findings* with the default (or given) category map."""
    return QualityScorer(category_map or DEFAULT_CATEGORY_MAP).calculate_score(
        findings, file_count, total_lines
    )
