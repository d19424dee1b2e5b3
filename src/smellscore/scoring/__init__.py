"""Category map and quality scorer."""

from smellscore.scoring.categories import (
    DEFAULT_CATEGORIES,
    DEFAULT_CATEGORY_MAP,
    Category,
    CategoryMap,
    Thresholds,
)
from smellscore.scoring.scorer import (
    QualityLevel,
    QualityScorer,
    Score,
    SeverityDistribution,
    calculate_score,
    category_score,
    density,
)

__all__ = [
    "Category",
    "CategoryMap",
    "DEFAULT_CATEGORIES",
    "DEFAULT_CATEGORY_MAP",
    "QualityLevel",
    "QualityScorer",
    "Score",
    "SeverityDistribution",
    "Thresholds",
    "calculate_score",
    "category_score",
    "density",
]
