"""Scanner — rule engine, analysis pipeline, suppression."""

from smellscore.scanner.engine import (
    AnalysisError,
    RuleEngine,
    analyze_file,
    analyze_path,
    build_category_map,
    relative_path,
    select_files,
)
from smellscore.scanner.suppression import SmellScoreIgnore, Suppression, SuppressionChecker

__all__ = [
    "AnalysisError",
    "RuleEngine",
    "SmellScoreIgnore",
    "Suppression",
    "SuppressionChecker",
    "analyze_file",
    "analyze_path",
    "build_category_map",
    "relative_path",
    "select_files",
]
