"""Core analysis engine — runs every rule over every file, then scores.

Files are analyzed independently on a thread pool; rules keep their
per-file state inside ``check`` so one instance serves all workers. The
scorer runs once, after the last file is done.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from smellscore.config.loader import ConfigError
from smellscore.config.schema import SmellScoreConfig
from smellscore.findings.models import AnalysisResult, Finding
from smellscore.rules.models import Rule
from smellscore.rules.registry import RuleRegistry
from smellscore.scanner.suppression import (
    IGNORE_FILENAME,
    SmellScoreIgnore,
    Suppression,
    SuppressionChecker,
)
from smellscore.scoring.categories import DEFAULT_CATEGORY_MAP, CategoryMap
from smellscore.scoring.scorer import QualityScorer
from smellscore.source.loader import discover_files, load_source
from smellscore.source.models import SourceSkipped, SourceUnit

logger = logging.getLogger(__name__)


class AnalysisError(Exception):
    """Raised when an analysis cannot start (e.g. the target does not exist)."""


class RuleEngine:
    """Runs an ordered set of rules over one source unit at a time."""

    def __init__(self, rules: Sequence[Rule] = ()) -> None:
        self.rules: Tuple[Rule, ...] = tuple(rules)

    def check(self, unit: SourceUnit) -> List[Finding]:
        """Return every rule's findings for *unit*, concatenated in rule order."""
        if unit.tree is None:
            return []
        findings: List[Finding] = []
        for rule in self.rules:
            try:
                findings.extend(rule.check(unit))
            except Exception as exc:
                logger.warning("Rule %s failed on %s: %s", rule.id, unit.path, exc)
        return findings


_FileOutcome = Tuple[Union[SourceUnit, SourceSkipped], List[Finding], List[Suppression]]


def build_category_map(
    config: SmellScoreConfig,
    registry: Optional[RuleRegistry] = None,
) -> CategoryMap:
    """Default categories extended by custom rules and ``[scoring] rule_categories``."""
    extra = dict(registry.custom_categories()) if registry is not None else {}
    extra.update(config.scoring.rule_categories)
    if not extra:
        return DEFAULT_CATEGORY_MAP
    try:
        return DEFAULT_CATEGORY_MAP.with_extra(extra)
    except ValueError as exc:
        raise ConfigError(f"Invalid rule category mapping: {exc}") from exc


def relative_path(path: Path, root: Path) -> str:
    """*path* relative to the analysis base, the directory ignore globs are written against."""
    base = root if root.is_dir() else root.parent
    return path.relative_to(base).as_posix()


def select_files(root: Path, config: SmellScoreConfig) -> Tuple[List[Path], SmellScoreIgnore]:
    """Files an analysis of *root* reads, plus the .smellscoreignore that applies to them."""
    base = root if root.is_dir() else root.parent
    ignorefile = SmellScoreIgnore.from_file(base / IGNORE_FILENAME)
    exclude = config.analysis.exclude + config.ignore.files + ignorefile.patterns
    return discover_files(root, config.analysis.extensions, exclude), ignorefile


def analyze_file(
    path: Path,
    display_path: str,
    engine: RuleEngine,
    *,
    max_size_kb: Optional[int] = None,
    ignorefile: Optional[SmellScoreIgnore] = None,
) -> _FileOutcome:
    """Load, check, and filter one file through inline and file-level suppressions."""
    unit = load_source(path, display_path, max_size_kb=max_size_kb)
    if isinstance(unit, SourceSkipped):
        return unit, [], []

    raw = engine.check(unit)
    if not raw:
        return unit, [], []

    checker = SuppressionChecker()
    checker.register_lines(unit.path, unit.lines)

    kept: List[Finding] = []
    suppressed: List[Suppression] = []
    for f in raw:
        sup = checker.is_suppressed(f.file, f.line, f.rule_id)
        if sup is None and ignorefile is not None:
            sup = ignorefile.rule_suppression(f.file, f.line, f.rule_id)
        if sup is not None:
            suppressed.append(sup)
        else:
            kept.append(f)
    return unit, kept, suppressed


def analyze_path(
    root: Path,
    config: SmellScoreConfig,
    registry: RuleRegistry,
    category_map: Optional[CategoryMap] = None,
) -> AnalysisResult:
    """Execute the full pipeline on *root* (a file or directory)."""
    start = time.perf_counter()

    if not root.exists():
        raise AnalysisError(f"Path does not exist: {root}")

    cmap = category_map or build_category_map(config, registry)

    paths, ignorefile = select_files(root, config)
    engine = RuleEngine(registry.enabled_rules())
    logger.info("Analyzing %d file(s) with %d rule(s)", len(paths), len(engine.rules))

    workers = config.analysis.workers or None  # None = executor default

    def work(path: Path) -> _FileOutcome:
        return analyze_file(
            path,
            relative_path(path, root),
            engine,
            max_size_kb=config.analysis.max_file_size_kb,
            ignorefile=ignorefile,
        )

    with ThreadPoolExecutor(max_workers=workers) as pool:
        outcomes = list(pool.map(work, paths))

    result = AnalysisResult()
    for unit, findings, suppressed in outcomes:
        if isinstance(unit, SourceSkipped):
            result.skipped_files.append(f"{unit.path} ({unit.reason})")
            continue
        if unit.tree is None:
            result.unparsed_files.append(unit.path)
            if not unit.text:
                continue  # unreadable: nothing to count
        result.file_count += 1
        result.total_lines += unit.line_count
        result.findings.extend(findings)
        result.suppressed.extend(suppressed)

    result.score = QualityScorer(cmap).calculate_score(
        result.findings, result.file_count, result.total_lines
    )
    result.duration_ms = round((time.perf_counter() - start) * 1000, 2)
    return result
