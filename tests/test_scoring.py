"""Tests for the quality scorer and category map."""

import random

import pytest

from conftest import make_finding
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
    calculate_score,
    category_score,
    density,
)

NAMING = Thresholds(0.0, 3.0, 8.0, 15.0)


class TestDensity:
    def test_per_thousand_lines(self):
        assert density(6, 1000) == 6.0
        assert density(1, 500) == 2.0

    def test_zero_lines(self):
        assert density(5, 0) == 0.0


class TestCategoryScore:
    def test_excellent_band(self):
        assert category_score(0.0, NAMING) == 0.0

    def test_band_boundaries(self):
        assert category_score(3.0, NAMING) == pytest.approx(20.0)
        assert category_score(8.0, NAMING) == pytest.approx(40.0)
        assert category_score(15.0, NAMING) == pytest.approx(60.0)

    def test_interpolates_inside_band(self):
        assert category_score(1.5, NAMING) == pytest.approx(10.0)
        assert category_score(6.0, NAMING) == pytest.approx(32.0)

    def test_beyond_poor_grows_then_caps(self):
        assert category_score(20.0, NAMING) == pytest.approx(70.0)
        assert category_score(1_000.0, NAMING) == 90.0

    def test_always_in_range(self):
        for value in (0.0, 0.01, 0.5, 2.9, 7.5, 14.99, 15.01, 50.0, 10_000.0):
            for cat in DEFAULT_CATEGORIES:
                assert 0.0 <= category_score(value, cat.thresholds) <= 90.0

    def test_monotonic_in_density(self):
        values = [x / 4 for x in range(0, 200)]
        scores = [category_score(v, NAMING) for v in values]
        assert scores == sorted(scores)

    def test_zero_width_band(self):
        flat = Thresholds(0.0, 0.0, 2.0, 4.0)
        assert category_score(0.5, flat) == pytest.approx(25.0)


class TestCalculateScore:
    def test_no_findings_is_excellent(self):
        score = calculate_score([], file_count=3, total_lines=450)
        assert score.total_score == 0.0
        assert score.quality_level is QualityLevel.EXCELLENT
        assert all(v == 0.0 for v in score.category_scores.values())

    def test_zero_lines_never_divides(self):
        findings = [make_finding("terrible-naming")] * 4
        score = calculate_score(findings, file_count=0, total_lines=0)
        assert score.total_score == 0.0
        assert score.issue_density == 0.0
        assert set(score.category_scores) == set(DEFAULT_CATEGORY_MAP.names)

    def test_naming_only_project(self):
        findings = [make_finding("terrible-naming", line=n) for n in range(1, 7)]
        score = calculate_score(findings, file_count=1, total_lines=1000)
        naming = score.category_scores["naming"]
        assert 20.0 < naming < 40.0
        assert score.total_score == pytest.approx(naming * 0.25)
        assert score.quality_level is QualityLevel.EXCELLENT

    def test_every_category_reported(self):
        score = calculate_score([make_finding("deep-nesting")], 1, 100)
        assert list(score.category_scores) == list(DEFAULT_CATEGORY_MAP.names)

    def test_unmapped_rules_are_not_scored(self):
        findings = [make_finding("todo-comment"), make_finding("print-debugging")]
        score = calculate_score(findings, file_count=1, total_lines=10)
        assert score.total_score == 0.0
        assert score.unscored_findings == 2
        assert score.scored_findings == 0
        assert score.issue_density == pytest.approx(200.0)

    def test_order_does_not_matter(self):
        findings = (
            [make_finding("terrible-naming", line=n) for n in range(5)]
            + [make_finding("broad-except", "spicy", line=n) for n in range(3)]
            + [make_finding("code-duplication", "nuclear")]
            + [make_finding("magic-number")]
        )
        expected = calculate_score(findings, 2, 700)
        shuffled = list(findings)
        random.Random(7).shuffle(shuffled)
        again = calculate_score(shuffled, 2, 700)
        assert again.total_score == expected.total_score
        assert again.category_scores == expected.category_scores

    def test_adding_a_finding_never_lowers_the_score(self):
        findings = []
        previous = calculate_score(findings, 1, 300).total_score
        for rule in ["complexity", "deep-nesting", "slice-abuse", "broad-except"] * 10:
            findings.append(make_finding(rule))
            current = calculate_score(findings, 1, 300).total_score
            assert current >= previous
            previous = current

    def test_total_within_bounds(self):
        findings = [
            make_finding(rule_id)
            for cat in DEFAULT_CATEGORIES
            for rule_id in cat.rule_ids
            for _ in range(50)
        ]
        score = calculate_score(findings, 1, 10)
        assert 0.0 <= score.total_score <= 100.0
        assert score.total_score == pytest.approx(90.0)
        assert score.quality_level is QualityLevel.TERRIBLE

    def test_severity_distribution(self):
        findings = [
            make_finding("deep-nesting", "mild"),
            make_finding("deep-nesting", "spicy"),
            make_finding("todo-comment", "mild"),
            make_finding("long-function", "nuclear"),
        ]
        dist = calculate_score(findings, 1, 100).severity_distribution
        assert (dist.mild, dist.spicy, dist.nuclear) == (2, 1, 1)
        assert dist.total == 4

    def test_pure_and_repeatable(self):
        findings = [make_finding("terrible-naming")] * 3
        scorer = QualityScorer()
        first = scorer.calculate_score(findings, 1, 100)
        second = scorer.calculate_score(findings, 1, 100)
        assert first == second


class TestQualityLevel:
    @pytest.mark.parametrize(
        "score, level",
        [
            (0, QualityLevel.EXCELLENT),
            (20.9, QualityLevel.EXCELLENT),
            (21, QualityLevel.GOOD),
            (40, QualityLevel.GOOD),
            (41, QualityLevel.AVERAGE),
            (60.5, QualityLevel.AVERAGE),
            (61, QualityLevel.POOR),
            (80.99, QualityLevel.POOR),
            (81, QualityLevel.TERRIBLE),
            (100, QualityLevel.TERRIBLE),
        ],
    )
    def test_buckets(self, score, level):
        assert QualityLevel.from_score(score) is level

    def test_label(self):
        assert QualityLevel.POOR.label == "Poor"


class TestCategoryMap:
    def test_default_weights_sum_to_one(self):
        assert sum(c.weight for c in DEFAULT_CATEGORIES) == pytest.approx(1.0)

    def test_lookup(self):
        assert DEFAULT_CATEGORY_MAP.category_for("code-duplication").name == "duplication"
        assert DEFAULT_CATEGORY_MAP.category_for("todo-comment") is None

    def test_rule_in_two_categories_rejected(self):
        cats = (
            Category("a", 0.5, NAMING, frozenset({"shared"})),
            Category("b", 0.5, NAMING, frozenset({"shared"})),
        )
        with pytest.raises(ValueError):
            CategoryMap(cats)

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValueError):
            CategoryMap((Category("a", 0.4, NAMING),))

    def test_thresholds_must_ascend(self):
        with pytest.raises(ValueError):
            Thresholds(0.0, 5.0, 3.0, 10.0)

    def test_with_extra_adds_mapping(self):
        extended = DEFAULT_CATEGORY_MAP.with_extra({"print-debugging": "language-basics"})
        assert extended.category_for("print-debugging").name == "language-basics"
        assert DEFAULT_CATEGORY_MAP.category_for("print-debugging") is None

    def test_extra_conflict_rejected(self):
        with pytest.raises(ValueError):
            DEFAULT_CATEGORY_MAP.with_extra({"code-duplication": "naming"})

    def test_extra_unknown_category_rejected(self):
        with pytest.raises(ValueError):
            DEFAULT_CATEGORY_MAP.with_extra({"my-rule": "nonsense"})

    def test_extended_map_scores_new_rule(self):
        extended = DEFAULT_CATEGORY_MAP.with_extra({"print-debugging": "language-basics"})
        findings = [make_finding("print-debugging")] * 3
        score = calculate_score(findings, 1, 1000, category_map=extended)
        assert score.category_scores["language-basics"] == pytest.approx(40.0)
        assert score.scored_findings == 3

    def test_lookups_are_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_CATEGORY_MAP.rule_categories["x"] = "naming"  # type: ignore[index]
