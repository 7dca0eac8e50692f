"""Tests for UserWeights normalization and BrandCategoryScores."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from brand_trust.models.alignment import (
    AlignmentResult,
    BrandCategoryScores,
    DealbreakerResult,
    UserWeights,
    ValueMatchResult,
)
from brand_trust.taxonomy.category_taxonomy import (
    AlignmentDimension,
    Category,
    ConfidenceLevel,
    MatchRecommendation,
)


class TestUserWeights:
    def test_defaults_are_neutral(self):
        w = UserWeights()
        assert all(w.raw(c) == 50.0 for c in Category)

    @pytest.mark.parametrize(
        "sliders",
        [
            {"labor": 90, "environment": 50, "politics": 10, "social": 0},
            {"labor": 1, "environment": 0, "politics": 0, "social": 0},
            {"labor": 100, "environment": 100, "politics": 100, "social": 100},
        ],
    )
    def test_normalized_sums_to_one(self, sliders):
        assert sum(UserWeights(**sliders).normalized().values()) == pytest.approx(1.0)

    def test_all_zero_gives_equal_split(self):
        w = UserWeights(labor=0, environment=0, politics=0, social=0)
        assert w.normalized() == {c: pytest.approx(0.25) for c in Category}

    def test_proportional(self):
        w = UserWeights(labor=60, environment=20, politics=20, social=0)
        assert w.normalized()[Category.LABOR] == pytest.approx(0.6)

    @pytest.mark.parametrize("field", ["labor", "political_intensity"])
    def test_out_of_range_rejected(self, field):
        with pytest.raises(ValidationError, match="Slider"):
            UserWeights(**{field: 120})

    def test_political_axes_require_both(self):
        assert not UserWeights(political_intensity=80).has_political_axes
        assert UserWeights(political_intensity=80, political_alignment=20).has_political_axes

    def test_dealbreakers_keyed_by_category(self):
        w = UserWeights(dealbreakers={"labor": 40})
        assert w.dealbreakers == {Category.LABOR: 40}


class TestBrandCategoryScores:
    def test_missing_scores_are_none(self):
        assert BrandCategoryScores().get(Category.LABOR) is None

    def test_from_mapping(self):
        scores = BrandCategoryScores.from_mapping(
            {Category.LABOR: 40.0}, {Category.LABOR: ConfidenceLevel.HIGH}
        )
        assert scores.labor == 40.0
        assert scores.environment is None
        assert scores.confidence[Category.LABOR] == ConfidenceLevel.HIGH


class TestAlignmentResult:
    def test_score_range_enforced(self):
        with pytest.raises(ValidationError, match="score"):
            AlignmentResult(
                score=101, score_raw=50, confidence=ConfidenceLevel.LOW,
                confidence_reason="x", summary="x",
            )

    def test_recommendable_needs_three_dimensions(self):
        dims = (AlignmentDimension.LABOR, AlignmentDimension.ENVIRONMENT, AlignmentDimension.SOCIAL)
        result = AlignmentResult(
            score=70, score_raw=70, confidence=ConfidenceLevel.MEDIUM,
            confidence_reason="x", summary="x", included_dimensions=dims,
        )
        assert result.is_recommendable
        assert not result.model_copy(update={"included_dimensions": dims[:2]}).is_recommendable

    def test_dealbreaker_not_recommendable(self):
        result = AlignmentResult(
            score=90, score_raw=90, confidence=ConfidenceLevel.HIGH, confidence_reason="x",
            summary="x", included_dimensions=tuple(AlignmentDimension)[:4],
            dealbreaker=DealbreakerResult(triggered=True, dimension=Category.LABOR),
        )
        assert not result.is_recommendable


class TestValueMatchResult:
    def test_overall_range_enforced(self):
        with pytest.raises(ValidationError, match="overall_match"):
            ValueMatchResult(
                overall_match=120, category_matches=(),
                recommendation=MatchRecommendation.ALIGNED,
            )
