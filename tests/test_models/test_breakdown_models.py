"""Tests for Baseline, SourceStats, ScoreBreakdownBlock, and BrandBreakdown."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from brand_trust.models.breakdown import (
    Baseline,
    BaselineEntry,
    BrandBreakdown,
    ScoreBreakdownBlock,
    SourceStats,
)
from brand_trust.taxonomy.category_taxonomy import Category

NOW = datetime(2026, 6, 1, tzinfo=timezone.utc)


def _block(category: Category = Category.LABOR, **overrides) -> ScoreBreakdownBlock:
    fields = dict(
        component=category,
        base=60.0,
        base_reason="test",
        window_delta=-4.0,
        value=56.0,
        confidence=50.0,
        verified_count=1,
        independent_owners=1,
        proof_required=False,
    )
    fields.update(overrides)
    return ScoreBreakdownBlock(**fields)


class TestBaseline:
    def test_requires_every_category(self):
        with pytest.raises(ValidationError, match="missing categories"):
            Baseline(
                brand_id="acme",
                entries={Category.LABOR: BaselineEntry(base=50, base_reason="x")},
                events_analyzed=0,
                horizon_start=NOW,
                horizon_end=NOW,
            )

    def test_get(self):
        entries = {c: BaselineEntry(base=50, base_reason=c.value) for c in Category}
        baseline = Baseline(
            brand_id="acme", entries=entries, events_analyzed=0,
            horizon_start=NOW, horizon_end=NOW,
        )
        assert baseline.get(Category.SOCIAL).base_reason == "social"


class TestSourceStats:
    def test_defaults_are_empty(self):
        stats = SourceStats()
        assert stats.evidence_count == 0
        assert stats.days_since_last_event is None

    def test_verification_rate(self):
        assert SourceStats(evidence_count=4, verified_count=3).verification_rate == pytest.approx(0.75)

    def test_verification_rate_zero_without_evidence(self):
        assert SourceStats().verification_rate == 0.0

    def test_negative_counts_rejected(self):
        with pytest.raises(ValidationError):
            SourceStats(verified_count=-1)


class TestScoreBreakdownBlock:
    def test_value_out_of_range_rejected(self):
        with pytest.raises(ValidationError, match="value"):
            _block(value=101.0)

    def test_confidence_out_of_range_rejected(self):
        with pytest.raises(ValidationError, match="confidence"):
            _block(confidence=-1.0)


class TestBrandBreakdown:
    def _breakdown(self) -> BrandBreakdown:
        blocks = tuple(
            _block(c, proof_required=(c == Category.POLITICS)) for c in Category
        )
        return BrandBreakdown(
            brand_id="acme", blocks=blocks, overall_score=56.0,
            confidence=50.0, computed_at=NOW,
        )

    def test_block_lookup(self):
        assert self._breakdown().block(Category.ENVIRONMENT).component == Category.ENVIRONMENT

    def test_category_scores(self):
        assert self._breakdown().category_scores() == {c: 56.0 for c in Category}

    def test_proof_required_count(self):
        assert self._breakdown().proof_required_count == 1

    def test_json_round_trip(self):
        original = self._breakdown()
        restored = BrandBreakdown.model_validate_json(original.model_dump_json())
        assert restored == original
