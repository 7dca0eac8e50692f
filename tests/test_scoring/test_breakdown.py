"""
Tests for brand_trust/scoring/breakdown.py.

What we test
------------
compose_breakdown():
  - value = clamp(base + delta) when the delta is proven.
  - Proof-gated delta is reported but not applied (value == base).
  - Precomputed window deltas (with the mixed cap) take precedence over the vector.
  - Values clamp into [0, 100].
  - Four blocks in category order; confidence is the mean of block confidences.
  - Byte-identical output for identical inputs.
  - computed_at is the injected now (or the baseline horizon end).

overall_score():
  - Equal-weight mean by default; weighted by normalized UserWeights when given.
"""

from __future__ import annotations

import pytest

from brand_trust.config import AppConfig, BaselineConfig
from brand_trust.models.alignment import UserWeights
from brand_trust.models.breakdown import SourceStats
from brand_trust.models.vector import CategoryVector
from brand_trust.scoring.baseline import build_baseline
from brand_trust.scoring.breakdown import compose_breakdown, overall_score
from brand_trust.scoring.window import deltas_from_sums
from brand_trust.taxonomy.category_taxonomy import CATEGORIES, Category, TrustLabel

PROVEN = SourceStats(
    evidence_count=3, verified_count=3, independent_owners=3,
    has_official=True, days_since_last_event=1.0,
)
UNPROVEN = SourceStats(
    evidence_count=3, verified_count=1, independent_owners=1,
    has_official=False, days_since_last_event=1.0,
)


def _compose(now, vector, stats=None, **kwargs):
    baseline = build_baseline("acme", [], now)
    stats = stats if stats is not None else {c: PROVEN for c in Category}
    return compose_breakdown(baseline, vector, stats, AppConfig(), now, **kwargs)


class TestComposeValues:
    def test_proven_delta_applied(self, now):
        bd = _compose(now, CategoryVector(labor=-5.0))
        block = bd.block(Category.LABOR)
        assert block.window_delta == -20.0
        assert block.value == 30.0
        assert not block.proof_required

    def test_proof_gate_withholds_delta(self, now):
        bd = _compose(now, CategoryVector(labor=-5.0), {Category.LABOR: UNPROVEN})
        block = bd.block(Category.LABOR)
        assert block.proof_required
        assert block.window_delta == -20.0
        assert block.value == block.base
        assert block.trust_label == TrustLabel.NEEDS_VERIFICATION

    def test_small_delta_applied_without_proof(self, now):
        bd = _compose(now, CategoryVector(social=1.0), {Category.SOCIAL: UNPROVEN})
        assert bd.block(Category.SOCIAL).value == 54.0

    def test_missing_stats_means_no_evidence(self, now):
        bd = _compose(now, CategoryVector(), {})
        for block in bd.blocks:
            assert block.confidence == 0.0
            assert block.evidence_count == 0
            assert block.value == 50.0

    def test_values_clamped(self, now):
        config = AppConfig(baseline=BaselineConfig(ceiling=95, floor=5, neutral=95))
        baseline = build_baseline("acme", [], now, config=config.baseline)
        bd = compose_breakdown(
            baseline, CategoryVector(labor=5.0, social=-5.0),
            {c: PROVEN for c in Category}, config, now,
        )
        assert bd.block(Category.LABOR).value == 100.0
        assert bd.block(Category.SOCIAL).value == 75.0

    def test_window_deltas_carry_mixed_cap(self, now):
        deltas = deltas_from_sums({Category.LABOR: -2.0}, {Category.LABOR: -2.0})
        bd = _compose(now, CategoryVector(labor=-4.0), window_deltas=deltas)
        block = bd.block(Category.LABOR)
        assert block.mixed_delta == pytest.approx(-8.0)
        assert block.window_delta == pytest.approx(-11.0)
        assert block.value == pytest.approx(39.0)


class TestComposeShape:
    def test_blocks_in_category_order(self, now):
        bd = _compose(now, CategoryVector())
        assert tuple(b.component for b in bd.blocks) == CATEGORIES

    def test_confidence_is_mean(self, now):
        stats = {Category.LABOR: PROVEN}
        bd = _compose(now, CategoryVector(), stats)
        assert bd.confidence == pytest.approx(25.0)

    def test_computed_at_defaults_to_horizon_end(self, now):
        baseline = build_baseline("acme", [], now)
        bd = compose_breakdown(baseline, CategoryVector(), {})
        assert bd.computed_at == now

    def test_byte_identical_round_trip(self, make_event, now):
        events = [make_event({"labor": -3, "social": 1}, days_ago=d) for d in (1, 10, 300)]
        baseline = build_baseline("acme", events, now)
        vector = CategoryVector(labor=-2.5, social=0.4)
        stats = {c: UNPROVEN for c in Category}
        first = compose_breakdown(baseline, vector, stats, AppConfig(), now)
        second = compose_breakdown(baseline, vector, stats, AppConfig(), now)
        assert first.model_dump_json() == second.model_dump_json()


class TestOverallScore:
    def test_equal_weight_mean(self, now):
        bd = _compose(now, CategoryVector(labor=-5.0))
        assert bd.overall_score == pytest.approx((30 + 50 + 50 + 50) / 4)

    def test_weighted(self, now):
        weights = UserWeights(labor=100, environment=0, politics=0, social=0)
        bd = _compose(now, CategoryVector(labor=-5.0), weights=weights)
        assert bd.overall_score == 30.0

    def test_empty_blocks_neutral(self):
        assert overall_score(()) == 50.0
