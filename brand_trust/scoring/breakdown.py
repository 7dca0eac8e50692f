"""
Score breakdown composer: baseline + window delta → public category blocks.

    value = clamp(base + (0 if proof_required else window_delta), 0, 100)

The overall score is the equal-weight mean of the four block values, or the
mean weighted by the user's normalized sliders when ``weights`` is given.
Composition is pure: ``computed_at`` is the injected ``now`` (or the
baseline's horizon end), so identical inputs give identical output.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from brand_trust.config import AppConfig
from brand_trust.models.alignment import UserWeights
from brand_trust.models.breakdown import (
    Baseline,
    BrandBreakdown,
    ScoreBreakdownBlock,
    SourceStats,
)
from brand_trust.models.vector import CategoryVector
from brand_trust.scoring.confidence import compute_confidence, trust_label
from brand_trust.scoring.primitives import clamp
from brand_trust.scoring.window import WindowDelta, deltas_from_vector, evaluate_proof_gate
from brand_trust.taxonomy.category_taxonomy import CATEGORIES, Category


def overall_score(
    blocks: tuple[ScoreBreakdownBlock, ...],
    weights: Optional[UserWeights] = None,
) -> float:
    """Blend block values into one 0–100 score."""
    if not blocks:
        return 50.0
    if weights is None:
        return round(sum(b.value for b in blocks) / len(blocks), 1)
    normalized = weights.normalized()
    total_weight = sum(normalized[b.component] for b in blocks)
    if total_weight <= 0:
        return round(sum(b.value for b in blocks) / len(blocks), 1)
    blended = sum(b.value * normalized[b.component] for b in blocks) / total_weight
    return round(clamp(blended, 0.0, 100.0), 1)


def compose_breakdown(
    baseline: Baseline,
    vector: CategoryVector,
    source_stats: dict[Category, SourceStats],
    config: Optional[AppConfig] = None,
    now: Optional[datetime] = None,
    weights: Optional[UserWeights] = None,
    window_deltas: Optional[dict[Category, WindowDelta]] = None,
) -> BrandBreakdown:
    """Compose the public breakdown for one brand.

    Args:
        baseline:     Per-category baselines.
        vector:       Clamped category vector for the lookback window.
        source_stats: Evidence summary per category (missing → no evidence).
        config:       Application config (defaults when ``None``).
        now:          Stamp for ``computed_at``; defaults to the baseline horizon end.
        weights:      Optional user sliders for a weighted overall score.
        window_deltas: Deltas built from the unclamped window sums (see
                      ``compute_window_deltas``); they carry the mixed-event
                      cap. When omitted, deltas are taken from ``vector``
                      with no mixed share.
    """
    config = config or AppConfig()
    deltas = window_deltas if window_deltas is not None else deltas_from_vector(vector, config)

    blocks = []
    for c in CATEGORIES:
        entry = baseline.get(c)
        stats = source_stats.get(c) or SourceStats()
        delta = round(deltas[c].delta, 2)
        proof_required = evaluate_proof_gate(delta, stats, config.window)
        confidence = compute_confidence(stats, config.confidence)
        value = clamp(entry.base + (0.0 if proof_required else delta), 0.0, 100.0)

        blocks.append(
            ScoreBreakdownBlock(
                component=c,
                base=entry.base,
                base_reason=entry.base_reason,
                window_delta=delta,
                value=value,
                confidence=confidence,
                verified_count=stats.verified_count,
                independent_owners=stats.independent_owners,
                proof_required=proof_required,
                evidence_count=stats.evidence_count,
                mixed_delta=round(deltas[c].mixed_delta, 2),
                trust_label=trust_label(
                    confidence, stats.verification_rate, proof_required, config.confidence
                ),
            )
        )

    block_tuple = tuple(blocks)
    return BrandBreakdown(
        brand_id=baseline.brand_id,
        blocks=block_tuple,
        overall_score=overall_score(block_tuple, weights),
        confidence=round(sum(b.confidence for b in block_tuple) / len(block_tuple), 1),
        computed_at=now or baseline.horizon_end,
    )
