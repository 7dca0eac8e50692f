"""
Confidence index and trust labels.

Confidence formula (0–100)
--------------------------
    confidence = verified_weight  × min(verified, sat_v) / sat_v
               + diversity_weight × min(owners,   sat_d) / sat_d
               + recency_weight   × freshness

    freshness = 1.0 when the newest event is ≤ fresh_days old, falling
    linearly to 0.0 at expired_days.

Defaults: 40 / 35 / 25 with both saturations at 3, fresh 30 d, expired 90 d.
One recent official source from one owner scores ≈ 50. No evidence → 0.

Trust label
-----------
    proof required                         → needs_verification
    confidence ≥ 80 and verified ≥ 70 %    → high
    confidence ≥ 60 and verified ≥ 50 %    → moderate
    otherwise                              → low
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from brand_trust.config import ConfidenceConfig
from brand_trust.models.breakdown import SourceStats
from brand_trust.models.event import BrandEvent
from brand_trust.scoring.primitives import clamp
from brand_trust.taxonomy.category_taxonomy import (
    Category,
    ConfidenceLevel,
    TrustLabel,
    VerificationLevel,
)
from brand_trust.utils.time_utils import age_days

_VERIFIED_LEVELS = frozenset({VerificationLevel.OFFICIAL, VerificationLevel.CORROBORATED})


def _freshness(days: Optional[float], config: ConfidenceConfig) -> float:
    if days is None:
        return 0.0
    if days <= config.fresh_days:
        return 1.0
    if days >= config.expired_days:
        return 0.0
    return 1.0 - (days - config.fresh_days) / (config.expired_days - config.fresh_days)


def compute_confidence(stats: SourceStats, config: Optional[ConfidenceConfig] = None) -> float:
    """Return the confidence index for one category, in ``[0, 100]``."""
    config = config or ConfidenceConfig()
    if stats.evidence_count <= 0:
        return 0.0

    verified = min(stats.verified_count, config.verified_saturation) / config.verified_saturation
    diversity = (
        min(stats.independent_owners, config.diversity_saturation) / config.diversity_saturation
    )
    score = (
        config.verified_weight * verified
        + config.diversity_weight * diversity
        + config.recency_weight * _freshness(stats.days_since_last_event, config)
    )
    return round(clamp(score, 0.0, 100.0), 1)


def trust_label(
    confidence: float,
    verification_rate: float,
    proof_required: bool,
    config: Optional[ConfidenceConfig] = None,
) -> TrustLabel:
    """Map a confidence index to its display band."""
    config = config or ConfidenceConfig()
    if proof_required:
        return TrustLabel.NEEDS_VERIFICATION
    if confidence >= config.high_min and verification_rate >= config.high_min_verification:
        return TrustLabel.HIGH
    if confidence >= config.moderate_min and verification_rate >= config.moderate_min_verification:
        return TrustLabel.MODERATE
    return TrustLabel.LOW


def confidence_level(confidence: float, config: Optional[ConfidenceConfig] = None) -> ConfidenceLevel:
    """Collapse a 0–100 confidence index into the coarse personalization level."""
    config = config or ConfidenceConfig()
    if confidence >= config.high_min:
        return ConfidenceLevel.HIGH
    if confidence >= config.moderate_min:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def source_stats_from_events(
    events: Iterable[BrandEvent],
    category: Category,
    now: datetime,
) -> SourceStats:
    """Summarise the evidence in ``events`` that touches ``category``.

    Events are de-duplicated by ``event_id`` (first occurrence wins). An event
    counts as verified at official or corroborated level; independent owners
    are the distinct ``domain_owner`` values (falling back to ``source_name``)
    among verified events.
    """
    seen: set[str] = set()
    evidence = 0
    verified = 0
    owners: set[str] = set()
    has_official = False
    newest_age: Optional[float] = None

    for event in events:
        if event.event_id in seen or event.impact_for(category) == 0.0:
            continue
        seen.add(event.event_id)
        evidence += 1

        age = max(0.0, age_days(event.effective_date, now))
        newest_age = age if newest_age is None else min(newest_age, age)

        level = (event.verification or "").strip().lower()
        if level not in _VERIFIED_LEVELS:
            continue
        verified += 1
        if level == VerificationLevel.OFFICIAL:
            has_official = True
        owner = event.domain_owner or event.source_name
        if owner:
            owners.add(owner.strip().lower())

    return SourceStats(
        evidence_count=evidence,
        verified_count=verified,
        independent_owners=len(owners),
        has_official=has_official,
        days_since_last_event=newest_age,
    )
