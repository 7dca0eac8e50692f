"""
Personalized alignment ("value fit") between a user and a brand.

Score formula
-------------
Over the *included* dimensions (the user cares about it and the brand has a
score for it), with normalized weights ``w``:

    score_raw = Σ w·s / Σ w
    score     = Σ w·(50 + (s − 50)·m) / Σ w

where ``m`` is the dimension's confidence multiplier (low 0.85, medium 0.95,
high 1.0). Low-confidence evidence is pulled toward neutral. Both are rounded
and clamped to [0, 100].

"Cares about" is one shared predicate, ``|weight − 50| > 20``, used for the
category sliders, the political sub-axes, and dealbreakers.

Political two-axis mode
-----------------------
When the user supplies both ``political_intensity`` and
``political_alignment``, ``politics`` is replaced by two dimensions scored as
a match, ``100 − |user − brand|``, each carrying half of the politics weight.
A brand without axis data is matched against neutral 50 on both.

Dealbreakers
------------
An explicit user minimum is checked first. Otherwise any dimension the user
cares about (on either side of neutral) that scores below the dealbreaker
floor (25) triggers. A triggered dealbreaker overrides the summary, never the
score.

Value match
-----------
``compute_value_match`` is the simpler slider-versus-score view: every
category counts, scored ``100 − |slider − score|``, with categories the user
is neutral on down-weighted rather than dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from brand_trust.config import AlignmentConfig, ConfidenceConfig
from brand_trust.models.alignment import (
    AlignmentDriver,
    AlignmentResult,
    BrandCategoryScores,
    CategoryDelta,
    CategoryMatch,
    ComparisonSummary,
    DealbreakerResult,
    UserWeights,
    ValueMatchResult,
)
from brand_trust.models.breakdown import BrandBreakdown
from brand_trust.scoring.confidence import confidence_level
from brand_trust.scoring.primitives import clamp
from brand_trust.taxonomy.category_taxonomy import (
    CATEGORIES,
    CATEGORY_LABELS,
    DIMENSION_LABELS,
    AlignmentDimension,
    Category,
    ConfidenceLevel,
    DriverImpact,
    MatchRecommendation,
    MatchSeverity,
)

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 50.0


@dataclass(frozen=True)
class _Candidate:
    """One dimension considered for inclusion in an alignment score."""

    dimension: AlignmentDimension
    brand_score: Optional[float]
    weight: float
    weight_raw: float
    confidence: ConfidenceLevel
    cared: bool

    @property
    def included(self) -> bool:
        return self.cared and self.brand_score is not None and self.weight > 0


def cares_about(weight: float, neutral: float = 50.0, band: float = 20.0) -> bool:
    """Return ``True`` when a slider is far enough from neutral to matter."""
    return abs(weight - neutral) > band


def normalize_weights(weights: UserWeights) -> dict[Category, float]:
    """Return the user's category weights normalized to sum to 1.0."""
    return weights.normalized()


def _dimension_confidence(scores: BrandCategoryScores, category: Category) -> ConfidenceLevel:
    """Explicit brand confidence, else low for a missing or exactly-neutral score."""
    if category in scores.confidence:
        return scores.confidence[category]
    score = scores.get(category)
    if score is None or score == NEUTRAL_SCORE:
        return ConfidenceLevel.LOW
    return ConfidenceLevel.MEDIUM


def _use_political_axes(weights: UserWeights) -> bool:
    return weights.has_political_axes


def _axis_match(user_value: float, brand_value: Optional[float]) -> float:
    brand = brand_value if brand_value is not None else NEUTRAL_SCORE
    return 100.0 - abs(user_value - brand)


def _candidates(
    weights: UserWeights,
    scores: BrandCategoryScores,
    config: AlignmentConfig,
    personalized: bool,
) -> list[_Candidate]:
    normalized = weights.normalized()
    two_axis = personalized and _use_political_axes(weights)

    def cared(value: float) -> bool:
        if not personalized:
            return True
        return cares_about(value, config.neutral_weight, config.cares_band)

    candidates = []
    for c in CATEGORIES:
        confidence = _dimension_confidence(scores, c)
        if c == Category.POLITICS and two_axis:
            half = normalized[c] / 2.0
            axes = (
                (AlignmentDimension.POLITICAL_INTENSITY,
                 weights.political_intensity, scores.politics_intensity),
                (AlignmentDimension.POLITICAL_ALIGNMENT,
                 weights.political_alignment, scores.politics_alignment),
            )
            for dimension, user_value, brand_value in axes:
                candidates.append(
                    _Candidate(
                        dimension=dimension,
                        brand_score=_axis_match(user_value, brand_value),
                        weight=half,
                        weight_raw=user_value,
                        confidence=confidence,
                        cared=cared(user_value),
                    )
                )
            continue
        candidates.append(
            _Candidate(
                dimension=AlignmentDimension(c.value),
                brand_score=scores.get(c),
                weight=normalized[c],
                weight_raw=weights.raw(c),
                confidence=confidence,
                cared=cared(weights.raw(c)),
            )
        )
    return candidates


def _driver(candidate: _Candidate) -> AlignmentDriver:
    contribution = (candidate.brand_score - NEUTRAL_SCORE) * candidate.weight
    if contribution > 0:
        impact = DriverImpact.POSITIVE
    elif contribution < 0:
        impact = DriverImpact.NEGATIVE
    else:
        impact = DriverImpact.NEUTRAL
    return AlignmentDriver(
        dimension=candidate.dimension,
        label=DIMENSION_LABELS[candidate.dimension],
        impact=impact,
        contribution=round(contribution, 4),
        brand_score=candidate.brand_score,
        user_weight=candidate.weight,
        user_weight_raw=candidate.weight_raw,
        confidence=candidate.confidence,
    )


def check_dealbreakers(
    weights: UserWeights,
    scores: BrandCategoryScores,
    config: Optional[AlignmentConfig] = None,
) -> DealbreakerResult:
    """Return the first triggered dealbreaker (explicit minimums take priority)."""
    config = config or AlignmentConfig()

    for c in CATEGORIES:
        threshold = weights.dealbreakers.get(c)
        actual = scores.get(c)
        if threshold is not None and actual is not None and actual < threshold:
            return DealbreakerResult(
                triggered=True,
                dimension=c,
                threshold=threshold,
                actual=actual,
                message=(
                    f"{DIMENSION_LABELS[AlignmentDimension(c.value)]} score "
                    f"({round(actual)}) is below your minimum ({threshold:g})"
                ),
            )

    for c in CATEGORIES:
        raw = weights.raw(c)
        actual = scores.get(c)
        if actual is None:
            continue
        if cares_about(raw, config.neutral_weight, config.cares_band) and actual < config.dealbreaker_floor:
            return DealbreakerResult(
                triggered=True,
                dimension=c,
                threshold=config.dealbreaker_floor,
                actual=actual,
                message=(
                    f"{DIMENSION_LABELS[AlignmentDimension(c.value)]} score "
                    f"({round(actual)}) is critically low for a value you care about"
                ),
            )
    return DealbreakerResult()


def _overall_confidence(
    included: list[_Candidate],
    total_dimensions: int,
) -> tuple[ConfidenceLevel, str]:
    if len(included) < 3:
        return (
            ConfidenceLevel.LOW,
            f"Only {len(included)} of {total_dimensions} dimensions have evidence",
        )
    highs = sum(1 for c in included if c.confidence == ConfidenceLevel.HIGH)
    lows = sum(1 for c in included if c.confidence == ConfidenceLevel.LOW)
    if highs >= 2:
        return ConfidenceLevel.HIGH, "Multiple dimensions have strong evidence"
    if lows >= 2:
        return ConfidenceLevel.LOW, "Limited evidence across dimensions"
    return ConfidenceLevel.MEDIUM, "Moderate evidence coverage"


def _summary(
    score: int,
    dealbreaker: DealbreakerResult,
    top_positive: Optional[AlignmentDriver],
    top_negative: Optional[AlignmentDriver],
) -> str:
    if dealbreaker.triggered:
        return f"Does not meet your {dealbreaker.dimension.value} requirements"
    if score >= 80:
        if top_positive:
            return f"Strong alignment with your values, especially in {top_positive.label.lower()}"
        return "Strong alignment with your values"
    if score >= 60:
        if top_negative:
            return f"Good alignment overall, some concerns in {top_negative.label.lower()}"
        return "Good alignment with your values"
    if score >= 40:
        return "Mixed alignment: some values match, others don't"
    if top_negative:
        return f"Primary concern: {top_negative.label.lower()}"
    return "Poor alignment with your values"


def compute_alignment(
    weights: Optional[UserWeights],
    scores: BrandCategoryScores,
    config: Optional[AlignmentConfig] = None,
) -> AlignmentResult:
    """Compute the personalized alignment of ``scores`` against ``weights``.

    Args:
        weights: User sliders. ``None`` gives an unpersonalized equal-weight
            blend over every scored category.
        scores:  The brand's category scores.
        config:  Alignment thresholds (defaults when ``None``).

    Returns:
        ``AlignmentResult``. Degenerate input (all-zero sliders, or nothing
        included) yields a neutral 50 with low confidence.
    """
    config = config or AlignmentConfig()
    personalized = weights is not None
    weights = weights or UserWeights()

    candidates = _candidates(weights, scores, config, personalized)
    included = [c for c in candidates if c.included]
    excluded = tuple(c.dimension for c in candidates if not c.included)
    dealbreaker = check_dealbreakers(weights, scores, config)

    if weights.raw_total <= 0 or not included:
        logger.debug("Degenerate alignment input; returning neutral score")
        return AlignmentResult(
            score=int(NEUTRAL_SCORE),
            score_raw=int(NEUTRAL_SCORE),
            confidence=ConfidenceLevel.LOW,
            confidence_reason="No weighted dimensions with evidence",
            dealbreaker=dealbreaker,
            excluded_dimensions=tuple(c.dimension for c in candidates),
            summary=(
                dealbreaker.message if dealbreaker.triggered
                else "Not enough information to personalize this score"
            ),
            is_personalized=personalized,
        )

    total_weight = sum(c.weight for c in included)
    raw = sum(c.weight * c.brand_score for c in included) / total_weight
    adjusted = sum(
        c.weight
        * (NEUTRAL_SCORE + (c.brand_score - NEUTRAL_SCORE)
           * config.confidence_multipliers.get(c.confidence.value, 1.0))
        for c in included
    ) / total_weight
    score = int(clamp(round(adjusted), 0, 100))
    score_raw = int(clamp(round(raw), 0, 100))

    drivers = sorted((_driver(c) for c in included), key=lambda d: abs(d.contribution), reverse=True)
    top_positive = next((d for d in drivers if d.impact == DriverImpact.POSITIVE), None)
    top_negative = next((d for d in drivers if d.impact == DriverImpact.NEGATIVE), None)
    level, reason = _overall_confidence(included, len(candidates))

    return AlignmentResult(
        score=score,
        score_raw=score_raw,
        confidence=level,
        confidence_reason=reason,
        drivers=tuple(drivers),
        top_positive=top_positive,
        top_negative=top_negative,
        dealbreaker=dealbreaker,
        excluded_dimensions=excluded,
        included_dimensions=tuple(c.dimension for c in included),
        summary=_summary(score, dealbreaker, top_positive, top_negative),
        is_personalized=personalized,
    )


_SEVERITY_BANDS = (
    (15.0, MatchSeverity.GOOD_MATCH),
    (30.0, MatchSeverity.MINOR_MISMATCH),
    (50.0, MatchSeverity.MODERATE_MISMATCH),
)


def match_severity(gap: float, user_cares: bool) -> MatchSeverity:
    """Classify a slider-to-score gap; categories the user is neutral on stay neutral."""
    if not user_cares:
        return MatchSeverity.NEUTRAL
    for upper, severity in _SEVERITY_BANDS:
        if gap < upper:
            return severity
    return MatchSeverity.MAJOR_MISMATCH


def compute_value_match(
    weights: UserWeights,
    scores: BrandCategoryScores,
    config: Optional[AlignmentConfig] = None,
) -> ValueMatchResult:
    """Compare the user's sliders directly against the brand's scores.

    Unlike ``compute_alignment``, every category counts: those the user cares
    about weigh 1.0, the rest ``match_soft_weight``. Each part scores
    ``100 − gap`` and the overall match is their weighted mean.

    With both political sub-axes set, politics is matched on the two axes
    (missing brand axis → 50), its displayed gap is their rounded mean, and it
    counts as cared when either axis is. A category the brand has no score
    for is reported with ``gap=None`` and left out of the overall match.
    """
    config = config or AlignmentConfig()

    def cared(value: float) -> bool:
        return cares_about(value, config.neutral_weight, config.cares_band)

    def weight_for(value: float) -> float:
        return 1.0 if cared(value) else config.match_soft_weight

    earned = 0.0
    possible = 0.0
    matches = []
    for c in CATEGORIES:
        if c == Category.POLITICS and _use_political_axes(weights):
            gaps = []
            for user_value, brand_value in (
                (weights.political_intensity, scores.politics_intensity),
                (weights.political_alignment, scores.politics_alignment),
            ):
                axis_gap = 100.0 - _axis_match(user_value, brand_value)
                earned += (100.0 - axis_gap) * weight_for(user_value)
                possible += 100.0 * weight_for(user_value)
                gaps.append(axis_gap)
            gap = round(sum(gaps) / 2.0)
            user_cares = cared(weights.political_intensity) or cared(weights.political_alignment)
            matches.append(
                CategoryMatch(
                    category=c, gap=gap,
                    severity=match_severity(gap, user_cares), user_cares=user_cares,
                )
            )
            continue

        user_value = weights.raw(c)
        user_cares = cared(user_value)
        brand_value = scores.get(c)
        if brand_value is None:
            matches.append(CategoryMatch(category=c, user_cares=user_cares))
            continue
        gap = abs(user_value - brand_value)
        earned += (100.0 - gap) * weight_for(user_value)
        possible += 100.0 * weight_for(user_value)
        matches.append(
            CategoryMatch(
                category=c, gap=round(gap),
                severity=match_severity(gap, user_cares), user_cares=user_cares,
            )
        )

    if possible > 0:
        overall = int(clamp(round(earned / possible * 100.0), 0, 100))
    else:
        logger.debug("No brand scores to match; returning neutral match")
        overall = int(NEUTRAL_SCORE)

    if overall >= config.match_aligned_min:
        recommendation = MatchRecommendation.ALIGNED
    elif overall >= config.match_neutral_min:
        recommendation = MatchRecommendation.NEUTRAL
    else:
        recommendation = MatchRecommendation.MISALIGNED
    return ValueMatchResult(
        overall_match=overall,
        category_matches=tuple(matches),
        recommendation=recommendation,
    )


def compare_alternative(
    current: BrandCategoryScores,
    alternative: BrandCategoryScores,
    weights: Optional[UserWeights] = None,
    config: Optional[AlignmentConfig] = None,
) -> ComparisonSummary:
    """Summarise why ``alternative`` fits the user better or worse than ``current``.

    Categories missing a score on either side contribute a zero delta.
    """
    config = config or AlignmentConfig()
    normalized = (weights or UserWeights()).normalized()

    deltas = []
    for c in CATEGORIES:
        cur, alt = current.get(c), alternative.get(c)
        raw_delta = (alt - cur) if cur is not None and alt is not None else 0.0
        deltas.append(
            CategoryDelta(category=c, raw_delta=raw_delta, weighted_delta=raw_delta * normalized[c])
        )

    significant = [d for d in deltas if abs(d.raw_delta) >= config.comparison_min_delta]
    significant.sort(key=lambda d: abs(d.weighted_delta), reverse=True)
    top = tuple(significant[: config.comparison_max_contributors])

    phrases = tuple(
        f"{'Better' if d.raw_delta > 0 else 'Worse'} on {CATEGORY_LABELS[d.category]} "
        f"({round(d.raw_delta):+d})"
        for d in top
    )
    summary = ", ".join(phrases) if phrases else "Similar across all categories."
    return ComparisonSummary(
        deltas=tuple(deltas),
        top_contributors=top,
        phrases=phrases,
        summary=summary,
    )


def brand_scores_from_breakdown(
    breakdown: BrandBreakdown,
    config: Optional[ConfidenceConfig] = None,
) -> BrandCategoryScores:
    """Project a public breakdown onto the personalization input shape."""
    return BrandCategoryScores.from_mapping(
        breakdown.category_scores(),
        confidence={b.component: confidence_level(b.confidence, config) for b in breakdown.blocks},
    )
