"""
End-to-end scoring: events → baseline + window → public breakdown.

``score_brand`` runs every stage for one brand at an injected ``now``.
``refresh_stale_vectors`` refreshes a caller-held vector cache for many
brands, optionally in parallel. Brands are independent; there is no shared
mutable state, so the work is idempotent and safe to run concurrently.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from typing import Optional

from brand_trust.config import AppConfig
from brand_trust.models.alignment import UserWeights
from brand_trust.models.breakdown import BrandBreakdown
from brand_trust.models.event import BrandEvent
from brand_trust.models.vector import CachedVector, CategoryVector
from brand_trust.scoring.baseline import build_baseline
from brand_trust.scoring.breakdown import compose_breakdown
from brand_trust.scoring.confidence import source_stats_from_events
from brand_trust.scoring.vector import refresh_vector, select_window_events, split_contributions
from brand_trust.scoring.window import deltas_from_sums
from brand_trust.taxonomy.category_taxonomy import CATEGORIES

logger = logging.getLogger(__name__)


def score_brand(
    brand_id: str,
    events: list[BrandEvent],
    now: datetime,
    config: Optional[AppConfig] = None,
    weights: Optional[UserWeights] = None,
) -> BrandBreakdown:
    """Score one brand from its full event history.

    Args:
        brand_id: Brand to score; other brands' events are ignored.
        events:   Events of any age (the 24-month horizon feeds the baseline,
                  the lookback window feeds the delta).
        now:      Injected evaluation time.
        config:   Application config (defaults when ``None``).
        weights:  Optional user sliders for a weighted overall score.
    """
    config = config or AppConfig()

    baseline = build_baseline(brand_id, events, now, config=config.baseline)
    window_events = select_window_events(brand_id, events, now, config.vector.lookback_days)
    plain, mixed = split_contributions(
        brand_id, window_events, now, config.vector.lookback_days, config.decay.half_life_days
    )
    deltas = deltas_from_sums(plain, mixed, config)
    vector = CategoryVector.from_mapping({c: d.vector_value for c, d in deltas.items()})
    stats = {c: source_stats_from_events(window_events, c, now) for c in CATEGORIES}

    breakdown = compose_breakdown(
        baseline,
        vector,
        stats,
        config,
        now,
        weights=weights,
        window_deltas=deltas,
    )

    logger.info(
        "Scored %s: overall=%.1f confidence=%.1f (%d horizon events, %d window events)",
        brand_id,
        breakdown.overall_score,
        breakdown.confidence,
        baseline.events_analyzed,
        len(window_events),
        extra={"brand_id": brand_id},
    )
    gated = [b.component.value for b in breakdown.blocks if b.proof_required]
    if gated:
        logger.warning(
            "Proof required for %s: window delta withheld on %s",
            brand_id, ", ".join(gated),
            extra={"brand_id": brand_id, "gated": gated},
        )
    return breakdown


def refresh_stale_vectors(
    events_by_brand: dict[str, list[BrandEvent]],
    cache: dict[str, CachedVector],
    now: datetime,
    config: Optional[AppConfig] = None,
    max_workers: int = 1,
) -> dict[str, CachedVector]:
    """Return a new cache with missing or stale vectors recomputed.

    Fresh entries are reused unchanged. A brand whose refresh fails keeps its
    previous entry (if any) and the failure is logged; other brands proceed.

    Args:
        events_by_brand: ``{brand_id: events}`` for every brand to refresh.
        cache:           Current ``{brand_id: CachedVector}``; not mutated.
        now:             Injected evaluation time.
        config:          Application config (defaults when ``None``).
        max_workers:     Thread count; 1 runs sequentially.
    """
    config = config or AppConfig()
    result = dict(cache)
    errors = 0

    def _refresh(brand_id: str) -> CachedVector:
        return refresh_vector(cache.get(brand_id), brand_id, events_by_brand[brand_id], now, config)

    brand_ids = list(events_by_brand)
    if max_workers > 1 and len(brand_ids) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_brand = {executor.submit(_refresh, b): b for b in brand_ids}
            for future in as_completed(future_to_brand):
                brand_id = future_to_brand[future]
                try:
                    result[brand_id] = future.result()
                except Exception:
                    errors += 1
                    logger.exception(
                        "Vector refresh failed for %s; keeping previous entry", brand_id,
                        extra={"brand_id": brand_id},
                    )
    else:
        for brand_id in brand_ids:
            try:
                result[brand_id] = _refresh(brand_id)
            except Exception:
                errors += 1
                logger.exception(
                    "Vector refresh failed for %s; keeping previous entry", brand_id,
                    extra={"brand_id": brand_id},
                )

    refreshed = sum(1 for b in brand_ids if result.get(b) is not cache.get(b))
    logger.info(
        "Vector refresh: %d brands, %d recomputed, %d errors",
        len(brand_ids), refreshed, errors,
    )
    return result
