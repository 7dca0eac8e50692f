"""
Category vector aggregation over the short lookback window.

For every event of the brand whose effective date lies in
``[now − lookback_days, now]`` (irrelevant and all-zero events dropped):

    contribution[c] = impact[c] × severity × credibility × verification × decay

Contributions are summed per category and the sum is clamped to
``[−cap, +cap]``. ``aggregate_contributions`` exposes the unclamped sums for
callers that apply their own ceilings, and ``split_contributions`` returns the
same sums with mixed-orientation events kept apart for the mixed-event cap.

Caching is explicit: the caller holds a ``CachedVector`` and calls
``refresh_vector`` with an injected ``now``; nothing here reads the clock.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from brand_trust.config import AppConfig
from brand_trust.models.event import BrandEvent
from brand_trust.models.vector import CachedVector, CategoryVector
from brand_trust.scoring.primitives import (
    clamp,
    recency_decay,
    severity_value,
    verification_factor,
)
from brand_trust.scoring.severity import resolve_severity
from brand_trust.taxonomy.category_taxonomy import CATEGORIES, Category, Orientation
from brand_trust.utils.time_utils import ensure_utc, window_start

logger = logging.getLogger(__name__)


def select_window_events(
    brand_id: str,
    events: Iterable[BrandEvent],
    now: datetime,
    lookback_days: int,
) -> list[BrandEvent]:
    """Return the brand's relevant, non-empty events inside the lookback window."""
    start = window_start(now, lookback_days)
    end = ensure_utc(now)
    selected = []
    for event in events:
        if event.brand_id != brand_id or event.is_irrelevant:
            continue
        if not event.has_impact() or not event.is_within(start, end):
            continue
        selected.append(event)
    return selected


def event_weight(event: BrandEvent, now: datetime, half_life_days: float) -> float:
    """Return the scalar multiplier applied to every impact of ``event``."""
    return (
        severity_value(resolve_severity(event))
        * event.credibility
        * verification_factor(event.verification)
        * recency_decay(event.effective_date, now, half_life_days)
    )


def aggregate_contributions(
    brand_id: str,
    events: Iterable[BrandEvent],
    now: datetime,
    lookback_days: int = 90,
    half_life_days: float = 45.0,
) -> dict[Category, float]:
    """Return unclamped per-category sums of weighted contributions."""
    totals = {c: 0.0 for c in CATEGORIES}
    for event in select_window_events(brand_id, events, now, lookback_days):
        weight = event_weight(event, now, half_life_days)
        for c in CATEGORIES:
            totals[c] += event.impact_for(c) * weight
    return totals


def split_contributions(
    brand_id: str,
    events: Iterable[BrandEvent],
    now: datetime,
    lookback_days: int = 90,
    half_life_days: float = 45.0,
) -> tuple[dict[Category, float], dict[Category, float]]:
    """Return unclamped ``(plain, mixed)`` sums in one pass over the window.

    ``mixed`` holds the contributions of mixed-orientation events and
    ``plain`` everything else. Their sum equals ``aggregate_contributions``.
    """
    plain = {c: 0.0 for c in CATEGORIES}
    mixed = {c: 0.0 for c in CATEGORIES}
    for event in select_window_events(brand_id, events, now, lookback_days):
        target = mixed if event.orientation == Orientation.MIXED else plain
        weight = event_weight(event, now, half_life_days)
        for c in CATEGORIES:
            target[c] += event.impact_for(c) * weight
    return plain, mixed


def compute_category_vector(
    brand_id: str,
    events: Iterable[BrandEvent],
    now: datetime,
    lookback_days: int = 90,
    cap: float = 5.0,
    half_life_days: float = 45.0,
) -> CategoryVector:
    """Return the clamped category vector for ``brand_id`` at ``now``.

    Args:
        brand_id:       Brand to aggregate; events for other brands are ignored.
        events:         Candidate events (any order).
        now:            Injected evaluation time.
        lookback_days:  Window length.
        cap:            Per-category absolute ceiling.
        half_life_days: Recency decay half-life.
    """
    totals = aggregate_contributions(brand_id, events, now, lookback_days, half_life_days)
    return CategoryVector.from_mapping({c: clamp(v, -cap, cap) for c, v in totals.items()})


def vector_from_config(
    brand_id: str,
    events: Iterable[BrandEvent],
    now: datetime,
    config: AppConfig,
) -> CategoryVector:
    """``compute_category_vector`` with window, cap and half-life taken from config."""
    return compute_category_vector(
        brand_id,
        events,
        now,
        lookback_days=config.vector.lookback_days,
        cap=config.vector.cap_per_category,
        half_life_days=config.decay.half_life_days,
    )


def refresh_vector(
    cached: Optional[CachedVector],
    brand_id: str,
    events: list[BrandEvent],
    now: datetime,
    config: Optional[AppConfig] = None,
) -> CachedVector:
    """Return ``cached`` if still fresh, else a newly computed ``CachedVector``.

    A cache entry is reused only when it belongs to ``brand_id``, covers the
    configured lookback, and is no older than ``stale_after_hours``.
    """
    config = config or AppConfig()
    if (
        cached is not None
        and cached.brand_id == brand_id
        and cached.lookback_days == config.vector.lookback_days
        and not cached.is_stale(now, config.vector.stale_after_hours)
    ):
        return cached

    used = select_window_events(brand_id, events, now, config.vector.lookback_days)
    vector = vector_from_config(brand_id, used, now, config)
    logger.debug(
        "Recomputed vector for %s from %d events (cache %s)",
        brand_id, len(used), "missing" if cached is None else "stale",
    )
    return CachedVector(
        brand_id=brand_id,
        vector=vector,
        computed_at=now,
        lookback_days=config.vector.lookback_days,
        events_used=len(used),
    )
