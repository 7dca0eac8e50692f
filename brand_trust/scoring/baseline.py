"""
Long-horizon category baseline.

A category that the brand's history rarely touches starts high; one that
dominates the history starts low:

    frequency = events whose dominant category is c / relevant events in horizon
    base      = clamp(round(ceiling − frequency × slope), floor, ceiling)

With the defaults (ceiling 75, slope 50, floor 25) a never-mentioned category
scores 75 and an always-mentioned one 25. With no relevant history every
category gets the neutral base (50).
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from brand_trust.config import BaselineConfig
from brand_trust.models.breakdown import Baseline, BaselineEntry
from brand_trust.models.event import BrandEvent
from brand_trust.scoring.primitives import clamp
from brand_trust.taxonomy.category_taxonomy import CATEGORIES
from brand_trust.utils.time_utils import ensure_utc, window_start

logger = logging.getLogger(__name__)


def _fmt_day(dt: datetime) -> str:
    return dt.strftime("%Y-%m-%d")


def build_baseline(
    brand_id: str,
    historical_events: Iterable[BrandEvent],
    now: datetime,
    horizon_days: Optional[int] = None,
    config: Optional[BaselineConfig] = None,
) -> Baseline:
    """Build per-category baselines from the brand's event history.

    Args:
        brand_id:          Brand to score; other brands' events are ignored.
        historical_events: Events of any age; only the horizon is used.
        now:               Injected evaluation time.
        horizon_days:      Overrides ``config.horizon_days`` when given.
        config:            Baseline band settings (defaults when ``None``).

    Returns:
        ``Baseline`` with an entry for every category.
    """
    config = config or BaselineConfig()
    horizon = horizon_days if horizon_days is not None else config.horizon_days
    end = ensure_utc(now)
    start = window_start(end, horizon)
    window_text = f"{_fmt_day(start)} to {_fmt_day(end)}"

    relevant = [
        e for e in historical_events
        if e.brand_id == brand_id and not e.is_irrelevant and e.is_within(start, end)
    ]
    total = len(relevant)

    if total == 0:
        entries = {
            c: BaselineEntry(
                base=config.neutral,
                base_reason=f"Default baseline (no events in {window_text})",
            )
            for c in CATEGORIES
        }
    else:
        mentions = {c: 0 for c in CATEGORIES}
        for event in relevant:
            dominant = event.dominant_category()
            if dominant is not None:
                mentions[dominant] += 1

        entries = {}
        for c in CATEGORIES:
            frequency = mentions[c] / total
            base = clamp(
                round(config.ceiling - frequency * config.frequency_slope),
                config.floor,
                config.ceiling,
            )
            entries[c] = BaselineEntry(
                base=float(base),
                base_reason=(
                    f"{c.value.capitalize()} mentioned in {mentions[c]} of {total} "
                    f"events ({window_text})"
                ),
                frequency=frequency,
                mention_count=mentions[c],
            )

    logger.debug("Baseline for %s built from %d events", brand_id, total)
    return Baseline(
        brand_id=brand_id,
        entries=entries,
        events_analyzed=total,
        horizon_start=start,
        horizon_end=end,
    )
