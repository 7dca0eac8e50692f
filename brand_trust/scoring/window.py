"""
Window delta, mixed-event cap, and proof gate.

Deltas are built from the unclamped window sums, with mixed-orientation
events kept apart:

    plain_delta = plain sum × delta_scale
    mixed_delta = mixed sum × delta_scale
    delta       = clamp(plain_delta + max(mixed_delta, −mixed_penalty_cap),
                        −cap × delta_scale, +cap × delta_scale)

Mixed events therefore add at most ``mixed_penalty_cap`` points of penalty on
top of whatever the other events contribute, and never offset them.
``raw_delta`` is the delta without the mixed cap (the clamped total vector
entry × scale).

A large delta (|delta| > proof_delta_threshold) needs proof before it may move
a public score. It is gated when no event is verified, or when fewer than
``min_verified_sources`` events are verified and fewer than
``min_independent_owners`` ownership groups back them. With
``official_record_satisfies_proof`` enabled, one official record lifts the
second condition. Gated deltas are still reported; the composer just does not
apply them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from brand_trust.config import AppConfig, WindowConfig
from brand_trust.models.breakdown import SourceStats
from brand_trust.models.event import BrandEvent
from brand_trust.models.vector import CategoryVector
from brand_trust.scoring.primitives import clamp
from brand_trust.scoring.vector import split_contributions
from brand_trust.taxonomy.category_taxonomy import CATEGORIES, Category


@dataclass(frozen=True)
class WindowDelta:
    """Window delta for one category.

    Attributes:
        vector_value: Clamped total vector entry for the category.
        raw_delta:    ``vector_value × delta_scale``, before the mixed cap.
        mixed_delta:  Contribution of mixed-orientation events, in points.
        delta:        Delta after the mixed cap, clamped to the vector range.
    """

    vector_value: float
    raw_delta: float
    mixed_delta: float
    delta: float


def window_delta(vector_value: float, scale: float = 4.0) -> float:
    """Convert a vector entry into score points."""
    return vector_value * scale


def apply_mixed_cap(mixed_delta: float, cap: float = 3.0) -> float:
    """Floor the mixed-event penalty at ``−cap`` points; gains pass through."""
    return max(mixed_delta, -cap)


def combine_window_delta(
    plain_sum: float,
    mixed_sum: float,
    config: Optional[AppConfig] = None,
) -> WindowDelta:
    """Build one category's ``WindowDelta`` from unclamped plain and mixed sums."""
    config = config or AppConfig()
    scale = config.window.delta_scale
    cap = config.vector.cap_per_category

    vector_value = clamp(plain_sum + mixed_sum, -cap, cap)
    mixed = window_delta(mixed_sum, scale)
    capped = window_delta(plain_sum, scale) + apply_mixed_cap(mixed, config.window.mixed_penalty_cap)
    limit = window_delta(cap, scale)
    return WindowDelta(
        vector_value=vector_value,
        raw_delta=window_delta(vector_value, scale),
        mixed_delta=mixed,
        delta=clamp(capped, -limit, limit),
    )


def evaluate_proof_gate(
    delta: float,
    stats: SourceStats,
    config: Optional[WindowConfig] = None,
) -> bool:
    """Return ``True`` when ``delta`` must be withheld until it is verified."""
    config = config or WindowConfig()
    if abs(delta) <= config.proof_delta_threshold:
        return False
    if stats.verified_count == 0:
        return True
    thin = (
        stats.verified_count < config.min_verified_sources
        and stats.independent_owners < config.min_independent_owners
    )
    if thin and config.official_record_satisfies_proof and stats.has_official:
        return False
    return thin


def deltas_from_sums(
    plain: dict[Category, float],
    mixed: Optional[dict[Category, float]] = None,
    config: Optional[AppConfig] = None,
) -> dict[Category, WindowDelta]:
    """Compute per-category ``WindowDelta`` from unclamped window sums."""
    mixed = mixed or {}
    return {
        c: combine_window_delta(plain.get(c, 0.0), mixed.get(c, 0.0), config)
        for c in CATEGORIES
    }


def deltas_from_vector(
    vector: CategoryVector,
    config: Optional[AppConfig] = None,
) -> dict[Category, WindowDelta]:
    """Per-category deltas for an already-clamped vector with no mixed share."""
    return deltas_from_sums(vector.as_dict(), None, config)


def compute_window_deltas(
    brand_id: str,
    events: list[BrandEvent],
    now: datetime,
    config: Optional[AppConfig] = None,
) -> dict[Category, WindowDelta]:
    """Aggregate the lookback window and return per-category deltas."""
    config = config or AppConfig()
    plain, mixed = split_contributions(
        brand_id, events, now, config.vector.lookback_days, config.decay.half_life_days
    )
    return deltas_from_sums(plain, mixed, config)
