"""
Decay and weighting primitives shared by every scoring stage.

recency_decay
-------------
    decay = exp(-age_days * ln 2 / half_life_days)

    age 0 → 1.0, age == half_life → 0.5. Future-dated events are treated as
    age 0. A non-positive half-life degenerates to a step: 1.0 at age 0,
    0.0 otherwise.

verification_factor
-------------------
    official 1.0 ≥ corroborated 0.75 ≥ unverified 0.5 ≥ unknown 0.1

severity_value
--------------
    critical 1.0, high 0.8, medium 0.5, low 0.3; anything else 0.5.
    Classifier tiers are folded onto the same scale:
    severe → high, moderate → medium, minor → low.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Optional

from brand_trust.taxonomy.category_taxonomy import (
    SeverityTier,
    SeverityWeight,
    VerificationLevel,
)
from brand_trust.utils.time_utils import age_days

_LN2 = math.log(2.0)

_VERIFICATION_FACTOR: dict[str, float] = {
    VerificationLevel.OFFICIAL:     1.0,
    VerificationLevel.CORROBORATED: 0.75,
    VerificationLevel.UNVERIFIED:   0.5,
}
UNKNOWN_VERIFICATION_FACTOR = 0.1

_SEVERITY_WEIGHT: dict[str, float] = {
    SeverityWeight.CRITICAL: 1.0,
    SeverityWeight.HIGH:     0.8,
    SeverityWeight.MEDIUM:   0.5,
    SeverityWeight.LOW:      0.3,
}
DEFAULT_SEVERITY_WEIGHT = 0.5

# Classifier output → weighting tier
_TIER_TO_WEIGHT: dict[str, SeverityWeight] = {
    SeverityTier.SEVERE:   SeverityWeight.HIGH,
    SeverityTier.MODERATE: SeverityWeight.MEDIUM,
    SeverityTier.MINOR:    SeverityWeight.LOW,
}


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp ``value`` into ``[lo, hi]``."""
    return max(lo, min(hi, value))


def recency_decay(event_date: datetime, now: datetime, half_life_days: float = 45.0) -> float:
    """Return the exponential recency weight of an event in ``[0, 1]``.

    Args:
        event_date:     Effective date of the event.
        now:            Injected evaluation time.
        half_life_days: Age at which the weight halves.
    """
    age = max(0.0, age_days(event_date, now))
    if half_life_days <= 0:
        return 1.0 if age == 0.0 else 0.0
    return clamp(math.exp(-age * _LN2 / half_life_days), 0.0, 1.0)


def verification_factor(level: Optional[str]) -> float:
    """Return the trust multiplier for a verification level (case-insensitive)."""
    if not level:
        return UNKNOWN_VERIFICATION_FACTOR
    return _VERIFICATION_FACTOR.get(level.strip().lower(), UNKNOWN_VERIFICATION_FACTOR)


def severity_value(tier: Optional[str]) -> float:
    """Return the aggregation weight for a severity tier (case-insensitive)."""
    if not tier:
        return DEFAULT_SEVERITY_WEIGHT
    key = tier.strip().lower()
    key = _TIER_TO_WEIGHT.get(key, key)
    return _SEVERITY_WEIGHT.get(key, DEFAULT_SEVERITY_WEIGHT)
