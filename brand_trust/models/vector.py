"""
Category vector models.

``CategoryVector`` is the net weighted pressure on each category over one
lookback window. Values are always finite and, once produced by the
aggregator, clamped to ``[-cap, +cap]``.

``CachedVector`` pairs a vector with the moment it was computed. It replaces
a process-wide cache: the caller holds the pair and decides when to refresh,
and staleness is judged against an explicit ``now``.
"""

from __future__ import annotations

import math
from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

from brand_trust.taxonomy.category_taxonomy import CATEGORIES, Category
from brand_trust.utils.time_utils import ensure_utc, hours_between


class CategoryVector(BaseModel):
    """Per-category float vector in category declaration order."""

    model_config = ConfigDict(frozen=True)

    labor: float = 0.0
    environment: float = 0.0
    politics: float = 0.0
    social: float = 0.0

    @field_validator("labor", "environment", "politics", "social")
    @classmethod
    def validate_finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError(f"CategoryVector values must be finite, got {v}.")
        return v

    @classmethod
    def zero(cls) -> "CategoryVector":
        return cls()

    @classmethod
    def from_mapping(cls, values: dict[Category, float]) -> "CategoryVector":
        """Build a vector from a partial mapping (missing categories → 0)."""
        return cls(**{c.value: float(values.get(c, 0.0)) for c in CATEGORIES})

    def get(self, category: Category) -> float:
        return getattr(self, category.value)

    def as_dict(self) -> dict[Category, float]:
        return {c: self.get(c) for c in CATEGORIES}


class CachedVector(BaseModel):
    """A computed vector with its explicit staleness timestamp.

    Attributes:
        brand_id: Brand the vector belongs to.
        vector: The clamped category vector.
        computed_at: UTC time the vector was computed.
        lookback_days: Window length the vector covers.
        events_used: Number of events that contributed.
    """

    model_config = ConfigDict(frozen=True)

    brand_id: str
    vector: CategoryVector
    computed_at: datetime
    lookback_days: int
    events_used: int = 0

    @field_validator("computed_at")
    @classmethod
    def normalize_timezone(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    def age_hours(self, now: datetime) -> float:
        return hours_between(self.computed_at, now)

    def is_stale(self, now: datetime, max_age_hours: float = 24.0) -> bool:
        """Return ``True`` once the vector is older than ``max_age_hours``."""
        return self.age_hours(now) > max_age_hours
