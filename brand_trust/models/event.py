"""
Brand event model — the single input record of the scoring engine.

``BrandEvent`` represents one classified news, regulatory, or community
event attached to a brand. Events arrive already tagged by the ingestion
layer; the engine treats them as read-only.

Key fields:
  - ``category_impacts`` → signed per-category pressure, roughly −20..+20.
  - ``severity``         → a classifier tier (minor/moderate/severe) or a
                           weighting tier (low/medium/high/critical). ``None``
                           means "re-derive from ``raw`` via the classifier".
  - ``verification``     → official / corroborated / unverified; any other
                           string is treated as unknown, never rejected.
  - ``event_date``       → when the event happened; falls back to
                           ``created_at`` when unknown.

Validation is strict only where a bad value would poison arithmetic
(non-finite impacts, credibility outside [0, 1]). Missing data is always
allowed and resolved by documented fallbacks downstream.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from brand_trust.taxonomy.category_taxonomy import (
    CATEGORIES,
    Category,
    Orientation,
    SourceKind,
)
from brand_trust.utils.time_utils import ensure_utc


class BrandEvent(BaseModel):
    """A classified event affecting one brand's category scores.

    Attributes:
        event_id: Stable identifier from the ingestion layer.
        brand_id: Brand this event is attached to.
        category: Dominant category, or ``None`` to infer from impacts.
        category_impacts: Category → signed impact (pre-weighting).
        severity: Severity tier string, or ``None`` to classify from ``raw``.
        verification: Verification level string, or ``None`` (unknown).
        credibility: Source trustworthiness in [0, 1].
        event_date: When the event occurred (UTC), if known.
        created_at: When the event was ingested (UTC).
        is_irrelevant: Exclusion flag set by the relevance filter.
        orientation: Negative, positive, or mixed signal.
        source_kind: Which severity policy applies, or ``None`` to infer.
        source_name: Reporting source, e.g. ``"EPA"`` or ``"Reuters"``.
        domain_owner: Media/ownership group of the reporting outlet.
        title: Optional headline for display and logging.
        raw: Adapter-specific metrics (``qnc``, ``nr_willful``, ``tilt_pct`` …).
    """

    model_config = ConfigDict(frozen=True)

    event_id: str
    brand_id: str
    category: Optional[Category] = None
    category_impacts: dict[Category, float] = Field(default_factory=dict)
    severity: Optional[str] = None
    verification: Optional[str] = None
    credibility: float = 0.5
    event_date: Optional[datetime] = None
    created_at: datetime
    is_irrelevant: bool = False
    orientation: Orientation = Orientation.NEGATIVE
    source_kind: Optional[SourceKind] = None
    source_name: Optional[str] = None
    domain_owner: Optional[str] = None
    title: Optional[str] = None
    raw: dict[str, Any] = Field(default_factory=dict)

    @field_validator("category_impacts")
    @classmethod
    def validate_impacts_finite(cls, v: dict[Category, float]) -> dict[Category, float]:
        for category, impact in v.items():
            if not math.isfinite(impact):
                raise ValueError(
                    f"category_impacts[{category}] must be finite, got {impact}."
                )
        return v

    @field_validator("credibility")
    @classmethod
    def validate_credibility(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"credibility must be in [0.0, 1.0], got {v}.")
        return v

    @field_validator("event_date", "created_at")
    @classmethod
    def normalize_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v) if v is not None else None

    @property
    def effective_date(self) -> datetime:
        """``event_date`` when known, else ``created_at``."""
        return self.event_date or self.created_at

    def impact_for(self, category: Category) -> float:
        """Return the signed impact for ``category`` (0.0 when absent)."""
        return self.category_impacts.get(category, 0.0)

    def has_impact(self) -> bool:
        """Return ``True`` if any category carries a non-zero impact."""
        return any(self.impact_for(c) != 0.0 for c in CATEGORIES)

    def dominant_category(self) -> Optional[Category]:
        """Return the declared category, else the one with the largest |impact|.

        Ties resolve to the earliest category in declaration order. Returns
        ``None`` for an event with no category and no non-zero impact.
        """
        if self.category is not None:
            return self.category
        best: Optional[Category] = None
        best_magnitude = 0.0
        for c in CATEGORIES:
            magnitude = abs(self.impact_for(c))
            if magnitude > best_magnitude:
                best, best_magnitude = c, magnitude
        return best

    def is_within(self, start: datetime, end: datetime) -> bool:
        """Return ``True`` if ``start <= effective_date <= end``."""
        return ensure_utc(start) <= self.effective_date <= ensure_utc(end)
