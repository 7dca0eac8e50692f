"""
Baseline, source statistics, and public score-breakdown models.

``Baseline`` is the long-horizon (24-month) per-category starting point.
``SourceStats`` summarises the evidence behind one category's window.
``ScoreBreakdownBlock`` is the public per-category result; ``BrandBreakdown``
bundles the four blocks with the brand's overall score.

All models are frozen. Breakdowns are derived, recomputable outputs and are
never edited in place.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from brand_trust.taxonomy.category_taxonomy import CATEGORIES, Category, TrustLabel


class BaselineEntry(BaseModel):
    """Baseline score for one category.

    Attributes:
        base: Baseline score, within the configured floor/ceiling band.
        base_reason: Human-readable citation of the history window.
        frequency: Share of horizon events tagged with this category.
        mention_count: Number of horizon events tagged with this category.
    """

    model_config = ConfigDict(frozen=True)

    base: float
    base_reason: str
    frequency: float = 0.0
    mention_count: int = 0


class Baseline(BaseModel):
    """Per-category baselines for one brand."""

    model_config = ConfigDict(frozen=True)

    brand_id: str
    entries: dict[Category, BaselineEntry]
    events_analyzed: int
    horizon_start: datetime
    horizon_end: datetime

    @model_validator(mode="after")
    def validate_all_categories(self) -> "Baseline":
        missing = set(CATEGORIES) - set(self.entries)
        if missing:
            raise ValueError(f"Baseline missing categories: {sorted(missing)}.")
        return self

    def get(self, category: Category) -> BaselineEntry:
        return self.entries[category]


class SourceStats(BaseModel):
    """Evidence summary behind one category's window delta.

    Attributes:
        evidence_count: Distinct events touching the category in the window.
        verified_count: Of those, events at official/corroborated level.
        independent_owners: Distinct media/ownership groups among verified events.
        has_official: Whether any verified event is an official record.
        days_since_last_event: Age of the newest event, or ``None`` if none.
    """

    model_config = ConfigDict(frozen=True)

    evidence_count: int = 0
    verified_count: int = 0
    independent_owners: int = 0
    has_official: bool = False
    days_since_last_event: Optional[float] = None

    @field_validator("evidence_count", "verified_count", "independent_owners")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"Counts must be >= 0, got {v}.")
        return v

    @property
    def verification_rate(self) -> float:
        """Verified share of evidence (0.0 when there is no evidence)."""
        if self.evidence_count <= 0:
            return 0.0
        return min(1.0, self.verified_count / self.evidence_count)


class ScoreBreakdownBlock(BaseModel):
    """Public per-category score breakdown.

    Invariant: ``value == clamp(base + (0 if proof_required else window_delta), 0, 100)``.
    """

    model_config = ConfigDict(frozen=True)

    component: Category
    base: float
    base_reason: str
    window_delta: float
    value: float
    confidence: float
    verified_count: int
    independent_owners: int
    proof_required: bool
    evidence_count: int = 0
    mixed_delta: float = 0.0
    trust_label: TrustLabel = TrustLabel.LOW

    @model_validator(mode="after")
    def validate_ranges(self) -> "ScoreBreakdownBlock":
        if not 0.0 <= self.value <= 100.0:
            raise ValueError(f"value must be in [0, 100], got {self.value}.")
        if not 0.0 <= self.confidence <= 100.0:
            raise ValueError(f"confidence must be in [0, 100], got {self.confidence}.")
        return self


class BrandBreakdown(BaseModel):
    """All four category blocks plus the blended overall score."""

    model_config = ConfigDict(frozen=True)

    brand_id: str
    blocks: tuple[ScoreBreakdownBlock, ...]
    overall_score: float
    confidence: float
    computed_at: datetime

    def block(self, category: Category) -> ScoreBreakdownBlock:
        for b in self.blocks:
            if b.component == category:
                return b
        raise KeyError(category)

    def category_scores(self) -> dict[Category, float]:
        """Return ``{category: value}`` — the input shape for personalization."""
        return {b.component: b.value for b in self.blocks}

    @property
    def proof_required_count(self) -> int:
        return sum(1 for b in self.blocks if b.proof_required)
