"""
Personalization models: user weights, brand scores, and alignment results.

``UserWeights`` holds the user's raw 0–100 sliders. Normalized weights are
derived on every request (``normalized()``) and never stored.

``BrandCategoryScores`` is the only brand input to personalization. It is
built from a ``BrandBreakdown`` (or supplied directly), never from raw events.

``AlignmentResult``, ``ValueMatchResult`` and ``ComparisonSummary`` are the
outputs.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from brand_trust.taxonomy.category_taxonomy import (
    CATEGORIES,
    AlignmentDimension,
    Category,
    ConfidenceLevel,
    DriverImpact,
    MatchRecommendation,
    MatchSeverity,
)

_EQUAL_SPLIT = 1.0 / len(CATEGORIES)
MIN_RECOMMENDABLE_DIMENSIONS = 3


def _check_slider(v: Optional[float]) -> Optional[float]:
    if v is not None and not 0.0 <= v <= 100.0:
        raise ValueError(f"Slider values must be in [0, 100], got {v}.")
    return v


class UserWeights(BaseModel):
    """A user's raw value sliders.

    Attributes:
        labor / environment / politics / social: How much the user cares, 0–100.
        political_intensity: Optional sub-axis — how politically active the
            user wants brands to be (0–100).
        political_alignment: Optional sub-axis — left/right lean preference (0–100).
        dealbreakers: Optional explicit minimum score per category.
    """

    model_config = ConfigDict(frozen=True)

    labor: float = 50.0
    environment: float = 50.0
    politics: float = 50.0
    social: float = 50.0
    political_intensity: Optional[float] = None
    political_alignment: Optional[float] = None
    dealbreakers: dict[Category, float] = Field(default_factory=dict)

    @field_validator(
        "labor", "environment", "politics", "social",
        "political_intensity", "political_alignment",
    )
    @classmethod
    def validate_slider(cls, v: Optional[float]) -> Optional[float]:
        return _check_slider(v)

    def raw(self, category: Category) -> float:
        return getattr(self, category.value)

    @property
    def raw_total(self) -> float:
        return sum(self.raw(c) for c in CATEGORIES)

    @property
    def has_political_axes(self) -> bool:
        return self.political_intensity is not None and self.political_alignment is not None

    def normalized(self) -> dict[Category, float]:
        """Return weights summing to 1.0 (equal split when all sliders are 0)."""
        total = self.raw_total
        if total <= 0:
            return {c: _EQUAL_SPLIT for c in CATEGORIES}
        return {c: self.raw(c) / total for c in CATEGORIES}


class BrandCategoryScores(BaseModel):
    """A brand's per-category scores (0–100; ``None`` = no evidence).

    Attributes:
        labor / environment / politics / social: Category scores.
        politics_intensity: Optional political-activity axis score.
        politics_alignment: Optional left/right lean axis score.
        confidence: Optional per-category confidence level.
    """

    model_config = ConfigDict(frozen=True)

    labor: Optional[float] = None
    environment: Optional[float] = None
    politics: Optional[float] = None
    social: Optional[float] = None
    politics_intensity: Optional[float] = None
    politics_alignment: Optional[float] = None
    confidence: dict[Category, ConfidenceLevel] = Field(default_factory=dict)

    @field_validator(
        "labor", "environment", "politics", "social",
        "politics_intensity", "politics_alignment",
    )
    @classmethod
    def validate_score(cls, v: Optional[float]) -> Optional[float]:
        return _check_slider(v)

    @classmethod
    def from_mapping(
        cls,
        scores: dict[Category, float],
        confidence: Optional[dict[Category, ConfidenceLevel]] = None,
    ) -> "BrandCategoryScores":
        return cls(
            **{c.value: scores.get(c) for c in CATEGORIES},
            confidence=confidence or {},
        )

    def get(self, category: Category) -> Optional[float]:
        return getattr(self, category.value)


class AlignmentDriver(BaseModel):
    """One dimension's signed contribution to an alignment score."""

    model_config = ConfigDict(frozen=True)

    dimension: AlignmentDimension
    label: str
    impact: DriverImpact
    contribution: float
    brand_score: float
    user_weight: float
    user_weight_raw: float
    confidence: ConfidenceLevel


class DealbreakerResult(BaseModel):
    """Whether a highly weighted dimension fell below an absolute floor."""

    model_config = ConfigDict(frozen=True)

    triggered: bool = False
    dimension: Optional[Category] = None
    threshold: Optional[float] = None
    actual: Optional[float] = None
    message: Optional[str] = None


class AlignmentResult(BaseModel):
    """Personalized fit between one user and one brand."""

    model_config = ConfigDict(frozen=True)

    score: int
    score_raw: int
    confidence: ConfidenceLevel
    confidence_reason: str
    drivers: tuple[AlignmentDriver, ...] = ()
    top_positive: Optional[AlignmentDriver] = None
    top_negative: Optional[AlignmentDriver] = None
    dealbreaker: DealbreakerResult = DealbreakerResult()
    excluded_dimensions: tuple[AlignmentDimension, ...] = ()
    included_dimensions: tuple[AlignmentDimension, ...] = ()
    summary: str
    is_personalized: bool = True

    @model_validator(mode="after")
    def validate_score_range(self) -> "AlignmentResult":
        for name in ("score", "score_raw"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValueError(f"{name} must be in [0, 100], got {value}.")
        return self

    @property
    def is_recommendable(self) -> bool:
        """True when no dealbreaker fired and enough dimensions had evidence."""
        return (
            not self.dealbreaker.triggered
            and len(self.included_dimensions) >= MIN_RECOMMENDABLE_DIMENSIONS
        )


class CategoryDelta(BaseModel):
    """Per-category difference between an alternative and the current brand."""

    model_config = ConfigDict(frozen=True)

    category: Category
    raw_delta: float
    weighted_delta: float


class ComparisonSummary(BaseModel):
    """Brand-vs-alternative top-contributor summary."""

    model_config = ConfigDict(frozen=True)

    deltas: tuple[CategoryDelta, ...]
    top_contributors: tuple[CategoryDelta, ...]
    phrases: tuple[str, ...]
    summary: str


class CategoryMatch(BaseModel):
    """Gap between the user's slider and the brand's score on one category.

    ``gap`` is ``None`` when the brand has no score for the category.
    """

    model_config = ConfigDict(frozen=True)

    category: Category
    gap: Optional[int] = None
    severity: MatchSeverity = MatchSeverity.NEUTRAL
    user_cares: bool = False


class ValueMatchResult(BaseModel):
    """Slider-versus-score match across all categories."""

    model_config = ConfigDict(frozen=True)

    overall_match: int
    category_matches: tuple[CategoryMatch, ...]
    recommendation: MatchRecommendation

    @field_validator("overall_match")
    @classmethod
    def validate_overall(cls, v: int) -> int:
        if not 0 <= v <= 100:
            raise ValueError(f"overall_match must be in [0, 100], got {v}.")
        return v

    def for_category(self, category: Category) -> CategoryMatch:
        return next(m for m in self.category_matches if m.category == category)
