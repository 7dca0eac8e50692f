"""
Category and trust taxonomy for brand scoring.

Every scored event is described along a few orthogonal dimensions:
  - ``Category``          — the *where*: which value axis the event touches.
  - ``VerificationLevel`` — the *how sure*: trust tier of the reporting source.
  - ``SeverityTier``      — the *how bad*: classifier output (minor → severe).
  - ``SeverityWeight``    — the numeric weighting scale used by aggregation.
  - ``Orientation``       — the *which way*: negative, positive, or mixed.
  - ``SourceKind``        — the *who said it*: which policy table classifies it.

``Category`` declaration order is significant: it is the tie-break order for
driver ranking and comparison summaries, and the block order of every
breakdown.

Usage example::

    from brand_trust.taxonomy.category_taxonomy import Category, VerificationLevel

    category     = Category.LABOR
    verification = VerificationLevel.OFFICIAL

This module has NO imports from any other ``brand_trust`` package.
"""

from enum import StrEnum


class Category(StrEnum):
    """The four value axes a brand is scored on."""

    LABOR = "labor"
    """Worker safety, wages, union relations, OSHA-type enforcement."""

    ENVIRONMENT = "environment"
    """Emissions, pollution permits, EPA-type enforcement, certifications."""

    POLITICS = "politics"
    """Political donations, lobbying, partisan tilt of spending."""

    SOCIAL = "social"
    """Product safety, recalls, lawsuits, community impact."""


CATEGORIES: tuple[Category, ...] = tuple(Category)

CATEGORY_LABELS: dict[Category, str] = {
    Category.LABOR:       "Labor",
    Category.ENVIRONMENT: "Environment",
    Category.POLITICS:    "Politics",
    Category.SOCIAL:      "Social",
}


class VerificationLevel(StrEnum):
    """Trust tier of the source(s) backing an event.

    Anything outside these three values is treated as *unknown* by the
    scoring primitives.
    """

    OFFICIAL = "official"
    """Government or regulator record (EPA, OSHA, FEC filings)."""

    CORROBORATED = "corroborated"
    """Reported by two or more independent outlets."""

    UNVERIFIED = "unverified"
    """Single-source report; displayed but weighted down."""


class SeverityTier(StrEnum):
    """Severity level produced by the source-specific classifiers."""

    MINOR = "minor"
    MODERATE = "moderate"
    SEVERE = "severe"


class SeverityWeight(StrEnum):
    """Numeric weighting tiers used by the vector aggregator."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Orientation(StrEnum):
    """Direction of an event's effect on the brand's reputation."""

    NEGATIVE = "negative"
    POSITIVE = "positive"
    MIXED = "mixed"
    """Ambiguous signal; its net penalty per window is capped."""


class SourceKind(StrEnum):
    """Which severity policy table classifies an event."""

    REGULATORY_ENVIRONMENT = "regulatory_environment"
    """EPA / ECHO enforcement and compliance records."""

    REGULATORY_LABOR = "regulatory_labor"
    """OSHA inspections and penalties."""

    REGULATORY_POLITICAL = "regulatory_political"
    """FEC receipts and donation tilt."""

    GENERIC = "generic"
    """News, RSS, and anything else; classified by impact magnitude only."""


class Badge(StrEnum):
    """UI trust signal attached to a severity result."""

    INFO = "info"
    WARN = "warn"
    DANGER = "danger"


class TrustLabel(StrEnum):
    """Display band derived from a category's confidence index."""

    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"
    NEEDS_VERIFICATION = "needs_verification"


class ConfidenceLevel(StrEnum):
    """Coarse confidence attached to a brand score for personalization."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class DriverImpact(StrEnum):
    """Sign of a dimension's contribution to an alignment score."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class AlignmentDimension(StrEnum):
    """Dimensions an alignment score can be built from.

    The first four mirror ``Category``. The two political axes replace
    ``POLITICS`` when the user sets both political sub-axes.
    """

    LABOR = "labor"
    ENVIRONMENT = "environment"
    POLITICS = "politics"
    SOCIAL = "social"
    POLITICAL_INTENSITY = "political_intensity"
    POLITICAL_ALIGNMENT = "political_alignment"


DIMENSION_LABELS: dict[AlignmentDimension, str] = {
    AlignmentDimension.LABOR:               "Labor Practices",
    AlignmentDimension.ENVIRONMENT:         "Environment",
    AlignmentDimension.POLITICS:            "Politics",
    AlignmentDimension.SOCIAL:              "Social Impact",
    AlignmentDimension.POLITICAL_INTENSITY: "Political Intensity",
    AlignmentDimension.POLITICAL_ALIGNMENT: "Political Alignment",
}


class MatchSeverity(StrEnum):
    """How far a brand sits from the user on one category they care about."""

    NEUTRAL = "neutral"
    GOOD_MATCH = "good_match"
    MINOR_MISMATCH = "minor_mismatch"
    MODERATE_MISMATCH = "moderate_mismatch"
    MAJOR_MISMATCH = "major_mismatch"


class MatchRecommendation(StrEnum):
    """Overall verdict of a value match."""

    ALIGNED = "aligned"
    NEUTRAL = "neutral"
    MISALIGNED = "misaligned"
