"""
Source-specific severity classification.

Each ``SourceKind`` has one policy function. Dispatch goes through
``_POLICIES`` and always falls back to the generic impact rule, so an event
from an unknown source is still classified.

Policy thresholds
-----------------
regulatory_environment (EPA / ECHO):
    qnc ≥ 4 quarters in non-compliance → severe
    qnc 2–3 → moderate, qnc 1 → minor

regulatory_labor (OSHA):
    willful ≥ 2  or penalty ≥ $100,000           → severe
    repeat ≥ 1   or serious ≥ 3 or penalty ≥ $25,000 → moderate
    serious ≥ 1                                   → minor

regulatory_political (FEC):
    tilt_pct ≥ 85 → severe, ≥ 70 → moderate, ≥ 55 → minor

generic (news, anything else), on the relevant category impact:
    ≤ −5 → severe, ≤ −3 → moderate, < 0 → minor, else informational.

Regulatory policies whose metrics are absent fall through to the generic
rule on their own category's impact. Raw metrics that cannot be parsed are
read as 0, so classification never raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from brand_trust.models.event import BrandEvent
from brand_trust.taxonomy.category_taxonomy import (
    Badge,
    Category,
    SeverityTier,
    SourceKind,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeverityResult:
    """Outcome of a severity classification.

    Attributes:
        level:  Classifier tier.
        reason: Human-readable explanation citing the deciding metric.
        badge:  UI signal (danger / warn / info).
    """

    level: SeverityTier
    reason: str
    badge: Badge


_BADGE_FOR_TIER: dict[SeverityTier, Badge] = {
    SeverityTier.SEVERE:   Badge.DANGER,
    SeverityTier.MODERATE: Badge.WARN,
    SeverityTier.MINOR:    Badge.INFO,
}

# Source-name fragments → policy (case-insensitive substring match)
_SOURCE_NAME_KINDS: tuple[tuple[str, SourceKind], ...] = (
    ("epa",  SourceKind.REGULATORY_ENVIRONMENT),
    ("echo", SourceKind.REGULATORY_ENVIRONMENT),
    ("osha", SourceKind.REGULATORY_LABOR),
    ("fec",  SourceKind.REGULATORY_POLITICAL),
)

_CATEGORY_KINDS: dict[Category, SourceKind] = {
    Category.ENVIRONMENT: SourceKind.REGULATORY_ENVIRONMENT,
    Category.LABOR:       SourceKind.REGULATORY_LABOR,
    Category.POLITICS:    SourceKind.REGULATORY_POLITICAL,
}


def _metric(raw: dict[str, Any], *keys: str) -> float:
    """Return the first parseable numeric value among ``keys`` (0.0 if none)."""
    for key in keys:
        value = raw.get(key)
        if value is None or isinstance(value, bool):
            continue
        try:
            return float(value)
        except (TypeError, ValueError):
            logger.debug("Unparseable severity metric %s=%r; treating as 0", key, value)
    return 0.0


def _result(level: SeverityTier, reason: str) -> SeverityResult:
    return SeverityResult(level=level, reason=reason, badge=_BADGE_FOR_TIER[level])


def infer_source_kind(source_name: Optional[str], category: Optional[Category]) -> SourceKind:
    """Map a reporting source name (or, failing that, a category) to a policy.

    Only regulator names select a regulatory policy by name. When the name is
    unknown, a regulatory policy is chosen by ``category``; otherwise generic.
    """
    if source_name:
        lowered = source_name.lower()
        for fragment, kind in _SOURCE_NAME_KINDS:
            if fragment in lowered:
                return kind
        return SourceKind.GENERIC
    if category is not None:
        return _CATEGORY_KINDS.get(category, SourceKind.GENERIC)
    return SourceKind.GENERIC


# ── Policies ──────────────────────────────────────────────────────────────────


def _classify_generic(event: BrandEvent, category: Optional[Category] = None) -> SeverityResult:
    category = category or event.dominant_category()
    impact = event.impact_for(category) if category is not None else 0.0
    label = category.value if category is not None else "overall"

    if impact <= -5:
        return _result(SeverityTier.SEVERE, f"Strong negative {label} impact ({impact:+g})")
    if impact <= -3:
        return _result(SeverityTier.MODERATE, f"Moderate negative {label} impact ({impact:+g})")
    if impact < 0:
        return _result(SeverityTier.MINOR, f"Minor negative {label} impact ({impact:+g})")
    return _result(SeverityTier.MINOR, f"Informational {label} signal ({impact:+g})")


def _classify_environment(event: BrandEvent) -> SeverityResult:
    qnc = _metric(event.raw, "qnc", "quarters_in_nc")
    if qnc >= 4:
        return _result(SeverityTier.SEVERE, f"{qnc:g} quarters in non-compliance")
    if qnc >= 2:
        return _result(SeverityTier.MODERATE, f"{qnc:g} quarters in non-compliance")
    if qnc >= 1:
        return _result(SeverityTier.MINOR, "1 quarter in non-compliance")
    return _classify_generic(event, Category.ENVIRONMENT)


def _classify_labor(event: BrandEvent) -> SeverityResult:
    raw = event.raw
    willful = _metric(raw, "nr_willful", "willful")
    repeat = _metric(raw, "nr_repeat", "repeat")
    serious = _metric(raw, "nr_serious", "serious")
    penalty = _metric(raw, "total_current_penalty", "penalty")

    if willful >= 2 or penalty >= 100_000:
        return _result(
            SeverityTier.SEVERE,
            f"{willful:g} willful violations, ${penalty:,.0f} in penalties",
        )
    if repeat >= 1 or serious >= 3 or penalty >= 25_000:
        return _result(
            SeverityTier.MODERATE,
            f"{repeat:g} repeat / {serious:g} serious violations, ${penalty:,.0f} in penalties",
        )
    if serious >= 1:
        return _result(SeverityTier.MINOR, f"{serious:g} serious violation(s)")
    return _classify_generic(event, Category.LABOR)


def _classify_political(event: BrandEvent) -> SeverityResult:
    tilt = _metric(event.raw, "tilt_pct", "tilt")
    if tilt >= 85:
        return _result(SeverityTier.SEVERE, f"{tilt:g}% partisan tilt in donations")
    if tilt >= 70:
        return _result(SeverityTier.MODERATE, f"{tilt:g}% partisan tilt in donations")
    if tilt >= 55:
        return _result(SeverityTier.MINOR, f"{tilt:g}% partisan tilt in donations")
    return _classify_generic(event, Category.POLITICS)


_POLICIES: dict[SourceKind, Callable[[BrandEvent], SeverityResult]] = {
    SourceKind.REGULATORY_ENVIRONMENT: _classify_environment,
    SourceKind.REGULATORY_LABOR:       _classify_labor,
    SourceKind.REGULATORY_POLITICAL:   _classify_political,
    SourceKind.GENERIC:                _classify_generic,
}


# ── Public API ────────────────────────────────────────────────────────────────


def classify_severity(event: BrandEvent) -> SeverityResult:
    """Classify ``event`` with the policy for its (declared or inferred) source kind."""
    kind = event.source_kind or infer_source_kind(event.source_name, event.category)
    policy = _POLICIES.get(kind, _classify_generic)
    return policy(event)


def resolve_severity(event: BrandEvent) -> str:
    """Return the event's declared severity, or the classified tier when absent."""
    if event.severity:
        return event.severity
    return classify_severity(event).level.value
