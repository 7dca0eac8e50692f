"""
Tests for brand_trust/scoring/severity.py.

What we test
------------
infer_source_kind():
  - Regulator names (EPA / OSHA / FEC) select their policy, case-insensitive.
  - Non-regulator names select generic; no name falls back to category.

classify_severity():
  - Environmental qnc thresholds.
  - Labor willful / repeat / serious / penalty thresholds.
  - Political tilt thresholds.
  - Generic impact thresholds, including the informational case.
  - Missing or unparseable metrics never raise and fall through to generic.

resolve_severity():
  - Declared severity wins; otherwise the classified tier.
"""

from __future__ import annotations

import pytest

from brand_trust.scoring.severity import (
    classify_severity,
    infer_source_kind,
    resolve_severity,
)
from brand_trust.taxonomy.category_taxonomy import Badge, Category, SeverityTier, SourceKind


def _event(make_event, impacts=None, raw=None, **overrides):
    overrides.setdefault("severity", None)
    return make_event(impacts or {}, raw=raw or {}, **overrides)


class TestInferSourceKind:
    @pytest.mark.parametrize(
        "name, kind",
        [
            ("EPA ECHO", SourceKind.REGULATORY_ENVIRONMENT),
            ("osha", SourceKind.REGULATORY_LABOR),
            ("FEC filings", SourceKind.REGULATORY_POLITICAL),
            ("Reuters", SourceKind.GENERIC),
        ],
    )
    def test_by_name(self, name, kind):
        assert infer_source_kind(name, None) == kind

    def test_by_category_when_no_name(self):
        assert infer_source_kind(None, Category.LABOR) == SourceKind.REGULATORY_LABOR

    def test_social_category_is_generic(self):
        assert infer_source_kind(None, Category.SOCIAL) == SourceKind.GENERIC

    def test_nothing_known_is_generic(self):
        assert infer_source_kind(None, None) == SourceKind.GENERIC


class TestEnvironmentalPolicy:
    @pytest.mark.parametrize(
        "qnc, tier",
        [(4, SeverityTier.SEVERE), (6, SeverityTier.SEVERE),
         (3, SeverityTier.MODERATE), (2, SeverityTier.MODERATE),
         (1, SeverityTier.MINOR)],
    )
    def test_qnc_thresholds(self, make_event, qnc, tier):
        ev = _event(make_event, raw={"qnc": qnc}, source_kind=SourceKind.REGULATORY_ENVIRONMENT)
        assert classify_severity(ev).level == tier

    def test_severe_is_danger_badge(self, make_event):
        ev = _event(make_event, raw={"qnc": 5}, source_kind=SourceKind.REGULATORY_ENVIRONMENT)
        assert classify_severity(ev).badge == Badge.DANGER

    def test_no_metric_falls_back_to_environment_impact(self, make_event):
        ev = _event(
            make_event,
            impacts={"environment": -6, "labor": 1},
            source_kind=SourceKind.REGULATORY_ENVIRONMENT,
        )
        assert classify_severity(ev).level == SeverityTier.SEVERE

    def test_unparseable_metric_treated_as_zero(self, make_event):
        ev = _event(
            make_event,
            impacts={"environment": -1},
            raw={"qnc": "n/a"},
            source_kind=SourceKind.REGULATORY_ENVIRONMENT,
        )
        result = classify_severity(ev)
        assert result.level == SeverityTier.MINOR
        assert result.badge == Badge.INFO


class TestLaborPolicy:
    @pytest.mark.parametrize(
        "raw, tier",
        [
            ({"nr_willful": 2}, SeverityTier.SEVERE),
            ({"total_current_penalty": 100_000}, SeverityTier.SEVERE),
            ({"nr_repeat": 1}, SeverityTier.MODERATE),
            ({"nr_serious": 3}, SeverityTier.MODERATE),
            ({"total_current_penalty": 25_000}, SeverityTier.MODERATE),
            ({"nr_serious": 1}, SeverityTier.MINOR),
        ],
    )
    def test_thresholds(self, make_event, raw, tier):
        ev = _event(make_event, raw=raw, source_name="OSHA")
        assert classify_severity(ev).level == tier

    def test_penalty_cited_in_reason(self, make_event):
        ev = _event(make_event, raw={"total_current_penalty": 150000}, source_name="OSHA")
        assert "$150,000" in classify_severity(ev).reason


class TestPoliticalPolicy:
    @pytest.mark.parametrize(
        "tilt, tier",
        [(85, SeverityTier.SEVERE), (70, SeverityTier.MODERATE), (55, SeverityTier.MINOR)],
    )
    def test_tilt_thresholds(self, make_event, tilt, tier):
        ev = _event(make_event, raw={"tilt_pct": tilt}, source_name="FEC")
        assert classify_severity(ev).level == tier

    def test_low_tilt_falls_back_to_generic(self, make_event):
        ev = _event(make_event, impacts={"politics": -3}, raw={"tilt_pct": 50}, source_name="FEC")
        assert classify_severity(ev).level == SeverityTier.MODERATE


class TestGenericPolicy:
    @pytest.mark.parametrize(
        "impact, tier, badge",
        [
            (-5, SeverityTier.SEVERE, Badge.DANGER),
            (-3, SeverityTier.MODERATE, Badge.WARN),
            (-1, SeverityTier.MINOR, Badge.INFO),
            (2, SeverityTier.MINOR, Badge.INFO),
        ],
    )
    def test_thresholds(self, make_event, impact, tier, badge):
        ev = _event(make_event, impacts={"social": impact}, source_name="Reuters")
        result = classify_severity(ev)
        assert result.level == tier
        assert result.badge == badge

    def test_positive_impact_is_informational(self, make_event):
        ev = _event(make_event, impacts={"social": 4}, source_name="Reuters")
        assert classify_severity(ev).reason.startswith("Informational")

    def test_uses_dominant_category(self, make_event):
        ev = _event(make_event, impacts={"labor": -1, "social": -7}, source_name="Reuters")
        assert classify_severity(ev).level == SeverityTier.SEVERE

    def test_event_without_impacts(self, make_event):
        ev = _event(make_event, source_name="Reuters")
        assert classify_severity(ev).level == SeverityTier.MINOR


class TestResolveSeverity:
    def test_declared_wins(self, make_event):
        ev = make_event({"social": -9}, severity="low")
        assert resolve_severity(ev) == "low"

    def test_classified_when_missing(self, make_event):
        ev = _event(make_event, impacts={"social": -9}, source_name="Reuters")
        assert resolve_severity(ev) == "severe"
