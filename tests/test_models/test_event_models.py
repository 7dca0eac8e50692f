"""Tests for BrandEvent — validation, timezone handling, and helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from brand_trust.models.event import BrandEvent
from brand_trust.taxonomy.category_taxonomy import Category, Orientation


def _event(**overrides) -> BrandEvent:
    fields = {
        "event_id": "e1",
        "brand_id": "acme",
        "created_at": datetime(2026, 5, 30, tzinfo=timezone.utc),
        "category_impacts": {Category.LABOR: -4.0},
    }
    fields.update(overrides)
    return BrandEvent(**fields)


class TestBrandEventConstruction:
    def test_minimal_construction(self):
        ev = _event()
        assert ev.credibility == 0.5
        assert ev.orientation == Orientation.NEGATIVE
        assert ev.is_irrelevant is False
        assert ev.severity is None

    def test_frozen(self):
        ev = _event()
        with pytest.raises(ValidationError):
            ev.brand_id = "other"

    def test_string_category_keys_coerced(self):
        ev = _event(category_impacts={"environment": 3.0})
        assert ev.impact_for(Category.ENVIRONMENT) == 3.0

    def test_unknown_category_key_rejected(self):
        with pytest.raises(ValidationError):
            _event(category_impacts={"general": 1.0})

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_impact_rejected(self, bad):
        with pytest.raises(ValidationError, match="finite"):
            _event(category_impacts={Category.LABOR: bad})

    @pytest.mark.parametrize("bad", [-0.1, 1.1])
    def test_credibility_out_of_range_rejected(self, bad):
        with pytest.raises(ValidationError, match="credibility"):
            _event(credibility=bad)

    def test_unknown_verification_string_allowed(self):
        assert _event(verification="rumour").verification == "rumour"


class TestTimezones:
    def test_naive_datetime_treated_as_utc(self):
        ev = _event(created_at=datetime(2026, 5, 30, 8, 0))
        assert ev.created_at.tzinfo is not None
        assert ev.created_at.utcoffset() == timedelta(0)
        assert ev.created_at.hour == 8

    def test_offset_datetime_converted_to_utc(self):
        est = timezone(timedelta(hours=-5))
        ev = _event(created_at=datetime(2026, 5, 30, 8, 0, tzinfo=est))
        assert ev.created_at.hour == 13


class TestHelpers:
    def test_effective_date_prefers_event_date(self):
        event_date = datetime(2026, 5, 1, tzinfo=timezone.utc)
        assert _event(event_date=event_date).effective_date == event_date

    def test_effective_date_falls_back_to_created_at(self):
        ev = _event()
        assert ev.effective_date == ev.created_at

    def test_impact_for_missing_category_is_zero(self):
        assert _event().impact_for(Category.SOCIAL) == 0.0

    def test_has_impact(self):
        assert _event().has_impact()
        assert not _event(category_impacts={}).has_impact()
        assert not _event(category_impacts={Category.LABOR: 0.0}).has_impact()

    def test_dominant_category_declared_wins(self):
        ev = _event(category=Category.SOCIAL, category_impacts={Category.LABOR: -9.0})
        assert ev.dominant_category() == Category.SOCIAL

    def test_dominant_category_largest_magnitude(self):
        ev = _event(category_impacts={Category.LABOR: -2.0, Category.POLITICS: 6.0})
        assert ev.dominant_category() == Category.POLITICS

    def test_dominant_category_tie_uses_declaration_order(self):
        ev = _event(category_impacts={Category.SOCIAL: -3.0, Category.ENVIRONMENT: 3.0})
        assert ev.dominant_category() == Category.ENVIRONMENT

    def test_dominant_category_none_without_impact(self):
        assert _event(category_impacts={}).dominant_category() is None

    def test_is_within_inclusive(self):
        ev = _event()
        assert ev.is_within(ev.created_at, ev.created_at)
        assert not ev.is_within(ev.created_at + timedelta(seconds=1), ev.created_at + timedelta(days=1))
