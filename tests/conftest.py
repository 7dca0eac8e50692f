"""
Shared pytest fixtures for the Brand Trust Engine test suite.

Provides:
  - ``now``: A fixed, timezone-aware evaluation time. Every scoring function
    takes ``now`` explicitly, so tests never depend on the wall clock.
  - ``make_event``: A factory for ``BrandEvent`` records dated relative to
    ``now`` (``days_ago``), with sensible defaults for every field.
  - ``config``: The built-in ``AppConfig()`` defaults.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

import pytest

from brand_trust.config import AppConfig
from brand_trust.models.event import BrandEvent
from brand_trust.taxonomy.category_taxonomy import Category

FIXED_NOW = datetime(2026, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation time: 2026-06-01 12:00 UTC."""
    return FIXED_NOW


@pytest.fixture
def config() -> AppConfig:
    """Built-in configuration defaults."""
    return AppConfig()


@pytest.fixture
def make_event() -> Callable[..., BrandEvent]:
    """Return a factory building ``BrandEvent`` records relative to ``FIXED_NOW``.

    ``impacts`` accepts either ``Category`` or plain string keys.
    """
    counter = {"n": 0}

    def _make(
        impacts: Optional[dict[Any, float]] = None,
        days_ago: float = 2.0,
        brand_id: str = "acme",
        event_id: Optional[str] = None,
        **overrides: Any,
    ) -> BrandEvent:
        counter["n"] += 1
        when = FIXED_NOW - timedelta(days=days_ago)
        fields: dict[str, Any] = {
            "event_id": event_id or f"evt-{counter['n']}",
            "brand_id": brand_id,
            "category_impacts": {
                Category(k): v for k, v in (
                    impacts if impacts is not None else {Category.LABOR: -4.0}
                ).items()
            },
            "severity": "moderate",
            "verification": "official",
            "credibility": 0.9,
            "event_date": when,
            "created_at": when,
            "source_name": "Reuters",
            "domain_owner": "thomson-reuters",
        }
        fields.update(overrides)
        return BrandEvent(**fields)

    return _make
