"""
JSON import parsers for brand events, user weights, and brand scores.

Events file — either a top-level list of event objects, or an object with an
``events`` list. Each object carries the ``BrandEvent`` fields:

  required: event_id, brand_id, created_at
  optional: category, category_impacts, severity, verification, credibility,
            event_date, is_irrelevant, orientation, source_kind, source_name,
            domain_owner, title, raw

Datetimes are ISO 8601 strings (``Z`` suffix accepted); naive values are
read as UTC. Category keys are lower-case category names::

    [{"event_id": "e1", "brand_id": "acme", "created_at": "2026-10-17T00:00:00Z",
      "category_impacts": {"labor": -10}, "severity": "severe",
      "verification": "official", "credibility": 0.9}]

Weights file — one ``UserWeights`` object, e.g.
``{"labor": 90, "environment": 50, "politics": 50, "social": 50}``.

Scores file — one ``BrandCategoryScores`` object, or the JSON breakdown
printed by ``brand-trust score-brand --json`` (detected by its ``blocks`` key).
"""

from __future__ import annotations

import json
import logging
from collections import defaultdict
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from brand_trust.models.alignment import BrandCategoryScores, UserWeights
from brand_trust.models.breakdown import BrandBreakdown
from brand_trust.models.event import BrandEvent
from brand_trust.scoring.alignment import brand_scores_from_breakdown

logger = logging.getLogger(__name__)

REQUIRED_EVENT_FIELDS = frozenset({"event_id", "brand_id", "created_at"})
_MAX_ERRORS_SHOWN = 10


def _load_json(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"JSON file not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path.name}: {exc}") from exc


def parse_event_json(path: Path, default_credibility: Optional[float] = None) -> list[BrandEvent]:
    """Parse a JSON file of brand events into validated :class:`BrandEvent` objects.

    All records are validated before any are returned. If **any** record
    fails, a single :class:`ValueError` is raised listing the first 10 failures.

    Args:
        path: Path to the JSON file (must exist).
        default_credibility: Credibility for records that omit it.

    Returns:
        List of fully validated :class:`BrandEvent` instances.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the file is malformed or any record fails validation.
    """
    data = _load_json(path)
    if isinstance(data, dict):
        data = data.get("events")
    if not isinstance(data, list):
        raise ValueError(
            f"{path.name} must contain a list of events or an object with an 'events' list."
        )

    if not data:
        logger.warning("Event JSON is empty: %s", path)
        return []

    events: list[BrandEvent] = []
    errors: list[tuple[int, str]] = []

    for i, record in enumerate(data):
        try:
            events.append(_record_to_event(record, default_credibility))
        except (ValueError, ValidationError) as exc:
            errors.append((i, str(exc)))

    if errors:
        detail = "\n".join(f"  Record {idx}: {msg}" for idx, msg in errors[:_MAX_ERRORS_SHOWN])
        suffix = (
            f"\n  … and {len(errors) - _MAX_ERRORS_SHOWN} more"
            if len(errors) > _MAX_ERRORS_SHOWN else ""
        )
        raise ValueError(
            f"{len(errors)} record(s) failed validation in {path.name}:\n{detail}{suffix}"
        )

    logger.info("Parsed %d events from %s", len(events), path.name)
    return events


def parse_weights_json(path: Path) -> UserWeights:
    """Parse a user-weights JSON object.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the object is malformed or out of range.
    """
    data = _load_json(path)
    if not isinstance(data, dict):
        raise ValueError(f"{path.name} must contain a JSON object of weights.")
    try:
        return UserWeights.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid weights in {path.name}:\n{exc}") from exc


def parse_scores_json(path: Path) -> BrandCategoryScores:
    """Parse brand category scores, accepting a plain scores object or a breakdown.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the object is malformed or out of range.
    """
    data = _load_json(path)
    if not isinstance(data, dict):
        raise ValueError(f"{path.name} must contain a JSON object of scores.")
    try:
        if "blocks" in data:
            return brand_scores_from_breakdown(BrandBreakdown.model_validate(data))
        return BrandCategoryScores.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid scores in {path.name}:\n{exc}") from exc


def group_by_brand(events: list[BrandEvent]) -> dict[str, list[BrandEvent]]:
    """Group events by ``brand_id``, preserving file order within each brand."""
    grouped: dict[str, list[BrandEvent]] = defaultdict(list)
    for event in events:
        grouped[event.brand_id].append(event)
    return dict(grouped)


# ── Private helpers ────────────────────────────────────────────────────────────

def _record_to_event(record: Any, default_credibility: Optional[float]) -> BrandEvent:
    """Convert one JSON object to a validated :class:`BrandEvent`.

    Raises:
        ValueError: If the record is not an object or lacks required fields.
        pydantic.ValidationError: On model-level validation failure.
    """
    if not isinstance(record, dict):
        raise ValueError(f"Expected an object, got {type(record).__name__}.")

    missing = REQUIRED_EVENT_FIELDS - {k for k, v in record.items() if v not in (None, "")}
    if missing:
        raise ValueError(f"Missing required fields: {sorted(missing)}")

    if default_credibility is not None and record.get("credibility") is None:
        record = {**record, "credibility": default_credibility}
    elif record.get("credibility") is None:
        record = {k: v for k, v in record.items() if k != "credibility"}

    return BrandEvent.model_validate(record)
