"""
Brand Trust Engine — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Load and validate JSON inputs.
  4. Run the scoring / personalization step.
  5. Report the result to stdout (ASCII table, or JSON with ``--json``).

Install and run::

    pip install -e .
    brand-trust --help
    brand-trust validate-config
    brand-trust score-brand --events events.json --brand-id acme
    brand-trust align --weights weights.json --scores scores.json
    brand-trust match --weights weights.json --scores scores.json
    brand-trust compare --weights weights.json --current a.json --alternative b.json
    brand-trust refresh-vectors --events events.json --workers 4
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="brand-trust",
    help="Brand trust scoring and personalized value-fit engine.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from brand_trust.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from brand_trust.utils.logging import configure_logging
    configure_logging(config.logging, debug=config.debug)


def _resolve_now_or_exit(now: Optional[str]):
    """Parse ``--now`` (ISO 8601) or fall back to the current UTC time."""
    from brand_trust.utils.time_utils import parse_iso_datetime, utcnow

    if not now:
        return utcnow()
    try:
        return parse_iso_datetime(now)
    except ValueError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)


def _load_or_exit(loader, path: str, what: str, **kwargs):
    """Run a JSON loader, turning file and validation errors into exit code 1."""
    try:
        return loader(Path(path), **kwargs)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except ValueError as exc:
        typer.echo(f"[ERROR] {what} parse failed:\n{exc}", err=True)
        raise typer.Exit(code=1)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Decay half-life:   {config.decay.half_life_days:g} days")
    typer.echo(f"  Lookback window:   {config.vector.lookback_days} days")
    typer.echo(f"  Vector cap:        ±{config.vector.cap_per_category:g}")
    typer.echo(f"  Baseline horizon:  {config.baseline.horizon_days} days")
    typer.echo(f"  Delta scale:       {config.window.delta_scale:g} pts/unit")
    typer.echo(f"  Proof threshold:   {config.window.proof_delta_threshold:g} pts")
    typer.echo(f"  Log level:         {config.logging.level}")
    typer.echo(f"  Debug mode:        {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("score-brand")
def score_brand_cmd(
    events_file: str = typer.Option(..., "--events", help="JSON file of brand events."),
    brand_id: str = typer.Option(..., "--brand-id", help="Brand to score."),
    now: Optional[str] = typer.Option(
        None, "--now", help="Evaluation time, ISO 8601 (default: current UTC time)."
    ),
    weights_file: Optional[str] = typer.Option(
        None, "--weights", help="Optional user weights JSON for a weighted overall score."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the breakdown as JSON."),
    show_reasons: bool = typer.Option(False, "--reasons", help="Show baseline citations."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Score one brand: baseline + window delta per category."""
    from brand_trust.ingestion.event_json import parse_event_json, parse_weights_json
    from brand_trust.reporting.formatters import format_breakdown
    from brand_trust.scoring.engine import score_brand

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    evaluated_at = _resolve_now_or_exit(now)

    events = _load_or_exit(
        parse_event_json, events_file, "Events",
        default_credibility=config.vector.default_credibility,
    )
    weights = _load_or_exit(parse_weights_json, weights_file, "Weights") if weights_file else None

    if not any(e.brand_id == brand_id for e in events):
        typer.echo(f"[WARN] No events for brand '{brand_id}'; reporting neutral baseline.", err=True)

    breakdown = score_brand(brand_id, events, evaluated_at, config, weights=weights)

    if as_json:
        typer.echo(breakdown.model_dump_json(indent=2))
    else:
        typer.echo(format_breakdown(breakdown, show_reasons=show_reasons))


@app.command("align")
def align_cmd(
    weights_file: str = typer.Option(..., "--weights", help="User weights JSON."),
    scores_file: str = typer.Option(
        ..., "--scores", help="Brand scores JSON (or a score-brand --json breakdown)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Compute a personalized value-fit score for one brand."""
    from brand_trust.ingestion.event_json import parse_scores_json, parse_weights_json
    from brand_trust.reporting.formatters import format_alignment
    from brand_trust.scoring.alignment import compute_alignment

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    weights = _load_or_exit(parse_weights_json, weights_file, "Weights")
    scores = _load_or_exit(parse_scores_json, scores_file, "Scores")
    result = compute_alignment(weights, scores, config.alignment)

    if as_json:
        typer.echo(result.model_dump_json(indent=2))
    else:
        typer.echo(format_alignment(result, brand_label=Path(scores_file).stem))


@app.command("match")
def match_cmd(
    weights_file: str = typer.Option(..., "--weights", help="User weights JSON."),
    scores_file: str = typer.Option(
        ..., "--scores", help="Brand scores JSON (or a score-brand --json breakdown)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Compare the user's sliders directly against a brand's category scores."""
    from brand_trust.ingestion.event_json import parse_scores_json, parse_weights_json
    from brand_trust.reporting.formatters import format_value_match
    from brand_trust.scoring.alignment import compute_value_match

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    weights = _load_or_exit(parse_weights_json, weights_file, "Weights")
    scores = _load_or_exit(parse_scores_json, scores_file, "Scores")
    result = compute_value_match(weights, scores, config.alignment)

    if as_json:
        typer.echo(result.model_dump_json(indent=2))
    else:
        typer.echo(format_value_match(result, brand_label=Path(scores_file).stem))


@app.command("compare")
def compare_cmd(
    weights_file: str = typer.Option(..., "--weights", help="User weights JSON."),
    current_file: str = typer.Option(..., "--current", help="Current brand scores JSON."),
    alternative_file: str = typer.Option(..., "--alternative", help="Alternative brand scores JSON."),
    as_json: bool = typer.Option(False, "--json", help="Print the comparison as JSON."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Explain how an alternative brand differs from the current one."""
    from brand_trust.ingestion.event_json import parse_scores_json, parse_weights_json
    from brand_trust.reporting.formatters import format_comparison
    from brand_trust.scoring.alignment import compare_alternative

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    weights = _load_or_exit(parse_weights_json, weights_file, "Weights")
    current = _load_or_exit(parse_scores_json, current_file, "Current scores")
    alternative = _load_or_exit(parse_scores_json, alternative_file, "Alternative scores")
    summary = compare_alternative(current, alternative, weights, config.alignment)

    if as_json:
        typer.echo(summary.model_dump_json(indent=2))
    else:
        typer.echo(format_comparison(summary))


@app.command("refresh-vectors")
def refresh_vectors_cmd(
    events_file: str = typer.Option(..., "--events", help="JSON file of brand events."),
    now: Optional[str] = typer.Option(
        None, "--now", help="Evaluation time, ISO 8601 (default: current UTC time)."
    ),
    workers: int = typer.Option(1, "--workers", min=1, help="Parallel worker threads."),
    as_json: bool = typer.Option(False, "--json", help="Print the vectors as JSON."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Recompute category vectors for every brand in an events file."""
    from brand_trust.ingestion.event_json import group_by_brand, parse_event_json
    from brand_trust.reporting.formatters import format_vector_cache
    from brand_trust.scoring.engine import refresh_stale_vectors

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    evaluated_at = _resolve_now_or_exit(now)

    events = _load_or_exit(
        parse_event_json, events_file, "Events",
        default_credibility=config.vector.default_credibility,
    )
    cache = refresh_stale_vectors(
        group_by_brand(events), {}, evaluated_at, config, max_workers=workers
    )

    if as_json:
        payload = {b: entry.model_dump(mode="json") for b, entry in sorted(cache.items())}
        typer.echo(json.dumps(payload, indent=2))
    else:
        typer.echo(format_vector_cache(cache))


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
