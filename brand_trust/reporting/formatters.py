"""
ASCII terminal formatters for CLI output.

All formatters accept result models and return plain multi-line strings
suitable for ``typer.echo()``. No third-party dependencies.

Proof-gated categories
----------------------
A block whose window delta is withheld is marked ``[PROOF]`` and its delta is
shown in brackets, so a reader can see both the withheld movement and the
score that was actually published::

  Category       Base   Delta   Value   Conf  Trust               Verified  Owners
  labor          75.0  [-20.0]   75.0   11.7  needs_verification         0       0
"""

from __future__ import annotations

from typing import Optional

from brand_trust.models.alignment import AlignmentResult, ComparisonSummary, ValueMatchResult
from brand_trust.models.breakdown import BrandBreakdown
from brand_trust.models.vector import CachedVector


def _fmt_delta(delta: float, gated: bool) -> str:
    text = f"{delta:+.1f}"
    return f"[{text}]" if gated else text


# ── Breakdown ─────────────────────────────────────────────────────────────────


def format_breakdown(breakdown: BrandBreakdown, show_reasons: bool = False) -> str:
    """Format a brand breakdown as an ASCII table.

    Args:
        breakdown:    Composed breakdown.
        show_reasons: Append each category's baseline citation below the table.
    """
    lines: list[str] = []
    lines.append("")
    lines.append(f"=== Brand Trust: {breakdown.brand_id} ===")
    lines.append(f"  Computed at:   {breakdown.computed_at.isoformat()}")
    lines.append(f"  Overall score: {breakdown.overall_score:.1f}")
    lines.append(f"  Confidence:    {breakdown.confidence:.1f}")
    lines.append("")

    header = (
        f"  {'Category':<12}  {'Base':>6}  {'Delta':>8}  {'Value':>6}  "
        f"{'Conf':>5}  {'Trust':<18}  {'Verified':>8}  {'Owners':>6}"
    )
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for b in breakdown.blocks:
        lines.append(
            f"  {b.component.value:<12}  {b.base:>6.1f}  "
            f"{_fmt_delta(b.window_delta, b.proof_required):>8}  {b.value:>6.1f}  "
            f"{b.confidence:>5.1f}  {b.trust_label.value:<18}  "
            f"{b.verified_count:>8}  {b.independent_owners:>6}"
        )

    gated = [b.component.value for b in breakdown.blocks if b.proof_required]
    if gated:
        lines.append("")
        lines.append(f"  [PROOF] Delta withheld pending verification: {', '.join(gated)}")

    if show_reasons:
        lines.append("")
        lines.append("  Baseline:")
        for b in breakdown.blocks:
            lines.append(f"    {b.component.value:<12} {b.base_reason}")

    return "\n".join(lines)


# ── Alignment ─────────────────────────────────────────────────────────────────


def format_alignment(result: AlignmentResult, brand_label: Optional[str] = None) -> str:
    """Format a personalized alignment result."""
    lines: list[str] = []
    lines.append("")
    title = f"=== Value Fit: {brand_label} ===" if brand_label else "=== Value Fit ==="
    lines.append(title)
    lines.append(f"  Score:      {result.score} (raw {result.score_raw})")
    lines.append(f"  Confidence: {result.confidence.value} ({result.confidence_reason})")
    lines.append(f"  Summary:    {result.summary}")
    lines.append(f"  Recommend:  {'yes' if result.is_recommendable else 'no'}")

    if result.dealbreaker.triggered:
        lines.append(f"  [DEALBREAKER] {result.dealbreaker.message}")

    if result.drivers:
        lines.append("")
        header = f"  {'Dimension':<20}  {'Brand':>6}  {'Weight':>7}  {'Contrib':>8}  {'Impact':<8}"
        lines.append(header)
        lines.append("  " + "-" * (len(header) - 2))
        for d in result.drivers:
            lines.append(
                f"  {d.label:<20}  {d.brand_score:>6.1f}  {d.user_weight:>7.1%}  "
                f"{d.contribution:>+8.2f}  {d.impact.value:<8}"
            )

    if result.excluded_dimensions:
        lines.append("")
        lines.append(
            "  Excluded: " + ", ".join(d.value for d in result.excluded_dimensions)
        )
    return "\n".join(lines)


# ── Value match ───────────────────────────────────────────────────────────────


def format_value_match(result: ValueMatchResult, brand_label: Optional[str] = None) -> str:
    """Format a slider-versus-score value match."""
    title = f"=== Value Match: {brand_label} ===" if brand_label else "=== Value Match ==="
    lines: list[str] = [
        "", title,
        f"  Match:      {result.overall_match}% ({result.recommendation.value})", "",
    ]
    header = f"  {'Category':<12}  {'Gap':>4}  {'Cares':<5}  {'Severity':<18}"
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for m in result.category_matches:
        gap = "-" if m.gap is None else str(m.gap)
        cares = "yes" if m.user_cares else "no"
        lines.append(f"  {m.category.value:<12}  {gap:>4}  {cares:<5}  {m.severity.value:<18}")
    return "\n".join(lines)


# ── Comparison ────────────────────────────────────────────────────────────────


def format_comparison(summary: ComparisonSummary) -> str:
    """Format a brand-vs-alternative comparison."""
    lines: list[str] = ["", "=== Alternative Comparison ===", f"  {summary.summary}", ""]
    header = f"  {'Category':<12}  {'Raw':>7}  {'Weighted':>9}"
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for d in summary.deltas:
        lines.append(f"  {d.category.value:<12}  {d.raw_delta:>+7.1f}  {d.weighted_delta:>+9.2f}")
    return "\n".join(lines)


# ── Vector cache ──────────────────────────────────────────────────────────────


def format_vector_cache(cache: dict[str, CachedVector]) -> str:
    """Format refreshed category vectors, one row per brand (sorted by id)."""
    lines: list[str] = ["", "=== Category Vectors ==="]
    if not cache:
        lines.append("  (no brands)")
        return "\n".join(lines)

    header = (
        f"  {'Brand':<20}  {'Labor':>6}  {'Env':>6}  {'Pol':>6}  {'Social':>6}  "
        f"{'Events':>6}  Computed at"
    )
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for brand_id in sorted(cache):
        entry = cache[brand_id]
        v = entry.vector
        lines.append(
            f"  {brand_id[:20]:<20}  {v.labor:>+6.2f}  {v.environment:>+6.2f}  "
            f"{v.politics:>+6.2f}  {v.social:>+6.2f}  {entry.events_used:>6}  "
            f"{entry.computed_at.isoformat()}"
        )
    return "\n".join(lines)
