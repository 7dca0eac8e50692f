"""
Scoring layer — pure functions from events to public and personalized scores.

Modules
-------
primitives  Recency decay, verification and severity weights, clamp.
severity    Per-source severity policies (EPA / OSHA / FEC / generic).
vector      Category vector aggregation over the lookback window.
baseline    Long-horizon baseline from category mention frequency.
window      Window delta, mixed-event cap, and proof gate.
confidence  Confidence index, trust labels, and evidence summaries.
breakdown   Baseline + delta composition into the public breakdown.
alignment   Personalized value fit, dealbreakers, and alternative comparison.
engine      End-to-end ``score_brand`` and batch vector refresh.

Nothing in this package reads the clock; every entry point takes ``now``.
"""
