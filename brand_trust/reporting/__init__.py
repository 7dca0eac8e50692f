"""
brand_trust.reporting — ASCII formatting of scoring results for the CLI.

Modules:
  formatters — Breakdown, alignment, comparison, and vector-cache tables.
"""
