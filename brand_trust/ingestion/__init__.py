"""
Ingestion layer — JSON loaders for events, user weights, and brand scores.

Submodules:
  event_json  — Validating JSON parsers; all records are checked before any
                are returned, and failures are reported together.
"""
