"""
Logging setup for the Brand Trust CLI.

``configure_logging(config, debug=...)`` is called once per CLI command, after
the config loads and before any scoring work. Library modules only ever call
``logging.getLogger(__name__)``: the engine is embedded by other services and
must not reconfigure their logging.

Handlers write to stderr (plus an optional file) so ``--json`` output on
stdout stays machine-readable.

JSON lines (``json_format = true`` under ``[logging]``) carry the scoring
context passed via ``extra=``, so one brand's history can be filtered out of
a batch run::

    {"ts": "2026-06-01T12:00:00Z", "level": "WARNING",
     "logger": "brand_trust.scoring.engine",
     "msg": "Proof required for acme: window delta withheld on labor",
     "brand_id": "acme", "gated": ["labor"]}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from brand_trust.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Attributes present on every LogRecord; anything else came in via extra=.
_RESERVED_RECORD_KEYS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime"}


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record: ``ts``, ``level``, ``logger``, ``msg``,
    ``exc`` when an exception is attached, then any ``extra=`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
                LOG_DATE_FORMAT
            ),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        payload.update(
            (key, val)
            for key, val in record.__dict__.items()
            if key not in _RESERVED_RECORD_KEYS and not key.startswith("_")
        )
        return json.dumps(payload, default=str)


def _build_formatter(config: "LoggingConfig") -> logging.Formatter:
    if config.json_format:
        return JsonLineFormatter()
    return logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def configure_logging(config: "LoggingConfig", debug: bool = False) -> int:
    """Configure the root logger and return the effective level.

    Args:
        config: ``[logging]`` section of ``AppConfig``.
        debug:  ``AppConfig.debug``; forces DEBUG regardless of ``config.level``.
    """
    level = logging.DEBUG if debug else getattr(logging, config.level, logging.INFO)
    formatter = _build_formatter(config)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)
    return level
