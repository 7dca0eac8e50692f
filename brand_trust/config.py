"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local secrets and env overrides (gitignored)
  4. Environment variables        — ``BRAND_TRUST_*`` prefix (see ``_ENV_OVERRIDES``)

Entry point: ``load_config(config_path=None) -> AppConfig``

Every scoring function accepts an ``AppConfig`` (or one of its sections),
never raw dicts or constants scattered through the codebase. ``AppConfig()``
built with no arguments carries the production defaults, so library callers
that never touch a TOML file still get a valid configuration.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Callable, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class DecayConfig(BaseModel):
    """Recency decay settings shared by every time-weighted computation."""

    model_config = ConfigDict(frozen=True)

    half_life_days: float = 45.0

    @field_validator("half_life_days")
    @classmethod
    def validate_half_life(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"half_life_days must be > 0, got {v}.")
        return v


class VectorConfig(BaseModel):
    """Category vector aggregation over the short lookback window."""

    model_config = ConfigDict(frozen=True)

    lookback_days: int = 90
    cap_per_category: float = 5.0
    default_credibility: float = 0.5
    stale_after_hours: float = 24.0

    @field_validator("lookback_days")
    @classmethod
    def validate_lookback(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"lookback_days must be >= 1, got {v}.")
        return v

    @field_validator("cap_per_category")
    @classmethod
    def validate_cap(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"cap_per_category must be > 0, got {v}.")
        return v


class BaselineConfig(BaseModel):
    """Long-horizon baseline built from category mention frequency."""

    model_config = ConfigDict(frozen=True)

    horizon_days: int = 730          # 24 months
    ceiling: float = 75.0            # never-mentioned category
    floor: float = 25.0              # always-mentioned category
    frequency_slope: float = 50.0    # score = ceiling - freq * slope
    neutral: float = 50.0            # no history at all

    @model_validator(mode="after")
    def validate_band(self) -> "BaselineConfig":
        if self.floor > self.ceiling:
            raise ValueError(
                f"floor ({self.floor}) must be <= ceiling ({self.ceiling})."
            )
        return self


class WindowConfig(BaseModel):
    """Window-delta scaling, mixed-event cap, and proof-gate thresholds.

    ``delta_scale`` converts a clamped vector value (±cap) into score points.
    With the default cap of 5 the window delta spans ±20 points.
    """

    model_config = ConfigDict(frozen=True)

    delta_scale: float = 4.0
    mixed_penalty_cap: float = 3.0
    proof_delta_threshold: float = 5.0
    min_verified_sources: int = 2
    min_independent_owners: int = 2
    official_record_satisfies_proof: bool = False

    @field_validator("delta_scale", "mixed_penalty_cap", "proof_delta_threshold")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"Window thresholds must be >= 0, got {v}.")
        return v


class ConfidenceConfig(BaseModel):
    """Confidence index weights and trust-label bands."""

    model_config = ConfigDict(frozen=True)

    verified_weight: float = 40.0
    verified_saturation: int = 3
    diversity_weight: float = 35.0
    diversity_saturation: int = 3
    recency_weight: float = 25.0
    fresh_days: float = 30.0
    expired_days: float = 90.0
    high_min: float = 80.0
    high_min_verification: float = 0.70
    moderate_min: float = 60.0
    moderate_min_verification: float = 0.50

    @model_validator(mode="after")
    def validate_weights(self) -> "ConfidenceConfig":
        total = self.verified_weight + self.diversity_weight + self.recency_weight
        if abs(total - 100.0) > 1e-6:
            raise ValueError(f"Confidence weights must sum to 100, got {total}.")
        if self.expired_days <= self.fresh_days:
            raise ValueError("expired_days must be greater than fresh_days.")
        return self


class AlignmentConfig(BaseModel):
    """Personalization thresholds."""

    model_config = ConfigDict(frozen=True)

    neutral_weight: float = 50.0
    cares_band: float = 20.0
    dealbreaker_floor: float = 25.0
    comparison_min_delta: float = 3.0
    comparison_max_contributors: int = 2
    match_soft_weight: float = 0.3
    match_aligned_min: int = 70
    match_neutral_min: int = 40
    confidence_multipliers: dict[str, float] = {
        "low": 0.85, "medium": 0.95, "high": 1.0,
    }


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env, or directly
    as ``AppConfig()`` for the built-in defaults.
    """

    model_config = ConfigDict(frozen=True)

    decay: DecayConfig = DecayConfig()
    vector: VectorConfig = VectorConfig()
    baseline: BaselineConfig = BaselineConfig()
    window: WindowConfig = WindowConfig()
    confidence: ConfidenceConfig = ConfidenceConfig()
    alignment: AlignmentConfig = AlignmentConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PACKAGE_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_CONFIG_PATH = _PACKAGE_ROOT / "config" / "default.toml"


def _read_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. When ``None``, the
            ``BRAND_TRUST_CONFIG`` variable is consulted, then
            ``config/default.toml`` beside the package.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the resolved config file does not exist.
        ValueError: If a ``BRAND_TRUST_*`` override cannot be parsed.
        pydantic.ValidationError: If merged config values fail validation.
    """
    load_dotenv(dotenv_path=_PACKAGE_ROOT / ".env", override=False)

    if config_path is None:
        config_path = os.environ.get("BRAND_TRUST_CONFIG") or DEFAULT_CONFIG_PATH
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml, set BRAND_TRUST_CONFIG, or pass --config."
        )

    raw = _read_toml(config_path)
    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        raw = _deep_merge(raw, _read_toml(local_config_path))

    return _build_app_config(_apply_env_overrides(raw))


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


# env var → (section, key, parser); section None means a top-level key.
_ENV_OVERRIDES: dict[str, tuple[Optional[str], str, Callable[[str], Any]]] = {
    "BRAND_TRUST_LOG_LEVEL": ("logging", "level", str),
    "BRAND_TRUST_LOG_JSON": ("logging", "json_format", _parse_bool),
    "BRAND_TRUST_LOG_FILE": ("logging", "log_file", str),
    "BRAND_TRUST_HALF_LIFE_DAYS": ("decay", "half_life_days", float),
    "BRAND_TRUST_LOOKBACK_DAYS": ("vector", "lookback_days", int),
    "BRAND_TRUST_OFFICIAL_PROOF": ("window", "official_record_satisfies_proof", _parse_bool),
    "BRAND_TRUST_DEBUG": (None, "debug", _parse_bool),
}


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply the ``BRAND_TRUST_*`` variables listed in ``_ENV_OVERRIDES``.

    Unset or empty variables are ignored. A value the parser rejects raises
    ``ValueError`` naming the variable.
    """
    for var, (section, key, parse) in _ENV_OVERRIDES.items():
        value = os.environ.get(var)
        if not value:
            continue
        try:
            parsed = parse(value)
        except ValueError as exc:
            raise ValueError(f"{var}={value!r} is not valid: {exc}") from exc
        target = raw if section is None else raw.setdefault(section, {})
        target[key] = parsed
    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map the merged raw dict onto ``AppConfig``; unknown sections are ignored."""
    return AppConfig(
        decay=DecayConfig(**raw.get("decay", {})),
        vector=VectorConfig(**raw.get("vector", {})),
        baseline=BaselineConfig(**raw.get("baseline", {})),
        window=WindowConfig(**raw.get("window", {})),
        confidence=ConfidenceConfig(**raw.get("confidence", {})),
        alignment=AlignmentConfig(**raw.get("alignment", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", False),
    )
