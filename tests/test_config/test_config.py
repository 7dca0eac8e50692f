"""
Tests for brand_trust/config.py.

What we test
------------
  - ``AppConfig()`` defaults match config/default.toml.
  - load_config(): explicit path, BRAND_TRUST_CONFIG, local.toml merge,
    BRAND_TRUST_* overrides and their parse errors.
  - Validation errors for out-of-range sections.
  - Missing config file raises FileNotFoundError.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from brand_trust.config import (
    AppConfig,
    BaselineConfig,
    ConfidenceConfig,
    LoggingConfig,
    VectorConfig,
    _ENV_OVERRIDES,
    load_config,
)


def _write_toml(directory: Path, body: str, name: str = "app.toml") -> Path:
    p = directory / name
    p.write_text(body, encoding="utf-8")
    return p


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    for var in (*_ENV_OVERRIDES, "BRAND_TRUST_CONFIG"):
        monkeypatch.delenv(var, raising=False)


# ── Defaults ──────────────────────────────────────────────────────────────────

class TestDefaults:
    def test_built_in_defaults(self):
        config = AppConfig()
        assert config.decay.half_life_days == 45.0
        assert config.vector.lookback_days == 90
        assert config.vector.cap_per_category == 5.0
        assert config.baseline.horizon_days == 730
        assert config.window.delta_scale == 4.0
        assert config.alignment.confidence_multipliers["low"] == 0.85

    def test_default_toml_matches_built_in(self):
        assert load_config() == AppConfig()

    def test_frozen(self):
        with pytest.raises(ValidationError):
            AppConfig().debug = True


# ── load_config ───────────────────────────────────────────────────────────────

class TestLoadConfig:
    def test_partial_file_keeps_other_defaults(self, tmp_path):
        path = _write_toml(tmp_path, "[vector]\nlookback_days = 30\n")
        config = load_config(path)
        assert config.vector.lookback_days == 30
        assert config.vector.cap_per_category == 5.0
        assert config.baseline == BaselineConfig()

    def test_top_level_debug_flag(self, tmp_path):
        assert load_config(_write_toml(tmp_path, "debug = true\n")).debug is True

    def test_config_path_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("BRAND_TRUST_CONFIG", str(_write_toml(tmp_path, "[vector]\nlookback_days = 21\n")))
        assert load_config().vector.lookback_days == 21

    def test_local_toml_merged(self, tmp_path):
        path = _write_toml(tmp_path, "[vector]\nlookback_days = 30\ncap_per_category = 4.0\n")
        _write_toml(tmp_path, "[vector]\nlookback_days = 60\n", name="local.toml")
        config = load_config(path)
        assert config.vector.lookback_days == 60
        assert config.vector.cap_per_category == 4.0

    def test_env_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("BRAND_TRUST_LOG_LEVEL", "debug")
        monkeypatch.setenv("BRAND_TRUST_LOOKBACK_DAYS", "45")
        monkeypatch.setenv("BRAND_TRUST_DEBUG", "yes")
        config = load_config(_write_toml(tmp_path, "[vector]\nlookback_days = 30\n"))
        assert config.logging.level == "DEBUG"
        assert config.vector.lookback_days == 45
        assert config.debug is True

    def test_scoring_env_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("BRAND_TRUST_HALF_LIFE_DAYS", "30")
        monkeypatch.setenv("BRAND_TRUST_OFFICIAL_PROOF", "true")
        monkeypatch.setenv("BRAND_TRUST_LOG_JSON", "1")
        config = load_config(_write_toml(tmp_path, "[decay]\nhalf_life_days = 60.0\n"))
        assert config.decay.half_life_days == 30.0
        assert config.window.official_record_satisfies_proof is True
        assert config.logging.json_format is True

    def test_empty_env_value_ignored(self, tmp_path, monkeypatch):
        monkeypatch.setenv("BRAND_TRUST_LOOKBACK_DAYS", "")
        assert load_config(_write_toml(tmp_path, "[vector]\nlookback_days = 30\n")).vector.lookback_days == 30

    def test_unparseable_env_value_names_variable(self, tmp_path, monkeypatch):
        monkeypatch.setenv("BRAND_TRUST_LOOKBACK_DAYS", "ninety")
        with pytest.raises(ValueError, match="BRAND_TRUST_LOOKBACK_DAYS"):
            load_config(_write_toml(tmp_path, ""))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_config(tmp_path / "missing.toml")

    def test_invalid_value_rejected(self, tmp_path):
        with pytest.raises(ValidationError):
            load_config(_write_toml(tmp_path, "[decay]\nhalf_life_days = 0\n"))


# ── Section validation ────────────────────────────────────────────────────────

class TestValidation:
    def test_lookback_must_be_positive(self):
        with pytest.raises(ValidationError, match="lookback_days"):
            VectorConfig(lookback_days=0)

    def test_floor_above_ceiling(self):
        with pytest.raises(ValidationError, match="floor"):
            BaselineConfig(floor=80.0, ceiling=70.0)

    def test_confidence_weights_sum(self):
        with pytest.raises(ValidationError, match="sum to 100"):
            ConfidenceConfig(verified_weight=50.0)

    def test_expired_after_fresh(self):
        with pytest.raises(ValidationError, match="expired_days"):
            ConfidenceConfig(fresh_days=90.0, expired_days=30.0)

    def test_log_level(self):
        assert LoggingConfig(level="warning").level == "WARNING"
        with pytest.raises(ValidationError):
            LoggingConfig(level="LOUD")
