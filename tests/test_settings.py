"""Tests for centralized configuration (settings)."""

import importlib

from collision_claims.config import settings


def test_get_repository_config_defaults(monkeypatch):
    """get_repository_config returns the debounce and cache defaults."""
    for key in (
        "CLAIMS_FLUSH_INTERVAL_SECONDS",
        "CLAIMS_CACHE_TTL_SECONDS",
        "MESSAGES_FLUSH_INTERVAL_SECONDS",
    ):
        monkeypatch.delenv(key, raising=False)
    assert settings.get_repository_config() == {
        "claims_flush_interval": 0.5,
        "claims_cache_ttl": 5.0,
        "messages_flush_interval": 0.5,
    }


def test_get_repository_config_respects_env(monkeypatch):
    monkeypatch.setenv("CLAIMS_CACHE_TTL_SECONDS", "30")
    monkeypatch.setenv("CLAIMS_FLUSH_INTERVAL_SECONDS", "soon")
    config = settings.get_repository_config()
    assert config["claims_cache_ttl"] == 30.0
    assert config["claims_flush_interval"] == 0.5


def test_get_fraud_config_returns_dict():
    """get_fraud_config returns a dict with expected keys."""
    config = settings.get_fraud_config()
    assert config["review_threshold"] == 30
    assert config["investigate_threshold"] == 70
    assert config["min_photos"] == 4


def test_pricing_constants():
    assert settings.TAX_RATE == 0.08
    assert settings.SHOP_SUPPLIES_RATE == 0.03
    assert settings.PAINT_PER_PANEL == 250
    assert settings.PRE_ESTIMATE_ROUNDING == 50


def test_storage_keys():
    assert settings.CLAIMS_STORAGE_KEY == "@collision_repair:claims"
    assert settings.USER_STORAGE_KEY == "@collision_repair:user"


def test_latency_scale_never_negative(monkeypatch):
    monkeypatch.setenv("MOCK_LATENCY_SCALE", "-2")
    assert settings.get_latency_scale() == 0.0
    monkeypatch.delenv("MOCK_LATENCY_SCALE")
    assert settings.get_latency_scale() == 0.0


def test_get_random_seed(monkeypatch):
    monkeypatch.setenv("COLLISION_CLAIMS_RANDOM_SEED", "42")
    assert settings.get_random_seed() == 42
    monkeypatch.setenv("COLLISION_CLAIMS_RANDOM_SEED", "abc")
    assert settings.get_random_seed() is None
    monkeypatch.setenv("COLLISION_CLAIMS_RANDOM_SEED", " ")
    assert settings.get_random_seed() is None


def test_auto_approval_threshold_respects_env(monkeypatch):
    """Module-level thresholds are read at import time."""
    monkeypatch.setenv("CLAIMS_AUTO_APPROVAL_THRESHOLD", "2500")
    try:
        reloaded = importlib.reload(settings)
        assert reloaded.AUTO_APPROVAL_THRESHOLD == 2500.0
    finally:
        monkeypatch.delenv("CLAIMS_AUTO_APPROVAL_THRESHOLD")
        importlib.reload(settings)
