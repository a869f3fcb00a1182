"""Centralized configuration from environment variables with defaults."""

import os
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _float(key: str, default: float) -> float:
    raw = os.environ.get(key)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _int(key: str, default: int) -> int:
    raw = os.environ.get(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------

CLAIMS_STORAGE_KEY = "@collision_repair:claims"
CONVERSATIONS_STORAGE_KEY = "@collision_repair:conversations"
MESSAGES_STORAGE_KEY = "@collision_repair:messages"
USER_STORAGE_KEY = "@collision_repair:user"


def get_repository_config() -> dict[str, Any]:
    """Write debounce and read-cache lifetimes for the persisted stores (seconds)."""
    return {
        "claims_flush_interval": _float("CLAIMS_FLUSH_INTERVAL_SECONDS", 0.5),
        "claims_cache_ttl": _float("CLAIMS_CACHE_TTL_SECONDS", 5.0),
        "messages_flush_interval": _float("MESSAGES_FLUSH_INTERVAL_SECONDS", 0.5),
    }


# ---------------------------------------------------------------------------
# Claim review
# ---------------------------------------------------------------------------

AUTO_APPROVAL_THRESHOLD = _float("CLAIMS_AUTO_APPROVAL_THRESHOLD", 5000.0)
HIGH_RISK_FRAUD_SCORE = _int("CLAIMS_HIGH_RISK_FRAUD_SCORE", 70)


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------

# Newest notifications kept in the in-app inbox; older ones are dropped.
NOTIFICATION_INBOX_LIMIT = _int("NOTIFICATION_INBOX_LIMIT", 100)


# ---------------------------------------------------------------------------
# Fraud detection
# ---------------------------------------------------------------------------

def get_fraud_config() -> dict[str, Any]:
    """Fraud heuristic thresholds and scores."""
    return {
        "high_value_threshold": _float("FRAUD_HIGH_VALUE_THRESHOLD", 10000.0),
        "high_value_score": _int("FRAUD_HIGH_VALUE_SCORE", 15),
        "min_photos": _int("FRAUD_MIN_PHOTOS", 4),
        "insufficient_photos_score": _int("FRAUD_INSUFFICIENT_PHOTOS_SCORE", 20),
        "low_confidence_threshold": _float("FRAUD_LOW_CONFIDENCE_THRESHOLD", 0.7),
        "low_confidence_score": _int("FRAUD_LOW_CONFIDENCE_SCORE", 10),
        "max_severe_areas": _int("FRAUD_MAX_SEVERE_AREAS", 3),
        "extensive_damage_score": _int("FRAUD_EXTENSIVE_DAMAGE_SCORE", 25),
        "max_hidden_damage": _int("FRAUD_MAX_HIDDEN_DAMAGE", 2),
        "hidden_damage_score": _int("FRAUD_HIDDEN_DAMAGE_SCORE", 15),
        "old_vehicle_years": _int("FRAUD_OLD_VEHICLE_YEARS", 10),
        "old_vehicle_value_threshold": _float("FRAUD_OLD_VEHICLE_VALUE_THRESHOLD", 8000.0),
        "vehicle_age_score": _int("FRAUD_VEHICLE_AGE_SCORE", 15),
        "jitter": _float("FRAUD_SCORE_JITTER", 5.0),
        "review_threshold": _int("FRAUD_REVIEW_THRESHOLD", 30),
        "investigate_threshold": _int("FRAUD_INVESTIGATE_THRESHOLD", 70),
    }


# ---------------------------------------------------------------------------
# Estimate pricing
# ---------------------------------------------------------------------------

TAX_RATE = _float("ESTIMATE_TAX_RATE", 0.08)
SHOP_SUPPLIES_RATE = _float("ESTIMATE_SHOP_SUPPLIES_RATE", 0.03)
ESTIMATE_VALID_DAYS = _int("ESTIMATE_VALID_DAYS", 30)
PARTS_MARKUP = _float("PRICING_PARTS_MARKUP", 1.2)
PART_AGE_MULTIPLIER_PER_YEAR = _float("PRICING_PART_AGE_MULTIPLIER_PER_YEAR", 0.02)
DEFAULT_PART_PRICE = _float("PRICING_DEFAULT_PART_PRICE", 200.0)
LABOR_RATE_VARIANCE = _float("PRICING_LABOR_RATE_VARIANCE", 10.0)
PAINT_PER_PANEL = _float("PRICING_PAINT_PER_PANEL", 250.0)
PAINT_BLEND_PER_PANEL = _float("PRICING_PAINT_BLEND_PER_PANEL", 150.0)


# ---------------------------------------------------------------------------
# Pre-estimate
# ---------------------------------------------------------------------------

PRE_ESTIMATE_LABOR_MULTIPLIER = _float("PRE_ESTIMATE_LABOR_MULTIPLIER", 1.3)
PRE_ESTIMATE_SUPPLIES_MULTIPLIER = _float("PRE_ESTIMATE_SUPPLIES_MULTIPLIER", 1.2)
PRE_ESTIMATE_ROUNDING = _int("PRE_ESTIMATE_ROUNDING", 50)


# ---------------------------------------------------------------------------
# Mock service pacing
# ---------------------------------------------------------------------------

def get_latency_scale() -> float:
    """Multiplier applied to simulated service delays (0 disables sleeping)."""
    return max(0.0, _float("MOCK_LATENCY_SCALE", 0.0))


def get_random_seed() -> int | None:
    """Seed for the default random source, or None for an unseeded source."""
    raw = os.environ.get("COLLISION_CLAIMS_RANDOM_SEED")
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        return None
