"""Instant preliminary cost range from a damage assessment."""

import logging
import math
from datetime import datetime, timezone
from typing import Any

from collision_claims.config.settings import (
    PRE_ESTIMATE_LABOR_MULTIPLIER,
    PRE_ESTIMATE_ROUNDING,
    PRE_ESTIMATE_SUPPLIES_MULTIPLIER,
)
from collision_claims.models.claim import (
    DamageArea,
    DamageAssessment,
    DamageSeverity,
    PreEstimate,
    PreEstimateRange,
    RepairDays,
    RepairType,
)
from collision_claims.utils.numbers import round_int, round_to_nearest
from collision_claims.utils.random_source import RandomSource, get_random, short_id

logger = logging.getLogger(__name__)

# area -> (repair, replace) base cost in USD
DAMAGE_AREA_COSTS: dict[DamageArea, tuple[float, float]] = {
    DamageArea.FRONT_BUMPER: (500, 1200),
    DamageArea.HOOD: (800, 1500),
    DamageArea.FENDER_LEFT: (600, 1100),
    DamageArea.FENDER_RIGHT: (600, 1100),
    DamageArea.DOOR_FRONT_LEFT: (700, 1400),
    DamageArea.DOOR_FRONT_RIGHT: (700, 1400),
    DamageArea.DOOR_REAR_LEFT: (700, 1400),
    DamageArea.DOOR_REAR_RIGHT: (700, 1400),
    DamageArea.QUARTER_PANEL_LEFT: (900, 1800),
    DamageArea.QUARTER_PANEL_RIGHT: (900, 1800),
    DamageArea.REAR_BUMPER: (500, 1200),
    DamageArea.TRUNK: (700, 1500),
    DamageArea.ROOF: (1500, 3000),
    DamageArea.WINDSHIELD: (200, 400),
    DamageArea.HEADLIGHT_LEFT: (100, 600),
    DamageArea.HEADLIGHT_RIGHT: (100, 600),
    DamageArea.TAILLIGHT_LEFT: (100, 400),
    DamageArea.TAILLIGHT_RIGHT: (100, 400),
}

SEVERITY_MULTIPLIERS: dict[DamageSeverity, float] = {
    DamageSeverity.MINOR: 0.6,
    DamageSeverity.MODERATE: 1.0,
    DamageSeverity.SEVERE: 1.5,
}

LOW_CONFIDENCE_THRESHOLD = 0.7
LOW_CONFIDENCE_VARIANCE = 0.15
DEFAULT_VARIANCE = 0.1

DISCLAIMER = (
    "This is a preliminary AI-generated estimate. Your final estimate from the body "
    "shop may vary based on hidden damage, parts availability, and labor rates."
)


def format_damage_area(area: DamageArea | str) -> str:
    """front_bumper -> Front Bumper."""
    value = area.value if isinstance(area, DamageArea) else str(area)
    return " ".join(word[:1].upper() + word[1:] for word in value.split("_"))


def estimate_similar_claims_count(rng: RandomSource | None = None) -> int:
    """Mock count of comparable historical claims (20-69)."""
    return math.floor(get_random(rng).random() * 50) + 20


def generate_pre_estimate(
    assessment: DamageAssessment,
    rng: RandomSource | None = None,
    now: datetime | None = None,
) -> PreEstimate:
    """Build a preliminary estimate range.

    Per damage: base cost by area and repair type, times the severity
    multiplier, with a +/-15% band below 0.7 confidence and +/-10% otherwise.
    The summed totals get the labor then supplies multipliers once, and each
    bound is rounded to the nearest $50.
    """
    total_low = 0.0
    total_typical = 0.0
    total_high = 0.0
    based_on: list[str] = []

    for damage in assessment.detected_damages:
        repair_cost, replace_cost = DAMAGE_AREA_COSTS[damage.area]
        cost = repair_cost if damage.repair_type == RepairType.REPAIR else replace_cost
        typical = cost * SEVERITY_MULTIPLIERS[damage.severity]
        variance = (
            LOW_CONFIDENCE_VARIANCE if damage.confidence < LOW_CONFIDENCE_THRESHOLD else DEFAULT_VARIANCE
        )
        total_low += typical * (1 - variance)
        total_typical += typical
        total_high += typical * (1 + variance)

        suffix = " - replace" if damage.repair_type == RepairType.REPLACE else ""
        based_on.append(f"{format_damage_area(damage.area)} ({damage.severity.value}{suffix})")

    totals = []
    for total in (total_low, total_typical, total_high):
        total *= PRE_ESTIMATE_LABOR_MULTIPLIER
        total *= PRE_ESTIMATE_SUPPLIES_MULTIPLIER
        totals.append(round_to_nearest(total, PRE_ESTIMATE_ROUNDING))
    low, typical, high = totals

    damage_count = len(assessment.detected_damages)
    if damage_count:
        avg_confidence = sum(d.confidence for d in assessment.detected_damages) / damage_count
        confidence = round_int(avg_confidence * assessment.confidence * 100)
    else:
        confidence = 0

    pre_estimate = PreEstimate(
        id=f"pre-est-{short_id()}",
        range=PreEstimateRange(low=low, typical=typical, high=high),
        confidence=confidence,
        based_on_damages=based_on,
        similar_claims_count=estimate_similar_claims_count(rng),
        estimated_repair_days=RepairDays(
            min=max(2, math.ceil(damage_count * 0.5)),
            max=math.ceil(damage_count * 1.5),
        ),
        generated_at=now or datetime.now(timezone.utc),
        disclaimer=DISCLAIMER,
    )
    logger.debug("Pre-estimate %s: %s-%s (typical %s)", pre_estimate.id, low, high, typical)
    return pre_estimate


def get_confidence_description(confidence: float) -> dict[str, Any]:
    """Display level, text and color for a 0-100 pre-estimate confidence."""
    if confidence >= 80:
        return {"level": "high", "description": "Very confident in this estimate", "color": "#34C759"}
    if confidence >= 60:
        return {"level": "medium", "description": "Moderately confident - may vary", "color": "#FF9500"}
    return {"level": "low", "description": "Lower confidence - expect variation", "color": "#FF3B30"}

