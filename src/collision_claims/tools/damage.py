"""Mock damage detection from photo angles.

Stands in for a vision model: the set of captured angles decides which body
regions are reported, and the random source decides severity, repair type,
part prices and labor hours.
"""

import logging
from typing import Iterable

from collision_claims.models.claim import (
    DamageArea,
    DamageAssessment,
    DamageSeverity,
    DetectedDamage,
    Part,
    Photo,
    PhotoAngle,
    RepairType,
)
from collision_claims.utils.latency import simulate_latency
from collision_claims.utils.random_source import RandomSource, get_random, short_id

logger = logging.getLogger(__name__)

# area -> (part names, average part price)
DAMAGE_PARTS_DATABASE: dict[DamageArea, tuple[list[str], float]] = {
    DamageArea.FRONT_BUMPER: (["Front Bumper Cover", "Bumper Reinforcement", "Grille"], 450),
    DamageArea.HOOD: (["Hood Panel", "Hood Latch"], 650),
    DamageArea.FENDER_LEFT: (["Left Front Fender", "Fender Liner"], 380),
    DamageArea.FENDER_RIGHT: (["Right Front Fender", "Fender Liner"], 380),
    DamageArea.DOOR_FRONT_LEFT: (["Left Front Door Shell", "Door Handle", "Window Regulator"], 550),
    DamageArea.DOOR_FRONT_RIGHT: (["Right Front Door Shell", "Door Handle", "Window Regulator"], 550),
    DamageArea.DOOR_REAR_LEFT: (["Left Rear Door Shell", "Door Handle"], 520),
    DamageArea.DOOR_REAR_RIGHT: (["Right Rear Door Shell", "Door Handle"], 520),
    DamageArea.QUARTER_PANEL_LEFT: (["Left Quarter Panel", "Tail Light"], 720),
    DamageArea.QUARTER_PANEL_RIGHT: (["Right Quarter Panel", "Tail Light"], 720),
    DamageArea.REAR_BUMPER: (["Rear Bumper Cover", "Bumper Reinforcement"], 420),
    DamageArea.TRUNK: (["Trunk Lid", "Trunk Latch"], 600),
    DamageArea.ROOF: (["Roof Panel"], 1200),
    DamageArea.WINDSHIELD: (["Windshield Glass", "Windshield Molding"], 350),
    DamageArea.HEADLIGHT_LEFT: (["Left Headlight Assembly"], 280),
    DamageArea.HEADLIGHT_RIGHT: (["Right Headlight Assembly"], 280),
    DamageArea.TAILLIGHT_LEFT: (["Left Tail Light Assembly"], 180),
    DamageArea.TAILLIGHT_RIGHT: (["Right Tail Light Assembly"], 180),
}

AREA_DISPLAY_NAMES: dict[DamageArea, str] = {
    DamageArea.FRONT_BUMPER: "Front Bumper",
    DamageArea.HOOD: "Hood",
    DamageArea.FENDER_LEFT: "Left Fender",
    DamageArea.FENDER_RIGHT: "Right Fender",
    DamageArea.DOOR_FRONT_LEFT: "Front Left Door",
    DamageArea.DOOR_FRONT_RIGHT: "Front Right Door",
    DamageArea.DOOR_REAR_LEFT: "Rear Left Door",
    DamageArea.DOOR_REAR_RIGHT: "Rear Right Door",
    DamageArea.QUARTER_PANEL_LEFT: "Left Quarter Panel",
    DamageArea.QUARTER_PANEL_RIGHT: "Right Quarter Panel",
    DamageArea.REAR_BUMPER: "Rear Bumper",
    DamageArea.TRUNK: "Trunk",
    DamageArea.ROOF: "Roof",
    DamageArea.WINDSHIELD: "Windshield",
    DamageArea.HEADLIGHT_LEFT: "Left Headlight",
    DamageArea.HEADLIGHT_RIGHT: "Right Headlight",
    DamageArea.TAILLIGHT_LEFT: "Left Taillight",
    DamageArea.TAILLIGHT_RIGHT: "Right Taillight",
}

DAMAGE_TYPES_BY_SEVERITY: dict[DamageSeverity, list[str]] = {
    DamageSeverity.MINOR: ["scratch", "dent"],
    DamageSeverity.MODERATE: ["dent", "paint"],
    DamageSeverity.SEVERE: ["structural", "crack"],
}

FRONT_ANGLES = {PhotoAngle.FRONT, PhotoAngle.FRONT_DRIVER, PhotoAngle.FRONT_PASSENGER}
REAR_ANGLES = {PhotoAngle.REAR, PhotoAngle.REAR_DRIVER, PhotoAngle.REAR_PASSENGER}

BASE_CONFIDENCE = 0.75
MAX_PHOTO_BONUS = 0.15
FULL_COVERAGE_PHOTOS = 8
MAX_CONFIDENCE = 0.95


def get_area_display_name(area: DamageArea | str) -> str:
    try:
        return AREA_DISPLAY_NAMES[DamageArea(area)]
    except ValueError:
        return str(area)


def create_mock_damage(
    area: DamageArea,
    severity: DamageSeverity,
    confidence: float,
    rng: RandomSource | None = None,
) -> DetectedDamage:
    """Build one detected damage with randomized parts, prices and labor hours.

    Severe damage is always replaced; otherwise replace/repair is a coin flip.
    Repairs keep only the first affected part.
    """
    rng = get_random(rng)
    part_names, avg_price = DAMAGE_PARTS_DATABASE[area]
    if severity == DamageSeverity.SEVERE:
        repair_type = RepairType.REPLACE
    else:
        repair_type = RepairType.REPAIR if rng.random() > 0.5 else RepairType.REPLACE

    category = "glass" if "light" in area.value else "body"
    parts = []
    for name in part_names:
        price = avg_price * (1 + (rng.random() - 0.5) * 0.3)
        if repair_type == RepairType.REPLACE:
            labor_hours = 2.5 + rng.random() * 2
        else:
            labor_hours = 1 + rng.random() * 1.5
        parts.append(
            Part(
                id=short_id(),
                name=name,
                category=category,
                price=price,
                labor_hours=labor_hours,
                labor_rate=85.0,
                repair_type=repair_type,
            )
        )

    return DetectedDamage(
        id=short_id(),
        area=area,
        severity=severity,
        confidence=confidence,
        affected_parts=parts if repair_type == RepairType.REPLACE else parts[:1],
        repair_type=repair_type,
        damage_types=list(DAMAGE_TYPES_BY_SEVERITY[severity]),
    )


def detect_damages(photos: Iterable[Photo], rng: RandomSource | None = None) -> list[DetectedDamage]:
    """Map captured angles to detected damages."""
    rng = get_random(rng)
    angles = {p.angle for p in photos if p.angle is not None}
    damages: list[DetectedDamage] = []

    if angles & FRONT_ANGLES:
        severity = DamageSeverity.MODERATE if rng.random() > 0.5 else DamageSeverity.SEVERE
        damages.append(create_mock_damage(DamageArea.FRONT_BUMPER, severity, 0.92, rng))
        if rng.random() > 0.6:
            damages.append(create_mock_damage(DamageArea.HOOD, DamageSeverity.MINOR, 0.78, rng))

    if PhotoAngle.DRIVER_SIDE in angles:
        severity = DamageSeverity.MINOR if rng.random() > 0.7 else DamageSeverity.MODERATE
        damages.append(create_mock_damage(DamageArea.DOOR_FRONT_LEFT, severity, 0.88, rng))
        if rng.random() > 0.5:
            damages.append(
                create_mock_damage(DamageArea.FENDER_LEFT, DamageSeverity.MODERATE, 0.82, rng)
            )

    if PhotoAngle.PASSENGER_SIDE in angles:
        severity = DamageSeverity.MINOR if rng.random() > 0.7 else DamageSeverity.MODERATE
        damages.append(create_mock_damage(DamageArea.DOOR_FRONT_RIGHT, severity, 0.86, rng))

    if angles & REAR_ANGLES:
        severity = DamageSeverity.MODERATE if rng.random() > 0.5 else DamageSeverity.SEVERE
        damages.append(create_mock_damage(DamageArea.REAR_BUMPER, severity, 0.90, rng))
        if rng.random() > 0.7:
            damages.append(
                create_mock_damage(DamageArea.TAILLIGHT_RIGHT, DamageSeverity.SEVERE, 0.95, rng)
            )

    return damages


def detect_potential_hidden_damage(damages: list[DetectedDamage]) -> list[str]:
    hidden: list[str] = []
    if any(d.severity == DamageSeverity.SEVERE for d in damages):
        hidden.append("Frame alignment check recommended")
        hidden.append("Suspension inspection may be required")
    if any("front" in d.area.value or d.area == DamageArea.HOOD for d in damages):
        hidden.append("Radiator and cooling system inspection recommended")
        hidden.append("Check for engine compartment damage")
    if any("door" in d.area.value or "fender" in d.area.value for d in damages):
        hidden.append("Check door alignment and latching mechanisms")
    return hidden


def assessment_confidence(photo_count: int) -> float:
    """0.75 base plus up to 0.15 for photo coverage (full at 8 photos), capped at 0.95."""
    bonus = min(photo_count / FULL_COVERAGE_PHOTOS, 1) * MAX_PHOTO_BONUS
    return min(BASE_CONFIDENCE + bonus, MAX_CONFIDENCE)


def analyze_damage(photos: list[Photo], rng: RandomSource | None = None) -> DamageAssessment:
    """Run mock damage analysis over a claim's photos."""
    rng = get_random(rng)
    processing_time = 2000 + rng.random() * 2000
    simulate_latency(processing_time)

    damages = detect_damages(photos, rng)
    assessment = DamageAssessment(
        detected_damages=damages,
        confidence=assessment_confidence(len(photos)),
        potential_hidden_damage=detect_potential_hidden_damage(damages),
        processing_time=processing_time,
    )
    logger.info(
        "Damage analysis complete: %d photos, %d damages, confidence %.2f",
        len(photos),
        len(damages),
        assessment.confidence,
    )
    return assessment
