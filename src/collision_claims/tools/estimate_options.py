"""Basic / OEM / Premium repair estimate tiers."""

from typing import Any

from collision_claims.config.settings import TAX_RATE
from collision_claims.models.claim import (
    BaseCosts,
    DamageArea,
    DamageAssessment,
    DamageSeverity,
    DetectedDamage,
    EstimateBreakdown,
    EstimateComparison,
    EstimateOption,
    EstimateTier,
    RepairType,
)
from collision_claims.utils.numbers import round_int, round_to_nearest

TIER_MULTIPLIERS: dict[EstimateTier, dict[str, float]] = {
    # Aftermarket parts, standard labor and paint
    EstimateTier.BASIC: {"parts": 0.65, "labor": 0.9, "paint": 0.85, "supplies": 1.0},
    EstimateTier.OEM: {"parts": 1.0, "labor": 1.0, "paint": 1.0, "supplies": 1.0},
    # Certified technicians, multi-stage paint, premium materials
    EstimateTier.PREMIUM: {"parts": 1.0, "labor": 1.15, "paint": 1.3, "supplies": 1.1},
}

# area -> (parts, labor, paint)
AREA_BASE_COSTS: dict[DamageArea, tuple[float, float, float]] = {
    DamageArea.FRONT_BUMPER: (400, 300, 250),
    DamageArea.HOOD: (500, 250, 350),
    DamageArea.FENDER_LEFT: (350, 250, 300),
    DamageArea.FENDER_RIGHT: (350, 250, 300),
    DamageArea.DOOR_FRONT_LEFT: (450, 300, 300),
    DamageArea.DOOR_FRONT_RIGHT: (450, 300, 300),
    DamageArea.DOOR_REAR_LEFT: (450, 300, 300),
    DamageArea.DOOR_REAR_RIGHT: (450, 300, 300),
    DamageArea.QUARTER_PANEL_LEFT: (600, 400, 400),
    DamageArea.QUARTER_PANEL_RIGHT: (600, 400, 400),
    DamageArea.REAR_BUMPER: (400, 300, 250),
    DamageArea.TRUNK: (500, 250, 350),
    DamageArea.ROOF: (1200, 600, 500),
    DamageArea.WINDSHIELD: (350, 150, 0),
    DamageArea.HEADLIGHT_LEFT: (400, 100, 0),
    DamageArea.HEADLIGHT_RIGHT: (400, 100, 0),
    DamageArea.TAILLIGHT_LEFT: (250, 75, 0),
    DamageArea.TAILLIGHT_RIGHT: (250, 75, 0),
}
DEFAULT_AREA_BASE_COST = (300.0, 200.0, 200.0)

SEVERITY_COST_MULTIPLIERS = {
    DamageSeverity.SEVERE: 1.5,
    DamageSeverity.MODERATE: 1.0,
    DamageSeverity.MINOR: 0.7,
}
REPLACE_PARTS_MULTIPLIER = 1.3
SHOP_SUPPLIES_RATE = 0.08
TOTAL_ROUNDING = 10

TIER_DETAILS: dict[EstimateTier, dict[str, Any]] = {
    EstimateTier.BASIC: {
        "title": "Basic Repair",
        "description": "Quality aftermarket parts with standard repair process",
        "features": [
            "✓ Quality aftermarket parts",
            "✓ Professional repair",
            "✓ Standard paint match",
            "✓ 1-year warranty on parts",
            "✓ 6-month warranty on labor",
        ],
        "warranty": "1 year parts / 6 months labor",
        "timeline_estimate": "5-7 business days",
    },
    EstimateTier.OEM: {
        "title": "OEM Parts",
        "description": "Original manufacturer parts with certified repair",
        "features": [
            "✓ Original manufacturer parts",
            "✓ Certified technicians",
            "✓ Factory paint specifications",
            "✓ 3-year warranty on parts",
            "✓ 2-year warranty on labor",
            "✓ OEM repair procedures",
        ],
        "warranty": "3 years parts / 2 years labor",
        "timeline_estimate": "7-10 business days",
        "recommended": True,
        "popular_choice": True,
    },
    EstimateTier.PREMIUM: {
        "title": "Premium Restoration",
        "description": "Highest quality parts and finish with extended warranty",
        "features": [
            "✓ Original manufacturer parts",
            "✓ Master certified technicians",
            "✓ Premium multi-stage paint",
            "✓ Ceramic coating included",
            "✓ Lifetime warranty on parts",
            "✓ 5-year warranty on labor",
            "✓ Detailed vehicle inspection",
            "✓ Complimentary detailing",
        ],
        "warranty": "Lifetime parts / 5 years labor",
        "timeline_estimate": "10-14 business days",
    },
}

TIER_BADGE_COLORS = {
    EstimateTier.BASIC: "#34C759",
    EstimateTier.OEM: "#007AFF",
    EstimateTier.PREMIUM: "#FF9500",
}


def estimate_damage_cost(damage: DetectedDamage) -> tuple[float, float, float]:
    """(parts, labor, paint) for one damage. Replacement raises parts cost only."""
    parts, labor, paint = AREA_BASE_COSTS.get(damage.area, DEFAULT_AREA_BASE_COST)
    severity_mult = SEVERITY_COST_MULTIPLIERS[damage.severity]
    repair_mult = REPLACE_PARTS_MULTIPLIER if damage.repair_type == RepairType.REPLACE else 1.0
    return parts * severity_mult * repair_mult, labor * severity_mult, paint * severity_mult


def calculate_base_costs(assessment: DamageAssessment) -> BaseCosts:
    parts = labor = paint = 0.0
    for damage in assessment.detected_damages:
        p, l, c = estimate_damage_cost(damage)
        parts += p
        labor += l
        paint += c
    return BaseCosts(
        parts=parts,
        labor=labor,
        paint=paint,
        shop_supplies=(parts + labor + paint) * SHOP_SUPPLIES_RATE,
    )


def build_tier_option(tier: EstimateTier, costs: BaseCosts) -> EstimateOption:
    """Apply a tier's multipliers. The total is rounded to the nearest $10."""
    mult = TIER_MULTIPLIERS[tier]
    parts = costs.parts * mult["parts"]
    labor = costs.labor * mult["labor"]
    paint = costs.paint * mult["paint"]
    shop_supplies = costs.shop_supplies * mult["supplies"]
    subtotal = parts + labor + paint + shop_supplies
    tax = subtotal * TAX_RATE
    total = round_to_nearest(subtotal + tax, TOTAL_ROUNDING)

    details = TIER_DETAILS[tier]
    return EstimateOption(
        tier=tier,
        title=details["title"],
        description=details["description"],
        breakdown=EstimateBreakdown(
            parts=round_int(parts),
            labor=round_int(labor),
            paint=round_int(paint),
            shop_supplies=round_int(shop_supplies),
            tax=round_int(tax),
            total=total,
        ),
        total=total,
        features=list(details["features"]),
        warranty=details["warranty"],
        timeline_estimate=details["timeline_estimate"],
        recommended=details.get("recommended", False),
        popular_choice=details.get("popular_choice", False),
    )


def generate_estimate_options(
    assessment: DamageAssessment,
    base_costs: BaseCosts | None = None,
) -> EstimateComparison:
    """Three parallel tier estimates from caller-supplied or damage-derived base costs."""
    costs = base_costs or calculate_base_costs(assessment)
    basic = build_tier_option(EstimateTier.BASIC, costs)
    oem = build_tier_option(EstimateTier.OEM, costs)
    premium = build_tier_option(EstimateTier.PREMIUM, costs)
    basic.savings = calculate_savings(basic.total, oem.total)
    return EstimateComparison(basic=basic, oem=oem, premium=premium)


def calculate_savings(basic_total: float, oem_total: float) -> int:
    """Percent saved by the basic tier relative to OEM. 0 when the OEM total is 0."""
    if not oem_total:
        return 0
    return round_int((oem_total - basic_total) / oem_total * 100)


def get_tier_badge_color(tier: EstimateTier | str) -> str:
    try:
        return TIER_BADGE_COLORS[EstimateTier(tier)]
    except ValueError:
        return "#8E8E93"


def format_price_comparison(basic: float, oem: float, premium: float) -> dict[str, Any]:
    return {
        "lowest_price": basic,
        "highest_price": premium,
        "range": f"${basic:,.0f} - ${premium:,.0f}",
        "average_price": round_int((basic + oem + premium) / 3),
    }
