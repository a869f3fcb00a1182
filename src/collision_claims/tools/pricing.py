"""Mock parts and labor pricing.

Stands in for a CCC ONE / Mitchell / Audatex pricing lookup.
"""

import logging
import math
from datetime import date

from collision_claims.config.settings import (
    DEFAULT_PART_PRICE,
    LABOR_RATE_VARIANCE,
    PAINT_BLEND_PER_PANEL,
    PAINT_PER_PANEL,
    PART_AGE_MULTIPLIER_PER_YEAR,
    PARTS_MARKUP,
)
from collision_claims.models.claim import Part, Vehicle
from collision_claims.utils.latency import simulate_latency
from collision_claims.utils.numbers import round_cents, round_int
from collision_claims.utils.random_source import RandomSource, get_random

logger = logging.getLogger(__name__)

LABOR_RATES_BY_REGION: dict[str, float] = {
    "default": 85,
    "northeast": 95,
    "west": 105,
    "south": 75,
    "midwest": 80,
}

# Ordered: the first key contained in a part name wins.
BASE_PART_PRICES: list[tuple[str, float]] = [
    ("Front Bumper Cover", 350),
    ("Rear Bumper Cover", 320),
    ("Bumper Reinforcement", 180),
    ("Grille", 120),
    ("Hood Panel", 550),
    ("Hood Latch", 85),
    ("Front Fender", 280),
    ("Fender Liner", 45),
    ("Door Shell", 450),
    ("Door Handle", 65),
    ("Window Regulator", 150),
    ("Quarter Panel", 680),
    ("Tail Light", 140),
    ("Headlight Assembly", 250),
    ("Windshield Glass", 280),
    ("Windshield Molding", 35),
    ("Roof Panel", 1100),
]


def get_labor_rate(region: str = "default", rng: RandomSource | None = None) -> int:
    """Regional hourly labor rate with +/- half of LABOR_RATE_VARIANCE, rounded to whole dollars."""
    rng = get_random(rng)
    simulate_latency(100)
    base_rate = LABOR_RATES_BY_REGION.get(region, LABOR_RATES_BY_REGION["default"])
    variance = (rng.random() - 0.5) * LABOR_RATE_VARIANCE
    return round_int(base_rate + variance)


def vehicle_age(vehicle: Vehicle, today: date | None = None) -> int:
    today = today or date.today()
    return today.year - vehicle.year


def get_base_part_price(part_name: str) -> float:
    for key, price in BASE_PART_PRICES:
        if key in part_name:
            return price
    return DEFAULT_PART_PRICE


def get_part_price(part_name: str, vehicle: Vehicle, today: date | None = None) -> float:
    """Base price adjusted for vehicle age and parts markup, rounded to cents."""
    simulate_latency(100)
    age_multiplier = 1 + vehicle_age(vehicle, today) * PART_AGE_MULTIPLIER_PER_YEAR
    price = get_base_part_price(part_name) * age_multiplier * PARTS_MARKUP
    return round_cents(price)


def get_paint_cost(panel_count: int, blend_count: int = 0) -> float:
    simulate_latency(50)
    return panel_count * PAINT_PER_PANEL + blend_count * PAINT_BLEND_PER_PANEL


def estimate_paint_work(damaged_areas: list[str]) -> tuple[int, int]:
    """Return (panels_to_repaint, blend_panels): one panel per area, half as many blends rounded up."""
    panels = len(damaged_areas)
    return panels, math.ceil(panels * 0.5)


def calculate_labor_cost(
    labor_hours: float,
    labor_rate: float | None = None,
    rng: RandomSource | None = None,
) -> float:
    rate = labor_rate or get_labor_rate(rng=rng)
    return round_cents(labor_hours * rate)


def enhance_parts_with_pricing(
    parts: list[Part],
    vehicle: Vehicle,
    rng: RandomSource | None = None,
    today: date | None = None,
) -> list[Part]:
    """Price parts for a vehicle. All parts in one call share a single labor rate."""
    labor_rate = get_labor_rate(rng=rng)
    return [
        part.model_copy(
            update={"price": get_part_price(part.name, vehicle, today), "labor_rate": labor_rate}
        )
        for part in parts
    ]
