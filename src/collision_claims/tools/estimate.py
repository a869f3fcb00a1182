"""Line-item estimate generation and CCC ONE / Mitchell text formatting."""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any

from collision_claims.config.settings import ESTIMATE_VALID_DAYS, SHOP_SUPPLIES_RATE, TAX_RATE
from collision_claims.models.claim import (
    DamageAssessment,
    Estimate,
    EstimateFormat,
    EstimateLineItem,
    LineItemType,
    Vehicle,
)
from collision_claims.tools.pricing import (
    enhance_parts_with_pricing,
    estimate_paint_work,
    get_paint_cost,
)
from collision_claims.utils.numbers import format_number, round_cents, round_half_up
from collision_claims.utils.random_source import RandomSource, short_id

logger = logging.getLogger(__name__)

RULE_WIDTH = 80
DESCRIPTION_WIDTH = 40
QTY_WIDTH = 8
PRICE_WIDTH = 12
TOTALS_LABEL_WIDTH = 60

MITCHELL_HEADER = (
    "╔═══════════════════════════════════════════════════════════════════════════════╗",
    "║                        MITCHELL REPAIR ESTIMATE                               ║",
    "╚═══════════════════════════════════════════════════════════════════════════════╝",
)


def generate_estimate(
    assessment: DamageAssessment,
    vehicle: Vehicle,
    format: EstimateFormat = EstimateFormat.CCC_ONE,
    rng: RandomSource | None = None,
    now: datetime | None = None,
) -> Estimate:
    """Price a damage assessment into an ordered line-item estimate.

    Each affected part yields a part line and a labor line. One paint line
    covers all damaged areas, then one shop-supplies line at 3% of everything
    before it. Tax is 8% of the subtotal; no other fees are added.
    """
    generated_at = now or datetime.now(timezone.utc)
    today = generated_at.date()
    line_items: list[EstimateLineItem] = []

    for damage in assessment.detected_damages:
        priced_parts = enhance_parts_with_pricing(damage.affected_parts, vehicle, rng, today)
        for part in priced_parts:
            line_items.append(
                EstimateLineItem(
                    type=LineItemType.PART,
                    description=f"{part.name} - {damage.repair_type.value}",
                    quantity=1,
                    unit_price=part.price,
                    total=part.price,
                    part_id=part.id,
                )
            )
            line_items.append(
                EstimateLineItem(
                    type=LineItemType.LABOR,
                    description=f"Labor: {part.name}",
                    quantity=part.labor_hours,
                    unit_price=part.labor_rate,
                    total=round_cents(part.labor_hours * part.labor_rate),
                    part_id=part.id,
                )
            )

    damaged_areas = [d.area.value for d in assessment.detected_damages]
    panels, blend_panels = estimate_paint_work(damaged_areas)
    paint_cost = get_paint_cost(panels, blend_panels)
    line_items.append(
        EstimateLineItem(
            type=LineItemType.PAINT,
            description=f"Paint & Refinish ({panels} panels, {blend_panels} blend)",
            quantity=panels,
            unit_price=paint_cost / panels if panels else 0.0,
            total=paint_cost,
        )
    )

    subtotal_before_supplies = sum(item.total for item in line_items)
    supplies_cost = round_cents(subtotal_before_supplies * SHOP_SUPPLIES_RATE)
    line_items.append(
        EstimateLineItem(
            type=LineItemType.SUPPLIES,
            description="Shop Supplies & Materials",
            quantity=1,
            unit_price=supplies_cost,
            total=supplies_cost,
        )
    )

    subtotal = round_cents(sum(item.total for item in line_items))
    tax = round_cents(subtotal * TAX_RATE)
    estimate = Estimate(
        id=short_id(),
        line_items=line_items,
        subtotal=subtotal,
        tax=tax,
        total=round_cents(subtotal + tax),
        format=format,
        generated_at=generated_at,
        expires_at=generated_at + timedelta(days=ESTIMATE_VALID_DAYS),
    )
    logger.info(
        "Estimate %s generated: %d line items, total $%.2f",
        estimate.id,
        len(line_items),
        estimate.total,
    )
    return estimate


def format_display_date(value: datetime | date) -> str:
    """M/D/YYYY, e.g. 3/7/2026."""
    return f"{value.month}/{value.day}/{value.year}"


def _money(amount: float, width: int) -> str:
    return "$" + f"{amount:.2f}".rjust(width)


def _ccc_row(item: EstimateLineItem, qty: str) -> str:
    return (
        f"{item.description.ljust(DESCRIPTION_WIDTH)}{qty.rjust(QTY_WIDTH)}"
        f"{_money(item.unit_price, PRICE_WIDTH - 1)}{_money(item.total, PRICE_WIDTH - 1)}"
    )


def format_ccc_one(estimate: Estimate, vehicle: Vehicle, claim_id: str) -> str:
    """Render an estimate as a CCC ONE style fixed-width table."""
    lines = [
        "=" * RULE_WIDTH,
        "CCC ONE ESTIMATING SYSTEM",
        "=" * RULE_WIDTH,
        "",
        f"Estimate #: {claim_id}",
        f"Date: {format_display_date(estimate.generated_at)}",
        f"Valid Until: {format_display_date(estimate.expires_at)}",
        "",
        "VEHICLE INFORMATION:",
        f"{vehicle.year} {vehicle.make} {vehicle.model} {vehicle.trim or ''}",
    ]
    if vehicle.vin:
        lines.append(f"VIN: {vehicle.vin}")
    lines.append("")
    lines.append("-" * RULE_WIDTH)
    lines.append(
        f"{'DESCRIPTION'.ljust(DESCRIPTION_WIDTH)}{'QTY'.rjust(QTY_WIDTH)}"
        f"{'PRICE'.rjust(PRICE_WIDTH)}{'TOTAL'.rjust(PRICE_WIDTH)}"
    )
    lines.append("-" * RULE_WIDTH)

    sections = (
        (LineItemType.PART, "PARTS:"),
        (LineItemType.LABOR, "LABOR:"),
        (LineItemType.PAINT, "PAINT & REFINISH:"),
        (LineItemType.SUPPLIES, "SUPPLIES:"),
    )
    for item_type, heading in sections:
        items = [i for i in estimate.line_items if i.type == item_type]
        if not items:
            continue
        lines.append("")
        lines.append(heading)
        for item in items:
            if item_type == LineItemType.LABOR:
                qty = f"{item.quantity:.1f}"
            else:
                qty = format_number(item.quantity)
            lines.append(_ccc_row(item, qty))

    lines.append("-" * RULE_WIDTH)
    lines.append(f"{'SUBTOTAL:'.ljust(TOTALS_LABEL_WIDTH)}{_money(estimate.subtotal, PRICE_WIDTH)}")
    lines.append(f"{'TAX (8%):'.ljust(TOTALS_LABEL_WIDTH)}{_money(estimate.tax, PRICE_WIDTH)}")
    lines.append("=" * RULE_WIDTH)
    lines.append(f"{'TOTAL:'.ljust(TOTALS_LABEL_WIDTH)}{_money(estimate.total, PRICE_WIDTH)}")
    lines.append("=" * RULE_WIDTH)
    return "\n".join(lines)


def format_mitchell(estimate: Estimate, vehicle: Vehicle, claim_id: str) -> str:
    """Render an estimate as a Mitchell style numbered operation list."""
    lines = list(MITCHELL_HEADER)
    lines += [
        "",
        f"Estimate Number: {claim_id}",
        f"Created: {format_display_date(estimate.generated_at)}",
        "",
        "VEHICLE:",
        f"  Year/Make/Model: {vehicle.year} {vehicle.make} {vehicle.model}",
    ]
    if vehicle.vin:
        lines.append(f"  VIN: {vehicle.vin}")
    lines.append("")
    lines.append("REPAIR OPERATIONS:")
    lines.append("─" * RULE_WIDTH)

    for index, item in enumerate(estimate.line_items, start=1):
        lines.append(f"{index}. {item.description}")
        lines.append(
            f"   Qty: {format_number(item.quantity)}  @  ${item.unit_price:.2f}  =  ${item.total:.2f}"
        )

    lines += [
        "─" * RULE_WIDTH,
        "",
        "ESTIMATE SUMMARY:",
        f"  Subtotal:        ${estimate.subtotal:.2f}",
        f"  Sales Tax:       ${estimate.tax:.2f}",
        "  ───────────────────────────",
        f"  TOTAL ESTIMATE:  ${estimate.total:.2f}",
        "",
        f"Valid through: {format_display_date(estimate.expires_at)}",
    ]
    return "\n".join(lines)


def format_estimate(
    estimate: Estimate,
    vehicle: Vehicle,
    claim_id: str,
    format: EstimateFormat | None = None,
) -> str:
    """Render with the given format, defaulting to the estimate's own."""
    fmt = EstimateFormat(format) if format is not None else estimate.format
    if fmt == EstimateFormat.MITCHELL:
        return format_mitchell(estimate, vehicle, claim_id)
    return format_ccc_one(estimate, vehicle, claim_id)


def get_estimate_summary(estimate: Estimate) -> dict[str, Any]:
    """Cost totals by category, total labor hours, and part count."""

    def _sum(item_type: LineItemType, attr: str = "total") -> float:
        return sum(getattr(i, attr) for i in estimate.line_items if i.type == item_type)

    return {
        "parts_cost": round_cents(_sum(LineItemType.PART)),
        "labor_cost": round_cents(_sum(LineItemType.LABOR)),
        "paint_cost": round_cents(_sum(LineItemType.PAINT)),
        "total_labor_hours": round_half_up(_sum(LineItemType.LABOR, "quantity"), 1),
        "parts_count": sum(1 for i in estimate.line_items if i.type == LineItemType.PART),
    }
