"""MCP server exposing claim tools via stdio transport."""

from typing import Any, Optional

from mcp.server.fastmcp import FastMCP

from collision_claims.tools.logic import (
    analyze_damage_impl,
    analyze_fraud_impl,
    calculate_timeline_progress_impl,
    format_estimate_impl,
    generate_estimate_impl,
    generate_estimate_options_impl,
    generate_pre_estimate_impl,
    generate_time_slots_impl,
    validate_insurance_info_impl,
)

mcp = FastMCP("collision-claims", json_response=True)


@mcp.tool()
def validate_insurance_info(info: Optional[dict[str, Any]] = None) -> str:
    """Classify insurance details as none, partial, or complete."""
    return validate_insurance_info_impl(info)


@mcp.tool()
def analyze_damage(photos: list[dict[str, Any]]) -> str:
    """Detect damaged areas from claim photos and return a damage assessment."""
    return analyze_damage_impl(photos)


@mcp.tool()
def generate_pre_estimate(assessment: dict[str, Any]) -> str:
    """Produce an instant low/typical/high cost range from a damage assessment."""
    return generate_pre_estimate_impl(assessment)


@mcp.tool()
def generate_estimate(
    assessment: dict[str, Any], vehicle: dict[str, Any], format: str = "ccc_one"
) -> str:
    """Price a damage assessment into an itemized estimate (parts, labor, paint, supplies, tax)."""
    return generate_estimate_impl(assessment, vehicle, format)


@mcp.tool()
def format_estimate(
    estimate: dict[str, Any],
    vehicle: dict[str, Any],
    claim_id: str,
    format: Optional[str] = None,
) -> str:
    """Render an estimate as CCC ONE or Mitchell fixed-width text."""
    return format_estimate_impl(estimate, vehicle, claim_id, format)


@mcp.tool()
def generate_estimate_options(assessment: dict[str, Any]) -> str:
    """Build basic, OEM, and premium repair options for a damage assessment."""
    return generate_estimate_options_impl(assessment)


@mcp.tool()
def analyze_fraud(claim: dict[str, Any]) -> str:
    """Score a claim for fraud risk 0-100 and recommend approve, review, or investigate."""
    return analyze_fraud_impl(claim)


@mcp.tool()
def generate_time_slots(date: str, appointments: Optional[list[dict[str, Any]]] = None) -> str:
    """List bookable body shop time slots for a date (YYYY-MM-DD)."""
    return generate_time_slots_impl(date, appointments)


@mcp.tool()
def calculate_timeline_progress(status: str, submitted_at: Optional[str] = None) -> str:
    """Report claim progress, estimated time remaining, and the next milestone for a status."""
    return calculate_timeline_progress_impl(status, submitted_at)


def main() -> None:
    """Run the MCP server with stdio transport (default)."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
