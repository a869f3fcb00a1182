"""Unit tests for MCP server tools."""

import json

import pytest

from collision_claims.mcp_server.server import (
    analyze_damage,
    analyze_fraud,
    calculate_timeline_progress,
    format_estimate,
    generate_estimate,
    generate_estimate_options,
    generate_pre_estimate,
    generate_time_slots,
    validate_insurance_info,
)

VEHICLE = {"year": 2022, "make": "Toyota", "model": "Camry", "vin": "4t1bf1fk5cu123456"}
PHOTOS = [
    {"uri": f"file:///photos/{angle}.jpg", "angle": angle}
    for angle in ("front", "rear", "driver_side", "passenger_side")
]


@pytest.fixture
def assessment():
    return json.loads(analyze_damage(PHOTOS))


class TestMcpServerTools:
    """Test MCP server tool wrappers."""

    def test_validate_insurance_info(self):
        assert json.loads(validate_insurance_info(None)) == {"status": "none"}
        partial = validate_insurance_info({"provider": "State Farm"})
        assert json.loads(partial) == {"status": "partial"}
        complete = validate_insurance_info(
            {"provider": "State Farm", "policy_number": "SF-1", "agent_email": "a@sf.com"}
        )
        assert json.loads(complete) == {"status": "complete"}

    def test_validate_insurance_info_invalid_payload(self):
        data = json.loads(validate_insurance_info({"deductible": "lots"}))
        assert data["error"] == "Invalid payload"
        assert data["details"]

    def test_analyze_damage(self, assessment):
        areas = {d["area"] for d in assessment["detected_damages"]}
        assert "front_bumper" in areas
        assert 0 <= assessment["confidence"] <= 1

    def test_generate_pre_estimate(self, assessment):
        data = json.loads(generate_pre_estimate(assessment))
        assert data["range"]["low"] <= data["range"]["typical"] <= data["range"]["high"]
        assert data["range"]["low"] % 50 == 0
        assert data["confidence_description"]["level"] in ("high", "medium", "low")
        assert data["display_range"]["low"].startswith("$")

    def test_generate_and_format_estimate(self, assessment):
        estimate = json.loads(generate_estimate(assessment, VEHICLE))
        assert estimate["format"] == "ccc_one"
        assert estimate["total"] == pytest.approx(estimate["subtotal"] + estimate["tax"], abs=0.01)
        assert estimate["summary"]["parts_count"] > 0

        ccc = json.loads(format_estimate(estimate, VEHICLE, "CLM-1"))
        assert ccc["claim_id"] == "CLM-1"
        assert "CCC ONE ESTIMATING SYSTEM" in ccc["text"]
        assert "VIN: 4T1BF1FK5CU123456" in ccc["text"]

        mitchell = json.loads(format_estimate(estimate, VEHICLE, "CLM-1", "mitchell"))
        assert "Estimate Number: CLM-1" in mitchell["text"]

    def test_generate_estimate_unknown_format(self, assessment):
        data = json.loads(generate_estimate(assessment, VEHICLE, "audatex"))
        assert "error" in data

    def test_generate_estimate_options(self, assessment):
        data = json.loads(generate_estimate_options(assessment))
        assert data["oem"]["recommended"] is True
        assert data["basic"]["total"] <= data["oem"]["total"] <= data["premium"]["total"]

    def test_analyze_fraud(self, assessment):
        data = json.loads(
            analyze_fraud({"vehicle": VEHICLE, "photos": PHOTOS, "damage_assessment": assessment})
        )
        assert 0 <= data["score"] <= 100
        assert data["recommendation"] in ("approve", "review", "investigate")
        assert "risk_level" in data

    def test_generate_time_slots(self):
        slots = json.loads(generate_time_slots("2026-03-09"))
        assert len(slots) == 16
        assert slots[0]["start_time"] == "08:00"
        assert json.loads(generate_time_slots("2026-03-08")) == []

    def test_generate_time_slots_counts_bookings(self):
        booked = [
            {
                "id": "apt-1",
                "claim_id": "c1",
                "body_shop_id": "s1",
                "type": "drop_off",
                "status": "confirmed",
                "scheduled_date": "2026-03-09",
                "time_slot": {"start": "09:00", "end": "09:30"},
                "created_at": "2026-03-01T10:00:00+00:00",
                "updated_at": "2026-03-01T10:00:00+00:00",
            }
        ]
        slots = {s["start_time"]: s for s in json.loads(generate_time_slots("2026-03-09", booked))}
        assert slots["09:00"]["current_bookings"] == 1

    def test_generate_time_slots_bad_date(self):
        assert "error" in json.loads(generate_time_slots("03/09/2026"))

    def test_calculate_timeline_progress(self):
        data = json.loads(calculate_timeline_progress("approved"))
        assert data["percent_complete"] == 80
        assert data["message"]["title"]
        rejected = json.loads(calculate_timeline_progress("rejected"))
        assert rejected["percent_complete"] == 0
