"""Tests for input sanitization."""

from collision_claims.utils.sanitization import (
    MAX_VEHICLE_MAKE,
    sanitize_insurance_data,
    sanitize_text,
    sanitize_vehicle_data,
)


def test_sanitize_text_strips_control_characters():
    assert sanitize_text("  Hello\x00 world\x1b  ", 100) == "Hello world"


def test_sanitize_text_keeps_newlines_and_tabs():
    assert sanitize_text("line one\nline\ttwo", 100) == "line one\nline\ttwo"


def test_sanitize_text_non_string():
    assert sanitize_text(None, 10) == ""
    assert sanitize_text(42, 10) == ""


def test_sanitize_text_truncates():
    assert sanitize_text("x" * 50, 10) == "x" * 10


def test_sanitize_vehicle_data_preserves_valid_input():
    """Valid vehicle data is preserved."""
    data = {"year": 2022, "make": "Toyota", "model": "Camry", "vin": "4t1bf1fk5cu123456"}
    out = sanitize_vehicle_data(data)
    assert out == {"year": 2022, "make": "Toyota", "model": "Camry", "vin": "4T1BF1FK5CU123456"}
    assert data["vin"] == "4t1bf1fk5cu123456"


def test_sanitize_vehicle_data_blank_optionals_become_none():
    out = sanitize_vehicle_data({"year": 2022, "trim": "  ", "vin": ""})
    assert out["trim"] is None
    assert out["vin"] is None


def test_sanitize_vehicle_data_truncates_long_fields():
    out = sanitize_vehicle_data({"make": "m" * 500, "model": "Camry"})
    assert len(out["make"]) == MAX_VEHICLE_MAKE


def test_sanitize_vehicle_data_empty_input():
    """Empty or None input returns an empty dict."""
    assert sanitize_vehicle_data({}) == {}
    assert sanitize_vehicle_data(None) == {}


def test_sanitize_insurance_data():
    out = sanitize_insurance_data({"provider": " State Farm\x07 ", "deductible": 500})
    assert out == {"provider": "State Farm", "deductible": 500}
    assert sanitize_insurance_data(None) == {}
