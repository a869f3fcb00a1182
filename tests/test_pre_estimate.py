"""Tests for the instant pre-estimate range."""

import random
from datetime import datetime, timezone

import pytest

from collision_claims.models.claim import DamageArea, DamageAssessment, DamageSeverity, RepairType
from collision_claims.tools.damage import analyze_damage
from collision_claims.tools.pre_estimate import (
    DISCLAIMER,
    estimate_similar_claims_count,
    format_damage_area,
    generate_pre_estimate,
    get_confidence_description,
)


class TestGeneratePreEstimate:
    """Tests for generate_pre_estimate."""

    def test_two_damage_range(self, assessment, make_rng):
        pre = generate_pre_estimate(assessment, rng=make_rng(0.5))
        assert (pre.range.low, pre.range.typical, pre.range.high) == (3100, 3600, 4100)
        assert pre.confidence == 60
        assert pre.estimated_repair_days.min == 2
        assert pre.estimated_repair_days.max == 3
        assert pre.similar_claims_count == 45
        assert pre.disclaimer == DISCLAIMER
        assert pre.id.startswith("pre-est-")

    def test_damage_descriptions(self, assessment):
        pre = generate_pre_estimate(assessment)
        assert pre.based_on_damages == [
            "Front Bumper (moderate)",
            "Rear Bumper (severe - replace)",
        ]

    def test_low_confidence_widens_band(self, damage_factory):
        narrow = DamageAssessment(
            detected_damages=[damage_factory(DamageArea.ROOF, confidence=0.9)], confidence=1.0
        )
        wide = DamageAssessment(
            detected_damages=[damage_factory(DamageArea.ROOF, confidence=0.5)], confidence=1.0
        )
        n = generate_pre_estimate(narrow).range
        w = generate_pre_estimate(wide).range
        assert n.typical == w.typical
        assert w.low < n.low
        assert w.high > n.high

    def test_no_damages(self):
        pre = generate_pre_estimate(DamageAssessment(detected_damages=[], confidence=0.75))
        assert (pre.range.low, pre.range.typical, pre.range.high) == (0, 0, 0)
        assert pre.confidence == 0
        assert pre.estimated_repair_days.min == 2
        assert pre.estimated_repair_days.max == 0

    def test_many_damages_raise_repair_days(self, damage_factory):
        damages = [damage_factory(area) for area in list(DamageArea)[:6]]
        pre = generate_pre_estimate(DamageAssessment(detected_damages=damages, confidence=0.9))
        assert pre.estimated_repair_days.min == 3
        assert pre.estimated_repair_days.max == 9

    def test_generated_at_uses_now(self, assessment):
        now = datetime(2026, 3, 10, tzinfo=timezone.utc)
        assert generate_pre_estimate(assessment, now=now).generated_at == now

    @pytest.mark.parametrize("seed", range(10))
    def test_bounds_ordered_and_multiples_of_50(self, four_angle_photos, seed):
        rng = random.Random(seed)
        pre = generate_pre_estimate(analyze_damage(four_angle_photos, rng), rng)
        assert pre.range.low <= pre.range.typical <= pre.range.high
        for bound in (pre.range.low, pre.range.typical, pre.range.high):
            assert bound % 50 == 0

    def test_severity_scales_typical(self, damage_factory):
        def typical(severity):
            a = DamageAssessment(
                detected_damages=[damage_factory(DamageArea.HOOD, severity, RepairType.REPAIR)],
                confidence=0.9,
            )
            return generate_pre_estimate(a).range.typical

        assert typical(DamageSeverity.MINOR) < typical(DamageSeverity.MODERATE) < typical(
            DamageSeverity.SEVERE
        )


class TestPreEstimateHelpers:
    """Tests for pre-estimate display helpers."""

    def test_format_damage_area(self):
        assert format_damage_area(DamageArea.QUARTER_PANEL_LEFT) == "Quarter Panel Left"
        assert format_damage_area("hood") == "Hood"

    def test_similar_claims_count_range(self, make_rng):
        assert estimate_similar_claims_count(make_rng(0.0)) == 20
        assert estimate_similar_claims_count(make_rng(0.999)) == 69

    @pytest.mark.parametrize(
        "confidence,level",
        [(95, "high"), (80, "high"), (79, "medium"), (60, "medium"), (59, "low"), (0, "low")],
    )
    def test_confidence_description(self, confidence, level):
        assert get_confidence_description(confidence)["level"] == level
