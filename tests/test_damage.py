"""Tests for mock damage detection."""

import random

import pytest

from collision_claims.models.claim import (
    DamageArea,
    DamageSeverity,
    Photo,
    PhotoAngle,
    RepairType,
)
from collision_claims.tools.damage import (
    DAMAGE_PARTS_DATABASE,
    analyze_damage,
    assessment_confidence,
    create_mock_damage,
    detect_damages,
    detect_potential_hidden_damage,
    get_area_display_name,
)


def _photos(now, *angles):
    return [
        Photo(id=f"p{i}", uri=f"file:///{a.value}.jpg", angle=a, timestamp=now)
        for i, a in enumerate(angles)
    ]


class TestDetectDamages:
    """Tests for angle-group damage rules."""

    def test_high_rolls_report_every_optional_area(self, four_angle_photos, make_rng):
        damages = detect_damages(four_angle_photos, make_rng(0.9))
        areas = [d.area for d in damages]
        assert areas == [
            DamageArea.FRONT_BUMPER,
            DamageArea.HOOD,
            DamageArea.DOOR_FRONT_LEFT,
            DamageArea.FENDER_LEFT,
            DamageArea.DOOR_FRONT_RIGHT,
            DamageArea.REAR_BUMPER,
            DamageArea.TAILLIGHT_RIGHT,
        ]

    def test_low_rolls_report_only_primary_areas(self, four_angle_photos, make_rng):
        damages = detect_damages(four_angle_photos, make_rng(0.1))
        assert [d.area for d in damages] == [
            DamageArea.FRONT_BUMPER,
            DamageArea.DOOR_FRONT_LEFT,
            DamageArea.DOOR_FRONT_RIGHT,
            DamageArea.REAR_BUMPER,
        ]
        assert damages[0].severity == DamageSeverity.SEVERE
        assert damages[1].severity == DamageSeverity.MODERATE

    def test_front_corner_angles_count_as_front(self, now, make_rng):
        damages = detect_damages(_photos(now, PhotoAngle.FRONT_PASSENGER), make_rng(0.1))
        assert [d.area for d in damages] == [DamageArea.FRONT_BUMPER]

    def test_rear_corner_angles_count_as_rear(self, now, make_rng):
        damages = detect_damages(_photos(now, PhotoAngle.REAR_DRIVER), make_rng(0.1))
        assert [d.area for d in damages] == [DamageArea.REAR_BUMPER]

    def test_closeup_only_detects_nothing(self, now, make_rng):
        assert detect_damages(_photos(now, PhotoAngle.CLOSEUP), make_rng(0.9)) == []

    def test_photos_without_angle_are_ignored(self, now, make_rng):
        photos = [Photo(id="p1", uri="file:///x.jpg", timestamp=now)]
        assert detect_damages(photos, make_rng(0.9)) == []


class TestCreateMockDamage:
    """Tests for create_mock_damage."""

    def test_severe_is_always_replace_with_all_parts(self, make_rng):
        damage = create_mock_damage(DamageArea.FRONT_BUMPER, DamageSeverity.SEVERE, 0.9, make_rng(0.9))
        assert damage.repair_type == RepairType.REPLACE
        names = [p.name for p in damage.affected_parts]
        assert names == DAMAGE_PARTS_DATABASE[DamageArea.FRONT_BUMPER][0]
        for part in damage.affected_parts:
            assert 2.5 <= part.labor_hours <= 4.5

    def test_repair_keeps_only_first_part(self, make_rng):
        damage = create_mock_damage(
            DamageArea.DOOR_FRONT_LEFT, DamageSeverity.MODERATE, 0.88, make_rng(0.9)
        )
        assert damage.repair_type == RepairType.REPAIR
        assert [p.name for p in damage.affected_parts] == ["Left Front Door Shell"]
        assert 1.0 <= damage.affected_parts[0].labor_hours <= 2.5

    def test_part_prices_stay_within_15_percent(self, make_rng):
        avg = DAMAGE_PARTS_DATABASE[DamageArea.HOOD][1]
        for roll in (0.0, 0.99):
            damage = create_mock_damage(DamageArea.HOOD, DamageSeverity.SEVERE, 0.8, make_rng(roll))
            for part in damage.affected_parts:
                assert avg * 0.85 <= part.price <= avg * 1.15

    def test_lights_are_glass_category(self, make_rng):
        damage = create_mock_damage(
            DamageArea.TAILLIGHT_RIGHT, DamageSeverity.SEVERE, 0.95, make_rng(0.5)
        )
        assert all(p.category == "glass" for p in damage.affected_parts)

    def test_damage_types_follow_severity(self, make_rng):
        damage = create_mock_damage(DamageArea.HOOD, DamageSeverity.MINOR, 0.78, make_rng(0.9))
        assert damage.damage_types == ["scratch", "dent"]


class TestAnalyzeDamage:
    """Tests for analyze_damage and its helpers."""

    def test_confidence_scales_with_photo_count(self):
        assert assessment_confidence(0) == 0.75
        assert assessment_confidence(4) == pytest.approx(0.825)
        assert assessment_confidence(8) == pytest.approx(0.9)
        assert assessment_confidence(20) == pytest.approx(0.9)

    def test_assessment_for_four_angles(self, four_angle_photos, make_rng):
        assessment = analyze_damage(four_angle_photos, make_rng(0.1))
        assert assessment.confidence == pytest.approx(0.825)
        assert 2000 <= assessment.processing_time <= 4000
        areas = {d.area for d in assessment.detected_damages}
        assert DamageArea.FRONT_BUMPER in areas
        assert DamageArea.DOOR_FRONT_LEFT in areas

    def test_same_seed_same_assessment(self, four_angle_photos):
        first = analyze_damage(four_angle_photos, random.Random(7))
        second = analyze_damage(four_angle_photos, random.Random(7))
        assert [(d.area, d.severity, d.repair_type) for d in first.detected_damages] == [
            (d.area, d.severity, d.repair_type) for d in second.detected_damages
        ]

    def test_hidden_damage_hints(self, damage_factory):
        damages = [
            damage_factory(DamageArea.FRONT_BUMPER, DamageSeverity.SEVERE, RepairType.REPLACE),
            damage_factory(DamageArea.DOOR_FRONT_LEFT),
        ]
        hints = detect_potential_hidden_damage(damages)
        assert hints == [
            "Frame alignment check recommended",
            "Suspension inspection may be required",
            "Radiator and cooling system inspection recommended",
            "Check for engine compartment damage",
            "Check door alignment and latching mechanisms",
        ]

    def test_no_hidden_damage_for_minor_rear(self, damage_factory):
        damages = [damage_factory(DamageArea.REAR_BUMPER, DamageSeverity.MINOR)]
        assert detect_potential_hidden_damage(damages) == []

    def test_area_display_names(self):
        assert get_area_display_name(DamageArea.DOOR_FRONT_LEFT) == "Front Left Door"
        assert get_area_display_name("taillight_right") == "Right Taillight"
        assert get_area_display_name("spoiler") == "spoiler"
