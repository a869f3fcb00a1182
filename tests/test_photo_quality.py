"""Tests for photo quality scoring."""

import pytest

from collision_claims.models.claim import Photo
from collision_claims.tools.photo_quality import (
    format_file_size,
    get_overall_quality_score,
    get_quality_description,
    simulate_blur_score,
    simulate_lighting_score,
    validate_photo_quality,
    validate_photos,
)

GOOD_LIGHT = 0.5
DIM_LIGHT = 0.75
DARK = 0.9


class TestSimulatedScores:
    """Tests for the simulated blur and lighting checks."""

    @pytest.mark.parametrize(
        "width,height,expected",
        [
            (4000, 3000, 0.85),
            (3000, 2000, 0.75),
            (1920, 1080, 0.65),
            (1280, 720, 0.45),
            (None, None, 0.7),
            (1920, None, 0.7),
        ],
    )
    def test_blur_by_megapixels(self, width, height, expected):
        assert simulate_blur_score(width, height) == expected

    @pytest.mark.parametrize("roll,expected", [(0.0, 0.8), (0.69, 0.8), (0.7, 0.55), (0.85, 0.3)])
    def test_lighting_buckets(self, make_rng, roll, expected):
        assert simulate_lighting_score(make_rng(roll)) == expected


class TestValidatePhotoQuality:
    """Tests for validate_photo_quality."""

    def test_sharp_well_lit_photo_is_perfect(self, make_rng):
        result = validate_photo_quality("a.jpg", 4000, 3000, 2_000_000, make_rng(GOOD_LIGHT))
        assert result.score == 100
        assert result.passed and result.is_valid
        assert result.issues == [] and result.warnings == []

    def test_below_recommended_resolution_warns(self, make_rng):
        result = validate_photo_quality("a.jpg", 1920, 1080, 2_000_000, make_rng(GOOD_LIGHT))
        # no resolution warning at exactly 1920x1080, slight blur warning only
        assert result.score == 90
        assert [w.type for w in result.warnings] == ["blur"]

    def test_low_resolution_is_critical(self, make_rng):
        result = validate_photo_quality("a.jpg", 640, 480, 2_000_000, make_rng(GOOD_LIGHT))
        assert result.score == 40
        assert {i.type for i in result.issues} == {"resolution", "blur"}
        assert result.issues[0].message == "Photo resolution too low (640x480)"
        assert not result.passed

    def test_critical_issue_fails_even_with_passing_score(self, make_rng):
        result = validate_photo_quality("a.png", None, None, 10_000, make_rng(GOOD_LIGHT))
        assert result.score == 80
        assert result.issues[0].type == "size"
        assert result.issues[0].severity == "critical"
        assert result.passed is False

    def test_large_file_is_only_a_warning_severity(self, make_rng):
        result = validate_photo_quality("a.heic", 4000, 3000, 20 * 1024 * 1024, make_rng(GOOD_LIGHT))
        assert result.score == 95
        assert result.issues[0].severity == "warning"
        assert result.passed

    def test_unsupported_format(self, make_rng):
        result = validate_photo_quality("scan.gif", 4000, 3000, 2_000_000, make_rng(GOOD_LIGHT))
        assert result.score == 60
        assert result.issues[0].type == "format"
        assert not result.passed

    def test_format_check_is_case_insensitive(self, make_rng):
        assert validate_photo_quality("IMG_001.JPEG", rng=make_rng(GOOD_LIGHT)).score == 100

    def test_lighting_deductions(self, make_rng):
        dim = validate_photo_quality("a.jpg", 4000, 3000, rng=make_rng(DIM_LIGHT))
        dark = validate_photo_quality("a.jpg", 4000, 3000, rng=make_rng(DARK))
        assert dim.score == 90 and dim.passed
        assert dark.score == 75 and not dark.passed

    def test_score_floors_at_zero(self, make_rng):
        result = validate_photo_quality("a.gif", 640, 480, 10_000, make_rng(DARK))
        assert result.score == 0


class TestBatchQuality:
    """Tests for batch validation and summaries."""

    def test_validate_photos_keyed_by_id(self, now, make_rng):
        photos = [
            Photo(id="good", uri="a.jpg", timestamp=now, width=4000, height=3000),
            Photo(id="bad", uri="b.gif", timestamp=now, width=640, height=480),
        ]
        results = validate_photos(photos, make_rng(GOOD_LIGHT))
        assert set(results) == {"good", "bad"}
        summary = get_overall_quality_score(results)
        assert summary.total_count == 2
        assert summary.passed_count == 1
        assert summary.average_score == 50
        assert summary.has_blocking_issues is True

    def test_empty_summary(self):
        summary = get_overall_quality_score({})
        assert summary.average_score == 0
        assert summary.has_blocking_issues is False

    @pytest.mark.parametrize(
        "score,label",
        [(95, "Excellent"), (80, "Good"), (60, "Acceptable"), (45, "Poor"), (10, "Very Poor")],
    )
    def test_quality_description(self, score, label):
        assert get_quality_description(score)["label"] == label

    def test_format_file_size(self):
        assert format_file_size(512) == "512 B"
        assert format_file_size(1536) == "1.5 KB"
        assert format_file_size(2 * 1024 * 1024) == "2.0 MB"
