"""Photo quality scoring.

Resolution, size and format checks are real; blur and lighting are simulated
(blur from megapixels, lighting from the random source) until an image
processing backend is wired in.
"""

import re
from typing import Iterable, Optional

from collision_claims.models.claim import Photo
from collision_claims.models.photo import (
    PhotoQualityIssue,
    PhotoQualityResult,
    PhotoQualitySummary,
    PhotoQualityWarning,
)
from collision_claims.utils.numbers import round_int
from collision_claims.utils.random_source import RandomSource, get_random

MIN_RESOLUTION = (800, 600)
RECOMMENDED_RESOLUTION = (1920, 1080)
MAX_FILE_SIZE = 10 * 1024 * 1024
MIN_FILE_SIZE = 50 * 1024
PASSING_SCORE = 60

_SUPPORTED_FORMAT = re.compile(r"\.(jpg|jpeg|png|heic|heif)$", re.IGNORECASE)


def simulate_blur_score(width: Optional[int], height: Optional[int]) -> float:
    """Sharpness 0-1 from megapixels. 0.7 when dimensions are unknown."""
    if not width or not height:
        return 0.7
    megapixels = width * height / 1_000_000
    if megapixels >= 8:
        return 0.85
    if megapixels >= 5:
        return 0.75
    if megapixels >= 2:
        return 0.65
    return 0.45


def simulate_lighting_score(rng: Optional[RandomSource] = None) -> float:
    """70% good (0.8), 15% acceptable (0.55), 15% poor (0.3)."""
    roll = get_random(rng).random()
    if roll < 0.7:
        return 0.8
    if roll < 0.85:
        return 0.55
    return 0.3


def validate_photo_quality(
    uri: str,
    width: Optional[int] = None,
    height: Optional[int] = None,
    file_size: Optional[int] = None,
    rng: Optional[RandomSource] = None,
) -> PhotoQualityResult:
    """Score a photo 0-100. It passes at 60 or above with no critical issues."""
    issues: list[PhotoQualityIssue] = []
    warnings: list[PhotoQualityWarning] = []
    score = 100

    if width and height:
        min_w, min_h = MIN_RESOLUTION
        rec_w, rec_h = RECOMMENDED_RESOLUTION
        if width < min_w or height < min_h:
            issues.append(
                PhotoQualityIssue(
                    type="resolution",
                    severity="critical",
                    message=f"Photo resolution too low ({width}x{height})",
                    suggestion=f"Please use a photo with at least {min_w}x{min_h} resolution",
                )
            )
            score -= 30
        elif width < rec_w or height < rec_h:
            warnings.append(
                PhotoQualityWarning(
                    type="resolution",
                    message=(
                        "Photo resolution is acceptable but could be better. "
                        f"Recommended: {rec_w}x{rec_h}"
                    ),
                )
            )
            score -= 10

    if file_size:
        if file_size > MAX_FILE_SIZE:
            issues.append(
                PhotoQualityIssue(
                    type="size",
                    severity="warning",
                    message="Photo file size is very large",
                    suggestion="Consider compressing the image to reduce upload time",
                )
            )
            score -= 5
        elif file_size < MIN_FILE_SIZE:
            issues.append(
                PhotoQualityIssue(
                    type="size",
                    severity="critical",
                    message="Photo file size is suspiciously small",
                    suggestion=(
                        "This photo may be too compressed. "
                        "Try taking a new photo with higher quality settings"
                    ),
                )
            )
            score -= 20

    if not _SUPPORTED_FORMAT.search(uri):
        issues.append(
            PhotoQualityIssue(
                type="format",
                severity="critical",
                message="Unsupported image format",
                suggestion="Please use JPG, PNG, or HEIC format",
            )
        )
        score -= 40

    blur = simulate_blur_score(width, height)
    if blur < 0.5:
        issues.append(
            PhotoQualityIssue(
                type="blur",
                severity="critical",
                message="Photo appears to be blurry",
                suggestion="Hold your phone steady and tap to focus before taking the photo",
            )
        )
        score -= 30
    elif blur < 0.7:
        warnings.append(
            PhotoQualityWarning(
                type="blur",
                message="Photo may be slightly blurry. Consider retaking for better results",
            )
        )
        score -= 10

    lighting = simulate_lighting_score(rng)
    if lighting < 0.4:
        issues.append(
            PhotoQualityIssue(
                type="lighting",
                severity="critical",
                message="Photo is too dark or too bright",
                suggestion=(
                    "Take the photo in better lighting conditions. "
                    "Avoid direct sunlight and very dark areas"
                ),
            )
        )
        score -= 25
    elif lighting < 0.6:
        warnings.append(
            PhotoQualityWarning(
                type="lighting",
                message="Lighting could be improved for better damage assessment",
            )
        )
        score -= 10

    score = max(0, min(100, score))
    has_critical = any(i.severity == "critical" for i in issues)
    return PhotoQualityResult(
        score=score,
        issues=issues,
        warnings=warnings,
        passed=score >= PASSING_SCORE and not has_critical,
    )


def validate_photos(
    photos: Iterable[Photo], rng: Optional[RandomSource] = None
) -> dict[str, PhotoQualityResult]:
    """Results keyed by photo id."""
    return {
        photo.id: validate_photo_quality(photo.uri, photo.width, photo.height, photo.file_size, rng)
        for photo in photos
    }


def get_overall_quality_score(results: dict[str, PhotoQualityResult]) -> PhotoQualitySummary:
    values = list(results.values())
    average = sum(r.score for r in values) / len(values) if values else 0
    return PhotoQualitySummary(
        average_score=round_int(average),
        passed_count=sum(1 for r in values if r.passed),
        total_count=len(values),
        has_blocking_issues=any(
            i.severity == "critical" for r in values for i in r.issues
        ),
    )


def get_quality_description(score: float) -> dict[str, str]:
    if score >= 90:
        return {"label": "Excellent", "color": "#34C759", "emoji": "✓"}
    if score >= 75:
        return {"label": "Good", "color": "#34C759", "emoji": "✓"}
    if score >= 60:
        return {"label": "Acceptable", "color": "#FF9500", "emoji": "⚠️"}
    if score >= 40:
        return {"label": "Poor", "color": "#FF3B30", "emoji": "✗"}
    return {"label": "Very Poor", "color": "#FF3B30", "emoji": "✗"}


def format_file_size(size: int) -> str:
    """e.g. "512 B", "1.5 KB", "2.0 MB"."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"
