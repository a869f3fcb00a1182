"""Capture guidance for the nine photo angles and checklist progress."""

from typing import Iterable, Optional

from collision_claims.models.claim import PhotoAngle
from collision_claims.models.photo import PhotoGuidanceProgress, PhotoGuide
from collision_claims.utils.numbers import round_int

PHOTO_GUIDES: dict[PhotoAngle, PhotoGuide] = {
    PhotoAngle.FRONT: PhotoGuide(
        angle=PhotoAngle.FRONT,
        title="Front View",
        description="Capture the entire front of the vehicle",
        instructions=[
            "Stand 10-15 feet away from the vehicle",
            "Center the vehicle in the frame",
            "Include the entire front bumper, hood, and headlights",
            "Make sure the license plate is visible",
        ],
        tips=[
            "Take photo at slight angle (45°) for better depth",
            "Avoid direct sunlight creating glare",
            "Ensure ground is visible for context",
        ],
        required=True,
        icon="🚗",
    ),
    PhotoAngle.REAR: PhotoGuide(
        angle=PhotoAngle.REAR,
        title="Rear View",
        description="Capture the entire back of the vehicle",
        instructions=[
            "Stand 10-15 feet away from the vehicle",
            "Center the vehicle in the frame",
            "Include the entire rear bumper, trunk, and taillights",
            "Capture the license plate",
        ],
        tips=[
            "Similar angle to front photo for consistency",
            "Check for damage on bumper and trunk",
        ],
        required=True,
        icon="🚙",
    ),
    PhotoAngle.DRIVER_SIDE: PhotoGuide(
        angle=PhotoAngle.DRIVER_SIDE,
        title="Driver Side View",
        description="Capture the full driver side of vehicle",
        instructions=[
            "Stand 15-20 feet away",
            "Show entire side profile from front to back",
            "Include all doors, panels, and wheels",
            "Keep camera level with vehicle",
        ],
        tips=[
            "Make sure all doors are visible",
            "Look for door dings and panel damage",
        ],
        required=True,
        icon="⬅️",
    ),
    PhotoAngle.PASSENGER_SIDE: PhotoGuide(
        angle=PhotoAngle.PASSENGER_SIDE,
        title="Passenger Side View",
        description="Capture the full passenger side of vehicle",
        instructions=[
            "Stand 15-20 feet away",
            "Show entire side profile from front to back",
            "Include all doors, panels, and wheels",
            "Keep camera level with vehicle",
        ],
        tips=[
            "Match the framing of driver side photo",
            "Check for scratches along body panels",
        ],
        required=True,
        icon="➡️",
    ),
    PhotoAngle.FRONT_DRIVER: PhotoGuide(
        angle=PhotoAngle.FRONT_DRIVER,
        title="Front Driver Corner",
        description="Capture the front driver corner at 45° angle",
        instructions=[
            "Stand at 45° angle from the front driver corner",
            "Include front bumper, hood, and driver fender",
            "Show headlight and driver-side door",
            "Distance: 8-10 feet",
        ],
        tips=[
            "Good angle for comprehensive front damage",
            "Shows multiple panels in one shot",
        ],
        required=False,
        icon="↖️",
    ),
    PhotoAngle.FRONT_PASSENGER: PhotoGuide(
        angle=PhotoAngle.FRONT_PASSENGER,
        title="Front Passenger Corner",
        description="Capture the front passenger corner at 45° angle",
        instructions=[
            "Stand at 45° angle from the front passenger corner",
            "Include front bumper, hood, and passenger fender",
            "Show headlight and passenger-side door",
            "Distance: 8-10 feet",
        ],
        tips=[
            "Mirror the front driver corner photo",
            "Check for asymmetric damage",
        ],
        required=False,
        icon="↗️",
    ),
    PhotoAngle.REAR_DRIVER: PhotoGuide(
        angle=PhotoAngle.REAR_DRIVER,
        title="Rear Driver Corner",
        description="Capture the rear driver corner at 45° angle",
        instructions=[
            "Stand at 45° angle from the rear driver corner",
            "Include rear bumper, trunk, and driver quarter panel",
            "Show taillight and driver-side door",
            "Distance: 8-10 feet",
        ],
        tips=[
            "Good for rear-end damage assessment",
            "Shows multiple panels simultaneously",
        ],
        required=False,
        icon="↙️",
    ),
    PhotoAngle.REAR_PASSENGER: PhotoGuide(
        angle=PhotoAngle.REAR_PASSENGER,
        title="Rear Passenger Corner",
        description="Capture the rear passenger corner at 45° angle",
        instructions=[
            "Stand at 45° angle from the rear passenger corner",
            "Include rear bumper, trunk, and passenger quarter panel",
            "Show taillight and passenger-side door",
            "Distance: 8-10 feet",
        ],
        tips=[
            "Mirror the rear driver corner photo",
            "Complete the 360° view of vehicle",
        ],
        required=False,
        icon="↘️",
    ),
    PhotoAngle.CLOSEUP: PhotoGuide(
        angle=PhotoAngle.CLOSEUP,
        title="Damage Close-up",
        description="Detailed close-up photos of specific damage",
        instructions=[
            "Get within 2-3 feet of the damage",
            "Focus clearly on the damaged area",
            "Include surrounding context (6-12 inches around damage)",
            "Take multiple angles of same damage if needed",
        ],
        tips=[
            "Tap screen to focus before taking photo",
            "Good lighting is critical for details",
            "Show depth of dents, scratches, cracks",
            "Take as many as needed - no limit",
        ],
        required=True,
        icon="🔍",
    ),
}

PHOTO_BEST_PRACTICES: dict[str, list[str]] = {
    "lighting": [
        "Take photos in daylight when possible",
        "Avoid direct sunlight causing glare or harsh shadows",
        "Overcast days provide ideal lighting",
        "If indoors, use well-lit area",
        "Turn on flash for dark areas or closeups",
    ],
    "technique": [
        "Hold phone steady - use both hands",
        "Tap screen to focus before taking photo",
        "Keep phone level (not tilted)",
        "Clean your camera lens",
        "Take multiple photos of each angle",
    ],
    "framing": [
        "Include some background for context",
        "Avoid cropping off parts of the vehicle",
        "Leave some space around edges",
        "Ensure license plates are legible when visible",
        "For closeups, show surrounding area",
    ],
    "environment": [
        "Move vehicle to clear area if possible",
        "Remove personal items visible in photo",
        "Park on level ground",
        "Open doors/trunk if damage is inside",
        "Clean vehicle if excessively dirty (optional)",
    ],
}

_MAIN_SIDES = (
    PhotoAngle.FRONT,
    PhotoAngle.REAR,
    PhotoAngle.DRIVER_SIDE,
    PhotoAngle.PASSENGER_SIDE,
)


def get_required_angles() -> list[PhotoAngle]:
    return [angle for angle, guide in PHOTO_GUIDES.items() if guide.required]


def get_optional_angles() -> list[PhotoAngle]:
    return [angle for angle, guide in PHOTO_GUIDES.items() if not guide.required]


def calculate_progress(completed_angles: Iterable[PhotoAngle]) -> PhotoGuidanceProgress:
    done = {PhotoAngle(a) for a in completed_angles}
    required = get_required_angles()
    completed_required = [a for a in required if a in done]
    return PhotoGuidanceProgress(
        total_required=len(required),
        completed=len(completed_required),
        remaining=[a for a in required if a not in done],
        optional=[a for a in get_optional_angles() if a not in done],
        percent_complete=round_int(len(completed_required) / len(required) * 100),
    )


def get_next_recommended_angle(completed_angles: Iterable[PhotoAngle]) -> Optional[PhotoAngle]:
    """First missing required angle, then first missing optional one, else None."""
    progress = calculate_progress(completed_angles)
    if progress.remaining:
        return progress.remaining[0]
    if progress.optional:
        return progress.optional[0]
    return None


def get_photo_checklist(completed_angles: Iterable[PhotoAngle]) -> list[dict]:
    done = {PhotoAngle(a) for a in completed_angles}
    return [
        {"item": guide.title, "completed": angle in done, "required": guide.required}
        for angle, guide in PHOTO_GUIDES.items()
    ]


def has_minimum_photos(completed_angles: Iterable[PhotoAngle]) -> bool:
    return not calculate_progress(completed_angles).remaining


def get_smart_suggestions(completed_angles: Iterable[PhotoAngle]) -> list[str]:
    angles = [PhotoAngle(a) for a in completed_angles]
    progress = calculate_progress(angles)
    suggestions: list[str] = []

    if progress.remaining:
        suggestions.append(f"📸 You still need {len(progress.remaining)} required photo(s)")

    if PhotoAngle.CLOSEUP not in angles and len(angles) >= 4:
        suggestions.append("🔍 Don't forget close-up photos of the damage!")

    if all(side in angles for side in _MAIN_SIDES):
        suggestions.append("✓ Great! You have all 4 main angles")
        if progress.optional:
            suggestions.append("💡 Consider adding corner shots for better coverage")

    if not progress.remaining:
        suggestions.append("🎉 All required photos complete! You can submit or add more closeups")

    return suggestions
