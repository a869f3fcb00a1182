"""Shared logic for claim tools (used by both the CLI and the MCP server).

Each ``*_impl`` function takes plain JSON-style payloads, validates them with
the pydantic models, and returns a JSON string. Invalid payloads produce
``{"error": ...}`` instead of raising.
"""

import json
import logging
from datetime import date, datetime, timezone
from functools import wraps
from typing import Any, Callable, Optional

from pydantic import ValidationError

from collision_claims.models.appointment import Appointment, BodyShopSchedule
from collision_claims.models.claim import (
    Claim,
    DamageAssessment,
    Estimate,
    EstimateFormat,
    InsuranceInfo,
    Photo,
    Vehicle,
)
from collision_claims.tools.damage import analyze_damage
from collision_claims.tools.estimate import format_estimate, generate_estimate, get_estimate_summary
from collision_claims.tools.estimate_options import generate_estimate_options
from collision_claims.tools.fraud import analyze_fraud, get_fraud_risk_level
from collision_claims.tools.insurance import validate_insurance_info
from collision_claims.tools.pre_estimate import generate_pre_estimate, get_confidence_description
from collision_claims.tools.scheduling import DEFAULT_SHOP_SCHEDULE, generate_time_slots
from collision_claims.tools.timeline import calculate_timeline_progress, get_status_message
from collision_claims.utils.numbers import format_currency
from collision_claims.utils.random_source import RandomSource
from collision_claims.utils.sanitization import sanitize_insurance_data, sanitize_vehicle_data

logger = logging.getLogger(__name__)


def _json_errors(func: Callable[..., str]) -> Callable[..., str]:
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> str:
        try:
            return func(*args, **kwargs)
        except ValidationError as e:
            logger.warning("%s: invalid payload: %s", func.__name__, e.errors()[:1])
            return json.dumps({"error": "Invalid payload", "details": json.loads(e.json())})
        except ValueError as e:
            logger.warning("%s: %s", func.__name__, e)
            return json.dumps({"error": str(e)})

    return wrapper


def _vehicle(data: dict[str, Any]) -> Vehicle:
    return Vehicle.model_validate(sanitize_vehicle_data(data))


def _photos(items: list[dict[str, Any]]) -> list[Photo]:
    now = datetime.now(timezone.utc).isoformat()
    photos = []
    for index, item in enumerate(items or []):
        photos.append(
            Photo.model_validate({"id": f"photo-{index + 1}", "timestamp": now, **item})
        )
    return photos


def claim_from_payload(data: dict[str, Any]) -> Claim:
    """Claim from a partial payload; identity and timestamps are filled in when missing."""
    now = datetime.now(timezone.utc).isoformat()
    payload = {"id": "adhoc", "user_id": "", "created_at": now, "updated_at": now, **data}
    if "vehicle" in payload:
        payload["vehicle"] = sanitize_vehicle_data(payload["vehicle"])
    if "photos" in payload:
        payload["photos"] = [p.model_dump() for p in _photos(payload["photos"])]
    return Claim.model_validate(payload)


@_json_errors
def validate_insurance_info_impl(info: Optional[dict[str, Any]]) -> str:
    if info is None:
        return json.dumps({"status": validate_insurance_info(None).value})
    parsed = InsuranceInfo.model_validate(sanitize_insurance_data(info))
    return json.dumps({"status": validate_insurance_info(parsed).value})


@_json_errors
def analyze_damage_impl(photos: list[dict[str, Any]], rng: Optional[RandomSource] = None) -> str:
    assessment = analyze_damage(_photos(photos), rng=rng)
    return assessment.model_dump_json()


@_json_errors
def generate_pre_estimate_impl(
    assessment: dict[str, Any], rng: Optional[RandomSource] = None
) -> str:
    pre_estimate = generate_pre_estimate(DamageAssessment.model_validate(assessment), rng=rng)
    out = pre_estimate.model_dump(mode="json")
    out["confidence_description"] = get_confidence_description(pre_estimate.confidence)
    out["display_range"] = {
        key: format_currency(value) for key, value in pre_estimate.range.model_dump().items()
    }
    return json.dumps(out)


@_json_errors
def generate_estimate_impl(
    assessment: dict[str, Any],
    vehicle: dict[str, Any],
    format: str = EstimateFormat.CCC_ONE.value,
    rng: Optional[RandomSource] = None,
) -> str:
    estimate = generate_estimate(
        DamageAssessment.model_validate(assessment),
        _vehicle(vehicle),
        format=EstimateFormat(format),
        rng=rng,
    )
    out = estimate.model_dump(mode="json")
    out["summary"] = get_estimate_summary(estimate)
    return json.dumps(out)


@_json_errors
def format_estimate_impl(
    estimate: dict[str, Any],
    vehicle: dict[str, Any],
    claim_id: str,
    format: Optional[str] = None,
) -> str:
    text = format_estimate(
        Estimate.model_validate(estimate),
        _vehicle(vehicle),
        claim_id,
        format=EstimateFormat(format) if format else None,
    )
    return json.dumps({"claim_id": claim_id, "text": text})


@_json_errors
def generate_estimate_options_impl(assessment: dict[str, Any]) -> str:
    comparison = generate_estimate_options(DamageAssessment.model_validate(assessment))
    return comparison.model_dump_json()


@_json_errors
def analyze_fraud_impl(claim: dict[str, Any], rng: Optional[RandomSource] = None) -> str:
    analysis = analyze_fraud(claim_from_payload(claim), rng=rng)
    out = analysis.model_dump(mode="json")
    out["risk_level"] = get_fraud_risk_level(analysis.score)
    return json.dumps(out)


@_json_errors
def generate_time_slots_impl(
    day: str,
    appointments: Optional[list[dict[str, Any]]] = None,
    schedules: Optional[list[dict[str, Any]]] = None,
) -> str:
    """Slots for an ISO date; the default Mon-Fri shop schedule unless schedules are given."""
    shop_schedules = (
        [BodyShopSchedule.model_validate(s) for s in schedules]
        if schedules
        else DEFAULT_SHOP_SCHEDULE
    )
    booked = [Appointment.model_validate(a) for a in appointments or []]
    slots = generate_time_slots(date.fromisoformat(day), shop_schedules, booked)
    return json.dumps([s.model_dump(mode="json") for s in slots])


@_json_errors
def calculate_timeline_progress_impl(status: str, submitted_at: Optional[str] = None) -> str:
    submitted = datetime.fromisoformat(submitted_at) if submitted_at else None
    if submitted is not None and submitted.tzinfo is None:
        submitted = submitted.replace(tzinfo=timezone.utc)
    progress = calculate_timeline_progress(status, submitted_at=submitted)
    out = progress.model_dump()
    out["message"] = get_status_message(status, progress).model_dump()
    return json.dumps(out)


@_json_errors
def analyze_claim_impl(payload: dict[str, Any], rng: Optional[RandomSource] = None) -> str:
    """Full intake pass over a vehicle + photos payload.

    Runs damage analysis, pre-estimate, line-item estimate, tier options and
    fraud scoring, and returns them together.
    """
    if "vehicle" not in payload:
        raise ValueError("Payload must include a vehicle")
    claim = claim_from_payload(payload)
    assessment = analyze_damage(claim.photos, rng=rng)
    pre_estimate = generate_pre_estimate(assessment, rng=rng)
    fmt = EstimateFormat(payload.get("format", EstimateFormat.CCC_ONE.value))
    estimate = generate_estimate(assessment, claim.vehicle, format=fmt, rng=rng)
    claim = claim.model_copy(
        update={
            "damage_assessment": assessment,
            "pre_estimate": pre_estimate,
            "estimate": estimate,
        }
    )
    fraud = analyze_fraud(claim, rng=rng)
    return json.dumps(
        {
            "claim_id": claim.id,
            "vehicle": claim.vehicle.model_dump(mode="json"),
            "damage_assessment": assessment.model_dump(mode="json"),
            "pre_estimate": pre_estimate.model_dump(mode="json"),
            "estimate": estimate.model_dump(mode="json"),
            "estimate_summary": get_estimate_summary(estimate),
            "estimate_options": generate_estimate_options(assessment).model_dump(mode="json"),
            "fraud_analysis": fraud.model_dump(mode="json"),
            "fraud_risk_level": get_fraud_risk_level(fraud.score),
        }
    )
