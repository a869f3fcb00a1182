"""Mock fraud scoring over claim fields."""

import logging
from datetime import date

from collision_claims.config.settings import get_fraud_config
from collision_claims.models.claim import (
    Claim,
    DamageSeverity,
    FraudAnalysis,
    FraudIndicator,
    FraudRecommendation,
)
from collision_claims.utils.latency import simulate_latency
from collision_claims.utils.numbers import round_int
from collision_claims.utils.random_source import RandomSource, get_random

logger = logging.getLogger(__name__)

RISK_COLORS = {"low": "#34c759", "medium": "#ff9500", "high": "#ff3b30"}


def score_fraud_indicators(
    claim: Claim,
    today: date | None = None,
    config: dict | None = None,
) -> tuple[float, list[FraudIndicator]]:
    """Apply the weighted heuristics without jitter. Returns (raw score, indicators)."""
    cfg = config or get_fraud_config()
    today = today or date.today()
    indicators: list[FraudIndicator] = []
    score = 0.0

    estimate_total = claim.estimate.total if claim.estimate is not None else None
    assessment = claim.damage_assessment

    if estimate_total is not None and estimate_total > cfg["high_value_threshold"]:
        score += cfg["high_value_score"]
        indicators.append(
            FraudIndicator(
                type="high_value",
                severity="medium",
                description=f"High estimate value: ${estimate_total:.2f}",
            )
        )

    photo_count = len(claim.photos)
    if photo_count < cfg["min_photos"]:
        score += cfg["insufficient_photos_score"]
        indicators.append(
            FraudIndicator(
                type="insufficient_documentation",
                severity="medium",
                description=f"Only {photo_count} photos provided",
            )
        )

    if assessment is not None and assessment.confidence < cfg["low_confidence_threshold"]:
        score += cfg["low_confidence_score"]
        indicators.append(
            FraudIndicator(
                type="low_confidence",
                severity="low",
                description=f"Low AI confidence: {assessment.confidence * 100:.0f}%",
            )
        )

    severe_areas = 0
    hidden_count = 0
    if assessment is not None:
        severe_areas = sum(
            1 for d in assessment.detected_damages if d.severity == DamageSeverity.SEVERE
        )
        hidden_count = len(assessment.potential_hidden_damage)

    if severe_areas > cfg["max_severe_areas"]:
        score += cfg["extensive_damage_score"]
        indicators.append(
            FraudIndicator(
                type="extensive_damage",
                severity="high",
                description=f"{severe_areas} areas with severe damage",
            )
        )

    if hidden_count > cfg["max_hidden_damage"]:
        score += cfg["hidden_damage_score"]
        indicators.append(
            FraudIndicator(
                type="potential_supplements",
                severity="medium",
                description=f"{hidden_count} potential hidden damage areas",
            )
        )

    vehicle_age = today.year - claim.vehicle.year
    if (
        vehicle_age > cfg["old_vehicle_years"]
        and estimate_total is not None
        and estimate_total > cfg["old_vehicle_value_threshold"]
    ):
        score += cfg["vehicle_age_score"]
        indicators.append(
            FraudIndicator(
                type="vehicle_age_anomaly",
                severity="medium",
                description=f"High repair cost for {vehicle_age}-year-old vehicle",
            )
        )

    return score, indicators


def get_fraud_recommendation(score: float, config: dict | None = None) -> FraudRecommendation:
    cfg = config or get_fraud_config()
    if score < cfg["review_threshold"]:
        return FraudRecommendation.APPROVE
    if score < cfg["investigate_threshold"]:
        return FraudRecommendation.REVIEW
    return FraudRecommendation.INVESTIGATE


def analyze_fraud(
    claim: Claim,
    rng: RandomSource | None = None,
    today: date | None = None,
) -> FraudAnalysis:
    """Score a claim 0-100 and recommend approve, review, or investigate.

    The heuristic score gets uniform jitter of +/- the configured amount, is
    clamped to [0, 100], and the recommendation uses the clamped value before
    rounding. Confidence is a random value in [0.75, 0.95), independent of the
    score.
    """
    cfg = get_fraud_config()
    rng = get_random(rng)
    simulate_latency(500)

    score, indicators = score_fraud_indicators(claim, today, cfg)
    jitter = cfg["jitter"]
    score += rng.random() * (2 * jitter) - jitter
    score = max(0.0, min(100.0, score))

    analysis = FraudAnalysis(
        score=round_int(score),
        indicators=indicators,
        recommendation=get_fraud_recommendation(score, cfg),
        confidence=0.75 + rng.random() * 0.2,
    )
    logger.info(
        "Fraud analysis for claim %s: score=%d recommendation=%s indicators=%d",
        claim.id,
        analysis.score,
        analysis.recommendation.value,
        len(indicators),
    )
    return analysis


def get_fraud_risk_level(score: float) -> str:
    """low below 30, medium below 70, else high."""
    if score < 30:
        return "low"
    if score < 70:
        return "medium"
    return "high"


def get_fraud_risk_color(score: float) -> str:
    return RISK_COLORS[get_fraud_risk_level(score)]
