"""Pydantic models for claims, appointments, and messaging."""

from collision_claims.models.appointment import (
    Appointment,
    AppointmentStatus,
    AppointmentType,
    BodyShopSchedule,
    TimeSlot,
)
from collision_claims.models.claim import (
    Claim,
    ClaimStatus,
    DamageAssessment,
    DetectedDamage,
    Estimate,
    InsuranceInfo,
    InsuranceInfoStatus,
    PreEstimate,
    Vehicle,
)
from collision_claims.models.messaging import Conversation, Message, Notification

__all__ = [
    "Appointment",
    "AppointmentStatus",
    "AppointmentType",
    "BodyShopSchedule",
    "Claim",
    "ClaimStatus",
    "Conversation",
    "DamageAssessment",
    "DetectedDamage",
    "Estimate",
    "InsuranceInfo",
    "InsuranceInfoStatus",
    "Message",
    "Notification",
    "PreEstimate",
    "TimeSlot",
    "Vehicle",
]
