"""Claim lifecycle service: creation, field-by-field updates, insurance locking, review."""

import threading
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Optional, Protocol

from collision_claims.config.settings import AUTO_APPROVAL_THRESHOLD, HIGH_RISK_FRAUD_SCORE
from collision_claims.db.repository import ClaimRepository
from collision_claims.exceptions import InsuranceInfoLockedError, UnauthenticatedError
from collision_claims.models.claim import (
    Claim,
    ClaimStatus,
    DamageAssessment,
    Estimate,
    InsuranceInfo,
    InsuranceInfoStatus,
    Photo,
    User,
    Vehicle,
)
from collision_claims.observability import claim_context, get_logger, log_claim_event
from collision_claims.services.notifications import NotificationService
from collision_claims.tools.damage import analyze_damage
from collision_claims.tools.insurance import validate_insurance_info
from collision_claims.tools.pre_estimate import generate_pre_estimate
from collision_claims.utils.numbers import round_cents
from collision_claims.utils.random_source import RandomSource, short_id
from collision_claims.utils.sanitization import sanitize_insurance_data, sanitize_vehicle_data

logger = get_logger(__name__)

REVIEW_DECISIONS = (ClaimStatus.APPROVED, ClaimStatus.REJECTED)


class UserProvider(Protocol):
    """Source of the signed-in user (AuthService satisfies this)."""

    @property
    def current_user(self) -> Optional[User]: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_auto_approval_eligible(claim: Claim, threshold: float = AUTO_APPROVAL_THRESHOLD) -> bool:
    """True when the estimate total is under the auto-approval threshold.

    Eligibility is informational only. Approval is always an explicit
    review_claim call; nothing transitions a claim automatically.
    """
    # TODO: hook unattended approval in here once adjusters sign off on a policy for it.
    return claim.estimate is not None and claim.estimate.total < threshold


def get_claim_analytics(claims: Iterable[Claim]) -> dict[str, Any]:
    """Counts by status, money totals, approval rate, and review-queue signals."""
    claims = list(claims)
    total = len(claims)
    by_status = {status.value: 0 for status in ClaimStatus}
    for claim in claims:
        by_status[claim.status.value] += 1

    def _total(c: Claim) -> float:
        return c.estimate.total if c.estimate is not None else 0.0

    approved = by_status[ClaimStatus.APPROVED.value]
    return {
        "total_claims": total,
        "by_status": by_status,
        "total_paid": round_cents(
            sum(_total(c) for c in claims if c.status == ClaimStatus.APPROVED)
        ),
        "average_claim_value": round_cents(sum(_total(c) for c in claims) / total) if total else 0.0,
        "approval_rate": round_cents(approved / total * 100) if total else 0.0,
        "auto_approval_eligible": sum(1 for c in claims if is_auto_approval_eligible(c)),
        "high_risk": sum(
            1 for c in claims if c.fraud_score is not None and c.fraud_score > HIGH_RISK_FRAUD_SCORE
        ),
    }


class ClaimService:
    """Claim store operations for one process.

    Every mutator loads the claim from the repository, applies the change
    with a fresh updated_at, and saves it back; the repository batches the
    writes. Concurrent edits to the same claim are last-write-wins.
    """

    def __init__(
        self,
        repository: Optional[ClaimRepository] = None,
        auth: Optional[UserProvider] = None,
        notifications: Optional[NotificationService] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._repo = repository or ClaimRepository()
        self._auth = auth
        self._notifications = notifications
        self._clock = clock
        self._lock = threading.RLock()
        self._active_claim_id: Optional[str] = None

    @property
    def repository(self) -> ClaimRepository:
        return self._repo

    def _current_user(self, user: Optional[User] = None) -> Optional[User]:
        if user is not None:
            return user
        return self._auth.current_user if self._auth is not None else None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def claims(self) -> list[Claim]:
        """Claims owned by the signed-in user; empty when signed out."""
        user = self._current_user()
        if user is None:
            return []
        return self._repo.list_claims(user.id)

    def list_claims(self, user_id: Optional[str] = None) -> list[Claim]:
        return self._repo.list_claims(user_id)

    def get_claim(self, claim_id: str) -> Optional[Claim]:
        return self._repo.get_claim(claim_id)

    @property
    def active_claim(self) -> Optional[Claim]:
        with self._lock:
            claim_id = self._active_claim_id
        return self._repo.get_claim(claim_id) if claim_id else None

    def set_active_claim(self, claim_id: Optional[str]) -> None:
        with self._lock:
            self._active_claim_id = claim_id

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create_claim(self, user: Optional[User] = None) -> Claim:
        """New draft claim owned by user (or the signed-in user); it becomes active.

        Raises:
            UnauthenticatedError: no user given and nobody is signed in.
        """
        owner = self._current_user(user)
        if owner is None:
            raise UnauthenticatedError()
        now = self._clock()
        claim = Claim(
            id=short_id(),
            user_id=owner.id,
            vehicle=Vehicle(year=now.year),
            created_at=now,
            updated_at=now,
        )
        self._repo.save_claim(claim)
        self.set_active_claim(claim.id)
        log_claim_event(logger, "claim_created", claim_id=claim.id, user_id=owner.id)
        return claim

    def update_claim(self, claim_id: str, **updates: Any) -> Claim:
        """Apply field updates and stamp updated_at.

        Raises:
            ClaimNotFoundError: unknown claim_id.
            InsuranceInfoLockedError: any insurance_info* field changes after the lock.
            ValueError: an update names a field Claim does not have.
        """
        return self._apply_updates(claim_id, updates, guard_insurance=True)

    def _apply_updates(
        self, claim_id: str, updates: dict[str, Any], guard_insurance: bool = False
    ) -> Claim:
        unknown = set(updates) - set(Claim.model_fields)
        if unknown:
            raise ValueError(f"Unknown claim fields: {', '.join(sorted(unknown))}")

        with self._lock:
            claim = self._repo.require_claim(claim_id)
            if (
                guard_insurance
                and claim.insurance_info_locked_at is not None
                and any(key.startswith("insurance_info") for key in updates)
            ):
                logger.bind(claim_id, claim.status.value).warning(
                    "Rejected insurance edit on locked claim"
                )
                raise InsuranceInfoLockedError(claim_id)
            updated = Claim.model_validate(
                {**claim.model_dump(), **updates, "updated_at": self._clock()}
            )
            self._repo.save_claim(updated)

        if updated.status != claim.status:
            self._on_status_change(claim.status, updated)
        return updated

    def _on_status_change(self, previous: ClaimStatus, claim: Claim) -> None:
        with claim_context(claim.id, claim_status=claim.status.value, user_id=claim.user_id):
            log_claim_event(
                logger,
                "status_changed",
                claim_id=claim.id,
                old_status=previous.value,
                new_status=claim.status.value,
            )
            if self._notifications is None:
                return
            try:
                self._notifications.notify_status_change(claim)
            except Exception as e:
                logger.bind(claim.id, claim.status.value).error(
                    "Failed to send status notification: %s", e
                )

    def delete_claim(self, claim_id: str) -> bool:
        """Remove permanently; clears the active claim if it was this one."""
        deleted = self._repo.delete_claim(claim_id)
        with self._lock:
            if self._active_claim_id == claim_id:
                self._active_claim_id = None
        if deleted:
            log_claim_event(logger, "claim_deleted", claim_id=claim_id)
        return deleted

    def add_vehicle(self, claim_id: str, vehicle: Vehicle | dict[str, Any]) -> Claim:
        """Merge vehicle fields into the claim's vehicle. Make/model are not required here."""
        if isinstance(vehicle, Vehicle):
            vehicle = vehicle.model_dump(exclude_unset=True)
        claim = self._repo.require_claim(claim_id)
        merged = Vehicle.model_validate(
            {**claim.vehicle.model_dump(), **sanitize_vehicle_data(vehicle)}
        )
        return self.update_claim(claim_id, vehicle=merged)

    def add_photos(self, claim_id: str, photos: Iterable[Photo]) -> Claim:
        """Append photos after any already on the claim."""
        photos = list(photos)
        with self._lock:
            claim = self._repo.require_claim(claim_id)
            updated = self.update_claim(claim_id, photos=[*claim.photos, *photos])
        logger.debug("Added %d photos to claim %s", len(photos), claim_id)
        return updated

    def set_damage_assessment(
        self,
        claim_id: str,
        assessment: DamageAssessment,
        rng: Optional[RandomSource] = None,
    ) -> Claim:
        """Store the assessment with its derived pre-estimate and move to pending_review."""
        pre_estimate = generate_pre_estimate(assessment, rng=rng, now=self._clock())
        return self.update_claim(
            claim_id,
            damage_assessment=assessment,
            pre_estimate=pre_estimate,
            status=ClaimStatus.PENDING_REVIEW,
        )

    def analyze_claim(self, claim_id: str, rng: Optional[RandomSource] = None) -> Claim:
        """Run damage analysis over the claim's photos and store the result.

        The claim is "analyzing" only while this call runs; that status is never saved.
        """
        claim = self._repo.require_claim(claim_id)
        with claim_context(claim_id, claim_status=ClaimStatus.ANALYZING.value):
            assessment = analyze_damage(claim.photos, rng=rng)
            log_claim_event(
                logger,
                "damage_analyzed",
                claim_id=claim_id,
                damages=len(assessment.detected_damages),
                confidence=round(assessment.confidence, 2),
            )
        return self.set_damage_assessment(claim_id, assessment, rng=rng)

    def set_estimate(self, claim_id: str, estimate: Estimate) -> Claim:
        """Store the estimate. Status is unchanged."""
        return self.update_claim(claim_id, estimate=estimate)

    def submit_claim(self, claim_id: str) -> Claim:
        """Stamp submitted_at and move to pending_review (repeatable)."""
        claim = self.update_claim(
            claim_id, status=ClaimStatus.PENDING_REVIEW, submitted_at=self._clock()
        )
        log_claim_event(logger, "claim_submitted", claim_id=claim_id)
        return claim

    # ------------------------------------------------------------------
    # Insurance info
    # ------------------------------------------------------------------

    @staticmethod
    def validate_insurance_info(info: Optional[InsuranceInfo]) -> InsuranceInfoStatus:
        return validate_insurance_info(info)

    def update_insurance_info(
        self,
        claim_id: str,
        info: InsuranceInfo | dict[str, Any],
        editor_user_id: str,
    ) -> Claim:
        """Store insurance info with its derived status and the editing user.

        Raises:
            InsuranceInfoLockedError: the claim's insurance info is locked.
        """
        with self._lock:
            claim = self._repo.require_claim(claim_id)
            if claim.insurance_info_locked_at is not None:
                logger.bind(claim_id, claim.status.value).warning(
                    "Rejected insurance edit on locked claim"
                )
                raise InsuranceInfoLockedError(claim_id)
            if isinstance(info, InsuranceInfo):
                info = info.model_dump()
            info = InsuranceInfo.model_validate(sanitize_insurance_data(info))
            status = validate_insurance_info(info)
            updated = self.update_claim(
                claim_id,
                insurance_info=info,
                insurance_info_status=status,
                insurance_info_last_edited_by=editor_user_id,
            )
        log_claim_event(
            logger, "insurance_updated", claim_id=claim_id, status=status.value, editor=editor_user_id
        )
        return updated

    def flag_insurance_info(self, claim_id: str, flags: list[str]) -> Claim:
        """Replace the flags and force status to flagged, whatever the field completeness."""
        claim = self._apply_updates(
            claim_id,
            {
                "insurance_info_flags": list(flags),
                "insurance_info_status": InsuranceInfoStatus.FLAGGED,
            },
        )
        log_claim_event(logger, "insurance_flagged", claim_id=claim_id, flags=",".join(flags))
        return claim

    def lock_insurance_info(self, claim_id: str) -> Claim:
        """Lock insurance info against further edits. There is no unlock.

        Locking an already-locked claim keeps the original lock time.
        """
        with self._lock:
            claim = self._repo.require_claim(claim_id)
            if claim.insurance_info_locked_at is not None:
                return claim
            updated = self._apply_updates(claim_id, {"insurance_info_locked_at": self._clock()})
        log_claim_event(logger, "insurance_locked", claim_id=claim_id)
        return updated

    def submit_to_insurance(self, claim_id: str) -> Claim:
        """Body-shop submission: lock insurance info, then submit for review."""
        self.lock_insurance_info(claim_id)
        return self.submit_claim(claim_id)

    # ------------------------------------------------------------------
    # Review
    # ------------------------------------------------------------------

    def review_claim(
        self,
        claim_id: str,
        reviewer_id: str,
        decision: ClaimStatus | str,
        fraud_score: Optional[int] = None,
        rejection_reason: Optional[str] = None,
    ) -> Claim:
        """Record an adjuster's approve/reject decision."""
        decision = ClaimStatus(decision)
        if decision not in REVIEW_DECISIONS:
            raise ValueError(f"Review decision must be approved or rejected, got {decision.value}")
        updates: dict[str, Any] = {
            "status": decision,
            "reviewed_at": self._clock(),
            "reviewed_by": reviewer_id,
            "fraud_score": fraud_score,
        }
        if decision == ClaimStatus.REJECTED:
            updates["rejection_reason"] = rejection_reason
        claim = self.update_claim(claim_id, **updates)
        log_claim_event(
            logger,
            "claim_reviewed",
            claim_id=claim_id,
            decision=decision.value,
            reviewer=reviewer_id,
            fraud_score=fraud_score,
        )
        return claim

    def request_supplement(self, claim_id: str) -> Claim:
        """Ask for more photos or information."""
        return self.update_claim(claim_id, status=ClaimStatus.SUPPLEMENT_NEEDED)

    def is_auto_approval_eligible(self, claim_id: str) -> bool:
        return is_auto_approval_eligible(self._repo.require_claim(claim_id))

    def get_analytics(self, user_id: Optional[str] = None) -> dict[str, Any]:
        return get_claim_analytics(self._repo.list_claims(user_id))

    def flush(self) -> None:
        self._repo.flush()
