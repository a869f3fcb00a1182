"""Mock authentication with the signed-in user persisted in the key-value store."""

import json
import threading
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ValidationError

from collision_claims.config.settings import USER_STORAGE_KEY
from collision_claims.db.database import KeyValueStore, SqliteKeyValueStore
from collision_claims.exceptions import StorageError, UnauthenticatedError
from collision_claims.models.claim import User, UserRole
from collision_claims.observability import get_logger, log_claim_event
from collision_claims.utils.latency import simulate_latency
from collision_claims.utils.random_source import short_id
from collision_claims.utils.sanitization import MAX_INSURANCE_FIELD, sanitize_text

logger = get_logger(__name__)


def derive_role(email: str) -> tuple[UserRole, str]:
    """Demo sign-in: pick (role, company name) from keywords in the email."""
    if "adjuster" in email:
        return UserRole.INSURANCE_ADJUSTER, "State Farm Insurance"
    if "shop" in email or "body" in email:
        return UserRole.BODY_SHOP, "Joe's Auto Body"
    return UserRole.CUSTOMER, "John Doe"


class AuthService:
    """Holds the current user. Credentials are not checked."""

    def __init__(self, store: Optional[KeyValueStore] = None, storage_key: str = USER_STORAGE_KEY):
        self._store = store if store is not None else SqliteKeyValueStore()
        self._storage_key = storage_key
        self._lock = threading.Lock()
        self._user: Optional[User] = self._load()

    def _load(self) -> Optional[User]:
        try:
            raw = self._store.get(self._storage_key)
        except Exception as e:
            logger.error("Failed to load user: %s", e, exc_info=True)
            return None
        if not raw:
            return None
        try:
            return User.model_validate_json(raw)
        except ValidationError as e:
            logger.error("Failed to load user: %s", e.errors()[:1])
            return None

    def _save(self, user: Optional[User]) -> None:
        try:
            if user is None:
                self._store.delete(self._storage_key)
            else:
                self._store.set(self._storage_key, json.dumps(user.model_dump(mode="json")))
        except Exception as e:
            logger.error("Failed to save user: %s", e, exc_info=True)
            raise StorageError(f"Failed to save user: {e}") from e

    @property
    def current_user(self) -> Optional[User]:
        with self._lock:
            return self._user

    def require_user(self) -> User:
        user = self.current_user
        if user is None:
            raise UnauthenticatedError()
        return user

    def sign_in(self, email: str, password: str = "") -> User:
        simulate_latency(1000)
        email = sanitize_text(email, MAX_INSURANCE_FIELD)
        role, company_name = derive_role(email)
        user = User(
            id=short_id(),
            email=email,
            company_name=company_name,
            role=role,
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._save(user)
            self._user = user
        log_claim_event(logger, "user_signed_in", user_id=user.id, role=role.value)
        return user

    def sign_up(self, email: str, password: str, company_name: str, role: UserRole) -> User:
        simulate_latency(1000)
        user = User(
            id=short_id(),
            email=sanitize_text(email, MAX_INSURANCE_FIELD),
            company_name=sanitize_text(company_name, MAX_INSURANCE_FIELD),
            role=UserRole(role),
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._save(user)
            self._user = user
        log_claim_event(logger, "user_signed_up", user_id=user.id, role=user.role.value)
        return user

    def sign_out(self) -> None:
        with self._lock:
            self._save(None)
            user, self._user = self._user, None
        if user is not None:
            log_claim_event(logger, "user_signed_out", user_id=user.id)

    def update_user(self, **updates: Any) -> Optional[User]:
        """Merge field updates into the current user. No-op when signed out."""
        with self._lock:
            if self._user is None:
                return None
            user = User.model_validate({**self._user.model_dump(), **updates})
            self._save(user)
            self._user = user
        return user
