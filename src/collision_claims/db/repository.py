"""Claim repository: write-through in-memory index with debounced flush to a key-value store."""

import json
import threading
import time
from typing import Any, Callable

from pydantic import ValidationError

from collision_claims.config.settings import CLAIMS_STORAGE_KEY, get_repository_config
from collision_claims.db.database import KeyValueStore, SqliteKeyValueStore
from collision_claims.exceptions import ClaimNotFoundError, StorageError
from collision_claims.models.claim import Claim
from collision_claims.observability import get_logger, log_claim_event

logger = get_logger(__name__)


class ClaimRepository:
    """Persistence for the full claim list.

    Mutations update an in-memory index keyed by claim ID, mark it dirty, and
    schedule a flush that writes the whole list back under one storage key.
    Reads reload from storage once the read-cache TTL has elapsed, unless
    unflushed changes are pending. Last write wins; there is no conflict
    detection between processes sharing a store.
    """

    def __init__(
        self,
        store: KeyValueStore | None = None,
        db_path: str | None = None,
        flush_interval: float | None = None,
        cache_ttl: float | None = None,
        storage_key: str = CLAIMS_STORAGE_KEY,
        clock: Callable[[], float] = time.monotonic,
    ):
        config = get_repository_config()
        self._store = store if store is not None else SqliteKeyValueStore(db_path)
        self._flush_interval = (
            config["claims_flush_interval"] if flush_interval is None else flush_interval
        )
        self._cache_ttl = config["claims_cache_ttl"] if cache_ttl is None else cache_ttl
        self._storage_key = storage_key
        self._clock = clock
        self._lock = threading.RLock()
        self._claims: dict[str, Claim] = {}
        self._loaded_at: float | None = None
        self._dirty = False
        self._timer: threading.Timer | None = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _read_from_store(self) -> dict[str, Claim]:
        """Read and re-hydrate the stored claim list. Failures fall back to an empty set."""
        try:
            raw = self._store.get(self._storage_key)
        except Exception as e:
            logger.error("Failed to load claims: %s", e, exc_info=True)
            return {}
        if not raw:
            return {}
        try:
            items: Any = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error("Failed to load claims: invalid JSON (%s)", e)
            return {}
        if not isinstance(items, list):
            logger.error("Failed to load claims: expected a list, got %s", type(items).__name__)
            return {}
        claims: dict[str, Claim] = {}
        for item in items:
            try:
                claim = Claim.model_validate(item)
            except ValidationError as e:
                logger.warning("Skipping unreadable stored claim: %s", e.errors()[:1])
                continue
            claims[claim.id] = claim
        return claims

    def _ensure_loaded(self) -> None:
        with self._lock:
            if self._dirty:
                return
            now = self._clock()
            if self._loaded_at is not None and now - self._loaded_at < self._cache_ttl:
                return
            self._claims = self._read_from_store()
            self._loaded_at = now

    def invalidate(self) -> None:
        """Drop the read cache so the next read reloads from storage (ignored while dirty)."""
        with self._lock:
            self._loaded_at = None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_claims(self, user_id: str | None = None) -> list[Claim]:
        """All claims in insertion order, optionally only those owned by user_id."""
        self._ensure_loaded()
        with self._lock:
            claims = list(self._claims.values())
        if user_id is None:
            return claims
        return [c for c in claims if c.user_id == user_id]

    def get_claim(self, claim_id: str) -> Claim | None:
        """Fetch claim by ID."""
        self._ensure_loaded()
        with self._lock:
            return self._claims.get(claim_id)

    def require_claim(self, claim_id: str) -> Claim:
        """Fetch claim by ID or raise ClaimNotFoundError."""
        claim = self.get_claim(claim_id)
        if claim is None:
            raise ClaimNotFoundError(claim_id)
        return claim

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save_claim(self, claim: Claim) -> None:
        """Insert or replace a claim and schedule a flush."""
        self._ensure_loaded()
        with self._lock:
            self._claims[claim.id] = claim
            self._dirty = True
        logger.debug("Claim %s staged for flush", claim.id)
        self._schedule_flush()

    def delete_claim(self, claim_id: str) -> bool:
        """Remove a claim permanently. Returns False when it did not exist."""
        self._ensure_loaded()
        with self._lock:
            if self._claims.pop(claim_id, None) is None:
                return False
            self._dirty = True
        self._schedule_flush()
        return True

    @property
    def dirty(self) -> bool:
        with self._lock:
            return self._dirty

    def flush(self) -> None:
        """Write the full claim list if there are pending changes.

        Raises:
            StorageError: if the backing store rejects the write. Pending
                changes stay dirty so a later flush writes them again.
        """
        with self._lock:
            self._cancel_timer()
            if not self._dirty:
                return
            payload = json.dumps(
                [c.model_dump(mode="json") for c in self._claims.values()]
            )
            try:
                self._store.set(self._storage_key, payload)
            except Exception as e:
                logger.error("Failed to save claims: %s", e, exc_info=True)
                raise StorageError(f"Failed to save claims: {e}") from e
            self._dirty = False
            self._loaded_at = self._clock()
            count = len(self._claims)
        log_claim_event(logger, "claims_flushed", count=count)

    def close(self) -> None:
        """Cancel any pending timer and flush outstanding changes."""
        self.flush()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _schedule_flush(self) -> None:
        if self._flush_interval <= 0:
            self.flush()
            return
        with self._lock:
            self._cancel_timer()
            timer = threading.Timer(self._flush_interval, self._flush_from_timer)
            timer.daemon = True
            self._timer = timer
            timer.start()

    def _flush_from_timer(self) -> None:
        try:
            self.flush()
        except StorageError:
            # Already logged by flush(); changes remain dirty for the next flush.
            logger.debug("Deferred claim flush failed; changes kept in memory")
