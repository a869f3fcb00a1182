"""Exceptions raised by the claim store and its collaborators."""


class ClaimError(Exception):
    """Base class for claim store errors."""


class UnauthenticatedError(ClaimError):
    """Raised when an operation needs a signed-in user and there is none."""

    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message)


class InsuranceInfoLockedError(ClaimError):
    """Raised when insurance info is edited after it was locked at submission."""

    def __init__(self, claim_id: str):
        self.claim_id = claim_id
        super().__init__(f"Insurance info is locked for claim: {claim_id}")


class ClaimNotFoundError(ClaimError, ValueError):
    """Raised when a mutator targets an unknown claim ID."""

    def __init__(self, claim_id: str):
        self.claim_id = claim_id
        super().__init__(f"Claim not found: {claim_id}")


class StorageError(ClaimError):
    """Raised when the backing key-value store cannot be read or written."""
