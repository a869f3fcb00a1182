"""Observability module.

This module provides:
- Structured logging with claim ID context
- Claim event logging helpers
"""

from collision_claims.observability.logger import (
    ClaimLogger,
    claim_context,
    get_logger,
    log_claim_event,
)

__all__ = [
    "ClaimLogger",
    "get_logger",
    "claim_context",
    "log_claim_event",
]
