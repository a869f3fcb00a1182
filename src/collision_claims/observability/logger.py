"""Structured logging with claim ID context for observability.

This module provides:
- ClaimLogger: A structured logger that attaches claim_id to all log messages
- claim_context: A context manager for setting claim context
- log_claim_event: Helper for logging claim-specific events
"""

import json
import logging
import os
import sys
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any

# Thread-local storage for claim context
_context = threading.local()


def _get_claim_context() -> dict[str, Any]:
    """Get the current claim context from thread-local storage."""
    return getattr(_context, "claim_data", {})


def _set_claim_context(data: dict[str, Any]) -> None:
    """Set the claim context in thread-local storage."""
    _context.claim_data = data


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def __init__(self, include_timestamp: bool = True):
        super().__init__()
        self.include_timestamp = include_timestamp

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON with claim context."""
        log_data: dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_timestamp:
            log_data["timestamp"] = datetime.now(timezone.utc).isoformat()

        claim_ctx = _get_claim_context()
        if claim_ctx:
            log_data["claim_id"] = claim_ctx.get("claim_id")
            log_data["claim_status"] = claim_ctx.get("claim_status")
            log_data["user_id"] = claim_ctx.get("user_id")

        if getattr(record, "claim_id", None):
            log_data["claim_id"] = record.claim_id
        if getattr(record, "claim_status", None):
            log_data["claim_status"] = record.claim_status
        if getattr(record, "extra_data", None):
            log_data["data"] = record.extra_data

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        log_data["source"] = {
            "file": record.filename,
            "line": record.lineno,
            "function": record.funcName,
        }

        return json.dumps(log_data, default=str)


class HumanReadableFormatter(logging.Formatter):
    """Human-readable formatter with claim context prefix."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with claim context prefix."""
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

        ctx_parts = []
        claim_ctx = _get_claim_context()

        claim_id = getattr(record, "claim_id", None) or claim_ctx.get("claim_id")
        if claim_id:
            ctx_parts.append(f"claim={claim_id}")

        claim_status = getattr(record, "claim_status", None) or claim_ctx.get("claim_status")
        if claim_status:
            ctx_parts.append(f"status={claim_status}")

        ctx_str = f" [{', '.join(ctx_parts)}]" if ctx_parts else ""

        message = record.getMessage()
        if getattr(record, "extra_data", None):
            message += f" | {record.extra_data}"
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return f"{timestamp} {record.levelname:8}{ctx_str} {record.name}: {message}"


class ClaimLogger(logging.LoggerAdapter):
    """Logger adapter that stamps a claim ID and status on every record it emits."""

    def __init__(
        self,
        logger: logging.Logger,
        claim_id: str | None = None,
        claim_status: str | None = None,
    ):
        super().__init__(logger, {})
        self.claim_id = claim_id
        self.claim_status = claim_status

    def bind(self, claim_id: str, claim_status: str | None = None) -> "ClaimLogger":
        """Adapter over the same logger, pinned to one claim."""
        return ClaimLogger(self.logger, claim_id, claim_status)

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        extra = kwargs.get("extra", {})
        if self.claim_id and not extra.get("claim_id"):
            extra["claim_id"] = self.claim_id
        if self.claim_status and not extra.get("claim_status"):
            extra["claim_status"] = self.claim_status
        kwargs["extra"] = extra
        return msg, kwargs


def get_logger(
    name: str,
    claim_id: str | None = None,
    structured: bool | None = None,
) -> ClaimLogger:
    """Get a ClaimLogger instance.

    Args:
        name: Logger name (typically __name__)
        claim_id: Optional claim ID to attach to all logs
        structured: If True, use JSON format. If False, use human-readable.
                   If None, use COLLISION_CLAIMS_LOG_FORMAT env var (default: human)

    Returns:
        ClaimLogger instance
    """
    logger = logging.getLogger(name)

    # Only configure if not already configured
    if not logger.handlers:
        if structured is None:
            log_format = os.environ.get("COLLISION_CLAIMS_LOG_FORMAT", "human").lower()
            structured = log_format == "json"

        handler = logging.StreamHandler(sys.stderr)
        if structured:
            handler.setFormatter(StructuredFormatter())
        else:
            handler.setFormatter(HumanReadableFormatter())

        logger.addHandler(handler)

        log_level = os.environ.get("COLLISION_CLAIMS_LOG_LEVEL", "INFO").upper()
        logger.setLevel(getattr(logging, log_level, logging.INFO))

        # Prevent duplicate logs from propagating to parent handlers
        logger.propagate = False

    return ClaimLogger(logger, claim_id)


@contextmanager
def claim_context(
    claim_id: str,
    claim_status: str | None = None,
    user_id: str | None = None,
    **extra: Any,
):
    """Context manager for setting claim context on all logs within the block.

    Usage:
        with claim_context(claim_id="a1b2c3", claim_status="draft"):
            logger.info("Adding photos")  # Will include claim_id in output
    """
    old_context = _get_claim_context()
    new_context = {
        "claim_id": claim_id,
        "claim_status": claim_status,
        "user_id": user_id,
        **extra,
    }
    _set_claim_context(new_context)
    try:
        yield
    finally:
        _set_claim_context(old_context)


def log_claim_event(
    logger: logging.Logger | ClaimLogger,
    event: str,
    claim_id: str | None = None,
    level: int = logging.INFO,
    **data: Any,
) -> None:
    """Log a claim event with structured data.

    Args:
        logger: Logger instance
        event: Event name (e.g., "claim_created", "insurance_locked")
        claim_id: Claim ID (optional if using claim_context)
        level: Log level
        **data: Additional event data
    """
    message = f"[{event}]"
    if claim_id:
        message = f"{message} claim_id={claim_id}"
    if data:
        details = ", ".join(f"{k}={v}" for k, v in data.items())
        message = f"{message} {details}" if not claim_id else f"{message}, {details}"

    extra = {"claim_id": claim_id, "extra_data": {"event": event, **data}}
    logger.log(level, message, extra=extra)
