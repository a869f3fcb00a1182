"""CLI entry point for collision claims.

Commands run the claim rules against JSON payloads or the local claim store.
Logging goes to stderr so command output on stdout stays machine-readable.
"""

import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any

from pydantic import ValidationError

# Ensure src is on path when run as script
if __name__ == "__main__" and str(Path(__file__).resolve().parent.parent) not in sys.path:
    sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

ESTIMATE_FORMATS = ("ccc_one", "mitchell")


def _setup_logging() -> None:
    """Configure logging for CLI usage."""
    from collision_claims.observability import get_logger

    get_logger("collision_claims")
    logging.getLogger("collision_claims").setLevel(
        logging.DEBUG if "--debug" in sys.argv else logging.INFO
    )


def _usage() -> str:
    return """Usage:
  collision-claims analyze <claim.json>                  Analyze vehicle + photos payload
  collision-claims estimate <claim.json> [--format F]    Print formatted estimate (ccc_one|mitchell)
  collision-claims slots <YYYY-MM-DD>                    List shop time slots for a date
  collision-claims list <user_id>                        List a user's stored claims
  collision-claims status <claim_id>                     Show a stored claim and its progress
  collision-claims analytics                             Show claim analytics

Options:
  --debug                            Enable debug logging
  --json                             Use JSON log format
"""


def _fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _load_payload(claim_path: Path) -> dict[str, Any]:
    if not claim_path.exists():
        _fail(f"File not found: {claim_path}")
    try:
        with open(claim_path, encoding="utf-8") as f:
            payload = json.load(f)
    except json.JSONDecodeError as e:
        _fail(f"Invalid JSON in {claim_path}: {e}")
    if not isinstance(payload, dict) or "vehicle" not in payload:
        _fail(f"{claim_path} must contain an object with a vehicle")
    return payload


def _print_result(result: str) -> None:
    data = json.loads(result)
    if isinstance(data, dict) and "error" in data:
        print(f"Error: {data['error']}", file=sys.stderr)
        if "details" in data:
            print(json.dumps(data["details"], indent=2), file=sys.stderr)
        sys.exit(1)
    print(json.dumps(data, indent=2))


def cmd_analyze(claim_path: Path) -> None:
    """Run damage analysis, pre-estimate, estimate, options, and fraud scoring."""
    from collision_claims.tools.logic import analyze_claim_impl

    _print_result(analyze_claim_impl(_load_payload(claim_path)))


def cmd_estimate(claim_path: Path, fmt: str | None = None) -> None:
    """Print a formatted repair estimate for a vehicle + photos payload."""
    from collision_claims.tools.damage import analyze_damage
    from collision_claims.tools.estimate import format_estimate, generate_estimate
    from collision_claims.tools.logic import claim_from_payload
    from collision_claims.models.claim import EstimateFormat

    payload = _load_payload(claim_path)
    try:
        claim = claim_from_payload(payload)
    except ValidationError as e:
        print("Error: Invalid claim data:", file=sys.stderr)
        print(e.json(), file=sys.stderr)
        sys.exit(1)
    estimate_format = EstimateFormat(fmt or payload.get("format", EstimateFormat.CCC_ONE.value))
    assessment = analyze_damage(claim.photos)
    estimate = generate_estimate(assessment, claim.vehicle, format=estimate_format)
    print(format_estimate(estimate, claim.vehicle, claim.id))


def cmd_slots(day: str) -> None:
    """Print the default schedule's time slots for a date."""
    try:
        date.fromisoformat(day)
    except ValueError:
        _fail(f"Invalid date (expected YYYY-MM-DD): {day}")
    from collision_claims.tools.logic import generate_time_slots_impl

    _print_result(generate_time_slots_impl(day))


def cmd_list(user_id: str) -> None:
    """Print a user's stored claims."""
    from collision_claims.db.repository import ClaimRepository

    repo = ClaimRepository()
    claims = repo.list_claims(user_id)
    print(json.dumps([c.model_dump(mode="json") for c in claims], indent=2))


def cmd_status(claim_id: str) -> None:
    """Print a stored claim with its timeline progress."""
    from collision_claims.db.repository import ClaimRepository
    from collision_claims.tools.timeline import calculate_timeline_progress

    repo = ClaimRepository()
    claim = repo.get_claim(claim_id)
    if claim is None:
        _fail(f"Claim not found: {claim_id}")
    out = claim.model_dump(mode="json")
    out["progress"] = calculate_timeline_progress(
        claim.status, submitted_at=claim.submitted_at
    ).model_dump()
    print(json.dumps(out, indent=2))


def cmd_analytics() -> None:
    """Print analytics across all stored claims."""
    from collision_claims.db.repository import ClaimRepository
    from collision_claims.services.claims import get_claim_analytics

    repo = ClaimRepository()
    print(json.dumps(get_claim_analytics(repo.list_claims()), indent=2))


def _pop_option(args: list[str], name: str) -> str | None:
    """Remove ``name value`` or ``name=value`` from args and return the value."""
    for index, arg in enumerate(args):
        if arg == name:
            if index + 1 >= len(args):
                _fail(f"{name} requires a value")
            value = args[index + 1]
            del args[index : index + 2]
            return value
        if arg.startswith(name + "="):
            del args[index]
            return arg.split("=", 1)[1]
    return None


def main() -> None:
    """Run the CLI: analyze, estimate, slots, list, status, or analytics."""
    import os

    args = sys.argv[1:]
    fmt = _pop_option(args, "--format")
    argv = [arg for arg in args if not arg.startswith("--")]
    options = [arg for arg in args if arg.startswith("--")]

    if "--json" in options:
        os.environ["COLLISION_CLAIMS_LOG_FORMAT"] = "json"
    if "--debug" in options:
        os.environ["COLLISION_CLAIMS_LOG_LEVEL"] = "DEBUG"

    _setup_logging()

    if not argv:
        print(_usage(), file=sys.stderr)
        sys.exit(1)

    first = argv[0].lower()

    if fmt is not None and fmt not in ESTIMATE_FORMATS:
        _fail(f"Unknown estimate format: {fmt} (expected one of {', '.join(ESTIMATE_FORMATS)})")

    if first == "analytics":
        cmd_analytics()
        return

    if first in ("analyze", "estimate", "slots", "list", "status"):
        if len(argv) < 2:
            print(f"Error: {first} requires an argument", file=sys.stderr)
            print(_usage(), file=sys.stderr)
            sys.exit(1)
        arg = argv[1]
        if first == "analyze":
            cmd_analyze(Path(arg))
        elif first == "estimate":
            cmd_estimate(Path(arg), fmt)
        elif first == "slots":
            cmd_slots(arg)
        elif first == "list":
            cmd_list(arg)
        else:
            cmd_status(arg)
        return

    print(f"Error: Unknown command: {first}", file=sys.stderr)
    print(_usage(), file=sys.stderr)
    sys.exit(1)


if __name__ == "__main__":
    main()
