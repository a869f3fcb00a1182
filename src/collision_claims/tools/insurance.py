"""Insurance-info completeness classification."""

from collision_claims.models.claim import InsuranceInfo, InsuranceInfoStatus

# Specificity order for derived statuses; FLAGGED is an adjuster override outside it.
STATUS_ORDER = {
    InsuranceInfoStatus.NONE: 0,
    InsuranceInfoStatus.PARTIAL: 1,
    InsuranceInfoStatus.COMPLETE: 2,
}


def _present(value: str | None) -> bool:
    return bool(value and value.strip())


def validate_insurance_info(info: InsuranceInfo | None) -> InsuranceInfoStatus:
    """Classify insurance info as none, partial, or complete.

    - none: no info, or neither provider nor policy number
    - complete: provider, policy number, and at least one agent contact field
    - partial: anything in between
    """
    if info is None:
        return InsuranceInfoStatus.NONE

    has_provider = _present(info.provider)
    has_policy = _present(info.policy_number)
    if not has_provider and not has_policy:
        return InsuranceInfoStatus.NONE

    has_agent = any(
        _present(v) for v in (info.agent_name, info.agent_phone, info.agent_email)
    )
    if has_provider and has_policy and has_agent:
        return InsuranceInfoStatus.COMPLETE
    return InsuranceInfoStatus.PARTIAL
