"""
Code compliance evaluation.

Compares resolved stresses with the allowable fractions of SMYS of the
selected pipeline design code.
"""

import logging
from typing import Optional

from surfaceload.core.models import (
    AllowableStresses, CodeCheck, CodeProfile, PassFailSummary, StressEnvelope,
    StressResults, StressState, UserDefinedLimits
)
from surfaceload.core.validators import LoadCaseValidationError
from surfaceload.utils.constants import CODE_PROFILES, DEFAULT_LIMIT_PERCENT

logger = logging.getLogger(__name__)


def code_profile(code: CodeCheck, user_limits: Optional[UserDefinedLimits] = None) -> CodeProfile:
    """
    Build the profile of a design code.

    Args:
        code: Selected design code
        user_limits: Limits in % SMYS, required for a user-defined code

    Returns:
        Code profile with its limits

    Raises:
        LoadCaseValidationError: If a user-defined code has no limits
    """
    if code == CodeCheck.USER_DEFINED:
        if user_limits is None:
            raise LoadCaseValidationError.for_field(
                "options.user_limits",
                "Hoop, longitudinal and equivalent limits are required for a user-defined code"
            )
        return CodeProfile(
            code=code,
            label="User Defined",
            description="User-defined allowable stresses",
            hoop_limit=user_limits.hoop,
            longitudinal_limit=user_limits.longitudinal,
            equivalent_limit=user_limits.equivalent,
        )

    settings = CODE_PROFILES[code.value]
    return CodeProfile(
        code=code,
        label=settings['label'],
        description=settings['description'],
        hoop_limit=DEFAULT_LIMIT_PERCENT,
        longitudinal_limit=DEFAULT_LIMIT_PERCENT,
        equivalent_limit=DEFAULT_LIMIT_PERCENT,
        uses_sustained_longitudinal_check=settings['sustained_check'],
    )


def allowable_stresses(profile: CodeProfile, smys: float) -> AllowableStresses:
    """Allowable stresses in psi for a profile and SMYS."""
    return AllowableStresses(
        hoop=profile.hoop_limit / 100.0 * smys,
        longitudinal=profile.longitudinal_limit / 100.0 * smys,
        equivalent=profile.equivalent_limit / 100.0 * smys,
    )


def envelope_passes(envelope: StressEnvelope, allowable: float) -> bool:
    """A stress envelope passes when neither bound exceeds the allowable in magnitude."""
    return max(abs(envelope.high), abs(envelope.low)) <= allowable


def sustained_longitudinal_stress(state: StressState) -> float:
    """
    Sustained longitudinal stress: internal pressure, thermal and earth load.

    The earth term is taken with either sign and the larger magnitude
    returned.
    """
    components = state.longitudinal.components
    sustained = components.pressure + components.thermal
    return max(abs(sustained + components.earth), abs(sustained - components.earth))


def evaluate_compliance(stresses: StressResults, profile: CodeProfile,
                        allowables: AllowableStresses) -> PassFailSummary:
    """
    Run every compliance check of a code profile.

    Args:
        stresses: Stress states at zero pressure and at MOP
        profile: Code profile in use
        allowables: Allowable stresses for the profile

    Returns:
        Pass/fail summary of every check
    """
    zero = stresses.at_zero_pressure
    mop = stresses.at_mop

    summary = PassFailSummary(
        hoop_at_zero=envelope_passes(zero.hoop, allowables.hoop),
        hoop_at_mop=envelope_passes(mop.hoop, allowables.hoop),
        longitudinal_at_zero=envelope_passes(zero.longitudinal, allowables.longitudinal),
        longitudinal_at_mop=envelope_passes(mop.longitudinal, allowables.longitudinal),
        equivalent_at_zero=zero.equivalent.high <= allowables.equivalent,
        equivalent_at_mop=mop.equivalent.high <= allowables.equivalent,
        overall_pass=False,
    )

    checks = [
        summary.hoop_at_zero, summary.hoop_at_mop,
        summary.longitudinal_at_zero, summary.longitudinal_at_mop,
        summary.equivalent_at_zero, summary.equivalent_at_mop,
    ]

    if profile.uses_sustained_longitudinal_check:
        summary.sustained_at_zero = sustained_longitudinal_stress(zero) <= allowables.longitudinal
        summary.sustained_at_mop = sustained_longitudinal_stress(mop) <= allowables.longitudinal
        checks.extend([summary.sustained_at_zero, summary.sustained_at_mop])

    summary.overall_pass = all(checks)
    if not summary.overall_pass:
        logger.info(f"{profile.label} check failed: {summary}")
    return summary
