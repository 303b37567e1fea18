"""Medicaid recovery pathway evaluation (M1-M4)."""

from typing import List, NamedTuple
import logging

from common.dates import round_half_up
from common.enums import (
    BenefitStatus,
    InsuranceStatus,
    MedicaidRecoveryStatus,
    MedicaidStatus,
)
from services.recovery.schemas import RecoveryInput
from services.reference.income_thresholds import (
    get_medicaid_income_limit,
    is_expansion_state,
    is_income_below_threshold,
)
from services.rules.engine import Rule, apply_layers, first_match

logger = logging.getLogger(__name__)

# Share of charges Medicaid typically reimburses, by pathway
ACTIVE_RECOVERY_RATE = 0.45
RETROACTIVE_RECOVERY_RATE = 0.40
SSI_RECOVERY_RATE = 0.35
PENDING_RECOVERY_RATE = 0.42


class MedicaidRecoveryResult(NamedTuple):
    """Outcome of the Medicaid pathway tree."""

    status: MedicaidRecoveryStatus
    confidence: int  # 0-100
    pathway: str
    actions: List[str]
    estimated_recovery: float
    timeline_weeks: str
    notes: List[str]


def _recovery(data: RecoveryInput, rate: float) -> float:
    return round_half_up(data.total_charges * rate, 2)


def _income_qualifies(data: RecoveryInput) -> bool:
    limit = get_medicaid_income_limit(data.state_of_service)
    return is_income_below_threshold(data.household_income, limit)


# M1 - coverage on date of service, terminal
def _active_on_dos(data: RecoveryInput) -> MedicaidRecoveryResult:
    return MedicaidRecoveryResult(
        status=MedicaidRecoveryStatus.CONFIRMED,
        confidence=95,
        pathway="M1: Active Medicaid on DOS",
        actions=[
            "Bill Medicaid directly for date of service",
            "Verify eligibility and obtain prior authorization if required",
        ],
        estimated_recovery=_recovery(data, ACTIVE_RECOVERY_RATE),
        timeline_weeks="4-8 weeks",
        notes=["Highest confidence recovery - direct Medicaid billing"],
    )


TERMINAL_RULES = (
    Rule("M1", lambda data: data.medicaid_status == MedicaidStatus.ACTIVE, _active_on_dos),
)


# M2 - retroactive Medicaid plausibility
def _retroactive(data: RecoveryInput, draft: MedicaidRecoveryResult) -> MedicaidRecoveryResult:
    expansion = is_expansion_state(data.state_of_service)
    return draft._replace(
        status=MedicaidRecoveryStatus.LIKELY,
        confidence=70,
        pathway="M2: Retroactive Medicaid",
        estimated_recovery=_recovery(data, RETROACTIVE_RECOVERY_RATE),
        timeline_weeks="8-16 weeks",
        actions=draft.actions + [
            "Initiate Medicaid application with retroactive coverage request",
            "Document income and household size for eligibility",
            "Request 3-month retroactive coverage period",
        ],
        notes=draft.notes + [
            f"State is {'expansion' if expansion else 'non-expansion'} - income threshold "
            f"{'138%' if expansion else '100%'} FPL",
            "Retroactive coverage can apply to 3 months prior to application",
        ],
    )


# M3 - disability-linked Medicaid through SSI; fills blanks, never downgrades
def _ssi_linked(data: RecoveryInput, draft: MedicaidRecoveryResult) -> MedicaidRecoveryResult:
    status = (
        MedicaidRecoveryStatus.LIKELY
        if draft.status == MedicaidRecoveryStatus.LIKELY
        else MedicaidRecoveryStatus.POSSIBLE
    )
    return draft._replace(
        status=status,
        confidence=max(draft.confidence, 60),
        pathway=draft.pathway or "M3: SSI → Medicaid pathway",
        estimated_recovery=draft.estimated_recovery or _recovery(data, SSI_RECOVERY_RATE),
        timeline_weeks=draft.timeline_weeks or "12-24 weeks",
        actions=draft.actions + [
            "Coordinate SSI application with Medicaid eligibility",
            "Document disability for SSI determination",
        ],
        notes=draft.notes + [
            "SSI approval automatically confers Medicaid in most states",
            "Consider expedited SSI processing if terminal/severe condition",
        ],
    )


# M4 - application pending
def _pending(data: RecoveryInput, draft: MedicaidRecoveryResult) -> MedicaidRecoveryResult:
    return draft._replace(
        status=MedicaidRecoveryStatus.LIKELY,
        confidence=75,
        pathway="M4: Medicaid Application Pending",
        estimated_recovery=_recovery(data, PENDING_RECOVERY_RATE),
        timeline_weeks="6-12 weeks",
        actions=draft.actions + [
            "Track pending Medicaid application status",
            "Hold account in eligibility verification queue",
            "Follow up with state Medicaid agency weekly",
        ],
        notes=draft.notes + ["Pending application - monitor for approval/denial"],
    )


def _recently_terminated(
    data: RecoveryInput, draft: MedicaidRecoveryResult
) -> MedicaidRecoveryResult:
    draft = draft._replace(
        actions=draft.actions + [
            "Review termination reason - may be eligible for reinstatement",
            "Check for procedural termination vs. eligibility loss",
        ],
        notes=draft.notes + ["Recent termination may indicate reapplication opportunity"],
    )
    if draft.status == MedicaidRecoveryStatus.UNLIKELY:
        draft = draft._replace(
            status=MedicaidRecoveryStatus.POSSIBLE,
            confidence=40,
            pathway="M2: Potential re-enrollment or retroactive coverage",
        )
    return draft


LAYERED_RULES = (
    Rule(
        "M2",
        lambda data: data.insurance_status_on_dos == InsuranceStatus.UNINSURED
        and _income_qualifies(data),
        _retroactive,
    ),
    Rule(
        "M3",
        lambda data: data.ssi_eligibility_likely or data.ssi_status == BenefitStatus.PENDING,
        _ssi_linked,
    ),
    Rule("M4", lambda data: data.medicaid_status == MedicaidStatus.PENDING, _pending),
    Rule(
        "recently_terminated",
        lambda data: data.medicaid_status == MedicaidStatus.RECENTLY_TERMINATED,
        _recently_terminated,
    ),
)


def _no_pathway(draft: MedicaidRecoveryResult) -> MedicaidRecoveryResult:
    return draft._replace(
        pathway="No clear Medicaid pathway identified",
        actions=draft.actions + [
            "Screen for other coverage options",
            "Evaluate state program eligibility",
        ],
        notes=draft.notes + [
            "Patient does not appear to qualify for Medicaid based on current information"
        ],
    )


def evaluate_medicaid(data: RecoveryInput) -> MedicaidRecoveryResult:
    """
    Evaluate the Medicaid recovery pathway for an encounter.

    Active coverage on the date of service short-circuits every other rule.
    Otherwise the retroactive, SSI, pending and recently-terminated rules are
    layered in order, and an encounter none of them touch is unlikely.
    """
    confirmed = first_match(TERMINAL_RULES, data)
    if confirmed is not None:
        return confirmed

    draft = MedicaidRecoveryResult(
        status=MedicaidRecoveryStatus.UNLIKELY,
        confidence=0,
        pathway="",
        actions=[],
        estimated_recovery=0,
        timeline_weeks="",
        notes=[],
    )
    draft = apply_layers(LAYERED_RULES, data, draft)

    if draft.status == MedicaidRecoveryStatus.UNLIKELY:
        draft = _no_pathway(draft)
    return draft
