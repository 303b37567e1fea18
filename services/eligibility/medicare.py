"""Medicare recovery pathway evaluation (MC1-MC2)."""

from typing import List, NamedTuple, Optional
import logging

from common.enums import (
    BenefitStatus,
    EncounterType,
    Likelihood,
    MedicareRecoveryStatus,
    MedicareStatus,
)
from services.recovery.schemas import RecoveryInput
from services.rules.engine import Rule, first_match

logger = logging.getLogger(__name__)


class MedicareRecoveryResult(NamedTuple):
    """Outcome of the Medicare pathway tree."""

    status: MedicareRecoveryStatus
    confidence: int  # 0-100
    pathway: str
    actions: List[str]
    notes: List[str]
    estimated_time_to_eligibility: Optional[str] = None


def _is_inpatient(data: RecoveryInput) -> bool:
    return data.encounter_type == EncounterType.INPATIENT


# MC1 - active on date of service, terminal
def _part_a_inpatient(data: RecoveryInput) -> MedicareRecoveryResult:
    return MedicareRecoveryResult(
        status=MedicareRecoveryStatus.ACTIVE_ON_DOS,
        confidence=95,
        pathway="MC1: Medicare Part A active on DOS",
        actions=[
            "Bill Medicare Part A for inpatient stay",
            "Verify Medicare eligibility and coverage dates",
        ],
        notes=["Medicare billing should proceed - verify no MSP issues"],
    )


def _part_b_outpatient(data: RecoveryInput) -> MedicareRecoveryResult:
    return MedicareRecoveryResult(
        status=MedicareRecoveryStatus.ACTIVE_ON_DOS,
        confidence=90,
        pathway="MC1: Medicare Part B active on DOS",
        actions=["Bill Medicare Part B for outpatient/ED services"],
        notes=["Part B covers outpatient services"],
    )


ACTIVE_RULES = (
    Rule(
        "MC1-A",
        lambda data: data.medicare_status == MedicareStatus.ACTIVE_PART_A and _is_inpatient(data),
        _part_a_inpatient,
    ),
    Rule(
        "MC1-B",
        lambda data: data.medicare_status == MedicareStatus.ACTIVE_PART_B
        and not _is_inpatient(data),
        _part_b_outpatient,
    ),
)


# MC2 - SSDI leads to Medicare after the 24-month waiting period
def _ssdi_receiving(data: RecoveryInput) -> MedicareRecoveryResult:
    return MedicareRecoveryResult(
        status=MedicareRecoveryStatus.FUTURE_LIKELY,
        confidence=85,
        pathway="MC2: SSDI recipient - Medicare eligibility in 24-month waiting period",
        estimated_time_to_eligibility="0-24 months (depending on SSDI start date)",
        actions=[
            "Verify SSDI effective date to calculate Medicare eligibility",
            "Set reminder for Medicare enrollment period",
        ],
        notes=["Medicare coverage begins 24 months after SSDI entitlement"],
    )


def _ssdi_pending(data: RecoveryInput) -> MedicareRecoveryResult:
    return MedicareRecoveryResult(
        status=MedicareRecoveryStatus.FUTURE_LIKELY,
        confidence=60,
        pathway="MC2: SSDI pending - future Medicare likely if approved",
        estimated_time_to_eligibility="24-36 months (approval + waiting period)",
        actions=["Monitor SSDI application outcome", "Plan for future Medicare enrollment"],
        notes=["If SSDI approved, Medicare begins after 24-month waiting period"],
    )


def _ssdi_likely(data: RecoveryInput) -> MedicareRecoveryResult:
    return MedicareRecoveryResult(
        status=MedicareRecoveryStatus.FUTURE_LIKELY,
        confidence=50,
        pathway="MC2: SSDI eligibility likely - recommend filing",
        estimated_time_to_eligibility="30-48 months (application + approval + waiting period)",
        actions=[
            "Initiate SSDI application for disability benefits",
            "Document work history and disability for SSDI",
        ],
        notes=[
            "High disability likelihood supports SSDI filing",
            "SSDI approval leads to Medicare after 24-month waiting period",
        ],
    )


SSDI_RULES = (
    Rule("MC2-receiving", lambda data: data.ssdi_status == BenefitStatus.RECEIVING, _ssdi_receiving),
    Rule("MC2-pending", lambda data: data.ssdi_status == BenefitStatus.PENDING, _ssdi_pending),
    Rule(
        "MC2-likely",
        lambda data: data.ssdi_eligibility_likely
        and data.disability_likelihood == Likelihood.HIGH,
        _ssdi_likely,
    ),
)


def evaluate_medicare(data: RecoveryInput) -> MedicareRecoveryResult:
    """
    Evaluate the Medicare recovery pathway for an encounter.

    Coverage active on the date of service always wins over an SSDI-based
    future pathway.
    """
    active = first_match(ACTIVE_RULES, data)
    if active is not None:
        return active

    actions: List[str] = []
    notes: List[str] = []
    if data.medicare_status == MedicareStatus.ACTIVE_PART_B and _is_inpatient(data):
        notes.append("Part B active but Part A needed for inpatient - check Part A status")
        actions.append("Verify Part A enrollment status")

    future = first_match(SSDI_RULES, data)
    if future is not None:
        return future._replace(actions=actions + future.actions, notes=notes + future.notes)

    return MedicareRecoveryResult(
        status=MedicareRecoveryStatus.UNLIKELY,
        confidence=0,
        pathway="No Medicare pathway identified",
        actions=actions,
        notes=notes + [
            "Patient does not appear eligible for Medicare",
            "Consider SSDI filing if disability is likely",
        ],
    )
