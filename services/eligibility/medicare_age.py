"""Medicare entitlement by age, ESRD, ALS or SSDI waiting period."""

from datetime import date
from typing import List, NamedTuple, Optional
import logging

from common.dates import add_months, first_of_month
from common.enums import SSDIEnrollment
from services.rules.engine import Rule, first_match

logger = logging.getLogger(__name__)

ESRD_WAITING_MONTHS = 3
SSDI_WAITING_MONTHS = 24
MEDICARE_ELIGIBILITY_AGE = 65
SSDI_ESTIMATED_APPROVAL_MONTHS = 6
PRE_65_PLANNING_YEARS = 5


class MedicareAgeInput(NamedTuple):
    date_of_birth: date
    date_of_service: date
    has_esrd: bool = False
    dialysis_start_date: Optional[date] = None
    has_als: bool = False
    ssdi_status: SSDIEnrollment = SSDIEnrollment.NONE
    ssdi_effective_date: Optional[date] = None


class MedicareAgeResult(NamedTuple):
    """Whether the patient was entitled to Medicare on the date of service."""

    is_eligible: bool
    eligibility_reason: str
    effective_date: date
    confidence: int  # 0-100
    actions: List[str]


def calculate_age_at_date(date_of_birth: date, target: date) -> int:
    age = target.year - date_of_birth.year
    if (target.month, target.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


def calculate_age_65_eligibility_date(date_of_birth: date) -> date:
    """Entitlement starts the first day of the month the patient turns 65."""
    return date(date_of_birth.year + MEDICARE_ELIGIBILITY_AGE, date_of_birth.month, 1)


def calculate_esrd_eligibility_date(dialysis_start_date: date) -> date:
    return add_months(first_of_month(dialysis_start_date), ESRD_WAITING_MONTHS)


def calculate_ssdi_eligibility_date(ssdi_effective_date: date) -> date:
    return add_months(first_of_month(ssdi_effective_date), SSDI_WAITING_MONTHS)


def months_between(start: date, end: date) -> int:
    """Calendar months from start to end, ignoring the day."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def _als_receiving(facts: MedicareAgeInput) -> MedicareAgeResult:
    ssdi_date = facts.ssdi_effective_date
    if facts.date_of_service >= ssdi_date:
        return MedicareAgeResult(
            is_eligible=True,
            eligibility_reason="ALS diagnosis with SSDI - no waiting period required",
            effective_date=ssdi_date,
            confidence=95,
            actions=[
                "Bill Medicare Part A/B for covered services",
                "Verify Medicare enrollment is active",
                "Document ALS diagnosis for coverage justification",
            ],
        )
    return MedicareAgeResult(
        is_eligible=False,
        eligibility_reason="ALS with SSDI but date of service precedes SSDI effective date",
        effective_date=ssdi_date,
        confidence=90,
        actions=[
            "SSDI effective date is after date of service",
            "Verify SSDI effective date and resubmit if applicable",
        ],
    )


def _als_pending(facts: MedicareAgeInput) -> MedicareAgeResult:
    return MedicareAgeResult(
        is_eligible=False,
        eligibility_reason=(
            "ALS diagnosis with SSDI pending - will be eligible immediately upon SSDI approval"
        ),
        effective_date=facts.date_of_service,
        confidence=75,
        actions=[
            "Monitor SSDI application status - ALS qualifies for expedited processing",
            "Medicare eligibility will begin immediately upon SSDI approval",
            "Consider Compassionate Allowances program for faster SSDI approval",
            "Hold claim pending SSDI determination",
        ],
    )


def _age_65(facts: MedicareAgeInput) -> MedicareAgeResult:
    age = calculate_age_at_date(facts.date_of_birth, facts.date_of_service)
    return MedicareAgeResult(
        is_eligible=True,
        eligibility_reason=f"Age {age} - meets standard Medicare eligibility requirement (65+)",
        effective_date=calculate_age_65_eligibility_date(facts.date_of_birth),
        confidence=98,
        actions=[
            "Bill Medicare Part A for inpatient hospital services",
            "Bill Medicare Part B for outpatient/professional services",
            "Verify Medicare enrollment and coverage parts",
            "Check for Medicare Advantage plan assignment",
        ],
    )


def _esrd(facts: MedicareAgeInput) -> MedicareAgeResult:
    eligibility_date = calculate_esrd_eligibility_date(facts.dialysis_start_date)
    months_on_dialysis = months_between(facts.dialysis_start_date, facts.date_of_service)

    if facts.date_of_service >= eligibility_date:
        return MedicareAgeResult(
            is_eligible=True,
            eligibility_reason=(
                f"ESRD patient - {months_on_dialysis} months since dialysis initiation "
                "(3+ months required)"
            ),
            effective_date=eligibility_date,
            confidence=92,
            actions=[
                "Bill Medicare Part A/B for ESRD-related and other covered services",
                "Verify ESRD Medicare enrollment is active",
                "Document dialysis start date for coverage verification",
                "Ensure ESRD beneficiary notification was filed (CMS-2728)",
            ],
        )

    months_remaining = ESRD_WAITING_MONTHS - months_on_dialysis
    return MedicareAgeResult(
        is_eligible=False,
        eligibility_reason=(
            f"ESRD patient - only {months_on_dialysis} month(s) since dialysis start "
            "(3 months required)"
        ),
        effective_date=eligibility_date,
        confidence=88,
        actions=[
            f"Patient {months_remaining} month(s) away from ESRD Medicare eligibility",
            "File CMS-2728 ESRD beneficiary notification if not already done",
            "Consider alternative coverage for current encounter",
            "Set reminder for Medicare billing once eligible",
        ],
    )


def _ssdi_receiving(facts: MedicareAgeInput) -> MedicareAgeResult:
    eligibility_date = calculate_ssdi_eligibility_date(facts.ssdi_effective_date)
    months_on_ssdi = months_between(facts.ssdi_effective_date, facts.date_of_service)

    if facts.date_of_service >= eligibility_date:
        return MedicareAgeResult(
            is_eligible=True,
            eligibility_reason=(
                f"SSDI recipient for {months_on_ssdi} months - 24-month waiting period complete"
            ),
            effective_date=eligibility_date,
            confidence=93,
            actions=[
                "Bill Medicare Part A/B for covered services",
                "Verify Medicare enrollment is active",
                "Document SSDI effective date for coverage verification",
            ],
        )

    months_remaining = SSDI_WAITING_MONTHS - months_on_ssdi
    return MedicareAgeResult(
        is_eligible=False,
        eligibility_reason=(
            f"SSDI recipient for {months_on_ssdi} month(s) - {months_remaining} months "
            "remaining in 24-month waiting period"
        ),
        effective_date=eligibility_date,
        confidence=90,
        actions=[
            f"Patient {months_remaining} month(s) away from Medicare eligibility",
            "Consider Medicaid or other coverage for current encounter",
            "Set reminder for Medicare enrollment period",
            "Verify patient is enrolled in Medicare Part A when eligible",
        ],
    )


def _ssdi_pending(facts: MedicareAgeInput) -> MedicareAgeResult:
    estimated_approval = add_months(facts.date_of_service, SSDI_ESTIMATED_APPROVAL_MONTHS)
    return MedicareAgeResult(
        is_eligible=False,
        eligibility_reason=(
            "SSDI pending - if approved, Medicare eligibility begins after "
            "24-month waiting period"
        ),
        effective_date=calculate_ssdi_eligibility_date(estimated_approval),
        confidence=50,
        actions=[
            "Monitor SSDI application status",
            "Medicare eligibility begins 24 months after SSDI approval",
            "Consider Medicaid coverage while SSDI pending",
            "Document disability for SSDI case support",
        ],
    )


ENTITLEMENT_RULES = (
    Rule(
        "als_receiving",
        lambda f: f.has_als
        and f.ssdi_status == SSDIEnrollment.RECEIVING
        and f.ssdi_effective_date is not None,
        _als_receiving,
    ),
    Rule(
        "als_pending",
        lambda f: f.has_als and f.ssdi_status == SSDIEnrollment.PENDING,
        _als_pending,
    ),
    # Age is checked before ESRD; a 65+ patient has no ESRD waiting period
    Rule(
        "age_65",
        lambda f: calculate_age_at_date(f.date_of_birth, f.date_of_service)
        >= MEDICARE_ELIGIBILITY_AGE,
        _age_65,
    ),
    Rule("esrd", lambda f: f.has_esrd and f.dialysis_start_date is not None, _esrd),
    Rule(
        "ssdi_receiving",
        lambda f: f.ssdi_status == SSDIEnrollment.RECEIVING and f.ssdi_effective_date is not None,
        _ssdi_receiving,
    ),
    Rule("ssdi_pending", lambda f: f.ssdi_status == SSDIEnrollment.PENDING, _ssdi_pending),
)


def _not_eligible(facts: MedicareAgeInput) -> MedicareAgeResult:
    age = calculate_age_at_date(facts.date_of_birth, facts.date_of_service)
    years_until_65 = MEDICARE_ELIGIBILITY_AGE - age

    actions = [
        "Patient does not currently qualify for Medicare",
        "Evaluate for Medicaid eligibility",
        "Screen for disability conditions that may qualify for SSDI",
        "Check for ESRD or ALS diagnoses that may provide earlier eligibility",
    ]
    if years_until_65 <= PRE_65_PLANNING_YEARS:
        actions.append(
            f"Patient will qualify for age-based Medicare in approximately {years_until_65} year(s)"
        )

    return MedicareAgeResult(
        is_eligible=False,
        eligibility_reason=(
            f"Age {age} - does not meet Medicare eligibility requirements (no SSDI, ESRD, or ALS)"
        ),
        effective_date=calculate_age_65_eligibility_date(facts.date_of_birth),
        confidence=95,
        actions=actions,
    )


def evaluate_medicare_age(facts: MedicareAgeInput) -> MedicareAgeResult:
    """
    Determine Medicare entitlement on the date of service.

    Order: ALS with SSDI, ALS with SSDI pending, age 65, ESRD after the
    3-month wait, SSDI after the 24-month wait, SSDI pending.
    """
    result = first_match(ENTITLEMENT_RULES, facts)
    if result is None:
        logger.debug("No Medicare entitlement pathway for patient")
        return _not_eligible(facts)
    return result


def ssdi_enrollment_from_status(status) -> SSDIEnrollment:
    """Collapse a benefit status to the receiving/pending/none SSDI states."""
    value = getattr(status, "value", status)
    if value == SSDIEnrollment.RECEIVING.value:
        return SSDIEnrollment.RECEIVING
    if value == SSDIEnrollment.PENDING.value:
        return SSDIEnrollment.PENDING
    return SSDIEnrollment.NONE
