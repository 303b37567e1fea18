"""Medicare/Medicaid dual eligibility and billing coordination."""

from datetime import date
from typing import List, NamedTuple, Optional
import logging

from common.enums import (
    DualCategory,
    DualMedicaidStatus,
    EnrollmentStatus,
    MedicaidScope,
    PrimaryPayer,
)

logger = logging.getLogger(__name__)

MEDICARE_PART_A_BENEFITS = (
    "Inpatient hospital care",
    "Skilled nursing facility (limited)",
    "Home health care",
    "Hospice care",
)
MEDICARE_PART_B_BENEFITS = (
    "Physician services",
    "Outpatient hospital care",
    "Preventive services",
    "Durable medical equipment",
    "Ambulance services",
    "Mental health services",
)
MEDICARE_PART_D_BENEFITS = ("Prescription drugs",)

MEDICAID_BENEFITS = {
    DualCategory.FULL_DUAL: (
        "Nursing facility care (long-term)",
        "Personal care services",
        "Home and community-based services",
        "Transportation",
        "Dental services",
        "Vision services",
        "Hearing aids",
        "Medicare cost-sharing",
    ),
    DualCategory.QMB_ONLY: (
        "Medicare Part A premium",
        "Medicare Part B premium",
        "Medicare deductibles",
        "Medicare coinsurance",
    ),
    DualCategory.SLMB_ONLY: ("Medicare Part B premium",),
    DualCategory.QI: ("Medicare Part B premium",),
    DualCategory.PARTIAL_DUAL: ("Limited Medicaid benefits (varies by state)",),
}

# Monthly income limits for a single person
QMB_INCOME_LIMIT = 1275  # 100% FPL
SLMB_INCOME_LIMIT = 1529  # 120% FPL
QI_INCOME_LIMIT = 1715  # 135% FPL

SCOPE_TO_CATEGORY = {
    MedicaidScope.FULL: DualCategory.FULL_DUAL,
    MedicaidScope.QMB: DualCategory.QMB_ONLY,
    MedicaidScope.SLMB: DualCategory.SLMB_ONLY,
    MedicaidScope.QI: DualCategory.QI,
    MedicaidScope.LIMITED: DualCategory.PARTIAL_DUAL,
}

CATEGORY_DESCRIPTIONS = {
    DualCategory.FULL_DUAL: "Full dual-eligible - has complete Medicare and Medicaid benefits",
    DualCategory.QMB_ONLY: "QMB Only - Medicaid pays Medicare premiums and cost-sharing",
    DualCategory.SLMB_ONLY: "SLMB Only - Medicaid pays Medicare Part B premium only",
    DualCategory.QI: "QI - Medicaid pays Medicare Part B premium only",
    DualCategory.QDWI: "QDWI - Medicaid pays Medicare Part A premium for disabled workers",
    DualCategory.PARTIAL_DUAL: "Partial dual-eligible - limited Medicaid benefits",
    DualCategory.NOT_DUAL: "Not dual-eligible",
}

COST_SHARING_CATEGORIES = (DualCategory.FULL_DUAL, DualCategory.QMB_ONLY)
PREMIUM_CATEGORIES = (
    DualCategory.FULL_DUAL,
    DualCategory.QMB_ONLY,
    DualCategory.SLMB_ONLY,
    DualCategory.QI,
)
CROSSOVER_CATEGORIES = (DualCategory.FULL_DUAL, DualCategory.QMB_ONLY, DualCategory.PARTIAL_DUAL)


class DualEligibleInput(NamedTuple):
    date_of_service: date
    medicare_part_a: EnrollmentStatus
    medicare_part_b: EnrollmentStatus
    medicare_part_d: EnrollmentStatus
    medicaid_status: DualMedicaidStatus
    medicaid_state: str
    has_medicare_advantage: bool = False
    has_dsnp: bool = False
    has_pace: bool = False
    has_lis: bool = False
    medicaid_scope_of_benefits: Optional[MedicaidScope] = None
    monthly_income: Optional[float] = None
    date_of_birth: Optional[date] = None


class BillingInstruction(NamedTuple):
    step: int
    instruction: str
    payer: str
    expected_outcome: str


class SpecialProgram(NamedTuple):
    program: str
    enrolled: bool
    description: str


class CrossoverRequirements(NamedTuple):
    required: bool
    automatic: bool  # managed care plans usually cross claims over automatically


class DualEligibleResult(NamedTuple):
    """Dual status, payer order and billing steps."""

    dual_category: DualCategory
    is_dual_eligible: bool
    primary_payer: PrimaryPayer
    secondary_payer: Optional[str]
    medicaid_covers_cost_sharing: bool
    medicaid_covers_premiums: bool
    medicare_covered_benefits: List[str]
    medicaid_covered_benefits: List[str]
    billing_instructions: List[BillingInstruction]
    actions: List[str]
    notes: List[str]
    special_programs: List[SpecialProgram]


def _enrolled(status: EnrollmentStatus) -> bool:
    return status == EnrollmentStatus.ENROLLED


def determine_dual_category(data: DualEligibleInput) -> DualCategory:
    """
    Classify the dual-eligible category.

    Requires active (or spend-down) Medicaid and Medicare Part A or B.
    Explicit scope of benefits wins; otherwise monthly income places the
    patient, and anything undetermined is partial dual.
    """
    if data.medicaid_status not in (DualMedicaidStatus.ACTIVE, DualMedicaidStatus.SPEND_DOWN):
        return DualCategory.NOT_DUAL
    if not _enrolled(data.medicare_part_a) and not _enrolled(data.medicare_part_b):
        return DualCategory.NOT_DUAL

    if data.medicaid_scope_of_benefits is not None:
        return SCOPE_TO_CATEGORY[data.medicaid_scope_of_benefits]

    if data.monthly_income is not None:
        if data.monthly_income <= QMB_INCOME_LIMIT:
            return DualCategory.FULL_DUAL
        if data.monthly_income <= SLMB_INCOME_LIMIT:
            return DualCategory.SLMB_ONLY
        if data.monthly_income <= QI_INCOME_LIMIT:
            return DualCategory.QI

    return DualCategory.PARTIAL_DUAL


def determine_primary_payer(data: DualEligibleInput) -> PrimaryPayer:
    if data.has_pace:
        return PrimaryPayer.PACE
    if data.has_medicare_advantage or data.has_dsnp:
        return PrimaryPayer.MEDICARE_ADVANTAGE
    if _enrolled(data.medicare_part_a) or _enrolled(data.medicare_part_b):
        return PrimaryPayer.MEDICARE
    return PrimaryPayer.MEDICAID


def medicare_benefits(data: DualEligibleInput) -> List[str]:
    benefits: List[str] = []
    if _enrolled(data.medicare_part_a):
        benefits.extend(MEDICARE_PART_A_BENEFITS)
    if _enrolled(data.medicare_part_b):
        benefits.extend(MEDICARE_PART_B_BENEFITS)
    if _enrolled(data.medicare_part_d):
        benefits.extend(MEDICARE_PART_D_BENEFITS)
    return benefits


def billing_instructions(
    primary_payer: PrimaryPayer, category: DualCategory
) -> List[BillingInstruction]:
    if primary_payer == PrimaryPayer.PACE:
        return [BillingInstruction(
            1,
            "Bill PACE program for all services",
            "PACE",
            "PACE covers all Medicare and Medicaid benefits",
        )]

    if primary_payer == PrimaryPayer.MEDICARE_ADVANTAGE:
        instructions = [BillingInstruction(
            1,
            "Bill Medicare Advantage plan as primary",
            "Medicare Advantage",
            "MA plan pays according to plan benefits",
        )]
    else:
        instructions = [BillingInstruction(
            1,
            "Bill Medicare as primary payer",
            "Medicare",
            "Medicare pays 80% for Part B, varies for Part A",
        )]

    if category in COST_SHARING_CATEGORIES:
        instructions.append(BillingInstruction(
            2,
            "Submit crossover claim to Medicaid for cost-sharing",
            "Medicaid",
            "Medicaid pays remaining deductible/coinsurance",
        ))
        instructions.append(BillingInstruction(
            3,
            "Do NOT bill patient for Medicare cost-sharing",
            "None",
            "QMB patients cannot be balance billed",
        ))
    elif category == DualCategory.PARTIAL_DUAL:
        instructions.append(BillingInstruction(
            2,
            "Bill Medicaid for Medicaid-only covered services",
            "Medicaid",
            "Medicaid pays for services not covered by Medicare",
        ))
    return instructions


def special_programs(data: DualEligibleInput) -> List[SpecialProgram]:
    return [
        SpecialProgram(
            "D-SNP (Dual-Eligible Special Needs Plan)",
            data.has_dsnp,
            "Enrolled in D-SNP - coordinates Medicare and Medicaid benefits"
            if data.has_dsnp
            else "Not enrolled - may benefit from D-SNP enrollment",
        ),
        SpecialProgram(
            "PACE (Program of All-Inclusive Care for the Elderly)",
            data.has_pace,
            "Enrolled in PACE - all care coordinated through PACE program"
            if data.has_pace
            else "Not enrolled - may be eligible if age 55+ and nursing home eligible",
        ),
        SpecialProgram(
            "LIS/Extra Help",
            data.has_lis,
            "Has Low-Income Subsidy - reduced Part D costs"
            if data.has_lis
            else "Not enrolled - may be eligible for Part D premium and copay assistance",
        ),
    ]


def _actions(data: DualEligibleInput, category: DualCategory) -> List[str]:
    if category == DualCategory.NOT_DUAL:
        actions = ["Patient is not dual-eligible - bill single payer"]
        if data.medicaid_status == DualMedicaidStatus.PENDING:
            actions.append("Monitor Medicaid application status")
        return actions

    actions = [
        "Verify dual-eligible status with both Medicare and Medicaid",
        "Ensure proper billing sequence (Medicare first, Medicaid second)",
    ]
    if category in COST_SHARING_CATEGORIES:
        actions.append("Do NOT balance bill patient for Medicare cost-sharing")
        actions.append("Submit crossover claims for cost-sharing recovery")
    if not data.has_dsnp and not data.has_pace:
        actions.append("Consider D-SNP enrollment counseling for care coordination")
    if not data.has_lis and _enrolled(data.medicare_part_d):
        actions.append("Screen for Low-Income Subsidy (Extra Help) eligibility")
    if data.has_pace:
        actions.append("Coordinate all care through PACE program")
        actions.append("Contact PACE for service authorization")
    if data.medicaid_status == DualMedicaidStatus.SPEND_DOWN:
        actions.append("Track patient spend-down status for Medicaid activation")
        actions.append("Assist with documentation of medical expenses for spend-down")
    return actions


def _notes(data: DualEligibleInput, category: DualCategory) -> List[str]:
    notes = [
        f"Dual-eligible category: {CATEGORY_DESCRIPTIONS[category]}",
        f"Medicaid state: {data.medicaid_state}",
    ]
    if data.has_medicare_advantage:
        notes.append("Enrolled in Medicare Advantage - bill MA plan as primary")
    if category in COST_SHARING_CATEGORIES:
        notes.append("IMPORTANT: Federal law prohibits balance billing QMB beneficiaries")
        notes.append("Medicaid is payer of last resort for cost-sharing")
    if data.has_pace:
        notes.append("PACE enrollment - program covers all Medicare and Medicaid services")
        notes.append("All care must be coordinated through PACE interdisciplinary team")
    if data.has_dsnp:
        notes.append("D-SNP enrollment provides integrated Medicare/Medicaid benefits")
    return notes


def evaluate_dual_eligible(data: DualEligibleInput) -> DualEligibleResult:
    """Classify dual status and lay out the Medicare-first billing sequence."""
    category = determine_dual_category(data)
    is_dual = category != DualCategory.NOT_DUAL
    primary_payer = determine_primary_payer(data)

    if not is_dual:
        logger.debug(f"Not dual eligible (Medicaid {data.medicaid_status.value})")

    return DualEligibleResult(
        dual_category=category,
        is_dual_eligible=is_dual,
        primary_payer=primary_payer,
        secondary_payer="medicaid" if is_dual else None,
        medicaid_covers_cost_sharing=category in COST_SHARING_CATEGORIES,
        medicaid_covers_premiums=category in PREMIUM_CATEGORIES,
        medicare_covered_benefits=medicare_benefits(data),
        medicaid_covered_benefits=list(MEDICAID_BENEFITS.get(category, ())),
        billing_instructions=billing_instructions(primary_payer, category),
        actions=_actions(data, category),
        notes=_notes(data, category),
        special_programs=special_programs(data),
    )


def is_qmb_beneficiary(data: DualEligibleInput) -> bool:
    return determine_dual_category(data) in COST_SHARING_CATEGORIES


def can_balance_bill(data: DualEligibleInput) -> bool:
    return not is_qmb_beneficiary(data)


def get_crossover_requirements(data: DualEligibleInput) -> CrossoverRequirements:
    return CrossoverRequirements(
        required=determine_dual_category(data) in CROSSOVER_CATEGORIES,
        automatic=data.has_dsnp or data.has_medicare_advantage,
    )
