"""Hospital presumptive eligibility determination."""

from datetime import date, timedelta
from typing import List, NamedTuple, Optional
import logging

from common.dates import add_months, last_day_of_month, round_money
from common.enums import PatientCategory
from services.reference.hpe_programs import (
    CATEGORY_DISPLAY_NAMES,
    PE_FPL_THRESHOLDS,
    get_application_deadline_days,
    state_has_hpe_program,
)
from services.reference.income_thresholds import get_fpl

logger = logging.getLogger(__name__)

HIGH_APPROVAL_CATEGORIES = (PatientCategory.PREGNANT, PatientCategory.CHILD)


class PresumptiveEligibilityResult(NamedTuple):
    """Whether the hospital can grant temporary Medicaid on the spot."""

    can_grant_pe: bool
    temporary_coverage_start: date
    temporary_coverage_end: date
    full_application_deadline: date
    required_actions: List[str]
    confidence: int  # 0-100
    notes: List[str]
    income_threshold_used: int  # annual dollars
    fpl_percentage_threshold: int
    monthly_income_threshold: int
    denial_reason: Optional[str] = None


def calculate_coverage_end_date(application_date: date) -> date:
    """Temporary coverage runs to the last day of the month after the application."""
    following = add_months(application_date.replace(day=1), 1)
    return last_day_of_month(following.year, following.month)


def calculate_application_deadline(application_date: date, state_code: str) -> date:
    return application_date + timedelta(days=get_application_deadline_days(state_code))


def get_pe_income_threshold(household_size: int, category: PatientCategory) -> int:
    """Annual gross income limit for PE."""
    return round_money(get_fpl(household_size) * PE_FPL_THRESHOLDS[category] / 100)


def evaluate_presumptive_eligibility(
    is_qualified_hpe_entity: bool,
    patient_category: PatientCategory,
    gross_monthly_income: float,
    household_size: int,
    state_of_residence: str,
    application_date: date,
) -> PresumptiveEligibilityResult:
    """
    Decide whether presumptive eligibility can be granted.

    Checks run in order and stop at the first failure: the hospital must be
    a qualified HPE entity, the state must run HPE for the patient category,
    and gross annual income must be within the category's FPL limit.
    """
    state = state_of_residence.upper()
    category = PatientCategory(patient_category)
    display_name = CATEGORY_DISPLAY_NAMES[category]

    fpl_percentage = PE_FPL_THRESHOLDS[category]
    annual_threshold = get_pe_income_threshold(household_size, category)
    annual_income = gross_monthly_income * 12

    coverage_end = calculate_coverage_end_date(application_date)
    deadline_days = get_application_deadline_days(state)
    application_deadline = calculate_application_deadline(application_date, state)

    def result(can_grant, confidence, actions, notes, denial_reason=None):
        return PresumptiveEligibilityResult(
            can_grant_pe=can_grant,
            temporary_coverage_start=application_date,
            temporary_coverage_end=coverage_end,
            full_application_deadline=application_deadline,
            required_actions=actions,
            confidence=min(confidence, 100),
            notes=notes,
            income_threshold_used=annual_threshold,
            fpl_percentage_threshold=fpl_percentage,
            monthly_income_threshold=round_money(annual_threshold / 12),
            denial_reason=denial_reason,
        )

    if not is_qualified_hpe_entity:
        return result(
            False,
            95,
            [
                "Verify hospital HPE qualification status with state Medicaid agency",
                "If not qualified, assist patient with standard Medicaid application",
            ],
            [
                "Only qualified HPE entities can grant presumptive eligibility",
                "Hospital must apply to state Medicaid agency to become HPE-qualified",
            ],
            "Hospital is not a qualified HPE entity",
        )

    notes = ["Hospital is a qualified HPE entity"]

    if not state_has_hpe_program(state, category):
        logger.debug(f"No HPE program in {state} for {category.value}")
        actions = [
            "Assist patient with standard Medicaid application",
            "Check for other expedited eligibility options in state",
        ]
        if category == PatientCategory.PREGNANT:
            actions.append(
                "Verify pregnancy Medicaid options - most states have expedited processes"
            )
        notes.append(f"{state} has not implemented HPE for {display_name}")
        return result(
            False,
            90,
            actions,
            notes,
            f"State {state} does not have HPE program for {category.value} category",
        )

    notes.append(f"{state} has HPE program for {display_name}")

    if annual_income > annual_threshold:
        notes.append(
            f"Annual income (${annual_income:,.0f}) exceeds "
            f"{fpl_percentage}% FPL threshold (${annual_threshold:,})"
        )
        notes.append("Income test uses gross income (simplified, not full MAGI)")
        return result(
            False,
            85,
            [
                "Verify income documentation is accurate",
                "Check for income disregards that may apply under full MAGI",
                "Consider standard Medicaid application - full MAGI may differ",
            ],
            notes,
            "Household income exceeds PE threshold",
        )

    # entity 20 + program 25 + income 35 + grant 20
    confidence = 100
    notes.append(
        f"Income (${annual_income:,.0f}/year) is below "
        f"{fpl_percentage}% FPL (${annual_threshold:,})"
    )
    notes.append("Simplified gross income test passed")
    notes.append(f"Temporary coverage period: {(coverage_end - application_date).days + 1} days")
    notes.append(f"Coverage ends: {coverage_end.strftime('%B %d, %Y')}")

    actions = [
        f"Submit full Medicaid application within {deadline_days} days "
        f"(by {application_deadline.isoformat()})",
        "Collect required documentation for full application:",
        "  - Proof of identity (birth certificate, ID)",
        "  - Proof of income (pay stubs, tax returns)",
        "  - Proof of residency (utility bills, lease)",
        "  - Social Security numbers for household members",
    ]

    if category == PatientCategory.PREGNANT:
        actions.append("  - Pregnancy verification from healthcare provider")
        notes.append("Pregnant women coverage extends through 60 days postpartum")
    if category == PatientCategory.FORMER_FOSTER_CARE:
        actions.append("  - Documentation of former foster care status")
        actions.append("  - State where foster care was received")

    actions.extend([
        "Notify patient of PE approval and coverage period",
        "Document PE determination in patient record",
        "Set reminder for application deadline follow-up",
        "Bill Medicaid under PE coverage for eligible services",
    ])

    if category in HIGH_APPROVAL_CATEGORIES:
        confidence += 5
        notes.append("Higher approval likelihood for this category under full application")

    return result(True, confidence, actions, notes)
