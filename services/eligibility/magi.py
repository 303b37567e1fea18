"""MAGI (Modified Adjusted Gross Income) calculator.

Computes MAGI with the ACA methodology, converts it to a percentage of the
Federal Poverty Level, and compares it to the state threshold for the
applicant category. Expansion states use 138% FPL (133% plus the 5% income
disregard); non-expansion states use category thresholds.
"""

from typing import Dict, List, NamedTuple, Optional
import logging

from common.dates import round_half_up, round_money
from common.enums import ApplicantCategory
from services.reference.income_thresholds import (
    BASE_THRESHOLD_PERCENT,
    EXPANSION_THRESHOLD_PERCENT,
    INCOME_DISREGARD_PERCENT,
    FPL_2024_ANNUAL,
    get_fpl,
    get_state_threshold,
    is_expansion_state,
)

logger = logging.getLogger(__name__)

NEAR_THRESHOLD_MARGIN = 5


class ExcludedIncomeItem(NamedTuple):
    """A non-taxable income source removed from MAGI."""

    type: str
    amount: float
    description: str


class MAGIBreakdown(NamedTuple):
    """Intermediate values of a MAGI calculation."""

    gross_income: float
    total_excluded_income: float
    excluded_items: List[ExcludedIncomeItem]
    fpl_threshold: int
    income_disregard: int  # 5% of FPL, in dollars
    effective_threshold: int  # FPL percentage actually applied
    is_expansion_state: bool


class MAGIResult(NamedTuple):
    """MAGI eligibility determination."""

    magi: float
    fpl_percentage: float
    state_threshold: int
    is_income_eligible: bool
    margin_to_threshold: float  # negative means below threshold
    confidence: int
    breakdown: MAGIBreakdown
    notes: List[str]


# (field, description) in reporting order
EXCLUSION_TYPES = (
    ("child_support_received", "Child support payments received"),
    ("ssi_benefits", "Supplemental Security Income (SSI) benefits"),
    ("workers_compensation", "Workers' compensation payments"),
    ("veterans_benefits", "Veterans benefits (VA pension, disability)"),
    ("other", "Other tax-exempt income"),
)


def calculate_income_disregard(fpl_threshold: float) -> int:
    """Dollar value of the 5% income disregard."""
    return round_money(fpl_threshold * INCOME_DISREGARD_PERCENT / 100)


def _format_dollars(amount: float) -> str:
    if float(amount).is_integer():
        return f"${int(amount):,}"
    return f"${amount:,.2f}"


def calculate_magi(
    gross_income: float,
    household_size: int,
    state_code: str,
    applicant_category: Optional[ApplicantCategory] = None,
    child_support_received: float = 0,
    ssi_benefits: float = 0,
    workers_compensation: float = 0,
    veterans_benefits: float = 0,
    other_excluded_income: float = 0,
) -> MAGIResult:
    """
    Calculate MAGI and determine Medicaid income eligibility.

    Args:
        gross_income: Annual gross income from all sources
        household_size: Tax household size (values below 1 are treated as 1)
        state_code: Two-letter state of residence
        applicant_category: Category for non-expansion thresholds (default adult)
        child_support_received, ssi_benefits, workers_compensation,
        veterans_benefits, other_excluded_income: Annual excluded amounts

    Returns:
        MAGIResult with the FPL percentage, threshold, eligibility and notes
    """
    notes: List[str] = []
    state_code = state_code.upper()

    if household_size <= 0:
        logger.debug(f"Household size {household_size} coerced to 1")
        household_size = 1
        notes.append("Household size adjusted to minimum of 1")

    amounts = {
        "child_support_received": child_support_received,
        "ssi_benefits": ssi_benefits,
        "workers_compensation": workers_compensation,
        "veterans_benefits": veterans_benefits,
        "other": other_excluded_income,
    }
    excluded_items = [
        ExcludedIncomeItem(type=name, amount=amounts[name], description=description)
        for name, description in EXCLUSION_TYPES
        if amounts[name] and amounts[name] > 0
    ]
    total_excluded = sum(item.amount for item in excluded_items)

    magi = max(0, gross_income - total_excluded)

    fpl_threshold = get_fpl(household_size)
    fpl_percentage = round_half_up(magi / fpl_threshold * 100, 2) if fpl_threshold > 0 else 0

    expansion = is_expansion_state(state_code)
    category = ApplicantCategory(applicant_category or ApplicantCategory.ADULT)
    state_threshold = get_state_threshold(state_code, category)
    effective_threshold = EXPANSION_THRESHOLD_PERCENT if expansion else state_threshold

    is_income_eligible = fpl_percentage <= effective_threshold and effective_threshold > 0
    margin = round_half_up(fpl_percentage - effective_threshold, 2)

    confidence = 90
    if abs(margin) <= NEAR_THRESHOLD_MARGIN:
        confidence = 70
        notes.append("Income is close to threshold - verify all income sources")

    if not expansion and category == ApplicantCategory.ADULT and state_threshold == 0:
        confidence = 95
        notes.append(
            "State has not expanded Medicaid - adults without dependents generally not eligible"
        )

    if expansion:
        notes.append(f"{state_code} is a Medicaid expansion state (138% FPL threshold)")
    else:
        notes.append(f"{state_code} has not expanded Medicaid - threshold varies by category")

    if BASE_THRESHOLD_PERCENT < fpl_percentage <= EXPANSION_THRESHOLD_PERCENT:
        notes.append("Income is between 133-138% FPL - eligible due to 5% income disregard")

    if total_excluded > 0:
        notes.append(f"{_format_dollars(total_excluded)} in non-taxable income excluded from MAGI")

    breakdown = MAGIBreakdown(
        gross_income=gross_income,
        total_excluded_income=total_excluded,
        excluded_items=excluded_items,
        fpl_threshold=fpl_threshold,
        income_disregard=calculate_income_disregard(fpl_threshold),
        effective_threshold=effective_threshold,
        is_expansion_state=expansion,
    )

    return MAGIResult(
        magi=magi,
        fpl_percentage=fpl_percentage,
        state_threshold=effective_threshold,
        is_income_eligible=is_income_eligible,
        margin_to_threshold=margin,
        confidence=confidence,
        breakdown=breakdown,
        notes=notes,
    )


def quick_magi_check(gross_income: float, household_size: int, state_code: str) -> Dict:
    """Eligibility summary without the breakdown."""
    result = calculate_magi(gross_income, household_size, state_code)
    return {
        "eligible": result.is_income_eligible,
        "fpl_percentage": result.fpl_percentage,
        "threshold": result.state_threshold,
    }


def get_monthly_income_limit(
    household_size: int,
    state_code: str,
    category: ApplicantCategory = ApplicantCategory.ADULT,
) -> int:
    """Monthly dollar limit for Medicaid; 0 when the category has no coverage."""
    threshold_percent = get_state_threshold(state_code, category)
    if threshold_percent == 0:
        return 0
    annual_limit = round_money(get_fpl(household_size) * threshold_percent / 100)
    return round_money(annual_limit / 12)


def get_fpl_thresholds() -> Dict[int, int]:
    """FPL by household size 1-8."""
    return {size: get_fpl(size) for size in FPL_2024_ANNUAL}
