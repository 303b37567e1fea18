"""Federal Poverty Level tables and Medicaid income thresholds (2024)."""

import re
from types import MappingProxyType
from typing import Mapping, Union

from common.dates import round_money
from common.enums import ApplicantCategory, IncomeLevel

# HHS poverty guidelines, annual income, contiguous states
FPL_2024_ANNUAL: Mapping[int, int] = MappingProxyType({
    1: 15060,
    2: 20440,
    3: 25820,
    4: 31200,
    5: 36580,
    6: 41960,
    7: 47340,
    8: 52720,
})
FPL_2024_ADDITIONAL_PERSON = 5380

EXPANSION_THRESHOLD_PERCENT = 138  # 133% statutory + 5% disregard
BASE_THRESHOLD_PERCENT = 133
INCOME_DISREGARD_PERCENT = 5

MEDICAID_EXPANSION_STATES = frozenset({
    "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "DC", "HI", "ID",
    "IL", "IN", "IA", "KY", "LA", "ME", "MD", "MA", "MI", "MN",
    "MO", "MT", "NE", "NV", "NH", "NJ", "NM", "NY", "NC", "ND",
    "OH", "OK", "OR", "PA", "RI", "SD", "UT", "VT", "VA", "WA", "WV",
})

NON_EXPANSION_STATES = frozenset({"AL", "FL", "GA", "KS", "MS", "SC", "TN", "TX", "WI", "WY"})


def _category_thresholds(adult, parent_caretaker, pregnant_woman, child, former_foster_youth):
    return MappingProxyType({
        ApplicantCategory.ADULT: adult,
        ApplicantCategory.PARENT_CARETAKER: parent_caretaker,
        ApplicantCategory.PREGNANT_WOMAN: pregnant_woman,
        ApplicantCategory.CHILD: child,
        ApplicantCategory.FORMER_FOSTER_YOUTH: former_foster_youth,
    })


# FPL percentage by applicant category for states without expansion
NON_EXPANSION_THRESHOLDS: Mapping[str, Mapping[ApplicantCategory, int]] = MappingProxyType({
    "AL": _category_thresholds(0, 18, 146, 146, 138),
    "FL": _category_thresholds(0, 26, 191, 210, 138),
    "GA": _category_thresholds(0, 35, 220, 247, 138),
    "KS": _category_thresholds(0, 38, 166, 166, 138),
    "MS": _category_thresholds(0, 27, 194, 209, 138),
    "SC": _category_thresholds(0, 67, 199, 213, 138),
    "TN": _category_thresholds(0, 98, 195, 211, 138),
    "TX": _category_thresholds(0, 14, 198, 201, 138),
    "WI": _category_thresholds(100, 100, 301, 306, 138),
    "WY": _category_thresholds(0, 54, 154, 154, 138),
})

INCOME_LEVEL_ORDER = (
    IncomeLevel.UNDER_FPL,
    IncomeLevel.FPL_138,
    IncomeLevel.FPL_200,
    IncomeLevel.FPL_250,
    IncomeLevel.FPL_300,
    IncomeLevel.FPL_400,
    IncomeLevel.OVER_400_FPL,
)

# SSI / SSDI program limits (monthly, 2024)
SSI_FBR_2024_MONTHLY = 943
SSI_RESOURCE_LIMIT_INDIVIDUAL = 2000
SSI_RESOURCE_LIMIT_COUPLE = 3000
SGA_LIMIT_2024_MONTHLY = 1550
SGA_LIMIT_BLIND_2024_MONTHLY = 2590


def get_fpl(household_size: int) -> int:
    """Annual FPL for a household; sizes below 1 use the single-person value."""
    if household_size <= 0:
        return FPL_2024_ANNUAL[1]
    if household_size <= 8:
        return FPL_2024_ANNUAL[household_size]
    return FPL_2024_ANNUAL[8] + (household_size - 8) * FPL_2024_ADDITIONAL_PERSON


def get_fpl_percentage_threshold(household_size: int, percentage: float) -> int:
    """Dollar amount at a given FPL percentage."""
    return round_money(get_fpl(household_size) * percentage / 100)


def is_expansion_state(state_code: str) -> bool:
    return state_code.upper() in MEDICAID_EXPANSION_STATES


def get_state_threshold(
    state_code: str, category: ApplicantCategory = ApplicantCategory.ADULT
) -> int:
    """
    Applicable Medicaid threshold as an FPL percentage.

    Expansion states use 138% for everyone. Non-expansion states look up
    the applicant category; unknown states have no coverage (0).
    """
    state = state_code.upper()
    if state in MEDICAID_EXPANSION_STATES:
        return EXPANSION_THRESHOLD_PERCENT
    thresholds = NON_EXPANSION_THRESHOLDS.get(state)
    if thresholds is None:
        return 0
    return thresholds.get(ApplicantCategory(category), 0)


def get_medicaid_income_limit(state_code: str) -> IncomeLevel:
    """Income bracket ceiling for Medicaid in a state."""
    return IncomeLevel.FPL_138 if is_expansion_state(state_code) else IncomeLevel.UNDER_FPL


def is_income_below_threshold(
    income: Union[IncomeLevel, str], threshold: Union[IncomeLevel, str]
) -> bool:
    """True when the income bracket is at or below the threshold bracket."""
    try:
        income_index = INCOME_LEVEL_ORDER.index(IncomeLevel(income))
        threshold_index = INCOME_LEVEL_ORDER.index(IncomeLevel(threshold))
    except ValueError:
        return False
    return income_index <= threshold_index


def parse_fpl_string(fpl_string: str) -> IncomeLevel:
    """Map a string like "200% FPL" to its income bracket."""
    match = re.search(r"(\d+)", fpl_string)
    if not match:
        return IncomeLevel.FPL_138

    percentage = int(match.group(1))
    if percentage <= 100:
        return IncomeLevel.UNDER_FPL
    if percentage <= 138:
        return IncomeLevel.FPL_138
    if percentage <= 200:
        return IncomeLevel.FPL_200
    if percentage <= 250:
        return IncomeLevel.FPL_250
    if percentage <= 300:
        return IncomeLevel.FPL_300
    if percentage <= 400:
        return IncomeLevel.FPL_400
    return IncomeLevel.OVER_400_FPL
