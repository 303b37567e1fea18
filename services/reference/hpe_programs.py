"""Hospital presumptive eligibility (HPE) availability by state and category."""

from types import MappingProxyType
from typing import Dict, List

from common.enums import PatientCategory
from services.reference.income_thresholds import MEDICAID_EXPANSION_STATES

HPE_STATES_CHILDREN = frozenset({
    "AZ", "CA", "CO", "CT", "FL", "IL", "LA", "MA", "MI", "MN",
    "NJ", "NM", "NY", "NC", "OH", "OR", "PA", "TX", "WA", "WI",
})

HPE_STATES_PREGNANT = frozenset({
    "AL", "AZ", "AR", "CA", "CO", "CT", "FL", "GA", "IL", "IN",
    "KS", "KY", "LA", "MA", "MI", "MN", "MS", "MO", "NJ", "NM",
    "NY", "NC", "OH", "OK", "OR", "PA", "SC", "TX", "WA", "WI",
})

HPE_STATES_ADULTS = MEDICAID_EXPANSION_STATES

HPE_STATES_FORMER_FOSTER_CARE = frozenset({
    "AZ", "CA", "CO", "CT", "IL", "MA", "MI", "MN", "NJ", "NM",
    "NY", "OH", "OR", "PA", "WA",
})

HPE_STATES_PARENT_CARETAKER = HPE_STATES_FORMER_FOSTER_CARE | {"WI"}

HPE_STATES_BY_CATEGORY = MappingProxyType({
    PatientCategory.ADULT: HPE_STATES_ADULTS,
    PatientCategory.CHILD: HPE_STATES_CHILDREN,
    PatientCategory.PREGNANT: HPE_STATES_PREGNANT,
    PatientCategory.FORMER_FOSTER_CARE: HPE_STATES_FORMER_FOSTER_CARE,
    PatientCategory.PARENT_CARETAKER: HPE_STATES_PARENT_CARETAKER,
})

# Gross income limit as a percentage of FPL
PE_FPL_THRESHOLDS = MappingProxyType({
    PatientCategory.CHILD: 200,
    PatientCategory.PREGNANT: 200,
    PatientCategory.ADULT: 138,
    PatientCategory.FORMER_FOSTER_CARE: 138,
    PatientCategory.PARENT_CARETAKER: 138,
})

# Days allowed to file the full Medicaid application after PE
STATE_APPLICATION_DEADLINES = MappingProxyType({
    "CA": 60,
    "NY": 45,
    "TX": 30,
    "FL": 30,
})
DEFAULT_APPLICATION_DEADLINE_DAYS = 45

CATEGORY_DISPLAY_NAMES = MappingProxyType({
    PatientCategory.ADULT: "adults",
    PatientCategory.CHILD: "children",
    PatientCategory.PREGNANT: "pregnant women",
    PatientCategory.FORMER_FOSTER_CARE: "former foster care youth",
    PatientCategory.PARENT_CARETAKER: "parent/caretaker relatives",
})


def state_has_hpe_program(state_code: str, category: PatientCategory) -> bool:
    return state_code.upper() in HPE_STATES_BY_CATEGORY.get(PatientCategory(category), frozenset())


def get_application_deadline_days(state_code: str) -> int:
    return STATE_APPLICATION_DEADLINES.get(state_code.upper(), DEFAULT_APPLICATION_DEADLINE_DAYS)


def get_hpe_states_by_category() -> Dict[PatientCategory, List[str]]:
    return {category: sorted(states) for category, states in HPE_STATES_BY_CATEGORY.items()}


def get_hpe_state_counts() -> Dict[PatientCategory, int]:
    return {category: len(states) for category, states in HPE_STATES_BY_CATEGORY.items()}
