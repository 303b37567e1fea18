"""State uncompensated-care program map for all 51 jurisdictions."""

from types import MappingProxyType
from typing import FrozenSet, List, Mapping, NamedTuple, Optional

from common.enums import EncounterType, StateProgramArchetype


class StateProgramMapping(NamedTuple):
    """Program a state offers for uninsured / uncompensated hospital care."""

    archetype: StateProgramArchetype
    program_name: str
    income_limit_percent: int  # FPL percentage
    requires_residency: bool
    applies_to_encounter_types: FrozenSet[EncounterType]
    notes: str

    @property
    def income_limit(self) -> str:
        return f"{self.income_limit_percent}% FPL"


# Observation stays are not covered by any mapped program
_STANDARD_ENCOUNTERS = frozenset({EncounterType.INPATIENT, EncounterType.OUTPATIENT, EncounterType.ED})


def _program(archetype, program_name, income_limit_percent, notes):
    return StateProgramMapping(
        archetype=archetype,
        program_name=program_name,
        income_limit_percent=income_limit_percent,
        requires_residency=True,
        applies_to_encounter_types=_STANDARD_ENCOUNTERS,
        notes=notes,
    )


STATE_PROGRAM_MAP: Mapping[str, StateProgramMapping] = MappingProxyType({
    "AL": _program(
        StateProgramArchetype.CHARITY_CARE_REIMB,
        "Alabama Hospital Charity Care Program",
        200,
        "Non-expansion state; hospital-based charity care programs; limited state funding",
    ),
    "AK": _program(
        StateProgramArchetype.UC_POOL_1115,
        "Alaska 1115 Behavioral Health Waiver",
        138,
        "Medicaid expansion state; 1115 waiver focuses on behavioral health; standard charity care available",
    ),
    "AZ": _program(
        StateProgramArchetype.UC_POOL_1115,
        "Arizona Health Care Cost Containment System (AHCCCS)",
        138,
        "Expansion state; AHCCCS is 1115 demonstration; covers broad population",
    ),
    "AR": _program(
        StateProgramArchetype.UC_POOL_1115,
        "Arkansas Works (1115 Waiver)",
        138,
        "Expansion via 1115 waiver; premium assistance model for marketplace coverage",
    ),
    "CA": _program(
        StateProgramArchetype.UC_POOL_1115,
        "California Global Payment Program (GPP) / Medi-Cal",
        138,
        "Expansion state; GPP for public hospitals; strong Medi-Cal coverage; CalAIM 1115 waiver",
    ),
    "CO": _program(
        StateProgramArchetype.CHARITY_CARE_REIMB,
        "Colorado Indigent Care Program (CICP)",
        250,
        "Expansion state; CICP provides discounted care for uninsured; sliding scale fees",
    ),
    "CT": _program(
        StateProgramArchetype.CHARITY_CARE_REIMB,
        "Connecticut Hospital Financial Assistance",
        250,
        "Expansion state; mandated hospital charity care policies; HUSKY Health covers low-income",
    ),
    "DE": _program(
        StateProgramArchetype.CHARITY_CARE_REIMB,
        "Delaware Hospital Charity Care Program",
        200,
        "Expansion state; Diamond State Health Plan; hospital-based charity care",
    ),
    "DC": _program(
        StateProgramArchetype.HEALTH_SAFETY_NET,
        "DC Healthcare Alliance",
        200,
        "Expansion jurisdiction; Alliance covers residents ineligible for Medicaid including undocumented",
    ),
    "FL": _program(
        StateProgramArchetype.LIP_POOL_1115,
        "Florida Low Income Pool (LIP)",
        200,
        "Non-expansion state; 1115 waiver LIP provides UC funding to hospitals",
    ),
    "GA": _program(
        StateProgramArchetype.INDIGENT_CARE_POOL,
        "Georgia Indigent Care Trust Fund",
        200,
        "Non-expansion state; limited 1115 waiver; Indigent Care Trust Fund supports hospitals",
    ),
    "HI": _program(
        StateProgramArchetype.HEALTH_SAFETY_NET,
        "Hawaii QUEST Integration",
        138,
        "Expansion state; QUEST 1115 waiver provides comprehensive managed care; near-universal coverage",
    ),
    "ID": _program(
        StateProgramArchetype.CHARITY_CARE_REIMB,
        "Idaho Hospital Charity Care / Catastrophic Health Care Program",
        138,
        "Expansion state (2020); County CAT program for catastrophic costs; hospital charity care",
    ),
    "IL": _program(
        StateProgramArchetype.CHARITY_CARE_REIMB,
        "Illinois Hospital Uninsured Patient Discount Act",
        200,
        "Expansion state; mandated discounts for uninsured; strong charity care requirements",
    ),
    "IN": _program(
        StateProgramArchetype.UC_POOL_1115,
        "Healthy Indiana Plan (HIP 2.0)",
        138,
        "Expansion via 1115 waiver; POWER account model; HIP covers expansion population",
    ),
    "IA": _program(
        StateProgramArchetype.UC_POOL_1115,
        "Iowa Wellness Plan (1115 Waiver)",
        138,
        "Expansion state; 1115 waiver provides managed care coverage",
    ),
    "KS": _program(
        StateProgramArchetype.CHARITY_CARE_REIMB,
        "Kansas Hospital Charity Care Program",
        200,
        "Non-expansion state; hospital-based charity care; MediKan for limited populations",
    ),
    "KY": _program(
        StateProgramArchetype.UC_POOL_1115,
        "Kentucky HEALTH (1115 Waiver)",
        138,
        "Expansion state; 1115 waiver; strong Medicaid coverage through kynect",
    ),
    "LA": _program(
        StateProgramArchetype.UC_POOL_1115,
        "Louisiana 1115 Waiver / Healthy Louisiana",
        138,
        "Expansion state (2016); 1115 waiver for managed care; public hospital system",
    ),
    "ME": _program(
        StateProgramArchetype.CHARITY_CARE_REIMB,
        "Maine Hospital Charity Care Program",
        138,
        "Expansion state (2019); MaineCare covers expansion; hospital charity care available",
    ),
    "MD": _program(
        StateProgramArchetype.ALL_PAYER_UC_POOLING,
        "Maryland All-Payer Rate Setting UCC Pool",
        200,
        "UCC built into all-payer rates with pooling equalization",
    ),
    "MA": _program(
        StateProgramArchetype.HEALTH_SAFETY_NET,
        "Massachusetts Health Safety Net (HSN)",
        300,
        "Expansion state; HSN pays hospitals/CHCs for essential services; strong MassHealth coverage",
    ),
    "MI": _program(
        StateProgramArchetype.UC_POOL_1115,
        "Healthy Michigan Plan (1115 Waiver)",
        138,
        "Expansion state; 1115 waiver provides managed care with healthy behaviors incentives",
    ),
    "MN": _program(
        StateProgramArchetype.HEALTH_SAFETY_NET,
        "Minnesota Care / MinnesotaCare",
        200,
        "Expansion state; MinnesotaCare covers 200% FPL; strong public option; 1115 BHP waiver",
    ),
    "MS": _program(
        StateProgramArchetype.CHARITY_CARE_REIMB,
        "Mississippi Hospital Charity Care Program",
        200,
        "Non-expansion state; limited coverage; hospital-based charity care",
    ),
    "MO": _program(
        StateProgramArchetype.CHARITY_CARE_REIMB,
        "Missouri Hospital Charity Care Program",
        138,
        "Expansion state (2021); MO HealthNet; hospital charity care for remaining uninsured",
    ),
    "MT": _program(
        StateProgramArchetype.UC_POOL_1115,
        "Montana HELP Act (1115 Waiver)",
        138,
        "Expansion state; HELP Act 1115 waiver; premium requirements for some enrollees",
    ),
    "NE": _program(
        StateProgramArchetype.CHARITY_CARE_REIMB,
        "Nebraska Heritage Health (Expansion)",
        138,
        "Expansion state (2020); Heritage Health managed care; hospital charity care",
    ),
    "NV": _program(
        StateProgramArchetype.CHARITY_CARE_REIMB,
        "Nevada Hospital Charity Care Program",
        138,
        "Expansion state; Nevada Medicaid managed care; hospital charity care requirements",
    ),
    "NH": _program(
        StateProgramArchetype.UC_POOL_1115,
        "New Hampshire Granite Advantage (1115 Waiver)",
        138,
        "Expansion state; Granite Advantage 1115 waiver; managed care model",
    ),
    "NJ": _program(
        StateProgramArchetype.CHARITY_CARE_REIMB,
        "NJ Hospital Care Payment Assistance (Charity Care)",
        300,
        "Expansion state; strong charity care law up to 300% FPL; NJ FamilyCare",
    ),
    "NM": _program(
        StateProgramArchetype.UC_POOL_1115,
        "New Mexico Centennial Care 2.0 (1115 Waiver)",
        138,
        "Expansion state; Centennial Care 1115 waiver; managed care statewide",
    ),
    "NY": _program(
        StateProgramArchetype.INDIGENT_CARE_POOL,
        "NY Hospital Indigent Care Pool / Essential Plan",
        250,
        "Expansion state; Essential Plan covers up to 200% FPL; Indigent Care Pool for hospitals",
    ),
    "NC": _program(
        StateProgramArchetype.UC_POOL_1115,
        "North Carolina Medicaid Expansion (2023)",
        138,
        "Expansion state (2023); NC Medicaid Managed Care; hospital charity care",
    ),
    "ND": _program(
        StateProgramArchetype.CHARITY_CARE_REIMB,
        "North Dakota Medicaid Expansion",
        138,
        "Expansion state; strong Medicaid coverage; hospital charity care",
    ),
    "OH": _program(
        StateProgramArchetype.CHARITY_CARE_REIMB,
        "Ohio Hospital Care Assurance Program (HCAP)",
        200,
        "Expansion state; HCAP provider assessments fund uninsured care; strong charity care",
    ),
    "OK": _program(
        StateProgramArchetype.UC_POOL_1115,
        "Oklahoma SoonerCare (1115 Waiver)",
        138,
        "Expansion state (2021); SoonerCare 1115 waiver; managed care transition",
    ),
    "OR": _program(
        StateProgramArchetype.UC_POOL_1115,
        "Oregon Health Plan (OHP) 1115 Waiver",
        138,
        "Expansion state; OHP 1115 waiver with CCOs; covers 138% FPL",
    ),
    "PA": _program(
        StateProgramArchetype.CHARITY_CARE_REIMB,
        "Pennsylvania Charity Care / Fair Care",
        250,
        "Expansion state; HealthChoices managed care; hospital charity care requirements",
    ),
    "RI": _program(
        StateProgramArchetype.UC_POOL_1115,
        "Rhode Island 1115 Global Consumer Choice Compact",
        138,
        "Expansion state; 1115 waiver with global cap; RIte Care managed care",
    ),
    "SC": _program(
        StateProgramArchetype.CHARITY_CARE_REIMB,
        "South Carolina Hospital Charity Care Program",
        200,
        "Non-expansion state; Healthy Connections Medicaid; hospital charity care",
    ),
    "SD": _program(
        StateProgramArchetype.CHARITY_CARE_REIMB,
        "South Dakota Medicaid Expansion (2023)",
        138,
        "Expansion state (2023); new Medicaid expansion; hospital charity care",
    ),
    "TN": _program(
        StateProgramArchetype.UC_POOL_1115,
        "TennCare (1115 Waiver)",
        200,
        "Non-expansion state; TennCare 1115 waiver is entire Medicaid program; limited eligibility",
    ),
    "TX": _program(
        StateProgramArchetype.UC_POOL_1115,
        "Texas 1115 Uncompensated Care Pool",
        200,
        "Non-expansion state; 1115 waiver UC pool provides significant hospital funding",
    ),
    "UT": _program(
        StateProgramArchetype.UC_POOL_1115,
        "Utah Medicaid Expansion (1115 Waiver)",
        138,
        "Expansion state (2020); 1115 waiver with bridge coverage; PCN program",
    ),
    "VT": _program(
        StateProgramArchetype.HEALTH_SAFETY_NET,
        "Vermont Global Commitment to Health (1115 Waiver)",
        138,
        "Expansion state; 1115 global commitment waiver; near-universal coverage",
    ),
    "VA": _program(
        StateProgramArchetype.CHARITY_CARE_REIMB,
        "Virginia Medicaid Expansion",
        138,
        "Expansion state (2019); managed care statewide; hospital charity care",
    ),
    "WA": _program(
        StateProgramArchetype.UC_POOL_1115,
        "Washington Apple Health (1115 Waiver)",
        138,
        "Expansion state; Apple Health 1115 waiver; managed care; strong coverage",
    ),
    "WV": _program(
        StateProgramArchetype.CHARITY_CARE_REIMB,
        "West Virginia Medicaid Expansion",
        138,
        "Expansion state; Mountain Health Trust managed care; hospital charity care",
    ),
    "WI": _program(
        StateProgramArchetype.CHARITY_CARE_REIMB,
        "Wisconsin BadgerCare Plus",
        200,
        "Partial expansion to 100% FPL; BadgerCare Plus covers adults; hospital charity care",
    ),
    "WY": _program(
        StateProgramArchetype.CHARITY_CARE_REIMB,
        "Wyoming Hospital Charity Care Program",
        200,
        "Non-expansion state; limited Medicaid eligibility; hospital-based charity care",
    ),
})


def get_state_program_mapping(state_code: str) -> Optional[StateProgramMapping]:
    return STATE_PROGRAM_MAP.get(state_code.upper())


def has_archetype(state_code: str, archetype: StateProgramArchetype) -> bool:
    mapping = get_state_program_mapping(state_code)
    return mapping is not None and mapping.archetype == archetype


def get_states_by_archetype(archetype: StateProgramArchetype) -> List[str]:
    return [code for code, mapping in STATE_PROGRAM_MAP.items() if mapping.archetype == archetype]
