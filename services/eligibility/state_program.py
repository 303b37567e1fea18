"""State program pathway evaluation (SP0-SP4)."""

from typing import List, NamedTuple, Optional
import logging

from common.enums import InsuranceStatus, MedicaidStatus, StateProgramArchetype
from services.recovery.schemas import RecoveryInput
from services.reference.income_thresholds import is_income_below_threshold, parse_fpl_string
from services.reference.state_programs import get_state_program_mapping

logger = logging.getLogger(__name__)

BASE_CONFIDENCE = 30


class StateProgramResult(NamedTuple):
    """Outcome of the state program evaluation."""

    archetype: StateProgramArchetype
    program_name: str
    confidence: int  # 0-100
    eligibility_likely: bool
    required_documents: List[str]
    actions: List[str]
    estimated_recovery_percent: int
    notes: List[str]


class ArchetypeDetails(NamedTuple):
    """Actions and documents for a program family; templates take {program_name}."""

    actions: List[str]
    required_documents: List[str]
    estimated_recovery_percent: int
    additional_note: Optional[str] = None


_POOL_1115 = ArchetypeDetails(
    actions=[
        "Submit encounter data for {program_name} pool consideration",
        "Ensure proper uncompensated care classification",
    ],
    required_documents=[
        "Encounter record with dates of service",
        "Payer status documentation",
        "Facility provider agreement with pool",
    ],
    estimated_recovery_percent=30,
)

ARCHETYPE_DETAILS = {
    StateProgramArchetype.UC_POOL_1115: _POOL_1115,
    StateProgramArchetype.LIP_POOL_1115: _POOL_1115,
    StateProgramArchetype.CHARITY_CARE_REIMB: ArchetypeDetails(
        actions=[
            "Complete {program_name} application",
            "Conduct financial screening interview",
        ],
        required_documents=[
            "Income verification (pay stubs, tax return)",
            "Household size documentation",
            "Asset declaration (if required)",
            "Insurance status verification",
        ],
        estimated_recovery_percent=25,
    ),
    StateProgramArchetype.INDIGENT_CARE_POOL: ArchetypeDetails(
        actions=[
            "Document encounter for {program_name} reporting",
            "Verify facility eligibility for pool participation",
        ],
        required_documents=[
            "Encounter record with service dates",
            "Payer status at time of service",
            "Income screening documentation",
        ],
        estimated_recovery_percent=28,
    ),
    StateProgramArchetype.ALL_PAYER_UC_POOLING: ArchetypeDetails(
        actions=[
            "Classify care as charity vs. bad debt per state guidelines",
            "Complete eligibility screening for charity classification",
        ],
        required_documents=[
            "Financial screening documentation",
            "Charity care application",
            "Service documentation",
        ],
        estimated_recovery_percent=35,  # rate-setting structure
        additional_note="UCC pooling embedded in rate structure - proper classification critical",
    ),
    StateProgramArchetype.HEALTH_SAFETY_NET: ArchetypeDetails(
        actions=[
            "Submit {program_name} claim for eligible services",
            "Verify patient HSN eligibility",
        ],
        required_documents=[
            "HSN eligibility determination",
            "Income documentation",
            "Residency verification",
            "MassHealth application status (if applicable)",
        ],
        estimated_recovery_percent=32,
    ),
}

DEFAULT_DETAILS = ArchetypeDetails(
    actions=[
        "Research applicable state programs",
        "Contact hospital financial counseling",
    ],
    required_documents=[
        "Income verification",
        "Insurance status documentation",
    ],
    estimated_recovery_percent=20,
)


def get_archetype_details(archetype: StateProgramArchetype, program_name: str) -> ArchetypeDetails:
    details = ARCHETYPE_DETAILS.get(archetype, DEFAULT_DETAILS)
    return details._replace(
        actions=[action.format(program_name=program_name) for action in details.actions],
        required_documents=list(details.required_documents),
    )


def evaluate_state_program(data: RecoveryInput) -> StateProgramResult:
    """
    Match the encounter against the service state's uncompensated-care program.

    Confidence starts at 30 and moves with encounter-type coverage, residency,
    income and insured status. A patient with active Medicaid is billed to
    Medicaid, so the program is reported but never marked likely.
    """
    state = data.state_of_service
    mapping = get_state_program_mapping(state)

    actions: List[str] = []
    notes: List[str] = []
    required_documents: List[str] = []
    confidence = BASE_CONFIDENCE
    eligibility_likely = False

    if mapping is not None:
        archetype = mapping.archetype
        program_name = mapping.program_name

        if data.encounter_type in mapping.applies_to_encounter_types:
            confidence += 20
        else:
            notes.append(
                f"{data.encounter_type.value} encounters may have limited coverage under {program_name}"
            )

        if mapping.requires_residency and data.state_of_residence == state:
            confidence += 15
            required_documents.append("Proof of state residency")
        elif mapping.requires_residency:
            confidence -= 20
            notes.append("Residency requirement may not be met - out-of-state patient")

        if is_income_below_threshold(data.household_income, parse_fpl_string(mapping.income_limit)):
            confidence += 25
            eligibility_likely = True
            notes.append(f"Income appears below {mapping.income_limit} threshold")
        else:
            confidence -= 15
            notes.append(f"Income may exceed {mapping.income_limit} eligibility limit")

        details = get_archetype_details(archetype, program_name)
        actions.extend(details.actions)
        required_documents.extend(details.required_documents)
        estimated_recovery_percent = details.estimated_recovery_percent
        if details.additional_note:
            notes.append(details.additional_note)
        notes.append(mapping.notes)
    else:
        logger.debug(f"No state program mapped for {state}")
        archetype = StateProgramArchetype.UNKNOWN
        program_name = f"{state} State Program (not mapped)"
        estimated_recovery_percent = 0
        actions.extend([
            "Research state-specific uncompensated care programs",
            "Contact state hospital association for program guidance",
            "Check for 1115 waiver programs in state",
        ])
        required_documents.extend([
            "Income verification",
            "Residency documentation",
            "Insurance status verification",
        ])
        notes.extend([
            "State program not in mapping table - manual research recommended",
            "Check CMS 1115 waiver list for state-specific programs",
        ])

    if data.insurance_status_on_dos == InsuranceStatus.UNINSURED:
        confidence += 10

    if data.medicaid_status == MedicaidStatus.ACTIVE and eligibility_likely:
        eligibility_likely = False
        notes.append("Active Medicaid on DOS - bill Medicaid before state program")

    confidence = min(max(confidence, 0), 100)

    return StateProgramResult(
        archetype=archetype,
        program_name=program_name,
        confidence=confidence,
        eligibility_likely=eligibility_likely,
        required_documents=required_documents,
        actions=actions,
        estimated_recovery_percent=estimated_recovery_percent,
        notes=notes,
    )
