"""Recovery calculator: runs every pathway evaluator and ranks the result."""

from datetime import date
from typing import Dict, List, NamedTuple, Optional
import logging

from common.dates import DateLike, resolve_as_of, round_money
from common.enums import (
    ApplicantCategory,
    DualMedicaidStatus,
    EnrollmentStatus,
    MedicaidRecoveryStatus,
    MedicaidStatus,
    MedicareRecoveryStatus,
    MedicareStatus,
    ComplianceStatus,
    PatientCategory,
    RelevanceLevel,
)
from services.compliance.charity_care import CharityCareResult, evaluate_charity_care
from services.compliance.dsh_audit import DSHAuditResult, calculate_dsh_audit
from services.compliance.dsh_relevance import DSHRelevanceResult, evaluate_dsh_relevance
from services.denials.classifier import (
    DenialAnalysisResult,
    DenialInput,
    analyze_denial,
    prior_appeal_history,
)
from services.eligibility.dual_eligible import (
    DualEligibleInput,
    DualEligibleResult,
    evaluate_dual_eligible,
)
from services.eligibility.magi import MAGIResult, calculate_magi
from services.eligibility.medicaid import MedicaidRecoveryResult, evaluate_medicaid
from services.eligibility.medicare import MedicareRecoveryResult, evaluate_medicare
from services.eligibility.medicare_age import (
    MedicareAgeInput,
    MedicareAgeResult,
    evaluate_medicare_age,
    ssdi_enrollment_from_status,
)
from services.eligibility.presumptive import (
    PresumptiveEligibilityResult,
    evaluate_presumptive_eligibility,
)
from services.eligibility.retroactive import (
    RetroactiveCoverageResult,
    calculate_retroactive_coverage,
)
from services.eligibility.state_program import StateProgramResult, evaluate_state_program
from services.recovery.outcomes import (
    Outcome,
    error_messages,
    loaded_names,
    run_evaluator,
    value_of,
)
from services.recovery.schemas import RecoveryInput

logger = logging.getLogger(__name__)

CORE_EVALUATORS = ("medicaid-recovery", "medicare-recovery", "dsh-relevance", "state-programs")

# Share of the Medicaid estimate counted toward projected recovery
LIKELY_MEDICAID_FACTOR = 0.7
POSSIBLE_MEDICAID_FACTOR = 0.3
# Charity write-off is reported at a nominal fraction, it is not cash
CHARITY_WRITEOFF_REPORTING_FACTOR = 0.1

MAGI_ELIGIBLE_BOOST = 10
PRESUMPTIVE_BOOST = 5
PRESUMPTIVE_BOOST_MIN_CONFIDENCE = 70
DUAL_ELIGIBLE_BOOST = 8

IMMEDIATE_ACTION_COUNT = 3

APPLICANT_CATEGORIES = {
    PatientCategory.ADULT: ApplicantCategory.ADULT,
    PatientCategory.CHILD: ApplicantCategory.CHILD,
    PatientCategory.PREGNANT: ApplicantCategory.PREGNANT_WOMAN,
    PatientCategory.FORMER_FOSTER_CARE: ApplicantCategory.FORMER_FOSTER_YOUTH,
    PatientCategory.PARENT_CARETAKER: ApplicantCategory.PARENT_CARETAKER,
}

DUAL_MEDICAID_STATUS = {
    MedicaidStatus.ACTIVE: DualMedicaidStatus.ACTIVE,
    MedicaidStatus.PENDING: DualMedicaidStatus.PENDING,
}


class ProjectedRecovery(NamedTuple):
    """Projected dollars by source; total never includes the write-off."""

    medicaid: int
    state_program: int
    charity_writeoff: int
    total: int


class RecoveryResult(NamedTuple):
    """Aggregate recovery assessment for one encounter."""

    primary_recovery_path: str
    overall_confidence: int  # 0-100
    estimated_total_recovery: int
    priority_actions: List[str]

    medicaid: MedicaidRecoveryResult
    medicare: MedicareRecoveryResult
    dsh_relevance: DSHRelevanceResult
    state_program: StateProgramResult

    magi_result: Optional[MAGIResult]
    medicare_age_result: Optional[MedicareAgeResult]
    presumptive_eligibility: Optional[PresumptiveEligibilityResult]
    retroactive_coverage: Optional[RetroactiveCoverageResult]
    charity_care_compliance: Optional[CharityCareResult]
    dsh_audit_metrics: Optional[DSHAuditResult]
    denial_analysis: Optional[DenialAnalysisResult]
    dual_eligible_status: Optional[DualEligibleResult]

    current_exposure: float
    projected_recovery: ProjectedRecovery

    immediate_actions: List[str]
    follow_up_actions: List[str]
    documentation_needed: List[str]

    outcomes: Dict[str, Outcome]
    engines_loaded: List[str]
    engine_errors: List[str]


def _dedupe(items: List[str]) -> List[str]:
    return list(dict.fromkeys(items))


def _missing(data: RecoveryInput, *fields: str) -> List[str]:
    return [name for name in fields if getattr(data, name) is None]


def derive_payer_id(data: RecoveryInput) -> str:
    """Payer id for denial deadlines, derived from coverage when not supplied."""
    if data.payer_id:
        return data.payer_id
    if data.medicare_status in (MedicareStatus.ACTIVE_PART_A, MedicareStatus.ACTIVE_PART_B):
        return "MEDICARE"
    if data.medicaid_status == MedicaidStatus.ACTIVE:
        return "MEDICAID"
    return "COMMERCIAL"


def _run_magi(data: RecoveryInput):
    def monthly_to_annual(amount: Optional[float]) -> float:
        return (amount or 0) * 12

    category = APPLICANT_CATEGORIES.get(data.patient_category, ApplicantCategory.ADULT)
    return calculate_magi(
        gross_income=data.gross_monthly_income * 12,
        household_size=data.household_size,
        state_code=data.state_of_residence,
        applicant_category=category,
        child_support_received=monthly_to_annual(data.child_support_received),
        ssi_benefits=monthly_to_annual(data.ssi_benefits),
        workers_compensation=monthly_to_annual(data.workers_compensation),
        veterans_benefits=monthly_to_annual(data.veterans_benefits),
        other_excluded_income=monthly_to_annual(data.other_excluded_income),
    )


def _run_medicare_age(data: RecoveryInput) -> MedicareAgeResult:
    facts = MedicareAgeInput(
        date_of_birth=data.date_of_birth,
        date_of_service=data.date_of_service,
        has_esrd=bool(data.has_esrd),
        dialysis_start_date=data.dialysis_start_date,
        has_als=bool(data.has_als),
        ssdi_status=ssdi_enrollment_from_status(data.ssdi_status),
        ssdi_effective_date=data.ssdi_effective_date,
    )
    return evaluate_medicare_age(facts)


def _run_presumptive(data: RecoveryInput, as_of: date) -> PresumptiveEligibilityResult:
    return evaluate_presumptive_eligibility(
        is_qualified_hpe_entity=data.is_qualified_hpe_entity,
        patient_category=data.patient_category,
        gross_monthly_income=data.gross_monthly_income or 0,
        household_size=data.household_size,
        state_of_residence=data.state_of_residence,
        application_date=data.application_date or as_of,
    )


def _run_retroactive(
    data: RecoveryInput, medicaid: MedicaidRecoveryResult
) -> RetroactiveCoverageResult:
    return calculate_retroactive_coverage(
        date_of_service=data.date_of_service,
        application_date=data.application_date,
        state_of_residence=data.state_of_residence,
        was_eligible_on_dos=medicaid.status in (
            MedicaidRecoveryStatus.CONFIRMED,
            MedicaidRecoveryStatus.LIKELY,
        ),
        encounter_type=data.encounter_type,
        total_charges=data.total_charges,
    )


def _run_charity_care(data: RecoveryInput, as_of: date) -> CharityCareResult:
    return evaluate_charity_care(
        patient_income=data.gross_monthly_income * 12,
        household_size=data.household_size,
        hospital_fap_policy=data.hospital_fap_policy,
        account_age=data.account_age or 0,
        notifications_sent=data.notifications_sent,
        is_emergency_service=bool(data.is_emergency_service),
        as_of=as_of,
        original_charges=data.total_charges,
    )


def _run_dual_eligible(data: RecoveryInput) -> DualEligibleResult:
    return evaluate_dual_eligible(DualEligibleInput(
        date_of_service=data.date_of_service,
        medicare_part_a=data.medicare_part_a or EnrollmentStatus.NOT_ENROLLED,
        medicare_part_b=data.medicare_part_b or EnrollmentStatus.NOT_ENROLLED,
        medicare_part_d=data.medicare_part_d or EnrollmentStatus.NOT_ENROLLED,
        medicaid_status=DUAL_MEDICAID_STATUS.get(data.medicaid_status, DualMedicaidStatus.INACTIVE),
        medicaid_state=data.state_of_residence,
        has_medicare_advantage=data.has_medicare_advantage,
        has_dsnp=data.has_dsnp,
        has_pace=data.has_pace,
        has_lis=data.has_lis,
        medicaid_scope_of_benefits=data.medicaid_scope_of_benefits,
        monthly_income=data.gross_monthly_income,
        date_of_birth=data.date_of_birth,
    ))


def _run_denial(data: RecoveryInput, as_of: date) -> DenialAnalysisResult:
    denial_date = data.denial_date or as_of
    denial = DenialInput(
        carc_code=data.denial_code,
        billed_amount=data.original_claim_amount or data.total_charges,
        payer_id=derive_payer_id(data),
        denial_date=denial_date,
        rarc_code=data.rarc_code,
        denial_reason=data.denial_reason,
        previous_appeals=prior_appeal_history(data.prior_appeals, denial_date),
        has_documentation=True,
    )
    return analyze_denial(denial, as_of)


def run_optional_evaluators(
    data: RecoveryInput, medicaid: MedicaidRecoveryResult, as_of: date
) -> Dict[str, Outcome]:
    """Run each optional evaluator whose inputs are present, in a fixed order."""
    dual_missing = (
        [] if data.medicare_part_a or data.medicare_part_b
        else ["medicare_part_a or medicare_part_b"]
    )
    plan = (
        ("magi-calculator", _missing(data, "gross_monthly_income"),
         lambda: _run_magi(data)),
        ("medicare-age", _missing(data, "date_of_birth"),
         lambda: _run_medicare_age(data)),
        ("presumptive-eligibility", _missing(data, "is_qualified_hpe_entity", "patient_category"),
         lambda: _run_presumptive(data, as_of)),
        ("retroactive-coverage", _missing(data, "application_date"),
         lambda: _run_retroactive(data, medicaid)),
        ("charity-care-501r", _missing(data, "hospital_fap_policy", "gross_monthly_income"),
         lambda: _run_charity_care(data, as_of)),
        ("dual-eligible", dual_missing,
         lambda: _run_dual_eligible(data)),
        ("denial-management", [] if data.denial_code else ["denial_code"],
         lambda: _run_denial(data, as_of)),
        ("dsh-audit", _missing(data, "dsh_audit"),
         lambda: calculate_dsh_audit(data.dsh_audit, as_of)),
    )
    return {name: run_evaluator(name, missing, runner) for name, missing, runner in plan}


def calculate_projected_recovery(
    data: RecoveryInput,
    medicaid: MedicaidRecoveryResult,
    state_program: StateProgramResult,
    retroactive: Optional[RetroactiveCoverageResult] = None,
    charity_care: Optional[CharityCareResult] = None,
) -> ProjectedRecovery:
    """
    Split projected recovery between Medicaid, state programs and write-off.

    Medicaid counts in full when confirmed and at a discount when likely or
    possible; retroactive coverage replaces it only when larger. State
    program money is counted only without confirmed Medicaid.
    """
    charges = data.total_charges

    medicaid_recovery = 0.0
    if medicaid.status == MedicaidRecoveryStatus.CONFIRMED:
        medicaid_recovery = medicaid.estimated_recovery
    elif medicaid.status == MedicaidRecoveryStatus.LIKELY:
        medicaid_recovery = medicaid.estimated_recovery * LIKELY_MEDICAID_FACTOR
    elif medicaid.status == MedicaidRecoveryStatus.POSSIBLE:
        medicaid_recovery = medicaid.estimated_recovery * POSSIBLE_MEDICAID_FACTOR

    if retroactive is not None and retroactive.is_within_window and retroactive.estimated_recovery > 0:
        medicaid_recovery = max(medicaid_recovery, retroactive.estimated_recovery)

    state_recovery = 0.0
    if medicaid.status != MedicaidRecoveryStatus.CONFIRMED and state_program.eligibility_likely:
        state_recovery = (
            charges
            * (state_program.estimated_recovery_percent / 100)
            * (state_program.confidence / 100)
        )

    writeoff = max(0.0, charges - medicaid_recovery - state_recovery)
    if charity_care is not None and charity_care.discount_percentage > 0:
        writeoff = charges * (charity_care.discount_percentage / 100)

    return ProjectedRecovery(
        medicaid=round_money(medicaid_recovery),
        state_program=round_money(state_recovery),
        charity_writeoff=round_money(writeoff * CHARITY_WRITEOFF_REPORTING_FACTOR),
        total=round_money(medicaid_recovery + state_recovery),
    )


def determine_primary_path(
    medicaid: MedicaidRecoveryResult,
    medicare: MedicareRecoveryResult,
    state_program: StateProgramResult,
    dual_eligible: Optional[DualEligibleResult] = None,
    presumptive: Optional[PresumptiveEligibilityResult] = None,
    medicare_age: Optional[MedicareAgeResult] = None,
) -> str:
    if dual_eligible is not None and dual_eligible.is_dual_eligible:
        return f"Dual Eligible Coordination ({dual_eligible.dual_category.value})"
    if medicaid.status == MedicaidRecoveryStatus.CONFIRMED:
        return "Medicaid Direct Billing"
    if medicare.status == MedicareRecoveryStatus.ACTIVE_ON_DOS:
        return "Medicare Direct Billing"
    if presumptive is not None and presumptive.can_grant_pe:
        return "Presumptive Eligibility"
    if medicaid.status == MedicaidRecoveryStatus.LIKELY:
        return "Medicaid Application/Retroactive"
    if medicare_age is not None and medicare_age.is_eligible:
        return "Medicare Eligibility (Age-Based)"
    if state_program.eligibility_likely:
        return f"State Program: {state_program.program_name}"
    if medicaid.status == MedicaidRecoveryStatus.POSSIBLE:
        return "Medicaid Exploration"
    return "Financial Assistance Screening"


def generate_priority_actions(
    medicaid: MedicaidRecoveryResult,
    medicare: MedicareRecoveryResult,
    dsh: DSHRelevanceResult,
    state_program: StateProgramResult,
    presumptive: Optional[PresumptiveEligibilityResult] = None,
    retroactive: Optional[RetroactiveCoverageResult] = None,
    charity_care: Optional[CharityCareResult] = None,
    dual_eligible: Optional[DualEligibleResult] = None,
    denial: Optional[DenialAnalysisResult] = None,
) -> List[str]:
    """Collect actions across pathways, most time-sensitive first, without repeats."""
    actions: List[str] = []

    if dual_eligible is not None and dual_eligible.is_dual_eligible:
        actions.extend(step.instruction for step in dual_eligible.billing_instructions[:2])

    if denial is not None and denial.is_appealable:
        actions.extend(denial.actions[:2])

    if presumptive is not None and presumptive.can_grant_pe:
        actions.extend(presumptive.required_actions[:2])

    if medicaid.status in (MedicaidRecoveryStatus.CONFIRMED, MedicaidRecoveryStatus.LIKELY):
        actions.extend(medicaid.actions[:2])

    if medicare.status == MedicareRecoveryStatus.ACTIVE_ON_DOS:
        actions.extend(medicare.actions[:1])

    if retroactive is not None and retroactive.is_within_window:
        actions.append(
            "Submit Medicaid application for retroactive coverage "
            f"(window: {retroactive.retroactive_window_days} days)"
        )

    if state_program.eligibility_likely:
        actions.extend(state_program.actions[:2])

    if charity_care is not None and charity_care.compliance_status != ComplianceStatus.COMPLIANT:
        actions.extend(charity_care.actions[:1])

    if dsh.relevance == RelevanceLevel.HIGH:
        actions.append("Document encounter for DSH reporting requirements")

    return _dedupe(actions)


def calculate_overall_confidence(
    medicaid: MedicaidRecoveryResult,
    medicare: MedicareRecoveryResult,
    dsh: DSHRelevanceResult,
    state_program: StateProgramResult,
    magi: Optional[MAGIResult] = None,
    presumptive: Optional[PresumptiveEligibilityResult] = None,
    dual_eligible: Optional[DualEligibleResult] = None,
) -> int:
    """
    Blend pathway confidences into one score in [0, 100].

    Confirmed Medicaid at 90+ dominates the blend; otherwise Medicaid and the
    state program share the weight. Income, presumptive and dual-eligible
    signals then add fixed boosts.
    """
    if medicaid.status == MedicaidRecoveryStatus.CONFIRMED and medicaid.confidence >= 90:
        confidence = round_money(
            medicaid.confidence * 0.7 + dsh.score * 0.2 + medicare.confidence * 0.1
        )
    else:
        confidence = round_money(
            medicaid.confidence * 0.4
            + state_program.confidence * 0.3
            + dsh.score * 0.2
            + medicare.confidence * 0.1
        )

    if magi is not None and magi.is_income_eligible:
        confidence += MAGI_ELIGIBLE_BOOST
    if (
        presumptive is not None
        and presumptive.can_grant_pe
        and presumptive.confidence > PRESUMPTIVE_BOOST_MIN_CONFIDENCE
    ):
        confidence += PRESUMPTIVE_BOOST
    if dual_eligible is not None and dual_eligible.is_dual_eligible:
        confidence += DUAL_ELIGIBLE_BOOST

    return max(0, min(100, confidence))


def generate_documentation_list(
    data: RecoveryInput,
    medicaid: MedicaidRecoveryResult,
    state_program: StateProgramResult,
    retroactive: Optional[RetroactiveCoverageResult] = None,
) -> List[str]:
    docs = [
        "Patient identification",
        "Date of service documentation",
        "Service/encounter records",
    ]

    if medicaid.status != MedicaidRecoveryStatus.UNLIKELY or state_program.eligibility_likely:
        docs.append("Income verification (pay stubs, tax return, benefit statements)")
        docs.append("Household composition documentation")

    docs.append("Insurance status verification as of date of service")

    if retroactive is not None and retroactive.is_within_window:
        docs.append("Proof of eligibility during retroactive period")

    docs.extend(state_program.required_documents)

    if data.ssi_eligibility_likely or data.ssdi_eligibility_likely:
        docs.append("Medical records supporting disability")
        docs.append("Physician statement on functional limitations")

    if data.date_of_birth is not None:
        docs.append("Birth certificate or proof of age")

    return _dedupe(docs)


def evaluate(data: RecoveryInput, as_of: Optional[DateLike] = None) -> RecoveryResult:
    """
    Evaluate every recovery pathway for one encounter.

    The four core evaluators always run. Optional evaluators run when their
    input fields are present; a failure in one is recorded and the rest
    continue.

    Args:
        data: Encounter facts
        as_of: Evaluation date for clock-dependent evaluators (default today)

    Returns:
        RecoveryResult
    """
    as_of = resolve_as_of(as_of)

    medicaid = evaluate_medicaid(data)
    medicare = evaluate_medicare(data)
    dsh = evaluate_dsh_relevance(data)
    state_program = evaluate_state_program(data)

    outcomes = run_optional_evaluators(data, medicaid, as_of)
    magi = value_of(outcomes["magi-calculator"])
    medicare_age = value_of(outcomes["medicare-age"])
    presumptive = value_of(outcomes["presumptive-eligibility"])
    retroactive = value_of(outcomes["retroactive-coverage"])
    charity_care = value_of(outcomes["charity-care-501r"])
    dual_eligible = value_of(outcomes["dual-eligible"])
    denial = value_of(outcomes["denial-management"])
    dsh_audit = value_of(outcomes["dsh-audit"])

    projected = calculate_projected_recovery(
        data, medicaid, state_program, retroactive, charity_care
    )
    primary_path = determine_primary_path(
        medicaid, medicare, state_program, dual_eligible, presumptive, medicare_age
    )
    priority_actions = generate_priority_actions(
        medicaid, medicare, dsh, state_program,
        presumptive, retroactive, charity_care, dual_eligible, denial,
    )
    confidence = calculate_overall_confidence(
        medicaid, medicare, dsh, state_program, magi, presumptive, dual_eligible
    )

    engine_errors = error_messages(outcomes)
    logger.info(
        f"Recovery evaluated: {primary_path} (confidence {confidence}, "
        f"projected ${projected.total:,}, {len(engine_errors)} evaluator errors)"
    )

    return RecoveryResult(
        primary_recovery_path=primary_path,
        overall_confidence=confidence,
        estimated_total_recovery=projected.total,
        priority_actions=priority_actions,
        medicaid=medicaid,
        medicare=medicare,
        dsh_relevance=dsh,
        state_program=state_program,
        magi_result=magi,
        medicare_age_result=medicare_age,
        presumptive_eligibility=presumptive,
        retroactive_coverage=retroactive,
        charity_care_compliance=charity_care,
        dsh_audit_metrics=dsh_audit,
        denial_analysis=denial,
        dual_eligible_status=dual_eligible,
        current_exposure=data.total_charges,
        projected_recovery=projected,
        immediate_actions=priority_actions[:IMMEDIATE_ACTION_COUNT],
        follow_up_actions=priority_actions[IMMEDIATE_ACTION_COUNT:],
        documentation_needed=generate_documentation_list(data, medicaid, state_program, retroactive),
        outcomes=outcomes,
        engines_loaded=list(CORE_EVALUATORS) + loaded_names(outcomes),
        engine_errors=engine_errors,
    )
