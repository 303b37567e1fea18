"""DSH relevance scoring for a single encounter (DSH1-DSH3)."""

from typing import List, NamedTuple
import logging

from common.enums import (
    AuditReadiness,
    BenefitStatus,
    EncounterType,
    FacilityType,
    FactorImpact,
    IncomeLevel,
    InsuranceStatus,
    MedicaidStatus,
    RelevanceLevel,
)
from services.recovery.schemas import RecoveryInput
from services.reference.income_thresholds import is_income_below_threshold

logger = logging.getLogger(__name__)

HIGH_RELEVANCE_SCORE = 60
MEDIUM_RELEVANCE_SCORE = 30


class DSHRelevanceFactor(NamedTuple):
    """One contribution to the DSH relevance score."""

    factor: str
    impact: FactorImpact
    weight: int


class DSHRelevanceResult(NamedTuple):
    """DSH utilization signal for an encounter."""

    relevance: RelevanceLevel
    score: int  # 0-100
    factors: List[DSHRelevanceFactor]
    audit_readiness: AuditReadiness
    notes: List[str]


def evaluate_dsh_relevance(data: RecoveryInput) -> DSHRelevanceResult:
    """
    Score how much an encounter contributes to DSH utilization metrics.

    Additive: inpatient days (3 points per day, capped at 25, plus 10 for
    stays of 7+ days), Medicaid linkage (25), SSI linkage (20), uninsured
    low income (15, or 5 above 200% FPL), DSH or safety-net facility (10).
    """
    factors: List[DSHRelevanceFactor] = []
    notes: List[str] = []
    score = 0

    # DSH1 - inpatient days
    if data.encounter_type == EncounterType.INPATIENT:
        if data.length_of_stay and data.length_of_stay >= 1:
            los_weight = min(data.length_of_stay * 3, 25)
            score += los_weight
            factors.append(DSHRelevanceFactor(
                f"Inpatient stay: {data.length_of_stay} days", FactorImpact.POSITIVE, los_weight
            ))
            notes.append("Inpatient days are central to DSH-related utilization metrics")

            if data.length_of_stay >= 7:
                score += 10
                factors.append(DSHRelevanceFactor(
                    "Extended length of stay (7+ days)", FactorImpact.POSITIVE, 10
                ))
    else:
        factors.append(DSHRelevanceFactor(
            f"Non-inpatient encounter ({data.encounter_type.value})", FactorImpact.NEUTRAL, 0
        ))
        notes.append(
            "ED/outpatient/observation contributes to low-income care profile "
            "but weaker for DSH metrics"
        )

    # DSH2 - Medicaid / SSI linkage
    if data.medicaid_status in (MedicaidStatus.ACTIVE, MedicaidStatus.PENDING):
        score += 25
        factors.append(DSHRelevanceFactor(
            f"Medicaid {data.medicaid_status.value}", FactorImpact.POSITIVE, 25
        ))
        notes.append("Medicaid status directly impacts DSH utilization calculations")

    if (
        data.ssi_status in (BenefitStatus.RECEIVING, BenefitStatus.PENDING)
        or data.ssi_eligibility_likely
    ):
        score += 20
        factors.append(DSHRelevanceFactor(
            "SSI recipient/likely - explicit DSH utilization component", FactorImpact.POSITIVE, 20
        ))
        notes.append("SSI is explicitly part of DSH-related utilization constructs")

    # DSH3 - uninsured low income
    if data.insurance_status_on_dos == InsuranceStatus.UNINSURED:
        if is_income_below_threshold(data.household_income, IncomeLevel.FPL_200):
            score += 15
            factors.append(DSHRelevanceFactor(
                "Uninsured + low income (<200% FPL)", FactorImpact.POSITIVE, 15
            ))
            notes.append("Uninsured low-income care contributes to safety-net profile")
        else:
            score += 5
            factors.append(DSHRelevanceFactor(
                "Uninsured (income above 200% FPL)", FactorImpact.NEUTRAL, 5
            ))

    if data.facility_type in (FacilityType.DSH_HOSPITAL, FacilityType.SAFETY_NET):
        score += 10
        factors.append(DSHRelevanceFactor(
            f"{data.facility_type.value} designation", FactorImpact.POSITIVE, 10
        ))

    score = max(0, min(score, 100))

    if score >= HIGH_RELEVANCE_SCORE:
        relevance = RelevanceLevel.HIGH
    elif score >= MEDIUM_RELEVANCE_SCORE:
        relevance = RelevanceLevel.MEDIUM
    else:
        relevance = RelevanceLevel.LOW

    if (
        data.encounter_type == EncounterType.INPATIENT
        and data.length_of_stay
        and data.medicaid_status != MedicaidStatus.UNKNOWN
    ):
        audit_readiness = AuditReadiness.STRONG
    elif data.insurance_status_on_dos and data.household_income:
        audit_readiness = AuditReadiness.MODERATE
    else:
        audit_readiness = AuditReadiness.WEAK

    notes.append(
        "DSH-relevant utilization indicators assessed - "
        "DSH is a hospital qualification/payment program"
    )

    return DSHRelevanceResult(
        relevance=relevance,
        score=score,
        factors=factors,
        audit_readiness=audit_readiness,
        notes=notes,
    )
