"""Hospital-level DSH metrics and audit preparation."""

from datetime import date
from typing import List, NamedTuple
import logging

from common.dates import round_half_up, safe_divide
from common.enums import DSHFacilityClass
from services.recovery.schemas import DSHAuditInput

logger = logging.getLogger(__name__)

# DPP must exceed this for every facility class
DSH_MINIMUM_DPP = {
    DSHFacilityClass.URBAN: 0.15,
    DSHFacilityClass.RURAL: 0.15,
    DSHFacilityClass.SOLE_COMMUNITY: 0.15,
    DSHFacilityClass.CRITICAL_ACCESS: 0.15,
}

# Split of uncategorized uncompensated care on Worksheet S-10
NON_MEDICARE_UNINSURED_SHARE = 0.6
OTHER_UNCOMPENSATED_SHARE = 0.4

AUDIT_LOOKBACK_YEARS = 5


class S10Categories(NamedTuple):
    charity_care: float
    bad_debt: float
    non_medicare_uninsured: float
    other_uncompensated: float


class WorksheetS10(NamedTuple):
    """Worksheet S-10 uncompensated care lines."""

    line1: float  # initial uncompensated care cost
    line2: float  # payments received against it
    line3: float  # net uncompensated care cost
    by_category: S10Categories


class DSHAuditResult(NamedTuple):
    """DPP, payment limit and audit readiness for a fiscal year."""

    ssi_ratio: float
    medicaid_ratio: float
    dpp: float
    qualifies_for_dsh: bool
    worksheet_s10: WorksheetS10
    hospital_specific_limit: float
    current_dsh_payments: float
    excess_payment_risk: float
    audit_readiness_score: int  # 0-100
    documentation_gaps: List[str]
    recommendations: List[str]


def calculate_ssi_fraction(medicare_ssi_days: float, medicare_part_a_days: float) -> float:
    return safe_divide(medicare_ssi_days, medicare_part_a_days)


def calculate_medicaid_fraction(
    medicaid_days: float, dual_eligible_days: float, total_patient_days: float
) -> float:
    """Medicaid share of patient days, excluding dual eligible days."""
    return safe_divide(max(0, medicaid_days - dual_eligible_days), total_patient_days)


def qualifies_for_dsh(dpp: float, facility_type: DSHFacilityClass) -> bool:
    return dpp > DSH_MINIMUM_DPP[facility_type]


def prepare_worksheet_s10(data: DSHAuditInput) -> WorksheetS10:
    line1 = data.uncompensated_care_costs
    line2 = 0  # payment reconciliation is not part of the cost report input
    line3 = line1 - line2

    categorized = data.charity_care_at_cost + data.bad_debt_at_cost
    other = max(0, data.uncompensated_care_costs - categorized)

    return WorksheetS10(
        line1=round_half_up(line1, 2),
        line2=round_half_up(line2, 2),
        line3=round_half_up(line3, 2),
        by_category=S10Categories(
            charity_care=round_half_up(data.charity_care_at_cost, 2),
            bad_debt=round_half_up(data.bad_debt_at_cost, 2),
            non_medicare_uninsured=round_half_up(other * NON_MEDICARE_UNINSURED_SHARE, 2),
            other_uncompensated=round_half_up(other * OTHER_UNCOMPENSATED_SHARE, 2),
        ),
    )


def identify_documentation_gaps(data: DSHAuditInput, as_of: date) -> List[str]:
    gaps: List[str] = []

    if data.total_patient_days == 0:
        gaps.append("Total patient days is zero - verify inpatient census data")
    if data.medicare_part_a_days == 0:
        gaps.append("Medicare Part A days is zero - verify Medicare enrollment verification")
    if data.medicaid_days == 0 and data.dual_eligible_days > 0:
        gaps.append("Medicaid days is zero but dual eligible days exist - data inconsistency")
    if data.dual_eligible_days > data.medicaid_days:
        gaps.append("Dual eligible days exceed Medicaid days - verify eligibility classification")
    if data.dual_eligible_days > data.medicare_part_a_days:
        gaps.append(
            "Dual eligible days exceed Medicare Part A days - verify eligibility classification"
        )
    if data.medicare_ssi_days > data.medicare_part_a_days:
        gaps.append("Medicare SSI days exceed Medicare Part A days - verify SSI matching")
    if data.uncompensated_care_costs == 0:
        gaps.append(
            "Uncompensated care costs is zero - verify charity care and bad debt reporting"
        )
    if data.charity_care_at_cost == 0 and data.bad_debt_at_cost == 0:
        gaps.append(
            "No charity care or bad debt recorded - may require financial assistance policy review"
        )
    if data.uncompensated_care_costs < data.charity_care_at_cost + data.bad_debt_at_cost:
        gaps.append(
            "Uncompensated care total less than sum of components - reconciliation needed"
        )
    if data.total_operating_costs == 0:
        gaps.append("Total operating costs is zero - verify cost report completion")
    if data.dsh_payments_received > 0 and data.uncompensated_care_costs == 0:
        gaps.append(
            "DSH payments received but no uncompensated care reported - high audit risk"
        )
    if not as_of.year - AUDIT_LOOKBACK_YEARS <= data.fiscal_year <= as_of.year + 1:
        gaps.append(f"Fiscal year {data.fiscal_year} may be outside typical audit period")

    return gaps


def calculate_audit_readiness_score(
    data: DSHAuditInput, gaps: List[str], ssi_ratio: float, medicaid_ratio: float
) -> int:
    score = 100 - len(gaps) * 10

    if data.total_patient_days == 0:
        score -= 20
    if data.medicare_part_a_days == 0:
        score -= 15
    if data.uncompensated_care_costs == 0 and data.dsh_payments_received > 0:
        score -= 25

    if ssi_ratio > 0.5:
        score -= 5
    if medicaid_ratio > 0.8:
        score -= 5

    if data.total_operating_costs > 0 and data.medicaid_payments > 0 and data.medicare_payments > 0:
        score += 5

    return max(0, min(100, score))


def build_recommendations(
    qualifies: bool, excess_payment_risk: float, gaps: List[str], score: int
) -> List[str]:
    recommendations: List[str] = []
    if excess_payment_risk > 0:
        recommendations.append(
            "DSH payments exceed hospital-specific limit - prepare for potential recoupment"
        )
    if not qualifies:
        recommendations.append(
            "DPP does not exceed 15% - confirm eligibility before claiming DSH payments"
        )
    if gaps:
        recommendations.append("Resolve documentation gaps before audit submission")
    if score < 70:
        recommendations.append("Schedule internal DSH audit review with finance and compliance")
    if not recommendations:
        recommendations.append("Retain patient-day and S-10 supporting detail for audit")
    return recommendations


def calculate_dsh_audit(data: DSHAuditInput, as_of: date) -> DSHAuditResult:
    """
    Compute the disproportionate patient percentage and audit readiness.

    DPP is the SSI fraction (SSI days over Medicare Part A days) plus the
    Medicaid fraction (non-dual Medicaid days over total patient days). The
    hospital-specific payment limit equals uncompensated care cost.
    """
    ssi_ratio = calculate_ssi_fraction(data.medicare_ssi_days, data.medicare_part_a_days)
    medicaid_ratio = calculate_medicaid_fraction(
        data.medicaid_days, data.dual_eligible_days, data.total_patient_days
    )
    dpp = ssi_ratio + medicaid_ratio
    qualifies = qualifies_for_dsh(dpp, data.facility_type)

    hospital_specific_limit = data.uncompensated_care_costs
    excess_payment_risk = max(0, data.dsh_payments_received - hospital_specific_limit)

    gaps = identify_documentation_gaps(data, as_of)
    score = calculate_audit_readiness_score(data, gaps, ssi_ratio, medicaid_ratio)
    if gaps:
        logger.debug(f"DSH audit FY{data.fiscal_year}: {len(gaps)} documentation gaps")

    rounded_ssi = round_half_up(ssi_ratio, 6)
    rounded_medicaid = round_half_up(medicaid_ratio, 6)

    return DSHAuditResult(
        ssi_ratio=rounded_ssi,
        medicaid_ratio=rounded_medicaid,
        dpp=rounded_ssi + rounded_medicaid,
        qualifies_for_dsh=qualifies,
        worksheet_s10=prepare_worksheet_s10(data),
        hospital_specific_limit=round_half_up(hospital_specific_limit, 2),
        current_dsh_payments=round_half_up(data.dsh_payments_received, 2),
        excess_payment_risk=round_half_up(excess_payment_risk, 2),
        audit_readiness_score=score,
        documentation_gaps=gaps,
        recommendations=build_recommendations(qualifies, excess_payment_risk, gaps, score),
    )
