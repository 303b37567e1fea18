"""Unit tests for DSH relevance scoring."""

import pytest
from services.compliance.dsh_relevance import evaluate_dsh_relevance
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


class TestDSHRelevance:
    """Test additive DSH scoring."""

    def test_high_relevance_inpatient(self, make_encounter):
        """Long Medicaid/SSI inpatient stay at a DSH hospital scores high."""
        result = evaluate_dsh_relevance(make_encounter(
            encounter_type=EncounterType.INPATIENT,
            length_of_stay=10,
            medicaid_status=MedicaidStatus.ACTIVE,
            ssi_status=BenefitStatus.RECEIVING,
            facility_type=FacilityType.DSH_HOSPITAL,
        ))
        assert result.score == 25 + 10 + 25 + 20 + 10
        assert result.relevance == RelevanceLevel.HIGH
        assert result.audit_readiness == AuditReadiness.STRONG

    def test_inpatient_days_capped(self, make_encounter):
        """Inpatient days add 3 points per day up to 25."""
        short = evaluate_dsh_relevance(make_encounter(
            encounter_type=EncounterType.INPATIENT, length_of_stay=2
        ))
        assert short.score == 6
        assert short.relevance == RelevanceLevel.LOW

    def test_non_inpatient_is_neutral(self, make_encounter):
        """ED encounters contribute no inpatient points."""
        result = evaluate_dsh_relevance(make_encounter(encounter_type=EncounterType.ED))
        assert result.score == 0
        assert result.factors[0].impact == FactorImpact.NEUTRAL

    def test_uninsured_income_split(self, make_encounter):
        """Uninsured low income adds 15; above 200% FPL only 5."""
        low = evaluate_dsh_relevance(make_encounter(
            insurance_status_on_dos=InsuranceStatus.UNINSURED,
            household_income=IncomeLevel.FPL_138,
        ))
        high = evaluate_dsh_relevance(make_encounter(
            insurance_status_on_dos=InsuranceStatus.UNINSURED,
            household_income=IncomeLevel.FPL_300,
        ))
        assert low.score == 15
        assert high.score == 5
        assert high.factors[-1].impact == FactorImpact.NEUTRAL

    @pytest.mark.parametrize(
        "facility_type,points",
        [
            (FacilityType.DSH_HOSPITAL, 10),
            (FacilityType.SAFETY_NET, 10),
            (FacilityType.PUBLIC_HOSPITAL, 0),
            (FacilityType.STANDARD, 0),
        ],
    )
    def test_facility_designation(self, make_encounter, facility_type, points):
        """Only DSH and safety-net designations add points."""
        result = evaluate_dsh_relevance(make_encounter(facility_type=facility_type))
        assert result.score == points

    def test_medium_relevance(self, make_encounter):
        """Medicaid pending alone scores medium at 30+ with a facility bonus."""
        result = evaluate_dsh_relevance(make_encounter(
            medicaid_status=MedicaidStatus.PENDING, facility_type=FacilityType.SAFETY_NET
        ))
        assert result.score == 35
        assert result.relevance == RelevanceLevel.MEDIUM

    def test_unknown_medicaid_is_not_strong(self, make_encounter):
        """Strong readiness needs a known Medicaid status."""
        result = evaluate_dsh_relevance(make_encounter(
            encounter_type=EncounterType.INPATIENT,
            length_of_stay=4,
            medicaid_status=MedicaidStatus.UNKNOWN,
        ))
        assert result.audit_readiness == AuditReadiness.MODERATE

    def test_score_bounds(self, make_encounter):
        """Score is always within [0, 100]."""
        result = evaluate_dsh_relevance(make_encounter(
            encounter_type=EncounterType.INPATIENT,
            length_of_stay=30,
            medicaid_status=MedicaidStatus.ACTIVE,
            ssi_eligibility_likely=True,
            insurance_status_on_dos=InsuranceStatus.UNINSURED,
            household_income=IncomeLevel.UNDER_FPL,
            facility_type=FacilityType.SAFETY_NET,
        ))
        assert 0 <= result.score <= 100
