"""Unit tests for dual eligible coordination."""

from datetime import date

import pytest
from services.eligibility.dual_eligible import (
    DualEligibleInput,
    can_balance_bill,
    determine_dual_category,
    evaluate_dual_eligible,
    get_crossover_requirements,
    is_qmb_beneficiary,
)
from common.enums import (
    DualCategory,
    DualMedicaidStatus,
    EnrollmentStatus,
    MedicaidScope,
    PrimaryPayer,
)


def _dual(**overrides):
    values = dict(
        date_of_service=date(2024, 5, 10),
        medicare_part_a=EnrollmentStatus.ENROLLED,
        medicare_part_b=EnrollmentStatus.ENROLLED,
        medicare_part_d=EnrollmentStatus.NOT_ENROLLED,
        medicaid_status=DualMedicaidStatus.ACTIVE,
        medicaid_state="OH",
    )
    values.update(overrides)
    return DualEligibleInput(**values)


class TestDualCategory:
    """Test category classification."""

    def test_full_dual_billing_sequence(self):
        """Full duals bill Medicare, cross over, and protect the patient."""
        result = evaluate_dual_eligible(_dual(medicaid_scope_of_benefits=MedicaidScope.FULL))
        assert result.dual_category == DualCategory.FULL_DUAL
        assert result.primary_payer == PrimaryPayer.MEDICARE
        assert result.secondary_payer == "medicaid"
        assert result.medicaid_covers_cost_sharing is True
        assert [step.instruction for step in result.billing_instructions] == [
            "Bill Medicare as primary payer",
            "Submit crossover claim to Medicaid for cost-sharing",
            "Do NOT bill patient for Medicare cost-sharing",
        ]

    @pytest.mark.parametrize(
        "income,expected",
        [
            (1275, DualCategory.FULL_DUAL),
            (1500, DualCategory.SLMB_ONLY),
            (1715, DualCategory.QI),
            (2500, DualCategory.PARTIAL_DUAL),
            (None, DualCategory.PARTIAL_DUAL),
        ],
    )
    def test_income_bands(self, income, expected):
        """Without an explicit scope, monthly income decides."""
        assert determine_dual_category(_dual(monthly_income=income)) == expected

    def test_scope_wins_over_income(self):
        assert determine_dual_category(
            _dual(medicaid_scope_of_benefits=MedicaidScope.SLMB, monthly_income=500)
        ) == DualCategory.SLMB_ONLY

    @pytest.mark.parametrize(
        "overrides",
        [
            {"medicaid_status": DualMedicaidStatus.PENDING},
            {"medicaid_status": DualMedicaidStatus.INACTIVE},
            {
                "medicare_part_a": EnrollmentStatus.NOT_ENROLLED,
                "medicare_part_b": EnrollmentStatus.PENDING,
            },
        ],
    )
    def test_not_dual(self, overrides):
        """Both programs must be in force."""
        result = evaluate_dual_eligible(_dual(**overrides))
        assert result.is_dual_eligible is False
        assert result.secondary_payer is None
        assert result.actions[0] == "Patient is not dual-eligible - bill single payer"

    def test_spend_down_counts(self):
        result = evaluate_dual_eligible(_dual(medicaid_status=DualMedicaidStatus.SPEND_DOWN))
        assert result.is_dual_eligible is True
        assert "Track patient spend-down status for Medicaid activation" in result.actions


class TestPayerOrder:
    """Test primary payer and billing instructions."""

    def test_pace_is_primary(self):
        result = evaluate_dual_eligible(_dual(has_pace=True, has_medicare_advantage=True))
        assert result.primary_payer == PrimaryPayer.PACE
        assert len(result.billing_instructions) == 1
        assert result.billing_instructions[0].payer == "PACE"

    def test_dsnp_bills_plan(self):
        """D-SNP members bill the MA plan first."""
        result = evaluate_dual_eligible(_dual(has_dsnp=True, medicaid_scope_of_benefits=MedicaidScope.QMB))
        assert result.primary_payer == PrimaryPayer.MEDICARE_ADVANTAGE
        assert result.billing_instructions[0].instruction == "Bill Medicare Advantage plan as primary"

    def test_partial_dual_billing(self):
        result = evaluate_dual_eligible(_dual(medicaid_scope_of_benefits=MedicaidScope.LIMITED))
        assert result.billing_instructions[1].instruction == (
            "Bill Medicaid for Medicaid-only covered services"
        )
        assert result.medicaid_covers_premiums is False

    def test_medicaid_primary_without_medicare(self):
        result = evaluate_dual_eligible(_dual(
            medicare_part_a=EnrollmentStatus.NOT_ENROLLED,
            medicare_part_b=EnrollmentStatus.NOT_ENROLLED,
        ))
        assert result.primary_payer == PrimaryPayer.MEDICAID

    def test_part_d_benefits_and_lis_screen(self):
        result = evaluate_dual_eligible(_dual(medicare_part_d=EnrollmentStatus.ENROLLED))
        assert "Prescription drugs" in result.medicare_covered_benefits
        assert "Screen for Low-Income Subsidy (Extra Help) eligibility" in result.actions


class TestHelpers:
    """Test QMB and crossover helpers."""

    def test_qmb_cannot_be_balance_billed(self):
        data = _dual(medicaid_scope_of_benefits=MedicaidScope.QMB)
        assert is_qmb_beneficiary(data) is True
        assert can_balance_bill(data) is False

    def test_qi_can_be_balance_billed(self):
        assert can_balance_bill(_dual(medicaid_scope_of_benefits=MedicaidScope.QI)) is True

    def test_crossover(self):
        manual = get_crossover_requirements(_dual(medicaid_scope_of_benefits=MedicaidScope.FULL))
        automatic = get_crossover_requirements(
            _dual(medicaid_scope_of_benefits=MedicaidScope.LIMITED, has_medicare_advantage=True)
        )
        none = get_crossover_requirements(_dual(medicaid_scope_of_benefits=MedicaidScope.SLMB))
        assert manual == (True, False)
        assert automatic == (True, True)
        assert none.required is False
