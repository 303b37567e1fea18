"""Unit tests for hospital presumptive eligibility."""

from datetime import date

import pytest
from services.eligibility.presumptive import (
    calculate_coverage_end_date,
    evaluate_presumptive_eligibility,
    get_pe_income_threshold,
)
from services.reference.hpe_programs import get_hpe_state_counts, state_has_hpe_program
from common.enums import PatientCategory

APPLICATION = date(2024, 6, 15)


class TestPresumptiveEligibility:
    """Test the ordered PE checks."""

    def test_granted(self):
        """A qualified hospital in California can grant adult PE."""
        result = evaluate_presumptive_eligibility(
            True, PatientCategory.ADULT, 1000, 1, "CA", APPLICATION
        )
        assert result.can_grant_pe is True
        assert result.confidence == 100
        assert result.denial_reason is None
        assert result.temporary_coverage_start == APPLICATION
        assert result.temporary_coverage_end == date(2024, 7, 31)
        assert result.full_application_deadline == date(2024, 8, 14)
        assert result.income_threshold_used == 20783
        assert result.monthly_income_threshold == 1732
        assert result.required_actions[0].startswith("Submit full Medicaid application within 60 days")

    def test_not_qualified_entity(self):
        """Unqualified hospitals cannot grant PE regardless of income."""
        result = evaluate_presumptive_eligibility(
            False, PatientCategory.CHILD, 0, 3, "CA", APPLICATION
        )
        assert result.can_grant_pe is False
        assert result.confidence == 95
        assert result.denial_reason == "Hospital is not a qualified HPE entity"

    def test_no_state_program(self):
        """Texas does not run adult HPE."""
        result = evaluate_presumptive_eligibility(
            True, PatientCategory.ADULT, 500, 1, "TX", APPLICATION
        )
        assert result.can_grant_pe is False
        assert result.confidence == 90
        assert result.denial_reason == "State TX does not have HPE program for adult category"

    def test_income_too_high(self):
        """Gross annual income over the limit is denied."""
        result = evaluate_presumptive_eligibility(
            True, PatientCategory.ADULT, 2000, 1, "CA", APPLICATION
        )
        assert result.can_grant_pe is False
        assert result.confidence == 85
        assert result.denial_reason == "Household income exceeds PE threshold"

    def test_pregnant_extra_documentation(self):
        """Pregnancy adds verification and postpartum notes."""
        result = evaluate_presumptive_eligibility(
            True, PatientCategory.PREGNANT, 1500, 2, "TX", APPLICATION
        )
        assert result.can_grant_pe is True
        assert result.confidence == 100
        assert "  - Pregnancy verification from healthcare provider" in result.required_actions
        assert result.full_application_deadline == date(2024, 7, 15)

    def test_default_deadline(self):
        """States without an override use 45 days."""
        result = evaluate_presumptive_eligibility(
            True, PatientCategory.CHILD, 100, 2, "OH", APPLICATION
        )
        assert result.full_application_deadline == date(2024, 7, 30)


class TestPresumptiveHelpers:
    """Test thresholds and state coverage."""

    @pytest.mark.parametrize(
        "application,expected",
        [
            (date(2024, 1, 31), date(2024, 2, 29)),
            (date(2024, 12, 1), date(2025, 1, 31)),
        ],
    )
    def test_coverage_end(self, application, expected):
        """Coverage ends on the last day of the following month."""
        assert calculate_coverage_end_date(application) == expected

    def test_child_threshold(self):
        """Children use 200% FPL."""
        assert get_pe_income_threshold(1, PatientCategory.CHILD) == 30120

    def test_state_coverage(self):
        """Adult HPE follows Medicaid expansion."""
        assert state_has_hpe_program("ca", PatientCategory.ADULT) is True
        assert state_has_hpe_program("TX", PatientCategory.ADULT) is False
        assert get_hpe_state_counts()[PatientCategory.PARENT_CARETAKER] == 16
