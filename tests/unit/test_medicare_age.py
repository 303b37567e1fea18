"""Unit tests for Medicare entitlement by age, ESRD, ALS and SSDI."""

from datetime import date

import pytest
from services.eligibility.medicare_age import (
    MedicareAgeInput,
    calculate_age_at_date,
    calculate_esrd_eligibility_date,
    evaluate_medicare_age,
    ssdi_enrollment_from_status,
)
from common.enums import BenefitStatus, SSDIEnrollment

DOS = date(2024, 6, 15)


class TestMedicareAge:
    """Test the entitlement pathways in priority order."""

    def test_age_65(self):
        """Patients 65+ are entitled from the first of their birth month."""
        result = evaluate_medicare_age(MedicareAgeInput(date(1958, 3, 20), DOS))
        assert result.is_eligible is True
        assert result.confidence == 98
        assert result.effective_date == date(2023, 3, 1)
        assert result.eligibility_reason.startswith("Age 66")

    def test_birthday_not_reached(self):
        """Age counts only completed birthdays."""
        assert calculate_age_at_date(date(1959, 6, 16), DOS) == 64
        assert calculate_age_at_date(date(1959, 6, 15), DOS) == 65

    def test_esrd_after_waiting_period(self):
        """Dialysis four months before DOS satisfies the wait."""
        result = evaluate_medicare_age(MedicareAgeInput(
            date(1980, 1, 1), DOS, has_esrd=True, dialysis_start_date=date(2024, 2, 10)
        ))
        assert result.is_eligible is True
        assert result.effective_date == date(2024, 5, 1)
        assert result.confidence == 92

    def test_esrd_within_waiting_period(self):
        """Recent dialysis is not yet entitled."""
        result = evaluate_medicare_age(MedicareAgeInput(
            date(1980, 1, 1), DOS, has_esrd=True, dialysis_start_date=date(2024, 5, 2)
        ))
        assert result.is_eligible is False
        assert result.confidence == 88
        assert result.actions[0] == "Patient 2 month(s) away from ESRD Medicare eligibility"

    def test_als_waives_wait(self):
        """ALS with SSDI is entitled on the SSDI effective date."""
        result = evaluate_medicare_age(MedicareAgeInput(
            date(1980, 1, 1),
            DOS,
            has_als=True,
            ssdi_status=SSDIEnrollment.RECEIVING,
            ssdi_effective_date=date(2024, 4, 1),
        ))
        assert result.is_eligible is True
        assert result.confidence == 95
        assert result.effective_date == date(2024, 4, 1)

    def test_als_pending(self):
        """ALS with SSDI pending is held."""
        result = evaluate_medicare_age(MedicareAgeInput(
            date(1980, 1, 1), DOS, has_als=True, ssdi_status=SSDIEnrollment.PENDING
        ))
        assert result.is_eligible is False
        assert result.confidence == 75

    def test_ssdi_after_24_months(self):
        """SSDI entitlement begins 24 months after the effective month."""
        result = evaluate_medicare_age(MedicareAgeInput(
            date(1980, 1, 1),
            DOS,
            ssdi_status=SSDIEnrollment.RECEIVING,
            ssdi_effective_date=date(2022, 5, 20),
        ))
        assert result.is_eligible is True
        assert result.effective_date == date(2024, 5, 1)
        assert result.confidence == 93

    def test_ssdi_waiting(self):
        """Inside the 24-month wait the patient is not entitled."""
        result = evaluate_medicare_age(MedicareAgeInput(
            date(1980, 1, 1),
            DOS,
            ssdi_status=SSDIEnrollment.RECEIVING,
            ssdi_effective_date=date(2023, 6, 1),
        ))
        assert result.is_eligible is False
        assert result.confidence == 90
        assert "12 months remaining" in result.eligibility_reason

    def test_not_eligible_near_65(self):
        """Patients within five years of 65 get a planning action."""
        result = evaluate_medicare_age(MedicareAgeInput(date(1962, 1, 1), DOS))
        assert result.is_eligible is False
        assert result.confidence == 95
        assert result.actions[-1] == (
            "Patient will qualify for age-based Medicare in approximately 3 year(s)"
        )

    def test_not_eligible_young(self):
        """Younger patients get no planning action."""
        result = evaluate_medicare_age(MedicareAgeInput(date(1990, 1, 1), DOS))
        assert not any("approximately" in action for action in result.actions)


class TestHelpers:
    """Test date helpers and status mapping."""

    def test_esrd_date_crosses_year(self):
        """Waiting period rolls into the next year."""
        assert calculate_esrd_eligibility_date(date(2023, 11, 15)) == date(2024, 2, 1)

    @pytest.mark.parametrize(
        "status,expected",
        [
            (BenefitStatus.RECEIVING, SSDIEnrollment.RECEIVING),
            (BenefitStatus.PENDING, SSDIEnrollment.PENDING),
            (BenefitStatus.DENIED, SSDIEnrollment.NONE),
            (None, SSDIEnrollment.NONE),
        ],
    )
    def test_ssdi_enrollment_from_status(self, status, expected):
        """Benefit statuses collapse to three SSDI states."""
        assert ssdi_enrollment_from_status(status) == expected
