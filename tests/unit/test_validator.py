"""Unit tests for presumptive eligibility input validation."""

from datetime import date

import pytest
from services.rules.validator import PEInputValidator, validate_pe_input
from common.enums import PatientCategory


@pytest.fixture
def valid_input():
    return {
        "is_qualified_hpe_entity": True,
        "patient_category": "adult",
        "gross_monthly_income": 1200.50,
        "household_size": 2,
        "state_of_residence": "CA",
        "application_date": "2024-06-15",
    }


class TestValidatePEInput:
    """Test whole-input validation."""

    def test_valid_input(self, valid_input):
        """A complete input has no errors."""
        result = validate_pe_input(valid_input)
        assert result.valid is True
        assert result.errors == []

    def test_empty_input_reports_every_field(self):
        """Each missing field contributes one error."""
        result = validate_pe_input({})
        assert result.valid is False
        assert result.errors == [
            "is_qualified_hpe_entity must be a boolean",
            "patient_category is required",
            "gross_monthly_income must be a non-negative number",
            "household_size must be a positive integer",
            "state_of_residence must be a 2-letter state code",
            "application_date must be a valid date",
        ]

    def test_enum_and_date_objects_accepted(self, valid_input):
        """Typed values pass as well as raw strings."""
        valid_input.update(
            patient_category=PatientCategory.PREGNANT, application_date=date(2024, 1, 1)
        )
        assert validate_pe_input(valid_input).valid is True


class TestPEInputValidator:
    """Test individual field validators."""

    @pytest.mark.parametrize("value", ["yes", 1, None])
    def test_entity_flag_must_be_bool(self, value):
        assert PEInputValidator.validate_entity_flag(value) != []

    def test_unknown_category(self):
        assert PEInputValidator.validate_patient_category("senior") == [
            "patient_category must be a valid category"
        ]

    @pytest.mark.parametrize("value", [-1, "100", True])
    def test_bad_income(self, value):
        assert PEInputValidator.validate_income(value) != []

    def test_zero_income_allowed(self):
        assert PEInputValidator.validate_income(0) == []

    @pytest.mark.parametrize("value,ok", [(3, True), (3.0, True), (2.5, False), (0, False)])
    def test_household_size(self, value, ok):
        assert (PEInputValidator.validate_household_size(value) == []) is ok

    @pytest.mark.parametrize("value", ["C", "CAL", "C1", 12])
    def test_bad_state_code(self, value):
        assert PEInputValidator.validate_state_code(value) != []

    def test_bad_date(self):
        assert PEInputValidator.validate_application_date("2024-13-40") == [
            "application_date must be a valid date"
        ]
