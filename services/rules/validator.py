"""Presumptive eligibility input validation."""

from datetime import date
from typing import Any, List, Mapping, NamedTuple
import logging
import re

from common.dates import to_date
from common.enums import PatientCategory

logger = logging.getLogger(__name__)


class PEValidationResult(NamedTuple):
    """Result of presumptive eligibility input validation."""

    valid: bool
    errors: List[str]


class PEInputValidator:
    """Validates raw presumptive eligibility fields before evaluation."""

    STATE_CODE_PATTERN = re.compile(r"^[A-Za-z]{2}$")

    VALID_CATEGORIES = frozenset(category.value for category in PatientCategory)

    @classmethod
    def validate_entity_flag(cls, value: Any) -> List[str]:
        """HPE qualification must be an explicit boolean."""
        if not isinstance(value, bool):
            return ["is_qualified_hpe_entity must be a boolean"]
        return []

    @classmethod
    def validate_patient_category(cls, value: Any) -> List[str]:
        if not value:
            return ["patient_category is required"]
        if getattr(value, "value", value) not in cls.VALID_CATEGORIES:
            return ["patient_category must be a valid category"]
        return []

    @classmethod
    def validate_income(cls, value: Any) -> List[str]:
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
            return ["gross_monthly_income must be a non-negative number"]
        return []

    @classmethod
    def validate_household_size(cls, value: Any) -> List[str]:
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            return ["household_size must be a positive integer"]
        return []

    @classmethod
    def validate_state_code(cls, value: Any) -> List[str]:
        if not isinstance(value, str) or not cls.STATE_CODE_PATTERN.match(value):
            return ["state_of_residence must be a 2-letter state code"]
        return []

    @classmethod
    def validate_application_date(cls, value: Any) -> List[str]:
        if isinstance(value, date):
            return []
        try:
            to_date(value)
        except (TypeError, ValueError):
            return ["application_date must be a valid date"]
        return []


def validate_pe_input(data: Mapping[str, Any]) -> PEValidationResult:
    """
    Validate presumptive eligibility fields.

    Accepts a partial mapping; every missing or malformed field adds one error.
    """
    errors: List[str] = []
    errors.extend(PEInputValidator.validate_entity_flag(data.get("is_qualified_hpe_entity")))
    errors.extend(PEInputValidator.validate_patient_category(data.get("patient_category")))
    errors.extend(PEInputValidator.validate_income(data.get("gross_monthly_income")))
    errors.extend(PEInputValidator.validate_household_size(data.get("household_size")))
    errors.extend(PEInputValidator.validate_state_code(data.get("state_of_residence")))
    errors.extend(PEInputValidator.validate_application_date(data.get("application_date")))

    if errors:
        logger.debug(f"Presumptive eligibility input rejected: {errors}")

    return PEValidationResult(valid=not errors, errors=errors)
