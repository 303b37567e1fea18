"""Shared pytest fixtures and configuration."""

import pytest
from fastapi.testclient import TestClient
from datetime import date
from faker import Faker

from main import app
from services.recovery.schemas import RecoveryInput
from common.enums import (
    AssetLevel,
    BenefitStatus,
    EncounterType,
    FacilityType,
    IncomeLevel,
    InsuranceStatus,
    Likelihood,
    MedicaidStatus,
    MedicareStatus,
)

fake = Faker()

AS_OF = date(2024, 6, 15)


@pytest.fixture
def as_of():
    """Fixed evaluation date for clock-dependent evaluators."""
    return AS_OF


@pytest.fixture(scope="function")
def client():
    """Create a test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def encounter_data():
    """Baseline uninsured, low-income ED encounter with nothing pointing at a pathway."""
    return {
        "state_of_residence": "OH",
        "state_of_service": "OH",
        "facility_state": "OH",
        "date_of_service": date(2024, 5, 10).isoformat(),
        "encounter_type": EncounterType.ED.value,
        "length_of_stay": None,
        "total_charges": float(fake.pydecimal(left_digits=5, right_digits=2, positive=True)),
        "insurance_status_on_dos": InsuranceStatus.COMMERCIAL.value,
        "medicaid_status": MedicaidStatus.NEVER.value,
        "medicare_status": MedicareStatus.NONE.value,
        "ssi_status": BenefitStatus.NEVER_APPLIED.value,
        "ssdi_status": BenefitStatus.NEVER_APPLIED.value,
        "household_income": IncomeLevel.OVER_400_FPL.value,
        "household_size": fake.random_int(min=1, max=6),
        "estimated_assets": AssetLevel.OVER_10000.value,
        "disability_likelihood": Likelihood.LOW.value,
        "ssi_eligibility_likely": False,
        "ssdi_eligibility_likely": False,
        "facility_type": FacilityType.STANDARD.value,
        "emergency_service": False,
        "medically_necessary": True,
    }


@pytest.fixture
def make_encounter(encounter_data):
    """Build a RecoveryInput from the baseline with field overrides."""
    def _make(**overrides):
        data = dict(encounter_data)
        data.update(overrides)
        return RecoveryInput(**data)

    return _make
