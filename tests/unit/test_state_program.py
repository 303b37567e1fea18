"""Unit tests for state program matching."""

from services.eligibility.state_program import evaluate_state_program
from services.reference.state_programs import (
    STATE_PROGRAM_MAP,
    get_state_program_mapping,
    get_states_by_archetype,
)
from common.enums import (
    EncounterType,
    IncomeLevel,
    InsuranceStatus,
    MedicaidStatus,
    StateProgramArchetype,
)


class TestStateProgram:
    """Test state program evaluation."""

    def test_in_state_low_income_uninsured(self, make_encounter):
        """California resident under 138% FPL is likely for the pool."""
        result = evaluate_state_program(make_encounter(
            state_of_residence="CA",
            state_of_service="CA",
            insurance_status_on_dos=InsuranceStatus.UNINSURED,
            household_income=IncomeLevel.UNDER_FPL,
        ))
        assert result.archetype == StateProgramArchetype.UC_POOL_1115
        assert result.eligibility_likely is True
        assert result.confidence == 100
        assert result.estimated_recovery_percent == 30
        assert "Proof of state residency" in result.required_documents

    def test_out_of_state_patient(self, make_encounter):
        """Residency requirement penalizes out-of-state patients."""
        result = evaluate_state_program(make_encounter(
            state_of_residence="NV",
            state_of_service="OH",
            household_income=IncomeLevel.FPL_200,
        ))
        assert result.confidence == 30 + 20 - 20 + 25
        assert any("out-of-state" in note for note in result.notes)

    def test_income_above_limit(self, make_encounter):
        """Income over the program limit is not likely."""
        result = evaluate_state_program(make_encounter(household_income=IncomeLevel.FPL_300))
        assert result.eligibility_likely is False
        assert any("exceed" in note for note in result.notes)

    def test_observation_limited(self, make_encounter):
        """Observation stays are outside mapped program coverage."""
        result = evaluate_state_program(make_encounter(
            encounter_type=EncounterType.OBSERVATION, household_income=IncomeLevel.UNDER_FPL
        ))
        assert any("limited coverage" in note for note in result.notes)

    def test_active_medicaid_never_likely(self, make_encounter):
        """Active Medicaid is billed first, so the program is not likely."""
        result = evaluate_state_program(make_encounter(
            medicaid_status=MedicaidStatus.ACTIVE, household_income=IncomeLevel.UNDER_FPL
        ))
        assert result.eligibility_likely is False
        assert any("bill Medicaid" in note for note in result.notes)

    def test_unmapped_state(self, make_encounter):
        """Unmapped states get research actions and no recovery estimate."""
        result = evaluate_state_program(make_encounter(state_of_service="ZZ"))
        assert result.archetype == StateProgramArchetype.UNKNOWN
        assert result.program_name == "ZZ State Program (not mapped)"
        assert result.estimated_recovery_percent == 0

    def test_confidence_bounds(self, make_encounter):
        """Confidence is clamped to [0, 100]."""
        result = evaluate_state_program(make_encounter(
            state_of_residence="NV", household_income=IncomeLevel.OVER_400_FPL
        ))
        assert 0 <= result.confidence <= 100


class TestStateProgramMap:
    """Test the reference map."""

    def test_all_jurisdictions_mapped(self):
        """Every state plus DC has a program."""
        assert len(STATE_PROGRAM_MAP) == 51

    def test_lookup_is_case_insensitive(self):
        """Lookups accept lower-case codes."""
        assert get_state_program_mapping("ma") == get_state_program_mapping("MA")

    def test_states_by_archetype(self):
        """Maryland is the all-payer pooling state."""
        assert get_states_by_archetype(StateProgramArchetype.ALL_PAYER_UC_POOLING) == ["MD"]
