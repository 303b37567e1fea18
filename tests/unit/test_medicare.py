"""Unit tests for the Medicare recovery pathway."""

from services.eligibility.medicare import evaluate_medicare
from common.enums import (
    BenefitStatus,
    EncounterType,
    Likelihood,
    MedicareRecoveryStatus,
    MedicareStatus,
)


class TestMedicareRecovery:
    """Test the Medicare rule tree."""

    def test_part_a_inpatient_active(self, make_encounter):
        """Part A covers an inpatient stay."""
        result = evaluate_medicare(make_encounter(
            medicare_status=MedicareStatus.ACTIVE_PART_A,
            encounter_type=EncounterType.INPATIENT,
            length_of_stay=3,
        ))
        assert result.status == MedicareRecoveryStatus.ACTIVE_ON_DOS
        assert result.confidence == 95

    def test_part_b_outpatient_active(self, make_encounter):
        """Part B covers ED and outpatient services."""
        result = evaluate_medicare(make_encounter(
            medicare_status=MedicareStatus.ACTIVE_PART_B, encounter_type=EncounterType.ED
        ))
        assert result.status == MedicareRecoveryStatus.ACTIVE_ON_DOS
        assert result.confidence == 90

    def test_part_b_inpatient_flags_part_a(self, make_encounter):
        """Part B alone does not cover an inpatient stay."""
        result = evaluate_medicare(make_encounter(
            medicare_status=MedicareStatus.ACTIVE_PART_B,
            encounter_type=EncounterType.INPATIENT,
        ))
        assert result.status != MedicareRecoveryStatus.ACTIVE_ON_DOS
        assert "Verify Part A enrollment status" in result.actions
        assert any("Part A needed" in note for note in result.notes)

    def test_part_b_inpatient_with_ssdi_keeps_flag(self, make_encounter):
        """The Part A warning survives into the SSDI pathway."""
        result = evaluate_medicare(make_encounter(
            medicare_status=MedicareStatus.ACTIVE_PART_B,
            encounter_type=EncounterType.INPATIENT,
            ssdi_status=BenefitStatus.RECEIVING,
        ))
        assert result.status == MedicareRecoveryStatus.FUTURE_LIKELY
        assert result.actions[0] == "Verify Part A enrollment status"

    def test_ssdi_receiving(self, make_encounter):
        """SSDI recipients are future likely at 85."""
        result = evaluate_medicare(make_encounter(ssdi_status=BenefitStatus.RECEIVING))
        assert result.status == MedicareRecoveryStatus.FUTURE_LIKELY
        assert result.confidence == 85

    def test_ssdi_pending(self, make_encounter):
        """Pending SSDI is future likely at 60."""
        result = evaluate_medicare(make_encounter(ssdi_status=BenefitStatus.PENDING))
        assert result.confidence == 60
        assert "36 months" in result.estimated_time_to_eligibility

    def test_ssdi_likely_needs_high_disability(self, make_encounter):
        """SSDI likelihood only counts with high disability likelihood."""
        high = evaluate_medicare(make_encounter(
            ssdi_eligibility_likely=True, disability_likelihood=Likelihood.HIGH
        ))
        low = evaluate_medicare(make_encounter(
            ssdi_eligibility_likely=True, disability_likelihood=Likelihood.LOW
        ))
        assert high.status == MedicareRecoveryStatus.FUTURE_LIKELY
        assert high.confidence == 50
        assert low.status == MedicareRecoveryStatus.UNLIKELY

    def test_active_beats_ssdi(self, make_encounter):
        """Active coverage on DOS outranks an SSDI future pathway."""
        result = evaluate_medicare(make_encounter(
            medicare_status=MedicareStatus.ACTIVE_PART_A,
            encounter_type=EncounterType.INPATIENT,
            ssdi_status=BenefitStatus.RECEIVING,
        ))
        assert result.status == MedicareRecoveryStatus.ACTIVE_ON_DOS

    def test_unlikely(self, make_encounter):
        """No Medicare signals is unlikely."""
        result = evaluate_medicare(make_encounter())
        assert result.status == MedicareRecoveryStatus.UNLIKELY
        assert result.confidence == 0
