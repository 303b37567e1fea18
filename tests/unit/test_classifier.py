"""Unit tests for denial classification and appeal analysis."""

from datetime import date, timedelta

import pytest
from services.denials.classifier import (
    DenialClassifier,
    DenialInput,
    analyze_denial,
    calculate_batch_recovery_potential,
    get_carc_codes_by_category,
    is_denial_appealable,
    prior_appeal_history,
)
from services.recovery.schemas import AppealAttempt
from common.enums import AppealLevel, AppealStatus, DenialCategory, PayerType

AS_OF = date(2024, 6, 15)


def _denial(**overrides):
    values = dict(
        carc_code="CO-50",
        billed_amount=10000,
        payer_id="MEDICARE",
        denial_date=date(2024, 6, 1),
        has_documentation=True,
    )
    values.update(overrides)
    return DenialInput(**values)


class TestDenialClassifier:
    """Test code parsing and classification."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("CO-50", ("CO", "50")),
            ("co 50", ("CO", "50")),
            ("PR1", ("PR", "1")),
            ("050", (None, "50")),
            ("abc", (None, "abc")),
        ],
    )
    def test_parse_code(self, raw, expected):
        """Group prefixes are split off and leading zeros dropped."""
        assert DenialClassifier.parse_code(raw) == expected

    def test_known_code(self):
        """Known codes come from the reference table."""
        carc = DenialClassifier.classify_by_code("CO-197")
        assert carc.category == DenialCategory.AUTHORIZATION
        assert carc.base_recovery_rate == 0.50

    def test_unknown_code_uses_message(self):
        """Unknown codes fall back to message patterns."""
        carc = DenialClassifier.classify_by_code("999", "Prior authorization required")
        assert carc.category == DenialCategory.AUTHORIZATION
        assert carc.appealable is True
        assert carc.base_recovery_rate == 0.30

    def test_unknown_code_without_message(self):
        """Unknown codes without a message are "other"."""
        assert DenialClassifier.classify_by_code("999").category == DenialCategory.OTHER

    @pytest.mark.parametrize(
        "payer,expected",
        [
            ("Medicare Part A", PayerType.MEDICARE),
            ("CMS", PayerType.MEDICARE),
            ("OH-MEDICAID", PayerType.MEDICAID),
            ("Aetna", PayerType.COMMERCIAL),
        ],
    )
    def test_payer_type(self, payer, expected):
        assert DenialClassifier.get_payer_type(payer) == expected

    def test_appeal_level_escalates_after_denial(self):
        """A denied second-level appeal escalates to third."""
        history = prior_appeal_history(2, AS_OF)
        assert [a.level for a in history] == [AppealLevel.FIRST, AppealLevel.SECOND]
        assert DenialClassifier.determine_appeal_level(history) == AppealLevel.THIRD

    def test_appeal_level_resets_after_approval(self):
        """An approved appeal does not escalate."""
        history = (AppealAttempt(
            level=AppealLevel.SECOND, submitted_date=AS_OF, status=AppealStatus.APPROVED
        ),)
        assert DenialClassifier.determine_appeal_level(history) == AppealLevel.FIRST

    def test_is_denial_appealable(self):
        assert is_denial_appealable("PR-2") is False
        assert is_denial_appealable("29") is True

    def test_codes_by_category(self):
        codes = {c.code for c in get_carc_codes_by_category(DenialCategory.ELIGIBILITY)}
        assert codes == {"26", "27", "109"}


class TestAnalyzeDenial:
    """Test appeal plans."""

    def test_medical_necessity_with_documentation(self):
        """Medicare gives 120 days; documentation lifts probability."""
        result = analyze_denial(_denial(), AS_OF)
        assert result.denial_category == DenialCategory.MEDICAL_NECESSITY
        assert result.appeal_deadline == date(2024, 9, 29)
        assert result.days_until_deadline == 106
        assert result.recovery_probability == 60
        assert result.estimated_recovery == 6000
        assert result.group_code == "CO"
        assert result.recommended_appeal_level == AppealLevel.FIRST
        assert "High probability of success - proceed with appeal" in result.actions
        assert any(note.startswith("Group CO: Contractual Obligation") for note in result.notes)

    def test_rarc_action_inserted(self):
        """The RARC action sits before the submit and track steps."""
        result = analyze_denial(_denial(rarc_code="n1"), AS_OF)
        assert result.rarc_action == "File appeal if appropriate"
        assert result.actions[-3:] == [
            "File appeal if appropriate",
            "Submit appeal with all required documentation",
            "Track appeal status and follow up regularly",
        ]

    def test_deadline_passed(self):
        """Late denials get late-appeal actions only."""
        result = analyze_denial(
            _denial(payer_id="State Medicaid", denial_date=date(2024, 1, 1), rarc_code="N1"),
            AS_OF,
        )
        assert result.appeal_deadline == date(2024, 3, 1)
        assert result.days_until_deadline < 0
        assert result.actions[0] == (
            "URGENT: Appeal deadline has passed - evaluate late appeal options"
        )
        assert "File appeal if appropriate" not in result.actions
        assert result.is_urgent is True

    def test_deadline_approaching(self):
        """Ten days left is urgent."""
        result = analyze_denial(
            _denial(payer_id="Aetna", denial_date=AS_OF - timedelta(days=170)), AS_OF
        )
        assert result.days_until_deadline == 10
        assert result.urgency == "high"
        assert result.actions[0] == "URGENT: Appeal deadline approaching - prioritize submission"

    def test_patient_responsibility(self):
        """Patient responsibility codes are not appealable."""
        result = analyze_denial(_denial(carc_code="PR-1"), AS_OF)
        assert result.is_appealable is False
        assert result.recovery_probability == 15
        assert "Transfer balance to patient responsibility" in result.actions
        assert "This denial type is typically not appealable" in result.notes

    def test_failed_appeals_lower_probability(self):
        """Each failed appeal costs 10 points."""
        result = analyze_denial(_denial(previous_appeals=prior_appeal_history(2, AS_OF)), AS_OF)
        assert result.recovery_probability == 40
        assert result.recommended_appeal_level == AppealLevel.THIRD

    def test_successful_appeal_raises_probability(self):
        history = (AppealAttempt(
            level=AppealLevel.FIRST, submitted_date=AS_OF, status=AppealStatus.PARTIAL
        ),)
        result = analyze_denial(_denial(previous_appeals=history), AS_OF)
        assert result.recovery_probability == 70

    def test_without_documentation(self):
        result = analyze_denial(_denial(has_documentation=False), AS_OF)
        assert result.recovery_probability == 25
        assert "Gather required documentation before appeal submission" in result.actions

    def test_batch(self):
        """Batch totals sum individual analyses."""
        batch = calculate_batch_recovery_potential(
            [_denial(), _denial(carc_code="PR-1", billed_amount=500)], AS_OF
        )
        assert batch.total_billed == 10500
        assert batch.total_estimated_recovery == 6000 + 75
        assert batch.appealable_count == 1
