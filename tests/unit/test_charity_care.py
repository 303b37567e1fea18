"""Unit tests for 501(r) financial assistance compliance."""

from datetime import timedelta

import pytest
from services.compliance.charity_care import (
    EXTRAORDINARY_COLLECTION_ACTIONS,
    build_compliance_checklist,
    calculate_eca_status,
    calculate_tiered_discount,
    check_fap_eligibility,
    evaluate_charity_care,
    parse_fpl_range,
)
from services.recovery.schemas import DiscountTier, HospitalFAPPolicy, NotificationRecord
from common.enums import ComplianceStatus, FAPEligibility, NotificationType

FPL_1 = 15060

ALL_NOTICES = (
    NotificationType.PLAIN_LANGUAGE_SUMMARY,
    NotificationType.FAP_APPLICATION,
    NotificationType.ECA_120_DAY_NOTICE,
    NotificationType.ECA_30_DAY_WRITTEN_NOTICE,
)


@pytest.fixture
def policy():
    """Free care to 200% FPL, discounted to 400% FPL."""
    return HospitalFAPPolicy(
        free_care_fpl_threshold=200,
        discounted_care_fpl_threshold=400,
        discount_percentages=[
            DiscountTier(fpl_range="201-300% FPL", discount=75),
            DiscountTier(fpl_range="301-400% FPL", discount=40),
        ],
    )


def _notices(as_of, kinds, days_ago=100):
    return [NotificationRecord(type=kind, date_sent=as_of - timedelta(days=days_ago)) for kind in kinds]


class TestFAPEligibility:
    """Test FAP tiers and discounts."""

    def test_free_care(self, policy, as_of):
        """Income under the free threshold gets a full discount."""
        result = evaluate_charity_care(FPL_1 * 1.5, 1, policy, 10, [], False, as_of, 1000)
        assert result.fap_eligibility == FAPEligibility.FREE
        assert result.discount_percentage == 100
        assert result.amount_after_discount == 0
        assert result.income_as_fpl_percentage == 150

    def test_tiered_discount(self, policy, as_of):
        """A matching tier sets the discount."""
        result = evaluate_charity_care(FPL_1 * 2.5, 1, policy, 10, [], False, as_of, 1000)
        assert result.fap_eligibility == FAPEligibility.DISCOUNTED
        assert result.discount_percentage == 75
        assert result.amount_after_discount == 250

    def test_linear_fallback(self):
        """Without tiers the discount slides linearly."""
        policy = HospitalFAPPolicy(free_care_fpl_threshold=200, discounted_care_fpl_threshold=400)
        assert calculate_tiered_discount(300, policy) == 50
        assert calculate_tiered_discount(400, policy) == 0

    def test_not_eligible(self, policy):
        """Income over the discounted threshold is not eligible."""
        assert check_fap_eligibility(FPL_1 * 5, 1, policy) == FAPEligibility.NOT_ELIGIBLE

    @pytest.mark.parametrize(
        "text,expected",
        [("201-300% FPL", (201, 300)), ("under 200%", (0, 200)), ("sliding", None)],
    )
    def test_parse_fpl_range(self, text, expected):
        """Tier ranges parse to inclusive bounds."""
        assert parse_fpl_range(text) == expected


class TestECAStatus:
    """Test extraordinary collection action timing."""

    def test_no_notifications_blocks_everything(self, as_of):
        """Without a FAP opportunity every ECA is blocked for 120 days."""
        status = calculate_eca_status(60, [], as_of)
        assert status.allowed is False
        assert status.allowed_date == as_of + timedelta(days=120)
        assert status.blocked_actions == list(EXTRAORDINARY_COLLECTION_ACTIONS)
        assert len(status.blocked_actions) == 9

    def test_written_notice_outstanding(self, as_of):
        """Missing the written notice waits 30 days after the 120-day notice."""
        notices = _notices(as_of, ALL_NOTICES[:2]) + _notices(
            as_of, [NotificationType.ECA_120_DAY_NOTICE], days_ago=10
        )
        status = calculate_eca_status(200, notices, as_of)
        assert status.allowed is False
        assert status.days_until_allowed == 20
        assert status.reason == "30-day written notice required before specific ECA"

    def test_all_requirements_met(self, as_of):
        """All notices plus the elapsed period allows ECAs."""
        status = calculate_eca_status(150, _notices(as_of, ALL_NOTICES), as_of)
        assert status.allowed is True
        assert status.blocked_actions == []


class TestCompliance:
    """Test the 501(r) checklist and status."""

    def test_checklist_length(self):
        """Emergency services add two EMTALA items."""
        assert len(build_compliance_checklist([], False)) == 15
        assert len(build_compliance_checklist([], True)) == 17

    def test_aged_account_without_notices_is_non_compliant(self, policy, as_of):
        """A 60-day-old account with nothing sent is non-compliant."""
        result = evaluate_charity_care(FPL_1 * 3, 1, policy, 60, [], True, as_of)
        assert result.compliance_status == ComplianceStatus.NON_COMPLIANT
        assert result.eca_status.blocked_actions == list(EXTRAORDINARY_COLLECTION_ACTIONS)
        assert result.actions[0].startswith("CRITICAL")
        assert "Emergency services provided - EMTALA and 501(r) protections apply" in result.notes

    def test_new_account_is_compliant(self, policy, as_of):
        """A fresh account has time to send notices."""
        result = evaluate_charity_care(FPL_1, 1, policy, 10, [], False, as_of)
        assert result.compliance_status == ComplianceStatus.COMPLIANT

    def test_fully_notified_account(self, policy, as_of):
        """Every notice sent keeps an aged account compliant."""
        result = evaluate_charity_care(
            FPL_1 * 5, 1, policy, 150, _notices(as_of, ALL_NOTICES), False, as_of
        )
        assert result.compliance_status == ComplianceStatus.COMPLIANT
        assert result.eca_status.allowed is True
        assert not any(action.startswith("Do not initiate ECAs") for action in result.actions)
