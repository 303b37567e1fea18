"""IRS 501(r) financial assistance and collection compliance."""

from datetime import date, timedelta
from typing import List, NamedTuple, Optional, Sequence
import logging
import re

from common.dates import round_half_up, round_money
from common.enums import ComplianceStatus, FAPEligibility, NotificationType
from services.recovery.schemas import HospitalFAPPolicy, NotificationRecord
from services.reference.income_thresholds import get_fpl

logger = logging.getLogger(__name__)

# Days between first billing statement and any ECA
ECA_NOTIFICATION_PERIOD_DAYS = 120
# Days between written notice and a specific ECA
ECA_WRITTEN_NOTICE_DAYS = 30

EXTRAORDINARY_COLLECTION_ACTIONS = (
    "Selling debt to third party",
    "Reporting to credit bureaus",
    "Deferring or denying care",
    "Requiring payment before providing care",
    "Liens on property",
    "Foreclosure on property",
    "Attachment or seizure of bank accounts",
    "Garnishment of wages",
    "Causing arrest or body attachment",
)

CRITICAL_ITEMS = ("Plain language summary", "FAP application")


class ECAStatus(NamedTuple):
    """Whether extraordinary collection actions may start."""

    allowed: bool
    allowed_date: date
    days_until_allowed: int
    blocked_actions: List[str]
    reason: str


class RequiredNotification(NamedTuple):
    """A 501(r) notification with its deadline."""

    type: NotificationType
    deadline: date
    sent: bool
    description: str


class ChecklistItem(NamedTuple):
    item: str
    completed: bool
    category: str  # policy | notification | documentation | eca_restriction


class CharityCareResult(NamedTuple):
    """FAP determination and 501(r) compliance snapshot for an account."""

    fap_eligibility: FAPEligibility
    discount_percentage: int  # 0-100
    amount_after_discount: float
    income_as_fpl_percentage: int
    compliance_status: ComplianceStatus
    eca_allowed_date: date
    eca_status: ECAStatus
    required_notifications: List[RequiredNotification]
    compliance_checklist: List[ChecklistItem]
    actions: List[str]
    notes: List[str]


def parse_fpl_range(range_string: str) -> Optional[tuple]:
    """Parse "201-300%" or "under 200%" into (min, max); None if unparseable."""
    match = re.search(r"(\d+)\s*[-–]\s*(\d+)", range_string)
    if match:
        return int(match.group(1)), int(match.group(2))

    single = re.search(r"(under|below|<)\s*(\d+)", range_string, re.IGNORECASE)
    if single:
        return 0, int(single.group(2))
    return None


def calculate_tiered_discount(income_as_fpl_percentage: int, policy: HospitalFAPPolicy) -> int:
    """Discount from the first matching tier, else a linear sliding scale."""
    for tier in policy.discount_percentages:
        bounds = parse_fpl_range(tier.fpl_range)
        if bounds and bounds[0] <= income_as_fpl_percentage <= bounds[1]:
            return int(tier.discount)

    range_size = policy.discounted_care_fpl_threshold - policy.free_care_fpl_threshold
    if range_size <= 0:
        return 0
    position = income_as_fpl_percentage - policy.free_care_fpl_threshold
    return max(0, round_money(100 * (1 - position / range_size)))


def determine_fap_eligibility(income_as_fpl_percentage: int, policy: HospitalFAPPolicy):
    """Return (FAPEligibility, discount percentage)."""
    if income_as_fpl_percentage <= policy.free_care_fpl_threshold:
        return FAPEligibility.FREE, 100
    if income_as_fpl_percentage <= policy.discounted_care_fpl_threshold:
        return FAPEligibility.DISCOUNTED, calculate_tiered_discount(income_as_fpl_percentage, policy)
    return FAPEligibility.NOT_ELIGIBLE, 0


def calculate_amount_after_discount(original_charges: float, discount_percentage: float) -> float:
    if original_charges <= 0:
        return 0
    discount = original_charges * discount_percentage / 100
    return round_half_up(original_charges - discount, 2)


def _was_sent(notifications: Sequence[NotificationRecord], kind: NotificationType) -> bool:
    return any(n.type == kind for n in notifications)


def calculate_eca_status(
    account_age: int,
    notifications_sent: Sequence[NotificationRecord],
    as_of: date,
) -> ECAStatus:
    """
    Work out the earliest ECA date from the notifications already sent.

    ECAs need a FAP application opportunity, the 120-day notice and a 30-day
    written notice. Without any FAP opportunity the clock has not started, so
    the block runs a full notification period from today.
    """
    service_date = as_of - timedelta(days=account_age)
    base_date = service_date + timedelta(days=ECA_NOTIFICATION_PERIOD_DAYS)

    has_written_notice = _was_sent(notifications_sent, NotificationType.ECA_30_DAY_WRITTEN_NOTICE)
    has_120_day_notice = _was_sent(notifications_sent, NotificationType.ECA_120_DAY_NOTICE)
    has_fap_opportunity = _was_sent(
        notifications_sent, NotificationType.FAP_APPLICATION
    ) or _was_sent(notifications_sent, NotificationType.PLAIN_LANGUAGE_SUMMARY)

    allowed_date = base_date
    if not has_fap_opportunity:
        allowed_date = as_of + timedelta(days=ECA_NOTIFICATION_PERIOD_DAYS)
        reason = "FAP application opportunity not yet provided"
    elif not has_120_day_notice:
        reason = "120-day notification period not started"
    elif not has_written_notice:
        latest_notice = max(
            n.date_sent for n in notifications_sent
            if n.type == NotificationType.ECA_120_DAY_NOTICE
        )
        allowed_date = max(base_date, latest_notice + timedelta(days=ECA_WRITTEN_NOTICE_DAYS))
        reason = "30-day written notice required before specific ECA"
    else:
        reason = "All notification requirements met"

    days_until_allowed = max(0, (allowed_date - as_of).days)
    allowed = (
        days_until_allowed == 0
        and has_fap_opportunity
        and has_120_day_notice
        and has_written_notice
    )

    return ECAStatus(
        allowed=allowed,
        allowed_date=allowed_date,
        days_until_allowed=days_until_allowed,
        blocked_actions=[] if allowed else list(EXTRAORDINARY_COLLECTION_ACTIONS),
        reason=reason,
    )


def generate_required_notifications(
    account_age: int, notifications_sent: Sequence[NotificationRecord], as_of: date
) -> List[RequiredNotification]:
    remaining = ECA_NOTIFICATION_PERIOD_DAYS - account_age
    return [
        RequiredNotification(
            NotificationType.PLAIN_LANGUAGE_SUMMARY,
            as_of - timedelta(days=account_age),
            _was_sent(notifications_sent, NotificationType.PLAIN_LANGUAGE_SUMMARY),
            "Plain language summary of FAP must be provided to patient",
        ),
        RequiredNotification(
            NotificationType.FAP_APPLICATION,
            max(as_of, as_of + timedelta(days=remaining)),
            _was_sent(notifications_sent, NotificationType.FAP_APPLICATION),
            "FAP application must be offered before initiating ECAs",
        ),
        RequiredNotification(
            NotificationType.ECA_120_DAY_NOTICE,
            as_of + timedelta(days=max(0, remaining)),
            _was_sent(notifications_sent, NotificationType.ECA_120_DAY_NOTICE),
            "Notification of potential ECAs must be provided 120 days before action",
        ),
        RequiredNotification(
            NotificationType.ECA_30_DAY_WRITTEN_NOTICE,
            as_of + timedelta(days=max(0, remaining + ECA_WRITTEN_NOTICE_DAYS)),
            _was_sent(notifications_sent, NotificationType.ECA_30_DAY_WRITTEN_NOTICE),
            "30-day written notice required before taking specific ECA",
        ),
        RequiredNotification(
            NotificationType.PRESUMPTIVE_ELIGIBILITY_SCREENING,
            as_of + timedelta(days=30),
            _was_sent(notifications_sent, NotificationType.PRESUMPTIVE_ELIGIBILITY_SCREENING),
            "Screen for presumptive FAP eligibility using available data",
        ),
    ]


def build_compliance_checklist(
    notifications_sent: Sequence[NotificationRecord], is_emergency_service: bool
) -> List[ChecklistItem]:
    def sent(kind: NotificationType) -> bool:
        return _was_sent(notifications_sent, kind)

    checklist = [
        ChecklistItem("Written FAP established and available", True, "policy"),
        ChecklistItem("FAP applies to emergency and medically necessary care", True, "policy"),
        ChecklistItem("Eligibility criteria based on FPL percentages defined", True, "policy"),
        ChecklistItem("Method for applying for financial assistance documented", True, "policy"),
        ChecklistItem(
            "Plain language summary provided to patient",
            sent(NotificationType.PLAIN_LANGUAGE_SUMMARY),
            "notification",
        ),
        ChecklistItem(
            "FAP application offered to patient",
            sent(NotificationType.FAP_APPLICATION),
            "notification",
        ),
        ChecklistItem(
            "120-day notification period observed before ECAs",
            sent(NotificationType.ECA_120_DAY_NOTICE),
            "notification",
        ),
        ChecklistItem(
            "30-day written notice provided before specific ECA",
            sent(NotificationType.ECA_30_DAY_WRITTEN_NOTICE),
            "notification",
        ),
        ChecklistItem("Billing and collections policy documented", True, "documentation"),
        ChecklistItem("Amounts generally billed (AGB) calculated", True, "documentation"),
        ChecklistItem(
            "FAP eligibility determination documented",
            sent(NotificationType.FAP_DETERMINATION_NOTICE),
            "documentation",
        ),
        ChecklistItem("No debt sold before ECA timeline complete", True, "eca_restriction"),
        ChecklistItem("No adverse credit reporting before ECA timeline", True, "eca_restriction"),
        ChecklistItem("No care denial for prior unpaid bills", True, "eca_restriction"),
        ChecklistItem(
            "No liens, garnishments, or legal actions before compliance", True, "eca_restriction"
        ),
    ]

    if is_emergency_service:
        checklist.append(
            ChecklistItem("Emergency care provided regardless of payment ability", True, "policy")
        )
        checklist.append(ChecklistItem("EMTALA compliance verified", True, "policy"))

    return checklist


def determine_compliance_status(
    checklist: Sequence[ChecklistItem], eca_status: ECAStatus, account_age: int
) -> ComplianceStatus:
    incomplete_notifications = sum(
        1 for item in checklist if item.category == "notification" and not item.completed
    )
    incomplete_documentation = sum(
        1 for item in checklist if item.category == "documentation" and not item.completed
    )
    missing_critical = any(
        not item.completed and any(marker in item.item for marker in CRITICAL_ITEMS)
        for item in checklist
    )

    if missing_critical and account_age > 30:
        return ComplianceStatus.NON_COMPLIANT
    if (
        account_age > ECA_NOTIFICATION_PERIOD_DAYS
        and not eca_status.allowed
        and incomplete_notifications > 0
    ):
        return ComplianceStatus.NON_COMPLIANT
    if incomplete_notifications > 0 and account_age > 60:
        return ComplianceStatus.AT_RISK
    if incomplete_documentation > 1:
        return ComplianceStatus.AT_RISK
    if account_age > 90 and incomplete_notifications > 0:
        return ComplianceStatus.AT_RISK
    return ComplianceStatus.COMPLIANT


PENDING_NOTIFICATION_ACTIONS = {
    NotificationType.PLAIN_LANGUAGE_SUMMARY: "URGENT: Provide plain language summary of FAP to patient",
    NotificationType.FAP_APPLICATION: "Send FAP application to patient with instructions",
    NotificationType.ECA_120_DAY_NOTICE: "Send 120-day ECA notification to patient",
    NotificationType.ECA_30_DAY_WRITTEN_NOTICE: "Prepare 30-day written notice before specific ECA",
    NotificationType.PRESUMPTIVE_ELIGIBILITY_SCREENING: (
        "Conduct presumptive eligibility screening using available data"
    ),
}

ELIGIBILITY_ACTIONS = {
    FAPEligibility.FREE: [
        "Apply 100% FAP discount - patient qualifies for free care",
        "Document FAP eligibility determination",
        "Update account status to reflect charity care write-off",
    ],
    FAPEligibility.DISCOUNTED: [
        "Calculate and apply FAP discount based on FPL tier",
        "Generate patient-friendly billing statement with discount",
        "Offer payment plan for remaining balance if applicable",
    ],
    FAPEligibility.NOT_ELIGIBLE: [
        "Document FAP ineligibility determination",
        "Provide patient with FAP denial notice including appeal rights",
    ],
}

ELIGIBILITY_NOTES = {
    FAPEligibility.FREE: [
        "Patient qualifies for free care under hospital FAP policy",
        "501(r) requires charges not exceed amounts generally billed (AGB)",
    ],
    FAPEligibility.DISCOUNTED: [
        "Patient qualifies for discounted care under hospital FAP policy",
        "Verify discount does not result in charges exceeding AGB",
    ],
    FAPEligibility.NOT_ELIGIBLE: [
        "Patient does not meet FAP eligibility criteria",
        "Patient retains right to apply for FAP within application period",
    ],
}


def _dedupe(items: List[str]) -> List[str]:
    return list(dict.fromkeys(items))


def generate_actions(
    eligibility: FAPEligibility,
    compliance_status: ComplianceStatus,
    notifications: Sequence[RequiredNotification],
    eca_status: ECAStatus,
) -> List[str]:
    actions = list(ELIGIBILITY_ACTIONS[eligibility])

    for notification in notifications:
        if not notification.sent and notification.type in PENDING_NOTIFICATION_ACTIONS:
            actions.append(PENDING_NOTIFICATION_ACTIONS[notification.type])

    if compliance_status == ComplianceStatus.NON_COMPLIANT:
        actions.insert(0, "CRITICAL: Immediate action required to restore 501(r) compliance")
        actions.append("Review and remediate all missing compliance items")
        actions.append("Consult with compliance officer regarding potential exposure")
    elif compliance_status == ComplianceStatus.AT_RISK:
        actions.append("Complete outstanding compliance items within 30 days")
        actions.append("Escalate to compliance team for monitoring")

    if not eca_status.allowed:
        actions.append(f"Do not initiate ECAs until {eca_status.allowed_date.isoformat()}")

    return _dedupe(actions)


def generate_notes(
    eligibility: FAPEligibility,
    income_as_fpl_percentage: int,
    compliance_status: ComplianceStatus,
    is_emergency_service: bool,
    eca_status: ECAStatus,
) -> List[str]:
    notes = [f"Patient income is {income_as_fpl_percentage}% of Federal Poverty Level"]
    notes.extend(ELIGIBILITY_NOTES[eligibility])

    if is_emergency_service:
        notes.append("Emergency services provided - EMTALA and 501(r) protections apply")
        notes.append("Cannot deny emergency care based on prior unpaid bills")

    if compliance_status == ComplianceStatus.NON_COMPLIANT:
        notes.append("WARNING: Hospital is currently non-compliant with 501(r) requirements")
        notes.append("Non-compliance may jeopardize tax-exempt status")
    elif compliance_status == ComplianceStatus.AT_RISK:
        notes.append("CAUTION: Compliance at risk - action needed to maintain 501(r) status")

    if not eca_status.allowed:
        notes.append(f"ECAs blocked: {eca_status.reason}")
        notes.append(f"{eca_status.days_until_allowed} days until ECAs may be permitted")

    notes.append("FAP must be widely publicized in the community")
    notes.append("All FAP applications must be processed fairly and timely")
    return notes


def income_as_fpl_percentage(patient_income: float, household_size: int) -> int:
    return round_money(patient_income / get_fpl(household_size) * 100)


def evaluate_charity_care(
    patient_income: float,
    household_size: int,
    hospital_fap_policy: HospitalFAPPolicy,
    account_age: int,
    notifications_sent: Sequence[NotificationRecord],
    is_emergency_service: bool,
    as_of: date,
    original_charges: float = 0,
) -> CharityCareResult:
    """
    Determine FAP eligibility and 501(r) collection compliance for an account.

    Args:
        patient_income: Annual household income in dollars
        household_size: Number of people in the household
        hospital_fap_policy: The hospital's FAP thresholds and tiers
        account_age: Days since the date of service
        notifications_sent: Notifications already delivered
        is_emergency_service: Whether EMTALA protections apply
        as_of: Evaluation date
        original_charges: Billed charges before any discount

    Returns:
        CharityCareResult
    """
    fpl_percentage = income_as_fpl_percentage(patient_income, household_size)
    eligibility, discount = determine_fap_eligibility(fpl_percentage, hospital_fap_policy)
    amount_after_discount = calculate_amount_after_discount(original_charges, discount)

    eca_status = calculate_eca_status(account_age, notifications_sent, as_of)
    notifications = generate_required_notifications(account_age, notifications_sent, as_of)
    checklist = build_compliance_checklist(notifications_sent, is_emergency_service)
    compliance_status = determine_compliance_status(checklist, eca_status, account_age)

    if compliance_status != ComplianceStatus.COMPLIANT:
        logger.debug(f"501(r) status {compliance_status.value} at account age {account_age}")

    return CharityCareResult(
        fap_eligibility=eligibility,
        discount_percentage=discount,
        amount_after_discount=amount_after_discount,
        income_as_fpl_percentage=fpl_percentage,
        compliance_status=compliance_status,
        eca_allowed_date=eca_status.allowed_date,
        eca_status=eca_status,
        required_notifications=notifications,
        compliance_checklist=checklist,
        actions=generate_actions(eligibility, compliance_status, notifications, eca_status),
        notes=generate_notes(
            eligibility, fpl_percentage, compliance_status, is_emergency_service, eca_status
        ),
    )


def is_eca_prohibited(
    account_age: int,
    notifications_sent: Sequence[NotificationRecord],
    as_of: date,
) -> bool:
    return not calculate_eca_status(account_age, notifications_sent, as_of).allowed


def check_fap_eligibility(
    patient_income: float, household_size: int, hospital_fap_policy: HospitalFAPPolicy
) -> FAPEligibility:
    """Eligibility tier only, without the compliance evaluation."""
    percentage = income_as_fpl_percentage(patient_income, household_size)
    return determine_fap_eligibility(percentage, hospital_fap_policy)[0]
