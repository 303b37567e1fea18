"""Denial classification and appeal analysis from CARC/RARC codes."""

from datetime import date, timedelta
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple
import logging
import re

from common.dates import round_money
from common.enums import AppealLevel, AppealStatus, DenialCategory, PayerType
from services.recovery.schemas import AppealAttempt
from services.reference.denial_codes import (
    CARC_CODES,
    UNKNOWN_CARC_RECOVERY_RATE,
    CARCCode,
    get_carc_group,
    get_rarc_code,
)

logger = logging.getLogger(__name__)

URGENT_DEADLINE_DAYS = 14


class DenialInput(NamedTuple):
    """A denied claim to analyze."""

    carc_code: str  # "50" or "CO-50"
    billed_amount: float
    payer_id: str
    denial_date: date
    rarc_code: Optional[str] = None
    denial_reason: Optional[str] = None
    current_appeal_level: Optional[AppealLevel] = None
    previous_appeals: Tuple[AppealAttempt, ...] = ()
    has_documentation: bool = False


class DenialAnalysisResult(NamedTuple):
    """Appeal plan for one denial."""

    denial_category: DenialCategory
    denial_description: str
    is_appealable: bool
    recommended_appeal_level: AppealLevel
    appeal_deadline: date
    days_until_deadline: int
    recovery_probability: int  # 5-95
    estimated_recovery: int
    actions: List[str]
    required_documentation: List[str]
    notes: List[str]
    group_code: Optional[str] = None
    rarc_action: Optional[str] = None
    urgency: str = "medium"
    is_urgent: bool = False


class DenialClassifier:
    """Classifies denials from payer codes and messages."""

    # "CO-50", "CO 50", "PR50" or bare "50"
    CODE_PATTERN = re.compile(r"^\s*(?:([A-Z]{2})\s*-?\s*)?(\d+)\s*$", re.IGNORECASE)

    APPEAL_TIMELINES = {
        PayerType.MEDICARE: 120,
        PayerType.MEDICAID: 60,
        PayerType.COMMERCIAL: 180,
    }
    DEFAULT_APPEAL_DAYS = 90

    NEXT_APPEAL_LEVEL = {
        AppealLevel.FIRST: AppealLevel.SECOND,
        AppealLevel.SECOND: AppealLevel.THIRD,
        AppealLevel.THIRD: AppealLevel.EXTERNAL,
        AppealLevel.EXTERNAL: AppealLevel.ALJ,
    }

    # Used only when the CARC code is not in the reference table
    DENIAL_PATTERNS = {
        DenialCategory.ELIGIBILITY: [
            r"coverage.*terminated",
            r"not.*eligible",
            r"prior.*to.*coverage",
        ],
        DenialCategory.AUTHORIZATION: [
            r"authorization.*(required|absent|missing)",
            r"prior.*auth",
            r"pre.*cert",
        ],
        DenialCategory.MEDICAL_NECESSITY: [r"medical.*necess", r"not.*medically"],
        DenialCategory.CODING: [r"invalid.*(cpt|diagnosis|procedure)", r"modifier"],
        DenialCategory.TIMELY_FILING: [r"timely.*filing", r"filing.*deadline", r"submitted.*late"],
        DenialCategory.DUPLICATE: [r"duplicate", r"already.*processed"],
        DenialCategory.BUNDLING: [r"bundl", r"included.*in.*payment"],
        DenialCategory.COORDINATION_OF_BENEFITS: [r"coordination.*benefits", r"other.*insurance"],
    }

    CATEGORY_DOCUMENTATION = {
        DenialCategory.ELIGIBILITY: ["Eligibility verification", "Coverage dates documentation"],
        DenialCategory.AUTHORIZATION: ["Authorization request form", "Medical necessity letter"],
        DenialCategory.MEDICAL_NECESSITY: [
            "Physician attestation",
            "Clinical guidelines reference",
            "Peer-reviewed literature",
        ],
        DenialCategory.CODING: ["Certified coder review", "Operative/procedure notes"],
        DenialCategory.TIMELY_FILING: ["Clearinghouse submission report", "Payer acknowledgment"],
    }

    CATEGORY_ACTIONS = {
        DenialCategory.ELIGIBILITY: [
            "Verify patient eligibility on date of service",
            "Check for retroactive coverage options",
        ],
        DenialCategory.AUTHORIZATION: [
            "Request retroactive authorization if available",
            "Document medical necessity and urgency",
        ],
        DenialCategory.MEDICAL_NECESSITY: [
            "Obtain physician peer-to-peer review if available",
            "Reference clinical guidelines supporting treatment",
        ],
        DenialCategory.CODING: [
            "Have certified coder review documentation",
            "Consider requesting external coding audit",
        ],
        DenialCategory.TIMELY_FILING: [
            "Document proof of original timely submission",
            "Reference payer delays or issues",
        ],
        DenialCategory.BUNDLING: [
            "Document distinct services requiring separate reimbursement",
            "Apply appropriate modifiers if applicable",
        ],
    }

    @classmethod
    def parse_code(cls, denial_code: str) -> Tuple[Optional[str], str]:
        """Split "CO-50" into ("CO", "50"); codes that do not parse pass through."""
        match = cls.CODE_PATTERN.match(denial_code or "")
        if not match:
            return None, (denial_code or "").strip()
        group = match.group(1).upper() if match.group(1) else None
        return group, match.group(2).lstrip("0") or "0"

    @classmethod
    def classify_by_message(cls, denial_message: str) -> Optional[DenialCategory]:
        """Match payer message text against known denial patterns."""
        for category, patterns in cls.DENIAL_PATTERNS.items():
            for pattern in patterns:
                if re.search(pattern, denial_message, re.IGNORECASE):
                    return category
        return None

    @classmethod
    def classify_by_code(cls, denial_code: str, denial_message: Optional[str] = None) -> CARCCode:
        """
        Look up the CARC entry for a denial code.

        Unknown codes are appealable at a 30% base rate; their category comes
        from the denial message when one matches, otherwise "other".
        """
        _, code = cls.parse_code(denial_code)
        known = CARC_CODES.get(code)
        if known is not None:
            return known

        category = DenialCategory.OTHER
        if denial_message:
            category = cls.classify_by_message(denial_message) or DenialCategory.OTHER
        logger.debug(f"Unknown CARC code {denial_code}, classified as {category.value}")
        return CARCCode(
            code=code,
            description="Unknown denial reason code",
            category=category,
            appealable=True,
            base_recovery_rate=UNKNOWN_CARC_RECOVERY_RATE,
            documentation=("Medical records", "Claim documentation"),
            resolutions=(),
            urgency="medium",
        )

    @classmethod
    def get_payer_type(cls, payer_id: str) -> PayerType:
        lowered = payer_id.lower()
        if "medicare" in lowered or "cms" in lowered:
            return PayerType.MEDICARE
        if "medicaid" in lowered:
            return PayerType.MEDICAID
        return PayerType.COMMERCIAL

    @classmethod
    def calculate_appeal_deadline(cls, denial_date: date, payer_id: str) -> date:
        days = cls.APPEAL_TIMELINES.get(cls.get_payer_type(payer_id), cls.DEFAULT_APPEAL_DAYS)
        return denial_date + timedelta(days=days)

    @classmethod
    def determine_appeal_level(cls, previous_appeals: Sequence[AppealAttempt]) -> AppealLevel:
        """Escalate one level after a denied or partial outcome; otherwise start at first."""
        if not previous_appeals:
            return AppealLevel.FIRST
        last = previous_appeals[-1]
        if last.status in (AppealStatus.DENIED, AppealStatus.PARTIAL):
            return cls.NEXT_APPEAL_LEVEL.get(last.level, AppealLevel.FIRST)
        return AppealLevel.FIRST

    @classmethod
    def calculate_recovery_probability(
        cls, carc: CARCCode, has_documentation: bool, previous_appeals: Sequence[AppealAttempt]
    ) -> int:
        probability = carc.base_recovery_rate * 100
        probability += 15 if has_documentation else -20

        if previous_appeals:
            successful = [
                a for a in previous_appeals
                if a.status in (AppealStatus.APPROVED, AppealStatus.PARTIAL)
            ]
            if successful:
                probability += 10
            else:
                probability -= 10 * len(previous_appeals)

        return round_money(max(5, min(95, probability)))

    @classmethod
    def required_documentation(cls, carc: CARCCode) -> List[str]:
        docs = list(carc.documentation)
        for doc in cls.CATEGORY_DOCUMENTATION.get(carc.category, []):
            if doc not in docs:
                docs.append(doc)
        for doc in ("Appeal letter", "Original claim documentation"):
            if doc not in docs:
                docs.append(doc)
        return docs

    @classmethod
    def recommended_actions(
        cls,
        carc: CARCCode,
        days_until_deadline: int,
        has_documentation: bool,
        recovery_probability: int,
    ) -> List[str]:
        if days_until_deadline < 0:
            return [
                "URGENT: Appeal deadline has passed - evaluate late appeal options",
                "Check for good cause exception provisions",
                "Consider write-off if no viable appeal path",
            ]

        actions: List[str] = []
        if days_until_deadline <= URGENT_DEADLINE_DAYS:
            actions.append("URGENT: Appeal deadline approaching - prioritize submission")

        if not carc.appealable:
            actions.append("Denial is not appealable - consider alternative recovery paths")
            if carc.category == DenialCategory.PATIENT_RESPONSIBILITY:
                actions.append("Transfer balance to patient responsibility")
                actions.append("Initiate patient billing workflow")
            return actions

        if not has_documentation:
            actions.append("Gather required documentation before appeal submission")

        if recovery_probability >= 60:
            actions.append("High probability of success - proceed with appeal")
        elif recovery_probability >= 40:
            actions.append("Moderate probability - strengthen documentation before appeal")
        else:
            actions.append("Low probability - consider cost-benefit of appeal")

        actions.extend(cls.CATEGORY_ACTIONS.get(carc.category, []))
        actions.append("Submit appeal with all required documentation")
        actions.append("Track appeal status and follow up regularly")
        return actions


def analyze_denial(denial: DenialInput, as_of: date) -> DenialAnalysisResult:
    """
    Build an appeal plan for a denied claim.

    Args:
        denial: The denied claim
        as_of: Evaluation date for the deadline countdown

    Returns:
        DenialAnalysisResult with probability clamped to [5, 95]
    """
    group, _ = DenialClassifier.parse_code(denial.carc_code)
    carc = DenialClassifier.classify_by_code(denial.carc_code, denial.denial_reason)

    deadline = DenialClassifier.calculate_appeal_deadline(denial.denial_date, denial.payer_id)
    days_until_deadline = (deadline - as_of).days
    level = denial.current_appeal_level or DenialClassifier.determine_appeal_level(
        denial.previous_appeals
    )
    probability = DenialClassifier.calculate_recovery_probability(
        carc, denial.has_documentation, denial.previous_appeals
    )
    estimated_recovery = round_money(denial.billed_amount * probability / 100)

    actions = DenialClassifier.recommended_actions(
        carc, days_until_deadline, denial.has_documentation, probability
    )

    rarc = get_rarc_code(denial.rarc_code) if denial.rarc_code else None
    if rarc is not None and carc.appealable and days_until_deadline >= 0:
        actions.insert(len(actions) - 2, rarc.action_required)

    notes = [
        f"CARC {carc.code}: {carc.description}",
        f"Denial category: {carc.category.value.replace('_', ' ')}",
        f"Payer: {denial.payer_id}",
        f"Recovery probability: {probability}%",
        f"Estimated recovery: ${estimated_recovery:,}",
    ]
    group_info = get_carc_group(group) if group else None
    if group_info is not None:
        notes.append(f"Group {group_info.code}: {group_info.name} - {group_info.description}")
    if rarc is not None:
        notes.append(f"RARC {rarc.code}: {rarc.description}")
    if not carc.appealable:
        notes.append("This denial type is typically not appealable")

    urgency = "high" if 0 <= days_until_deadline <= URGENT_DEADLINE_DAYS else carc.urgency

    return DenialAnalysisResult(
        denial_category=carc.category,
        denial_description=carc.description,
        is_appealable=carc.appealable,
        recommended_appeal_level=level,
        appeal_deadline=deadline,
        days_until_deadline=days_until_deadline,
        recovery_probability=probability,
        estimated_recovery=estimated_recovery,
        actions=actions,
        required_documentation=DenialClassifier.required_documentation(carc),
        notes=notes,
        group_code=group,
        rarc_action=rarc.action_required if rarc else None,
        urgency=urgency,
        is_urgent=days_until_deadline <= URGENT_DEADLINE_DAYS,
    )


class BatchRecoveryPotential(NamedTuple):
    total_billed: float
    total_estimated_recovery: int
    average_probability: float
    appealable_count: int


def calculate_batch_recovery_potential(
    denials: Iterable[DenialInput], as_of: date
) -> BatchRecoveryPotential:
    """Aggregate recovery potential across a worklist of denials."""
    results = [(denial, analyze_denial(denial, as_of)) for denial in denials]
    total_probability = sum(result.recovery_probability for _, result in results)
    return BatchRecoveryPotential(
        total_billed=sum(denial.billed_amount for denial, _ in results),
        total_estimated_recovery=sum(result.estimated_recovery for _, result in results),
        average_probability=total_probability / len(results) if results else 0,
        appealable_count=sum(1 for _, result in results if result.is_appealable),
    )


def get_all_carc_codes() -> List[CARCCode]:
    return list(CARC_CODES.values())


def get_carc_codes_by_category(category: DenialCategory) -> List[CARCCode]:
    return [code for code in CARC_CODES.values() if code.category == category]


def is_denial_appealable(denial_code: str) -> bool:
    return DenialClassifier.classify_by_code(denial_code).appealable


def prior_appeal_history(count: int, denial_date: date) -> Tuple[AppealAttempt, ...]:
    """Expand a count of failed appeals into an escalating appeal history."""
    levels = list(AppealLevel)
    return tuple(
        AppealAttempt(
            level=levels[min(index, len(levels) - 1)],
            submitted_date=denial_date,
            status=AppealStatus.DENIED,
        )
        for index in range(count)
    )
