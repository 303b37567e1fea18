"""Retroactive Medicaid coverage window evaluation."""

from datetime import date
from typing import List, NamedTuple, Optional, Union
import logging
import re

from common.dates import add_months, days_between, first_of_month, round_money
from common.enums import EncounterType
from services.reference.retroactive_config import (
    DEFAULT_RECOVERY_RATE,
    ENCOUNTER_RECOVERY_RATES,
    STANDARD_RETROACTIVE_DAYS,
    STATE_RETROACTIVE_CONFIG,
    get_state_config,
)

logger = logging.getLogger(__name__)


class WaiverDetails(NamedTuple):
    """1115 waiver that changes a state's retroactive window."""

    waiver_type: str
    waiver_name: str
    effective_date: str
    retroactive_days_allowed: int


class RetroactiveCoverageResult(NamedTuple):
    """Retroactive coverage determination for one date of service."""

    is_within_window: bool
    retroactive_window_days: int
    coverage_start_date: date
    days_between_dos_and_application: int
    estimated_recovery: int
    recovery_confidence: int  # 0-95
    state_has_waiver: bool
    actions: List[str]
    notes: List[str]
    waiver_details: Optional[WaiverDetails] = None


def _normalize(encounter_type: Union[EncounterType, str]) -> str:
    key = encounter_type.value if isinstance(encounter_type, EncounterType) else encounter_type
    return re.sub(r"[^a-z]", "", str(key).lower())


def get_recovery_rate(encounter_type: Union[EncounterType, str]) -> float:
    return ENCOUNTER_RECOVERY_RATES.get(_normalize(encounter_type), DEFAULT_RECOVERY_RATE)


def calculate_coverage_start_date(application_date: date, retroactive_days: int) -> date:
    """First day of retroactive coverage: 0, 2 or 3 months back from the application month."""
    if retroactive_days == 0:
        return first_of_month(application_date)
    months_back = 2 if retroactive_days == 60 else 3
    return first_of_month(add_months(first_of_month(application_date), -months_back))


def calculate_confidence(
    is_within_window: bool,
    was_eligible_on_dos: bool,
    days_between_dos_and_application: int,
    retroactive_window_days: int,
    encounter_type: Union[EncounterType, str],
) -> int:
    """Approval confidence; 0 outside the window, otherwise clamped to [0, 95]."""
    if not is_within_window:
        return 0

    confidence = 50
    confidence += 30 if was_eligible_on_dos else -20

    if retroactive_window_days > 0:
        used = days_between_dos_and_application / retroactive_window_days
        if used <= 0.33:
            confidence += 15
        elif used <= 0.66:
            confidence += 5

    if _normalize(encounter_type) in (EncounterType.ED.value, EncounterType.INPATIENT.value):
        confidence += 5

    return min(max(confidence, 0), 95)


def _error_result(message: str, date_of_service: date, state: str) -> RetroactiveCoverageResult:
    config = get_state_config(state)
    return RetroactiveCoverageResult(
        is_within_window=False,
        retroactive_window_days=config.retroactive_days,
        coverage_start_date=date_of_service,
        days_between_dos_and_application=0,
        estimated_recovery=0,
        recovery_confidence=0,
        state_has_waiver=config.has_waiver,
        actions=["Review input dates - date of service should be before application date"],
        notes=[message],
    )


def calculate_retroactive_coverage(
    date_of_service: date,
    application_date: date,
    state_of_residence: str,
    was_eligible_on_dos: bool,
    encounter_type: Union[EncounterType, str],
    total_charges: float,
) -> RetroactiveCoverageResult:
    """
    Determine whether a date of service falls inside the state's retroactive window.

    Args:
        date_of_service: Date the service was provided
        application_date: Date the Medicaid application was filed
        state_of_residence: Two-letter state code
        was_eligible_on_dos: Whether the patient met eligibility on the DOS
        encounter_type: Encounter type, used for the recovery rate
        total_charges: Billed charges

    Returns:
        RetroactiveCoverageResult; a DOS after the application date yields an
        error result with an explanatory note rather than an exception.
    """
    state = state_of_residence.upper()
    if date_of_service > application_date:
        logger.debug(f"Date of service {date_of_service} is after application {application_date}")
        return _error_result(
            "Date of service is after application date - retroactive coverage not applicable",
            date_of_service,
            state,
        )

    config = get_state_config(state)
    window_days = config.retroactive_days
    coverage_start = calculate_coverage_start_date(application_date, window_days)
    days_between_dates = days_between(date_of_service, application_date)
    is_within_window = window_days > 0 and first_of_month(date_of_service) >= coverage_start

    confidence = calculate_confidence(
        is_within_window, was_eligible_on_dos, days_between_dates, window_days, encounter_type
    )

    estimated_recovery = 0
    if is_within_window and was_eligible_on_dos:
        estimated_recovery = round_money(
            total_charges * get_recovery_rate(encounter_type) * confidence / 100
        )

    actions: List[str] = []
    notes: List[str] = []

    if is_within_window:
        if was_eligible_on_dos:
            actions.append("Submit Medicaid application with retroactive coverage request")
            actions.append(
                "Document patient eligibility (income, household size) as of date of service"
            )
            actions.append(f"Request coverage effective {coverage_start.isoformat()}")
            if config.has_waiver and window_days < STANDARD_RETROACTIVE_DAYS:
                actions.append(
                    f"Note: {state} has reduced retroactive window - verify current waiver terms"
                )
            notes.append(
                f"DOS of {date_of_service.isoformat()} falls within "
                f"{window_days}-day retroactive window"
            )
            notes.append(f"Application date: {application_date.isoformat()}")
            notes.append(f"Coverage start date: {coverage_start.isoformat()}")
        else:
            actions.append("Verify patient eligibility status on date of service")
            actions.append("Gather income and household documentation for DOS period")
            actions.append("Consider if eligibility may have existed but was not verified")
            notes.append("DOS is within window but eligibility on DOS is uncertain")
            notes.append("Recommend thorough eligibility screening before application")
    elif window_days == 0:
        notes.append(f"{state} has no retroactive Medicaid coverage under 1115 waiver")
        notes.append("Coverage can only begin from date of application or later")
        actions.append("Evaluate alternative coverage options (state programs, charity care)")
        actions.append("Document for DSH reporting if uncompensated")
    else:
        notes.append(
            f"DOS of {date_of_service.isoformat()} is outside the "
            f"{window_days}-day retroactive window"
        )
        notes.append(f"Retroactive coverage only available back to {coverage_start.isoformat()}")
        actions.append("Evaluate other recovery pathways (state programs, charity care)")
        actions.append("Document encounter for potential DSH qualifying criteria")

    waiver_details = None
    if config.has_waiver and config.waiver_name:
        notes.append(f"State operates under {config.waiver_name}")
        notes.append(config.notes)
        waiver_details = WaiverDetails(
            waiver_type=config.waiver_type or "1115",
            waiver_name=config.waiver_name,
            effective_date=config.effective_date or "Unknown",
            retroactive_days_allowed=window_days,
        )

    return RetroactiveCoverageResult(
        is_within_window=is_within_window,
        retroactive_window_days=window_days,
        coverage_start_date=coverage_start,
        days_between_dos_and_application=days_between_dates,
        estimated_recovery=estimated_recovery,
        recovery_confidence=confidence,
        state_has_waiver=config.has_waiver,
        actions=actions,
        notes=notes,
        waiver_details=waiver_details,
    )


def get_states_without_retroactive() -> List[str]:
    return [code for code, config in STATE_RETROACTIVE_CONFIG.items() if config.retroactive_days == 0]


def get_states_with_reduced_retroactive() -> List[str]:
    return [
        code
        for code, config in STATE_RETROACTIVE_CONFIG.items()
        if 0 < config.retroactive_days < STANDARD_RETROACTIVE_DAYS
    ]


def state_has_retroactive_waiver(state_code: str) -> bool:
    config = get_state_config(state_code)
    return config.has_waiver and config.retroactive_days < STANDARD_RETROACTIVE_DAYS


def get_state_retroactive_window(state_code: str) -> int:
    return get_state_config(state_code).retroactive_days


def is_retroactive_coverage_possible(
    date_of_service: date, application_date: date, state_of_residence: str
) -> bool:
    """Quick window check without confidence or recovery estimates."""
    if date_of_service > application_date:
        return False
    config = get_state_config(state_of_residence)
    if config.retroactive_days == 0:
        return False
    coverage_start = calculate_coverage_start_date(application_date, config.retroactive_days)
    return first_of_month(date_of_service) >= coverage_start
