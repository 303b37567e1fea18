"""Per-state retroactive Medicaid coverage windows and waivers."""

from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional

STANDARD_RETROACTIVE_DAYS = 90


class StateRetroactiveConfig(NamedTuple):
    """Retroactive coverage rules for a state."""

    retroactive_days: int  # 0, 60 or 90
    has_waiver: bool
    notes: str
    waiver_name: Optional[str] = None
    waiver_type: Optional[str] = None
    effective_date: Optional[str] = None


STATE_RETROACTIVE_CONFIG: Mapping[str, StateRetroactiveConfig] = MappingProxyType({
    # No retroactive coverage
    "AZ": StateRetroactiveConfig(
        0, True, "Arizona has never had retroactive coverage under AHCCCS 1115 waiver",
        "AHCCCS 1115 Demonstration", "1115", "1982-10-01",
    ),
    "FL": StateRetroactiveConfig(
        0, True, "Florida eliminated retroactive coverage under 1115 waiver",
        "Florida 1115 MMA Waiver", "1115", "2006-07-01",
    ),
    "IA": StateRetroactiveConfig(
        0, True, "Iowa eliminated retroactive coverage for expansion population",
        "Iowa Wellness Plan 1115 Waiver", "1115", "2014-01-01",
    ),
    "IN": StateRetroactiveConfig(
        0, True, "Indiana HIP 2.0 waiver eliminates retroactive coverage",
        "Healthy Indiana Plan (HIP) 2.0", "1115", "2015-02-01",
    ),
    "NH": StateRetroactiveConfig(
        0, True, "New Hampshire Granite Advantage waiver has no retroactive coverage",
        "Granite Advantage 1115 Waiver", "1115", "2019-01-01",
    ),
    # Reduced window
    "AR": StateRetroactiveConfig(
        60, True, "Arkansas reduced retroactive coverage to 60 days under 1115 waiver",
        "Arkansas Works 1115 Waiver", "1115", "2018-06-01",
    ),
    # Standard window under a waiver
    "MT": StateRetroactiveConfig(
        90, True, "Montana maintains standard retroactive coverage but has waiver provisions",
        "Montana HELP Act", "1115", "2016-01-01",
    ),
    "KY": StateRetroactiveConfig(
        90, True, "Kentucky maintains standard retroactive coverage under current waiver",
        "Kentucky HEALTH", "1115", "2020-01-01",
    ),
    "MI": StateRetroactiveConfig(
        90, True, "Michigan maintains standard retroactive coverage",
        "Healthy Michigan Plan", "1115", "2014-04-01",
    ),
    "OH": StateRetroactiveConfig(
        90, False, "Ohio provides full 90-day retroactive coverage under standard rules",
    ),
})

DEFAULT_STATE_CONFIG = StateRetroactiveConfig(
    STANDARD_RETROACTIVE_DAYS, False, "Standard 90-day retroactive coverage applies"
)

# Share of charges recovered once retroactive coverage is approved
ENCOUNTER_RECOVERY_RATES: Mapping[str, float] = MappingProxyType({
    "inpatient": 0.45,
    "ed": 0.40,
    "outpatient": 0.35,
    "observation": 0.38,
    "recurring": 0.30,
})
DEFAULT_RECOVERY_RATE = 0.35


def get_state_config(state_code: str) -> StateRetroactiveConfig:
    return STATE_RETROACTIVE_CONFIG.get(state_code.upper(), DEFAULT_STATE_CONFIG)
