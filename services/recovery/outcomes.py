"""Per-evaluator outcomes for optional recovery evaluators."""

from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence, Union
import logging

logger = logging.getLogger(__name__)


class Ok(NamedTuple):
    """Evaluator ran and produced a value."""

    name: str
    value: Any


class Skipped(NamedTuple):
    """Evaluator did not run because its inputs were missing."""

    name: str
    reason: str


class Failed(NamedTuple):
    """Evaluator raised; the rest of the evaluation continued."""

    name: str
    reason: str


Outcome = Union[Ok, Skipped, Failed]


def run_evaluator(
    name: str,
    missing: Sequence[str],
    evaluator: Callable[[], Any],
) -> Outcome:
    """
    Run one optional evaluator.

    Args:
        name: Evaluator name used in bookkeeping
        missing: Names of required input fields that are absent
        evaluator: Zero-argument callable producing the evaluator result

    Returns:
        Skipped when inputs are missing, Failed when the evaluator raised,
        otherwise Ok with its result
    """
    if missing:
        reason = f"missing {', '.join(missing)}"
        logger.debug(f"Skipping {name}: {reason}")
        return Skipped(name, reason)

    try:
        return Ok(name, evaluator())
    except Exception as e:
        logger.warning(f"{name} failed: {e}")
        return Failed(name, str(e) or type(e).__name__)


def value_of(outcome: Optional[Outcome]) -> Any:
    """Result of an Ok outcome, else None."""
    if isinstance(outcome, Ok):
        return outcome.value
    return None


def loaded_names(outcomes: Dict[str, Outcome]) -> List[str]:
    return [name for name, outcome in outcomes.items() if isinstance(outcome, Ok)]


def error_messages(outcomes: Dict[str, Outcome]) -> List[str]:
    return [
        f"{name}: {outcome.reason}"
        for name, outcome in outcomes.items()
        if isinstance(outcome, Failed)
    ]
