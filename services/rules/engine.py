"""Ordered rule evaluation for pathway decision trees."""

from typing import Any, Callable, Iterable, NamedTuple, Optional
import logging

logger = logging.getLogger(__name__)


class Rule(NamedTuple):
    """A named predicate paired with the builder it triggers."""

    name: str
    applies: Callable[..., bool]
    build: Callable[..., Any]


def first_match(rules: Iterable[Rule], subject: Any) -> Optional[Any]:
    """
    Evaluate rules in priority order and return the first built result.

    Returns None when no rule applies.
    """
    for rule in rules:
        if rule.applies(subject):
            logger.debug(f"Rule {rule.name} matched")
            return rule.build(subject)
    return None


def apply_layers(rules: Iterable[Rule], subject: Any, draft: Any) -> Any:
    """
    Apply every matching rule in order, threading a draft result through.

    Each builder receives (subject, draft) and returns the next draft, so a
    later rule can refine or defer to what an earlier one decided.
    """
    for rule in rules:
        if rule.applies(subject):
            logger.debug(f"Rule {rule.name} applied")
            draft = rule.build(subject, draft)
    return draft
