"""Rule table and evaluation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from models.diagnostics import RuleFault, Violation

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from graph.model import GraphModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rule:
    """A named structural check over the graph model."""

    name: str
    description: str
    check: Callable[[GraphModel], Iterable[Violation]]


@dataclass(frozen=True)
class RuleResult:
    rule: Rule
    violations: tuple[Violation, ...] = field(default_factory=tuple)
    fault: RuleFault | None = None

    @property
    def passed(self) -> bool:
        return self.fault is None and not self.violations


def select_rules(
    rules: Sequence[Rule],
    *,
    only: Iterable[str] | None = None,
    skip: Iterable[str] = (),
) -> list[Rule]:
    """Return the rules to evaluate, keeping registration order.

    Raises:
        ValueError: If ``only`` or ``skip`` names a rule that is not registered.
    """
    known = {rule.name for rule in rules}
    only_set = set(only) if only else None
    skip_set = set(skip)

    unknown = sorted(((only_set or set()) | skip_set) - known)
    if unknown:
        msg = f"Unknown rule(s): {', '.join(unknown)}"
        raise ValueError(msg)

    return [
        rule
        for rule in rules
        if (only_set is None or rule.name in only_set) and rule.name not in skip_set
    ]


def run_rule(rule: Rule, model: GraphModel) -> RuleResult:
    """Evaluate one rule, converting any internal error into a RuleFault."""
    try:
        violations = tuple(rule.check(model))
    except Exception as exc:  # noqa: BLE001
        logger.exception("rule %s failed", rule.name)
        return RuleResult(
            rule=rule,
            fault=RuleFault(rule=rule.name, message=f"{type(exc).__name__}: {exc}"),
        )
    logger.debug("rule %s: %d violation(s)", rule.name, len(violations))
    return RuleResult(rule=rule, violations=violations)


def run_rules(rules: Sequence[Rule], model: GraphModel) -> list[RuleResult]:
    """Evaluate every rule against the same model, in order."""
    return [run_rule(rule, model) for rule in rules]


__all__ = ["Rule", "RuleResult", "run_rule", "run_rules", "select_rules"]
