"""Orchestration of one arch-test run: scan, evaluate, report."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from graph.build import scan_tree
from models.diagnostics import FatalError
from rules.builtin import BUILTIN_RULES
from rules.config import ConfigError, load_config
from rules.engine import run_rules, select_rules

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from pathlib import Path

    from models.diagnostics import ParseError, RuleFault, Violation
    from rules.config import ArchTestConfig
    from rules.engine import Rule, RuleResult

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_VIOLATIONS = 1
EXIT_FATAL = 2


class CheckState(str, Enum):
    """Phases of a run. ``REPORTING`` and ``FAILED_FATAL`` are terminal."""

    SCANNING = "scanning"
    EVALUATING = "evaluating"
    REPORTING = "reporting"
    FAILED_FATAL = "failed-fatal"


@dataclass
class CheckOutcome:
    state: CheckState = CheckState.SCANNING
    module_count: int = 0
    unit_count: int = 0
    results: list[RuleResult] = field(default_factory=list)
    parse_errors: list[ParseError] = field(default_factory=list)
    fatal: str | None = None

    @property
    def violations(self) -> list[Violation]:
        return [violation for result in self.results for violation in result.violations]

    @property
    def faults(self) -> list[RuleFault]:
        return [result.fault for result in self.results if result.fault is not None]

    @property
    def exit_code(self) -> int:
        if self.state is CheckState.FAILED_FATAL or self.faults:
            return EXIT_FATAL
        if self.violations or self.parse_errors:
            return EXIT_VIOLATIONS
        return EXIT_OK


def _drop_disabled(
    selected: list[Rule], rules: Sequence[Rule], disabled: list[str]
) -> list[Rule]:
    known = {rule.name for rule in rules}
    unknown = sorted(set(disabled) - known)
    if unknown:
        msg = f"disabled_rules names unknown rule(s): {', '.join(unknown)}"
        raise ConfigError(msg)
    return [rule for rule in selected if rule.name not in disabled]


def run_check(
    root: Path,
    *,
    config: ArchTestConfig | None = None,
    config_path: Path | None = None,
    rules: Sequence[Rule] = BUILTIN_RULES,
    only: Iterable[str] | None = None,
    skip: Iterable[str] = (),
) -> CheckOutcome:
    """Scan ``root`` once, evaluate the selected rules and return the outcome.

    Fatal conditions (unreadable root, no manifests, colliding module
    identities, invalid configuration) stop the run before evaluation and
    leave the outcome in the ``FAILED_FATAL`` state. Parse errors and rule
    violations are collected; evaluation always completes.

    Raises:
        ValueError: If ``only`` or ``skip`` names an unknown rule.
    """
    outcome = CheckOutcome()
    selected = select_rules(rules, only=only, skip=skip)

    try:
        if config is None:
            config = load_config(root, config_path)
        selected = _drop_disabled(selected, rules, config.disabled_rules)
        scan = scan_tree(root, config)
    except (ConfigError, FatalError) as exc:
        logger.debug("fatal error while scanning", exc_info=True)
        outcome.state = CheckState.FAILED_FATAL
        outcome.fatal = str(exc)
        return outcome

    outcome.module_count = len(scan.model.modules_of())
    outcome.unit_count = scan.source_file_count
    outcome.parse_errors = scan.parse_errors

    outcome.state = CheckState.EVALUATING
    outcome.results = run_rules(selected, scan.model)

    outcome.state = CheckState.REPORTING
    logger.info(
        "%d violation(s), %d parse error(s), %d rule fault(s)",
        len(outcome.violations),
        len(outcome.parse_errors),
        len(outcome.faults),
    )
    return outcome


__all__ = [
    "EXIT_FATAL",
    "EXIT_OK",
    "EXIT_VIOLATIONS",
    "CheckOutcome",
    "CheckState",
    "run_check",
]
