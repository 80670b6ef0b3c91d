"""Deterministic rendering of check outcomes."""

from __future__ import annotations

from typing import TYPE_CHECKING

import orjson

from check.run import CheckState

if TYPE_CHECKING:
    from collections.abc import Sequence

    from check.run import CheckOutcome
    from rules.engine import Rule

REPORT_SCHEMA_VERSION = 1


def _status_word(outcome: CheckOutcome) -> str:
    if outcome.state is CheckState.FAILED_FATAL:
        return "ERROR"
    return "PASS" if outcome.exit_code == 0 else "FAIL"


def render_text(outcome: CheckOutcome) -> str:
    """Render the outcome as a plain-text report.

    The text depends only on the outcome, never on time or the host, so an
    unchanged tree renders byte-identically across runs.
    """
    if outcome.state is CheckState.FAILED_FATAL:
        return f"arch-test: fatal: {outcome.fatal}\nresult: ERROR\n"

    lines = [
        f"arch-test: {outcome.module_count} module(s), "
        f"{outcome.unit_count} compilation unit(s)"
    ]

    for result in outcome.results:
        rule = result.rule
        if result.fault is not None:
            lines.append(f"[FAULT] {rule.name}: {rule.description}")
            lines.append(f"  ! {result.fault.message}")
            continue
        marker = "PASS" if result.passed else "FAIL"
        lines.append(f"[{marker}] {rule.name}: {rule.description}")
        lines.extend(f"  - {v.subject}: {v.message}" for v in result.violations)

    if outcome.parse_errors:
        lines.append("parse errors:")
        lines.extend(
            f"  - {error.location()}: {error.message}" for error in outcome.parse_errors
        )

    lines.append(
        f"result: {_status_word(outcome)} "
        f"({len(outcome.violations)} violation(s), "
        f"{len(outcome.parse_errors)} parse error(s), "
        f"{len(outcome.faults)} rule fault(s))"
    )
    return "\n".join(lines) + "\n"


def report_dict(outcome: CheckOutcome) -> dict[str, object]:
    return {
        "schema_version": REPORT_SCHEMA_VERSION,
        "status": _status_word(outcome),
        "exit_code": outcome.exit_code,
        "fatal": outcome.fatal,
        "module_count": outcome.module_count,
        "unit_count": outcome.unit_count,
        "rules": [
            {
                "name": result.rule.name,
                "description": result.rule.description,
                "passed": result.passed,
                "fault": result.fault.to_dict() if result.fault else None,
                "violations": [v.to_dict() for v in result.violations],
            }
            for result in outcome.results
        ],
        "parse_errors": [error.to_dict() for error in outcome.parse_errors],
    }


def render_json(outcome: CheckOutcome) -> str:
    """Render the outcome as sorted-key, indented JSON."""
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    return orjson.dumps(report_dict(outcome), option=opts).decode("utf-8") + "\n"


def render_rule_table(rules: Sequence[Rule]) -> str:
    width = max((len(rule.name) for rule in rules), default=0)
    return "".join(f"{rule.name.ljust(width)}  {rule.description}\n" for rule in rules)


RENDERERS = {"text": render_text, "json": render_json}


__all__ = [
    "RENDERERS",
    "REPORT_SCHEMA_VERSION",
    "render_json",
    "render_rule_table",
    "render_text",
    "report_dict",
]
