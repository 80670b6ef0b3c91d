"""Determinism verification for arch-test reports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from check.run import run_check
from report.render import RENDERERS

if TYPE_CHECKING:
    from pathlib import Path

    from check.run import CheckOutcome


@dataclass(frozen=True)
class DeterminismResult:
    ok: bool
    outcome: CheckOutcome
    first: str
    second: str


def verify_determinism(
    *, root: Path, output_format: str = "text", **kwargs: Any
) -> DeterminismResult:
    """Verify that two runs over an unchanged tree render identical reports.

    Runs the full check twice with the same arguments and compares the two
    rendered reports byte for byte.

    Args:
        root: Tree to analyze.
        output_format: Renderer to compare ("text" or "json").
        **kwargs: Forwarded to ``run_check`` (config, rule selection).

    Returns:
        DeterminismResult with ok status, the first outcome and both reports.
    """
    render = RENDERERS[output_format]

    first_outcome = run_check(root, **kwargs)
    first = render(first_outcome)
    second = render(run_check(root, **kwargs))

    return DeterminismResult(
        ok=first.encode("utf-8") == second.encode("utf-8"),
        outcome=first_outcome,
        first=first,
        second=second,
    )
