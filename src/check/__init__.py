"""Check orchestration entry points."""

from check.run import (
    EXIT_FATAL,
    EXIT_OK,
    EXIT_VIOLATIONS,
    CheckOutcome,
    CheckState,
    run_check,
)

__all__ = [
    "EXIT_FATAL",
    "EXIT_OK",
    "EXIT_VIOLATIONS",
    "CheckOutcome",
    "CheckState",
    "run_check",
]
