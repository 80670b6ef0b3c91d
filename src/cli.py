"""Command-line interface for arch-test."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from check.run import EXIT_FATAL, EXIT_OK, EXIT_VIOLATIONS, CheckState, run_check
from report.render import RENDERERS, render_rule_table
from rules.builtin import BUILTIN_RULE_NAMES, BUILTIN_RULES
from verify.verify import verify_determinism


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="arch-test",
        description="Check architectural boundaries of a multi-module Go tree.",
    )
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Tree root to analyze (default: .)",
    )
    parser.add_argument(
        "--rule",
        dest="only",
        action="append",
        choices=BUILTIN_RULE_NAMES,
        metavar="NAME",
        help="Evaluate only this rule (repeatable)",
    )
    parser.add_argument(
        "--skip",
        action="append",
        default=[],
        choices=BUILTIN_RULE_NAMES,
        metavar="NAME",
        help="Do not evaluate this rule (repeatable)",
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        choices=sorted(RENDERERS),
        default="text",
        help="Report format (default: text)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Config file (default: <root>/archtest.toml when present)",
    )
    parser.add_argument(
        "--list-rules",
        action="store_true",
        help="List the registered rules and exit",
    )
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Run the check twice and fail if the reports differ",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-vv for debug output)",
    )
    return parser


def _configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _resolve_config_path(config: str | None) -> Path | None:
    if config is None:
        return None
    return Path(config).expanduser().resolve()


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.list_rules:
        sys.stdout.write(render_rule_table(BUILTIN_RULES))
        return EXIT_OK

    root = Path(args.root).expanduser().resolve()
    check_kwargs = {
        "config_path": _resolve_config_path(args.config),
        "only": args.only,
        "skip": args.skip,
    }
    render = RENDERERS[args.output_format]

    if args.verify:
        result = verify_determinism(
            root=root, output_format=args.output_format, **check_kwargs
        )
        outcome = result.outcome
        report = result.first
    else:
        result = None
        outcome = run_check(root, **check_kwargs)
        report = render(outcome)

    if outcome.state is CheckState.FAILED_FATAL:
        sys.stderr.write(f"error: {outcome.fatal}\n")
        return EXIT_FATAL

    sys.stdout.write(report)

    if result is not None and not result.ok:
        sys.stderr.write("error: report differs between two runs on the same tree\n")
        return max(outcome.exit_code, EXIT_VIOLATIONS)

    return outcome.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
