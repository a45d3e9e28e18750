"""Command-line interface for routecheck."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import __version__
from .settings import default_config_path


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        type=Path,
        help="Root directory holding route records",
    )
    parser.add_argument(
        "--reference",
        type=Path,
        required=True,
        help="Reference list of map names and ids (JSON or CSV)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=default_config_path(),
        help="Settings path (default: ~/.config/routecheck/settings.json)",
    )
    parser.add_argument(
        "--precision",
        type=int,
        help="Decimal places used when fingerprinting coordinates",
    )
    parser.add_argument(
        "--no-mode-defaults",
        action="store_true",
        help="Ignore configured path-pattern map id overrides",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit machine-readable JSON output",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-vv for debug)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="routecheck",
        description="Validate and repair route records against a canonical map list",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"routecheck {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    check_parser = subparsers.add_parser(
        "check",
        help="Report naming, map id and duplicate problems",
    )
    _add_common_arguments(check_parser)
    check_parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on warnings as well as errors",
    )

    fix_parser = subparsers.add_parser(
        "fix",
        help="Insert inferred StartGameMapId values",
    )
    _add_common_arguments(fix_parser)
    fix_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would change without writing files",
    )
    fix_parser.add_argument(
        "--allow-low-confidence",
        action="store_true",
        help="Also insert ids chosen by the lowest-id fallback",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        # Import here to avoid slow startup
        from .logging_setup import configure_logging

        configure_logging(args.verbose)
        if args.command == "check":
            from .commands.check import run_check
            return run_check(args)
        elif args.command == "fix":
            from .commands.fix import run_fix
            return run_fix(args)
        else:
            parser.print_help()
            return 1
    except Exception as exc:  # pragma: no cover - exercised in CLI tests
        from .errors import exit_code_for_exception

        print(str(exc), file=sys.stderr)
        return exit_code_for_exception(exc)


if __name__ == "__main__":
    sys.exit(main())
