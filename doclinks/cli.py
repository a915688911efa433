"""CLI entrypoints for doclinks commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .logging import configure_logging
from .models import RULE_COLUMNS
from .orchestrator import Orchestrator
from .report import format_report
from .validators import LINK_INFO, LINK_TESTS, LinkValidationError


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    kwargs["default"] = argparse.SUPPRESS if suppress_default else False
    parser.add_argument("-v", "--verbose", **kwargs)


def _add_quiet_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Only log warnings and errors.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="doclinks",
        description="Validate links and images in markdown lessons.",
    )
    _add_verbose_option(parser)
    _add_quiet_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check",
        help="Validate links in markdown files or directories.",
    )
    _add_verbose_option(check_parser, suppress_default=True)
    _add_quiet_option(check_parser, suppress_default=True)
    check_parser.add_argument(
        "paths",
        nargs="*",
        default=["."],
        help="Files or directories to check (defaults to current directory).",
    )
    check_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a .doclinks.yml file (defaults to the nearest one).",
    )
    check_parser.add_argument(
        "--ignore",
        action="append",
        default=[],
        choices=RULE_COLUMNS,
        metavar="RULE",
        help="Do not report failures of RULE (repeatable).",
    )
    check_parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when any link issue is found.",
    )

    rules_parser = subparsers.add_parser(
        "rules",
        help="List the link rules and what they check.",
    )
    _add_verbose_option(rules_parser, suppress_default=True)
    _add_quiet_option(rules_parser, suppress_default=True)
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for doclinks commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet))

    if args.command == "rules":
        for rule in RULE_COLUMNS:
            info = LINK_INFO.get(rule) or "(not implemented)"
            template = LINK_TESTS.get(rule) or "-"
            print(f"{rule}\n  {template}\n  {info}")
        return

    if args.command == "check":
        try:
            config = load_config(args.config) if args.config is not None else None
            orchestrator = Orchestrator(config=config)
            outcome = orchestrator.run_check(
                args.paths, ignore=args.ignore, strict=bool(args.strict)
            )
        except LinkValidationError as exc:
            print(format_report(exc.issues))
            parser.exit(1, f"doclinks check failed: {exc}\n")
        except ConfigError as exc:
            parser.exit(1, f"Invalid configuration: {exc}\n")
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        print(format_report(outcome.issues))
        for result in outcome.documents:
            for match in result.rot.rows:
                print(f"[known link rot]: {match.orig} -> try {match.replacement}")
        return

    parser.exit(1, "Unknown command\n")  # pragma: no cover - argparse enforces choices


if __name__ == "__main__":
    main(sys.argv[1:])
