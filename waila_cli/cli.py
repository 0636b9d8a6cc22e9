"""
Command-line entry point: what am I looking at?

Classifies a Bitcoin or Lightning string and prints the result as JSON.

Usage:
    waila-cli bc1qar0srrr7xfkvy5l643lydnw9re59gtzzwf5mdq
    waila-cli --units btc "bitcoin:1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa?amount=0.001"
    waila-cli --all --flatten notabitcoinstring
"""

import argparse
import logging
import sys
from typing import List, Optional, Tuple

from . import __version__
from .adapter import classify_query
from .errors import InternalError, UsageError
from .formatter import render, should_display
from .options import OutputOptions, log_level_from_env
from .units import DisplayUnit

logger = logging.getLogger(__name__)

PROG = "waila-cli"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Identify a Bitcoin or Lightning string and print what it is as JSON.",
    )
    parser.add_argument("query", metavar="QUERY", help="bitcoin string to parse")
    parser.add_argument(
        "-a", "--all", dest="show_all", action="store_true",
        help="show all results including the None type",
    )
    parser.add_argument(
        "-n", "--nostr", action="store_true",
        help="also attempt Nostr pubkey parsing, hex and bech32 (experimental)",
    )
    parser.add_argument(
        "-f", "--flatten", action="store_true",
        help="emit compact JSON without extra whitespace",
    )
    parser.add_argument(
        "-u", "--units", dest="unit", metavar="UNIT",
        default=DisplayUnit.SAT.value,
        help="bitcoin denomination to display: btc, mbtc, sat or msat (default: sat)",
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"%(prog)s {__version__}",
    )
    return parser


def parse_args(argv: Optional[List[str]] = None) -> Tuple[str, OutputOptions]:
    """
    Turn command-line arguments into a query and run options.

    Usage errors are reported by argparse on stderr and end the process with
    exit status 2; ``--help`` and ``--version`` exit with status 0.

    Args:
        argv: Arguments without the program name, defaults to ``sys.argv[1:]``

    Returns:
        Tuple[str, OutputOptions]: The query and the options
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        options = _build_options(args)
    except UsageError as exc:
        parser.error(str(exc))
    return args.query, options


def _build_options(args: argparse.Namespace) -> OutputOptions:
    try:
        unit = DisplayUnit.parse(args.unit)
    except ValueError as exc:
        raise UsageError(f"argument -u/--units: {exc}") from exc
    return OutputOptions(
        show_all=args.show_all,
        flatten=args.flatten,
        unit=unit,
        nostr=args.nostr,
    )


def setup_logging() -> None:
    level_name = log_level_from_env()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run one classification and print the result.

    Returns:
        int: Process exit status, 0 on success and 1 on internal failure
    """
    setup_logging()
    query, options = parse_args(argv)
    logger.debug("Classifying %r with %s", query, options)

    try:
        result = classify_query(query, options)
    except InternalError as exc:
        print(f"{PROG}: internal error: {exc}", file=sys.stderr)
        return 1

    if not should_display(result, options):
        logger.debug("Nothing recognized; output suppressed")
        return 0

    print(render(result, options))
    return 0


if __name__ == "__main__":
    sys.exit(main())
