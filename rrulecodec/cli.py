"""Command-line interface for parsing and formatting rule strings."""

import argparse
import json
import logging
import sys
from typing import Any, Callable, Dict, List, Optional, TextIO

from pydantic import ValidationError

from .config.settings import RRuleCodecSettings, get_settings
from .exceptions import RRuleError
from .models import Options
from .parser import RRuleStringParser
from .serializer import options_to_string
from .utils.logging import setup_logging_from_settings

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "VERBOSE", "INFO", "WARNING", "ERROR", "CRITICAL"]


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="rrulecodec",
        description="Convert between RFC 5545 rule strings and structured recurrence options",
    )
    parser.add_argument("--log-level", choices=LOG_LEVELS, type=str.upper, help="Console log level")
    parser.add_argument(
        "--strict-numbers",
        action="store_true",
        help="Reject non-integer values in numeric RRULE attributes",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse", help="Parse a rule string and print options as JSON")
    parse_cmd.add_argument("text", help="Rule string, or '-' to read standard input")

    format_cmd = subparsers.add_parser("format", help="Format options JSON as a rule string")
    format_cmd.add_argument("json", help="Options as JSON, or '-' to read standard input")

    normalize_cmd = subparsers.add_parser(
        "normalize", help="Parse a rule string and write it back in canonical form"
    )
    normalize_cmd.add_argument("text", help="Rule string, or '-' to read standard input")

    return parser


def _read_argument(value: str, stdin: TextIO) -> str:
    if value == "-":
        return stdin.read()
    # Shells pass "\n" literally; accept it as a line break
    return value.replace("\\n", "\n")


def _parse(args: argparse.Namespace, parser: RRuleStringParser, stdin: TextIO) -> str:
    options = parser.parse_string(_read_argument(args.text, stdin))
    return json.dumps(options.to_json_dict(), indent=2)


def _format(args: argparse.Namespace, parser: RRuleStringParser, stdin: TextIO) -> str:
    data: Dict[str, Any] = json.loads(_read_argument(args.json, stdin))
    return options_to_string(Options.from_json_dict(data))


def _normalize(args: argparse.Namespace, parser: RRuleStringParser, stdin: TextIO) -> str:
    return options_to_string(parser.parse_string(_read_argument(args.text, stdin)))


COMMANDS: Dict[str, Callable[[argparse.Namespace, RRuleStringParser, TextIO], str]] = {
    "parse": _parse,
    "format": _format,
    "normalize": _normalize,
}


def main(
    argv: Optional[List[str]] = None,
    settings: Optional[RRuleCodecSettings] = None,
    stdin: TextIO = sys.stdin,
    stdout: TextIO = sys.stdout,
    stderr: TextIO = sys.stderr,
) -> int:
    """Run the command line interface.

    Returns:
        0 on success, 1 if the input was rejected
    """
    args = create_parser().parse_args(argv)

    if settings is None:
        settings = get_settings()
    if args.strict_numbers:
        settings = settings.model_copy(update={"strict_numbers": True})

    setup_logging_from_settings(settings, log_level=args.log_level)
    logger.debug(f"Running {args.command} command")

    try:
        output = COMMANDS[args.command](args, RRuleStringParser(settings), stdin)
    except RRuleError as e:
        print(f"error: {e.message}", file=stderr)
        return 1
    except (json.JSONDecodeError, ValidationError) as e:
        print(f"error: invalid options: {e}", file=stderr)
        return 1

    print(output, file=stdout)
    return 0
