"""CLI interface for card-sanitizer — filters text through the sanitizer.

Usage:
    # Redact card numbers (stdin: text, stdout: text with cards truncated)
    echo 'card 4111 1111 1111 1111' | python -m card_sanitizer.cli sanitize

    # Report what would change (stdout: JSON array of [original, redacted])
    echo 'card 4111 1111 1111 1111' | python -m card_sanitizer.cli changes

Defaults come from the YAML file named by CARD_SANITIZER_CONFIG, if set;
command line flags override them.
"""

from __future__ import annotations
import argparse
import json
import logging
import os
import sys
from typing import Any

import structlog

from .config import create_sanitizer, load_from_yaml

CONFIG_ENV = "CARD_SANITIZER_CONFIG"


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _build_options(args: argparse.Namespace) -> dict[str, Any]:
    options: dict[str, Any] = {}
    path = os.environ.get(CONFIG_ENV)
    if path:
        options.update(load_from_yaml(path))
    flags = {
        "replacement_token": args.token,
        "expose_first": args.expose_first,
        "expose_last": args.expose_last,
        "max_length": args.max_length,
        "use_groupings": args.use_groupings,
        "exclude_tracking_numbers": args.exclude_tracking_numbers,
        "parse_flanking": args.parse_flanking,
    }
    options.update({k: v for k, v in flags.items() if v is not None})
    return options


def cmd_sanitize(args: argparse.Namespace, options: dict[str, Any]) -> None:
    """Redact card numbers in stdin text."""
    sanitizer = create_sanitizer(options)
    text = sys.stdin.buffer.read()
    redacted = sanitizer.sanitize(text, return_changes=False)
    if redacted is None:
        sys.stdout.write(text.decode("utf-8", errors="replace"))
    else:
        sys.stdout.write(redacted)


def cmd_changes(args: argparse.Namespace, options: dict[str, Any]) -> None:
    """Print the redactions as a JSON array of [original, redacted] pairs."""
    sanitizer = create_sanitizer(options)
    text = sys.stdin.buffer.read()
    changes = sanitizer.sanitize(text, return_changes=True) or []
    json.dump([list(change) for change in changes], sys.stdout, ensure_ascii=False)
    sys.stdout.write("\n")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="card-sanitizer",
        description="Truncate payment card numbers in text",
    )
    parser.add_argument("--token", default=None, help="Replacement token (default ▇)")
    parser.add_argument("--expose-first", type=int, default=None, help="Leading digits kept")
    parser.add_argument("--expose-last", type=int, default=None, help="Trailing digits kept")
    parser.add_argument("--max-length", type=int, default=None, help="Skip longer inputs")
    parser.add_argument("--use-groupings", action=argparse.BooleanOptionalAction,
                        help="Require issuer digit grouping")
    parser.add_argument("--exclude-tracking-numbers", action=argparse.BooleanOptionalAction,
                        help="Skip numbers that are valid shipping tracking numbers")
    parser.add_argument("--parse-flanking", action=argparse.BooleanOptionalAction,
                        help="Skip numbers glued to letters unless a card keyword is adjacent")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("sanitize", help="Redact card numbers (text stdin)")
    sub.add_parser("changes", help="List redactions as JSON (text stdin)")

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        options = _build_options(args)
        cmds = {
            "sanitize": cmd_sanitize,
            "changes": cmd_changes,
        }
        cmds[args.command](args, options)
    except (TypeError, ValueError) as e:
        sys.stderr.write(f"card-sanitizer: {e}\n")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
