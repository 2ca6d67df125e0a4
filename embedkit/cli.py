"""Command-line interface for parsing embed codes and normalizing block attributes.

Usage:
    embedkit list
    embedkit parse google-calendar '<iframe src="https://calendar.google.com/..."></iframe>'
    echo "Trattoria Roma (ID:98765)" | embedkit parse opentable
    embedkit select opentable "Trattoria Roma (ID:98765)" "12345"
    embedkit normalize opentable '{"rid": ["123", "abc"], "style": "huge"}'
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from embedkit.pipeline.embed_parser import EmbedParser
from embedkit.utils.config import load_config
from embedkit.utils.log_setup import setup_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="embedkit",
        description="Extract block attributes from pasted embed codes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: built-in defaults plus environment)",
    )
    parser.add_argument(
        "--integrations",
        type=Path,
        default=None,
        help="YAML file with additional integrations",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List known integrations")

    parse_cmd = subparsers.add_parser("parse", help="Parse pasted embed text")
    parse_cmd.add_argument("integration", help="Integration name (see 'list')")
    parse_cmd.add_argument("text", nargs="?", default=None, help="Embed text (default: stdin)")

    select_cmd = subparsers.add_parser("select", help="Parse picker selections")
    select_cmd.add_argument("integration", help="Integration name (see 'list')")
    select_cmd.add_argument("labels", nargs="+", help="Bare ids or 'Name (ID:123)' labels")

    normalize_cmd = subparsers.add_parser("normalize", help="Normalize stored attributes")
    normalize_cmd.add_argument("integration", help="Integration name (see 'list')")
    normalize_cmd.add_argument(
        "attributes", nargs="?", default=None, help="JSON object (default: stdin)"
    )

    return parser


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    config = load_config(args.config)
    if args.integrations is not None:
        config.extraction.integrations_file = str(args.integrations)
    setup_logging(config.logging, verbose=args.verbose)

    try:
        parser = EmbedParser(config)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Failed to load integrations: {e}")
        return 2

    if args.command == "list":
        for name in parser.registry.names():
            integration = parser.registry.get(name)
            shapes = ", ".join(shape.name for shape in integration.shapes)
            print(f"{name}\t{integration.title}\t{shapes}")
        return 0

    try:
        if args.command == "parse":
            text = args.text if args.text is not None else sys.stdin.read()
            outcome = parser.parse(text, args.integration)
        elif args.command == "select":
            outcome = parser.parse_selection(args.labels, args.integration)
        else:
            raw = args.attributes if args.attributes is not None else sys.stdin.read()
            try:
                stored = json.loads(raw or "{}")
            except json.JSONDecodeError as e:
                logger.error(f"Attributes must be a JSON object: {e}")
                return 2
            _print_json(parser.normalize(stored, args.integration).model_dump())
            return 0
    except KeyError as e:
        logger.error(str(e.args[0]) if e.args else str(e))
        return 2

    _print_json(outcome.model_dump())
    if not outcome.matched:
        logger.warning(outcome.notice)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
