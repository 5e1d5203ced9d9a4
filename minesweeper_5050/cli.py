"""Command line entry point: JSON probability map in, JSON groups out."""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .board import BoardSnapshot
from .detector import DEFAULT_EPSILON, DEFAULT_MAX_GROUP_SIZE, DetectorConfig, PatternDetector
from .errors import FormatError
from .analysis import format_probability_map
from .utils import reject_duplicate_keys


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minesweeper-5050",
        description="Detect forced 50/50 guesses in a mine probability map.",
    )
    parser.add_argument(
        "file",
        nargs="?",
        help='JSON object mapping "<row>,<col>" to probability (default: stdin).',
    )
    parser.add_argument("--epsilon", type=float, default=DEFAULT_EPSILON)
    parser.add_argument("--max-group-size", type=int, default=DEFAULT_MAX_GROUP_SIZE)
    parser.add_argument(
        "--flat", action="store_true", help="Print all grouped cells as one flat list."
    )
    parser.add_argument(
        "--show", action="store_true", help="Also print the board as a text grid."
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the CLI.

    Returns:
        0 on success, 1 for unreadable JSON or invalid options, 2 for an
        input format error (reported as JSON on stderr).
    """
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        config = DetectorConfig(epsilon=args.epsilon, max_group_size=args.max_group_size)
    except (TypeError, ValueError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 1

    try:
        if args.file:
            with open(args.file, encoding="utf-8") as fh:
                raw = json.load(fh, object_pairs_hook=reject_duplicate_keys)
        else:
            raw = json.load(sys.stdin, object_pairs_hook=reject_duplicate_keys)

        if not isinstance(raw, dict):
            print("Probability map must be a JSON object.", file=sys.stderr)
            return 1

        snapshot = BoardSnapshot.build(raw)
    except FormatError as exc:
        print(json.dumps({"error": exc.to_dict()}), file=sys.stderr)
        return 2
    except (OSError, ValueError) as exc:
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors.
        print(f"Could not read probability map: {exc}", file=sys.stderr)
        return 1

    report = PatternDetector(config).report(snapshot)

    if args.show:
        try:
            print(format_probability_map(snapshot, report.groups, epsilon=config.epsilon))
            print()
        except ValueError as exc:
            print(f"Not showing board: {exc}", file=sys.stderr)

    result = report.to_list()
    if args.flat:
        print(json.dumps([cell for group in result for cell in group]))
    else:
        print(json.dumps(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
