"""Command-line argument parsing for measure-review-time."""

from __future__ import annotations

import argparse
import sys
from datetime import datetime, timezone
from typing import NoReturn, Optional, Sequence


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser reporting usage errors as ``Error: <message>`` with exit code 1."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"Error: {message}\n")


def _iso_date(value: str) -> datetime:
    """Parse a ``YYYY-MM-DD`` CLI value as midnight UTC.

    Raises:
        argparse.ArgumentTypeError: If value is not a valid date.
    """
    try:
        parsed = datetime.strptime(value, "%Y-%m-%d")
    except ValueError as exc:
        raise argparse.ArgumentTypeError("invalid date format, use YYYY-MM-DD") from exc

    return parsed.replace(tzinfo=timezone.utc)


def _positive_int(value: str) -> int:
    """Parse and validate a positive integer CLI value."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be an integer") from exc

    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be greater than 0")

    return parsed


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for the review time report.

    Returns:
        Parsed CLI arguments containing the repository, the pull request
        selection (state, creation window or a single number), the output
        format, and the debug flag.
    """
    parser = _ArgumentParser(
        prog="measure-review-time",
        description=(
            "Measure GitHub pull request review latency "
            "(time to first review, time to first approval, total duration)."
        ),
    )

    parser.add_argument(
        "-o",
        "--owner",
        required=True,
        help="Repository owner.",
    )
    parser.add_argument(
        "-r",
        "--repo",
        required=True,
        help="Repository name.",
    )
    parser.add_argument(
        "--since",
        type=_iso_date,
        default=None,
        help="Only PRs created on or after this date (YYYY-MM-DD).",
    )
    parser.add_argument(
        "--until",
        type=_iso_date,
        default=None,
        help="Only PRs created on or before this date (YYYY-MM-DD).",
    )
    parser.add_argument(
        "--state",
        choices=("open", "closed", "all"),
        default="closed",
        help="Pull request state to include (default: closed).",
    )
    parser.add_argument(
        "--number",
        type=_positive_int,
        default=None,
        help="Measure a single pull request by number instead of searching.",
    )
    parser.add_argument(
        "-f",
        "--format",
        dest="output_format",
        choices=("table", "json", "csv"),
        default="table",
        help="Output format (default: table).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )

    return parser.parse_args(argv)
