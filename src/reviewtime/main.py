"""Entry point wiring configuration, the GitHub client, the use case and printers."""

from __future__ import annotations

import logging
import sys
from typing import Optional, Sequence

from .cli import parse_args
from .config import load_config
from .errors import ReviewTimeError
from .github_client import GitHubClient
from .printers import get_printer
from .usecase import MeasureOptions, ReviewTimeUseCase

logger = logging.getLogger(__name__)


def configure_logging(debug: bool) -> None:
    """Send log records to stderr, at DEBUG level when ``debug`` is set."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def orchestrate_review_time(argv: Optional[Sequence[str]] = None) -> int:
    """Run the review time report and return a process exit code."""
    try:
        args = parse_args(argv)
    except SystemExit as exc:
        # argparse has already written usage or help; keep --help successful.
        return 0 if exc.code in (0, None) else 1

    try:
        configure_logging(args.debug)

        config = load_config(
            owner=args.owner,
            repo=args.repo,
            state=None if args.state == "all" else args.state,
            since=args.since,
            until=args.until,
            output_format=args.output_format,
            debug=args.debug,
        )

        client = GitHubClient(config=config, logger=logging.getLogger("reviewtime.github"))
        use_case = ReviewTimeUseCase(client)

        if args.number is not None:
            metrics = [use_case.measure_pull_request(config.owner, config.repo, args.number)]
        else:
            metrics = use_case.execute(
                MeasureOptions(
                    owner=config.owner,
                    repo=config.repo,
                    state=config.state,
                    since=config.since,
                    until=config.until,
                )
            )

        get_printer(config.output_format).print(config.full_name, metrics)
        return 0
    except ReviewTimeError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except Exception as exc:
        logger.exception("Unexpected error")
        print(f"Error: {exc}", file=sys.stderr)
        return 1


def main() -> None:
    sys.exit(orchestrate_review_time())


if __name__ == "__main__":
    main()
