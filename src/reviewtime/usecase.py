"""Application use case: measure review time for a repository's pull requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Protocol

from .errors import ApiError
from .metrics import measure
from .models import ListOptions, PullRequest, ReviewMetrics

logger = logging.getLogger(__name__)


class PullRequestRepository(Protocol):
    """Source of pull requests enriched with review request time and reviews."""

    def list_pull_requests(self, owner: str, repo: str, options: ListOptions) -> List[PullRequest]:
        ...

    def get_pull_request(self, owner: str, repo: str, number: int) -> PullRequest:
        ...


@dataclass(frozen=True)
class MeasureOptions:
    """Which pull requests of which repository to measure."""

    owner: str
    repo: str
    state: Optional[str] = "closed"
    since: Optional[datetime] = None
    until: Optional[datetime] = None


class ReviewTimeUseCase:
    """Fetches pull requests from a repository and measures each of them."""

    _PAGE_SIZE = 100

    def __init__(self, pr_repository: PullRequestRepository) -> None:
        self._pr_repository = pr_repository

    def execute(self, options: MeasureOptions) -> List[ReviewMetrics]:
        """Return metrics for every matching pull request, in fetch order.

        Raises:
            ApiError: If the pull requests cannot be listed.
        """
        list_options = ListOptions(
            state=options.state,
            since=options.since,
            until=options.until,
            sort="created",
            direction="desc",
            per_page=self._PAGE_SIZE,
        )

        try:
            prs = self._pr_repository.list_pull_requests(options.owner, options.repo, list_options)
        except ApiError as exc:
            raise ApiError(f"failed to list pull requests: {exc}") from exc

        metrics = [measure(pr) for pr in prs]
        logger.info(
            "Measured pull requests",
            extra={
                "owner": options.owner,
                "repo": options.repo,
                "prs_total": len(metrics),
                "reviewed": sum(1 for metric in metrics if metric.time_to_review is not None),
                "approved": sum(1 for metric in metrics if metric.time_to_approve is not None),
            },
        )
        return metrics

    def measure_pull_request(self, owner: str, repo: str, number: int) -> ReviewMetrics:
        """Return metrics for a single pull request.

        Raises:
            ApiError: If the pull request cannot be fetched.
        """
        try:
            pr = self._pr_repository.get_pull_request(owner, repo, number)
        except ApiError as exc:
            raise ApiError(f"failed to get pull request #{number}: {exc}") from exc

        return measure(pr)
