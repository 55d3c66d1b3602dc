"""Review latency metrics for a single pull request.

All durations are measured from one baseline per pull request: the first
review request when known, otherwise the creation time. Durations are not
clamped; inconsistent upstream data can yield a negative value.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from .models import PullRequest, ReviewMetrics
from .timeline import correlate_reviews


def baseline_for(pr: PullRequest) -> datetime:
    """Return the instant every duration of ``pr`` is measured from."""
    if pr.first_review_requested_at is not None:
        return pr.first_review_requested_at
    return pr.created_at


def calculate_metrics(
    pr: PullRequest,
    first_review_at: Optional[datetime],
    first_approval_at: Optional[datetime],
) -> ReviewMetrics:
    """Combine a pull request's timestamps into its review metrics."""
    baseline = baseline_for(pr)

    time_to_review = first_review_at - baseline if first_review_at is not None else None
    time_to_approve = first_approval_at - baseline if first_approval_at is not None else None

    if pr.merged_at is not None:
        total_duration = pr.merged_at - baseline
    elif pr.closed_at is not None:
        total_duration = pr.closed_at - baseline
    else:
        total_duration = None

    return ReviewMetrics(
        pull_request=pr,
        time_to_review=time_to_review,
        time_to_approve=time_to_approve,
        total_duration=total_duration,
    )


def measure(pr: PullRequest) -> ReviewMetrics:
    """Correlate the reviews of ``pr`` and compute its metrics."""
    first_review_at, first_approval_at = correlate_reviews(
        pr.reviews,
        pr.first_review_requested_at,
    )
    return calculate_metrics(pr, first_review_at, first_approval_at)
