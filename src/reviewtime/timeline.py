"""Review timeline reconstruction.

This module turns the raw timeline events and review submissions of a single
pull request into the two instants that matter for review latency:

- the earliest ``review_requested`` event, used as the lower bound for reviews
- the first eligible review and the first eligible approval

Everything here is a pure function of its inputs.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from .models import APPROVED, BOT, PENDING, REVIEW_REQUESTED, LifecycleEvent, ReviewSubmission


def is_eligible_review(review: ReviewSubmission, baseline: Optional[datetime]) -> bool:
    """Return whether a review submission counts as a review signal.

    Rejects, in order: pending or stateless reviews, reviews authored by a bot
    account, and reviews submitted strictly before ``baseline`` when one is
    given. A review without a submission time cannot be placed on the timeline
    and is rejected as well.
    """
    if not review.state or review.state == PENDING:
        return False

    if review.submitted_at is None:
        return False

    if review.author_kind == BOT:
        return False

    if baseline is not None and review.submitted_at < baseline:
        return False

    return True


def earliest_review_request(events: Iterable[LifecycleEvent]) -> Optional[datetime]:
    """Return the earliest ``review_requested`` timestamp among ``events``.

    The events may be unordered, come from several pages, or contain
    duplicates. Returns ``None`` when no timestamped request event exists.
    """
    earliest: Optional[datetime] = None

    for event in events:
        if event.kind != REVIEW_REQUESTED or event.occurred_at is None:
            continue
        if earliest is None or event.occurred_at < earliest:
            earliest = event.occurred_at

    return earliest


def correlate_reviews(
    reviews: Iterable[ReviewSubmission],
    baseline: Optional[datetime],
) -> Tuple[Optional[datetime], Optional[datetime]]:
    """Find the first review and the first approval among eligible reviews.

    Eligible reviews are ordered by submission time with a stable sort, so
    reviews submitted in the same instant keep their fetch order.

    Returns:
        ``(first_review_at, first_approval_at)``; each is ``None`` when no
        eligible review (or approval) exists.
    """
    eligible: List[ReviewSubmission] = sorted(
        (review for review in reviews if is_eligible_review(review, baseline)),
        key=lambda review: review.submitted_at,
    )

    first_review_at = eligible[0].submitted_at if eligible else None
    first_approval_at = next(
        (review.submitted_at for review in eligible if review.state == APPROVED),
        None,
    )

    return first_review_at, first_approval_at
