"""Domain models for pull request review timelines.

These dataclasses model only the subset of GitHub payload fields that are
required to reconstruct a review timeline and derive its durations. Missing
timestamps are ``None``; there is no zero-time sentinel.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional, Tuple

REVIEW_REQUESTED = "review_requested"
PENDING = "PENDING"
APPROVED = "APPROVED"
BOT = "Bot"


@dataclass(frozen=True, slots=True)
class ReviewSubmission:
    """A single review as returned by the pull request reviews endpoint."""

    state: str
    submitted_at: Optional[datetime]
    author_kind: str
    author: str = ""


@dataclass(frozen=True, slots=True)
class LifecycleEvent:
    """One entry of a pull request's issue timeline."""

    kind: str
    occurred_at: Optional[datetime]


@dataclass(frozen=True, slots=True)
class PullRequest:
    """A pull request enriched with its review request time and raw reviews."""

    number: int
    title: str
    author: str
    state: str
    created_at: datetime
    merged_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    first_review_requested_at: Optional[datetime] = None
    reviews: Tuple[ReviewSubmission, ...] = field(default_factory=tuple)
    id: Optional[int] = None


@dataclass(frozen=True, slots=True)
class ReviewMetrics:
    """Durations measured for one pull request from its baseline timestamp."""

    pull_request: PullRequest
    time_to_review: Optional[timedelta] = None
    time_to_approve: Optional[timedelta] = None
    total_duration: Optional[timedelta] = None


@dataclass(frozen=True, slots=True)
class ListOptions:
    """Query options for listing pull requests of a repository.

    ``state`` is ``"open"``, ``"closed"`` or ``None`` for no restriction.
    ``since`` and ``until`` bound the creation date inclusively.
    """

    state: Optional[str] = None
    since: Optional[datetime] = None
    until: Optional[datetime] = None
    sort: str = "created"
    direction: str = "desc"
    per_page: int = 100
