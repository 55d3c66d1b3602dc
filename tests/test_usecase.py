"""Tests for the review time use case orchestration."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import Mock

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from reviewtime.errors import ApiError
from reviewtime.models import ListOptions, PullRequest, ReviewSubmission
from reviewtime.usecase import MeasureOptions, ReviewTimeUseCase


def _utc(day: int) -> datetime:
    return datetime(2024, 1, day, tzinfo=timezone.utc)


def _make_pr(number: int, reviews=()) -> PullRequest:
    return PullRequest(
        number=number,
        title=f"PR {number}",
        author="author",
        state="closed",
        created_at=_utc(1),
        merged_at=_utc(5),
        first_review_requested_at=_utc(2),
        reviews=tuple(reviews),
    )


def test_execute_lists_once_and_preserves_order():
    """Verify the use case issues one list call and keeps the collaborator's ordering."""
    prs = [_make_pr(3), _make_pr(1), _make_pr(2)]
    repository = Mock()
    repository.list_pull_requests.return_value = prs

    since = _utc(1)
    metrics = ReviewTimeUseCase(repository).execute(
        MeasureOptions(owner="octo", repo="hello", state="closed", since=since)
    )

    assert [metric.pull_request.number for metric in metrics] == [3, 1, 2]
    repository.list_pull_requests.assert_called_once_with(
        "octo",
        "hello",
        ListOptions(state="closed", since=since, until=None, sort="created", direction="desc", per_page=100),
    )


def test_execute_computes_metrics_per_pull_request():
    """Verify each returned pull request is correlated and measured."""
    reviewed = _make_pr(
        1,
        reviews=[ReviewSubmission(state="APPROVED", submitted_at=_utc(3), author_kind="User")],
    )
    repository = Mock()
    repository.list_pull_requests.return_value = [reviewed, _make_pr(2)]

    first, second = ReviewTimeUseCase(repository).execute(MeasureOptions(owner="octo", repo="hello"))

    assert first.time_to_review == timedelta(days=1)
    assert first.time_to_approve == timedelta(days=1)
    assert second.time_to_review is None
    assert second.total_duration == timedelta(days=3)


def test_execute_empty_result_returns_empty_list():
    """Verify no matching pull requests produces an empty metrics list."""
    repository = Mock()
    repository.list_pull_requests.return_value = []

    assert ReviewTimeUseCase(repository).execute(MeasureOptions(owner="octo", repo="hello")) == []


def test_execute_list_failure_raises_annotated_api_error():
    """Verify a list failure propagates as ApiError naming the failing operation."""
    repository = Mock()
    repository.list_pull_requests.side_effect = ApiError("503 Service Unavailable")

    with pytest.raises(ApiError, match="failed to list pull requests: 503"):
        ReviewTimeUseCase(repository).execute(MeasureOptions(owner="octo", repo="hello"))

    assert repository.list_pull_requests.call_count == 1


def test_measure_pull_request_uses_single_fetch():
    """Verify measuring one pull request fetches it by number."""
    repository = Mock()
    repository.get_pull_request.return_value = _make_pr(42)

    metric = ReviewTimeUseCase(repository).measure_pull_request("octo", "hello", 42)

    repository.get_pull_request.assert_called_once_with("octo", "hello", 42)
    assert metric.pull_request.number == 42
    assert metric.total_duration == timedelta(days=3)


def test_measure_pull_request_failure_raises_annotated_api_error():
    """Verify a single fetch failure names the pull request number."""
    repository = Mock()
    repository.get_pull_request.side_effect = ApiError("404 Not Found")

    with pytest.raises(ApiError, match="failed to get pull request #42"):
        ReviewTimeUseCase(repository).measure_pull_request("octo", "hello", 42)
