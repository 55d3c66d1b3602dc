"""GitHub REST API client for review timeline data retrieval."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import requests

from .config import Config
from .errors import ApiError
from .models import BOT, LifecycleEvent, ListOptions, PullRequest, ReviewSubmission
from .timeline import earliest_review_request

_module_logger = logging.getLogger(__name__)


class GitHubClient:
    """Small, typed client for the GitHub pull request APIs.

    Every pull request it returns is enriched with its first review request
    time and its raw review submissions.
    """

    _API_VERSION = "2022-11-28"
    _PAGE_SIZE = 100
    _MAX_RETRIES = 5
    _MAX_BACKOFF_SECONDS = 30

    def __init__(
        self,
        config: Config,
        timeout_seconds: int = 30,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """Initialize an authenticated GitHub API client.

        Args:
            config: Validated runtime configuration including the token.
            timeout_seconds: Per-request timeout in seconds.
            logger: Logger for request progress; defaults to the module logger.
        """
        self._config = config
        self._timeout_seconds = timeout_seconds
        self._base_url = config.api_url
        self._logger = logger or _module_logger

        self._session = requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {config.token}",
                "X-GitHub-Api-Version": self._API_VERSION,
            }
        )
        self._logger.info("GitHub client initialized", extra={"api_url": self._base_url})

    def _build_url(self, path: str) -> str:
        """Build a fully qualified API URL from a path below the API root."""
        return f"{self._base_url}/{path.lstrip('/')}"

    def _parse_datetime(self, value: Optional[str]) -> Optional[datetime]:
        """Parse GitHub ISO8601 timestamps into timezone-aware datetimes."""
        if not value:
            return None

        normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
        parsed = datetime.fromisoformat(normalized)
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed

    def _extract_backoff_seconds(self, response: requests.Response, attempt: int) -> int:
        """Compute exponential backoff seconds, honoring Retry-After when available."""
        retry_after_header = response.headers.get("Retry-After")
        if retry_after_header:
            try:
                retry_after_seconds = int(retry_after_header)
                return min(self._MAX_BACKOFF_SECONDS, max(1, retry_after_seconds))
            except ValueError:
                pass

        return min(self._MAX_BACKOFF_SECONDS, 2 ** (attempt - 1))

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        """Execute a GET request with retry logic for 429/5xx responses.

        Raises:
            ApiError: If the request repeatedly fails or returns HTTP >= 400.
        """
        url = self._build_url(path)
        query = dict(params or {})

        last_error: Optional[Exception] = None

        for attempt in range(1, self._MAX_RETRIES + 1):
            try:
                response = self._session.get(url, params=query, timeout=self._timeout_seconds)
            except requests.RequestException as exc:
                last_error = exc
                if attempt == self._MAX_RETRIES:
                    raise ApiError(f"GitHub request failed after retries: GET {url}") from exc
                time.sleep(min(self._MAX_BACKOFF_SECONDS, 2 ** (attempt - 1)))
                continue

            status_code = response.status_code
            is_retryable = status_code == 429 or 500 <= status_code <= 599

            if is_retryable and attempt < self._MAX_RETRIES:
                backoff = self._extract_backoff_seconds(response, attempt)
                self._logger.debug(
                    "Retrying GitHub request",
                    extra={"url": url, "status_code": status_code, "attempt": attempt, "backoff": backoff},
                )
                time.sleep(backoff)
                continue

            if status_code >= 400:
                raise ApiError(
                    "GitHub API request failed: "
                    f"GET {url} returned {status_code} - {response.text}"
                )

            return response

        raise ApiError(f"GitHub request failed after retries: GET {url}") from last_error

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Execute a GET request and decode its JSON body."""
        return self._decode(self._get(path, params=params))

    def _decode(self, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(f"GitHub API returned invalid JSON: GET {response.url}") from exc

    def _get_all_pages(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        items_key: Optional[str] = None,
        per_page: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Fetch every page of a list endpoint, following ``Link: rel="next"``.

        Args:
            path: Endpoint path below the API root.
            params: Extra query parameters sent with every page.
            items_key: Key holding the page items when the payload is an
                object (the search API) rather than a JSON array.
            per_page: Page size; defaults to the client's page size.
        """
        items: List[Dict[str, Any]] = []
        page = 1

        while True:
            query = dict(params or {})
            query["per_page"] = per_page or self._PAGE_SIZE
            query["page"] = page

            response = self._get(path, params=query)
            payload = self._decode(response)
            page_items = payload.get(items_key, []) if items_key else payload

            if not isinstance(page_items, list):
                raise ApiError(f"GitHub API returned unexpected payload shape: GET {path}")

            items.extend(page_items)
            self._logger.debug(
                "Fetched page",
                extra={"path": path, "page": page, "count": len(page_items)},
            )

            if "next" not in (response.links or {}):
                break
            page += 1

        return items

    def _build_search_query(self, owner: str, repo: str, options: ListOptions) -> str:
        """Build the issue search query selecting the repository's pull requests."""
        query = f"repo:{owner}/{repo} is:pr"

        if options.state == "closed":
            query += " is:closed"
        elif options.state == "open":
            query += " is:open"

        if options.since is not None and options.until is not None:
            query += f" created:{options.since:%Y-%m-%d}..{options.until:%Y-%m-%d}"
        elif options.since is not None:
            query += f" created:>={options.since:%Y-%m-%d}"
        elif options.until is not None:
            query += f" created:<={options.until:%Y-%m-%d}"

        return query

    def list_pull_requests(self, owner: str, repo: str, options: ListOptions) -> List[PullRequest]:
        """List and enrich the pull requests of a repository matching ``options``.

        Raises:
            ApiError: If the search, a pull request detail record, or a review
                list cannot be fetched.
        """
        query = self._build_search_query(owner, repo, options)
        self._logger.info(
            "Searching pull requests",
            extra={"owner": owner, "repo": repo, "query": query, "per_page": options.per_page},
        )

        try:
            issues = self._get_all_pages(
                "search/issues",
                params={"q": query, "sort": options.sort, "order": options.direction},
                items_key="items",
                per_page=options.per_page,
            )
        except ApiError as exc:
            self._logger.error(
                "Failed to search pull requests",
                extra={"owner": owner, "repo": repo, "query": query, "error": str(exc)},
            )
            raise

        self._logger.info(
            "Fetched all pull requests",
            extra={"owner": owner, "repo": repo, "total_issues": len(issues)},
        )

        pull_requests: List[PullRequest] = []
        total = len(issues)
        for index, issue in enumerate(issues, start=1):
            number = issue.get("number")
            if number is None:
                raise ApiError(f"GitHub search result is missing 'number': {issue}")

            self._logger.info(
                "Processing pull request",
                extra={"progress": f"{index}/{total}", "number": number},
            )
            pull_requests.append(self.get_pull_request(owner, repo, int(number)))

        return pull_requests

    def get_pull_request(self, owner: str, repo: str, number: int) -> PullRequest:
        """Fetch one pull request with its review request time and reviews.

        A failure to read the timeline is logged and leaves the review request
        time unset; any other failure raises ``ApiError``.
        """
        try:
            payload = self._get_json(f"repos/{owner}/{repo}/pulls/{number}")
        except ApiError as exc:
            self._logger.error(
                "Failed to fetch pull request",
                extra={"owner": owner, "repo": repo, "number": number, "error": str(exc)},
            )
            raise ApiError(f"failed to fetch pull request #{number}: {exc}") from exc

        if not isinstance(payload, dict):
            raise ApiError(f"GitHub API returned unexpected payload shape for pull request #{number}")

        try:
            first_review_requested_at = self._get_first_review_request_time(owner, repo, number)
        except ApiError as exc:
            self._logger.warning(
                "Failed to get review request time",
                extra={"owner": owner, "repo": repo, "number": number, "error": str(exc)},
            )
            first_review_requested_at = None

        reviews = self._list_reviews(owner, repo, number)
        return self._to_pull_request(payload, first_review_requested_at, reviews)

    def _get_first_review_request_time(self, owner: str, repo: str, number: int) -> Optional[datetime]:
        """Scan the issue timeline for the earliest review request."""
        items = self._get_all_pages(f"repos/{owner}/{repo}/issues/{number}/timeline")
        try:
            events = [
                LifecycleEvent(
                    kind=str(item.get("event") or ""),
                    occurred_at=self._parse_datetime(item.get("created_at")),
                )
                for item in items
            ]
        except (AttributeError, TypeError, ValueError) as exc:
            raise ApiError(
                f"GitHub timeline returned malformed data for pull request #{number}: {exc}"
            ) from exc

        requested_at = earliest_review_request(events)
        if requested_at is None:
            self._logger.debug(
                "No review request events found",
                extra={"number": number, "total_events": len(events)},
            )
        else:
            self._logger.debug(
                "Found first review request time",
                extra={"number": number, "review_requested_at": requested_at.isoformat()},
            )
        return requested_at

    def _list_reviews(self, owner: str, repo: str, number: int) -> List[ReviewSubmission]:
        """List the raw review submissions of a pull request."""
        try:
            items = self._get_all_pages(f"repos/{owner}/{repo}/pulls/{number}/reviews")
        except ApiError as exc:
            self._logger.error(
                "Failed to fetch reviews",
                extra={"owner": owner, "repo": repo, "number": number, "error": str(exc)},
            )
            raise ApiError(f"failed to fetch reviews for pull request #{number}: {exc}") from exc

        reviews: List[ReviewSubmission] = []
        for item in items:
            user = item.get("user") or {}
            reviews.append(
                ReviewSubmission(
                    state=str(item.get("state") or ""),
                    submitted_at=self._parse_datetime(item.get("submitted_at")),
                    author_kind=str(user.get("type") or ""),
                    author=str(user.get("login") or ""),
                )
            )

        self._logger.debug(
            "Fetched reviews",
            extra={
                "number": number,
                "review_count": len(reviews),
                "bot_reviews": sum(1 for review in reviews if review.author_kind == BOT),
            },
        )
        return reviews

    def _to_pull_request(
        self,
        payload: Dict[str, Any],
        first_review_requested_at: Optional[datetime],
        reviews: List[ReviewSubmission],
    ) -> PullRequest:
        """Convert a pull request payload into the domain model."""
        number = payload.get("number")
        created_at = self._parse_datetime(payload.get("created_at"))

        if number is None or created_at is None:
            raise ApiError(f"GitHub pull request payload is missing required fields: payload={payload}")

        user = payload.get("user") or {}
        return PullRequest(
            id=payload.get("id"),
            number=int(number),
            title=str(payload.get("title") or ""),
            author=str(user.get("login") or ""),
            state=str(payload.get("state") or ""),
            created_at=created_at,
            merged_at=self._parse_datetime(payload.get("merged_at")),
            closed_at=self._parse_datetime(payload.get("closed_at")),
            first_review_requested_at=first_review_requested_at,
            reviews=tuple(reviews),
        )
