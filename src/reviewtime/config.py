"""Configuration parsing and validation for measure-review-time."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .errors import AuthenticationError, ConfigurationError

DEFAULT_API_URL = "https://api.github.com"
OUTPUT_FORMATS = ("table", "json", "csv")


@dataclass(frozen=True)
class Config:
    """Validated runtime settings used by the review time report."""

    owner: str
    repo: str
    token: str
    state: Optional[str] = "closed"
    since: Optional[datetime] = None
    until: Optional[datetime] = None
    output_format: str = "table"
    debug: bool = False
    api_url: str = DEFAULT_API_URL

    @property
    def full_name(self) -> str:
        """Repository identifier in ``owner/repo`` form."""
        return f"{self.owner}/{self.repo}"


def load_config(
    owner: str,
    repo: str,
    state: Optional[str] = "closed",
    since: Optional[datetime] = None,
    until: Optional[datetime] = None,
    output_format: str = "table",
    debug: bool = False,
) -> Config:
    """Build and validate application configuration.

    Args:
        owner: Repository owner (user or organization login).
        repo: Repository name.
        state: ``"open"``, ``"closed"``, or ``None`` for all pull requests.
        since: Inclusive lower bound on pull request creation date.
        until: Inclusive upper bound on pull request creation date.
        output_format: One of ``table``, ``json`` or ``csv``.
        debug: Whether debug logging is enabled.

    Returns:
        A validated ``Config`` instance.

    Raises:
        ConfigurationError: If owner/repo are empty, the date window is
            inverted, or the output format is unknown.
        AuthenticationError: If ``GITHUB_TOKEN`` is not configured.
    """
    owner = (owner or "").strip()
    repo = (repo or "").strip()
    if not owner:
        raise ConfigurationError("Repository owner is required.")
    if not repo:
        raise ConfigurationError("Repository name is required.")

    if since is not None and until is not None and since > until:
        raise ConfigurationError("Invalid date window: 'since' must not be later than 'until'.")

    if output_format not in OUTPUT_FORMATS:
        raise ConfigurationError(
            f"Invalid output format '{output_format}': expected one of {', '.join(OUTPUT_FORMATS)}."
        )

    token: str = os.getenv("GITHUB_TOKEN", "").strip()
    if not token:
        raise AuthenticationError(
            "Missing required GitHub access token. "
            "Set the 'GITHUB_TOKEN' environment variable before running."
        )

    api_url = os.getenv("GITHUB_API_URL", "").strip() or DEFAULT_API_URL

    return Config(
        owner=owner,
        repo=repo,
        token=token,
        state=state,
        since=since,
        until=until,
        output_format=output_format,
        debug=debug,
        api_url=api_url.rstrip("/"),
    )
