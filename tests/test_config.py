"""Tests for configuration loading and validation."""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from reviewtime.config import DEFAULT_API_URL, load_config
from reviewtime.errors import AuthenticationError, ConfigurationError


def test_load_config_reads_token_from_environment(monkeypatch):
    """Verify the access token comes from GITHUB_TOKEN and values are normalized."""
    monkeypatch.setenv("GITHUB_TOKEN", "  secret  ")
    monkeypatch.delenv("GITHUB_API_URL", raising=False)

    config = load_config(owner=" octo ", repo="hello", output_format="csv")

    assert config.token == "secret"
    assert config.owner == "octo"
    assert config.full_name == "octo/hello"
    assert config.output_format == "csv"
    assert config.api_url == DEFAULT_API_URL


def test_load_config_honors_api_url_override(monkeypatch):
    """Verify GITHUB_API_URL overrides the default API root."""
    monkeypatch.setenv("GITHUB_TOKEN", "secret")
    monkeypatch.setenv("GITHUB_API_URL", "https://github.example.com/api/v3/")

    config = load_config(owner="octo", repo="hello")

    assert config.api_url == "https://github.example.com/api/v3"


def test_load_config_missing_token_raises_authentication_error(monkeypatch):
    """Verify a missing token is reported as an authentication error."""
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)

    with pytest.raises(AuthenticationError):
        load_config(owner="octo", repo="hello")


def test_load_config_empty_repo_raises_configuration_error(monkeypatch):
    """Verify blank repository names are rejected."""
    monkeypatch.setenv("GITHUB_TOKEN", "secret")

    with pytest.raises(ConfigurationError):
        load_config(owner="octo", repo="   ")


def test_load_config_inverted_window_raises_configuration_error(monkeypatch):
    """Verify a creation window whose lower bound is after its upper bound is rejected."""
    monkeypatch.setenv("GITHUB_TOKEN", "secret")

    with pytest.raises(ConfigurationError):
        load_config(
            owner="octo",
            repo="hello",
            since=datetime(2024, 2, 1, tzinfo=timezone.utc),
            until=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
