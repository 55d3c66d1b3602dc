"""Tests for command-line argument parsing."""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from reviewtime.cli import parse_args


def test_parse_args_with_valid_arguments(monkeypatch):
    """Verify CLI parsing succeeds when all arguments are provided."""
    monkeypatch.setattr(
        sys,
        "argv",
        [
            "measure-review-time",
            "--owner",
            "octo",
            "--repo",
            "hello",
            "--since",
            "2024-01-01",
            "--until",
            "2024-02-01",
            "--state",
            "all",
            "--format",
            "json",
            "--debug",
        ],
    )

    args = parse_args()

    assert args.owner == "octo"
    assert args.repo == "hello"
    assert args.since == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert args.until == datetime(2024, 2, 1, tzinfo=timezone.utc)
    assert args.state == "all"
    assert args.output_format == "json"
    assert args.debug is True


def test_parse_args_defaults_and_short_flags():
    """Verify short flags work and optional arguments take their defaults."""
    args = parse_args(["-o", "octo", "-r", "hello"])

    assert args.owner == "octo"
    assert args.repo == "hello"
    assert args.since is None
    assert args.until is None
    assert args.state == "closed"
    assert args.number is None
    assert args.output_format == "table"
    assert args.debug is False


def test_parse_args_with_single_number():
    """Verify a single pull request number can be requested."""
    args = parse_args(["-o", "octo", "-r", "hello", "--number", "17", "-f", "csv"])

    assert args.number == 17
    assert args.output_format == "csv"


def test_parse_args_with_invalid_since_fails_validation():
    """Verify CLI parsing exits with an error when --since is not a date."""
    with pytest.raises(SystemExit):
        parse_args(["-o", "octo", "-r", "hello", "--since", "01/02/2024"])


def test_parse_args_without_owner_fails_validation():
    """Verify the repository owner is required."""
    with pytest.raises(SystemExit):
        parse_args(["--repo", "hello"])


def test_parse_args_with_unknown_format_fails_validation():
    """Verify only table, json and csv output formats are accepted."""
    with pytest.raises(SystemExit):
        parse_args(["-o", "octo", "-r", "hello", "-f", "xml"])


def test_parse_args_usage_error_reports_error_prefix_and_exit_code_one(capsys):
    """Verify usage errors print an ``Error:`` line on stderr and exit with 1."""
    with pytest.raises(SystemExit) as exc_info:
        parse_args(["--repo", "hello"])

    assert exc_info.value.code == 1
    err = capsys.readouterr().err
    assert "Error: the following arguments are required: -o/--owner" in err
