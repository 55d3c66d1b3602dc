"""Report renderers for review time metrics.

Each printer writes a full report for one repository to a text stream:
- ``TablePrinter``: aligned plain-text table plus a percentile summary
- ``CsvPrinter``: one CSV row per pull request
- ``JsonPrinter``: a single indented JSON document
"""

from __future__ import annotations

import csv
import json
import sys
from datetime import timedelta
from typing import Dict, List, Optional, Protocol, TextIO

from .errors import ConfigurationError
from .models import ReviewMetrics
from .stats import summarize_metrics

_NOT_AVAILABLE = "N/A"


class Printer(Protocol):
    def print(self, repository: str, metrics: List[ReviewMetrics]) -> None:
        ...


def format_duration(duration: timedelta) -> str:
    """Format a duration as ``"Nd Nh"``, ``"Nh Nm"`` or ``"Nm"``.

    Negative durations are rendered with a leading ``-``.
    """
    total_seconds = duration.total_seconds()
    sign = "-" if total_seconds < 0 else ""
    total_minutes = int(abs(total_seconds) // 60)

    days, remaining_minutes = divmod(total_minutes, 24 * 60)
    hours, minutes = divmod(remaining_minutes, 60)

    if days > 0:
        return f"{sign}{days}d {hours}h"
    if hours > 0:
        return f"{sign}{hours}h {minutes}m"
    return f"{sign}{minutes}m"


def format_seconds(seconds: Optional[float]) -> str:
    if seconds is None:
        return _NOT_AVAILABLE
    return format_duration(timedelta(seconds=seconds))


def truncate(value: str, max_len: int) -> str:
    if len(value) <= max_len:
        return value
    return value[: max_len - 3] + "..."


def _optional_duration(duration: Optional[timedelta], missing: str = _NOT_AVAILABLE) -> str:
    return format_duration(duration) if duration is not None else missing


class TablePrinter:
    """Prints metrics as an aligned text table."""

    _HEADERS = ["PR #", "Author", "Created", "Time to Review", "Time to Approve", "Total", "Title"]
    _COLUMN_PADDING = 2

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream or sys.stdout

    def print(self, repository: str, metrics: List[ReviewMetrics]) -> None:
        if not metrics:
            print("No pull requests found", file=self._stream)
            return

        print(f"\n=== PR Review Time Report for {repository} ===\n", file=self._stream)

        rows = [self._HEADERS, ["-" * len(header) for header in self._HEADERS]]
        for metric in metrics:
            pr = metric.pull_request
            rows.append(
                [
                    str(pr.number),
                    truncate(pr.author, 20),
                    pr.created_at.strftime("%Y-%m-%d %H:%M"),
                    _optional_duration(metric.time_to_review),
                    _optional_duration(metric.time_to_approve),
                    _optional_duration(metric.total_duration),
                    truncate(pr.title, 60),
                ]
            )

        widths = [max(len(row[index]) for row in rows) for index in range(len(self._HEADERS))]
        for row in rows:
            cells = [cell.ljust(width + self._COLUMN_PADDING) for cell, width in zip(row[:-1], widths)]
            print("".join(cells) + row[-1], file=self._stream)

        print("", file=self._stream)
        self._print_summary(metrics)

    def _print_summary(self, metrics: List[ReviewMetrics]) -> None:
        labels = {
            "time_to_review": "Time to Review",
            "time_to_approve": "Time to Approve",
            "total_duration": "Total Duration",
        }
        summary = summarize_metrics(metrics)

        print("Summary", file=self._stream)
        for name, label in labels.items():
            stats = summary[name]
            print(
                f"  {label}: samples={stats['count']}"
                f" P50={format_seconds(stats['p50'])}"
                f" P75={format_seconds(stats['p75'])}"
                f" P90={format_seconds(stats['p90'])}",
                file=self._stream,
            )
        print("", file=self._stream)


class CsvPrinter:
    """Prints one CSV row per pull request."""

    _HEADER = [
        "PR_Number",
        "Title",
        "Author",
        "Created_At",
        "Time_To_Review",
        "Time_To_Approve",
        "Total_Duration",
    ]

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream or sys.stdout

    def print(self, repository: str, metrics: List[ReviewMetrics]) -> None:
        writer = csv.writer(self._stream, lineterminator="\n")
        writer.writerow(self._HEADER)

        for metric in metrics:
            pr = metric.pull_request
            writer.writerow(
                [
                    pr.number,
                    pr.title,
                    pr.author,
                    pr.created_at.strftime("%Y-%m-%d %H:%M:%S"),
                    _optional_duration(metric.time_to_review, missing=""),
                    _optional_duration(metric.time_to_approve, missing=""),
                    _optional_duration(metric.total_duration, missing=""),
                ]
            )


class JsonPrinter:
    """Prints metrics as a single JSON document."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream or sys.stdout

    def print(self, repository: str, metrics: List[ReviewMetrics]) -> None:
        if not metrics:
            print("[]", file=self._stream)
            return

        document = {
            "repository": repository,
            "pull_requests": [self._to_dict(metric) for metric in metrics],
        }
        print(json.dumps(document, indent=2), file=self._stream)

    def _to_dict(self, metric: ReviewMetrics) -> Dict[str, object]:
        pr = metric.pull_request
        item: Dict[str, object] = {
            "number": pr.number,
            "title": pr.title,
            "author": pr.author,
            "created_at": pr.created_at.isoformat().replace("+00:00", "Z"),
        }

        for name in ("time_to_review", "time_to_approve", "total_duration"):
            duration = getattr(metric, name)
            if duration is not None:
                item[name] = format_duration(duration)
                item[f"{name}_seconds"] = duration.total_seconds()

        return item


_PRINTERS = {
    "table": TablePrinter,
    "csv": CsvPrinter,
    "json": JsonPrinter,
}


def get_printer(name: str, stream: Optional[TextIO] = None) -> Printer:
    """Return the printer registered under ``name``.

    Raises:
        ConfigurationError: If no printer exists for ``name``.
    """
    try:
        printer_cls = _PRINTERS[name]
    except KeyError:
        raise ConfigurationError(f"Unknown output format '{name}'.") from None
    return printer_cls(stream=stream)
