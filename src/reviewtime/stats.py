"""Statistics helpers for review time reporting.

This module provides utilities for:
- Computing linear-interpolation percentiles from pre-sorted samples.
- Aggregating summary statistics (P50, P75, P90, count) over durations.
- Summarizing each duration kind across a list of ``ReviewMetrics``.
"""

from __future__ import annotations

import math
from datetime import timedelta
from typing import Dict, Iterable, List, Optional, Union

from .models import ReviewMetrics

METRIC_FIELDS = ("time_to_review", "time_to_approve", "total_duration")


def calculate_percentile(sorted_values: List[float], p: float) -> Optional[float]:
    """Calculate a percentile using linear interpolation.

    The input sequence is expected to already be sorted in ascending order.
    - Empty input returns ``None``.
    - ``p <= 0`` returns the first value.
    - ``p >= 100`` returns the last value.
    - Otherwise, percentile is linearly interpolated between adjacent ranks.

    Args:
        sorted_values: Sorted numeric samples.
        p: Percentile in the inclusive range ``[0, 100]``.

    Returns:
        Percentile value as ``float`` or ``None`` when input is empty.

    Raises:
        ValueError: If ``p`` is outside ``[0, 100]``.
    """
    if not 0 <= p <= 100:
        raise ValueError("Percentile 'p' must be in the range [0, 100].")

    if not sorted_values:
        return None

    if p <= 0:
        return sorted_values[0]

    if p >= 100:
        return sorted_values[-1]

    position = (len(sorted_values) - 1) * (p / 100.0)
    lower_index = math.floor(position)
    upper_index = math.ceil(position)

    if lower_index == upper_index:
        return sorted_values[int(position)]

    lower_value = sorted_values[lower_index]
    upper_value = sorted_values[upper_index]
    return lower_value + (upper_value - lower_value) * (position - lower_index)


def compute_statistics(
    samples: Iterable[Union[float, timedelta, None]],
) -> Dict[str, Union[int, float, None]]:
    """Compute P50, P75, P90, and sample count for duration samples.

    Samples may be seconds or ``timedelta`` values. ``None`` and NaN samples
    are ignored. Negative samples are kept so the summary reflects the same
    data as the per-PR rows.

    Returns:
        Dictionary with keys ``p50``, ``p75``, ``p90`` (seconds, or ``None``
        when there are no samples) and ``count``.
    """
    clean_samples: List[float] = []
    for sample in samples:
        if sample is None:
            continue
        seconds = sample.total_seconds() if isinstance(sample, timedelta) else float(sample)
        if math.isnan(seconds):
            continue
        clean_samples.append(seconds)
    clean_samples.sort()

    return {
        "p50": calculate_percentile(clean_samples, 50),
        "p75": calculate_percentile(clean_samples, 75),
        "p90": calculate_percentile(clean_samples, 90),
        "count": len(clean_samples),
    }


def summarize_metrics(metrics: List[ReviewMetrics]) -> Dict[str, Dict[str, Union[int, float, None]]]:
    """Compute statistics for each duration kind across ``metrics``."""
    return {
        name: compute_statistics(getattr(metric, name) for metric in metrics)
        for name in METRIC_FIELDS
    }
