"""Pace calculator — target pace per interval from baseline and metrics.

Max-effort work uses the learned max pace when one exists. Everything else
scales the baseline rate by the midpoint of the interval's pace range,
adjusted by the rolling actual/target ratio from past sessions.
"""

from __future__ import annotations

import dataclasses
from typing import Iterable, Sequence

from session_engine.math.rounding import round_half_up
from session_engine.models.athlete import Baseline, PerformanceMetrics
from session_engine.models.enums import (
    DEFAULT_PACE_MULTIPLIER,
    PaceSource,
    is_max_effort_day,
)
from session_engine.models.interval import Interval, TargetPace


def target_pace(
    interval: Interval,
    baseline: Baseline | None,
    metrics: PerformanceMetrics | None,
    day_type: str | None,
) -> TargetPace | None:
    """Calculate the target pace for one interval.

    Logic:
    1. No baseline: no target.
    2. Max-effort (day type or interval flag) with a learned max pace:
       target = learned max at 100%, pace range ignored.
    3. Otherwise multiplier = midpoint of ``pace_range``, multiplied by
       ``rolling_avg_ratio`` when present.
    4. pace = baseline rate x multiplier; intensity = multiplier as a
       rounded percentage.

    Args:
        interval: Interval to pace.
        baseline: The user's baseline for the session modality.
        metrics: Learned performance metrics, if any.
        day_type: The workout's day type tag.

    Returns:
        TargetPace, or None when no baseline is available.
    """
    if baseline is None:
        return None

    is_max_effort = is_max_effort_day(day_type) or interval.is_max_effort
    if is_max_effort and metrics is not None and metrics.learned_max_pace:
        return TargetPace(
            pace=metrics.learned_max_pace,
            units=baseline.units,
            intensity_percent=100,
            baseline=baseline.rate,
            source=PaceSource.LEARNED_MAX,
        )

    multiplier = _range_midpoint(interval.pace_range)
    source = PaceSource.BASELINE_ONLY
    if metrics is not None and metrics.rolling_avg_ratio:
        multiplier *= metrics.rolling_avg_ratio
        source = PaceSource.METRICS_ADJUSTED

    return TargetPace(
        pace=baseline.rate * multiplier,
        units=baseline.units,
        intensity_percent=round_half_up(multiplier * 100),
        baseline=baseline.rate,
        source=source,
    )


def calculate_targets(
    intervals: Iterable[Interval],
    baseline: Baseline | None,
    metrics: PerformanceMetrics | None,
    day_type: str | None,
) -> tuple[TargetPace | None, ...]:
    """Recompute targets for every interval, in order."""
    return tuple(target_pace(i, baseline, metrics, day_type) for i in intervals)


def annotate_targets(
    intervals: Sequence[Interval],
    baseline: Baseline | None,
    metrics: PerformanceMetrics | None,
    day_type: str | None,
) -> tuple[Interval, ...]:
    """Return copies of *intervals* with ``target_pace`` recomputed."""
    targets = calculate_targets(intervals, baseline, metrics, day_type)
    return tuple(
        dataclasses.replace(interval, target_pace=target)
        for interval, target in zip(intervals, targets)
    )


def _range_midpoint(pace_range: tuple[float, float] | None) -> float:
    if pace_range is None:
        return DEFAULT_PACE_MULTIPLIER
    low, high = pace_range
    return (low + high) / 2
